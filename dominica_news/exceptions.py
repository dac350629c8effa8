class NewsException(Exception):
    """Base exception for everything the API reports back to a caller"""
    def __init__(self, message, code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['error'] = self.message
        rv['success'] = False
        return rv


class ValidationFailure(NewsException):
    """Malformed input, rejected before anything is persisted"""
    def __init__(self, message="Validation failed", payload=None):
        super().__init__(message, code=400, payload=payload)


class Unauthorized(NewsException):
    """Missing or invalid identity"""
    def __init__(self, message="Authentication required", payload=None):
        super().__init__(message, code=401, payload=payload)


class Forbidden(NewsException):
    """Valid identity, insufficient role"""
    def __init__(self, message="Insufficient permissions", payload=None):
        super().__init__(message, code=403, payload=payload)


class NotFound(NewsException):
    def __init__(self, message="Resource not found", payload=None):
        super().__init__(message, code=404, payload=payload)


class Conflict(NewsException):
    """Uniqueness or referential constraint violated"""
    def __init__(self, message="Resource already exists", payload=None):
        super().__init__(message, code=409, payload=payload)


class UpstreamFailure(NewsException):
    """Image processing or store call failed for reasons unrelated to the input"""
    def __init__(self, message="Upstream operation failed", payload=None):
        super().__init__(message, code=502, payload=payload)
