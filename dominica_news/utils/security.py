"""
Security helpers
"""
import re

_SCRIPT_RE = re.compile(r'<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>', re.IGNORECASE)
_DANGEROUS_PATTERNS = [
    re.compile(r'javascript:', re.IGNORECASE),
    re.compile(r'on\w+\s*=', re.IGNORECASE),
    re.compile(r'data:text/html', re.IGNORECASE),
]


def sanitize_input(text):
    """
    Strip the usual XSS vectors from user input
    (<script> blocks, javascript: URLs, inline on*= handlers, data:text/html).
    Ordinary HTML from the rich text editor is kept.
    """
    if not text or not isinstance(text, str):
        return text

    text = _SCRIPT_RE.sub('', text)
    for pattern in _DANGEROUS_PATTERNS:
        text = pattern.sub('', text)
    return text


def sanitize_payload(value):
    """Apply sanitize_input to every string inside a JSON-like structure"""
    if isinstance(value, str):
        return sanitize_input(value)
    if isinstance(value, dict):
        return {key: sanitize_payload(item) for key, item in value.items()}
    if isinstance(value, list):
        return [sanitize_payload(item) for item in value]
    return value


def check_password_strength(password):
    """
    Check password strength

    Returns:
        (bool, str): (passed, error message)
    """
    if not password or len(password) < 8:
        return False, 'Password must be at least 8 characters long'

    if not re.search(r'[a-z]', password):
        return False, 'Password must contain at least one lowercase letter'

    if not re.search(r'[A-Z]', password):
        return False, 'Password must contain at least one uppercase letter'

    if not re.search(r'\d', password):
        return False, 'Password must contain at least one number'

    return True, ''


def apply_security_headers(response, production=False):
    response.headers.setdefault('X-Content-Type-Options', 'nosniff')
    response.headers.setdefault('X-Frame-Options', 'DENY')
    response.headers.setdefault('X-XSS-Protection', '1; mode=block')
    response.headers.setdefault('Referrer-Policy', 'no-referrer')
    response.headers.setdefault('Permissions-Policy', 'geolocation=(), microphone=(), camera=()')
    if production:
        response.headers.setdefault('Strict-Transport-Security', 'max-age=31536000; includeSubDomains; preload')
    return response
