from flask import Blueprint

# Every route here requires the admin role
admin_bp = Blueprint('admin', __name__)

from . import routes
