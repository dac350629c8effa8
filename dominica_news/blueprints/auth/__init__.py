from flask import Blueprint

# url_prefix is set when the blueprint is registered in create_app
auth_bp = Blueprint('auth', __name__)

from . import routes
