from flask import jsonify
from flask_login import login_required, current_user

from dominica_news.blueprints.auth import auth_bp
from dominica_news.blueprints.auth.forms import LoginForm, RegisterForm
from dominica_news.services.auth_service import AuthService
from dominica_news.utils.audit import audit_log
from dominica_news.utils.rate_limit import rate_limit


@auth_bp.route('/register', methods=['POST'])
@rate_limit('auth', config_key='AUTH_RATE_LIMIT', failures_only=True)
@audit_log('USER_REGISTER')
def register():
    """Create an editor account and sign it in"""
    form = RegisterForm().validate_or_raise()
    user, token = AuthService.register(
        email=form.email.data,
        password=form.password.data,
        full_name=form.full_name.data,
    )
    return jsonify({
        'success': True,
        'data': {'user': user.to_dict(), 'token': token},
        'message': 'User registered successfully',
    }), 201


@auth_bp.route('/login', methods=['POST'])
@rate_limit('auth', config_key='AUTH_RATE_LIMIT', failures_only=True)
@audit_log('USER_LOGIN')
def login():
    form = LoginForm().validate_or_raise()
    user, token = AuthService.login(form.email.data, form.password.data)
    return jsonify({
        'success': True,
        'data': {'user': user.to_dict(), 'token': token},
        'message': 'Login successful',
    })


@auth_bp.route('/me')
@login_required
def me():
    return jsonify({'success': True, 'data': {'user': current_user.to_dict()}})


@auth_bp.route('/logout', methods=['POST'])
@login_required
@audit_log('USER_LOGOUT')
def logout():
    # Tokens are stateless; the client discards its copy
    return jsonify({'success': True, 'message': 'Logout successful'})
