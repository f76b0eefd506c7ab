import logging
from functools import wraps
from flask import Blueprint, request, jsonify, session
from pydantic import ValidationError
from extensions import bcrypt
from schemas import SignInIn
from store import Result
import store

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)


def login_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'user_id' not in session:
            return jsonify({'error': 'Unauthorized'}), 401
        return f(*args, **kwargs)
    return decorated_function


def hash_password(password):
    return bcrypt.generate_password_hash(password).decode('utf-8')


def authenticate_user(email, password):
    """Look the user up by email and check the password against the stored hash.

    Unknown email and wrong password both come back as an empty Result.
    """
    found = store.get_user_by_email(email)
    if not found.is_ok:
        return found
    user = found.value
    try:
        verified = bcrypt.check_password_hash(user.password_hash, password)
    except ValueError:
        logger.warning("User %s has a malformed password hash", user.id)
        verified = False
    if not verified:
        return Result.empty()
    return found


def error_response(result):
    """JSON response for a failed or empty store Result."""
    if result.is_error:
        return jsonify({'message': result.message or 'Service unavailable', 'error': result.error_kind}), 503
    return jsonify({'message': 'Not found'}), 404


def validation_response(e):
    return jsonify({'message': 'Invalid request', 'errors': e.errors(include_url=False, include_context=False)}), 400


# --- Routes ---

@auth_bp.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or request.form
    try:
        credentials = SignInIn.model_validate(dict(data))
    except ValidationError as e:
        return validation_response(e)

    result = authenticate_user(credentials.email, credentials.password)
    if result.is_error:
        return error_response(result)
    if result.is_empty:
        logger.info("Rejected login for %s", credentials.email)
        return jsonify({'message': 'Invalid credentials'}), 401

    user = result.value
    session.clear()
    session['user_id'] = user.id
    session['full_name'] = user.full_name
    return jsonify({'message': 'Login successful', 'user': user.to_json()})


@auth_bp.route('/me')
@login_required
def me():
    result = store.get_user(session['user_id'])
    if not result.is_ok:
        return error_response(result)
    return jsonify({'user': result.value.to_json()})


@auth_bp.route('/logout', methods=['POST'])
def logout():
    session.clear()
    return jsonify({'message': 'Logged out'})
