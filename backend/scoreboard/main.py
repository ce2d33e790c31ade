from flask import Blueprint, request, jsonify, current_app
from flask_login import login_user, logout_user, login_required, current_user
from sqlalchemy.exc import IntegrityError

from scoreboard.models import User
from scoreboard.services.store import create_record, list_records
from scoreboard.errors import PersistenceError, ValidationError

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the scoreboard server!'})


@main.route('/register', methods=['POST', 'OPTIONS'])
def register():
    if request.method == 'OPTIONS':
        return jsonify({'status': 'ok'}), 200
    data = request.get_json(silent=True) or {}
    username = (data.get('username') or '').strip()
    password = data.get('password') or ''
    if not username or not password:
        raise ValidationError('Missing username or password')
    if list_records(User, filters={'username': username}, limit=1):
        return jsonify({"success": False, "message": "Username already exists"}), 400

    try:
        new_user = create_record(User, {'username': username, 'password_hash': User.hash_password(password)})
    except PersistenceError as exc:
        # Lost a race with another registration for the same name.
        if isinstance(exc.__cause__, IntegrityError):
            return jsonify({"success": False, "message": "Username already exists"}), 400
        raise
    login_user(new_user, remember=True)
    current_app.logger.info(f"[register] user={new_user.id}")
    return jsonify({"success": True, "user": new_user.to_dict()}), 201


@main.route('/login', methods=['POST', 'OPTIONS'])
def login():
    if request.method == 'OPTIONS':
        return jsonify({'status': 'ok'}), 200
    data = request.get_json(silent=True) or {}
    found = list_records(User, filters={'username': data.get('username')}, limit=1) if data.get('username') else []
    user = found[0] if found else None
    if user and user.check_password(data.get('password') or ''):
        login_user(user, remember=True)
        return jsonify({"success": True, "user": user.to_dict()})
    return jsonify({"success": False, "message": "Invalid credentials"}), 401


@main.route('/check_login', methods=['GET', 'OPTIONS'])
def check_login():
    if request.method == 'OPTIONS':
        return jsonify({'status': 'ok'}), 200

    @login_required
    def protected_check():
        return jsonify({"success": True, "user": current_user.to_dict()})

    return protected_check()


@main.route('/logout', methods=['POST', 'OPTIONS'])
@login_required
def logout():
    logout_user()
    return jsonify({"success": True})
