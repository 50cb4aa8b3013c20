# routes/users.py
from flask import jsonify, request
from flask_login import login_required
from marshmallow import ValidationError

from . import users_bp
from ..auth import AuthProvider
from ..schemas.user_schemas import ProvisionUserSchema, UserActiveSchema
from ..services.user_service import UserService

from crm import logger


@users_bp.route("", methods=["GET"])
@login_required
def list_users():
    users = UserService.get_users(AuthProvider.get_session())
    return jsonify(users), 200


@users_bp.route("", methods=["POST"])
@login_required
def provision_user():
    """
    Create an administrator or associate account (administrators only)
    ---
    tags:
      - Users
    responses:
      201:
        description: User created with the requested role
      400:
        description: Validation error
      403:
        description: Caller cannot manage users
    """
    session = AuthProvider.get_session()
    session.require_manage_users()
    try:
        data = ProvisionUserSchema().load(request.get_json(silent=True) or {})
    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        return jsonify({"error": e.messages}), 400

    user = UserService.provision_user(session, data['email'], data['password'], data['name'], data['role'])
    return jsonify({"message": "User created successfully", "user": user}), 201


@users_bp.route("/<user_id>/active", methods=["PUT"])
@login_required
def set_user_active(user_id):
    session = AuthProvider.get_session()
    try:
        data = UserActiveSchema().load(request.get_json(silent=True) or {})
    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        return jsonify({"error": e.messages}), 400

    user = UserService.set_user_active(session, user_id, data['is_active'])
    return jsonify({"message": "User updated", "user": user}), 200
