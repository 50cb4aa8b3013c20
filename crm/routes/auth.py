# routes/auth.py
from flask import jsonify, request
from flask_login import login_required
from marshmallow import ValidationError

from . import auth_bp
from ..auth import AuthProvider
from ..schemas.user_schemas import SignInSchema, SignUpSchema

from crm import logger


def _session_payload(session):
    actor = session.actor
    return {
        "user": {
            "id": actor.id,
            "name": actor.display_name,
            "role": actor.role
        } if actor else None,
        **session.capabilities()
    }


@auth_bp.route("/sign-in", methods=["POST"])
def sign_in():
    """
    Sign in with email and password
    ---
    tags:
      - Auth
    responses:
      200:
        description: Signed in, returns the actor and capabilities
      400:
        description: Validation error
      401:
        description: Bad credentials or deactivated account
    """
    payload = request.get_json(silent=True) or {}
    try:
        data = SignInSchema().load(payload)
    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        return jsonify({"error": e.messages}), 400

    session = AuthProvider.sign_in(data['email'], data['password'], remember=bool(payload.get('remember')))
    return jsonify(_session_payload(session)), 200


@auth_bp.route("/sign-up", methods=["POST"])
def sign_up():
    """
    Self-registration. The account has no role until an administrator
    assigns one.
    """
    try:
        data = SignUpSchema().load(request.get_json(silent=True) or {})
    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        return jsonify({"error": e.messages}), 400

    row = AuthProvider.sign_up(data['email'], data['password'], data['name'])
    return jsonify({
        "message": "Account created",
        "user": {"id": row['id'], "email": row['email'], "name": row['name']}
    }), 201


@auth_bp.route("/sign-out", methods=["POST"])
@login_required
def sign_out():
    AuthProvider.sign_out()
    return jsonify({"message": "Signed out"}), 200


@auth_bp.route("/session", methods=["GET"])
def get_session():
    """Current actor and capability flags; anonymous when signed out"""
    return jsonify(_session_payload(AuthProvider.get_session())), 200
