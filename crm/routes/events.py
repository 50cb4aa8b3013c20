# routes/events.py
from flask import jsonify, request
from flask_login import login_required

from . import events_bp
from ..auth import AuthProvider
from ..services.global_event_service import GlobalEventService


@events_bp.route("", methods=["GET"])
@login_required
def list_events():
    return jsonify(GlobalEventService.get_events(AuthProvider.get_session())), 200


@events_bp.route("", methods=["POST"])
@login_required
def create_event():
    data = request.get_json(silent=True) or {}
    event = GlobalEventService.create_event(AuthProvider.get_session(), data.get('description'))
    return jsonify({"message": "Event recorded", "event": event}), 201
