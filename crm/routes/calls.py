# routes/calls.py
from flask import jsonify, request
from flask_login import login_required

from . import calls_bp
from ..auth import AuthProvider
from ..errors import InvalidInputError
from ..services.call_log_service import CallLogService


def _json_object():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidInputError("Expected a JSON object")
    return data


@calls_bp.route("", methods=["POST"])
@login_required
def create_call_log():
    """
    Log a finished call.

    JSON Payload (example):
    {
      "clientId": "<client id>",
      "clientName": "A B",
      "phone": "9000000000",
      "startedAt": "2024-05-01T10:00:00Z",
      "endedAt": "2024-05-01T10:03:20Z",
      "durationSec": 200,
      "notes": "Asked for a quote",
      "recording": {"mime": "audio/webm", "dataBase64": "..."}
    }
    """
    log = CallLogService.create_call_log(AuthProvider.get_session(), _json_object())
    return jsonify({"message": "Call logged", "callLog": log}), 201


@calls_bp.route("", methods=["GET"])
@login_required
def list_call_logs():
    logs = CallLogService.get_call_logs(AuthProvider.get_session(), client_id=request.args.get('client'))
    return jsonify(logs), 200


@calls_bp.route("/<log_id>", methods=["PATCH"])
@login_required
def update_call_log(log_id):
    log = CallLogService.update_call_log(AuthProvider.get_session(), log_id, _json_object())
    return jsonify({"message": "Call log updated", "callLog": log}), 200


@calls_bp.route("/<log_id>", methods=["DELETE"])
@login_required
def delete_call_log(log_id):
    CallLogService.delete_call_log(AuthProvider.get_session(), log_id)
    return jsonify({"message": "Call log deleted"}), 200
