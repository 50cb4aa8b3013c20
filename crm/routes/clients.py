# routes/clients.py
from flask import jsonify, request
from flask_login import login_required

from . import clients_bp
from ..auth import AuthProvider
from ..errors import InvalidInputError
from ..services.client_service import ClientService
from ..services.group_service import ContactGroupService, group_name


def _json_object():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidInputError("Expected a JSON object")
    return data


@clients_bp.route("", methods=["POST"])
@login_required
def create_client():
    """
    Create a client

    JSON Payload (example):
    {
      "firstName": "A",
      "lastName": "B",
      "phones": ["9000000000"],
      "city": "Pune",
      "groupId": "<group id>"
    }
    """
    client = ClientService.create_client(AuthProvider.get_session(), _json_object())
    return jsonify({"message": "Client created successfully", "client": client}), 201


@clients_bp.route("", methods=["GET"])
@login_required
def list_clients():
    """
    Clients newest first, with the resolved group name.
    Query parameters: ``q`` (search), ``group`` (group id or 'none').
    """
    session = AuthProvider.get_session()
    clients = ClientService.get_clients(session, query=request.args.get('q'),
                                        group_id=request.args.get('group'))
    groups = ContactGroupService.get_groups(session)
    for client in clients:
        name = group_name(groups, client.get('groupId'))
        if name:
            client['groupName'] = name
    return jsonify(clients), 200


@clients_bp.route("/<client_id>", methods=["GET"])
@login_required
def get_client(client_id):
    client = ClientService.get_client(AuthProvider.get_session(), client_id)
    if client is None:
        return jsonify({"error": "Client not found"}), 404
    return jsonify(client), 200


@clients_bp.route("/<client_id>", methods=["PATCH"])
@login_required
def update_client(client_id):
    client = ClientService.update_client(AuthProvider.get_session(), client_id, _json_object())
    return jsonify({"message": "Client updated", "client": client}), 200


@clients_bp.route("/<client_id>", methods=["DELETE"])
@login_required
def delete_client(client_id):
    ClientService.delete_client(AuthProvider.get_session(), client_id)
    return jsonify({"message": "Client deleted"}), 200


@clients_bp.route("/group-assignment", methods=["POST"])
@login_required
def assign_group():
    """
    Assign one group to many clients.

    JSON Payload: {"clientIds": [...], "groupId": "<id>" | null}

    Responds 200 when every client was updated, 207 when some failed; the
    body lists both sets.
    """
    data = _json_object()
    client_ids = data.get('clientIds')
    if not isinstance(client_ids, list) or not all(isinstance(cid, str) for cid in client_ids):
        raise InvalidInputError("clientIds must be a list of ids", fields={'clientIds': ['Invalid']})

    result = ClientService.assign_group(AuthProvider.get_session(), client_ids, data.get('groupId'))
    return jsonify(result.to_dict()), 200 if result.ok else 207
