# routes/groups.py
from flask import jsonify, request
from flask_login import login_required

from . import groups_bp
from ..auth import AuthProvider
from ..services.group_service import ContactGroupService


@groups_bp.route("", methods=["GET"])
@login_required
def list_groups():
    return jsonify(ContactGroupService.get_groups(AuthProvider.get_session())), 200


@groups_bp.route("", methods=["POST"])
@login_required
def create_group():
    data = request.get_json(silent=True) or {}
    group = ContactGroupService.create_group(AuthProvider.get_session(), data.get('name'))
    return jsonify({"message": "Group created successfully", "group": group}), 201


@groups_bp.route("/<group_id>", methods=["PUT"])
@login_required
def rename_group(group_id):
    data = request.get_json(silent=True) or {}
    group = ContactGroupService.update_group(AuthProvider.get_session(), group_id, data.get('name'))
    return jsonify({"message": "Group updated", "group": group}), 200


@groups_bp.route("/<group_id>", methods=["DELETE"])
@login_required
def delete_group(group_id):
    ContactGroupService.delete_group(AuthProvider.get_session(), group_id)
    return jsonify({"message": "Group deleted"}), 200
