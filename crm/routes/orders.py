# routes/orders.py
from flask import request, jsonify
from flask_login import login_required
from marshmallow import ValidationError

from . import orders_bp
from ..auth import AuthProvider
from ..schemas.order_schemas import (
    OrderCreateSchema,
    OrderEventCreateSchema,
    OrderLinkClientSchema,
    OrderListQuerySchema
)
from ..services.order_service import OrderService

from crm import logger


@orders_bp.route("", methods=["POST"])
@login_required
def create_order():
    """
    Create a new order.

    JSON Payload (example):
    {
      "title": "Paperwork",
      "status": "pending",
      "clientId": "<client id>"
    }

    Response:
      201 Created
      {
        "message": "Order created successfully!",
        "order": {...}
      }
    """
    data = request.get_json(silent=True) or {}
    try:
        validated_data = OrderCreateSchema().load(data)
    except ValidationError as err:
        logger.error(f"Validation error: {err.messages}")
        return jsonify({"errors": err.messages}), 400

    order = OrderService.create_order(
        AuthProvider.get_session(),
        validated_data['title'],
        status=validated_data['status'],
        client_id=validated_data['client_id']
    )
    return jsonify({"message": "Order created successfully!", "order": order}), 201


@orders_bp.route("", methods=["GET"])
@login_required
def list_orders():
    """
    Orders newest first. ``?view=active`` hides the bin, ``?view=binned``
    shows only the bin.
    """
    try:
        query = OrderListQuerySchema().load(request.args.to_dict())
    except ValidationError as err:
        return jsonify({"errors": err.messages}), 400

    orders = OrderService.get_orders(AuthProvider.get_session(), view=query['view'])
    return jsonify(orders), 200


@orders_bp.route("/bin", methods=["GET"])
@login_required
def list_bin():
    return jsonify(OrderService.get_orders(AuthProvider.get_session(), view='binned')), 200


@orders_bp.route("/<order_id>", methods=["GET"])
@login_required
def get_order(order_id):
    order = OrderService.get_order(AuthProvider.get_session(), order_id)
    if order is None:
        return jsonify({"error": "Order not found"}), 404
    return jsonify(order), 200


@orders_bp.route("/<order_id>/bin", methods=["POST"])
@login_required
def move_to_bin(order_id):
    order = OrderService.move_to_bin(AuthProvider.get_session(), order_id)
    return jsonify({"message": "Order moved to bin", "order": order}), 200


@orders_bp.route("/<order_id>/restore", methods=["POST"])
@login_required
def restore_order(order_id):
    order = OrderService.restore(AuthProvider.get_session(), order_id)
    return jsonify({"message": "Order restored", "order": order}), 200


@orders_bp.route("/<order_id>", methods=["DELETE"])
@login_required
def purge_order(order_id):
    """Permanently delete an order from the bin (administrators only)"""
    OrderService.purge(AuthProvider.get_session(), order_id)
    return jsonify({"message": "Order deleted permanently"}), 200


@orders_bp.route("/<order_id>/events", methods=["POST"])
@login_required
def add_order_event(order_id):
    """
    Append an entry to the order's timeline.

    JSON Payload (example):
    {
      "title": "Submitted docs",
      "note": "first visit",
      "attachments": ["data:image/jpeg;base64,..."]
    }
    """
    data = request.get_json(silent=True) or {}
    try:
        validated_data = OrderEventCreateSchema().load(data)
    except ValidationError as err:
        logger.error(f"Validation error: {err.messages}")
        return jsonify({"errors": err.messages}), 400

    session = AuthProvider.get_session()
    event = OrderService.add_event(
        session,
        order_id,
        validated_data['title'],
        note=validated_data['note'],
        attachments=validated_data['attachments']
    )
    return jsonify({
        "message": "Event added",
        "event": event,
        "order": OrderService.get_order(session, order_id)
    }), 201


@orders_bp.route("/events/<event_id>", methods=["DELETE"])
@login_required
def delete_order_event(event_id):
    OrderService.delete_event(AuthProvider.get_session(), event_id)
    return jsonify({"message": "Event deleted"}), 200


@orders_bp.route("/<order_id>/client", methods=["PUT"])
@login_required
def link_client(order_id):
    """Link a client to the order; ``{"clientId": null}`` unlinks"""
    data = request.get_json(silent=True) or {}
    try:
        validated_data = OrderLinkClientSchema().load(data)
    except ValidationError as err:
        return jsonify({"errors": err.messages}), 400

    order = OrderService.link_client(AuthProvider.get_session(), order_id, validated_data['client_id'])
    return jsonify({"message": "Order updated", "order": order}), 200
