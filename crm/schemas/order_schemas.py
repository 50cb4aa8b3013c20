from marshmallow import Schema, fields, validate, EXCLUDE

from .common import RecordSchema, UTCDateTime
from ..models.order import OrderStatus


class OrderEventRecordSchema(RecordSchema):
    """
    Timeline entry record <-> ``order_events`` row. The row's
    ``created_at`` is exposed as the entry's ``timestamp``.
    """
    id = fields.String(dump_only=True)
    order_id = fields.String(data_key='orderId', dump_only=True)
    created_at = UTCDateTime(data_key='timestamp', dump_only=True)
    title = fields.String(validate=validate.Length(max=255))
    note = fields.String(allow_none=True)
    attachments = fields.List(fields.String(), allow_none=True)
    created_by = fields.String(data_key='createdBy', dump_only=True)


class OrderRecordSchema(RecordSchema):
    """
    Order record <-> ``orders`` row. ``events`` is only ever dumped; the
    service attaches the event rows before dumping.
    """
    id = fields.String(dump_only=True)
    title = fields.String(validate=validate.Length(max=255))
    status = fields.String(validate=validate.OneOf(OrderStatus.values()))
    client_id = fields.String(data_key='clientId', allow_none=True)
    created_by = fields.String(data_key='createdBy', dump_only=True)
    created_at = UTCDateTime(data_key='createdAt', dump_only=True)
    deleted_at = UTCDateTime(data_key='deletedAt', allow_none=True)
    events = fields.List(fields.Nested(OrderEventRecordSchema), dump_only=True)


class OrderCreateSchema(Schema):
    """
    Payload for creating an order. Title emptiness is checked by the
    service so that whitespace-only titles are rejected the same way for
    every caller.
    """

    class Meta:
        unknown = EXCLUDE

    title = fields.String(required=True)
    status = fields.String(
        validate=validate.OneOf(OrderStatus.values()),
        load_default=OrderStatus.PENDING.value
    )
    client_id = fields.String(data_key='clientId', allow_none=True, load_default=None)


class OrderEventCreateSchema(Schema):
    """Payload for appending an entry to an order's timeline"""

    class Meta:
        unknown = EXCLUDE

    title = fields.String(required=True)
    note = fields.String(allow_none=True, load_default=None)
    attachments = fields.List(fields.String(), allow_none=True, load_default=None)


class OrderLinkClientSchema(Schema):
    """Payload for linking a client to an order; null unlinks"""

    class Meta:
        unknown = EXCLUDE

    client_id = fields.String(data_key='clientId', required=True, allow_none=True)


class OrderListQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    view = fields.String(validate=validate.OneOf(['all', 'active', 'binned']), load_default='all')
