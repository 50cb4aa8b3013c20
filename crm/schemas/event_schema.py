from marshmallow import fields

from .common import RecordSchema, UTCDateTime


class GlobalEventRecordSchema(RecordSchema):
    """Journal entry record <-> ``global_events`` row"""
    id = fields.String(dump_only=True)
    description = fields.String()
    created_by = fields.String(data_key='createdBy', dump_only=True)
    created_by_name = fields.String(data_key='createdByName', dump_only=True)
    created_at = UTCDateTime(data_key='createdAt', dump_only=True)
