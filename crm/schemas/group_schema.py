from marshmallow import fields, validate

from .common import RecordSchema, UTCDateTime


class ContactGroupRecordSchema(RecordSchema):
    """Contact group record <-> ``contact_groups`` row"""
    id = fields.String(dump_only=True)
    name = fields.String(validate=validate.Length(max=100))
    created_by = fields.String(data_key='createdBy', dump_only=True)
    created_at = UTCDateTime(data_key='createdAt', dump_only=True)
    updated_at = UTCDateTime(data_key='updatedAt', dump_only=True)
