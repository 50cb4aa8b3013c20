from marshmallow import Schema, fields, validate, EXCLUDE

from .common import RecordSchema, UTCDateTime
from ..models.user import ROLES


class UserRecordSchema(RecordSchema):
    """User record; ``role`` comes from ``user_roles``, not the user row"""
    id = fields.String(dump_only=True)
    email = fields.String(dump_only=True)
    name = fields.String(dump_only=True)
    role = fields.String(dump_only=True)
    is_active = fields.Boolean(data_key='isActive', dump_only=True)
    last_login = UTCDateTime(data_key='lastLogin', dump_only=True)
    created_at = UTCDateTime(data_key='createdAt', dump_only=True)


class SignInSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True)
    password = fields.String(required=True, validate=validate.Length(min=1))


class SignUpSchema(SignInSchema):
    password = fields.String(required=True, validate=validate.Length(min=8))
    name = fields.String(required=True, validate=validate.Length(min=1, max=100))


class ProvisionUserSchema(SignUpSchema):
    role = fields.String(required=True, validate=validate.OneOf(ROLES))


class UserActiveSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    is_active = fields.Boolean(data_key='isActive', required=True)
