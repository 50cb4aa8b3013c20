from marshmallow import fields, validate, pre_load

from .common import RecordSchema, UTCDateTime


class ClientRecordSchema(RecordSchema):
    """
    Client record <-> ``clients`` row.

    Phones are kept as entered (order preserved, duplicates allowed);
    only surrounding whitespace and blank entries are dropped.
    """
    id = fields.String(dump_only=True)
    full_name = fields.String(data_key='fullName', validate=validate.Length(max=200))
    first_name = fields.String(data_key='firstName', allow_none=True, validate=validate.Length(max=100))
    middle_name = fields.String(data_key='middleName', allow_none=True, validate=validate.Length(max=100))
    last_name = fields.String(data_key='lastName', allow_none=True, validate=validate.Length(max=100))
    age = fields.Integer(allow_none=True, validate=validate.Range(min=0, max=150))
    phones = fields.List(fields.String())

    address = fields.String(allow_none=True)
    city = fields.String(allow_none=True, validate=validate.Length(max=100))
    village = fields.String(allow_none=True, validate=validate.Length(max=100))
    block = fields.String(allow_none=True, validate=validate.Length(max=100))

    profession = fields.String(allow_none=True, validate=validate.Length(max=100))
    qualifications = fields.String(allow_none=True)
    email = fields.String(allow_none=True, validate=validate.Length(max=120))
    company = fields.String(allow_none=True, validate=validate.Length(max=200))
    profile_photo = fields.String(data_key='profilePhoto', allow_none=True)
    group_id = fields.String(data_key='groupId', allow_none=True)

    created_by = fields.String(data_key='createdBy', dump_only=True)
    created_at = UTCDateTime(data_key='createdAt', dump_only=True)
    updated_at = UTCDateTime(data_key='updatedAt', dump_only=True)

    @pre_load
    def clean_phones(self, data, **kwargs):
        """Strip phone numbers and drop blank entries"""
        if isinstance(data.get('phones'), list):
            data = dict(data)
            data['phones'] = [
                phone.strip() for phone in data['phones']
                if isinstance(phone, str) and phone.strip()
            ]
        return data
