from marshmallow import Schema, fields, validate, pre_dump, post_load, EXCLUDE

from .common import RecordSchema, UTCDateTime


class RecordingSchema(Schema):
    """Captured call audio, base64 encoded"""

    class Meta:
        unknown = EXCLUDE

    mime = fields.String(required=True, validate=validate.Length(min=1, max=100))
    data_base64 = fields.String(data_key='dataBase64', required=True, validate=validate.Length(min=1))


class CallLogRecordSchema(RecordSchema):
    """
    Call log record <-> ``call_logs`` row.

    The two recording columns travel together as a nested ``recording``
    object, present only when both columns hold a value.
    """
    id = fields.String(dump_only=True)
    client_id = fields.String(data_key='clientId')
    client_name = fields.String(data_key='clientName', validate=validate.Length(max=200))
    phone = fields.String(validate=validate.Length(max=50))
    started_at = UTCDateTime(data_key='startedAt')
    ended_at = UTCDateTime(data_key='endedAt', allow_none=True)
    duration_sec = fields.Integer(data_key='durationSec', allow_none=True, validate=validate.Range(min=0))
    notes = fields.String(allow_none=True)
    recording = fields.Nested(RecordingSchema, allow_none=True)
    created_by = fields.String(data_key='createdBy', dump_only=True)
    created_at = UTCDateTime(data_key='createdAt', dump_only=True)

    @pre_dump
    def nest_recording(self, row, **kwargs):
        row = dict(row)
        mime = row.pop('recording_mime', None)
        data = row.pop('recording_data', None)
        row['recording'] = {'mime': mime, 'data_base64': data} if mime and data else None
        return row

    @post_load
    def flatten_recording(self, data, **kwargs):
        if 'recording' in data:
            recording = data.pop('recording') or {}
            data['recording_mime'] = recording.get('mime')
            data['recording_data'] = recording.get('data_base64')
        return data
