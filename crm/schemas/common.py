from datetime import timezone

from marshmallow import Schema, fields, EXCLUDE, post_dump


class UTCDateTime(fields.DateTime):
    """
    ISO-8601 timestamp stored as naive UTC. Offsets on input are converted,
    naive input is taken as UTC already.
    """

    def _deserialize(self, value, attr, data, **kwargs):
        value = super()._deserialize(value, attr, data, **kwargs)
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class RecordSchema(Schema):
    """
    Maps a database row (snake_case column names) to an application record
    (camelCase keys) and back.

    ``dump`` drops fields whose value is ``None`` so that absent data is
    simply missing from the record. ``load`` with ``partial=True`` returns
    only the columns the caller supplied; an explicit ``None`` clears the
    column.
    """

    class Meta:
        unknown = EXCLUDE

    @post_dump
    def drop_empty(self, data, **kwargs):
        return {key: value for key, value in data.items() if value is not None}
