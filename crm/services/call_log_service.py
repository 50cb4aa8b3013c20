# services/call_log_service.py
from typing import List, Optional

from flask import current_app

from crm import logger, query_cache
from ..cache import CALL_LOGS
from ..errors import InvalidInputError, NotFoundError
from ..models import utcnow
from ..models.call_log import CallLog
from ..persistence import TableAccessor, dump_record, load_row
from ..schemas.call_log_schema import CallLogRecordSchema

call_logs_table = TableAccessor(CallLog)
call_log_schema = CallLogRecordSchema()

REQUIRED_FIELDS = {
    'client_id': 'clientId',
    'client_name': 'clientName',
    'phone': 'phone',
    'started_at': 'startedAt',
}
PATCHABLE_FIELDS = ('notes', 'client_name')


def _recording_size(data_base64):
    # Decoded size of a base64 payload, padding excluded
    return len(data_base64) * 3 // 4 - data_base64.count('=', -2)


class CallLogService:
    """
    Calls are logged once they have ended. Apart from fixing notes or the
    copied client name, a log is never edited.
    """

    @staticmethod
    def create_call_log(session, record: dict) -> dict:
        actor = session.require_actor()
        values = load_row(call_log_schema, record)

        for column in ('client_id', 'client_name', 'phone'):
            if isinstance(values.get(column), str):
                values[column] = values[column].strip()
        missing = {key: ['Required'] for column, key in REQUIRED_FIELDS.items() if not values.get(column)}
        if missing:
            raise InvalidInputError("Missing call details", fields=missing)

        if values.get('ended_at') and values['ended_at'] < values['started_at']:
            raise InvalidInputError("Call cannot end before it starts", fields={'endedAt': ['Before startedAt']})

        recording = values.get('recording_data')
        max_bytes = current_app.config.get('MAX_RECORDING_BYTES')
        if recording and max_bytes and _recording_size(recording) > max_bytes:
            raise InvalidInputError("Recording is too large", fields={'recording': ['Too large']})

        values['created_by'] = actor.id
        row = call_logs_table.insert(values)
        query_cache.invalidate('call_log.create')
        logger.info(f"Call logged: {row['id']} with {row['client_name']} ({row['phone']}) by {actor.id}")
        return dump_record(call_log_schema, row)

    @staticmethod
    def get_call_logs(session, client_id=None) -> List[dict]:
        """Call logs newest first, optionally only those of one client"""
        session.require_actor()

        def fetch():
            rows = call_logs_table.select(order_by='created_at', ascending=False)
            return [dump_record(call_log_schema, row) for row in rows]

        logs = query_cache.get_or_fetch(CALL_LOGS, fetch)
        if client_id:
            logs = [log for log in logs if log['clientId'] == client_id]
        return logs

    @staticmethod
    def update_call_log(session, log_id, patch: dict) -> dict:
        """Patch the notes or the copied client name of a logged call"""
        actor = session.require_actor()
        values = load_row(call_log_schema, patch, partial=True)
        disallowed = sorted(set(values) - set(PATCHABLE_FIELDS))
        if disallowed:
            raise InvalidInputError("Only notes and client name can be changed",
                                    fields={column: ['Read only'] for column in disallowed})
        if 'client_name' in values and not (values['client_name'] or '').strip():
            raise InvalidInputError("Client name cannot be empty", fields={'clientName': ['Required']})

        row = call_logs_table.update(log_id, values)
        if row is None:
            raise NotFoundError('Call log', log_id)
        query_cache.invalidate('call_log.update')
        logger.info(f"Call log {log_id} updated by {actor.id}")
        return dump_record(call_log_schema, row)

    @staticmethod
    def delete_call_log(session, log_id) -> None:
        actor = session.require_actor()
        if not call_logs_table.delete(log_id):
            raise NotFoundError('Call log', log_id)
        query_cache.invalidate('call_log.delete')
        logger.info(f"Call log {log_id} deleted by {actor.id}")


class CallSession:
    """
    Timer for a call in progress. ``stop`` returns the record to hand to
    ``CallLogService.create_call_log``. Audio capture happens elsewhere; the
    captured payload is passed in with ``attach_recording``.
    """

    def __init__(self, clock=utcnow):
        self._clock = clock
        self.client_id = None
        self.client_name = None
        self.phone = None
        self.started_at = None
        self.notes = ''
        self.recording = None

    @property
    def active(self):
        return self.started_at is not None

    def start(self, client_id, client_name, phone):
        self.client_id = client_id
        self.client_name = client_name
        self.phone = phone
        self.notes = ''
        self.recording = None
        self.started_at = self._clock()
        return self

    def attach_recording(self, mime, data_base64):
        self.recording = {'mime': mime, 'dataBase64': data_base64}

    def elapsed_seconds(self):
        if not self.active:
            return 0
        return int((self._clock() - self.started_at).total_seconds())

    @property
    def time_label(self):
        minutes, seconds = divmod(self.elapsed_seconds(), 60)
        return f"{minutes:02d}:{seconds:02d}"

    def stop(self) -> Optional[dict]:
        if not self.active:
            return None

        ended_at = self._clock()
        record = {
            'clientId': self.client_id,
            'clientName': self.client_name,
            'phone': self.phone,
            'startedAt': self.started_at.isoformat(),
            'endedAt': ended_at.isoformat(),
            'durationSec': int((ended_at - self.started_at).total_seconds()),
            'notes': self.notes.strip() or None,
        }
        if self.recording:
            record['recording'] = self.recording
        self.started_at = None
        return record
