from datetime import datetime, timedelta

import pytest

from crm.errors import AuthorizationError, InvalidInputError, NotFoundError
from crm.services.call_log_service import CallLogService, CallSession


def make_record(**overrides):
    record = {
        'clientId': 'c1',
        'clientName': 'A B',
        'phone': '9000000000',
        'startedAt': '2024-05-01T10:00:00Z',
        'endedAt': '2024-05-01T10:03:20Z',
        'durationSec': 200,
        'notes': 'Asked for a quote',
    }
    record.update(overrides)
    return record


class FakeClock:
    def __init__(self, start):
        self.now = start

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)

    def __call__(self):
        return self.now


def test_create_and_list_call_logs(associate_session):
    log = CallLogService.create_call_log(associate_session, make_record())

    assert log['clientName'] == 'A B'
    assert log['durationSec'] == 200
    assert log['startedAt'].startswith('2024-05-01T10:00:00')
    assert log['createdBy'] == 'assoc-1'
    assert 'recording' not in log
    assert CallLogService.get_call_logs(associate_session) == [log]


def test_offset_timestamps_are_stored_as_utc(associate_session):
    log = CallLogService.create_call_log(associate_session, make_record(
        startedAt='2024-05-01T15:30:00+05:30', endedAt=None))

    assert log['startedAt'].startswith('2024-05-01T10:00:00')
    assert 'endedAt' not in log


@pytest.mark.parametrize("missing", ['clientId', 'clientName', 'phone', 'startedAt'])
def test_required_fields(associate_session, missing):
    record = make_record()
    del record[missing]

    with pytest.raises(InvalidInputError) as exc:
        CallLogService.create_call_log(associate_session, record)
    assert missing in exc.value.fields


def test_call_cannot_end_before_it_starts(associate_session):
    with pytest.raises(InvalidInputError):
        CallLogService.create_call_log(associate_session, make_record(endedAt='2024-05-01T09:59:00Z'))


def test_recording_is_kept_and_size_limited(app, associate_session):
    log = CallLogService.create_call_log(associate_session, make_record(
        recording={'mime': 'audio/webm', 'dataBase64': 'AAAA'}))
    assert log['recording'] == {'mime': 'audio/webm', 'dataBase64': 'AAAA'}

    app.config['MAX_RECORDING_BYTES'] = 4
    with pytest.raises(InvalidInputError):
        CallLogService.create_call_log(associate_session, make_record(
            recording={'mime': 'audio/webm', 'dataBase64': 'AAAAAAAA'}))


def test_list_filters_by_client(associate_session):
    CallLogService.create_call_log(associate_session, make_record())
    other = CallLogService.create_call_log(associate_session, make_record(clientId='c2', clientName='C D'))

    assert CallLogService.get_call_logs(associate_session, client_id='c2') == [other]


def test_update_only_touches_notes_and_client_name(associate_session):
    log = CallLogService.create_call_log(associate_session, make_record())

    updated = CallLogService.update_call_log(associate_session, log['id'], {'notes': 'Call back Monday',
                                                                             'clientName': 'A. B'})
    assert updated['notes'] == 'Call back Monday'
    assert updated['clientName'] == 'A. B'
    assert updated['phone'] == '9000000000'

    with pytest.raises(InvalidInputError):
        CallLogService.update_call_log(associate_session, log['id'], {'phone': '1'})
    with pytest.raises(InvalidInputError):
        CallLogService.update_call_log(associate_session, log['id'], {'clientName': ' '})
    with pytest.raises(NotFoundError):
        CallLogService.update_call_log(associate_session, 'missing', {'notes': 'x'})


def test_any_actor_can_delete_call_logs(associate_session, anonymous_session):
    log = CallLogService.create_call_log(associate_session, make_record())

    with pytest.raises(AuthorizationError):
        CallLogService.delete_call_log(anonymous_session, log['id'])

    CallLogService.delete_call_log(associate_session, log['id'])
    assert CallLogService.get_call_logs(associate_session) == []
    with pytest.raises(NotFoundError):
        CallLogService.delete_call_log(associate_session, log['id'])


def test_call_session_times_the_call(associate_session):
    clock = FakeClock(datetime(2024, 5, 1, 10, 0, 0))
    call = CallSession(clock=clock)
    assert call.time_label == '00:00'
    assert call.stop() is None

    call.start('c1', 'A B', '9000000000')
    clock.advance(125)
    assert call.time_label == '02:05'

    call.notes = '  Wants a quote '
    call.attach_recording('audio/webm', 'AAAA')
    record = call.stop()

    assert record['durationSec'] == 125
    assert record['startedAt'] == '2024-05-01T10:00:00'
    assert record['endedAt'] == '2024-05-01T10:02:05'
    assert record['notes'] == 'Wants a quote'
    assert not call.active

    log = CallLogService.create_call_log(associate_session, record)
    assert log['durationSec'] == 125
    assert log['recording']['mime'] == 'audio/webm'
