import pytest
from sqlalchemy.exc import OperationalError

from crm import db
from crm.errors import BackendError, InvalidInputError
from crm.models.client import Client
from crm.models.contact_group import ContactGroup
from crm.persistence import TableAccessor, dump_record, load_row
from crm.schemas.call_log_schema import CallLogRecordSchema
from crm.schemas.client_schema import ClientRecordSchema


@pytest.fixture
def groups(app_context):
    return TableAccessor(ContactGroup)


def test_rows_are_plain_dicts(groups):
    row = groups.insert({'name': 'VIP', 'created_by': 'u1'})

    assert isinstance(row, dict)
    assert row['name'] == 'VIP'
    assert row['id']
    assert groups.get(row['id']) == row
    assert groups.get('missing') is None


def test_select_filters_and_orders(groups):
    groups.insert({'name': 'Beta', 'created_by': 'u1'})
    groups.insert({'name': 'Alpha', 'created_by': 'u2'})
    groups.insert({'name': 'Gamma', 'created_by': 'u1'})

    names = [row['name'] for row in groups.select(order_by='name')]
    assert names == ['Alpha', 'Beta', 'Gamma']

    names = [row['name'] for row in groups.select(order_by='name', ascending=False, created_by='u1')]
    assert names == ['Gamma', 'Beta']


def test_update_writes_only_supplied_columns(groups):
    row = groups.insert({'name': 'VIP', 'created_by': 'u1'})

    updated = groups.update(row['id'], {'name': 'Gold'})

    assert updated['name'] == 'Gold'
    assert updated['created_by'] == 'u1'
    assert groups.update('missing', {'name': 'x'}) is None


def test_delete_reports_whether_a_row_went(groups):
    row = groups.insert({'name': 'VIP'})

    assert groups.delete(row['id']) is True
    assert groups.delete(row['id']) is False
    assert groups.get(row['id']) is None


def test_unknown_columns_are_refused(groups):
    with pytest.raises(ValueError):
        groups.insert({'name': 'VIP', 'colour': 'red'})
    with pytest.raises(ValueError):
        groups.select(colour='red')


def test_database_failure_becomes_backend_error(groups, monkeypatch):
    def broken_commit():
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    monkeypatch.setattr(db.session, 'commit', broken_commit)

    with pytest.raises(BackendError):
        groups.insert({'name': 'VIP'})


def test_dump_omits_null_fields(app_context):
    clients = TableAccessor(Client)
    row = clients.insert({'full_name': 'A B', 'phones': ['9000000000']})

    record = dump_record(ClientRecordSchema(), row)

    assert record['fullName'] == 'A B'
    assert record['phones'] == ['9000000000']
    assert 'groupId' not in record
    assert 'email' not in record
    assert dump_record(ClientRecordSchema(), None) is None


def test_partial_load_returns_only_supplied_columns():
    values = load_row(ClientRecordSchema(), {'city': 'Pune', 'email': None}, partial=True)

    assert values == {'city': 'Pune', 'email': None}


def test_load_violations_are_input_errors():
    with pytest.raises(InvalidInputError) as exc:
        load_row(ClientRecordSchema(), {'age': 'old'})
    assert 'age' in exc.value.fields


def test_recording_columns_travel_together():
    schema = CallLogRecordSchema()
    row = {
        'id': 'l1', 'client_id': 'c1', 'client_name': 'A', 'phone': '1',
        'started_at': None, 'recording_mime': 'audio/webm', 'recording_data': 'AAAA',
    }

    assert schema.dump(row)['recording'] == {'mime': 'audio/webm', 'dataBase64': 'AAAA'}
    assert 'recording' not in schema.dump(dict(row, recording_data=None))

    values = load_row(schema, {'recording': {'mime': 'audio/ogg', 'dataBase64': 'BBBB'}}, partial=True)
    assert values == {'recording_mime': 'audio/ogg', 'recording_data': 'BBBB'}
