import pytest

from crm.errors import AuthorizationError, BackendError, InvalidInputError, NotFoundError
from crm.services import client_service
from crm.services.client_service import ClientService, compose_full_name, display_name


def test_compose_full_name_skips_blank_parts():
    assert compose_full_name('Asha', None, 'Rao') == 'Asha Rao'
    assert compose_full_name(' Asha ', 'K', ' Rao') == 'Asha K Rao'
    assert compose_full_name(None, '  ', None) == ''


def test_display_name_prefers_name_parts():
    assert display_name({'fullName': 'Old Name', 'firstName': 'Asha'}) == 'Asha'
    assert display_name({'fullName': 'Old Name'}) == 'Old Name'


def test_create_derives_full_name_and_attributes_actor(associate_session):
    client = ClientService.create_client(associate_session, {
        'fullName': 'ignored',
        'firstName': 'Asha',
        'lastName': 'Rao',
        'phones': [' 9000000000 ', '', '9000000000'],
        'city': 'Pune',
    })

    assert client['fullName'] == 'Asha Rao'
    assert client['phones'] == ['9000000000', '9000000000']
    assert client['createdBy'] == 'assoc-1'
    assert 'groupId' not in client


def test_create_without_phones_defaults_to_empty_list(associate_session):
    client = ClientService.create_client(associate_session, {'fullName': 'A B'})

    assert client['phones'] == []


def test_create_requires_a_name(associate_session):
    with pytest.raises(InvalidInputError) as exc:
        ClientService.create_client(associate_session, {'fullName': '  ', 'phones': ['1']})
    assert 'fullName' in exc.value.fields


def test_create_requires_an_actor(anonymous_session):
    with pytest.raises(AuthorizationError):
        ClientService.create_client(anonymous_session, {'fullName': 'A B'})


def test_get_missing_client_is_none(associate_session):
    assert ClientService.get_client(associate_session, 'missing') is None


def test_update_patches_only_supplied_fields(associate_session):
    client = ClientService.create_client(associate_session, {
        'firstName': 'Asha', 'lastName': 'Rao', 'city': 'Pune', 'email': 'asha@example.com',
    })

    updated = ClientService.update_client(associate_session, client['id'], {'city': 'Mumbai', 'email': None})

    assert updated['city'] == 'Mumbai'
    assert 'email' not in updated
    assert updated['fullName'] == 'Asha Rao'
    assert updated['phones'] == []


def test_update_recomputes_full_name_from_merged_parts(associate_session):
    client = ClientService.create_client(associate_session, {'firstName': 'Asha', 'lastName': 'Rao'})

    updated = ClientService.update_client(associate_session, client['id'], {'middleName': 'K'})
    assert updated['fullName'] == 'Asha K Rao'

    updated = ClientService.update_client(associate_session, client['id'], {'fullName': 'Someone Else'})
    assert updated['fullName'] == 'Asha K Rao'


def test_update_missing_client(associate_session):
    with pytest.raises(NotFoundError):
        ClientService.update_client(associate_session, 'missing', {'city': 'Pune'})


def test_delete_requires_delete_capability(admin_session, associate_session):
    client = ClientService.create_client(associate_session, {'fullName': 'A B'})

    with pytest.raises(AuthorizationError):
        ClientService.delete_client(associate_session, client['id'])

    ClientService.delete_client(admin_session, client['id'])
    assert ClientService.get_client(admin_session, client['id']) is None

    with pytest.raises(NotFoundError):
        ClientService.delete_client(admin_session, client['id'])


def test_list_is_newest_first_with_search_and_group_filter(associate_session):
    first = ClientService.create_client(associate_session, {'fullName': 'Asha Rao', 'phones': ['9000000001']})
    second = ClientService.create_client(associate_session, {
        'fullName': 'Vikram Shah', 'company': 'Shah Traders', 'groupId': 'g1',
    })

    assert [c['id'] for c in ClientService.get_clients(associate_session)] == [second['id'], first['id']]
    assert [c['id'] for c in ClientService.get_clients(associate_session, query='TRADERS')] == [second['id']]
    assert [c['id'] for c in ClientService.get_clients(associate_session, query='0001')] == [first['id']]
    assert [c['id'] for c in ClientService.get_clients(associate_session, group_id='g1')] == [second['id']]
    assert [c['id'] for c in ClientService.get_clients(associate_session, group_id='none')] == [first['id']]


def test_assign_group_patches_every_client(associate_session):
    ids = [ClientService.create_client(associate_session, {'fullName': name})['id'] for name in ('A', 'B')]

    result = ClientService.assign_group(associate_session, ids, 'g1')

    assert result.ok
    assert result.updated == ids
    assert all(c['groupId'] == 'g1' for c in ClientService.get_clients(associate_session))


def test_assign_group_is_not_atomic(associate_session, monkeypatch):
    ids = [ClientService.create_client(associate_session, {'fullName': name})['id'] for name in ('A', 'B', 'C')]
    real_update = client_service.clients_table.update

    def flaky_update(row_id, values):
        if row_id == ids[1]:
            raise BackendError("update clients failed")
        return real_update(row_id, values)

    monkeypatch.setattr(client_service.clients_table, 'update', flaky_update)

    result = ClientService.assign_group(associate_session, ids + ['missing'], 'g1')

    assert not result.ok
    assert result.updated == [ids[0], ids[2]]
    assert set(result.failed) == {ids[1], 'missing'}
    assert result.failed['missing'] == 'Client not found'

    groups = {c['id']: c.get('groupId') for c in ClientService.get_clients(associate_session)}
    assert groups == {ids[0]: 'g1', ids[1]: None, ids[2]: 'g1'}


def test_assign_group_needs_clients(associate_session):
    with pytest.raises(InvalidInputError):
        ClientService.assign_group(associate_session, [], 'g1')


def test_assign_group_can_clear_the_group(associate_session):
    client = ClientService.create_client(associate_session, {'fullName': 'A', 'groupId': 'g1'})

    ClientService.assign_group(associate_session, [client['id']], None)

    assert 'groupId' not in ClientService.get_client(associate_session, client['id'])
