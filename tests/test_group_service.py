import pytest

from crm.errors import AuthorizationError, InvalidInputError, NotFoundError
from crm.services.client_service import ClientService
from crm.services.group_service import ContactGroupService, UNKNOWN_GROUP, group_name


def test_groups_are_listed_by_name(associate_session):
    for name in ('Suppliers', ' Agents ', 'VIP'):
        ContactGroupService.create_group(associate_session, name)

    groups = ContactGroupService.get_groups(associate_session)

    assert [g['name'] for g in groups] == ['Agents', 'Suppliers', 'VIP']
    assert all(g['createdBy'] == 'assoc-1' for g in groups)


def test_group_name_is_required(associate_session):
    with pytest.raises(InvalidInputError):
        ContactGroupService.create_group(associate_session, '   ')
    with pytest.raises(InvalidInputError):
        ContactGroupService.create_group(associate_session, None)


def test_rename_group(associate_session):
    group = ContactGroupService.create_group(associate_session, 'VIP')

    renamed = ContactGroupService.update_group(associate_session, group['id'], 'Gold')

    assert renamed['name'] == 'Gold'
    assert [g['name'] for g in ContactGroupService.get_groups(associate_session)] == ['Gold']
    with pytest.raises(NotFoundError):
        ContactGroupService.update_group(associate_session, 'missing', 'Gold')


def test_deleting_a_group_leaves_client_references_dangling(admin_session, associate_session):
    group = ContactGroupService.create_group(associate_session, 'VIP')
    client = ClientService.create_client(associate_session, {'fullName': 'A B', 'groupId': group['id']})

    with pytest.raises(AuthorizationError):
        ContactGroupService.delete_group(associate_session, group['id'])

    ContactGroupService.delete_group(admin_session, group['id'])

    groups = ContactGroupService.get_groups(admin_session)
    assert groups == []
    assert ClientService.get_client(admin_session, client['id'])['groupId'] == group['id']
    assert group_name(groups, group['id']) == UNKNOWN_GROUP


def test_group_name_resolution():
    groups = [{'id': 'g1', 'name': 'VIP'}]

    assert group_name(groups, 'g1') == 'VIP'
    assert group_name(groups, 'g2') == 'Unknown Group'
    assert group_name(groups, None) is None
