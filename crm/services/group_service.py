# services/group_service.py
from typing import List, Optional

from crm import logger, query_cache
from ..cache import CONTACT_GROUPS
from ..errors import InvalidInputError, NotFoundError
from ..models.contact_group import ContactGroup
from ..persistence import TableAccessor, dump_record
from ..schemas.group_schema import ContactGroupRecordSchema

groups_table = TableAccessor(ContactGroup)
group_schema = ContactGroupRecordSchema()

UNKNOWN_GROUP = 'Unknown Group'


def _require_name(name):
    name = name.strip() if isinstance(name, str) else ''
    if not name:
        raise InvalidInputError("Group name is required", fields={'name': ['Name is required']})
    return name


def group_name(groups, group_id) -> Optional[str]:
    """
    Name of ``group_id`` among ``groups`` records. A reference to a group
    that no longer exists reads as 'Unknown Group'; no group is ``None``.
    """
    if not group_id:
        return None
    for group in groups:
        if group['id'] == group_id:
            return group['name']
    return UNKNOWN_GROUP


class ContactGroupService:
    """Named tags for classifying clients. Names need not be unique."""

    @staticmethod
    def create_group(session, name) -> dict:
        actor = session.require_actor()
        name = _require_name(name)
        row = groups_table.insert({'name': name, 'created_by': actor.id})
        query_cache.invalidate('group.create')
        logger.info(f"Contact group created: {row['id']} '{name}' by {actor.id}")
        return dump_record(group_schema, row)

    @staticmethod
    def get_groups(session) -> List[dict]:
        """All groups, ordered by name"""
        session.require_actor()

        def fetch():
            rows = groups_table.select(order_by='name', ascending=True)
            return [dump_record(group_schema, row) for row in rows]

        return query_cache.get_or_fetch(CONTACT_GROUPS, fetch)

    @staticmethod
    def update_group(session, group_id, name) -> dict:
        actor = session.require_actor()
        name = _require_name(name)
        row = groups_table.update(group_id, {'name': name})
        if row is None:
            raise NotFoundError('Contact group', group_id)
        query_cache.invalidate('group.update')
        logger.info(f"Contact group {group_id} renamed to '{name}' by {actor.id}")
        return dump_record(group_schema, row)

    @staticmethod
    def delete_group(session, group_id) -> None:
        """
        Remove the group. Clients that referenced it keep the id and display
        it as an unknown group.
        """
        actor = session.require_delete("delete contact groups")
        if not groups_table.delete(group_id):
            raise NotFoundError('Contact group', group_id)
        query_cache.invalidate('group.delete')
        logger.info(f"Contact group {group_id} deleted by {actor.id}")
