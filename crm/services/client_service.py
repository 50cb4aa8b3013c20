# services/client_service.py
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from crm import logger, query_cache
from ..cache import CLIENTS
from ..errors import BackendError, InvalidInputError, NotFoundError
from ..models.client import Client
from ..persistence import TableAccessor, dump_record, load_row
from ..schemas.client_schema import ClientRecordSchema

clients_table = TableAccessor(Client)
client_schema = ClientRecordSchema()

NAME_PARTS = ('first_name', 'middle_name', 'last_name')
NO_GROUP = 'none'


def compose_full_name(first=None, middle=None, last=None):
    """Space-joined non-empty name parts, '' when all are empty"""
    return ' '.join(part.strip() for part in (first, middle, last) if part and part.strip())


def display_name(record):
    """Decomposed name when any part is set, else the stored full name"""
    composed = compose_full_name(record.get('firstName'), record.get('middleName'), record.get('lastName'))
    return composed or record.get('fullName', '')


def _apply_name_invariant(values, existing=None):
    """
    Recompute ``full_name`` from the merged name parts. Explicit full names
    only stand when no part is present.
    """
    merged = dict(existing or {})
    merged.update(values)
    composed = compose_full_name(*(merged.get(part) for part in NAME_PARTS))
    full_name = composed or (merged.get('full_name') or '').strip()
    if not full_name:
        raise InvalidInputError("Client name is required", fields={'fullName': ['Name is required']})
    values['full_name'] = full_name
    return values


def _matches(record, query):
    haystack = [
        record.get('fullName', ''),
        display_name(record),
        record.get('email', ''),
        record.get('company', ''),
    ] + list(record.get('phones', []))
    return any(query in value.lower() for value in haystack if value)


@dataclass
class BulkResult:
    """Outcome of a bulk patch: applied ids and per-id failure messages"""
    updated: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self):
        return not self.failed

    def to_dict(self):
        return {'updated': self.updated, 'failed': self.failed, 'ok': self.ok}


class ClientService:
    @staticmethod
    def create_client(session, record: dict) -> dict:
        """
        Create a client from a camelCase record, attributed to the actor.
        The full name is derived from first/middle/last when any is given.
        """
        actor = session.require_actor()
        values = load_row(client_schema, record)
        _apply_name_invariant(values)
        values.setdefault('phones', [])
        values['created_by'] = actor.id

        row = clients_table.insert(values)
        query_cache.invalidate('client.create')
        logger.info(f"Client created: {row['id']} '{row['full_name']}' by {actor.id}")
        return dump_record(client_schema, row)

    @staticmethod
    def get_client(session, client_id) -> Optional[dict]:
        session.require_actor()
        return dump_record(client_schema, clients_table.get(client_id))

    @staticmethod
    def get_clients(session, query=None, group_id=None) -> List[dict]:
        """
        Clients newest first. ``query`` searches names, email, company and
        phones case-insensitively; ``group_id`` filters by group, with
        ``'none'`` selecting clients outside any group.
        """
        session.require_actor()

        def fetch():
            rows = clients_table.select(order_by='created_at', ascending=False)
            return [dump_record(client_schema, row) for row in rows]

        clients = query_cache.get_or_fetch(CLIENTS, fetch)

        query = (query or '').strip().lower()
        if query:
            clients = [client for client in clients if _matches(client, query)]
        if group_id:
            clients = [client for client in clients if client.get('groupId', NO_GROUP) == group_id]
        return clients

    @staticmethod
    def update_client(session, client_id, patch: dict) -> dict:
        """
        Partial update: only keys present in ``patch`` are written. A key
        with a null value clears that field.
        """
        actor = session.require_actor()
        values = load_row(client_schema, patch, partial=True)

        existing = clients_table.get(client_id)
        if existing is None:
            raise NotFoundError('Client', client_id)
        if not values:
            return dump_record(client_schema, existing)

        if 'full_name' in values or any(part in values for part in NAME_PARTS):
            _apply_name_invariant(values, existing)

        row = clients_table.update(client_id, values)
        if row is None:
            raise NotFoundError('Client', client_id)
        query_cache.invalidate('client.update')
        logger.info(f"Client {client_id} updated by {actor.id}: {sorted(values)}")
        return dump_record(client_schema, row)

    @staticmethod
    def delete_client(session, client_id) -> None:
        actor = session.require_delete("delete clients")
        if not clients_table.delete(client_id):
            raise NotFoundError('Client', client_id)
        query_cache.invalidate('client.delete')
        logger.info(f"Client {client_id} deleted by {actor.id}")

    @staticmethod
    def assign_group(session, client_ids, group_id) -> BulkResult:
        """
        Put every client in ``client_ids`` into ``group_id`` (None removes
        them from their group).

        Each client is patched on its own. A failure for one client does not
        stop the others and nothing already written is rolled back; the
        result lists what was applied and what failed.
        """
        actor = session.require_actor()
        if not client_ids:
            raise InvalidInputError("Select at least one client", fields={'clientIds': ['Required']})

        result = BulkResult()
        for client_id in client_ids:
            try:
                row = clients_table.update(client_id, {'group_id': group_id or None})
            except BackendError as e:
                result.failed[client_id] = str(e)
                continue
            if row is None:
                result.failed[client_id] = 'Client not found'
            else:
                result.updated.append(client_id)

        if result.updated:
            query_cache.invalidate('client.assign_group')
        if result.failed:
            logger.warning(f"Group assignment by {actor.id} partially failed: {result.failed}")
        logger.info(f"Assigned {len(result.updated)} clients to group {group_id} by {actor.id}")
        return result
