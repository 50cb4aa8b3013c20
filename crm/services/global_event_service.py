# services/global_event_service.py
from typing import List

from crm import logger, query_cache
from ..cache import GLOBAL_EVENTS
from ..errors import InvalidInputError
from ..models.global_event import GlobalEvent
from ..persistence import TableAccessor, dump_record
from ..schemas.event_schema import GlobalEventRecordSchema

global_events_table = TableAccessor(GlobalEvent)
global_event_schema = GlobalEventRecordSchema()


class GlobalEventService:
    """Organisation-wide journal. Entries are only ever added."""

    @staticmethod
    def create_event(session, description) -> dict:
        actor = session.require_actor()
        description = description.strip() if isinstance(description, str) else ''
        if not description:
            raise InvalidInputError("Description is required", fields={'description': ['Required']})

        row = global_events_table.insert({
            'description': description,
            'created_by': actor.id,
            'created_by_name': actor.display_name,
        })
        query_cache.invalidate('global_event.create')
        logger.info(f"Global event {row['id']} recorded by {actor.id}")
        return dump_record(global_event_schema, row)

    @staticmethod
    def get_events(session) -> List[dict]:
        session.require_actor()

        def fetch():
            rows = global_events_table.select(order_by='created_at', ascending=False)
            return [dump_record(global_event_schema, row) for row in rows]

        return query_cache.get_or_fetch(GLOBAL_EVENTS, fetch)
