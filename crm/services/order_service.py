# services/order_service.py
from typing import List, Optional

from flask import current_app

from crm import logger, query_cache
from ..cache import ORDERS
from ..errors import InvalidInputError, NotFoundError
from ..models import utcnow
from ..models.order import Order, OrderEvent, OrderStatus
from ..persistence import TableAccessor, dump_record
from ..schemas.order_schemas import OrderRecordSchema, OrderEventRecordSchema

orders_table = TableAccessor(Order)
events_table = TableAccessor(OrderEvent)

order_schema = OrderRecordSchema()
event_schema = OrderEventRecordSchema()

VIEW_ALL = 'all'
VIEW_ACTIVE = 'active'
VIEW_BINNED = 'binned'
VIEWS = (VIEW_ALL, VIEW_ACTIVE, VIEW_BINNED)


def _require_title(title, entity):
    title = title.strip() if isinstance(title, str) else ''
    if not title:
        raise InvalidInputError(f"{entity} title is required", fields={'title': ['Title is required']})
    return title


class OrderService:
    """
    Orders and their timelines.

    An order is either active (``deletedAt`` unset) or in the bin
    (``deletedAt`` set). ``move_to_bin`` and ``restore`` toggle between the
    two; ``purge`` removes a binned order and, through the database cascade,
    its timeline. ``status`` is chosen at creation and is not a lifecycle
    state.

    Every operation takes the caller's ``AuthSession``. Failures leave the
    cache untouched, so the next read shows what the database holds.
    """

    @staticmethod
    def _timeline(order_id) -> List[dict]:
        return events_table.select(order_by='created_at', ascending=False, order_id=order_id)

    @classmethod
    def _record(cls, row, events=None) -> dict:
        if events is None:
            events = cls._timeline(row['id'])
        return dump_record(order_schema, dict(row, events=events))

    @staticmethod
    def _existing_row(order_id) -> dict:
        row = orders_table.get(order_id)
        if row is None:
            raise NotFoundError('Order', order_id)
        return row

    @classmethod
    def create_order(cls, session, title, status=OrderStatus.PENDING.value, client_id=None) -> dict:
        """
        Create an active order with an empty timeline.

        Raises:
            AuthorizationError: nobody is signed in
            InvalidInputError: blank title or unknown status
        """
        actor = session.require_actor()
        title = _require_title(title, 'Order')
        status = status or OrderStatus.PENDING.value
        if status not in OrderStatus.values():
            raise InvalidInputError(f"Invalid status '{status}'",
                                    fields={'status': [f"Must be one of {OrderStatus.values()}"]})

        row = orders_table.insert({
            'title': title,
            'status': status,
            'client_id': client_id or None,
            'created_by': actor.id,
        })
        query_cache.invalidate('order.create')
        logger.info(f"Order created: {row['id']} '{title}' by {actor.id}")
        return cls._record(row, events=[])

    @classmethod
    def get_order(cls, session, order_id) -> Optional[dict]:
        """The order with its timeline, newest first, or ``None``"""
        session.require_actor()
        row = orders_table.get(order_id)
        if row is None:
            return None
        return cls._record(row)

    @classmethod
    def get_orders(cls, session, view=VIEW_ALL) -> List[dict]:
        """
        Orders newest-created first, each with its timeline. ``view`` picks
        all orders, only active ones, or only the bin.
        """
        session.require_actor()
        if view not in VIEWS:
            raise InvalidInputError(f"Invalid view '{view}'", fields={'view': [f"Must be one of {list(VIEWS)}"]})

        def fetch():
            rows = orders_table.select(order_by='created_at', ascending=False)
            return [cls._record(row) for row in rows]

        orders = query_cache.get_or_fetch(ORDERS, fetch)
        if view == VIEW_ACTIVE:
            return [order for order in orders if 'deletedAt' not in order]
        if view == VIEW_BINNED:
            return [order for order in orders if 'deletedAt' in order]
        return orders

    @classmethod
    def move_to_bin(cls, session, order_id) -> dict:
        actor = session.require_actor()
        if current_app.config.get('BIN_REQUIRES_DELETE'):
            session.require_delete("move orders to the bin")

        row = cls._existing_row(order_id)
        if row['deleted_at'] is not None:
            raise InvalidInputError("Order is already in the bin")

        row = orders_table.update(order_id, {'deleted_at': utcnow()})
        if row is None:
            raise NotFoundError('Order', order_id)
        query_cache.invalidate('order.move_to_bin')
        logger.info(f"Order {order_id} moved to bin by {actor.id}")
        return cls._record(row)

    @classmethod
    def restore(cls, session, order_id) -> dict:
        actor = session.require_actor()
        row = cls._existing_row(order_id)
        if row['deleted_at'] is None:
            raise InvalidInputError("Order is not in the bin")

        row = orders_table.update(order_id, {'deleted_at': None})
        if row is None:
            raise NotFoundError('Order', order_id)
        query_cache.invalidate('order.restore')
        logger.info(f"Order {order_id} restored by {actor.id}")
        return cls._record(row)

    @classmethod
    def purge(cls, session, order_id) -> None:
        """
        Permanently delete a binned order. Its events are removed by the
        foreign key cascade.

        Raises:
            AuthorizationError: the actor cannot delete
            InvalidInputError: the order is not in the bin
            NotFoundError: no such order
        """
        actor = session.require_delete("permanently delete orders")
        row = cls._existing_row(order_id)
        if row['deleted_at'] is None:
            raise InvalidInputError("Only orders in the bin can be deleted permanently")

        if not orders_table.delete(order_id):
            raise NotFoundError('Order', order_id)
        query_cache.invalidate('order.purge')
        logger.info(f"Order {order_id} purged by {actor.id}")

    @classmethod
    def add_event(cls, session, order_id, title, note=None, attachments=None) -> dict:
        """
        Append an entry to the order's timeline and return it.

        Orders in the bin refuse new entries unless ORDER_BIN_ACCEPTS_EVENTS
        is set.
        """
        actor = session.require_actor()
        title = _require_title(title, 'Event')
        if attachments is not None and not all(isinstance(item, str) for item in attachments):
            raise InvalidInputError("Attachments must be strings",
                                    fields={'attachments': ['Must be a list of strings']})

        row = cls._existing_row(order_id)
        if row['deleted_at'] is not None and not current_app.config.get('ORDER_BIN_ACCEPTS_EVENTS'):
            raise InvalidInputError("Restore the order before adding events")

        note = note.strip() if isinstance(note, str) else None
        event_row = events_table.insert({
            'order_id': order_id,
            'title': title,
            'note': note or None,
            'attachments': list(attachments) if attachments else None,
            'created_by': actor.id,
        })
        query_cache.invalidate('order.add_event')
        logger.info(f"Event '{title}' added to order {order_id} by {actor.id}")
        return dump_record(event_schema, event_row)

    @classmethod
    def delete_event(cls, session, event_id) -> None:
        actor = session.require_delete("delete timeline events")
        if not events_table.delete(event_id):
            raise NotFoundError('Order event', event_id)
        query_cache.invalidate('order.delete_event')
        logger.info(f"Order event {event_id} deleted by {actor.id}")

    @classmethod
    def link_client(cls, session, order_id, client_id) -> dict:
        """Set the order's client, or clear it when ``client_id`` is None"""
        actor = session.require_actor()
        row = orders_table.update(order_id, {'client_id': client_id or None})
        if row is None:
            raise NotFoundError('Order', order_id)
        query_cache.invalidate('order.link_client')
        logger.info(f"Order {order_id} client set to {client_id} by {actor.id}")
        return cls._record(row)
