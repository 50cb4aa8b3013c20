import enum

from sqlalchemy import Column, String, DateTime, ForeignKey, Text, JSON
from sqlalchemy.orm import relationship
from crm import db
from . import BaseModel, TimestampedModel


class OrderStatus(enum.Enum):
    """
    Work status of an order. Chosen at creation and independent of whether
    the order sits in the bin.
    """
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @classmethod
    def values(cls):
        return [status.value for status in cls]


class Order(TimestampedModel):
    """
    The central work-tracking record.

    An order with ``deleted_at`` set is in the bin: hidden from the active
    list, restorable by clearing ``deleted_at``, or purged for good. Its
    timeline lives in ``order_events`` and goes with it on purge through the
    ``ON DELETE CASCADE`` foreign key.
    """

    __tablename__ = 'orders'

    title = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value)
    client_id = Column(String(36), ForeignKey('clients.id', ondelete='SET NULL'),
                       nullable=True, index=True)
    created_by = Column(String(36), nullable=True)
    deleted_at = Column(DateTime, nullable=True, index=True,
                        doc="Set while the order is in the bin.")

    events = relationship('OrderEvent', backref='order', lazy='dynamic',
                          passive_deletes=True)

    def __repr__(self):
        return f"<Order {self.title} ({self.status})>"


class OrderEvent(BaseModel):
    """
    One entry of an order's timeline: a titled note with optional
    attachment payloads (data URLs or links).
    """

    __tablename__ = 'order_events'

    order_id = Column(String(36), ForeignKey('orders.id', ondelete='CASCADE'),
                      nullable=False, index=True)
    title = Column(String(255), nullable=False)
    note = Column(Text, nullable=True)
    attachments = Column(JSON, nullable=True)
    created_by = Column(String(36), nullable=True)
