# models/__init__.py
import uuid
from datetime import datetime, timezone

from .. import db


def new_id():
    return str(uuid.uuid4())


def utcnow():
    """Naive UTC timestamp, the form every timestamp column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class BaseModel(db.Model):
    """
    Base model with common fields for all models
    """
    __abstract__ = True

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def to_row(self):
        """
        Column values keyed by column name, the shape the data-access layer
        hands back to the services.
        """
        return {column.name: getattr(self, column.name) for column in self.__table__.columns}

    @classmethod
    def get_by_id(cls, id):
        """
        Retrieve a model instance by its ID

        Args:
            id (str): Primary key of the model instance

        Returns:
            Model instance or None
        """
        return db.session.get(cls, id)


class TimestampedModel(BaseModel):
    __abstract__ = True

    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)


# Import order matters
from .user import User, UserRole
from .contact_group import ContactGroup
from .client import Client
from .order import Order, OrderEvent, OrderStatus
from .call_log import CallLog
from .global_event import GlobalEvent
