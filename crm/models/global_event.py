from sqlalchemy import Column, String, Text
from . import BaseModel


class GlobalEvent(BaseModel):
    __tablename__ = 'global_events'

    description = Column(Text, nullable=False)
    created_by = Column(String(36), nullable=True)
    created_by_name = Column(String(100), nullable=False)

    def __repr__(self):
        return f"<GlobalEvent {self.created_by_name}: {self.description[:30]}>"
