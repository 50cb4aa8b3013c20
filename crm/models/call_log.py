from sqlalchemy import Column, String, DateTime, Integer, Text
from . import BaseModel


class CallLog(BaseModel):
    """
    A finished phone call with a client. ``client_name`` is copied at write
    time so the log still reads correctly after the client is renamed or
    removed.
    """

    __tablename__ = 'call_logs'

    client_id = Column(String(36), nullable=False, index=True)
    client_name = Column(String(200), nullable=False)
    phone = Column(String(50), nullable=False)
    started_at = Column(DateTime, nullable=False)
    ended_at = Column(DateTime, nullable=True)
    duration_sec = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    recording_mime = Column(String(100), nullable=True)
    recording_data = Column(Text, nullable=True)
    created_by = Column(String(36), nullable=True)

    def __repr__(self):
        return f"<CallLog {self.client_name} {self.phone}>"
