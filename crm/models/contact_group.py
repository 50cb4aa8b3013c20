from crm import db
from . import TimestampedModel


class ContactGroup(TimestampedModel):
    __tablename__ = 'contact_groups'

    name = db.Column(db.String(100), nullable=False)
    created_by = db.Column(db.String(36), nullable=True)

    def __repr__(self):
        return f"<ContactGroup {self.name}>"
