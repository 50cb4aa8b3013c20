# models/client.py

from crm import db
from . import TimestampedModel


class Client(TimestampedModel):
    __tablename__ = 'clients'

    full_name = db.Column(db.String(200), nullable=False)
    first_name = db.Column(db.String(100), nullable=True)
    middle_name = db.Column(db.String(100), nullable=True)
    last_name = db.Column(db.String(100), nullable=True)
    age = db.Column(db.Integer, nullable=True)
    phones = db.Column(db.JSON, nullable=False, default=list)

    address = db.Column(db.Text, nullable=True)
    city = db.Column(db.String(100), nullable=True)
    village = db.Column(db.String(100), nullable=True)
    block = db.Column(db.String(100), nullable=True)

    profession = db.Column(db.String(100), nullable=True)
    qualifications = db.Column(db.Text, nullable=True)
    email = db.Column(db.String(120), nullable=True)
    company = db.Column(db.String(200), nullable=True)
    profile_photo = db.Column(db.Text, nullable=True)

    # No foreign key: deleting a group leaves the reference dangling
    group_id = db.Column(db.String(36), nullable=True, index=True)
    created_by = db.Column(db.String(36), nullable=True)

    def __repr__(self):
        return f"<Client {self.full_name}>"
