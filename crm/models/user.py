# models/user.py
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

from . import BaseModel, TimestampedModel
from .. import db

ADMIN = 'admin'
ASSOCIATE = 'associate'
ROLES = (ADMIN, ASSOCIATE)


class User(UserMixin, TimestampedModel):
    __tablename__ = 'users'

    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(100), nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    last_login = db.Column(db.DateTime)

    @property
    def password(self):
        raise AttributeError('password is not a readable attribute')

    @password.setter
    def password(self, password):
        self.password_hash = generate_password_hash(password)

    def verify_password(self, password):
        return check_password_hash(self.password_hash, password)

    def __repr__(self):
        return f'<User {self.email}>'


class UserRole(BaseModel):
    """
    Role assignment, kept apart from the user row so that a user can never
    grant themselves a role by editing their own profile.
    """
    __tablename__ = 'user_roles'

    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'),
                        nullable=False, unique=True, index=True)
    role = db.Column(db.String(20), nullable=False)

    def __repr__(self):
        return f'<UserRole {self.user_id}={self.role}>'
