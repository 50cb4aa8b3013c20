# auth/provider.py
from flask_login import current_user, login_user, logout_user

from crm import db, logger, query_cache
from .access import Actor, AuthSession, ANONYMOUS
from ..errors import AuthorizationError, InvalidInputError
from ..models import new_id, utcnow
from ..models.user import User, UserRole
from ..persistence import TableAccessor, backend_call

users_table = TableAccessor(User)
roles_table = TableAccessor(UserRole)


class AuthProvider:
    """
    Sign-in/sign-up on top of Flask-Login cookie sessions. Roles are looked
    up in ``user_roles`` by user id; signing up never assigns one.
    """

    @staticmethod
    def lookup_role(user_id):
        rows = roles_table.select(user_id=user_id)
        return rows[0]['role'] if rows else None

    @staticmethod
    def actor_for(user_id, name):
        return Actor(id=user_id, display_name=name or 'User', role=AuthProvider.lookup_role(user_id))

    @staticmethod
    def get_session() -> AuthSession:
        """Session of the current request, anonymous when nobody is signed in"""
        if not current_user or not current_user.is_authenticated:
            return ANONYMOUS
        return AuthSession(actor=AuthProvider.actor_for(current_user.id, current_user.name))

    @staticmethod
    def get_current_actor():
        return AuthProvider.get_session().actor

    @staticmethod
    def sign_in(email, password, remember=False) -> AuthSession:
        email = (email or '').strip().lower()
        with backend_call("sign in"):
            user = User.query.filter_by(email=email).first()

        if user is None or not user.verify_password(password or ''):
            logger.warning(f"Failed sign-in for {email}")
            raise AuthorizationError("Invalid email or password", unauthenticated=True)
        if not user.is_active:
            logger.warning(f"Sign-in refused for deactivated user {email}")
            raise AuthorizationError("This account has been deactivated", unauthenticated=True)

        login_user(user, remember=remember)
        users_table.update(user.id, {'last_login': utcnow()})
        query_cache.invalidate('user.sign_in')
        logger.info(f"User signed in: {email}")
        return AuthSession(actor=AuthProvider.actor_for(user.id, user.name))

    @staticmethod
    def create_account(email, password, name, role=None):
        """
        Insert a user and, when ``role`` is given, its role assignment in a
        single commit, so an account never exists without the role it was
        created with. Returns the new user row.
        """
        email = (email or '').strip().lower()
        name = (name or '').strip()
        if not email or not password or not name:
            raise InvalidInputError("Email, password and name are required")

        if users_table.select(email=email):
            raise InvalidInputError("An account with this email already exists",
                                    fields={'email': ['Already registered']})

        user = User(id=new_id(), email=email, name=name)
        user.password = password
        with backend_call("create account"):
            db.session.add(user)
            if role:
                # user row first, user_roles.user_id references it
                db.session.flush()
                db.session.add(UserRole(user_id=user.id, role=role))
            db.session.commit()
            return user.to_row()

    @staticmethod
    def sign_up(email, password, name):
        """
        Register a user without a role. Returns the new user row.
        """
        row = AuthProvider.create_account(email, password, name)
        query_cache.invalidate('user.sign_up')
        logger.info(f"User signed up: {row['email']}")
        return row

    @staticmethod
    def sign_out():
        if current_user and current_user.is_authenticated:
            logger.info(f"User signed out: {current_user.email}")
        logout_user()
