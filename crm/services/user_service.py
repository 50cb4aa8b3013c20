# services/user_service.py
from typing import List

from crm import logger, query_cache
from ..auth.provider import AuthProvider, users_table, roles_table
from ..cache import USERS
from ..errors import InvalidInputError, NotFoundError
from ..models.user import ADMIN, ROLES
from ..persistence import dump_record
from ..schemas.user_schemas import UserRecordSchema

user_schema = UserRecordSchema()


class UserService:
    """
    User administration. Only administrators provision accounts and
    assign roles; nobody assigns a role to themselves.
    """

    @staticmethod
    def provision_user(session, email, password, name, role) -> dict:
        """
        Create an account with a role. Used by administrators to add both
        administrators and associates.
        """
        actor = session.require_manage_users()
        if role not in ROLES:
            raise InvalidInputError(f"Invalid role '{role}'", fields={'role': [f"Must be one of {list(ROLES)}"]})

        row = AuthProvider.create_account(email, password, name, role=role)
        query_cache.invalidate('user.provision')
        logger.info(f"User {row['email']} provisioned as {role} by {actor.id}")
        return dump_record(user_schema, dict(row, role=role))

    @staticmethod
    def get_users(session) -> List[dict]:
        """Users newest first, each with its role (absent when none is assigned)"""
        session.require_manage_users()

        def fetch():
            roles = {row['user_id']: row['role'] for row in roles_table.select()}
            rows = users_table.select(order_by='created_at', ascending=False)
            return [dump_record(user_schema, dict(row, role=roles.get(row['id']))) for row in rows]

        return query_cache.get_or_fetch(USERS, fetch)

    @staticmethod
    def set_user_active(session, user_id, is_active) -> dict:
        actor = session.require_manage_users()
        if user_id == actor.id and not is_active:
            raise InvalidInputError("You cannot deactivate your own account")

        row = users_table.update(user_id, {'is_active': bool(is_active)})
        if row is None:
            raise NotFoundError('User', user_id)
        query_cache.invalidate('user.set_active')
        logger.info(f"User {user_id} {'activated' if is_active else 'deactivated'} by {actor.id}")
        return dump_record(user_schema, dict(row, role=AuthProvider.lookup_role(user_id)))


def bootstrap_admin(email, password, name) -> dict:
    """
    Create the first administrator. Refuses once any administrator exists,
    so it cannot be used to escalate an existing account.
    """
    if roles_table.select(role=ADMIN):
        raise InvalidInputError("An administrator already exists")

    row = AuthProvider.create_account(email, password, name, role=ADMIN)
    query_cache.invalidate('user.provision')
    logger.info(f"Bootstrap administrator created: {row['email']}")
    return dump_record(user_schema, dict(row, role=ADMIN))
