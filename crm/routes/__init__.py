from flask import Blueprint

# Sign-in, sign-up and the current session
auth_bp = Blueprint('auth', __name__)

# User administration
users_bp = Blueprint('users', __name__)

# Client management routes
clients_bp = Blueprint('clients', __name__)

# Contact group routes
groups_bp = Blueprint('groups', __name__)

# Orders, timelines and the bin
orders_bp = Blueprint('orders', __name__)

# Call logs
calls_bp = Blueprint('calls', __name__)

# Global event journal
events_bp = Blueprint('events', __name__)

# Import route handlers to register routes
from . import (
    auth,
    users,
    clients,
    groups,
    orders,
    calls,
    events
)
