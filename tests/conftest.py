import pytest

from crm import create_app, db
from crm.auth import Actor, AuthSession, ANONYMOUS
from crm.auth.provider import AuthProvider
from crm.models.user import ADMIN, ASSOCIATE

PASSWORD = 'password123'


@pytest.fixture
def app():
    app = create_app('testing')
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app_context(app):
    # Route tests stay outside this so each request gets its own ``g``
    with app.app_context():
        yield


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_session(app_context):
    return AuthSession(actor=Actor(id='admin-1', display_name='Admin', role=ADMIN))


@pytest.fixture
def associate_session(app_context):
    return AuthSession(actor=Actor(id='assoc-1', display_name='Associate', role=ASSOCIATE))


@pytest.fixture
def anonymous_session(app_context):
    return ANONYMOUS


def _create_user(email, name, role, password):
    return AuthProvider.create_account(email, password, name, role=role)


@pytest.fixture
def make_user(app_context):
    def _make_user(email, name='Test User', role=None, password=PASSWORD):
        return _create_user(email, name, role, password)
    return _make_user


@pytest.fixture
def register_user(app):
    def _register_user(email, name='Test User', role=None, password=PASSWORD):
        with app.app_context():
            return _create_user(email, name, role, password)
    return _register_user


@pytest.fixture
def signed_in_client(app, register_user):
    def _signed_in_client(email, name='Test User', role=None):
        user = register_user(email, name=name, role=role)
        http_client = app.test_client()
        res = http_client.post('/auth/sign-in', json={'email': email, 'password': PASSWORD})
        assert res.status_code == 200, res.get_data(as_text=True)
        http_client.user = user
        return http_client
    return _signed_in_client


@pytest.fixture
def admin_client(signed_in_client):
    return signed_in_client('admin@example.com', name='Admin', role=ADMIN)


@pytest.fixture
def associate_client(signed_in_client):
    return signed_in_client('associate@example.com', name='Associate', role=ASSOCIATE)
