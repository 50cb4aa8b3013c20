from flask import Flask, current_app, has_app_context
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_cors import CORS
import structlog
from sqlalchemy import event
from sqlalchemy.engine import Engine
from retry import retry
import time

from .cache import QueryCache

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
query_cache = QueryCache()
logger = structlog.get_logger()


# Database connection retry decorator
@retry(tries=3, delay=2, backoff=2)
def init_db_with_retry(app):
    """Initialize database with retry logic"""
    try:
        db.init_app(app)
        # Test connection
        with app.app_context():
            db.engine.connect().close()
        logger.info("Database connection established successfully")
    except Exception as e:
        logger.error(f"Database connection failed: {str(e)}")
        raise


def create_app(config_name):
    """
    Application factory function to create and configure the Flask application

    Args:
        config_name (str): Name of the configuration environment
                           ('development', 'production', 'testing').

    Returns:
        Flask: Configured Flask application instance
    """
    from .config import get_config

    app = Flask(__name__)

    config_class = get_config(config_name)
    app.config.from_object(config_class)

    cors_options = {
        'origins': app.config['CORS_ORIGINS'],
        'methods': ['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS', 'PATCH'],
        'allow_headers': ['Content-Type', 'Authorization', 'Cache-Control', 'Pragma'],
        'supports_credentials': True
    }
    CORS(app, **cors_options)
    logger.debug(f"CORS Origins configured: {app.config['CORS_ORIGINS']}")

    if app.config.get('LOG_TO_STDOUT'):
        _setup_logging(app)

    _configure_database(app)

    init_db_with_retry(app)
    migrate.init_app(app, db, directory=app.config.get('MIGRATIONS_DIR', 'migrations'))
    query_cache.init_app(app)

    _configure_login_manager(app)

    with app.app_context():
        _init_database_models(app)

    _register_blueprints(app)
    _setup_error_handlers(app)

    from .cli import register_commands
    register_commands(app)

    app.logger.info(f"Starting application in {config_name} mode")
    return app


def _register_blueprints(app):
    """
    Register application blueprints

    Args:
        app (Flask): Flask application instance
    """
    from .routes import (
        auth_bp,
        users_bp,
        clients_bp,
        groups_bp,
        orders_bp,
        calls_bp,
        events_bp
    )

    blueprints = [
        (auth_bp, '/auth'),
        (users_bp, '/users'),
        (clients_bp, '/clients'),
        (groups_bp, '/groups'),
        (orders_bp, '/orders'),
        (calls_bp, '/calls'),
        (events_bp, '/events')
    ]

    for blueprint, url_prefix in blueprints:
        app.register_blueprint(blueprint, url_prefix=url_prefix)


def _setup_error_handlers(app):
    """
    Map the CRM error taxonomy and HTTP errors to JSON responses

    Args:
        app (Flask): Flask application instance
    """
    from flask import jsonify
    from werkzeug.exceptions import HTTPException
    from .errors import (
        CRMError,
        InvalidInputError,
        AuthorizationError,
        NotFoundError,
        BackendError
    )

    @app.errorhandler(InvalidInputError)
    def handle_invalid_input(error):
        return jsonify({"error": str(error), "fields": error.fields}), 400

    @app.errorhandler(AuthorizationError)
    def handle_authorization(error):
        status = 401 if error.unauthenticated else 403
        return jsonify({"error": str(error)}), status

    @app.errorhandler(NotFoundError)
    def handle_not_found(error):
        return jsonify({"error": str(error)}), 404

    @app.errorhandler(BackendError)
    def handle_backend(error):
        app.logger.error(f'Backend failure: {error}')
        return jsonify({"error": "Internal server error"}), 500

    @app.errorhandler(CRMError)
    def handle_crm_error(error):
        return jsonify({"error": str(error)}), 400

    @app.errorhandler(404)
    def page_not_found(error):
        app.logger.error(f'Page not found: {error}')
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        app.logger.warning(f'HTTP error {error.code}: {error.description}')
        return jsonify({"error": error.name}), error.code

    @app.errorhandler(500)
    def internal_server_error(error):
        app.logger.error(f'Server Error: {error}')
        db.session.rollback()  # Rollback any pending database changes
        return jsonify({"error": "An unexpected error occurred"}), 500


def _configure_database(app):
    """Configure database specific settings"""
    if 'mysql' in app.config['SQLALCHEMY_DATABASE_URI']:
        app.config['SQLALCHEMY_ENGINE_OPTIONS'] = {
            'pool_size': app.config.get('SQLALCHEMY_POOL_SIZE', 10),
            'pool_recycle': app.config.get('SQLALCHEMY_POOL_RECYCLE', 1800),
            'pool_pre_ping': True,
        }

    # Listeners are global to every engine, so install them once per process
    for identifier, listener in (
            ("connect", _enable_sqlite_foreign_keys),
            ("before_cursor_execute", _before_cursor_execute),
            ("after_cursor_execute", _after_cursor_execute)):
        if not event.contains(Engine, identifier, listener):
            event.listen(Engine, identifier, listener)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # order_events rely on ON DELETE CASCADE when an order is purged
    if 'sqlite' in type(dbapi_connection).__module__:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    conn.info.setdefault('query_start_time', []).append(time.time())


def _after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    total = time.time() - conn.info['query_start_time'].pop()
    threshold = current_app.config.get('SLOW_QUERY_THRESHOLD', 0.5) if has_app_context() else 0.5
    if total > threshold:
        logger.warning(f"Slow query detected: {total:.2f}s\n{statement}")


def _init_database_models(app):
    """Import models and create tables"""
    from .models.user import User, UserRole
    from .models.contact_group import ContactGroup
    from .models.client import Client
    from .models.order import Order, OrderEvent
    from .models.call_log import CallLog
    from .models.global_event import GlobalEvent

    db.create_all()


def _setup_logging(app):
    """Setup stdout logging"""
    import logging
    import sys

    formatter = logging.Formatter(
        '[%(asctime)s] %(levelname)s in %(module)s: %(message)s'
    )

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    stream_handler.setLevel(logging.INFO)

    app.logger.addHandler(stream_handler)
    app.logger.setLevel(app.config.get('LOGGING_LEVEL', logging.INFO))


def _configure_login_manager(app):
    """Configure Flask-Login for cookie sessions"""
    login_manager.init_app(app)
    login_manager.session_protection = "strong"

    app.config.setdefault('REMEMBER_COOKIE_HTTPONLY', True)
    app.config.setdefault('REMEMBER_COOKIE_SAMESITE', 'Lax')

    @login_manager.user_loader
    def load_user(user_id):
        from .models.user import User
        try:
            user = User.get_by_id(user_id)
            if user and user.is_active:
                return user
            return None
        except Exception as e:
            app.logger.error(f"Error loading user {user_id}: {str(e)}")
            return None

    @login_manager.unauthorized_handler
    def unauthorized():
        from flask import jsonify
        return jsonify({
            "error": "Unauthorized",
            "message": "You must be logged in to access this resource"
        }), 401

    app.logger.info("Login manager configured")
