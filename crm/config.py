import os
from datetime import timedelta


def _env_flag(name, default='false'):
    return os.environ.get(name, default).lower() in ['true', 'on', '1']


class BaseConfig:
    """
    Base configuration class using environment variables
    """

    # Application settings
    APP_NAME = os.environ.get('APP_NAME', 'Connect CRM')

    # Secret Key
    SECRET_KEY = os.environ.get('SECRET_KEY', 'fallback-secret-key-for-development')

    # Security settings
    SESSION_COOKIE_SECURE = _env_flag('SESSION_COOKIE_SECURE', 'true')
    SESSION_COOKIE_HTTPONLY = _env_flag('SESSION_COOKIE_HTTPONLY', 'true')
    SESSION_COOKIE_SAMESITE = os.environ.get('SESSION_COOKIE_SAMESITE', 'Lax')
    REMEMBER_COOKIE_DURATION = timedelta(days=14)

    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')

    # Logging Configuration
    LOG_TO_STDOUT = _env_flag('LOG_TO_STDOUT')
    LOGGING_LEVEL = os.environ.get('LOGGING_LEVEL', 'INFO').upper()

    # Order bin policy
    BIN_REQUIRES_DELETE = _env_flag('BIN_REQUIRES_DELETE')
    ORDER_BIN_ACCEPTS_EVENTS = _env_flag('ORDER_BIN_ACCEPTS_EVENTS')

    # Read-through cache for entity lists
    QUERY_CACHE_ENABLED = _env_flag('QUERY_CACHE_ENABLED', 'true')

    # Call recordings are stored inline as base64 text
    MAX_RECORDING_BYTES = int(os.environ.get('MAX_RECORDING_BYTES', str(10 * 1024 * 1024)))
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', str(32 * 1024 * 1024)))


class DatabaseConfig:
    """
    Database configuration with environment variable support
    """
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SQLALCHEMY_POOL_SIZE = int(os.environ.get('DATABASE_POOL_SIZE', 10))
    SQLALCHEMY_POOL_RECYCLE = int(os.environ.get('DATABASE_POOL_RECYCLE', 1800))  # 30 minutes
    SQLALCHEMY_ECHO = _env_flag('SQLALCHEMY_ECHO')
    SLOW_QUERY_THRESHOLD = float(os.environ.get('SLOW_QUERY_THRESHOLD', 0.5))  # In seconds

    @staticmethod
    def get_database_uri(config_name):
        """
        Generate database URI based on configuration environment

        Args:
            config_name: Name of the configuration environment
        Returns:
            str: Database connection URI
        """
        # For testing, always use in-memory SQLite
        if config_name == 'testing':
            return 'sqlite:///:memory:'

        db_url = os.environ.get('DATABASE_URL')
        if db_url:
            return db_url

        db_user = os.environ.get('DATABASE_USER')
        db_password = os.environ.get('DATABASE_PASSWORD')
        db_host = os.environ.get('DATABASE_HOST', 'localhost')
        db_port = os.environ.get('DATABASE_PORT', '3306')  # Default MySQL port
        db_name = os.environ.get('DATABASE_NAME', 'connect_crm')

        if all([db_user, db_password, db_host, db_name]):
            return f'mysql+pymysql://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}'

        default_db_path = os.path.join(
            os.path.abspath(os.path.dirname(__file__)),
            '..',
            'connect_crm.db'
        )
        return f'sqlite:///{default_db_path}'


class DevelopmentConfig(BaseConfig, DatabaseConfig):
    """
    Development-specific configuration
    """
    DEBUG = True
    SESSION_COOKIE_SECURE = False
    SQLALCHEMY_DATABASE_URI = DatabaseConfig.get_database_uri('development')


class ProductionConfig(BaseConfig, DatabaseConfig):
    """
    Production-specific configuration
    """
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = DatabaseConfig.get_database_uri('production')


class TestingConfig(BaseConfig, DatabaseConfig):
    """
    Testing-specific configuration
    """
    TESTING = True
    SESSION_COOKIE_SECURE = False
    SQLALCHEMY_ECHO = False
    SQLALCHEMY_DATABASE_URI = DatabaseConfig.get_database_uri('testing')


def get_config(config_name):
    """
    Factory function to return the appropriate configuration class

    :param config_name: Name of the configuration ('development', 'production', 'testing')
    :return: Configuration class
    """
    config_mapping = {
        'development': DevelopmentConfig,
        'production': ProductionConfig,
        'testing': TestingConfig
    }

    return config_mapping.get(config_name.lower(), DevelopmentConfig)
