# furniture_backend/config.py
import os
import binascii


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or binascii.hexlify(os.urandom(24)).decode()

    BASE_DIR = os.path.abspath(os.path.dirname(__file__))

    DATABASE_PATH = os.path.join(BASE_DIR, 'catalogo.db')

    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', f'sqlite:///{DATABASE_PATH}')

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT
    JWT_SECRET = os.environ.get('JWT_SECRET') or SECRET_KEY
    JWT_EXPIRES_IN = os.environ.get('JWT_EXPIRES_IN', '24h')
    JWT_ISSUER = os.environ.get('JWT_ISSUER', 'sistema-muebles')
    JWT_AUDIENCE = os.environ.get('JWT_AUDIENCE', 'sistema-muebles-users')

    # Where users live: 'database' or 'xano'
    USER_BACKEND = os.environ.get('USER_BACKEND', 'database')

    XANO_API_URL = os.environ.get('XANO_API_URL', 'https://your-workspace.xano.io/api:version')
    XANO_API_KEY = os.environ.get('XANO_API_KEY')
    XANO_TIMEOUT = float(os.environ.get('XANO_TIMEOUT', 10))

    ADMIN_USERS_FILE = os.environ.get('ADMIN_USERS_FILE', os.path.join(BASE_DIR, 'admin_users.json'))

    CATALOG_DEFAULT_LIMIT = 12
    CATALOG_MAX_LIMIT = 100


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    JWT_SECRET = 'test-jwt-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    USER_BACKEND = 'database'
    XANO_API_URL = 'https://xano.test/api:v1'
    XANO_API_KEY = None
    ADMIN_USERS_FILE = None
