# tests/conftest.py
from datetime import datetime, timedelta
import pytest
from werkzeug.security import generate_password_hash
from furniture_backend.app_factory import create_app
from furniture_backend.init_db import db
from furniture_backend.authentication.models import User, ROLE_ADMIN, ROLE_CUSTOMER
from furniture_backend.authentication.tokens import generate_token
from furniture_backend.catalog.models import CatalogItem


@pytest.fixture
def app():
    app = create_app('furniture_backend.config.TestingConfig')
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


@pytest.fixture
def make_user(app):
    def _make_user(email='cliente@muebles.test', password='secreto123', rol=ROLE_CUSTOMER, activo=True, nombre='Cliente'):
        with app.app_context():
            user = User(
                nombre=nombre,
                email=email,
                password=generate_password_hash(password, method='pbkdf2:sha256'),
                rol=rol,
                activo=activo
            )
            db.session.add(user)
            db.session.commit()
            return user.to_dict()
    return _make_user


@pytest.fixture
def token_for(app):
    def _token_for(user, now=None):
        with app.app_context():
            return generate_token(user, now=now)
    return _token_for


@pytest.fixture
def admin_headers(make_user, token_for):
    admin = make_user(email='admin@muebles.test', rol=ROLE_ADMIN, nombre='Admin')
    return {'Authorization': f'Bearer {token_for(admin)}'}


@pytest.fixture
def customer_headers(make_user, token_for):
    customer = make_user()
    return {'Authorization': f'Bearer {token_for(customer)}'}


@pytest.fixture
def make_item(app):
    created = []

    def _make_item(**fields):
        values = {
            'nombre': f'Producto {len(created) + 1}',
            'tipo': 'silla',
            'precio_base': 100,
            'activo': True,
            # newest first in listings, so space creation times apart
            'fecha_creacion': datetime(2024, 1, 1) + timedelta(minutes=len(created))
        }
        values.update(fields)
        with app.app_context():
            item = CatalogItem(**values)
            db.session.add(item)
            db.session.commit()
            created.append(item.id)
            return item.id
    return _make_item
