# furniture_backend/authentication/views.py
import json
from flask import current_app
from werkzeug.security import generate_password_hash, check_password_hash
from sqlalchemy.exc import OperationalError, IntegrityError
from furniture_backend.init_db import db
from furniture_backend.errors import ApiError, ValidationError, UnauthorizedError, ConflictError
from furniture_backend.xano_client import XanoClient, XanoError
from furniture_backend.authentication.models import User, ROLE_CUSTOMER, ROLE_ADMIN
from furniture_backend.logging_config import setup_logging

logger = setup_logging('auth')


class DatabaseUserBackend:
    """Users stored in the local ``usuarios`` table."""

    def register(self, nombre, email, password, telefono=None):
        if User.query.filter_by(email=email).first():
            raise ConflictError('El correo electrónico ya está registrado')

        user = User(
            nombre=nombre,
            email=email,
            password=generate_password_hash(password, method='pbkdf2:sha256'),
            telefono=telefono,
            rol=ROLE_CUSTOMER
        )
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration for the same email
            db.session.rollback()
            raise ConflictError('El correo electrónico ya está registrado')
        return user.to_dict()

    def authenticate(self, email, password):
        user = User.query.filter_by(email=email).first()
        if not user or not check_password_hash(user.password, password):
            raise UnauthorizedError('Credenciales inválidas. Verifica tu email y contraseña')
        if not user.activo:
            raise UnauthorizedError('La cuenta se encuentra desactivada')
        return user.to_dict()

    def get_user(self, user_id):
        try:
            user = db.session.get(User, int(user_id))
        except (TypeError, ValueError):
            return None
        return user.to_dict() if user else None


class XanoUserBackend:
    """Users managed by the Xano workspace's auth endpoints."""

    def __init__(self, client):
        self.client = client

    @staticmethod
    def _user_record(user):
        return {
            'id': user.get('id'),
            'nombre': user.get('nombre') or user.get('name'),
            'email': user.get('email'),
            'telefono': user.get('telefono'),
            'rol': user.get('rol') or ROLE_CUSTOMER,
            'activo': user.get('activo', True),
            'fecha_registro': user.get('created_at')
        }

    def _user_from_auth(self, response):
        # Some Xano auth endpoints only hand back the authToken
        response = response or {}
        user = response.get('user')
        if not user and response.get('authToken'):
            user = self.client.get('/auth/me', token=response['authToken'])
        return self._user_record(user or {})

    def register(self, nombre, email, password, telefono=None):
        try:
            response = self.client.post('/auth/signup', {
                'nombre': nombre,
                'email': email,
                'password': password,
                'telefono': telefono
            })
        except XanoError as e:
            remote = (e.remote_message or e.message or '').lower()
            if e.status == 409 or 'duplicate' in remote or 'already exists' in remote:
                raise ConflictError('El correo electrónico ya está registrado')
            if e.status == 400:
                raise ValidationError(e.remote_message or 'Datos de registro inválidos')
            logger.error("Error en registro de usuario", extra={'context': {'email': email, 'error': e.message}})
            raise ApiError('Error interno del servidor durante el registro')

        return self._user_from_auth(response)

    def authenticate(self, email, password):
        try:
            response = self.client.post('/auth/login', {'email': email, 'password': password})
        except XanoError as e:
            if e.status in (401, 403):
                raise UnauthorizedError('Credenciales inválidas. Verifica tu email y contraseña')
            if e.status == 404:
                raise UnauthorizedError('Usuario no encontrado. Verifica tu email o regístrate')
            if e.status == 400:
                raise ValidationError('Datos de inicio de sesión inválidos')
            logger.error("Error en inicio de sesión", extra={'context': {'email': email, 'error': e.message}})
            raise UnauthorizedError('Error durante el inicio de sesión. Intenta nuevamente')

        user = self._user_from_auth(response)
        if not user['activo']:
            raise UnauthorizedError('La cuenta se encuentra desactivada')
        return user

    def get_user(self, user_id):
        try:
            user = self.client.get(f'/user/{user_id}')
        except XanoError as e:
            if e.status == 404:
                return None
            raise
        return self._user_record(user) if user else None


def get_xano_client():
    client = current_app.extensions.get('xano_client')
    if client is None:
        client = XanoClient.from_config(current_app.config)
        current_app.extensions['xano_client'] = client
    return client


def get_user_backend():
    backend = current_app.extensions.get('user_backend')
    if backend is not None:
        return backend

    if current_app.config['USER_BACKEND'] == 'xano':
        backend = XanoUserBackend(get_xano_client())
    else:
        backend = DatabaseUserBackend()
    current_app.extensions['user_backend'] = backend
    return backend


def public_user(user, include_registration=False):
    data = {
        'id': user['id'],
        'nombre': user['nombre'],
        'email': user['email'],
        'telefono': user['telefono'],
        'rol': user['rol'] or ROLE_CUSTOMER
    }
    if include_registration:
        data['fecha_registro'] = user.get('fecha_registro')
    return data


def create_admin_users(json_path=None):
    json_path = json_path or current_app.config.get('ADMIN_USERS_FILE')
    if not json_path:
        return

    try:
        with open(json_path, 'r') as f:
            admin_data = json.load(f)

        for admin_details in admin_data.get('admins', []):
            # Logins look users up by the lowercased address
            email = admin_details['email'].strip().lower()
            admin_user = User.query.filter_by(email=email).first()
            if admin_user is None:
                admin_user = User(
                    nombre=admin_details['nombre'],
                    email=email,
                    password=generate_password_hash(admin_details['password'], method='pbkdf2:sha256'),
                    telefono=admin_details.get('telefono'),
                    rol=ROLE_ADMIN
                )
                db.session.add(admin_user)
                logger.info(f"Admin user '{email}' created successfully.")
            else:
                logger.info(f"Admin user '{email}' already exists.")

        db.session.commit()
    except FileNotFoundError:
        logger.warning(f"Admin user JSON file not found: {json_path}")
    except (json.JSONDecodeError, KeyError) as e:
        logger.error(f"Error decoding the admin user JSON file: {e}")
    except OperationalError as e:
        db.session.rollback()
        logger.error(f"OperationalError when creating admin users: {e}")
