# furniture_backend/authentication/routes.py
from datetime import datetime, timezone
import jwt
from flask import Blueprint, jsonify, request, current_app
from furniture_backend.errors import ValidationError, UnauthorizedError
from furniture_backend.schemas import validate_payload
from furniture_backend.logging_config import setup_logging
from furniture_backend.authentication.schemas import RegisterRequest, LoginRequest
from furniture_backend.authentication.tokens import generate_token, decode_token, bearer_token
from furniture_backend.authentication.views import get_user_backend, public_user


auth_bp = Blueprint('auth', __name__)

logger = setup_logging('auth')


@auth_bp.route('/usuarios/registrar', methods=['POST'])
def register():
    payload = validate_payload(RegisterRequest, request.get_json(silent=True))

    user = get_user_backend().register(
        nombre=payload.nombre,
        email=payload.email,
        password=payload.password,
        telefono=payload.telefono
    )
    token = generate_token(user)

    logger.info("Usuario registrado exitosamente", extra={'context': {
        'userId': user['id'],
        'email': user['email'],
        'ip': request.remote_addr
    }})

    return jsonify({
        'message': 'Usuario registrado exitosamente',
        'token': token,
        'usuario': public_user(user, include_registration=True)
    }), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    payload = validate_payload(LoginRequest, request.get_json(silent=True))

    user = get_user_backend().authenticate(payload.email, payload.password)
    token = generate_token(user)

    logger.info("Usuario inició sesión", extra={'context': {
        'userId': user['id'],
        'email': user['email'],
        'ip': request.remote_addr
    }})

    return jsonify({
        'message': 'Inicio de sesión exitoso',
        'token': token,
        'usuario': public_user(user)
    }), 200


@auth_bp.route('/logout', methods=['POST'])
def logout():
    # Tokens are stateless; nothing to revoke server-side
    logger.info("Usuario cerró sesión", extra={'context': {
        'ip': request.remote_addr,
        'userAgent': request.headers.get('User-Agent')
    }})
    return jsonify({'message': 'Sesión cerrada exitosamente'}), 200


@auth_bp.route('/refresh-token', methods=['POST'])
def refresh_token():
    data = request.get_json(silent=True)
    token = data.get('token') if isinstance(data, dict) else None

    if not token or not isinstance(token, str):
        raise ValidationError('Token requerido para renovación')

    # Expiry is not checked here; signature, issuer and audience still are
    try:
        claims = decode_token(token, verify_exp=False)
    except jwt.InvalidTokenError:
        raise UnauthorizedError('Token inválido para renovación')

    user = get_user_backend().get_user(claims['sub'])
    if not user or not user['activo']:
        raise UnauthorizedError('Usuario no válido para renovación de token')

    new_token = generate_token(user)

    logger.info("Token renovado", extra={'context': {
        'userId': user['id'],
        'email': user['email'],
        'ip': request.remote_addr
    }})

    return jsonify({
        'message': 'Token renovado exitosamente',
        'token': new_token,
        'expiresIn': current_app.config['JWT_EXPIRES_IN']
    }), 200


@auth_bp.route('/verify-token', methods=['GET'])
def verify_token():
    auth_header = request.headers.get('Authorization')

    if not auth_header:
        return jsonify({'valid': False, 'message': 'Token no proporcionado'}), 401

    token = bearer_token(auth_header)
    try:
        if not token:
            raise jwt.InvalidTokenError('Malformed Authorization header')
        claims = decode_token(token)
    except jwt.ExpiredSignatureError:
        return jsonify({'valid': False, 'message': 'Token expirado'}), 401
    except jwt.InvalidTokenError:
        return jsonify({'valid': False, 'message': 'Token inválido'}), 401

    user = get_user_backend().get_user(claims['sub'])
    if not user or not user['activo']:
        return jsonify({'valid': False, 'message': 'Usuario no válido'}), 401

    return jsonify({
        'valid': True,
        'message': 'Token válido',
        'expiresAt': datetime.fromtimestamp(claims['exp'], timezone.utc).isoformat()
    }), 200
