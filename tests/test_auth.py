# tests/test_auth.py
import json
from datetime import datetime, timedelta, timezone
import jwt
from furniture_backend.init_db import db
from furniture_backend.authentication.models import User, ROLE_ADMIN
from furniture_backend.authentication.tokens import decode_token
from furniture_backend.authentication.views import create_admin_users


def registration(**overrides):
    data = {
        'nombre': 'Ana Pérez',
        'email': 'ana@muebles.test',
        'password': 'secreto123',
        'password_confirmation': 'secreto123',
        'telefono': '+56911112222'
    }
    data.update(overrides)
    return data


def test_register_issues_valid_token(app, client):
    response = client.post('/usuarios/registrar', json=registration())

    assert response.status_code == 201
    body = response.get_json()
    assert body['usuario']['email'] == 'ana@muebles.test'
    assert body['usuario']['rol'] == 'cliente'
    assert body['usuario']['fecha_registro'] is not None

    with app.app_context():
        claims = decode_token(body['token'])
    assert claims['sub'] == str(body['usuario']['id'])
    assert claims['email'] == 'ana@muebles.test'
    assert claims['rol'] == 'cliente'


def test_register_stores_hashed_password(app, client):
    client.post('/usuarios/registrar', json=registration())

    with app.app_context():
        user = User.query.filter_by(email='ana@muebles.test').one()
        assert user.password != 'secreto123'
        assert user.password.startswith('pbkdf2:sha256')


def test_register_duplicate_email_conflicts(client):
    assert client.post('/usuarios/registrar', json=registration()).status_code == 201

    response = client.post('/usuarios/registrar', json=registration(nombre='Otra Ana'))

    assert response.status_code == 409
    assert response.get_json()['message'] == 'El correo electrónico ya está registrado'


def test_register_password_mismatch(client):
    response = client.post('/usuarios/registrar', json=registration(password_confirmation='distinta1'))

    assert response.status_code == 400
    assert response.get_json()['message'] == 'Las contraseñas no coinciden'


def test_register_rejects_invalid_fields(client):
    bad_email = client.post('/usuarios/registrar', json=registration(email='no-es-un-correo'))
    short_name = client.post('/usuarios/registrar', json=registration(nombre='A'))
    short_password = client.post('/usuarios/registrar', json=registration(password='123', password_confirmation='123'))
    missing = client.post('/usuarios/registrar', json={'email': 'x@y.cl'})

    assert bad_email.status_code == 400
    assert bad_email.get_json()['message'] == 'Debe ser un correo electrónico válido'
    assert short_name.get_json()['message'] == 'El nombre debe tener al menos 2 caracteres'
    assert short_password.get_json()['message'] == 'La contraseña debe tener al menos 6 caracteres'
    assert missing.get_json()['message'] == 'El nombre es obligatorio'


def test_register_requires_json_body(client):
    response = client.post('/usuarios/registrar', data='nombre=Ana', content_type='text/plain')

    assert response.status_code == 400


def test_login_returns_token(app, client, make_user):
    user = make_user()

    response = client.post('/login', json={'email': 'cliente@muebles.test', 'password': 'secreto123'})

    assert response.status_code == 200
    body = response.get_json()
    assert body['usuario']['id'] == user['id']
    with app.app_context():
        assert decode_token(body['token'])['sub'] == str(user['id'])


def test_login_is_case_insensitive_on_email(client, make_user):
    make_user()

    response = client.post('/login', json={'email': 'Cliente@Muebles.test', 'password': 'secreto123'})

    assert response.status_code == 200


def test_login_wrong_password(client, make_user):
    make_user()

    response = client.post('/login', json={'email': 'cliente@muebles.test', 'password': 'incorrecta'})

    assert response.status_code == 401


def test_login_unknown_email(client):
    response = client.post('/login', json={'email': 'nadie@muebles.test', 'password': 'secreto123'})

    assert response.status_code == 401


def test_login_inactive_account(client, make_user):
    make_user(activo=False)

    response = client.post('/login', json={'email': 'cliente@muebles.test', 'password': 'secreto123'})

    assert response.status_code == 401


def test_login_missing_password(client):
    response = client.post('/login', json={'email': 'cliente@muebles.test'})

    assert response.status_code == 400
    assert response.get_json()['message'] == 'La contraseña es obligatoria'


def test_logout(client):
    response = client.post('/logout')

    assert response.status_code == 200
    assert response.get_json()['message'] == 'Sesión cerrada exitosamente'


def test_refresh_accepts_expired_token(app, client, make_user, token_for):
    user = make_user()
    expired = token_for(user, now=datetime.now(timezone.utc) - timedelta(days=2))

    response = client.post('/refresh-token', json={'token': expired})

    assert response.status_code == 200
    body = response.get_json()
    assert body['expiresIn'] == '24h'
    with app.app_context():
        assert decode_token(body['token'])['sub'] == str(user['id'])


def test_refresh_rejects_forged_token(client, make_user):
    user = make_user()
    forged = jwt.encode(
        {'sub': str(user['id']), 'rol': ROLE_ADMIN, 'iss': 'sistema-muebles', 'aud': 'sistema-muebles-users',
         'exp': datetime.now(timezone.utc) + timedelta(hours=1)},
        'otra-clave',
        algorithm='HS256'
    )

    response = client.post('/refresh-token', json={'token': forged})

    assert response.status_code == 401
    assert response.get_json()['message'] == 'Token inválido para renovación'


def test_refresh_requires_token(client):
    response = client.post('/refresh-token', json={})

    assert response.status_code == 400


def test_refresh_rejects_non_object_body(client):
    assert client.post('/refresh-token', json=['x']).status_code == 400
    assert client.post('/refresh-token', json={'token': 123}).status_code == 400


def test_refresh_rejects_inactive_user(app, client, make_user, token_for):
    user = make_user()
    token = token_for(user)
    with app.app_context():
        db.session.get(User, user['id']).activo = False
        db.session.commit()

    response = client.post('/refresh-token', json={'token': token})

    assert response.status_code == 401


def test_verify_token_valid(client, make_user, token_for):
    token = token_for(make_user())

    response = client.get('/verify-token', headers={'Authorization': f'Bearer {token}'})

    assert response.status_code == 200
    body = response.get_json()
    assert body['valid'] is True
    assert datetime.fromisoformat(body['expiresAt']) > datetime.now(timezone.utc)


def test_verify_token_missing_header(client):
    response = client.get('/verify-token')

    assert response.status_code == 401
    assert response.get_json() == {'valid': False, 'message': 'Token no proporcionado'}


def test_verify_token_expired(client, make_user, token_for):
    token = token_for(make_user(), now=datetime.now(timezone.utc) - timedelta(days=2))

    response = client.get('/verify-token', headers={'Authorization': f'Bearer {token}'})

    assert response.status_code == 401
    assert response.get_json()['message'] == 'Token expirado'


def test_verify_token_garbage(client):
    response = client.get('/verify-token', headers={'Authorization': 'Bearer no.es.jwt'})

    assert response.status_code == 401
    assert response.get_json()['message'] == 'Token inválido'


def test_verify_token_inactive_user(app, client, make_user, token_for):
    user = make_user(activo=False)
    token = token_for(user)

    response = client.get('/verify-token', headers={'Authorization': f'Bearer {token}'})

    assert response.status_code == 401
    assert response.get_json()['message'] == 'Usuario no válido'


def test_create_admin_users_from_file(app, tmp_path):
    admin_file = tmp_path / 'admins.json'
    admin_file.write_text(json.dumps({'admins': [
        {'nombre': 'Admin', 'email': 'root@muebles.test', 'password': 'clave-admin'}
    ]}))

    with app.app_context():
        create_admin_users(str(admin_file))
        create_admin_users(str(admin_file))

        admins = User.query.filter_by(email='root@muebles.test').all()
        assert len(admins) == 1
        assert admins[0].rol == ROLE_ADMIN


def test_create_admin_users_missing_file(app, tmp_path):
    with app.app_context():
        create_admin_users(str(tmp_path / 'missing.json'))

        assert User.query.count() == 0


def test_seeded_admin_email_is_normalised(app, client, tmp_path):
    admin_file = tmp_path / 'admins.json'
    admin_file.write_text(json.dumps({'admins': [
        {'nombre': 'Admin', 'email': ' Admin@Muebles.test ', 'password': 'secreto123'}
    ]}))
    with app.app_context():
        create_admin_users(str(admin_file))
        assert User.query.filter_by(email='admin@muebles.test').count() == 1

    response = client.post('/login', json={'email': 'Admin@Muebles.test', 'password': 'secreto123'})

    assert response.status_code == 200
    assert response.get_json()['usuario']['rol'] == ROLE_ADMIN
