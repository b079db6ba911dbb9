# tests/test_tokens.py
from datetime import datetime, timedelta, timezone
import jwt
import pytest
from furniture_backend.authentication.tokens import parse_expires_in, generate_token, decode_token, bearer_token


@pytest.mark.parametrize('value, seconds', [
    ('24h', 86400), ('30m', 1800), ('7d', 604800), ('45s', 45), ('3600', 3600), (120, 120)
])
def test_parse_expires_in(value, seconds):
    assert parse_expires_in(value) == timedelta(seconds=seconds)


def test_parse_expires_in_rejects_garbage():
    with pytest.raises(ValueError):
        parse_expires_in('una hora')


def test_token_claims(app):
    now = datetime(2030, 1, 1, tzinfo=timezone.utc)
    user = {'id': 5, 'email': 'ana@muebles.test', 'rol': 'administrador'}

    with app.app_context():
        token = generate_token(user, now=now)
        claims = jwt.decode(token, options={'verify_signature': False})

    assert claims['sub'] == '5'
    assert claims['rol'] == 'administrador'
    assert claims['iss'] == 'sistema-muebles'
    assert claims['aud'] == 'sistema-muebles-users'
    assert claims['exp'] - claims['iat'] == 86400


def test_token_lifetime_is_configurable(app):
    app.config['JWT_EXPIRES_IN'] = '15m'
    user = {'id': 5, 'email': 'ana@muebles.test', 'rol': 'cliente'}

    with app.app_context():
        claims = decode_token(generate_token(user))

    assert claims['exp'] - claims['iat'] == 900


def test_decode_rejects_wrong_audience(app):
    token = jwt.encode(
        {'sub': '1', 'aud': 'otra-app', 'iss': 'sistema-muebles',
         'exp': datetime.now(timezone.utc) + timedelta(hours=1)},
        app.config['JWT_SECRET'],
        algorithm='HS256'
    )

    with app.app_context():
        with pytest.raises(jwt.InvalidAudienceError):
            decode_token(token)


def test_bearer_token():
    assert bearer_token('Bearer abc.def') == 'abc.def'
    assert bearer_token('bearer abc') == 'abc'
    assert bearer_token('Token abc') is None
    assert bearer_token(None) is None
