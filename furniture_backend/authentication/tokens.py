# furniture_backend/authentication/tokens.py
import re
from datetime import datetime, timedelta, timezone
import jwt
from flask import current_app

ALGORITHM = 'HS256'

_DURATION_UNITS = {'s': 1, 'm': 60, 'h': 3600, 'd': 86400}


def parse_expires_in(value):
    """Turn ``'24h'``, ``'30m'``, ``'7d'``, ``'45s'`` or a plain number of seconds into a timedelta."""
    if isinstance(value, (int, float)):
        return timedelta(seconds=value)

    match = re.fullmatch(r'\s*(\d+)\s*([smhd]?)\s*', str(value))
    if not match:
        raise ValueError(f"Invalid token lifetime: {value!r}")

    amount, unit = match.groups()
    return timedelta(seconds=int(amount) * _DURATION_UNITS[unit or 's'])


def generate_token(user, now=None):
    config = current_app.config
    now = now or datetime.now(timezone.utc)
    payload = {
        'sub': str(user['id']),
        'email': user['email'],
        'rol': user['rol'],
        'iss': config['JWT_ISSUER'],
        'aud': config['JWT_AUDIENCE'],
        'iat': now,
        'exp': now + parse_expires_in(config['JWT_EXPIRES_IN'])
    }
    return jwt.encode(payload, config['JWT_SECRET'], algorithm=ALGORITHM)


def decode_token(token, verify_exp=True):
    # Raises jwt.ExpiredSignatureError / jwt.InvalidTokenError
    config = current_app.config
    return jwt.decode(
        token,
        config['JWT_SECRET'],
        algorithms=[ALGORITHM],
        audience=config['JWT_AUDIENCE'],
        issuer=config['JWT_ISSUER'],
        options={'verify_exp': verify_exp, 'require': ['sub', 'exp']}
    )


def bearer_token(header_value):
    if not header_value:
        return None
    parts = header_value.split()
    if len(parts) == 2 and parts[0].lower() == 'bearer':
        return parts[1]
    return None
