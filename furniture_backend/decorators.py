# furniture_backend/decorators.py
from functools import wraps
from flask_login import current_user
from furniture_backend.errors import ForbiddenError


def admin_required(f):
    # Stack under @login_required so anonymous callers get a 401 first
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not getattr(current_user, 'is_admin', False):
            raise ForbiddenError('Acceso denegado. Se requieren permisos de administrador')
        return f(*args, **kwargs)
    return decorated_function


def caller_is_admin():
    return current_user.is_authenticated and getattr(current_user, 'is_admin', False)
