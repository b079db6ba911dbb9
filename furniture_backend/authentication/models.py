# furniture_backend/authentication/models.py
from datetime import datetime
from flask_login import UserMixin
from furniture_backend.init_db import db

ROLE_CUSTOMER = 'cliente'
ROLE_ADMIN = 'administrador'


class User(db.Model):
    __tablename__ = 'usuarios'
    id = db.Column(db.Integer, primary_key=True)
    nombre = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(150), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)
    telefono = db.Column(db.String(20), nullable=True)
    rol = db.Column(db.String(20), nullable=False, default=ROLE_CUSTOMER)
    activo = db.Column(db.Boolean, nullable=False, default=True)
    fecha_registro = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'nombre': self.nombre,
            'email': self.email,
            'telefono': self.telefono,
            'rol': self.rol,
            'activo': self.activo,
            'fecha_registro': self.fecha_registro.isoformat() if self.fecha_registro else None
        }


class TokenUser(UserMixin):
    """The caller behind a verified bearer token. Built from the claims only."""

    def __init__(self, claims):
        self.id = claims['sub']
        self.email = claims.get('email')
        self.rol = claims.get('rol', ROLE_CUSTOMER)
        self.claims = claims

    @property
    def is_admin(self):
        return self.rol == ROLE_ADMIN
