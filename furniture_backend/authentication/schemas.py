# furniture_backend/authentication/schemas.py
import re
from typing import Optional
from pydantic import BaseModel, field_validator, model_validator

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _check_email(value, max_length=None):
    if not isinstance(value, str) or not EMAIL_PATTERN.match(value):
        raise ValueError('Debe ser un correo electrónico válido')
    if max_length and len(value) > max_length:
        raise ValueError(f'El correo no puede exceder {max_length} caracteres')
    return value.strip().lower()


class RegisterRequest(BaseModel):
    nombre: str
    email: str
    password: str
    password_confirmation: str
    telefono: Optional[str] = None

    @model_validator(mode='before')
    @classmethod
    def require_fields(cls, data):
        if isinstance(data, dict):
            messages = {
                'nombre': 'El nombre es obligatorio',
                'email': 'El correo es obligatorio',
                'password': 'La contraseña es obligatoria',
                'password_confirmation': 'La confirmación de contraseña es obligatoria',
            }
            for field, message in messages.items():
                if data.get(field) in (None, ''):
                    raise ValueError(message)
        return data

    @field_validator('nombre')
    @classmethod
    def check_nombre(cls, value):
        value = value.strip()
        if len(value) < 2:
            raise ValueError('El nombre debe tener al menos 2 caracteres')
        if len(value) > 100:
            raise ValueError('El nombre no puede exceder 100 caracteres')
        return value

    @field_validator('email')
    @classmethod
    def check_email(cls, value):
        return _check_email(value, max_length=150)

    @field_validator('password')
    @classmethod
    def check_password(cls, value):
        if len(value) < 6:
            raise ValueError('La contraseña debe tener al menos 6 caracteres')
        if len(value) > 100:
            raise ValueError('La contraseña no puede exceder 100 caracteres')
        return value

    @field_validator('telefono')
    @classmethod
    def check_telefono(cls, value):
        if value is not None and len(value) > 20:
            raise ValueError('El teléfono no puede exceder 20 caracteres')
        return value or None

    @model_validator(mode='after')
    def passwords_match(self):
        if self.password != self.password_confirmation:
            raise ValueError('Las contraseñas no coinciden')
        return self


class LoginRequest(BaseModel):
    email: str
    password: str

    @model_validator(mode='before')
    @classmethod
    def require_fields(cls, data):
        if isinstance(data, dict):
            if not data.get('email'):
                raise ValueError('El correo es obligatorio')
            if not data.get('password'):
                raise ValueError('La contraseña es obligatoria')
        return data

    @field_validator('email')
    @classmethod
    def check_email(cls, value):
        return _check_email(value)
