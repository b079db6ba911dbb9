# furniture_backend/schemas.py
from pydantic import ValidationError as PydanticValidationError
from furniture_backend.errors import ValidationError


def first_error_message(error):
    details = error.errors()
    if not details:
        return 'Datos inválidos'
    message = details[0].get('msg', 'Datos inválidos')
    # pydantic prefixes messages raised from validators
    for prefix in ('Value error, ', 'Assertion failed, '):
        if message.startswith(prefix):
            return message[len(prefix):]
    return message


def validate_payload(schema, data):
    """Validate ``data`` against a pydantic ``schema``, raising our 400 on the first failing rule."""
    if data is None:
        raise ValidationError('El cuerpo de la petición debe ser JSON')
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(first_error_message(e)) from e
