# furniture_backend/errors.py
from flask import jsonify, request
from werkzeug.exceptions import HTTPException
from furniture_backend.logging_config import setup_logging

logger = setup_logging('errors')


class ApiError(Exception):
    status_code = 500
    default_message = 'Error interno del servidor'

    def __init__(self, message=None, status_code=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'error': type(self).__name__, 'message': self.message}


class ValidationError(ApiError):
    status_code = 400
    default_message = 'Datos inválidos'


class UnauthorizedError(ApiError):
    status_code = 401
    default_message = 'No autorizado'


class ForbiddenError(ApiError):
    status_code = 403
    default_message = 'No tienes permisos para realizar esta acción'


class NotFoundError(ApiError):
    status_code = 404
    default_message = 'Recurso no encontrado'


class ConflictError(ApiError):
    status_code = 409
    default_message = 'El recurso ya existe'


def _request_context(status):
    return {
        'method': request.method,
        'path': request.path,
        'ip': request.remote_addr,
        'status': status,
    }


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(error):
        logger.warning(error.message, extra={'context': _request_context(error.status_code)})
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        logger.warning(error.description, extra={'context': _request_context(error.code)})
        return jsonify({'error': error.name, 'message': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.error(f"Unhandled error: {error}", exc_info=True, extra={'context': _request_context(500)})
        return jsonify({'error': 'InternalServerError', 'message': 'Error interno del servidor'}), 500
