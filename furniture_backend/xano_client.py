# furniture_backend/xano_client.py
import math
from datetime import datetime, timezone
import requests
from furniture_backend.logging_config import setup_logging

logger = setup_logging('xano')

STATUS_MESSAGES = {
    401: 'Token de autenticación inválido o expirado',
    403: 'No tienes permisos para realizar esta acción',
    404: 'Recurso no encontrado',
}


class XanoError(Exception):
    """Normalised failure of a call to the Xano API.

    ``status`` is the HTTP status of the remote response, or ``None`` when the
    request never got one (connection refused, timeout). ``remote_message`` keeps
    whatever message Xano sent back so callers can inspect it.
    """

    def __init__(self, message, status=None, remote_message=None, data=None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.remote_message = remote_message
        self.data = data


def normalise_error_message(status, remote_message):
    if status in STATUS_MESSAGES:
        return STATUS_MESSAGES[status]
    if status is not None and status >= 500:
        return 'Error interno del servidor'
    return remote_message


class XanoClient:
    def __init__(self, base_url, api_key=None, timeout=10, session=None):
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({'Content-Type': 'application/json'})

    @classmethod
    def from_config(cls, config):
        return cls(
            base_url=config['XANO_API_URL'],
            api_key=config.get('XANO_API_KEY'),
            timeout=config.get('XANO_TIMEOUT', 10)
        )

    def _auth_headers(self, token=None):
        token = token or self.api_key
        if not token:
            return {}
        return {'Authorization': token if token.startswith('Bearer ') else f'Bearer {token}'}

    def _url(self, endpoint):
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def request(self, method, endpoint, params=None, data=None, token=None):
        method = method.upper()
        url = self._url(endpoint)
        headers = self._auth_headers(token)

        logger.debug("Xano API Request", extra={'context': {
            'method': method,
            'url': url,
            'hasAuth': 'Authorization' in headers
        }})

        try:
            response = self.session.request(
                method, url,
                params=params or None,
                json=data if method in ('POST', 'PUT', 'PATCH') else None,
                headers=headers,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error("Error en request a Xano", extra={'context': {
                'method': method, 'url': url, 'error': str(e)
            }})
            raise XanoError(f'No se pudo conectar con Xano: {e}') from e

        if not response.ok:
            payload = self._safe_json(response)
            remote_message = payload.get('message') if isinstance(payload, dict) else None
            remote_message = remote_message or response.reason or 'Error en la petición a Xano'

            logger.error("Error en response de Xano", extra={'context': {
                'status': response.status_code,
                'statusText': response.reason,
                'url': url,
                'method': method,
                'message': remote_message
            }})
            raise XanoError(
                normalise_error_message(response.status_code, remote_message),
                status=response.status_code,
                remote_message=remote_message,
                data=payload
            )

        payload = self._safe_json(response)
        logger.debug("Xano API Response", extra={'context': {
            'status': response.status_code,
            'url': url,
            'dataSize': len(response.content or b'')
        }})
        return payload

    @staticmethod
    def _safe_json(response):
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    def get(self, endpoint, params=None, token=None):
        return self.request('GET', endpoint, params=params, token=token)

    def post(self, endpoint, data=None, token=None):
        return self.request('POST', endpoint, data=data or {}, token=token)

    def put(self, endpoint, data=None, token=None):
        return self.request('PUT', endpoint, data=data or {}, token=token)

    def delete(self, endpoint, token=None):
        return self.request('DELETE', endpoint, token=token)

    def patch(self, endpoint, data=None, token=None):
        return self.request('PATCH', endpoint, data=data or {}, token=token)

    def get_paginated(self, endpoint, page=1, limit=10, params=None, token=None):
        """Fetch one page and reshape Xano's paging fields into ``{data, pagination}``."""
        query = {'page': page, 'per_page': limit}
        query.update(params or {})

        response = self.get(endpoint, params=query, token=token)

        if isinstance(response, dict):
            items = response.get('items', response.get('data', response))
            total = response.get('total', response.get('count'))
            pages = response.get('pages') or math.ceil((total or 0) / limit)
            return {
                'data': items,
                'pagination': {
                    'page': response.get('page') or page,
                    'per_page': response.get('per_page') or limit,
                    'total': total,
                    'pages': pages
                }
            }

        return {
            'data': response,
            'pagination': {'page': page, 'per_page': limit, 'total': None, 'pages': 0}
        }

    def test_connection(self):
        try:
            self.get('/health')
        except XanoError as e:
            logger.error("Error al conectar con Xano", extra={'context': {
                'error': e.message,
                'status': e.status
            }})
            raise

        logger.info("Conexión con Xano establecida exitosamente", extra={'context': {
            'timestamp': datetime.now(timezone.utc).isoformat()
        }})
        return True
