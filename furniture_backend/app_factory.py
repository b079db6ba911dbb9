# furniture_backend/app_factory.py
import jwt
from flask import Flask, g, jsonify, request
from flask_login import LoginManager
from sqlalchemy import text
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from furniture_backend.init_db import db
from furniture_backend.errors import register_error_handlers
from furniture_backend.logging_config import setup_logging
from furniture_backend.xano_client import XanoClient, XanoError
from furniture_backend.authentication.models import TokenUser
from furniture_backend.authentication.tokens import decode_token, bearer_token
from furniture_backend.authentication.views import create_admin_users

logger = setup_logging('app')


def create_app(config_class='furniture_backend.config.Config'):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.json.ensure_ascii = False
    app.json.sort_keys = False

    db.init_app(app)
    app.extensions['xano_client'] = XanoClient.from_config(app.config)

    login_manager = LoginManager()
    login_manager.init_app(app)

    @login_manager.request_loader
    def load_user_from_request(req):
        token = bearer_token(req.headers.get('Authorization'))
        if not token:
            return None
        try:
            return TokenUser(decode_token(token))
        except jwt.ExpiredSignatureError:
            g.auth_error = 'Token expirado'
        except jwt.InvalidTokenError:
            g.auth_error = 'Token inválido'
        return None

    @login_manager.unauthorized_handler
    def unauthorized():
        message = g.get('auth_error', 'Token de acceso requerido')
        logger.warning(message, extra={'context': {
            'method': request.method,
            'path': request.path,
            'ip': request.remote_addr,
            'status': 401
        }})
        return jsonify({'error': 'UnauthorizedError', 'message': message}), 401

    register_error_handlers(app)

    from furniture_backend.authentication.routes import auth_bp as auth_blueprint
    app.register_blueprint(auth_blueprint)

    from furniture_backend.catalog.routes import catalog_bp as catalog_blueprint
    app.register_blueprint(catalog_blueprint, url_prefix='/catalogo')

    @app.route('/health', methods=['GET'])
    def health():
        status = {'backend': 'running', 'database': 'not connected', 'xano': 'not checked'}
        try:
            db.session.execute(text('SELECT 1'))
            status['database'] = 'connected'
        except SQLAlchemyError as e:
            status['database'] = f'error: {str(e)[:80]}'

        if app.config['USER_BACKEND'] == 'xano':
            try:
                app.extensions['xano_client'].test_connection()
                status['xano'] = 'connected'
            except XanoError as e:
                status['xano'] = f'error: {e.message}'

        healthy = status['database'] == 'connected' and status['xano'] in ('connected', 'not checked')
        return jsonify(status), 200 if healthy else 503

    with app.app_context():
        try:
            db.create_all()
            if app.config['USER_BACKEND'] == 'database':
                create_admin_users()
        except OperationalError as e:
            logger.error(f"OperationalError during database initialization: {e}")

    return app
