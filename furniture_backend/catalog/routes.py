# furniture_backend/catalog/routes.py
from flask import Blueprint, request, jsonify, current_app
from flask_login import login_required, current_user
from furniture_backend.decorators import admin_required, caller_is_admin
from furniture_backend.schemas import validate_payload
from furniture_backend.logging_config import setup_logging
from furniture_backend.catalog.schemas import CatalogItemCreate, CatalogItemUpdate, CatalogListParams
from furniture_backend.catalog.query import search_catalog, page_count
from furniture_backend.catalog.views import (
    get_item, create_item, update_item, deactivate_item, reactivate_item,
    filter_options, catalog_statistics
)


catalog_bp = Blueprint('catalog', __name__)

logger = setup_logging('catalogo')


def _list_params():
    args = request.args.to_dict()
    args.setdefault('limit', current_app.config['CATALOG_DEFAULT_LIMIT'])
    params = validate_payload(CatalogListParams, args)
    params.limit = min(params.limit, current_app.config['CATALOG_MAX_LIMIT'])
    return params


@catalog_bp.route('', methods=['GET'])
def list_catalog():
    params = _list_params()
    items, total = search_catalog(params, is_admin=caller_is_admin())

    return jsonify({
        'message': 'Catálogo obtenido exitosamente',
        'productos': [item.to_dict() for item in items],
        'pagination': {
            'page': params.page,
            'limit': params.limit,
            'total': total,
            'pages': page_count(total, params.limit)
        },
        'filtros_aplicados': {
            field: request.args.get(field, '')
            for field in ('search', 'tipo', 'estilo', 'precio_min', 'precio_max', 'materiales', 'colores')
        }
    }), 200


@catalog_bp.route('/<int:item_id>', methods=['GET'])
def get_catalog_item(item_id):
    item = get_item(item_id, include_inactive=caller_is_admin())
    return jsonify({'message': 'Producto obtenido exitosamente', 'producto': item.to_dict()}), 200


@catalog_bp.route('', methods=['POST'])
@login_required
@admin_required
def create_catalog_item():
    payload = validate_payload(CatalogItemCreate, request.get_json(silent=True))
    item = create_item(payload)

    logger.info("Nuevo producto creado en catálogo", extra={'context': {
        'productoId': item.id,
        'nombre': item.nombre,
        'tipo': item.tipo,
        'adminId': current_user.id
    }})

    return jsonify({
        'message': 'Producto creado exitosamente en el catálogo',
        'producto': item.to_dict()
    }), 201


@catalog_bp.route('/<int:item_id>', methods=['PUT'])
@login_required
@admin_required
def update_catalog_item(item_id):
    payload = validate_payload(CatalogItemUpdate, request.get_json(silent=True))
    item, fields = update_item(item_id, payload)

    logger.info("Producto actualizado en catálogo", extra={'context': {
        'productoId': item_id,
        'camposActualizados': ','.join(fields),
        'adminId': current_user.id
    }})

    return jsonify({'message': 'Producto actualizado exitosamente', 'producto': item.to_dict()}), 200


@catalog_bp.route('/<int:item_id>', methods=['DELETE'])
@login_required
@admin_required
def delete_catalog_item(item_id):
    item = deactivate_item(item_id)

    logger.info("Producto desactivado en catálogo", extra={'context': {
        'productoId': item_id,
        'nombre': item.nombre,
        'adminId': current_user.id
    }})

    return jsonify({'message': 'Producto desactivado exitosamente del catálogo'}), 200


@catalog_bp.route('/<int:item_id>/activar', methods=['POST'])
@login_required
@admin_required
def activate_catalog_item(item_id):
    item = reactivate_item(item_id)

    logger.info("Producto reactivado en catálogo", extra={'context': {
        'productoId': item_id,
        'nombre': item.nombre,
        'adminId': current_user.id
    }})

    return jsonify({'message': 'Producto reactivado exitosamente en el catálogo'}), 200


@catalog_bp.route('/filtros/opciones', methods=['GET'])
def get_filter_options():
    return jsonify({
        'message': 'Opciones de filtros obtenidas exitosamente',
        'filtros': filter_options()
    }), 200


@catalog_bp.route('/estadisticas/resumen', methods=['GET'])
@login_required
@admin_required
def get_statistics():
    return jsonify({
        'message': 'Estadísticas del catálogo obtenidas exitosamente',
        'estadisticas': catalog_statistics()
    }), 200
