# furniture_backend/catalog/query.py
"""Filtered, paginated catalog queries.

Every filter the caller supplies is turned into one SQLAlchemy condition and
the conditions are AND-ed together. Text filters are case-insensitive
substring matches; material and color filters match items sharing at least
one value with the requested list. On PostgreSQL that is the native ``&&``
array overlap, elsewhere the lists are stored as JSON text and matched
element by element.
"""
import json
import math
from sqlalchemy import and_, or_, cast, String
from sqlalchemy.dialects.postgresql import ARRAY, array
from furniture_backend.init_db import db
from furniture_backend.catalog.models import CatalogItem


def page_offset(page, limit):
    return (page - 1) * limit


def page_count(total, limit):
    return math.ceil(total / limit) if limit else 0


def _like(value):
    return f'%{value}%'


def _overlap(column, values, item_length):
    if db.engine.dialect.name == 'postgresql':
        return column.op('&&')(cast(array(values), ARRAY(String(item_length))))
    # JSON text, e.g. ["roble", "pino"]; match each element with its quotes
    return or_(*[cast(column, String).like(_like(json.dumps(value))) for value in values])


def build_filters(params, is_admin=False):
    conditions = []

    # Only admins can look past the active flag
    if not is_admin:
        conditions.append(CatalogItem.activo.is_(True))
    elif params.activo is not None:
        conditions.append(CatalogItem.activo.is_(params.activo))

    if params.search:
        pattern = _like(params.search)
        conditions.append(or_(
            CatalogItem.nombre.ilike(pattern),
            CatalogItem.descripcion.ilike(pattern),
            CatalogItem.tipo.ilike(pattern)
        ))

    if params.tipo:
        conditions.append(CatalogItem.tipo.ilike(_like(params.tipo)))

    if params.estilo:
        conditions.append(CatalogItem.estilo.ilike(_like(params.estilo)))

    if params.precio_min is not None:
        conditions.append(CatalogItem.precio_base >= params.precio_min)

    if params.precio_max is not None:
        conditions.append(CatalogItem.precio_base <= params.precio_max)

    if params.materiales:
        conditions.append(_overlap(CatalogItem.materiales_disponibles, params.materiales, 50))

    if params.colores:
        conditions.append(_overlap(CatalogItem.colores_disponibles, params.colores, 30))

    return conditions


def search_catalog(params, is_admin=False):
    """Run the filtered listing. Returns ``(items, total)`` for the requested page."""
    conditions = build_filters(params, is_admin=is_admin)
    query = CatalogItem.query.filter(and_(*conditions)) if conditions else CatalogItem.query

    total = query.order_by(None).count()
    items = (
        query.order_by(CatalogItem.fecha_creacion.desc(), CatalogItem.id.desc())
        .offset(page_offset(params.page, params.limit))
        .limit(params.limit)
        .all()
    )
    return items, total
