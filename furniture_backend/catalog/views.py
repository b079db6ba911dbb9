# furniture_backend/catalog/views.py
from sqlalchemy import func, case
from furniture_backend.init_db import db
from furniture_backend.errors import ValidationError, NotFoundError
from furniture_backend.catalog.models import CatalogItem


def _round(value):
    return round(float(value), 2) if value is not None else None


def get_item(item_id, include_inactive=False):
    item = db.session.get(CatalogItem, item_id)
    if item is None or (not include_inactive and not item.activo):
        raise NotFoundError('Producto no encontrado en el catálogo')
    return item


def create_item(payload):
    item = CatalogItem(**payload.model_dump())
    db.session.add(item)
    db.session.commit()
    return item


def update_item(item_id, payload):
    item = get_item(item_id, include_inactive=True)

    changes = payload.changes()
    if not changes:
        raise ValidationError('No se proporcionaron campos para actualizar')

    for field, value in changes.items():
        setattr(item, field, value)
    db.session.commit()
    return item, list(changes)


def deactivate_item(item_id):
    item = get_item(item_id, include_inactive=True)
    item.activo = False
    db.session.commit()
    return item


def reactivate_item(item_id):
    item = get_item(item_id, include_inactive=True)
    if item.activo:
        raise ValidationError('El producto ya está activo')
    item.activo = True
    db.session.commit()
    return item


def _distinct_values(column):
    rows = (
        db.session.query(column)
        .filter(CatalogItem.activo.is_(True), column.isnot(None))
        .distinct()
        .order_by(column)
        .all()
    )
    return [value for (value,) in rows if value != '']


def _distinct_list_values(column):
    values = set()
    rows = db.session.query(column).filter(CatalogItem.activo.is_(True), column.isnot(None)).all()
    for (items,) in rows:
        values.update(items or [])
    return sorted(values)


def filter_options():
    price_min, price_max = (
        db.session.query(func.min(CatalogItem.precio_base), func.max(CatalogItem.precio_base))
        .filter(CatalogItem.activo.is_(True))
        .one()
    )
    return {
        'tipos': _distinct_values(CatalogItem.tipo),
        'estilos': _distinct_values(CatalogItem.estilo),
        'rango_precios': {'precio_min': _round(price_min), 'precio_max': _round(price_max)},
        'materiales': _distinct_list_values(CatalogItem.materiales_disponibles),
        'colores': _distinct_list_values(CatalogItem.colores_disponibles)
    }


def catalog_statistics():
    summary = db.session.query(
        func.count(CatalogItem.id),
        func.count(case((CatalogItem.activo.is_(True), 1))),
        func.count(case((CatalogItem.activo.is_(False), 1))),
        func.avg(CatalogItem.precio_base),
        func.min(CatalogItem.precio_base),
        func.max(CatalogItem.precio_base)
    ).one()

    quantity = func.count(CatalogItem.id).label('cantidad')

    by_type = (
        db.session.query(CatalogItem.tipo, quantity, func.avg(CatalogItem.precio_base))
        .filter(CatalogItem.activo.is_(True))
        .group_by(CatalogItem.tipo)
        .order_by(quantity.desc(), CatalogItem.tipo)
        .all()
    )

    by_style = (
        db.session.query(CatalogItem.estilo, quantity)
        .filter(CatalogItem.activo.is_(True), CatalogItem.estilo.isnot(None))
        .group_by(CatalogItem.estilo)
        .order_by(quantity.desc(), CatalogItem.estilo)
        .all()
    )

    return {
        'resumen_general': {
            'total_productos': summary[0],
            'productos_activos': summary[1],
            'productos_inactivos': summary[2],
            'precio_promedio': _round(summary[3]),
            'precio_minimo': _round(summary[4]),
            'precio_maximo': _round(summary[5])
        },
        'por_tipo': [
            {'tipo': tipo, 'cantidad': cantidad, 'precio_promedio': _round(avg)}
            for tipo, cantidad, avg in by_type
        ],
        'por_estilo': [
            {'estilo': estilo, 'cantidad': cantidad}
            for estilo, cantidad in by_style
        ]
    }
