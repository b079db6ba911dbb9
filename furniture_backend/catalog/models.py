# furniture_backend/catalog/models.py
from datetime import datetime
from sqlalchemy.dialects.postgresql import ARRAY
from furniture_backend.init_db import db

# VARCHAR[] on PostgreSQL, JSON text everywhere else (SQLite in tests)
MaterialList = db.JSON(none_as_null=True).with_variant(ARRAY(db.String(50)), 'postgresql')
ColorList = db.JSON(none_as_null=True).with_variant(ARRAY(db.String(30)), 'postgresql')


class CatalogItem(db.Model):
    __tablename__ = 'catalogo'
    id = db.Column(db.Integer, primary_key=True)
    nombre = db.Column(db.String(150), nullable=False)
    tipo = db.Column(db.String(50), nullable=False)
    imagen_url = db.Column(db.String(500), nullable=True)
    precio_base = db.Column(db.Numeric(10, 2), nullable=False)
    estilo = db.Column(db.String(50), nullable=True)
    dimensiones = db.Column(db.String(200), nullable=True)
    descripcion = db.Column(db.Text, nullable=True)
    materiales_disponibles = db.Column(MaterialList, nullable=True)
    colores_disponibles = db.Column(ColorList, nullable=True)
    activo = db.Column(db.Boolean, nullable=False, default=True)
    fecha_creacion = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'nombre': self.nombre,
            'tipo': self.tipo,
            'imagen_url': self.imagen_url,
            'precio_base': float(self.precio_base) if self.precio_base is not None else None,
            'estilo': self.estilo,
            'dimensiones': self.dimensiones,
            'descripcion': self.descripcion,
            'materiales_disponibles': list(self.materiales_disponibles or []),
            'colores_disponibles': list(self.colores_disponibles or []),
            'activo': self.activo,
            'fecha_creacion': self.fecha_creacion.isoformat() if self.fecha_creacion else None
        }

    def __repr__(self):
        return f"<CatalogItem {self.id} {self.nombre}>"
