# furniture_backend/catalog/schemas.py
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional
from pydantic import BaseModel, Field, AnyUrl, TypeAdapter, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

_url_adapter = TypeAdapter(AnyUrl)

# Columns that may be omitted from an update but never set to null
NON_NULLABLE_FIELDS = ('nombre', 'tipo', 'precio_base', 'activo')

# Fields an update may blank out with ''
BLANKABLE_FIELDS = ('imagen_url', 'estilo', 'dimensiones', 'descripcion')

# Keeps (page - 1) * limit well inside a 64-bit OFFSET
MAX_PAGE = 1_000_000

# NUMERIC(10, 2) holds at most eight integer digits
MAX_PRICE = Decimal('100000000')


def _check_url(value):
    if len(value) > 500:
        raise ValueError('La URL de la imagen no puede exceder 500 caracteres')
    try:
        _url_adapter.validate_python(value)
    except PydanticValidationError:
        raise ValueError('La URL de la imagen debe ser una URI válida')
    return value


def _check_items(values, max_length, label):
    if values is None:
        return values
    for value in values:
        if len(value) > max_length:
            raise ValueError(f'Cada {label} no puede exceder {max_length} caracteres')
    return values


class CatalogItemBase(BaseModel):
    imagen_url: Optional[str] = None
    estilo: Optional[str] = Field(None, max_length=50)
    dimensiones: Optional[str] = Field(None, max_length=200)
    descripcion: Optional[str] = Field(None, max_length=1000)
    materiales_disponibles: Optional[List[str]] = None
    colores_disponibles: Optional[List[str]] = None

    @field_validator('materiales_disponibles')
    @classmethod
    def check_materials(cls, values):
        return _check_items(values, 50, 'material')

    @field_validator('colores_disponibles')
    @classmethod
    def check_colors(cls, values):
        return _check_items(values, 30, 'color')

    @field_validator('precio_base', check_fields=False)
    @classmethod
    def check_price(cls, value):
        if value is None:
            return value
        if value < 0:
            raise ValueError('El precio base debe ser mayor o igual a 0')
        if value >= MAX_PRICE:
            raise ValueError('El precio base no puede exceder 99999999.99')
        # Stored as NUMERIC(10, 2)
        return value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)

    @field_validator('nombre', check_fields=False)
    @classmethod
    def check_nombre(cls, value):
        if value is None:
            return value
        if len(value) < 2:
            raise ValueError('El nombre debe tener al menos 2 caracteres')
        if len(value) > 150:
            raise ValueError('El nombre no puede exceder 150 caracteres')
        return value

    @field_validator('tipo', check_fields=False)
    @classmethod
    def check_tipo(cls, value):
        if value is None:
            return value
        if len(value) < 2:
            raise ValueError('El tipo debe tener al menos 2 caracteres')
        if len(value) > 50:
            raise ValueError('El tipo no puede exceder 50 caracteres')
        return value


class CatalogItemCreate(CatalogItemBase):
    nombre: str
    tipo: str
    precio_base: Decimal
    activo: bool = True

    @model_validator(mode='before')
    @classmethod
    def require_fields(cls, data):
        if isinstance(data, dict):
            messages = {
                'nombre': 'El nombre es obligatorio',
                'tipo': 'El tipo es obligatorio',
                'precio_base': 'El precio base es obligatorio',
            }
            for field, message in messages.items():
                if data.get(field) is None:
                    raise ValueError(message)
        return data

    @field_validator(*BLANKABLE_FIELDS, mode='before')
    @classmethod
    def blank_to_none(cls, value):
        return None if value == '' else value

    @field_validator('imagen_url')
    @classmethod
    def check_imagen_url(cls, value):
        return _check_url(value) if value is not None else value


class CatalogItemUpdate(CatalogItemBase):
    nombre: Optional[str] = None
    tipo: Optional[str] = None
    precio_base: Optional[Decimal] = None
    activo: Optional[bool] = None

    @model_validator(mode='before')
    @classmethod
    def reject_nulls(cls, data):
        if isinstance(data, dict):
            for field in NON_NULLABLE_FIELDS:
                if field in data and data[field] is None:
                    raise ValueError(f'El campo {field} no puede ser nulo')
        return data

    @field_validator('imagen_url')
    @classmethod
    def check_imagen_url(cls, value):
        return _check_url(value) if value else value

    def changes(self):
        """Only the fields the caller actually sent, with blanked-out text stored as NULL."""
        data = self.model_dump(exclude_unset=True)
        for field in BLANKABLE_FIELDS:
            if data.get(field) == '':
                data[field] = None
        return data


class CatalogListParams(BaseModel):
    page: int = Field(1, ge=1, le=MAX_PAGE)
    limit: int = Field(12, ge=1)
    search: str = ''
    tipo: str = ''
    estilo: str = ''
    precio_min: Optional[Decimal] = None
    precio_max: Optional[Decimal] = None
    materiales: List[str] = Field(default_factory=list)
    colores: List[str] = Field(default_factory=list)
    activo: Optional[bool] = True

    @model_validator(mode='before')
    @classmethod
    def from_query_string(cls, data):
        if not isinstance(data, dict):
            return data
        data = {key: value for key, value in data.items() if key in cls.model_fields}
        for field in ('page', 'limit', 'precio_min', 'precio_max'):
            if data.get(field) == '':
                data.pop(field)
        for field in ('materiales', 'colores'):
            if isinstance(data.get(field), str):
                data[field] = [item.strip() for item in data[field].split(',') if item.strip()]
        if 'activo' in data and isinstance(data['activo'], str):
            # An empty value means "any state"
            data['activo'] = None if data['activo'] == '' else data['activo'].lower() == 'true'
        return data
