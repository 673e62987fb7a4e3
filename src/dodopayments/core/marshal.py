"""Marshaller de modelos: modelo en memoria <-> estructura JSON.

Contrato:
- `serialize` emite los requeridos siempre, omite los opcionales no enviados
  y emite `null` para los opcionales puestos explícitamente a `None`.
- `deserialize` busca por nombre de cable, ignora claves desconocidas y
  traduce los errores de Pydantic a `MissingField` / `TypeMismatch` /
  `ValidationError` con la ruta del campo.
- `to_jsonable` convierte valores sueltos (mapas, listas, enums, fechas,
  modelos) a algo que `json.dumps` acepta.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Any, Mapping, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import to_jsonable_python

from dodopayments.core.domain.omit import Omit
from dodopayments.core.errors import MissingField, TypeMismatch, ValidationError

T = TypeVar("T")

_TYPE_ERRORS = {"union_tag_invalid", "union_tag_not_found", "is_instance_of", "model_attributes_type"}

# Segmentos de `loc` que Pydantic añade para ramas de uniones y no son campos.
_UNION_BRANCH_SEGMENTS = {"str", "int", "float", "bool", "none", "bytes", "list", "dict"}

# Nombres de rama de las uniones de modelos (clase o valor del discriminador);
# los registra `SdkModel` al definirse cada subclase.
_UNION_TAGS: set[str] = set()


def register_union_tag(tag: str) -> None:
    _UNION_TAGS.add(tag)


def type_name(target: Any) -> str:
    return getattr(target, "__name__", None) or str(target)


def _is_type_error(error_type: str) -> bool:
    return error_type in _TYPE_ERRORS or error_type.endswith("_type") or error_type.endswith("_parsing")


def format_path(loc: tuple[Any, ...]) -> str:
    """Convierte un `loc` de Pydantic en una ruta tipo `items[0].price`."""

    out = ""
    for part in loc:
        if isinstance(part, int):
            out += f"[{part}]"
            continue
        text = str(part)
        if "[" in text or text in _UNION_BRANCH_SEGMENTS or text in _UNION_TAGS:
            continue
        out = f"{out}.{text}" if out else text
    return out


def translate_error(exc: PydanticValidationError, target: Any) -> ValidationError:
    """Traduce un `pydantic.ValidationError` a la taxonomía propia.

    Orden de prioridad: campo faltante > tipo incorrecto > restricción.
    """

    model = type_name(target)
    issues = exc.errors(include_url=False)

    for issue in issues:
        if issue["type"] == "missing":
            path = format_path(issue["loc"])
            return MissingField(
                f"{model}: missing required field '{path}'",
                path=path,
                model=model,
                issues=issues,
            )

    for issue in issues:
        if _is_type_error(issue["type"]):
            path = format_path(issue["loc"])
            where = f"field '{path}'" if path else "value"
            return TypeMismatch(
                f"{model}: {where} has the wrong shape ({issue['msg']})",
                path=path,
                model=model,
                issues=issues,
            )

    first = issues[0] if issues else {"loc": (), "msg": str(exc)}
    path = format_path(first["loc"])
    where = f"field '{path}'" if path else "value"
    return ValidationError(f"{model}: {where} is invalid ({first['msg']})", path=path, model=model, issues=issues)


@lru_cache(maxsize=256)
def _adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def _missing_required(model: BaseModel) -> str | None:
    fields = type(model).model_fields
    for name, field in fields.items():
        if field.is_required() and name not in model.model_fields_set:
            return field.alias or name
    for name in model.model_fields_set:
        value = getattr(model, name, None)
        nested = value if isinstance(value, list) else [value]
        for item in nested:
            if isinstance(item, BaseModel):
                missing = _missing_required(item)
                if missing:
                    return f"{fields[name].alias or name}.{missing}"
    return None


def serialize(model: BaseModel) -> dict[str, Any]:
    """Serializa un modelo a un dict JSON-compatible (claves = nombres de cable)."""

    missing = _missing_required(model)
    if missing:
        name = type_name(type(model))
        raise MissingField(f"{name}: missing required field '{missing}'", path=missing, model=name)
    return model.model_dump(mode="json", by_alias=True, exclude_unset=True)


def deserialize(data: Any, target_type: type[T] | Any) -> T:
    """Construye `target_type` a partir de datos JSON ya decodificados.

    `target_type` puede ser una clase de modelo o cualquier expresión de tipo que
    Pydantic entienda (`list[Product]`, `dict[str, Customer]`, uniones, ...).
    """

    try:
        if isinstance(target_type, type) and issubclass(target_type, BaseModel):
            return target_type.model_validate(data)  # type: ignore[return-value]
        return _adapter(target_type).validate_python(data)
    except PydanticValidationError as exc:
        raise translate_error(exc, target_type) from exc


def to_jsonable(value: Any) -> Any:
    """Convierte un valor arbitrario a una estructura JSON-compatible.

    Las entradas `OMIT` de un mapa se descartan; `None` se conserva.
    """

    if isinstance(value, BaseModel):
        return serialize(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {str(key): to_jsonable(item) for key, item in value.items() if not isinstance(item, Omit)}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(item) for item in value]
    return to_jsonable_python(value)
