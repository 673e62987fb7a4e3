"""Bases de los modelos del SDK (Pydantic v2).

Reglas:
- Los modelos son inmutables (`frozen`); para cambiar un campo se crea una
  copia con `with_fields(...)`.
- Los campos opcionales declaran `default=None`; si no se pasan quedan "no
  enviados" y no se serializan (ver `core.domain.omit`).
- Los nombres de cable se declaran con `alias` cuando difieren del atributo.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, ClassVar, Literal, Mapping, TypeVar, get_origin

from pydantic import BaseModel, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.config import ConfigDict

from dodopayments.core.domain.omit import Omit, strip_omitted
from dodopayments.core.errors import ValidationError
from dodopayments.core.marshal import deserialize, register_union_tag, serialize, translate_error

M = TypeVar("M", bound="SdkModel")
P = TypeVar("P", bound="BaseParams")


class _SdkModelMeta(type(BaseModel)):
    """Traduce los errores de validación al construir un modelo desde código.

    Solo afecta a la llamada de primer nivel (`Modelo(...)`); la validación
    anidada de Pydantic no pasa por aquí, así que las uniones siguen probando
    cada rama y el error final conserva la ruta completa.
    """

    def __call__(cls, *args: Any, **kwargs: Any) -> Any:
        try:
            return super().__call__(*args, **kwargs)
        except PydanticValidationError as exc:
            raise translate_error(exc, cls) from exc


class SdkModel(BaseModel, metaclass=_SdkModelMeta):
    """Modelo base: registro tipado con nombres de cable y tres estados por campo."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        # Pydantic intercala el nombre de la rama en la ruta de error de las uniones.
        register_union_tag(cls.__name__)
        for info in cls.model_fields.values():
            if get_origin(info.annotation) is Literal and isinstance(info.default, str):
                register_union_tag(info.default)

    @model_validator(mode="before")
    @classmethod
    def drop_omitted_fields(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return strip_omitted(data)
        return data

    def model_post_init(self, context: Any, /) -> None:
        # Los discriminadores (`Literal` con default) se emiten siempre.
        for name, info in type(self).model_fields.items():
            if get_origin(info.annotation) is Literal and not info.is_required():
                self.__pydantic_fields_set__.add(name)

    @classmethod
    def from_dict(cls: type[M], data: Any) -> M:
        """Construye el modelo desde un dict con claves de cable."""

        return deserialize(data, cls)

    def to_dict(self) -> dict[str, Any]:
        return serialize(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))

    def is_set(self, name: str) -> bool:
        """`True` si el campo fue enviado (con valor o `None`)."""

        return name in self.model_fields_set

    def with_fields(self: M, **changes: Any) -> M:
        """Copia del modelo con `changes` aplicados; `OMIT` devuelve un campo a "no enviado"."""

        fields = type(self).model_fields
        unknown = sorted(set(changes) - set(fields))
        if unknown:
            name = type(self).__name__
            raise ValidationError(f"{name}: unknown field(s) {', '.join(unknown)}", path=unknown[0], model=name)

        data = {name: getattr(self, name) for name in self.model_fields_set}
        for name, value in changes.items():
            if isinstance(value, Omit):
                data.pop(name, None)
            else:
                data[name] = value
        return type(self)(**data)


@dataclass(frozen=True)
class ParamsParts:
    """Resultado de partir un objeto de parámetros en ruta, query y cuerpo."""

    path: tuple[Any, ...] = ()
    query: dict[str, Any] = field(default_factory=dict)
    body: dict[str, Any] | None = None


class BaseParams(SdkModel):
    """Parámetros de un endpoint.

    Cada subclase declara qué campos van a la ruta (`path_fields`, en orden de
    sustitución) y cuáles a la query (`query_fields`); el resto forma el cuerpo.
    A diferencia de las respuestas, aquí una clave desconocida es un error.
    """

    model_config = ConfigDict(extra="forbid")

    path_fields: ClassVar[tuple[str, ...]] = ()
    query_fields: ClassVar[tuple[str, ...]] = ()
    has_body: ClassVar[bool] = True

    @classmethod
    def parse(cls: type[P], params: P | Mapping[str, Any] | None = None, **fields: Any) -> P:
        """Resuelve la variante "mapa crudo | objeto tipado" a una instancia única.

        Los `fields` sueltos se aplican encima de `params`.
        """

        if params is None:
            return cls(**fields)
        if isinstance(params, cls):
            return params.with_fields(**fields) if fields else params
        if isinstance(params, Mapping):
            return cls(**{**params, **fields})
        name = cls.__name__
        raise ValidationError(
            f"{name}: params must be a mapping or {name}, got {type(params).__name__}",
            model=name,
        )

    def split(self) -> ParamsParts:
        wire = serialize(self)
        fields = type(self).model_fields

        def wire_name(name: str) -> str:
            return fields[name].alias or name

        path = tuple(getattr(self, name) for name in self.path_fields)
        excluded = {wire_name(name) for name in self.path_fields}
        query_keys = {wire_name(name) for name in self.query_fields}

        query = {key: value for key, value in wire.items() if key in query_keys}
        body = None
        if self.has_body:
            body = {key: value for key, value in wire.items() if key not in query_keys and key not in excluded}
        return ParamsParts(path=path, query=query, body=body)
