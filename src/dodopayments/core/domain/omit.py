"""Centinela para campos opcionales "no enviados".

Un campo opcional tiene tres estados:
- no enviado (`OMIT`): la clave no aparece en el JSON.
- nulo (`None`): la clave aparece con valor `null`.
- valor: la clave aparece con el valor serializado.

`None` no sirve para representar "no enviado" porque la API distingue entre
ambos casos (p.ej. borrar una descripción vs. no tocarla).
"""

from __future__ import annotations

from typing import Any, Final, Mapping, TypeGuard, TypeVar

_T = TypeVar("_T")


class Omit:
    """Tipo del centinela `OMIT` (singleton)."""

    _instance: Omit | None = None

    def __new__(cls) -> Omit:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "OMIT"

    def __copy__(self) -> Omit:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> Omit:
        return self

    def __reduce__(self) -> str:
        return "OMIT"


OMIT: Final = Omit()


def is_given(value: _T | Omit) -> TypeGuard[_T]:
    """`True` si el valor no es el centinela (incluye `None`)."""

    return not isinstance(value, Omit)


def strip_omitted(values: Mapping[str, Any]) -> dict[str, Any]:
    """Quita las claves cuyo valor es `OMIT`, conservando `None`."""

    return {key: value for key, value in values.items() if is_given(value)}
