"""Configuración del cliente.

- Centraliza variables de entorno (pydantic-settings) sin contaminar el resto.
- Orden de precedencia: argumento explícito > variable de entorno > `.env`
  del proyecto > `.env` del usuario > default.
"""

from __future__ import annotations

import os
import sys
from enum import Enum
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from dodopayments._version import __version__

ENV_PREFIX = "DODO_PAYMENTS_"


class Environment(str, Enum):
    LIVE_MODE = "live_mode"
    TEST_MODE = "test_mode"


ENVIRONMENT_URLS: dict[Environment, str] = {
    Environment.LIVE_MODE: "https://live.dodopayments.com",
    Environment.TEST_MODE: "https://test.dodopayments.com",
}


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "dodopayments"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "dodopayments"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "dodopayments"
    return Path.home() / ".config" / "dodopayments"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario.

    Las claves existentes se conservan; un valor `None` no pisa nada.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# dodopayments user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class ClientSettings(BaseSettings):
    """Configuración del cliente HTTP.

    Un único contrato de configuración para el cliente, el transporte y la CLI.
    Las instancias son inmutables; para variar algo se usa `model_copy(update=...)`
    (ver `DodoPayments.with_options`).
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_key: str | None = Field(
        default=None,
        description="Bearer token de la API.",
    )
    environment: Environment = Field(
        default=Environment.LIVE_MODE,
        description="Entorno por defecto si no se indica `base_url`.",
    )
    base_url: str | None = Field(
        default=None,
        min_length=8,
        description="URL base explícita; gana sobre `environment`.",
    )

    timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout por intento (segundos).",
    )
    max_retries: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Reintentos máximos ante fallos transitorios (rate limit, red, 5xx).",
    )
    backoff_initial_seconds: float = Field(default=0.5, ge=0)
    backoff_max_seconds: float = Field(default=8.0, ge=0)
    backoff_jitter_seconds: float = Field(default=0.25, ge=0)
    retry_after_cap_seconds: float = Field(
        default=60.0,
        ge=0,
        description="Tope para las pausas que pide el servidor con `Retry-After`.",
    )

    user_agent: str = Field(
        default=f"dodopayments-python/{__version__}",
        min_length=1,
    )
    log: str | None = Field(
        default=None,
        description="Nivel de log de la librería (debug/info/warning); sin valor no se configura nada.",
    )

    @property
    def resolved_base_url(self) -> str:
        if self.base_url:
            return self.base_url.rstrip("/")
        return ENVIRONMENT_URLS[self.environment]
