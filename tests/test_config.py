"""Tests for configuration loading and precedence."""

from __future__ import annotations

import io
import logging
import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.logging import RichHandler

from dodopayments.client import DodoPayments
from dodopayments.core.config import (
    ClientSettings,
    Environment,
    _parse_env_lines,
    write_user_env_vars,
)
from dodopayments.core.logs import LOGGER_NAME, configure_logging, parse_level, redact_headers


class TestClientSettings:
    """Test cases for ClientSettings."""

    def test_default_values(self):
        """Defaults when nothing is configured."""
        with patch.dict(os.environ, {}, clear=True):
            settings = ClientSettings(_env_file=None)

        assert settings.api_key is None
        assert settings.environment is Environment.LIVE_MODE
        assert settings.resolved_base_url == "https://live.dodopayments.com"
        assert settings.timeout_seconds == 60.0
        assert settings.max_retries == 2
        assert settings.retry_after_cap_seconds == 60.0
        assert settings.user_agent.startswith("dodopayments-python/")
        assert settings.log is None

    def test_environment_variable_loading(self):
        with patch.dict(
            os.environ,
            {
                "DODO_PAYMENTS_API_KEY": "sk_env",
                "DODO_PAYMENTS_ENVIRONMENT": "test_mode",
                "DODO_PAYMENTS_TIMEOUT_SECONDS": "5",
                "DODO_PAYMENTS_MAX_RETRIES": "4",
                "DODO_PAYMENTS_LOG": "debug",
            },
        ):
            settings = ClientSettings(_env_file=None)

        assert settings.api_key == "sk_env"
        assert settings.environment is Environment.TEST_MODE
        assert settings.resolved_base_url == "https://test.dodopayments.com"
        assert settings.timeout_seconds == 5.0
        assert settings.max_retries == 4
        assert settings.log == "debug"

    def test_base_url_wins_over_environment(self):
        settings = ClientSettings(_env_file=None, environment="test_mode", base_url="https://proxy.local/v1/")

        assert settings.resolved_base_url == "https://proxy.local/v1"

    def test_dotenv_file(self, tmp_path):
        env_file = tmp_path / "custom.env"
        env_file.write_text("DODO_PAYMENTS_API_KEY=sk_file\n", encoding="utf-8")

        settings = ClientSettings(_env_file=env_file)

        assert settings.api_key == "sk_file"

    @pytest.mark.parametrize("value", [-1, 11])
    def test_max_retries_bounds(self, value):
        with pytest.raises(PydanticValidationError):
            ClientSettings(_env_file=None, max_retries=value)

    def test_timeout_must_be_positive(self):
        with pytest.raises(PydanticValidationError):
            ClientSettings(_env_file=None, timeout_seconds=0)


class TestClientPrecedence:
    def test_explicit_arguments_win_over_environment(self):
        with patch.dict(os.environ, {"DODO_PAYMENTS_API_KEY": "sk_env", "DODO_PAYMENTS_MAX_RETRIES": "5"}):
            with DodoPayments(api_key="sk_explicit", timeout=3) as client:
                assert client.settings.api_key == "sk_explicit"
                assert client.settings.max_retries == 5
                assert client.settings.timeout_seconds == 3

    def test_environment_argument(self):
        with DodoPayments(api_key="k", environment="test_mode") as client:
            assert client.base_url == "https://test.dodopayments.com"

    def test_with_options_renames_timeout(self):
        with DodoPayments(api_key="k") as client:
            copy = client.with_options(timeout=1.5, base_url="https://other.test")

            assert copy.settings.timeout_seconds == 1.5
            assert copy.base_url == "https://other.test"
            assert client.base_url == "https://live.dodopayments.com"


class TestUserEnvFile:
    def test_write_merges_existing_values(self, tmp_path):
        env_path = tmp_path / "cfg" / ".env"
        env_path.parent.mkdir()
        env_path.write_text("# comment\nDODO_PAYMENTS_API_KEY=old\nOTHER='x'\n", encoding="utf-8")

        written = write_user_env_vars(
            {"DODO_PAYMENTS_API_KEY": "new", "DODO_PAYMENTS_ENVIRONMENT": "test_mode", "SKIPPED": None},
            env_path=env_path,
        )

        assert written == env_path
        values = _parse_env_lines(env_path.read_text(encoding="utf-8"))
        assert values == {
            "DODO_PAYMENTS_API_KEY": "new",
            "DODO_PAYMENTS_ENVIRONMENT": "test_mode",
            "OTHER": "x",
        }

    def test_write_creates_directories(self, tmp_path):
        env_path = tmp_path / "a" / "b" / ".env"

        write_user_env_vars({"DODO_PAYMENTS_API_KEY": "k"}, env_path=env_path)

        assert env_path.read_text(encoding="utf-8").splitlines()[1] == "DODO_PAYMENTS_API_KEY=k"


class TestLogging:
    @pytest.fixture
    def library_logger(self):
        logger = logging.getLogger(LOGGER_NAME)
        handlers, level = list(logger.handlers), logger.level
        yield logger
        logger.handlers[:] = handlers
        logger.setLevel(level)

    def test_parse_level(self):
        assert parse_level("DEBUG") == logging.DEBUG
        assert parse_level(" warning ") == logging.WARNING
        assert parse_level("loud") is None
        assert parse_level(None) is None

    def test_configure_logging_adds_a_single_handler(self, library_logger):
        console = Console(file=io.StringIO())

        configure_logging("info", console=console)
        configure_logging("debug", console=console)

        assert library_logger.level == logging.DEBUG
        assert sum(isinstance(h, RichHandler) for h in library_logger.handlers) == 1

    def test_unknown_level_configures_nothing(self, library_logger):
        before = list(library_logger.handlers)

        configure_logging("loud")

        assert library_logger.handlers == before

    def test_client_log_setting(self, library_logger):
        with DodoPayments(settings=ClientSettings(_env_file=None, log="warning")):
            assert library_logger.level == logging.WARNING

    def test_redact_headers(self):
        headers = {"Authorization": "Bearer sk", "X-API-Key": "k", "Accept": "application/json"}

        assert redact_headers(headers) == {
            "Authorization": "<redacted>",
            "X-API-Key": "<redacted>",
            "Accept": "application/json",
        }
