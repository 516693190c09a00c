"""Fixtures shared by every auditchain test."""

from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from pathlib import Path

import pytest

from auditchain.api.dependencies import get_settings as get_api_settings
from auditchain.config import get_settings
from auditchain.config.settings import set_toml_config

TomlWriter = Callable[[dict[str, str]], None]
EnvOverride = Callable[[dict[str, str]], AbstractContextManager[None]]


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Empty `config/` directory under tmp_path."""
    path = tmp_path / "config"
    path.mkdir()
    return path


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> TomlWriter:
    """Write `{filename: toml_text}` into test_config_dir."""

    def write(files: dict[str, str]) -> None:
        for name, text in files.items():
            (test_config_dir / name).write_text(text)

    return write


@pytest.fixture
def env_override(monkeypatch: pytest.MonkeyPatch) -> EnvOverride:
    """Scoped environment variables: `with env_override({...}): ...`."""

    @contextmanager
    def override(values: dict[str, str]) -> Iterator[None]:
        with monkeypatch.context() as patch:
            for key, value in values.items():
                patch.setenv(key, value)
            yield

    return override


def _reset_settings() -> None:
    get_settings.cache_clear()
    get_api_settings.cache_clear()
    set_toml_config({})


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Iterator[None]:
    """Every test starts and ends with no cached settings or TOML."""
    _reset_settings()
    yield
    _reset_settings()
