from __future__ import annotations

from pathlib import Path

import pytest

from mirrorsync.config import (
    ConfigurationError,
    DisplayDefaults,
    env_flag,
    get_database_config,
    get_display_defaults,
    get_storage_config,
)

_DISPLAY_VARS = (
    "MIRRORSYNC_SHOW_ALL_DUPLICATES",
    "MIRRORSYNC_INCLUDE_HALF_CHAPTERS",
    "MIRRORSYNC_SORT_KEY",
    "MIRRORSYNC_SORT_DIRECTION",
)


@pytest.fixture
def clean_display_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in _DISPLAY_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_display_defaults_without_overrides(clean_display_env: pytest.MonkeyPatch) -> None:
    _ = clean_display_env
    assert get_display_defaults() == DisplayDefaults()


def test_display_defaults_read_environment(clean_display_env: pytest.MonkeyPatch) -> None:
    clean_display_env.setenv("MIRRORSYNC_SHOW_ALL_DUPLICATES", "yes")
    clean_display_env.setenv("MIRRORSYNC_INCLUDE_HALF_CHAPTERS", "0")
    clean_display_env.setenv("MIRRORSYNC_SORT_KEY", " Date ")
    clean_display_env.setenv("MIRRORSYNC_SORT_DIRECTION", "ASCENDING")

    defaults = get_display_defaults()

    assert defaults == DisplayDefaults(
        show_all_duplicates=True,
        include_half_chapters=False,
        sort_key="date",
        sort_direction="ascending",
    )


def test_invalid_sort_key_is_rejected(clean_display_env: pytest.MonkeyPatch) -> None:
    clean_display_env.setenv("MIRRORSYNC_SORT_KEY", "title")

    with pytest.raises(ConfigurationError, match="MIRRORSYNC_SORT_KEY"):
        get_display_defaults()


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("On", True), ("false", False), ("no", False), ("   ", True)],
)
def test_env_flag_values(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:  # noqa: FBT001
    monkeypatch.setenv("MIRRORSYNC_TEST_FLAG", raw)

    assert env_flag("MIRRORSYNC_TEST_FLAG", default=True) is expected


def test_env_flag_rejects_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MIRRORSYNC_TEST_FLAG", "maybe")

    with pytest.raises(ConfigurationError):
        env_flag("MIRRORSYNC_TEST_FLAG", default=False)


def test_storage_config_uses_data_dir_override(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.setenv("MIRRORSYNC_DATA_DIR", str(tmp_path / "data"))

    storage = get_storage_config()

    assert storage.resolve_data_dir() == (tmp_path / "data").resolve()
    assert storage.database_path() == (tmp_path / "data" / "library.db").resolve()
    assert (tmp_path / "data").is_dir()


def test_database_uri_prefers_environment(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")
    assert get_database_config().uri == "sqlite+pysqlite:///:memory:"

    monkeypatch.delenv("DATABASE_URI")
    monkeypatch.setenv("MIRRORSYNC_DATA_DIR", str(tmp_path))
    uri = get_database_config().uri
    assert uri.startswith("sqlite+pysqlite:///")
    assert uri.endswith("library.db")
