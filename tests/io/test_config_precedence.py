from __future__ import annotations

from pathlib import Path

import pytest

from slotview.core.errors import VersionMismatch
from slotview.core.versioning import LAYOUT_V, LayoutVersion
from slotview.io import config
from slotview.io.config import ReaderSettings, check_layout_version
from slotview.io.errors import ConfigError

ENV_KEYS = [
    "SLOTVIEW_LAYOUT",
    "SLOTVIEW_LAYOUT_MAJOR",
    "SLOTVIEW_LAYOUT_MINOR",
    "SLOTVIEW_LOG_READS",
    "SLOTVIEW_LOG_LEVEL",
]


def _write_slotview_toml(tmp: Path, content: str) -> Path:
    p = tmp / "slotview.toml"
    p.write_text(content)
    return p


@pytest.fixture
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_reader_settings_precedence_env_over_toml(tmp_path: Path, clean_env) -> None:
    # Arrange TOML
    _write_slotview_toml(
        tmp_path,
        """
        [reader]
        log_reads = false
        log_level = "warning"
        """.strip(),
    )
    clean_env.chdir(tmp_path)
    # Arrange ENV that should override TOML
    clean_env.setenv("SLOTVIEW_LOG_READS", "yes")
    clean_env.setenv("SLOTVIEW_LOG_LEVEL", "debug")

    s = ReaderSettings.load()

    assert s.log_reads is True  # env override
    assert s.log_level == "DEBUG"  # env override


def test_reader_settings_from_toml_when_no_env(tmp_path: Path, clean_env) -> None:
    _write_slotview_toml(
        tmp_path,
        """
        [reader]
        log_reads = true
        log_level = "ERROR"
        layout_major = 1
        layout_minor = 0
        """.strip(),
    )
    clean_env.chdir(tmp_path)

    s = ReaderSettings.load()

    assert s.log_reads is True
    assert s.log_level == "ERROR"
    assert s.layout_version == LAYOUT_V


def test_reader_settings_from_pyproject_tool_table(tmp_path: Path, clean_env) -> None:
    (tmp_path / "pyproject.toml").write_text(
        """
        [tool.slotview.reader]
        log_reads = true
        """.strip()
    )
    clean_env.chdir(tmp_path)

    assert ReaderSettings.load().log_reads is True


def test_reader_settings_top_level_keys(tmp_path: Path, clean_env) -> None:
    p = _write_slotview_toml(tmp_path, 'log_level = "trace"')
    assert ReaderSettings.from_toml(p).log_level == "TRACE"


def test_reader_settings_defaults_when_no_config(tmp_path: Path, clean_env) -> None:
    # No TOML, no env
    clean_env.chdir(tmp_path)

    s = ReaderSettings.load()

    # Defaults pin the shipped layout version
    assert (s.layout_major, s.layout_minor) == (LAYOUT_V.major, LAYOUT_V.minor)
    assert s.log_reads is False
    assert s.log_level == "INFO"
    check_layout_version(s)


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("SLOTVIEW_LAYOUT_MAJOR", "one"),
        ("SLOTVIEW_LAYOUT_MINOR", "-1"),
        ("SLOTVIEW_LOG_READS", "maybe"),
        ("SLOTVIEW_LOG_LEVEL", "loud"),
        ("SLOTVIEW_LAYOUT", "one.zero"),
    ],
)
def test_unparseable_env_values_raise(tmp_path: Path, clean_env, key: str, value: str) -> None:
    clean_env.chdir(tmp_path)
    clean_env.setenv(key, value)
    with pytest.raises(ConfigError):
        ReaderSettings.load()


def test_invalid_toml_raises(tmp_path: Path, clean_env) -> None:
    p = _write_slotview_toml(tmp_path, "[reader\nlog_reads = ")
    with pytest.raises(ConfigError):
        ReaderSettings.from_toml(p)


def test_pinned_version_mismatch(tmp_path: Path, clean_env) -> None:
    clean_env.chdir(tmp_path)
    clean_env.setenv("SLOTVIEW_LAYOUT_MAJOR", str(LAYOUT_V.major + 1))
    s = ReaderSettings.load()
    with pytest.raises(VersionMismatch):
        check_layout_version(s)


def test_layout_shorthand_and_component_override(tmp_path: Path, clean_env) -> None:
    _write_slotview_toml(tmp_path, '[reader]\nlayout = "3.4"')
    clean_env.chdir(tmp_path)
    assert ReaderSettings.load().layout_version == LayoutVersion(3, 4)

    clean_env.setenv("SLOTVIEW_LAYOUT_MINOR", "0")
    assert ReaderSettings.load().layout_version == LayoutVersion(3, 0)


@pytest.mark.parametrize(
    "content",
    [
        "[tool]\nslotview = 1",
        'tool = "x"',
        "[tool.slotview]\nreader = [1, 2]",
    ],
)
def test_pyproject_sections_must_be_tables(tmp_path: Path, clean_env, content: str) -> None:
    (tmp_path / "pyproject.toml").write_text(content)
    clean_env.chdir(tmp_path)
    with pytest.raises(ConfigError):
        ReaderSettings.load()


def test_table_pinned_to_another_layout_is_rejected(monkeypatch) -> None:
    monkeypatch.setattr(
        config,
        "published_versions",
        lambda: {"slot0": LAYOUT_V, "record:pool_state": LayoutVersion(LAYOUT_V.major + 1, 0)},
    )
    with pytest.raises(VersionMismatch, match="record:pool_state"):
        check_layout_version(ReaderSettings())
