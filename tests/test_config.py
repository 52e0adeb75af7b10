from __future__ import annotations

from pathlib import Path

import pytest

from ttmctl.config import CONFIG_FILE_NAME, Config, ConfigError, load_config


def test_missing_default_file_gives_defaults(tmp_path: Path) -> None:
    assert load_config(cwd=tmp_path) == Config()


def test_default_file_is_read(tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILE_NAME).write_text(
        "color: false\nformat: YAML\nlog_level: debug\nextra: ignored\n",
        encoding="utf-8",
    )
    assert load_config(cwd=tmp_path) == Config(color=False, format="yaml", log_level="DEBUG")


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "settings.yml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == Config()


def test_explicit_missing_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError) as exc:
        load_config(tmp_path / "nope.yml")
    assert "does not exist" in str(exc.value)


@pytest.mark.parametrize(
    "content",
    [
        "- a\n- b\n",
        "color: maybe\n",
        "format: json\n",
        "log_level: 3\n",
        "color: [unclosed\n",
    ],
)
def test_invalid_settings(tmp_path: Path, content: str) -> None:
    path = tmp_path / "settings.yml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError) as exc:
        load_config(path)
    assert exc.value.path == str(path)


def test_undecodable_file_is_an_error(tmp_path: Path) -> None:
    path = tmp_path / "settings.yml"
    path.write_bytes(b"color: \xff\xfe\n")
    with pytest.raises(ConfigError) as exc:
        load_config(path)
    assert "Cannot read file" in str(exc.value)
