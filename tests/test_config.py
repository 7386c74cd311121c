import os

import pytest
import yaml

from trancome.config import (
    Config,
    default_config_path,
    default_values,
    load,
    write_config,
)


@pytest.fixture
def home(monkeypatch, tmp_path):
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.setenv("USERPROFILE", str(home_dir))
    for key in ("DATABASE_DIR", "SHARED_DB", "USER_DB_DIR"):
        monkeypatch.delenv(key, raising=False)
    return home_dir


def test_default_config_path(home):
    assert default_config_path() == home / ".trancome.yaml"


def test_default_values(home):
    values = default_values()
    assert values["database_dir"] == os.path.join(str(home), ".trancome", "databases")
    assert values["shared_db"] == "shared.db"
    assert values["user_db_dir"] == "users"


def test_load_without_file_uses_defaults_and_writes_file(home):
    config = load("")
    defaults = default_values()
    assert config.to_dict() == defaults
    written = home / ".trancome.yaml"
    assert written.exists()
    assert yaml.safe_load(written.read_text()) == defaults
    assert config.config_file == str(written)


def test_second_load_reads_written_file(home, capsys):
    load("")
    capsys.readouterr()
    config = load("")
    out = capsys.readouterr().out
    assert f"Using config file: {home / '.trancome.yaml'}" in out
    assert config.to_dict() == default_values()


def test_load_explicit_file_with_tilde_dir(home, tmp_path):
    cfg = tmp_path / "custom.yaml"
    cfg.write_text(yaml.safe_dump({"database_dir": "~/data", "shared_db": "main.db"}))
    config = load(str(cfg))
    assert config.database_dir == os.path.join(str(home), "data")
    assert config.shared_db == "main.db"
    assert config.user_db_dir == "users"
    assert config.config_file == str(cfg)
    assert not (home / ".trancome.yaml").exists()


def test_environment_overrides_file(home, tmp_path, monkeypatch):
    cfg = tmp_path / "custom.yaml"
    cfg.write_text(yaml.safe_dump({"shared_db": "main.db"}))
    monkeypatch.setenv("SHARED_DB", "env.db")
    config = load(str(cfg))
    assert config.shared_db == "env.db"


def test_empty_environment_value_is_ignored(home, tmp_path, monkeypatch):
    cfg = tmp_path / "custom.yaml"
    cfg.write_text(yaml.safe_dump({"shared_db": "main.db"}))
    monkeypatch.setenv("SHARED_DB", "")
    assert load(str(cfg)).shared_db == "main.db"


def test_unreadable_file_falls_back_to_defaults(home, tmp_path):
    cfg = tmp_path / "broken.yaml"
    cfg.write_text("- just\n- a list\n")
    config = load(str(cfg))
    assert config.to_dict() == default_values()
    assert (home / ".trancome.yaml").exists()


def test_write_config_round_trip(tmp_path):
    target = tmp_path / "nested" / "dir" / "conf.yaml"
    values = {"database_dir": "/srv/db", "shared_db": "shared.db", "user_db_dir": "users"}
    write_config(target, values)
    assert yaml.safe_load(target.read_text()) == values


def test_to_dict_excludes_config_file():
    config = Config(database_dir="d", shared_db="s", user_db_dir="u", config_file="f")
    assert config.to_dict() == {"database_dir": "d", "shared_db": "s", "user_db_dir": "u"}