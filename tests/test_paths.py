import os

import pytest

from trancome.paths import expand_path


@pytest.fixture
def home(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    return tmp_path


def test_empty_path_is_unchanged():
    assert expand_path("") == ""


def test_absolute_path_is_unchanged(home):
    path = str(home / "data" / "files")
    assert expand_path(path) == path


def test_relative_path_is_unchanged():
    assert expand_path("some/relative/dir") == "some/relative/dir"


def test_tilde_alone_is_home(home):
    assert expand_path("~") == os.path.normpath(str(home))


def test_tilde_prefix_joins_onto_home(home):
    assert expand_path("~/docs/db") == os.path.join(str(home), "docs", "db")


def test_tilde_without_separator_joins_name(home):
    assert expand_path("~other") == os.path.join(str(home), "other")


def test_tilde_in_middle_is_unchanged(home):
    assert expand_path("a/~/b") == "a/~/b"