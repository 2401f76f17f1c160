"""
Tests for LoaderConfig
"""

import json
import os

import pytest

from loadk import constants
from loadk.config import LoaderConfig


def test_missing_file_gives_defaults(tmp_path):
    config = LoaderConfig.load(tmp_path / "nope.json")
    assert config == LoaderConfig()
    assert config.timeout == constants.DEFAULT_TIMEOUT


def test_load_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "extract": True,
        "list": True,
        "base_dir": "/srv/restore",
        "timeout": 5,
        "colour": "blue",
    }))
    config = LoaderConfig.load(path)

    assert config.extract is True
    assert config.list_entries is True
    assert config.base_dir == "/srv/restore"
    assert config.timeout == 5
    assert config.summary is False


def test_invalid_file_gives_defaults(tmp_path, caplog):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    assert LoaderConfig.load(path) == LoaderConfig()
    assert "Failed to load config" in caplog.text


def test_non_object_gives_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2]")
    assert LoaderConfig.load(path) == LoaderConfig()


def test_merge_skips_unset_flags():
    config = LoaderConfig(extract=True, summary=True).merge(extract=None, summary=False, verbose=True)
    assert config.extract is True
    assert config.summary is False
    assert config.verbose is True


def test_merge_rejects_unknown_option():
    with pytest.raises(TypeError):
        LoaderConfig().merge(colour="blue")


def test_parse_options_default_base_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    options = LoaderConfig(extract=True).to_parse_options()
    assert options.extract is True
    assert options.base_dir == os.getcwd()

    options = LoaderConfig(base_dir="/srv/restore", list_entries=True).to_parse_options()
    assert options.base_dir == "/srv/restore"
    assert options.list_entries is True


def test_ill_typed_values_are_skipped(tmp_path, caplog):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "extract": "no",
        "summary": True,
        "timeout": "abc",
        "base_dir": 7,
    }))
    config = LoaderConfig.load(path)

    assert config.extract is False
    assert config.summary is True
    assert config.timeout == constants.DEFAULT_TIMEOUT
    assert config.base_dir is None
    assert "Ignoring config key extract" in caplog.text
    assert "Ignoring config key timeout" in caplog.text


@pytest.mark.parametrize("timeout", [0, -5, True, None])
def test_timeout_must_be_positive_number(timeout):
    assert LoaderConfig.from_dict({"timeout": timeout}).timeout == constants.DEFAULT_TIMEOUT


def test_fractional_timeout_is_accepted():
    assert LoaderConfig.from_dict({"timeout": 2.5}).timeout == 2.5
