"""
Tests for utility helpers
"""

import io
import os

from loadk import utils


def test_convert_link_target():
    assert utils.convert_link_target(b"udd:joe:Notes\x00\x00") == os.sep.join(["UDD", "JOE", "NOTES"])
    assert utils.convert_link_target(b"plain") == "PLAIN"
    assert utils.convert_link_target(b":PER:X") == os.sep + "PER" + os.sep + "X"


def test_join_working_path():
    assert utils.join_working_path("", "A") == "A"
    assert utils.join_working_path(os.path.join("base", "dir"), "A") == os.path.join("base", "dir", "A")


def test_parent_dir():
    assert utils.parent_dir(os.path.join("base", "A")) == "base"
    assert utils.parent_dir("A") == ""


def test_normalize_base_dir():
    assert utils.normalize_base_dir("") == ""
    assert utils.normalize_base_dir(os.path.join("base", "A") + os.sep) == os.path.join("base", "A")


def test_format_size():
    assert utils.format_size(512) == "512.0 B"
    assert utils.format_size(3 * 1024 * 1024) == "3.0 MB"


def test_ascii_symbols():
    utils.setup_symbols(force_ascii=True)
    assert utils.SYMBOL_CHECK == "[OK]"
    assert utils.SYMBOL_ERROR == "[ERROR]"


def test_ascii_env_var(monkeypatch):
    monkeypatch.setenv("LOADK_ASCII", "1")
    utils.setup_symbols(stream=io.StringIO())
    assert utils.SYMBOL_WARNING == "[WARNING]"


def test_unicode_markers_for_utf8_stream(monkeypatch):
    monkeypatch.delenv("LOADK_ASCII", raising=False)
    stream = io.TextIOWrapper(io.BytesIO(), encoding="utf-8")
    assert utils.can_print_markers(stream)
    utils.setup_symbols(stream=stream)
    assert utils.SYMBOL_CHECK == "\u2713"
    utils.setup_symbols(force_ascii=True)


def test_ascii_markers_for_ascii_stream():
    stream = io.TextIOWrapper(io.BytesIO(), encoding="ascii")
    assert not utils.can_print_markers(stream)
    assert not utils.can_print_markers(io.StringIO())
