# =========================================================================
#   CppUMockGen - Mock generator for CppUTest
#   
#   Copyright (c) 2025 Christian Renzel
#   SPDX-License-Identifier: MIT
# =========================================================================

import io

import pytest

from cppumockgen_config import CppUMockGenConfig
from cppumockgen_mock_generator import CppUMockGenMockGenerator
from cppumockgen_parser import CppUMockGenParser


@pytest.fixture(autouse=True)
def plain_console(monkeypatch):
    """Keeps console output free of colour codes unless a test forces a terminal."""
    for name in ("FORCE_COLOR", "NO_COLOR", "TTY_COMPATIBLE", "TTY_INTERACTIVE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TERM", "xterm")


@pytest.fixture
def header(tmp_path):
    """Writes a header into the test directory and returns its path."""
    def write(source, name="header.h"):
        path = tmp_path / name
        path.write_text(source)
        return str(path)
    return write


@pytest.fixture
def parse(header):
    """
    Parses a header and returns the parser, asserting that parsing succeeded.
    Pass ``expect_success=False`` to get the parser and its error output back.
    """
    def run(source, cpp=False, overrides=(), underlying_typedef=False, std="",
            name=None, expect_success=True):
        path = header(source, name or ("header.hpp" if cpp else "header.h"))
        err = io.StringIO()
        parser = CppUMockGenParser(err)
        config = CppUMockGenConfig(underlying_typedef, list(overrides))
        result = parser.parse(path, config, cpp, std)
        if expect_success:
            assert result, err.getvalue()
            return parser
        assert not result
        return parser, err.getvalue()
    return run


@pytest.fixture
def mock_of(parse):
    """Mock implementation of the single callable declared in a header."""
    def run(source, **kwargs):
        parser = parse(source, **kwargs)
        assert len(parser.functions) == 1
        return CppUMockGenMockGenerator().generate(parser.functions[0])
    return run
