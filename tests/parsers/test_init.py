from pathlib import Path

from godocfriend.parsers import get_parser_for_file, is_source_file
from godocfriend.parsers.go_parser import GoParser


def test_get_parser_for_go_file():
    parser = get_parser_for_file(Path("main.go"))

    assert parser is not None
    assert isinstance(parser, GoParser)


def test_get_parser_for_uppercase_extension():
    parser = get_parser_for_file(Path("main.GO"))

    assert parser is not None
    assert isinstance(parser, GoParser)


def test_get_parser_for_test_file():
    parser = get_parser_for_file(Path("widget_test.go"))

    assert isinstance(parser, GoParser)


def test_get_parser_for_unsupported_file():
    assert get_parser_for_file(Path("README.md")) is None
    assert get_parser_for_file(Path("go.mod")) is None


def test_is_source_file():
    assert is_source_file(Path("pkg/file.go"))
    assert not is_source_file(Path("pkg/file.py"))
