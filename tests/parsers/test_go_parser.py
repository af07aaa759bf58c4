import pytest

from godocfriend.errors import ParseError
from godocfriend.parsers.go_parser import GoParser
from godocfriend.syntax import (
    UNEXPORTED_FIELDS_MARKER,
    Ellipsis,
    Identifier,
    ImportSpec,
    Interface,
    Map,
    Other,
    ParamSpec,
    Pointer,
    Selector,
    Slice,
    StructShape,
)


@pytest.fixture(scope="module")
def parser():
    return GoParser()


def test_parse_package_clause(parser):
    source = """// Package demo does things.
package demo
"""
    parsed = parser.parse_file(source, "doc.go")

    assert parsed.name == "doc.go"
    assert parsed.package_name == "demo"
    assert parsed.package_doc == "Package demo does things."


def test_package_doc_requires_adjacent_comment(parser):
    source = """// Copyright header.

package demo
"""
    parsed = parser.parse_file(source, "demo.go")

    assert parsed.package_doc == ""


def test_parse_imports(parser):
    source = """package demo

import (
	"fmt"
	str "strings"
	"net/http"
)

import "os"
"""
    parsed = parser.parse_file(source, "demo.go")

    assert parsed.imports == [
        ImportSpec(path="fmt"),
        ImportSpec(path="strings", name="str"),
        ImportSpec(path="net/http"),
        ImportSpec(path="os"),
    ]


def test_parse_function(parser):
    source = """package demo

// Get fetches a value.
func Get(key string, opts ...Option) (value []byte, err error) {
	return nil, nil
}
"""
    parsed = parser.parse_file(source, "demo.go")

    assert len(parsed.functions) == 1
    decl = parsed.functions[0]
    assert decl.name == "Get"
    assert decl.doc == "Get fetches a value."
    assert decl.receiver is None
    assert decl.params == [
        ParamSpec(type=Identifier("string"), names=["key"]),
        ParamSpec(type=Ellipsis(Identifier("Option")), names=["opts"]),
    ]
    assert decl.results == [
        ParamSpec(type=Slice(Identifier("byte")), names=["value"]),
        ParamSpec(type=Identifier("error"), names=["err"]),
    ]
    assert decl.body.startswith("{")
    assert "return nil, nil" in decl.body


def test_parse_shared_parameter_names(parser):
    source = """package demo

func Add(a, b int) int {
	return a + b
}
"""
    decl = parser.parse_file(source, "demo.go").functions[0]

    assert decl.params == [ParamSpec(type=Identifier("int"), names=["a", "b"])]
    assert decl.results == [ParamSpec(type=Identifier("int"))]


def test_parse_method_receiver(parser):
    source = """package demo

func (w *Widget) Spin() {}

func (Widget) Stop() {}
"""
    parsed = parser.parse_file(source, "demo.go")

    spin, stop = parsed.functions
    assert spin.name == "Spin"
    assert spin.receiver == [ParamSpec(type=Pointer(Identifier("Widget")), names=["w"])]
    assert stop.receiver == [ParamSpec(type=Identifier("Widget"))]


def test_parse_struct_type(parser):
    source = """package demo

// Config holds settings.
type Config struct {
	// Name is the name.
	Name string
	Headers map[string][]string
	Client *http.Client
	Any interface{}
	Values [4]int
}
"""
    parsed = parser.parse_file(source, "demo.go")

    assert len(parsed.types) == 1
    spec = parsed.types[0]
    assert spec.name == "Config"
    assert spec.doc == "Config holds settings."
    assert isinstance(spec.shape, StructShape)

    fields = {field.names[0]: field for field in spec.shape.fields}
    assert fields["Name"].type == Identifier("string")
    assert fields["Name"].doc == "Name is the name."
    assert fields["Headers"].type == Map(Identifier("string"), Slice(Identifier("string")))
    assert fields["Client"].type == Pointer(Selector("http", "Client"))
    assert fields["Any"].type == Interface()
    assert fields["Values"].type == Slice(Identifier("int"))
    assert spec.source.startswith("type Config struct {")
    assert UNEXPORTED_FIELDS_MARKER not in spec.source


def test_struct_source_filters_unexported_fields(parser):
    source = """package demo

type Config struct {
	Name string
	hidden bool
}
"""
    spec = parser.parse_file(source, "demo.go").types[0]

    assert spec.source == (
        "type Config struct {\n"
        "\tName string\n"
        f"\t{UNEXPORTED_FIELDS_MARKER}\n"
        "}"
    )
    assert [field.names for field in spec.shape.fields] == [["Name"], ["hidden"]]


def test_parse_defined_and_other_types(parser):
    source = """package demo

type (
	// ID identifies things.
	ID string
	Handler func(int) error
)

type Alias = ID
"""
    parsed = parser.parse_file(source, "demo.go")

    by_name = {spec.name: spec for spec in parsed.types}
    assert by_name["ID"].shape == Identifier("string")
    assert by_name["ID"].doc == "ID identifies things."
    assert by_name["ID"].source == "type ID string"
    assert isinstance(by_name["Handler"].shape, Other)
    assert by_name["Alias"].shape == Identifier("ID")


def test_parse_values(parser):
    source = """package demo

const (
	// A is first.
	A = iota
	B
)

// Greeting says hi.
var Greeting, farewell = "hi", `bye`

var Timeout time.Duration
"""
    parsed = parser.parse_file(source, "demo.go")

    a, b, greeting, timeout = parsed.values
    assert a.kind == "const"
    assert a.names == ["A"]
    assert a.values == ["iota"]
    assert a.doc == "A is first."
    assert b.names == ["B"]
    assert b.values == []
    assert b.doc == ""
    assert greeting.kind == "var"
    assert greeting.names == ["Greeting", "farewell"]
    assert greeting.values == ['"hi"', "`bye`"]
    assert greeting.doc == "Greeting says hi."
    assert timeout.type == Selector("time", "Duration")
    assert timeout.values == []


def test_trailing_comment_is_not_doc(parser):
    source = """package demo

var a = 1 // trailing
func F() {}
"""
    parsed = parser.parse_file(source, "demo.go")

    assert parsed.functions[0].doc == ""


def test_directives_are_not_doc_text(parser):
    source = """package demo

//go:generate stringer -type=Kind
// Kind is a kind.
type Kind int
"""
    spec = parser.parse_file(source, "demo.go").types[0]

    assert spec.doc == "Kind is a kind."


def test_block_comment_doc(parser):
    source = """package demo

/*
Run starts everything.
*/
func Run() {}
"""
    decl = parser.parse_file(source, "demo.go").functions[0]

    assert decl.doc == "Run starts everything."


def test_syntax_error_raises_parse_error(parser):
    source = """package demo

func broken( {
"""
    with pytest.raises(ParseError) as exc_info:
        parser.parse_file(source, "broken.go")

    assert exc_info.value.file_name == "broken.go"
    assert "broken.go" in str(exc_info.value)
