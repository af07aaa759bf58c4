import re

import tree_sitter_go
from tree_sitter import Language, Parser

from godocfriend.errors import ParseError
from godocfriend.parsers.base import BaseParser
from godocfriend.syntax import (
    UNEXPORTED_FIELDS_MARKER,
    Ellipsis,
    FieldSpec,
    FuncDecl,
    Identifier,
    ImportSpec,
    Interface,
    Map,
    Other,
    ParamSpec,
    Pointer,
    Selector,
    Slice,
    SourceFile,
    StructShape,
    TypeExpr,
    TypeSpec,
    ValueSpec,
    is_exported,
)

# Toolchain directives are not part of a doc comment's text.
_DIRECTIVE = re.compile(r"^//(line |extern |export |[a-z0-9]+:[a-z0-9])")

_NAME_NODES = ("identifier", "field_identifier", "type_identifier")


class GoParser(BaseParser):
    """Parser for extracting declarations from Go source code using tree-sitter."""

    def __init__(self):
        self.language = Language(tree_sitter_go.language())
        self.parser = Parser(self.language)

    def parse_file(self, source_code: str, file_name: str) -> SourceFile:
        """Parse Go source code into a SourceFile.

        Args:
            source_code: Go source code to parse
            file_name: Base name of the file

        Returns:
            SourceFile holding the package clause, imports and top-level declarations

        Raises:
            ParseError: If tree-sitter reports an error or missing node
        """
        source = bytes(source_code, "utf8")
        tree = self.parser.parse(source)
        root_node = tree.root_node

        if root_node.has_error:
            raise ParseError(file_name, self._first_error_line(root_node))

        parsed = SourceFile(name=file_name, package_name="")

        for child in root_node.named_children:
            if child.type == "package_clause":
                for part in child.named_children:
                    if part.type == "package_identifier":
                        parsed.package_name = self._text(part, source)
                parsed.package_doc = self._doc_comment(child, source)
            elif child.type == "import_declaration":
                parsed.imports.extend(self._imports(child, source))
            elif child.type == "function_declaration" or child.type == "method_declaration":
                parsed.functions.append(self._function(child, source))
            elif child.type == "type_declaration":
                parsed.types.extend(self._type_declaration(child, source))
            elif child.type == "const_declaration":
                parsed.values.extend(self._value_declaration(child, "const", source))
            elif child.type == "var_declaration":
                parsed.values.extend(self._value_declaration(child, "var", source))

        return parsed

    @staticmethod
    def _text(node, source: bytes) -> str:
        return source[node.start_byte:node.end_byte].decode("utf8", errors="replace")

    def _first_error_line(self, node) -> int | None:
        """Find the 1-indexed line of the first ERROR or missing node."""
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
        for child in node.children:
            if child.has_error or child.is_missing:
                line = self._first_error_line(child)
                if line is not None:
                    return line
        return None

    def _names(self, node, source: bytes) -> list[str]:
        """Names bound by a spec; the field also covers the separating commas."""
        return [
            self._text(name_node, source)
            for name_node in node.children_by_field_name("name")
            if name_node.type in _NAME_NODES
        ]

    def _comment_group(self, node) -> list:
        """Collect the comments directly above a node with no blank line between.

        A comment trailing other code on its line ends the group.
        """
        comments = []
        row = node.start_point[0]
        sibling = node.prev_named_sibling

        while sibling is not None and sibling.type == "comment" and sibling.end_point[0] >= row - 1:
            before = sibling.prev_sibling
            while before is not None and before.type == "\n":
                before = before.prev_sibling
            if before is not None and before.type != "comment" and before.end_point[0] == sibling.start_point[0]:
                break
            comments.append(sibling)
            row = sibling.start_point[0]
            sibling = sibling.prev_named_sibling

        comments.reverse()
        return comments

    def _doc_comment(self, node, source: bytes) -> str:
        """Extract doc comment text the way Go's CommentGroup.Text() does.

        Comment markers and one following space are dropped, toolchain
        directives are skipped and surrounding blank lines are trimmed.
        """
        lines = []
        for comment in self._comment_group(node):
            text = self._text(comment, source)
            if text.startswith("//"):
                if _DIRECTIVE.match(text):
                    continue
                text = text[2:]
                if text.startswith(" "):
                    text = text[1:]
                lines.append(text.rstrip())
            else:
                lines.extend(line.rstrip() for line in text[2:-2].splitlines())
        return "\n".join(lines).strip()

    def _imports(self, node, source: bytes) -> list[ImportSpec]:
        specs = []
        for child in node.named_children:
            if child.type == "import_spec":
                specs.append(self._import_spec(child, source))
            elif child.type == "import_spec_list":
                for item in child.named_children:
                    if item.type == "import_spec":
                        specs.append(self._import_spec(item, source))
        return specs

    def _import_spec(self, node, source: bytes) -> ImportSpec:
        path_node = node.child_by_field_name("path")
        name_node = node.child_by_field_name("name")
        path = self._text(path_node, source)[1:-1].strip() if path_node else ""
        name = self._text(name_node, source) if name_node else None
        return ImportSpec(path=path, name=name)

    def _type_expr(self, node, source: bytes) -> TypeExpr:
        """Convert a type node into the closed set of type expressions."""
        if node is None:
            return Other()

        kind = node.type
        if kind in ("type_identifier", "identifier"):
            return Identifier(self._text(node, source))
        if kind == "pointer_type":
            return Pointer(self._type_expr(self._first_named(node), source))
        if kind in ("slice_type", "array_type", "implicit_length_array_type"):
            return Slice(self._type_expr(node.child_by_field_name("element"), source))
        if kind == "map_type":
            return Map(
                self._type_expr(node.child_by_field_name("key"), source),
                self._type_expr(node.child_by_field_name("value"), source),
            )
        if kind == "qualified_type":
            return Selector(
                self._text(node.child_by_field_name("package"), source),
                self._text(node.child_by_field_name("name"), source),
            )
        if kind == "interface_type":
            return Interface()
        if kind == "parenthesized_type":
            return self._type_expr(self._first_named(node), source)
        return Other(self._text(node, source))

    @staticmethod
    def _first_named(node):
        for child in node.named_children:
            if child.type != "comment":
                return child
        return None

    def _parameters(self, node, source: bytes) -> list[ParamSpec]:
        """Extract a parameter, result or receiver list."""
        params = []
        for child in node.named_children:
            if child.type == "parameter_declaration":
                params.append(ParamSpec(
                    type=self._type_expr(child.child_by_field_name("type"), source),
                    names=self._names(child, source),
                ))
            elif child.type == "variadic_parameter_declaration":
                params.append(ParamSpec(
                    type=Ellipsis(self._type_expr(child.child_by_field_name("type"), source)),
                    names=self._names(child, source),
                ))
        return params

    def _function(self, node, source: bytes) -> FuncDecl:
        """Build a FuncDecl from a function_declaration or method_declaration."""
        decl = FuncDecl(
            name=self._text(node.child_by_field_name("name"), source),
            doc=self._doc_comment(node, source),
        )

        receiver = node.child_by_field_name("receiver")
        if receiver is not None:
            decl.receiver = self._parameters(receiver, source)

        params = node.child_by_field_name("parameters")
        if params is not None:
            decl.params = self._parameters(params, source)

        result = node.child_by_field_name("result")
        if result is not None:
            if result.type == "parameter_list":
                decl.results = self._parameters(result, source)
            else:
                decl.results = [ParamSpec(type=self._type_expr(result, source))]

        body = node.child_by_field_name("body")
        if body is not None:
            decl.body = self._text(body, source)

        return decl

    def _type_declaration(self, node, source: bytes) -> list[TypeSpec]:
        decl_doc = self._doc_comment(node, source)
        grouped = any(child.type == "(" for child in node.children)
        specs = []

        for child in node.named_children:
            if child.type not in ("type_spec", "type_alias"):
                continue

            type_node = child.child_by_field_name("type")
            # a lone spec renders with its keyword, a grouped one gets it prepended
            outer = child if grouped else node
            prefix = "type " if grouped else ""

            if type_node is not None and type_node.type == "struct_type":
                shape = StructShape(self._fields(type_node, source))
                rendered = self._struct_source(outer, type_node, source)
            else:
                shape = self._type_expr(type_node, source)
                rendered = self._text(outer, source)

            specs.append(TypeSpec(
                name=self._text(child.child_by_field_name("name"), source),
                shape=shape,
                doc=self._doc_comment(child, source) or decl_doc,
                source=prefix + rendered,
            ))

        return specs

    @staticmethod
    def _field_list(struct_node):
        for child in struct_node.named_children:
            if child.type == "field_declaration_list":
                return child
        return None

    def _fields(self, struct_node, source: bytes) -> list[FieldSpec]:
        fields = []
        field_list = self._field_list(struct_node)
        if field_list is None:
            return fields

        for child in field_list.named_children:
            if child.type != "field_declaration":
                continue
            fields.append(FieldSpec(
                type=self._type_expr(child.child_by_field_name("type"), source),
                names=self._names(child, source),
                doc=self._doc_comment(child, source),
            ))
        return fields

    def _field_is_exported(self, node, source: bytes) -> bool:
        names = self._names(node, source)
        if names:
            return any(is_exported(name) for name in names)

        # embedded field: visibility follows the embedded type's name
        type_node = node.child_by_field_name("type")
        while type_node is not None and type_node.type in ("qualified_type", "generic_type"):
            type_node = type_node.child_by_field_name("name" if type_node.type == "qualified_type" else "type")
        return type_node is not None and is_exported(self._text(type_node, source))

    def _line_span(self, node, source: bytes) -> tuple[int, int]:
        """Byte range covering a field, its doc comment and, when alone on them, its lines."""
        group = self._comment_group(node)
        start = group[0].start_byte if group else node.start_byte
        end = node.end_byte

        line_start = source.rfind(b"\n", 0, start) + 1
        if not source[line_start:start].strip():
            start = line_start

        line_end = source.find(b"\n", end)
        if line_end != -1:
            rest = source[end:line_end].strip()
            if not rest or rest.startswith(b"//"):
                end = line_end + 1

        return start, end

    def _struct_source(self, outer, struct_node, source: bytes) -> str:
        """Render a struct declaration with unexported fields replaced by a marker line."""
        field_list = self._field_list(struct_node)
        if field_list is None:
            return self._text(outer, source)

        edits = [
            (*self._line_span(child, source), "")
            for child in field_list.named_children
            if child.type == "field_declaration" and not self._field_is_exported(child, source)
        ]
        if not edits:
            return self._text(outer, source)

        closing = field_list.end_byte - 1
        line_start = source.rfind(b"\n", 0, closing) + 1
        indent = source[line_start:closing]
        if indent.strip():
            edits.append((closing, closing, f"\n\t{UNEXPORTED_FIELDS_MARKER}\n"))
        else:
            marker_line = f"{indent.decode('utf8')}\t{UNEXPORTED_FIELDS_MARKER}\n"
            edits.append((line_start, line_start, marker_line))

        pieces = []
        cursor = outer.start_byte
        for start, end, replacement in sorted(edits, key=lambda edit: (edit[0], edit[1])):
            if start > cursor:
                pieces.append(source[cursor:start].decode("utf8", errors="replace"))
            pieces.append(replacement)
            cursor = max(cursor, end)
        pieces.append(source[cursor:outer.end_byte].decode("utf8", errors="replace"))
        return "".join(pieces)

    @staticmethod
    def _specs(node, spec_type: str):
        """Yield const_spec/var_spec nodes, looking through an optional spec list."""
        for child in node.named_children:
            if child.type == spec_type:
                yield child
            elif child.type == f"{spec_type}_list":
                for item in child.named_children:
                    if item.type == spec_type:
                        yield item

    def _value_declaration(self, node, kind: str, source: bytes) -> list[ValueSpec]:
        """Extract const or var specs from a declaration, grouped or not."""
        decl_doc = self._doc_comment(node, source)
        values = []

        for spec in self._specs(node, f"{kind}_spec"):
            type_node = spec.child_by_field_name("type")
            value_node = spec.child_by_field_name("value")
            expressions = []
            if value_node is not None and value_node.type == "expression_list":
                expressions = [
                    self._text(expr, source).strip()
                    for expr in value_node.named_children
                    if expr.type != "comment"
                ]
            elif value_node is not None:
                expressions = [self._text(value_node, source).strip()]

            values.append(ValueSpec(
                kind=kind,
                names=self._names(spec, source),
                type=self._type_expr(type_node, source) if type_node is not None else None,
                values=expressions,
                doc=self._doc_comment(spec, source) or decl_doc,
            ))

        return values
