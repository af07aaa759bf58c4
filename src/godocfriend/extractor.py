"""Conversion of one parsed file into documentation entities.

The extractor never returns entities; it appends them to the registries of
the Package it was given and bumps the per-kind counters of the File.
"""

import logging
import re

from godocfriend.models import Arg, Field, File, Import, Method, Package, Type, Value
from godocfriend.syntax import (
    UNEXPORTED_FIELDS_MARKER,
    FuncDecl,
    Identifier,
    ImportSpec,
    Other,
    ParamSpec,
    Pointer,
    SourceFile,
    StructShape,
    TypeSpec,
    ValueSpec,
    is_exported,
    type_string,
)

logger = logging.getLogger(__name__)

# Initializers rendering longer than this are not captured.
MAX_EXPRESSION_SNIPPET_LENGTH = 64

ENTRY_POINT = "main"
TEST_PREFIX = "Test"
EXAMPLE_PREFIX = "Example"

_OUTPUT_HEADER = re.compile(r"^\s*//\s*(?:Unordered output|Output):(.*)$", re.IGNORECASE)
_WORD_SEPARATORS = re.compile(r"[_\-\s]+")
# the marker together with the indentation and line break around it
_MARKER_LINE = re.compile(r"[ \t]*" + re.escape(UNEXPORTED_FIELDS_MARKER) + r"[ \t]*\n?")


def build_signature(method: Method) -> str:
    """Render a method's source-style signature.

    Examples:
        >>> build_signature(Method(name="Get", arguments=[Arg(type="string", name="key")],
        ...                        returns=[Arg(type="int"), Arg(type="error")]))
        'Get(key string) (int, error)'
    """
    args = ", ".join(_arg_text(arg) for arg in method.arguments)
    signature = f"{method.name}({args})"

    returns = [_arg_text(ret) for ret in method.returns]
    if len(returns) == 1:
        signature += " " + returns[0]
    elif len(returns) > 1:
        signature += " (" + ", ".join(returns) + ")"

    return signature


def _arg_text(arg: Arg) -> str:
    return f"{arg.name} {arg.type}" if arg.name else arg.type


def humanize_label(label: str) -> str:
    """Capitalize every word of an example label and join the words.

    ``basic`` becomes ``Basic``; ``with_options`` becomes ``WithOptions``.
    """
    words = [word for word in _WORD_SEPARATORS.split(label) if word]
    return "".join(word[0].upper() + word[1:] for word in words)


def unwrap_string_literal(expression: str) -> str | None:
    """Return the contents of a single quoted or raw string literal, else None.

    Expressions that merely start and end with a quote, such as
    ``"1." + minor + ".0"``, are not literals.
    """
    if len(expression) < 2 or expression[0] != expression[-1]:
        return None

    quote, inner = expression[0], expression[1:-1]
    if quote == "`":
        return None if "`" in inner else inner
    if quote != '"':
        return None

    escaped = False
    for char in inner:
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == '"':
            return None

    # a trailing backslash would escape the closing quote
    return None if escaped else inner


def expected_output(body: str) -> str:
    """Extract the ``// Output:`` block from an example function body."""
    lines = body.splitlines()
    for index, line in enumerate(lines):
        header = _OUTPUT_HEADER.match(line)
        if header is None:
            continue

        output = [header.group(1).strip()]
        for following in lines[index + 1:]:
            stripped = following.strip()
            if not stripped.startswith("//"):
                break
            text = stripped[2:]
            output.append(text[1:] if text.startswith(" ") else text)
        return "\n".join(output).strip()

    return ""


class FileExtractor:
    """Converts one file's declarations into entities of its owning Package.

    Type declarations and everything else are extracted in two separate
    passes so that the assembler can register every type of a package
    before any function is classified.
    """

    def __init__(self, source: SourceFile, file: File, package: Package):
        self.source = source
        self.file = file
        self.package = package

    def extract(self) -> None:
        """Run both passes over this file."""
        self.extract_types()
        self.extract_declarations()

    def extract_types(self) -> None:
        for spec in self.source.types:
            self._append_type(spec)

    def extract_declarations(self) -> None:
        self.file.imports = [self._import(spec) for spec in self.source.imports]

        for spec in self.source.values:
            self._append_values(spec)

        for decl in self.source.functions:
            self._append_function(decl)

    @staticmethod
    def _import(spec: ImportSpec) -> Import:
        alias = spec.name if spec.name else spec.path.rsplit("/", 1)[-1]
        return Import(package_name=spec.path, alias=alias)

    def _append_values(self, spec: ValueSpec) -> None:
        # package-level values are documented whether exported or not
        for index, name in enumerate(spec.names):
            value = Value(
                name=name,
                type=type_string(spec.type),
                immutable=spec.kind == "const",
                comment=spec.doc,
            )

            expression = self._initializer(spec, index)
            if expression is not None and len(expression) <= MAX_EXPRESSION_SNIPPET_LENGTH:
                value.expression = expression
                value.value = unwrap_string_literal(expression)

            if spec.kind == "const":
                self.package.constants.append(value)
                self.file.constant_count += 1
            else:
                self.package.variables.append(value)
                self.file.variable_count += 1

    @staticmethod
    def _initializer(spec: ValueSpec, index: int) -> str | None:
        """Pick the initializer for the index-th name of a spec."""
        if not spec.values:
            return None
        if len(spec.values) == len(spec.names):
            return spec.values[index]
        return spec.values[0]

    def _append_type(self, spec: TypeSpec) -> None:
        if not is_exported(spec.name):
            logger.debug(f"{self.file.name}: skipping unexported type {spec.name}")
            return

        shape = spec.shape
        if isinstance(shape, Other):
            logger.debug(f"{self.file.name}: unhandled shape for type {spec.name}: {shape.text}")
            self.package.types.find_or_create(spec.name, meta_kind="")
            self.file.type_count += 1
            return

        typ = Type(name=spec.name, comment=spec.doc)
        if isinstance(shape, StructShape):
            typ.meta_kind = "struct"
            typ.fields = [
                Field(name=name, type=type_string(field_spec.type), comment=field_spec.doc)
                for field_spec in shape.fields
                for name in field_spec.names
                if is_exported(name)
            ]
        else:
            typ.meta_kind = type_string(shape)

        source, removed = _MARKER_LINE.subn("", spec.source)
        typ.has_unexported_fields = removed > 0
        typ.source = source

        self.package.types.merge(typ)
        self.file.type_count += 1

    @staticmethod
    def _args(specs: list[ParamSpec]) -> list[Arg]:
        args = []
        for spec in specs:
            type_str = type_string(spec.type)
            if spec.names:
                args.extend(Arg(type=type_str, name=name) for name in spec.names)
            else:
                args.append(Arg(type=type_str))
        return args

    def _append_function(self, decl: FuncDecl) -> None:
        if decl.receiver is None and decl.name == ENTRY_POINT:
            self.file.main_function = True
            return

        if not is_exported(decl.name):
            logger.debug(f"{self.file.name}: skipping unexported func {decl.name}")
            return

        method = Method(
            name=decl.name,
            comment=decl.doc,
            arguments=self._args(decl.params),
            returns=self._args(decl.results),
        )
        method.signature = build_signature(method)

        if decl.receiver is None:
            self._append_package_function(method, decl)
        else:
            self._append_type_method(method, decl.receiver)

    def _append_package_function(self, method: Method, decl: FuncDecl) -> None:
        method.is_package_level = True
        method.source = decl.body

        # a function whose first result is a type of this package documents
        # that type (constructor), but still counts as a package function
        owner = self.package.types.declared_type_for(method.returns[0].type) if method.returns else None

        if owner is not None:
            owner.add_method(method)
            self.file.function_count += 1
        elif method.name.startswith(TEST_PREFIX):
            self.package.tests.append(method)
        elif method.name.startswith(EXAMPLE_PREFIX):
            target, _, label = method.name.removeprefix(EXAMPLE_PREFIX).partition("_")
            method.for_ = target
            method.label = humanize_label(label)
            method.expected_output = expected_output(decl.body)
            self.package.examples.append(method)
        else:
            self.package.functions.append(method)
            self.file.function_count += 1

    def _append_type_method(self, method: Method, receiver: list[ParamSpec]) -> None:
        if not receiver:
            return

        entry = receiver[-1]
        if entry.names:
            method.receiver_name = entry.names[0]

        receiver_type = entry.type
        if isinstance(receiver_type, Pointer) and isinstance(receiver_type.elem, Identifier):
            method.pointer_receiver = True
            type_name = receiver_type.elem.name
        elif isinstance(receiver_type, Identifier):
            type_name = receiver_type.name
        else:
            logger.debug(f"{self.file.name}: unsupported receiver for method {method.name}")
            return

        # methods of invisible types are invisible themselves
        if not is_exported(type_name):
            return

        owner = self.package.types.find_or_create(type_name)
        owner.add_method(method)
        self.file.function_count += 1
