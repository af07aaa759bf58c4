"""Parser-neutral structures describing one parsed Go source file.

A parser (see ``godocfriend.parsers``) turns raw source into a ``SourceFile``;
the extractor only ever looks at these structures, never at a concrete
syntax tree.
"""

from dataclasses import dataclass, field


# Type expressions form a closed set of shapes. Anything the parser cannot
# express with the first seven becomes ``Other``.

@dataclass(frozen=True)
class Identifier:
    name: str


@dataclass(frozen=True)
class Pointer:
    elem: "TypeExpr"


@dataclass(frozen=True)
class Slice:
    elem: "TypeExpr"


@dataclass(frozen=True)
class Map:
    key: "TypeExpr"
    value: "TypeExpr"


@dataclass(frozen=True)
class Selector:
    """A package-qualified identifier such as ``http.Request``."""
    qualifier: str
    name: str


@dataclass(frozen=True)
class Interface:
    pass


@dataclass(frozen=True)
class Ellipsis:
    elem: "TypeExpr"


@dataclass(frozen=True)
class Other:
    text: str = ""


TypeExpr = Identifier | Pointer | Slice | Map | Selector | Interface | Ellipsis | Other


def type_string(expr: TypeExpr | None) -> str:
    """Render a type expression in its canonical string form.

    Args:
        expr: Type expression, or None when no type was declared

    Returns:
        Canonical type string. Shapes outside the supported set (and None)
        render as an empty string.
    """
    if isinstance(expr, Identifier):
        return expr.name
    if isinstance(expr, Slice):
        return "[]" + type_string(expr.elem)
    if isinstance(expr, Pointer):
        return "*" + type_string(expr.elem)
    if isinstance(expr, Map):
        return f"map[{type_string(expr.key)}]{type_string(expr.value)}"
    if isinstance(expr, Selector):
        return f"{expr.qualifier}.{expr.name}"
    if isinstance(expr, Interface):
        return "interface{}"
    if isinstance(expr, Ellipsis):
        return "..." + type_string(expr.elem)
    return ""


@dataclass
class ImportSpec:
    path: str
    name: str | None = None  # explicit alias, None if absent


@dataclass
class ParamSpec:
    """One entry of a parameter, result or receiver list.

    ``names`` is empty for unnamed entries (``func(int) error``).
    """
    type: TypeExpr
    names: list[str] = field(default_factory=list)


@dataclass
class FuncDecl:
    name: str
    doc: str = ""
    receiver: list[ParamSpec] | None = None  # None for package-level functions
    params: list[ParamSpec] = field(default_factory=list)
    results: list[ParamSpec] = field(default_factory=list)
    body: str = ""


@dataclass
class FieldSpec:
    type: TypeExpr
    names: list[str] = field(default_factory=list)  # empty for embedded fields
    doc: str = ""


@dataclass
class StructShape:
    fields: list[FieldSpec] = field(default_factory=list)


@dataclass
class TypeSpec:
    name: str
    shape: StructShape | TypeExpr
    doc: str = ""
    source: str = ""


@dataclass
class ValueSpec:
    kind: str  # "const" or "var"
    names: list[str]
    type: TypeExpr | None = None
    values: list[str] = field(default_factory=list)  # rendered initializer expressions
    doc: str = ""


@dataclass
class SourceFile:
    """Everything the extractor needs from one parsed file."""
    name: str
    package_name: str
    package_doc: str = ""
    imports: list[ImportSpec] = field(default_factory=list)
    types: list[TypeSpec] = field(default_factory=list)
    values: list[ValueSpec] = field(default_factory=list)
    functions: list[FuncDecl] = field(default_factory=list)


# Inserted by parsers into rendered struct sources in place of fields that
# are not visible outside the package.
UNEXPORTED_FIELDS_MARKER = "// contains filtered or unexported fields"


def is_exported(name: str) -> bool:
    """Return whether a Go identifier is visible outside its package."""
    return name[:1].isupper()
