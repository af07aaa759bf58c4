"""Documentation model assembled from a Go source tree.

Field metadata drives serialization (see ``godocfriend.export``): fields
marked ``OMIT_EMPTY`` are left out when empty, fields marked ``SKIP`` are
back-references that never serialize.
"""

import weakref
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

OMIT_EMPTY = {"omitempty": True}
SKIP = {"serialize": False}


@dataclass
class Import:
    """Represents an import declaration for a dependent package."""
    package_name: str
    alias: str = field(default="", metadata=OMIT_EMPTY)


@dataclass
class Value:
    """Represents a constant or variable declaration."""
    name: str
    type: str = field(default="", metadata=OMIT_EMPTY)
    immutable: bool = field(default=False, metadata=OMIT_EMPTY)
    expression: str = field(default="", metadata=OMIT_EMPTY)  # initializer, only if short enough
    value: str | None = field(default=None, metadata=OMIT_EMPTY)  # unquoted string literal
    comment: str = field(default="", metadata=OMIT_EMPTY)


@dataclass
class Arg:
    """Represents a function argument or return value."""
    type: str
    name: str = field(default="", metadata=OMIT_EMPTY)


@dataclass
class Method:
    """Represents a function declaration, both package-level and type methods.

    A Method is owned either by a Type (``owner`` is set) or by one of its
    Package's function, test or example lists, never both.
    """
    name: str
    label: str = field(default="", metadata=OMIT_EMPTY)
    for_: str = field(default="", metadata={**OMIT_EMPTY, "name": "for"})
    expected_output: str = field(default="", metadata=OMIT_EMPTY)
    comment: str = field(default="", metadata=OMIT_EMPTY)
    pointer_receiver: bool = field(default=False, metadata=OMIT_EMPTY)
    receiver_name: str = field(default="", metadata=OMIT_EMPTY)
    arguments: list[Arg] = field(default_factory=list, metadata=OMIT_EMPTY)
    returns: list[Arg] = field(default_factory=list, metadata=OMIT_EMPTY)
    signature: str = field(default="", metadata=OMIT_EMPTY)
    source: str = field(default="", metadata=OMIT_EMPTY)
    is_package_level: bool = False
    _owner: weakref.ReferenceType | None = field(default=None, repr=False, compare=False, metadata=SKIP)

    @property
    def owner(self) -> "Type | None":
        """The Type this method is attached to, if any."""
        return self._owner() if self._owner is not None else None

    def attach_to(self, owner: "Type") -> None:
        self._owner = weakref.ref(owner)


@dataclass
class Field:
    """Represents a single exported field in a struct declaration."""
    name: str
    type: str
    comment: str = field(default="", metadata=OMIT_EMPTY)


@dataclass
class Type:
    """Represents a type declaration with its fields and methods."""
    name: str
    meta_kind: str = field(default="struct", metadata=OMIT_EMPTY)
    comment: str = field(default="", metadata=OMIT_EMPTY)
    fields: list[Field] = field(default_factory=list, metadata=OMIT_EMPTY)
    methods: list[Method] = field(default_factory=list, metadata=OMIT_EMPTY)
    source: str = field(default="", metadata=OMIT_EMPTY)
    has_unexported_fields: bool = field(default=False, metadata=OMIT_EMPTY)

    def add_method(self, method: Method) -> None:
        """Attach a method and keep the method list sorted by name."""
        method.attach_to(self)
        self.methods.append(method)
        self.methods.sort(key=lambda m: m.name)


class TypeRegistry(dict):
    """Package-scoped mapping from exported type name to Type.

    Every file of a package is extracted against the same registry, so a
    type declared in one file and given methods in another ends up as a
    single entity.
    """

    def find_or_create(self, name: str, meta_kind: str = "struct") -> Type:
        typ = self.get(name)
        if typ is None:
            typ = Type(name=name, meta_kind=meta_kind)
            self[name] = typ
        return typ

    def merge(self, incoming: Type) -> Type:
        """Merge a freshly extracted Type into the registry.

        Scalar attributes of an existing entry are overwritten (the last
        extraction wins); fields and methods accumulate.

        Args:
            incoming: Type built from one declaration

        Returns:
            The registered Type
        """
        existing = self.get(incoming.name)
        if existing is None:
            self[incoming.name] = incoming
            for method in incoming.methods:
                method.attach_to(incoming)
            return incoming

        existing.meta_kind = incoming.meta_kind
        existing.comment = incoming.comment
        existing.source = incoming.source
        existing.has_unexported_fields = incoming.has_unexported_fields
        existing.fields.extend(incoming.fields)
        for method in incoming.methods:
            existing.add_method(method)
        return existing

    def declared_type_for(self, type_string: str) -> Type | None:
        """Find the registered Type a type string names, ignoring a pointer marker."""
        return self.get(type_string.removeprefix("*"))


@dataclass
class File:
    """Represents a Go source file and its per-kind declaration counts."""
    name: str
    size: int = 0
    line_count: int = 0
    source_line_count: int = 0  # lines that are neither blank nor only a // comment
    imports: list[Import] = field(default_factory=list, metadata=OMIT_EMPTY)
    main_function: bool = field(default=False, metadata=OMIT_EMPTY)
    function_count: int = 0
    type_count: int = 0
    constant_count: int = 0
    variable_count: int = 0


@dataclass
class Rollup:
    """Statistical rollup of a set of coverage ratios."""
    mean: float = 0.0
    std_dev: float = 0.0
    geometric_mean: float = 0.0
    harmonic_mean: float = 0.0
    median: float = 0.0
    minimum: float = 0.0
    maximum: float = 0.0


@dataclass
class PackageSummary:
    """Flat description of a package, as listed in a Module."""
    name: str
    import_path: str
    canonical_import_path: str
    parent_package: str = field(default="", metadata=OMIT_EMPTY)
    url: str = field(default="", metadata=OMIT_EMPTY)
    synopsis: str = field(default="", metadata=OMIT_EMPTY)
    comment_word_count: int = 0
    line_count: int = 0
    source_line_count: int = 0
    function_count: int = 0
    type_count: int = 0
    constant_count: int = 0
    variable_count: int = 0
    statistics: Rollup = field(default_factory=Rollup)


@dataclass
class Package:
    """A Go package and everything documented in it.

    The per-kind counters are derived from ``files`` on every access; only
    ``comment_word_count`` and ``statistics`` are stored, and those are
    recomputed by ``godocfriend.coverage.recalc_totals``.
    """
    name: str
    import_path: str = ""
    canonical_import_path: str = ""
    parent_package: str = field(default="", metadata=OMIT_EMPTY)
    url: str = field(default="", metadata=OMIT_EMPTY)
    synopsis: str = ""
    files: list[File] = field(default_factory=list)
    constants: list[Value] = field(default_factory=list, metadata=OMIT_EMPTY)
    variables: list[Value] = field(default_factory=list, metadata=OMIT_EMPTY)
    functions: list[Method] = field(default_factory=list, metadata=OMIT_EMPTY)
    examples: list[Method] = field(default_factory=list, metadata=OMIT_EMPTY)
    tests: list[Method] = field(default_factory=list, metadata=OMIT_EMPTY)
    types: TypeRegistry = field(default_factory=TypeRegistry, metadata=OMIT_EMPTY)
    packages: list["Package"] = field(default_factory=list, metadata=OMIT_EMPTY)
    comment_word_count: int = 0
    statistics: Rollup = field(default_factory=Rollup)

    computed_fields = (
        "line_count",
        "source_line_count",
        "function_count",
        "type_count",
        "constant_count",
        "variable_count",
    )

    @property
    def line_count(self) -> int:
        return sum(f.line_count for f in self.files)

    @property
    def source_line_count(self) -> int:
        return sum(f.source_line_count for f in self.files)

    @property
    def function_count(self) -> int:
        return sum(f.function_count for f in self.files)

    @property
    def type_count(self) -> int:
        return sum(f.type_count for f in self.files)

    @property
    def constant_count(self) -> int:
        return sum(f.constant_count for f in self.files)

    @property
    def variable_count(self) -> int:
        return sum(f.variable_count for f in self.files)

    def summary(self) -> PackageSummary:
        return PackageSummary(
            name=self.name,
            import_path=self.import_path,
            canonical_import_path=self.canonical_import_path,
            parent_package=self.parent_package,
            url=self.url,
            synopsis=self.synopsis,
            comment_word_count=self.comment_word_count,
            line_count=self.line_count,
            source_line_count=self.source_line_count,
            function_count=self.function_count,
            type_count=self.type_count,
            constant_count=self.constant_count,
            variable_count=self.variable_count,
            statistics=self.statistics,
        )


@dataclass
class Metadata:
    title: str = ""
    version: str = field(default="", metadata=OMIT_EMPTY)
    generator_version: str = ""
    url: str = field(default="", metadata=OMIT_EMPTY)


class WalkSignal(Enum):
    """What a package visitor wants the traversal to do next."""
    CONTINUE = "continue"
    STOP_SUBTREE = "stop_subtree"  # skip the visited package's subpackages
    ABORT = "abort"  # end the traversal; not an error


PackageVisitor = Callable[["Package"], WalkSignal | None]


@dataclass
class Module:
    """A scanned source tree: root package plus a flat, sorted package list."""
    metadata: Metadata
    package: Package
    package_list: list[PackageSummary] = field(default_factory=list)

    def walk(self, visitor: PackageVisitor) -> None:
        """Visit every package depth-first, parents before their subpackages.

        A visitor returning None is treated as CONTINUE. Exceptions raised by
        the visitor propagate to the caller.
        """
        if visitor is not None:
            self._walk_package(self.package, visitor)

    def _walk_package(self, current: Package, visitor: PackageVisitor) -> bool:
        """Returns False once the traversal has been aborted."""
        signal = visitor(current) or WalkSignal.CONTINUE
        if signal is WalkSignal.ABORT:
            return False
        if signal is WalkSignal.STOP_SUBTREE:
            return True

        for sub in current.packages:
            if not self._walk_package(sub, visitor):
                return False
        return True

    def find_package(self, name_or_import_path: str) -> Package | None:
        """Find the first package whose import path or name matches."""
        found = []

        def visit(pkg: Package) -> WalkSignal:
            if pkg.import_path == name_or_import_path or pkg.name == name_or_import_path:
                found.append(pkg)
                return WalkSignal.ABORT
            return WalkSignal.CONTINUE

        self.walk(visit)
        return found[0] if found else None
