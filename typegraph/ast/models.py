"""
Data Models for Type Extraction

Structured representations of Go type declarations, modules and packages.

Type descriptors are frozen dataclasses and compare by value. A NamedType is
only a key: the body of the struct or interface it names lives in the
TypeRegistry, so descriptors never own each other through a named type and
cycles between packages are harmless.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, Union

from tree_sitter import Tree

from typegraph.configs.constants import EMPTY_INTERFACE_NAME

# (import path, name)
TypeKey = tuple[str, str]


# =============================================================================
# Type Descriptors
# =============================================================================


@dataclass(frozen=True)
class NamedType:
    """A declared or predeclared type, identified by import path and name.

    Equality and hashing use the registry key only.
    """

    name: str
    package: str = field(default="", compare=False)  # Qualifier at the reference site
    import_path: str = ""  # Empty for predeclared types and interface{}
    is_interface: bool = field(default=False, compare=False)

    @property
    def key(self) -> TypeKey:
        return (self.import_path, self.name)

    def is_imported(self, current_import_path: str) -> bool:
        """True if this type lives in a package other than current_import_path."""
        return bool(self.import_path) and self.import_path != current_import_path

    def named_types(self) -> Iterator["NamedType"]:
        yield self

    def to_source(self, current_import_path: str = "") -> str:
        if self.is_imported(current_import_path):
            return f"{self.package}.{self.name}"
        return self.name

    def __str__(self) -> str:
        if self.import_path:
            return f"{self.import_path}.{self.name}"
        return self.name


@dataclass(frozen=True)
class PointerType:
    """Pointer to another type (*T)."""

    elem: "GoType"

    def named_types(self) -> Iterator[NamedType]:
        yield from self.elem.named_types()

    def to_source(self, current_import_path: str = "") -> str:
        return "*" + self.elem.to_source(current_import_path)

    def __str__(self) -> str:
        return f"*{self.elem}"


@dataclass(frozen=True)
class SliceType:
    """Slice, array or variadic parameter of another type ([]T)."""

    elem: "GoType"

    def named_types(self) -> Iterator[NamedType]:
        yield from self.elem.named_types()

    def to_source(self, current_import_path: str = "") -> str:
        return "[]" + self.elem.to_source(current_import_path)

    def __str__(self) -> str:
        return f"[]{self.elem}"


@dataclass(frozen=True)
class MapType:
    """Map from key type to value type (map[K]V)."""

    key: "GoType"
    value: "GoType"

    def named_types(self) -> Iterator[NamedType]:
        yield from self.key.named_types()
        yield from self.value.named_types()

    def to_source(self, current_import_path: str = "") -> str:
        return (
            f"map[{self.key.to_source(current_import_path)}]"
            f"{self.value.to_source(current_import_path)}"
        )

    def __str__(self) -> str:
        return f"map[{self.key}]{self.value}"


@dataclass(frozen=True)
class UnsupportedType:
    """A type expression that generated code cannot represent."""

    reason: str

    def named_types(self) -> Iterator[NamedType]:
        return iter(())

    def to_source(self, current_import_path: str = "") -> str:
        raise ValueError(f"unsupported type has no source form: {self.reason}")

    def __str__(self) -> str:
        return f"<unsupported: {self.reason}>"


GoType = Union[NamedType, PointerType, SliceType, MapType]
ResolvedType = Union[GoType, UnsupportedType]

EMPTY_INTERFACE = NamedType(name=EMPTY_INTERFACE_NAME, is_interface=True)


# =============================================================================
# Declarations
# =============================================================================


@dataclass(frozen=True)
class ImportInfo:
    """Represents an import declaration."""

    name: str  # Display name: alias if given, else the derived package name
    path: str
    alias: Optional[str] = None


@dataclass
class FieldInfo:
    """Represents a struct field."""

    name: str  # Embedded fields use the embedded type's name
    type: GoType
    tag: str = ""  # Raw tag literal including its quotes
    embedded: bool = False


@dataclass
class ArgInfo:
    """Represents a method parameter or result."""

    name: str  # Empty for unnamed parameters
    type: GoType


@dataclass
class MethodInfo:
    """Represents an interface method signature."""

    name: str
    args: list[ArgInfo] = field(default_factory=list)
    results: list[ArgInfo] = field(default_factory=list)

    def types(self) -> Iterator[GoType]:
        for arg in self.args:
            yield arg.type
        for result in self.results:
            yield result.type


@dataclass
class StructInfo:
    """Represents a struct type declaration."""

    name: str
    fields: list[FieldInfo] = field(default_factory=list)
    used_imports: list[ImportInfo] = field(default_factory=list)

    @property
    def dependencies(self) -> list[ImportInfo]:
        return self.used_imports

    def get_field(self, name: str) -> Optional[FieldInfo]:
        """Get a field by name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None


@dataclass
class InterfaceInfo:
    """Represents an interface type declaration."""

    name: str
    methods: list[MethodInfo] = field(default_factory=list)
    dependencies: list[ImportInfo] = field(default_factory=list)

    def get_method(self, name: str) -> Optional[MethodInfo]:
        """Get a method by name."""
        for m in self.methods:
            if m.name == name:
                return m
        return None


Declaration = Union[StructInfo, InterfaceInfo]


# =============================================================================
# Modules and Packages
# =============================================================================


@dataclass
class GoFile:
    """One parsed compilation unit."""

    path: Path  # Absolute
    package: str  # Name from the package clause
    module: str  # Module identity from go.mod
    module_root: Path
    import_path: str  # Import path of the file's package
    imports: list[ImportInfo]
    tree: Tree
    source: bytes

    @property
    def package_dir(self) -> str:
        """Directory of the file relative to the module root, "." for the root."""
        rel = self.path.parent.relative_to(self.module_root).as_posix()
        return rel or "."

    def import_for(self, qualifier: str) -> Optional[ImportInfo]:
        """Find the import declaration a `qualifier.Name` reference uses."""
        for imp in self.imports:
            if imp.alias is not None:
                if imp.alias == qualifier:
                    return imp
            elif imp.name == qualifier:
                return imp
        return None


@dataclass
class PackageInfo:
    """Represents one package directory of a module."""

    name: str  # Directory relative to the module root, "." for the root
    import_path: str
    package_name: str = ""  # Name from the package clause
    structs: list[StructInfo] = field(default_factory=list)
    interfaces: list[InterfaceInfo] = field(default_factory=list)
    parsed_files: set[str] = field(default_factory=set)

    def is_parsed(self, path: str) -> bool:
        return path in self.parsed_files


@dataclass
class ModuleInfo:
    """Represents a Go module rooted at a go.mod file."""

    name: str  # Module identity
    root: Path  # Absolute
    replaces: dict[str, Path] = field(default_factory=dict)
    packages: dict[str, PackageInfo] = field(default_factory=dict)

    def owns(self, import_path: str) -> bool:
        return import_path == self.name or import_path.startswith(self.name + "/")
