"""
Go Syntax Analysis

Tree-sitter based parsing of Go compilation units and the data model for
the struct and interface declarations extracted from them.
"""

from typegraph.ast.models import (
    EMPTY_INTERFACE,
    ArgInfo,
    FieldInfo,
    GoFile,
    GoType,
    ImportInfo,
    InterfaceInfo,
    MapType,
    MethodInfo,
    ModuleInfo,
    NamedType,
    PackageInfo,
    PointerType,
    SliceType,
    StructInfo,
    TypeKey,
    UnsupportedType,
)
from typegraph.ast.parser import GoParser, get_parser

__all__ = [
    # Type descriptors
    "GoType",
    "TypeKey",
    "NamedType",
    "PointerType",
    "SliceType",
    "MapType",
    "UnsupportedType",
    "EMPTY_INTERFACE",
    # Declarations
    "ImportInfo",
    "FieldInfo",
    "ArgInfo",
    "MethodInfo",
    "StructInfo",
    "InterfaceInfo",
    # Modules
    "GoFile",
    "ModuleInfo",
    "PackageInfo",
    # Parser
    "GoParser",
    "get_parser",
]
