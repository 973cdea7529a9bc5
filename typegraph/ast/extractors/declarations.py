"""
Declaration Extractor

Walks the top-level type declarations of one Go compilation unit and
builds struct and interface descriptors.

Only declarations with a struct or interface body produce descriptors;
aliases and scalar definitions are ignored. Field and argument types go
through the TypeExpressionResolver, and anything it cannot represent is
dropped with a diagnostic. Every named type met along the way is
registered, and references into other packages that have no body yet are
returned as pending so the resolver can pull those packages in.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Optional

from tree_sitter import Node

from typegraph.ast.extractors.base import GoExtractor
from typegraph.ast.extractors.types import TypeExpressionResolver
from typegraph.ast.models import (
    ArgInfo,
    FieldInfo,
    GoFile,
    GoType,
    ImportInfo,
    InterfaceInfo,
    MethodInfo,
    NamedType,
    PointerType,
    StructInfo,
    UnsupportedType,
)
from typegraph.configs.logging import get_logger
from typegraph.exceptions import InternalInvariantViolation, UnsupportedTypeExpression

if TYPE_CHECKING:
    from typegraph.resolve.registry import TypeRegistry

logger = get_logger("ast.declarations")

_METHOD_KINDS = ("method_elem", "method_spec")
_PARAMETER_KINDS = ("parameter_declaration", "variadic_parameter_declaration")


@dataclass
class FileDeclarations:
    """Declarations extracted from one compilation unit."""

    structs: list[StructInfo] = field(default_factory=list)
    interfaces: list[InterfaceInfo] = field(default_factory=list)
    pending: list[NamedType] = field(default_factory=list)  # Foreign types without a body


class DeclarationExtractor(GoExtractor):
    """Extracts struct and interface declarations from a compilation unit."""

    def __init__(
        self,
        registry: "TypeRegistry",
        diagnostics: Optional[list[UnsupportedTypeExpression]] = None,
        type_resolver: Optional[TypeExpressionResolver] = None,
    ):
        self.registry = registry
        self.diagnostics = diagnostics if diagnostics is not None else []
        self.type_resolver = type_resolver or TypeExpressionResolver()

    def extract(self, file: GoFile) -> FileDeclarations:
        """
        Extract all struct and interface declarations of a file.

        Registers each declaration under its own key with its body, and
        every referenced named type.

        Args:
            file: Parsed compilation unit

        Returns:
            FileDeclarations in source order, plus pending foreign types
        """
        result = FileDeclarations()
        referenced: list[NamedType] = []

        for spec in self._type_specs(file):
            name_node = spec.child_by_field_name("name")
            type_node = spec.child_by_field_name("type")
            if name_node is None or type_node is None:
                raise InternalInvariantViolation(
                    "type spec without name or type",
                    {"path": str(file.path), "line": self.line_of(spec)},
                )
            name = self.get_node_text(name_node, file.source)

            if type_node.type not in ("struct_type", "interface_type"):
                continue

            if spec.child_by_field_name("type_parameters") is not None:
                self._report(f"generic declaration {name} is not supported", file, spec)
                continue

            # First declaration wins, e.g. one file per build tag
            if self.registry.is_resolved((file.import_path, name)):
                logger.debug(
                    f"{file.path}:{self.line_of(spec)}: {file.import_path}.{name} "
                    "already declared; skipped"
                )
                continue

            if type_node.type == "struct_type":
                struct = self.extract_struct(name, type_node, file)
                result.structs.append(struct)
                types = [f.type for f in struct.fields]
                self._declare(NamedType(name, file.package, file.import_path), struct)
            else:
                iface = self.extract_interface(name, type_node, file)
                result.interfaces.append(iface)
                types = [t for m in iface.methods for t in m.types()]
                self._declare(
                    NamedType(name, file.package, file.import_path, is_interface=True), iface
                )
            referenced.extend(n for t in types for n in t.named_types())

        seen = set()
        for named in referenced:
            self.registry.add(named)
            if named.key in seen or not named.is_imported(file.import_path):
                continue
            seen.add(named.key)
            if not self.registry.is_resolved(named.key):
                result.pending.append(named)

        logger.debug(
            f"{file.path}: {len(result.structs)} structs, "
            f"{len(result.interfaces)} interfaces, {len(result.pending)} pending"
        )
        return result

    def _type_specs(self, file: GoFile) -> Iterable[Node]:
        for decl in self.find_children(file.tree.root_node, "type_declaration"):
            yield from self.find_children(decl, "type_spec")

    def _declare(self, named: NamedType, body) -> None:
        self.registry.add(named)
        self.registry.set(named.key, body)

    # Structs

    def extract_struct(self, name: str, node: Node, file: GoFile) -> StructInfo:
        """Build a StructInfo from a struct_type node."""
        struct = StructInfo(name=name)
        field_list = self.find_child(node, "field_declaration_list")
        if field_list is None:
            return struct

        for decl in self.find_children(field_list, "field_declaration"):
            struct.fields.extend(self._fields_from_declaration(decl, file))

        struct.used_imports = self.dependencies(file, (f.type for f in struct.fields))
        return struct

    def _fields_from_declaration(self, decl: Node, file: GoFile) -> list[FieldInfo]:
        type_node = decl.child_by_field_name("type")
        if type_node is None:
            raise InternalInvariantViolation(
                "field declaration without type",
                {"path": str(file.path), "line": self.line_of(decl)},
            )

        tag = ""
        tag_node = decl.child_by_field_name("tag")
        if tag_node is not None:
            tag = self.get_node_text(tag_node, file.source)

        names = [self.get_node_text(n, file.source) for n in decl.children_by_field_name("name")]
        resolved = self.type_resolver.resolve(type_node, file)
        if isinstance(resolved, UnsupportedType):
            self._report(resolved.reason, file, decl)
            return []

        if names:
            return [FieldInfo(name=n, type=resolved, tag=tag) for n in names]

        # Embedded field: named after the embedded type, *T embeds a pointer
        if any(child.type == "*" for child in decl.children):
            resolved = PointerType(resolved)
        return [FieldInfo(
            name=self._embedded_name(type_node, file),
            type=resolved,
            tag=tag,
            embedded=True,
        )]

    def _embedded_name(self, type_node: Node, file: GoFile) -> str:
        if type_node.type == "qualified_type":
            name_node = type_node.child_by_field_name("name")
            if name_node is not None:
                return self.get_node_text(name_node, file.source)
        return self.get_node_text(type_node, file.source)

    # Interfaces

    def extract_interface(self, name: str, node: Node, file: GoFile) -> InterfaceInfo:
        """
        Build an InterfaceInfo from an interface_type node.

        Embedded interfaces and constraint elements are not expanded.
        """
        iface = InterfaceInfo(name=name)
        for elem in node.named_children:
            if elem.type not in _METHOD_KINDS:
                continue
            name_node = elem.child_by_field_name("name")
            if name_node is None:
                raise InternalInvariantViolation(
                    "interface method without name",
                    {"path": str(file.path), "line": self.line_of(elem)},
                )
            iface.methods.append(MethodInfo(
                name=self.get_node_text(name_node, file.source),
                args=self.args_from_parameters(elem.child_by_field_name("parameters"), file),
                results=self._results(elem.child_by_field_name("result"), file),
            ))

        iface.dependencies = self.dependencies(
            file, (t for m in iface.methods for t in m.types())
        )
        return iface

    def _results(self, node: Optional[Node], file: GoFile) -> list[ArgInfo]:
        if node is None:
            return []
        if node.type == "parameter_list":
            return self.args_from_parameters(node, file)
        resolved = self.type_resolver.resolve(node, file)
        if isinstance(resolved, UnsupportedType):
            self._report(resolved.reason, file, node)
            return []
        return [ArgInfo(name="", type=resolved)]

    def args_from_parameters(self, node: Optional[Node], file: GoFile) -> list[ArgInfo]:
        """
        Build arguments from a parameter_list node.

        `a, b T` expands to one argument per name; unnamed parameters get
        an empty name; `...T` resolves as a slice of T.
        """
        if node is None:
            return []

        args = []
        for param in node.named_children:
            if param.type not in _PARAMETER_KINDS:
                continue
            type_node = param.child_by_field_name("type")
            if type_node is None:
                raise InternalInvariantViolation(
                    "parameter without type",
                    {"path": str(file.path), "line": self.line_of(param)},
                )

            resolved = self.type_resolver.resolve(
                type_node, file, variadic=param.type == "variadic_parameter_declaration"
            )
            if isinstance(resolved, UnsupportedType):
                self._report(resolved.reason, file, param)
                continue

            names = [self.get_node_text(n, file.source) for n in param.children_by_field_name("name")]
            if names:
                args.extend(ArgInfo(name=n, type=resolved) for n in names)
            else:
                args.append(ArgInfo(name="", type=resolved))
        return args

    # Dependencies and diagnostics

    def dependencies(self, file: GoFile, types: Iterable[GoType]) -> list[ImportInfo]:
        """Imports needed by the given types, in first-use order, without duplicates."""
        deps: dict[str, ImportInfo] = {}
        for t in types:
            for named in t.named_types():
                if not named.is_imported(file.import_path) or named.import_path in deps:
                    continue
                imp = next((i for i in file.imports if i.path == named.import_path), None)
                deps[named.import_path] = imp or ImportInfo(
                    name=named.package, path=named.import_path
                )
        return list(deps.values())

    def _report(self, reason: str, file: GoFile, node: Node) -> None:
        diagnostic = UnsupportedTypeExpression(reason, path=str(file.path), line=self.line_of(node))
        self.diagnostics.append(diagnostic)
        logger.warning(f"{file.path}:{diagnostic.line}: {reason}; skipped")
