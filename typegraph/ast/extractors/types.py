"""
Type Expression Resolver

Maps one Go type expression node to a canonical type descriptor.

The set of supported shapes is closed: named, qualified, pointer,
slice/array, map and the empty interface. Every other shape resolves to
an UnsupportedType carrying the reason, which callers turn into a
diagnostic and use to drop the field or argument.
"""

from tree_sitter import Node

from typegraph.ast.extractors.base import GoExtractor
from typegraph.ast.models import (
    EMPTY_INTERFACE,
    GoFile,
    MapType,
    NamedType,
    PointerType,
    ResolvedType,
    SliceType,
    UnsupportedType,
)
from typegraph.configs.constants import PREDECLARED_TYPES

# Children allowed in an empty interface literal
_INTERFACE_EMPTY_CHILDREN = {"comment"}

_ARRAY_KINDS = ("slice_type", "array_type", "implicit_length_array_type")


class TypeExpressionResolver(GoExtractor):
    """Resolves type expression nodes against one compilation unit."""

    def resolve(self, node: Node, file: GoFile, variadic: bool = False) -> ResolvedType:
        """
        Resolve a type expression.

        Args:
            node: Type expression node
            file: Compilation unit the expression appears in
            variadic: True for the type of a `...T` parameter, which
                      resolves as a slice of T

        Returns:
            Type descriptor, or UnsupportedType with the reason
        """
        resolved = self._resolve(node, file)
        if variadic and not isinstance(resolved, UnsupportedType):
            return SliceType(resolved)
        return resolved

    def _resolve(self, node: Node, file: GoFile) -> ResolvedType:
        kind = node.type

        if kind == "type_identifier":
            return self._resolve_identifier(node, file)

        if kind == "qualified_type":
            return self._resolve_qualified(node, file)

        if kind == "pointer_type":
            return self._wrap(PointerType, self._single_operand(node), file)

        if kind in _ARRAY_KINDS:
            # Outer dimension first: [][]T is Slice(Slice(T))
            return self._wrap(SliceType, node.child_by_field_name("element"), file)

        if kind == "map_type":
            key = self._resolve_operand(node.child_by_field_name("key"), file)
            if isinstance(key, UnsupportedType):
                return key
            value = self._resolve_operand(node.child_by_field_name("value"), file)
            if isinstance(value, UnsupportedType):
                return value
            return MapType(key, value)

        if kind == "interface_type":
            if self._is_empty_interface(node):
                return EMPTY_INTERFACE
            return UnsupportedType("interface literal with methods")

        if kind == "parenthesized_type":
            return self._resolve_operand(self._single_operand(node), file)

        if kind == "function_type":
            return UnsupportedType("function type cannot be used in transport")

        if kind == "generic_type":
            return UnsupportedType(
                f"generic instantiation {self.get_node_text(node, file.source)} is not supported"
            )

        return UnsupportedType(f"{kind} is not supported")

    def _resolve_identifier(self, node: Node, file: GoFile) -> NamedType:
        name = self.get_node_text(node, file.source)
        if name in PREDECLARED_TYPES:
            return NamedType(name=name)
        return NamedType(name=name, package=file.package, import_path=file.import_path)

    def _resolve_qualified(self, node: Node, file: GoFile) -> ResolvedType:
        package_node = node.child_by_field_name("package")
        name_node = node.child_by_field_name("name")
        if package_node is None or name_node is None:
            return UnsupportedType("incomplete qualified type")

        qualifier = self.get_node_text(package_node, file.source)
        name = self.get_node_text(name_node, file.source)
        imp = file.import_for(qualifier)
        if imp is None:
            return UnsupportedType(f"no import matches package qualifier {qualifier!r}")
        return NamedType(name=name, package=qualifier, import_path=imp.path)

    def _wrap(self, wrapper, operand: Node | None, file: GoFile) -> ResolvedType:
        inner = self._resolve_operand(operand, file)
        if isinstance(inner, UnsupportedType):
            return inner
        return wrapper(inner)

    def _resolve_operand(self, node: Node | None, file: GoFile) -> ResolvedType:
        if node is None:
            return UnsupportedType("missing type operand")
        return self._resolve(node, file)

    def _single_operand(self, node: Node) -> Node | None:
        for child in node.named_children:
            if child.type != "comment":
                return child
        return None

    def _is_empty_interface(self, node: Node) -> bool:
        return all(child.type in _INTERFACE_EMPTY_CHILDREN for child in node.named_children)
