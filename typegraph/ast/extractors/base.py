"""
Base Extractor

Shared syntax-tree helpers and compilation-unit header extraction
(package clause and import declarations) for the Go extractors.
"""

import re
from typing import Optional

from tree_sitter import Node, Tree

from typegraph.ast.models import ImportInfo

_MAJOR_VERSION = re.compile(r"v\d+")
_VERSION_SUFFIX = re.compile(r"\.v\d+$")


def package_name_for_path(import_path: str) -> str:
    """
    Derive the package name an import path is referenced by.

    Go code refers to an unaliased import by the name in the imported
    package clause, which conventionally is the last path element:
    "github.com/acme/shop/catalog" -> "catalog". Major-version elements
    ("/v2"), gopkg.in suffixes ("yaml.v3") and go- prefixes are skipped.
    """
    parts = [p for p in import_path.split("/") if p]
    if not parts:
        return ""
    name = parts[-1]
    if _MAJOR_VERSION.fullmatch(name) and len(parts) > 1:
        name = parts[-2]
    name = _VERSION_SUFFIX.sub("", name)
    if name.startswith("go-"):
        name = name[3:]
    if name.endswith("-go") or name.endswith(".go"):
        name = name[:-3]
    return name


class GoExtractor:
    """
    Base class for Go syntax-tree extractors.

    Provides node traversal helpers plus extraction of the package clause
    and import declarations of a compilation unit.
    """

    def extract_package_name(self, tree: Tree, source: bytes) -> Optional[str]:
        """Extract the name from the package clause."""
        clause = self.find_child(tree.root_node, "package_clause")
        if clause is None:
            return None
        name_node = self.find_child(clause, "package_identifier")
        if name_node is None:
            return None
        return self.get_node_text(name_node, source)

    def extract_imports(self, tree: Tree, source: bytes) -> list[ImportInfo]:
        """
        Extract import declarations.

        Handles single imports, grouped imports, aliases, dot and
        blank imports.
        """
        imports = []
        for decl in self.find_children(tree.root_node, "import_declaration"):
            for spec in self.walk_tree(decl, "import_spec"):
                path_node = spec.child_by_field_name("path")
                if path_node is None:
                    continue
                path = self.get_node_text(path_node, source)[1:-1]

                alias = None
                alias_node = spec.child_by_field_name("name")
                if alias_node is not None:
                    alias = self.get_node_text(alias_node, source)

                imports.append(ImportInfo(
                    name=alias or package_name_for_path(path),
                    path=path,
                    alias=alias,
                ))
        return imports

    # Helper methods for tree traversal

    def get_node_text(self, node: Node, source: bytes) -> str:
        """Extract the text content of a node."""
        return source[node.start_byte:node.end_byte].decode("utf-8")

    def find_children(self, node: Node, type_name: str) -> list[Node]:
        """Find all direct children of a specific type."""
        return [child for child in node.children if child.type == type_name]

    def find_child(self, node: Node, type_name: str) -> Optional[Node]:
        """Find the first direct child of a specific type."""
        for child in node.children:
            if child.type == type_name:
                return child
        return None

    def walk_tree(self, node: Node, type_name: str) -> list[Node]:
        """
        Walk the tree and find all nodes of a specific type.

        Args:
            node: Starting node
            type_name: Node type to find

        Returns:
            List of matching nodes
        """
        results = []

        def _walk(n: Node):
            if n.type == type_name:
                results.append(n)
            for child in n.children:
                _walk(child)

        _walk(node)
        return results

    def line_of(self, node: Node) -> int:
        """1-based line number of a node."""
        return node.start_point[0] + 1
