"""
Go Extractors

Type expression resolution and declaration extraction over tree-sitter-go
syntax trees.
"""

from typegraph.ast.extractors.base import GoExtractor, package_name_for_path
from typegraph.ast.extractors.types import TypeExpressionResolver
from typegraph.ast.extractors.declarations import DeclarationExtractor, FileDeclarations

__all__ = [
    "GoExtractor",
    "package_name_for_path",
    "TypeExpressionResolver",
    "DeclarationExtractor",
    "FileDeclarations",
]
