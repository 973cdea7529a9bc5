"""
Tree-sitter Parser Wrapper

Parses Go compilation units with tree-sitter and rejects syntactically
invalid ones.
"""

from pathlib import Path
from typing import Optional

import tree_sitter_go
from tree_sitter import Language, Node, Parser, Tree

from typegraph.configs.constants import GO_FILE_SUFFIX
from typegraph.configs.logging import get_logger
from typegraph.exceptions import ParseError

logger = get_logger("ast.parser")


class GoParser:
    """
    Tree-sitter based parser for Go source.

    Lazily initializes the language and parser on first use.
    """

    def __init__(self):
        self._language: Optional[Language] = None
        self._parser: Optional[Parser] = None

    def _get_parser(self) -> Parser:
        """Get or create the Go Parser."""
        if self._parser is None:
            self._language = Language(tree_sitter_go.language())
            self._parser = Parser(self._language)
        return self._parser

    def is_supported(self, file_path: str) -> bool:
        """Check if a file is a Go compilation unit."""
        return Path(file_path).suffix.lower() == GO_FILE_SUFFIX

    def parse(self, source: bytes, path: Optional[str] = None) -> Tree:
        """
        Parse Go source into a syntax tree.

        Args:
            source: Source code as bytes
            path: File path, used in error details

        Returns:
            Tree-sitter Tree

        Raises:
            ParseError: If the source is not UTF-8 or contains syntax errors
        """
        try:
            source.decode("utf-8")
        except UnicodeDecodeError as e:
            line = source.count(b"\n", 0, e.start) + 1
            raise ParseError("invalid UTF-8", path=path, line=line) from e

        tree = self._get_parser().parse(source)
        error_node = find_error_node(tree.root_node)
        if error_node is not None:
            line = error_node.start_point[0] + 1
            kind = "missing token" if error_node.is_missing else "syntax error"
            raise ParseError(f"Go {kind}", path=path, line=line)
        return tree

    def parse_file(self, file_path: str | Path) -> tuple[Tree, bytes]:
        """
        Parse a file into a syntax tree.

        Args:
            file_path: Path to the source file

        Returns:
            Tuple of (Tree, source bytes)

        Raises:
            ParseError: If the file cannot be read or is invalid
        """
        path = Path(file_path)
        try:
            source = path.read_bytes()
        except OSError as e:
            raise ParseError(f"Failed to read file: {e}", path=str(path)) from e

        logger.debug(f"Parsing {path}")
        return self.parse(source, str(path)), source


def find_error_node(node: Node) -> Optional[Node]:
    """Return the first ERROR or MISSING node in source order, if any."""
    if not node.has_error:
        return None
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        found = find_error_node(child)
        if found is not None:
            return found
    # has_error is set but no child carries it
    return node


# Global parser instance (lazy singleton); holds no per-run state
_parser: Optional[GoParser] = None


def get_parser() -> GoParser:
    """Get the global GoParser instance."""
    global _parser
    if _parser is None:
        _parser = GoParser()
    return _parser
