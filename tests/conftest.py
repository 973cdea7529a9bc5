"""
Pytest fixtures for typegraph tests.
"""

import os
import sys
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

# Add project root to path for typegraph imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Keep tests independent of a developer's typegraph.yaml
os.environ["TYPEGRAPH_CONFIG"] = "/nonexistent/typegraph.yaml"

from typegraph.ast.models import GoFile
from typegraph.resolve.locator import locate_module
from typegraph.resolve.resolver import TypeExtractor

MODULE = "example.com/shop"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def go_module(temp_dir: Path) -> Callable[..., Path]:
    """
    Write a Go module into the temporary directory.

    Usage:
        root = go_module({"catalog/product.go": "package catalog ..."})
    """

    def _write(files: dict[str, str], module: str = MODULE, root: str = ".") -> Path:
        module_root = (temp_dir / root).resolve()
        module_root.mkdir(parents=True, exist_ok=True)
        (module_root / "go.mod").write_text(f"module {module}\n\ngo 1.21\n")
        for rel_path, content in files.items():
            path = module_root / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return module_root

    return _write


@pytest.fixture
def load_go_file(go_module) -> Callable[..., GoFile]:
    """Write a single Go file into a module and load it without extracting."""

    def _load(source: str, rel_path: str = "orders/order.go") -> GoFile:
        root = go_module({rel_path: source})
        path = root / rel_path
        return TypeExtractor(settings={}).load_file(path, locate_module(path))

    return _load
