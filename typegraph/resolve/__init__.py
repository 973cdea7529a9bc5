"""
Cross-Package Type Resolution

Module location, the run-scoped type registry and module map, and the
fixpoint driver that pulls in referenced packages.
"""

from typegraph.resolve.registry import TypeEntry, TypeRegistry
from typegraph.resolve.modules import ModuleMap
from typegraph.resolve.locator import (
    find_manifest,
    import_path_for,
    locate_module,
    module_import_path,
    read_manifest,
)
from typegraph.resolve.resolver import (
    ExtractionContext,
    ExtractionResult,
    TypeExtractor,
    is_standard_library,
)

__all__ = [
    # Registry
    "TypeEntry",
    "TypeRegistry",
    "ModuleMap",
    # Locator
    "find_manifest",
    "import_path_for",
    "locate_module",
    "module_import_path",
    "read_manifest",
    # Driver
    "ExtractionContext",
    "ExtractionResult",
    "TypeExtractor",
    "is_standard_library",
]
