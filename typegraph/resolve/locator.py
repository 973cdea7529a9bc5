"""
Module Locator

Finds the go.mod that owns a source file and computes import paths
relative to it. Filesystem reads only.
"""

import re
from pathlib import Path

from typegraph.ast.models import ModuleInfo
from typegraph.configs.constants import DEFAULT_SEARCH_UP_DIR_LIMIT, MANIFEST_FILE, VENDOR_DIR
from typegraph.configs.logging import get_logger
from typegraph.exceptions import ManifestError, ManifestNotFound

logger = get_logger("resolve.locator")

_MODULE_DIRECTIVE = re.compile(r"^module\s+(\S+)")
_REPLACE_LINE = re.compile(r"^(\S+)(?:\s+\S+)?\s*=>\s*(\S+)(?:\s+\S+)?$")


def find_manifest(start_dir: Path, limit: int = DEFAULT_SEARCH_UP_DIR_LIMIT) -> Path:
    """
    Search upward for go.mod.

    Args:
        start_dir: Directory to start in (checked first)
        limit: Maximum number of directories to check

    Returns:
        Absolute path to the manifest

    Raises:
        ManifestNotFound: If no manifest exists within the limit
    """
    current = start_dir.resolve()
    for _ in range(limit):
        candidate = current / MANIFEST_FILE
        if candidate.is_file():
            return candidate
        if current.parent == current:
            break
        current = current.parent
    raise ManifestNotFound(str(start_dir), limit)


def _strip_comment(line: str) -> str:
    return line.split("//", 1)[0].strip()


def read_manifest(manifest: Path) -> ModuleInfo:
    """
    Read the module identity and local replace directives from go.mod.

    Only replacements that point at a filesystem path ("./x", "../x" or
    absolute) are kept; module-version replacements are ignored.

    Raises:
        ManifestError: If the file has no module directive
    """
    root = manifest.parent.resolve()
    module = None
    replaces: dict[str, Path] = {}
    in_replace_block = False

    for raw in manifest.read_text(encoding="utf-8").splitlines():
        line = _strip_comment(raw)
        if not line:
            continue

        if in_replace_block:
            if line == ")":
                in_replace_block = False
            else:
                _add_replace(line, root, replaces)
            continue

        match = _MODULE_DIRECTIVE.match(line)
        if match:
            module = match.group(1).strip('"`')
        elif line.startswith("replace"):
            rest = line[len("replace"):].strip()
            if rest == "(":
                in_replace_block = True
            else:
                _add_replace(rest, root, replaces)

    if not module:
        raise ManifestError("go.mod has no module directive", {"path": str(manifest)})

    return ModuleInfo(name=module, root=root, replaces=replaces)


def _add_replace(spec: str, root: Path, replaces: dict[str, Path]) -> None:
    match = _REPLACE_LINE.match(spec)
    if not match:
        return
    old, new = match.group(1), match.group(2)
    if new.startswith(("./", "../", "/")):
        replaces[old] = (root / new).resolve()


def locate_module(file_path: str | Path, limit: int = DEFAULT_SEARCH_UP_DIR_LIMIT) -> ModuleInfo:
    """
    Find the module that owns a source file.

    Args:
        file_path: Path to a source file
        limit: Maximum number of directories to search upward

    Returns:
        ModuleInfo with the module identity and absolute root
    """
    path = Path(file_path).resolve()
    manifest = find_manifest(path.parent, limit)
    module = read_manifest(manifest)
    logger.debug(f"{path} belongs to module {module.name} at {module.root}")
    return module


def import_path_for(module: str, root: Path, directory: Path) -> str:
    """
    Compute the import path of a package directory.

    The import path is the module identity followed by the directory's
    path relative to the module root. Packages under the module's vendor
    directory keep the import path they are vendored as.
    """
    rel = directory.resolve().relative_to(root.resolve()).as_posix()
    if rel in ("", "."):
        return module
    if rel.startswith(VENDOR_DIR + "/"):
        return rel[len(VENDOR_DIR) + 1:]
    return f"{module}/{rel}"


def module_import_path(file_path: str | Path, module: ModuleInfo) -> str:
    """Compute the import path of the package a source file belongs to."""
    return import_path_for(module.name, module.root, Path(file_path).resolve().parent)
