"""
Recursive Resolver

Drives one extraction run: parses the root files, then keeps pulling in
the packages that own still-unresolved imported types until no pending
reference is left.

A package directory is parsed at most once per run and every compilation
unit at most once, so references between packages in both directions
terminate. Each run builds its own ExtractionContext; nothing is shared
between runs.
"""

import re
from collections import deque
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

from typegraph.ast.extractors.declarations import DeclarationExtractor
from typegraph.ast.extractors.types import TypeExpressionResolver
from typegraph.ast.models import (
    GoFile,
    InterfaceInfo,
    ModuleInfo,
    NamedType,
    PackageInfo,
    PointerType,
    StructInfo,
)
from typegraph.ast.parser import GoParser, get_parser
from typegraph.configs.constants import GO_FILE_SUFFIX, TEST_FILE_SUFFIX, VENDOR_DIR
from typegraph.configs.logging import get_logger
from typegraph.configs.settings import DEFAULT_SETTINGS, get_settings
from typegraph.exceptions import PackageResolutionError, ParseError, UnsupportedTypeExpression
from typegraph.resolve.locator import locate_module, module_import_path
from typegraph.resolve.modules import ModuleMap
from typegraph.resolve.registry import TypeEntry, TypeRegistry

logger = get_logger("resolve.resolver")

_PACKAGE_CLAUSE = re.compile(r"^\s*package\s+([A-Za-z_]\w*)", re.MULTILINE)


def is_standard_library(import_path: str) -> bool:
    """Standard library import paths have no dot in their first element."""
    return "." not in import_path.split("/", 1)[0]


@dataclass
class ExtractionContext:
    """Mutable state of one extraction run."""

    settings: dict
    registry: TypeRegistry = field(default_factory=TypeRegistry)
    modules: ModuleMap = field(default_factory=ModuleMap)
    diagnostics: list[UnsupportedTypeExpression] = field(default_factory=list)
    files: dict[str, GoFile] = field(default_factory=dict)
    # Import paths whose directory was parsed (or deliberately not followed)
    visited_packages: set[str] = field(default_factory=set)
    # Foreign references awaiting their package, with the file that made them
    pending: deque = field(default_factory=deque)
    # Package clause names read from import path directories (None if unreadable)
    package_names: dict[str, Optional[str]] = field(default_factory=dict)


@dataclass
class ExtractionResult:
    """Completed type graph handed to code generators."""

    roots: list[GoFile]
    registry: TypeRegistry
    modules: ModuleMap
    diagnostics: list[UnsupportedTypeExpression]
    files: dict[str, GoFile]

    def file(self, path: str | Path) -> Optional[GoFile]:
        """Get a parsed compilation unit by path."""
        return self.files.get(str(Path(path).resolve()))

    def package_for(self, path: str | Path) -> Optional[PackageInfo]:
        """Get the package descriptor a parsed file belongs to."""
        file = self.file(path)
        if file is None:
            return None
        module = self.modules.module(file.module)
        if module is None:
            return None
        return module.packages.get(file.package_dir)

    def structs_in(self, import_path: str) -> list[StructInfo]:
        package = self.modules.package_by_import_path(import_path)
        return list(package.structs) if package else []

    def interfaces_in(self, import_path: str) -> list[InterfaceInfo]:
        package = self.modules.package_by_import_path(import_path)
        return list(package.interfaces) if package else []

    def lookup(self, import_path: str, name: str) -> TypeEntry:
        """Registry entry for a type; an empty placeholder if never seen."""
        return self.registry.get((import_path, name))

    def structs_embedding(self, type_name: str) -> list[tuple[PackageInfo, StructInfo]]:
        """
        Find structs whose first field embeds the named type.

        Repository generators use this to pick models that embed a base
        type such as `Model` or `*Model`.
        """
        found = []
        for package in self.modules.packages():
            for struct in package.structs:
                if not struct.fields or not struct.fields[0].embedded:
                    continue
                embedded = struct.fields[0].type
                if isinstance(embedded, PointerType):
                    embedded = embedded.elem
                if isinstance(embedded, NamedType) and embedded.name == type_name:
                    found.append((package, struct))
        return found


class TypeExtractor:
    """
    Extracts the type graph reachable from a set of root files.

    Usage:
        result = TypeExtractor().extract("internal/orders/order.go")
        order = result.lookup("example.com/shop/internal/orders", "Order")
    """

    def __init__(self, settings: Optional[dict] = None, parser: Optional[GoParser] = None):
        if settings is None:
            settings = get_settings()
        self.settings = {**DEFAULT_SETTINGS, **settings}
        self.parser = parser or get_parser()
        self.type_resolver = TypeExpressionResolver()

    def new_context(self) -> ExtractionContext:
        return ExtractionContext(settings=dict(self.settings))

    def extract(self, *roots: str | Path) -> ExtractionResult:
        """
        Run extraction to a fixpoint.

        Args:
            roots: Go source files to start from

        Returns:
            ExtractionResult with every type reachable from the roots

        Raises:
            ManifestNotFound, ManifestError, ParseError,
            PackageResolutionError, InternalInvariantViolation
        """
        context = self.new_context()
        logger.info(f"Extracting types from {len(roots)} root file(s)")

        root_files = []
        for root in roots:
            root_files.append(self.parse_file(context, root))
        self.resolve_pending(context)

        unresolved = sum(1 for _ in context.registry.unresolved())
        logger.info(
            f"Extraction done: {len(context.files)} files, {len(context.registry)} types "
            f"({unresolved} without body), {len(context.diagnostics)} diagnostics"
        )
        return ExtractionResult(
            roots=root_files,
            registry=context.registry,
            modules=context.modules,
            diagnostics=context.diagnostics,
            files=context.files,
        )

    def parse_file(self, context: ExtractionContext, path: str | Path) -> GoFile:
        """
        Parse and extract one compilation unit, unless already done this run.

        Pending foreign references are queued on the context.
        """
        abs_path = Path(path).resolve()
        key = str(abs_path)
        if context.modules.is_parsed(abs_path):
            logger.debug(f"Already parsed: {abs_path}")
            return context.files[key]

        module = context.modules.add_module(
            locate_module(abs_path, context.settings["search_up_dir_limit"])
        )
        file = self.load_file(abs_path, module)
        self.name_imports(context, file)

        extractor = DeclarationExtractor(
            context.registry, context.diagnostics, self.type_resolver
        )
        declarations = extractor.extract(file)
        context.modules.record(file, declarations.structs, declarations.interfaces)
        context.files[key] = file

        for named in declarations.pending:
            context.pending.append((named, file))
        return file

    def load_file(self, path: Path, module: ModuleInfo) -> GoFile:
        """Parse a file and read its package clause and imports."""
        tree, source = self.parser.parse_file(path)
        package = self.type_resolver.extract_package_name(tree, source)
        if not package:
            raise ParseError("missing package clause", path=str(path))

        return GoFile(
            path=path,
            package=package,
            module=module.name,
            module_root=module.root,
            import_path=module_import_path(path, module),
            imports=self.type_resolver.extract_imports(tree, source),
            tree=tree,
            source=source,
        )

    def name_imports(self, context: ExtractionContext, file: GoFile) -> None:
        """
        Rename unaliased imports after their package clause when needed.

        The name derived from an import path is a guess: `catalog-svc/` may
        hold `package catalog`. Only when a qualifier in the file matches no
        import are the imported directories read for their real names.
        """
        helper = self.type_resolver
        qualifiers = set()
        for node in helper.walk_tree(file.tree.root_node, "qualified_type"):
            package_node = node.child_by_field_name("package")
            if package_node is not None:
                qualifiers.add(helper.get_node_text(package_node, file.source))
        unmatched = {q for q in qualifiers if file.import_for(q) is None}
        if not unmatched:
            return

        for i, imp in enumerate(file.imports):
            if imp.alias or is_standard_library(imp.path):
                continue
            name = self.declared_package_name(context, imp.path, file)
            if name in unmatched and name != imp.name:
                logger.debug(f"{file.path}: import {imp.path} declares package {name}")
                file.imports[i] = replace(imp, name=name)

    def declared_package_name(
        self, context: ExtractionContext, import_path: str, origin: GoFile
    ) -> Optional[str]:
        """Read the package clause name of the package at import_path, if reachable."""
        if import_path in context.package_names:
            return context.package_names[import_path]

        name = None
        try:
            directory = self.package_dir(context, import_path, origin)
            if directory is not None:
                for go_file in self.package_files(context, directory, import_path):
                    match = _PACKAGE_CLAUSE.search(go_file.read_text(errors="replace"))
                    if match:
                        name = match.group(1)
                        break
        except PackageResolutionError as e:
            # Reported when the package is actually needed
            logger.debug(f"Cannot read package name of {import_path}: {e}")

        context.package_names[import_path] = name
        return name

    def resolve_pending(self, context: ExtractionContext) -> None:
        """Parse owning packages until no pending reference remains."""
        while context.pending:
            named, origin = context.pending.popleft()
            if context.registry.is_resolved(named.key):
                continue
            if named.import_path in context.visited_packages:
                continue
            self.parse_package(context, named.import_path, origin)

    def parse_package(self, context: ExtractionContext, import_path: str, origin: GoFile) -> None:
        """Parse every compilation unit of the package at import_path."""
        context.visited_packages.add(import_path)

        directory = self.package_dir(context, import_path, origin)
        if directory is None:
            return

        files = self.package_files(context, directory, import_path)
        logger.info(f"Resolving package {import_path} ({len(files)} files in {directory})")
        for go_file in files:
            self.parse_file(context, go_file)

    def package_dir(
        self,
        context: ExtractionContext,
        import_path: str,
        origin: GoFile,
    ) -> Optional[Path]:
        """
        Map an import path to a package directory.

        Tried in order: the referencing module, any other module seen this
        run, local replace directives, then the vendor directory. Standard
        library packages are not followed and yield None.

        Raises:
            PackageResolutionError: If no existing directory matches
        """
        origin_module = context.modules.module(origin.module)
        modules = [origin_module] + [m for m in context.modules.modules() if m is not origin_module]

        directory = None
        for module in modules:
            if module is not None and module.owns(import_path):
                directory = module.root / import_path[len(module.name):].lstrip("/")
                break

        if directory is None and origin_module is not None:
            directory = self._replaced_dir(origin_module, import_path)

        if directory is None and origin_module is not None and context.settings["use_vendor"]:
            vendored = origin_module.root / VENDOR_DIR / import_path
            if vendored.is_dir():
                directory = vendored

        if directory is None:
            if is_standard_library(import_path):
                logger.debug(f"Not following standard library package {import_path}")
                return None
            raise PackageResolutionError(
                import_path, reason=f"import path is outside module {origin.module}"
            )

        if not directory.is_dir():
            raise PackageResolutionError(
                import_path, str(directory), "package directory does not exist"
            )
        return directory

    def _replaced_dir(self, module: ModuleInfo, import_path: str) -> Optional[Path]:
        # Longest matching prefix wins
        for old in sorted(module.replaces, key=len, reverse=True):
            if import_path == old or import_path.startswith(old + "/"):
                return module.replaces[old] / import_path[len(old):].lstrip("/")
        return None

    def package_files(
        self, context: ExtractionContext, directory: Path, import_path: str
    ) -> list[Path]:
        """List the compilation units of a package directory, sorted."""
        include_tests = context.settings["include_test_files"]
        files = sorted(
            p for p in directory.iterdir()
            if p.is_file()
            and p.name.endswith(GO_FILE_SUFFIX)
            and (include_tests or not p.name.endswith(TEST_FILE_SUFFIX))
        )
        if not files:
            raise PackageResolutionError(import_path, str(directory), "package has no Go files")
        return files
