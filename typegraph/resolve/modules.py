"""
Module/Package Map

Tracks the modules and packages discovered during one run and which
compilation units have already been parsed.
"""

from pathlib import Path
from typing import Iterator, Optional

from typegraph.ast.models import GoFile, InterfaceInfo, ModuleInfo, PackageInfo, StructInfo


class ModuleMap:
    """Modules keyed by identity, each holding its packages keyed by directory."""

    def __init__(self):
        self._modules: dict[str, ModuleInfo] = {}

    def add_module(self, module: ModuleInfo) -> ModuleInfo:
        """Register a module if absent and return the registered instance."""
        existing = self._modules.get(module.name)
        if existing is not None:
            return existing
        self._modules[module.name] = module
        return module

    def module(self, name: str) -> Optional[ModuleInfo]:
        return self._modules.get(name)

    def package(self, file: GoFile) -> PackageInfo:
        """Get or create the package descriptor a compilation unit belongs to."""
        module = self._modules.get(file.module)
        if module is None:
            module = self.add_module(ModuleInfo(name=file.module, root=file.module_root))

        package = module.packages.get(file.package_dir)
        if package is None:
            package = PackageInfo(
                name=file.package_dir,
                import_path=file.import_path,
                package_name=file.package,
            )
            module.packages[file.package_dir] = package
        return package

    def package_by_import_path(self, import_path: str) -> Optional[PackageInfo]:
        for package in self.packages():
            if package.import_path == import_path:
                return package
        return None

    def is_parsed(self, path: str | Path) -> bool:
        """True if the compilation unit at path was parsed in this run."""
        key = str(Path(path).resolve())
        return any(key in package.parsed_files for package in self.packages())

    def record(
        self,
        file: GoFile,
        structs: list[StructInfo],
        interfaces: list[InterfaceInfo],
    ) -> bool:
        """
        Mark a compilation unit parsed and append its declarations.

        Returns:
            False if the unit was already recorded (nothing is appended)
        """
        package = self.package(file)
        key = str(file.path)
        if package.is_parsed(key):
            return False
        package.parsed_files.add(key)
        if not package.package_name:
            package.package_name = file.package
        package.structs.extend(structs)
        package.interfaces.extend(interfaces)
        return True

    def modules(self) -> Iterator[ModuleInfo]:
        return iter(list(self._modules.values()))

    def packages(self) -> Iterator[PackageInfo]:
        for module in list(self._modules.values()):
            yield from list(module.packages.values())

    def __contains__(self, name: object) -> bool:
        return name in self._modules

    def __len__(self) -> int:
        return len(self._modules)
