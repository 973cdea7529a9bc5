"""
Type Registry

Run-scoped, deduplicated store of named types keyed by (import path, name).

Entries are created on first reference and receive their struct or
interface body when the declaring compilation unit is extracted. Reading a
key that was never registered yields an empty placeholder, never an error.
Single-threaded access only.
"""

from dataclasses import dataclass, replace
from typing import Iterator, Optional

from typegraph.ast.models import Declaration, InterfaceInfo, NamedType, StructInfo, TypeKey
from typegraph.configs.logging import get_logger

logger = get_logger("resolve.registry")


@dataclass
class TypeEntry:
    """A registered named type and its body, if extracted yet."""

    type: NamedType
    struct: Optional[StructInfo] = None
    interface: Optional[InterfaceInfo] = None

    @property
    def is_resolved(self) -> bool:
        return self.struct is not None or self.interface is not None

    @property
    def body(self) -> Optional[Declaration]:
        return self.struct if self.struct is not None else self.interface


class TypeRegistry:
    """Deduplicated named-type store for one extraction run."""

    def __init__(self):
        self._entries: dict[TypeKey, TypeEntry] = {}

    def get(self, key: TypeKey) -> TypeEntry:
        """
        Get the entry for a key.

        Returns:
            The registered entry, or an unregistered empty placeholder
        """
        entry = self._entries.get(key)
        if entry is None:
            import_path, name = key
            return TypeEntry(type=NamedType(name=name, import_path=import_path))
        return entry

    def add(self, named: NamedType) -> TypeEntry:
        """Register a named type if its key is absent. Idempotent."""
        entry = self._entries.get(named.key)
        if entry is None:
            entry = TypeEntry(type=named)
            self._entries[named.key] = entry
        return entry

    def set(self, key: TypeKey, body: Declaration) -> TypeEntry:
        """
        Attach a struct or interface body to a key.

        Creates the entry if needed. Under normal operation each key
        receives its body exactly once, from its declaring file.
        """
        entry = self._entries.get(key)
        if entry is None:
            import_path, name = key
            entry = self.add(NamedType(name=name, import_path=import_path))
        elif entry.is_resolved:
            logger.debug(f"Replacing body of {key[0]}.{key[1]}")

        if isinstance(body, InterfaceInfo):
            entry.interface = body
            entry.struct = None
            entry.type = replace(entry.type, is_interface=True)
        else:
            entry.struct = body
            entry.interface = None
        return entry

    def is_resolved(self, key: TypeKey) -> bool:
        """True if the key is registered with a body."""
        entry = self._entries.get(key)
        return entry is not None and entry.is_resolved

    def structs(self) -> Iterator[TypeEntry]:
        return (e for e in self._entries.values() if e.struct is not None)

    def interfaces(self) -> Iterator[TypeEntry]:
        return (e for e in self._entries.values() if e.interface is not None)

    def unresolved(self) -> Iterator[TypeEntry]:
        """Entries referenced somewhere but never given a body."""
        return (e for e in self._entries.values() if not e.is_resolved)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TypeEntry]:
        return iter(list(self._entries.values()))
