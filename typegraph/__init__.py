"""
Typegraph

Extracts struct and interface declarations from Go source, resolving type
references across packages and modules, for code generators that need the
shapes of existing types.
"""

__version__ = "0.1.0"
