"""
Typegraph Constants

Static values describing the Go source layout: manifest name, file
suffixes, and the bounded upward manifest search.
"""

# --- Go Source Layout ---

MANIFEST_FILE = "go.mod"
GO_FILE_SUFFIX = ".go"
TEST_FILE_SUFFIX = "_test.go"
VENDOR_DIR = "vendor"

# --- Manifest Search ---
# Number of directories (starting with the file's own) checked for go.mod

DEFAULT_SEARCH_UP_DIR_LIMIT = 10

# --- Type Names ---

EMPTY_INTERFACE_NAME = "interface{}"

# Predeclared Go identifiers that name types
PREDECLARED_TYPES = {
    "any",
    "bool",
    "byte",
    "comparable",
    "complex64",
    "complex128",
    "error",
    "float32",
    "float64",
    "int",
    "int8",
    "int16",
    "int32",
    "int64",
    "rune",
    "string",
    "uint",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "uintptr",
}
