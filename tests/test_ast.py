"""
Tests for AST Module

Tests tree-sitter Go parsing, the data model and type expression resolution.
"""

import pytest

from typegraph.ast.extractors.base import GoExtractor, package_name_for_path
from typegraph.ast.extractors.types import TypeExpressionResolver
from typegraph.ast.models import (
    EMPTY_INTERFACE,
    ImportInfo,
    MapType,
    NamedType,
    PointerType,
    SliceType,
    UnsupportedType,
)
from typegraph.ast.parser import GoParser, get_parser
from typegraph.exceptions import ParseError

CATALOG = "example.com/shop/catalog"
ORDERS = "example.com/shop/orders"


def holder_source(type_expr: str) -> str:
    return f'''package orders

import (
	"time"

	"example.com/shop/catalog"
	inv "example.com/shop/inventory"
)

type Holder struct {{
	F {type_expr}
}}
'''


def field_type_node(file):
    decl = GoExtractor().walk_tree(file.tree.root_node, "field_declaration")[0]
    return decl.child_by_field_name("type")


# =============================================================================
# Parser Tests
# =============================================================================


class TestGoParsing:
    """Test tree-sitter Go parsing."""

    def test_parse_struct(self):
        parser = get_parser()
        tree = parser.parse(b"package orders\n\ntype Order struct {\n\tID string\n}\n")
        assert tree.root_node.type == "source_file"
        decls = [n for n in tree.root_node.children if n.type == "type_declaration"]
        assert len(decls) == 1

    def test_syntax_error_raises(self):
        parser = get_parser()
        source = b"package orders\n\ntype Order struct {\n\tID string\n\tItems []\n"
        with pytest.raises(ParseError) as exc_info:
            parser.parse(source, "order.go")
        assert exc_info.value.path == "order.go"
        assert exc_info.value.line is not None

    def test_invalid_utf8_raises(self):
        source = b'package orders\n\ntype Order struct {\n\tID string `json:"\xff"`\n}\n'
        with pytest.raises(ParseError) as exc_info:
            get_parser().parse(source, "order.go")
        assert exc_info.value.message == "invalid UTF-8"
        assert exc_info.value.line == 4

    def test_parse_file(self, temp_dir):
        path = temp_dir / "order.go"
        path.write_text("package orders\n")
        tree, source = get_parser().parse_file(path)
        assert source == b"package orders\n"
        assert tree.root_node.type == "source_file"

    def test_unreadable_file_raises(self, temp_dir):
        with pytest.raises(ParseError):
            get_parser().parse_file(temp_dir / "missing.go")

    def test_is_supported(self):
        parser = GoParser()
        assert parser.is_supported("order.go")
        assert not parser.is_supported("order.py")


class TestParserSingleton:
    """Test that parser singleton works correctly."""

    def test_singleton_returns_same_instance(self):
        assert get_parser() is get_parser()

    def test_parser_is_lazy(self):
        parser = GoParser()
        assert parser._parser is None
        parser.parse(b"package x\n")
        assert parser._parser is not None


# =============================================================================
# Header Extraction Tests
# =============================================================================


class TestPackageNameForPath:
    """Test derivation of package names from import paths."""

    def test_last_element(self):
        assert package_name_for_path("example.com/shop/catalog") == "catalog"
        assert package_name_for_path("time") == "time"

    def test_major_version_element(self):
        assert package_name_for_path("github.com/jackc/pgx/v5") == "pgx"

    def test_gopkg_suffix(self):
        assert package_name_for_path("gopkg.in/yaml.v3") == "yaml"

    def test_go_prefix(self):
        assert package_name_for_path("github.com/go-redis/go-redis") == "redis"


class TestImportExtraction:
    """Test import declaration extraction."""

    def test_grouped_and_aliased_imports(self, load_go_file):
        file = load_go_file(holder_source("int"))
        assert file.imports == [
            ImportInfo(name="time", path="time"),
            ImportInfo(name="catalog", path=CATALOG),
            ImportInfo(name="inv", path="example.com/shop/inventory", alias="inv"),
        ]

    def test_single_import(self, load_go_file):
        file = load_go_file('package orders\n\nimport "example.com/shop/catalog"\n')
        assert [i.path for i in file.imports] == [CATALOG]

    def test_import_for_prefers_alias(self, load_go_file):
        file = load_go_file(holder_source("int"))
        assert file.import_for("inv").path == "example.com/shop/inventory"
        assert file.import_for("inventory") is None
        assert file.import_for("catalog").path == CATALOG

    def test_package_and_import_path(self, load_go_file):
        file = load_go_file(holder_source("int"))
        assert file.package == "orders"
        assert file.module == "example.com/shop"
        assert file.import_path == ORDERS
        assert file.package_dir == "orders"


# =============================================================================
# Model Tests
# =============================================================================


class TestTypeDescriptors:
    """Test type descriptor behavior."""

    def test_named_type_equality_uses_key(self):
        a = NamedType("Product", "catalog", CATALOG)
        b = NamedType("Product", "cat", CATALOG)
        assert a == b
        assert hash(a) == hash(b)
        assert a.key == (CATALOG, "Product")

    def test_is_imported(self):
        product = NamedType("Product", "catalog", CATALOG)
        assert product.is_imported(ORDERS)
        assert not product.is_imported(CATALOG)
        assert not NamedType("string").is_imported(ORDERS)
        assert not EMPTY_INTERFACE.is_imported(ORDERS)

    def test_named_types_walks_leaves(self):
        product = NamedType("Product", "catalog", CATALOG)
        t = MapType(NamedType("string"), SliceType(PointerType(product)))
        assert list(t.named_types()) == [NamedType("string"), product]

    def test_to_source_relative_to_package(self):
        product = NamedType("Product", "catalog", CATALOG)
        assert PointerType(product).to_source(ORDERS) == "*catalog.Product"
        assert PointerType(product).to_source(CATALOG) == "*Product"

    def test_unsupported_has_no_source(self):
        with pytest.raises(ValueError):
            UnsupportedType("function type").to_source()
        assert list(UnsupportedType("x").named_types()) == []


# =============================================================================
# Type Expression Resolver Tests
# =============================================================================


class TestTypeExpressionResolver:
    """Test resolution of type expressions to descriptors."""

    def setup_method(self):
        self.resolver = TypeExpressionResolver()

    def resolve(self, load_go_file, type_expr):
        file = load_go_file(holder_source(type_expr))
        return self.resolver.resolve(field_type_node(file), file), file

    @pytest.mark.parametrize("type_expr", [
        "Customer",
        "*Customer",
        "catalog.Product",
        "[]catalog.Product",
        "[]*catalog.Product",
        "[][]string",
        "map[string]int",
        "map[string][]*catalog.Product",
        "*map[inv.SKU]time.Time",
    ])
    def test_shape_round_trip(self, load_go_file, type_expr):
        resolved, file = self.resolve(load_go_file, type_expr)
        assert not isinstance(resolved, UnsupportedType)
        assert resolved.to_source(file.import_path) == type_expr

    def test_bare_identifier_is_local(self, load_go_file):
        resolved, _ = self.resolve(load_go_file, "Customer")
        assert resolved == NamedType("Customer", "orders", ORDERS)
        assert resolved.package == "orders"

    def test_predeclared_identifier(self, load_go_file):
        resolved, _ = self.resolve(load_go_file, "string")
        assert resolved == NamedType("string")
        assert resolved.import_path == ""

    def test_qualified_identifier(self, load_go_file):
        resolved, _ = self.resolve(load_go_file, "catalog.Product")
        assert resolved == NamedType("Product", "catalog", CATALOG)

    def test_aliased_qualifier(self, load_go_file):
        resolved, _ = self.resolve(load_go_file, "inv.SKU")
        assert resolved.import_path == "example.com/shop/inventory"
        assert resolved.package == "inv"

    def test_unknown_qualifier_is_unsupported(self, load_go_file):
        resolved, _ = self.resolve(load_go_file, "billing.Invoice")
        assert isinstance(resolved, UnsupportedType)
        assert "billing" in resolved.reason

    def test_nested_slices_keep_dimensions(self, load_go_file):
        resolved, _ = self.resolve(load_go_file, "[][]string")
        assert resolved == SliceType(SliceType(NamedType("string")))

    def test_array_resolves_as_slice(self, load_go_file):
        resolved, _ = self.resolve(load_go_file, "[4]byte")
        assert resolved == SliceType(NamedType("byte"))

    def test_map(self, load_go_file):
        resolved, _ = self.resolve(load_go_file, "map[string]catalog.Product")
        assert resolved == MapType(NamedType("string"), NamedType("Product", "catalog", CATALOG))

    def test_empty_interface(self, load_go_file):
        resolved, _ = self.resolve(load_go_file, "map[string]interface{}")
        assert resolved == MapType(NamedType("string"), EMPTY_INTERFACE)
        assert resolved.value.is_interface

    def test_parenthesized_type(self, load_go_file):
        resolved, _ = self.resolve(load_go_file, "*(Customer)")
        assert resolved == PointerType(NamedType("Customer", "orders", ORDERS))

    @pytest.mark.parametrize("type_expr,fragment", [
        ("func(int) error", "function type"),
        ("chan int", "channel_type"),
        ("map[chan int]string", "channel_type"),
        ("[]func()", "function type"),
        ("interface{ Close() error }", "methods"),
        ("struct{ X int }", "struct_type"),
    ])
    def test_unsupported_shapes(self, load_go_file, type_expr, fragment):
        resolved, _ = self.resolve(load_go_file, type_expr)
        assert isinstance(resolved, UnsupportedType)
        assert fragment in resolved.reason

    def test_generic_instantiation_is_unsupported(self, load_go_file):
        resolved, _ = self.resolve(load_go_file, "Box[string]")
        assert isinstance(resolved, UnsupportedType)
        assert "generic" in resolved.reason

    def test_variadic_resolves_as_slice(self, load_go_file):
        source = holder_source("int") + "\ntype Cart interface {\n\tAdd(items ...catalog.Product)\n}\n"
        file = load_go_file(source)
        param = GoExtractor().walk_tree(file.tree.root_node, "variadic_parameter_declaration")[0]
        resolved = self.resolver.resolve(param.child_by_field_name("type"), file, variadic=True)
        assert resolved == SliceType(NamedType("Product", "catalog", CATALOG))
        assert resolved.to_source(file.import_path) == "[]catalog.Product"
