import pytest

from api_client_codegen.mapping.expression import parse
from api_client_codegen.mapping.mapper import TypeMapper, simple_name


@pytest.fixture
def mapper():
    return TypeMapper("Shop.Models")


class TestScalars:
    @pytest.mark.parametrize(
        "source, expected",
        [
            ("System.String", "string"),
            ("System.Int32", "number"),
            ("System.Int64", "number"),
            ("System.Decimal", "number"),
            ("System.Boolean", "boolean"),
            ("System.DateTime", "string"),
            ("System.Guid", "string"),
            ("System.Object", "any"),
            ("int", "number"),
            ("bool", "boolean"),
            ("string", "string"),
        ],
    )
    def test_scalar_table(self, mapper, source, expected):
        assert mapper.map(source) == expected

    def test_unknown_type_is_any(self, mapper):
        assert mapper.map("Vendor.Lib.Thing") == "any"
        assert mapper.map("") == "any"

    def test_malformed_signature_is_any(self, mapper):
        assert mapper.map("List<Shop.Models.Widget") == "any"


class TestWrappers:
    def test_nullable(self, mapper):
        assert mapper.map("System.Nullable<System.Int32>") == "null | number"
        assert mapper.map("System.Int32?") == "null | number"

    def test_nullable_is_not_doubled(self, mapper):
        assert mapper.map("System.Nullable<System.Nullable<System.Int32>>") == "null | number"

    def test_list_bare_and_qualified(self, mapper):
        assert mapper.map("List<System.String>") == "string[]"
        assert mapper.map("System.Collections.Generic.List<System.String>") == "string[]"
        assert mapper.map("System.Collections.Generic.IEnumerable<Shop.Models.Widget>") == "Widget[]"

    def test_array(self, mapper):
        assert mapper.map("Shop.Models.Widget[]") == "Widget[]"
        assert mapper.map("System.Int32[][]") == "number[][]"

    def test_array_of_union_is_parenthesized(self, mapper):
        assert mapper.map("List<System.Nullable<System.Int32>>") == "(null | number)[]"

    def test_task_unwraps(self, mapper):
        assert mapper.map("System.Threading.Tasks.Task<System.String>") == "string"
        assert mapper.map("System.Threading.Tasks.Task") == "void"
        assert mapper.map("Task<List<Shop.Models.Widget>>") == "Widget[]"

    def test_action_result_unwraps(self, mapper):
        assert mapper.map("Microsoft.AspNetCore.Mvc.ActionResult<Shop.Models.Widget>") == "Widget"

    def test_dictionary(self, mapper):
        assert mapper.map("Dictionary<System.String,Shop.Models.Widget>") == "Record<string, Widget>"
        assert mapper.map("IDictionary<System.Guid,System.Int32>") == "Record<string, number>"

    def test_domain_namesake_of_wrapper_is_not_a_wrapper(self, mapper):
        assert mapper.map("Shop.Models.List<System.Int32>") == "List<number>"


class TestDomainTypes:
    def test_domain_type_keeps_generics(self, mapper):
        assert mapper.map("Shop.Models.Page<Shop.Models.Widget>") == "Page<Widget>"

    def test_nested_namespace(self, mapper):
        assert mapper.map("Shop.Models.Billing.Invoice") == "Invoice"

    def test_prefix_must_end_at_namespace_boundary(self, mapper):
        assert mapper.map("Shop.ModelsExtra.Thing") == "any"

    def test_empty_prefix_has_no_domain(self):
        assert TypeMapper().map("Shop.Models.Widget") == "any"

    def test_qualifier(self, mapper):
        qualified = mapper.with_qualifier("types.")
        assert qualified.map("Shop.Models.Page<Shop.Models.Widget>") == "types.Page<types.Widget>"

    def test_already_mapped_is_unchanged(self, mapper):
        qualified = mapper.with_qualifier("types.")
        for ts in ["string", "number[]", "null | string", "types.Widget", "types.Page<types.Widget>", "T0"]:
            assert qualified.map(ts) == ts

    def test_union_with_generic_is_unchanged(self, mapper):
        qualified = mapper.with_qualifier("types.")
        assert qualified.map("null | types.Page<types.Widget>") == "null | types.Page<types.Widget>"
        assert qualified.map(" null | Dictionary<string, number> ") == "null | Dictionary<string, number>"
        assert mapper.references("null | types.Page<types.Widget>") == []

    def test_placeholders_substitute_at_any_depth(self, mapper):
        placeholders = {"Shop.Models.Widget": "T0"}
        assert mapper.map("List<Shop.Models.Widget>", placeholders) == "T0[]"
        assert mapper.map("Shop.Models.Page<Shop.Models.Widget>", placeholders) == "Page<T0>"

    def test_accepts_parsed_expression(self, mapper):
        assert mapper.map(parse("Shop.Models.Widget[]")) == "Widget[]"


class TestReferences:
    def test_collects_nested_domain_names(self, mapper):
        refs = mapper.references("Dictionary<System.String,List<Shop.Models.Page<Shop.Models.Widget>>>")
        assert refs == ["Page", "Widget"]

    def test_deduplicates(self, mapper):
        assert mapper.references("Shop.Models.Pair<Shop.Models.Widget,Shop.Models.Widget>") == ["Pair", "Widget"]

    def test_skips_placeholders(self, mapper):
        assert mapper.references("List<Shop.Models.Widget>", {"Shop.Models.Widget": "T0"}) == []

    def test_non_domain(self, mapper):
        assert mapper.references("System.String") == []


def test_simple_name():
    assert simple_name("Shop.Models.Widget") == "Widget"
    assert simple_name("Shop.Models.Outer+Inner") == "Inner"
    assert simple_name("Widget") == "Widget"
