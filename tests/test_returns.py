import pytest

from api_client_codegen.description.base import ReturnTypeModel, TypeDescription
from api_client_codegen.mapping.mapper import TypeMapper
from api_client_codegen.mapping.returns import ReturnTypeResolver

TYPES = {
    "Shop.Models.Widget": TypeDescription(name="Widget", namespace="Shop.Models"),
    "Shop.Models.Result<Shop.Models.Widget>": TypeDescription(
        name="Result", namespace="Shop.Models", generic_arguments=["Shop.Models.Widget"]
    ),
    "Shop.Models.Page<Shop.Models.Widget,System.Int32>": TypeDescription(
        name="Page", namespace="Shop.Models", generic_arguments=["Shop.Models.Widget", "System.Int32"]
    ),
}


@pytest.fixture
def mapper():
    return TypeMapper("Shop.Models", qualifier="types.")


class TestReturnTypeResolver:
    def test_missing_return_type_is_any(self, mapper):
        resolver = ReturnTypeResolver(mapper)
        assert resolver.resolve(None, TYPES) == "any"
        assert resolver.resolve(ReturnTypeModel(), TYPES) == "any"
        assert resolver.resolve("  ", TYPES) == "any"

    def test_described_type_is_qualified(self, mapper):
        resolver = ReturnTypeResolver(mapper)
        assert resolver.resolve(ReturnTypeModel(type="Shop.Models.Widget"), TYPES) == "types.Widget"

    def test_described_generic_keeps_arguments(self, mapper):
        resolver = ReturnTypeResolver(mapper)
        ref = "Shop.Models.Page<Shop.Models.Widget,System.Int32>"
        assert resolver.resolve(ref, TYPES) == "types.Page<types.Widget, number>"

    def test_unwrap_policy(self, mapper):
        ref = "Shop.Models.Result<Shop.Models.Widget>"
        assert ReturnTypeResolver(mapper).resolve(ref, TYPES) == "types.Result<types.Widget>"
        assert ReturnTypeResolver(mapper, {"Result"}).resolve(ref, TYPES) == "types.Widget"

    def test_unwrap_needs_exactly_one_argument(self, mapper):
        resolver = ReturnTypeResolver(mapper, {"Page"})
        ref = "Shop.Models.Page<Shop.Models.Widget,System.Int32>"
        assert resolver.resolve(ref, TYPES) == "types.Page<types.Widget, number>"

    def test_unwrap_undescribed_wrapper(self, mapper):
        resolver = ReturnTypeResolver(mapper, {"Envelope"})
        assert resolver.resolve("Vendor.Envelope<List<Shop.Models.Widget>>", TYPES) == "types.Widget[]"

    def test_async_wrapper_is_removed(self, mapper):
        resolver = ReturnTypeResolver(mapper, {"Result"})
        ref = "System.Threading.Tasks.Task<Shop.Models.Result<Shop.Models.Widget>>"
        assert resolver.resolve(ref, TYPES) == "types.Widget"

    def test_bare_task_is_void(self, mapper):
        assert ReturnTypeResolver(mapper).resolve("System.Threading.Tasks.Task", TYPES) == "void"

    def test_undescribed_type_goes_through_mapper(self, mapper):
        resolver = ReturnTypeResolver(mapper)
        assert resolver.resolve("System.Collections.Generic.List<System.Int32>", TYPES) == "number[]"
        assert resolver.resolve("Vendor.Lib.Thing", TYPES) == "any"
