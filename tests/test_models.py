import pytest
from pydantic import ValidationError

from api_client_codegen.description.base import (
    ApiDescription,
    ApiDescriptionModel,
    EnumValue,
    ParameterDescription,
    PropertyDescription,
    TypeDescription,
)


class TestTypeDescription:
    def test_defaults(self):
        t = TypeDescription(name="Widget")
        assert t.namespace is None
        assert t.generic_arguments == []
        assert t.properties == []
        assert t.is_enum is False

    def test_enum(self):
        t = TypeDescription(name="Color", enum_values=[EnumValue(name="Red", value="0")])
        assert t.is_enum

    def test_numeric_enum_value_is_text(self):
        assert EnumValue.model_validate({"name": "Red", "value": 0}).value == "0"
        assert EnumValue.model_validate({"Name": "Big", "Value": -2147483648}).value == "-2147483648"
        assert EnumValue(name="Blue", value="2").value == "2"

    def test_boolean_enum_value_is_rejected(self):
        with pytest.raises(ValidationError):
            EnumValue.model_validate({"name": "Yes", "value": True})

    def test_properties_and_enum_values_are_exclusive(self):
        with pytest.raises(ValidationError):
            TypeDescription(
                name="Broken",
                properties=[PropertyDescription(name="x")],
                enum_values=[EnumValue(name="A")],
            )

    def test_accepts_any_key_case(self):
        t = TypeDescription.model_validate(
            {"Name": "Widget", "baseType": "Shop.Entity", "generic_arguments": ["T"], "EnumValues": []}
        )
        assert t.name == "Widget"
        assert t.base_type == "Shop.Entity"
        assert t.generic_arguments == ["T"]

    def test_nulls_fall_back_to_defaults(self):
        t = TypeDescription.model_validate({"name": "Widget", "properties": None, "genericArguments": None})
        assert t.properties == []
        assert t.generic_arguments == []

    def test_frozen(self):
        t = TypeDescription(name="Widget")
        with pytest.raises(ValidationError):
            t.name = "Other"


class TestApiDescription:
    def test_minimal(self):
        api = ApiDescription()
        assert api.controller == ""
        assert api.action is None
        assert api.parameters == []
        assert api.return_type is None

    def test_parameter_default_value_keeps_type(self):
        p = ParameterDescription.model_validate({"Name": "page", "IsOptional": True, "DefaultValue": 1})
        assert p.is_optional is True
        assert p.default_value == 1

    def test_parameter_requires_name(self):
        with pytest.raises(ValidationError):
            ParameterDescription(type="System.String")

    def test_model_from_pascal_case(self):
        model = ApiDescriptionModel.model_validate(
            {
                "Apis": [{"Controller": "WidgetController", "HttpMethod": "GET", "ReturnType": {"Type": "System.String"}}],
                "Types": {"Shop.Widget": {"Name": "Widget"}},
            }
        )
        assert model.apis[0].return_type.type == "System.String"
        assert model.types["Shop.Widget"].name == "Widget"
