"""Tests for the type_resolver module."""

import logging

from apigen.model import (
    Definition,
    DefinitionKind,
    Parameter,
    ParameterLocation,
    PrimitiveType,
    Response,
    SchemaRef,
    decode_document,
    decode_property,
)
from apigen.type_resolver import (
    ERROR_CLASS,
    SUCCESS_CLASS,
    resolve_body,
    resolve_definition,
    resolve_enum,
    resolve_object,
    resolve_parameter,
    resolve_parameters,
    resolve_property,
    resolve_response,
    resolve_response_union,
    resolve_type_name,
    union,
)


def _prop(node: dict) -> str:
    return resolve_property(decode_property(node))


def _param(**kwargs) -> Parameter:
    name = kwargs.pop("name", "q")
    kwargs.setdefault("location", ParameterLocation.QUERY)
    kwargs.setdefault("primitive_type", PrimitiveType.STRING)
    return Parameter(name=name, **kwargs)


def _response(status: str, ref: str | None = None, items_ref: str | None = None) -> Response:
    schema = None if ref is None and items_ref is None else SchemaRef(ref, items_ref)
    return Response(status_code=status, schema=schema)


class TestResolveProperty:
    """Test Swagger property -> TypeScript type conversion."""

    def test_string(self):
        assert _prop({"type": "string"}) == "string"

    def test_integer(self):
        assert _prop({"type": "integer"}) == "number"

    def test_number(self):
        assert _prop({"type": "number"}) == "number"

    def test_boolean(self):
        assert _prop({"type": "boolean"}) == "boolean"

    def test_reference_only(self):
        assert _prop({"$ref": "#/definitions/models.Owner"}) == "models_Owner"

    def test_object_reference(self):
        assert _prop({"type": "object", "$ref": "#/definitions/Owner"}) == "Owner"

    def test_array_direct_reference(self):
        assert _prop({"type": "array", "$ref": "#/definitions/Tag"}) == "Tag[]"

    def test_array_items_reference(self):
        assert _prop({"type": "array", "items": {"$ref": "#/definitions/Foo"}}) == "Foo[]"

    def test_array_inline_items(self):
        assert _prop({"type": "array", "items": {"some": "string"}}) == "{some:string;}[]"

    def test_object_inline_items(self):
        assert _prop({"type": "object", "items": {"some": "string"}}) == "{some:string;}"

    def test_object_additional_properties(self):
        node = {"type": "object", "additionalProperties": {"b": "#/definitions/B", "a": "integer"}}
        assert _prop(node) == "{a:number;b:B;}"

    def test_array_inline_scalar_names(self):
        node = {"type": "array", "items": {"count": "integer", "ok": "boolean", "ratio": "number"}}
        assert _prop(node) == "{count:number;ok:boolean;ratio:number;}[]"

    def test_nothing_is_bottom(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert _prop({}) == "never"
        assert "Unresolvable type" in caplog.text

    def test_array_without_items_is_bottom(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert _prop({"type": "array"}) == "never"
        assert "array without $ref or items" in caplog.text

    def test_object_without_shape_is_bottom(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert _prop({"type": "object"}) == "never"
        assert "Unresolvable type" in caplog.text

    def test_ambiguous_shape_is_bottom(self, caplog):
        node = {"type": "object", "$ref": "#/definitions/A", "items": {"x": "string"}}
        with caplog.at_level(logging.WARNING):
            assert _prop(node) == "never"
        assert "both a $ref" in caplog.text


class TestResolveDefinition:
    """Test definition bodies."""

    def test_single_integer_property(self):
        props = {"blocks": decode_property({"type": "integer"})}
        assert resolve_object(props) == "{blocks:number;}"

    def test_properties_sorted(self):
        props = {
            "some": decode_property({"type": "string"}),
            "blocks": decode_property({"type": "integer"}),
        }
        assert resolve_object(props) == "{blocks:number;some:string;}"

    def test_empty_object(self):
        assert resolve_definition(Definition(kind=DefinitionKind.OBJECT)) == "{}"

    def test_enum_keeps_source_order(self):
        definition = Definition(kind=DefinitionKind.ENUM, enum_values=("b", "a"))
        assert resolve_definition(definition) == "'b' | 'a'"

    def test_enum_two_values(self):
        assert resolve_enum(["a", "b"]) == "'a' | 'b'"

    def test_enum_escapes_quotes(self):
        assert resolve_enum(["it's"]) == "'it\\'s'"

    def test_empty_enum_is_bottom(self):
        assert resolve_enum([]) == "never"

    def test_non_identifier_property_quoted(self):
        props = {"x-rate": decode_property({"type": "integer"})}
        assert resolve_object(props) == "{'x-rate':number;}"

    def test_mutual_references_by_name(self):
        """Cyclic definitions resolve to names, never inlined."""
        doc = decode_document({"definitions": {
            "A": {"type": "object", "properties": {"b": {"$ref": "#/definitions/B"}}},
            "B": {"type": "object", "properties": {"a": {"$ref": "#/definitions/A"}}},
        }})
        assert resolve_definition(doc.definitions["A"]) == "{b:B;}"
        assert resolve_definition(doc.definitions["B"]) == "{a:A;}"

    def test_self_reference(self):
        doc = decode_document({"definitions": {
            "Node": {"type": "object", "properties": {
                "children": {"type": "array", "items": {"$ref": "#/definitions/Node"}},
            }},
        }})
        assert resolve_definition(doc.definitions["Node"]) == "{children:Node[];}"


class TestResolveParameter:
    """Test parameter optionality."""

    def test_required_true(self):
        assert resolve_parameter(_param(required=True)) == "string"

    def test_required_false(self):
        resolved = resolve_parameter(_param(required=False))
        assert resolved == "string | null"

    def test_required_absent(self):
        resolved = resolve_parameter(_param(required=None))
        assert resolved == "string | null | undefined"

    def test_integer_required(self):
        assert resolve_parameter(_param(primitive_type=PrimitiveType.INTEGER, required=True)) == "number"

    def test_no_type_is_bottom(self):
        assert resolve_parameter(_param(primitive_type=None, required=True)) == "never"

    def test_array_parameter(self):
        param = _param(primitive_type=PrimitiveType.ARRAY, items_type=PrimitiveType.STRING, required=True)
        assert resolve_parameter(param) == "string[]"

    def test_array_parameter_without_items(self):
        param = _param(primitive_type=PrimitiveType.ARRAY, required=True)
        assert resolve_parameter(param) == "never[]"

    def test_object_parameter_is_bottom(self, caplog):
        param = _param(primitive_type=PrimitiveType.OBJECT, required=True)
        with caplog.at_level(logging.WARNING):
            assert resolve_parameter(param) == "never"
        assert "object parameter" in caplog.text

    def test_parameters_by_location(self):
        params = [
            _param(name="id", location=ParameterLocation.PATH, required=True),
            _param(name="limit", primitive_type=PrimitiveType.INTEGER, required=False),
            _param(name="tag"),
        ]
        assert resolve_parameters(params, ParameterLocation.PATH) == "{id: string}"
        assert resolve_parameters(params, ParameterLocation.QUERY) == (
            "{limit: number | null, tag: string | null | undefined}"
        )

    def test_no_parameters_at_location(self):
        assert resolve_parameters([], ParameterLocation.PATH) == "{}"


class TestResolveResponse:
    """Test response and response union resolution."""

    def test_reference(self):
        assert resolve_response(_response("200", "#/definitions/A")) == "Promise<A>"

    def test_array_of_reference(self):
        assert resolve_response(_response("200", items_ref="#/definitions/a.B")) == "Promise<a_B[]>"

    def test_schema_without_reference(self):
        resp = Response(status_code="200", schema=SchemaRef())
        assert resolve_response(resp) == "Promise<unknown>"

    def test_missing_schema(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert resolve_response(_response("204")) == "Promise<unknown>"
        assert "No schema found" in caplog.text

    def test_success_union_deduplicated(self):
        responses = {
            "200": _response("200", "#/definitions/A"),
            "201": _response("201", "#/definitions/A"),
            "404": _response("404", "#/definitions/B"),
        }
        assert resolve_response_union(responses, SUCCESS_CLASS) == "Promise<A>"
        assert resolve_response_union(responses, ERROR_CLASS) == "Promise<B>"

    def test_union_ordered_by_status(self):
        responses = {
            "500": _response("500", "#/definitions/Fatal"),
            "400": _response("400", "#/definitions/Invalid"),
        }
        assert resolve_response_union(responses, ERROR_CLASS) == "Promise<Invalid> | Promise<Fatal>"

    def test_empty_error_class_is_bottom(self):
        responses = {"200": _response("200", "#/definitions/A")}
        assert resolve_response_union(responses, ERROR_CLASS) == "never"

    def test_other_classes_ignored(self):
        responses = {
            "301": _response("301", "#/definitions/Moved"),
            "default": _response("default", "#/definitions/Err"),
        }
        assert resolve_response_union(responses, SUCCESS_CLASS) == "never"
        assert resolve_response_union(responses, ERROR_CLASS) == "never"


class TestResolveBody:
    """Test request body resolution."""

    def test_reference_body(self):
        body = Parameter(
            name="pet",
            location=ParameterLocation.BODY,
            body_schema=SchemaRef(reference="#/definitions/models.Pet"),
        )
        assert resolve_body([_param(), body]) == "models_Pet"

    def test_array_body(self):
        body = Parameter(
            name="pets",
            location=ParameterLocation.BODY,
            body_schema=SchemaRef(items_reference="#/definitions/Pet"),
        )
        assert resolve_body([body]) == "Pet[]"

    def test_no_body_is_bottom(self):
        assert resolve_body([_param()]) == "never"

    def test_body_without_schema(self, caplog):
        body = Parameter(name="raw", location=ParameterLocation.BODY)
        with caplog.at_level(logging.WARNING):
            assert resolve_body([body]) == "never"
        assert "has no schema" in caplog.text

    def test_first_body_wins(self, caplog):
        first = Parameter(name="a", location=ParameterLocation.BODY, body_schema=SchemaRef("#/definitions/A"))
        second = Parameter(name="b", location=ParameterLocation.BODY, body_schema=SchemaRef("#/definitions/B"))
        with caplog.at_level(logging.WARNING):
            assert resolve_body([first, second]) == "A"
        assert "Multiple body parameters" in caplog.text


class TestUnion:
    def test_dedup_keeps_first_order(self):
        assert union(["b", "a", "b"]) == "b | a"

    def test_empty(self):
        assert union([]) == "never"


class TestResolveTypeName:
    def test_scalars(self):
        assert resolve_type_name("string") == "string"
        assert resolve_type_name("integer") == "number"

    def test_reference(self):
        assert resolve_type_name("#/definitions/models.Tag") == "models_Tag"

    def test_bare_name(self):
        assert resolve_type_name("Tag") == "Tag"
