"""Tests for ValueSource.wrap and the value source tree."""

import pytest

from ingest_core import ListValue, MapValue, ObjectValue, TemplatedValue, TemplateService, ValueSource


@pytest.fixture
def model(document):
    return document.create_template_model()


class TestWrap:
    """Test that raw configuration values map to the right source kind."""

    def test_literal(self):
        assert ValueSource.wrap(5) == ObjectValue(5)
        assert ValueSource.wrap("plain") == ObjectValue("plain")
        assert ValueSource.wrap(None) == ObjectValue(None)

    def test_template_string(self):
        source = ValueSource.wrap("{{foo}}")
        assert isinstance(source, TemplatedValue)
        assert source.template.source == "{{foo}}"

    def test_map(self):
        source = ValueSource.wrap({"a": "{{x}}", "b": 1})
        assert isinstance(source, MapValue)
        assert isinstance(source.entries["a"], TemplatedValue)
        assert source.entries["b"] == ObjectValue(1)

    def test_list_and_tuple(self):
        assert ValueSource.wrap(["x", 2]) == ListValue([ObjectValue("x"), ObjectValue(2)])
        assert ValueSource.wrap(("x",)) == ListValue([ObjectValue("x")])

    def test_uses_given_service(self):
        templates = TemplateService(casters={"up": str.upper})
        assert ValueSource.wrap("{{up:foo}}", templates).resolve({"foo": "abc"}) == "ABC"


class TestResolve:

    def test_object_value_is_copied(self, model):
        """Every resolve returns a fresh container."""
        source = ObjectValue({"k": ["v"]})
        first = source.resolve(model)
        first["k"].append("w")

        assert source.resolve(model) == {"k": ["v"]}

    def test_templated_native(self, model):
        assert ValueSource.wrap("{{list}}").resolve(model) == [{"field": "value"}, {"field": "value2"}]

    def test_templated_text(self, model):
        assert ValueSource.wrap("{{foo}}!").resolve(model) == "bar!"

    def test_templated_result_does_not_alias_model(self, model):
        value = ValueSource.wrap("{{fizz}}").resolve(model)
        value["buzz"] = "changed"
        assert model["fizz"]["buzz"] == "hello world"

    def test_nested_templates(self, model):
        source = ValueSource.wrap({"who": "{{foo}}", "tags": ["{{tags.0}}", "x"], "n": 1})
        assert source.resolve(model) == {"who": "bar", "tags": ["a", "x"], "n": 1}


class TestRepr:

    def test_reprs(self):
        assert repr(ObjectValue(1)) == "ObjectValue(1)"
        assert repr(ValueSource.wrap("{{x}}")) == "TemplatedValue('{{x}}')"
        assert repr(ValueSource.wrap([1])) == "ListValue([ObjectValue(1)])"
