"""Tests for ProcessorRegistry, PipelineFactory and build_default_registry."""

import pytest

from ingest_core import IngestDocument, PipelineFactory, ProcessorRegistry, build_default_registry
from ingest_core.errors import InvalidConfigType, InvalidConfigValue, MissingConfig, UnexpectedConfig
from ingest_core.processors import SetProcessorFactory, UppercaseProcessor


class TestProcessorRegistry:

    def test_register_and_create(self):
        registry = ProcessorRegistry()
        registry.register("set", SetProcessorFactory())

        processor = registry.create("set", {"field": "a", "value": 1})
        assert processor.type == "set"

    def test_duplicate_registration(self):
        registry = ProcessorRegistry()
        registry.register("set", SetProcessorFactory())
        with pytest.raises(ValueError, match=r"\[set\] is already registered"):
            registry.register("set", SetProcessorFactory())

    def test_unknown_type(self):
        with pytest.raises(InvalidConfigValue, match=r"No processor type exists with name \[nope\]"):
            ProcessorRegistry().get("nope")

    def test_unknown_type_lists_choices(self):
        with pytest.raises(InvalidConfigValue) as exc:
            build_default_registry().create("nope", {})
        assert str(exc.value) == (
            "No processor type exists with name [nope]. valid values are "
            "[append, convert, geoip, gsub, lowercase, remove, rename, set, trim, uppercase]"
        )

    def test_default_types(self):
        assert build_default_registry().types() == [
            "append", "convert", "geoip", "gsub", "lowercase",
            "remove", "rename", "set", "trim", "uppercase",
        ]


class TestPipelineFactory:
    """Test building pipelines from definition maps."""

    @pytest.fixture
    def factory(self, geoip_databases):
        return PipelineFactory(build_default_registry(geoip_databases=geoip_databases))

    def test_create(self, factory):
        pipeline = factory.create("p1", {
            "description": "upper then tag",
            "processors": [
                {"uppercase": {"field": "field1", "tag": "up"}},
                {"set": {"field": "seen", "value": True}},
            ],
        })

        assert pipeline.id == "p1"
        assert pipeline.description == "upper then tag"
        assert isinstance(pipeline.processors[0], UppercaseProcessor)
        assert pipeline.processors[0].tag == "up"

        doc = IngestDocument("idx", "_doc", "1", {"field1": "hello"})
        pipeline.execute(doc)
        assert doc.get_field_value("field1", str) == "HELLO"
        assert doc.get_field_value("seen", bool) is True

    def test_missing_processors(self, factory):
        with pytest.raises(MissingConfig, match=r"required property \[processors\] is missing"):
            factory.create("p", {"description": "x"})

    def test_unknown_pipeline_key(self, factory):
        with pytest.raises(UnexpectedConfig, match=r"pipeline \[p\] doesn't support .* \[version\]"):
            factory.create("p", {"processors": [], "version": 2})

    def test_entry_with_two_types(self, factory):
        with pytest.raises(InvalidConfigType, match="exactly one processor type"):
            factory.create("p", {"processors": [{"trim": {"field": "a"}, "lowercase": {"field": "a"}}]})

    def test_entry_not_a_map(self, factory):
        with pytest.raises(InvalidConfigType, match=r"but was \[str\]"):
            factory.create("p", {"processors": ["trim"]})

    def test_processor_config_not_a_map(self, factory):
        with pytest.raises(InvalidConfigType, match=r"property \[trim\] isn't a map, but of type \[list\]"):
            factory.create("p", {"processors": [{"trim": ["a"]}]})

    def test_null_processor_config(self, factory):
        """A bare type name with no options still validates its config."""
        with pytest.raises(MissingConfig, match=r"\[field\]"):
            factory.create("p", {"processors": [{"trim": None}]})

    def test_unknown_processor_type(self, factory):
        with pytest.raises(InvalidConfigValue, match=r"\[unknown\]"):
            factory.create("p", {"processors": [{"unknown": {}}]})

    def test_geoip_wiring(self, factory, geoip_databases):
        pipeline = factory.create("p", {"processors": [{"geoip": {"source_field": "ip"}}]})
        assert pipeline.processors[0].database is geoip_databases["GeoLite2-City.mmdb"]
