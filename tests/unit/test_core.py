"""Tests for Processor, AbstractProcessorFactory and Pipeline."""

import logging

import pytest

from ingest_core import AbstractProcessorFactory, IngestDocument, Pipeline, Processor
from ingest_core.config import read_string_property
from ingest_core.errors import MissingConfig, ProcessorError, TypeMismatch, UnexpectedConfig


class _Record(Processor):
    """Append its own tag to the ``seen`` field."""

    type = "record"

    def apply(self, document):
        document.append_field_value("seen", self.tag)
        return document


class _Fail(Processor):
    type = "fail"

    def __init__(self, tag=None, error=None):
        super().__init__(tag)
        self.error = error or RuntimeError("boom")

    def apply(self, document):
        raise self.error


class _RecordFactory(AbstractProcessorFactory):
    def do_create(self, tag, config):
        read_string_property(config, "field")
        return _Record(tag)


@pytest.fixture
def doc():
    return IngestDocument("idx", "_doc", "1", {"field1": "hello"})


class TestAbstractProcessorFactory:
    """Test tag handling and strict key checking."""

    def test_tag(self):
        processor = _RecordFactory().create({"field": "f", "tag": "t1"})
        assert processor.tag == "t1"

    def test_tag_optional(self):
        assert _RecordFactory().create({"field": "f"}).tag is None

    def test_missing_required(self):
        with pytest.raises(MissingConfig, match=r"required property \[field\] is missing"):
            _RecordFactory().create({})

    def test_unknown_keys_rejected(self):
        with pytest.raises(UnexpectedConfig, match=r"processor \[record\] doesn't support .* \[extra, more\]"):
            _RecordFactory().create({"field": "f", "more": 1, "extra": 2})

    def test_config_not_mutated(self):
        config = {"field": "f", "tag": "t"}
        _RecordFactory().create(config)
        assert config == {"field": "f", "tag": "t"}

    def test_repr(self):
        assert repr(_Record("x")) == "_Record(tag='x')"


class TestPipeline:
    """Test ordered execution and failure wrapping."""

    def test_runs_in_order(self, doc):
        pipeline = Pipeline("p", [_Record("a"), _Record("b"), _Record("c")])
        result = pipeline.execute(doc)

        assert result is doc
        assert doc.get_field_value("seen", list) == ["a", "b", "c"]

    def test_empty_pipeline(self, doc):
        before = doc.copy()
        assert Pipeline("p", []).execute(doc) == before

    def test_attributes(self):
        pipeline = Pipeline("p", iter([_Record("a")]), description="desc")
        assert pipeline.id == "p"
        assert pipeline.description == "desc"
        assert isinstance(pipeline.processors, tuple)
        assert len(pipeline.processors) == 1

    def test_failure_wrapped(self, doc):
        error = TypeMismatch("field [x] is null", "x")
        pipeline = Pipeline("p", [_Fail("t", error)])

        with pytest.raises(ProcessorError, match=r"processor \[fail:t\] failed") as exc:
            pipeline.execute(doc)

        assert exc.value.processor_type == "fail"
        assert exc.value.tag == "t"
        assert exc.value.__cause__ is error

    def test_untagged_failure_message(self, doc):
        with pytest.raises(ProcessorError, match=r"processor \[fail\] failed: boom"):
            Pipeline("p", [_Fail()]).execute(doc)

    def test_stops_at_failure(self, doc):
        """Earlier writes stay applied; later processors do not run."""
        pipeline = Pipeline("p", [_Record("a"), _Fail(), _Record("c")])

        with pytest.raises(ProcessorError):
            pipeline.execute(doc)
        assert doc.get_field_value("seen", list) == ["a"]

    def test_processor_error_not_rewrapped(self, doc):
        inner = ProcessorError("inner", None, RuntimeError("x"))
        with pytest.raises(ProcessorError) as exc:
            Pipeline("p", [_Fail("outer", inner)]).execute(doc)
        assert exc.value is inner

    def test_failure_logged(self, doc, caplog):
        with caplog.at_level(logging.WARNING, logger="ingest_core"):
            with pytest.raises(ProcessorError):
                Pipeline("p", [_Fail("t")]).execute(doc)
        assert "processor [fail]" in caplog.text
