"""
Tests for the configuration model and codec.

Covers validation (required fields, strict types, id uniqueness),
the store blob round trip, and the mirror module renderer/parser.
"""

from __future__ import annotations

import json

import pytest

from uptime_config import codec
from uptime_config.errors import MalformedDocument
from uptime_config.models.config import ConfigurationDocument


MINIMAL_SOURCE = """const pageConfig = {
  "title": "S"
}

const workerConfig = {
  "monitors": [
    {
      "id": "m1",
      "method": "HTTP",
      "target": "https://x"
    }
  ]
}

export { pageConfig, workerConfig }"""


# ── Validation ───────────────────────────────────────────────────────


class TestParseDocument:

    def test_minimal_document(self, minimal_config):
        doc = codec.parse_document(minimal_config)
        assert isinstance(doc, ConfigurationDocument)
        assert doc.page_settings.title == "S"
        assert doc.monitor_ids == ["m1"]

    def test_full_document(self, sample_config):
        doc = codec.parse_document(sample_config)
        monitor = doc.monitor_settings.get_monitor("foo_monitor")
        assert monitor.expected_codes == [200]
        assert monitor.check_location_worker_route == "https://xxx.example.com"
        assert doc.monitor_settings.get_monitor("test_tcp_monitor").is_tcp
        assert doc.monitor_settings.notification.time_zone == "Asia/Shanghai"

    def test_unset_fields_not_materialised(self, minimal_config):
        doc = codec.parse_document(minimal_config)
        assert codec.to_api_dict(doc) == minimal_config

    def test_duplicate_ids_rejected(self, minimal_config):
        monitors = minimal_config["monitorSettings"]["monitors"]
        monitors[:] = [
            {"id": "dup", "method": "GET", "target": "https://a"},
            {"id": "dup", "method": "GET", "target": "https://b"},
        ]
        with pytest.raises(MalformedDocument) as exc:
            codec.parse_document(minimal_config)
        assert "dup" in exc.value.details

    def test_missing_id_rejected(self, minimal_config):
        del minimal_config["monitorSettings"]["monitors"][0]["id"]
        with pytest.raises(MalformedDocument) as exc:
            codec.parse_document(minimal_config)
        assert "id" in exc.value.details

    def test_empty_id_rejected(self, minimal_config):
        minimal_config["monitorSettings"]["monitors"][0]["id"] = ""
        with pytest.raises(MalformedDocument):
            codec.parse_document(minimal_config)

    @pytest.mark.parametrize("timeout", ["5000", "soon", 0, -1, 1.5])
    def test_bad_timeout_rejected(self, minimal_config, timeout):
        minimal_config["monitorSettings"]["monitors"][0]["timeout"] = timeout
        with pytest.raises(MalformedDocument):
            codec.parse_document(minimal_config)

    def test_unknown_method_rejected(self, minimal_config):
        minimal_config["monitorSettings"]["monitors"][0]["method"] = "PING"
        with pytest.raises(MalformedDocument):
            codec.parse_document(minimal_config)

    def test_unknown_field_rejected(self, minimal_config):
        minimal_config["monitorSettings"]["monitors"][0]["retries"] = 3
        with pytest.raises(MalformedDocument):
            codec.parse_document(minimal_config)

    def test_snake_case_keys_rejected(self, minimal_config):
        doc = {
            "page_settings": minimal_config["pageSettings"],
            "monitor_settings": minimal_config["monitorSettings"],
        }
        with pytest.raises(MalformedDocument) as exc:
            codec.parse_document(doc)
        assert "page_settings" in exc.value.details

    def test_snake_case_monitor_field_rejected(self, minimal_config):
        minimal_config["monitorSettings"]["monitors"][0]["status_page_link"] = "https://x"
        with pytest.raises(MalformedDocument):
            codec.parse_document(minimal_config)

    def test_missing_section_rejected(self, minimal_config):
        del minimal_config["monitorSettings"]
        with pytest.raises(MalformedDocument) as exc:
            codec.parse_document(minimal_config)
        assert "monitorSettings" in exc.value.details

    def test_negative_cooldown_rejected(self, minimal_config):
        minimal_config["monitorSettings"]["kvWriteCooldownMinutes"] = -1
        with pytest.raises(MalformedDocument):
            codec.parse_document(minimal_config)

    def test_non_object_rejected(self):
        with pytest.raises(MalformedDocument) as exc:
            codec.parse_document(["not", "a", "document"])
        assert "list" in exc.value.details

    def test_errors_are_collected(self, minimal_config):
        minimal_config["monitorSettings"]["monitors"][0]["timeout"] = "x"
        with pytest.raises(MalformedDocument) as exc:
            codec.parse_document(minimal_config)
        assert exc.value.errors
        assert exc.value.errors[0]["loc"][-1] == "timeout"


# ── Store blob ───────────────────────────────────────────────────────


class TestStoreBlob:

    def test_round_trip(self, sample_config):
        doc = codec.parse_document(sample_config)
        assert codec.from_store_blob(codec.to_store_blob(doc)) == doc

    def test_round_trip_minimal(self, minimal_config):
        doc = codec.parse_document(minimal_config)
        assert codec.from_store_blob(codec.to_store_blob(doc)) == doc

    def test_blob_is_submitted_json(self, sample_config):
        doc = codec.parse_document(sample_config)
        assert json.loads(codec.to_store_blob(doc)) == sample_config

    def test_blob_accepts_bytes(self, minimal_config):
        blob = json.dumps(minimal_config).encode("utf-8")
        assert codec.from_store_blob(blob).page_settings.title == "S"

    def test_invalid_json(self):
        with pytest.raises(MalformedDocument):
            codec.from_store_blob("{not json")

    def test_invalid_document(self):
        with pytest.raises(MalformedDocument):
            codec.from_store_blob(json.dumps({"pageSettings": {}}))


# ── Mirror source ────────────────────────────────────────────────────


class TestMirrorSource:

    def test_exact_shape(self, minimal_config):
        doc = codec.parse_document(minimal_config)
        assert codec.to_mirror_source(doc) == MINIMAL_SOURCE

    def test_deterministic(self, sample_config):
        doc = codec.parse_document(sample_config)
        assert codec.to_mirror_source(doc) == codec.to_mirror_source(doc)

    def test_input_key_order_does_not_matter(self, minimal_config):
        reordered = {
            "monitorSettings": {
                "monitors": [{"target": "https://x", "method": "HTTP", "id": "m1"}],
            },
            "pageSettings": {"title": "S"},
        }
        a = codec.to_mirror_source(codec.parse_document(minimal_config))
        b = codec.to_mirror_source(codec.parse_document(reordered))
        assert a == b

    def test_non_ascii_kept(self, sample_config):
        source = codec.to_mirror_source(codec.parse_document(sample_config))
        assert '"🌐 Public"' in source
        assert source.endswith("export { pageConfig, workerConfig }")

    def test_parse_round_trip(self, sample_config):
        doc = codec.parse_document(sample_config)
        assert codec.from_mirror_source(codec.to_mirror_source(doc)) == doc

    def test_parse_with_type_annotations(self):
        source = MINIMAL_SOURCE.replace(
            "const pageConfig =", "const pageConfig: PageConfig ="
        ).replace("const workerConfig =", "const workerConfig: WorkerConfig =")
        doc = codec.from_mirror_source(source)
        assert doc.monitor_ids == ["m1"]

    def test_parse_missing_declaration(self):
        source = MINIMAL_SOURCE.split("const workerConfig")[0]
        with pytest.raises(MalformedDocument) as exc:
            codec.from_mirror_source(source)
        assert "workerConfig" in exc.value.details

    def test_parse_non_json_literal(self):
        source = MINIMAL_SOURCE.replace('"title": "S"', "title: 'S'")
        with pytest.raises(MalformedDocument):
            codec.from_mirror_source(source)
