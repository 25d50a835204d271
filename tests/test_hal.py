"""Tests for HAL response shaping."""

from entityrest.hal import HALExporter, export_hal


class TestExportHal:
    def test_single_record_gets_self_link(self):
        shaped = export_hal("/api", "widgets", {"id": "42", "name": "a"})
        assert shaped == {
            "id": "42",
            "name": "a",
            "_links": {"self": {"href": "/api/widgets/42"}},
        }

    def test_single_record_is_copied(self):
        record = {"id": "42"}
        export_hal("", "widgets", record)
        assert record == {"id": "42"}

    def test_trailing_slash_base_url(self):
        shaped = export_hal("http://host/api/", "widgets", {"id": "42"})
        assert shaped["_links"]["self"]["href"] == "http://host/api/widgets/42"

    def test_collection_envelope(self):
        shaped = export_hal("/api", "widgets", [{"id": "1"}, {"id": "2"}])
        assert shaped == {
            "_links": {"self": {"href": "/api/widgets/"}},
            "count": 2,
            "_embedded": {"widgets": [{"id": "1"}, {"id": "2"}]},
        }

    def test_empty_collection(self):
        shaped = export_hal("", "widgets", [])
        assert shaped["count"] == 0
        assert shaped["_embedded"] == {"widgets": []}
        assert shaped["_links"]["self"]["href"] == "/widgets/"

    def test_missing_plural_name_uses_data_key(self):
        shaped = export_hal("", "", [])
        assert shaped["_embedded"] == {"data": []}

    def test_scalar_passthrough(self):
        assert export_hal("", "widgets", "text") == "text"


class TestHALExporter:
    def test_export_many_links_each_item(self):
        exporter = HALExporter("/api", "widgets")
        shaped = exporter.export_many([{"id": "1"}])
        item = shaped["_embedded"]["widgets"][0]
        assert item["_links"]["self"]["href"] == "/api/widgets/1"
        assert shaped["count"] == 1

    def test_export_one(self):
        exporter = HALExporter("", "widgets")
        assert exporter.export_one({"id": "9"})["_links"]["self"]["href"] == "/widgets/9"
