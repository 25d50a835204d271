"""Tests for resource definitions and the YAML loader."""

from pathlib import Path

import pytest

from entityrest.resources import ResourceDefinition, ResourceLoader

WIDGET_YAML = """
resource: Widget
pluralName: widgets
schema:
  type: object
  properties:
    id: {type: string, readOnly: true}
    name: {type: string}
    locked: {type: boolean, readOnly: true}
  required: [id, name]
"""


def write(path: Path, name: str, content: str) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    target = path / name
    target.write_text(content)
    return target


class TestResourceDefinition:
    def test_from_dict(self):
        resource = ResourceDefinition.from_dict({
            "resource": "Widget",
            "schema": {"type": "object", "properties": {"id": {"readOnly": True}}},
        })
        assert resource.name == "Widget"
        assert resource.plural_name == "widgets"
        assert resource.read_only_fields == ["id"]

    def test_name_is_required(self):
        with pytest.raises(ValueError, match="'resource' name is required"):
            ResourceDefinition.from_dict({"schema": {}})

    def test_invalid_schema(self):
        with pytest.raises(ValueError, match="invalid schema"):
            ResourceDefinition.from_dict({"resource": "Bad", "schema": {"type": 12}})

    def test_default_schema(self):
        assert ResourceDefinition.from_dict({"resource": "Note"}).schema == {"type": "object"}


class TestResourceLoader:
    def test_load_all(self, tmp_path):
        write(tmp_path, "widgets.yaml", WIDGET_YAML)
        write(tmp_path, "notes.yml", "resource: Note\n")
        loader = ResourceLoader(tmp_path)
        loader.load_all()

        assert sorted(loader.list_resources()) == ["Note", "Widget"]
        widget = loader.get_resource("Widget")
        assert widget.read_only_fields == ["id", "locked"]
        assert widget.source == tmp_path / "widgets.yaml"

    def test_missing_directory_is_empty(self, tmp_path):
        loader = ResourceLoader(tmp_path / "nope")
        loader.load_all()
        assert loader.list_resources() == []

    def test_file_without_resource_key_is_skipped(self, tmp_path):
        write(tmp_path, "readme.yaml", "title: not a resource\n")
        loader = ResourceLoader(tmp_path)
        loader.load_all()
        assert loader.list_resources() == []

    def test_duplicate_plural_names(self, tmp_path):
        write(tmp_path, "a.yaml", "resource: Widget\npluralName: things\n")
        write(tmp_path, "b.yaml", "resource: Gadget\npluralName: things\n")
        with pytest.raises(ValueError, match="Duplicate plural name 'things'"):
            ResourceLoader(tmp_path).load_all()

    def test_duplicate_resource_names(self, tmp_path):
        write(tmp_path, "a.yaml", "resource: Widget\n")
        write(tmp_path, "b.yaml", "resource: Widget\npluralName: gizmos\n")
        with pytest.raises(ValueError, match="Duplicate resource 'Widget'"):
            ResourceLoader(tmp_path).load_all()

    def test_bundled_example_resources_load(self):
        resources_dir = Path(__file__).parent.parent / "resources"
        loader = ResourceLoader(resources_dir)
        loader.load_all()
        assert "Widget" in loader.list_resources()
