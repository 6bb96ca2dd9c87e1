"""
Unit tests for the high-level API.
"""

from typing import List

from jsonschema import Draft202012Validator

from schema_forge import json_schema_from, response_format_for, stable_reference_id
from schema_forge.schema import SchemaBuilder, to_map

from sample_types import Category, Department, Order, Person, TreeNode, Wrapper


class TestJsonSchemaFrom:
    """Test json_schema_from()."""

    def test_matches_build_then_serialize(self):
        """Test the helper is build + to_map."""
        assert json_schema_from(Person) == to_map(SchemaBuilder().build(Person))
        assert json_schema_from(Person, strict=True) == to_map(SchemaBuilder().build(Person), strict=True)

    def test_array_of_integer(self):
        assert json_schema_from(List[int]) == {"type": "array", "items": {"type": "integer"}}

    def test_person_strict(self):
        """Test a full strict rendering of a described dataclass."""
        address = {
            "type": "object",
            "properties": {
                "street": {"type": "string"},
                "city": {"type": "string"},
                "coordinates": {"type": "array", "items": {"type": "number"}},
            },
            "required": ["street", "city", "coordinates"],
            "additionalProperties": False,
        }

        assert json_schema_from(Person, strict=True) == {
            "type": "object",
            "description": "A person known to the system",
            "properties": {
                "id": {"type": "string", "description": "String in a UUID format"},
                "name": {"type": "string", "description": "Full name of the person"},
                "home": address,
                "work": address,
                "age": {"type": "integer", "description": "Age in years"},
                "nickname": {"type": "string"},
                "tags": {"type": "array", "items": {"type": "string"}},
                "favorite_color": {"type": "string", "enum": ["RED", "GREEN", "BLUE"]},
            },
            "required": ["id", "name", "home", "work", "age", "nickname", "tags", "favorite_color"],
            "additionalProperties": False,
        }

    def test_schemas_are_valid_json_schema(self):
        """Test produced schemas pass jsonschema meta-validation in both modes."""
        for tp in (Wrapper, Person, Order, TreeNode, Department, Category, List[int]):
            Draft202012Validator.check_schema(json_schema_from(tp))
            Draft202012Validator.check_schema(json_schema_from(tp, strict=True))

    def test_array_of_recursive_type_resolves(self):
        """Test every $ref in an array-rooted schema resolves against the root."""
        schema = json_schema_from(List[TreeNode], strict=True)
        validator = Draft202012Validator(schema)

        assert validator.is_valid([{"label": "root", "children": [{"label": "leaf", "children": []}]}])
        assert not validator.is_valid([{"label": "root", "children": [{"label": 1, "children": []}]}])


class TestResponseFormat:
    """Test response_format_for()."""

    def test_envelope(self):
        """Test the structured-output envelope shape."""
        envelope = response_format_for(Wrapper)

        assert envelope == {
            "type": "json_schema",
            "json_schema": {
                "name": "Wrapper",
                "strict": True,
                "schema": json_schema_from(Wrapper, strict=True),
            },
        }

    def test_custom_name_and_permissive(self):
        envelope = response_format_for(TreeNode, name="tree", strict=False)

        assert envelope["json_schema"]["name"] == "tree"
        assert envelope["json_schema"]["strict"] is False
        assert stable_reference_id(TreeNode) in envelope["json_schema"]["schema"]["$defs"]
        assert "additionalProperties" not in envelope["json_schema"]["schema"]
