"""
Shared fixtures for zigtype tests.
"""
import pytest

from zigtype.codegen import generate_code, type_graph_from_dict
from zigtype.codegen.languages.zig import create_zig_generator


@pytest.fixture
def render():
    """Render a serialized type graph and return the GenerationResult."""

    def _render(data, **options):
        graph = type_graph_from_dict(data)
        result = generate_code(create_zig_generator(options or None), graph)
        assert result.success, result.error_message
        return result

    return _render


@pytest.fixture
def user_graph():
    """Class with a renamed required field and an optional field."""
    return {
        "top_levels": {"Root": {"$ref": "Root"}},
        "types": {
            "Root": {
                "kind": "class",
                "properties": [
                    {"name": "user-name", "type": "string"},
                    {"name": "id", "type": "integer", "optional": True},
                ],
            }
        },
    }


@pytest.fixture
def color_graph():
    return {
        "top_levels": {"Color": {"kind": "enum", "cases": ["RED", "GREEN", "blue"]}},
    }


@pytest.fixture
def nullable_map_graph():
    """Map whose values are a nullable reference to a class."""
    return {
        "top_levels": {"Root": {"$ref": "Root"}},
        "types": {
            "Root": {
                "kind": "class",
                "properties": [
                    {
                        "name": "items",
                        "type": {
                            "kind": "map",
                            "values": {
                                "kind": "union",
                                "name": "ItemsValue",
                                "members": ["null", {"$ref": "Foo"}],
                            },
                        },
                    }
                ],
            },
            "Foo": {
                "kind": "class",
                "properties": [{"name": "name", "type": "string"}],
            },
        },
    }


@pytest.fixture
def mixed_graph():
    """Two top-levels covering every declaration kind and an alias."""
    return {
        "top_levels": {
            "Order": {"$ref": "Order"},
            "Orders": {"kind": "array", "items": {"$ref": "Order"}},
        },
        "types": {
            "Order": {
                "kind": "class",
                "description": "A customer order.",
                "properties": [
                    {"name": "status", "type": {"$ref": "Status"}},
                    {"name": "total", "type": "double", "description": "Total in cents."},
                    {"name": "customer", "type": {"$ref": "Customer"}},
                    {
                        "name": "reference",
                        "type": {
                            "kind": "union",
                            "name": "Reference",
                            "members": ["integer", "string", "null"],
                        },
                    },
                ],
            },
            "Customer": {
                "kind": "class",
                "properties": [
                    {"name": "firstName", "type": "string"},
                    {"name": "tags", "type": {"kind": "array", "items": "string"}},
                ],
            },
            "Status": {"kind": "enum", "cases": ["open", "closed"]},
        },
    }
