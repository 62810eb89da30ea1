import re

import pytest

from zigtype.codegen import (
    ClassType,
    GeneratorError,
    TypeGraph,
    UnionType,
    generate_code,
    generate_from_dict,
    generate_zig,
)
from zigtype.codegen.core.typegraph import INTEGER_TYPE, NULL_TYPE, STRING_TYPE, ArrayType
from zigtype.codegen.languages.zig import (
    ZIG_KEYWORDS,
    create_const_strings_generator,
    create_private_generator,
    create_split_files_generator,
    create_zig_generator,
)
from zigtype.codegen.languages.zig.types import ANY_TYPE_ISSUE, NULL_TYPE_ISSUE

ROOT_STRUCT = '''\
pub const Root = struct {
    user_name: []u8,
    id: ?i64,

    pub const @"getty.db" = struct {
        pub const attributes = .{
            .user_name = .{ .rename = "user-name", },
        };
    };

    pub const @"getty.sb" = struct {
        pub const attributes = .{
            .user_name = .{ .rename = "user-name", },
        };
    };
};
'''

HEADER = '''\
// Example code showing how to deserialize a model using "getty-zig/json".
//
// const std = @import("std");
// const json = @import("json");
//
// pub fn main() anyerror!void {
//    const json_string = "...";
//    const model = try json.fromSlice(null, Root, json_string);
//    std.debug.print("{any}\\n", .{model});
// }
'''


def test_single_stream_layout(render, user_graph):
    result = render(user_graph)

    assert len(result.files) == 1
    assert result.files[0].filename is None
    assert result.code == HEADER + '\nconst std = @import("std");\n\n' + ROOT_STRUCT


def test_class_with_renamed_and_optional_fields(render, user_graph):
    code = render(user_graph).code

    assert "    user_name: []u8,\n" in code
    assert "    id: ?i64,\n" in code
    # only the renamed field is listed, once per direction
    assert code.count('.user_name = .{ .rename = "user-name", },') == 2
    assert ".id = " not in code


def test_rename_blocks_deserialize_before_serialize(render, user_graph):
    code = render(user_graph).code
    assert code.index('@"getty.db"') < code.index('@"getty.sb"')


def test_enum_cases_and_renames(render, color_graph):
    code = render(color_graph).code

    assert "pub const Color = enum {\n    red,\n    green,\n    blue,\n" in code
    assert '.red = .{ .rename = "RED", },' in code
    assert '.green = .{ .rename = "GREEN", },' in code
    assert '"blue"' not in code


def test_enum_without_renames_has_no_metadata(render):
    code = render({"top_levels": {"Status": {"kind": "enum", "cases": ["open", "closed"]}}}).code

    assert "pub const Status = enum {\n    open,\n    closed,\n};\n" in code
    assert "getty.db" not in code


def test_map_of_nullable_class_is_optional_value(render, nullable_map_graph):
    code = render(nullable_map_graph).code

    assert "    items: std.StringHashMap(?Foo),\n" in code
    assert "union(enum)" not in code
    assert "ItemsValue" not in code
    assert "pub const Foo = struct {\n    name: []u8,\n};\n" in code


def test_colliding_property_names(render):
    result = render(
        {
            "top_levels": {
                "Root": {
                    "kind": "class",
                    "properties": [
                        {"name": "id", "type": "integer"},
                        {"name": "ID", "type": "string"},
                    ],
                }
            }
        }
    )
    code = result.code

    assert "    id: i64,\n    id_2: []u8,\n" in code
    assert code.count('.id_2 = .{ .rename = "ID", },') == 2
    assert ".id = " not in code


def test_keyword_property_is_renamed(render):
    code = render(
        {
            "top_levels": {
                "Root": {
                    "kind": "class",
                    "properties": [
                        {"name": "const", "type": "bool"},
                        {"name": "type", "type": "bool"},
                    ],
                }
            }
        }
    ).code

    assert "    const_2: bool,\n" in code
    assert '.const_2 = .{ .rename = "const", },' in code
    # "type" is not a Zig keyword
    assert "    type: bool,\n" in code


def test_declaration_order(render, mixed_graph):
    code = render(mixed_graph).code

    positions = [
        code.index('const std = @import("std");'),
        code.index("pub const Orders = []Order;"),
        code.index("pub const Order = struct {"),
        code.index("pub const Customer = struct {"),
        code.index("pub const Reference = union(enum) {"),
        code.index("pub const Status = enum {"),
    ]
    assert positions == sorted(positions)


def test_declarations_are_separated_by_blank_lines(render, mixed_graph):
    code = render(mixed_graph).code

    assert '\n\npub const Orders = []Order;\n\n/// A customer order.\npub const Order' in code
    assert "};\n\npub const Customer" in code
    assert "\n\n\n" not in code


def test_union_declaration_and_nullable_reference(render, mixed_graph):
    code = render(mixed_graph).code

    assert "    reference: ?Reference,\n" in code
    assert "pub const Reference = union(enum) {\n    integer: i64,\n    string: []u8,\n};\n" in code


def test_descriptions_become_doc_comments(render, mixed_graph):
    code = render(mixed_graph).code

    assert "/// A customer order.\npub const Order = struct {\n" in code
    assert "    /// Total in cents.\n    total: f64,\n" in code


def test_no_comments_option(render, mixed_graph):
    code = render(mixed_graph, add_comments=False).code
    assert "///" not in code


def test_field_order_preserved(render, mixed_graph):
    code = render(mixed_graph).code
    body = code[code.index("pub const Order = struct {"):]

    fields = re.findall(r"^    (\w+): ", body.split("};")[0], re.MULTILINE)
    assert fields == ["status", "total", "customer", "reference"]


def test_union_arms_named_after_members(render):
    code = render(
        {
            "top_levels": {"Shape": {"$ref": "Shape"}},
            "types": {
                "Shape": {
                    "kind": "union",
                    "members": [
                        {"$ref": "Circle"},
                        {"kind": "array", "items": "double"},
                        {"kind": "map", "values": "integer"},
                        "bool",
                    ],
                },
                "Circle": {"kind": "class", "properties": [{"name": "radius", "type": "double"}]},
            },
        }
    ).code

    assert (
        "pub const Shape = union(enum) {\n"
        "    circle: Circle,\n"
        "    double_array: []f64,\n"
        "    integer_map: std.StringHashMap(i64),\n"
        "    bool: bool,\n"
        "};\n"
    ) in code


def test_recursive_class_renders_by_reference(render):
    code = render(
        {
            "top_levels": {"Node": {"$ref": "Node"}},
            "types": {
                "Node": {
                    "kind": "class",
                    "properties": [
                        {"name": "children", "type": {"kind": "array", "items": {"$ref": "Node"}}},
                        {"name": "next", "type": {"kind": "union", "members": ["null", {"$ref": "Node"}]}},
                    ],
                }
            },
        }
    ).code

    assert "pub const Node = struct {\n    children: []Node,\n    next: ?Node,\n};\n" in code
    assert code.count("pub const Node") == 1


def test_primitive_top_level_is_alias(render):
    code = render({"top_levels": {"Names": {"kind": "array", "items": "string"}}}).code
    assert code.endswith('const std = @import("std");\n\npub const Names = [][]u8;\n')


def test_private_visibility():
    graph = TypeGraph()
    graph.add_top_level("Root", ClassType("Root"))
    graph.top_levels["Root"].add_property("user-name", STRING_TYPE)

    result = generate_code(create_private_generator(), graph)
    code = result.code

    assert "\nconst Root = struct {\n" in code
    assert '    const @"getty.db" = struct {\n        const attributes = .{\n' in code
    assert "pub const" not in code.split('const std = @import("std");')[-1]


def test_leading_comments_replace_header(render, user_graph):
    code = render(user_graph, leading_comments=["Generated from api.json", "", "Do not edit."]).code

    assert code.startswith(
        '// Generated from api.json\n//\n// Do not edit.\n\nconst std = @import("std");\n'
    )
    assert "getty-zig/json" not in code


def test_any_and_null_fields_report_issues(render):
    result = render(
        {
            "top_levels": {
                "Root": {
                    "kind": "class",
                    "properties": [
                        {"name": "data", "type": "any"},
                        {"name": "nothing", "type": "null", "optional": True},
                    ],
                }
            }
        }
    )

    assert "    data: std.json.Value,\n" in result.code
    assert "    nothing: ?[]u8,\n" in result.code
    assert f"Root.data: {ANY_TYPE_ISSUE}" in result.warnings
    assert f"Root.nothing: {NULL_TYPE_ISSUE}" in result.warnings


def test_rendering_is_deterministic(render, mixed_graph):
    assert render(mixed_graph).code == render(mixed_graph).code


def test_emitted_identifiers_are_legal(render):
    code = render(
        {
            "top_levels": {
                "123 root": {
                    "kind": "class",
                    "properties": [
                        {"name": "", "type": "string"},
                        {"name": "___", "type": "string"},
                        {"name": "2fa-code", "type": "string"},
                        {"name": "naïve value", "type": "string"},
                        {"name": "while", "type": "string"},
                    ],
                }
            }
        }
    ).code

    struct_line = re.search(r"^pub const (\w+) = struct \{$", code, re.MULTILINE)
    assert struct_line.group(1) == "_123Root"

    fields = re.findall(r"^    (\S+): \[\]u8,$", code, re.MULTILINE)
    assert fields == ["_underscore", "underscore_2", "_2_fa_code", "na_ve_value", "while_2"]
    for field in fields:
        assert re.fullmatch(r"[A-Za-z_][A-Za-z0-9_]*", field)
        assert field not in ZIG_KEYWORDS


def test_external_names_are_escaped(render):
    code = render(
        {
            "top_levels": {
                "Root": {
                    "kind": "class",
                    "properties": [{"name": 'say "hi"\\', "type": "string"}],
                }
            }
        }
    ).code

    assert '.say_hi = .{ .rename = "say \\"hi\\"\\\\", },' in code


def test_split_files(mixed_graph):
    from zigtype.codegen import type_graph_from_dict

    result = generate_code(create_split_files_generator(), type_graph_from_dict(mixed_graph))
    files = {output.filename: output.text for output in result.files}

    assert list(files) == [
        "orders.zig",
        "order.zig",
        "customer.zig",
        "reference.zig",
        "status.zig",
    ]
    for text in files.values():
        assert text.startswith("// Example code showing")
        assert 'const std = @import("std");\n' in text

    assert 'const Order = @import("order.zig").Order;\n\npub const Orders = []Order;\n' in files["orders.zig"]
    assert (
        'const Status = @import("status.zig").Status;\n'
        'const Customer = @import("customer.zig").Customer;\n'
        'const Reference = @import("reference.zig").Reference;\n'
    ) in files["order.zig"]
    assert "@import(\"" not in files["status.zig"].split('const std = @import("std");')[-1]
    assert result.metadata["file_count"] == 5
    assert result.metadata["split_files"] is True


def test_split_files_each_hold_one_declaration(mixed_graph):
    from zigtype.codegen import type_graph_from_dict

    result = generate_code(create_split_files_generator(), type_graph_from_dict(mixed_graph))
    for output in result.files:
        assert len(re.findall(r"^pub const \w+ = ", output.text, re.MULTILINE)) == 1


def test_metadata(render, mixed_graph):
    metadata = render(mixed_graph).metadata

    assert metadata["language"] == "zig"
    assert metadata["top_levels"] == ["Order", "Orders"]
    assert metadata["class_count"] == 2
    assert metadata["union_count"] == 1
    assert metadata["enum_count"] == 1
    assert metadata["file_count"] == 1


def test_custom_string_type(render, user_graph):
    code = render(user_graph, string_type="[]const u8").code
    assert "    user_name: []const u8,\n" in code


def test_empty_class_warning(render):
    result = render({"top_levels": {"Empty": {"kind": "class"}}})

    assert "pub const Empty = struct {\n};\n" in result.code
    assert any("no properties" in warning for warning in result.warnings)


def test_generate_zig_programmatic_graph():
    foo = ClassType("Foo")
    foo.add_property("count", INTEGER_TYPE)
    graph = TypeGraph()
    graph.add_top_level("Foos", ArrayType(UnionType("FooOrNull", [foo, NULL_TYPE])))

    code = generate_zig(graph, public=False)

    assert "const Foos = []?Foo;" in code
    assert "const Foo = struct {\n    count: i64,\n};" in code


def test_empty_graph_is_a_failed_result():
    result = generate_code(create_zig_generator(), TypeGraph())

    assert not result.success
    assert result.files == []
    assert "no top-levels" in result.error_message


def test_generate_zig_raises_on_failure():
    with pytest.raises(GeneratorError):
        generate_zig(TypeGraph())


def test_const_strings_generator(user_graph):
    from zigtype.codegen import type_graph_from_dict

    result = generate_code(create_const_strings_generator(), type_graph_from_dict(user_graph))

    assert result.success
    assert "    user_name: []const u8,\n" in result.code


def test_generate_from_dict(user_graph):
    result = generate_from_dict(user_graph, language="ziglang", config={"public": False})

    assert result.success
    assert "\nconst Root = struct {\n" in result.code


def test_union_arms_report_issues(render):
    result = render({"top_levels": {"Value": {"kind": "union", "members": ["any", "integer"]}}})

    assert "    anything: std.json.Value,\n" in result.code
    assert f"Value.anything: {ANY_TYPE_ISSUE}" in result.warnings
    assert not any(warning.startswith("Value.integer") for warning in result.warnings)


def test_recursive_declared_union_renders_by_reference(render):
    result = render(
        {
            "top_levels": {"Tree": {"$ref": "Tree"}},
            "types": {
                "Tree": {
                    "kind": "union",
                    "members": ["integer", {"kind": "array", "items": {"$ref": "Tree"}}],
                }
            },
        },
        split_files=True,
    )

    assert [f.filename for f in result.files] == ["tree.zig"]
    assert "pub const Tree = union(enum) {\n    integer: i64,\n" in result.code
    assert ": []Tree,\n};" in result.code
