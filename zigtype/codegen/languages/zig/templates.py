"""
Built-in Jinja2 templates for Zig output.

Rename blocks follow the getty-zig attribute convention: a ``@"getty.db"``
(deserialize) and a ``@"getty.sb"`` (serialize) declaration inside the type.
"""

from ...core.templates import TemplateEngine, create_template_engine


def zig_string_literal(value: str) -> str:
    """Quote a string as a Zig string literal."""
    escaped = []
    for char in str(value):
        code = ord(char)
        if char == "\\":
            escaped.append("\\\\")
        elif char == '"':
            escaped.append('\\"')
        elif char == "\n":
            escaped.append("\\n")
        elif char == "\r":
            escaped.append("\\r")
        elif char == "\t":
            escaped.append("\\t")
        elif code < 0x20 or code == 0x7F:
            escaped.append(f"\\x{code:02x}")
        elif code > 0x7E:
            escaped.append(f"\\u{{{code:x}}}")
        else:
            escaped.append(char)
    return '"' + "".join(escaped) + '"'


DEFAULT_HEADER_TEMPLATE = """\
// Example code showing how to deserialize a model using "getty-zig/json".
//
// const std = @import("std");
// const json = @import("json");
//
// pub fn main() anyerror!void {
//    const json_string = "...";
//    const model = try json.fromSlice(null, {{ top_level }}, json_string);
//    std.debug.print("{any}\\n", .{model});
// }
"""

LEADING_COMMENTS_TEMPLATE = """\
{% for line in lines %}
{{ line | comment }}
{% endfor %}
"""

PRELUDE_TEMPLATE = """\
const std = @import("std");
"""

IMPORTS_TEMPLATE = """\
{% for item in imports %}
const {{ item.name }} = @import({{ item.file | zig_string }}).{{ item.name }};
{% endfor %}
"""

DESCRIPTION_TEMPLATE = """\
{% for line in description %}
/// {{ line }}
{% endfor %}
"""

ALIAS_TEMPLATE = """\
{% include "description.zig.j2" %}
{{ prefix }}const {{ name }} = {{ type }};
"""

RENAME_BLOCKS_TEMPLATE = """\
{% for block in rename_blocks %}

    {{ prefix }}const @"getty.{{ block.extension }}" = struct {
        {{ prefix }}const attributes = .{
{% for entry in block.entries %}
            .{{ entry.identifier }} = .{ .rename = {{ entry.external_name | zig_string }}, },
{% endfor %}
        };
    };
{% endfor %}
"""

STRUCT_TEMPLATE = """\
{% include "description.zig.j2" %}
{{ prefix }}const {{ name }} = struct {
{% for field in fields %}
{% filter indent(4) %}{% with description=field.description %}{% include "description.zig.j2" %}{% endwith %}{% endfilter %}
    {{ field.name }}: {{ field.type }},
{% endfor %}
{% include "rename_blocks.zig.j2" %}
};
"""

ENUM_TEMPLATE = """\
{% include "description.zig.j2" %}
{{ prefix }}const {{ name }} = enum {
{% for case in cases %}
    {{ case }},
{% endfor %}
{% include "rename_blocks.zig.j2" %}
};
"""

UNION_TEMPLATE = """\
{% include "description.zig.j2" %}
{{ prefix }}const {{ name }} = union(enum) {
{% for member in members %}
    {{ member.name }}: {{ member.type }},
{% endfor %}
};
"""

ZIG_TEMPLATES = {
    "header.zig.j2": DEFAULT_HEADER_TEMPLATE,
    "leading_comments.zig.j2": LEADING_COMMENTS_TEMPLATE,
    "prelude.zig.j2": PRELUDE_TEMPLATE,
    "imports.zig.j2": IMPORTS_TEMPLATE,
    "description.zig.j2": DESCRIPTION_TEMPLATE,
    "alias.zig.j2": ALIAS_TEMPLATE,
    "rename_blocks.zig.j2": RENAME_BLOCKS_TEMPLATE,
    "struct.zig.j2": STRUCT_TEMPLATE,
    "enum.zig.j2": ENUM_TEMPLATE,
    "union.zig.j2": UNION_TEMPLATE,
}


def create_zig_template_engine() -> TemplateEngine:
    """Template engine preloaded with the Zig templates and filters."""
    return create_template_engine(
        templates=ZIG_TEMPLATES, filters={"zig_string": zig_string_literal}
    )
