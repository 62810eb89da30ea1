"""
Zig code generator implementation.

Generates Zig structs, tagged unions and enums with getty-zig rename
attributes from a resolved type graph.
"""

from typing import Any, Dict, Iterable, List, Optional

from ....logging_config import get_logger
from ...core.backend import RenderContext
from ...core.config import GeneratorConfig, load_config
from ...core.generator import CodeGenerator
from ...core.metadata import RenameCollector, SerializationDirection
from ...core.typegraph import ClassType, EnumType, TypeNode, UnionType, remove_null_from_union
from .config import ZigOptions
from .naming import ZIG_KEYWORDS, ZIG_PRELUDE_NAMES, create_snake_namer, create_type_namer
from .templates import create_zig_template_engine
from .types import ZigType, ZigTypeMapper

logger = get_logger(__name__)

GETTY_EXTENSIONS = {
    SerializationDirection.DESERIALIZE: "db",
    SerializationDirection.SERIALIZE: "sb",
}


class ZigBackend:
    """Zig target: namers, forbidden words and one render function per declaration kind."""

    language_name = "zig"
    display_name = "Zig"
    file_extension = ".zig"
    aliases = ("ziglang",)
    forbidden_words = ZIG_KEYWORDS

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or load_config("zig")
        self.options = ZigOptions.from_config(self.config)

        self.type_namer = create_type_namer()
        self.property_namer = create_snake_namer("properties")
        self.union_member_namer = create_snake_namer("union members")
        self.enum_case_namer = create_snake_namer("enum cases")

        self.templates = create_zig_template_engine()

    def global_forbidden_names(self) -> Iterable[str]:
        return ZIG_PRELUDE_NAMES

    def property_forbidden_names(self) -> Iterable[str]:
        return ()

    def union_member_forbidden_names(self) -> Iterable[str]:
        return ()

    def enum_case_forbidden_names(self) -> Iterable[str]:
        return ()

    # Helpers

    @property
    def prefix(self) -> str:
        """Visibility keyword followed by a space, or nothing."""
        visibility = self.options.visibility
        return f"{visibility} " if visibility else ""

    def type_mapper(self, context: RenderContext) -> ZigTypeMapper:
        return ZigTypeMapper(context.names.type_name, self.options)

    def _description(self, text: Optional[str]) -> List[str]:
        if not text or not self.config.add_comments:
            return []
        return [line.rstrip() for line in text.strip().splitlines()]

    def _report_issues(self, zig_type: ZigType, where: str, context: RenderContext):
        for issue in zig_type.issues:
            context.warn(f"{where}: {issue}")

    def _rename_blocks(self, renames: RenameCollector) -> List[Dict[str, Any]]:
        return [
            {"extension": GETTY_EXTENSIONS[direction], "entries": entries}
            for direction, entries in renames.blocks()
        ]

    def _render(self, template_name: str, context: Dict[str, Any]) -> str:
        return self.templates.render_template(template_name, context).rstrip("\n")

    # Rendering

    def render_header(self, context: RenderContext) -> str:
        leading_comments = context.config.leading_comments
        if leading_comments is not None:
            return self._render("leading_comments.zig.j2", {"lines": leading_comments})

        first_top_level = next(iter(context.graph.top_levels))
        return self._render(
            "header.zig.j2",
            {"top_level": context.names.top_level_name(first_top_level)},
        )

    def render_prelude(self, context: RenderContext) -> str:
        return self._render("prelude.zig.j2", {})

    def render_imports(self, declarations: List[str], context: RenderContext) -> str:
        imports = [
            {"name": name, "file": context.names.file_name(name)}
            for name in declarations
        ]
        return self._render("imports.zig.j2", {"imports": imports})

    def render_alias(self, top_level: str, root: TypeNode, context: RenderContext) -> str:
        name = context.names.aliases[top_level]
        zig_type = self.type_mapper(context).zig_type(root, True)
        self._report_issues(zig_type, name, context)
        return self._render(
            "alias.zig.j2",
            {"prefix": self.prefix, "name": name, "type": zig_type.name, "description": []},
        )

    def render_class(self, cls: ClassType, context: RenderContext) -> str:
        class_name = context.names.type_name(cls)
        mapper = self.type_mapper(context)
        renames = RenameCollector(class_name)

        fields = []
        for prop, field_name in zip(cls.properties, context.names.properties[cls]):
            zig_type = mapper.property_zig_type(prop)
            self._report_issues(zig_type, f"{class_name}.{field_name}", context)
            fields.append(
                {
                    "name": field_name,
                    "type": zig_type.name,
                    "description": self._description(prop.description),
                }
            )
            renames.record(field_name, prop.name)

        if renames:
            logger.debug("%s renames %d field(s)", class_name, len(renames))

        return self._render(
            "struct.zig.j2",
            {
                "prefix": self.prefix,
                "name": class_name,
                "description": self._description(cls.description),
                "fields": fields,
                "rename_blocks": self._rename_blocks(renames),
            },
        )

    def render_enum(self, enum: EnumType, context: RenderContext) -> str:
        enum_name = context.names.type_name(enum)
        renames = RenameCollector(enum_name)

        cases = context.names.enum_cases[enum]
        for case_name, external_value in zip(cases, enum.cases):
            renames.record(case_name, external_value)

        return self._render(
            "enum.zig.j2",
            {
                "prefix": self.prefix,
                "name": enum_name,
                "description": self._description(enum.description),
                "cases": cases,
                "rename_blocks": self._rename_blocks(renames),
            },
        )

    def render_union(self, union: UnionType, context: RenderContext) -> str:
        union_name = context.names.type_name(union)
        mapper = self.type_mapper(context)
        _, non_nulls = remove_null_from_union(union)

        members = []
        for member, member_name in zip(non_nulls, context.names.union_members[union]):
            zig_type = mapper.zig_type(member, True)
            self._report_issues(zig_type, f"{union_name}.{member_name}", context)
            members.append({"name": member_name, "type": zig_type.name})
        return self._render(
            "union.zig.j2",
            {
                "prefix": self.prefix,
                "name": union_name,
                "description": self._description(union.description),
                "members": members,
            },
        )


def create_zig_generator(config: Optional[Dict[str, Any]] = None) -> CodeGenerator:
    """Create a Zig generator from configuration overrides."""
    generator_config = load_config("zig", custom_config=config)
    return CodeGenerator(ZigBackend(generator_config))


def create_private_generator() -> CodeGenerator:
    """Declarations without the ``pub`` modifier."""
    return create_zig_generator({"public": False})


def create_split_files_generator() -> CodeGenerator:
    """One ``.zig`` file per top-level declaration."""
    return create_zig_generator({"split_files": True})


def create_const_strings_generator() -> CodeGenerator:
    """Use ``[]const u8`` for strings."""
    return create_zig_generator({"string_type": "[]const u8"})
