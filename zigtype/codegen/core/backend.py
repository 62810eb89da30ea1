"""
Capability interface for target-language backends.

A backend is a plain value that supplies its namers, its forbidden words and
one emission function per declaration kind. The driver in
:mod:`.generator` owns traversal order, naming and output buffering; the
backend only turns one declaration at a time into text.
"""

from dataclasses import dataclass, field
from typing import Collection, Iterable, List, Protocol, runtime_checkable

from .config import GeneratorConfig
from .naming import Namer, ResolvedNames
from .typegraph import ClassType, EnumType, TypeGraph, TypeNode, UnionType


@dataclass
class RenderContext:
    """Per-render state shared between the driver and the backend."""

    graph: TypeGraph
    names: ResolvedNames
    config: GeneratorConfig
    warnings: List[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        if message not in self.warnings:
            self.warnings.append(message)


@runtime_checkable
class LanguageBackend(Protocol):
    """Operations a concrete target language must supply."""

    language_name: str
    display_name: str
    file_extension: str
    aliases: Collection[str]
    forbidden_words: Collection[str]

    type_namer: Namer
    property_namer: Namer
    union_member_namer: Namer
    enum_case_namer: Namer

    config: GeneratorConfig

    def global_forbidden_names(self) -> Iterable[str]: ...

    def property_forbidden_names(self) -> Iterable[str]: ...

    def union_member_forbidden_names(self) -> Iterable[str]: ...

    def enum_case_forbidden_names(self) -> Iterable[str]: ...

    def render_header(self, context: RenderContext) -> str: ...

    def render_prelude(self, context: RenderContext) -> str: ...

    def render_imports(self, declarations: List[str], context: RenderContext) -> str: ...

    def render_alias(self, top_level: str, root: TypeNode, context: RenderContext) -> str: ...

    def render_class(self, cls: ClassType, context: RenderContext) -> str: ...

    def render_union(self, union: UnionType, context: RenderContext) -> str: ...

    def render_enum(self, enum: EnumType, context: RenderContext) -> str: ...
