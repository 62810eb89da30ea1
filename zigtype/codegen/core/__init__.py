"""
Core code generation components.

Language-agnostic pieces shared by every backend: the type graph, naming,
rename metadata, output buffering and the generation driver.
"""

from .generator import CodeGenerator, GeneratorError, GenerationResult, generate_code
from .typegraph import (
    TypeGraph,
    TypeGraphError,
    TypeNode,
    NamedType,
    PrimitiveKind,
    PrimitiveType,
    ArrayType,
    MapType,
    ClassType,
    ClassProperty,
    EnumType,
    UnionType,
    match_type,
    type_graph_from_dict,
)
from .naming import NameResolver, Namer, Namespace, NamingCase, ResolvedNames, styled_name
from .backend import LanguageBackend, RenderContext
from .metadata import RenameCollector, RenameEntry, SerializationDirection
from .files import FileAggregator, OutputFile, SinkStateError, SourceBuffer
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Driver
    "CodeGenerator",
    "GeneratorError",
    "GenerationResult",
    "generate_code",
    # Type graph
    "TypeGraph",
    "TypeGraphError",
    "TypeNode",
    "NamedType",
    "PrimitiveKind",
    "PrimitiveType",
    "ArrayType",
    "MapType",
    "ClassType",
    "ClassProperty",
    "EnumType",
    "UnionType",
    "match_type",
    "type_graph_from_dict",
    # Naming
    "NameResolver",
    "Namer",
    "Namespace",
    "NamingCase",
    "ResolvedNames",
    "styled_name",
    # Backend interface
    "LanguageBackend",
    "RenderContext",
    # Rename metadata
    "RenameCollector",
    "RenameEntry",
    "SerializationDirection",
    # Output buffering
    "FileAggregator",
    "OutputFile",
    "SinkStateError",
    "SourceBuffer",
    # Configuration
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Templates
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
