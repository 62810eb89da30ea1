"""
zigtype Code Generation Module

Renders abstract type graphs as Zig source code.
"""

from typing import Any, Dict, Optional

from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_language_info,
    get_registry,
    list_all_language_info,
    list_supported_languages,
)
from .core.generator import CodeGenerator, GenerationResult, GeneratorError, generate_code
from .core.files import OutputFile, SinkStateError
from .core.typegraph import (
    ArrayType,
    ClassProperty,
    ClassType,
    EnumType,
    MapType,
    PrimitiveKind,
    PrimitiveType,
    TypeGraph,
    TypeGraphError,
    UnionType,
    type_graph_from_dict,
)
from .core.config import GeneratorConfig, ConfigManager, load_config

registry = get_registry()


# Convenience functions
def generate_from_dict(
    data: Dict[str, Any], language: str = "zig", config=None
) -> GenerationResult:
    """
    Generate code from a serialized type graph.

    Args:
        data: Type graph in its JSON form
        language: Target language name
        config: Generator configuration (GeneratorConfig, dict or path)

    Returns:
        GenerationResult with generated code

    Raises:
        TypeGraphError: If the type graph is malformed
    """
    graph = type_graph_from_dict(data)
    generator = get_generator(language, config)
    return generate_code(generator, graph)


def generate_zig(graph: TypeGraph, **options) -> str:
    """
    Quick Zig generation for a type graph.

    Args:
        graph: Type graph to render
        **options: Generator options (public, split_files, string_type, ...)

    Returns:
        Generated code; in split mode all files concatenated

    Raises:
        GeneratorError: If generation fails
    """
    result = generate_code(get_generator("zig", options or None), graph)

    if result.success:
        return result.code
    raise GeneratorError(f"Code generation failed: {result.error_message}")


# Export main interfaces
__all__ = [
    "GeneratorRegistry",
    "RegistryError",
    "CodeGenerator",
    "GenerationResult",
    "GeneratorError",
    "OutputFile",
    "SinkStateError",
    "TypeGraph",
    "TypeGraphError",
    "PrimitiveKind",
    "PrimitiveType",
    "ArrayType",
    "MapType",
    "ClassType",
    "ClassProperty",
    "EnumType",
    "UnionType",
    "type_graph_from_dict",
    "GeneratorConfig",
    "ConfigManager",
    "load_config",
    "generate_code",
    "generate_from_dict",
    "generate_zig",
    "get_generator",
    "get_language_info",
    "list_all_language_info",
    "list_supported_languages",
    "registry",
]
