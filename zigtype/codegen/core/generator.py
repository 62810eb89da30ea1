"""
Driver for code generation.

Resolves every name up front, then emits declarations in a fixed order:
header, prelude, top-level aliases, classes, unions, enums. Output goes
through a FileAggregator, either into one stream or one file per
declaration.
"""

from functools import partial
from typing import Any, Callable, Dict, List, Optional, Tuple

from ...logging_config import get_logger
from .backend import LanguageBackend, RenderContext
from .config import GeneratorConfig
from .files import FileAggregator, OutputFile, SourceBuffer
from .naming import NameResolver
from .typegraph import (
    NamedType,
    TypeGraph,
    UnionType,
    referenced_declarations,
    remove_null_from_union,
)

logger = get_logger(__name__)


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class CodeGenerator:
    """Renders a type graph through a language backend."""

    def __init__(self, backend: LanguageBackend):
        """Initialize generator with a backend and the backend's configuration."""
        self.backend = backend
        self.config: GeneratorConfig = backend.config
        self.name_resolver = NameResolver(backend)

    @property
    def language_name(self) -> str:
        return self.backend.language_name

    @property
    def file_extension(self) -> str:
        return self.backend.file_extension

    def generate(self, graph: TypeGraph, warnings: Optional[List[str]] = None) -> List[OutputFile]:
        """
        Generate code for a whole type graph.

        Args:
            graph: Type graph to render
            warnings: List that receives fidelity warnings found while rendering

        Returns:
            Output buffers in emission order
        """
        if not graph.top_levels:
            raise GeneratorError("Type graph has no top-levels")

        names = self.name_resolver.resolve(graph)
        context = RenderContext(graph=graph, names=names, config=self.config)
        aggregator = FileAggregator(
            self.config.split_files, self.file_extension, self.config.line_ending
        )

        if self.config.split_files:
            self._emit_split(context, aggregator)
        else:
            self._emit_single(context, aggregator)

        if warnings is not None:
            warnings.extend(context.warnings)

        return [
            OutputFile(output.filename, self.format_code(output.text))
            for output in aggregator.finished_files()
        ]

    def _declarations(self, context: RenderContext):
        """
        Yield (name, node, render) for every declaration in emission order.

        Aliases come first, then classes, unions and enums, each in graph
        order.
        """
        graph = context.graph
        names = context.names
        backend = self.backend

        for top_level, root in graph.top_levels.items():
            if top_level in names.aliases:
                yield (
                    names.aliases[top_level],
                    root,
                    partial(backend.render_alias, top_level, root, context),
                )

        groups: List[Tuple[List[NamedType], Callable[..., str]]] = [
            (graph.classes(), backend.render_class),
            (graph.unions(), backend.render_union),
            (graph.enums(), backend.render_enum),
        ]
        for declarations, render in groups:
            for declaration in declarations:
                yield (
                    names.type_name(declaration),
                    declaration,
                    partial(render, declaration, context),
                )

    def _emit_preamble(self, sink: SourceBuffer, context: RenderContext) -> None:
        sink.emit(self.backend.render_header(context))
        sink.ensure_blank_line()
        sink.emit(self.backend.render_prelude(context))

    def _emit_single(self, context: RenderContext, aggregator: FileAggregator) -> None:
        first_top_level = next(iter(context.graph.top_levels))
        with aggregator.emit_file(context.names.top_level_name(first_top_level)) as sink:
            self._emit_preamble(sink, context)
            for name, _, render in self._declarations(context):
                logger.debug("Emitting %s", name)
                sink.ensure_blank_line()
                sink.emit(render())

    def _emit_split(self, context: RenderContext, aggregator: FileAggregator) -> None:
        names = context.names
        for name, node, render in self._declarations(context):
            with aggregator.emit_file(name, names.file_name(name)) as sink:
                logger.debug("Emitting %s into %s", name, names.file_name(name))
                self._emit_preamble(sink, context)

                references = [names.type_name(t) for t in referenced_declarations(node)]
                if references:
                    sink.ensure_blank_line()
                    sink.emit(self.backend.render_imports(references, context))

                sink.ensure_blank_line()
                sink.emit(render())

    def validate_graph(self, graph: TypeGraph) -> List[str]:
        """
        Validate a type graph for structural issues worth reporting.

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []

        for cls in graph.classes():
            if not cls.properties:
                warnings.append(
                    f"Class '{cls.name}' has no properties - will generate empty struct"
                )

        for enum in graph.enums():
            if not enum.cases:
                warnings.append(f"Enum '{enum.name}' has no cases")
            elif len(set(enum.cases)) != len(enum.cases):
                warnings.append(f"Enum '{enum.name}' has duplicate cases")

        for t in graph.named_types():
            if isinstance(t, UnionType):
                _, non_nulls = remove_null_from_union(t)
                if not non_nulls:
                    warnings.append(f"Union '{t.name}' only admits null")

        return warnings

    def format_code(self, code: str) -> str:
        """
        Remove trailing whitespace and collapse runs of blank lines.

        Args:
            code: Raw generated code

        Returns:
            Formatted code
        """
        line_ending = self.config.line_ending
        lines = code.split(line_ending)
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 1:
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return line_ending.join(formatted_lines)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        files: List[OutputFile] = None,
        warnings: List[str] = None,
        metadata: Dict[str, Any] = None,
    ):
        """
        Initialize generation result.

        Args:
            files: Generated output buffers
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.files = files or []
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @property
    def code(self) -> str:
        """All generated text; the single buffer in single-stream mode."""
        return "".join(output.text for output in self.files)

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls()
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(generator: CodeGenerator, graph: TypeGraph) -> GenerationResult:
    """
    Generate code using the specified generator with error handling.

    Ordinary failures produce a failed GenerationResult with no files.
    Sequencing errors in the output buffering (SinkStateError) are bugs and
    propagate.

    Args:
        generator: Code generator instance
        graph: Type graph to render

    Returns:
        GenerationResult with files, warnings, and metadata
    """
    try:
        warnings = generator.validate_graph(graph)
        files = generator.generate(graph, warnings)

        metadata = {
            "language": generator.language_name,
            "file_extension": generator.file_extension,
            "top_levels": list(graph.top_levels),
            "class_count": len(graph.classes()),
            "union_count": len(graph.unions()),
            "enum_count": len(graph.enums()),
            "file_count": len(files),
            "split_files": generator.config.split_files,
        }

        logger.info(
            "Generated %d %s file(s) for %d top-level(s)",
            len(files),
            generator.language_name,
            len(graph.top_levels),
        )
        return GenerationResult(files, warnings, metadata)

    except AssertionError:
        raise
    except Exception as e:
        logger.error("Code generation failed: %s", e)
        return GenerationResult.error(f"Code generation failed: {e}", exception=e)
