"""
Naming utilities for safe code generation.

Handles word splitting, case styling, character legalization, keyword
conflicts and collision-free name assignment within a namespace. Name
resolution for a whole type graph runs in two phases: base names first
(types, properties, enum cases), then names derived from already resolved
names (union arms referring to named types, output file names).
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Set, TYPE_CHECKING

from ...logging_config import get_logger
from .typegraph import (
    ClassType,
    EnumType,
    TypeGraph,
    TypeNode,
    UnionType,
    match_type,
    needs_declaration,
    nullable_from_union,
    remove_null_from_union,
)

if TYPE_CHECKING:
    from .backend import LanguageBackend

logger = get_logger(__name__)

# Used when an identifier has no legal characters left
SENTINEL_NAME = "_underscore"

# Acronym run followed by a capitalized word, capitalized word, lower run,
# remaining upper run, digit run.
_WORD_PATTERN = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")
_ILLEGAL_CHARACTERS = re.compile(r"[^A-Za-z0-9_]")


class NamingCase(Enum):
    """Different naming case styles."""

    SNAKE_CASE = "snake"  # user_name
    CAMEL_CASE = "camel"  # userName
    PASCAL_CASE = "pascal"  # UserName
    SCREAMING_SNAKE = "screaming_snake"  # USER_NAME


@dataclass(frozen=True)
class Word:
    text: str
    is_acronym: bool = False


def split_into_words(name: str) -> List[Word]:
    """
    Split an identifier into words.

    Words break at punctuation, lower/upper case transitions, acronym
    boundaries ("HTTPServer" -> "HTTP", "Server") and letter/digit
    transitions. Characters outside ASCII letters and digits only separate.
    """
    words = []
    for text in _WORD_PATTERN.findall(name):
        words.append(Word(text, is_acronym=len(text) > 1 and text.isupper()))
    return words


def lower_word_style(word: str) -> str:
    return word.lower()


def upper_word_style(word: str) -> str:
    return word.upper()


def first_upper_word_style(word: str) -> str:
    if not word:
        return word
    return word[0].upper() + word[1:].lower()


def legalize_characters(name: str) -> str:
    """Replace every character outside [A-Za-z0-9_] with an underscore."""
    return _ILLEGAL_CHARACTERS.sub("_", name)


def is_start_character(char: str) -> bool:
    return char == "_" or ("a" <= char.lower() <= "z")


def combine_words(
    words: Iterable[Word],
    first_word_style: Callable[[str], str],
    rest_word_style: Callable[[str], str],
    separator: str,
) -> str:
    """
    Style and join words into a legal identifier.

    Returns the sentinel name when nothing legal remains; a leading digit
    gets an underscore prefix.
    """
    styled = []
    for index, word in enumerate(words):
        text = legalize_characters(word.text)
        if not text:
            continue
        style = first_word_style if index == 0 else rest_word_style
        styled.append(style(text))

    combined = separator.join(styled)
    if not combined.strip("_"):
        return SENTINEL_NAME
    if not is_start_character(combined[0]):
        combined = "_" + combined
    return combined


def styled_name(original: str, case: NamingCase) -> str:
    """Convert an arbitrary external identifier to the given case style."""
    words = split_into_words(original)
    if case == NamingCase.SNAKE_CASE:
        return combine_words(words, lower_word_style, lower_word_style, "_")
    elif case == NamingCase.SCREAMING_SNAKE:
        return combine_words(words, upper_word_style, upper_word_style, "_")
    elif case == NamingCase.PASCAL_CASE:
        return combine_words(words, first_upper_word_style, first_upper_word_style, "")
    elif case == NamingCase.CAMEL_CASE:
        return combine_words(words, lower_word_style, first_upper_word_style, "")
    raise ValueError(f"Unsupported naming case: {case}")


class Namespace:
    """A set of names that must stay pairwise distinct."""

    def __init__(self, label: str, forbidden_words: Iterable[str] = ()):
        self.label = label
        self.forbidden_words: Set[str] = set(forbidden_words)
        self._used: Set[str] = set()

    def is_available(self, name: str) -> bool:
        return name not in self.forbidden_words and name not in self._used

    def add(self, name: str) -> None:
        self._used.add(name)

    @property
    def used_names(self) -> Set[str]:
        return set(self._used)


class Namer:
    """Styles name proposals and assigns them collision-free in a namespace."""

    def __init__(self, name: str, case: NamingCase):
        self.name = name
        self.case = case

    def name_style(self, original: str) -> str:
        return styled_name(original, self.case)

    def assign(self, proposal: str, namespace: Namespace) -> str:
        """
        Assign a name for a proposal.

        On collision the styled name is re-styled with an increasing numeric
        suffix ("id" -> "id_2", "Foo" -> "Foo2") until it is available. The
        forbidden set is finite, so this always terminates.
        """
        base = self.name_style(proposal)
        candidate = base
        counter = 2
        while not namespace.is_available(candidate):
            candidate = self.name_style(f"{base} {counter}")
            counter += 1

        if candidate != base:
            logger.debug(
                "Renamed '%s' to '%s' in namespace %s", base, candidate, namespace.label
            )
        namespace.add(candidate)
        return candidate


@dataclass
class ResolvedNames:
    """All names for one render, keyed by the node that owns them."""

    types: Dict[TypeNode, str] = field(default_factory=dict)
    aliases: Dict[str, str] = field(default_factory=dict)
    top_level_types: Dict[str, TypeNode] = field(default_factory=dict)
    properties: Dict[ClassType, List[str]] = field(default_factory=dict)
    enum_cases: Dict[EnumType, List[str]] = field(default_factory=dict)
    union_members: Dict[UnionType, List[str]] = field(default_factory=dict)
    files: Dict[str, str] = field(default_factory=dict)

    def type_name(self, t: TypeNode) -> str:
        try:
            return self.types[t]
        except KeyError:
            raise KeyError(f"No name resolved for {t!r}") from None

    def file_name(self, declaration_name: str) -> str:
        return self.files[declaration_name]

    def top_level_name(self, top_level: str) -> str:
        """Identifier under which a top-level is declared."""
        if top_level in self.aliases:
            return self.aliases[top_level]
        return self.types[self.top_level_types[top_level]]


def union_member_proposal(t: TypeNode, type_name: Callable[[TypeNode], str]) -> str:
    """Proposal for a union arm, derived from the member's type."""

    def nested_union(u: UnionType) -> str:
        nullable = nullable_from_union(u)
        if nullable is not None:
            return "nullable " + union_member_proposal(nullable, type_name)
        if needs_declaration(u):
            return type_name(u)
        _, non_nulls = remove_null_from_union(u)
        if non_nulls:
            return union_member_proposal(non_nulls[0], type_name)
        return "null"

    return match_type(
        t,
        any_=lambda _: "anything",
        null=lambda _: "null",
        bool_=lambda _: "bool",
        integer=lambda _: "integer",
        double=lambda _: "double",
        string=lambda _: "string",
        array=lambda a: union_member_proposal(a.items, type_name) + " array",
        class_=type_name,
        map_=lambda m: union_member_proposal(m.values, type_name) + " map",
        enum=type_name,
        union=nested_union,
    )


class NameResolver:
    """Resolves every name a render needs before emission starts."""

    def __init__(self, backend: "LanguageBackend"):
        self.backend = backend

    def resolve(self, graph: TypeGraph) -> ResolvedNames:
        names = ResolvedNames()
        self._resolve_base_names(graph, names)
        self._resolve_derived_names(graph, names)
        logger.debug(
            "Resolved %d type names and %d aliases",
            len(names.types),
            len(names.aliases),
        )
        return names

    def _resolve_base_names(self, graph: TypeGraph, names: ResolvedNames) -> None:
        backend = self.backend
        keywords = set(backend.forbidden_words)
        global_namespace = Namespace(
            "global", keywords | set(backend.global_forbidden_names())
        )

        # Top-levels rooted in a declaration lend it their name; the rest
        # become aliases.
        proposals: Dict[TypeNode, str] = {}
        for top_name, root in graph.top_levels.items():
            if needs_declaration(root) and root not in proposals:
                proposals[root] = top_name
                names.top_level_types[top_name] = root

        for top_name, root in graph.top_levels.items():
            if top_name in names.top_level_types:
                names.types[root] = backend.type_namer.assign(
                    top_name, global_namespace
                )
            else:
                names.aliases[top_name] = backend.type_namer.assign(
                    top_name, global_namespace
                )

        for declaration in graph.declarations():
            if declaration not in names.types:
                names.types[declaration] = backend.type_namer.assign(
                    declaration.name, global_namespace
                )

        for cls in graph.classes():
            namespace = Namespace(
                f"{names.types[cls]} properties",
                keywords | set(backend.property_forbidden_names()),
            )
            names.properties[cls] = [
                backend.property_namer.assign(prop.name, namespace)
                for prop in cls.properties
            ]

        for enum in graph.enums():
            namespace = Namespace(
                f"{names.types[enum]} cases",
                keywords | set(backend.enum_case_forbidden_names()),
            )
            names.enum_cases[enum] = [
                backend.enum_case_namer.assign(case, namespace) for case in enum.cases
            ]

    def _resolve_derived_names(self, graph: TypeGraph, names: ResolvedNames) -> None:
        backend = self.backend
        keywords = set(backend.forbidden_words)

        for union in graph.unions():
            namespace = Namespace(
                f"{names.types[union]} members",
                keywords | set(backend.union_member_forbidden_names()),
            )
            _, non_nulls = remove_null_from_union(union)
            names.union_members[union] = [
                backend.union_member_namer.assign(
                    union_member_proposal(member, names.type_name), namespace
                )
                for member in non_nulls
            ]

        taken: Set[str] = set()
        declared = list(names.aliases.values()) + [
            names.types[t] for t in graph.declarations()
        ]
        for declaration_name in declared:
            stem = declaration_name.lower()
            file_name = f"{stem}{backend.file_extension}"
            counter = 2
            while file_name in taken:
                file_name = f"{stem}_{counter}{backend.file_extension}"
                counter += 1
            taken.add(file_name)
            names.files[declaration_name] = file_name
