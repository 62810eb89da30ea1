"""
Zig-specific naming utilities.

Handles Zig keywords and naming conventions: PascalCase for declarations,
snake_case for fields, union arms and enum cases.
"""

from ...core.naming import Namer, NamingCase

# Keywords from the Zig grammar (ziglang/zig-spec, grammar/grammar.y)
ZIG_KEYWORDS = frozenset(
    {
        "addrspace",
        "align",
        "allowzero",
        "and",
        "anyframe",
        "anytype",
        "asm",
        "async",
        "await",
        "break",
        "callconv",
        "catch",
        "comptime",
        "const",
        "continue",
        "defer",
        "else",
        "enum",
        "errdefer",
        "error",
        "export",
        "extern",
        "fn",
        "for",
        "if",
        "inline",
        "noalias",
        "nosuspend",
        "noinline",
        "opaque",
        "or",
        "orelse",
        "packed",
        "pub",
        "resume",
        "return",
        "linksection",
        "struct",
        "suspend",
        "switch",
        "test",
        "threadlocal",
        "try",
        "union",
        "unreachable",
        "usingnamespace",
        "var",
        "volatile",
        "while",
    }
)

# Names bound by the generated prelude
ZIG_PRELUDE_NAMES = frozenset({"std"})


def create_type_namer() -> Namer:
    return Namer("types", NamingCase.PASCAL_CASE)


def create_snake_namer(name: str) -> Namer:
    return Namer(name, NamingCase.SNAKE_CASE)


def is_zig_identifier(name: str) -> bool:
    """Check that a name is a bare Zig identifier and not a keyword."""
    if not name or name in ZIG_KEYWORDS:
        return False
    if not (name[0] == "_" or name[0].isascii() and name[0].isalpha()):
        return False
    return all(c == "_" or (c.isascii() and c.isalnum()) for c in name)
