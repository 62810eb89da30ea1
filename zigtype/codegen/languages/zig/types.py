"""
Zig-specific type system for code generation.

Maps type graph nodes to Zig type expressions. Named types are referenced by
their resolved names and never expanded inline, which keeps recursive graphs
finite.
"""

from dataclasses import dataclass, replace
from typing import Callable, Optional, Tuple

from ...core.typegraph import (
    ArrayType,
    ClassProperty,
    MapType,
    NULL_TYPE,
    TypeNode,
    UnionType,
    match_type,
    nullable_from_union,
    remove_null_from_union,
)
from .config import ZigOptions

ANY_TYPE_ISSUE = "Type could not be inferred because there is no data about it in the input"
NULL_TYPE_ISSUE = (
    "The only value for this in the input is null, which means you probably "
    "need a more complete input sample"
)


@dataclass(frozen=True)
class ZigType:
    """
    Immutable Zig type expression with the issues found while mapping it.

    Issues flag places where the emitted type is only a best-effort
    placeholder.
    """

    name: str
    is_optional: bool = False
    issues: Tuple[str, ...] = ()

    def as_optional(self) -> "ZigType":
        """Return ``?T``; an optional type is returned unchanged."""
        if self.is_optional:
            return self
        return replace(self, name=f"?{self.name}", is_optional=True)

    def with_issue(self, issue: str) -> "ZigType":
        if issue in self.issues:
            return self
        return replace(self, issues=self.issues + (issue,))

    def wrap(self, prefix: str, suffix: str = "") -> "ZigType":
        """Build a compound type around this one, keeping its issues."""
        return ZigType(f"{prefix}{self.name}{suffix}", issues=self.issues)

    def __str__(self) -> str:
        return self.name


class ZigTypeMapper:
    """
    Central engine for mapping type graph nodes to Zig types.

    Args:
        type_name: Lookup for the resolved name of a named type
        options: Zig type choices
    """

    def __init__(
        self,
        type_name: Callable[[TypeNode], str],
        options: Optional[ZigOptions] = None,
    ):
        self.type_name = type_name
        self.options = options or ZigOptions()

    def zig_type(self, t: TypeNode, with_issues: bool = False) -> ZigType:
        """Map a node to a Zig type."""
        options = self.options

        def annotated(name: str, issue: str) -> ZigType:
            zig_type = ZigType(name, is_optional=name.startswith("?"))
            return zig_type.with_issue(issue) if with_issues else zig_type

        return match_type(
            t,
            any_=lambda _: annotated(options.any_type, ANY_TYPE_ISSUE),
            null=lambda _: annotated(f"?{options.string_type}", NULL_TYPE_ISSUE),
            bool_=lambda _: ZigType("bool"),
            integer=lambda _: ZigType(options.int_type),
            double=lambda _: ZigType(options.float_type),
            string=lambda _: ZigType(options.string_type),
            array=lambda a: self._array_type(a, with_issues),
            class_=lambda c: ZigType(self.type_name(c)),
            map_=lambda m: self._map_type(m, with_issues),
            enum=lambda e: ZigType(self.type_name(e)),
            union=lambda u: self._union_type(u, with_issues),
        )

    def nullable_zig_type(self, t: TypeNode, with_issues: bool = False) -> ZigType:
        return self.zig_type(t, with_issues).as_optional()

    def property_zig_type(self, prop: ClassProperty) -> ZigType:
        """Type of a class field; optional properties become ``?T``."""
        if prop.optional:
            return self.nullable_zig_type(prop.type, True)
        return self.zig_type(prop.type, True)

    def _array_type(self, array: ArrayType, with_issues: bool) -> ZigType:
        return self.zig_type(array.items, with_issues).wrap("[]")

    def _map_type(self, map_type: MapType, with_issues: bool) -> ZigType:
        # A nullable union value collapses to ?T through _union_type
        value_type = self.zig_type(map_type.values, with_issues)
        return value_type.wrap("std.StringHashMap(", ")")

    def _union_type(self, union: UnionType, with_issues: bool) -> ZigType:
        nullable = nullable_from_union(union)
        if nullable is not None:
            return self.nullable_zig_type(nullable, with_issues)

        null_member, non_nulls = remove_null_from_union(union)
        if not non_nulls:
            return self.zig_type(null_member or NULL_TYPE, with_issues)
        if len(non_nulls) == 1:
            return self.zig_type(non_nulls[0], with_issues)

        named = ZigType(self.type_name(union))
        return named.as_optional() if null_member is not None else named
