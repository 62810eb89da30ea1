"""
Type graph representation for code generation.

The renderer consumes an already-inferred type graph: a closed set of node
kinds (primitives, arrays, maps, classes, enums, unions) reachable from one
or more named top-levels. Classes, enums and unions are *named types* and
compare by identity, which lets recursive graphs be built by mutation before
rendering starts. Everything else is a structural value.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar, Union

T = TypeVar("T")


class TypeGraphError(ValueError):
    """Exception raised for malformed serialized type graphs."""

    pass


class PrimitiveKind(Enum):
    """Primitive node kinds."""

    ANY = "any"
    NULL = "null"
    BOOL = "bool"
    INTEGER = "integer"
    DOUBLE = "double"
    STRING = "string"


@dataclass(frozen=True)
class PrimitiveType:
    kind: PrimitiveKind


@dataclass(frozen=True)
class ArrayType:
    items: "TypeNode"


@dataclass(frozen=True)
class MapType:
    """String-keyed associative container."""

    values: "TypeNode"


@dataclass(frozen=True)
class ClassProperty:
    """A single property of a class, keyed by its external (JSON) name."""

    name: str
    type: "TypeNode"
    optional: bool = False
    description: Optional[str] = None


@dataclass(eq=False, repr=False)
class ClassType:
    """Object type with ordered properties."""

    name: str
    properties: List[ClassProperty] = field(default_factory=list)
    description: Optional[str] = None

    def add_property(
        self,
        name: str,
        type: "TypeNode",
        optional: bool = False,
        description: Optional[str] = None,
    ) -> ClassProperty:
        """Append a property, keeping insertion order."""
        prop = ClassProperty(name, type, optional, description)
        self.properties.append(prop)
        return prop

    def get_property(self, name: str) -> Optional[ClassProperty]:
        """Get property by external name."""
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    def __repr__(self) -> str:
        return f"ClassType({self.name!r})"


@dataclass(eq=False, repr=False)
class EnumType:
    """String enumeration with ordered external values."""

    name: str
    cases: List[str] = field(default_factory=list)
    description: Optional[str] = None

    def __repr__(self) -> str:
        return f"EnumType({self.name!r})"


@dataclass(eq=False, repr=False)
class UnionType:
    """Union of member types; members are kept in order without duplicates."""

    name: str
    members: List["TypeNode"] = field(default_factory=list)
    description: Optional[str] = None

    def __post_init__(self):
        self.set_members(self.members)

    def set_members(self, members: List["TypeNode"]) -> None:
        unique = []
        for member in members:
            if member not in unique:
                unique.append(member)
        self.members = unique

    def __repr__(self) -> str:
        return f"UnionType({self.name!r})"


TypeNode = Union[PrimitiveType, ArrayType, MapType, ClassType, EnumType, UnionType]
NamedType = Union[ClassType, EnumType, UnionType]

ANY_TYPE = PrimitiveType(PrimitiveKind.ANY)
NULL_TYPE = PrimitiveType(PrimitiveKind.NULL)
BOOL_TYPE = PrimitiveType(PrimitiveKind.BOOL)
INTEGER_TYPE = PrimitiveType(PrimitiveKind.INTEGER)
DOUBLE_TYPE = PrimitiveType(PrimitiveKind.DOUBLE)
STRING_TYPE = PrimitiveType(PrimitiveKind.STRING)


def is_named_type(t: TypeNode) -> bool:
    return isinstance(t, (ClassType, EnumType, UnionType))


def is_null(t: TypeNode) -> bool:
    return isinstance(t, PrimitiveType) and t.kind == PrimitiveKind.NULL


def remove_null_from_union(
    union: UnionType,
) -> Tuple[Optional[PrimitiveType], List[TypeNode]]:
    """
    Split a union into its null member (if any) and the remaining members.

    Returns:
        Tuple of (null member or None, non-null members in order)
    """
    null_member = None
    non_nulls = []
    for member in union.members:
        if is_null(member):
            null_member = member
        else:
            non_nulls.append(member)
    return null_member, non_nulls


def nullable_from_union(union: UnionType) -> Optional[TypeNode]:
    """Return T if the union is exactly ``{Null, T}``, otherwise None."""
    null_member, non_nulls = remove_null_from_union(union)
    if null_member is None or len(non_nulls) != 1:
        return None
    return non_nulls[0]


def union_needs_declaration(union: UnionType) -> bool:
    """A union is declared only when at least two non-null members remain."""
    _, non_nulls = remove_null_from_union(union)
    return len(non_nulls) >= 2


def needs_declaration(t: TypeNode) -> bool:
    if isinstance(t, (ClassType, EnumType)):
        return True
    if isinstance(t, UnionType):
        return union_needs_declaration(t)
    return False


def match_type(
    t: TypeNode,
    any_: Callable[[PrimitiveType], T],
    null: Callable[[PrimitiveType], T],
    bool_: Callable[[PrimitiveType], T],
    integer: Callable[[PrimitiveType], T],
    double: Callable[[PrimitiveType], T],
    string: Callable[[PrimitiveType], T],
    array: Callable[[ArrayType], T],
    class_: Callable[[ClassType], T],
    map_: Callable[[MapType], T],
    enum: Callable[[EnumType], T],
    union: Callable[[UnionType], T],
) -> T:
    """
    Dispatch on the node kind.

    Every kind must be handled by the caller; there is no fallback arm and an
    unrecognized node raises TypeError.
    """
    if isinstance(t, PrimitiveType):
        primitive_handlers = {
            PrimitiveKind.ANY: any_,
            PrimitiveKind.NULL: null,
            PrimitiveKind.BOOL: bool_,
            PrimitiveKind.INTEGER: integer,
            PrimitiveKind.DOUBLE: double,
            PrimitiveKind.STRING: string,
        }
        return primitive_handlers[t.kind](t)
    if isinstance(t, ArrayType):
        return array(t)
    if isinstance(t, ClassType):
        return class_(t)
    if isinstance(t, MapType):
        return map_(t)
    if isinstance(t, EnumType):
        return enum(t)
    if isinstance(t, UnionType):
        return union(t)
    raise TypeError(f"Unknown type graph node: {t!r}")


def children_of(t: TypeNode) -> List[TypeNode]:
    """Direct children of a node, in order."""
    if isinstance(t, ArrayType):
        return [t.items]
    if isinstance(t, MapType):
        return [t.values]
    if isinstance(t, ClassType):
        return [prop.type for prop in t.properties]
    if isinstance(t, UnionType):
        return list(t.members)
    return []


def referenced_declarations(t: TypeNode) -> List[NamedType]:
    """
    Declarations a node's own declaration refers to, in first-reference order.

    For a class or declared union these come from its properties or members;
    for anything else from the node itself. The node is never included in
    its own result.
    """
    found: List[NamedType] = []

    def collect(node: TypeNode):
        if needs_declaration(node):
            if node is not t and node not in found:
                found.append(node)
            return
        for child in children_of(node):
            collect(child)

    if needs_declaration(t):
        for child in children_of(t):
            collect(child)
    else:
        collect(t)
    return found


@dataclass
class TypeGraph:
    """A set of named top-levels and everything reachable from them."""

    top_levels: Dict[str, TypeNode] = field(default_factory=dict)

    def add_top_level(self, name: str, root: TypeNode) -> None:
        if name in self.top_levels:
            raise TypeGraphError(f"Duplicate top-level: {name}")
        self.top_levels[name] = root

    def named_types(self) -> List[NamedType]:
        """
        All named types in graph order.

        Graph order is a pre-order depth-first walk from the top-levels in
        insertion order; each named type appears once, so cycles terminate.
        """
        seen = set()
        ordered: List[NamedType] = []

        def visit(t: TypeNode):
            if is_named_type(t):
                if id(t) in seen:
                    return
                seen.add(id(t))
                ordered.append(t)
            for child in children_of(t):
                visit(child)

        for root in self.top_levels.values():
            visit(root)
        return ordered

    def classes(self) -> List[ClassType]:
        return [t for t in self.named_types() if isinstance(t, ClassType)]

    def enums(self) -> List[EnumType]:
        return [t for t in self.named_types() if isinstance(t, EnumType)]

    def unions(self) -> List[UnionType]:
        """Unions that are emitted as declarations (nullable ones are not)."""
        return [
            t
            for t in self.named_types()
            if isinstance(t, UnionType) and union_needs_declaration(t)
        ]

    def declarations(self) -> List[NamedType]:
        """Every named type that gets its own declaration."""
        return [t for t in self.named_types() if needs_declaration(t)]


_PRIMITIVES = {kind.value: PrimitiveType(kind) for kind in PrimitiveKind}


def type_graph_from_dict(data: Dict[str, Any]) -> TypeGraph:
    """
    Build a TypeGraph from its serialized JSON form.

    Args:
        data: Dict with ``top_levels`` (name -> type) and optional ``types``
            (name -> type definition, addressable through ``{"$ref": name}``)

    Returns:
        TypeGraph

    Raises:
        TypeGraphError: If the document is malformed
    """
    if not isinstance(data, dict):
        raise TypeGraphError("Type graph must be a JSON object")

    definitions = data.get("types", {})
    top_levels = data.get("top_levels")

    if not isinstance(definitions, dict):
        raise TypeGraphError("'types' must be an object")
    if not isinstance(top_levels, dict) or not top_levels:
        raise TypeGraphError("Type graph needs at least one top-level")

    resolved: Dict[str, TypeNode] = {}
    resolving = set()

    def resolve_ref(ref: str) -> TypeNode:
        if ref in resolved:
            return resolved[ref]
        if ref not in definitions:
            raise TypeGraphError(f"Unknown type reference: {ref}")
        if ref in resolving:
            raise TypeGraphError(
                f"Reference cycle through unnamed type '{ref}' cannot be rendered"
            )
        resolving.add(ref)
        node = convert(definitions[ref], ref, ref_name=ref)
        resolving.discard(ref)
        resolved[ref] = node
        return node

    def convert(definition: Any, hint: str, ref_name: Optional[str] = None) -> TypeNode:
        if isinstance(definition, str):
            if definition not in _PRIMITIVES:
                raise TypeGraphError(f"Unknown primitive type '{definition}' at {hint}")
            return _PRIMITIVES[definition]

        if not isinstance(definition, dict):
            raise TypeGraphError(f"Invalid type definition at {hint}: {definition!r}")

        if "$ref" in definition:
            return resolve_ref(definition["$ref"])

        kind = definition.get("kind")
        if kind in _PRIMITIVES:
            return _PRIMITIVES[kind]
        if kind == "array":
            return ArrayType(convert(definition.get("items", "any"), f"{hint} item"))
        if kind == "map":
            return MapType(convert(definition.get("values", "any"), f"{hint} value"))

        name = definition.get("name") or hint
        description = definition.get("description")

        if kind == "class":
            node = ClassType(name, description=description)
            # Register before converting properties so self references resolve
            if ref_name is not None:
                resolved[ref_name] = node
                resolving.discard(ref_name)
            properties = definition.get("properties", [])
            if not isinstance(properties, list):
                raise TypeGraphError(f"Properties of {name} must be a list")
            for prop in properties:
                if not isinstance(prop, dict) or "name" not in prop:
                    raise TypeGraphError(f"Invalid property in {name}: {prop!r}")
                node.add_property(
                    prop["name"],
                    convert(prop.get("type", "any"), f"{name} {prop['name']}"),
                    optional=bool(prop.get("optional", False)),
                    description=prop.get("description"),
                )
            return node

        if kind == "enum":
            cases = definition.get("cases", [])
            if not isinstance(cases, list) or not all(
                isinstance(case, str) for case in cases
            ):
                raise TypeGraphError(f"Cases of enum {name} must be strings")
            return EnumType(name, list(cases), description)

        if kind == "union":
            node = UnionType(name, description=description)
            if ref_name is not None:
                resolved[ref_name] = node
                resolving.discard(ref_name)
            members = definition.get("members", [])
            if not isinstance(members, list) or not members:
                raise TypeGraphError(f"Union {name} needs at least one member")
            node.set_members(
                [convert(member, f"{name} member") for member in members]
            )
            return node

        raise TypeGraphError(f"Unknown type kind '{kind}' at {hint}")

    graph = TypeGraph()
    for top_name, definition in top_levels.items():
        graph.add_top_level(top_name, convert(definition, top_name))

    cycle_node = find_inline_cycle(graph)
    if cycle_node is not None:
        raise TypeGraphError(
            f"Reference cycle through {cycle_node!r} never passes a declared type "
            "and cannot be rendered"
        )
    return graph


def find_inline_cycle(graph: TypeGraph) -> Optional[TypeNode]:
    """
    A node that reaches itself through inline types only, or None.

    Classes, enums and declared unions are rendered by name, so a cycle that
    passes through one of them terminates. A cycle made of arrays, maps and
    undeclared unions would be expanded forever.
    """
    active = set()
    finished = set()

    def visit(node: TypeNode) -> Optional[TypeNode]:
        if id(node) in active:
            return node
        if id(node) in finished:
            return None
        active.add(id(node))
        for child in children_of(node):
            if needs_declaration(child):
                continue
            found = visit(child)
            if found is not None:
                return found
        active.discard(id(node))
        finished.add(id(node))
        return None

    for start in [*graph.top_levels.values(), *graph.named_types()]:
        found = visit(start)
        if found is not None:
            return found
    return None
