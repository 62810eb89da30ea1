"""
Zig code generator module.

Generates Zig structs, tagged unions and enums with getty-zig rename
attributes.
"""

from .config import ZigOptions
from .generator import (
    ZigBackend,
    create_const_strings_generator,
    create_private_generator,
    create_split_files_generator,
    create_zig_generator,
)
from .naming import ZIG_KEYWORDS, create_snake_namer, create_type_namer, is_zig_identifier
from .types import ZigType, ZigTypeMapper

__all__ = [
    "ZigBackend",
    "ZigOptions",
    "ZigType",
    "ZigTypeMapper",
    "ZIG_KEYWORDS",
    "create_type_namer",
    "create_snake_namer",
    "is_zig_identifier",
    # Factory functions
    "create_zig_generator",
    "create_private_generator",
    "create_split_files_generator",
    "create_const_strings_generator",
]
