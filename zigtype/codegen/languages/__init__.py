"""
Language-specific code generators.

Each subpackage supplies one backend; the registry imports them by name.
"""

from .zig import ZigBackend

__all__ = ["ZigBackend"]
