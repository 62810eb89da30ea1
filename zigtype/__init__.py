"""zigtype: render inferred JSON type graphs as Zig declarations."""

__version__ = "0.1.0"
