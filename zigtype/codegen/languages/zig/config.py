"""
Zig-specific configuration and validation.

Reads the Zig settings out of the generic configuration's custom section.
"""

from dataclasses import dataclass

from ...core.config import ConfigError, GeneratorConfig

VALID_INT_TYPES = {"i8", "i16", "i32", "i64", "i128", "isize", "u8", "u16", "u32", "u64", "u128", "usize"}
VALID_FLOAT_TYPES = {"f16", "f32", "f64", "f80", "f128"}
VALID_STRING_TYPES = {"[]u8", "[]const u8"}


@dataclass(frozen=True)
class ZigOptions:
    """Type choices for the Zig backend."""

    public: bool = True
    int_type: str = "i64"
    float_type: str = "f64"
    string_type: str = "[]u8"
    any_type: str = "std.json.Value"

    @property
    def visibility(self) -> str:
        return "pub" if self.public else ""

    @classmethod
    def from_config(cls, config: GeneratorConfig) -> "ZigOptions":
        """
        Build options from a generator configuration.

        Raises:
            ConfigError: If a Zig setting has an invalid value
        """
        custom = config.custom or {}
        options = cls(
            public=config.public,
            int_type=custom.get("int_type", cls.int_type),
            float_type=custom.get("float_type", cls.float_type),
            string_type=custom.get("string_type", cls.string_type),
            any_type=custom.get("any_type", cls.any_type),
        )
        options.validate()
        return options

    def validate(self) -> None:
        if self.int_type not in VALID_INT_TYPES:
            raise ConfigError(f"Invalid int_type: {self.int_type}")
        if self.float_type not in VALID_FLOAT_TYPES:
            raise ConfigError(f"Invalid float_type: {self.float_type}")
        if self.string_type not in VALID_STRING_TYPES:
            raise ConfigError(f"Invalid string_type: {self.string_type}")
        if not self.any_type:
            raise ConfigError("any_type must not be empty")
