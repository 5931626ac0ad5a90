from __future__ import annotations


class FormatError(ValueError):
    """A date string that is not ``YYYY-MM-DD`` with numeric components."""


class ConfigError(ValueError):
    """Configuration that cannot be turned into a render."""
