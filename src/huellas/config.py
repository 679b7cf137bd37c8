"""ContextVar-based parse configuration for Huellas.

The tokenizer never reads global state: the active ParseConfig travels
inside ParseState as plain data. The ContextVar only supplies the default
when a caller does not pass a config explicitly.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed and race conditions are impossible.

Usage:
    # Explicit config
    events = parse("[a](b)", config=ParseConfig(constructs=Constructs(label_end=False)))

    # Or set a default for the current context
    with parse_config_context(ParseConfig(link_reference_size_max=100)):
        events = parse("[a](b)")

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, fields

# Maximum bytes between the brackets of a label
LINK_REFERENCE_SIZE_MAX = 999

# Maximum nesting of parens in a raw destination
RESOURCE_DESTINATION_BALANCE_MAX = 32


@dataclass(frozen=True, slots=True)
class Constructs:
    """Which constructs the grammar tries.

    All enabled by default (CommonMark baseline for the constructs Huellas
    implements).

    """

    character_escape: bool = True
    character_reference: bool = True
    definition: bool = True
    hard_break_escape: bool = True
    hard_break_trailing: bool = True
    label_start_image: bool = True
    label_start_link: bool = True
    label_end: bool = True

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Constructs":
        """Create Constructs from a dictionary, ignoring unknown keys."""
        valid_fields = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in config_dict.items() if k in valid_fields})


@dataclass(frozen=True, slots=True)
class ParseConfig:
    """Immutable parse configuration.

    Attributes:
        constructs: Construct toggles
        link_reference_size_max: Maximum label content size in bytes
        resource_destination_balance_max: Maximum paren depth in raw destinations

    """

    constructs: Constructs = field(default_factory=Constructs)
    link_reference_size_max: int = LINK_REFERENCE_SIZE_MAX
    resource_destination_balance_max: int = RESOURCE_DESTINATION_BALANCE_MAX

    @classmethod
    def from_dict(cls, config_dict: dict) -> "ParseConfig":
        """Create ParseConfig from dictionary.

        Only includes keys that are valid ParseConfig fields; unknown keys
        are silently ignored. ``constructs`` may be given as a nested dict.

        Args:
            config_dict: Dictionary with config values.

        Returns:
            New ParseConfig instance with values from dict.

        Example:
            >>> config = ParseConfig.from_dict({
            ...     "constructs": {"label_end": False},
            ...     "unknown_key": "ignored",
            ... })
            >>> config.constructs.label_end
            False

        """
        valid_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        if isinstance(filtered.get("constructs"), dict):
            filtered["constructs"] = Constructs.from_dict(filtered["constructs"])
        return cls(**filtered)


@dataclass(frozen=True, slots=True)
class CompileConfig:
    """Immutable HTML compile configuration.

    Attributes:
        allow_dangerous_protocol: Keep URLs with protocols outside the safe list

    """

    allow_dangerous_protocol: bool = False

    @classmethod
    def from_dict(cls, config_dict: dict) -> "CompileConfig":
        """Create CompileConfig from a dictionary, ignoring unknown keys."""
        valid_fields = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in config_dict.items() if k in valid_fields})


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: ParseConfig = ParseConfig()

# Thread-local configuration via ContextVar
_parse_config: ContextVar[ParseConfig] = ContextVar(
    "parse_config",
    default=_DEFAULT_CONFIG,
)


def get_parse_config() -> ParseConfig:
    """Get current parse configuration (thread-local)."""
    return _parse_config.get()


def set_parse_config(config: ParseConfig) -> None:
    """Set parse configuration for current context.

    Args:
        config: ParseConfig instance to use for this context.

    """
    _parse_config.set(config)


def reset_parse_config() -> None:
    """Reset to default configuration.

    Reuses the module-level _DEFAULT_CONFIG singleton, avoiding allocation.

    """
    _parse_config.set(_DEFAULT_CONFIG)


@contextmanager
def parse_config_context(config: ParseConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Args:
        config: ParseConfig to use within the context.

    Yields:
        None

    Thread Safety:
        Only affects the current thread's context. Properly restores previous
        config even if an exception is raised.

    """
    previous = _parse_config.get()
    _parse_config.set(config)
    try:
        yield
    finally:
        _parse_config.set(previous)


__all__ = [
    "CompileConfig",
    "Constructs",
    "LINK_REFERENCE_SIZE_MAX",
    "ParseConfig",
    "RESOURCE_DESTINATION_BALANCE_MAX",
    "get_parse_config",
    "parse_config_context",
    "reset_parse_config",
    "set_parse_config",
]
