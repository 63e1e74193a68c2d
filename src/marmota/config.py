"""ContextVar-based parse configuration for marmota.

Provides thread-local configuration using Python's ContextVars (PEP 567).
Config is set once per Markdown instance (or per render call) and read by
the block parser, the inline parser and the renderer.

Thread Safety:
    ContextVars are thread-local. Each thread has independent
    storage, so concurrent renders with different settings never interfere.

Usage:
    # Through the high-level API
    md = Markdown(plugins=["table", "strikethrough"])
    html = md("~~gone~~")

    # Direct parser usage
    from marmota.config import ParseConfig, parse_config_context

    with parse_config_context(ParseConfig.commonmark()):
        doc = Parser(source).parse()

"""

from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

from marmota.errors import PluginError

# Built-in GFM extension name -> ParseConfig field
BUILTIN_PLUGINS: dict[str, str] = {
    "table": "tables_enabled",
    "strikethrough": "strikethrough_enabled",
    "task_lists": "task_lists_enabled",
    "autolinks": "autolinks_enabled",
    "tagfilter": "tagfilter_enabled",
}


@dataclass(frozen=True, slots=True)
class ParseConfig:
    """Immutable parse configuration.

    The defaults describe GitHub Flavored Markdown: every extension on.
    ``ParseConfig.commonmark()`` turns them all off.

    source_file is not part of the configuration; it is per-call state
    held by the Parser.

    Attributes:
        tables_enabled: GFM pipe tables
        strikethrough_enabled: ``~~strikethrough~~``
        task_lists_enabled: ``- [ ]`` and ``- [x]`` list items
        autolinks_enabled: bare ``www.``, ``http(s)://``, ``ftp://`` and
            e-mail autolinks
        tagfilter_enabled: neutralise the GFM disallowed raw HTML tags

    """

    tables_enabled: bool = True
    strikethrough_enabled: bool = True
    task_lists_enabled: bool = True
    autolinks_enabled: bool = True
    tagfilter_enabled: bool = True

    @classmethod
    def gfm(cls) -> "ParseConfig":
        """All GitHub Flavored Markdown extensions enabled."""
        return _GFM_CONFIG

    @classmethod
    def commonmark(cls) -> "ParseConfig":
        """Plain CommonMark: every extension disabled."""
        return _COMMONMARK_CONFIG

    @classmethod
    def from_plugins(cls, names: Iterable[str]) -> "ParseConfig":
        """Create a ParseConfig enabling exactly the named extensions.

        Args:
            names: Extension names from BUILTIN_PLUGINS, or "all".

        Raises:
            PluginError: If a name is not a built-in extension.

        Example:
            >>> ParseConfig.from_plugins(["table"]).strikethrough_enabled
            False

        """
        enabled: dict[str, bool] = dict.fromkeys(BUILTIN_PLUGINS.values(), False)
        for name in names:
            if name == "all":
                enabled = dict.fromkeys(BUILTIN_PLUGINS.values(), True)
                continue
            field = BUILTIN_PLUGINS.get(name)
            if field is None:
                known = ", ".join(sorted(BUILTIN_PLUGINS))
                raise PluginError(name, f"unknown extension (expected one of: {known}, all)")
            enabled[field] = True
        return cls(**enabled)

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, object]) -> "ParseConfig":
        """Create ParseConfig from a mapping.

        Only keys naming ParseConfig fields are used; unknown keys are
        silently ignored.

        Example:
            >>> ParseConfig.from_dict({"tables_enabled": False, "other": 1}).tables_enabled
            False

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)  # type: ignore[arg-type]


_GFM_CONFIG: ParseConfig = ParseConfig()
_COMMONMARK_CONFIG: ParseConfig = ParseConfig(
    tables_enabled=False,
    strikethrough_enabled=False,
    task_lists_enabled=False,
    autolinks_enabled=False,
    tagfilter_enabled=False,
)

# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: ParseConfig = _GFM_CONFIG

_parse_config: ContextVar[ParseConfig] = ContextVar(
    "marmota_parse_config",
    default=_DEFAULT_CONFIG,
)


def get_parse_config() -> ParseConfig:
    """Get current parse configuration (thread-local)."""
    return _parse_config.get()


def set_parse_config(config: ParseConfig) -> None:
    """Set parse configuration for the current context.

    Only affects the current thread's context.
    """
    _parse_config.set(config)


def reset_parse_config() -> None:
    """Reset the current context to the default (GFM) configuration."""
    _parse_config.set(_DEFAULT_CONFIG)


@contextmanager
def parse_config_context(config: ParseConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with parse_config_context(ParseConfig.commonmark()):
        ...     get_parse_config().tables_enabled
        False

    """
    token = _parse_config.set(config)
    try:
        yield
    finally:
        _parse_config.reset(token)


__all__ = [
    "BUILTIN_PLUGINS",
    "ParseConfig",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
]
