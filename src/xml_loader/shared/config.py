"""Configuration objects for XML loading.

``ParseOptions`` describes how lxml parses a document, ``LoaderConfig`` bundles
everything a loader needs. Both are frozen dataclasses and therefore safe to
share between threads.
"""

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, List, Optional

DEFAULT_CHARSET = "UTF-8"
DEFAULT_PLACEHOLDER_PREFIX = "__THIS_IS_AN_EMPTY_STRING_NODE__"
# The encoding declaration always sits in the prolog at the start of a document
DEFAULT_DETECTION_PEEK_BYTES = 64


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ParseOptions:
    """Options passed to the lxml parser.

    ``strip_cdata`` merges CDATA sections into the surrounding text. It is on
    by default and enables the empty CDATA preservation workaround.
    """

    strip_cdata: bool = True
    remove_blank_text: bool = False
    remove_comments: bool = False
    remove_pis: bool = False
    resolve_entities: bool = False
    no_network: bool = True
    huge_tree: bool = False
    recover: bool = False

    def to_parser_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``lxml.etree.XMLParser``."""
        return asdict(self)


@dataclass(frozen=True)
class LoaderConfig:
    """Complete configuration for an ``XMLLoader``."""

    charset: str = DEFAULT_CHARSET
    options: ParseOptions = field(default_factory=ParseOptions)
    fallback_encoding: str = DEFAULT_CHARSET
    placeholder_prefix: str = DEFAULT_PLACEHOLDER_PREFIX
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate loader configuration."""
        if not isinstance(self.charset, str):
            raise ConfigValidationError(
                "charset must be a string", field_name="charset",
                suggestions=["Use '' to auto-detect the charset"]
            )
        if not isinstance(self.options, ParseOptions):
            raise ConfigValidationError(
                "options must be a ParseOptions instance", field_name="options"
            )
        if not self.fallback_encoding.strip():
            raise ConfigValidationError(
                "fallback_encoding cannot be empty", field_name="fallback_encoding"
            )
        if not self.placeholder_prefix:
            raise ConfigValidationError(
                "placeholder_prefix cannot be empty", field_name="placeholder_prefix"
            )

    @property
    def preserve_empty_cdata(self) -> bool:
        """Whether empty CDATA nodes must be protected from collapsing."""
        return self.options.strip_cdata

    def override(self, **kwargs: Any) -> "LoaderConfig":
        """Create a new configuration with specific overrides.

        Parse options can be overridden with the ``options__`` prefix:

            >>> config = LoaderConfig().override(charset="", options__strip_cdata=False)
            >>> config.options.strip_cdata
            False
        """
        option_overrides = {}
        top_level = {}
        for key, value in kwargs.items():
            if key.startswith("options__"):
                option_overrides[key[len("options__"):]] = value
            else:
                top_level[key] = value

        if option_overrides:
            base_options = top_level.get("options", self.options)
            top_level["options"] = replace(base_options, **option_overrides)

        return replace(self, **top_level)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoaderConfig":
        """Create configuration from dictionary format."""
        values = dict(data)
        try:
            if isinstance(values.get("options"), dict):
                values["options"] = ParseOptions(**values["options"])
            return cls(**values)
        except TypeError as e:
            raise ConfigValidationError(f"Invalid configuration data: {e}") from e
