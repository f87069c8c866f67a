"""mdconvert configuration and result models."""

from .config import (
    DEFAULT_NATIVE_LIBRARY,
    ENV_LINK_STYLE,
    ENV_NATIVE_LIBRARY,
    ENV_NATIVE_TIMEOUT,
    ENV_USE_NATIVE,
    ConversionConfig,
    LinkStyle,
    get_config,
)
from .result import Backend, ConversionResult

__all__ = [
    # Config
    "ConversionConfig",
    "LinkStyle",
    "get_config",
    "DEFAULT_NATIVE_LIBRARY",
    "ENV_USE_NATIVE",
    "ENV_NATIVE_LIBRARY",
    "ENV_NATIVE_TIMEOUT",
    "ENV_LINK_STYLE",
    # Results
    "Backend",
    "ConversionResult",
]
