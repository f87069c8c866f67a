"""Pydantic configuration model for mdconvert."""

import logging
import math
import os
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Environment variables read by ConversionConfig.from_env()
ENV_USE_NATIVE = "MDCONVERT_USE_NATIVE"
ENV_NATIVE_LIBRARY = "MDCONVERT_NATIVE_LIBRARY"
ENV_NATIVE_TIMEOUT = "MDCONVERT_NATIVE_TIMEOUT"
ENV_LINK_STYLE = "MDCONVERT_LINK_STYLE"

# Only this exact value turns the native renderer on
NATIVE_ENABLED_VALUE = "true"

DEFAULT_NATIVE_LIBRARY = Path("sharedLibs") / "go-html-to-md" / "html-to-markdown.so"


def _parse_timeout(value: str) -> Optional[float]:
    """Parse a timeout in seconds; None unless it is a finite positive number."""
    try:
        timeout = float(value)
    except ValueError:
        return None
    if not math.isfinite(timeout) or timeout <= 0:
        return None
    return timeout


class LinkStyle(str, Enum):
    """How the fallback renderer emits links."""

    INLINED = "inlined"
    REFERENCED = "referenced"


class ConversionConfig(BaseModel):
    """
    Configuration for HTML to Markdown conversion.

    Frozen after creation: the process reads it once from the environment
    through get_config() and shares it between calls.

    Example:
        config = ConversionConfig(use_native_renderer=True, native_timeout=5)

    YAML format:
        use_native_renderer: true
        native_library_path: /opt/libs/html-to-markdown.so
        link_style: inlined
    """

    use_native_renderer: bool = Field(
        False,
        description="Try the native renderer before the rule-based fallback",
    )
    native_library_path: Path = Field(
        DEFAULT_NATIVE_LIBRARY,
        description="Path to the native renderer shared library (relative to the working directory)",
    )
    native_timeout: float = Field(
        30.0,
        gt=0,
        description="Seconds to wait for the native renderer before falling back",
    )
    link_style: LinkStyle = Field(
        LinkStyle.INLINED,
        description="Link style used by the fallback renderer",
    )
    heading_style: Literal["atx", "setext"] = Field(
        "atx",
        description="Heading style used by the fallback renderer",
    )

    model_config = {"extra": "forbid", "frozen": True}

    @property
    def resolved_library_path(self) -> Path:
        """Library path resolved against the current working directory."""
        if self.native_library_path.is_absolute():
            return self.native_library_path
        return Path.cwd() / self.native_library_path

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ConversionConfig":
        """
        Build a config from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            ConversionConfig with unset variables left at their defaults.
            Unparseable values are logged as warnings and also left at
            their defaults, so this never raises.
        """
        env = os.environ if environ is None else environ

        kwargs: dict = {
            "use_native_renderer": env.get(ENV_USE_NATIVE) == NATIVE_ENABLED_VALUE,
        }
        if env.get(ENV_NATIVE_LIBRARY):
            kwargs["native_library_path"] = Path(env[ENV_NATIVE_LIBRARY])

        raw_timeout = env.get(ENV_NATIVE_TIMEOUT)
        if raw_timeout:
            timeout = _parse_timeout(raw_timeout)
            if timeout is None:
                logger.warning(f"Ignoring {ENV_NATIVE_TIMEOUT}={raw_timeout!r}: expected a positive number of seconds")
            else:
                kwargs["native_timeout"] = timeout

        raw_link_style = env.get(ENV_LINK_STYLE)
        if raw_link_style:
            try:
                kwargs["link_style"] = LinkStyle(raw_link_style)
            except ValueError:
                choices = ", ".join(style.value for style in LinkStyle)
                logger.warning(f"Ignoring {ENV_LINK_STYLE}={raw_link_style!r}: expected one of {choices}")

        return cls(**kwargs)

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ConversionConfig":
        """Load config from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str) or {}
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "ConversionConfig":
        """Load config from YAML file."""
        return cls.from_yaml(path.read_text())


@lru_cache(maxsize=1)
def get_config() -> ConversionConfig:
    """Return the process-wide config, read from the environment on first use."""
    return ConversionConfig.from_env()
