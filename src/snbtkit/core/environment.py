"""
Parser configuration for snbtkit.

The only tunable is the maximum nesting depth of lists and compounds.
The grammar engine is recursive descent, so every nesting level costs a
handful of Python stack frames; the cap keeps deeply nested (or hostile)
input from ever reaching CPython's recursion limit.

The SNBTKIT_MAX_DEPTH environment variable lowers the default cap:

    SNBTKIT_MAX_DEPTH=32

Usage:
    from snbtkit.core.environment import ParserSettings, get_parser_settings

    settings = get_parser_settings()           # env var or default
    strict = ParserSettings(max_depth=16)      # explicit
"""

from __future__ import annotations

import logging
import os

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

# Deepest nesting the parser supports under the default recursion limit
# (roughly four frames per level).
MAX_SUPPORTED_DEPTH = 128

DEFAULT_MAX_DEPTH = MAX_SUPPORTED_DEPTH

# Environment variable name
MAX_DEPTH_ENV_VAR = "SNBTKIT_MAX_DEPTH"


class ParserSettings(BaseModel):
    """Limits applied to a single parse."""

    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH,
        ge=1,
        le=MAX_SUPPORTED_DEPTH,
        description="Maximum nesting depth of lists and compounds",
    )

    model_config = ConfigDict(frozen=True)


def get_parser_settings() -> ParserSettings:
    """Get parser settings, honouring SNBTKIT_MAX_DEPTH.

    Returns:
        ParserSettings: Settings from the environment, or the defaults if
        the variable is unset or invalid.

    Examples:
        >>> import os
        >>> os.environ["SNBTKIT_MAX_DEPTH"] = "32"
        >>> get_parser_settings().max_depth
        32
    """
    raw = os.environ.get(MAX_DEPTH_ENV_VAR, "").strip()
    if not raw:
        return ParserSettings()

    try:
        return ParserSettings(max_depth=int(raw))
    except ValueError:
        logger.warning(
            "Invalid %s value '%s'. Expected an integer between 1 and %d. "
            "Defaulting to %d.",
            MAX_DEPTH_ENV_VAR,
            raw,
            MAX_SUPPORTED_DEPTH,
            DEFAULT_MAX_DEPTH,
        )
        return ParserSettings()
