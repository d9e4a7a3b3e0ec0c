"""
lexgen Configuration
====================

Scanner configuration management. Configuration can come from:
- Default values (defined here)
- Environment variables
- Explicit construction by the caller (or the CLI)

Settings
--------
- first_line: number given to the first line of a source (default 1)
- ignore_case: compile every rule with re.IGNORECASE
- multiline: compile every rule with re.MULTILINE ("^"/"$" per line)
- filename: name reported in token locations and error messages
"""

from dataclasses import dataclass
from typing import Optional
import logging
import os
import re

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def _parse_bool(value: str) -> Optional[bool]:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None


@dataclass
class ScannerConfig:
    """
    Configuration shared by the rule compiler and the scanner.

    Attributes:
        first_line: Line number of the first source line (default: 1)
        ignore_case: Match all rules case-insensitively (default: False)
        multiline: Let "^" and "$" match at line boundaries (default: False)
        filename: Source name used in locations (default: "<input>")
    """

    first_line: int = 1
    ignore_case: bool = False
    multiline: bool = False
    filename: str = "<input>"

    @property
    def regex_flags(self) -> int:
        """The re module flags implied by this configuration."""
        flags = 0
        if self.ignore_case:
            flags |= re.IGNORECASE
        if self.multiline:
            flags |= re.MULTILINE
        return flags

    @classmethod
    def from_env(cls) -> "ScannerConfig":
        """
        Create a ScannerConfig from environment variables.

        Environment variables (all optional):
            LEXGEN_FIRST_LINE: Number of the first line (integer)
            LEXGEN_IGNORE_CASE: Case-insensitive matching (1/0, true/false)
            LEXGEN_MULTILINE: Multiline anchors (1/0, true/false)

        Invalid values are logged and ignored.
        """
        config = cls()

        if first_line := os.environ.get("LEXGEN_FIRST_LINE"):
            try:
                config.first_line = int(first_line)
            except ValueError:
                logger.warning(f"Ignoring invalid LEXGEN_FIRST_LINE={first_line!r}")

        if ignore_case := os.environ.get("LEXGEN_IGNORE_CASE"):
            parsed = _parse_bool(ignore_case)
            if parsed is None:
                logger.warning(f"Ignoring invalid LEXGEN_IGNORE_CASE={ignore_case!r}")
            else:
                config.ignore_case = parsed

        if multiline := os.environ.get("LEXGEN_MULTILINE"):
            parsed = _parse_bool(multiline)
            if parsed is None:
                logger.warning(f"Ignoring invalid LEXGEN_MULTILINE={multiline!r}")
            else:
                config.multiline = parsed

        return config


# =============================================================================
# Default Configuration Instance
# =============================================================================

_default_config: Optional[ScannerConfig] = None


def get_default_config() -> ScannerConfig:
    """
    Get the default configuration.

    Created from environment variables on first access. Can be replaced
    with set_default_config().
    """
    global _default_config
    if _default_config is None:
        _default_config = ScannerConfig.from_env()
    return _default_config


def set_default_config(config: Optional[ScannerConfig]) -> None:
    """
    Set the default configuration.

    Passing None discards the current default so the next call to
    get_default_config() re-reads the environment.
    """
    global _default_config
    _default_config = config
