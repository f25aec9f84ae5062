# =============================================================================
# Configuration Management
# =============================================================================
# Handles loading, saving, and validating mailcompat configuration.
#
# XDG Base Directory Compliance (https://specifications.freedesktop.org/basedir-spec/):
#   - Config:  $XDG_CONFIG_HOME/mailcompat/  (default: ~/.config/mailcompat/)
#
# Files:
#   - config.toml: User defaults for the command line (framework, engines,
#                  report format, input size ceiling)
#
# The library functions never read this file. Only the command line does,
# and it passes the values in explicitly.
# =============================================================================

import os
import tomllib  # Built into Python 3.11+
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w  # For writing TOML (tomllib is read-only)

from mailcompat.core.document import MAX_HTML_BYTES
from mailcompat.core.engines import get_engine
from mailcompat.core.models import Framework


# =============================================================================
# XDG Directory Management
# =============================================================================

# Application identifier used in XDG paths
APP_NAME = "mailcompat"

REPORT_FORMATS = ("text", "json")


def get_xdg_config_home() -> Path:
    """
    Returns the XDG config directory for mailcompat.

    Respects $XDG_CONFIG_HOME if set, otherwise uses ~/.config/mailcompat/
    """
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        base = Path(xdg_config)
    else:
        base = Path.home() / ".config"
    return base / APP_NAME


# =============================================================================
# Configuration Data Structures
# =============================================================================

@dataclass
class AnalysisConfig:
    """
    What to analyze and how.

    Attributes:
        framework: Authoring framework ("jsx", "mjml", "maizzle"),
                   or "" for plain HTML.
        engines: Engine ids to report on. Empty means the whole catalog.
        max_html_bytes: Input size ceiling in bytes.
    """
    framework: str = ""
    engines: list[str] = field(default_factory=list)
    max_html_bytes: int = MAX_HTML_BYTES

    def framework_enum(self) -> Framework | None:
        """
        The configured framework as a Framework, or None for plain HTML.

        Raises:
            ConfigError: If the framework name is not recognised.
        """
        try:
            return Framework.coerce(self.framework)
        except ValueError as e:
            raise ConfigError(f"Invalid analysis.framework: {e}") from e


@dataclass
class ReportConfig:
    """
    How results are printed.

    Attributes:
        format: "text" for a human-readable report, "json" for tooling.
        show_fixes: Include before/after code fixes in text reports.
    """
    format: str = "text"            # "text" or "json"
    show_fixes: bool = False


@dataclass
class Config:
    """
    Main configuration container for mailcompat.

    Attributes:
        analysis: Analysis defaults.
        report: Report output settings.

    Usage:
        >>> config = Config.load()
        >>> config.report.format
        'text'
    """
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    report: ReportConfig = field(default_factory=ReportConfig)

    # -------------------------------------------------------------------------
    # File Paths
    # -------------------------------------------------------------------------

    @staticmethod
    def config_file_path() -> Path:
        """Returns the path to the main config file."""
        return get_xdg_config_home() / "config.toml"

    # -------------------------------------------------------------------------
    # Loading and Saving
    # -------------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """
        Load configuration from a config file.

        If the file doesn't exist, returns default configuration.

        Args:
            path: Config file to read (default: the XDG location).

        Returns:
            Loaded Config object.

        Raises:
            ConfigError: If the config file exists but is invalid.
        """
        config_path = path or cls.config_file_path()

        if not config_path.exists():
            # No config file yet - return defaults
            return cls()

        # Load and parse the TOML file
        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid config file {config_path}: {e}") from e

        config = cls._from_dict(data)
        config.validate()
        return config

    def save(self, path: Path | None = None) -> None:
        """
        Save configuration to a config file.

        Creates the parent directory if it doesn't exist.
        """
        config_path = path or self.config_file_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "wb") as f:
            tomli_w.dump(self._to_dict(), f)

    def validate(self) -> None:
        """
        Check values that TOML typing alone can't.

        Raises:
            ConfigError: On the first invalid value found.
        """
        self.analysis.framework_enum()

        for engine_id in self.analysis.engines:
            if get_engine(engine_id) is None:
                raise ConfigError(f"Unknown engine in analysis.engines: {engine_id!r}")

        if not isinstance(self.analysis.max_html_bytes, int) or self.analysis.max_html_bytes <= 0:
            raise ConfigError("analysis.max_html_bytes must be a positive integer")

        if self.report.format not in REPORT_FORMATS:
            raise ConfigError(
                f"report.format must be one of {', '.join(REPORT_FORMATS)}, "
                f"not {self.report.format!r}"
            )

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "Config":
        """
        Create a Config object from a dictionary (parsed TOML).
        """
        config = cls()

        # Analysis settings
        analysis = data.get("analysis", {})
        config.analysis = AnalysisConfig(
            framework=analysis.get("framework", ""),
            engines=list(analysis.get("engines", [])),
            max_html_bytes=analysis.get("max_html_bytes", MAX_HTML_BYTES),
        )

        # Report settings
        report = data.get("report", {})
        config.report = ReportConfig(
            format=report.get("format", "text"),
            show_fixes=report.get("show_fixes", False),
        )

        return config

    def _to_dict(self) -> dict[str, Any]:
        """
        Convert Config to a dictionary for TOML serialization.
        """
        return {
            "analysis": {
                "framework": self.analysis.framework,
                "engines": list(self.analysis.engines),
                "max_html_bytes": self.analysis.max_html_bytes,
            },
            "report": {
                "format": self.report.format,
                "show_fixes": self.report.show_fixes,
            },
        }


# =============================================================================
# Exceptions
# =============================================================================

class ConfigError(Exception):
    """Raised when there's an error loading or parsing configuration."""
    pass


# =============================================================================
# Utility Functions
# =============================================================================

def print_paths() -> None:
    """
    Print the configuration paths.
    Useful for users wondering where their config is read from.
    """
    print(f"Config:       {get_xdg_config_home()}")
    print(f"Config file:  {Config.config_file_path()}")
