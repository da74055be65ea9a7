"""
Configuration file support for motordef-tools.

Provides hierarchical configuration loading from:
1. Project config: .motordef-tools.toml or motordef-tools.toml in project root
2. User config: ~/.config/motordef-tools/config.toml

CLI arguments override config file values, and project config overrides user config.
"""

import sys
import warnings
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from motordef_tools.exceptions import ConfigurationError
from motordef_tools.precision import DEFAULT_THRESHOLD
from motordef_tools.schema.motor import UNIT_SETTING_FIELDS, UnitSettings
from motordef_tools.units import supported_units

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

# Config file names to search for in project directories
CONFIG_FILENAMES = [".motordef-tools.toml", "motordef-tools.toml"]

# User-level config path
USER_CONFIG_PATH = Path.home() / ".config" / "motordef-tools" / "config.toml"

# All known config keys for validation
KNOWN_KEYS = {
    "units": {attr for attr, _, _ in UNIT_SETTING_FIELDS},
    "conversion": {"convert_stored_data", "precision_threshold"},
    "display": {"decimal_places"},
}


@dataclass
class UnitsConfig:
    """Default unit preference for new documents."""

    torque: str = "Nm"
    speed: str = "rpm"
    power: str = "W"
    weight: str = "kg"
    voltage: str = "V"
    current: str = "A"
    inertia: str = "kg-m^2"
    torque_constant: str = "Nm/A"
    backlash: str = "arcmin"
    response_time: str = "ms"
    percentage: str = "%"
    temperature: str = "C"


@dataclass
class ConversionConfig:
    """Unit conversion policy."""

    convert_stored_data: bool = True
    precision_threshold: float = DEFAULT_THRESHOLD


@dataclass
class DisplayConfig:
    """Display formatting options."""

    decimal_places: int = 2


@dataclass
class Config:
    """Merged configuration from all sources."""

    units: UnitsConfig = field(default_factory=UnitsConfig)
    conversion: ConversionConfig = field(default_factory=ConversionConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    # Track which file each setting came from (for --show)
    _sources: dict = field(default_factory=dict, repr=False)

    @classmethod
    def load(cls, start_dir: Path | None = None) -> "Config":
        """
        Load configuration with precedence: project > user > defaults.

        Args:
            start_dir: Directory to start searching from (default: current directory)

        Returns:
            Merged configuration object
        """
        if start_dir is None:
            start_dir = Path.cwd()

        config = cls()
        sources: dict[str, str] = {}

        # Load user config first (lower precedence)
        if USER_CONFIG_PATH.exists():
            user_data = _load_toml_file(USER_CONFIG_PATH)
            if user_data:
                _merge_config(config, user_data, str(USER_CONFIG_PATH), sources)

        # Load project config (higher precedence)
        project_config = _find_project_config(start_dir)
        if project_config:
            project_data = _load_toml_file(project_config)
            if project_data:
                _merge_config(config, project_data, str(project_config), sources)

        config._sources = sources
        return config

    def get_source(self, key: str) -> str:
        """Get the source file for a config key."""
        return self._sources.get(key, "default")

    def default_units(self) -> UnitSettings:
        """Unit preference record built from the [units] section."""
        return UnitSettings(**{f.name: getattr(self.units, f.name) for f in fields(UnitsConfig)})

    def validate(self) -> None:
        """
        Check values that TOML types alone cannot guarantee.

        Raises:
            ConfigurationError: On an unknown or wrong-domain unit label,
                a negative decimal place count, or a negative threshold
        """
        for attr, _, domain in UNIT_SETTING_FIELDS:
            label = getattr(self.units, attr)
            available = list(supported_units(domain))
            if label not in available:
                raise ConfigurationError(
                    f"Invalid default {attr} unit",
                    context={
                        f"units.{attr}": label,
                        "available": available,
                        "source": self.get_source(f"units.{attr}"),
                    },
                    suggestions=[f"Use one of the available {domain.value} units"],
                )

        if self.display.decimal_places < 0:
            raise ConfigurationError(
                "display.decimal_places must be non-negative",
                context={"display.decimal_places": self.display.decimal_places},
            )

        if self.conversion.precision_threshold < 0:
            raise ConfigurationError(
                "conversion.precision_threshold must not be negative",
                context={"conversion.precision_threshold": self.conversion.precision_threshold},
                suggestions=["Use 0 to disable precision correction"],
            )


class ConfigError(Exception):
    """Configuration-related errors."""

    pass


def _find_project_config(start_dir: Path) -> Path | None:
    """
    Find project config by walking up the directory tree.

    Stops at .git directory or filesystem root.

    Args:
        start_dir: Directory to start searching from

    Returns:
        Path to config file if found, None otherwise
    """
    current = start_dir.resolve()

    while True:
        # Check for config files in current directory
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        # Stop at .git directory (project root)
        if (current / ".git").exists():
            break

        # Stop at filesystem root
        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def _load_toml_file(path: Path) -> dict[str, Any] | None:
    """
    Load a TOML file safely.

    Args:
        path: Path to TOML file

    Returns:
        Parsed TOML data or None on error

    Raises:
        ConfigError: If TOML is invalid
    """
    if tomllib is None:
        warnings.warn(
            "tomli package not installed. Config file support requires 'pip install tomli' for Python < 3.11.",
            stacklevel=2,
        )
        return None

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e


def _merge_config(
    config: Config, data: dict[str, Any], source: str, sources: dict[str, str]
) -> None:
    """
    Merge loaded config data into Config object.

    Args:
        config: Config object to update
        data: Raw config data from TOML
        source: Source file path (for tracking)
        sources: Dict to update with source info
    """
    # Warn about unknown top-level keys
    for key in data:
        if key not in KNOWN_KEYS:
            warnings.warn(f"Unknown config key '{key}' in {source}", stacklevel=3)

    # Merge units section
    if "units" in data:
        units_data = data["units"]
        _warn_unknown_keys(units_data, KNOWN_KEYS["units"], "units", source)

        for attr, _, _ in UNIT_SETTING_FIELDS:
            if attr in units_data:
                setattr(config.units, attr, units_data[attr])
                sources[f"units.{attr}"] = source

    # Merge conversion section
    if "conversion" in data:
        conversion_data = data["conversion"]
        _warn_unknown_keys(conversion_data, KNOWN_KEYS["conversion"], "conversion", source)

        if "convert_stored_data" in conversion_data:
            config.conversion.convert_stored_data = conversion_data["convert_stored_data"]
            sources["conversion.convert_stored_data"] = source
        if "precision_threshold" in conversion_data:
            config.conversion.precision_threshold = float(conversion_data["precision_threshold"])
            sources["conversion.precision_threshold"] = source

    # Merge display section
    if "display" in data:
        display_data = data["display"]
        _warn_unknown_keys(display_data, KNOWN_KEYS["display"], "display", source)

        if "decimal_places" in display_data:
            config.display.decimal_places = display_data["decimal_places"]
            sources["display.decimal_places"] = source


def _warn_unknown_keys(data: dict[str, Any], known: set[str], section: str, source: str) -> None:
    """Warn about unknown keys in a config section."""
    for key in data:
        if key not in known:
            warnings.warn(f"Unknown config key '{section}.{key}' in {source}", stacklevel=4)


def generate_template() -> str:
    """
    Generate a template config file with all options documented.

    Returns:
        Template TOML string
    """
    return """# motordef-tools configuration file
# Place as .motordef-tools.toml in project root or ~/.config/motordef-tools/config.toml for user defaults

[units]
# Default unit labels for new motor definitions
# torque = "Nm"            # Nm, lbf-ft, lbf-in, oz-in
# speed = "rpm"
# power = "W"              # W, kW, hp
# weight = "kg"            # kg, g, lbs, oz
# voltage = "V"            # V, kV
# current = "A"            # A, mA
# inertia = "kg-m^2"       # kg-m^2, g-cm^2
# torque_constant = "Nm/A"
# backlash = "arcmin"      # arcmin, arcsec
# response_time = "ms"     # ms, s
# percentage = "%"
# temperature = "C"        # C, F, K

[conversion]
# Rewrite stored values when a unit preference changes (false: convert for display only)
# convert_stored_data = true

# Largest difference treated as floating-point noise after a conversion (0 disables)
# precision_threshold = 1e-10

[display]
# Decimal places used when formatting values with their unit
# decimal_places = 2
"""


def get_config_paths() -> dict[str, Path | None]:
    """
    Get paths to config files that would be loaded.

    Returns:
        Dict with 'user' and 'project' keys
    """
    project_config = _find_project_config(Path.cwd())

    return {
        "user": USER_CONFIG_PATH if USER_CONFIG_PATH.exists() else None,
        "project": project_config,
    }
