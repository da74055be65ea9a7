"""
Config command for motordef-tools CLI.

Provides commands to view, initialize, and manage configuration.

Usage:
    mdt config --show          Show effective configuration with sources
    mdt config --init          Create template config file
    mdt config --paths         Show config file locations
    mdt config get <key>       Get a specific config value
"""

import argparse
import sys
from pathlib import Path

from motordef_tools.config import (
    CONFIG_FILENAMES,
    KNOWN_KEYS,
    USER_CONFIG_PATH,
    Config,
    ConfigError,
    generate_template,
    get_config_paths,
)
from motordef_tools.exceptions import ConfigurationError
from motordef_tools.schema.motor import UNIT_SETTING_FIELDS


def main(argv: list[str] | None = None) -> int:
    """Main entry point for config command."""
    parser = argparse.ArgumentParser(
        prog="mdt config",
        description="Manage motordef-tools configuration",
    )

    # Mutually exclusive main actions
    action_group = parser.add_mutually_exclusive_group()
    action_group.add_argument(
        "--show",
        action="store_true",
        help="Show effective configuration with sources",
    )
    action_group.add_argument(
        "--init",
        action="store_true",
        help="Create template config file in current directory",
    )
    action_group.add_argument(
        "--paths",
        action="store_true",
        help="Show config file paths",
    )

    parser.add_argument(
        "action",
        nargs="?",
        choices=["get"],
        help="Config action",
    )
    parser.add_argument(
        "key",
        nargs="?",
        help="Config key (e.g., units.torque)",
    )
    parser.add_argument(
        "--user",
        action="store_true",
        help="Use user config (~/.config/motordef-tools/config.toml) for --init",
    )

    args = parser.parse_args(argv)

    try:
        if args.init:
            return _init_config(args.user)
        elif args.paths:
            return _show_paths()
        elif args.action == "get":
            if not args.key:
                print("Error: 'get' requires a key argument", file=sys.stderr)
                return 1
            return _get_config(args.key)
        else:
            # Default to showing config
            return _show_config()

    except (ConfigError, ConfigurationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _show_config() -> int:
    """Show effective configuration with sources."""
    config = Config.load()
    config.validate()

    print("# Effective motordef-tools configuration")
    print()

    print("[units]")
    for attr, _, _ in UNIT_SETTING_FIELDS:
        _print_value(attr, getattr(config.units, attr), config.get_source(f"units.{attr}"))
    print()

    print("[conversion]")
    _print_value(
        "convert_stored_data",
        config.conversion.convert_stored_data,
        config.get_source("conversion.convert_stored_data"),
    )
    _print_value(
        "precision_threshold",
        config.conversion.precision_threshold,
        config.get_source("conversion.precision_threshold"),
    )
    print()

    print("[display]")
    _print_value(
        "decimal_places",
        config.display.decimal_places,
        config.get_source("display.decimal_places"),
    )

    return 0


def _print_value(key: str, value, source: str) -> None:
    """Print a config value with its source."""
    if isinstance(value, str):
        formatted = f'"{value}"'
    elif isinstance(value, bool):
        formatted = "true" if value else "false"
    elif value is None:
        formatted = "# not set"
    else:
        formatted = str(value)

    if source != "default":
        # Show just filename for brevity
        source_display = Path(source).name
    else:
        source_display = source

    print(f"{key} = {formatted}  # from: {source_display}")


def _show_paths() -> int:
    """Show config file paths."""
    paths = get_config_paths()

    print("Config file paths:")
    print()

    print(f"User config: {USER_CONFIG_PATH}")
    if paths["user"]:
        print("  Status: exists")
    else:
        print("  Status: not found")
    print()

    print(f"Project config search: {', '.join(CONFIG_FILENAMES)}")
    if paths["project"]:
        print(f"  Found: {paths['project']}")
    else:
        print("  Status: not found")

    return 0


def _init_config(user: bool = False) -> int:
    """Create a template config file."""
    if user:
        target = USER_CONFIG_PATH
        target.parent.mkdir(parents=True, exist_ok=True)
    else:
        target = Path.cwd() / CONFIG_FILENAMES[0]  # .motordef-tools.toml

    if target.exists():
        print(f"Error: Config file already exists: {target}", file=sys.stderr)
        print("Remove it first or edit manually.", file=sys.stderr)
        return 1

    try:
        target.write_text(generate_template())
        print(f"Created config template: {target}")
        print()
        print("Edit the file to customize your settings.")
        print("Uncomment and modify values as needed.")
        return 0
    except OSError as e:
        print(f"Error writing config file: {e}", file=sys.stderr)
        return 1


def _get_config(key: str) -> int:
    """Get a specific config value."""
    config = Config.load()

    parts = key.split(".")
    if len(parts) != 2:
        print(f"Error: Invalid key format '{key}'. Use 'section.key' format.", file=sys.stderr)
        return 1

    section, attr = parts

    if section not in KNOWN_KEYS:
        print(f"Error: Unknown config section '{section}'", file=sys.stderr)
        return 1

    if attr not in KNOWN_KEYS[section]:
        print(f"Error: Unknown key '{attr}' in section '{section}'", file=sys.stderr)
        return 1

    value = getattr(getattr(config, section), attr)
    source = config.get_source(key)

    if isinstance(value, bool):
        print("true" if value else "false")
    else:
        print(value)

    if source != "default":
        print(f"# source: {source}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
