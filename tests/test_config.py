"""Tests for configuration file support."""

import sys
import warnings

import pytest

from motordef_tools.config import (
    Config,
    ConfigError,
    ConversionConfig,
    DisplayConfig,
    UnitsConfig,
    _find_project_config,
    _load_toml_file,
    generate_template,
    get_config_paths,
)
from motordef_tools.exceptions import ConfigurationError
from motordef_tools.schema.motor import UnitSettings


@pytest.fixture
def no_user_config(tmp_path, monkeypatch):
    """Point the user config at a file that does not exist."""
    monkeypatch.setattr("motordef_tools.config.USER_CONFIG_PATH", tmp_path / "no-exist.toml")


class TestConfigDataclasses:
    """Test configuration dataclass defaults."""

    def test_units_config_defaults(self):
        """UnitsConfig has SI defaults."""
        config = UnitsConfig()
        assert config.torque == "Nm"
        assert config.speed == "rpm"
        assert config.power == "W"
        assert config.weight == "kg"
        assert config.response_time == "ms"
        assert config.temperature == "C"

    def test_conversion_config_defaults(self):
        """ConversionConfig defaults to stored mode."""
        config = ConversionConfig()
        assert config.convert_stored_data is True
        assert config.precision_threshold == 1e-10

    def test_display_config_defaults(self):
        """DisplayConfig uses two decimal places."""
        assert DisplayConfig().decimal_places == 2

    def test_config_defaults(self):
        """Config has correct nested defaults."""
        config = Config()
        assert isinstance(config.units, UnitsConfig)
        assert isinstance(config.conversion, ConversionConfig)
        assert isinstance(config.display, DisplayConfig)

    def test_default_units_matches_unit_settings(self):
        """Default config yields the default unit preferences."""
        assert Config().default_units() == UnitSettings()


class TestConfigDiscovery:
    """Test config file discovery."""

    def test_find_project_config_in_current_dir(self, tmp_path):
        """Find config in current directory."""
        config_file = tmp_path / ".motordef-tools.toml"
        config_file.write_text("[units]\ntorque = 'lbf-in'\n")

        result = _find_project_config(tmp_path)
        assert result == config_file

    def test_find_project_config_alternate_name(self, tmp_path):
        """Find config with alternate filename."""
        config_file = tmp_path / "motordef-tools.toml"
        config_file.write_text("[units]\ntorque = 'lbf-in'\n")

        result = _find_project_config(tmp_path)
        assert result == config_file

    def test_find_project_config_prefers_hidden(self, tmp_path):
        """Hidden .motordef-tools.toml is preferred over motordef-tools.toml."""
        (tmp_path / "motordef-tools.toml").write_text("[units]\ntorque = 'oz-in'\n")
        hidden = tmp_path / ".motordef-tools.toml"
        hidden.write_text("[units]\ntorque = 'lbf-in'\n")

        result = _find_project_config(tmp_path)
        assert result == hidden

    def test_find_project_config_walks_up(self, tmp_path):
        """Find config by walking up directory tree."""
        parent_config = tmp_path / ".motordef-tools.toml"
        parent_config.write_text("[units]\n")

        subdir = tmp_path / "motors" / "acme"
        subdir.mkdir(parents=True)

        result = _find_project_config(subdir)
        assert result == parent_config

    def test_find_project_config_stops_at_git(self, tmp_path):
        """Stop searching at .git directory (don't go above it)."""
        parent = tmp_path / "parent"
        parent.mkdir()
        project = parent / "project"
        project.mkdir()
        (project / ".git").mkdir()

        # Config above .git must not be found
        (parent / ".motordef-tools.toml").write_text("[units]\n")

        result = _find_project_config(project)
        assert result is None

    def test_find_project_config_not_found(self, tmp_path):
        """Return None when no config found."""
        (tmp_path / ".git").mkdir()
        result = _find_project_config(tmp_path)
        assert result is None


class TestLoadToml:
    """Test TOML file loading."""

    def test_load_valid_toml(self, tmp_path):
        """Load valid TOML file."""
        config_file = tmp_path / "config.toml"
        config_file.write_text(
            """
[units]
torque = "lbf-in"

[display]
decimal_places = 3
"""
        )

        result = _load_toml_file(config_file)
        assert result["units"]["torque"] == "lbf-in"
        assert result["display"]["decimal_places"] == 3

    def test_load_invalid_toml(self, tmp_path):
        """Raise ConfigError on invalid TOML."""
        config_file = tmp_path / "config.toml"
        config_file.write_text("invalid [ toml syntax")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            _load_toml_file(config_file)

    def test_load_missing_file(self, tmp_path):
        """Raise ConfigError on missing file."""
        with pytest.raises(ConfigError, match="Cannot read"):
            _load_toml_file(tmp_path / "nonexistent.toml")


class TestConfigLoad:
    """Test Config.load() method."""

    def test_load_defaults_only(self, tmp_path, no_user_config):
        """Load returns defaults when no config files exist."""
        (tmp_path / ".git").mkdir()

        config = Config.load(tmp_path)
        assert config.units.torque == "Nm"
        assert config.conversion.convert_stored_data is True
        assert config.display.decimal_places == 2

    def test_load_project_config(self, tmp_path, no_user_config):
        """Load project config."""
        (tmp_path / ".git").mkdir()
        (tmp_path / ".motordef-tools.toml").write_text(
            """
[units]
torque = "lbf-in"
power = "hp"

[conversion]
convert_stored_data = false
precision_threshold = 1e-8
"""
        )

        config = Config.load(tmp_path)
        assert config.units.torque == "lbf-in"
        assert config.units.power == "hp"
        assert config.conversion.convert_stored_data is False
        assert config.conversion.precision_threshold == 1e-8

    def test_integer_threshold_becomes_float(self, tmp_path, no_user_config):
        """precision_threshold = 0 is read as a float."""
        (tmp_path / ".git").mkdir()
        (tmp_path / ".motordef-tools.toml").write_text("[conversion]\nprecision_threshold = 0\n")

        config = Config.load(tmp_path)
        assert config.conversion.precision_threshold == 0.0
        assert isinstance(config.conversion.precision_threshold, float)

    def test_project_overrides_user(self, tmp_path, monkeypatch):
        """Project config overrides user config."""
        (tmp_path / ".git").mkdir()

        user_config = tmp_path / "user-config.toml"
        user_config.write_text('[units]\ntorque = "oz-in"\nweight = "lbs"\n')

        project_config = tmp_path / ".motordef-tools.toml"
        project_config.write_text('[units]\ntorque = "lbf-ft"\n')

        monkeypatch.setattr("motordef_tools.config.USER_CONFIG_PATH", user_config)

        config = Config.load(tmp_path)
        # Project overrides user
        assert config.units.torque == "lbf-ft"
        # User value preserved when not in project
        assert config.units.weight == "lbs"

    def test_get_source_tracking(self, tmp_path, monkeypatch):
        """Track source of each config value."""
        (tmp_path / ".git").mkdir()

        user_config = tmp_path / "user-config.toml"
        user_config.write_text('[units]\ntorque = "oz-in"\n')

        project_config = tmp_path / ".motordef-tools.toml"
        project_config.write_text("[display]\ndecimal_places = 4\n")

        monkeypatch.setattr("motordef_tools.config.USER_CONFIG_PATH", user_config)

        config = Config.load(tmp_path)

        assert "user-config.toml" in config.get_source("units.torque")
        assert ".motordef-tools.toml" in config.get_source("display.decimal_places")
        assert config.get_source("conversion.convert_stored_data") == "default"

    def test_default_units_from_file(self, tmp_path, no_user_config):
        """default_units reflects the [units] section."""
        (tmp_path / ".git").mkdir()
        (tmp_path / ".motordef-tools.toml").write_text('[units]\nresponse_time = "s"\n')

        units = Config.load(tmp_path).default_units()
        assert units.response_time == "s"
        assert units.torque == "Nm"


class TestConfigValidate:
    """Test Config.validate()."""

    def test_defaults_are_valid(self):
        """The default configuration validates."""
        Config().validate()

    def test_unknown_unit(self):
        """Unknown labels are rejected."""
        config = Config()
        config.units.torque = "N-m"
        with pytest.raises(ConfigurationError, match="torque"):
            config.validate()

    def test_wrong_domain_unit(self):
        """A label from another domain is rejected."""
        config = Config()
        config.units.power = "Nm"
        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()
        assert exc_info.value.context["available"] == ["W", "kW", "hp"]

    def test_negative_decimal_places(self):
        """Negative decimal places are rejected."""
        config = Config()
        config.display.decimal_places = -1
        with pytest.raises(ConfigurationError):
            config.validate()

    def test_negative_threshold(self):
        """Negative thresholds are rejected."""
        config = Config()
        config.conversion.precision_threshold = -1.0
        with pytest.raises(ConfigurationError):
            config.validate()


class TestConfigWarnings:
    """Test warnings for unknown config keys."""

    def test_warn_unknown_section(self, tmp_path, no_user_config):
        """Warn on unknown top-level section."""
        (tmp_path / ".git").mkdir()
        (tmp_path / ".motordef-tools.toml").write_text('[unknown_section]\nkey = "value"\n')

        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always")
            Config.load(tmp_path)

            assert len(w) == 1
            assert "unknown_section" in str(w[0].message)

    def test_warn_unknown_key_in_section(self, tmp_path, no_user_config):
        """Warn on unknown key within known section."""
        (tmp_path / ".git").mkdir()
        (tmp_path / ".motordef-tools.toml").write_text('[units]\nlength = "mm"\n')

        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always")
            Config.load(tmp_path)

            assert len(w) == 1
            assert "units.length" in str(w[0].message)


class TestGenerateTemplate:
    """Test template generation."""

    def test_generate_template_valid_toml(self):
        """Generated template is valid TOML."""
        if sys.version_info >= (3, 11):
            import tomllib
        else:
            import tomli as tomllib

        result = tomllib.loads(generate_template())
        assert isinstance(result, dict)

    def test_generate_template_has_sections(self):
        """Template has all configuration sections."""
        template = generate_template()
        assert "[units]" in template
        assert "[conversion]" in template
        assert "[display]" in template

    def test_generate_template_documents_options(self):
        """Template documents every option."""
        template = generate_template()
        assert "torque_constant" in template
        assert "convert_stored_data" in template
        assert "precision_threshold" in template
        assert "decimal_places" in template


class TestGetConfigPaths:
    """Test get_config_paths function."""

    def test_returns_none_for_missing_files(self, tmp_path, monkeypatch, no_user_config):
        """Returns None for missing config files."""
        (tmp_path / ".git").mkdir()
        monkeypatch.chdir(tmp_path)

        paths = get_config_paths()
        assert paths["user"] is None
        assert paths["project"] is None

    def test_returns_paths_for_existing_files(self, tmp_path, monkeypatch):
        """Returns paths for existing config files."""
        (tmp_path / ".git").mkdir()
        project_config = tmp_path / ".motordef-tools.toml"
        project_config.write_text("[units]\n")

        user_config = tmp_path / "user.toml"
        user_config.write_text("[units]\n")

        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("motordef_tools.config.USER_CONFIG_PATH", user_config)

        paths = get_config_paths()
        assert paths["user"] == user_config
        assert paths["project"] == project_config
