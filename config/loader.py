"""Configuration file loader and validator.

Handles reading, formatting, and validating settings from the INI configuration file.
Raises exceptions for any issues encountered during loading.
"""

from __future__ import annotations

import ast
import configparser
from configparser import ConfigParser
from dataclasses import fields
from pathlib import Path
from typing import TYPE_CHECKING, Any

from models.config_models import Config
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable
    from dataclasses import Field as DataclassField
else:
    from dataclasses import Field as DataclassField

__all__: list[str] = [
    "ALLOWED_TRANSLATION_ENGINES",
    "SAME_LANGUAGE_POLICIES",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "ConfigLoader",
    "ConfigTypeError",
    "ConfigValueError",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

ALLOWED_TRANSLATION_ENGINES: list[str] = ["libretranslate", "mymemory", "deepl", "google_cloud"]

SAME_LANGUAGE_POLICIES: tuple[str, ...] = ("skip", "relay_original")

# (section, key) pairs that must hold a strictly positive number
_POSITIVE_SETTINGS: tuple[tuple[str, str], ...] = (
    ("BOT", "FETCH_TIMEOUT"),
    ("TRANSLATION", "TIMEOUT"),
    ("CACHE", "TTL"),
    ("CACHE", "MAX_ENTRIES"),
    ("RATE_LIMIT", "MAX_TRACKED_KEYS"),
    ("RATE_LIMIT", "BURST_MAX"),
    ("RATE_LIMIT", "BURST_WINDOW"),
    ("LOOP_GUARD", "TTL"),
    ("LOOP_GUARD", "REACTION_TTL"),
    ("LOOP_GUARD", "SWEEP_INTERVAL"),
    ("STORAGE", "WRITE_TIMEOUT"),
)


class ConfigLoaderError(Exception):
    """An error occurred while processing the configuration file."""


class ConfigFileNotFoundError(ConfigLoaderError):
    """The specified configuration file does not exist."""


class ConfigFormatError(ConfigLoaderError):
    """The configuration file is not formatted correctly."""


class ConfigValueError(ConfigFormatError):
    """The configuration file contains an invalid value."""


class ConfigTypeError(ConfigFormatError):
    """The configuration file contains an invalid type."""


class ConfigLoader:
    """Handles loading and validation of configuration settings.

    This class reads the configuration file, applies formatting rules, and validates settings.
    It raises exceptions for any issues encountered during the loading process.

    Args:
        config_filename (str): INI file name to load.
        script_name (str): Executing script name, used in error messaging.
        **args: Command-line overrides ('debug', 'db_path').

    Raises:
        ConfigFileNotFoundError: If the configuration file does not exist.
        ConfigFormatError: If the file cannot be parsed or contains invalid values/types.
    """

    def __init__(
        self,
        *,
        config_filename: str,
        script_name: str,
        **args,
    ) -> None:
        config_path = Path(config_filename)
        msg: str
        if not config_path.exists():
            msg = (
                f"Configuration file '{config_filename}' not found. "
                f"Please create '{config_filename}' in the same directory as '{script_name}'."
            )
            raise ConfigFileNotFoundError(msg)

        parser: ConfigParser = ConfigParser()

        try:
            parser.read(config_filename, encoding="utf-8")
        except configparser.Error as err:
            msg = f"Failed to parse configuration file '{config_filename}': {err}"
            raise ConfigFormatError(msg) from None

        self.config = Config()
        self._convert_settings(parser)
        # Apply command-line argument overrides
        if args.get("debug", False):
            self.config.GENERAL.DEBUG = True
        if args.get("db_path") is not None:
            self.config.STORAGE.DB_PATH = args["db_path"]
        self._validate_settings()

    def _convert_settings(self, parser: ConfigParser) -> None:
        """Convert configuration settings from the parser to the Config object.

        Args:
            parser (ConfigParser): Parsed INI data.

        Raises:
            ConfigFormatError: If a value cannot be parsed or coerced to the expected type.
        """
        formatter = _ConfigFormatter(self.config, parser)
        for section in fields(self.config):
            if not parser.has_section(section.name):
                logger.debug("Section '%s' not present, using defaults", section.name)
                continue
            self._convert_section_field(parser, formatter, section)

    def _convert_section_field(
        self, parser: ConfigParser, formatter: _ConfigFormatter, section: DataclassField[Any]
    ) -> None:
        """Convert all fields in a configuration section.

        Args:
            parser (ConfigParser): Parsed INI data.
            formatter (_ConfigFormatter): Formatter used to coerce string values to typed values.
            section (Field[Any]): Target configuration section dataclass field.

        Raises:
            ConfigFormatError: If a value fails to format correctly.
        """
        for key in fields(getattr(self.config, section.name)):
            try:
                parser[section.name][key.name]
            except KeyError:
                logger.debug("Skipping undefined setting: '%s.%s'", section.name, key.name)
                continue

            formatted_value = formatter.apply_format(section, key)
            setattr(getattr(self.config, section.name), key.name, formatted_value)

    def _validate_settings(self) -> None:
        """Validate translation engines, quality tiers, the same-language policy and durations.

        Raises:
            ConfigFormatError: If validation fails for any setting.
        """
        try:
            self._inspect_defined_item("TRANSLATION", "ENGINE", ALLOWED_TRANSLATION_ENGINES)
            self._validate_quality_tiers()
            self._validate_choice("TRANSLATION", "SAME_LANGUAGE_POLICY", SAME_LANGUAGE_POLICIES)
            for section_name, key_name in _POSITIVE_SETTINGS:
                self._validate_positive(section_name, key_name)
            self._validate_non_negative("RATE_LIMIT", "COOLDOWN")
            self._validate_non_negative("TRANSLATION", "RETRY_DELAY")
        except (NameError, SyntaxError, AttributeError, TypeError, ValueError) as err:
            msg: str = f"Invalid configuration value: {err}"
            raise ConfigFormatError(msg) from None

    def _inspect_defined_item(self, section_name: str, key_name: str, defined_list: list[str]) -> None:
        """Verify that configuration values match allowed options.

        Logs warnings for unrecognized values but does not raise exceptions.
        A single string is normalized to a one-element list.

        Args:
            section_name (str): Section name in the config model.
            key_name (str): Field name to inspect.
            defined_list (list[str]): Allowed values.

        Raises:
            ConfigTypeError: If the configured value is neither list nor str.
        """
        value: str | list[str] = getattr(getattr(self.config, section_name), key_name)
        field_name: str = f"{section_name}.{key_name}"

        if isinstance(value, (list, str)):
            values: list[str] = value if isinstance(value, list) else [value]
            for val in values:
                if val not in defined_list:
                    logger.warning("Unknown value '%s' is set for '%s'", val, field_name)
            setattr(getattr(self.config, section_name), key_name, values)
        else:
            msg: str = f"Unsupported type used for '{field_name}': {type(value)}"
            raise ConfigTypeError(msg)

    def _validate_quality_tiers(self) -> None:
        """Normalize QUALITY_TIERS to lowercase language tags per engine.

        Raises:
            ConfigTypeError: If the value is not a mapping of engine name to tag list.
        """
        tiers: Any = self.config.TRANSLATION.QUALITY_TIERS
        if not isinstance(tiers, dict):
            msg: str = f"Unsupported type used for 'TRANSLATION.QUALITY_TIERS': {type(tiers)}"
            raise ConfigTypeError(msg)

        normalized: dict[str, list[str]] = {}
        for engine, tags in tiers.items():
            if not isinstance(tags, (list, tuple)):
                msg = f"QUALITY_TIERS entry for '{engine}' must be a list of language tags"
                raise ConfigTypeError(msg)
            if engine not in ALLOWED_TRANSLATION_ENGINES:
                logger.warning("QUALITY_TIERS names unknown engine '%s'", engine)
            normalized[engine] = [StringUtils.normalize_language_tag(tag) for tag in tags]
        self.config.TRANSLATION.QUALITY_TIERS = normalized

    def _validate_choice(self, section_name: str, key_name: str, choices: tuple[str, ...]) -> None:
        """Ensure a string setting is one of the given choices.

        Raises:
            ConfigValueError: If the value is not one of the choices.
        """
        value: str = getattr(getattr(self.config, section_name), key_name)
        if value not in choices:
            msg: str = f"'{section_name}.{key_name}' must be one of {list(choices)}, got '{value}'"
            raise ConfigValueError(msg)

    def _validate_positive(self, section_name: str, key_name: str) -> None:
        value: float = getattr(getattr(self.config, section_name), key_name)
        if value <= 0:
            msg: str = f"'{section_name}.{key_name}' must be greater than zero, got {value}"
            raise ConfigValueError(msg)

    def _validate_non_negative(self, section_name: str, key_name: str) -> None:
        value: float = getattr(getattr(self.config, section_name), key_name)
        if value < 0:
            msg: str = f"'{section_name}.{key_name}' must not be negative, got {value}"
            raise ConfigValueError(msg)


class _ConfigFormatter:
    """Converts INI string values to typed Python objects (bool, int, float, list, dict)."""

    def __init__(self, config: Config, parser: ConfigParser) -> None:
        self.config: Config = config
        self.parser: ConfigParser = parser

    def apply_format(self, section: DataclassField[Any], key: DataclassField[Any]) -> Any:
        """Convert INI value to the expected Python type based on the Config field type.

        Strings are taken verbatim (surrounding quotes stripped). Other non-numeric
        values are parsed with ``ast.literal_eval``.

        Args:
            section (DataclassField[Any]): Configuration section field containing the key.
            key (DataclassField[Any]): Target field within the section.

        Returns:
            Any: Parsed value coerced to the type declared in the config dataclass.

        Raises:
            ConfigValueError: If a value cannot be coerced to the expected type.
            ConfigFormatError: If literal evaluation fails due to invalid syntax.
            ConfigTypeError: If an unexpected type is encountered during coercion.
        """
        formatters: dict[
            type[bool | int | float | str],
            Callable[[DataclassField[Any], DataclassField[Any]], bool | int | float | str],
        ] = {
            bool: self.parse_as_boolean,
            int: self.parse_as_integer,
            float: self.parse_as_float,
            str: self.parse_as_string,
        }

        formatter: Callable[[DataclassField[Any], DataclassField[Any]], bool | int | float | str] | None = (
            formatters.get(type(getattr(getattr(self.config, section.name), key.name)))
        )
        if formatter:
            try:
                return formatter(section, key)
            except ValueError as err:
                msg = f"Invalid value for {section.name}.{key.name}: {err}"
                raise ConfigValueError(msg) from err
            except TypeError as err:
                msg = f"Invalid value for {section.name}.{key.name}: {err}"
                raise ConfigTypeError(msg) from err

        value_str: str = self.parser[section.name][key.name]
        try:
            return ast.literal_eval(value_str)
        except ValueError as err:
            msg = f"Invalid literal for {section.name}.{key.name}: {value_str}"
            raise ConfigValueError(msg) from err
        except SyntaxError as err:
            msg = f"Invalid literal for {section.name}.{key.name}: {value_str}"
            raise ConfigFormatError(msg) from err

    def parse_as_float(self, section: DataclassField[Any], key: DataclassField[Any]) -> float:
        """Convert INI string to float."""
        value: str = self.parser.get(section.name, key.name)
        for char in ("'", '"'):
            value = value.removeprefix(char).removesuffix(char)
        return float(value)

    def parse_as_integer(self, section: DataclassField[Any], key: DataclassField[Any]) -> int:
        """Convert INI string to integer."""
        value: str = self.parser.get(section.name, key.name)
        for char in ("'", '"'):
            value = value.removeprefix(char).removesuffix(char)
        return int(float(value))

    def parse_as_boolean(self, section: DataclassField[Any], key: DataclassField[Any]) -> bool:
        """Convert INI string to boolean."""
        return self.parser.getboolean(section.name, key.name)

    def parse_as_string(self, section: DataclassField[Any], key: DataclassField[Any]) -> str:
        """Return the INI string with one layer of surrounding quotes removed."""
        value: str = self.parser.get(section.name, key.name).strip()
        for char in ("'", '"'):
            if len(value) >= 2 and value.startswith(char) and value.endswith(char):
                return value[1:-1]
        return value
