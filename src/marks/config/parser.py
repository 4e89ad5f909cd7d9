"""
YAML configuration parser for Marks.

This module loads, validates and writes the YAML configuration files of Marks.
It handles configuration file discovery and wraps every YAML or validation
failure in a ConfigurationError with a helpful message.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List, Tuple, Union
import logging
from dataclasses import dataclass

from pydantic import ValidationError

from ..errors import MarksError
from ..models.config import MarksConfig


logger = logging.getLogger(__name__)


@dataclass
class ConfigParseResult:
    """
    Result of configuration parsing operation.

    Attributes:
        config: The parsed and validated configuration
        warnings: List of non-fatal warnings
        config_path: Path to the configuration file used
        is_default: Whether default configuration was used
    """
    config: MarksConfig
    warnings: List[str]
    config_path: Optional[Path]
    is_default: bool


class ConfigurationError(MarksError):
    """Raised when configuration parsing or validation fails."""

    def __init__(self, message: str, config_path: Optional[Path] = None, details: dict = None):
        super().__init__(message, details)
        self.config_path = config_path


class ConfigParser:
    """
    YAML configuration parser with validation and error handling.

    Missing sections and keys fall back to the MarksConfig defaults, unknown
    keys are rejected.
    """

    DEFAULT_CONFIG_NAMES = [
        '.marks.yaml',
        '.marks.yml',
        'marks.yaml',
        'marks.yml'
    ]

    SECTION_COMMENTS = [
        ("discovery", "Which documents are searched"),
        ("search", "How lines are matched against the query"),
        ("output", "How results are printed"),
        ("limits", "Concurrency and file size limits"),
        ("logging", "Logging level and format")
    ]

    def __init__(self):
        """Initialize the configuration parser."""
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def search_paths(self) -> List[Path]:
        """Directories searched for a configuration file, in priority order."""
        return [
            Path.cwd(),
            Path.home(),
            Path.home() / '.config' / 'marks',
        ]

    def load_config(self, config_path: Optional[Union[str, Path]] = None) -> ConfigParseResult:
        """
        Load and parse configuration from file or use defaults.

        Args:
            config_path: Path to configuration file. If None, searches for default files.

        Returns:
            ConfigParseResult containing parsed configuration and metadata

        Raises:
            ConfigurationError: If configuration is invalid or file cannot be read
        """
        if config_path:
            config_path = Path(config_path).expanduser()
            if not config_path.exists():
                raise ConfigurationError(f"Configuration file not found: {config_path}", config_path)
            config_data = self._load_yaml_file(config_path)
            is_default = False
        else:
            config_path, config_data = self._find_and_load_config()
            is_default = config_data is None
            if is_default:
                config_data = {}

        marks_config = self._build_config(config_data, config_path)

        warnings = marks_config.validate_configuration()

        self.logger.info(f"Configuration loaded from {config_path or 'defaults'}")

        return ConfigParseResult(
            config=marks_config,
            warnings=warnings,
            config_path=config_path,
            is_default=is_default
        )

    def _find_and_load_config(self) -> Tuple[Optional[Path], Optional[Dict[str, Any]]]:
        """
        Find and load configuration file from default locations.

        Returns:
            Tuple of (config_path, config_data) or (None, None) if not found
        """
        for search_path in self.search_paths():
            for config_name in self.DEFAULT_CONFIG_NAMES:
                config_file = search_path / config_name
                if config_file.is_file():
                    try:
                        config_data = self._load_yaml_file(config_file)
                    except ConfigurationError as e:
                        self.logger.warning(f"Failed to load {config_file}: {e}")
                        continue
                    self.logger.info(f"Found configuration file: {config_file}")
                    return config_file, config_data

        self.logger.info("No configuration file found, using defaults")
        return None, None

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """
        Load and parse YAML file.

        Args:
            file_path: Path to YAML file

        Returns:
            Parsed YAML data as dictionary

        Raises:
            ConfigurationError: If file cannot be read or parsed
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file {file_path}: {e}", file_path) from e

        if not content.strip():
            self.logger.warning(f"Configuration file is empty: {file_path}")
            return {}

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {file_path}: {e}", file_path) from e

        if data is None:
            return {}

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration file must contain a YAML object, got {type(data).__name__}",
                file_path
            )

        return data

    def _build_config(self, config_data: Dict[str, Any], config_path: Optional[Path] = None) -> MarksConfig:
        """
        Validate configuration data and build a MarksConfig.

        Raises:
            ConfigurationError: If a value is invalid or a key is unknown
        """
        try:
            return MarksConfig.from_dict(config_data)
        except ValidationError as e:
            problems = []
            for error in e.errors():
                location = '.'.join(str(part) for part in error['loc'])
                problems.append(f"{location}: {error['msg']}")
            raise ConfigurationError(
                f"Configuration validation failed: {'; '.join(problems)}",
                config_path,
                details={'errors': problems}
            ) from e

    def save_config(self, config: MarksConfig, output_path: Union[str, Path]) -> None:
        """
        Save configuration to YAML file.

        Args:
            config: Configuration to save
            output_path: Path where to save the configuration

        Raises:
            ConfigurationError: If file cannot be written
        """
        output_path = Path(output_path)
        yaml_content = self._generate_yaml_with_comments(config.to_dict())

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, 'w', encoding='utf-8') as f:
                f.write(yaml_content)
        except OSError as e:
            raise ConfigurationError(f"Cannot write configuration file {output_path}: {e}", output_path) from e

        self.logger.info(f"Configuration saved to {output_path}")

    def _generate_yaml_with_comments(self, config_dict: Dict[str, Any]) -> str:
        """
        Generate YAML content with a comment above every section.

        Args:
            config_dict: Configuration dictionary

        Returns:
            YAML content with comments
        """
        lines = [
            "# Marks configuration",
            "# Command line flags override the values below",
            "",
        ]

        for section_name, comment in self.SECTION_COMMENTS:
            if section_name in config_dict:
                lines.append(f"# {comment}")
                section_yaml = yaml.dump({section_name: config_dict[section_name]},
                                         default_flow_style=False,
                                         sort_keys=False)
                lines.append(section_yaml.rstrip())
                lines.append("")

        return "\n".join(lines)

    def validate_config_file(self, config_path: Union[str, Path]) -> List[str]:
        """
        Validate a configuration file without using it.

        Args:
            config_path: Path to configuration file

        Returns:
            List of validation errors (empty if valid)
        """
        config_path = Path(config_path)

        if not config_path.exists():
            return [f"Configuration file not found: {config_path}"]

        try:
            self._build_config(self._load_yaml_file(config_path), config_path)
        except ConfigurationError as e:
            return [e.message]

        return []

    def get_config_template(self) -> str:
        """
        Get a template configuration file with all options and their defaults.

        Returns:
            YAML template as string
        """
        return self._generate_yaml_with_comments(MarksConfig().to_dict())


def load_config(config_path: Optional[Union[str, Path]] = None) -> ConfigParseResult:
    """
    Convenience function to load configuration.

    Args:
        config_path: Path to configuration file (optional)

    Returns:
        ConfigParseResult containing parsed configuration

    Raises:
        ConfigurationError: If configuration is invalid
    """
    parser = ConfigParser()
    return parser.load_config(config_path)


def validate_config_file(config_path: Union[str, Path]) -> List[str]:
    """Convenience function to validate a configuration file."""
    parser = ConfigParser()
    return parser.validate_config_file(config_path)


def create_config_template(output_path: Union[str, Path]) -> None:
    """
    Create a template configuration file.

    Args:
        output_path: Where to save the template

    Raises:
        ConfigurationError: If template cannot be created
    """
    parser = ConfigParser()
    template_content = parser.get_config_template()
    output_path = Path(output_path)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(template_content)
    except OSError as e:
        raise ConfigurationError(f"Cannot create template file {output_path}: {e}", output_path) from e
