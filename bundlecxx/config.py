"""
Configuration system for bundle-cxx

Provides configuration management with support for files and environment variables.
Tool locations are explicit settings, passed to the components that need them.
"""

import os
import json
import yaml
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Any
from enum import Enum
import logging

logger = logging.getLogger(__name__)


class RestorePolicy(Enum):
    """When original files are restored after a bundle run."""

    ALWAYS = "always"
    ON_SUCCESS = "on_success"


class SymbolSourceKind(Enum):
    """Which symbol source implementation lists declarations."""

    LIBCLANG = "libclang"
    EXECUTABLE = "executable"


LINE_ENDINGS = {"native": os.linesep, "lf": "\n", "crlf": "\r\n"}


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""

    pass


class ConfigurationManager:
    """Manages configuration loading, validation, and merging."""

    DEFAULT_CONFIG_PATHS = [
        "bundlecxx.json",
        "bundlecxx.yaml",
        "bundlecxx.yml",
        ".bundlecxx.json",
        ".bundlecxx.yaml",
        ".bundlecxx.yml",
        os.path.expanduser("~/.bundlecxx.json"),
        os.path.expanduser("~/.bundlecxx.yaml"),
    ]

    @staticmethod
    def find_config_file(search_paths: Optional[List[str]] = None) -> Optional[str]:
        """Find the first existing configuration file."""
        paths = search_paths or ConfigurationManager.DEFAULT_CONFIG_PATHS

        for path in paths:
            if os.path.exists(path):
                return path
        return None

    @staticmethod
    def load_config_file(config_path: str) -> Dict[str, Any]:
        """Load configuration from file (JSON or YAML)."""
        if not os.path.exists(config_path):
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                if config_path.endswith((".yaml", ".yml")):
                    data = yaml.safe_load(f) or {}
                else:
                    data = json.load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Invalid configuration file format: {e}")
        except OSError as e:
            raise ConfigurationError(f"Error reading configuration file: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError("Configuration file must contain a mapping")
        return data

    @staticmethod
    def load_env_config() -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config = {}

        # Tool settings
        tools = {}
        if os.getenv("BUNDLECXX_LIST_SYMBOLS_PATH"):
            tools["list_symbols_path"] = os.getenv("BUNDLECXX_LIST_SYMBOLS_PATH")

        if os.getenv("BUNDLECXX_AMALGAMATE_COMMAND"):
            tools["amalgamate_command"] = os.getenv("BUNDLECXX_AMALGAMATE_COMMAND")

        if os.getenv("BUNDLECXX_LIBCLANG_PATH"):
            tools["libclang_path"] = os.getenv("BUNDLECXX_LIBCLANG_PATH")

        if os.getenv("BUNDLECXX_SYMBOL_SOURCE"):
            source = os.getenv("BUNDLECXX_SYMBOL_SOURCE").lower()
            if source in [s.value for s in SymbolSourceKind]:
                tools["symbol_source"] = source
            else:
                logger.warning("Invalid BUNDLECXX_SYMBOL_SOURCE value, using default")

        if tools:
            config["tools"] = tools

        # Rename settings
        rename = {}
        if os.getenv("BUNDLECXX_BACKUP_SUFFIX"):
            rename["backup_suffix"] = os.getenv("BUNDLECXX_BACKUP_SUFFIX")

        if os.getenv("BUNDLECXX_ENCODING"):
            rename["encoding"] = os.getenv("BUNDLECXX_ENCODING")

        if os.getenv("BUNDLECXX_LINE_ENDING"):
            line_ending = os.getenv("BUNDLECXX_LINE_ENDING").lower()
            if line_ending in LINE_ENDINGS:
                rename["line_ending"] = line_ending
            else:
                logger.warning("Invalid BUNDLECXX_LINE_ENDING value, using default")

        if rename:
            config["rename"] = rename

        # Bundle settings
        bundle = {}
        if os.getenv("BUNDLECXX_RESTORE_POLICY"):
            policy = os.getenv("BUNDLECXX_RESTORE_POLICY").lower()
            if policy in [p.value for p in RestorePolicy]:
                bundle["restore_policy"] = policy
            else:
                logger.warning("Invalid BUNDLECXX_RESTORE_POLICY value, using default")

        if os.getenv("BUNDLECXX_MERGE_TIMEOUT"):
            try:
                bundle["merge_timeout"] = float(os.getenv("BUNDLECXX_MERGE_TIMEOUT"))
            except ValueError:
                logger.warning("Invalid BUNDLECXX_MERGE_TIMEOUT value, using default")

        if bundle:
            config["bundle"] = bundle

        return config

    @staticmethod
    def merge_configs(*configs: Dict[str, Any]) -> Dict[str, Any]:
        """Merge multiple configuration dictionaries, with later ones taking precedence."""
        result = {}

        for config in configs:
            if not config:
                continue

            for key, value in config.items():
                if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                    result[key] = ConfigurationManager.merge_configs(result[key], value)
                else:
                    result[key] = value

        return result

    @staticmethod
    def validate_config(config_data: Dict[str, Any]) -> None:
        """Validate configuration data."""
        if "tools" in config_data:
            tools = config_data["tools"]

            if "symbol_source" in tools:
                valid_sources = [s.value for s in SymbolSourceKind]
                if tools["symbol_source"] not in valid_sources:
                    raise ConfigurationError(f"symbol_source must be one of: {valid_sources}")

            if "amalgamate_command" in tools and not tools["amalgamate_command"]:
                raise ConfigurationError("amalgamate_command must not be empty")

        if "rename" in config_data:
            rename = config_data["rename"]

            if "backup_suffix" in rename:
                suffix = rename["backup_suffix"]
                if not isinstance(suffix, str) or not suffix.strip():
                    raise ConfigurationError("backup_suffix must be a non-empty string")

            if "line_ending" in rename and rename["line_ending"] not in LINE_ENDINGS:
                raise ConfigurationError(
                    f"line_ending must be one of: {list(LINE_ENDINGS.keys())}"
                )

        if "bundle" in config_data:
            bundle = config_data["bundle"]

            if "restore_policy" in bundle:
                valid_policies = [p.value for p in RestorePolicy]
                if bundle["restore_policy"] not in valid_policies:
                    raise ConfigurationError(f"restore_policy must be one of: {valid_policies}")

            if "merge_timeout" in bundle and bundle["merge_timeout"] is not None:
                timeout = bundle["merge_timeout"]
                if not isinstance(timeout, (int, float)) or timeout <= 0:
                    raise ConfigurationError("merge_timeout must be a positive number")

            if "symbols_suffix" in bundle and not bundle["symbols_suffix"]:
                raise ConfigurationError("symbols_suffix must not be empty")


@dataclass
class ToolsConfig:
    """Locations of the external collaborators."""

    list_symbols_path: str = "list-symbols"
    amalgamate_command: str = "amalgamate"
    libclang_path: Optional[str] = None
    symbol_source: SymbolSourceKind = SymbolSourceKind.LIBCLANG


@dataclass
class RenameConfig:
    """Configuration for the rename phase."""

    backup_suffix: str = ".bak"
    encoding: str = "utf-8"
    line_ending: str = "native"

    @property
    def newline(self) -> str:
        return LINE_ENDINGS[self.line_ending]


@dataclass
class BundleSettings:
    """Configuration for the bundle workflow."""

    restore_policy: RestorePolicy = RestorePolicy.ALWAYS
    merge_timeout: Optional[float] = None
    symbols_suffix: str = "_symbols.csv"


@dataclass
class BundleConfig:
    """Main configuration class for bundle-cxx."""

    tools_settings: ToolsConfig = field(default_factory=ToolsConfig)
    rename_settings: RenameConfig = field(default_factory=RenameConfig)
    bundle_settings: BundleSettings = field(default_factory=BundleSettings)

    @classmethod
    def default(cls) -> "BundleConfig":
        """Create default configuration."""
        return cls()

    @classmethod
    def load(
        cls,
        config_path: Optional[str] = None,
        use_env: bool = True,
        validate: bool = True,
    ) -> "BundleConfig":
        """
        Load configuration from multiple sources with precedence:
        1. Default values
        2. Configuration file
        3. Environment variables (if use_env=True)

        Args:
            config_path: Path to configuration file. If None, searches for default files.
            use_env: Whether to load environment variables
            validate: Whether to validate the configuration
        """
        configs_to_merge = []

        file_config = {}
        if config_path:
            file_config = ConfigurationManager.load_config_file(config_path)
        else:
            found_config = ConfigurationManager.find_config_file()
            if found_config:
                file_config = ConfigurationManager.load_config_file(found_config)
                logger.info(f"Loaded configuration from: {found_config}")

        configs_to_merge.append(file_config)

        if use_env:
            configs_to_merge.append(ConfigurationManager.load_env_config())

        merged_config = ConfigurationManager.merge_configs(*configs_to_merge)

        if validate:
            ConfigurationManager.validate_config(merged_config)

        tools_config = ToolsConfig()
        for key, value in merged_config.get("tools", {}).items():
            if hasattr(tools_config, key):
                if key == "symbol_source" and isinstance(value, str):
                    value = SymbolSourceKind(value)
                setattr(tools_config, key, value)

        rename_config = RenameConfig()
        for key, value in merged_config.get("rename", {}).items():
            if hasattr(rename_config, key) and key != "newline":
                setattr(rename_config, key, value)

        bundle_settings = BundleSettings()
        for key, value in merged_config.get("bundle", {}).items():
            if hasattr(bundle_settings, key):
                if key == "restore_policy" and isinstance(value, str):
                    value = RestorePolicy(value)
                setattr(bundle_settings, key, value)

        return cls(
            tools_settings=tools_config,
            rename_settings=rename_config,
            bundle_settings=bundle_settings,
        )

    @classmethod
    def from_file(cls, config_path: str) -> "BundleConfig":
        """Load configuration from a JSON or YAML file."""
        return cls.load(config_path=config_path, use_env=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "tools": {
                **asdict(self.tools_settings),
                "symbol_source": self.tools_settings.symbol_source.value,
            },
            "rename": asdict(self.rename_settings),
            "bundle": {
                **asdict(self.bundle_settings),
                "restore_policy": self.bundle_settings.restore_policy.value,
            },
        }

    def to_file(self, config_path: str, format: str = "json") -> None:
        """
        Save configuration to file.

        Args:
            config_path: Path to save configuration
            format: File format ('json' or 'yaml')
        """
        config_data = self.to_dict()

        try:
            with open(config_path, "w", encoding="utf-8") as f:
                if format.lower() in ("yaml", "yml"):
                    yaml.dump(config_data, f, default_flow_style=False, indent=2)
                else:
                    json.dump(config_data, f, indent=2)
        except OSError as e:
            raise ConfigurationError(f"Error saving configuration file: {e}")

    def validate(self) -> None:
        """Validate the current configuration."""
        ConfigurationManager.validate_config(self.to_dict())

    def get_config_summary(self) -> str:
        """Get a human-readable summary of the configuration."""
        return f"""bundle-cxx Configuration Summary:
Tools:
  - Symbol source: {self.tools_settings.symbol_source.value}
  - list-symbols executable: {self.tools_settings.list_symbols_path}
  - Amalgamate command: {self.tools_settings.amalgamate_command}
  - libclang library: {self.tools_settings.libclang_path or "(auto)"}

Rename:
  - Backup suffix: {self.rename_settings.backup_suffix}
  - Encoding: {self.rename_settings.encoding}
  - Line ending: {self.rename_settings.line_ending}

Bundle:
  - Restore policy: {self.bundle_settings.restore_policy.value}
  - Merge timeout: {self.bundle_settings.merge_timeout or "none"}
  - Symbols file suffix: {self.bundle_settings.symbols_suffix}
"""


def load_config(config_path: Optional[str] = None, use_env: bool = True) -> BundleConfig:
    """
    Load configuration from file and/or environment variables.

    Args:
        config_path: Path to configuration file
        use_env: Whether to load environment variables

    Returns:
        BundleConfig: Loaded configuration
    """
    return BundleConfig.load(config_path=config_path, use_env=use_env)
