"""
Config Manager

Main configuration manager with include system support.
Loads modular YAML files and builds the validated config sections plus the
interruption catalog.
"""

import yaml
from pathlib import Path
from typing import Dict, List, Optional, Union

from managers.catalog_manager import CatalogManager
from models.config import AppConfig, AudienceConfig, RuntimeConfig, StageConfig
from models.interruption import InterruptionCatalog
from utils.errors import ConfigError
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)

# Directory holding the bundled YAML files (src/config)
DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"


class ConfigManager:
    """
    Main configuration manager with include system support

    Loads config.yaml and processes the include: directive to load modular
    YAML files. Falls back to factory_defaults.yaml when the main config
    cannot be read. Validation errors are never masked by the fallback.

    Example:
        config = ConfigManager()
        config.load()

        config.stage.end_performance_time      # 10.0
        config.catalog.general_interruptions   # tuple of InterruptionDefinition
    """

    def __init__(
        self,
        config_path: Union[str, Path] = DEFAULT_CONFIG_DIR / "config.yaml",
        defaults_path: Optional[Union[str, Path]] = DEFAULT_CONFIG_DIR / "factory_defaults.yaml",
    ):
        """
        Initialize ConfigManager

        Args:
            config_path: Path to main config.yaml
            defaults_path: Path to factory defaults fallback (None = no fallback)
        """
        self.config_path = Path(config_path)
        self.factory_defaults_path = Path(defaults_path) if defaults_path else None
        self.data: Dict = {}

        # Initialized in load()
        self.app_config: AppConfig
        self.catalog_manager: CatalogManager

    def load(self) -> AppConfig:
        """
        Load YAML configuration with include system support

        Process:
        1. Load main config.yaml
        2. If it has 'include:' list, load and merge those files
        3. Otherwise treat as monolithic config
        4. Fallback to factory defaults on read/parse failure
        5. Build and validate config sections and the catalog

        Raises:
            ConfigError: invalid values, or neither file could be read
        """
        try:
            main_config = self._read_yaml(self.config_path)

            if 'include' in main_config:
                log.info("Using include-based configuration")
                self.data = self._load_with_includes(main_config['include'], self.config_path.parent)
            else:
                log.info("Using monolithic configuration")
                self.data = main_config

        except (OSError, yaml.YAMLError) as ex:
            log.error("Failed to load config.yaml", error=str(ex), error_type=type(ex).__name__)
            if self.factory_defaults_path is None:
                raise ConfigError(f"Cannot load {self.config_path}: {ex}") from ex

            log.warn("Falling back to factory defaults")
            try:
                self.data = self._read_yaml(self.factory_defaults_path)
            except (OSError, yaml.YAMLError) as defaults_ex:
                raise ConfigError(
                    f"Cannot load {self.config_path} or {self.factory_defaults_path}: {defaults_ex}"
                ) from defaults_ex

        self._initialize_sections()
        return self.app_config

    @classmethod
    def from_dict(cls, data: Dict) -> "ConfigManager":
        """Build a manager from an in-memory config dict (tests, embedding)"""
        manager = cls(defaults_path=None)
        manager.data = data or {}
        manager._initialize_sections()
        return manager

    def _read_yaml(self, path: Path) -> Dict:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a mapping at top level")
        return data

    def _load_with_includes(self, include_list: List[str], config_dir: Path) -> Dict:
        """
        Load and merge multiple YAML files from include list

        Args:
            include_list: List of filenames to load (e.g., ["stage.yaml", "catalog.yaml"])
            config_dir: Directory containing config files

        Returns:
            Merged config dict
        """
        merged = {}

        for filename in include_list:
            filepath = config_dir / filename
            try:
                file_data = self._read_yaml(filepath)
                if file_data:
                    merged.update(file_data)
                    log.info(f"Loaded {filename}", keys=str(list(file_data.keys())))
            except FileNotFoundError:
                log.error(f"File not found: {filename}")
                raise
            except yaml.YAMLError as ex:
                log.error(f"Error loading {filename}", error=str(ex))
                raise

        log.info("Config merge complete", total_keys=len(merged), keys=str(list(merged.keys())[:10]))
        return merged

    def _initialize_sections(self) -> None:
        """
        Build validated sections from loaded data

        Creates:
        - StageConfig, AudienceConfig, RuntimeConfig
        - CatalogManager → InterruptionCatalog
        """
        self.app_config = AppConfig(
            stage=StageConfig.from_dict(self.data.get("stage"), "stage"),
            audience=AudienceConfig.from_dict(self.data.get("audience"), "audience"),
            runtime=RuntimeConfig.from_dict(self.data.get("runtime"), "runtime"),
        )
        self.catalog_manager = CatalogManager(self.data.get("catalog") or {})

        log.info(
            "Configuration ready",
            audience_size=self.app_config.runtime.audience_size,
            interruptions=len(self.catalog.general_interruptions),
            claps=len(self.catalog.claps),
        )

    # ===== Section access =====

    @property
    def stage(self) -> StageConfig:
        return self.app_config.stage

    @property
    def audience(self) -> AudienceConfig:
        return self.app_config.audience

    @property
    def runtime(self) -> RuntimeConfig:
        return self.app_config.runtime

    @property
    def catalog(self) -> InterruptionCatalog:
        return self.catalog_manager.catalog
