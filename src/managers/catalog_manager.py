"""
Catalog Manager - Processes interruption/clap definitions

Processes the `catalog:` section from ConfigManager (does NOT load files).
Single responsibility: turn raw bucket lists into the immutable catalog.
"""

from typing import Any, Dict, List

from models.enums import CatalogBucket
from models.interruption import InterruptionCatalog, InterruptionDefinition
from utils.errors import ConfigError
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)


class CatalogManager:
    """
    Interruption catalog builder (data processor only)

    A missing or empty bucket yields an empty tuple: no interruptions (or no
    claps) ever fire, which is a valid quiet configuration.

    Example:
        data = {
            'general_interruptions': [{'animation_id': 1, 'sound': 'cough.wav'}],
            'claps': [{'animation_id': 4, 'sound': 'clap_light.wav'}],
        }
        catalog = CatalogManager(data).catalog
    """

    def __init__(self, data: Dict[str, Any]):
        if not isinstance(data, dict):
            raise ConfigError(f"catalog must be a mapping, got {type(data).__name__}")

        self.data = data
        self.catalog = InterruptionCatalog(
            general_interruptions=self._parse_bucket(CatalogBucket.GENERAL),
            claps=self._parse_bucket(CatalogBucket.CLAPS),
        )

    def _parse_bucket(self, bucket: CatalogBucket) -> List[InterruptionDefinition]:
        entries = self.data.get(bucket.value)
        if not entries:
            log.warn(f"Catalog bucket '{bucket.value}' is empty, nothing will be drawn from it")
            return []
        if not isinstance(entries, list):
            raise ConfigError(f"catalog.{bucket.value} must be a list")

        definitions = []
        for index, entry in enumerate(entries):
            definitions.append(self._parse_entry(bucket, index, entry))

        log.info(f"Loaded {len(definitions)} {bucket.value}")
        return definitions

    @staticmethod
    def _parse_entry(bucket: CatalogBucket, index: int, entry: Any) -> InterruptionDefinition:
        where = f"catalog.{bucket.value}[{index}]"
        if not isinstance(entry, dict):
            raise ConfigError(f"{where} must be a mapping with animation_id/sound")

        unknown = set(entry) - {"animation_id", "sound"}
        if unknown:
            raise ConfigError(f"{where}: unknown keys {sorted(unknown)}")

        sound = entry.get("sound")
        if sound is not None and not isinstance(sound, str):
            raise ConfigError(f"{where}.sound must be a string or null")

        try:
            return InterruptionDefinition(
                animation_id=entry.get("animation_id", 0),
                sound=sound,
            )
        except ConfigError as ex:
            raise ConfigError(f"{where}: {ex}") from ex
