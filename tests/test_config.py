"""
Tests for configuration loading, validation and the interruption catalog
"""

import random

import pytest
import yaml

from managers import CatalogManager, ConfigManager
from models.config import AudienceConfig, RuntimeConfig, StageConfig
from models.enums import CatalogBucket
from models.interruption import InterruptionCatalog, InterruptionDefinition
from utils.errors import ConfigError


def write_yaml(path, data):
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Bundled configuration
# ---------------------------------------------------------------------------

def test_bundled_config_loads():
    config = ConfigManager()
    app_config = config.load()

    assert app_config.stage.end_performance_time == 10.0
    assert app_config.stage.manual_end_performance_time == 1000.0
    assert app_config.stage.loudness_sensitivity == 100.0
    assert app_config.audience.interruption_delay_time == 30.0
    assert app_config.audience.interruption_variability == 20.0
    assert app_config.audience.clap_ramp_duration == 5.0
    assert app_config.runtime.loudness_source == "scripted"

    assert len(config.catalog.general_interruptions) == 5
    assert len(config.catalog.claps) == 2
    assert config.catalog.general_interruptions[4].sound is None


def test_factory_defaults_match_modular_files():
    modular = ConfigManager()
    modular.load()

    defaults = ConfigManager(config_path=modular.factory_defaults_path)
    defaults.load()

    assert defaults.app_config == modular.app_config
    assert defaults.catalog == modular.catalog


# ---------------------------------------------------------------------------
# Include system and fallback
# ---------------------------------------------------------------------------

def test_include_files_are_merged(tmp_path):
    write_yaml(tmp_path / "stage.yaml", {"stage": {"dim_time": 4.0}})
    write_yaml(tmp_path / "catalog.yaml", {"catalog": {"claps": [{"animation_id": 9, "sound": "clap.wav"}]}})
    main = write_yaml(tmp_path / "config.yaml", {"include": ["stage.yaml", "catalog.yaml"]})

    config = ConfigManager(main, defaults_path=None)
    config.load()

    assert config.stage.dim_time == 4.0
    assert config.stage.brighten_time == 2.0
    assert config.catalog.claps == (InterruptionDefinition(9, "clap.wav"),)
    assert config.catalog.general_interruptions == ()


def test_monolithic_config(tmp_path):
    main = write_yaml(tmp_path / "config.yaml", {"audience": {"clap_ramp_duration": 1.5}})

    config = ConfigManager(main, defaults_path=None)
    config.load()

    assert config.audience.clap_ramp_duration == 1.5
    assert len(config.catalog) == 0


def test_missing_config_falls_back_to_defaults(tmp_path):
    defaults = write_yaml(tmp_path / "defaults.yaml", {"stage": {"end_performance_time": 7.0}})

    config = ConfigManager(tmp_path / "missing.yaml", defaults_path=defaults)
    config.load()

    assert config.stage.end_performance_time == 7.0


def test_missing_include_falls_back_to_defaults(tmp_path):
    defaults = write_yaml(tmp_path / "defaults.yaml", {"runtime": {"audience_size": 3}})
    main = write_yaml(tmp_path / "config.yaml", {"include": ["nope.yaml"]})

    config = ConfigManager(main, defaults_path=defaults)
    config.load()

    assert config.runtime.audience_size == 3


def test_missing_config_without_defaults_is_error(tmp_path):
    with pytest.raises(ConfigError):
        ConfigManager(tmp_path / "missing.yaml", defaults_path=None).load()


def test_validation_errors_are_not_masked_by_fallback(tmp_path):
    defaults = write_yaml(tmp_path / "defaults.yaml", {})
    main = write_yaml(tmp_path / "config.yaml", {"stage": {"dim_time": -2.0}})

    with pytest.raises(ConfigError):
        ConfigManager(main, defaults_path=defaults).load()


# ---------------------------------------------------------------------------
# Section validation
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("section, key", [
    ("stage", "end_performance_time"),
    ("stage", "continue_performance_time"),
    ("stage", "loudness_threshold"),
    ("audience", "interruption_delay_time"),
    ("audience", "interruption_variability"),
    ("audience", "clap_ramp_duration"),
])
def test_negative_timing_is_rejected(section, key):
    with pytest.raises(ConfigError) as excinfo:
        ConfigManager.from_dict({section: {key: -1.0}})
    assert key in str(excinfo.value)


def test_zero_durations_are_allowed():
    config = ConfigManager.from_dict({"stage": {"dim_time": 0, "brighten_time": 0}})
    assert config.stage.dim_time == 0


def test_sensitivity_must_be_positive():
    with pytest.raises(ConfigError):
        ConfigManager.from_dict({"stage": {"loudness_sensitivity": 0}})


def test_unknown_keys_are_rejected():
    with pytest.raises(ConfigError) as excinfo:
        ConfigManager.from_dict({"stage": {"dimtime": 2.0}})
    assert "dimtime" in str(excinfo.value)


def test_non_numeric_value_is_rejected():
    with pytest.raises(ConfigError):
        StageConfig.from_dict({"dim_time": "slow"}, "stage")


def test_bool_is_not_a_number():
    with pytest.raises(ConfigError):
        AudienceConfig.from_dict({"clap_ramp_duration": True}, "audience")


def test_unknown_loudness_source():
    with pytest.raises(ConfigError):
        RuntimeConfig.from_dict({"loudness_source": "radio"}, "runtime")


@pytest.mark.parametrize("data", [
    {"audience_size": 8.5},
    {"audience_size": True},
    {"seed": 1.5},
    {"seed": "abc"},
])
def test_counts_and_seed_must_be_integers(data):
    with pytest.raises(ConfigError):
        RuntimeConfig.from_dict(data, "runtime")


def test_integer_seed_is_accepted():
    assert RuntimeConfig.from_dict({"audience_size": 3, "seed": 42}, "runtime").seed == 42


def test_missing_sections_use_defaults():
    config = ConfigManager.from_dict({})

    assert config.stage == StageConfig()
    assert config.audience == AudienceConfig()
    assert config.runtime == RuntimeConfig()


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

def test_catalog_entries():
    catalog = CatalogManager({
        "general_interruptions": [
            {"animation_id": 1, "sound": "cough.wav"},
            {"animation_id": 2},
        ],
        "claps": [{"animation_id": 4, "sound": "clap.wav"}],
    }).catalog

    assert catalog.general_interruptions[0] == InterruptionDefinition(1, "cough.wav")
    assert catalog.general_interruptions[1].has_sound is False
    assert catalog.claps[0].animation_id == 4


def test_missing_bucket_is_empty_not_error():
    catalog = CatalogManager({"claps": [{"animation_id": 4}]}).catalog

    assert catalog.is_empty(CatalogBucket.GENERAL)
    assert catalog.pick(CatalogBucket.GENERAL, random.Random(1)) is None


@pytest.mark.parametrize("data", [
    {"claps": {"animation_id": 4}},
    {"claps": ["clap.wav"]},
    {"claps": [{"animation_id": -1}]},
    {"claps": [{"animation_id": "four"}]},
    {"claps": [{"animation_id": 4, "sound": 12}]},
    {"claps": [{"animation_id": 4, "volume": 0.5}]},
])
def test_malformed_catalog_entries(data):
    with pytest.raises(ConfigError):
        CatalogManager(data)


def test_pick_is_uniform_over_bucket():
    catalog = InterruptionCatalog(
        general_interruptions=[InterruptionDefinition(i) for i in range(1, 4)]
    )
    rng = random.Random(3)

    picks = [catalog.pick(CatalogBucket.GENERAL, rng).animation_id for _ in range(600)]

    assert set(picks) == {1, 2, 3}
    for animation_id in (1, 2, 3):
        assert 120 < picks.count(animation_id) < 280
