"""
Travel Mode Tests
=================

Profile validation, the built-in preference table, and loading profiles from
declarative configuration.
"""

import json

import pytest
from pydantic import ValidationError

from modegraph.config import BuildSettings, load_registry
from modegraph.core.schema import Tag, TravelMode, WayType
from modegraph.errors import ProfileConfigError
from modegraph.modes.profile import TravelModeProfile
from modegraph.modes.registry import TravelModeRegistry


@pytest.fixture
def registry() -> TravelModeRegistry:
    return TravelModeRegistry.default()


@pytest.fixture
def profile_file(tmp_path):
    path = tmp_path / "profiles.json"
    path.write_text(json.dumps({
        "car": {"weights": {"primary": 4.0}, "can_use": ["access", "motor_vehicle"]},
        "scooter": {"weights": {"cycleway": 1.0, "residential": 0.5}, "can_use": ["access"]},
    }))
    return path


# ============================================================================
# Profile
# ============================================================================


class TestTravelModeProfile:
    """Tests for TravelModeProfile validation."""

    def test_weight_for_unknown_class_is_zero(self, registry):
        car = registry.get_profile("car")
        assert car.weight_for(WayType.FOOT_PATH) == 0.0
        assert car.weight_for(None) == 0.0

    def test_requires_access_keys(self):
        with pytest.raises(ValidationError):
            TravelModeProfile(name="car", weights={}, can_use=())

    def test_requires_name(self):
        with pytest.raises(ValidationError):
            TravelModeProfile(name="", can_use=(Tag.ACCESS,))

    def test_rejects_infinite_weight(self):
        with pytest.raises(ValidationError):
            TravelModeProfile(name="car", weights={"primary": float("inf")}, can_use=(Tag.ACCESS,))

    def test_is_immutable(self, registry):
        with pytest.raises(ValidationError):
            registry.get_profile("car").name = "truck"

    def test_weights_are_read_only(self, registry):
        with pytest.raises(TypeError):
            registry.get_profile("car").weights[WayType.PRIMARY] = 99.0

        assert TravelModeRegistry.default().get_profile("car").weight_for(WayType.PRIMARY) == 2.0

    def test_weights_copied_from_input(self):
        weights = {WayType.PRIMARY: 2.0}
        profile = TravelModeProfile(name="car", weights=weights, can_use=(Tag.ACCESS,))
        weights[WayType.PRIMARY] = 99.0
        assert profile.weight_for(WayType.PRIMARY) == 2.0

    def test_default_weights_read_only(self):
        profile = TravelModeProfile(name="car", can_use=(Tag.ACCESS,))
        with pytest.raises(TypeError):
            profile.weights[WayType.PRIMARY] = 1.0

    def test_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            TravelModeProfile(name="car", weight={"primary": 2.0}, can_use=(Tag.ACCESS,))


# ============================================================================
# Registry
# ============================================================================


class TestTravelModeRegistry:
    """Tests for the registry and its built-in table."""

    def test_default_has_every_mode(self, registry):
        assert set(registry.modes()) == {m.value for m in TravelMode}
        assert len(registry) == 7

    def test_unknown_mode_is_absent(self, registry):
        assert registry.get_profile("hovercraft") is None
        assert "hovercraft" not in registry

    def test_lookup_by_enum(self, registry):
        assert registry.get_profile(TravelMode.BUS).name == "bus"

    def test_access_keys_general_to_specific(self, registry):
        for profile in registry:
            assert profile.can_use[0] == Tag.ACCESS

        assert registry.get_profile("car").can_use == (
            Tag.ACCESS, Tag.VEHICLE, Tag.MOTOR_VEHICLE, Tag.MOTOR_CAR,
        )

    def test_car_weights(self, registry):
        weights = registry.get_profile("car").weights
        assert weights[WayType.FREEWAY] == 10.0
        assert weights[WayType.PRIMARY] == 2.0
        assert weights[WayType.RESIDENTIAL] == 0.7

    def test_rail_modes_only_weigh_rail(self, registry):
        assert set(registry.get_profile("train").weights) == {
            WayType.RAIL, WayType.LIGHT_RAIL, WayType.SUBWAY, WayType.NARROW_GAUGE,
        }
        assert set(registry.get_profile("tram").weights) == {WayType.TRAM, WayType.LIGHT_RAIL}

    def test_with_profile_leaves_original_untouched(self, registry):
        custom = registry.with_profile(
            TravelModeProfile(name="car", weights={WayType.PRIMARY: 9.0}, can_use=(Tag.ACCESS,))
        )
        assert custom.get_profile("car").weights[WayType.PRIMARY] == 9.0
        assert registry.get_profile("car").weights[WayType.PRIMARY] == 2.0
        assert len(custom) == len(registry)

    def test_duplicate_profiles_rejected(self):
        profile = TravelModeProfile(name="car", can_use=(Tag.ACCESS,))
        with pytest.raises(ProfileConfigError):
            TravelModeRegistry([profile, profile])


class TestRegistryLoading:
    """Tests for declarative profile configuration."""

    def test_from_json_file(self, profile_file):
        registry = TravelModeRegistry.from_json_file(profile_file)
        assert registry.modes() == ["car", "scooter"]
        assert registry.get_profile("car").can_use == ("access", "motor_vehicle")
        assert registry.get_profile("bus") is None

    def test_invalid_profile(self):
        with pytest.raises(ProfileConfigError, match="car"):
            TravelModeRegistry.from_dict({"car": {"weights": {"primary": "fast"}, "can_use": ["access"]}})

    def test_profile_must_be_mapping(self):
        with pytest.raises(ProfileConfigError):
            TravelModeRegistry.from_dict({"car": ["access"]})

    def test_misspelled_key_rejected(self):
        with pytest.raises(ProfileConfigError, match="car"):
            TravelModeRegistry.from_dict({"car": {"weight": {"primary": 2.0}, "can_use": ["access"]}})

    def test_bad_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ProfileConfigError):
            TravelModeRegistry.from_json_file(path)

    def test_profile_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            TravelModeRegistry.from_dict([])


# ============================================================================
# Settings
# ============================================================================


class TestBuildSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self):
        settings = BuildSettings.from_env({})
        assert settings.profiles_path is None
        assert settings.max_workers is None
        assert settings.log_level == "WARNING"

    def test_reads_variables(self, profile_file):
        settings = BuildSettings.from_env({
            "MODEGRAPH_PROFILES_PATH": str(profile_file),
            "MODEGRAPH_MAX_WORKERS": "3",
            "MODEGRAPH_LOG_LEVEL": "debug",
        })
        assert settings.max_workers == 3
        assert settings.log_level == "DEBUG"
        assert "scooter" in load_registry(settings)

    @pytest.mark.parametrize("value", ["many", "0"])
    def test_invalid_workers(self, value):
        with pytest.raises(ValueError):
            BuildSettings.from_env({"MODEGRAPH_MAX_WORKERS": value})

    def test_default_registry_without_path(self):
        registry = load_registry(BuildSettings())
        assert len(registry) == 7
