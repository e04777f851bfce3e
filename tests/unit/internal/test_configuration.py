import pytest
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from beanwire import (
    ConfigurationSource,
    ContextSettings,
    EnvironmentConfiguration,
    MappingConfiguration,
    SettingsConfiguration,
)


class StandSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BEANWIRE_TEST_STAND_")

    fruit_color: str = "red"
    crate_size: int = 12
    label: str | None = None
    bowl_name: str = Field(default="glass", alias="BEANWIRE_TEST_BOWL_NAME")


def test_environment_is_read_on_every_lookup(monkeypatch: pytest.MonkeyPatch) -> None:
    configuration = EnvironmentConfiguration()
    monkeypatch.delenv("BEANWIRE_TEST_COLOR", raising=False)

    assert configuration.get("BEANWIRE_TEST_COLOR", "red") == "red"
    monkeypatch.setenv("BEANWIRE_TEST_COLOR", "green")
    assert configuration.get("BEANWIRE_TEST_COLOR", "red") == "green"


def test_environment_prefix(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STAND_COLOR", "yellow")

    assert EnvironmentConfiguration(prefix="STAND_").get("COLOR", "red") == "yellow"


def test_mapping_override_lifecycle() -> None:
    configuration = MappingConfiguration({"color": "red"})

    assert configuration.get("color", "none") == "red"
    configuration.set("color", "green")
    assert configuration.get("color", "none") == "green"
    configuration.clear("color")
    assert configuration.get("color", "none") == "none"
    configuration.clear("color")


def test_settings_fields_by_name_and_alias() -> None:
    configuration = SettingsConfiguration(StandSettings())

    assert configuration.get("fruit_color", "") == "red"
    assert configuration.get("crate_size", "") == "12"
    assert configuration.get("label", "none") == "none"
    assert configuration.get("BEANWIRE_TEST_BOWL_NAME", "") == "glass"
    assert configuration.get("bowl_name", "") == "glass"
    assert configuration.get("unknown", "fallback") == "fallback"


def test_settings_follow_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BEANWIRE_TEST_STAND_FRUIT_COLOR", "purple")

    assert SettingsConfiguration(StandSettings()).get("fruit_color", "") == "purple"


def test_sources_satisfy_the_protocol() -> None:
    assert isinstance(EnvironmentConfiguration(), ConfigurationSource)
    assert isinstance(MappingConfiguration(), ConfigurationSource)
    assert isinstance(SettingsConfiguration(StandSettings()), ConfigurationSource)


def test_context_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BEANWIRE_SCAN_PACKAGES", raising=False)
    monkeypatch.delenv("BEANWIRE_STRICT_DEPENDENCIES", raising=False)

    settings = ContextSettings()

    assert settings.scan_packages == []
    assert settings.strict_dependencies is True


def test_context_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BEANWIRE_SCAN_PACKAGES", '["fruit_stand"]')
    monkeypatch.setenv("BEANWIRE_STRICT_DEPENDENCIES", "false")

    settings = ContextSettings()

    assert settings.scan_packages == ["fruit_stand"]
    assert settings.strict_dependencies is False
