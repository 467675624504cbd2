"""
Tests for building the provider list from settings.
"""

from modules.aura_analyzer.config import build_provider_specs
from shared.config import Settings


def _settings(**overrides):
    fields = {
        "glm_api_key": "glm-key",
        "deepseek_api_key": "ds-key",
        "openai_api_key": "oa-key",
    }
    fields.update(overrides)
    return Settings(_env_file=None, **fields)


def test_default_order_is_glm_then_deepseek():
    specs = build_provider_specs(_settings(aura_provider_order="glm,deepseek"))

    assert [s.name for s in specs] == ["glm", "deepseek"]
    glm, deepseek = specs
    assert glm.endpoint_url == "https://api.z.ai/api/paas/v4/chat/completions"
    assert glm.model == "glm-4.7"
    assert deepseek.endpoint_url == "https://api.deepseek.com/chat/completions"
    assert deepseek.model == "deepseek-chat"


def test_providers_without_credentials_are_left_out():
    specs = build_provider_specs(_settings(glm_api_key="  ", aura_provider_order="glm,deepseek,openai"))
    assert [s.name for s in specs] == ["deepseek", "openai"]


def test_unknown_and_duplicate_names_are_ignored():
    specs = build_provider_specs(_settings(aura_provider_order="openai, Bogus ,openai,GLM"))
    assert [s.name for s in specs] == ["openai", "glm"]


def test_only_openai_receives_images():
    specs = {s.name: s for s in build_provider_specs(_settings())}
    assert specs["openai"].supports_vision
    assert not specs["glm"].supports_vision
    assert not specs["deepseek"].supports_vision


def test_empty_order_configures_nothing():
    assert build_provider_specs(_settings(aura_provider_order="")) == []


def test_prefixed_environment_names(monkeypatch):
    monkeypatch.setenv("AURA_GLM_API_KEY", "from-env")
    monkeypatch.setenv("AURA_GLM_MODEL", "glm-custom")
    monkeypatch.delenv("GLM_API_KEY", raising=False)
    monkeypatch.delenv("GLM_MODEL", raising=False)

    settings = Settings(_env_file=None, aura_provider_order="glm")
    specs = build_provider_specs(settings)

    assert specs[0].credential == "from-env"
    assert specs[0].model == "glm-custom"
