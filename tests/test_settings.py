import pytest

from goal_agent.llm import ProviderKind
from goal_agent.settings import (
    DEFAULT_LANGUAGE,
    DEFAULT_MAX_LOOPS,
    InvalidEndpointError,
    InvalidSettingsError,
    InvalidSettingValueError,
    InvalidUserCredentialError,
    ModelSettings,
    validate_settings,
)

VALID_KEY = "sk-" + "a" * 40


def test_resolved_defaults():
    settings = ModelSettings()
    assert settings.resolved_temperature() == 0.9
    assert settings.resolved_max_tokens() == 400
    assert settings.resolved_max_loops() == DEFAULT_MAX_LOOPS
    assert settings.resolved_language() == DEFAULT_LANGUAGE


def test_provider_priority_on_settings():
    assert ModelSettings(hugging_face_model_name="x", gemini_model_name="y").provider is ProviderKind.HUGGING_FACE
    assert ModelSettings(gemini_model_name="y").provider is ProviderKind.GEMINI
    assert ModelSettings(custom_model_name="z").provider is ProviderKind.OPENAI


def test_empty_settings_are_valid():
    settings = ModelSettings()
    assert validate_settings(settings) is settings


def test_well_formed_openai_key_passes():
    validate_settings(ModelSettings(custom_api_key=VALID_KEY))


def test_malformed_openai_key_is_rejected():
    with pytest.raises(InvalidUserCredentialError):
        validate_settings(ModelSettings(custom_api_key="not-a-key"))


def test_non_openai_keys_are_not_pattern_checked():
    validate_settings(ModelSettings(hugging_face_model_name="gpt2", custom_api_key="hf_anything"))


def test_bad_endpoint_is_rejected():
    with pytest.raises(InvalidEndpointError):
        validate_settings(ModelSettings(custom_end_point="not a url"))


def test_good_endpoint_passes():
    validate_settings(ModelSettings(custom_end_point="https://api.example.com:8443/v1"))


@pytest.mark.parametrize(
    "fields",
    [
        {"custom_temperature": 1.5},
        {"custom_temperature": -0.1},
        {"custom_max_tokens": 10},
        {"custom_max_tokens": 9000},
        {"custom_max_loops": 0},
        {"custom_max_loops": 26},
    ],
)
def test_out_of_range_values_are_rejected(fields):
    with pytest.raises(InvalidSettingValueError):
        validate_settings(ModelSettings(**fields))


def test_validation_errors_share_a_base_class():
    assert issubclass(InvalidUserCredentialError, InvalidSettingsError)
    assert issubclass(InvalidSettingsError, ValueError)


def test_for_provider_clears_other_model_names(server_config):
    settings = ModelSettings.for_provider(
        ProviderKind.GEMINI, config=server_config, hugging_face_model_name="hf", custom_max_tokens=300
    )
    assert settings.hugging_face_model_name is None
    assert settings.gemini_model_name == server_config.default_gemini_model
    assert settings.custom_max_tokens == 300
    assert settings.provider is ProviderKind.GEMINI


def test_for_provider_openai_fills_default_model(server_config):
    settings = ModelSettings.for_provider(ProviderKind.OPENAI, config=server_config, gemini_model_name="g")
    assert settings.provider is ProviderKind.OPENAI
    assert settings.custom_model_name == "gpt-3.5-turbo"
