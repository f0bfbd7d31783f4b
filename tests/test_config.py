"""Tests for building PlannerConfig from the environment."""

import pytest

from config import DEFAULT_MODELS, PlannerConfig, load_config


def test_defaults():
    cfg = load_config({"OPENAI_API_KEY": "sk-test"})
    assert cfg == PlannerConfig(api_key="sk-test")
    assert cfg.model == DEFAULT_MODELS["openai"]
    assert cfg.task_count == 5
    assert cfg.log_payloads is False


def test_gemini_overrides():
    cfg = load_config({
        "LLM_PROVIDER": "Gemini",
        "GEMINI_API_KEY": "g-key",
        "MODEL_NAME": "gemini-custom",
        "LLM_API_BASE": "http://proxy",
        "TASK_COUNT": "8",
        "PLAN_OUTPUT_DIR": "plans",
        "PLANNER_TIMEZONE": "Asia/Shanghai",
        "LOG_LEVEL": "debug",
        "LOG_LLM_PAYLOADS": "FULL",
    })
    assert cfg.provider == "gemini"
    assert cfg.api_key == "g-key"
    assert cfg.model == "gemini-custom"
    assert cfg.api_base == "http://proxy"
    assert cfg.task_count == 8
    assert cfg.output_dir == "plans"
    assert cfg.tzinfo.zone == "Asia/Shanghai"
    assert cfg.log_level == "DEBUG"
    assert cfg.log_payloads is True


def test_chatgpt_alias():
    assert load_config({"LLM_PROVIDER": "chatgpt", "OPENAI_API_KEY": "k"}).provider == "openai"


def test_missing_api_key():
    with pytest.raises(ValueError, match="OPENAI_API_KEY"):
        load_config({})


def test_api_key_optional_when_not_generating():
    assert load_config({}, require_api_key=False).api_key == ""


def test_key_must_match_provider():
    with pytest.raises(ValueError, match="GEMINI_API_KEY"):
        load_config({"LLM_PROVIDER": "gemini", "OPENAI_API_KEY": "k"})


@pytest.mark.parametrize("value", ["five", "0", "-2"])
def test_bad_task_count(value):
    with pytest.raises(ValueError, match="TASK_COUNT"):
        load_config({"OPENAI_API_KEY": "k", "TASK_COUNT": value})


def test_unknown_provider():
    with pytest.raises(ValueError, match="Unsupported"):
        load_config({"LLM_PROVIDER": "llama", "OPENAI_API_KEY": "k"})


def test_unknown_timezone():
    with pytest.raises(ValueError, match="PLANNER_TIMEZONE"):
        load_config({"OPENAI_API_KEY": "k", "PLANNER_TIMEZONE": "Mars/Olympus"})
