"""Tests for the command line entry point."""

from unittest.mock import patch

import pytest

import main


@pytest.fixture(autouse=True)
def quiet_logging():
    with patch("main.setup_logging"), patch("main.set_library_log_levels"):
        yield


@pytest.fixture
def env(monkeypatch, tmp_path):
    for name in ("LLM_PROVIDER", "MODEL_NAME", "LLM_API_BASE", "TASK_COUNT", "PLANNER_TIMEZONE",
                 "LOG_LEVEL", "LOG_LLM_PAYLOADS", "GEMINI_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("PLAN_OUTPUT_DIR", str(tmp_path))
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    return tmp_path


def test_create_then_update(env, fake_provider_factory, capsys):
    provider = fake_provider_factory("Install Go\nWrite hello world\nRead the tour")
    with patch("main.create_provider_from_config", return_value=provider):
        code = main.main(["create", "Learn Go", "--update", "0", "2"])

    assert code == 0
    out = capsys.readouterr().out
    assert "Planning complete!" in out
    assert "Plan updated! 2/3 tasks completed (67%)" in out
    content = (env / "plan-learn-go.md").read_text(encoding="utf-8")
    assert "- [x] Install Go\n- [ ] Write hello world\n- [x] Read the tour\n" in content


def test_create_failure_exit_code(env, fake_provider_factory, capsys):
    provider = fake_provider_factory(success=False, error_message="timeout")
    with patch("main.create_provider_from_config", return_value=provider):
        code = main.main(["create", "Learn Go"])

    assert code == 1
    assert "timeout" in capsys.readouterr().err
    assert not (env / "plan-learn-go.md").exists()


def test_create_without_api_key(env, monkeypatch, capsys):
    monkeypatch.delenv("OPENAI_API_KEY")
    assert main.main(["create", "Learn Go"]) == 1
    assert "OPENAI_API_KEY" in capsys.readouterr().err


def test_update_and_show_need_no_api_key(env, monkeypatch, plan_text, capsys):
    monkeypatch.delenv("OPENAI_API_KEY")
    path = env / "plan.md"
    path.write_text(plan_text, encoding="utf-8")

    assert main.main(["update", str(path), "1"]) == 0
    assert main.main(["show", str(path)]) == 0
    out = capsys.readouterr().out
    assert out.strip().endswith("1/3 tasks completed (33%)")


def test_update_missing_file(env, capsys):
    assert main.main(["update", str(env / "missing.md"), "0"]) == 1
    assert "Error:" in capsys.readouterr().err


def test_output_dir_flag(env, fake_provider_factory, tmp_path):
    provider = fake_provider_factory("one task")
    target = tmp_path / "elsewhere"
    with patch("main.create_provider_from_config", return_value=provider):
        assert main.main(["--output-dir", str(target), "create", "Goal"]) == 0
    assert (target / "plan-goal.md").exists()


def test_bad_index_is_usage_error(env):
    with pytest.raises(SystemExit) as exc:
        main.main(["update", "plan.md", "first"])
    assert exc.value.code == 2


def test_count_flag_sets_requested_task_count(env, fake_provider_factory):
    provider = fake_provider_factory("a\nb")
    with patch("main.create_provider_from_config", return_value=provider):
        assert main.main(["--count", "2", "create", "Goal"]) == 0
    _, system_instruction = provider.calls[0]
    assert "into 2 specific" in system_instruction


@pytest.mark.parametrize("value", ["0", "-3", "many"])
def test_non_positive_count_is_usage_error(env, value, capsys):
    with pytest.raises(SystemExit) as exc:
        main.main(["--count", value, "create", "Goal"])
    assert exc.value.code == 2
    assert "task count" in capsys.readouterr().err
