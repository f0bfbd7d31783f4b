# config.py
import os
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

import pytz
from dotenv import load_dotenv

# 加载 .env 文件
load_dotenv()

logger = logging.getLogger("Planner.Config")


# --- 默认值 ---
DEFAULT_PROVIDER = "openai"
DEFAULT_TASK_COUNT = 5
DEFAULT_OUTPUT_DIR = "."
DEFAULT_TIMEZONE = "UTC"
DEFAULT_LOG_DIR = os.path.join("data", "logs")

# --- 模型配置 ---
DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "gemini": "gemini-2.5-flash",
}
GEMINI_TEMPERATURE = 0.4

# 各 provider 读取的 API key 环境变量
API_KEY_ENV = {
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
}


TASK_SYSTEM_PROMPT = """You are a helpful planning assistant. Your job is to break down a main task into {count} specific, actionable subtasks.
Each subtask should be:
1. Clear and concise
2. Actionable (start with a verb)
3. Specific enough to be completable
4. Logically ordered from first to last

Provide only the tasks, one per line, without numbering or bullet points."""

TASK_USER_PROMPT = 'Break down the following task into {count} specific, actionable subtasks: "{goal}"'


def _normalize_provider(value: str) -> str:
    provider = value.lower().strip()
    return "openai" if provider == "chatgpt" else provider


@dataclass(frozen=True)
class PlannerConfig:
    """一次运行所需的全部配置，显式传递给生成器和 provider。"""
    api_key: str
    provider: str = DEFAULT_PROVIDER
    model: str = DEFAULT_MODELS[DEFAULT_PROVIDER]
    api_base: Optional[str] = None
    task_count: int = DEFAULT_TASK_COUNT
    output_dir: str = DEFAULT_OUTPUT_DIR
    timezone: str = DEFAULT_TIMEZONE
    log_dir: str = DEFAULT_LOG_DIR
    log_level: str = "INFO"
    log_payloads: bool = False

    @property
    def tzinfo(self):
        return pytz.timezone(self.timezone)


def load_config(env: Optional[Mapping[str, str]] = None, require_api_key: bool = True) -> PlannerConfig:
    """
    从环境变量构建 PlannerConfig。

    Args:
        env: 环境变量映射，默认为 os.environ（测试时可传入 dict）。
        require_api_key: 只读取/更新计划时不需要 API key。

    Raises:
        ValueError: 缺少 API key、provider 不支持、TASK_COUNT 非正整数或时区无效。
    """
    env = os.environ if env is None else env

    provider = _normalize_provider(env.get("LLM_PROVIDER") or DEFAULT_PROVIDER)
    if provider not in API_KEY_ENV:
        raise ValueError(
            f"Unsupported LLM_PROVIDER: {provider}. Supported: {', '.join(API_KEY_ENV)}"
        )

    key_name = API_KEY_ENV[provider]
    api_key = env.get(key_name) or ""
    if require_api_key and not api_key:
        raise ValueError(f"{key_name} is not set in environment variables")

    raw_count = env.get("TASK_COUNT")
    if raw_count:
        try:
            task_count = int(raw_count)
        except ValueError:
            raise ValueError(f"TASK_COUNT must be an integer, got {raw_count!r}") from None
        if task_count <= 0:
            raise ValueError(f"TASK_COUNT must be positive, got {task_count}")
    else:
        task_count = DEFAULT_TASK_COUNT

    timezone = env.get("PLANNER_TIMEZONE") or DEFAULT_TIMEZONE
    try:
        pytz.timezone(timezone)
    except pytz.UnknownTimeZoneError:
        raise ValueError(f"Unknown PLANNER_TIMEZONE: {timezone}") from None

    if env.get("LLM_API_BASE"):
        logger.info(f"使用自定义 LLM_API_BASE: {env.get('LLM_API_BASE')}")

    return PlannerConfig(
        api_key=api_key,
        provider=provider,
        model=env.get("MODEL_NAME") or DEFAULT_MODELS[provider],
        api_base=env.get("LLM_API_BASE") or None,
        task_count=task_count,
        output_dir=env.get("PLAN_OUTPUT_DIR") or DEFAULT_OUTPUT_DIR,
        timezone=timezone,
        log_dir=env.get("LOG_DIR") or DEFAULT_LOG_DIR,
        log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        log_payloads=(env.get("LOG_LLM_PAYLOADS") or "").lower() == "full",
    )
