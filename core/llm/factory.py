# core/llm/factory.py
"""
LLM Provider 工厂
根据配置创建相应的 LLM 提供者实例
"""

import logging
from typing import Optional

from core.llm.base import LLMProvider

logger = logging.getLogger("Planner.LLM.Factory")

SUPPORTED_PROVIDERS = ("gemini", "openai")


def create_llm_provider(
    provider_type: str,
    api_key: str,
    model: str,
    api_base: Optional[str] = None,
    log_payloads: bool = False
) -> LLMProvider:
    """
    工厂函数：根据配置创建 LLM 提供者

    Args:
        provider_type: 提供者类型 ("gemini" 或 "openai")
        api_key: API 密钥
        model: 模型名称
        api_base: 自定义 API 基础 URL（可选）
        log_payloads: 是否记录完整请求/响应

    Returns:
        LLMProvider: 对应的 LLM 提供者实例

    Raises:
        ValueError: 如果提供者类型不支持
    """
    provider_type = provider_type.lower().strip()

    if provider_type == "gemini":
        from core.llm.gemini import GeminiProvider
        return GeminiProvider(
            api_key=api_key,
            model=model,
            api_base=api_base,
            log_payloads=log_payloads
        )

    elif provider_type in ("openai", "chatgpt"):
        from core.llm.openai import OpenAIProvider
        return OpenAIProvider(
            api_key=api_key,
            model=model,
            api_base=api_base,
            log_payloads=log_payloads
        )

    else:
        raise ValueError(
            f"Unsupported LLM provider: {provider_type}. "
            f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}"
        )


def create_provider_from_config(cfg) -> LLMProvider:
    """根据 PlannerConfig 创建 provider"""
    logger.debug(f"创建 LLM provider: {cfg.provider} / {cfg.model}")
    return create_llm_provider(
        provider_type=cfg.provider,
        api_key=cfg.api_key,
        model=cfg.model,
        api_base=cfg.api_base,
        log_payloads=cfg.log_payloads,
    )
