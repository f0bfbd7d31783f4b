# core/llm/__init__.py
"""
LLM Provider Abstraction Layer
支持多种 LLM 后端（Gemini, OpenAI 等）
"""

from core.llm.base import LLMProvider, ChatMessage, ChatResponse, MessageRole
from core.llm.factory import create_llm_provider, create_provider_from_config

__all__ = [
    "LLMProvider",
    "ChatMessage",
    "ChatResponse",
    "MessageRole",
    "create_llm_provider",
    "create_provider_from_config",
]
