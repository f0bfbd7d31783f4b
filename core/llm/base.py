# core/llm/base.py
"""
LLM Provider 抽象基类
定义所有 LLM 提供者必须实现的接口
"""

import json
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Any, Optional
from enum import Enum

from utils.logging_setup import get_request_id

payload_logger = logging.getLogger("Planner.LLM.Payload")


class MessageRole(Enum):
    """消息角色"""
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass
class ChatMessage:
    """统一的消息格式"""
    role: MessageRole
    text: str
    timestamp: float = 0.0

    def to_dict(self) -> dict:
        return {
            "role": self.role.value,
            "text": self.text,
            "timestamp": self.timestamp
        }


@dataclass
class ChatResponse:
    """统一的响应格式"""
    text: str
    success: bool = True
    error_message: str = ""
    raw_response: Any = None  # 保留原始响应供调试


def truncate_for_log(text: str, max_length: int = 300) -> str:
    """限制日志中的文本长度，避免打印过长的内容。"""
    if not text:
        return ""
    clean = text.replace("\n", " ")
    return clean[:max_length] + ("..." if len(clean) > max_length else "")


class LLMProvider(ABC):
    """
    LLM 提供者抽象基类
    所有具体的 LLM 实现（Gemini, OpenAI 等）都必须继承此类
    """

    def __init__(self, model: str, log_payloads: bool = False):
        self.model = model
        self.log_payloads = log_payloads

    @abstractmethod
    def chat(
        self,
        messages: List[ChatMessage],
        system_instruction: str,
    ) -> ChatResponse:
        """
        发送消息并获取响应。实现不抛异常，失败时返回 success=False。

        Args:
            messages: 消息列表，最后一条为本次用户输入
            system_instruction: 系统提示词

        Returns:
            ChatResponse: 统一格式的响应
        """
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """返回提供者名称（如 'gemini', 'openai'）"""
        pass

    def _emit_full_payload(
        self,
        messages: List[ChatMessage],
        system_instruction: str,
        success: bool,
        response_text: str = "",
        error_message: str = "",
        elapsed: Optional[float] = None,
    ) -> None:
        """log_payloads 开启时把完整请求/响应写入 payload 日志（单行 JSON）。"""
        if not self.log_payloads:
            return
        payload = {
            "timestamp": time.time(),
            "request_id": get_request_id(),
            "provider": self.provider_name,
            "model": self.model,
            "elapsed_sec": elapsed,
            "request": {
                "system_instruction": system_instruction,
                "messages": [msg.to_dict() for msg in messages],
            },
            "response": {
                "success": success,
                "text": response_text,
                "error_message": error_message,
            }
        }
        payload_logger.info(json.dumps(payload, ensure_ascii=False))
