# core/llm/openai.py
"""
OpenAI LLM Provider 实现
仅使用 Responses API（弃用 Chat Completions）
"""

import logging
import time
from typing import List, Optional

from openai import OpenAI
from openai import APIError, APIConnectionError, RateLimitError

from core.llm.base import (
    LLMProvider,
    ChatMessage,
    ChatResponse,
    MessageRole,
    truncate_for_log,
)

logger = logging.getLogger("Planner.LLM.OpenAI")


def _extract_output_text(response) -> str:
    """优先使用 output_text，缺失时从 output 的 message 内容中拼接。"""
    text = getattr(response, "output_text", "") or ""
    if text:
        return text

    for item in getattr(response, "output", None) or []:
        item_type = item.get("type") if isinstance(item, dict) else getattr(item, "type", None)
        if item_type != "message":
            continue
        content = item.get("content", []) if isinstance(item, dict) else getattr(item, "content", [])
        for c in (content if isinstance(content, list) else [content]):
            if isinstance(c, dict) and c.get("type") == "output_text":
                text += c.get("text", "")
            elif getattr(c, "type", None) == "output_text":
                text += getattr(c, "text", "") or ""
            elif isinstance(c, str):
                text += c
    return text


class OpenAIProvider(LLMProvider):
    """OpenAI Responses API 提供者"""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        api_base: Optional[str] = None,
        log_payloads: bool = False
    ):
        super().__init__(model, log_payloads)

        client_kwargs = {"api_key": api_key}
        if api_base:
            client_kwargs["base_url"] = api_base

        self.client = OpenAI(**client_kwargs)

        logger.info(f"OpenAI Provider 初始化完成，Model: {model}")
        if api_base:
            logger.info(f"使用自定义 Base URL: {api_base}")

    @property
    def provider_name(self) -> str:
        return "openai"

    def _convert_history_to_openai_format(
        self,
        messages: List[ChatMessage],
        system_instruction: str
    ) -> List[dict]:
        """将统一消息格式转换为 OpenAI 格式"""
        formatted = []

        if system_instruction:
            formatted.append({
                "role": "system",
                "content": system_instruction
            })

        for msg in messages:
            role = "user" if msg.role == MessageRole.USER else "assistant"
            formatted.append({
                "role": role,
                "content": msg.text
            })

        return formatted

    def chat(
        self,
        messages: List[ChatMessage],
        system_instruction: str,
    ) -> ChatResponse:
        """使用 Responses API 发送消息并获取响应"""
        start_time = time.time()
        try:
            openai_messages = self._convert_history_to_openai_format(messages, system_instruction)

            # 日志只记录请求概要
            preview_text = truncate_for_log(messages[-1].text if messages else "")
            logger.info(
                "OpenAI 请求: model=%s messages=%s input_preview=\"%s\"",
                self.model,
                len(messages),
                preview_text,
            )

            response = self.client.responses.create(
                model=self.model,
                input=openai_messages,
            )
            response_text = _extract_output_text(response)
            elapsed = time.time() - start_time

            if not response_text.strip():
                logger.warning("OpenAI 返回空内容 model=%s", self.model)
                self._emit_full_payload(messages, system_instruction, False,
                                        error_message="empty response", elapsed=elapsed)
                return ChatResponse(
                    text="",
                    success=False,
                    error_message="Model returned an empty response",
                    raw_response=response
                )

            logger.info(
                "OpenAI 完成 model=%s elapsed_sec=%.3f response_preview=\"%s\"",
                self.model,
                elapsed,
                truncate_for_log(response_text, 400)
            )
            self._emit_full_payload(messages, system_instruction, True,
                                    response_text=response_text, elapsed=elapsed)

            return ChatResponse(
                text=response_text,
                success=True,
                raw_response=response
            )

        except APIConnectionError as e:
            logger.error(f"OpenAI API 连接错误: {e}")
            self._emit_full_payload(messages, system_instruction, False, error_message=str(e))
            return ChatResponse(
                text="",
                success=False,
                error_message=f"Could not reach the OpenAI API: {e}"
            )
        except RateLimitError as e:
            logger.error(f"OpenAI API 限流: {e}")
            self._emit_full_payload(messages, system_instruction, False, error_message=str(e))
            return ChatResponse(
                text="",
                success=False,
                error_message=f"OpenAI API rate limit exceeded: {e}"
            )
        except APIError as e:
            logger.error(f"OpenAI API 错误: {e}")
            self._emit_full_payload(messages, system_instruction, False, error_message=str(e))
            return ChatResponse(
                text="",
                success=False,
                error_message=f"OpenAI API error: {e}"
            )
        except Exception as e:
            logger.exception(f"OpenAI Provider 异常: {e}")
            self._emit_full_payload(messages, system_instruction, False, error_message=str(e))
            return ChatResponse(
                text="",
                success=False,
                error_message=f"{type(e).__name__}: {e}"
            )
