# core/llm/gemini.py
"""
Gemini LLM Provider 实现
"""

import logging
import time
from typing import List, Optional

from google import genai
from google.genai import errors, types

import config
from core.llm.base import (
    LLMProvider,
    ChatMessage,
    ChatResponse,
    MessageRole,
    truncate_for_log,
)

logger = logging.getLogger("Planner.LLM.Gemini")


def _get_response_text(response: types.GenerateContentResponse) -> str:
    """拼接首个候选的文本部分，跳过 thought"""
    if not response.candidates or not response.candidates[0].content:
        return ""
    parts = response.candidates[0].content.parts or []
    text = ""
    for part in parts:
        if getattr(part, "text", None) and not getattr(part, "thought", False):
            text += part.text
    return text


class GeminiProvider(LLMProvider):
    """Gemini API 提供者"""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        api_base: Optional[str] = None,
        log_payloads: bool = False
    ):
        super().__init__(model, log_payloads)

        # 配置 HTTP 选项 (代理)
        http_options = None
        if api_base:
            http_options = types.HttpOptions(
                base_url=api_base,
                api_version="v1beta"
            )

        self.client = genai.Client(
            api_key=api_key,
            http_options=http_options
        )

        logger.info(f"Gemini Provider 初始化完成，Model: {model}")

    @property
    def provider_name(self) -> str:
        return "gemini"

    def _convert_history_to_gemini_format(self, messages: List[ChatMessage]) -> List[dict]:
        """将统一消息格式转换为 Gemini 格式"""
        formatted_history = []
        for msg in messages:
            # Gemini 使用 "user" 和 "model" 作为角色
            role = "user" if msg.role == MessageRole.USER else "model"
            formatted_history.append({
                "role": role,
                "parts": [{"text": msg.text}]
            })
        return formatted_history

    def chat(
        self,
        messages: List[ChatMessage],
        system_instruction: str,
    ) -> ChatResponse:
        """发送消息并获取响应"""
        start_time = time.time()
        try:
            contents = self._convert_history_to_gemini_format(messages)

            logger.info(
                "Gemini 请求: model=%s messages=%s input_preview=\"%s\"",
                self.model,
                len(messages),
                truncate_for_log(messages[-1].text if messages else ""),
            )

            response = self.client.models.generate_content(
                model=self.model,
                contents=contents,
                config=types.GenerateContentConfig(
                    system_instruction=system_instruction,
                    temperature=config.GEMINI_TEMPERATURE,
                ),
            )
            response_text = _get_response_text(response)
            elapsed = time.time() - start_time

            if not response_text.strip():
                logger.warning("Gemini 返回空内容 model=%s", self.model)
                self._emit_full_payload(messages, system_instruction, False,
                                        error_message="empty response", elapsed=elapsed)
                return ChatResponse(
                    text="",
                    success=False,
                    error_message="Model returned an empty response",
                    raw_response=response
                )

            logger.info(
                "Gemini 完成 model=%s elapsed_sec=%.3f response_preview=\"%s\"",
                self.model,
                elapsed,
                truncate_for_log(response_text, 400),
            )
            self._emit_full_payload(messages, system_instruction, True,
                                    response_text=response_text, elapsed=elapsed)

            return ChatResponse(
                text=response_text,
                success=True,
                raw_response=response
            )

        except errors.APIError as e:
            error_msg = e.message if hasattr(e, 'message') else str(e)
            logger.error(f"Gemini API 错误: {error_msg}")
            self._emit_full_payload(messages, system_instruction, False, error_message=error_msg)
            return ChatResponse(
                text="",
                success=False,
                error_message=f"Gemini API error: {error_msg}"
            )
        except Exception as e:
            logger.exception(f"Gemini Provider 异常: {e}")
            self._emit_full_payload(messages, system_instruction, False, error_message=str(e))
            return ChatResponse(
                text="",
                success=False,
                error_message=f"{type(e).__name__}: {e}"
            )
