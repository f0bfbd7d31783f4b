# core/generator.py
"""
通过 LLM 把目标拆解为有序的子任务列表
"""

import logging
import re
import time
from typing import List, Optional

import config
from core.errors import GenerationError
from core.llm.base import LLMProvider, ChatMessage, MessageRole

logger = logging.getLogger("Planner.Generator")

# 去掉模型回复里可能出现的项目符号或编号
_LEADING_MARKER_RE = re.compile(r"^(?:[-*•]\s*|\d+[.)]\s+)")


def parse_task_lines(text: str) -> List[str]:
    tasks = []
    for line in text.split("\n"):
        line = line.strip()
        if not line:
            continue
        line = _LEADING_MARKER_RE.sub("", line, count=1).strip()
        if line:
            tasks.append(line)
    return tasks


class TaskGenerator:
    """generate(goal, count) -> 有序任务列表"""

    def __init__(self, provider: LLMProvider, task_count: int = config.DEFAULT_TASK_COUNT):
        self.provider = provider
        self.task_count = task_count

    def generate(self, goal: str, count: Optional[int] = None) -> List[str]:
        """
        Raises:
            GenerationError: 目标为空、provider 调用失败或回复中没有任务
        """
        if not goal or not goal.strip():
            raise GenerationError("Goal must not be empty")

        count = count or self.task_count
        system_instruction = config.TASK_SYSTEM_PROMPT.format(count=count)
        user_prompt = config.TASK_USER_PROMPT.format(count=count, goal=goal)

        response = self.provider.chat(
            [ChatMessage(role=MessageRole.USER, text=user_prompt, timestamp=time.time())],
            system_instruction,
        )
        if not response.success:
            logger.error(f"任务生成失败 provider={self.provider.provider_name}: {response.error_message}")
            raise GenerationError(f"Failed to generate task list: {response.error_message}")

        tasks = parse_task_lines(response.text)
        if not tasks:
            raise GenerationError("Failed to generate task list: model reply contained no tasks")

        if len(tasks) != count:
            logger.warning(f"生成的任务数量与预期不符: 期望 {count}, 实际 {len(tasks)}")
        logger.info(f"已为目标生成 {len(tasks)} 个任务")
        return tasks
