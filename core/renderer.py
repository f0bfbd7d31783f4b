# core/renderer.py
"""
根据目标和任务列表生成计划文档（纯文本，无副作用）
"""

from datetime import date
from typing import Iterable, List

from core.document import (
    TASKS_HEADER,
    PROGRESS_HEADER,
    TITLE_PREFIX,
    UNCHECKED_MARKER,
    format_progress,
    plan_filename,
)


class DocumentRenderer:
    """构建新的计划文档。进度行固定为 0/N。"""

    def build(self, goal: str, tasks: Iterable[str], generated_on: date) -> str:
        items = self.clean_tasks(tasks)
        if not items:
            raise ValueError("Cannot render a plan without tasks")

        task_lines = "\n".join(f"{UNCHECKED_MARKER} {task}" for task in items)

        return f"""{TITLE_PREFIX}{goal}

## Overview
This project plan was generated on {generated_on.isoformat()} to accomplish the task: "{goal}".

{TASKS_HEADER}
{task_lines}

{PROGRESS_HEADER}
{format_progress(0, len(items))}

## Timeline
Estimated completion date: *To be determined*

## Resources Needed
*To be determined*

## Notes
This plan was automatically generated by the planning agent.
"""

    @staticmethod
    def clean_tasks(tasks: Iterable[str]) -> List[str]:
        """去掉首尾空白，丢弃空条目"""
        return [task.strip() for task in tasks if task and task.strip()]

    @staticmethod
    def filename(goal: str) -> str:
        return plan_filename(goal)
