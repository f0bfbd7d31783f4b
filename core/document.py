# core/document.py
"""
计划文档的语法与数据模型。

文档按行解析（只以 "\\n" 切分，"\\r" 留在行内），因此
"\\n".join(split_lines(text)) == text 始终成立。

    tasks_header  := 去除首尾空白后恰好为 "## Tasks" 的行
    task_line     := 以 "- " 开头的行
    checkbox_line := "- [" (" " | "x" | "X") "]" [" "] text
    task_section  := tasks_header 之后连续的 task_line
    progress_hdr  := 去除首尾空白后以 "## Progress" 开头的第一行
    progress_line := "- <completed>/<total> tasks completed (<percent>%)"
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from core.errors import FormatError

TITLE_PREFIX = "# Project Plan: "
SECTION_PREFIX = "## "
TASKS_HEADER = "## Tasks"
PROGRESS_HEADER = "## Progress"
TASK_LINE_PREFIX = "- "
UNCHECKED_MARKER = "- [ ]"
CHECKED_MARKER = "- [x]"

CHECKBOX_RE = re.compile(r"^- \[(?P<mark>[ xX])\] ?(?P<text>.*)$")
GENERATED_ON_RE = re.compile(r"generated on (\d{4}-\d{2}-\d{2})")
_FILENAME_RE = re.compile(r"[^a-z0-9]")


@dataclass
class TaskItem:
    description: str
    done: bool = False


@dataclass(frozen=True)
class Progress:
    completed: int
    total: int
    percent: int

    def __str__(self) -> str:
        return format_progress(self.completed, self.total)


@dataclass
class TaskSection:
    """任务区块在行列表中的位置，[start, end)"""
    start: int
    end: int
    items: List[TaskItem] = field(default_factory=list)


@dataclass
class PlanDocument:
    title: str
    created_date: Optional[date]
    tasks: List[TaskItem] = field(default_factory=list)
    freeform_sections: List[str] = field(default_factory=list)

    @property
    def progress(self) -> Progress:
        return progress_of(self.tasks)


def split_lines(text: str) -> List[str]:
    return text.split("\n")


def join_lines(lines: List[str]) -> str:
    return "\n".join(lines)


def plan_filename(goal: str) -> str:
    """小写后把 [a-z0-9] 以外的字符全部替换为 "-"；不同目标可能得到同一个文件名。"""
    return f"plan-{_FILENAME_RE.sub('-', goal.lower())}.md"


def compute_percent(completed: int, total: int) -> int:
    if total <= 0:
        return 0
    # 四舍五入（half-up），不用 round() 的银行家舍入
    return math.floor(completed * 100 / total + 0.5)


def format_progress(completed: int, total: int) -> str:
    return f"- {completed}/{total} tasks completed ({compute_percent(completed, total)}%)"


def progress_of(tasks: List[TaskItem]) -> Progress:
    completed = sum(1 for task in tasks if task.done)
    total = len(tasks)
    return Progress(completed, total, compute_percent(completed, total))


def is_task_line(line: str) -> bool:
    return line.startswith(TASK_LINE_PREFIX)


def parse_task_line(line: str) -> TaskItem:
    """解析一行任务；没有复选框的任务行视为未完成。"""
    body = line.rstrip("\r")
    match = CHECKBOX_RE.match(body)
    if match:
        return TaskItem(
            description=match.group("text") or "",
            done=match.group("mark") in ("x", "X"),
        )
    return TaskItem(description=body[len(TASK_LINE_PREFIX):], done=False)


def find_header(lines: List[str], header: str, prefix_match: bool = False) -> int:
    """返回第一个匹配标题行的下标，找不到时返回 -1。"""
    for i, line in enumerate(lines):
        stripped = line.strip()
        if stripped == header or (prefix_match and stripped.startswith(header)):
            return i
    return -1


def locate_task_section(lines: List[str]) -> TaskSection:
    header_index = find_header(lines, TASKS_HEADER)
    if header_index < 0:
        raise FormatError("Could not find task list section in plan document")

    start = header_index + 1
    end = start
    while end < len(lines) and is_task_line(lines[end]):
        end += 1

    return TaskSection(
        start=start,
        end=end,
        items=[parse_task_line(line) for line in lines[start:end]],
    )


def _collect_sections(lines: List[str]) -> List[str]:
    """把 Tasks / Progress 以外的每个 "## " 区块原样收集为文本块。"""
    sections: List[str] = []
    current: Optional[List[str]] = None
    for line in lines:
        if line.startswith(SECTION_PREFIX):
            if current is not None:
                sections.append(join_lines(current))
            stripped = line.strip()
            if stripped == TASKS_HEADER or stripped.startswith(PROGRESS_HEADER):
                current = None
            else:
                current = [line]
        elif current is not None:
            current.append(line)
    if current is not None:
        sections.append(join_lines(current))
    return sections


def parse_document(text: str) -> PlanDocument:
    lines = split_lines(text)
    section = locate_task_section(lines)

    title = ""
    for line in lines:
        if line.startswith("# "):
            title = line.rstrip("\r")
            if title.startswith(TITLE_PREFIX):
                title = title[len(TITLE_PREFIX):]
            else:
                title = title[2:]
            break

    created: Optional[date] = None
    match = GENERATED_ON_RE.search(text)
    if match:
        try:
            created = date.fromisoformat(match.group(1))
        except ValueError:
            created = None

    return PlanDocument(
        title=title,
        created_date=created,
        tasks=section.items,
        freeform_sections=_collect_sections(lines),
    )
