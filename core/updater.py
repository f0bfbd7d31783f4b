# core/updater.py
"""
更新已有计划文档：勾选指定下标的任务并重算进度行。
任务区块和进度行以外的内容逐字节保留。
"""

import logging
from typing import Iterable

from core.document import (
    CHECKED_MARKER,
    PROGRESS_HEADER,
    UNCHECKED_MARKER,
    Progress,
    format_progress,
    find_header,
    join_lines,
    locate_task_section,
    parse_task_line,
    progress_of,
    split_lines,
)

logger = logging.getLogger("Planner.Updater")


class DocumentUpdater:

    def apply(self, document_text: str, completed_indices: Iterable[int]) -> str:
        """
        把 completed_indices 中的任务标记为完成，返回新的文档文本。

        - 越界下标直接忽略
        - 未给出的下标保持原状态（不会取消勾选）
        - 没有 "## Progress" 时只更新任务区块

        Raises:
            FormatError: 文档中没有任务区块
        """
        lines = split_lines(document_text)
        section = locate_task_section(lines)
        total = len(section.items)

        requested = set(completed_indices)
        for index in sorted(requested):
            if not 0 <= index < total:
                logger.debug(f"忽略越界的任务下标: {index} (共 {total} 项)")
                continue
            line_no = section.start + index
            line = lines[line_no]
            if line.startswith(UNCHECKED_MARKER):
                lines[line_no] = CHECKED_MARKER + line[len(UNCHECKED_MARKER):]
                section.items[index] = parse_task_line(lines[line_no])

        progress = progress_of(section.items)

        progress_index = find_header(lines, PROGRESS_HEADER, prefix_match=True)
        if progress_index < 0:
            logger.warning("未找到 Progress 区块，进度行保持不变")
            return join_lines(lines)

        summary = format_progress(progress.completed, progress.total)
        target = progress_index + 1
        if target < len(lines):
            if lines[target].endswith("\r"):
                summary += "\r"
            lines[target] = summary
        else:
            lines.append(summary)

        return join_lines(lines)

    def summarize(self, document_text: str) -> Progress:
        """根据任务区块计算当前进度（不修改文档）"""
        section = locate_task_section(split_lines(document_text))
        return progress_of(section.items)
