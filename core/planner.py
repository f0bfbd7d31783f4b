# core/planner.py
"""
计划服务：生成 -> 渲染 -> 保存，以及读取 -> 更新 -> 保存。
所有失败都以 PlanResult(success=False) 返回给调用方，不会写入半成品。
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Iterable, Optional

from config import PlannerConfig
from core.document import Progress
from core.errors import FormatError, GenerationError
from core.generator import TaskGenerator
from core.renderer import DocumentRenderer
from core.updater import DocumentUpdater
from utils.logging_setup import request_context
from utils.plan_storage import plan_path, read_plan, write_plan

logger = logging.getLogger("Planner.Service")


@dataclass
class PlanResult:
    """统一的操作结果"""
    success: bool
    message: str
    path: Optional[str] = None
    progress: Optional[Progress] = None
    error_message: str = ""


def _failure(message: str, error: Exception, path: Optional[str] = None) -> PlanResult:
    return PlanResult(
        success=False,
        message=f"{message}: {error}",
        path=path,
        error_message=str(error),
    )


class PlanService:

    def __init__(
        self,
        cfg: PlannerConfig,
        generator: Optional[TaskGenerator] = None,
        renderer: Optional[DocumentRenderer] = None,
        updater: Optional[DocumentUpdater] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        self.cfg = cfg
        self.generator = generator
        self.renderer = renderer or DocumentRenderer()
        self.updater = updater or DocumentUpdater()
        self._today = today or (lambda: datetime.now(cfg.tzinfo).date())

    def create_plan(self, goal: str, count: Optional[int] = None) -> PlanResult:
        if self.generator is None:
            raise RuntimeError("create_plan requires a TaskGenerator")
        with request_context():
            logger.info(f"开始生成计划: {goal!r}")
            try:
                tasks = self.generator.generate(goal, count or self.cfg.task_count)
                content = self.renderer.build(goal, tasks, self._today())
            except (GenerationError, ValueError) as e:
                logger.error(f"计划生成失败: {e}")
                return _failure("Planning failed", e)

            path = plan_path(self.cfg.output_dir, self.renderer.filename(goal))
            try:
                write_plan(path, content)
            except OSError as e:
                return _failure("Failed to write plan file", e, path)

            progress = self.updater.summarize(content)
            logger.info(f"计划已保存: {path} ({progress.total} 个任务)")
            return PlanResult(
                success=True,
                message=f"Planning complete! Plan file created: {path}",
                path=path,
                progress=progress,
            )

    def update_plan(self, path: str, completed_indices: Iterable[int]) -> PlanResult:
        indices = set(completed_indices)
        with request_context():
            logger.info(f"更新计划 {path}，标记下标: {sorted(indices)}")
            try:
                content = read_plan(path)
                updated = self.updater.apply(content, indices)
            except FormatError as e:
                logger.error(f"计划格式错误 {path}: {e}")
                return _failure("Failed to update task completion", e, path)
            except (OSError, UnicodeDecodeError) as e:
                logger.error(f"读取计划失败 {path}: {e}")
                return _failure("Failed to read plan file", e, path)

            progress = self.updater.summarize(updated)
            if updated != content:
                try:
                    write_plan(path, updated)
                except OSError as e:
                    return _failure("Failed to write plan file", e, path)
            else:
                logger.info("计划内容无变化，跳过写入")

            logger.info(f"计划已更新: {path} {progress}")
            return PlanResult(
                success=True,
                message=(
                    f"Plan updated! {progress.completed}/{progress.total} "
                    f"tasks completed ({progress.percent}%)"
                ),
                path=path,
                progress=progress,
            )

    def show_plan(self, path: str) -> PlanResult:
        with request_context():
            try:
                progress = self.updater.summarize(read_plan(path))
            except FormatError as e:
                return _failure("Invalid plan file", e, path)
            except (OSError, UnicodeDecodeError) as e:
                return _failure("Failed to read plan file", e, path)
            return PlanResult(
                success=True,
                message=f"{path}: {progress.completed}/{progress.total} tasks completed ({progress.percent}%)",
                path=path,
                progress=progress,
            )
