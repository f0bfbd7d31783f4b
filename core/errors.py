# core/errors.py
"""
计划文档相关的异常类型
"""


class PlanError(Exception):
    """所有计划操作异常的基类"""


class GenerationError(PlanError):
    """任务生成失败：provider 不可达，或返回的内容里没有可用的任务"""


class FormatError(PlanError):
    """计划文档中找不到任务区块"""
