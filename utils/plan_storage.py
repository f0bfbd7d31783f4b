# utils/plan_storage.py
"""
计划文件读写
每个目标对应一个 markdown 文件，写入采用临时文件 + 原子替换
"""
import logging
import os

logger = logging.getLogger("Planner.Storage")


def plan_path(output_dir: str, filename: str) -> str:
    return os.path.join(output_dir, os.path.basename(filename))


def read_plan(path: str) -> str:
    """
    读取计划文件。newline="" 保证原有换行符原样返回。

    Raises:
        FileNotFoundError: 文件不存在
        OSError: 读取失败
    """
    with open(path, 'r', encoding='utf-8', newline='') as f:
        return f.read()


def write_plan(path: str, content: str) -> str:
    """
    原子性写入计划文件，同名文件会被覆盖。

    Raises:
        OSError: 写入失败（临时文件会被清理）
    """
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    temp_path = path + ".tmp"
    try:
        with open(temp_path, 'w', encoding='utf-8', newline='') as f:
            f.write(content)
        os.replace(temp_path, path)
    except OSError as e:
        logger.error(f"保存 {path} 失败: {e}")
        if os.path.exists(temp_path):
            try:
                os.remove(temp_path)
            except OSError:
                pass
        raise

    logger.debug(f"已写入计划文件: {path}")
    return path
