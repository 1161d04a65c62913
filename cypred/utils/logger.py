#!filepath: cypred/utils/logger.py
import os
import sys
from loguru import logger
from typing import Optional


class Logging:
    """
    生产级日志模块
    ---------------------------------------
    - stderr sink 始终可用
    - 可选文件 sink：按日期切割 + 保留周期
    ---------------------------------------
    """

    def __init__(
        self,
        log_dir: Optional[str] = None,
        rotation: str = "1 day",
        retention: str = "30 days",
        log_level: str = "INFO",
    ):
        self.log_dir = log_dir
        self.rotation = rotation
        self.retention = retention
        self.level = log_level

        if self.log_dir is not None:
            os.makedirs(self.log_dir, exist_ok=True)
        self._configure()

    def _configure(self) -> None:
        """
        配置全局 logger（覆盖之前所有 sink）
        """

        logger.remove()

        logger.add(
            sink=sys.stderr,
            level=self.level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
        )

        if self.log_dir is not None:
            logger.add(
                sink=f"{self.log_dir}/{{time:YYYY-MM-DD}}.log",
                rotation=self.rotation,
                retention=self.retention,
                level=self.level,
                format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
                enqueue=True,
                backtrace=True,
                diagnose=True,
            )
            logger.info(f"[Logging] file sink initialized dir={self.log_dir}")

    # ---------- 基础接口封装 ----------
    def debug(self, msg: str, *args, **kwargs):
        logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        logger.error(msg, *args, **kwargs)


def init_logging(cfg) -> Logging:
    """
    用 LogConfig 重新配置全局 logs（CLI 入口调用一次）

    原地修改，已经 `from cypred import logs` 的模块无需重新导入。
    """
    logs.log_dir = cfg.dir
    logs.rotation = cfg.rotation
    logs.retention = cfg.retention
    logs.level = cfg.level

    if logs.log_dir is not None:
        os.makedirs(logs.log_dir, exist_ok=True)
    logs._configure()
    return logs


# 默认全局 logs：仅 stderr（可被 init_logging 重新配置）
logs = Logging()
