#!filepath: cypred/config/app_config.py
from __future__ import annotations

import os

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .log_config import LogConfig
from .io_config import IOConfig
from .training_config import TrainingConfig

CONFIG_ENV_VAR = "CYPRED_CONFIG"


def package_config_dir() -> str:
    """
    cypred/config/app_config.py → cypred/config
    """
    return os.path.abspath(os.path.dirname(__file__))


class AppConfig(BaseModel):
    log: LogConfig = Field(default_factory=LogConfig)
    io: IOConfig = Field(default_factory=IOConfig)
    training: TrainingConfig = Field(default_factory=TrainingConfig)

    @classmethod
    def load(cls, path: str | None = None) -> "AppConfig":
        """
        加载 YAML 配置 + .env

        路径优先级：
        - 显式参数 path
        - 环境变量 CYPRED_CONFIG（.env 中亦可）
        - 包内默认 cypred/config/base.yml
        """
        load_dotenv()

        if path is None:
            path = os.getenv(CONFIG_ENV_VAR) or os.path.join(
                package_config_dir(), "base.yml"
            )

        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        return cls(**raw)
