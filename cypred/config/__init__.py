from .app_config import AppConfig
from .io_config import IOConfig, ColumnConfig
from .log_config import LogConfig
from .training_config import TrainingConfig, FeaturizerConfig

__all__ = [
    "AppConfig",
    "IOConfig",
    "ColumnConfig",
    "LogConfig",
    "TrainingConfig",
    "FeaturizerConfig",
]
