"""配置和 Schema 模块

提供 YAML 打包配置的加载、验证和保存功能。
"""

from .schema import (
    CompressionFormat,
    FileInfoModel,
    FileModel,
    InputPathModel,
    MakeselfConfig,
    PackageConfig,
)
from .loader import (
    ConfigError,
    ConfigLoader,
    ConfigValidationError,
    ValidationResult,
    config_loader,
    load_config,
    save_config,
    validate_config,
    validate_config_with_result,
)

__all__ = [
    # 模型
    "CompressionFormat",
    "FileInfoModel",
    "FileModel",
    "InputPathModel",
    "MakeselfConfig",
    "PackageConfig",

    # 加载器
    "ConfigLoader",
    "ValidationResult",
    "config_loader",

    # 异常类
    "ConfigError",
    "ConfigValidationError",

    # 便捷函数
    "load_config",
    "save_config",
    "validate_config",
    "validate_config_with_result",
]
