"""
配置加载器

负责从 YAML 文件加载打包配置并进行验证。
"""

import copy
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .schema import PackageConfig


class ConfigError(Exception):
    """配置错误基类"""
    pass


class ConfigValidationError(ConfigError):
    """配置验证错误"""

    def __init__(self, message: str, errors: List[Dict[str, Any]]):
        super().__init__(message)
        self.errors = errors

    def format_errors(self) -> str:
        """格式化错误信息为人类可读的格式"""
        formatted = []
        for error in self.errors:
            loc = " -> ".join(str(item) for item in error.get('loc', []))
            msg = error.get('msg', '未知错误')
            input_val = error.get('input', '')

            if loc:
                formatted.append(f"字段 '{loc}': {msg}")
                if input_val:
                    formatted.append(f"  输入值: {input_val}")
            else:
                formatted.append(f"根级别: {msg}")

        return "\n".join(formatted)

    def format_errors_json(self) -> str:
        """格式化错误信息为 JSON 格式"""
        return json.dumps(self.errors, ensure_ascii=False, indent=2, default=str)


@dataclass
class ValidationResult:
    """配置验证结果"""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    config: Optional[PackageConfig] = None


def _plain_errors(e: ValidationError) -> List[Dict[str, Any]]:
    """提取可 JSON 序列化的错误字段"""
    return [
        {
            'loc': list(err.get('loc', ())),
            'msg': err.get('msg', ''),
            'type': err.get('type', ''),
            'input': err.get('input') if isinstance(err.get('input'), (str, int, float, bool)) else '',
        }
        for err in e.errors()
    ]


class ConfigLoader:
    """配置加载器"""

    def __init__(self):
        self.yaml = YAML(typ='safe')
        self.yaml.default_flow_style = False
        self.yaml.width = 4096  # 避免长行自动换行

    def load_from_file(self, config_path: Union[str, Path]) -> PackageConfig:
        """从文件加载配置

        Args:
            config_path: 配置文件路径

        Returns:
            PackageConfig: 验证后的配置实例

        Raises:
            ConfigError: 配置加载或验证错误
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise ConfigError(f"配置文件不存在: {config_path}")

        if not config_path.is_file():
            raise ConfigError(f"配置路径不是文件: {config_path}")

        if config_path.suffix.lower() not in ['.yaml', '.yml']:
            raise ConfigError(f"配置文件必须是 .yaml 或 .yml 格式: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                raw_data = self.yaml.load(f)
        except YAMLError as e:
            raise ConfigError(f"YAML 解析错误: {e}") from e
        except OSError as e:
            raise ConfigError(f"文件读取错误: {e}") from e

        if raw_data is None:
            raise ConfigError("配置文件为空")

        if not isinstance(raw_data, dict):
            raise ConfigError("配置文件根级别必须是对象/字典格式")

        return self.load_from_dict(raw_data, base_path=config_path.parent)

    def load_from_dict(self, data: Dict[str, Any], base_path: Optional[Path] = None) -> PackageConfig:
        """从字典加载配置

        Args:
            data: 配置数据字典
            base_path: 相对路径的基准路径

        Returns:
            PackageConfig: 验证后的配置实例

        Raises:
            ConfigValidationError: 配置验证错误
        """
        if base_path:
            data = copy.deepcopy(data)
            self._resolve_relative_paths(data, Path(base_path))

        try:
            return PackageConfig.from_dict(data)
        except ValidationError as e:
            raise ConfigValidationError("配置验证失败", _plain_errors(e)) from e

    def save_to_file(self, config: PackageConfig, output_path: Union[str, Path]) -> None:
        """保存配置到文件

        Raises:
            ConfigError: 保存错误
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(output_path, 'w', encoding='utf-8') as f:
                self.yaml.dump(config.to_dict(), f)
        except (OSError, YAMLError) as e:
            raise ConfigError(f"保存配置文件失败: {e}") from e

    def validate_file(self, config_path: Union[str, Path]) -> List[Dict[str, Any]]:
        """验证配置文件并返回错误列表

        Returns:
            List[Dict]: 错误列表，空列表表示验证通过
        """
        try:
            self.load_from_file(config_path)
            return []
        except ConfigValidationError as e:
            return e.errors
        except ConfigError as e:
            return [{
                'loc': [],
                'msg': str(e),
                'type': 'config_error'
            }]

    def _resolve_relative_paths(self, data: Dict[str, Any], base_path: Path) -> None:
        """将配置中的相对路径解析为相对于配置文件目录的绝对路径"""
        for item in data.get('inputs') or []:
            if isinstance(item, dict):
                self._resolve_key(item, 'path', base_path)

        for item in data.get('files') or []:
            if isinstance(item, dict):
                self._resolve_key(item, 'src', base_path)

        makeself = data.get('makeself')
        if isinstance(makeself, dict):
            for key in ('install_script_file', 'lsm_file'):
                self._resolve_key(makeself, key, base_path)

        # 输出路径同样相对于配置文件
        self._resolve_key(data, 'output', base_path)

    @staticmethod
    def _resolve_key(container: Dict[str, Any], key: str, base_path: Path) -> None:
        value = container.get(key)
        if isinstance(value, str) and value and not Path(value).is_absolute():
            container[key] = str((base_path / value).resolve())


# 全局加载器实例
config_loader = ConfigLoader()


def load_config(config_path: Union[str, Path]) -> PackageConfig:
    """便捷函数：加载配置文件"""
    return config_loader.load_from_file(config_path)


def validate_config(config_path: Union[str, Path]) -> List[Dict[str, Any]]:
    """便捷函数：验证配置文件"""
    return config_loader.validate_file(config_path)


def validate_config_with_result(config_or_path: Union[PackageConfig, str, Path]) -> ValidationResult:
    """验证配置并返回详细结果"""
    try:
        if isinstance(config_or_path, (str, Path)):
            config = load_config(config_or_path)
        else:
            config = config_or_path
        return ValidationResult(is_valid=True, config=config)

    except ConfigValidationError as e:
        messages = []
        for err in e.errors:
            loc = " -> ".join(str(item) for item in err.get('loc', []))
            msg = err.get('msg', '未知错误')
            messages.append(f"字段 '{loc}': {msg}" if loc else f"根级别: {msg}")
        return ValidationResult(is_valid=False, errors=messages)

    except ConfigError as e:
        return ValidationResult(is_valid=False, errors=[f"配置加载失败: {e}"])


def save_config(config: PackageConfig, output_path: Union[str, Path]) -> None:
    """便捷函数：保存配置文件"""
    config_loader.save_to_file(config, output_path)
