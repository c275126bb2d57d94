"""
配置 Schema 定义

使用 Pydantic 定义 makeself 归档及打包项目的配置模型，支持验证和类型检查。
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator, model_validator


class CompressionFormat(str, Enum):
    """makeself 支持的压缩格式"""
    NONE = "none"
    GZIP = "gzip"
    BZIP2 = "bzip2"
    XZ = "xz"
    LZO = "lzo"
    LZ4 = "lz4"
    ZSTD = "zstd"
    PIGZ = "pigz"
    COMPRESS = "compress"

    @property
    def flag(self) -> str:
        """对应的 makeself 命令行参数"""
        if self is CompressionFormat.NONE:
            return "--nocomp"
        return f"--{self.value}"


class MakeselfConfig(BaseModel):
    """makeself 归档的有效配置

    在构建器创建时确定，关闭归档时一次性消费，之后不可修改。
    """

    output_path: Optional[str] = Field(None, description="覆盖输出路径")
    install_script: Optional[str] = Field(None, description="内联安装脚本内容")
    install_script_file: Optional[Path] = Field(None, description="安装脚本文件路径（优先于内联内容）")
    label: Optional[str] = Field(None, description="解压时显示的标签")
    compression: CompressionFormat = Field(
        CompressionFormat.NONE,
        description="压缩格式；载荷多为已压缩的二进制文件，默认不压缩",
    )
    extra_args: Tuple[str, ...] = Field((), description="透传给 makeself 的额外参数")
    lsm_content: Optional[str] = Field(None, description="内联 LSM 描述内容")
    lsm_file: Optional[Path] = Field(None, description="LSM 描述文件路径（优先于内联内容）")

    model_config = {
        "extra": "forbid",
        "frozen": True,
    }

    @field_validator("compression", mode="before")
    @classmethod
    def coerce_toggle(cls, v: Any) -> Any:
        """布尔值作为开关：True 表示 gzip，False 表示不压缩"""
        if v is None or v is False:
            return CompressionFormat.NONE
        if v is True:
            return CompressionFormat.GZIP
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("extra_args", mode="before")
    @classmethod
    def coerce_extra_args(cls, v: Any) -> Any:
        if v is None:
            return ()
        if isinstance(v, str):
            raise ValueError("extra_args 必须是字符串列表")
        return tuple(v)

    @field_validator("output_path", "label", "install_script", "lsm_content", mode="before")
    @classmethod
    def empty_as_none(cls, v: Any) -> Any:
        """空字符串视为未设置"""
        if isinstance(v, str) and v == "":
            return None
        return v

    @field_validator("install_script_file", "lsm_file", mode="before")
    @classmethod
    def empty_path_as_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def compressed(self) -> bool:
        return self.compression is not CompressionFormat.NONE


class FileInfoModel(BaseModel):
    """文件元信息覆盖"""
    mode: Optional[int] = Field(None, description="权限位覆盖，如 0o755 或 \"0755\"", ge=0, le=0o7777)
    mtime: Optional[datetime] = Field(None, description="修改时间覆盖（RFC 3339）")
    owner: Optional[str] = Field(None, description="属主（仅记录，不会应用）")
    group: Optional[str] = Field(None, description="属组（仅记录，不会应用）")

    @field_validator("mode", mode="before")
    @classmethod
    def parse_octal_mode(cls, v: Any) -> Any:
        """字符串形式的权限按八进制解析"""
        if isinstance(v, str):
            text = v.strip().lower()
            if text.startswith("0o"):
                text = text[2:]
            try:
                return int(text, 8)
            except ValueError:
                raise ValueError(f"无效的权限值: {v}")
        return v


class FileModel(BaseModel):
    """显式列出的单个文件"""
    src: Union[str, Path] = Field(..., description="源文件路径")
    dst: Optional[str] = Field(None, description="归档内目标路径，默认为源文件名")
    info: FileInfoModel = Field(default_factory=FileInfoModel, description="元信息覆盖")

    @field_validator("src")
    @classmethod
    def validate_src(cls, v: Union[str, Path]) -> Path:
        return Path(v)

    def destination(self) -> str:
        return self.dst or Path(self.src).name


class InputPathModel(BaseModel):
    """输入路径模型（目录会被展开为文件）"""
    path: Union[str, Path] = Field(..., description="输入文件或目录路径")
    prefix: str = Field("", description="归档内的目标目录前缀")
    recursive: bool = Field(True, description="是否递归包含子目录")
    preserve_structure: bool = Field(True, description="是否保持目录结构")

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: Union[str, Path]) -> Path:
        return Path(v)


class PackageConfig(BaseModel):
    """打包项目主配置模型

    这是 YAML 配置文件的根模型。
    """

    name: str = Field(..., description="包名", min_length=1, max_length=100)
    version: Optional[str] = Field(None, description="版本号", max_length=50)
    output: Optional[str] = Field(None, description="输出文件路径")
    inputs: List[InputPathModel] = Field(default_factory=list, description="输入文件/目录列表")
    files: List[FileModel] = Field(default_factory=list, description="显式文件列表")
    exclude: Optional[List[str]] = Field(None, description="排除模式列表（glob 格式）")
    makeself: MakeselfConfig = Field(default_factory=MakeselfConfig, description="makeself 选项")

    model_config = {
        "extra": "forbid",
        "str_strip_whitespace": True,
    }

    @model_validator(mode="after")
    def validate_has_content(self) -> "PackageConfig":
        """至少需要一个输入或文件"""
        if not self.inputs and not self.files:
            raise ValueError("inputs 和 files 不能同时为空")
        return self

    def default_output(self) -> str:
        """未指定输出路径时使用的文件名"""
        if self.output:
            return self.output
        if self.version:
            return f"{self.name}-{self.version}.run"
        return f"{self.name}.run"

    def default_label(self) -> str:
        if self.makeself.label:
            return self.makeself.label
        if self.version:
            return f"{self.name} {self.version}"
        return self.name

    def to_dict(self) -> Dict[str, Any]:
        """转换为可序列化的字典"""
        data = self.model_dump(exclude_none=True, mode="json")
        makeself = data.get("makeself", {})
        if not makeself.get("extra_args"):
            makeself.pop("extra_args", None)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PackageConfig":
        """从字典创建配置实例"""
        return cls.model_validate(data)
