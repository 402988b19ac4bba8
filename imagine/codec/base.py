"""
BaseCodec - 编解码能力接口

流水线只依赖 decode / encode 两个能力，具体容器库通过注入提供。
编码格式的选择规则也在此定义，与具体库无关。
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from omegaconf import DictConfig

from ..context import ContainerFormat, DecodedRaster

DEFAULT_JPEG_QUALITY = 95


@dataclass(frozen=True)
class EncodingSpec:
    """编码选择结果"""

    format: ContainerFormat
    options: dict[str, Any] = field(default_factory=dict)
    keep_alpha: bool = True


def select_encoding(
    detected: ContainerFormat,
    cfg: DictConfig | None = None
) -> EncodingSpec:
    """
    根据检测到的格式选择编码方式

    JPEG → JPEG（固定质量 95，丢弃 alpha）；TIFF → TIFF 默认设置；
    其余（包括 UNKNOWN）→ 无损 PNG。

    Args:
        detected: 输入字节检测到的格式
        cfg: codec 配置节点，可覆盖 jpeg_quality

    Returns:
        EncodingSpec
    """
    quality = DEFAULT_JPEG_QUALITY
    if cfg is not None:
        quality = int(cfg.get("jpeg_quality", quality))

    if detected == ContainerFormat.JPEG:
        return EncodingSpec(ContainerFormat.JPEG, {"quality": quality}, keep_alpha=False)
    if detected == ContainerFormat.TIFF:
        return EncodingSpec(ContainerFormat.TIFF)
    return EncodingSpec(ContainerFormat.PNG)


class BaseCodec(ABC):
    """编解码器基类"""

    def __init__(self, cfg: DictConfig | None = None):
        """
        初始化编解码器

        Args:
            cfg: codec 配置节点
        """
        self.cfg = cfg

    @abstractmethod
    def decode(self, raw: bytes) -> DecodedRaster:
        """
        解码原始字节为 RGBA8 栅格

        Raises:
            DecodeError: 字节损坏或签名不受支持
        """
        pass

    @abstractmethod
    def encode(self, raster: DecodedRaster, format: ContainerFormat) -> bytes:
        """
        按检测到的格式编码栅格

        Raises:
            EncodeError: 编码器拒绝该栅格
        """
        pass

    def select(self, detected: ContainerFormat) -> EncodingSpec:
        """当前配置下的编码选择"""
        return select_encoding(detected, self.cfg)
