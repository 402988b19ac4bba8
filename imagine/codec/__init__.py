"""
Codec 模块 - 容器格式

职责：
- 按魔数检测容器格式
- 解码为 RGBA8 栅格，按检测格式选择编码方式并重新编码
"""

from .base import BaseCodec, EncodingSpec, select_encoding
from .detector import detect_format
from .pillow_codec import PillowCodec, create_codec

__all__ = [
    "BaseCodec",
    "EncodingSpec",
    "PillowCodec",
    "create_codec",
    "detect_format",
    "select_encoding",
]
