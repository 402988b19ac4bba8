"""
PillowCodec - 基于 Pillow 的编解码器

解码依赖 Pillow 自身的签名识别，因此 GIF / BMP / WebP 等格式同样可解码，
只是被格式检测归为 UNKNOWN 并回退为 PNG 输出。
"""

import io
import struct

import numpy as np
from PIL import Image

from ..context import ContainerFormat, DecodedRaster
from ..errors import DecodeError, EncodeError
from ..logger import logger
from .base import BaseCodec
from .detector import detect_format

# 解码阶段可能出现的底层异常
_DECODE_FAILURES = (
    OSError, ValueError, SyntaxError, EOFError, IndexError, struct.error,
    Image.DecompressionBombError,
)


class PillowCodec(BaseCodec):
    """Pillow 编解码器"""

    def decode(self, raw: bytes) -> DecodedRaster:
        detected = detect_format(raw)
        try:
            with Image.open(io.BytesIO(raw)) as img:
                img.load()
                rgba = img.convert("RGBA")
        except _DECODE_FAILURES as e:
            raise DecodeError(detected, e) from e

        pixels = np.asarray(rgba, dtype=np.uint8).copy()
        logger.debug(f"[Codec] Decoded {detected.value} ({rgba.width}x{rgba.height})")
        return DecodedRaster(pixels)

    def encode(self, raster: DecodedRaster, format: ContainerFormat) -> bytes:
        spec = self.select(format)
        pixels = raster.pixels if spec.keep_alpha else raster.rgb

        output = io.BytesIO()
        try:
            img = Image.fromarray(np.ascontiguousarray(pixels))
            img.save(output, format=spec.format.value, **spec.options)
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise EncodeError(spec.format, e) from e

        data = output.getvalue()
        logger.debug(f"[Codec] Encoded {spec.format.value}: {len(data)} bytes")
        return data


def create_codec(cfg=None) -> PillowCodec:
    """便捷函数：创建默认编解码器"""
    return PillowCodec(cfg)
