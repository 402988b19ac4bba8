"""
Codec 模块单元测试
"""

import sys
from pathlib import Path

# 添加项目根目录到路径
sys.path.insert(0, str(Path(__file__).parent.parent))

import io

import numpy as np
import pytest
from omegaconf import OmegaConf
from PIL import Image

from imagine.codec import PillowCodec, detect_format, select_encoding
from imagine.context import ContainerFormat, DecodedRaster
from imagine.errors import DecodeError, EncodeError


@pytest.fixture
def codec():
    """默认配置的编解码器"""
    return PillowCodec(OmegaConf.create({"jpeg_quality": 95}))


@pytest.fixture
def sample_raster():
    """创建测试栅格 (48x64)，带半透明区域"""
    rng = np.random.default_rng(0)
    pixels = rng.integers(0, 256, (48, 64, 4), dtype=np.uint8)
    pixels[:, :32, 3] = 255
    pixels[:, 32:, 3] = 128
    return DecodedRaster(pixels)


def _pillow_bytes(rgb: np.ndarray, fmt: str) -> bytes:
    buffer = io.BytesIO()
    Image.fromarray(rgb).save(buffer, format=fmt)
    return buffer.getvalue()


class TestFormatDetector:
    """格式检测测试"""

    def test_png(self):
        assert detect_format(b"\x89PNG\r\n\x1a\n\x00\x00") == ContainerFormat.PNG

    def test_jpeg(self):
        assert detect_format(b"\xff\xd8\xff\xe0\x00\x10JFIF") == ContainerFormat.JPEG

    def test_tiff_both_byte_orders(self):
        """测试大小端 TIFF"""
        assert detect_format(b"II*\x00\x08\x00\x00\x00") == ContainerFormat.TIFF
        assert detect_format(b"MM\x00*\x00\x00\x00\x08") == ContainerFormat.TIFF

    def test_unknown(self):
        """测试无匹配签名返回 UNKNOWN 而不是报错"""
        assert detect_format(b"GIF89a") == ContainerFormat.UNKNOWN
        assert detect_format(b"") == ContainerFormat.UNKNOWN
        assert detect_format(b"\x89PN") == ContainerFormat.UNKNOWN


class TestEncodingSelection:
    """编码选择测试"""

    def test_jpeg_quality(self):
        spec = select_encoding(ContainerFormat.JPEG)
        assert spec.format == ContainerFormat.JPEG
        assert spec.options == {"quality": 95}
        assert spec.keep_alpha is False

    def test_tiff_defaults(self):
        spec = select_encoding(ContainerFormat.TIFF)
        assert spec.format == ContainerFormat.TIFF
        assert spec.options == {}

    @pytest.mark.parametrize("fmt", [ContainerFormat.PNG, ContainerFormat.UNKNOWN])
    def test_png_fallback(self, fmt):
        spec = select_encoding(fmt)
        assert spec.format == ContainerFormat.PNG
        assert spec.keep_alpha is True

    def test_quality_from_config(self):
        """测试配置覆盖 JPEG 质量"""
        spec = select_encoding(ContainerFormat.JPEG, OmegaConf.create({"jpeg_quality": 80}))
        assert spec.options == {"quality": 80}

    def test_unknown_always_png(self):
        """测试未知格式的输出不受配置影响"""
        cfg = OmegaConf.create({"jpeg_quality": 80, "fallback_format": "JPEG"})
        spec = select_encoding(ContainerFormat.UNKNOWN, cfg)
        assert spec.format == ContainerFormat.PNG
        assert spec.options == {}


class TestPillowCodec:
    """Pillow 编解码测试"""

    def test_png_lossless(self, codec, sample_raster):
        """测试 PNG 无损往返（含 alpha）"""
        data = codec.encode(sample_raster, ContainerFormat.PNG)
        decoded = codec.decode(data)

        assert detect_format(data) == ContainerFormat.PNG
        np.testing.assert_array_equal(decoded.pixels, sample_raster.pixels)

    def test_png_encode_deterministic(self, codec, sample_raster):
        """测试 PNG 解码再编码字节不变"""
        data = codec.encode(sample_raster, ContainerFormat.PNG)
        assert codec.encode(codec.decode(data), ContainerFormat.PNG) == data

    def test_tiff_fidelity(self, codec, sample_raster):
        """测试 TIFF 输出仍被识别为 TIFF"""
        data = codec.encode(sample_raster, ContainerFormat.TIFF)
        decoded = codec.decode(data)

        assert detect_format(data) == ContainerFormat.TIFF
        np.testing.assert_array_equal(decoded.pixels, sample_raster.pixels)

    def test_jpeg_fidelity(self, codec, sample_raster):
        """测试 JPEG 输出仍被识别为 JPEG，alpha 被丢弃"""
        data = codec.encode(sample_raster, ContainerFormat.JPEG)
        decoded = codec.decode(data)

        assert detect_format(data) == ContainerFormat.JPEG
        assert (decoded.width, decoded.height) == (64, 48)
        assert np.all(decoded.alpha == 255)

    def test_decode_is_rgba8(self, codec):
        """测试灰度输入解码为 RGBA8"""
        gray = np.full((10, 12), 77, dtype=np.uint8)
        raster = codec.decode(_pillow_bytes(gray, "PNG"))

        assert raster.pixels.shape == (10, 12, 4)
        assert raster.pixels.dtype == np.uint8
        assert np.all(raster.rgb == 77)
        assert np.all(raster.alpha == 255)

    @pytest.mark.parametrize("fmt", ["GIF", "BMP"])
    def test_unknown_format_falls_back_to_png(self, codec, fmt):
        """测试无签名格式仍可解码并输出 PNG"""
        rgb = np.zeros((8, 8, 3), dtype=np.uint8)
        rgb[:4] = (255, 0, 0)
        raw = _pillow_bytes(rgb, fmt)
        assert detect_format(raw) == ContainerFormat.UNKNOWN

        out = codec.encode(codec.decode(raw), ContainerFormat.UNKNOWN)
        assert detect_format(out) == ContainerFormat.PNG

    def test_decode_garbage(self, codec):
        """测试无法解码的字节抛出 DecodeError 并携带原因"""
        with pytest.raises(DecodeError) as exc_info:
            codec.decode(b"definitely not an image")
        assert exc_info.value.format == ContainerFormat.UNKNOWN
        assert exc_info.value.cause is not None

    def test_decode_truncated_png(self, codec, sample_raster):
        """测试截断的 PNG 携带检测到的格式"""
        data = codec.encode(sample_raster, ContainerFormat.PNG)
        with pytest.raises(DecodeError) as exc_info:
            codec.decode(data[: len(data) // 2])
        assert exc_info.value.format == ContainerFormat.PNG

    def test_decode_empty(self, codec):
        with pytest.raises(DecodeError):
            codec.decode(b"")

    def test_encode_failure(self, codec, sample_raster, monkeypatch):
        """测试编码器报错时抛出 EncodeError 并携带目标格式和原因"""
        def failing_save(self, fp, format=None, **params):
            raise OSError("disk full")

        monkeypatch.setattr(Image.Image, "save", failing_save)
        with pytest.raises(EncodeError) as exc_info:
            codec.encode(sample_raster, ContainerFormat.TIFF)

        assert exc_info.value.format == ContainerFormat.TIFF
        assert isinstance(exc_info.value.cause, OSError)
        assert "TIFF" in str(exc_info.value)
