"""
Tone - 影调调整

曝光、亮度、对比度作用于 float32 RGB [0,255]；
Gamma 是独立的最终阶段，直接作用于 uint8 数值。
"""

import numpy as np


def apply_exposure(rgb: np.ndarray, exposure: float) -> np.ndarray:
    """曝光：按档位指数缩放，+1 档亮度翻倍；增益溢出为 inf，由截断映射到 255"""
    with np.errstate(over="ignore", invalid="ignore"):
        gain = np.float32(np.exp2(np.float64(exposure)))
        return rgb * gain


def apply_brightness(rgb: np.ndarray, brightness: float) -> np.ndarray:
    """亮度：乘以 (1 + brightness)"""
    return rgb * np.float32(1.0 + brightness)


def apply_contrast(rgb: np.ndarray, contrast: float) -> np.ndarray:
    """对比度：以 0.5（归一化）为中点按 (1 + contrast) 缩放"""
    normalized = rgb / np.float32(255.0)
    return ((normalized - 0.5) * np.float32(1.0 + contrast) + 0.5) * np.float32(255.0)


def build_gamma_lut(gamma: float) -> np.ndarray:
    """
    预计算 256 级 gamma 查找表

    output = round(255 * (input/255) ** gamma)，四舍五入取半向上。
    gamma 不做校验，非正值按字面计算后截断到 [0,255]。

    Args:
        gamma: gamma 值

    Returns:
        uint8 查找表 (256,)
    """
    levels = np.arange(256, dtype=np.float64) / 255.0
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        curve = 255.0 * np.power(levels, gamma)
    curve = np.nan_to_num(curve, nan=0.0, posinf=255.0, neginf=0.0)
    return np.clip(np.floor(curve + 0.5), 0, 255).astype(np.uint8)


def apply_gamma(rgb_u8: np.ndarray, gamma: float) -> np.ndarray:
    """Gamma：逐像素逐通道查表（覆盖全部行）"""
    return build_gamma_lut(gamma)[rgb_u8]
