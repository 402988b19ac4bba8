"""
Filters - 空间滤波

高斯模糊与基于高斯的 USM 锐化。
"""

import cv2
import numpy as np


def gaussian(rgb: np.ndarray, sigma: float) -> np.ndarray:
    """高斯模糊，核大小由 sigma 自动推导"""
    return cv2.GaussianBlur(
        np.ascontiguousarray(rgb, dtype=np.float32),
        (0, 0),
        sigmaX=float(sigma),
        sigmaY=float(sigma),
        borderType=cv2.BORDER_REFLECT_101
    )


def apply_blur(rgb: np.ndarray, radius: float) -> np.ndarray:
    """模糊：半径作为高斯 sigma，radius <= 0 时原样返回"""
    if radius <= 0:
        return rgb
    return gaussian(rgb, radius)


def apply_sharpen(rgb: np.ndarray, amount: float, weight: float = 1.0) -> np.ndarray:
    """
    USM 锐化

    result = rgb + weight * (rgb - gaussian(rgb, amount))

    Args:
        rgb: float32 (H,W,3) [0,255]
        amount: 锐化强度，作为高斯 sigma；<= 0 时原样返回
        weight: 高频细节的叠加权重

    Returns:
        锐化后的图像（未截断）
    """
    if amount <= 0:
        return rgb
    blurred = gaussian(rgb, amount)
    return rgb + np.float32(weight) * (rgb - blurred)
