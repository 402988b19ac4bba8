"""
Color - 色彩调整

饱和度在亮度轴上缩放色度，色相在 HSV 空间旋转。
"""

import cv2
import numpy as np

# Rec. 709 亮度系数
LUMA_WEIGHTS = np.array([0.2126, 0.7152, 0.0722], dtype=np.float32)


def compute_luma(rgb: np.ndarray) -> np.ndarray:
    """逐像素亮度 (H,W,1)"""
    return (rgb @ LUMA_WEIGHTS)[..., np.newaxis]


def apply_saturation(rgb: np.ndarray, saturation: float) -> np.ndarray:
    """饱和度：色度（到亮度的距离）乘以 (1 + saturation)"""
    luma = compute_luma(rgb)
    return luma + (rgb - luma) * np.float32(1.0 + saturation)


def apply_hue(rgb: np.ndarray, hue: float) -> np.ndarray:
    """
    色相旋转

    Args:
        rgb: float32 (H,W,3) [0,255]
        hue: 旋转角度（度），在 360 处环绕

    Returns:
        float32 (H,W,3) [0,255]
    """
    # float32 输入时 OpenCV 的 H 范围是 [0,360)，S/V 为 [0,1]
    normalized = np.ascontiguousarray(rgb / np.float32(255.0), dtype=np.float32)
    hsv = cv2.cvtColor(normalized, cv2.COLOR_RGB2HSV)
    hsv[:, :, 0] = np.mod(hsv[:, :, 0] + np.float32(hue), np.float32(360.0))
    rotated = cv2.cvtColor(hsv, cv2.COLOR_HSV2RGB)
    return rotated * np.float32(255.0)
