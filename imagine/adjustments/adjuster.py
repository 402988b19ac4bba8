"""
Adjuster - 调整流水线

固定顺序：曝光 → 亮度 → 对比度 → 饱和度 → 色相 → 模糊 → 锐化 → Gamma。
参数为中性值时整步跳过，跳过与应用恒等变换结果一致。
"""

from dataclasses import dataclass
from functools import partial
from typing import Callable

import numpy as np
from omegaconf import DictConfig

from ..context import DecodedRaster, EditingParameters
from ..logger import logger
from .color import apply_hue, apply_saturation
from .filters import apply_blur, apply_sharpen
from .tone import apply_brightness, apply_contrast, apply_exposure, apply_gamma


@dataclass(frozen=True)
class AdjustmentStep:
    """单个调整步骤：参数名 + 启用条件 + 纯函数"""

    name: str
    is_active: Callable[[float], bool]
    fn: Callable[[np.ndarray, float], np.ndarray]

    def value(self, params: EditingParameters) -> float:
        return getattr(params, self.name)


def _nonzero(value: float) -> bool:
    return value != 0.0


def _positive(value: float) -> bool:
    return value > 0.0


def _not_one(value: float) -> bool:
    return value != 1.0


def build_steps(sharpen_weight: float = 1.0) -> tuple[AdjustmentStep, ...]:
    """
    构建 float32 阶段的有序步骤（不含 Gamma）

    Args:
        sharpen_weight: USM 锐化的细节权重

    Returns:
        有序步骤元组
    """
    return (
        AdjustmentStep("exposure", _nonzero, apply_exposure),
        AdjustmentStep("brightness", _nonzero, apply_brightness),
        AdjustmentStep("contrast", _nonzero, apply_contrast),
        AdjustmentStep("saturation", _nonzero, apply_saturation),
        AdjustmentStep("hue", _nonzero, apply_hue),
        AdjustmentStep("blur", _positive, apply_blur),
        AdjustmentStep("sharpen", _positive, partial(apply_sharpen, weight=sharpen_weight)),
    )


# Gamma 是独立的最终阶段，作用于 uint8
GAMMA_STEP = AdjustmentStep("gamma", _not_one, apply_gamma)


def clamp(rgb: np.ndarray) -> np.ndarray:
    """截断到 [0,255]，NaN/Inf 一并处理"""
    rgb = np.nan_to_num(rgb, nan=0.0, posinf=255.0, neginf=0.0)
    return np.clip(rgb, 0.0, 255.0).astype(np.float32, copy=False)


def to_uint8(rgb: np.ndarray) -> np.ndarray:
    """float32 [0,255] → uint8，四舍五入取半向上"""
    return np.clip(np.floor(rgb + 0.5), 0, 255).astype(np.uint8)


class AdjustmentPipeline:
    """参数驱动的调整流水线（无 I/O、无共享状态）"""

    def __init__(self, cfg: DictConfig | None = None):
        """
        初始化调整流水线

        Args:
            cfg: adjustments 配置节点，可包含 sharpen_weight
        """
        self.sharpen_weight = 1.0
        if cfg is not None:
            self.sharpen_weight = float(cfg.get("sharpen_weight", 1.0))
        self.steps = build_steps(self.sharpen_weight)
        self.gamma_step = GAMMA_STEP

    def active_steps(self, params: EditingParameters) -> list[str]:
        """本次参数下会执行的步骤名（按执行顺序）"""
        names = [s.name for s in self.steps if s.is_active(s.value(params))]
        if self.gamma_step.is_active(params.gamma):
            names.append(self.gamma_step.name)
        return names

    def apply(self, raster: DecodedRaster, params: EditingParameters) -> DecodedRaster:
        """
        应用全部调整

        Args:
            raster: 输入栅格（不会被修改）
            params: 编辑参数

        Returns:
            新的 DecodedRaster；alpha 通道保持不变
        """
        rgb_u8 = raster.rgb
        active = [s for s in self.steps if s.is_active(s.value(params))]

        if active:
            rgb = rgb_u8.astype(np.float32)
            for step in active:
                rgb = clamp(step.fn(rgb, step.value(params)))
            rgb_u8 = to_uint8(rgb)

        if self.gamma_step.is_active(params.gamma):
            rgb_u8 = self.gamma_step.fn(rgb_u8, params.gamma)

        logger.debug(f"[Adjust] Applied steps: {self.active_steps(params) or 'none'}")
        return DecodedRaster.from_rgb(rgb_u8, raster.alpha)


def apply_adjustments(raster: DecodedRaster, params: EditingParameters) -> DecodedRaster:
    """便捷函数：使用默认配置应用调整"""
    return AdjustmentPipeline().apply(raster, params)
