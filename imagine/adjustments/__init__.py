"""
Adjustments 模块 - 参数化照片调整

职责：
- 按固定顺序执行八个调整步骤
- 中性参数跳过对应步骤，保证恒等
"""

from .adjuster import AdjustmentPipeline, AdjustmentStep, apply_adjustments, build_steps

__all__ = [
    "AdjustmentPipeline",
    "AdjustmentStep",
    "apply_adjustments",
    "build_steps",
]
