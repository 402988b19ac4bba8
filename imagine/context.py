"""
Context - 核心数据结构

贯穿 重组 → 解码 → 调整 → 编码 流程的数据类定义。
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Mapping

import numpy as np


class ContainerFormat(str, Enum):
    """容器格式（仅由字节签名判定，不看文件扩展名）"""

    PNG = "PNG"
    JPEG = "JPEG"
    TIFF = "TIFF"
    UNKNOWN = "Unknown"


class Stage(str, Enum):
    """单次请求的处理阶段"""

    RECEIVING = "receiving"
    REASSEMBLING = "reassembling"
    DECODING = "decoding"
    ADJUSTING = "adjusting"
    ENCODING = "encoding"
    DONE = "done"
    FAILED = "failed"


# 合法的阶段迁移（FAILED 可从任意非终止阶段进入）
_TRANSITIONS: dict[Stage, tuple[Stage, ...]] = {
    Stage.RECEIVING: (Stage.REASSEMBLING,),
    Stage.REASSEMBLING: (Stage.DECODING,),
    Stage.DECODING: (Stage.ADJUSTING,),
    Stage.ADJUSTING: (Stage.ENCODING,),
    Stage.ENCODING: (Stage.DONE,),
    Stage.DONE: (),
    Stage.FAILED: (),
}


@dataclass(frozen=True)
class EditingParameters:
    """
    编辑参数

    八个相互独立的浮点参数。推荐范围只是前端滑块的范围，核心不做校验，
    超出范围的值按原样计算。
    """

    exposure: float = 0.0      # [-2, 2] 档
    brightness: float = 0.0    # [-1, 1]
    contrast: float = 0.0      # [-1, 1]
    saturation: float = 0.0    # [-1, 1]
    hue: float = 0.0           # [-180, 180] 度
    gamma: float = 1.0         # (0, 3]
    blur: float = 0.0          # [0, 10] 半径
    sharpen: float = 0.0       # [0, 10] 强度

    @classmethod
    def neutral(cls) -> "EditingParameters":
        """全部为中性值的参数"""
        return cls()

    def is_neutral(self) -> bool:
        """是否所有参数都处于中性值"""
        return self == EditingParameters.neutral()

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "EditingParameters":
        """
        从字典构建参数

        缺失的键取中性值，其余键忽略，数值统一转为 float。
        """
        values = {}
        for f in fields(cls):
            if f.name in mapping and mapping[f.name] is not None:
                values[f.name] = float(mapping[f.name])
        return cls(**values)

    def to_dict(self) -> dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class Chunk:
    """单个上传分片（追加后只读）"""

    index: int
    payload: bytes
    image_name: str = ""
    params: EditingParameters = field(default_factory=EditingParameters)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Chunk":
        """
        从入站记录构建分片

        Args:
            record: {imageName, imageData, chunkIndex, exposure, ..., sharpen}

        Returns:
            Chunk 对象
        """
        return cls(
            index=int(record.get("chunkIndex", 0)),
            payload=bytes(record.get("imageData", b"")),
            image_name=str(record.get("imageName", "")),
            params=EditingParameters.from_mapping(record),
        )

    def to_record(self) -> dict[str, Any]:
        """转换为入站记录格式"""
        record: dict[str, Any] = {
            "imageName": self.image_name,
            "imageData": self.payload,
            "chunkIndex": self.index,
        }
        record.update(self.params.to_dict())
        return record


@dataclass
class DecodedRaster:
    """解码后的 RGBA8 像素栅格"""

    pixels: np.ndarray   # uint8 (H,W,4) RGBA

    def __post_init__(self):
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise ValueError(f"栅格必须是 (H,W,4) 格式，当前: {self.pixels.shape}")
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"栅格必须是 uint8，当前: {self.pixels.dtype}")

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def rgb(self) -> np.ndarray:
        return self.pixels[:, :, :3]

    @property
    def alpha(self) -> np.ndarray:
        return self.pixels[:, :, 3]

    @classmethod
    def from_rgb(cls, rgb: np.ndarray, alpha: np.ndarray | None = None) -> "DecodedRaster":
        """由 RGB 数组（及可选 alpha）构建栅格，alpha 默认全不透明"""
        h, w = rgb.shape[:2]
        pixels = np.empty((h, w, 4), dtype=np.uint8)
        pixels[:, :, :3] = rgb
        pixels[:, :, 3] = 255 if alpha is None else alpha
        return cls(pixels)

    def copy(self) -> "DecodedRaster":
        return DecodedRaster(self.pixels.copy())


@dataclass(frozen=True)
class ReassembledUpload:
    """分片重组结果"""

    raw_bytes: bytes
    image_name: str
    params: EditingParameters
    chunk_count: int = 0


@dataclass(frozen=True)
class ProcessedImage:
    """单次流水线输出"""

    data: bytes
    format: ContainerFormat         # 编码所用格式
    source_format: ContainerFormat  # 检测到的输入格式
    image_name: str = ""
    width: int = 0
    height: int = 0


@dataclass
class UploadImageResponse:
    """服务层的单一响应"""

    status: str
    message: str
    processed_image: bytes = b""
    original_filename: str = ""

    @property
    def ok(self) -> bool:
        return self.status == "Success"

    def to_record(self) -> dict[str, Any]:
        """转换为出站记录格式"""
        return {
            "status": self.status,
            "message": self.message,
            "processedImage": self.processed_image,
            "originalFilename": self.original_filename,
        }


@dataclass
class RequestState:
    """单次请求的状态机"""

    stage: Stage = Stage.RECEIVING
    history: list[Stage] = field(default_factory=lambda: [Stage.RECEIVING])
    error: BaseException | None = None

    @property
    def finished(self) -> bool:
        return self.stage in (Stage.DONE, Stage.FAILED)

    def advance(self, stage: Stage) -> None:
        """
        迁移到下一阶段

        Raises:
            RuntimeError: 非法迁移
        """
        if stage not in _TRANSITIONS[self.stage]:
            raise RuntimeError(f"非法阶段迁移: {self.stage.value} -> {stage.value}")
        self.stage = stage
        self.history.append(stage)

    def fail(self, error: BaseException) -> None:
        """进入 FAILED 终止状态"""
        if self.finished:
            raise RuntimeError(f"请求已结束于 {self.stage.value}，无法标记失败")
        self.error = error
        self.stage = Stage.FAILED
        self.history.append(Stage.FAILED)
