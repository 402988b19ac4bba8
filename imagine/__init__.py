"""
Imagine - 分片图像编辑

接收分片传输的图像，重组原始文件，应用参数化调整，
再按原容器格式重新编码。
"""

from .context import (
    Chunk,
    ContainerFormat,
    DecodedRaster,
    EditingParameters,
    ProcessedImage,
    ReassembledUpload,
    RequestState,
    Stage,
    UploadImageResponse,
)
from .errors import (
    ChunkIndexError,
    DecodeError,
    EmptyUploadError,
    EncodeError,
    ImagineError,
)
from .pipeline import ImaginePipeline, load_pipeline
from .service import ImageProcessingService

__version__ = "0.1.0"

__all__ = [
    "Chunk",
    "ChunkIndexError",
    "ContainerFormat",
    "DecodeError",
    "DecodedRaster",
    "EditingParameters",
    "EmptyUploadError",
    "EncodeError",
    "ImageProcessingService",
    "ImaginePipeline",
    "ImagineError",
    "ProcessedImage",
    "ReassembledUpload",
    "RequestState",
    "Stage",
    "UploadImageResponse",
    "load_pipeline",
]
