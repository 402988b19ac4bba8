"""
ImageProcessingService - 服务层

与传输无关的客户端流式接口：消费一串分片记录，返回单一响应。
核心只区分错误种类，这里负责把错误翻译为 status / message。
"""

import asyncio
from typing import Any, AsyncIterable, Iterable, Mapping

from .context import Chunk, ProcessedImage, UploadImageResponse
from .errors import (
    ChunkIndexError,
    DecodeError,
    EmptyUploadError,
    EncodeError,
    ImagineError,
)
from .logger import logger
from .pipeline import ImaginePipeline
from .upload import UploadSession, acollect_chunks

STATUS_SUCCESS = "Success"
STATUS_ERROR = "Error"

ChunkRecord = Chunk | Mapping[str, Any]


def describe_error(error: ImagineError) -> str:
    """错误种类 → 面向调用方的消息"""
    if isinstance(error, EmptyUploadError):
        return "No image data received."
    if isinstance(error, ChunkIndexError):
        return f"Image chunks are incomplete: {error}."
    if isinstance(error, DecodeError):
        return f"Image could not be decoded (detected format: {error.format.value})."
    if isinstance(error, EncodeError):
        return f"Image could not be encoded as {error.format.value}."
    return f"Image processing failed: {error}."


class ImageProcessingService:
    """图像处理服务"""

    def __init__(self, pipeline: ImaginePipeline | None = None):
        self._pipeline = pipeline

    @property
    def pipeline(self) -> ImaginePipeline:
        """Pipeline（懒加载）"""
        if self._pipeline is None:
            self._pipeline = ImaginePipeline()
        return self._pipeline

    def upload_image_stream(self, records: Iterable[ChunkRecord]) -> UploadImageResponse:
        """
        处理一次同步分片流

        Args:
            records: 按到达顺序排列的分片记录或 Chunk

        Returns:
            UploadImageResponse；失败时 status 为 "Error"，不含部分结果
        """
        session = self.pipeline.new_session()
        try:
            for record in records:
                session.append(record)
            processed = self.pipeline.process_upload(session)
        except ImagineError as e:
            return self._failure(session, e)
        return self._success(session, processed)

    async def upload_image_stream_async(
        self,
        records: AsyncIterable[ChunkRecord]
    ) -> UploadImageResponse:
        """
        处理一次异步分片流

        流耗尽后才在工作线程中执行解码/调整/编码；取消只会发生在收集分片期间。
        """
        session = await acollect_chunks(records, self.pipeline.validate_indices)
        try:
            processed = await asyncio.to_thread(self.pipeline.process_upload, session)
        except ImagineError as e:
            return self._failure(session, e)
        return self._success(session, processed)

    @staticmethod
    def _success(session: UploadSession, processed: ProcessedImage) -> UploadImageResponse:
        exposure = session.params.exposure
        return UploadImageResponse(
            status=STATUS_SUCCESS,
            message=f"Image processed successfully with exposure {exposure:.2f}.",
            processed_image=processed.data,
            original_filename=processed.image_name,
        )

    @staticmethod
    def _failure(session: UploadSession, error: ImagineError) -> UploadImageResponse:
        logger.warning(f"[Service] Upload '{session.image_name}' failed: {error}")
        return UploadImageResponse(
            status=STATUS_ERROR,
            message=describe_error(error),
            processed_image=b"",
            original_filename=session.image_name,
        )
