"""
Errors - 错误类型

核心只负责区分错误种类，面向用户的文案由服务层生成。
所有错误都会中止当前请求，不重试、不返回部分结果。
"""

from .context import ContainerFormat


class ImagineError(Exception):
    """所有核心错误的基类"""


class EmptyUploadError(ImagineError):
    """没有收到任何分片"""

    def __init__(self, message: str = "no chunks received"):
        super().__init__(message)


class ChunkIndexError(ImagineError):
    """分片索引不是稠密且无重复的 0..N-1"""

    def __init__(self, missing: list[int], duplicates: list[int], count: int):
        self.missing = missing
        self.duplicates = duplicates
        self.count = count
        parts = []
        if missing:
            parts.append(f"missing indices {missing}")
        if duplicates:
            parts.append(f"duplicate indices {duplicates}")
        super().__init__(
            f"chunk indices of {count} chunks are not 0..{count - 1}: " + ", ".join(parts)
        )


class DecodeError(ImagineError):
    """原始字节无法被任何支持的容器读取器解码"""

    def __init__(self, format: ContainerFormat, cause: BaseException | None = None):
        self.format = format
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"cannot decode {format.value} image{detail}")


class EncodeError(ImagineError):
    """编码器拒绝调整后的栅格"""

    def __init__(self, format: ContainerFormat, cause: BaseException | None = None):
        self.format = format
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"cannot encode image as {format.value}{detail}")
