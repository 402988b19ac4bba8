"""
ChunkReassembler - 分片重组

按 index 排序拼接字节，同时从“到达顺序”的最后一个分片读取文件名与参数。
两种顺序作用于同一批分片，需保持区分。
"""

from collections import Counter
from typing import AsyncIterable, Iterable, Mapping, Any

from ..context import Chunk, EditingParameters, ReassembledUpload
from ..errors import ChunkIndexError, EmptyUploadError
from ..logger import logger


def _as_chunk(item: Chunk | Mapping[str, Any]) -> Chunk:
    """入站记录统一转换为 Chunk"""
    if isinstance(item, Chunk):
        return item
    return Chunk.from_record(item)


class UploadSession:
    """
    单次上传会话

    仅存活于一次重组请求：逐个追加分片，流结束后调用 reassemble()。
    """

    def __init__(self, validate_indices: bool = True):
        self.validate_indices = validate_indices
        self._chunks: list[Chunk] = []
        self._last: Chunk | None = None

    def __len__(self) -> int:
        return len(self._chunks)

    @property
    def chunks(self) -> tuple[Chunk, ...]:
        """按到达顺序排列的分片"""
        return tuple(self._chunks)

    @property
    def image_name(self) -> str:
        return self._last.image_name if self._last is not None else ""

    @property
    def params(self) -> EditingParameters | None:
        """最后到达分片携带的参数"""
        return self._last.params if self._last is not None else None

    def append(self, item: Chunk | Mapping[str, Any]) -> Chunk:
        """
        追加一个到达的分片

        Args:
            item: Chunk 或入站记录

        Returns:
            追加的 Chunk
        """
        chunk = _as_chunk(item)
        self._chunks.append(chunk)
        self._last = chunk
        logger.debug(f"[Reassembler] Received chunk {chunk.index} ({len(chunk.payload)} bytes)")
        return chunk

    def reassemble(self) -> ReassembledUpload:
        """
        重组原始字节

        Returns:
            ReassembledUpload (raw_bytes, image_name, params)

        Raises:
            EmptyUploadError: 没有收到分片
            ChunkIndexError: 开启校验且索引不是稠密的 0..N-1
        """
        if not self._chunks:
            raise EmptyUploadError()

        if self.validate_indices:
            check_indices([c.index for c in self._chunks])

        # sorted 是稳定排序，重复索引保持到达顺序
        ordered = sorted(self._chunks, key=lambda c: c.index)
        raw_bytes = b"".join(c.payload for c in ordered)

        last = self._last
        return ReassembledUpload(
            raw_bytes=raw_bytes,
            image_name=last.image_name,
            params=last.params,
            chunk_count=len(self._chunks),
        )


def check_indices(indices: list[int]) -> None:
    """
    校验索引集合恰为 0..N-1

    Raises:
        ChunkIndexError: 存在缺失或重复索引
    """
    count = len(indices)
    counts = Counter(indices)
    duplicates = sorted(i for i, n in counts.items() if n > 1)
    missing = sorted(set(range(count)) - set(counts))
    if missing or duplicates:
        raise ChunkIndexError(missing=missing, duplicates=duplicates, count=count)


def collect_chunks(
    items: Iterable[Chunk | Mapping[str, Any]],
    validate_indices: bool = True
) -> UploadSession:
    """从同步可迭代对象收集全部分片"""
    session = UploadSession(validate_indices=validate_indices)
    for item in items:
        session.append(item)
    return session


async def acollect_chunks(
    items: AsyncIterable[Chunk | Mapping[str, Any]],
    validate_indices: bool = True
) -> UploadSession:
    """
    从异步流收集全部分片

    每个分片之间都是挂起点，外部取消会在分片粒度上中止收集。
    """
    session = UploadSession(validate_indices=validate_indices)
    async for item in items:
        session.append(item)
    return session


def reassemble(
    items: Iterable[Chunk | Mapping[str, Any]],
    validate_indices: bool = True
) -> ReassembledUpload:
    """
    便捷函数：收集并重组

    Args:
        items: 按到达顺序排列的分片
        validate_indices: 是否校验索引稠密性

    Returns:
        ReassembledUpload
    """
    return collect_chunks(items, validate_indices).reassemble()
