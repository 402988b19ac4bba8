"""
Chunker - 发送端分片

把编码好的图像文件切成固定大小的分片，每个分片都重复携带完整参数。
"""

from typing import Any, Iterator

from ..context import Chunk, EditingParameters

DEFAULT_CHUNK_SIZE = 64 * 1024  # 64KB


def split_into_chunks(
    data: bytes,
    image_name: str,
    params: EditingParameters | None = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE
) -> list[Chunk]:
    """
    切分图像字节

    Args:
        data: 原始文件字节
        image_name: 文件名
        params: 编辑参数，默认中性值
        chunk_size: 分片大小（字节）

    Returns:
        index 从 0 开始连续编号的分片列表；空数据返回空列表

    Raises:
        ValueError: chunk_size <= 0
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size 必须为正数，当前: {chunk_size}")
    params = params or EditingParameters.neutral()

    if not data:
        return []

    return [
        Chunk(
            index=i,
            payload=bytes(data[offset:offset + chunk_size]),
            image_name=image_name,
            params=params,
        )
        for i, offset in enumerate(range(0, len(data), chunk_size))
    ]


def iter_chunk_records(
    data: bytes,
    image_name: str,
    params: EditingParameters | None = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE
) -> Iterator[dict[str, Any]]:
    """逐个产出入站记录格式的分片"""
    for chunk in split_into_chunks(data, image_name, params, chunk_size):
        yield chunk.to_record()
