"""
Upload 模块 - 分片上传

职责：
- 发送端：把文件切成携带参数的分片
- 接收端：按到达顺序累积分片，按 index 重组原始字节
"""

from .chunker import DEFAULT_CHUNK_SIZE, iter_chunk_records, split_into_chunks
from .reassembler import (
    UploadSession,
    acollect_chunks,
    check_indices,
    collect_chunks,
    reassemble,
)

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "UploadSession",
    "acollect_chunks",
    "check_indices",
    "collect_chunks",
    "iter_chunk_records",
    "reassemble",
    "split_into_chunks",
]
