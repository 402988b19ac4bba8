"""
FormatDetector - 容器格式检测

只检查字节前缀的魔数，从不依赖文件名。
"""

from ..context import ContainerFormat


# 签名表：(前缀, 格式)
SIGNATURES: tuple[tuple[bytes, ContainerFormat], ...] = (
    (b"\x89PNG\r\n\x1a\n", ContainerFormat.PNG),
    (b"\xff\xd8\xff", ContainerFormat.JPEG),
    (b"II*\x00", ContainerFormat.TIFF),   # little-endian
    (b"MM\x00*", ContainerFormat.TIFF),   # big-endian
)


def detect_format(raw: bytes) -> ContainerFormat:
    """
    检测容器格式

    Args:
        raw: 原始文件字节

    Returns:
        匹配到的格式；无匹配时返回 UNKNOWN（不是错误）
    """
    head = bytes(raw[:8])
    for signature, fmt in SIGNATURES:
        if head.startswith(signature):
            return fmt
    return ContainerFormat.UNKNOWN
