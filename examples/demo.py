#!/usr/bin/env python
"""
Imagine Demo - 命令行演示脚本

把图像切成分片交给服务处理，再写出处理结果。

使用方法:
    python examples/demo.py [input_image] [output_image] [--exposure 1.0 ...]

示例:
    python examples/demo.py examples/input.jpg examples/output.jpg --exposure 0.5 --hue 30
"""

import sys
from pathlib import Path

# 添加项目根目录到路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import argparse
import io

import numpy as np
from PIL import Image

from imagine import EditingParameters, ImageProcessingService, load_pipeline
from imagine.codec import detect_format
from imagine.upload import iter_chunk_records


def create_sample_image(width: int = 512, height: int = 384) -> bytes:
    """
    创建一个示例图像（水平渐变 + 色块），编码为 PNG

    Returns:
        PNG 字节
    """
    img = np.zeros((height, width, 3), dtype=np.uint8)

    # 水平灰度渐变
    ramp = np.linspace(0, 255, width, dtype=np.float32)
    img[:, :, :] = ramp[np.newaxis, :, np.newaxis].astype(np.uint8)

    # 红、绿、蓝三个色块
    block = height // 4
    img[block:2 * block, 40:140] = (200, 40, 40)
    img[block:2 * block, 180:280] = (40, 200, 40)
    img[block:2 * block, 320:420] = (40, 40, 200)

    # 添加随机噪声使图像更自然
    noise = np.random.randint(-10, 10, img.shape, dtype=np.int16)
    img = np.clip(img.astype(np.int16) + noise, 0, 255).astype(np.uint8)

    buffer = io.BytesIO()
    Image.fromarray(img).save(buffer, format="PNG")
    return buffer.getvalue()


def main():
    parser = argparse.ArgumentParser(description="Imagine Demo")
    parser.add_argument("input", nargs="?", help="输入图像路径")
    parser.add_argument("output", nargs="?", default="output", help="输出图像路径（扩展名按输出格式补全）")
    parser.add_argument("--chunk-size", type=int, default=None, help="分片大小（字节）")
    for name, default in EditingParameters.neutral().to_dict().items():
        parser.add_argument(f"--{name}", type=float, default=default, help=f"{name}（中性值 {default}）")

    args = parser.parse_args()

    pipe = load_pipeline()
    chunk_size = args.chunk_size or pipe.cfg.upload.chunk_size

    if args.input is None:
        print("创建示例图像...")
        data = create_sample_image()
        image_name = "sample.png"
    else:
        print(f"加载图像: {args.input}")
        data = Path(args.input).read_bytes()
        image_name = Path(args.input).name

    print(f"输入格式: {detect_format(data).value}, {len(data)} bytes")

    params = EditingParameters.from_mapping(vars(args))
    records = iter_chunk_records(data, image_name, params, chunk_size)

    service = ImageProcessingService(pipe)
    response = service.upload_image_stream(records)
    print(f"[{response.status}] {response.message}")
    if not response.ok:
        sys.exit(1)

    output_format = detect_format(response.processed_image)
    suffix = {"JPEG": ".jpg", "TIFF": ".tif"}.get(output_format.value, ".png")
    output_path = Path(args.output)
    if output_path.suffix.lower() != suffix:
        output_path = output_path.with_suffix(suffix)
    output_path.write_bytes(response.processed_image)
    print(f"输出已保存到: {output_path}")

    print("完成!")


if __name__ == "__main__":
    main()
