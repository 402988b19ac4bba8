"""
ImaginePipeline - 主处理流水线

单次请求：重组 → 检测 → 解码 → 调整 → 编码。
每个请求独立顺序执行，流水线对象本身只持有配置。
"""

from pathlib import Path
from typing import Any, Iterable, Mapping

from omegaconf import DictConfig, OmegaConf

from .context import (
    Chunk,
    EditingParameters,
    ProcessedImage,
    RequestState,
    Stage,
)
from .codec import BaseCodec, detect_format
from .logger import logger, setup_logging
from .upload import UploadSession, collect_chunks

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config" / "default.yaml"


class ImaginePipeline:
    """分片图像编辑主 Pipeline"""

    def __init__(
        self,
        config_path: str | Path | None = None,
        cfg: DictConfig | None = None,
        codec: BaseCodec | None = None,
        configure_logging: bool = False
    ):
        """
        初始化 Pipeline

        Args:
            config_path: 配置文件路径，默认使用 imagine/config/default.yaml
            cfg: 直接传入的配置，会合并到默认配置之上
            codec: 注入的编解码器，默认使用 PillowCodec
            configure_logging: 是否按 logging 配置节点安装日志处理器
        """
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH
        self.cfg: DictConfig = OmegaConf.load(config_path)
        if cfg is not None:
            self.cfg = OmegaConf.merge(self.cfg, cfg)

        if configure_logging:
            log_cfg = self.cfg.get("logging", {})
            setup_logging(log_cfg.get("level", "INFO"), log_cfg.get("file", None))

        self._codec = codec
        self._adjuster = None

    # ==================== 模块懒加载 ====================

    @property
    def codec(self) -> BaseCodec:
        """编解码器（懒加载）"""
        if self._codec is None:
            from .codec import create_codec
            self._codec = create_codec(self.cfg.codec)
        return self._codec

    @property
    def adjuster(self):
        """调整流水线（懒加载）"""
        if self._adjuster is None:
            from .adjustments import AdjustmentPipeline
            self._adjuster = AdjustmentPipeline(self.cfg.adjustments)
        return self._adjuster

    @property
    def validate_indices(self) -> bool:
        return bool(self.cfg.upload.get("validate_indices", True))

    # ==================== 主处理流程 ====================

    def new_session(self) -> UploadSession:
        """创建一次上传会话"""
        return UploadSession(validate_indices=self.validate_indices)

    def process_upload(
        self,
        upload: UploadSession | Iterable[Chunk | Mapping[str, Any]],
        state: RequestState | None = None
    ) -> ProcessedImage:
        """
        处理一次完整上传

        Args:
            upload: 已收集完毕的 UploadSession，或按到达顺序排列的分片
            state: 可选的外部状态机，用于观察阶段

        Returns:
            ProcessedImage

        Raises:
            ImagineError: 任一阶段失败，原始错误原样抛出
        """
        state = state or RequestState()
        if not isinstance(upload, UploadSession):
            upload = collect_chunks(upload, self.validate_indices)

        try:
            self._enter(state, Stage.REASSEMBLING)
            reassembled = upload.reassemble()
            logger.info(
                f"[Pipeline] Reassembled '{reassembled.image_name}': "
                f"{reassembled.chunk_count} chunks, {len(reassembled.raw_bytes)} bytes"
            )
        except Exception as e:
            self._fail(state, e)
            raise

        return self._run(
            state,
            reassembled.raw_bytes,
            reassembled.params,
            reassembled.image_name
        )

    def process(
        self,
        raw_bytes: bytes,
        params: EditingParameters | None = None,
        image_name: str = "",
        state: RequestState | None = None
    ) -> ProcessedImage:
        """
        处理已重组的原始字节

        Args:
            raw_bytes: 完整的容器文件字节
            params: 编辑参数，默认中性值
            image_name: 原始文件名（仅用于日志与响应）

        Returns:
            ProcessedImage
        """
        state = state or RequestState()
        self._enter(state, Stage.REASSEMBLING)
        return self._run(state, raw_bytes, params or EditingParameters.neutral(), image_name)

    def _run(
        self,
        state: RequestState,
        raw_bytes: bytes,
        params: EditingParameters,
        image_name: str
    ) -> ProcessedImage:
        """检测 → 解码 → 调整 → 编码"""
        try:
            self._enter(state, Stage.DECODING)
            detected = detect_format(raw_bytes)
            raster = self.codec.decode(raw_bytes)

            self._enter(state, Stage.ADJUSTING)
            adjusted = self.adjuster.apply(raster, params)
            del raster

            self._enter(state, Stage.ENCODING)
            spec = self.codec.select(detected)
            data = self.codec.encode(adjusted, detected)

            self._enter(state, Stage.DONE)
        except Exception as e:
            self._fail(state, e)
            raise

        logger.info(
            f"[Pipeline] Processed '{image_name}': {detected.value} -> {spec.format.value}, "
            f"{adjusted.width}x{adjusted.height}, {len(data)} bytes"
        )
        return ProcessedImage(
            data=data,
            format=spec.format,
            source_format=detected,
            image_name=image_name,
            width=adjusted.width,
            height=adjusted.height,
        )

    @staticmethod
    def _enter(state: RequestState, stage: Stage) -> None:
        state.advance(stage)
        logger.debug(f"[Pipeline] Stage -> {stage.value}")

    @staticmethod
    def _fail(state: RequestState, error: Exception) -> None:
        if not state.finished:
            state.fail(error)
        logger.error(f"[Pipeline] Failed during {state.history[-2].value}: {error}")


def load_pipeline(config_path: str | Path | None = None) -> ImaginePipeline:
    """
    便捷函数：加载 Pipeline

    Args:
        config_path: 配置文件路径

    Returns:
        ImaginePipeline 实例
    """
    return ImaginePipeline(config_path, configure_logging=True)
