"""
Context 数据结构单元测试
"""

import sys
from pathlib import Path

# 添加项目根目录到路径
sys.path.insert(0, str(Path(__file__).parent.parent))

import numpy as np
import pytest

from imagine.context import (
    Chunk,
    DecodedRaster,
    EditingParameters,
    RequestState,
    Stage,
)


class TestEditingParameters:
    """编辑参数测试"""

    def test_neutral_values(self):
        params = EditingParameters.neutral()
        assert params.gamma == 1.0
        assert params.exposure == 0.0
        assert params.is_neutral()

    def test_from_mapping(self):
        """测试缺失键取中性值，多余键忽略，数值转为 float"""
        params = EditingParameters.from_mapping({"exposure": 1, "hue": "45", "imageName": "x"})

        assert params.exposure == 1.0
        assert isinstance(params.exposure, float)
        assert params.hue == 45.0
        assert params.gamma == 1.0
        assert not params.is_neutral()

    def test_out_of_range_kept(self):
        """测试超出推荐范围的值不被修改"""
        params = EditingParameters.from_mapping({"gamma": 7.5, "blur": -3})
        assert params.gamma == 7.5
        assert params.blur == -3.0


class TestChunk:
    """分片记录转换测试"""

    def test_record_round_trip(self):
        chunk = Chunk(index=4, payload=b"data", image_name="a.tif",
                      params=EditingParameters(sharpen=2.0))
        assert Chunk.from_record(chunk.to_record()) == chunk

    def test_from_record_defaults(self):
        chunk = Chunk.from_record({"imageData": b"x"})
        assert chunk.index == 0
        assert chunk.image_name == ""
        assert chunk.params.is_neutral()


class TestDecodedRaster:
    """栅格测试"""

    def test_dimensions(self):
        raster = DecodedRaster(np.zeros((3, 5, 4), dtype=np.uint8))
        assert (raster.width, raster.height) == (5, 3)

    def test_rejects_wrong_layout(self):
        with pytest.raises(ValueError):
            DecodedRaster(np.zeros((3, 5, 3), dtype=np.uint8))
        with pytest.raises(ValueError):
            DecodedRaster(np.zeros((3, 5, 4), dtype=np.float32))

    def test_from_rgb_opaque(self):
        raster = DecodedRaster.from_rgb(np.full((2, 2, 3), 9, dtype=np.uint8))
        assert np.all(raster.alpha == 255)
        assert np.all(raster.rgb == 9)


class TestRequestState:
    """请求状态机测试"""

    def test_happy_path(self):
        state = RequestState()
        for stage in (Stage.REASSEMBLING, Stage.DECODING, Stage.ADJUSTING,
                      Stage.ENCODING, Stage.DONE):
            state.advance(stage)
        assert state.finished
        assert state.stage == Stage.DONE

    def test_illegal_transition(self):
        """测试不能跳过阶段"""
        state = RequestState()
        with pytest.raises(RuntimeError):
            state.advance(Stage.ADJUSTING)

    def test_fail_from_any_stage(self):
        state = RequestState()
        state.advance(Stage.REASSEMBLING)
        error = ValueError("boom")
        state.fail(error)

        assert state.stage == Stage.FAILED
        assert state.error is error
        with pytest.raises(RuntimeError):
            state.advance(Stage.DECODING)

    def test_cannot_fail_after_done(self):
        state = RequestState()
        for stage in (Stage.REASSEMBLING, Stage.DECODING, Stage.ADJUSTING,
                      Stage.ENCODING, Stage.DONE):
            state.advance(stage)
        with pytest.raises(RuntimeError):
            state.fail(ValueError("late"))
