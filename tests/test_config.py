import io

import pytest
from loguru import logger

from LBG_VQ.config import MainCfg, QuantCfg, TrainingCfg
from LBG_VQ.utils.logging import init_logger


def test_fixed_rounds_alias():
    assert TrainingCfg(policy="fixed-rounds").policy == "fixed"
    assert TrainingCfg(policy="converge").policy == "converge"
    with pytest.raises(ValueError):
        TrainingCfg(policy="forever")


def test_main_cfg():
    cfg = MainCfg(block=4, log_level="debug")
    assert cfg.quant.dim == 16 and cfg.log_level == "DEBUG"
    assert cfg.quant.bounds == (0, 255)
    with pytest.raises(ValueError):
        MainCfg(log_level="loud")
    with pytest.raises(ValueError):
        MainCfg(block=2, quant=QuantCfg(dim=9))
    with pytest.raises(ValueError):
        QuantCfg(low=0)


def test_init_logger_level():
    buf = io.StringIO()
    init_logger("warning", sink=buf)
    try:
        logger.info("hidden")
        logger.warning("shown")
    finally:
        logger.remove()
    out = buf.getvalue()
    assert "shown" in out and "WARNING" in out
    assert "hidden" not in out
    with pytest.raises(ValueError):
        init_logger("chatty")
