from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .quant.lbg import policy_name
from .quant.vector import Bounds
from .utils.logging import LEVELS

INITS = ("split", "random")


@dataclass
class QuantCfg:
    codes: int = 16
    dim: Optional[int] = None
    init: str = "split"
    perturbation: float = 1.0
    low: Optional[float] = None
    high: Optional[float] = None
    seed: Optional[int] = 42

    def __post_init__(self):
        if self.codes < 1:
            raise ValueError(f"codes must be >= 1, got {self.codes}")
        if self.dim is not None and self.dim < 1:
            raise ValueError(f"dim must be >= 1, got {self.dim}")
        if self.init not in INITS:
            raise ValueError(f"init must be one of {INITS}, got {self.init!r}")
        if self.perturbation == 0:
            raise ValueError("perturbation must be non-zero")
        if (self.low is None) != (self.high is None):
            raise ValueError("low and high must be given together")
        if self.low is not None and self.low > self.high:
            raise ValueError(f"low {self.low} > high {self.high}")

    @property
    def bounds(self) -> Optional[Bounds]:
        return None if self.low is None else Bounds(self.low, self.high)


@dataclass
class TrainingCfg:
    policy: str = "converge"
    rounds: int = 10
    max_rounds: int = 1000
    workers: int = 1

    def __post_init__(self):
        self.policy = policy_name(self.policy)
        if self.rounds < 1 or self.max_rounds < 1:
            raise ValueError("rounds and max_rounds must be >= 1")
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")


@dataclass
class MainCfg:
    image: Path = Path("input_image.jpg")
    out: Path = Path("reconstructed_image.png")
    mosaic: Optional[Path] = None
    block: int = 2
    bits: int = 8
    log_level: str = "INFO"
    quant: QuantCfg = field(default_factory=lambda: QuantCfg(low=0, high=255))
    training: TrainingCfg = field(default_factory=TrainingCfg)

    def __post_init__(self):
        if self.block < 1:
            raise ValueError(f"block must be >= 1, got {self.block}")
        self.log_level = self.log_level.upper()
        if self.log_level not in LEVELS:
            raise ValueError(f"log_level must be one of {LEVELS}, got {self.log_level!r}")
        if self.quant.dim is None:
            self.quant.dim = self.block * self.block
        elif self.quant.dim != self.block * self.block:
            raise ValueError(f"dim {self.quant.dim} does not match a {self.block}x{self.block} block")
