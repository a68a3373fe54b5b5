# src/shtola/core/pipeline.py
import logging
from typing import Callable, List

from shtola.models import IR

logger = logging.getLogger(__name__)

Stage = Callable[[IR], IR]


class Ware:
    """
    Ordered middleware chain over the IR.

    Stages run strictly in registration order; each receives the IR returned
    by the one before it. There is no removal, priority, retry or skip.
    """

    def __init__(self):
        self._stages: List[Stage] = []

    def __len__(self) -> int:
        return len(self._stages)

    def wrap(self, stage: Stage) -> None:
        if not callable(stage):
            raise TypeError(f"Stage must be callable, got {type(stage).__name__}")
        self._stages.append(stage)

    def run(self, ir: IR) -> IR:
        for index, stage in enumerate(self._stages):
            name = getattr(stage, "__name__", type(stage).__name__)
            logger.debug("Running stage %d (%s) on %d files", index, name, len(ir.files))
            result = stage(ir)
            if not isinstance(result, IR):
                raise TypeError(f"Stage {name} returned {type(result).__name__}, expected IR")
            ir = result
        return ir
