"""Current-step bookkeeping for multi-step forms."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..models.loi import Step
from ..utils.logging import get_logger
from .steps import STEPS

LOGGER = get_logger("forms.stepper")


@dataclass
class FormStepper:
    """Owns the current step and clamps every transition into ``[1, total_steps]``.

    The stepper never validates; callers check the active step's schema before
    calling :meth:`next_step`. Completion is positional: a step counts as
    complete once the user has moved past it, whatever its fields hold now.
    """

    total_steps: int = len(STEPS)
    current_step: int = 1

    def __post_init__(self) -> None:
        if self.total_steps < 1:
            raise ValueError("a stepper needs at least one step")
        self.current_step = self._clamp(self.current_step)

    @classmethod
    def for_steps(cls, steps: List[Step]) -> "FormStepper":
        return cls(total_steps=len(steps))

    def _clamp(self, step: int) -> int:
        return max(1, min(int(step), self.total_steps))

    def next_step(self) -> int:
        previous = self.current_step
        self.current_step = min(self.current_step + 1, self.total_steps)
        LOGGER.debug("step_next from=%s to=%s", previous, self.current_step)
        return self.current_step

    def prev_step(self) -> int:
        previous = self.current_step
        self.current_step = max(self.current_step - 1, 1)
        LOGGER.debug("step_prev from=%s to=%s", previous, self.current_step)
        return self.current_step

    def go_to_step(self, step: int) -> int:
        self.current_step = self._clamp(step)
        return self.current_step

    def is_step_complete(self, step_id: int) -> bool:
        return step_id < self.current_step

    @property
    def is_last_step(self) -> bool:
        return self.current_step == self.total_steps

    def reset(self) -> None:
        self.current_step = 1
