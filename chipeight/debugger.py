"""A step debugger that keeps the history of machine states."""

from __future__ import annotations

from .machine import Chip8


class Debugger:
    """Steps a machine forward and back through its recorded history."""

    def __init__(self, chip: Chip8) -> None:
        self.history: list[Chip8] = [chip]
        self.p = 0

    def peek(self) -> Chip8:
        """The machine state at the current position."""
        return self.history[self.p]

    def step_back(self) -> bool:
        """Move one state back; return False if already at the start."""
        if self.p == 0:
            return False
        self.p -= 1
        return True

    def step_forward(self) -> None:
        """Move one state forward, executing an instruction if it is new."""
        if self.p == len(self.history) - 1:
            following = self.history[-1].copy()
            following.run_instr()
            self.history.append(following)
        self.p += 1