"""The CHIP-8 machine state and its instruction interpreter."""

from __future__ import annotations

import copy as _copy
import random
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

from .language import Instr, Opcode, RawInstr, Register

_WORD = 0x10000
_STEP_DELAY = 1 / 100


class ExecutionError(RuntimeError):
    """Raised when the machine cannot execute the current instruction."""


def _blank_rows() -> list[list[bool]]:
    return [[False] * Screen.NCOLS for _ in range(Screen.NROWS)]


@dataclass
class Screen:
    """A 64x32 monochrome display."""

    NROWS: ClassVar[int] = 32
    NCOLS: ClassVar[int] = 64

    rows: list[list[bool]] = field(default_factory=_blank_rows)

    def draw_bit(self, row: int, col: int, bit) -> bool:
        """XOR a pixel (coordinates wrap); return True if it went from on to off."""
        line = self.rows[row % self.NROWS]
        col %= self.NCOLS
        old = line[col]
        new = old != bool(bit)
        line[col] = new
        return old and not new

    def __str__(self) -> str:
        return "".join(
            "".join("█" if pixel else "." for pixel in line) + "\n" for line in self.rows
        )

    def print(self) -> None:
        """Write the screen to standard output."""
        print(self, end="")


@dataclass
class Chip8:
    """Memory, registers, stack, timers and screen of a CHIP-8."""

    MEM_SIZE: ClassVar[int] = 4096
    CODE_START: ClassVar[int] = 0x200
    STACK_SIZE: ClassVar[int] = 16

    memory: bytearray = field(default_factory=lambda: bytearray(Chip8.MEM_SIZE))
    i: int = 0
    pc: int = CODE_START
    sp: int = 0
    delay: int = 0
    sound: int = 0
    stack: list[int] = field(default_factory=lambda: [0] * Chip8.STACK_SIZE)
    registers: list[int] = field(default_factory=lambda: [0] * 16)
    screen: Screen = field(default_factory=Screen)

    def run(self) -> None:
        """Execute instructions forever at about 100 per second."""
        while True:
            self.run_instr()
            time.sleep(_STEP_DELAY)

    def rv(self, r: Register) -> int:
        """Value of register ``r``."""
        return self.registers[r]

    def read_instr(self) -> Instr:
        """Decode the instruction at the program counter."""
        pc = self.pc
        if pc + 1 >= self.MEM_SIZE:
            raise ExecutionError(f"invalid memory access at 0x{pc:04X}")
        return RawInstr.from_bytes(self.memory[pc : pc + 2]).to_instr()

    def pc_incr(self) -> None:
        """Advance the program counter by one instruction."""
        self.pc = (self.pc + 2) % _WORD

    def pop_stack(self) -> int:
        if self.sp == 0:
            raise ExecutionError("stack underflow")
        self.sp -= 1
        return self.stack[self.sp]

    def push_stack(self, value: int) -> None:
        if self.sp >= self.STACK_SIZE:
            raise ExecutionError("stack overflow")
        self.stack[self.sp] = value
        self.sp += 1

    def _skip_if(self, condition: bool) -> None:
        if condition:
            self.pc_incr()
        self.pc_incr()

    def run_instr(self) -> None:
        """Execute the instruction at the program counter."""
        instr = self.read_instr()
        regs = self.registers
        r, s, value = instr.r, instr.s, instr.value
        vf = Register.VF

        match instr.opcode:
            case Opcode.SYSTEM:
                self.pc_incr()
            case Opcode.CLEAR:
                self.screen = Screen()
                self.pc_incr()
            case Opcode.RET:
                self.pc = self.pop_stack()
                self.pc_incr()
            case Opcode.GOTO:
                self.pc = value
            case Opcode.CALL:
                self.push_stack(self.pc)
                self.pc = value
            case Opcode.SKIP_EQ:
                self._skip_if(regs[r] == value)
            case Opcode.SKIP_NEQ:
                self._skip_if(regs[r] != value)
            case Opcode.SKIP_EQ_V:
                self._skip_if(regs[r] == regs[s])
            case Opcode.SKIP_NEQ_V:
                self._skip_if(regs[r] != regs[s])
            case Opcode.SET:
                regs[r] = value
                self.pc_incr()
            case Opcode.INCR:
                regs[r] = (regs[r] + value) % _WORD
                self.pc_incr()
            case Opcode.COPY:
                regs[r] = regs[s]
                self.pc_incr()
            case Opcode.BIT_OR:
                regs[r] |= regs[s]
                self.pc_incr()
            case Opcode.BIT_AND:
                regs[r] &= regs[s]
                self.pc_incr()
            case Opcode.BIT_XOR:
                regs[r] ^= regs[s]
                self.pc_incr()
            case Opcode.ADD:
                total = regs[r] + regs[s]
                regs[r] = total % _WORD
                regs[vf] = int(total >= _WORD)
                self.pc_incr()
            case Opcode.SUB:
                a, b = regs[r], regs[s]
                regs[r] = (a - b) % _WORD
                regs[vf] = int(a >= b)
                self.pc_incr()
            case Opcode.LT:
                a, b = regs[s], regs[r]
                regs[r] = (a - b) % _WORD
                regs[vf] = int(a >= b)
                self.pc_incr()
            case Opcode.SHIFT_R:
                shifted = regs[r] >> 1
                regs[vf] = 0
                regs[r] = shifted
                self.pc_incr()
            case Opcode.SHIFT_L:
                shifted = (regs[r] << 1) % _WORD
                regs[vf] = 0
                regs[r] = shifted
                self.pc_incr()
            case Opcode.SET_I:
                self.i = value
                self.pc_incr()
            case Opcode.JUMP:
                self.pc = (regs[Register.V0] + value) % _WORD
            case Opcode.RAND:
                regs[r] = value & random.getrandbits(8)
                self.pc_incr()
            case Opcode.DRAW:
                self._draw(regs[r], regs[s], value)
                self.pc_incr()
            case Opcode.INCR_I:
                self.i = (self.i + regs[r]) % _WORD
                self.pc_incr()
            case Opcode.DATA:
                raise ExecutionError("Data cannot be executed")
            case other:
                raise ExecutionError(f"instruction {other.name} is not implemented")

    def _draw(self, x0: int, y0: int, height: int) -> None:
        start, end = self.i, self.i + height
        if end > self.MEM_SIZE:
            raise ExecutionError(f"sprite at 0x{start:04X} reaches past memory")
        collision = False
        for dy, line in enumerate(self.memory[start:end]):
            for dx in range(8):
                bit = (line >> (7 - dx)) & 1
                collision |= self.screen.draw_bit(y0 + dy, x0 + dx, bit)
        self.registers[Register.VF] = int(collision)

    def load_memory(self, path) -> None:
        """Load a program file into memory at CODE_START."""
        data = Path(path).read_bytes()
        size = len(data)
        if size >= self.MEM_SIZE - self.CODE_START:
            raise ValueError(
                "The given file size exceeds Chip8 memory.\n"
                f"File bytes = {size}; Max bytes = {self.MEM_SIZE}"
            )
        self.memory[self.CODE_START : self.CODE_START + size] = data

    def copy(self) -> Chip8:
        """Return an independent copy of the whole machine state."""
        return _copy.deepcopy(self)