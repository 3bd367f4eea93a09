"""Registers and the CHIP-8 instruction set, with a decoder for raw opcodes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum, auto

from .base import byte_to_nibbles, check_nibble, mk_un


class Register(IntEnum):
    """A data register V0..VF; its value is its index."""

    V0 = 0
    V1 = 1
    V2 = 2
    V3 = 3
    V4 = 4
    V5 = 5
    V6 = 6
    V7 = 7
    V8 = 8
    V9 = 9
    VA = 10
    VB = 11
    VC = 12
    VD = 13
    VE = 14
    VF = 15


class Opcode(Enum):
    """The kind of a decoded instruction."""

    SYSTEM = auto()  # call machine code routine; ignored
    CLEAR = auto()  # clear the screen
    RET = auto()  # return from subroutine
    GOTO = auto()  # jump to address
    CALL = auto()  # call subroutine
    SKIP_EQ = auto()  # skip next if r == value
    SKIP_NEQ = auto()  # skip next if r != value
    SKIP_EQ_V = auto()  # skip next if r == s
    SET = auto()  # r := value
    INCR = auto()  # r := r + value
    COPY = auto()  # r := s
    BIT_OR = auto()  # r := r | s
    BIT_AND = auto()  # r := r & s
    BIT_XOR = auto()  # r := r ^ s
    ADD = auto()  # r := r + s; VF := carry
    SUB = auto()  # r := r - s; VF := not borrow
    SHIFT_R = auto()  # VF := lost bit; r := r >> 1
    LT = auto()  # r := s - r; VF := not borrow
    SHIFT_L = auto()  # VF := lost bit; r := r << 1
    SKIP_NEQ_V = auto()  # skip next if r != s
    SET_I = auto()  # I := value
    JUMP = auto()  # PC := V0 + value
    RAND = auto()  # r := random & value
    DRAW = auto()  # draw sprite at (r, s) with height value
    PRESSED = auto()  # skip next if key r pressed
    NOT_PRESSED = auto()  # skip next if key r not pressed
    GET_DELAY = auto()  # r := delay timer
    LOAD_KEY = auto()  # r := next key
    SET_DELAY_TIMER = auto()  # delay timer := r
    SET_SOUND_TIMER = auto()  # sound timer := r
    INCR_I = auto()  # I := I + r
    SPRITE_ADDR = auto()  # I := sprite address of r
    STORE_BCD = auto()  # store BCD of r at I
    REG_DUMP = auto()  # memory[I..I+value] := V0..Vvalue
    REG_LOAD = auto()  # V0..Vvalue := memory[I..I+value]
    DATA = auto()  # not an instruction


@dataclass(frozen=True)
class Instr:
    """A decoded instruction.

    ``r`` and ``s`` are the register operands (``x`` and ``y`` for DRAW).
    ``value`` holds the address, constant, sprite height or register count.
    ``data`` holds the four nibbles of a DATA word.
    """

    opcode: Opcode
    r: Register | None = None
    s: Register | None = None
    value: int | None = None
    data: tuple[int, int, int, int] | None = None


_ARITH = {
    0: Opcode.COPY,
    1: Opcode.BIT_OR,
    2: Opcode.BIT_AND,
    3: Opcode.BIT_XOR,
    4: Opcode.ADD,
    5: Opcode.SUB,
    7: Opcode.LT,
}

_F_GROUP = {
    (0x0, 0x7): Opcode.GET_DELAY,
    (0x0, 0xA): Opcode.LOAD_KEY,
    (0x1, 0x5): Opcode.SET_DELAY_TIMER,
    (0x1, 0x8): Opcode.SET_SOUND_TIMER,
    (0x1, 0xE): Opcode.INCR_I,
    (0x2, 0x9): Opcode.SPRITE_ADDR,
    (0x3, 0x3): Opcode.STORE_BCD,
}


@dataclass(frozen=True)
class RawInstr:
    """A two-byte instruction word kept as four nibbles, most significant first."""

    nibbles: tuple[int, int, int, int]

    def __post_init__(self) -> None:
        nibbles = tuple(self.nibbles)
        if len(nibbles) != 4:
            raise ValueError(f"an instruction has 4 nibbles, got {len(nibbles)}")
        for nibble in nibbles:
            check_nibble(nibble)
        object.__setattr__(self, "nibbles", nibbles)

    @classmethod
    def from_bytes(cls, data) -> RawInstr:
        """Build an instruction from its two bytes, high byte first."""
        data = bytes(data)
        if len(data) != 2:
            raise ValueError(f"an instruction has 2 bytes, got {len(data)}")
        return cls(byte_to_nibbles(data[0]) + byte_to_nibbles(data[1]))

    def __str__(self) -> str:
        return f"0x{mk_un(self.nibbles):04X}"

    def to_instr(self) -> Instr:
        """Decode the word into an instruction; unknown words become DATA."""
        n = self.nibbles
        match n:
            case (0, 0, 0xE, 0):
                return Instr(Opcode.CLEAR)
            case (0, 0, 0xE, 0xE):
                return Instr(Opcode.RET)
            case (0, *rest):
                return Instr(Opcode.SYSTEM, value=mk_un(rest))
            case (1, *rest):
                return Instr(Opcode.GOTO, value=mk_un(rest))
            case (2, *rest):
                return Instr(Opcode.CALL, value=mk_un(rest))
            case (3, x, *k):
                return Instr(Opcode.SKIP_EQ, r=Register(x), value=mk_un(k))
            case (4, x, *k):
                return Instr(Opcode.SKIP_NEQ, r=Register(x), value=mk_un(k))
            case (5, x, y, 0):
                return Instr(Opcode.SKIP_EQ_V, r=Register(x), s=Register(y))
            case (6, x, *k):
                return Instr(Opcode.SET, r=Register(x), value=mk_un(k))
            case (7, x, *k):
                return Instr(Opcode.INCR, r=Register(x), value=mk_un(k))
            case (8, x, y, op) if op in _ARITH:
                return Instr(_ARITH[op], r=Register(x), s=Register(y))
            case (8, x, _, 6):
                return Instr(Opcode.SHIFT_R, r=Register(x))
            case (8, x, _, 0xE):
                return Instr(Opcode.SHIFT_L, r=Register(x))
            case (9, x, y, 0):
                return Instr(Opcode.SKIP_NEQ_V, r=Register(x), s=Register(y))
            case (0xA, *rest):
                return Instr(Opcode.SET_I, value=mk_un(rest))
            case (0xB, *rest):
                return Instr(Opcode.JUMP, value=mk_un(rest))
            case (0xC, x, *k):
                return Instr(Opcode.RAND, r=Register(x), value=mk_un(k))
            case (0xD, x, y, height):
                return Instr(Opcode.DRAW, r=Register(x), s=Register(y), value=height)
            case (0xE, x, 9, 0xE):
                return Instr(Opcode.PRESSED, r=Register(x))
            case (0xE, x, 0xA, 1):
                return Instr(Opcode.NOT_PRESSED, r=Register(x))
            case (0xF, x, a, b) if (a, b) in _F_GROUP:
                return Instr(_F_GROUP[(a, b)], r=Register(x))
            case (0xF, x, 5, 5):
                return Instr(Opcode.REG_DUMP, value=x)
            case (0xF, x, 6, 5):
                return Instr(Opcode.REG_LOAD, value=x)
            case _:
                return Instr(Opcode.DATA, data=n)