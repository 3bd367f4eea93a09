"""Terminal user interface for stepping through a program."""

from __future__ import annotations

import curses
from dataclasses import dataclass, field
from enum import Enum, auto

from .debugger import Debugger
from .language import RawInstr, Register
from .machine import Chip8

_MEMORY_HALF_SPAN = 15 * 2
_CELL_WIDTH = 16


class Command(Enum):
    """An action requested by the user."""

    STEP_FORWARD = auto()
    STEP_BACKWARD = auto()
    EXIT = auto()
    REDRAW = auto()


_EXIT_KEYS = {"\x1b", "q", "\x03"}
_FORWARD_KEYS = {"\n", "\r", "n", " ", curses.KEY_ENTER, curses.KEY_RIGHT}
_BACKWARD_KEYS = {"\b", "\x7f", "p", curses.KEY_BACKSPACE, curses.KEY_LEFT}


def command_from_key(key) -> Command | None:
    """Map a key from ``get_wch`` (a character or a key code) to a command."""
    if key in _EXIT_KEYS:
        return Command.EXIT
    if key in _FORWARD_KEYS:
        return Command.STEP_FORWARD
    if key in _BACKWARD_KEYS:
        return Command.STEP_BACKWARD
    if key == curses.KEY_RESIZE:
        return Command.REDRAW
    return None


@dataclass
class Panel:
    """A titled block of text lines."""

    title: str
    lines: list[str] = field(default_factory=list)
    centered: bool = False


def _row(*cells: str) -> str:
    return "".join(cell.ljust(_CELL_WIDTH) for cell in cells).rstrip()


def registers_panel(chip: Chip8) -> Panel:
    lines = [f"I: {chip.i}"]
    for pair in range(8):
        left, right = Register(2 * pair), Register(2 * pair + 1)
        lines.append(
            _row(
                f"V{left.value:X}: {chip.rv(left)}",
                f"V{right.value:X}: {chip.rv(right)}",
            )
        )
    return Panel("Registers", lines)


def timers_panel(chip: Chip8) -> Panel:
    return Panel(
        "Timers", [_row(f"sound timer: {chip.sound}", f"delay timer: {chip.delay}")]
    )


def stack_panel(chip: Chip8) -> Panel:
    return Panel("Stack", [f"top ---> {chip.stack[: chip.sp]}"], centered=True)


def display_panel(chip: Chip8) -> Panel:
    return Panel("Chip-8 display", str(chip.screen).splitlines(), centered=True)


def memory_panel(chip: Chip8) -> Panel:
    pc = chip.pc
    lines = []
    for addr in range(pc - _MEMORY_HALF_SPAN, pc + _MEMORY_HALF_SPAN + 1, 2):
        if addr < 0 or addr + 1 >= Chip8.MEM_SIZE:
            lines.append("-")
            continue
        text = str(RawInstr.from_bytes(chip.memory[addr : addr + 2]))
        if addr == pc:
            text += f" <--- pc = 0x{pc:04X}"
        lines.append(text)
    return Panel("Memory", lines)


def help_panel() -> Panel:
    return Panel(
        "Help",
        [
            "Chip-8 debugger key bindings!",
            "",
            "Press `Esc`, `Ctrl-C` or `q` to stop running.",
        ],
        centered=True,
    )


def _put(win, y: int, x: int, text: str, attr: int = 0) -> None:
    try:
        win.addstr(y, x, text, attr)
    except curses.error:
        pass


def _box(win, y: int, x: int, height: int, width: int, panel: Panel) -> None:
    if height < 2 or width < 2:
        return
    inner = width - 2
    _put(win, y, x, "┌" + "─" * inner + "┐")
    for row in range(y + 1, y + height - 1):
        _put(win, row, x, "│")
        _put(win, row, x + width - 1, "│")
    _put(win, y + height - 1, x, "└" + "─" * inner + "┘")
    title = panel.title[:inner]
    _put(win, y, x + 1 + (inner - len(title)) // 2, title, curses.A_BOLD)
    for row, line in zip(range(y + 1, y + height - 1), panel.lines):
        line = line[:inner]
        offset = (inner - len(line)) // 2 if panel.centered else 0
        _put(win, row, x + 1 + offset, line)


class App:
    """The debugger application state and its drawing."""

    def __init__(self, chip: Chip8) -> None:
        self.debugger = Debugger(chip)
        self.logs: list[str] = []

    def draw(self, stdscr) -> None:
        """Render all panels onto the curses window."""
        stdscr.erase()
        height, width = stdscr.getmaxyx()
        chip = self.debugger.peek()

        top = height // 2
        bottom = height - top
        third = width // 3
        right_width = width - 2 * third
        vars_height = bottom * 50 // 100
        stack_height = bottom * 20 // 100
        timers_height = bottom - vars_height - stack_height

        _box(stdscr, 0, 0, top, width, display_panel(chip))
        _box(stdscr, top, 0, bottom, third, help_panel())
        _box(stdscr, top, third, bottom, third, memory_panel(chip))
        column = 2 * third
        _box(stdscr, top, column, vars_height, right_width, registers_panel(chip))
        _box(
            stdscr, top + vars_height, column, stack_height, right_width,
            stack_panel(chip),
        )
        _box(
            stdscr, top + vars_height + stack_height, column, timers_height,
            right_width, timers_panel(chip),
        )
        stdscr.refresh()

    def handle(self, command: Command) -> bool:
        """Apply a command; return False when the application should stop."""
        match command:
            case Command.EXIT:
                return False
            case Command.STEP_FORWARD:
                self.debugger.step_forward()
                self.logs.append("step")
            case Command.STEP_BACKWARD:
                self.debugger.step_back()
            case Command.REDRAW:
                pass
        return True

    def run(self, stdscr) -> None:
        """Draw and react to keys until the user exits."""
        try:
            curses.raw()
            curses.curs_set(0)
        except curses.error:
            pass
        try:
            while True:
                self.draw(stdscr)
                command = command_from_key(stdscr.get_wch())
                if command is not None and not self.handle(command):
                    break
        except KeyboardInterrupt:
            pass