# chipeight

A CHIP-8 interpreter with a terminal debugger. You step through a program
one instruction at a time, forwards and backwards, and watch the display,
memory, registers, stack and timers change.

It needs nothing beyond the standard library. The debugger screen uses
`curses`, so it runs on systems where Python ships that module.

## Installation

```
pip install .
```

This installs the `chip-8` command.

## Usage

Open a program in the debugger:

```
chip-8 run path/to/program.ch8
```

The program is loaded at address `0x200`. Files of 3584 bytes or more are
rejected. If the file cannot be read or is too large, the command prints an
error and exits with status 1.

The screen is split into panels:

- **Chip-8 display**: the 64x32 screen, `█` for a lit pixel, `.` otherwise;
- **Help**: the key bindings;
- **Memory**: the instruction words around the program counter, with the
  current one marked `<--- pc = 0x....`;
- **Registers**: `I` and `V0`..`VF`;
- **Stack**: the return addresses in use;
- **Timers**: the sound and delay timers.

Key bindings:

| Key                             | Action                           |
|---------------------------------|----------------------------------|
| `Enter`, `n`, `Right`, `Space`  | execute one instruction          |
| `Backspace`, `p`, `Left`        | go back one state                |
| `Esc`, `q`, `Ctrl-C`            | quit                             |

Every state already reached is kept. Stepping back and then forward again
replays the recorded states instead of executing the instructions again.

Other commands:

```
chip-8 completions bash    # also: elvish, fish, powershell, zsh
chip-8 --version
chip-8 --help
```

`completions` prints a shell completion script for `chip-8` on standard output.

## Library use

```python
from chipeight.machine import Chip8
from chipeight.debugger import Debugger

chip = Chip8()
chip.load_memory("program.ch8")
debugger = Debugger(chip)
debugger.step_forward()
print(debugger.peek().screen)
debugger.step_back()
```

`Chip8.run_instr()` executes a single instruction. `Chip8.run()` executes
instructions with no end, about 100 per second. `Chip8.copy()` returns an
independent copy of the whole state.

Decoding an instruction word:

```python
from chipeight.language import RawInstr

raw = RawInstr.from_bytes(b"\x61\x2a")
print(raw)             # 0x612A
print(raw.to_instr())  # Instr(opcode=<Opcode.SET: ...>, r=<Register.V1: 1>, ..., value=42, ...)
```

Words that are not instructions decode to `Opcode.DATA`.

## Limitations

- No keyboard input for the program and no sound. The timers are shown but
  never count down.
- These instructions are decoded but not executed: `PRESSED`, `NOT_PRESSED`,
  `GET_DELAY`, `LOAD_KEY`, `SET_DELAY_TIMER`, `SET_SOUND_TIMER`,
  `SPRITE_ADDR`, `STORE_BCD`, `REG_DUMP` and `REG_LOAD`. Executing one, or a
  `DATA` word, raises `chipeight.machine.ExecutionError`. The same error is
  raised on stack overflow or underflow and on reads past the end of memory.
  In the debugger such an error ends the program with a traceback.
- No built-in font sprites are loaded into memory.
- The registers hold 16-bit values: arithmetic wraps at `0x10000`, not at 256.
  The shift instructions always set `VF` to 0.
- The debugger only steps. It has no mode that runs the program freely.

## Development

```
pip install -e .[test]
pytest
```