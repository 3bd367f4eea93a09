"""A CHIP-8 interpreter with an instruction decoder and a step-by-step curses debugger."""

__version__ = "0.1.0"