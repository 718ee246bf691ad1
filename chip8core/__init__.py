"""CHIP-8 virtual machine package."""

from chip8core.state import EmulatorState, StackState, create_state
from chip8core.emulator import execute, fetch, step, tick_timers, load_program, load_rom
from chip8core.decode import DecodedInstruction, Op, classify, decode
from chip8core.errors import Chip8Error, LoadOverflow, UnknownOpcode, OutOfRangeAccess
from chip8core.machine import Machine
from chip8core.constants import (
    PROGRAM_START, FONT_START, SCREEN_WIDTH, SCREEN_HEIGHT, DISPLAY_SIZE,
    MODE_RUNNING, MODE_AWAITING_KEY,
    FAULT_NONE, FAULT_MEMORY, FAULT_STACK_OVERFLOW, FAULT_STACK_UNDERFLOW,
    FAULT_DISPLAY, FAULT_KEYPAD,
)
from chip8core.rendering import display_to_rgb, create_color_scheme

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "fetch",
    "execute",
    "step",
    "tick_timers",
    "load_program",
    "load_rom",
    "DecodedInstruction",
    "Op",
    "classify",
    "decode",
    "Chip8Error",
    "LoadOverflow",
    "UnknownOpcode",
    "OutOfRangeAccess",
    "Machine",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "DISPLAY_SIZE",
    "MODE_RUNNING",
    "MODE_AWAITING_KEY",
    "FAULT_NONE",
    "FAULT_MEMORY",
    "FAULT_STACK_OVERFLOW",
    "FAULT_STACK_UNDERFLOW",
    "FAULT_DISPLAY",
    "FAULT_KEYPAD",
    "display_to_rgb",
    "create_color_scheme",
]
