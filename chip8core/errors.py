"""
chip8core Error Hierarchy
=========================

All exceptions inherit from Chip8Error, so a host can catch every machine
error with a single except clause.

Chip8Error (base)
├── LoadOverflow - program image does not fit between 0x200 and 0xFFF
├── UnknownOpcode - instruction word matches no known pattern
└── OutOfRangeAccess - memory, stack, display or keypad index out of bounds

Inside jitted code a fault is only a code latched in ``EmulatorState.fault``;
``Machine`` turns it into an OutOfRangeAccess.
"""

from chip8core.constants import (
    FAULT_NONE, FAULT_MEMORY, FAULT_STACK_OVERFLOW, FAULT_STACK_UNDERFLOW,
    FAULT_DISPLAY, FAULT_KEYPAD,
)


FAULT_DESCRIPTIONS = {
    FAULT_NONE: "no fault",
    FAULT_MEMORY: "memory access past 0xFFF",
    FAULT_STACK_OVERFLOW: "call stack overflow",
    FAULT_STACK_UNDERFLOW: "return with empty call stack",
    FAULT_DISPLAY: "sprite pixel outside the display buffer",
    FAULT_KEYPAD: "key index outside 0x0-0xF",
}


class Chip8Error(Exception):
    """Base exception for all chip8core errors."""
    pass


class LoadOverflow(Chip8Error):
    """
    Raised when a program image is larger than the program area.

    Attributes:
        size: Length of the rejected image in bytes
        capacity: Bytes available from 0x200 to 0xFFF
    """

    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(
            f"program of {size} bytes does not fit in {capacity} bytes of program memory"
        )


class UnknownOpcode(Chip8Error):
    """
    Reported when an instruction word decodes to no known operation.

    The machine has already stepped past it, so this is informational unless
    the host asked for strict execution.

    Attributes:
        opcode: The 16-bit instruction word
        address: Address the word was fetched from
    """

    def __init__(self, opcode: int, address: int):
        self.opcode = opcode
        self.address = address
        super().__init__(f"unknown opcode 0x{opcode:04X} at 0x{address:03X}")


class OutOfRangeAccess(Chip8Error):
    """
    Raised when an instruction would index outside one of the machine's buffers.

    The faulting step has no effect and the machine stays halted until reset.

    Attributes:
        fault: Fault code from chip8core.constants
        address: Address of the faulting instruction
        opcode: The faulting instruction word
    """

    def __init__(self, fault: int, address: int, opcode: int):
        self.fault = fault
        self.address = address
        self.opcode = opcode
        description = FAULT_DESCRIPTIONS.get(fault, f"fault {fault}")
        super().__init__(
            f"{description} (opcode 0x{opcode:04X} at 0x{address:03X}); reset required"
        )

    @property
    def description(self) -> str:
        return FAULT_DESCRIPTIONS.get(self.fault, f"fault {self.fault}")
