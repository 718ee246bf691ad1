"""CHIP-8 system instructions (0x0xxx)."""

import jax.numpy as jnp
from chip8core.state import EmulatorState, flag_fault
from chip8core.decode import DecodedInstruction
from chip8core.constants import FAULT_STACK_UNDERFLOW
from chip8core.stack import pop


def execute_unknown(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Unknown instruction: flag it and move on."""
    return state.replace(unknown_opcode=jnp.array(True))


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display), display_dirty=jnp.array(True))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine to the instruction after the call."""
    stack, address, underflow = pop(state.stack)
    state = state.replace(stack=stack, pc=address + 2)
    return flag_fault(state, underflow, FAULT_STACK_UNDERFLOW)
