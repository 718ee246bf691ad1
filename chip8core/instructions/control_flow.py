"""CHIP-8 control flow instructions."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8core.state import EmulatorState, flag_fault
from chip8core.decode import DecodedInstruction
from chip8core.constants import FAULT_STACK_OVERFLOW, FAULT_KEYPAD, NUM_KEYS
from chip8core.stack import push


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN.

    The pushed address is that of the call itself; RETURN resumes two bytes
    past it. ``state.pc`` has already been advanced by fetch.
    """
    stack, overflow = push(state.stack, state.pc - 2)
    state = flag_fault(state.replace(stack=stack), overflow, FAULT_STACK_OVERFLOW)
    return execute_jump(state, instruction)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        condition = condition_fn(state, instruction)
        return jax.lax.cond(
            condition,
            lambda s: s.replace(pc=s.pc + 2),
            lambda s: s,
            state
        )
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == state.V[inst.y]
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != state.V[inst.y]
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0."""
    jump_address = instruction.nnn + jnp.astype(state.V[0], jnp.int32)
    return state.replace(pc=jnp.astype(jump_address, jnp.uint16))


def make_key_skip_instruction(pressed: bool):
    """Factory for EX9E/EXA1, faulting when VX does not name a key."""
    skip = make_skip_instruction(
        lambda state, inst: state.keypad[state.V[inst.x]] == pressed
    )

    def key_skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        invalid_key = state.V[instruction.x] >= NUM_KEYS
        return flag_fault(skip(state, instruction), invalid_key, FAULT_KEYPAD)
    return key_skip_instruction


execute_skip_if_key = make_key_skip_instruction(True)

execute_skip_if_not_key = make_key_skip_instruction(False)
