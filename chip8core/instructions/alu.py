"""CHIP-8 ALU operations (7XNN, 8XYN).

The ``alu_*`` helpers are pure functions over int32 operands in 0..255 and
return ``(result, flag)`` as uint8, so they can be vmapped on their own.
"""

import jax.numpy as jnp
from chip8core.state import EmulatorState
from chip8core.decode import DecodedInstruction
from chip8core.constants import FLAG_REGISTER


def _u8(value) -> jnp.ndarray:
    return jnp.astype(value & 0xFF, jnp.uint8)


def alu_add(vx, vy):
    """VX + VY, flag is the carry out of bit 7."""
    result = vx + vy
    return _u8(result), jnp.astype(result > 255, jnp.uint8)


def alu_sub_xy(vx, vy):
    """VX - VY, flag is 0 on borrow."""
    return _u8(vx - vy), jnp.astype(vx >= vy, jnp.uint8)


def alu_sub_yx(vx, vy):
    """VY - VX, flag is 0 on borrow."""
    return _u8(vy - vx), jnp.astype(vy >= vx, jnp.uint8)


def alu_shift_right(vx, vy):
    """VX >> 1, flag is the bit shifted out."""
    return _u8(vx >> 1), _u8(vx & 1)


def alu_shift_left(vx, vy):
    """VX << 1, flag is the bit shifted out."""
    return _u8(vx << 1), _u8((vx & 0x80) >> 7)


def _operands(state: EmulatorState, instruction: DecodedInstruction):
    vx = jnp.astype(state.V[instruction.x], jnp.int32)
    vy = jnp.astype(state.V[instruction.y], jnp.int32)
    return vx, vy


def _store(state: EmulatorState, x, result) -> EmulatorState:
    return state.replace(V=state.V.at[x].set(_u8(result)))


def _store_with_flag(state: EmulatorState, x, result, flag) -> EmulatorState:
    # The result is written last, so VF as destination keeps the result.
    new_V = state.V.at[FLAG_REGISTER].set(flag)
    return state.replace(V=new_V.at[x].set(result))


def make_arithmetic_instruction(alu_fn):
    """Factory for 8XYN operations that also write VF."""
    def arithmetic_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        result, flag = alu_fn(*_operands(state, instruction))
        return _store_with_flag(state, instruction.x, result, flag)
    return arithmetic_instruction


def execute_add_immediate(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """7XNN - Add NN to VX, set carry flag."""
    vx = jnp.astype(state.V[instruction.x], jnp.int32)
    result, carry = alu_add(vx, instruction.nn)
    return _store_with_flag(state, instruction.x, result, carry)


def execute_alu_set(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XY0 - Set: VX = VY."""
    vx, vy = _operands(state, instruction)
    return _store(state, instruction.x, vy)


def execute_alu_or(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XY1 - Binary OR: VX |= VY."""
    vx, vy = _operands(state, instruction)
    return _store(state, instruction.x, vx | vy)


def execute_alu_and(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XY2 - Binary AND: VX &= VY."""
    vx, vy = _operands(state, instruction)
    return _store(state, instruction.x, vx & vy)


def execute_alu_xor(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XY3 - Logical XOR: VX ^= VY."""
    vx, vy = _operands(state, instruction)
    return _store(state, instruction.x, vx ^ vy)


execute_alu_add = make_arithmetic_instruction(alu_add)
execute_alu_sub_xy = make_arithmetic_instruction(alu_sub_xy)
execute_alu_shift_right = make_arithmetic_instruction(alu_shift_right)
execute_alu_sub_yx = make_arithmetic_instruction(alu_sub_yx)
execute_alu_shift_left = make_arithmetic_instruction(alu_shift_left)
