"""CHIP-8 stack operations."""

import jax.numpy as jnp
from chip8core.constants import ADDRESS_MASK, STACK_SIZE
from chip8core.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> tuple[StackState, jnp.ndarray]:
    """Push address onto stack, also returning whether the stack was already full."""
    overflow = stack.pointer >= STACK_SIZE
    masked_address = jnp.astype(address & ADDRESS_MASK, jnp.uint16)
    new_data = stack.data.at[stack.pointer].set(masked_address, mode="drop")
    return stack.replace(data=new_data, pointer=stack.pointer + 1), overflow


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray, jnp.ndarray]:
    """Pop address from stack, also returning whether the stack was empty."""
    underflow = stack.pointer == 0
    new_pointer = jnp.where(underflow, stack.pointer, stack.pointer - 1)
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address, underflow
