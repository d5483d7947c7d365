"""CHIP-8 stack operations.

Bounds are not checked here: underflow and overflow are rejected before an
instruction is dispatched (see ``chip8vm.emulator.check_instruction``).
"""

import jax.numpy as jnp
from chip8vm.constants import ADDRESS_MASK, STACK_SIZE
from chip8vm.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack."""
    masked_address = jnp.astype(address & ADDRESS_MASK, jnp.uint16)
    new_data = stack.data.at[stack.pointer].set(masked_address)
    return stack.replace(data=new_data, pointer=stack.pointer + 1)


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack."""
    new_pointer = stack.pointer - 1
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address


def is_empty(stack: StackState) -> bool:
    return int(stack.pointer) == 0


def is_full(stack: StackState) -> bool:
    return int(stack.pointer) >= STACK_SIZE
