"""CHIP-8 ALU operations (8xxx).

Every operation computes its result and flag from the values of VX and VY
read before any register is written. The flag, when an operation produces
one, is written to VF after the result, so it wins when X is F.
"""

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.constants import FLAG_REGISTER
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction

_NO_FLAG = jnp.zeros((), dtype=jnp.uint8)


def alu_set(vx: int, vy: int) -> tuple[int, int]:
    """8XY0 - Set: VX = VY."""
    return vy, _NO_FLAG


def alu_or(vx: int, vy: int) -> tuple[int, int]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, _NO_FLAG


def alu_and(vx: int, vy: int) -> tuple[int, int]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, _NO_FLAG


def alu_xor(vx: int, vy: int) -> tuple[int, int]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, _NO_FLAG


def alu_add(vx: int, vy: int) -> tuple[int, int]:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = jnp.astype(vx, jnp.int32) + jnp.astype(vy, jnp.int32)
    carry = jnp.astype(result > 255, jnp.uint8)
    return jnp.astype(result & 0xFF, jnp.uint8), carry


def alu_sub_xy(vx: int, vy: int) -> tuple[int, int]:
    """8XY5 - Subtract: VX -= VY, VF = 1 when there is no borrow."""
    no_borrow = jnp.astype(vx >= vy, jnp.uint8)
    result = jnp.astype((jnp.astype(vx, jnp.int32) - vy) & 0xFF, jnp.uint8)
    return result, no_borrow


def alu_shift_right(vx: int, vy: int) -> tuple[int, int]:
    """8XY6 - Shift right: VX = VY >> 1, VF = bit shifted out of VY."""
    shifted_bit = jnp.astype(vy & 1, jnp.uint8)
    return jnp.astype(vy >> 1, jnp.uint8), shifted_bit


def alu_sub_yx(vx: int, vy: int) -> tuple[int, int]:
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when there is no borrow."""
    no_borrow = jnp.astype(vy >= vx, jnp.uint8)
    result = jnp.astype((jnp.astype(vy, jnp.int32) - vx) & 0xFF, jnp.uint8)
    return result, no_borrow


def alu_shift_left(vx: int, vy: int) -> tuple[int, int]:
    """8XYE - Shift left: VX = VY << 1, VF = bit shifted out of VY."""
    shifted_bit = jnp.astype((vy & 0x80) >> 7, jnp.uint8)
    result = jnp.astype((jnp.astype(vy, jnp.int32) << 1) & 0xFF, jnp.uint8)
    return result, shifted_bit


_ALU_OPERATIONS = [alu_set, alu_or, alu_and, alu_xor, alu_add,
                   alu_sub_xy, alu_shift_right, alu_sub_yx, alu_shift_left]

# Indexed like _ALU_OPERATIONS
_WRITES_FLAG = jnp.array([0, 0, 0, 0, 1, 1, 1, 1, 1], dtype=bool)


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    vx = state.V[instruction.x]
    vy = state.V[instruction.y]

    # Undefined N values are rejected before dispatch; 8XYE maps to the last slot
    index = jnp.where(instruction.n == 0xE, 8, instruction.n)
    result, flag = jax.lax.switch(index, _ALU_OPERATIONS, vx, vy)

    new_V = state.V.at[instruction.x].set(result)
    new_V = jnp.where(_WRITES_FLAG[index], new_V.at[FLAG_REGISTER].set(flag), new_V)
    return state.replace(V=new_V)
