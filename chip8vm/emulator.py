"""Main CHIP-8 emulator execution engine."""

from typing import Optional, Sequence

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction, decode, mnemonic
from chip8vm.constants import PROGRAM_START, MAX_ROM_SIZE, ADDRESS_MASK, NUM_KEYS
from chip8vm.errors import (
    OversizeError, MachineFault, StackUnderflowError, StackOverflowError,
    UnknownOpcodeError, MachineCallError, capture_snapshot,
)
from chip8vm.stack import is_empty, is_full
from chip8vm.instructions.system import execute_system_instruction
from chip8vm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chip8vm.instructions.alu import execute_alu_operation
from chip8vm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8vm.instructions.display import execute_display
from chip8vm.instructions.misc import execute_misc_instruction


@jax.jit
def dispatch(state: EmulatorState, instruction: int) -> EmulatorState:
    """Route an instruction word to its handler.

    No validation happens here; use ``execute`` or ``chip8vm.frame.cycle``
    unless the word is already known to be valid.
    """
    decoded_instruction = decode(instruction)

    return jax.lax.switch(
        decoded_instruction.opcode,
        [
            execute_system_instruction,
            execute_jump,
            execute_call,
            execute_skip_if_equal_immediate,
            execute_skip_if_not_equal_immediate,
            execute_skip_if_equal_register,
            execute_set,
            execute_add,
            execute_alu_operation,
            execute_skip_if_not_equal_register,
            execute_set_index,
            execute_jump_with_offset,
            execute_random,
            execute_display,
            execute_skip_if_key,
            execute_misc_instruction,
        ],
        state, decoded_instruction
    )


def check_instruction(
    state: EmulatorState, instruction: DecodedInstruction, address: int
) -> Optional[MachineFault]:
    """Return the fault an instruction would raise in this state, if any."""
    raw = int(instruction.raw)

    if instruction.opcode == 0x0 and raw not in (0x00E0, 0x00EE):
        fault = MachineCallError, f"machine-language call to 0x{raw & 0xFFF:03X} is not supported"
    elif raw == 0x00EE and is_empty(state.stack):
        fault = StackUnderflowError, "return with an empty call stack"
    elif instruction.opcode == 0x2 and is_full(state.stack):
        fault = StackOverflowError, "call with a full call stack"
    elif mnemonic(instruction) is None:
        fault = UnknownOpcodeError, f"no operation matches 0x{raw:04X}"
    else:
        return None

    error_cls, message = fault
    return error_cls(message, capture_snapshot(state, raw, address))


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    The state is expected to be the one returned by ``fetch``, so the
    instruction address reported on a fault is PC - 2.

    Raises:
        MachineFault: if the instruction cannot be executed in this state.
    """
    instruction = int(instruction)
    address = (int(state.pc) - 2) & ADDRESS_MASK
    fault = check_instruction(state, decode(instruction), address)
    if fault is not None:
        raise fault
    return dispatch(state, instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


@jax.jit
def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory and advance PC past it."""
    pc = jnp.astype(state.pc, jnp.int32)
    instruction = _pack_u16(state.memory[pc & ADDRESS_MASK], state.memory[(pc + 1) & ADDRESS_MASK])
    return state.replace(pc=jnp.astype(state.pc + 2, jnp.uint16)), instruction


def peek(state: EmulatorState) -> int:
    """Return the instruction word at PC without advancing."""
    _, instruction = fetch(state)
    return int(instruction)


def load_rom(state: EmulatorState, rom_data: bytes) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200.

    Raises:
        OversizeError: if the image does not fit below the top of memory.
    """
    rom_data = bytes(rom_data)
    if len(rom_data) > MAX_ROM_SIZE:
        raise OversizeError(len(rom_data), MAX_ROM_SIZE)
    if not rom_data:
        return state
    rom_array = jnp.array(list(rom_data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom_data)].set(rom_array)
    return state.replace(memory=new_memory)


def load_rom_file(state: EmulatorState, filename: str) -> EmulatorState:
    """Read a ROM file and load it with ``load_rom``."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_rom(state, rom_data)


def set_key(state: EmulatorState, index: int, pressed: bool) -> EmulatorState:
    """Set the pressed state of one key of the 16-key pad."""
    if not 0 <= index < NUM_KEYS:
        raise ValueError(f"Key index must be in 0..{NUM_KEYS - 1}, got {index}")
    return state.replace(keypad=state.keypad.at[index].set(bool(pressed)))


def set_keys(state: EmulatorState, pressed: Sequence[bool]) -> EmulatorState:
    """Replace the whole keypad from 16 booleans."""
    if len(pressed) != NUM_KEYS:
        raise ValueError(f"Expected {NUM_KEYS} key states, got {len(pressed)}")
    return state.replace(keypad=jnp.array(pressed, dtype=jnp.bool_))
