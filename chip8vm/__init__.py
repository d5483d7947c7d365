"""CHIP-8 virtual machine package."""

from chip8vm.state import EmulatorState, create_state, reset
from chip8vm.emulator import execute, fetch, load_rom, load_rom_file, set_key, set_keys
from chip8vm.frame import cycle, advance_frame, tick_frame, last_frame
from chip8vm.decode import DecodedInstruction, decode, mnemonic, disassemble
from chip8vm.errors import (
    Chip8Error, OversizeError, MachineFault, MachineSnapshot, StackUnderflowError,
    StackOverflowError, UnknownOpcodeError, MachineCallError,
)
from chip8vm.constants import (
    PROGRAM_START, FONT_START, SCREEN_WIDTH, SCREEN_HEIGHT, MAX_ROM_SIZE, CYCLES_PER_FRAME,
)

__all__ = [
    "EmulatorState",
    "create_state",
    "reset",
    "fetch",
    "execute",
    "cycle",
    "advance_frame",
    "tick_frame",
    "last_frame",
    "load_rom",
    "load_rom_file",
    "set_key",
    "set_keys",
    "DecodedInstruction",
    "decode",
    "mnemonic",
    "disassemble",
    "Chip8Error",
    "OversizeError",
    "MachineFault",
    "MachineSnapshot",
    "StackUnderflowError",
    "StackOverflowError",
    "UnknownOpcodeError",
    "MachineCallError",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "MAX_ROM_SIZE",
    "CYCLES_PER_FRAME",
]
