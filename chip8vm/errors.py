"""Exceptions and fault diagnostics for the CHIP-8 machine."""

from dataclasses import dataclass, asdict
from typing import Optional

from chip8vm.decode import decode, mnemonic


@dataclass(frozen=True)
class MachineSnapshot:
    """Visible machine state captured at the point of a fault."""
    address: int
    opcode: int
    pc: int
    I: int
    V: tuple[int, ...]
    stack: tuple[int, ...]
    delay_timer: int
    sound_timer: int

    @property
    def instruction(self) -> Optional[str]:
        return mnemonic(decode(self.opcode))

    def to_dict(self) -> dict:
        return asdict(self)

    def format(self) -> str:
        """Render a multi-line register dump."""
        text = self.instruction or "unknown"
        lines = [
            f"0x{self.address:03X}: {self.opcode:04X}  ({text})",
            f"PC=0x{self.pc:03X} I=0x{self.I:03X} DT={self.delay_timer} ST={self.sound_timer}",
        ]
        for row in range(0, 16, 8):
            lines.append(" ".join(f"V{i:X}={self.V[i]:02X}" for i in range(row, row + 8)))
        stack = " ".join(f"0x{address:03X}" for address in self.stack) or "empty"
        lines.append(f"stack[{len(self.stack)}]: {stack}")
        return "\n".join(lines)


def capture_snapshot(state, opcode: int, address: int) -> MachineSnapshot:
    """Copy the visible registers of an EmulatorState into plain Python values."""
    pointer = int(state.stack.pointer)
    return MachineSnapshot(
        address=int(address),
        opcode=int(opcode),
        pc=int(state.pc),
        I=int(state.I),
        V=tuple(int(v) for v in state.V),
        stack=tuple(int(a) for a in state.stack.data[:pointer]),
        delay_timer=int(state.delay_timer),
        sound_timer=int(state.sound_timer),
    )


class Chip8Error(Exception):
    """Base exception for all CHIP-8 machine errors."""
    pass


class OversizeError(Chip8Error):
    """ROM image does not fit between the load address and the top of memory."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"ROM is {size} bytes, at most {limit} bytes fit in memory")
        self.size = size
        self.limit = limit


class MachineFault(Chip8Error):
    """Fatal guest-program condition, carrying the machine state at the fault."""

    kind = "MachineFault"

    def __init__(self, message: str, snapshot: MachineSnapshot):
        super().__init__(message)
        self.message = message
        self.snapshot = snapshot

    def __str__(self) -> str:
        return f"{self.kind} at 0x{self.snapshot.address:03X}: {self.message}"


class StackUnderflowError(MachineFault):
    """Return executed with an empty call stack."""
    kind = "StackUnderflow"


class StackOverflowError(MachineFault):
    """Call executed with a full call stack."""
    kind = "StackOverflow"


class UnknownOpcodeError(MachineFault):
    """No operation matches the decoded instruction."""
    kind = "UnknownOpcode"


class MachineCallError(MachineFault):
    """0NNN machine-language subroutine calls are not supported."""
    kind = "UnimplementedSubroutineCall"
