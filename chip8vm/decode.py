"""CHIP-8 instruction decoding and disassembly."""

from typing import Iterator, Optional

from chex import dataclass

from chip8vm.constants import PROGRAM_START


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    return DecodedInstruction(
        raw=instruction,
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )


# (mask, pattern, format); first match wins, so exact patterns precede 0NNN
_MNEMONICS = (
    (0xFFFF, 0x00E0, "CLS"),
    (0xFFFF, 0x00EE, "RET"),
    (0xF000, 0x0000, "SYS 0x{nnn:03X}"),
    (0xF000, 0x1000, "JP 0x{nnn:03X}"),
    (0xF000, 0x2000, "CALL 0x{nnn:03X}"),
    (0xF000, 0x3000, "SE V{x:X}, 0x{nn:02X}"),
    (0xF000, 0x4000, "SNE V{x:X}, 0x{nn:02X}"),
    (0xF00F, 0x5000, "SE V{x:X}, V{y:X}"),
    (0xF000, 0x6000, "LD V{x:X}, 0x{nn:02X}"),
    (0xF000, 0x7000, "ADD V{x:X}, 0x{nn:02X}"),
    (0xF00F, 0x8000, "LD V{x:X}, V{y:X}"),
    (0xF00F, 0x8001, "OR V{x:X}, V{y:X}"),
    (0xF00F, 0x8002, "AND V{x:X}, V{y:X}"),
    (0xF00F, 0x8003, "XOR V{x:X}, V{y:X}"),
    (0xF00F, 0x8004, "ADD V{x:X}, V{y:X}"),
    (0xF00F, 0x8005, "SUB V{x:X}, V{y:X}"),
    (0xF00F, 0x8006, "SHR V{x:X}, V{y:X}"),
    (0xF00F, 0x8007, "SUBN V{x:X}, V{y:X}"),
    (0xF00F, 0x800E, "SHL V{x:X}, V{y:X}"),
    (0xF000, 0x9000, "SNE V{x:X}, V{y:X}"),
    (0xF000, 0xA000, "LD I, 0x{nnn:03X}"),
    (0xF000, 0xB000, "JP V0, 0x{nnn:03X}"),
    (0xF000, 0xC000, "RND V{x:X}, 0x{nn:02X}"),
    (0xF000, 0xD000, "DRW V{x:X}, V{y:X}, {n}"),
    (0xF0FF, 0xE09E, "SKP V{x:X}"),
    (0xF0FF, 0xE0A1, "SKNP V{x:X}"),
    (0xF0FF, 0xF007, "LD V{x:X}, DT"),
    (0xF0FF, 0xF00A, "LD V{x:X}, K"),
    (0xF0FF, 0xF015, "LD DT, V{x:X}"),
    (0xF0FF, 0xF018, "LD ST, V{x:X}"),
    (0xF0FF, 0xF01E, "ADD I, V{x:X}"),
    (0xF0FF, 0xF029, "LD F, V{x:X}"),
    (0xF0FF, 0xF033, "LD B, V{x:X}"),
    (0xF0FF, 0xF055, "LD [I], V{x:X}"),
    (0xF0FF, 0xF065, "LD V{x:X}, [I]"),
)


def mnemonic(instruction: DecodedInstruction) -> Optional[str]:
    """Return assembler text for a decoded instruction, or None if unknown."""
    raw = int(instruction.raw)
    for mask, pattern, text in _MNEMONICS:
        if raw & mask == pattern:
            return text.format(
                x=int(instruction.x), y=int(instruction.y), n=int(instruction.n),
                nn=int(instruction.nn), nnn=int(instruction.nnn),
            )
    return None


def disassemble(data: bytes, start: int = PROGRAM_START) -> Iterator[tuple[int, int, str]]:
    """Yield (address, word, text) for each big-endian word of a ROM image.

    Words that match no operation are rendered as data. A trailing odd byte
    is reported on its own.
    """
    for offset in range(0, len(data) - 1, 2):
        word = (data[offset] << 8) | data[offset + 1]
        text = mnemonic(decode(word))
        yield start + offset, word, text if text is not None else f"DW 0x{word:04X}"

    if len(data) % 2:
        yield start + len(data) - 1, data[-1], f"DB 0x{data[-1]:02X}"
