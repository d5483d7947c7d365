"""Tests for miscellaneous instructions (Fxxx)."""

import pytest
from chip8vm import execute, FONT_START, UnknownOpcodeError


class TestTimers:
    """Test timer-related instructions."""

    def test_misc_timer_instructions(self, fresh_state):
        """Test timer set and get operations."""
        state = fresh_state

        state = execute(state, 0x6030)  # V0 = 48
        state = execute(state, 0xF015)  # Set delay timer to V0
        assert state.delay_timer == 48

        state = execute(state, 0x6120)  # V1 = 32
        state = execute(state, 0xF118)  # Set sound timer to V1
        assert state.sound_timer == 32

        state = execute(state, 0xF207)  # V2 = delay timer
        assert state.V[2] == 48


class TestBCD:
    """Test BCD conversion."""

    def test_misc_bcd_conversion(self, fresh_state):
        """Test BCD conversion with 229."""
        state = execute(fresh_state, 0x60E5)  # V0 = 229
        state = execute(state, 0xA300)  # I = 0x300
        state = execute(state, 0xF033)

        assert [int(b) for b in state.memory[0x300:0x303]] == [2, 2, 9]
        assert state.I == 0x300

    @pytest.mark.parametrize("value,digits", [(0, [0, 0, 0]), (7, [0, 0, 7]), (40, [0, 4, 0]), (255, [2, 5, 5])])
    def test_bcd_edge_cases(self, fresh_state, value, digits):
        """Test BCD with edge cases."""
        state = execute(fresh_state, 0x6000 | value)
        state = execute(state, 0xA400)
        state = execute(state, 0xF033)

        assert [int(b) for b in state.memory[0x400:0x403]] == digits


class TestFont:
    """Test font character addressing."""

    def test_misc_font_character(self, fresh_state):
        """Test font character addressing for 'A'."""
        state = execute(fresh_state, 0x600A)  # V0 = 0xA
        state = execute(state, 0xF029)  # I = font address for A

        assert state.I == FONT_START + 0xA * 5

    def test_font_all_characters(self, fresh_state):
        """Test font addressing for all hex digits."""
        state = fresh_state

        for digit in range(16):
            state = execute(state, 0x6300 | digit)  # V3 = digit
            state = execute(state, 0xF329)  # I = font address

            assert state.I == digit * 5, f"Font address wrong for digit {digit:X}"

    def test_font_glyphs_installed(self, fresh_state):
        """The glyph for 'F' occupies the last five font bytes."""
        glyph = [int(b) for b in fresh_state.memory[FONT_START + 75:FONT_START + 80]]
        assert glyph == [0xF0, 0x80, 0xF0, 0x80, 0x80]


class TestMemoryOperations:
    """Test store/load register operations."""

    def test_store_advances_index(self, fresh_state):
        """FX55 - Store V0..VX at I, then I += X + 1."""
        state = execute(fresh_state, 0x6001)  # V0 = 1
        state = execute(state, 0x6102)  # V1 = 2
        state = execute(state, 0x6203)  # V2 = 3
        state = execute(state, 0x6304)  # V3 = 4, not stored
        state = execute(state, 0xA400)

        state = execute(state, 0xF255)

        assert [int(b) for b in state.memory[0x400:0x404]] == [1, 2, 3, 0]
        assert state.I == 0x403

    def test_load_advances_index(self, fresh_state):
        """FX65 - Load V0..VX from I, then I += X + 1."""
        state = fresh_state.replace(memory=fresh_state.memory.at[0x500:0x503].set(7))
        state = execute(state, 0x6399)  # V3 = 0x99, not loaded
        state = execute(state, 0xA500)

        state = execute(state, 0xF265)

        assert [int(v) for v in state.V[:4]] == [7, 7, 7, 0x99]
        assert state.I == 0x503

    @pytest.mark.parametrize("x", [0, 3, 15])
    def test_store_load_round_trip(self, fresh_state, x):
        """Storing then loading V0..VX reproduces them; I moves X + 1 each time."""
        values = [(17 * i + 5) & 0xFF for i in range(16)]
        state = fresh_state
        for i, value in enumerate(values):
            state = state.replace(V=state.V.at[i].set(value))
        state = execute(state, 0xA600)

        state = execute(state, 0xF055 | (x << 8))
        assert state.I == 0x600 + x + 1

        for i in range(x + 1):
            state = state.replace(V=state.V.at[i].set(0))
        state = execute(state, 0xA600)
        state = execute(state, 0xF065 | (x << 8))

        assert [int(v) for v in state.V] == values
        assert state.I == 0x600 + x + 1


class TestKeypad:
    """Test FX0A."""

    def test_wait_for_key_blocking(self, fresh_state):
        """FX0A - With no key pressed the PC is rewound."""
        initial_pc = fresh_state.pc

        state = execute(fresh_state, 0xF00A)

        assert state.pc == initial_pc - 2
        assert state.V[0] == 0

    def test_wait_for_key_lowest_index(self, fresh_state):
        """FX0A - The lowest pressed key is stored."""
        state = fresh_state.replace(keypad=fresh_state.keypad.at[7].set(True).at[12].set(True))
        initial_pc = state.pc

        state = execute(state, 0xF30A)

        assert state.V[3] == 7
        assert state.pc == initial_pc


class TestMiscInstructionDispatch:
    """Test misc instruction dispatch logic."""

    def test_add_to_index(self, fresh_state):
        """FX1E - Add VX to I register."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0xA300)  # I = 0x300
        state = execute(state, 0xF01E)  # I += V0

        assert state.I == 0x310
        assert state.V[15] == 0

    def test_add_to_index_no_flag(self, fresh_state):
        """FX1E - Passing 0xFFF neither wraps I to 12 bits nor sets VF."""
        state = execute(fresh_state, 0x60FF)  # V0 = 0xFF
        state = execute(state, 0xAF80)  # I = 0xF80
        state = execute(state, 0xF01E)  # I += V0

        assert state.I == 0x107F
        assert state.V[15] == 0

    @pytest.mark.parametrize("instruction", [0xF000, 0xF0FF, 0xF056, 0xE000, 0x5121])
    def test_unknown_sub_operations(self, fresh_state, instruction):
        """Unmatched sub-fields are unknown opcodes."""
        with pytest.raises(UnknownOpcodeError):
            execute(fresh_state, instruction)
