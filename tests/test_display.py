"""Tests for display operations (DXYN).

The display is row-major: ``display[y, x]``.
"""

import pytest
import jax.numpy as jnp
from chip8vm import execute
from conftest import setup_sprite_in_memory


def draw_setup(state, address, sprite, x, y):
    """Put a sprite in memory and point V0, V1 and I at it."""
    state = setup_sprite_in_memory(state, address, sprite)
    state = execute(state, 0x6000 | x)  # V0 = x
    state = execute(state, 0x6100 | y)  # V1 = y
    return execute(state, 0xA000 | address)  # I = address


class TestBasicSprites:
    """Test basic sprite drawing."""

    def test_basic_sprite_draw(self, fresh_state):
        """Test basic sprite drawing without collision."""
        # Simple 2x2 box sprite
        state = draw_setup(fresh_state, 0x300, [0xC0, 0xC0], x=10, y=5)

        state = execute(state, 0xD012)

        assert state.display[5, 10]  # Top-left
        assert state.display[5, 11]  # Top-right
        assert state.display[6, 10]  # Bottom-left
        assert state.display[6, 11]  # Bottom-right
        assert not state.display[5, 12]  # Outside sprite
        assert jnp.sum(state.display) == 4

        assert state.V[15] == 0

    def test_collision_detection(self, fresh_state):
        """Drawing a 1-pixel sprite twice clears it and reports a collision."""
        state = draw_setup(fresh_state, 0x400, [0x80], x=20, y=10)

        state = execute(state, 0xD011)
        assert state.display[10, 20]
        assert state.V[15] == 0

        state = execute(state, 0xD011)
        assert not state.display[10, 20]  # Pixel erased by XOR
        assert state.V[15] == 1

    def test_xor_behavior(self, fresh_state):
        """Test XOR behavior - drawing twice should erase."""
        state = draw_setup(fresh_state, 0x500, [0xF0], x=8, y=15)

        state = execute(state, 0xD011)
        for x in range(8, 12):
            assert state.display[15, x]
        assert state.V[15] == 0

        state = execute(state, 0xD011)
        assert jnp.sum(state.display) == 0
        assert state.V[15] == 1

    def test_partial_overlap_collision(self, fresh_state):
        """Any single cleared pixel sets VF; unlit overlaps do not."""
        state = draw_setup(fresh_state, 0x500, [0x80, 0x00], x=0, y=0)
        state = execute(state, 0xD011)  # Light (0, 0)

        state = setup_sprite_in_memory(state, 0x500, [0x40, 0x80])
        state = execute(state, 0xD012)  # Light (1, 0), toggle (0, 1)
        assert state.V[15] == 0

        state = setup_sprite_in_memory(state, 0x500, [0x00, 0x80])
        state = execute(state, 0xD012)  # Clear (0, 1)
        assert state.V[15] == 1
        assert state.display[0, 0]
        assert state.display[0, 1]
        assert not state.display[1, 0]

    def test_clear_then_draw(self, fresh_state):
        """00E0 followed by a draw leaves only the drawn pixels lit."""
        state = fresh_state.replace(display=jnp.ones_like(fresh_state.display))
        state = draw_setup(state, 0x600, [0x81], x=3, y=4)

        state = execute(state, 0x00E0)
        state = execute(state, 0xD011)

        assert jnp.sum(state.display) == 2
        assert state.display[4, 3]
        assert state.display[4, 10]
        assert state.V[15] == 0


class TestScreenWrapping:
    """Test that sprites wrap around screen edges."""

    def test_right_edge_wraps(self, fresh_state):
        """Pixels past column 63 continue at column 0."""
        state = draw_setup(fresh_state, 0x600, [0xFF], x=60, y=0)

        state = execute(state, 0xD011)

        for x in (60, 61, 62, 63, 0, 1, 2, 3):
            assert state.display[0, x], f"column {x} not drawn"
        assert jnp.sum(state.display) == 8

    def test_bottom_edge_wraps(self, fresh_state):
        """Rows past 31 continue at row 0."""
        state = draw_setup(fresh_state, 0x700, [0x80, 0x80, 0x80], x=0, y=30)

        state = execute(state, 0xD013)

        assert state.display[30, 0]
        assert state.display[31, 0]
        assert state.display[0, 0]

    def test_coordinate_wrapping(self, fresh_state):
        """Coordinates beyond the screen are taken modulo its size."""
        state = draw_setup(fresh_state, 0x800, [0x80], x=70, y=37)

        state = execute(state, 0xD011)

        # (70 % 64, 37 % 32) = (6, 5)
        assert state.display[5, 6]

    def test_wrapped_collision(self, fresh_state):
        """A collision on a wrapped pixel still sets VF."""
        state = fresh_state.replace(display=fresh_state.display.at[0, 1].set(True))
        state = draw_setup(state, 0x600, [0xFF], x=58, y=0)

        state = execute(state, 0xD011)

        assert not state.display[0, 1]
        assert state.V[15] == 1


class TestSpriteVariations:
    """Test different sprite configurations."""

    def test_different_sprite_heights(self, fresh_state):
        """Test sprites with different N values."""
        # Diagonal line
        state = draw_setup(fresh_state, 0x900, [0x80, 0x40, 0x20, 0x10, 0x08], x=10, y=8)

        # Draw only first 3 rows (N=3)
        state = execute(state, 0xD013)

        assert state.display[8, 10]
        assert state.display[9, 11]
        assert state.display[10, 12]
        assert not state.display[11, 13]  # Row 3: not drawn (N=3)

    def test_vf_register_preservation(self, fresh_state):
        """VF is cleared when nothing collides."""
        state = draw_setup(fresh_state, 0xB00, [0x80], x=5, y=5)
        state = execute(state, 0x6F01)  # VF = 1

        state = execute(state, 0xD011)

        assert state.V[15] == 0

    def test_font_glyph_draw(self, fresh_state):
        """FX29 then DXY5 draws a built-in digit."""
        state = execute(fresh_state, 0x6200)  # V2 = 0
        state = execute(state, 0xF229)  # I = glyph for V2
        state = execute(state, 0x6000)  # V0 = 0
        state = execute(state, 0x6100)  # V1 = 0

        state = execute(state, 0xD015)

        # Glyph 0 is 0xF0 0x90 0x90 0x90 0xF0
        assert [bool(state.display[0, x]) for x in range(4)] == [True] * 4
        assert [bool(state.display[2, x]) for x in range(4)] == [True, False, False, True]
        assert jnp.sum(state.display) == 14
