"""Frame scheduling: CPU cycles grouped into 60 Hz frames."""

from typing import Optional

import jax
import jax.numpy as jnp
import numpy as np
from chip8vm.state import EmulatorState
from chip8vm.decode import decode
from chip8vm.constants import CYCLES_PER_FRAME, ADDRESS_MASK
from chip8vm.emulator import fetch, dispatch, check_instruction
from chip8vm.errors import MachineFault


def _decrement(timer: jnp.ndarray) -> jnp.ndarray:
    return jnp.where(timer > 0, timer - 1, timer).astype(jnp.uint8)


@jax.jit
def tick_frame(state: EmulatorState) -> EmulatorState:
    """Close the current frame: decrement both timers and emit the display."""
    return state.replace(
        delay_timer=_decrement(state.delay_timer),
        sound_timer=_decrement(state.sound_timer),
        frame=state.display,
        frame_count=state.frame_count + 1,
        frame_step=jnp.zeros_like(state.frame_step),
    )


def cycle(state: EmulatorState) -> tuple[EmulatorState, Optional[MachineFault]]:
    """Run one fetch-decode-execute cycle.

    Returns the new state and None, or the unchanged input state and the
    fault that stopped the instruction. Every CYCLES_PER_FRAME successful
    cycles close a frame.
    """
    address = int(state.pc) & ADDRESS_MASK
    fetched, instruction = fetch(state)
    instruction = int(instruction)

    fault = check_instruction(fetched, decode(instruction), address)
    if fault is not None:
        return state, fault

    state = dispatch(fetched, instruction)
    state = state.replace(frame_step=state.frame_step + 1)
    if int(state.frame_step) >= CYCLES_PER_FRAME:
        state = tick_frame(state)
    return state, None


def advance_frame(state: EmulatorState) -> tuple[EmulatorState, Optional[MachineFault]]:
    """Run cycles until the current frame is emitted.

    Cycles already executed in this frame are not repeated, so a frame
    started with ``cycle`` is completed rather than restarted.
    """
    for _ in range(CYCLES_PER_FRAME - int(state.frame_step)):
        state, fault = cycle(state)
        if fault is not None:
            return state, fault
    return state, None


def last_frame(state: EmulatorState) -> np.ndarray:
    """Return the last emitted frame as a (32, 64) row-major boolean array."""
    return np.asarray(state.frame, dtype=np.bool_)
