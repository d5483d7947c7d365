"""Headless frame loop for running ROMs without a window."""

from typing import Optional

from chip8vm.constants import ADDRESS_MASK
from chip8vm.state import EmulatorState
from chip8vm.decode import decode, mnemonic
from chip8vm.emulator import peek
from chip8vm.errors import MachineFault
from chip8vm.frame import advance_frame, cycle
from chip8vm.logging import ConsoleLogger, build_progress_bar


def _traced_frame(state: EmulatorState, logger: ConsoleLogger):
    """Advance one frame, logging each instruction before it runs."""
    frame_count = int(state.frame_count)
    while int(state.frame_count) == frame_count:
        instruction = peek(state)
        logger.trace(int(state.pc) & ADDRESS_MASK, instruction, mnemonic(decode(instruction)))
        state, fault = cycle(state)
        if fault is not None:
            return state, fault
    return state, None


def run_frames(
    state: EmulatorState,
    frames: int,
    logger: Optional[ConsoleLogger] = None,
    progress: bool = True,
    trace: bool = False,
) -> tuple[EmulatorState, Optional[MachineFault]]:
    """Advance the machine by a number of frames.

    Stops at the first fault, which is logged with its register dump and
    returned alongside the state the fault left behind.
    """
    logger = logger or ConsoleLogger()
    bar = build_progress_bar(frames) if progress else None

    try:
        for _ in range(frames):
            if trace and logger.enabled("DEBUG"):
                state, fault = _traced_frame(state, logger)
            else:
                state, fault = advance_frame(state)
            if fault is not None:
                logger.fault(fault)
                return state, fault
            if bar is not None:
                bar.update(1)
    finally:
        if bar is not None:
            bar.close()

    logger.info(f"Ran {frames} frames, PC=0x{int(state.pc):03X}")
    return state, None
