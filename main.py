"""
CHIP-8 host: pygame window or headless frame runner
"""

import argparse
import sys

import jax
import numpy as np

from chip8vm import (
    create_state, reset, load_rom_file, set_keys, advance_frame, last_frame, disassemble,
    OversizeError, SCREEN_WIDTH, SCREEN_HEIGHT,
)
from chip8vm.logging import ConsoleLogger
from chip8vm.rendering import COLOR_SCHEMES, display_to_rgb, create_color_scheme, display_to_text, save_frame
from chip8vm.runner import run_frames


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run a CHIP-8 ROM.")
    parser.add_argument("rom", help="Path to the ROM image")
    parser.add_argument("--frames", type=int, default=None,
                        help="Run this many frames headless instead of opening a window")
    parser.add_argument("--scale", type=int, default=8, help="Window/screenshot upscaling factor")
    parser.add_argument("--color-scheme", default="classic", choices=list(COLOR_SCHEMES), help="Palette name")
    parser.add_argument("--seed", type=int, default=0, help="Random number generator seed")
    parser.add_argument("--log-level", default="INFO", help="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    parser.add_argument("--trace", action="store_true", help="Log every instruction (needs DEBUG level)")
    parser.add_argument("--screenshot", default=None, help="Save the last headless frame to this file")
    parser.add_argument("--ascii", action="store_true", help="Print the last headless frame as text")
    parser.add_argument("--disassemble", action="store_true", help="Print the ROM listing and exit")
    return parser.parse_args(argv)


def run_window(state, rom_filename, logger, scale=8, color_scheme="classic"):
    """Windowed loop: one frame per 60 Hz tick. Needs the `host` extra."""
    import pygame

    # 1 2 3 C / 4 5 6 D / 7 8 9 E / A 0 B F on the left block of a QWERTY keyboard
    key_map = {
        pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
        pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
        pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
        pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
    }

    on_color, off_color = create_color_scheme(color_scheme)

    pygame.init()
    screen = pygame.display.set_mode((SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale))
    pygame.display.set_caption("chip8vm")
    clock = pygame.time.Clock()

    keypad = [False] * 16
    running = True
    paused = False

    logger.info("Controls: ESC=Quit, P=Pause, Backspace=Reset")

    while running:
        clock.tick(60)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_p:
                    paused = not paused
                    logger.info("Paused" if paused else "Resumed")
                elif event.key == pygame.K_BACKSPACE:
                    state = load_rom_file(reset(state), rom_filename)
                    keypad = [False] * 16
                    paused = False
                    logger.info("Reset")
                elif event.key in key_map:
                    keypad[key_map[event.key]] = True
            elif event.type == pygame.KEYUP:
                if event.key in key_map:
                    keypad[key_map[event.key]] = False

        if not paused:
            state = set_keys(state, keypad)
            state, fault = advance_frame(state)
            if fault is not None:
                logger.fault(fault)
                paused = True

        rgb = display_to_rgb(last_frame(state), scale, on_color, off_color)
        # pygame surfaces are indexed (x, y)
        pygame.surfarray.blit_array(screen, np.transpose(rgb, (1, 0, 2)))
        pygame.display.flip()

    pygame.quit()


def main(argv=None):
    args = parse_args(argv)
    logger = ConsoleLogger(log_level=args.log_level)

    if args.disassemble:
        with open(args.rom, "rb") as f:
            for address, word, text in disassemble(f.read()):
                print(f"0x{address:03X}: {word:04X}  {text}")
        return 0

    state = create_state(jax.random.PRNGKey(args.seed))
    try:
        state = load_rom_file(state, args.rom)
    except OversizeError as e:
        logger.error(str(e))
        return 1
    logger.info(f"Loaded: {args.rom}")

    if args.frames is None:
        run_window(state, args.rom, logger, args.scale, args.color_scheme)
        return 0

    state, fault = run_frames(state, args.frames, logger, trace=args.trace)
    if args.ascii:
        print(display_to_text(last_frame(state)))
    if args.screenshot:
        save_frame(last_frame(state), args.screenshot, args.scale, args.color_scheme)
        logger.info(f"Saved frame to {args.screenshot}")
    return 1 if fault is not None else 0


if __name__ == "__main__":
    sys.exit(main())
