"""
pygame front end for chip8core
"""

import argparse

import pygame

from chip8core import Machine, OutOfRangeAccess, display_to_rgb, create_color_scheme
from chip8core.logging import ConsoleLogger, ConsoleCallback, MachineCallback

# COSMAC VIP keypad on the left block of a QWERTY keyboard
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}


class BellCallback(MachineCallback):
    """Ring the terminal bell when the sound timer fires."""

    def on_tone(self):
        print("\a", end="", flush=True)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run a CHIP-8 program")
    parser.add_argument("rom", help="Path to a CHIP-8 program image")
    parser.add_argument("--scale", type=int, default=8, help="Pixel upscaling factor")
    parser.add_argument("--rate", type=int, default=60, help="Steps per second")
    parser.add_argument("--seed", type=int, default=0, help="Seed for CXNN")
    parser.add_argument("--color-scheme", default="classic", help="Display colors")
    parser.add_argument("--strict", action="store_true", help="Stop on unknown opcodes")
    parser.add_argument("--log-level", default="INFO", help="DEBUG, INFO, WARNING or ERROR")
    return parser.parse_args(argv)


def run_emulator(rom_filename, scale=8, rate=60, seed=0, color_scheme="classic",
                 strict=False, log_level="INFO"):
    """Main emulator loop, one machine step per clock tick."""
    logger = ConsoleLogger(name="chip8", log_level=log_level)
    on_color, off_color = create_color_scheme(color_scheme)

    with open(rom_filename, "rb") as f:
        rom_data = f.read()

    machine = Machine(seed=seed, callbacks=[ConsoleCallback(logger), BellCallback()], strict=strict)
    machine.load(rom_data)

    pygame.init()
    screen = pygame.display.set_mode((64 * scale, 32 * scale))
    pygame.display.set_caption(f"CHIP-8 - {rom_filename}")
    clock = pygame.time.Clock()

    logger.info("Controls: ESC=Quit, P=Pause, F5=Reset")
    running = True
    paused = False

    while running:
        clock.tick(rate)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_p:
                    paused = not paused
                elif event.key == pygame.K_F5:
                    machine.reset()
                    machine.load(rom_data)
                    paused = False
                elif event.key in KEY_MAP:
                    machine.key_down(KEY_MAP[event.key])
            elif event.type == pygame.KEYUP:
                if event.key in KEY_MAP:
                    machine.key_up(KEY_MAP[event.key])

        if not paused:
            try:
                machine.step()
            except OutOfRangeAccess:
                # Already logged by ConsoleCallback; wait for a reset.
                paused = True

        if machine.display_dirty():
            frame = display_to_rgb(machine.read_display(), scale, on_color, off_color)
            surface = pygame.surfarray.make_surface(frame.swapaxes(0, 1))
            screen.blit(surface, (0, 0))
            pygame.display.flip()

    pygame.quit()


if __name__ == "__main__":
    args = parse_args()
    run_emulator(
        args.rom,
        scale=args.scale,
        rate=args.rate,
        seed=args.seed,
        color_scheme=args.color_scheme,
        strict=args.strict,
        log_level=args.log_level,
    )
