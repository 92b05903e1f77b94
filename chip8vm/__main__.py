"""Run a CHIP-8 ROM headless.

Example:
    python -m chip8vm games/pong.ch8 --ticks 600 --show
"""

import argparse
import sys

from tqdm import tqdm

from chip8vm import Machine, MachineConfig, Chip8Error, RunState, load_rom
from chip8vm.constants import INSTRUCTIONS_PER_TICK
from chip8vm.rendering import display_to_text


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="chip8vm",
        description="Run a CHIP-8 ROM for a fixed number of ticks without a display"
    )
    parser.add_argument("rom", help="Path to the ROM image")
    parser.add_argument(
        "--ticks", type=int, default=600,
        help="Number of ticks to run (default: 600, ten seconds at 60 Hz)"
    )
    parser.add_argument(
        "--instructions-per-tick", type=int, default=INSTRUCTIONS_PER_TICK,
        help=f"Instructions executed per tick (default: {INSTRUCTIONS_PER_TICK})"
    )
    parser.add_argument("--seed", type=int, default=0, help="Random seed for CXNN")
    parser.add_argument(
        "--strict", action="store_true",
        help="Fail on undefined opcodes instead of ignoring them"
    )
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    )
    parser.add_argument("--show", action="store_true", help="Print the final screen")
    parser.add_argument("--no-progress", action="store_true", help="Disable the progress bar")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        config = MachineConfig(
            instructions_per_tick=args.instructions_per_tick,
            seed=args.seed,
            strict=args.strict,
            log_level=args.log_level,
        ).validate()
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    machine = Machine(config)
    try:
        machine.load(load_rom(args.rom))
    except (OSError, Chip8Error) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    machine.logger.info(f"Running {args.rom} for {args.ticks} ticks")
    status = 0
    for _ in tqdm(range(args.ticks), desc="Ticks", unit="tick", disable=args.no_progress):
        try:
            machine.tick()
        except Chip8Error as e:
            print(f"error: {e}", file=sys.stderr)
            status = 1
            break
        if machine.run_state is RunState.AWAITING_KEY:
            machine.logger.info(f"Program is waiting for a key (V{machine.key_register:X}), stopping")
            break

    if args.show:
        print(display_to_text(machine.display))
    return status


if __name__ == "__main__":
    sys.exit(main())
