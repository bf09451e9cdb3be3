#!/usr/bin/env python3
"""
CHIP-8 emulator command line
============================

Usage:
  python cli.py ROM [--scale N] [--delay MS | --cpu-hz HZ] [--log]
  python cli.py ROM --headless --cycles N
  python cli.py ROM --disasm

The window (pyglet) is only imported when one is actually opened, so
--headless and --disasm work on machines without a display.
"""

import argparse
import sys

import chip8
from chip8 import Chip8, Chip8Error
from disasm import disassemble_rom
from render import frame_to_text

DEFAULT_SCALE = 10
DEFAULT_CPU_HZ = 500


def build_parser():
    parser = argparse.ArgumentParser(
        description="CHIP-8 emulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Examples:\n"
               "  python cli.py pong.ch8\n"
               "  python cli.py pong.ch8 --scale 15 --delay 3\n"
               "  python cli.py pong.ch8 --headless --cycles 2000\n"
               "  python cli.py pong.ch8 --disasm\n"
    )
    parser.add_argument("rom", help="ROM image to load at 0x200")
    parser.add_argument("--scale", type=int, default=DEFAULT_SCALE, metavar="N",
                        help="Pixel scale factor for the window (default: %d)" % DEFAULT_SCALE)
    parser.add_argument("--delay", type=float, default=None, metavar="MS",
                        help="Milliseconds between cycles (overrides --cpu-hz)")
    parser.add_argument("--cpu-hz", type=float, default=DEFAULT_CPU_HZ, metavar="HZ",
                        help="Cycles per second, also the timer rate (default: %d)" % DEFAULT_CPU_HZ)
    parser.add_argument("--log", action="store_true",
                        help="Trace every instruction (F1 toggles in the window)")
    parser.add_argument("--headless", action="store_true",
                        help="Run without a window and print the framebuffer")
    parser.add_argument("--cycles", type=int, default=1000, metavar="N",
                        help="Cycles to run in --headless mode (default: 1000)")
    parser.add_argument("--disasm", action="store_true",
                        help="Print the ROM disassembly and exit")
    return parser


def cycle_interval(args):
    """Seconds between two cycles, from --delay or --cpu-hz."""
    if args.delay is not None:
        if args.delay <= 0:
            raise ValueError("--delay must be positive")
        return args.delay / 1000.0
    if args.cpu_hz <= 0:
        raise ValueError("--cpu-hz must be positive")
    return 1.0 / args.cpu_hz


def check_scale(args):
    if args.scale <= 0:
        raise ValueError("--scale must be positive")
    return args.scale


def print_disassembly(data):
    for address, opcode, text in disassemble_rom(data):
        print("%03X: %04X  %s" % (address, opcode, text))


def run_headless(machine, cycles):
    machine.run(cycles)
    print(frame_to_text(machine.video))
    print("pc=0x%03X I=0x%03X cycles=%d" % (machine.pc, machine.I, machine.cycle_count))


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    chip8.set_logging(args.log)

    try:
        interval = cycle_interval(args)
        scale = check_scale(args)
    except ValueError as e:
        parser.error(str(e))

    try:
        if args.disasm:
            with open(args.rom, "rb") as f:
                print_disassembly(f.read())
            return 0

        machine = Chip8()
        machine.load_rom_file(args.rom)
    except OSError as e:
        print("Cannot read ROM:", e, file=sys.stderr)
        return 1
    except Chip8Error as e:
        print("Emulation error:", e, file=sys.stderr)
        return 1

    if args.headless:
        try:
            run_headless(machine, args.cycles)
        except Chip8Error as e:
            print("Emulation error:", e, file=sys.stderr)
            return 1
        return 0

    from emulator import run_window
    run_window(machine, args.rom, scale=scale, cycle_interval=interval)
    return 0


if __name__ == "__main__":
    sys.exit(main())
