"""Shared fixtures for the CHIP-8 test suite."""

import random
import struct

import pytest

from chip8 import Chip8


def assemble_words(*opcodes):
    """Pack 16-bit instruction words big-endian, the way ROM files store them."""
    return struct.pack(">%dH" % len(opcodes), *opcodes)


@pytest.fixture
def machine():
    return Chip8(rng=random.Random(1234))


@pytest.fixture
def program(machine):
    """Load instruction words at 0x200 and return the machine."""
    def _load(*opcodes):
        machine.load_rom(assemble_words(*opcodes))
        return machine
    return _load
