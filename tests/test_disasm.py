import pytest

from disasm import disassemble, disassemble_rom


@pytest.mark.parametrize("opcode, text", [
    (0x00E0, "CLS"),
    (0x00EE, "RET"),
    (0x1ABC, "JP 0xABC"),
    (0x2300, "CALL 0x300"),
    (0x3A2A, "SE VA, 0x2A"),
    (0x4B00, "SNE VB, 0x00"),
    (0x5120, "SE V1, V2"),
    (0x6F01, "LD VF, 0x01"),
    (0x70FF, "ADD V0, 0xFF"),
    (0x8014, "ADD V0, V1"),
    (0x8015, "SUB V0, V1"),
    (0x8016, "SHR V0"),
    (0x801E, "SHL V0"),
    (0x9120, "SNE V1, V2"),
    (0xA123, "LD I, 0x123"),
    (0xB300, "JP V0, 0x300"),
    (0xC30F, "RND V3, 0x0F"),
    (0xD125, "DRW V1, V2, 5"),
    (0xE49E, "SKP V4"),
    (0xE4A1, "SKNP V4"),
    (0xF30A, "LD V3, K"),
    (0xF029, "LD F, V0"),
    (0xF233, "LD B, V2"),
    (0xF355, "LD [I], V3"),
    (0xF365, "LD V3, [I]"),
])
def test_known_instructions(opcode, text):
    assert disassemble(opcode) == text


@pytest.mark.parametrize("opcode", [0x0123, 0x5121, 0x8008, 0x9AB3, 0xE0FF, 0xF0FF])
def test_unknown_words(opcode):
    assert disassemble(opcode) == "DW 0x%04X" % opcode


def test_disassemble_rom_addresses_and_padding():
    listing = list(disassemble_rom(b"\x00\xE0\x12\x00\x6A"))
    assert listing == [
        (0x200, 0x00E0, "CLS"),
        (0x202, 0x1200, "JP 0x200"),
        (0x204, 0x6A00, "LD VA, 0x00"),
    ]
