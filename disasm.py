"""
CHIP-8 disassembler (enough for tracing and for looking at a ROM).

Mnemonics follow the CowGods reference notation:
    LD V1, 0x2A     DRW V0, V1, 5     LD [I], V3
Words that are not instructions come out as ``DW 0xNNNN``.
"""

ALU_NAMES = {
    0x0: "LD", 0x1: "OR", 0x2: "AND", 0x3: "XOR", 0x4: "ADD",
    0x5: "SUB", 0x6: "SHR", 0x7: "SUBN", 0xE: "SHL",
}

# Fx.. family, keyed by the low byte. "{x}" is the register name.
MISC_FORMATS = {
    0x07: "LD {x}, DT",
    0x0A: "LD {x}, K",
    0x15: "LD DT, {x}",
    0x18: "LD ST, {x}",
    0x1E: "ADD I, {x}",
    0x29: "LD F, {x}",
    0x33: "LD B, {x}",
    0x55: "LD [I], {x}",
    0x65: "LD {x}, [I]",
}


def disassemble(opcode):
    """Return the mnemonic text for one 16-bit instruction word."""
    prefix = opcode >> 12
    x = "V%X" % ((opcode >> 8) & 0xF)
    y = "V%X" % ((opcode >> 4) & 0xF)
    n = opcode & 0xF
    kk = opcode & 0xFF
    nnn = opcode & 0x0FFF

    if prefix == 0x0:
        if opcode == 0x00E0:
            return "CLS"
        if opcode == 0x00EE:
            return "RET"
    elif prefix == 0x1:
        return f"JP 0x{nnn:03X}"
    elif prefix == 0x2:
        return f"CALL 0x{nnn:03X}"
    elif prefix == 0x3:
        return f"SE {x}, 0x{kk:02X}"
    elif prefix == 0x4:
        return f"SNE {x}, 0x{kk:02X}"
    elif prefix == 0x5 and n == 0:
        return f"SE {x}, {y}"
    elif prefix == 0x6:
        return f"LD {x}, 0x{kk:02X}"
    elif prefix == 0x7:
        return f"ADD {x}, 0x{kk:02X}"
    elif prefix == 0x8 and n in ALU_NAMES:
        if n in (0x6, 0xE):
            return f"{ALU_NAMES[n]} {x}"
        return f"{ALU_NAMES[n]} {x}, {y}"
    elif prefix == 0x9 and n == 0:
        return f"SNE {x}, {y}"
    elif prefix == 0xA:
        return f"LD I, 0x{nnn:03X}"
    elif prefix == 0xB:
        return f"JP V0, 0x{nnn:03X}"
    elif prefix == 0xC:
        return f"RND {x}, 0x{kk:02X}"
    elif prefix == 0xD:
        return f"DRW {x}, {y}, {n}"
    elif prefix == 0xE:
        if kk == 0x9E:
            return f"SKP {x}"
        if kk == 0xA1:
            return f"SKNP {x}"
    elif prefix == 0xF and kk in MISC_FORMATS:
        return MISC_FORMATS[kk].format(x=x)

    return f"DW 0x{opcode:04X}"


def disassemble_rom(data, origin=0x200):
    """Yield ``(address, opcode, text)`` for every 2-byte word of a ROM image.

    A trailing odd byte is padded with 0x00.
    """
    data = bytes(data)
    if len(data) % 2:
        data += b"\x00"
    for offset in range(0, len(data), 2):
        opcode = (data[offset] << 8) | data[offset + 1]
        yield origin + offset, opcode, disassemble(opcode)
