# CHIP-8 Virtual Machine core
# Input - the host writes key states into `keys`, the CPU only reads them.
# Output - 64x32 display (every pixel is either on or off (0 || 1)) & a sound timer counter.
# CPU - CowGods CHIP8 Technical reference http://devernay.free.fr/hacks/chip8/C8TECH10.HTM#0.0
# Memory - 4096 bytes which include: the font glyphs (at 0x050) and the loaded ROM (at 0x200).
#----------------------------------------------------------------------------------------------
# One call to cycle() = fetch one instruction, execute it, tick both timers once.
# The timers decay per cycle, not per 1/60 s, so the host's cycle rate is also the timer rate.
# Nothing here imports pyglet: the window lives in emulator.py.

import random

import numpy as np

from disasm import disassemble

# ---- Memory map ----
MEMORY_SIZE = 4096
FONTSET_ADDRESS = 0x050
START_ADDRESS = 0x200
MAX_ROM_SIZE = MEMORY_SIZE - START_ADDRESS   # 3584 bytes

# ---- Display / keypad ----
WIDTH, HEIGHT = 64, 32
NUM_KEYS = 16
NUM_REGISTERS = 16
STACK_DEPTH = 16

# Standard CHIP-8 fontset (binary pixel patterns)
FONTSET = [
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
] #notice 80 bytes

GLYPH_SIZE = 5


#make it true if you want the logs
logs_on = False

def log(*args):
    if logs_on:
        print(*args)

def set_logging(on):
    global logs_on
    logs_on = bool(on)


# ---- Errors ----
class Chip8Error(Exception):
    """Base class for everything the interpreter raises."""


class RomTooLargeError(Chip8Error):
    pass


class MemoryAccessError(Chip8Error):
    def __init__(self, address):
        super().__init__("Memory access out of bounds: 0x%04X" % address)
        self.address = address


class StackOverflowError(Chip8Error):
    pass


class StackUnderflowError(Chip8Error):
    pass


def decode(opcode):
    """Split an instruction word into its operand fields.

    Returns ``(x, y, n, kk, nnn)``:
    x and y are the second and third nibbles (register indices),
    n is the low nibble, kk the low byte and nnn the low 12 bits.
    """
    x = (opcode >> 8) & 0xF
    y = (opcode >> 4) & 0xF
    n = opcode & 0xF
    kk = opcode & 0xFF
    nnn = opcode & 0x0FFF
    return x, y, n, kk, nnn


class Chip8:
    """One CHIP-8 machine: memory, registers, stack, timers, keypad and framebuffer.

    The host calls :meth:`cycle` repeatedly.  Between calls it may read
    ``video`` and write ``keys``; nothing else is meant to be touched from
    outside.
    """

    def __init__(self, rng=None):
        self.rng = rng if rng is not None else random.Random()
        self.reset()

    def reset(self):
        # ---- CPU state ----
        self.memory = bytearray(MEMORY_SIZE)
        self.V = [0] * NUM_REGISTERS          # V0..VF, VF doubles as the flag register
        self.I = 0                            # index register (memory pointer)
        self.pc = START_ADDRESS
        self.stack = np.zeros(STACK_DEPTH, dtype=np.uint16)
        self.sp = 0
        self.delay_timer = 0
        self.sound_timer = 0
        self.keys = np.zeros(NUM_KEYS, dtype=np.uint8)
        self.video = np.zeros((HEIGHT, WIDTH), dtype=np.uint8)
        self.should_draw = True
        self.cycle_count = 0

        # Load fontset into memory
        self.memory[FONTSET_ADDRESS:FONTSET_ADDRESS + len(FONTSET)] = bytes(FONTSET)

    @property
    def sound_active(self):
        return self.sound_timer > 0

    # ---- Load ROM ----
    def load_rom(self, data):
        data = bytes(data)
        if len(data) > MAX_ROM_SIZE:
            raise RomTooLargeError(
                "ROM is %d bytes, at most %d fit at 0x%03X" % (len(data), MAX_ROM_SIZE, START_ADDRESS))
        self.memory[START_ADDRESS:START_ADDRESS + len(data)] = data
        log("Loaded %d bytes at 0x%03X" % (len(data), START_ADDRESS))

    def load_rom_file(self, path):
        log("Loading ROM:", path)
        with open(path, "rb") as f:
            self.load_rom(f.read())

    # ---- Memory / stack access ----
    def read_byte(self, address):
        if not 0 <= address < MEMORY_SIZE:
            raise MemoryAccessError(address)
        return self.memory[address]

    def write_byte(self, address, value):
        if not 0 <= address < MEMORY_SIZE:
            raise MemoryAccessError(address)
        self.memory[address] = value & 0xFF

    def push(self, address):
        if self.sp >= STACK_DEPTH:
            raise StackOverflowError("Stack overflow on CALL at 0x%03X" % (self.pc - 2))
        self.stack[self.sp] = address
        self.sp += 1

    def pop(self):
        if self.sp == 0:
            raise StackUnderflowError("Stack underflow on RET at 0x%03X" % (self.pc - 2))
        self.sp -= 1
        return int(self.stack[self.sp])

    # ---- Cycle ----
    def cycle(self):
        """Fetch, decode and execute one instruction, then tick the timers.

        Returns the instruction word that was executed.
        """
        # Fetch opcode (big-endian)
        opcode = (self.read_byte(self.pc) << 8) | self.read_byte(self.pc + 1)
        if logs_on:
            log("%03X: %04X  %s" % (self.pc, opcode, disassemble(opcode)))
        self.pc += 2

        self.execute(opcode)
        self.cycle_count += 1

        # Timers
        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            self.sound_timer -= 1

        return opcode

    def run(self, cycles):
        for _ in range(cycles):
            self.cycle()

    def execute(self, opcode):
        """Dispatch one instruction word; pc must already point past it."""
        x, y, n, kk, nnn = decode(opcode)
        prefix = opcode >> 12

        if prefix == 0x0:
            if opcode == 0x00E0:
                self.op_CLS()
            elif opcode == 0x00EE:
                self.op_RET()
            else:
                self.op_unknown(opcode)     # 0nnn SYS is ignored too
        elif prefix == 0x1:
            self.pc = nnn                   # JP nnn
        elif prefix == 0x2:
            self.push(self.pc)              # CALL nnn
            self.pc = nnn
        elif prefix == 0x3:
            if self.V[x] == kk:             # SE Vx, kk
                self.pc += 2
        elif prefix == 0x4:
            if self.V[x] != kk:             # SNE Vx, kk
                self.pc += 2
        elif prefix == 0x5:
            if n != 0:
                self.op_unknown(opcode)
            elif self.V[x] == self.V[y]:    # SE Vx, Vy
                self.pc += 2
        elif prefix == 0x6:
            self.V[x] = kk                  # LD Vx, kk
        elif prefix == 0x7:
            self.V[x] = (self.V[x] + kk) & 0xFF   # ADD Vx, kk (no carry)
        elif prefix == 0x8:
            self.op_ALU(opcode, x, y, n)
        elif prefix == 0x9:
            if n != 0:
                self.op_unknown(opcode)
            elif self.V[x] != self.V[y]:    # SNE Vx, Vy
                self.pc += 2
        elif prefix == 0xA:
            self.I = nnn                    # LD I, nnn
        elif prefix == 0xB:
            self.pc = self.V[0] + nnn       # JP V0, nnn
        elif prefix == 0xC:
            self.V[x] = self.rng.getrandbits(8) & kk   # RND Vx, kk
        elif prefix == 0xD:
            self.op_DRW(x, y, n)
        elif prefix == 0xE:
            key = self.V[x] & 0xF
            if kk == 0x9E:                  # SKP Vx
                if self.keys[key]:
                    self.pc += 2
            elif kk == 0xA1:                # SKNP Vx
                if not self.keys[key]:
                    self.pc += 2
            else:
                self.op_unknown(opcode)
        else:
            self.op_misc(opcode, x, kk)

    # ---- Opcode handlers ----

    def op_unknown(self, opcode):
        log("Unknown opcode %04X ignored" % opcode)

    # 00E0 - Clear the display
    def op_CLS(self):
        self.video[:] = 0
        self.should_draw = True

    # 00EE - Return from subroutine
    def op_RET(self):
        self.pc = self.pop()

    # 8xy0..8xyE - register to register math and logic
    def op_ALU(self, opcode, x, y, n):
        vx, vy = self.V[x], self.V[y]

        if n == 0x0:
            self.V[x] = vy
        elif n == 0x1:
            self.V[x] = vx | vy
        elif n == 0x2:
            self.V[x] = vx & vy
        elif n == 0x3:
            self.V[x] = vx ^ vy
        elif n == 0x4:
            total = vx + vy
            self.V[x] = total & 0xFF
            self.V[0xF] = 1 if total > 0xFF else 0
        elif n == 0x5:
            self.V[x] = (vx - vy) & 0xFF
            self.V[0xF] = 1 if vx > vy else 0
        elif n == 0x6:
            self.V[x] = vx >> 1
            self.V[0xF] = vx & 1
        elif n == 0x7:
            self.V[x] = (vy - vx) & 0xFF
            self.V[0xF] = 1 if vx < vy else 0
        elif n == 0xE:
            self.V[x] = (vx << 1) & 0xFF
            self.V[0xF] = (vx >> 7) & 1
        else:
            self.op_unknown(opcode)

    # Dxyn - Draw an n-byte sprite from memory[I] at (Vx, Vy), VF = collision
    def op_DRW(self, x, y, n):
        # only the start position wraps, the sprite itself is clipped at the edges
        px = self.V[x] % WIDTH
        py = self.V[y] % HEIGHT
        rows = np.array([self.read_byte(self.I + row) for row in range(n)], dtype=np.uint8)
        sprite = np.unpackbits(rows.reshape(n, 1), axis=1)
        sprite = sprite[:HEIGHT - py, :WIDTH - px]

        region = self.video[py:py + sprite.shape[0], px:px + sprite.shape[1]]
        collision = bool(np.any(region & sprite))
        region ^= sprite

        self.V[0xF] = 1 if collision else 0
        self.should_draw = True

    # Fx07..Fx65 - timers, key wait, I arithmetic, font, BCD and register dumps
    def op_misc(self, opcode, x, kk):
        if kk == 0x07:
            self.V[x] = self.delay_timer
        elif kk == 0x0A:
            # LD Vx, K: rewind pc until a key is down (the cycle still ticks timers)
            pressed = np.flatnonzero(self.keys)
            if pressed.size:
                self.V[x] = int(pressed[0])
            else:
                self.pc -= 2
        elif kk == 0x15:
            self.delay_timer = self.V[x]
        elif kk == 0x18:
            self.sound_timer = self.V[x]
        elif kk == 0x1E:
            self.I = (self.I + self.V[x]) & 0xFFFF
        elif kk == 0x29:
            self.I = FONTSET_ADDRESS + GLYPH_SIZE * (self.V[x] & 0xF)
        elif kk == 0x33:
            value = self.V[x]
            self.write_byte(self.I, value // 100)
            self.write_byte(self.I + 1, (value // 10) % 10)
            self.write_byte(self.I + 2, value % 10)
        elif kk == 0x55:
            for i in range(x + 1):
                self.write_byte(self.I + i, self.V[i])
        elif kk == 0x65:
            for i in range(x + 1):
                self.V[i] = self.read_byte(self.I + i)
        else:
            self.op_unknown(opcode)
