# CHIP-8 window host
# We're subclassing pyglet (that'll handle graphics and keyboard handling) and
# overriding whatever def we need from there. The CPU itself is chip8.Chip8;
# this window only paces cycles, copies key states in and blits the framebuffer out.

import os

import pyglet
from pyglet.window import key

import chip8
from chip8 import Chip8Error, WIDTH, HEIGHT, log
from render import KEY_LAYOUT, frame_to_rgba


# ---- Configuration ----
scale = 10
cpu_hz = 500


def _pyglet_key(name):
    # digit keys are key._1 .. key._9 in pyglet
    return getattr(key, "_" + name if name.isdigit() else name)


# Key mapping - maps physical keyboard keys to CHIP-8 keypad
KEYMAP = {_pyglet_key(name): value for name, value in KEY_LAYOUT.items()}


class Chip8Window(pyglet.window.Window):

    def __init__(self, machine, rom_name="", scale=scale, cycle_interval=1.0 / cpu_hz):
        self.caption_text = "CHIP-8 Emulator"
        if rom_name:
            self.caption_text += " - " + os.path.basename(rom_name)
        super().__init__(
            width=WIDTH * scale,
            height=HEIGHT * scale,
            caption=self.caption_text,
            resizable=False,
            vsync=False
        )
        self.machine = machine
        self.scale = scale
        self.has_exit = False
        self._beeping = False

        # creating ImageData once, updated in place on each redraw
        data, w, h = frame_to_rgba(self.machine.video, self.scale)
        self.image = pyglet.image.ImageData(w, h, 'RGBA', data)

        # CPU cycles (the timers tick once per cycle, so this is the timer rate too)
        pyglet.clock.schedule_interval(self._cpu_tick, cycle_interval)

    # ---- CPU cycle ----
    def _cpu_tick(self, dt):
        if self.has_exit:
            return
        try:
            self.machine.cycle()
        except Chip8Error as e:
            print("Emulation error:", e)
            self.has_exit = True
            pyglet.clock.unschedule(self._cpu_tick)
            self.close()
            return

        # no audio, the caption shows the sound timer instead
        if self.machine.sound_active != self._beeping:
            self._beeping = self.machine.sound_active
            self.set_caption(self.caption_text + (" [BEEP]" if self._beeping else ""))

    # ---- Drawing ----
    def on_draw(self):
        if self.machine.should_draw:
            data, w, _ = frame_to_rgba(self.machine.video, self.scale)
            self.image.set_data('RGBA', w * 4, data)
            self.machine.should_draw = False
        self.clear()
        self.image.blit(0, 0)

    # ---- Input ----
    def on_key_press(self, symbol, modifiers):
        #@Override
        if symbol == key.ESCAPE:
            self.has_exit = True
            self.close()
        elif symbol == key.F1:
            chip8.set_logging(not chip8.logs_on)
            print("logs_on:", chip8.logs_on)
        elif symbol in KEYMAP:
            self.machine.keys[KEYMAP[symbol]] = 1

    def on_key_release(self, symbol, modifiers):
        #@Override
        if symbol in KEYMAP:
            self.machine.keys[KEYMAP[symbol]] = 0

    def on_close(self):
        pyglet.clock.unschedule(self._cpu_tick)
        super().on_close()


def run_window(machine, rom_name="", scale=scale, cycle_interval=1.0 / cpu_hz):
    log("Starting window: scale=%d, %.1f cycles/s" % (scale, 1.0 / cycle_interval))
    window = Chip8Window(machine, rom_name, scale=scale, cycle_interval=cycle_interval)
    pyglet.app.run()
    return window
