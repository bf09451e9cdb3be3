# Framebuffer helpers for the host.
# Kept free of pyglet.window so they can be used (and tested) without a display.

import numpy as np

ON_COLOR = (255, 255, 255)
OFF_COLOR = (0, 0, 0)

# Physical keyboard layout -> CHIP-8 keypad, by key name:
#   1 2 3 4        1 2 3 C
#   Q W E R   ->   4 5 6 D
#   A S D F        7 8 9 E
#   Z X C V        A 0 B F
KEY_LAYOUT = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}


def frame_to_rgba(video, scale=1, on_color=ON_COLOR, off_color=OFF_COLOR):
    """Upscale a (height, width) 0/1 framebuffer to RGBA bytes.

    Rows are flipped because pyglet images start at the bottom-left corner.
    Returns ``(data, pixel_width, pixel_height)``.
    """
    height, width = video.shape
    palette = np.array([off_color + (255,), on_color + (255,)], dtype=np.uint8)
    small = palette[(video != 0).astype(np.uint8)][::-1]   # (h, w, 4)
    if scale != 1:
        small = np.repeat(np.repeat(small, scale, axis=0), scale, axis=1)
    return np.ascontiguousarray(small).tobytes(), width * scale, height * scale


def frame_to_text(video, on="#", off="."):
    return "\n".join("".join(on if p else off for p in row) for row in video)
