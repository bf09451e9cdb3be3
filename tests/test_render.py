import numpy as np

from render import KEY_LAYOUT, frame_to_rgba, frame_to_text


def test_keypad_layout_covers_all_keys():
    assert sorted(KEY_LAYOUT.values()) == list(range(16))


def test_rgba_size_and_flip():
    video = np.zeros((32, 64), dtype=np.uint8)
    video[0, 0] = 1                        # top-left pixel
    data, w, h = frame_to_rgba(video, scale=2)
    assert (w, h) == (128, 64)
    assert len(data) == 128 * 64 * 4

    pixels = np.frombuffer(data, dtype=np.uint8).reshape(h, w, 4)
    # pyglet rows run bottom-up, so the top-left pixel lands in the last rows
    assert pixels[-1, 0].tolist() == [255, 255, 255, 255]
    assert pixels[-2, 1].tolist() == [255, 255, 255, 255]
    assert pixels[0, 0].tolist() == [0, 0, 0, 255]
    assert pixels[..., :3].sum() == 4 * 3 * 255


def test_frame_to_text():
    video = np.zeros((2, 3), dtype=np.uint8)
    video[1, 2] = 1
    assert frame_to_text(video) == "...\n..#"
