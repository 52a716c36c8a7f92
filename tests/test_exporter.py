"""Tests for PNG and GIF export."""

import numpy as np
import pytest
from PIL import Image

from skyburst.render.exporter import export_gif, export_png


def solid(color, width=32, height=24):
    frame = np.zeros((height, width, 3), dtype=np.uint8)
    frame[:, :] = color
    return frame


@pytest.fixture
def frames():
    return [solid((255, 0, 0)), solid((0, 255, 0)), solid((0, 0, 255))]


class TestGif:

    def test_writes_every_frame(self, frames, tmp_path):
        path = export_gif(frames, tmp_path / 'show.gif', fps=10)
        with Image.open(path) as gif:
            assert gif.size == (32, 24)
            assert gif.n_frames == 3
            assert gif.info['duration'] == 100
            assert gif.info.get('loop', 0) == 0

    def test_colours_survive(self, frames, tmp_path):
        path = export_gif(frames, tmp_path / 'show.gif')
        with Image.open(path) as gif:
            gif.seek(1)
            assert gif.convert('RGB').getpixel((5, 5)) == (0, 255, 0)

    def test_creates_parent_dirs(self, frames, tmp_path):
        path = export_gif(frames, tmp_path / 'a' / 'b' / 'show.gif')
        assert path.exists()

    def test_no_frames(self, tmp_path):
        with pytest.raises(ValueError):
            export_gif([], tmp_path / 'empty.gif')

    @pytest.mark.parametrize('fps', [0, -5])
    def test_bad_fps(self, frames, tmp_path, fps):
        with pytest.raises(ValueError):
            export_gif(frames, tmp_path / 'show.gif', fps=fps)

    def test_bad_frame_shape(self, tmp_path):
        with pytest.raises(ValueError):
            export_gif([np.zeros((10, 10), dtype=np.uint8)], tmp_path / 'grey.gif')


class TestPng:

    def test_round_trip_pixels(self, tmp_path):
        frame = solid((12, 34, 56))
        frame[3, 4] = (200, 100, 50)
        path = export_png(frame, tmp_path / 'frame.png')
        with Image.open(path) as image:
            assert image.size == (32, 24)
            assert image.getpixel((4, 3)) == (200, 100, 50)
            assert image.getpixel((0, 0)) == (12, 34, 56)

    def test_bad_frame_shape(self, tmp_path):
        with pytest.raises(ValueError):
            export_png(np.zeros((10, 10, 4), dtype=np.uint8), tmp_path / 'rgba.png')
