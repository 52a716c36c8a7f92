"""Tests for the command line entry point and headless rendering."""

import logging

import numpy as np
import pytest
import yaml
from PIL import Image

import skyburst.core.presets as presets_module
from skyburst import render_frames
from skyburst.core.config import FireworkConfig
from skyburst.logging_config import setup_logging
from skyburst.main import build_parser, main


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Keep user presets and logger state out of the real environment"""
    monkeypatch.setattr(presets_module, 'DEFAULT_USER_PRESETS_DIR', tmp_path / 'presets')
    logger = logging.getLogger('skyburst')
    level, handlers = logger.level, list(logger.handlers)
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)


def run_main(argv):
    with pytest.raises(SystemExit) as exc:
        main(argv)
    return exc.value.code


class TestParser:

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert (args.width, args.height, args.fps) == (1280, 720, 60)
        assert args.record is None
        assert args.manual is False

    def test_style_choices(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(['--style', 'watercolour'])


class TestPresetCommands:

    def test_list_presets(self, capsys):
        assert run_main(['--list-presets']) == 0
        out = capsys.readouterr().out
        assert 'grand_finale' in out
        assert 'weeping_willow' in out

    def test_preset_info(self, capsys):
        assert run_main(['--preset-info', 'weeping_willow']) == 0
        assert 'firework_type: WILLOW' in capsys.readouterr().out

    def test_unknown_preset_info(self, capsys):
        assert run_main(['--preset-info', 'nope']) == 1
        assert "not found" in capsys.readouterr().out

    def test_unknown_preset(self, capsys):
        assert run_main(['--preset', 'nope', '--record', 'x.gif']) == 1

    def test_save_preset(self, tmp_path, capsys):
        assert run_main(['--preset', 'windy_night', '--type', 'palm', '--save-preset', 'mine']) == 0
        saved = yaml.safe_load((tmp_path / 'presets' / 'mine.yaml').read_text())
        assert saved['settings']['firework_type'] == 'PALM'
        assert saved['settings']['wind'] == 30


class TestValidation:

    @pytest.mark.parametrize('argv', [
        ['--width', '0'],
        ['--height', '-10'],
        ['--fps', '0'],
        ['--record', 'x.gif', '--frames', '0'],
    ])
    def test_bad_sizes(self, argv, capsys):
        assert run_main(argv) == 1
        assert 'Error' in capsys.readouterr().out

    def test_bad_type(self, capsys):
        assert run_main(['--type', 'sparkler', '--record', 'x.gif']) == 1
        assert 'firework_type' in capsys.readouterr().out

    def test_bad_config_file(self, tmp_path, capsys):
        path = tmp_path / 'show.yaml'
        path.write_text("wind: [1, 2\n")
        assert run_main(['--config', str(path), '--record', 'x.gif']) == 1


class TestRecord:

    def test_record_gif(self, tmp_path, capsys):
        out = tmp_path / 'show.gif'
        config = tmp_path / 'show.yaml'
        config.write_text(yaml.safe_dump({'particle_count': 200, 'bloom_effect': False}))
        main([
            '--record', str(out), '--frames', '4', '--width', '64', '--height', '48',
            '--fps', '20', '--seed', '3', '--config', str(config),
        ])
        assert out.exists()
        with Image.open(out) as gif:
            assert gif.size == (64, 48)
        assert 'Output:' in capsys.readouterr().out


class TestRenderFrames:

    def test_shape_and_count(self):
        config = FireworkConfig()
        config.set('particle_count', 200)
        images = render_frames(config, width=80, height=60, frames=5, fps=30, seed=1)
        assert len(images) == 5
        for image in images:
            assert image.shape == (60, 80, 3)
            assert image.dtype == np.uint8

    def test_opens_with_a_shell(self):
        images = render_frames(width=80, height=60, frames=3, seed=1)
        assert images[-1].any()

    def test_seed_repeats(self):
        a = render_frames(width=80, height=60, frames=10, seed=42)
        b = render_frames(width=80, height=60, frames=10, seed=42)
        assert all(np.array_equal(x, y) for x, y in zip(a, b))


class TestLogging:

    def test_repeat_setup_keeps_one_handler(self):
        setup_logging('skyburst', 'INFO')
        logger = setup_logging('skyburst', 'DEBUG')
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG

    def test_log_file(self, tmp_path):
        log_file = tmp_path / 'logs' / 'skyburst.log'
        logger = setup_logging('skyburst', 'INFO', log_file)
        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()
        assert len(logger.handlers) == 2
        assert 'hello' in log_file.read_text()

    def test_unknown_level_falls_back(self):
        assert setup_logging('skyburst', 'LOUD').level == logging.INFO
