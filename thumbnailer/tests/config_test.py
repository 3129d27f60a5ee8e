"""
Tests for configuration files
"""

import os
import pytest
import sys
import tempfile
from os.path import abspath, dirname, join

sys.path.append( dirname(dirname(dirname(abspath(__file__)))))

from thumbnailer.constants import C
import thumbnailer.config as config
import thumbnailer.resizers as resizers
from thumbnailer.filters import Watermark,Rotation,RoundedCorners,Caption
from sample_images import opaque_rgba,encoded

YAML = """
thumbnail:
  size: 160x120
  output_format: jpeg
  output_quality: 0.8
  resizer: area
  rotate: 90
  rounded_corners: 8
  caption:
    text: hello
    position: top_left
    font_scale: 0.5
  watermark:
    urn: {urn}
    position: bottom_right
    opacity: 0.25
    insets: 4
"""

def test_parse_size():
    assert config.parse_size('160x120') == (160, 120)
    assert config.parse_size('64') == (64, 64)
    assert config.parse_size(32) == (32, 32)
    assert config.parse_size([10, 20]) == (10, 20)
    assert config.parse_size(None) is None
    with pytest.raises(ValueError):
        config.parse_size('1x2x3')

def test_merge_config():
    merged = config.merge_config(config.DEFAULT_CONFIG, {'size':'10x10', 'output_format':None})
    assert merged['size'] == '10x10'
    assert merged['output_format'] == C.ORIGINAL_FORMAT
    assert config.DEFAULT_CONFIG['size'] is None
    with pytest.raises(ValueError):
        config.merge_config(config.DEFAULT_CONFIG, {'colour':'red'})

def test_load_config():
    with tempfile.TemporaryDirectory() as td:
        wm = join(td, 'wm.png')
        with open(wm, 'wb') as f:
            f.write(encoded(opaque_rgba(8, 8, (255,255,255)), 'PNG'))
        path = join(td, 'config.yml')
        with open(path, 'w') as f:
            f.write(YAML.format(urn=wm))

        cfg = config.load_config(path)
        assert cfg['size'] == '160x120'
        assert cfg['keep_aspect_ratio'] is True

        param = config.parameter_from_config(cfg)
        assert param.size == (160, 120)
        assert param.output_format == 'jpeg'
        assert param.output_quality == 0.8
        assert param.resizer is resizers.AREA
        assert [f.__class__ for f in param.filters] == [Rotation, RoundedCorners, Caption, Watermark]
        wmf = param.filters[-1]
        assert wmf.opacity == 0.25
        assert wmf.insets == (4,4,4,4)
        assert wmf.watermark_img.shape == (8, 8, 4)

def test_load_config_without_section():
    with tempfile.TemporaryDirectory() as td:
        path = join(td, 'config.yml')
        with open(path, 'w') as f:
            f.write("scale: 0.5\nflip: horizontal\n")
        param = config.parameter_from_config(config.load_config(path))
        assert param.scale == (0.5, 0.5)
        assert len(param.filters) == 1
