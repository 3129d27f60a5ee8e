"""
Tests for the resizers
"""

import pytest
import sys
from os.path import abspath, dirname

import numpy as np

sys.path.append( dirname(dirname(dirname(abspath(__file__)))))

import thumbnailer.resizers as resizers
from sample_images import gradient

def test_default_resizer():
    assert resizers.default_resizer((100,100), (100,100)) is resizers.NULL
    assert resizers.default_resizer((100,100), (200,150)) is resizers.BICUBIC
    assert resizers.default_resizer((100,100), (60,60)) is resizers.BILINEAR
    assert resizers.default_resizer((100,100), (50,50)) is resizers.PROGRESSIVE
    assert resizers.default_resizer((1000,100), (100,90)) is resizers.PROGRESSIVE

def test_null_resizer():
    img = gradient(20, 10)
    assert resizers.NULL.resize(img, (20, 10)) is img
    with pytest.raises(ValueError):
        resizers.NULL.resize(img, (10, 10))

def test_resize_shapes():
    img = gradient(200, 100)
    for r in [resizers.NEAREST, resizers.BILINEAR, resizers.BICUBIC, resizers.AREA, resizers.PROGRESSIVE]:
        out = r.resize(img, (30, 15))
        assert out.shape == (15, 30, 3), r
    gray = np.zeros((100, 200), dtype=np.uint8)
    assert resizers.PROGRESSIVE.resize(gray, (25, 12)).shape == (12, 25)

def test_from_name():
    assert resizers.resizer_from_name('Bicubic') is resizers.BICUBIC
    with pytest.raises(ValueError):
        resizers.resizer_from_name('lanczos9')
