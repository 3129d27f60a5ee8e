"""
Tests for the pipeline
"""

import io
import os
import pytest
import sys
import tempfile
from os.path import abspath, dirname, join

import numpy as np
from PIL import Image

sys.path.append( dirname(dirname(dirname(abspath(__file__)))))

import thumbnailer.position as position
from thumbnailer.filters import Watermark,RoundedCorners,Rotation
from thumbnailer.parameter import ThumbnailParameter
from thumbnailer.pipeline import ThumbnailPipeline,create_thumbnail,prepare
from thumbnailer.tasks import StreamThumbnailTask,UrnThumbnailTask,BufferThumbnailTask
import thumbnailer.codec as codec
from sample_images import gradient,noise,opaque_rgba,encoded

def test_prepare():
    img = gradient(200, 100)
    out = prepare(img, ThumbnailParameter(size=(50,50)))
    assert out.shape == (25, 50, 3)
    out = prepare(img, ThumbnailParameter(size=(50,50), image_type='RGBA'))
    assert out.shape == (25, 50, 4)
    out = prepare(img, ThumbnailParameter(scale=1.0, image_type='L'))
    assert out.shape == (100, 200)

def test_create_thumbnail_stream():
    src = io.BytesIO(encoded(gradient(200, 100), 'PNG'))
    dst = io.BytesIO()
    task = StreamThumbnailTask(ThumbnailParameter(size=(50,50)), src, dst)
    assert create_thumbnail(task)
    out = Image.open(io.BytesIO(dst.getvalue()))
    assert out.format == 'PNG'
    assert out.size == (50, 25)

def test_filters_run_after_resize():
    wm = opaque_rgba(10, 10, (255,0,0))
    param = ThumbnailParameter(size=(40,40), image_type='RGBA',
                               filters=[Watermark(position.TOP_LEFT, wm, 1.0), RoundedCorners(5)])
    task = BufferThumbnailTask(param, noise(80, 80))
    assert create_thumbnail(task)
    out = task.result
    assert out.shape == (40, 40, 4)
    assert tuple(out[5, 5]) == (255,0,0,255)
    assert out[0, 0, 3] == 0

def test_filter_changes_size():
    task = BufferThumbnailTask(ThumbnailParameter(size=(40,20), filters=[Rotation(90)]), gradient(80, 40))
    assert create_thumbnail(task)
    assert task.result.shape == (40, 20, 3)

def test_no_writer():
    dst = io.BytesIO()
    task = StreamThumbnailTask(ThumbnailParameter(size=(10,10), output_format='NO-SUCH-FORMAT'),
                               io.BytesIO(encoded(gradient(), 'PNG')), dst)
    assert create_thumbnail(task) is False
    assert dst.getvalue() == b''

def test_process_list_nonstop():
    good = StreamThumbnailTask(ThumbnailParameter(size=(10,10)), io.BytesIO(encoded(gradient(), 'PNG')), io.BytesIO())
    bad  = StreamThumbnailTask(ThumbnailParameter(size=(10,10)), io.BytesIO(b"garbage"), io.BytesIO())
    out = io.StringIO()
    with ThumbnailPipeline(out=out, nonstop=True) as p:
        assert p.process_list([good, bad]) == [True, False]
        assert p.error_counter == 1
    stats = out.getvalue()
    print(stats)
    assert 'read: calls: 1' in stats
    assert 'write: calls: 1' in stats

def test_process_list_raises():
    bad = StreamThumbnailTask(ThumbnailParameter(size=(10,10)), io.BytesIO(b"garbage"), io.BytesIO())
    with pytest.raises(codec.NoReaderError):
        ThumbnailPipeline(out=io.StringIO()).process_list([bad])

def test_missing_file_nonstop():
    with tempfile.TemporaryDirectory() as td:
        task = UrnThumbnailTask(ThumbnailParameter(size=(10,10)), join(td, 'none.png'), join(td, 'out.png'))
        p = ThumbnailPipeline(out=io.StringIO(), nonstop=True)
        assert p.process_list([task]) == [False]
