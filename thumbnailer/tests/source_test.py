import os
import sys
import tempfile
import pytest
from os.path import dirname,basename,join,abspath

sys.path.append( dirname(dirname(dirname(abspath(__file__)))))

import thumbnailer.source as source
from thumbnailer.parameter import ThumbnailParameter
from sample_images import gradient,encoded

def make_tree(td):
    os.makedirs(join(td, 'in', 'sub'))
    for name in ['b.png', 'a.png', 'sub/c.jpg']:
        fmt = 'JPEG' if name.endswith('.jpg') else 'PNG'
        with open(join(td, 'in', name), 'wb') as f:
            f.write(encoded(gradient(), fmt))
    with open(join(td, 'in', 'notes.txt'), 'w') as f:
        f.write('not an image')
    open(join(td, 'in', 'empty.png'), 'wb').close()

def test_rename():
    assert source.RENAMES['no_change'].apply('a.png') == 'a.png'
    assert source.RENAMES['prefix_dot_thumbnail'].apply('a.png') == 'thumbnail.a.png'
    assert source.RENAMES['prefix_hyphen_thumbnail'].apply('a.png') == 'thumbnail-a.png'
    assert source.RENAMES['suffix_dot_thumbnail'].apply('a.png') == 'a.thumbnail.png'
    assert source.RENAMES['suffix_hyphen_thumbnail'].apply('a.png', '.jpg') == 'a-thumbnail.jpg'
    assert source.rename_from_name('suffix-dot-thumbnail') is source.RENAMES['suffix_dot_thumbnail']
    with pytest.raises(ValueError):
        source.rename_from_name('shout')

def test_source_options():
    o = source.SourceOptions(limit=2)
    assert o.atlimit() is False
    assert o.atlimit() is True
    assert source.SourceOptions().atlimit() is False

def test_tasks_from_directory():
    with tempfile.TemporaryDirectory() as td:
        make_tree(td)
        outdir = join(td, 'out')
        tasks = list(source.tasks_from_directory(join(td, 'in'), outdir, ThumbnailParameter(size=(8,8))))
        assert [basename(t.source_urn) for t in tasks] == ['a.png', 'b.png', 'c.jpg']
        assert tasks[0].destination_urn == join(outdir, 'thumbnail.a.png')
        assert tasks[2].destination_urn == join(outdir, 'sub', 'thumbnail.c.jpg')

def test_tasks_from_directory_format_and_limit():
    with tempfile.TemporaryDirectory() as td:
        make_tree(td)
        param = ThumbnailParameter(size=(8,8), output_format='png')
        tasks = list(source.tasks_from_directory(join(td, 'in'), join(td, 'out'), param,
                                                 rename=source.RENAMES['no_change'],
                                                 o=source.SourceOptions(limit=1)))
        assert len(tasks) == 1
        tasks = list(source.tasks_from_directory(join(td, 'in'), join(td, 'out'), param,
                                                 rename=source.RENAMES['no_change']))
        assert tasks[2].destination_urn == join(td, 'out', 'sub', 'c.png')

def test_tasks_from_inputs():
    with tempfile.TemporaryDirectory() as td:
        make_tree(td)
        param = ThumbnailParameter(size=(8,8))
        inputs = [join(td, 'in', 'sub'), join(td, 'in', 'a.png'), 's3://bucket/x/y.png']
        tasks = list(source.tasks_from_inputs(inputs, join(td, 'out'), param))
        assert [t.source_urn for t in tasks] == [join(td, 'in', 'sub', 'c.jpg'), join(td, 'in', 'a.png'),
                                                 's3://bucket/x/y.png']
        assert tasks[2].destination_urn == join(td, 'out', 'thumbnail.y.png')
        tasks = list(source.tasks_from_inputs(inputs, join(td, 'out'), param, o=source.SourceOptions(limit=2)))
        assert len(tasks) == 2

def test_tasks_from_directory_s3_outdir():
    with tempfile.TemporaryDirectory() as td:
        make_tree(td)
        param = ThumbnailParameter(size=(8,8))
        tasks = list(source.tasks_from_inputs([join(td, 'in')], 's3://bucket/thumbs', param))
        assert [t.destination_urn for t in tasks] == ['s3://bucket/thumbs/thumbnail.a.png',
                                                      's3://bucket/thumbs/thumbnail.b.png',
                                                      's3://bucket/thumbs/sub/thumbnail.c.jpg']

def test_tasks_from_inputs_zero_limit():
    with tempfile.TemporaryDirectory() as td:
        make_tree(td)
        param = ThumbnailParameter(size=(8,8))
        inputs = [join(td, 'in', 'a.png'), join(td, 'in')]
        assert list(source.tasks_from_inputs(inputs, join(td, 'out'), param, o=source.SourceOptions(limit=0))) == []
