"""
This module provides the following:

Rename - How a thumbnail's filename is made from its source's filename
SourceOptions - Limits on how many inputs are used
tasks_from_directory(root, outdir, param) - A generator of UrnThumbnailTasks for every image under root
tasks_from_inputs(inputs, outdir, param) - The same for a mix of files, directories and URNs
"""

import os
import mimetypes
import logging
import urllib.parse

from .constants import C
from .tasks import UrnThumbnailTask
from . import codec


class Rename:
    """Adds a prefix and/or a suffix to the name part of a filename"""
    def __init__(self, prefix='', suffix=''):
        self.prefix = prefix
        self.suffix = suffix

    def __repr__(self):
        return f"<Rename prefix={self.prefix!r} suffix={self.suffix!r}>"

    def apply(self, fname, extension=None):
        """Return the new filename. If extension is given it replaces the old one."""
        (base, ext) = os.path.splitext(fname)
        if extension is not None:
            ext = extension
        return self.prefix + base + self.suffix + ext

RENAMES = {'no_change': Rename(),
           'prefix_dot_thumbnail': Rename(prefix='thumbnail.'),
           'prefix_hyphen_thumbnail': Rename(prefix='thumbnail-'),
           'suffix_dot_thumbnail': Rename(suffix='.thumbnail'),
           'suffix_hyphen_thumbnail': Rename(suffix='-thumbnail')}

def rename_from_name(name):
    try:
        return RENAMES[name.lower().replace('-','_')]
    except KeyError:
        raise ValueError(f"Unknown rename '{name}'. Must be one of "+" ".join(sorted(RENAMES))) from None


class SourceOptions:
    __slots__=('limit','counter')
    def __init__(self, limit=None):
        self.limit = limit
        self.counter = 0

    def atlimit(self):
        """Increment counter and return True if we are at the limit."""
        self.counter += 1
        if self.limit is None:
            return False
        return self.counter >= self.limit


def output_extension(param):
    """The extension for thumbnails made with param, or None to keep the source's"""
    if param.output_format == C.ORIGINAL_FORMAT:
        return None
    return codec.extension_for(param.output_format)

def tasks_from_directory(root, outdir, param, rename=None, o=None):
    """Generator of tasks for every image under root, in sort order within each directory.
    Thumbnails go to the same relative place under outdir."""
    rename = rename or RENAMES[C.DEFAULT_RENAME]
    o = o or SourceOptions()
    if o.limit is not None and o.limit <= 0:
        return
    ext = output_extension(param)
    for (dirpath, dirnames, filenames) in os.walk(root):
        dirnames.sort()                                  # makes the directories recurse in sort order
        for fname in sorted(filenames):
            path = os.path.join(dirpath, fname)
            mtype = mimetypes.guess_type(fname)[0]
            if mtype is None or mtype.split("/")[0] != 'image':
                continue
            if os.path.getsize(path)==0:
                logging.debug("skipping empty %s",path)
                continue
            # outdir may be a URN such as s3://bucket/prefix and is used as given
            rel = os.path.relpath(dirpath, root)
            if rel == os.curdir:
                dest = os.path.join(outdir, rename.apply(fname, ext))
            else:
                dest = os.path.join(outdir, rel, rename.apply(fname, ext))
            yield UrnThumbnailTask(param, path, dest)
            if o.atlimit():
                return

def tasks_from_inputs(inputs, outdir, param, rename=None, o=None):
    """Generator of tasks for a list of files, directories and URNs"""
    rename = rename or RENAMES[C.DEFAULT_RENAME]
    o = o or SourceOptions()
    if o.limit is not None and o.limit <= 0:
        return
    ext = output_extension(param)
    for urn in inputs:
        if os.path.isdir(urn):
            remaining = None if o.limit is None else o.limit - o.counter
            sub = SourceOptions(limit=remaining)
            yield from tasks_from_directory(urn, outdir, param, rename=rename, o=sub)
            o.counter += sub.counter
        else:
            fname = os.path.basename(urllib.parse.urlparse(urn).path)
            yield UrnThumbnailTask(param, urn, os.path.join(outdir, rename.apply(fname, ext)))
            o.counter += 1
        if o.limit is not None and o.counter >= o.limit:
            return
