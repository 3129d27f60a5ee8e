"""
Configuration. Thumbnail settings can be kept in a YAML file:

thumbnail:
  size: 160x120
  output_format: jpeg
  output_quality: 0.8
  rounded_corners: 8
  watermark:
    urn: logo.png
    position: bottom_right
    opacity: 0.5
    insets: 4

The 'thumbnail:' level is optional. Command line options override the file.
"""

import copy
import logging

import yaml

from .constants import C
from .filters import Watermark,Rotation,RoundedCorners,Flip,Caption
from .parameter import ThumbnailParameter
from .position import position_from_name
from .resizers import resizer_from_name
from . import codec
from . import storage

DEFAULT_CONFIG = {
    'size': None,
    'scale': None,
    'keep_aspect_ratio': True,
    'fit_within': True,
    'output_format': C.ORIGINAL_FORMAT,
    'output_quality': None,
    'image_type': C.ORIGINAL_TYPE,
    'resizer': None,
    'use_exif_orientation': True,
    'rename': C.DEFAULT_RENAME,
    'rotate': None,
    'flip': None,
    'rounded_corners': None,
    'caption': None,
    'watermark': None,
}

WATERMARK_DEFAULTS = {'urn': None,
                      'position': C.DEFAULT_POSITION,
                      'opacity': C.DEFAULT_OPACITY,
                      'insets': 0}

def parse_size(value):
    """'160x120', [160, 120] or 160 (square) -> (160, 120)"""
    if value is None:
        return None
    if isinstance(value, int):
        return (value, value)
    if isinstance(value, str):
        parts = value.lower().split('x')
        if len(parts)==1:
            parts = parts*2
        if len(parts)!=2:
            raise ValueError(f"size must look like WIDTHxHEIGHT, got '{value}'")
        return (int(parts[0]), int(parts[1]))
    (w, h) = value
    return (int(w), int(h))

def load_config(path):
    """Read a YAML config file and return a complete config dictionary"""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if 'thumbnail' in data:
        data = data['thumbnail'] or {}
    logging.debug("config %s: %s",path,data)
    return merge_config(DEFAULT_CONFIG, data)

def merge_config(config, overrides):
    """Return a copy of config with every override that is not None applied"""
    unknown = set(overrides) - set(DEFAULT_CONFIG)
    if unknown:
        raise ValueError("Unknown configuration keys: "+" ".join(sorted(unknown)))
    merged = copy.deepcopy(config)
    for (k, v) in overrides.items():
        if v is not None:
            merged[k] = v
    return merged

def filters_from_config(config):
    """The filters named in config, in the order they are applied"""
    filters = []
    if config.get('rotate'):
        filters.append(Rotation(config['rotate']))
    if config.get('flip'):
        filters.append(Flip(config['flip']))
    if config.get('rounded_corners'):
        filters.append(RoundedCorners(config['rounded_corners']))
    if config.get('caption'):
        caption = config['caption']
        if isinstance(caption, str):
            caption = {'text': caption}
        caption = dict(caption)
        text = caption.pop('text')
        position = position_from_name(caption.pop('position', 'bottom_left'))
        filters.append(Caption(text, position, **caption))
    if config.get('watermark'):
        wm = config['watermark']
        if isinstance(wm, str):
            wm = {'urn': wm}
        wm = {**WATERMARK_DEFAULTS, **wm}
        if not wm['urn']:
            raise ValueError("watermark needs a urn")
        img = codec.read_image_bytes(storage.load(wm['urn']))
        filters.append(Watermark(position_from_name(wm['position']), img,
                                 float(wm['opacity']), insets=wm['insets']))
    return filters

def parameter_from_config(config):
    """Build a ThumbnailParameter from a config dictionary"""
    config = merge_config(DEFAULT_CONFIG, config)
    return ThumbnailParameter(
        size = parse_size(config['size']),
        scale = config['scale'],
        keep_aspect_ratio = config['keep_aspect_ratio'],
        fit_within = config['fit_within'],
        output_format = config['output_format'],
        output_quality = config['output_quality'],
        image_type = config['image_type'],
        filters = filters_from_config(config),
        resizer = resizer_from_name(config['resizer']) if config['resizer'] else None,
        use_exif_orientation = config['use_exif_orientation'])
