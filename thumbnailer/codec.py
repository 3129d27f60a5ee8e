"""
Reading and writing image data.

Pillow keeps the registry of image plugins. A decoder is found by
letting Pillow probe the data; an encoder is found by format name.
This module adds only the format negotiation and the compression
quality plumbing, and turns decoded images into numpy arrays.

Streams passed in are never closed. They belong to the caller.
"""

import io
import math
import logging

import numpy as np
from PIL import Image,ImageOps,UnidentifiedImageError

from .constants import C
from .image_utils import image_mode,flatten

logger = logging.getLogger(__name__)

FORMAT_ALIASES = {'JPG':'JPEG',
                  'TIF':'TIFF',
                  'JP2':'JPEG2000'}

PREFERRED_EXTENSIONS = {'JPEG':'.jpg',
                        'TIFF':'.tif',
                        'JPEG2000':'.jp2'}

# Formats that cannot hold an alpha channel. RGBA images are flattened onto white.
NO_ALPHA_FORMATS = set(['JPEG','BMP','PPM','PCX','EPS','PDF','MPO'])

class NoReaderError(IOError):
    """No decoder accepted the source data"""


def canonical_format_name(format_name):
    name = format_name.strip().upper()
    return FORMAT_ALIASES.get(name, name)

def reader_format_names():
    Image.init()
    return sorted(Image.OPEN.keys())

def writer_format_names():
    Image.init()
    return sorted(Image.SAVE.keys())

def has_writer(format_name):
    Image.init()
    return canonical_format_name(format_name) in Image.SAVE

def supports_compression(format_name):
    """True if the format's encoder takes a compression quality"""
    return canonical_format_name(format_name) in COMPRESSION and has_writer(format_name)

def mime_type(format_name):
    Image.init()
    return Image.MIME.get(canonical_format_name(format_name))

def extension_for(format_name):
    """Filename extension (with the dot) for a format, or None if the format has none registered"""
    fmt = canonical_format_name(format_name)
    if fmt in PREFERRED_EXTENSIONS:
        return PREFERRED_EXTENSIONS[fmt]
    exts = [ext for (ext, f) in Image.registered_extensions().items() if f==fmt]
    if not exts:
        return None
    if '.' + fmt.lower() in exts:
        return '.' + fmt.lower()
    return exts[0]


## Compression. Quality is 0.0 (smallest) to 1.0 (best).

def _jpeg_params(quality):
    return {'quality': int(round(quality * 100))}

def _webp_params(quality):
    return {'quality': quality * 100.0}

def _png_params(quality):
    # PNG is lossless; quality picks the deflate level, 1.0 = no compression
    return {'compress_level': 9 - int(round(quality * 9))}

COMPRESSION = {'JPEG': _jpeg_params,
               'WEBP': _webp_params,
               'PNG':  _png_params}

def compression_params(format_name, quality=C.DEFAULT_QUALITY):
    """Return the save() keyword arguments for quality. NaN means use the encoder's default."""
    fmt = canonical_format_name(format_name)
    if fmt not in COMPRESSION or quality is None or math.isnan(quality):
        return {}
    return COMPRESSION[fmt](quality)


## Decoding

def deep_to_l(pil):
    """Reduce a 16-bit, 32-bit integer or float greyscale image to an 8-bit L array.
    Integer modes are taken to hold 16-bit samples; float mode samples run from 0.0 to 1.0."""
    arr = np.asarray(pil)
    if pil.mode=='F':
        arr = np.clip(arr, 0.0, 1.0) * 255.0 + 0.5
    else:
        arr = np.clip(arr.astype(np.int64), 0, 65535) >> 8
    return arr.astype(np.uint8)

def pil_to_array(pil):
    """Return a read-only numpy array in L, RGB or RGBA for a Pillow image"""
    if pil.mode=='F' or pil.mode=='I' or pil.mode.startswith('I;16'):
        img = deep_to_l(pil)
        img.flags.writeable = False
        return img
    if pil.mode in ('L','RGB','RGBA'):
        pass
    elif pil.mode in ('LA','PA','RGBa','La') or (pil.mode=='P' and 'transparency' in pil.info):
        pil = pil.convert('RGBA')
    elif pil.mode=='1':
        pil = pil.convert('L')
    else:
        pil = pil.convert('RGB')
    img = np.array(pil, dtype=np.uint8)
    img.flags.writeable = False
    return img

def read_first_frame(stream, exif_orientation=True):
    """Decode the first frame of the image in stream.
    :param stream: a binary file-like object. It is not closed.
    :param exif_orientation: rotate/flip the image as its EXIF orientation tag says.
    :return: (img, format_name)
    """
    try:
        pil = Image.open(stream)
    except UnidentifiedImageError as e:
        raise NoReaderError("No acceptable image reader found for source data.") from e
    format_name = pil.format
    logger.debug("decoding %s %s %sx%s",format_name,pil.mode,pil.width,pil.height)
    # The image is positioned at frame 0 when opened. Later frames are never read.
    pil.load()
    if exif_orientation:
        pil = ImageOps.exif_transpose(pil)
    return (pil_to_array(pil), format_name)

def read_image_bytes(data, exif_orientation=True):
    """Decode the first frame of an encoded image held in memory. Returns just the image."""
    return read_first_frame(io.BytesIO(data), exif_orientation=exif_orientation)[0]


## Encoding

def write_image(img, stream, format_name, quality=C.DEFAULT_QUALITY):
    """Encode img into stream.
    :param stream: a binary file-like object. It is not closed.
    :return: False, having written nothing, if there is no encoder for format_name. True otherwise.
    """
    fmt = canonical_format_name(format_name)
    if not has_writer(fmt):
        logger.debug("no writer for %s",format_name)
        return False
    if fmt in NO_ALPHA_FORMATS and image_mode(img)=='RGBA':
        img = flatten(img)
    params = compression_params(fmt, quality)
    if not params and quality is not None and not math.isnan(quality):
        logger.debug("%s has no compression quality; ignoring %s",fmt,quality)
    logger.debug("encoding %s %s params=%s",fmt,img.shape,params)
    Image.fromarray(np.ascontiguousarray(img)).save(stream, format=fmt, **params)
    return True

def image_bytes(img, format_name, quality=C.DEFAULT_QUALITY):
    """Encode img and return the bytes, or None if there is no encoder for format_name"""
    buf = io.BytesIO()
    if not write_image(img, buf, format_name, quality):
        return None
    return buf.getvalue()
