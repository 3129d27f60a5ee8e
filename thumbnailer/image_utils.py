"""
Helpers for working with images held as numpy arrays.

Arrays are uint8 in RGB channel order. The colour model ("mode") is
implied by the shape:

  (h, w)    - L
  (h, w, 3) - RGB
  (h, w, 4) - RGBA

Conversions are done with OpenCV. The RGB codes are used throughout;
OpenCV does not care what the channels mean, only how many there are.
"""

import cv2
import numpy as np

from .constants import C

CONVERSIONS = {
    ('L','RGB'):    cv2.COLOR_GRAY2RGB,
    ('L','RGBA'):   cv2.COLOR_GRAY2RGBA,
    ('RGB','L'):    cv2.COLOR_RGB2GRAY,
    ('RGB','RGBA'): cv2.COLOR_RGB2RGBA,
    ('RGBA','L'):   cv2.COLOR_RGBA2GRAY,
    ('RGBA','RGB'): cv2.COLOR_RGBA2RGB,
}

def image_mode(img):
    """Return 'L', 'RGB' or 'RGBA' for an image array"""
    if img.ndim==2:
        return 'L'
    if img.ndim==3 and img.shape[2]==3:
        return 'RGB'
    if img.ndim==3 and img.shape[2]==4:
        return 'RGBA'
    raise ValueError(f"unsupported image shape {img.shape}")

def convert(img, mode):
    """Return img in the requested mode. Returns img itself if it is already in that mode."""
    src = image_mode(img)
    if src==mode:
        return img
    if (src,mode) not in CONVERSIONS:
        raise ValueError(f"cannot convert {src} to {mode}")
    return cv2.cvtColor(img, CONVERSIONS[(src,mode)])

def as_rgba(img):
    return convert(img, 'RGBA')

def has_alpha(img):
    return image_mode(img)=='RGBA'

def color_for(mode, color):
    """Turn an RGB or RGBA tuple into a value suitable for an image of `mode`."""
    color = tuple(color)
    if len(color)==3:
        color = color + (255,)
    if mode=='L':
        (r,g,b,_) = color
        return int(round(0.299*r + 0.587*g + 0.114*b))
    if mode=='RGB':
        return color[:3]
    return color

def solid(width, height, color, mode='RGB'):
    """A new image of a single colour"""
    value = color_for(mode, color)
    if mode=='L':
        return np.full((height, width), value, dtype=np.uint8)
    return np.full((height, width, len(value)), value, dtype=np.uint8)

def _clip(base, img, xy):
    """Returns the (base_slices, img_slices) where img placed at xy overlaps base, or None."""
    (bh, bw) = base.shape[:2]
    (ih, iw) = img.shape[:2]
    (x, y) = xy
    x0 = max(x, 0)
    y0 = max(y, 0)
    x1 = min(x+iw, bw)
    y1 = min(y+ih, bh)
    if x0>=x1 or y0>=y1:
        return None
    return ((slice(y0,y1), slice(x0,x1)),
            (slice(y0-y,y1-y), slice(x0-x,x1-x)))

def paste(base, img, xy):
    """Return a copy of base with img copied in at xy. img is clipped to the base."""
    out = base.copy()
    region = _clip(base, img, xy)
    if region is None:
        return out
    (bs, is_) = region
    out[bs] = convert(img, image_mode(base))[is_]
    return out

def alpha_blend(base, overlay, xy, opacity=1.0):
    """Composite overlay on top of base at xy (SRC_OVER), scaling the overlay's alpha by opacity.
    Returns a new image with the mode and size of base. Neither input is modified.
    """
    out = base.copy()
    region = _clip(base, overlay, xy)
    if region is None:
        return out
    (bs, os_) = region

    src = as_rgba(np.ascontiguousarray(overlay[os_])).astype(np.float64) / 255.0
    dst = as_rgba(np.ascontiguousarray(base[bs])).astype(np.float64) / 255.0
    src_a = src[..., 3:4] * opacity
    dst_a = dst[..., 3:4]
    out_a = src_a + dst_a * (1.0 - src_a)

    with np.errstate(divide='ignore', invalid='ignore'):
        out_rgb = (src[..., :3] * src_a + dst[..., :3] * dst_a * (1.0 - src_a)) / out_a
    # fully transparent results keep whatever colour was there
    out_rgb = np.where(out_a > 0, out_rgb, dst[..., :3])

    blended = np.concatenate([out_rgb, out_a], axis=2)
    blended = np.clip(np.rint(blended * 255.0), 0, 255).astype(np.uint8)
    out[bs] = convert(blended, image_mode(base))
    return out

def flatten(img, background=C.WHITE):
    """Composite an RGBA image onto an opaque background. Other modes are returned unchanged."""
    if not has_alpha(img):
        return img
    (h, w) = img.shape[:2]
    return alpha_blend(solid(w, h, background, 'RGB'), img, (0,0))
