"""
Resizers: how an image is scaled to its thumbnail size.

All of the resampling is done by cv2.resize(). default_resizer()
picks a resizer based on how far the image is being scaled.
"""

import logging
from abc import ABC,abstractmethod

import cv2

class Resizer(ABC):
    """Abstract base class for resizers"""

    @abstractmethod
    def resize(self, img, size):
        """Return img resized to size=(width, height)"""

    def __repr__(self):
        return f"<{self.__class__.__name__}>"


class NullResizer(Resizer):
    """Does nothing. Only valid when the image is already the right size."""
    def resize(self, img, size):
        (h, w) = img.shape[:2]
        if (w, h) != tuple(size):
            raise ValueError(f"NullResizer cannot resize {w}x{h} to {size[0]}x{size[1]}")
        return img


class InterpolationResizer(Resizer):
    """Single-step resize with one of OpenCV's interpolations"""
    def __init__(self, interpolation, name):
        self.interpolation = interpolation
        self.name = name

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.name}>"

    def resize(self, img, size):
        return cv2.resize(img, tuple(size), interpolation=self.interpolation)


class ProgressiveBilinearResizer(Resizer):
    """Halves the image with bilinear interpolation until it is within 2x of the target,
    then does the last step. Better looking than one big bilinear step for large reductions."""
    def resize(self, img, size):
        (tw, th) = size
        (h, w) = img.shape[:2]
        while w >= tw*2 and h >= th*2:
            w //= 2
            h //= 2
            logging.debug("progressive step to %sx%s",w,h)
            img = cv2.resize(img, (w, h), interpolation=cv2.INTER_LINEAR)
        return cv2.resize(img, (tw, th), interpolation=cv2.INTER_LINEAR)


NULL        = NullResizer()
NEAREST     = InterpolationResizer(cv2.INTER_NEAREST, 'nearest')
BILINEAR    = InterpolationResizer(cv2.INTER_LINEAR, 'bilinear')
BICUBIC     = InterpolationResizer(cv2.INTER_CUBIC, 'bicubic')
AREA        = InterpolationResizer(cv2.INTER_AREA, 'area')
PROGRESSIVE = ProgressiveBilinearResizer()

RESIZERS = {'null':NULL,
            'nearest':NEAREST,
            'bilinear':BILINEAR,
            'bicubic':BICUBIC,
            'area':AREA,
            'progressive':PROGRESSIVE}

def resizer_from_name(name):
    try:
        return RESIZERS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown resizer '{name}'. Must be one of "+" ".join(sorted(RESIZERS))) from None

def default_resizer(source_size, target_size):
    """Pick a resizer for scaling source_size=(w,h) to target_size=(w,h)"""
    (sw, sh) = source_size
    (tw, th) = target_size
    if (sw, sh) == (tw, th):
        return NULL
    if tw > sw or th > sh:
        return BICUBIC
    if sw / tw < 2 and sh / th < 2:
        return BILINEAR
    return PROGRESSIVE
