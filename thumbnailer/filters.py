"""
Image filters and some simple filters.

A filter takes an image array and returns a new one. Filters keep no
state between calls and never write into the image they are given, so
one filter object can be shared by any number of thumbnails.
"""

import math
import logging
from abc import ABC,abstractmethod

import cv2
import numpy as np

from .constants import C
from .image_utils import image_mode,as_rgba,alpha_blend,paste,solid,color_for,has_alpha
from .position import Position,TOP_LEFT,CENTER,normalize_insets


def validate_fraction(name, value):
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be between 0.0 and 1.0, got {value}")
    return float(value)


class ImageFilter(ABC):
    """Abstract base class for image filters"""

    @abstractmethod
    def apply(self, img):
        """Return a new image. img must not be modified."""

    def __call__(self, img):
        return self.apply(img)

    def __repr__(self):
        return f"<{self.__class__.__name__}>"


class FilterPipeline(ImageFilter):
    """Applies a list of filters in order"""
    def __init__(self, filters=None):
        self._filters = list(filters) if filters else []

    def __repr__(self):
        return f"<FilterPipeline {self._filters}>"

    @property
    def filters(self):
        """A copy of the filter list"""
        return list(self._filters)

    def add(self, f:ImageFilter):
        self._filters.append(f)

    def add_first(self, f:ImageFilter):
        self._filters.insert(0, f)

    def add_all(self, filters):
        self._filters.extend(filters)

    def apply(self, img):
        for f in self._filters:
            img = f.apply(img)
        return img


class Watermark(ImageFilter):
    """Alpha-blends a watermark image on top of the image."""
    def __init__(self, position:Position, watermark_img, opacity, insets=0):
        """
        :param position: where the watermark goes.
        :param watermark_img: the watermark, any mode. RGBA watermarks keep their own transparency.
        :param opacity: 0.0 is completely transparent, 1.0 completely opaque.
        :param insets: margin from the edges, a number or (left, right, top, bottom).
        """
        self.position = position
        self.watermark_img = watermark_img
        self.opacity = validate_fraction('opacity', opacity)
        self.insets = normalize_insets(insets)

    def __repr__(self):
        return f"<Watermark {self.position} opacity={self.opacity}>"

    def apply(self, img):
        (h, w) = img.shape[:2]
        (wh, ww) = self.watermark_img.shape[:2]
        xy = self.position.calculate(w, h, ww, wh, *self.insets)
        logging.debug("watermark %sx%s at %s on %sx%s",ww,wh,xy,w,h)
        return alpha_blend(img, self.watermark_img, xy, self.opacity)


class Rotation(ImageFilter):
    """Rotates clockwise by `angle` degrees. The canvas grows to fit the rotated image."""
    def __init__(self, angle):
        self.angle = float(angle)

    def __repr__(self):
        return f"<Rotation {self.angle}>"

    def apply(self, img):
        angle = self.angle % 360
        if angle % 90 == 0:
            # quarter turns are exact; np.rot90 counts counter-clockwise
            return np.ascontiguousarray(np.rot90(img, k=-int(angle // 90)))

        (h, w) = img.shape[:2]
        theta = math.radians(angle)
        nw = int(math.ceil(abs(w*math.cos(theta)) + abs(h*math.sin(theta))))
        nh = int(math.ceil(abs(h*math.cos(theta)) + abs(w*math.sin(theta))))
        # OpenCV angles are counter-clockwise
        m = cv2.getRotationMatrix2D((w/2, h/2), -angle, 1.0)
        m[0,2] += nw/2 - w/2
        m[1,2] += nh/2 - h/2
        border = (0,)*4 if has_alpha(img) else (0,)*3
        return cv2.warpAffine(img, m, (nw, nh), flags=cv2.INTER_LINEAR,
                              borderMode=cv2.BORDER_CONSTANT, borderValue=border)


class RoundedCorners(ImageFilter):
    """Rounds the corners. RGBA images get transparent corners;
    other images get corners of the background colour so that their mode does not change."""
    def __init__(self, radius, background=C.WHITE):
        if radius < 0:
            raise ValueError("radius must not be negative")
        self.radius = int(radius)
        self.background = background

    def __repr__(self):
        return f"<RoundedCorners {self.radius}>"

    def mask(self, w, h):
        """255 inside the rounded rectangle, 0 outside"""
        r = min(self.radius, w//2, h//2)
        m = np.zeros((h, w), dtype=np.uint8)
        cv2.rectangle(m, (r, 0), (w-1-r, h-1), 255, thickness=-1)
        cv2.rectangle(m, (0, r), (w-1, h-1-r), 255, thickness=-1)
        for center in [(r, r), (w-1-r, r), (r, h-1-r), (w-1-r, h-1-r)]:
            cv2.circle(m, center, r, 255, thickness=-1, lineType=cv2.LINE_AA)
        return m

    def apply(self, img):
        if self.radius==0:
            return img.copy()
        (h, w) = img.shape[:2]
        m = self.mask(w, h)
        if has_alpha(img):
            out = img.copy()
            out[..., 3] = (img[..., 3].astype(np.uint16) * m // 255).astype(np.uint8)
            return out
        mode = image_mode(img)
        bg = solid(w, h, self.background, mode).astype(np.float64)
        f = m.astype(np.float64) / 255.0
        if mode!='L':
            f = f[..., np.newaxis]
        out = img.astype(np.float64) * f + bg * (1.0 - f)
        return np.clip(np.rint(out), 0, 255).astype(np.uint8)


class Flip(ImageFilter):
    """Mirrors the image"""
    HORIZONTAL = 'horizontal'
    VERTICAL   = 'vertical'
    CODES = {HORIZONTAL:1, VERTICAL:0}

    def __init__(self, direction):
        if direction not in self.CODES:
            raise ValueError(f"direction must be one of {sorted(self.CODES)}")
        self.direction = direction

    def __repr__(self):
        return f"<Flip {self.direction}>"

    def apply(self, img):
        return cv2.flip(img, self.CODES[self.direction])


class Transparency(ImageFilter):
    """Makes the whole image partially transparent. The result is always RGBA."""
    def __init__(self, alpha):
        self.alpha = validate_fraction('alpha', alpha)

    def apply(self, img):
        out = as_rgba(img).copy()
        out[..., 3] = np.rint(out[..., 3] * self.alpha).astype(np.uint8)
        return out


class Colorize(ImageFilter):
    """Tints the image by painting a colour over it"""
    def __init__(self, color, alpha=0.5):
        self.color = tuple(color)
        self.alpha = validate_fraction('alpha', alpha)

    def apply(self, img):
        (h, w) = img.shape[:2]
        return alpha_blend(img, solid(w, h, self.color, 'RGBA'), (0,0), self.alpha)


class Canvas(ImageFilter):
    """Places the image on a canvas of a fixed size.
    If the image is bigger than the canvas it is cropped when crop is True;
    otherwise the canvas grows to hold it.
    The canvas is filled with `fill`, or is transparent (RGBA images) or black when fill is None.
    """
    def __init__(self, width, height, position:Position=CENTER, crop=True, fill=None):
        self.width = width
        self.height = height
        self.position = position
        self.crop = crop
        self.fill = fill

    def __repr__(self):
        return f"<Canvas {self.width}x{self.height} {self.position}>"

    def apply(self, img):
        (h, w) = img.shape[:2]
        cw = self.width if self.crop else max(self.width, w)
        ch = self.height if self.crop else max(self.height, h)
        mode = image_mode(img)
        if self.fill is not None:
            canvas = solid(cw, ch, self.fill, mode)
        elif mode=='RGBA':
            canvas = solid(cw, ch, (0,0,0,0), mode)
        else:
            canvas = solid(cw, ch, C.BLACK, mode)
        xy = self.position.calculate(cw, ch, w, h)
        return paste(canvas, img, xy)


class Caption(ImageFilter):
    """Draws a line of text on the image with OpenCV's Hershey font"""
    FONT = cv2.FONT_HERSHEY_SIMPLEX

    def __init__(self, text, position:Position=TOP_LEFT, *, font_scale=0.8,
                 color=C.WHITE, thickness=2, insets=0):
        self.text = text
        self.position = position
        self.font_scale = font_scale
        self.color = color
        self.thickness = thickness
        self.insets = normalize_insets(insets)

    def __repr__(self):
        return f"<Caption {self.text!r}>"

    def apply(self, img):
        (h, w) = img.shape[:2]
        ((tw, th), baseline) = cv2.getTextSize(self.text, self.FONT, self.font_scale, self.thickness)
        (x, y) = self.position.calculate(w, h, tw, th+baseline, *self.insets)
        out = np.ascontiguousarray(img).copy()
        color = color_for(image_mode(img), self.color)
        # putText wants the baseline origin, not the top-left corner
        cv2.putText(out, self.text, (x, y+th), self.FONT, self.font_scale, color,
                    thickness=self.thickness, lineType=cv2.LINE_AA)
        return out
