"""
ThumbnailParameter - everything needed to make a thumbnail other than the image itself.
"""

import math

from .constants import C
from .filters import ImageFilter
from .resizers import Resizer


class ThumbnailParameter:
    """Immutable bundle of thumbnail settings. Exactly one of size or scale must be given."""
    __slots__ = ('size','scale','keep_aspect_ratio','fit_within','output_format',
                 'output_quality','image_type','filters','resizer','use_exif_orientation')

    def __init__(self, *, size=None, scale=None, keep_aspect_ratio=True, fit_within=True,
                 output_format=C.ORIGINAL_FORMAT, output_quality=C.DEFAULT_QUALITY,
                 image_type=C.ORIGINAL_TYPE, filters=(), resizer=None, use_exif_orientation=True):
        """
        :param size: (width, height) of the box the thumbnail is made for.
        :param scale: (x, y) scale factors, or a single factor for both.
        :param keep_aspect_ratio: if False the image is stretched to exactly size.
        :param fit_within: if True the thumbnail fits inside size; if False it covers it.
        :param output_format: a format name such as 'JPEG', or C.ORIGINAL_FORMAT.
        :param output_quality: 0.0 to 1.0, or C.DEFAULT_QUALITY (NaN) for the codec's default.
        :param image_type: 'L', 'RGB', 'RGBA' or C.ORIGINAL_TYPE.
        :param filters: filters to run, in order, after resizing.
        :param resizer: a Resizer, or None to pick one by how far the image is scaled.
        """
        if (size is None) == (scale is None):
            raise ValueError("exactly one of size and scale must be given")
        if size is not None:
            size = (int(size[0]), int(size[1]))
            if size[0] <= 0 or size[1] <= 0:
                raise ValueError(f"size must be positive, got {size}")
        if scale is not None:
            if isinstance(scale, (int, float)):
                scale = (scale, scale)
            scale = (float(scale[0]), float(scale[1]))
            if not all(math.isfinite(s) and s > 0 for s in scale):
                raise ValueError(f"scale must be positive, got {scale}")
        if output_quality is None:
            output_quality = C.DEFAULT_QUALITY
        output_quality = float(output_quality)
        if not math.isnan(output_quality) and not 0.0 <= output_quality <= 1.0:
            raise ValueError(f"output_quality must be between 0.0 and 1.0, got {output_quality}")
        if image_type != C.ORIGINAL_TYPE and image_type not in C.IMAGE_TYPES:
            raise ValueError(f"image_type must be one of {C.IMAGE_TYPES} or '{C.ORIGINAL_TYPE}'")
        if not output_format:
            raise ValueError("output_format must be given")
        filters = tuple(filters or ())
        for f in filters:
            if not isinstance(f, ImageFilter):
                raise ValueError(f"{f!r} is not an ImageFilter")
        if resizer is not None and not isinstance(resizer, Resizer):
            raise ValueError(f"{resizer!r} is not a Resizer")

        object.__setattr__(self, 'size', size)
        object.__setattr__(self, 'scale', scale)
        object.__setattr__(self, 'keep_aspect_ratio', bool(keep_aspect_ratio))
        object.__setattr__(self, 'fit_within', bool(fit_within))
        object.__setattr__(self, 'output_format', output_format)
        object.__setattr__(self, 'output_quality', output_quality)
        object.__setattr__(self, 'image_type', image_type)
        object.__setattr__(self, 'filters', filters)
        object.__setattr__(self, 'resizer', resizer)
        object.__setattr__(self, 'use_exif_orientation', bool(use_exif_orientation))

    def __setattr__(self, name, value):
        raise AttributeError(f"{self.__class__.__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{self.__class__.__name__} is immutable")

    def __repr__(self):
        what = f"size={self.size}" if self.size else f"scale={self.scale}"
        return (f"<ThumbnailParameter {what} format={self.output_format} "
                f"quality={self.output_quality} filters={list(self.filters)}>")

    @property
    def has_quality(self):
        return not math.isnan(self.output_quality)

    def target_size(self, width, height):
        """Return the (width, height) of the thumbnail of a width x height image"""
        if self.scale is not None:
            (sx, sy) = self.scale
            return (max(1, round(width*sx)), max(1, round(height*sy)))

        (tw, th) = self.size
        if not self.keep_aspect_ratio:
            return (tw, th)

        source_ratio = width / height
        target_ratio = tw / th
        if source_ratio == target_ratio:
            return (tw, th)
        # Fitting, the wider side is limited; covering, the narrower one
        if self.fit_within == (source_ratio > target_ratio):
            th = tw / source_ratio
        else:
            tw = th * source_ratio
        return (max(1, round(tw)), max(1, round(th)))
