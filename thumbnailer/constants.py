"""Constants"""

# pylint: disable=too-few-public-methods
class C:
    """Constants"""
    ORIGINAL_FORMAT = 'original'      # output format: same as the input
    ORIGINAL_TYPE   = 'original'      # image type: same as the input
    DEFAULT_QUALITY = float('nan')    # use the codec's default compression
    IMAGE_TYPES = ('L','RGB','RGBA')
    DEFAULT_RENAME  = 'prefix_dot_thumbnail'
    DEFAULT_POSITION = 'bottom_right'
    DEFAULT_OPACITY = 0.5
    DEFAULT_GET_TIMEOUT = 30

    # colors are RGB; buffers are kept in Pillow's channel order, not OpenCV's
    BLACK = (0,0,0)
    WHITE = (255,255,255)
    RED   = (255,0,0)
    GREEN = (0,255,0)
    BLUE  = (0,0,255)
