"""
Images made on the fly for the tests, so that no test data has to be checked in.
"""

import io

import numpy as np
from PIL import Image

def gradient(width=64, height=48):
    """An RGB image with a different colour at every pixel"""
    x = np.linspace(0, 255, width, dtype=np.float64)
    y = np.linspace(0, 255, height, dtype=np.float64)
    (xx, yy) = np.meshgrid(x, y)
    img = np.dstack([xx, yy, 255 - xx]).astype(np.uint8)
    return img

def noise(width=64, height=48, channels=3, seed=42):
    rng = np.random.default_rng(seed)
    shape = (height, width) if channels==1 else (height, width, channels)
    return rng.integers(0, 256, size=shape, dtype=np.uint8)

def opaque_rgba(width, height, color):
    img = np.zeros((height, width, 4), dtype=np.uint8)
    img[..., :3] = color
    img[..., 3] = 255
    return img

def encoded(img, format_name, **kwargs):
    """Encode an image array with Pillow directly"""
    buf = io.BytesIO()
    Image.fromarray(img).save(buf, format=format_name, **kwargs)
    return buf.getvalue()

def animated_gif(colors, size=(16,16)):
    """A GIF with one solid frame per colour"""
    frames = [Image.new('RGB', size, c) for c in colors]
    buf = io.BytesIO()
    frames[0].save(buf, format='GIF', save_all=True, append_images=frames[1:], duration=100, loop=0)
    return buf.getvalue()
