"""
Thumbnail tasks. A task knows where the image comes from and where the thumbnail goes.

Each task is used once, by one caller:

    new -> read -> filtered -> written -> done

read() decodes exactly the first frame of the source and remembers the
format it was in. write() encodes in the requested output format, or in
the remembered one when the output format is C.ORIGINAL_FORMAT. write()
returns False when there is no encoder for the format.
"""

import io
import logging
from abc import ABC,abstractmethod

from .constants import C
from . import codec
from . import storage

logger = logging.getLogger(__name__)

STATE_NEW      = 'new'
STATE_READ     = 'read'
STATE_FILTERED = 'filtered'
STATE_WRITTEN  = 'written'
STATE_DONE     = 'done'

class ThumbnailTask(ABC):
    """Abstract base class for thumbnail tasks"""
    def __init__(self, param):
        self.param = param
        self.input_format_name = None
        self.state = STATE_NEW

    def __repr__(self):
        return f"<{self.__class__.__name__} state={self.state}>"

    def _advance(self, allowed, new_state):
        if self.state not in allowed:
            raise RuntimeError(f"{self!r}: cannot go to '{new_state}' from '{self.state}'")
        self.state = new_state

    def read(self):
        """Decode the source image. Returns an image array."""
        if self.state != STATE_NEW:
            raise RuntimeError(f"{self!r}: cannot go to '{STATE_READ}' from '{self.state}'")
        img = self._read()
        self.state = STATE_READ
        return img

    def filtered(self):
        """Called by the pipeline once the filters have run"""
        self._advance((STATE_READ,), STATE_FILTERED)

    def write(self, img):
        """Encode img to the destination. Returns False if no encoder exists for the output format."""
        if self.state not in (STATE_READ, STATE_FILTERED):
            raise RuntimeError(f"{self!r}: cannot write before reading")
        ok = self._write(img)
        if ok:
            self.state = STATE_WRITTEN
        return ok

    def done(self):
        self._advance((STATE_WRITTEN,), STATE_DONE)

    def output_format_name(self):
        """The format the thumbnail will be written in"""
        if self.param.output_format == C.ORIGINAL_FORMAT:
            return self.input_format_name
        return self.param.output_format

    @abstractmethod
    def _read(self):
        """Subclasses decode here and set self.input_format_name"""

    @abstractmethod
    def _write(self, img):
        """Subclasses encode here"""


class StreamThumbnailTask(ThumbnailTask):
    """Reads from one binary stream and writes to another. Neither stream is closed.
    Only the first image in the input stream is processed."""
    def __init__(self, param, input_stream, output_stream):
        super().__init__(param)
        self.input_stream = input_stream
        self.output_stream = output_stream

    def _read(self):
        (img, self.input_format_name) = codec.read_first_frame(
            self.input_stream, exif_orientation=self.param.use_exif_orientation)
        return img

    def _write(self, img):
        format_name = self.output_format_name()
        if format_name is None:
            return False
        return codec.write_image(img, self.output_stream, format_name, self.param.output_quality)


class UrnThumbnailTask(ThumbnailTask):
    """Reads from and writes to URNs through the storage layer (paths, file:, s3:, http(s): for reading)."""
    def __init__(self, param, source_urn, destination_urn):
        super().__init__(param)
        self.source_urn = source_urn
        self.destination_urn = destination_urn

    def __repr__(self):
        return f"<UrnThumbnailTask {self.source_urn} -> {self.destination_urn} state={self.state}>"

    def _read(self):
        data = storage.load(self.source_urn)
        (img, self.input_format_name) = codec.read_first_frame(
            io.BytesIO(data), exif_orientation=self.param.use_exif_orientation)
        return img

    def _write(self, img):
        format_name = self.output_format_name()
        if format_name is None:
            return False
        data = codec.image_bytes(img, format_name, self.param.output_quality)
        if data is None:
            return False
        storage.save(self.destination_urn, data, mimetype=codec.mime_type(format_name))
        return True


class BufferThumbnailTask(ThumbnailTask):
    """Source and destination are image arrays in memory. The thumbnail is left in .result"""
    def __init__(self, param, img):
        super().__init__(param)
        self.img = img
        self.result = None

    def _read(self):
        return self.img

    def _write(self, img):
        self.result = img
        return True
