"""Design document.

Abstractions related to image content:

Image - A decoded image is a numpy uint8 array in RGB channel order:
        H x W for greyscale ("L"), H x W x 3 for "RGB" and H x W x 4
        for "RGBA". The colour model is derived from the shape.

        Images are immutable once decoded; the decoder marks the
        array read-only. A filter never writes into its input, it
        returns a new array.

ThumbnailParameter - What to make: target size or scale factors,
        aspect ratio handling, output format and quality, image type
        and the list of filters. Constructed once, read-only after.

Position - Where to put a rectangle inside another rectangle. Used by
        the watermark, caption and canvas filters.

Abstractions related to image processing:

Filter - A pure transformation of one image into another. Filters
         can be chained with a FilterPipeline.

Codec  - Decoding and encoding are delegated to Pillow's registry of
         image plugins. Decoders are probed by content; encoders are
         found by format name. Pixel work (resampling, colour
         conversion, rotation, drawing) is done with OpenCV.

Task   - Where the bytes come from and go to: a pair of streams, a
         pair of URNs or an in-memory image. A task is used once:
         read, filtered, written, done.

Pipeline - Drives tasks: read, fix the image type and size, run the
           filters, write. Keeps timing statistics for each step.

"""
