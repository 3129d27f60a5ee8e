#!/usr/bin/env python3
"""
Make thumbnails from the command line.

    thumbnailer --size 160x120 --outdir thumbs photos/
    thumbnailer --scale 0.25 --format png --round 8 --outdir thumbs a.jpg s3://bucket/b.jpg
    thumbnailer --size 64 --format jpeg - < in.png > out.jpg
"""

import sys
import logging
import argparse

from .constants import C
from .config import DEFAULT_CONFIG,load_config,merge_config,parameter_from_config
from .pipeline import ThumbnailPipeline
from .source import SourceOptions,RENAMES,rename_from_name,tasks_from_inputs
from .tasks import StreamThumbnailTask,UrnThumbnailTask
from . import codec

def build_parser():
    parser = argparse.ArgumentParser(description="Make thumbnails of images",
                                     formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    parser.add_argument("inputs", nargs="*",
                        help="Image files, directories or URNs (file:, s3:, http:). '-' reads stdin and writes stdout")
    parser.add_argument("--outdir", help="Directory (or s3:// prefix) for thumbnails")
    parser.add_argument("--output", help="Output URN when there is a single input")
    parser.add_argument("--config", help="YAML file with thumbnail settings")
    parser.add_argument("--size", help="Box to fit the thumbnail in, WIDTHxHEIGHT")
    parser.add_argument("--scale", type=float, help="Scale factor instead of a size")
    parser.add_argument("--no-keep-aspect-ratio", dest='keep_aspect_ratio', action='store_false', default=None,
                        help="Stretch to exactly --size")
    parser.add_argument("--fill", dest='fit_within', action='store_false', default=None,
                        help="Cover --size rather than fit within it")
    parser.add_argument("--format", dest='output_format', help="Output format, e.g. jpeg or png. Default: same as input")
    parser.add_argument("--quality", dest='output_quality', type=float, help="Compression quality 0.0 to 1.0")
    parser.add_argument("--type", dest='image_type', choices=C.IMAGE_TYPES, help="Image type of the thumbnail")
    parser.add_argument("--resizer", help="null, nearest, bilinear, bicubic, area or progressive")
    parser.add_argument("--watermark", help="URN of a watermark image")
    parser.add_argument("--position", help="Watermark position", default=C.DEFAULT_POSITION)
    parser.add_argument("--opacity", help="Watermark opacity", type=float, default=C.DEFAULT_OPACITY)
    parser.add_argument("--insets", help="Watermark margin in pixels", type=int, default=0)
    parser.add_argument("--rotate", type=float, help="Rotate clockwise by this many degrees")
    parser.add_argument("--round", dest='rounded_corners', type=int, help="Corner radius in pixels")
    parser.add_argument("--flip", choices=['horizontal','vertical'])
    parser.add_argument("--caption", help="Text to write on the thumbnail")
    parser.add_argument("--rename", choices=sorted(RENAMES), help="How thumbnails are named in --outdir")
    parser.add_argument("--limit", type=int, help="Only process this many images")
    parser.add_argument("--nonstop", action='store_true', help="Keep going after unreadable images")
    parser.add_argument("--list-formats", action='store_true', help="List the formats that can be read and written")
    parser.add_argument("--stats", action='store_true', help="Print timing statistics at the end")
    parser.add_argument("--verbose", action='store_true')
    parser.add_argument("--debug", action='store_true')
    return parser

def config_from_args(args):
    config = load_config(args.config) if args.config else DEFAULT_CONFIG
    overrides = {k:getattr(args,k) for k in ['size','keep_aspect_ratio','fit_within','output_format',
                                              'output_quality','image_type','resizer','rotate',
                                              'rounded_corners','flip','caption','rename']}
    if args.watermark:
        overrides['watermark'] = {'urn':args.watermark,
                                  'position':args.position,
                                  'opacity':args.opacity,
                                  'insets':args.insets}
    config = merge_config(config, overrides)
    # a size or scale on the command line replaces either one from the file
    if args.scale is not None:
        config['scale'] = args.scale
        config['size'] = None
    elif args.size is not None:
        config['scale'] = None
    return config

def list_formats(out=None):
    out = out or sys.stdout
    print("read: "+" ".join(codec.reader_format_names()), file=out)
    print("write: "+" ".join(codec.writer_format_names()), file=out)

def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else (logging.INFO if args.verbose else logging.WARNING),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.list_formats:
        list_formats()
        return 0
    if not args.inputs:
        parser.error("no inputs")

    config = config_from_args(args)
    if config['size'] is None and config['scale'] is None:
        parser.error("--size or --scale is required")
    try:
        param = parameter_from_config(config)
    except ValueError as e:
        parser.error(str(e))

    if args.inputs == ['-']:
        tasks = [StreamThumbnailTask(param, sys.stdin.buffer, sys.stdout.buffer)]
        out = sys.stderr
    elif args.output:
        if len(args.inputs)!=1:
            parser.error("--output requires exactly one input")
        tasks = [UrnThumbnailTask(param, args.inputs[0], args.output)]
        out = sys.stdout
    else:
        if not args.outdir:
            parser.error("--outdir or --output is required")
        tasks = tasks_from_inputs(args.inputs, args.outdir, param,
                                  rename=rename_from_name(config['rename']),
                                  o=SourceOptions(limit=args.limit))
        out = sys.stdout

    pipeline = ThumbnailPipeline(verbose=args.verbose, debug=args.debug, out=out, nonstop=args.nonstop)
    results = pipeline.process_list(tasks)
    if args.stats:
        pipeline.print_stats()
    failed = results.count(False)
    if failed:
        logging.error("%s of %s thumbnails were not written",failed,len(results))
        return 1
    return 0


if __name__=="__main__":
    sys.exit(main())
