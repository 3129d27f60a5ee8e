"""
Pipeline: drives thumbnail tasks from reading to writing.
"""

import sys
import time
import math
import logging
from collections import defaultdict

from .constants import C
from .codec import NoReaderError
from .image_utils import convert
from .resizers import default_resizer

logger = logging.getLogger(__name__)

def prepare(img, param):
    """Fix the image type and size of img before any filters run"""
    if param.image_type != C.ORIGINAL_TYPE:
        img = convert(img, param.image_type)
    (h, w) = img.shape[:2]
    size = param.target_size(w, h)
    resizer = param.resizer or default_resizer((w, h), size)
    logger.debug("resize %sx%s -> %sx%s with %s",w,h,size[0],size[1],resizer)
    return resizer.resize(img, size)


class StepStats:
    """Running timing statistics for one step of the pipeline"""
    def __init__(self):
        self.count  = 0
        self.sum_t  = 0
        self.sum_t2 = 0

    def add(self, t):
        self.sum_t  += t
        self.sum_t2 += (t*t)
        self.count  += 1

    @property
    def t_mean(self):
        return self.sum_t / self.count if self.count>0 else float("nan")

    @property
    def t2_mean(self):
        return self.sum_t2 / self.count if self.count>0 else float("nan")

    @property
    def t_variance(self):
        return max(self.t2_mean - self.t_mean * self.t_mean, 0.0)

    @property
    def t_stddev(self):
        return math.sqrt(self.t_variance)


class ThumbnailPipeline:
    """Runs tasks in the caller's thread. Prints stats on exit when used as a context manager."""
    def __init__(self, verbose=False, debug=False, out=sys.stdout, nonstop=False):
        """:param nonstop: - If True, log and count unreadable inputs instead of raising"""
        self.stats   = defaultdict(StepStats)
        self.count   = 0
        self.error_counter = 0
        self.verbose = verbose
        self.debug   = debug
        self.out     = out
        self.nonstop = nonstop
        if debug:
            logger.setLevel(logging.DEBUG)
        elif verbose:
            logger.setLevel(logging.INFO)

    def _timed(self, name, func, *args):
        t0 = time.time()
        ret = func(*args)
        self.stats[name].add(time.time() - t0)
        return ret

    def create_thumbnail(self, task):
        """Run one task. Returns True if the thumbnail was written."""
        self.count += 1
        logger.info("== create_thumbnail %s",task)
        img = self._timed('read', task.read)
        img = self._timed('resize', prepare, img, task.param)
        for f in task.param.filters:
            img = self._timed(f.__class__.__name__, f.apply, img)
        task.filtered()
        if not self._timed('write', task.write, img):
            logger.warning("No image writer for format '%s': %s",task.output_format_name(),task)
            return False
        task.done()
        return True

    def process_list(self, tasks):
        """Run each task in turn. Returns a list with True or False for each."""
        logger.info("== process_list ==")
        results = []
        for task in tasks:
            try:
                results.append(self.create_thumbnail(task))
            except (NoReaderError, FileNotFoundError) as e:
                if not self.nonstop:
                    raise
                logger.error("Cannot read %s: %s",task,e)
                self.error_counter += 1
                results.append(False)
        return results

    def print_stats(self, out=None):
        out = out or self.out
        for (name, stage) in self.stats.items():
            print(f"{name}: calls: {stage.count}  mean: {stage.t_mean:.2}s  stddev: {stage.t_stddev:.2}",
                  file=out)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.print_stats()
        return False


def create_thumbnail(task):
    """Run a single task with a throwaway pipeline. Returns True if the thumbnail was written."""
    return ThumbnailPipeline().create_thumbnail(task)
