"""
Positions for placing one rectangle inside another.

A position only does arithmetic. Given the size of the enclosing
rectangle, the size of the rectangle being placed and the insets
(margins) from each edge, calculate() returns the (x, y) of the
top-left corner of the placed rectangle. The result may be negative
or past the far edge; clipping is the caller's problem.
"""

from abc import ABC,abstractmethod

LEFT   = 'left'
RIGHT  = 'right'
TOP    = 'top'
BOTTOM = 'bottom'
CENTER_ = 'center'

class Position(ABC):
    """Abstract base class for placements"""

    @abstractmethod
    def calculate(self, enclosing_width, enclosing_height, width, height,
                  inset_left=0, inset_right=0, inset_top=0, inset_bottom=0):
        """Return (x, y) of the top-left corner of a width x height rectangle"""


class Positions(Position):
    """One of the nine standard placements: an edge or the centre, on each axis."""
    def __init__(self, horizontal, vertical):
        if horizontal not in (LEFT, CENTER_, RIGHT):
            raise ValueError(f"bad horizontal alignment {horizontal}")
        if vertical not in (TOP, CENTER_, BOTTOM):
            raise ValueError(f"bad vertical alignment {vertical}")
        self.horizontal = horizontal
        self.vertical   = vertical

    def __repr__(self):
        return f"<Positions {self.vertical}_{self.horizontal}>"

    def __eq__(self, b):
        return isinstance(b, Positions) and self.__dict__ == b.__dict__

    def __hash__(self):
        return hash((self.horizontal, self.vertical))

    def calculate(self, enclosing_width, enclosing_height, width, height,
                  inset_left=0, inset_right=0, inset_top=0, inset_bottom=0):
        if self.horizontal==LEFT:
            x = inset_left
        elif self.horizontal==RIGHT:
            x = enclosing_width - width - inset_right
        else:
            x = enclosing_width // 2 - width // 2

        if self.vertical==TOP:
            y = inset_top
        elif self.vertical==BOTTOM:
            y = enclosing_height - height - inset_bottom
        else:
            y = enclosing_height // 2 - height // 2
        return (x, y)


class Coordinate(Position):
    """A fixed placement. Sizes and insets are ignored."""
    def __init__(self, x, y):
        self.x = x
        self.y = y

    def __repr__(self):
        return f"<Coordinate ({self.x},{self.y})>"

    def calculate(self, enclosing_width, enclosing_height, width, height,
                  inset_left=0, inset_right=0, inset_top=0, inset_bottom=0):
        return (self.x, self.y)


TOP_LEFT      = Positions(LEFT,    TOP)
TOP_CENTER    = Positions(CENTER_, TOP)
TOP_RIGHT     = Positions(RIGHT,   TOP)
CENTER_LEFT   = Positions(LEFT,    CENTER_)
CENTER        = Positions(CENTER_, CENTER_)
CENTER_RIGHT  = Positions(RIGHT,   CENTER_)
BOTTOM_LEFT   = Positions(LEFT,    BOTTOM)
BOTTOM_CENTER = Positions(CENTER_, BOTTOM)
BOTTOM_RIGHT  = Positions(RIGHT,   BOTTOM)

POSITIONS = {'top_left':TOP_LEFT,
             'top_center':TOP_CENTER,
             'top_right':TOP_RIGHT,
             'center_left':CENTER_LEFT,
             'center':CENTER,
             'center_right':CENTER_RIGHT,
             'bottom_left':BOTTOM_LEFT,
             'bottom_center':BOTTOM_CENTER,
             'bottom_right':BOTTOM_RIGHT}

def position_from_name(name):
    """Return the standard position called `name`, e.g. 'bottom_right' or 'Bottom-Right'."""
    key = name.strip().lower().replace('-','_').replace(' ','_')
    try:
        return POSITIONS[key]
    except KeyError:
        raise ValueError(f"Unknown position '{name}'. Must be one of "+" ".join(sorted(POSITIONS))) from None

def normalize_insets(insets):
    """Accept a single margin or a (left, right, top, bottom) tuple; return the tuple."""
    if insets is None:
        return (0,0,0,0)
    if isinstance(insets, int):
        return (insets,)*4
    insets = tuple(int(v) for v in insets)
    if len(insets)!=4:
        raise ValueError("insets must be a number or (left, right, top, bottom)")
    return insets
