"""Note extraction and performance point scaling for parsed SSPM maps.

The star rating itself comes from an external difficulty engine; this
module only prepares its input and scales its output.
"""
import math
from dataclasses import dataclass
from typing import List

from .sspm_types import ParsedMap, Position

NOTE_MARKER_TYPE = 0


@dataclass
class Note:
    """A note with its time (ms) and grid position."""
    time: int
    x: float
    y: float


def extract_notes(parsed_map: ParsedMap) -> List[Note]:
    """Get note markers in chronological order.

    Only markers of the note type whose first field is a position are
    returned.
    """
    notes = []
    for marker in parsed_map.sorted_markers():
        if marker.type != NOTE_MARKER_TYPE or not marker.fields:
            continue
        position = marker.field(0)
        if not isinstance(position, Position):
            continue
        notes.append(Note(time=marker.position, x=position.x, y=position.y))
    return notes


def ease_in_expo(x: float) -> float:
    return 0.0 if x == 0 else 2 ** (35 * x - 35)


def calculate_performance_points(star_rating: float, accuracy: float) -> int:
    """Scale a star rating to performance points.

    Args:
        star_rating: Rating from the difficulty engine
        accuracy: Hit accuracy in 0..1

    Returns:
        Rounded performance points
    """
    points = (star_rating * ease_in_expo(accuracy) * 100 / 2) ** 2 / 1000
    # Halves round up
    return math.floor(points + 0.5)
