"""
Free-text coordinate parsing for the "show on map" box.

Accepts "12.9716,77.5946", "12.9716 77.5946" and the swapped "77.5946, 12.9716".
"""
from __future__ import annotations

import math
import re
from typing import Optional, Tuple

LatLng = Tuple[float, float]


def parse_coordinates(text: Optional[str]) -> Optional[LatLng]:
    parts = [p for p in re.split(r"[,\s]+", (text or "").strip()) if p]
    if len(parts) < 2:
        return None
    try:
        a = float(parts[0])
        b = float(parts[1])
    except ValueError:
        return None
    if not (math.isfinite(a) and math.isfinite(b)):
        return None

    # first value can't be a latitude but the second can: operator typed lng,lat
    if abs(a) > 90 and abs(b) <= 90:
        a, b = b, a
    if abs(a) > 90 or abs(b) > 180:
        return None
    return (a, b)
