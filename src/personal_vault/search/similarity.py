"""
Cosine similarity between embedding vectors.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from ..errors import DimensionMismatchError


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Return the cosine of the angle between *a* and *b*.

    Raises ``DimensionMismatchError`` when the lengths differ. A zero-norm
    vector on either side scores 0.0.
    """
    if len(a) != len(b):
        raise DimensionMismatchError(len(a), len(b))
    if not a:
        return 0.0

    dot = math.fsum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(math.fsum(x * x for x in a))
    norm_b = math.sqrt(math.fsum(y * y for y in b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return dot / (norm_a * norm_b)
