from __future__ import annotations

import math
from numbers import Real
from typing import List

from ..domain.errors import EmbeddingUnavailableError


def parse_vector(raw: object) -> List[float]:
    """Convert provider JSON into a non-empty list of finite floats or fail as a whole."""
    if not isinstance(raw, list) or not raw:
        raise EmbeddingUnavailableError("Embedding is not a non-empty list")
    values: List[float] = []
    for x in raw:
        if isinstance(x, bool) or not isinstance(x, Real):
            raise EmbeddingUnavailableError(f"Embedding contains a non-numeric value: {x!r}")
        f = float(x)
        if not math.isfinite(f):
            raise EmbeddingUnavailableError("Embedding contains a non-finite value")
        values.append(f)
    return values


def first_vector(raw: object) -> object:
    """Reduce a provider response to its first vector.

    Sentence-transformers endpoints return either one pooled vector, a list of vectors
    (one per input or sentence), or token-level nesting. Only the first vector is kept,
    which discards the rest for multi-vector responses.
    """
    while isinstance(raw, list) and raw and isinstance(raw[0], list):
        raw = raw[0]
    return raw
