from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence

from .errors import InvalidInputError
from .models import DocumentRecord, ScoredRecord


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two equal-length vectors.

    Returns NaN when either vector is all zeros; callers must not let NaN win a comparison.
    Both vectors are divided by their largest magnitude first, so tiny or huge components
    neither underflow nor overflow.

    Raises:
        InvalidInputError: When the vectors differ in length.
    """
    if len(a) != len(b):
        raise InvalidInputError(f"Dimension mismatch: {len(a)} != {len(b)}")
    scale_a = max((abs(x) for x in a), default=0.0)
    scale_b = max((abs(y) for y in b), default=0.0)
    if scale_a == 0.0 or scale_b == 0.0:
        return math.nan
    ua = [x / scale_a for x in a]
    ub = [y / scale_b for y in b]
    dot = math.fsum(x * y for x, y in zip(ua, ub))
    denom = math.sqrt(math.fsum(x * x for x in ua)) * math.sqrt(math.fsum(y * y for y in ub))
    return max(-1.0, min(1.0, dot / denom))


def best_match(query: Sequence[float], records: Iterable[DocumentRecord]) -> Optional[ScoredRecord]:
    """Linear scan for the highest-scoring record.

    Undefined (NaN) similarities are skipped. On an exact tie the record seen first is kept.
    Returns None when no record yields a usable score.
    """
    best: Optional[DocumentRecord] = None
    best_score = -math.inf
    for rec in records:
        score = cosine_similarity(query, rec.embedding)
        if math.isnan(score):
            continue
        if best is None or score > best_score:
            best, best_score = rec, score
    if best is None:
        return None
    return ScoredRecord(record=best, score=best_score)


def rank(query: Sequence[float], records: Iterable[DocumentRecord], k: int = 5) -> List[ScoredRecord]:
    """Top-k records by descending similarity, NaN excluded, scan order kept on ties."""
    if k <= 0:
        raise InvalidInputError(f"k must be positive, got {k}")
    scored: List[ScoredRecord] = []
    for rec in records:
        score = cosine_similarity(query, rec.embedding)
        if not math.isnan(score):
            scored.append(ScoredRecord(record=rec, score=score))
    scored.sort(key=lambda s: s.score, reverse=True)
    return scored[:k]
