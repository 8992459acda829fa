from __future__ import annotations
from collections import deque
from typing import Dict, Tuple

import numpy as np

from .particles import Hit
from .physics import bin_of


class HitAccumulator:
    """
    Detector screen state. Keeps the most recent hits for drawing in a fixed
    ring buffer, while per-bin counts keep growing for the whole run.
    """

    def __init__(self, bin_size: float = 4.0, recent_capacity: int = 200):
        if bin_size <= 0:
            raise ValueError(f"bin_size must be positive, got {bin_size}")
        self.bin_size = float(bin_size)
        self._recent: deque[Hit] = deque(maxlen=max(0, int(recent_capacity)))
        self._counts: Dict[float, int] = {}
        self._total = 0

    @property
    def total(self) -> int:
        return self._total

    @property
    def recent_capacity(self) -> int:
        return self._recent.maxlen or 0

    def record(self, y: float) -> Hit:
        hit = Hit(float(y))
        self._recent.append(hit)
        key = bin_of(hit.y, self.bin_size)
        self._counts[key] = self._counts.get(key, 0) + 1
        self._total += 1
        return hit

    def recent(self) -> Tuple[Hit, ...]:
        return tuple(self._recent)

    def histogram(self) -> Dict[float, int]:
        return {k: self._counts[k] for k in sorted(self._counts)}

    def histogram_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        hist = self.histogram()
        bins = np.fromiter(hist.keys(), dtype=np.float64, count=len(hist))
        counts = np.fromiter(hist.values(), dtype=np.int64, count=len(hist))
        return bins, counts

    def max_count(self) -> int:
        return max(self._counts.values(), default=0) or 1

    def clear(self) -> None:
        self._recent.clear()
        self._counts.clear()
        self._total = 0

    def __len__(self) -> int:
        return self._total
