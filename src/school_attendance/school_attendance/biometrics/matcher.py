"""Pluggable face matching.

Detection and feature extraction happen elsewhere (the client, or a future
model service); this module only compares a captured descriptor against the
template enrolled for a student.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

import numpy as np

from ..core.constants import DEFAULT_FACE_MATCH_THRESHOLD
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class MatchResult:
    score: float
    threshold: float
    matched: bool


class BiometricMatcher(Protocol):
    def match(self, sample: Sequence[float], template: Sequence[float]) -> MatchResult:
        raise NotImplementedError


def as_descriptor(values: Sequence[float], field_name: str = "descriptor") -> np.ndarray:
    """Validate and convert a face descriptor into a 1-D float vector."""

    try:
        vec = np.asarray(values, dtype=float)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a list of numbers") from None
    if vec.ndim != 1 or vec.size == 0:
        raise ValidationError(f"{field_name} must be a non-empty list of numbers")
    if not np.all(np.isfinite(vec)):
        raise ValidationError(f"{field_name} must contain only finite numbers")
    return vec


class DescriptorDistanceMatcher:
    """Euclidean distance between descriptors; lower is closer.

    ``matched`` is true when the distance is at or below ``threshold``.
    """

    def __init__(self, threshold: float = DEFAULT_FACE_MATCH_THRESHOLD):
        if threshold <= 0:
            raise ValidationError("Face match threshold must be greater than 0")
        self._threshold = float(threshold)

    @property
    def threshold(self) -> float:
        return self._threshold

    def match(self, sample: Sequence[float], template: Sequence[float]) -> MatchResult:
        a = as_descriptor(sample, "sample")
        b = as_descriptor(template, "template")
        if a.shape != b.shape:
            raise ValidationError(f"Descriptor size mismatch: sample={a.size}, template={b.size}")

        score = float(np.linalg.norm(a - b))
        return MatchResult(score=score, threshold=self._threshold, matched=score <= self._threshold)
