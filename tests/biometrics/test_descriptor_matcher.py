import pytest

from src.school_attendance.school_attendance.biometrics.matcher import DescriptorDistanceMatcher
from src.school_attendance.school_attendance.core.exceptions import ValidationError


def test_identical_descriptors_match():
    result = DescriptorDistanceMatcher(0.5).match([0.1, 0.2, 0.3], [0.1, 0.2, 0.3])

    assert result.matched
    assert result.score == 0
    assert result.threshold == 0.5


def test_threshold_is_inclusive():
    result = DescriptorDistanceMatcher(5.0).match([3.0, 4.0], [0.0, 0.0])

    assert result.score == pytest.approx(5.0)
    assert result.matched


def test_far_descriptors_do_not_match():
    assert not DescriptorDistanceMatcher(0.6).match([1.0, 0.0], [0.0, 1.0]).matched


def test_size_mismatch_is_rejected():
    with pytest.raises(ValidationError):
        DescriptorDistanceMatcher().match([0.1, 0.2], [0.1, 0.2, 0.3])


@pytest.mark.parametrize("bad", [[], [[0.1], [0.2]], ["x"], [float("nan")]])
def test_malformed_descriptors_are_rejected(bad):
    with pytest.raises(ValidationError):
        DescriptorDistanceMatcher().match(bad, [0.1])


def test_threshold_must_be_positive():
    with pytest.raises(ValidationError):
        DescriptorDistanceMatcher(0)
