import math

import pytest

from formfitness.errors import JointUnavailable
from formfitness.models import Joint, JointPoint, PixelBuffer, Rgb, Size, Skeleton


def test_joint_set_is_closed():
    assert len(Joint) == 15


@pytest.mark.parametrize("confidence", [0.0, 0.05, 0.1])
def test_low_confidence_point_is_absent(confidence):
    skeleton = Skeleton({Joint.NOSE: JointPoint(0.5, 0.5, confidence)})
    assert skeleton.point(Joint.NOSE) is None
    with pytest.raises(JointUnavailable):
        skeleton.require(Joint.NOSE)


def test_missing_point_is_absent():
    skeleton = Skeleton({Joint.NOSE: JointPoint(0.5, 0.5, 0.9)})
    assert skeleton.point(Joint.NECK) is None
    assert Joint.NOSE in skeleton.valid_joints()
    assert Joint.NECK not in skeleton.valid_joints()


def test_point_above_threshold_is_returned():
    point = JointPoint(0.3, 0.7, 0.11)
    skeleton = Skeleton({Joint.LEFT_KNEE: point})
    assert skeleton.point(Joint.LEFT_KNEE) == point
    assert skeleton.require(Joint.LEFT_KNEE).location == (0.3, 0.7)


def test_skeleton_is_read_only():
    source = {Joint.NOSE: JointPoint(0.5, 0.5, 0.9)}
    skeleton = Skeleton(source)
    source[Joint.NECK] = JointPoint(0.5, 0.4, 0.9)

    assert skeleton.point(Joint.NECK) is None
    with pytest.raises(TypeError):
        skeleton.points[Joint.NECK] = JointPoint(0.1, 0.1, 1.0)


def test_has_limb_requires_both_endpoints(make_skeleton):
    skeleton = make_skeleton(right_ankle=(0.3, 0.2, 0.05))
    assert skeleton.has_limb(Joint.LEFT_KNEE, Joint.LEFT_ANKLE)
    assert not skeleton.has_limb(Joint.RIGHT_KNEE, Joint.RIGHT_ANKLE)


def test_as_array_marks_unavailable_joints(make_skeleton):
    skeleton = make_skeleton(nose=None)
    data = skeleton.as_array([Joint.NOSE, Joint.NECK])

    assert data.shape == (2, 3)
    assert data[0, 2] == 0.0
    assert math.isnan(data[0, 0])
    assert tuple(data[1]) == pytest.approx((0.5, 0.8, 1.0))


def test_pixel_buffer_dimensions():
    buffer = PixelBuffer.blank(320, 240)
    assert buffer.size == Size(320, 240)
    assert buffer.pixels.shape == (240, 320, 4)


def test_size_center():
    assert Size(400, 300).center == (200, 150)
    assert Size(0, 300).is_empty


def test_rgb_to_bytes():
    assert Rgb(1.0, 0.0, 0.0).to_bytes() == (255, 0, 0, 255)
    assert Rgb(0.0, 0.5, 1.0, 0.0).to_bytes() == (0, 128, 255, 0)


@pytest.mark.parametrize("x, y, confidence", [
    (math.nan, 0.5, 0.9),
    (0.5, math.inf, 0.9),
    (0.5, 0.5, math.nan),
])
def test_non_finite_point_is_absent(x, y, confidence):
    skeleton = Skeleton({Joint.NOSE: JointPoint(x, y, confidence)})
    assert skeleton.point(Joint.NOSE) is None
    assert skeleton.valid_joints() == []
