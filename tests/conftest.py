import pytest

from formfitness.models import Joint, JointPoint, PixelBuffer, Skeleton


STANDING = {
    Joint.NOSE: (0.50, 0.90),
    Joint.NECK: (0.50, 0.80),
    Joint.LEFT_SHOULDER: (0.60, 0.78),
    Joint.RIGHT_SHOULDER: (0.40, 0.78),
    Joint.LEFT_ELBOW: (0.65, 0.65),
    Joint.RIGHT_ELBOW: (0.35, 0.65),
    Joint.LEFT_WRIST: (0.68, 0.52),
    Joint.RIGHT_WRIST: (0.32, 0.52),
    Joint.ROOT: (0.50, 0.50),
    Joint.LEFT_HIP: (0.56, 0.50),
    Joint.RIGHT_HIP: (0.44, 0.50),
    Joint.LEFT_KNEE: (0.57, 0.30),
    Joint.RIGHT_KNEE: (0.43, 0.30),
    Joint.LEFT_ANKLE: (0.58, 0.10),
    Joint.RIGHT_ANKLE: (0.42, 0.10),
}


def build_skeleton(coords=None, confidence=0.9, **overrides):
    """overrides: joint_value=(x, y, conf) 또는 None(관절 제거)"""
    coords = dict(STANDING if coords is None else coords)
    points = {joint: JointPoint(x, y, confidence) for joint, (x, y) in coords.items()}
    for name, value in overrides.items():
        joint = Joint(name)
        if value is None:
            points.pop(joint, None)
        else:
            points[joint] = JointPoint(*value)
    return Skeleton(points)


def shifted(dx, dy):
    return {joint: (x + dx, y + dy) for joint, (x, y) in STANDING.items()}


@pytest.fixture
def make_skeleton():
    return build_skeleton


@pytest.fixture
def standing():
    return build_skeleton()


class FakeImageProvider:
    def __init__(self, images=None, convertible=True):
        self.images = images if images is not None else {}
        self.convertible = convertible
        self.load_calls = []

    def load_image(self, name):
        self.load_calls.append(name)
        return self.images.get(name)

    def to_pixel_buffer(self, image):
        if not self.convertible:
            return None
        return PixelBuffer.blank(64, 48)


class FakeDetector:
    """미리 정한 스켈레톤을 순서대로 반환"""

    def __init__(self, results=None):
        self.results = list(results or [])
        self.calls = 0

    def detect(self, buffer, orientation=None):
        self.calls += 1
        if not self.results:
            return None
        if len(self.results) == 1:
            return self.results[0]
        return self.results.pop(0)


@pytest.fixture
def fake_provider():
    return FakeImageProvider(images={"squats": object(), "plank3": object()})


@pytest.fixture
def blank_buffer():
    return PixelBuffer.blank(64, 48)
