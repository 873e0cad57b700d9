import threading
import time

import pytest

from conftest import FakeDetector, FakeImageProvider, build_skeleton
from formfitness.errors import DetectionError, ImageNotFound, NoPoseDetected
from formfitness.models import Joint, JointPoint, Size, Skeleton
from formfitness.repository import ReferencePoseRepository


def test_load_caches_reference(fake_provider, standing):
    repository = ReferencePoseRepository()
    detector = FakeDetector([standing])

    first = repository.load("squats", fake_provider, detector)
    second = repository.load("squats", fake_provider, detector)

    assert first is second
    assert detector.calls == 1
    assert fake_provider.load_calls == ["squats"]
    assert first.skeleton == standing
    assert first.image_size == Size(64, 48)
    assert repository.get("squats") is first
    assert "squats" in repository
    assert repository.names() == ["squats"]


def test_get_unknown_returns_none():
    repository = ReferencePoseRepository()
    assert repository.get("squats") is None
    assert len(repository) == 0


def test_missing_image_raises(fake_provider, standing):
    repository = ReferencePoseRepository()
    detector = FakeDetector([standing])

    with pytest.raises(ImageNotFound) as exc_info:
        repository.load("burpees", fake_provider, detector)

    assert exc_info.value.name == "burpees"
    assert detector.calls == 0
    assert "burpees" not in repository


def test_unconvertible_image_raises(standing):
    provider = FakeImageProvider(images={"squats": object()}, convertible=False)
    repository = ReferencePoseRepository()

    with pytest.raises(ImageNotFound):
        repository.load("squats", provider, FakeDetector([standing]))


def test_no_pose_raises_and_is_not_cached(fake_provider, standing):
    repository = ReferencePoseRepository()
    detector = FakeDetector([None, standing])

    with pytest.raises(NoPoseDetected):
        repository.load("plank3", fake_provider, detector)
    assert repository.get("plank3") is None

    # 실패는 캐시되지 않으므로 다시 시도
    entry = repository.load("plank3", fake_provider, detector)
    assert entry.skeleton == standing
    assert detector.calls == 2


def test_skeleton_without_valid_joints_is_rejected(fake_provider):
    empty = Skeleton({Joint.NOSE: JointPoint(0.5, 0.5, 0.05)})
    repository = ReferencePoseRepository()

    with pytest.raises(DetectionError):
        repository.load("squats", fake_provider, FakeDetector([empty]))


def test_entries_are_independent(fake_provider):
    repository = ReferencePoseRepository()
    squat = build_skeleton(nose=(0.5, 0.7, 0.9))
    plank = build_skeleton(nose=(0.2, 0.3, 0.9))

    repository.load("squats", fake_provider, FakeDetector([squat]))
    repository.load("plank3", fake_provider, FakeDetector([plank]))

    assert repository.get("squats").skeleton == squat
    assert repository.get("plank3").skeleton == plank
    assert len(repository) == 2


class SlowDetector(FakeDetector):
    def detect(self, buffer, orientation=None):
        time.sleep(0.05)
        return super().detect(buffer, orientation)


def test_concurrent_loads_detect_once(fake_provider, standing):
    repository = ReferencePoseRepository()
    detector = SlowDetector([standing])
    results = []

    def worker():
        results.append(repository.load("squats", fake_provider, detector))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert detector.calls == 1
    assert len(results) == 8
    assert all(entry is results[0] for entry in results)
