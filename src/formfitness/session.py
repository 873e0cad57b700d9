"""
Coaching session - wires the reference repository, detector, alignment and scoring.

프레임 콜백마다 검출 -> 정렬 -> 점수 계산을 순서대로 실행하고,
결과는 LatestValue에 최신 값만 남겨 UI 쪽에서 읽습니다.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Generic, Optional, Tuple, TypeVar

from .alignment import AlignmentConfig, AlignmentEngine, AlignmentMode
from .detector import PoseDetector
from .errors import DetectionError
from .models import Joint, Orientation, PixelBuffer, Point, ReferencePose, Rgb, Size, Skeleton
from .repository import ImageProvider, ReferencePoseRepository
from .scoring import PoseScore, color_for_match, score_frame


logger = logging.getLogger(__name__)

T = TypeVar("T")


class LatestValue(Generic[T]):
    """단일 writer / 단일 reader 용 최신 값 슬롯"""

    def __init__(self, value: Optional[T] = None):
        self._value = value
        self._lock = threading.Lock()

    def publish(self, value: T):
        with self._lock:
            self._value = value

    def get(self) -> Optional[T]:
        with self._lock:
            return self._value

    def clear(self):
        self.publish(None)


@dataclass
class OverlayControls:
    """오버레이 조작 상태 (이동, 배율, 좌우반전, 잠금, 추적)"""
    offset: Point = Point(0.0, 0.0)
    scale: float = 1.0
    mirrored: bool = False
    locked: bool = True
    following: bool = False

    def reset(self):
        self.offset = Point(0.0, 0.0)
        self.scale = 1.0

    def toggle_mirror(self):
        self.mirrored = not self.mirrored

    def toggle_lock(self):
        self.locked = not self.locked
        # 추적과 사용자 조작은 동시에 허용하지 않음
        if not self.locked:
            self.following = False

    def toggle_following(self):
        self.following = not self.following
        if self.following:
            self.locked = True

    def drag(self, dx: float, dy: float) -> bool:
        if self.locked or self.following:
            return False
        self.offset = Point(self.offset.x + dx, self.offset.y + dy)
        return True

    def pinch(self, scale: float) -> bool:
        if self.locked or scale <= 0:
            return False
        self.scale = scale
        return True


@dataclass
class FrameResult:
    """한 프레임의 처리 결과"""
    frame_number: int
    live: Skeleton
    reference: Optional[ReferencePose]
    center: Point
    score: Optional[PoseScore] = None


class CoachingSession:
    """기준 포즈와 라이브 프레임을 비교하는 세션 (컴포지션 루트)"""

    def __init__(self, repository: ReferencePoseRepository, image_provider: ImageProvider,
                 detector: PoseDetector, config: Optional[AlignmentConfig] = None):
        self.repository = repository
        self.image_provider = image_provider
        self.detector = detector
        self.alignment = AlignmentEngine(config)
        self.controls = OverlayControls()
        self.exercise: Optional[str] = None
        self.last_error: Optional[DetectionError] = None
        self._results: LatestValue[FrameResult] = LatestValue()
        self._frame_counter = 0

    @property
    def reference(self) -> Optional[ReferencePose]:
        if self.exercise is None:
            return None
        return self.repository.get(self.exercise)

    def select_exercise(self, name: str) -> Optional[ReferencePose]:
        """운동 변경. 기준 포즈 로드 실패 시 오버레이를 표시하지 않음"""
        self.exercise = name
        self.alignment.reset()
        self._results.clear()
        try:
            reference = self.repository.load(name, self.image_provider, self.detector)
        except DetectionError as e:
            logger.error("Reference pose for '%s' unavailable: %s", name, e)
            self.last_error = e
            return None
        self.last_error = None
        logger.info("Selected exercise '%s'", name)
        return reference

    def set_view_size(self, size):
        self.alignment.set_view_size(Size(*size))

    def set_following(self, following: bool):
        if following != self.controls.following:
            self.controls.toggle_following()
        self._sync_mode()

    def toggle_lock(self):
        self.controls.toggle_lock()
        self._sync_mode()

    def set_anchor_joint(self, joint: Joint):
        self.alignment.set_anchor_joint(joint)

    def reset_overlay(self):
        self.controls.reset()
        self.alignment.reset()

    def reset_initial_pose_offset(self):
        self.alignment.reset_initial_pose_offset()

    def _sync_mode(self):
        mode = AlignmentMode.FOLLOWING if self.controls.following else AlignmentMode.LOCKED
        self.alignment.set_mode(mode)

    def process_frame(self, buffer: PixelBuffer,
                      orientation: Orientation = Orientation.UP) -> Optional[FrameResult]:
        """
        프레임 처리

        검출에 실패하면 아무것도 갱신하지 않고 None을 반환합니다 (이전 결과 유지).
        """
        frame_number = self._frame_counter
        self._frame_counter += 1

        live = self.detector.detect(buffer, orientation)
        if live is None:
            logger.debug("Frame %d skipped: no pose detected", frame_number)
            return None

        reference = self.reference
        if reference is None:
            result = FrameResult(frame_number, live, None, self._overlay_center())
            self._results.publish(result)
            return result

        self.alignment.update(live, reference.skeleton,
                              mirrored=self.controls.mirrored, scale=self.controls.scale)
        center = self._overlay_center()
        score = score_frame(live, reference.skeleton, center, self.alignment.view_size)

        result = FrameResult(frame_number, live, reference, center, score)
        self._results.publish(result)
        return result

    def _overlay_center(self) -> Point:
        center = self.alignment.current_center
        if self.controls.following:
            return center
        offset = self.controls.offset
        return Point(center.x + offset.x, center.y + offset.y)

    def latest_result(self) -> Optional[FrameResult]:
        return self._results.get()

    def current_alignment(self) -> Point:
        result = self._results.get()
        if result is None:
            return self._overlay_center()
        return result.center

    def current_scale(self) -> float:
        return self.controls.scale

    def current_mirror(self) -> bool:
        return self.controls.mirrored

    def joint_match_color(self, joint: Joint) -> Rgb:
        result = self._results.get()
        if result is None or result.score is None:
            return color_for_match(0.0)
        return result.score.color(joint)

    def limb_gradient(self, joint_a: Joint, joint_b: Joint) -> Tuple[Rgb, Rgb]:
        result = self._results.get()
        if result is None or result.score is None:
            red = color_for_match(0.0)
            return red, red
        return result.score.gradient(joint_a, joint_b)
