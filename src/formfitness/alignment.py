"""
Overlay alignment.

기준 포즈 오버레이의 화면상 중심 위치를 계산합니다.

Policies:
- AnchorFollowingPolicy: 매 프레임 오버레이의 anchor 관절을 라이브 관절 위치에 맞춤
- InitialOffsetLockPolicy: 처음 잡은 라이브/기준 오프셋을 고정하고 이후 움직임만 반영

두 정책 모두 관절을 읽지 못한 프레임에서는 이전 위치를 유지합니다.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .constants import ANCHOR_OFFSET_X_SIGN, DEFAULT_ANCHOR_JOINT, MOVEMENT_SCALE_FACTOR
from .errors import JointUnavailable
from .models import Joint, Point, Size, Skeleton
from .utils import to_pixel


logger = logging.getLogger(__name__)


class AlignmentMode(Enum):
    LOCKED = "locked"
    FOLLOWING = "following"


@dataclass
class AlignmentConfig:
    """정렬 설정"""
    anchor_joint: Joint = DEFAULT_ANCHOR_JOINT
    movement_scale_factor: float = MOVEMENT_SCALE_FACTOR
    anchor_x_sign: float = ANCHOR_OFFSET_X_SIGN


@dataclass
class AlignmentState:
    """정렬 상태"""
    anchor_joint: Joint = DEFAULT_ANCHOR_JOINT
    mode: AlignmentMode = AlignmentMode.LOCKED
    captured_offset: Optional[Point] = None
    current_center: Point = field(default_factory=lambda: Point(0.0, 0.0))
    view_size: Size = field(default_factory=lambda: Size(0.0, 0.0))


class AnchorFollowingPolicy:
    """Policy A - anchor 관절 추적"""

    def __init__(self, config: AlignmentConfig):
        self.config = config

    def compute(self, state: AlignmentState, live: Skeleton, reference: Skeleton,
                mirrored: bool = False, scale: float = 1.0) -> Point:
        joint = state.anchor_joint
        size = state.view_size
        live_anchor = to_pixel(live.require(joint), size)
        ref_point = reference.require(joint)

        # 기준 이미지 중심으로부터의 관절 오프셋
        offset_x = ref_point.x - 0.5
        offset_y = ref_point.y - 0.5

        x_sign = -self.config.anchor_x_sign if mirrored else self.config.anchor_x_sign
        center_x = live_anchor.x + x_sign * offset_x * scale * size.width
        center_y = live_anchor.y + offset_y * scale * size.height
        return Point(center_x, center_y)


class InitialOffsetLockPolicy:
    """Policy B - 초기 오프셋 고정"""

    def __init__(self, config: AlignmentConfig):
        self.config = config

    def relative_offset(self, state: AlignmentState, live: Skeleton, reference: Skeleton) -> Point:
        """현재 오프셋 - 초기 오프셋 (정규화 좌표). 초기 오프셋이 없으면 지금 캡처"""
        joint = state.anchor_joint
        live_point = live.require(joint)
        ref_point = reference.require(joint)

        current = Point(live_point.x - ref_point.x, live_point.y - ref_point.y)
        if state.captured_offset is None:
            state.captured_offset = current
            logger.debug("Captured initial pose offset (%.4f, %.4f) on %s",
                         current.x, current.y, joint.value)

        initial = state.captured_offset
        return Point(current.x - initial.x, current.y - initial.y)

    def compute(self, state: AlignmentState, live: Skeleton, reference: Skeleton,
                mirrored: bool = False, scale: float = 1.0) -> Point:
        relative = self.relative_offset(state, live, reference)
        size = state.view_size
        factor = self.config.movement_scale_factor

        # 정규화 y는 위로 증가, 화면 y는 아래로 증가
        translation = Point(relative.x * size.width * factor,
                            -relative.y * size.height * factor)
        base = size.center
        return Point(base.x + translation.x, base.y + translation.y)


class AlignmentEngine:
    """정렬 정책을 선택해 매 프레임 오버레이 중심을 갱신"""

    def __init__(self, config: Optional[AlignmentConfig] = None,
                 mode: AlignmentMode = AlignmentMode.LOCKED):
        self.config = config or AlignmentConfig()
        self.state = AlignmentState(anchor_joint=self.config.anchor_joint, mode=mode)
        self._policies = {
            AlignmentMode.FOLLOWING: AnchorFollowingPolicy(self.config),
            AlignmentMode.LOCKED: InitialOffsetLockPolicy(self.config),
        }

    @property
    def mode(self) -> AlignmentMode:
        return self.state.mode

    @property
    def current_center(self) -> Point:
        return self.state.current_center

    @property
    def view_size(self) -> Size:
        return self.state.view_size

    def set_mode(self, mode: AlignmentMode):
        if mode == self.state.mode:
            return
        logger.info("Alignment mode changed: %s -> %s", self.state.mode.value, mode.value)
        self.state.mode = mode
        # 모드 전환 후 첫 유효 프레임에서 다시 캡처
        self.state.captured_offset = None

    def set_anchor_joint(self, joint: Joint):
        if joint == self.state.anchor_joint:
            return
        self.state.anchor_joint = joint
        self.state.captured_offset = None

    def set_view_size(self, size: Size):
        size = Size(float(size[0]), float(size[1]))
        if size == self.state.view_size:
            return
        self.state.view_size = size
        self.reset()

    def reset(self):
        """오버레이를 화면 중앙으로 되돌리고 캡처된 오프셋 초기화"""
        logger.debug("Resetting overlay position")
        self.state.captured_offset = None
        self.state.current_center = self.state.view_size.center

    def reset_initial_pose_offset(self):
        self.state.captured_offset = None

    def update(self, live: Skeleton, reference: Skeleton,
               mirrored: bool = False, scale: float = 1.0) -> Point:
        """
        현재 모드의 정책으로 중심 위치 갱신

        관절을 사용할 수 없으면 이전 위치를 그대로 반환합니다.
        """
        if self.state.view_size.is_empty:
            return self.state.current_center

        policy = self._policies[self.state.mode]
        try:
            center = policy.compute(self.state, live, reference, mirrored=mirrored, scale=scale)
        except JointUnavailable as e:
            logger.debug("Holding overlay position: %s", e)
            return self.state.current_center

        self.state.current_center = center
        return center
