"""
Data models for pose comparison.
"""

import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, List, Mapping, NamedTuple, Optional

import numpy as np

from .errors import JointUnavailable


# 검출기가 이 값 이하로 보고한 관절은 없는 것으로 취급
CONFIDENCE_THRESHOLD = 0.1


class Joint(Enum):
    """검출기가 반환하는 15개 관절"""
    NOSE = "nose"
    NECK = "neck"
    LEFT_SHOULDER = "left_shoulder"
    RIGHT_SHOULDER = "right_shoulder"
    LEFT_ELBOW = "left_elbow"
    RIGHT_ELBOW = "right_elbow"
    LEFT_WRIST = "left_wrist"
    RIGHT_WRIST = "right_wrist"
    ROOT = "root"
    LEFT_HIP = "left_hip"
    RIGHT_HIP = "right_hip"
    LEFT_KNEE = "left_knee"
    RIGHT_KNEE = "right_knee"
    LEFT_ANKLE = "left_ankle"
    RIGHT_ANKLE = "right_ankle"


class Orientation(Enum):
    """입력 이미지 방향"""
    UP = "up"
    UP_MIRRORED = "up_mirrored"
    DOWN = "down"
    DOWN_MIRRORED = "down_mirrored"


class Point(NamedTuple):
    x: float
    y: float


class Size(NamedTuple):
    width: float
    height: float

    @property
    def center(self) -> Point:
        return Point(self.width / 2, self.height / 2)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True)
class Rgb:
    """0~1 범위의 RGB 색상"""
    red: float
    green: float
    blue: float = 0.0
    alpha: float = 1.0

    def to_bytes(self) -> tuple:
        return tuple(int(round(c * 255)) for c in (self.red, self.green, self.blue, self.alpha))


@dataclass(frozen=True)
class JointPoint:
    """단일 관절 데이터 (정규화 좌표, 원점은 좌하단)"""
    x: float
    y: float
    confidence: float

    @property
    def location(self) -> Point:
        return Point(self.x, self.y)

    @property
    def is_valid(self) -> bool:
        # NaN, inf 좌표는 신뢰도와 상관없이 무효
        if not (math.isfinite(self.x) and math.isfinite(self.y) and math.isfinite(self.confidence)):
            return False
        return self.confidence > CONFIDENCE_THRESHOLD


class Skeleton:
    """한 프레임(또는 이미지)의 관절 집합. 생성 후 변경 불가"""

    __slots__ = ("_points",)

    def __init__(self, points: Optional[Mapping[Joint, JointPoint]] = None):
        self._points = MappingProxyType(dict(points or {}))

    @property
    def points(self) -> Mapping[Joint, JointPoint]:
        return self._points

    def point(self, joint: Joint) -> Optional[JointPoint]:
        """신뢰도 게이트를 통과한 관절만 반환"""
        point = self._points.get(joint)
        if point is None or not point.is_valid:
            return None
        return point

    def require(self, joint: Joint) -> JointPoint:
        point = self.point(joint)
        if point is None:
            raise JointUnavailable(joint)
        return point

    def valid_joints(self) -> List[Joint]:
        return [joint for joint in Joint if self.point(joint) is not None]

    def has_limb(self, joint_a: Joint, joint_b: Joint) -> bool:
        return self.point(joint_a) is not None and self.point(joint_b) is not None

    def as_array(self, joints=None) -> np.ndarray:
        """(N, 3) 배열 [x, y, valid]. 사용할 수 없는 관절은 NaN 좌표"""
        joints = list(joints) if joints is not None else list(Joint)
        data = np.full((len(joints), 3), np.nan)
        for idx, joint in enumerate(joints):
            point = self.point(joint)
            if point is None:
                data[idx, 2] = 0.0
            else:
                data[idx] = (point.x, point.y, 1.0)
        return data

    def __iter__(self) -> Iterator[Joint]:
        return iter(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Skeleton):
            return NotImplemented
        return dict(self._points) == dict(other._points)

    def __repr__(self) -> str:
        return f"Skeleton({len(self.valid_joints())}/{len(Joint)} joints)"


@dataclass(frozen=True)
class PixelBuffer:
    """32비트 ARGB 픽셀 버퍼 (H, W, 4) uint8"""
    pixels: np.ndarray
    source: Optional[Path] = None

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    @classmethod
    def blank(cls, width: int, height: int, source: Optional[Path] = None) -> "PixelBuffer":
        return cls(np.zeros((height, width, 4), dtype=np.uint8), source)


@dataclass(frozen=True)
class ReferencePose:
    """운동별 기준 포즈 (이미지 + 검출된 스켈레톤)"""
    name: str
    source_image: object
    skeleton: Skeleton
    image_size: Size = Size(0, 0)

