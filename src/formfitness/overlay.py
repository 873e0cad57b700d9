"""
Overlay geometry - converts a skeleton into drawable primitives.

Qt에 의존하지 않는 순수 계산 부분이며, canvas.py가 결과를 그대로 그립니다.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .constants import (
    JOINT_CLASSES, JOINT_CLASS_COLORS, JOINT_CLASS_RADIUS, LIMB_CONNECTIONS,
    LIVE_LINE_COLOR, LIVE_LINE_WIDTH, REFERENCE_LINE_COLOR, REFERENCE_LINE_WIDTH,
)
from .models import Joint, JointPoint, Point, Rgb, Size, Skeleton
from .utils import get_joint_class


@dataclass(frozen=True)
class JointStyle:
    radius: float
    color: Rgb


@dataclass
class OverlayStyle:
    """오버레이 스타일 (선 색상/두께, 분류별 마커)"""
    line_color: Rgb
    line_width: float
    joint_styles: Dict[str, JointStyle] = field(default_factory=dict)
    marker_scale: float = 1.0

    @classmethod
    def reference(cls) -> "OverlayStyle":
        return cls(
            line_color=REFERENCE_LINE_COLOR,
            line_width=REFERENCE_LINE_WIDTH,
            joint_styles={
                name: JointStyle(JOINT_CLASS_RADIUS[name], JOINT_CLASS_COLORS[name])
                for name in JOINT_CLASSES
            },
        )

    @classmethod
    def live(cls) -> "OverlayStyle":
        return cls(line_color=LIVE_LINE_COLOR, line_width=LIVE_LINE_WIDTH)


@dataclass(frozen=True)
class OverlayPlacement:
    """정규화 좌표를 화면에 배치하는 방법 (중심, 크기, 배율, 좌우반전)"""
    center: Point
    size: Size
    scale: float = 1.0
    mirrored: bool = False

    @classmethod
    def full_view(cls, size: Size) -> "OverlayPlacement":
        return cls(center=size.center, size=size)

    def map(self, point: JointPoint) -> Point:
        direction = -1.0 if self.mirrored else 1.0
        x = self.center.x + direction * self.scale * (point.x - 0.5) * self.size.width
        y = self.center.y + self.scale * (0.5 - point.y) * self.size.height
        return Point(x, y)


@dataclass(frozen=True)
class LimbSegment:
    joints: Tuple[Joint, Joint]
    start: Point
    end: Point
    start_color: Rgb
    end_color: Rgb
    width: float


@dataclass(frozen=True)
class JointMarker:
    joint: Joint
    joint_class: str
    center: Point
    radius: float
    color: Rgb


@dataclass
class OverlayPrimitives:
    limbs: List[LimbSegment] = field(default_factory=list)
    markers: List[JointMarker] = field(default_factory=list)


def build_overlay(
    skeleton: Skeleton,
    placement: OverlayPlacement,
    style: OverlayStyle,
    limb_colors: Optional[Dict[Tuple[Joint, Joint], Tuple[Rgb, Rgb]]] = None,
) -> OverlayPrimitives:
    """
    스켈레톤에서 그릴 선과 마커 목록 생성

    limb_colors가 주어지면 각 limb를 양 끝 색상의 그라데이션으로 그리고,
    없으면 style.line_color 단색을 사용합니다.
    """
    primitives = OverlayPrimitives()

    for joint_a, joint_b in LIMB_CONNECTIONS:
        if not skeleton.has_limb(joint_a, joint_b):
            continue

        if limb_colors is not None and (joint_a, joint_b) in limb_colors:
            color_a, color_b = limb_colors[(joint_a, joint_b)]
        else:
            color_a = color_b = style.line_color

        primitives.limbs.append(LimbSegment(
            joints=(joint_a, joint_b),
            start=placement.map(skeleton.require(joint_a)),
            end=placement.map(skeleton.require(joint_b)),
            start_color=color_a,
            end_color=color_b,
            width=style.line_width * placement.scale,
        ))

    for joint in skeleton.valid_joints():
        joint_class = get_joint_class(joint)
        joint_style = style.joint_styles.get(joint_class)
        if joint_style is None:
            continue
        primitives.markers.append(JointMarker(
            joint=joint,
            joint_class=joint_class,
            center=placement.map(skeleton.require(joint)),
            radius=joint_style.radius * style.marker_scale * placement.scale,
            color=joint_style.color,
        ))

    return primitives
