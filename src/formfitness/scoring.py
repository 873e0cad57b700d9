"""
Match scoring between a live skeleton and a reference skeleton.

관절별 일치율(0~1)을 계산하고 빨강 -> 노랑 -> 초록 색상으로 변환합니다.
오버레이가 화면 중앙에서 이동한 만큼을 보정하므로 anchor 추적 중에도 점수가 유지됩니다.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Tuple

import numpy as np

from .constants import LIMB_CONNECTIONS, MAX_MATCH_DISTANCE
from .models import Joint, Point, Rgb, Size, Skeleton


RED = Rgb(1.0, 0.0, 0.0)


@dataclass
class PoseScore:
    """한 프레임의 점수 결과"""
    joint_scores: Dict[Joint, float] = field(default_factory=dict)
    joint_colors: Dict[Joint, Rgb] = field(default_factory=dict)
    limb_colors: Dict[Tuple[Joint, Joint], Tuple[Rgb, Rgb]] = field(default_factory=dict)

    @property
    def overall(self) -> float:
        if not self.joint_scores:
            return 0.0
        return float(np.mean(list(self.joint_scores.values())))

    def color(self, joint: Joint) -> Rgb:
        return self.joint_colors.get(joint, RED)

    def gradient(self, joint_a: Joint, joint_b: Joint) -> Tuple[Rgb, Rgb]:
        return self.limb_colors.get((joint_a, joint_b), (self.color(joint_a), self.color(joint_b)))


def match_percentages(
    live: Skeleton,
    reference: Skeleton,
    center: Point,
    view_size: Size,
    joints: Optional[Iterable[Joint]] = None,
    max_distance: float = MAX_MATCH_DISTANCE,
) -> Dict[Joint, float]:
    """관절별 일치율 계산 (한쪽이라도 없으면 0)"""
    joints = list(joints) if joints is not None else list(Joint)
    if not joints:
        return {}

    live_data = live.as_array(joints)
    ref_data = reference.as_array(joints)
    valid = (live_data[:, 2] > 0) & (ref_data[:, 2] > 0)

    screen_center = view_size.center
    if view_size.is_empty:
        shift_x = shift_y = 0.0
    else:
        # 오버레이가 화면 중앙에서 이동한 양 (정규화)
        shift_x = (screen_center.x - center.x) / view_size.width
        shift_y = (screen_center.y - center.y) / view_size.height

    dx = live_data[:, 0] - ref_data[:, 0] + shift_x
    dy = live_data[:, 1] - ref_data[:, 1] - shift_y
    distance = np.hypot(dx, dy)

    scores = np.zeros(len(joints))
    scores[valid] = np.clip(1.0 - distance[valid] / max_distance, 0.0, 1.0)

    return {joint: float(score) for joint, score in zip(joints, scores)}


def match_percentage(
    joint: Joint,
    live: Skeleton,
    reference: Skeleton,
    center: Point,
    view_size: Size,
) -> float:
    return match_percentages(live, reference, center, view_size, joints=(joint,))[joint]


def color_for_match(percentage: float) -> Rgb:
    """0 -> 빨강, 0.5 -> 노랑, 1 -> 초록 (두 구간 선형)"""
    if not np.isfinite(percentage):
        percentage = 0.0
    percentage = min(max(percentage, 0.0), 1.0)
    if percentage <= 0.5:
        return Rgb(1.0, 2.0 * percentage, 0.0)
    return Rgb(2.0 - 2.0 * percentage, 1.0, 0.0)


def limb_gradient(joint_a: Joint, joint_b: Joint, scores: Dict[Joint, float]) -> Tuple[Rgb, Rgb]:
    """limb 양 끝 관절의 색상 쌍 (선을 따라 그라데이션)"""
    return (color_for_match(scores.get(joint_a, 0.0)),
            color_for_match(scores.get(joint_b, 0.0)))


def score_frame(
    live: Skeleton,
    reference: Skeleton,
    center: Point,
    view_size: Size,
) -> PoseScore:
    """15개 관절과 14개 limb 전체 점수 계산"""
    scores = match_percentages(live, reference, center, view_size)
    colors = {joint: color_for_match(score) for joint, score in scores.items()}
    limbs = {(a, b): limb_gradient(a, b, scores) for a, b in LIMB_CONNECTIONS}
    return PoseScore(joint_scores=scores, joint_colors=colors, limb_colors=limbs)
