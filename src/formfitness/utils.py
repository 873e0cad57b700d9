"""
Coordinate helpers shared by alignment, scoring and rendering.
"""

from typing import Optional, Union

from .models import Joint, JointPoint, Point, Size
from .constants import JOINT_CLASSES


def to_pixel(point: Union[JointPoint, Point], size: Size) -> Point:
    """정규화 좌표(좌하단 원점) -> 화면 좌표(좌상단 원점)"""
    return Point(point.x * size.width, (1 - point.y) * size.height)


def to_normalized(pixel: Point, size: Size) -> Point:
    """to_pixel의 역변환"""
    if size.width == 0 or size.height == 0:
        raise ValueError(f"cannot normalize against empty size {size}")
    return Point(pixel.x / size.width, 1 - pixel.y / size.height)


def calc_max_image_scaling(view_size: Size, image_size: Size) -> float:
    """이미지가 화면을 넘지 않도록 하는 최대 배율 (비율 유지)"""
    if image_size.width <= 0 or image_size.height <= 0:
        return 1.0
    scale_width = view_size.width / image_size.width
    scale_height = view_size.height / image_size.height
    return min(scale_width, scale_height)


def get_joint_class(joint: Joint) -> Optional[str]:
    """관절이 속한 마커 분류 (head/hand/foot) 반환"""
    for joint_class, joints in JOINT_CLASSES.items():
        if joint in joints:
            return joint_class
    return None
