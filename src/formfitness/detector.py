"""
Pose detector collaborators.

OpenPoseJsonDetector는 OpenPose가 이미지 옆에 저장하는 `<image>_keypoints.json`
(BODY_25)을 읽어 스켈레톤으로 변환합니다. BODY_25의 앞 15개 키포인트가 그대로 15개 관절에 대응합니다.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Protocol

from .constants import BODY_25_JOINTS, KEYPOINT_FILE_SUFFIX
from .models import JointPoint, Orientation, PixelBuffer, Size, Skeleton


logger = logging.getLogger(__name__)


class PoseDetector(Protocol):
    def detect(self, buffer: PixelBuffer,
               orientation: Orientation = Orientation.UP) -> Optional[Skeleton]:
        ...


def apply_orientation(x: float, y: float, orientation: Orientation):
    """정규화 좌표에 이미지 방향 적용"""
    if orientation == Orientation.UP_MIRRORED:
        return 1 - x, y
    if orientation == Orientation.DOWN:
        return 1 - x, 1 - y
    if orientation == Orientation.DOWN_MIRRORED:
        return x, 1 - y
    return x, y


def parse_openpose_people(data: dict, size: Size,
                          orientation: Orientation = Orientation.UP) -> List[Skeleton]:
    """
    OpenPose JSON -> 스켈레톤 목록

    픽셀 좌표(좌상단 원점)를 정규화 좌표(좌하단 원점)로 변환합니다.
    confidence가 0인 키포인트(미검출)는 제외합니다.
    """
    if size.width <= 0 or size.height <= 0:
        raise ValueError(f"invalid image size {size}")

    skeletons = []
    for person_data in data.get('people', []):
        keypoints_raw = person_data.get('pose_keypoints_2d', [])

        points = {}
        for idx, joint in BODY_25_JOINTS.items():
            i = idx * 3
            if i + 2 >= len(keypoints_raw):
                break
            px, py, confidence = keypoints_raw[i], keypoints_raw[i + 1], keypoints_raw[i + 2]
            if confidence <= 0:
                continue
            x, y = apply_orientation(px / size.width, 1 - py / size.height, orientation)
            points[joint] = JointPoint(x=float(x), y=float(y), confidence=float(confidence))

        skeletons.append(Skeleton(points))

    return skeletons


def keypoint_path_for(source: Path) -> Path:
    if source.name.endswith(KEYPOINT_FILE_SUFFIX):
        return source
    return source.with_name(source.stem + KEYPOINT_FILE_SUFFIX)


class OpenPoseJsonDetector:
    """미리 계산된 OpenPose 출력을 읽는 검출기 (내부 캐시 없음)"""

    def __init__(self, person_index: int = 0):
        self.person_index = person_index

    def detect(self, buffer: PixelBuffer,
               orientation: Orientation = Orientation.UP) -> Optional[Skeleton]:
        if buffer.source is None:
            logger.debug("Pose detection failed: pixel buffer has no source path")
            return None

        path = keypoint_path_for(Path(buffer.source))
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.debug("Pose detection failed: %s not found", path)
            return None
        except (OSError, json.JSONDecodeError) as e:
            logger.debug("Pose detection failed for %s: %s", path, e)
            return None

        try:
            people = parse_openpose_people(data, buffer.size, orientation)
        except (AttributeError, TypeError, ValueError) as e:
            # JSON 문법은 맞지만 OpenPose 구조가 아닌 경우
            logger.debug("Pose detection failed: malformed keypoints in %s: %s", path, e)
            return None
        if self.person_index >= len(people):
            logger.debug("Pose detection failed: no person %d in %s", self.person_index, path)
            return None
        return people[self.person_index]
