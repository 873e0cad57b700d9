"""
Constants for skeleton connectivity, scoring and overlay styling.
"""

from typing import Dict, List, Tuple

from .models import Joint, Rgb, CONFIDENCE_THRESHOLD


# 관절 연결 (라인으로 그려지는 14개 limb)
LIMB_CONNECTIONS: List[Tuple[Joint, Joint]] = [
    (Joint.NOSE, Joint.NECK),
    (Joint.NECK, Joint.LEFT_SHOULDER),
    (Joint.NECK, Joint.RIGHT_SHOULDER),
    (Joint.LEFT_SHOULDER, Joint.LEFT_ELBOW),
    (Joint.LEFT_ELBOW, Joint.LEFT_WRIST),
    (Joint.RIGHT_SHOULDER, Joint.RIGHT_ELBOW),
    (Joint.RIGHT_ELBOW, Joint.RIGHT_WRIST),
    (Joint.NECK, Joint.ROOT),
    (Joint.ROOT, Joint.LEFT_HIP),
    (Joint.ROOT, Joint.RIGHT_HIP),
    (Joint.LEFT_HIP, Joint.LEFT_KNEE),
    (Joint.LEFT_KNEE, Joint.LEFT_ANKLE),
    (Joint.RIGHT_HIP, Joint.RIGHT_KNEE),
    (Joint.RIGHT_KNEE, Joint.RIGHT_ANKLE),
]

# 마커를 그리는 관절 분류
JOINT_CLASSES: Dict[str, List[Joint]] = {
    'head': [Joint.NOSE],
    'hand': [Joint.LEFT_WRIST, Joint.RIGHT_WRIST],
    'foot': [Joint.LEFT_ANKLE, Joint.RIGHT_ANKLE],
}

# 분류별 마커 (반지름, 색상)
JOINT_CLASS_RADIUS = {
    'head': 40.0,
    'hand': 20.0,
    'foot': 20.0,
}

JOINT_CLASS_COLORS = {
    'head': Rgb(3 / 255, 240 / 255, 252 / 255),
    'hand': Rgb(3 / 255, 180 / 255, 252 / 255),
    'foot': Rgb(3 / 255, 140 / 255, 252 / 255),
}

REFERENCE_LINE_COLOR = Rgb(0.0, 0.0, 1.0)
REFERENCE_LINE_WIDTH = 10.0
LIVE_LINE_COLOR = Rgb(0.0, 1.0, 0.0)
LIVE_LINE_WIDTH = 3.0

# 완전 불일치로 보는 정규화 거리 (프레임 폭의 절반)
MAX_MATCH_DISTANCE = 0.5

# Policy B: 정규화 이동량 -> 화면 이동량 배율
MOVEMENT_SCALE_FACTOR = 0.5

# Policy A: x 오프셋 부호. -1 이면 오버레이의 anchor 관절이 라이브 관절 위에 놓임
# (미러링된 오버레이는 부호가 반전됨)
ANCHOR_OFFSET_X_SIGN = -1.0

DEFAULT_ANCHOR_JOINT = Joint.RIGHT_WRIST

# OpenPose BODY_25 인덱스 -> 관절 (앞의 15개가 그대로 대응)
BODY_25_JOINTS: Dict[int, Joint] = {
    0: Joint.NOSE,
    1: Joint.NECK,
    2: Joint.RIGHT_SHOULDER,
    3: Joint.RIGHT_ELBOW,
    4: Joint.RIGHT_WRIST,
    5: Joint.LEFT_SHOULDER,
    6: Joint.LEFT_ELBOW,
    7: Joint.LEFT_WRIST,
    8: Joint.ROOT,
    9: Joint.RIGHT_HIP,
    10: Joint.RIGHT_KNEE,
    11: Joint.RIGHT_ANKLE,
    12: Joint.LEFT_HIP,
    13: Joint.LEFT_KNEE,
    14: Joint.LEFT_ANKLE,
}

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg")
KEYPOINT_FILE_SUFFIX = "_keypoints.json"
