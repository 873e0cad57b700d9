"""
Reference pose repository.

운동 이름별로 기준 이미지에서 검출한 스켈레톤을 한 번만 만들어 보관합니다.
실패한 로딩은 캐시하지 않으므로 다음 선택 시 다시 시도할 수 있습니다.
"""

import logging
import threading
from typing import Dict, List, Optional, Protocol

from .detector import PoseDetector
from .errors import ImageNotFound, NoPoseDetected
from .models import Orientation, PixelBuffer, ReferencePose, Size


logger = logging.getLogger(__name__)


class ImageProvider(Protocol):
    """이름으로 기준 이미지를 찾아 픽셀 버퍼로 변환"""

    def load_image(self, name: str) -> Optional[object]:
        ...

    def to_pixel_buffer(self, image) -> Optional[PixelBuffer]:
        ...


class ReferencePoseRepository:
    """기준 포즈 캐시 (추가만 가능, 수정/삭제 없음)"""

    def __init__(self):
        self._entries: Dict[str, ReferencePose] = {}
        # 엔트리 테이블 보호용. 검출이 진행 중이어도 get()은 막히지 않음
        self._lock = threading.Lock()
        # 같은 키에 대해 검출이 두 번 실행되지 않도록 로딩을 직렬화
        self._load_lock = threading.Lock()

    def get(self, name: str) -> Optional[ReferencePose]:
        with self._lock:
            return self._entries.get(name)

    def load(self, name: str, image_provider: ImageProvider, detector: PoseDetector) -> ReferencePose:
        """
        캐시에 없으면 이미지 로드 -> 픽셀 버퍼 변환 -> 포즈 검출 후 저장

        Raises:
            ImageNotFound: 이미지가 없거나 변환 실패
            NoPoseDetected: 포즈 검출 실패
        """
        cached = self.get(name)
        if cached is not None:
            return cached

        with self._load_lock:
            cached = self.get(name)
            if cached is not None:
                return cached

            image = image_provider.load_image(name)
            if image is None:
                logger.error("Failed to load reference image '%s'", name)
                raise ImageNotFound(name, f"reference image '{name}' not found")

            buffer = image_provider.to_pixel_buffer(image)
            if buffer is None:
                logger.error("Failed to convert reference image '%s' to a pixel buffer", name)
                raise ImageNotFound(name, f"reference image '{name}' could not be converted")

            skeleton = detector.detect(buffer, Orientation.UP)
            if skeleton is None or not skeleton.valid_joints():
                logger.error("Failed to detect a pose in reference image '%s'", name)
                raise NoPoseDetected(name, f"no pose detected in reference image '{name}'")

            entry = ReferencePose(
                name=name,
                source_image=image,
                skeleton=skeleton,
                image_size=Size(buffer.width, buffer.height),
            )
            with self._lock:
                self._entries[name] = entry

        logger.debug("Loaded reference pose '%s' (%d joints)", name, len(skeleton.valid_joints()))
        return entry

    def names(self) -> List[str]:
        with self._lock:
            return list(self._entries)

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
