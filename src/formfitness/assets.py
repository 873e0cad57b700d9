"""
Image loading for reference poses and frames (PySide6 QImage).
"""

import logging
from pathlib import Path
from typing import Optional

import numpy as np
from PySide6.QtGui import QImage

from .constants import IMAGE_EXTENSIONS, KEYPOINT_FILE_SUFFIX
from .models import PixelBuffer


logger = logging.getLogger(__name__)


def find_image(folder: Path, name: str) -> Optional[Path]:
    """폴더에서 이름이 일치하는 이미지 파일 찾기"""
    for ext in IMAGE_EXTENSIONS:
        candidate = folder / f"{name}{ext}"
        if candidate.is_file():
            return candidate
    return None


def qimage_to_pixel_buffer(image: QImage, source: Optional[Path] = None) -> Optional[PixelBuffer]:
    """QImage -> 32비트 ARGB 픽셀 버퍼 (채널 순서 A, R, G, B)"""
    if image.isNull():
        return None

    converted = image.convertToFormat(QImage.Format.Format_ARGB32)
    if converted.isNull():
        return None

    width, height = converted.width(), converted.height()
    stride = converted.bytesPerLine()
    raw = np.frombuffer(converted.constBits(), dtype=np.uint8, count=stride * height)
    rows = raw.reshape(height, stride)[:, :width * 4].reshape(height, width, 4)

    # Format_ARGB32는 0xAARRGGBB 정수이므로 리틀엔디언 메모리에서는 B, G, R, A 순서
    if np.little_endian:
        argb = rows[:, :, [3, 2, 1, 0]]
    else:
        argb = rows.copy()
    return PixelBuffer(np.ascontiguousarray(argb), source)


def pixel_buffer_to_qimage(buffer: PixelBuffer) -> QImage:
    """ARGB 픽셀 버퍼 -> QImage (표시용 복사본)"""
    if np.little_endian:
        data = np.ascontiguousarray(buffer.pixels[:, :, [3, 2, 1, 0]])
    else:
        data = np.ascontiguousarray(buffer.pixels)
    image = QImage(data.data, buffer.width, buffer.height, buffer.width * 4, QImage.Format.Format_ARGB32)
    return image.copy()


class LoadedImage:
    """로드된 이미지와 원본 경로"""

    def __init__(self, image: QImage, path: Path):
        self.image = image
        self.path = path


class QtImageProvider:
    """에셋 폴더에서 이름으로 이미지를 로드"""

    def __init__(self, asset_dir):
        self.asset_dir = Path(asset_dir)

    def load_image(self, name: str) -> Optional[LoadedImage]:
        path = find_image(self.asset_dir, name)
        if path is None:
            logger.debug("No image named '%s' in %s", name, self.asset_dir)
            return None

        image = QImage(str(path))
        if image.isNull():
            logger.warning("Failed to decode image %s", path)
            return None
        return LoadedImage(image, path)

    def to_pixel_buffer(self, image: LoadedImage) -> Optional[PixelBuffer]:
        return qimage_to_pixel_buffer(image.image, image.path)

    def load_frame(self, keypoint_file: Path, fallback_size=(1280, 720)) -> PixelBuffer:
        """
        프레임 로드. `<name>_keypoints.json` 옆에 이미지가 없으면 빈 버퍼 사용
        """
        keypoint_file = Path(keypoint_file)
        name = keypoint_file.name
        stem = name[:-len(KEYPOINT_FILE_SUFFIX)] if name.endswith(KEYPOINT_FILE_SUFFIX) else keypoint_file.stem
        path = find_image(keypoint_file.parent, stem)
        if path is not None:
            buffer = qimage_to_pixel_buffer(QImage(str(path)), path)
            if buffer is not None:
                return buffer
        width, height = fallback_size
        return PixelBuffer.blank(width, height, keypoint_file)
