"""
OverlayCanvas - live frame + reference pose overlay widget.
"""

from typing import Optional

from PySide6.QtWidgets import QWidget
from PySide6.QtCore import Qt, Signal, QPointF
from PySide6.QtGui import QPainter, QColor, QPen, QBrush, QFont, QImage, QLinearGradient

from .models import Rgb, Size
from .overlay import OverlayPlacement, OverlayPrimitives, OverlayStyle, build_overlay
from .session import FrameResult


def to_qcolor(color: Rgb, alpha: Optional[int] = None) -> QColor:
    r, g, b, a = color.to_bytes()
    return QColor(r, g, b, a if alpha is None else alpha)


class OverlayCanvas(QWidget):
    """라이브 프레임 위에 기준 포즈와 라이브 포즈를 그리는 캔버스"""

    # 시그널: 캔버스 크기 변경 시 발생
    view_resized = Signal(int, int)
    # 시그널: 오버레이 드래그 (직전 위치로부터의 이동량)
    overlay_dragged = Signal(float, float)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.frame_image: Optional[QImage] = None
        self.result: Optional[FrameResult] = None
        self.scale: float = 1.0
        self.mirrored: bool = False

        self.show_reference: bool = True
        self.show_live: bool = True
        self.reference_opacity: int = 160

        self.reference_style = OverlayStyle.reference()
        self.live_style = OverlayStyle.live()
        self._drag_origin: Optional[QPointF] = None

        self.setMinimumSize(640, 480)
        self.setStyleSheet("background-color: #1a1a2e;")

    @property
    def view_size(self) -> Size:
        return Size(self.width(), self.height())

    def set_frame(self, result: Optional[FrameResult], image: Optional[QImage] = None):
        """프레임 결과 설정"""
        self.result = result
        if image is not None:
            self.frame_image = image
        self.update()

    def set_overlay_transform(self, scale: float, mirrored: bool):
        self.scale = scale
        self.mirrored = mirrored
        self.update()

    def set_show_reference(self, show: bool):
        self.show_reference = show
        self.update()

    def set_show_live(self, show: bool):
        self.show_live = show
        self.update()

    def set_reference_opacity(self, opacity: int):
        self.reference_opacity = opacity
        self.update()

    def clear(self):
        self.result = None
        self.frame_image = None
        self.update()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.view_resized.emit(self.width(), self.height())

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self._drag_origin = event.position()

    def mouseMoveEvent(self, event):
        """드래그 중 이동량 전달 (잠금 여부는 세션이 판단)"""
        if self._drag_origin is None:
            return
        position = event.position()
        delta = position - self._drag_origin
        self._drag_origin = position
        self.overlay_dragged.emit(delta.x(), delta.y())

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self._drag_origin = None

    def paintEvent(self, event):
        """캔버스 렌더링"""
        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing)
            painter.fillRect(self.rect(), QColor("#1a1a2e"))

            if self.frame_image is not None and not self.frame_image.isNull():
                painter.drawImage(self.rect(), self.frame_image)

            if self.result is None:
                painter.setPen(QColor("#ffffff"))
                painter.setFont(QFont("Segoe UI", 14))
                painter.drawText(self.rect(), Qt.AlignmentFlag.AlignCenter,
                                 "프레임 폴더를 불러와주세요")
                return

            size = self.view_size
            if self.show_reference and self.result.reference is not None:
                placement = OverlayPlacement(
                    center=self.result.center, size=size,
                    scale=self.scale, mirrored=self.mirrored,
                )
                primitives = build_overlay(self.result.reference.skeleton, placement, self.reference_style)
                self._draw_primitives(painter, primitives, self.reference_opacity)

            if self.show_live:
                limb_colors = self.result.score.limb_colors if self.result.score is not None else None
                primitives = build_overlay(
                    self.result.live, OverlayPlacement.full_view(size), self.live_style, limb_colors
                )
                self._draw_primitives(painter, primitives, 255)
        finally:
            painter.end()

    def _draw_primitives(self, painter: QPainter, primitives: OverlayPrimitives, alpha: int):
        """선(그라데이션)과 관절 마커 그리기"""
        for limb in primitives.limbs:
            start = QPointF(limb.start.x, limb.start.y)
            end = QPointF(limb.end.x, limb.end.y)

            gradient = QLinearGradient(start, end)
            gradient.setColorAt(0.0, to_qcolor(limb.start_color, alpha))
            gradient.setColorAt(1.0, to_qcolor(limb.end_color, alpha))

            pen = QPen(QBrush(gradient), limb.width)
            pen.setCapStyle(Qt.PenCapStyle.RoundCap)
            painter.setPen(pen)
            painter.drawLine(start, end)

        painter.setPen(Qt.PenStyle.NoPen)
        for marker in primitives.markers:
            painter.setBrush(QBrush(to_qcolor(marker.color, alpha)))
            painter.drawEllipse(QPointF(marker.center.x, marker.center.y), marker.radius, marker.radius)
