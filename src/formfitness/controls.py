"""
Control widgets - PlaybackBar and ControlPanel.
"""

from typing import List, Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout,
    QSlider, QLabel, QPushButton, QSpinBox,
    QGroupBox, QComboBox, QCheckBox, QScrollArea
)
from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QPixmap

from .exercises import Exercise
from .models import Joint, Size
from .utils import calc_max_image_scaling


ACCENT = "#4ECDC4"

GROUP_STYLE = """
    QGroupBox {
        color: #e0e0e0;
        font-size: 13px;
        font-weight: bold;
        border: 1px solid #3d3d5c;
        border-radius: 8px;
        margin-top: 10px;
        padding-top: 10px;
    }
    QGroupBox::title {
        subcontrol-origin: margin;
        left: 10px;
        padding: 0 5px;
    }
"""

SLIDER_STYLE = """
    QSlider::groove:horizontal {
        border: none;
        height: 6px;
        background: #2d2d44;
        border-radius: 3px;
    }
    QSlider::handle:horizontal {
        background: #4ECDC4;
        border: none;
        width: 16px;
        height: 16px;
        margin: -5px 0;
        border-radius: 8px;
    }
    QSlider::sub-page:horizontal {
        background: #4ECDC4;
        border-radius: 3px;
    }
"""

BUTTON_STYLE = """
    QPushButton {
        background-color: #4ECDC4;
        color: #1a1a2e;
        border: none;
        padding: 8px 12px;
        font-size: 12px;
        font-weight: bold;
        border-radius: 6px;
    }
    QPushButton:hover {
        background-color: #5FE6DD;
    }
    QPushButton:pressed {
        background-color: #3DBDB5;
    }
"""

COMBO_STYLE = """
    QComboBox {
        background-color: #2d2d44;
        color: #e0e0e0;
        border: 1px solid #3d3d5c;
        border-radius: 6px;
        padding: 6px 10px;
    }
    QComboBox QAbstractItemView {
        background-color: #2d2d44;
        color: #e0e0e0;
        selection-background-color: #4ECDC4;
        selection-color: #1a1a2e;
    }
"""

CHECKBOX_STYLE = """
    QCheckBox {
        color: #e0e0e0;
        spacing: 8px;
    }
    QCheckBox::indicator:checked {
        background-color: #4ECDC4;
        border-color: #4ECDC4;
    }
"""


class PlaybackBar(QWidget):
    """하단 재생 컨트롤 바"""

    frame_changed = Signal(int)
    playback_toggled = Signal(bool)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.total_frames = 0
        self.is_playing = False
        self._setup_ui()

    def _setup_ui(self):
        self.setFixedHeight(60)
        self.setObjectName("playbackBar")
        self.setStyleSheet("#playbackBar { background-color: #16213e; border-top: 1px solid #3d3d5c; }")

        layout = QHBoxLayout(self)
        layout.setContentsMargins(15, 8, 15, 8)
        layout.setSpacing(15)

        self.play_btn = QPushButton("▶")
        self.play_btn.setFixedSize(40, 40)
        self.play_btn.clicked.connect(self.toggle_playback)
        self.play_btn.setStyleSheet(BUTTON_STYLE + "QPushButton { border-radius: 20px; padding: 0; }")
        layout.addWidget(self.play_btn)

        self.frame_slider = QSlider(Qt.Orientation.Horizontal)
        self.frame_slider.setRange(0, 0)
        self.frame_slider.valueChanged.connect(self._on_slider_changed)
        self.frame_slider.setStyleSheet(SLIDER_STYLE)
        layout.addWidget(self.frame_slider, 1)

        self.frame_label = QLabel("0 / 0")
        self.frame_label.setStyleSheet("color: #e0e0e0; font-size: 13px; min-width: 100px;")
        layout.addWidget(self.frame_label)

        fps_label = QLabel("FPS:")
        fps_label.setStyleSheet("color: #a0a0a0;")
        layout.addWidget(fps_label)

        self.fps_spin = QSpinBox()
        self.fps_spin.setRange(1, 60)
        self.fps_spin.setValue(30)
        self.fps_spin.setButtonSymbols(QSpinBox.ButtonSymbols.NoButtons)
        layout.addWidget(self.fps_spin)

    def set_total_frames(self, total: int):
        self.total_frames = total
        self.frame_slider.setMaximum(max(0, total - 1))
        self._update_frame_label()

    def set_current_frame(self, frame: int):
        self.frame_slider.blockSignals(True)
        self.frame_slider.setValue(frame)
        self.frame_slider.blockSignals(False)
        self._update_frame_label()

    def _update_frame_label(self):
        self.frame_label.setText(f"{self.frame_slider.value()} / {max(0, self.total_frames - 1)}")

    def _on_slider_changed(self, value):
        self._update_frame_label()
        self.frame_changed.emit(value)

    def toggle_playback(self):
        self.is_playing = not self.is_playing
        self.play_btn.setText("■" if self.is_playing else "▶")
        self.playback_toggled.emit(self.is_playing)

    def get_fps(self) -> int:
        return self.fps_spin.value()

    def stop_playback(self):
        self.is_playing = False
        self.play_btn.setText("▶")


class ControlPanel(QWidget):
    """운동 선택 및 오버레이 조작 패널"""

    exercise_changed = Signal(str)
    favorite_toggled = Signal(str)
    following_changed = Signal(bool)
    lock_toggled = Signal()
    mirror_toggled = Signal()
    scale_changed = Signal(float)
    reset_requested = Signal()
    reset_offset_requested = Signal()
    anchor_joint_changed = Signal(str)
    show_reference_changed = Signal(bool)
    show_live_changed = Signal(bool)
    reference_opacity_changed = Signal(int)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._exercises: List[Exercise] = []
        self._setup_ui()

    def _setup_ui(self):
        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)

        scroll_area = QScrollArea()
        scroll_area.setWidgetResizable(True)
        scroll_area.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        scroll_area.setStyleSheet("QScrollArea { border: none; background-color: transparent; }")

        scroll_content = QWidget()
        layout = QVBoxLayout(scroll_content)
        layout.setSpacing(12)
        layout.setContentsMargins(5, 5, 5, 5)

        # === 운동 선택 ===
        exercise_group = QGroupBox("운동")
        exercise_group.setStyleSheet(GROUP_STYLE)
        exercise_layout = QVBoxLayout(exercise_group)

        self.exercise_combo = QComboBox()
        self.exercise_combo.setStyleSheet(COMBO_STYLE)
        self.exercise_combo.currentIndexChanged.connect(self._on_exercise_index_changed)
        exercise_layout.addWidget(self.exercise_combo)

        self.favorite_cb = QCheckBox("즐겨찾기")
        self.favorite_cb.setStyleSheet(CHECKBOX_STYLE)
        self.favorite_cb.clicked.connect(self._on_favorite_clicked)
        exercise_layout.addWidget(self.favorite_cb)

        self.preview_label = QLabel()
        self.preview_label.setFixedSize(260, 180)
        self.preview_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.preview_label.setStyleSheet("background-color: #2d2d44; border-radius: 6px; color: #a0a0a0;")
        self.preview_label.setText("기준 포즈 없음")
        exercise_layout.addWidget(self.preview_label)

        layout.addWidget(exercise_group)

        # === 오버레이 ===
        overlay_group = QGroupBox("오버레이")
        overlay_group.setStyleSheet(GROUP_STYLE)
        overlay_layout = QVBoxLayout(overlay_group)

        self.follow_cb = QCheckBox("자동 추적")
        self.follow_cb.setStyleSheet(CHECKBOX_STYLE)
        self.follow_cb.toggled.connect(lambda checked: self.following_changed.emit(checked))
        overlay_layout.addWidget(self.follow_cb)

        self.lock_cb = QCheckBox("잠금")
        self.lock_cb.setChecked(True)
        self.lock_cb.setStyleSheet(CHECKBOX_STYLE)
        self.lock_cb.clicked.connect(lambda _: self.lock_toggled.emit())
        overlay_layout.addWidget(self.lock_cb)

        self.mirror_cb = QCheckBox("좌우 반전")
        self.mirror_cb.setStyleSheet(CHECKBOX_STYLE)
        self.mirror_cb.clicked.connect(lambda _: self.mirror_toggled.emit())
        overlay_layout.addWidget(self.mirror_cb)

        anchor_layout = QHBoxLayout()
        anchor_label = QLabel("기준 관절:")
        anchor_label.setStyleSheet("color: #e0e0e0;")
        self.anchor_combo = QComboBox()
        self.anchor_combo.setStyleSheet(COMBO_STYLE)
        self.anchor_combo.addItems([joint.value for joint in Joint])
        self.anchor_combo.setCurrentText(Joint.RIGHT_WRIST.value)
        self.anchor_combo.currentTextChanged.connect(lambda t: self.anchor_joint_changed.emit(t))
        anchor_layout.addWidget(anchor_label)
        anchor_layout.addWidget(self.anchor_combo)
        overlay_layout.addLayout(anchor_layout)

        scale_layout = QHBoxLayout()
        scale_label = QLabel("배율:")
        scale_label.setStyleSheet("color: #e0e0e0;")
        self.scale_slider = QSlider(Qt.Orientation.Horizontal)
        self.scale_slider.setRange(25, 300)
        self.scale_slider.setValue(100)
        self.scale_slider.setStyleSheet(SLIDER_STYLE)
        self.scale_slider.valueChanged.connect(self._on_scale_changed)
        self.scale_value_label = QLabel("1.00")
        self.scale_value_label.setStyleSheet(f"color: {ACCENT}; font-weight: bold; min-width: 40px;")
        scale_layout.addWidget(scale_label)
        scale_layout.addWidget(self.scale_slider)
        scale_layout.addWidget(self.scale_value_label)
        overlay_layout.addLayout(scale_layout)

        btn_layout = QHBoxLayout()
        self.reset_btn = QPushButton("위치 초기화")
        self.reset_btn.setStyleSheet(BUTTON_STYLE)
        self.reset_btn.clicked.connect(lambda: self.reset_requested.emit())
        self.reset_offset_btn = QPushButton("오프셋 재설정")
        self.reset_offset_btn.setStyleSheet(BUTTON_STYLE)
        self.reset_offset_btn.clicked.connect(lambda: self.reset_offset_requested.emit())
        btn_layout.addWidget(self.reset_btn)
        btn_layout.addWidget(self.reset_offset_btn)
        overlay_layout.addLayout(btn_layout)

        layout.addWidget(overlay_group)

        # === 표시 옵션 ===
        display_group = QGroupBox("표시 옵션")
        display_group.setStyleSheet(GROUP_STYLE)
        display_layout = QVBoxLayout(display_group)

        self.show_reference_cb = QCheckBox("기준 포즈 표시")
        self.show_reference_cb.setChecked(True)
        self.show_reference_cb.setStyleSheet(CHECKBOX_STYLE)
        self.show_reference_cb.toggled.connect(lambda checked: self.show_reference_changed.emit(checked))
        display_layout.addWidget(self.show_reference_cb)

        self.show_live_cb = QCheckBox("라이브 포즈 표시")
        self.show_live_cb.setChecked(True)
        self.show_live_cb.setStyleSheet(CHECKBOX_STYLE)
        self.show_live_cb.toggled.connect(lambda checked: self.show_live_changed.emit(checked))
        display_layout.addWidget(self.show_live_cb)

        opacity_layout = QHBoxLayout()
        opacity_label = QLabel("투명도:")
        opacity_label.setStyleSheet("color: #a0a0a0; font-size: 11px;")
        self.opacity_slider = QSlider(Qt.Orientation.Horizontal)
        self.opacity_slider.setRange(30, 255)
        self.opacity_slider.setValue(160)
        self.opacity_slider.setStyleSheet(SLIDER_STYLE)
        self.opacity_slider.valueChanged.connect(lambda v: self.reference_opacity_changed.emit(v))
        opacity_layout.addWidget(opacity_label)
        opacity_layout.addWidget(self.opacity_slider)
        display_layout.addLayout(opacity_layout)

        layout.addWidget(display_group)

        # === 점수 ===
        score_group = QGroupBox("일치율")
        score_group.setStyleSheet(GROUP_STYLE)
        score_layout = QVBoxLayout(score_group)
        self.score_label = QLabel("-")
        self.score_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.score_label.setStyleSheet(f"color: {ACCENT}; font-size: 28px; font-weight: bold;")
        score_layout.addWidget(self.score_label)
        layout.addWidget(score_group)

        layout.addStretch()

        scroll_area.setWidget(scroll_content)
        main_layout.addWidget(scroll_area)

    def set_exercises(self, exercises: List[Exercise], current: Optional[str] = None):
        """운동 목록 설정 (즐겨찾기는 ★ 표시)"""
        self._exercises = list(exercises)
        self.exercise_combo.blockSignals(True)
        self.exercise_combo.clear()
        for exercise in self._exercises:
            prefix = "★ " if exercise.is_favorite else ""
            self.exercise_combo.addItem(prefix + exercise.name, exercise.image_name)
        if current is not None:
            idx = self.exercise_combo.findData(current)
            if idx >= 0:
                self.exercise_combo.setCurrentIndex(idx)
        self.exercise_combo.blockSignals(False)
        self._update_favorite_checkbox()

    def current_exercise(self) -> Optional[Exercise]:
        idx = self.exercise_combo.currentIndex()
        if 0 <= idx < len(self._exercises):
            return self._exercises[idx]
        return None

    def _on_exercise_index_changed(self, idx: int):
        self._update_favorite_checkbox()
        exercise = self.current_exercise()
        if exercise is not None:
            self.exercise_changed.emit(exercise.image_name)

    def _update_favorite_checkbox(self):
        exercise = self.current_exercise()
        self.favorite_cb.setChecked(bool(exercise and exercise.is_favorite))

    def _on_favorite_clicked(self, _checked: bool):
        exercise = self.current_exercise()
        if exercise is not None:
            self.favorite_toggled.emit(exercise.image_name)

    def _on_scale_changed(self, value: int):
        scale = value / 100.0
        self.scale_value_label.setText(f"{scale:.2f}")
        self.scale_changed.emit(scale)

    def set_overlay_state(self, locked: bool, following: bool, mirrored: bool, scale: float):
        """세션 상태를 위젯에 반영 (시그널 없이)"""
        for widget, value in ((self.lock_cb, locked), (self.follow_cb, following), (self.mirror_cb, mirrored)):
            widget.blockSignals(True)
            widget.setChecked(value)
            widget.blockSignals(False)
        self.scale_slider.blockSignals(True)
        self.scale_slider.setValue(int(round(scale * 100)))
        self.scale_slider.blockSignals(False)
        self.scale_value_label.setText(f"{scale:.2f}")
        self.scale_slider.setEnabled(not locked)

    def set_preview(self, pixmap: Optional[QPixmap]):
        """기준 이미지 미리보기 (비율 유지, 넘치지 않게)"""
        if pixmap is None or pixmap.isNull():
            self.preview_label.setPixmap(QPixmap())
            self.preview_label.setText("기준 포즈 없음")
            return
        box = Size(self.preview_label.width(), self.preview_label.height())
        scale = calc_max_image_scaling(box, Size(pixmap.width(), pixmap.height()))
        self.preview_label.setPixmap(pixmap.scaled(
            int(pixmap.width() * scale), int(pixmap.height() * scale),
            Qt.AspectRatioMode.KeepAspectRatio, Qt.TransformationMode.SmoothTransformation,
        ))

    def set_score(self, score: Optional[float]):
        self.score_label.setText("-" if score is None else f"{score * 100:.0f}%")
