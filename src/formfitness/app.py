"""
FormFitness - Main Application Window
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PySide6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QHBoxLayout, QVBoxLayout,
    QFileDialog, QStatusBar, QSplitter
)
from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QKeyEvent, QPixmap

from .assets import QtImageProvider, pixel_buffer_to_qimage
from .canvas import OverlayCanvas
from .constants import KEYPOINT_FILE_SUFFIX
from .controls import PlaybackBar, ControlPanel
from .detector import OpenPoseJsonDetector
from .exercises import ExerciseStore
from .models import Joint
from .repository import ReferencePoseRepository
from .session import CoachingSession


logger = logging.getLogger(__name__)


class FormFitnessWindow(QMainWindow):
    """메인 윈도우"""

    def __init__(self, asset_dir: Optional[str] = None):
        super().__init__()
        self.frame_files: List[Path] = []
        self.current_frame: int = 0
        self.play_timer = QTimer(self)
        self.play_timer.timeout.connect(self._on_timer_tick)

        self.exercise_store = ExerciseStore()
        # 기준 포즈 캐시는 세션이 바뀌어도 유지
        self.repository = ReferencePoseRepository()
        self.detector = OpenPoseJsonDetector()
        self.image_provider = QtImageProvider(asset_dir or ".")
        self.session = CoachingSession(self.repository, self.image_provider, self.detector)

        self._setup_ui()
        self._connect_signals()
        self.control_panel.set_exercises(self.exercise_store.exercises)
        self._sync_controls()

    def _setup_ui(self):
        self.setWindowTitle("FormFitness")
        self.setMinimumSize(1200, 800)
        self.setStyleSheet("""
            QMainWindow {
                background-color: #1a1a2e;
            }
            QStatusBar {
                background-color: #16213e;
                color: #e0e0e0;
            }
        """)

        central = QWidget()
        self.setCentralWidget(central)

        outer_layout = QVBoxLayout(central)
        outer_layout.setContentsMargins(0, 0, 0, 0)
        outer_layout.setSpacing(0)

        content_widget = QWidget()
        content_layout = QHBoxLayout(content_widget)
        content_layout.setContentsMargins(10, 10, 10, 10)

        self.canvas = OverlayCanvas()
        self.control_panel = ControlPanel()
        self.control_panel.setFixedWidth(300)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.addWidget(self.canvas)
        splitter.addWidget(self.control_panel)
        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 0)

        content_layout.addWidget(splitter)
        outer_layout.addWidget(content_widget, 1)

        self.playback_bar = PlaybackBar()
        outer_layout.addWidget(self.playback_bar)

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.status_bar.showMessage("에셋 폴더(Ctrl+A)와 프레임 폴더(Ctrl+O)를 불러오세요")

        self._setup_menubar()

    def _setup_menubar(self):
        menubar = self.menuBar()
        file_menu = menubar.addMenu("파일")

        assets_action = file_menu.addAction("에셋 폴더 열기")
        assets_action.setShortcut("Ctrl+A")
        assets_action.triggered.connect(self._open_asset_folder)

        open_action = file_menu.addAction("프레임 폴더 열기")
        open_action.setShortcut("Ctrl+O")
        open_action.triggered.connect(self._open_frame_folder)

        file_menu.addSeparator()

        exit_action = file_menu.addAction("종료")
        exit_action.setShortcut("Ctrl+Q")
        exit_action.triggered.connect(self.close)

    def _connect_signals(self):
        self.control_panel.exercise_changed.connect(self.select_exercise)
        self.control_panel.favorite_toggled.connect(self._on_favorite_toggled)
        self.control_panel.following_changed.connect(self._on_following_changed)
        self.control_panel.lock_toggled.connect(self._on_lock_toggled)
        self.control_panel.mirror_toggled.connect(self._on_mirror_toggled)
        self.control_panel.scale_changed.connect(self._on_scale_changed)
        self.control_panel.reset_requested.connect(self._on_reset_requested)
        self.control_panel.reset_offset_requested.connect(self._on_reset_offset_requested)
        self.control_panel.anchor_joint_changed.connect(self._on_anchor_joint_changed)
        self.control_panel.show_reference_changed.connect(self.canvas.set_show_reference)
        self.control_panel.show_live_changed.connect(self.canvas.set_show_live)
        self.control_panel.reference_opacity_changed.connect(self.canvas.set_reference_opacity)

        self.playback_bar.frame_changed.connect(self._go_to_frame)
        self.playback_bar.playback_toggled.connect(self._toggle_playback)

        self.canvas.view_resized.connect(self._on_view_resized)
        self.canvas.overlay_dragged.connect(self._on_overlay_dragged)

    def keyPressEvent(self, event: QKeyEvent):
        if event.key() == Qt.Key.Key_Space:
            self.playback_bar.toggle_playback()
        elif event.key() == Qt.Key.Key_Left:
            self._go_to_frame(self.current_frame - 1)
        elif event.key() == Qt.Key.Key_Right:
            self._go_to_frame(self.current_frame + 1)
        elif event.key() == Qt.Key.Key_Home:
            self._go_to_frame(0)
        elif event.key() == Qt.Key.Key_End:
            self._go_to_frame(len(self.frame_files) - 1)
        else:
            super().keyPressEvent(event)

    # --- 폴더 로딩 ---

    def _open_asset_folder(self):
        folder = QFileDialog.getExistingDirectory(
            self, "기준 이미지 폴더 선택", "", QFileDialog.Option.ShowDirsOnly
        )
        if folder:
            self.set_asset_folder(folder)

    def set_asset_folder(self, folder: str):
        self.image_provider.asset_dir = Path(folder)
        self.status_bar.showMessage(f"✓ 에셋 폴더: {folder}")
        exercise = self.control_panel.current_exercise()
        if exercise is not None:
            self.select_exercise(exercise.image_name)

    def _open_frame_folder(self):
        folder = QFileDialog.getExistingDirectory(
            self, "프레임 JSON 폴더 선택", "", QFileDialog.Option.ShowDirsOnly
        )
        if folder:
            self.load_frame_folder(folder)

    def load_frame_folder(self, folder: str):
        files = sorted(Path(folder).glob(f"*{KEYPOINT_FILE_SUFFIX}"))
        if not files:
            logger.warning("No keypoint files in %s", folder)
            self.canvas.clear()
            self.status_bar.showMessage(f"⚠ 키포인트 파일을 찾을 수 없습니다: {folder}")
            return

        self.play_timer.stop()
        self.playback_bar.stop_playback()
        self.frame_files = files
        self.current_frame = 0
        self.playback_bar.set_total_frames(len(files))
        self._load_current_frame()
        logger.info("Loaded %d frames from %s", len(files), folder)
        self.status_bar.showMessage(f"✓ {len(files)}개 프레임 로드됨: {folder}")

    # --- 운동 / 오버레이 조작 ---

    def select_exercise(self, name: str):
        reference = self.session.select_exercise(name)
        if reference is None:
            self.control_panel.set_preview(None)
            self.status_bar.showMessage(f"⚠ 기준 포즈를 불러오지 못했습니다: {name}")
        else:
            source = getattr(reference.source_image, "image", None)
            self.control_panel.set_preview(QPixmap.fromImage(source) if source is not None else None)
            self.status_bar.showMessage(f"✓ 기준 포즈: {name}")
        self._refresh_frame()

    def _on_favorite_toggled(self, name: str):
        exercise = self.exercise_store.find(name)
        if exercise is None:
            return
        self.exercise_store.toggle_favorite(exercise)
        self.control_panel.set_exercises(self.exercise_store.exercises, current=name)

    def _on_following_changed(self, following: bool):
        self.session.set_following(following)
        self._sync_controls()

    def _on_lock_toggled(self):
        self.session.toggle_lock()
        self._sync_controls()

    def _on_mirror_toggled(self):
        self.session.controls.toggle_mirror()
        self._sync_controls()

    def _on_scale_changed(self, scale: float):
        self.session.controls.pinch(scale)
        self._sync_controls()

    def _on_reset_requested(self):
        self.session.reset_overlay()
        self._sync_controls()

    def _on_reset_offset_requested(self):
        self.session.reset_initial_pose_offset()
        self._refresh_frame()

    def _on_anchor_joint_changed(self, value: str):
        self.session.set_anchor_joint(Joint(value))
        self._refresh_frame()

    def _on_overlay_dragged(self, dx: float, dy: float):
        if self.session.controls.drag(dx, dy):
            self._refresh_frame()

    def _on_view_resized(self, width: int, height: int):
        self.session.set_view_size((width, height))
        self._refresh_frame()

    def _sync_controls(self):
        controls = self.session.controls
        self.control_panel.set_overlay_state(
            locked=controls.locked, following=controls.following,
            mirrored=controls.mirrored, scale=controls.scale,
        )
        self._refresh_frame()

    # --- 재생 ---

    def _refresh_frame(self):
        self.canvas.set_overlay_transform(self.session.current_scale(), self.session.current_mirror())
        if self.frame_files:
            self._load_current_frame()

    def _load_current_frame(self):
        if not self.frame_files or self.current_frame >= len(self.frame_files):
            return

        view = self.canvas.view_size
        buffer = self.image_provider.load_frame(
            self.frame_files[self.current_frame],
            fallback_size=(int(view.width), int(view.height)),
        )
        result = self.session.process_frame(buffer)
        if result is None:
            # 검출 실패 프레임은 이전 결과 유지
            result = self.session.latest_result()

        self.canvas.set_frame(result, pixel_buffer_to_qimage(buffer))
        self.playback_bar.set_current_frame(self.current_frame)
        if result is not None and result.score is not None:
            self.control_panel.set_score(result.score.overall)
        else:
            self.control_panel.set_score(None)

    def _go_to_frame(self, frame: int):
        if not self.frame_files:
            return
        self.current_frame = max(0, min(frame, len(self.frame_files) - 1))
        self._load_current_frame()

    def _toggle_playback(self, playing: bool):
        if playing:
            fps = self.playback_bar.get_fps()
            self.play_timer.start(int(1000 / fps))
        else:
            self.play_timer.stop()

    def _on_timer_tick(self):
        if self.current_frame >= len(self.frame_files) - 1:
            self._go_to_frame(0)
        else:
            self._go_to_frame(self.current_frame + 1)


def _parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Reference pose overlay viewer")
    parser.add_argument("--assets", help="folder with reference images and their OpenPose JSON")
    parser.add_argument("--frames", help="folder with *_keypoints.json frames (optional matching images)")
    parser.add_argument("--exercise", help="exercise image name to select on start")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def main(argv=None):
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication(sys.argv[:1])
    app.setStyle("Fusion")

    window = FormFitnessWindow(args.assets)
    if args.exercise:
        exercise = window.exercise_store.find(args.exercise)
        window.control_panel.set_exercises(
            window.exercise_store.exercises,
            current=exercise.image_name if exercise else None,
        )
    if args.assets:
        window.set_asset_folder(args.assets)
    if args.frames:
        window.load_frame_folder(args.frames)
    window.show()
    sys.exit(app.exec())


def run_app():
    """Entry point for the application."""
    main()


if __name__ == "__main__":
    main()
