# src/retro_arcade/ui/vector_display.py
"""
ベクターディスプレイの描画ウィジェット。

DVGから受け取ったプリミティブを1フレーム分保持し、paintEvent で QPainter を使って描画します。
"""
from typing import List, Tuple

from PySide6.QtWidgets import QWidget
from PySide6.QtCore import Qt, QPointF
from PySide6.QtGui import QPainter, QColor, QPen

from retro_arcade.display.renderer import RecordingRenderer, physical_points, intensity_to_alpha

COLOR_BG = "#000000"

# @intent:responsibility ウィジェットのサイズを出力サイズとして報告し、フレーム確定時に再描画を要求するRenderer。
class WidgetRenderer(RecordingRenderer):
    def __init__(self, widget: QWidget):
        super().__init__()
        self._widget = widget

    def output_size(self) -> Tuple[int, int]:
        return (self._widget.width(), self._widget.height())

    def present_frame(self) -> None:
        super().present_frame()
        # 直近のフレームのみ保持する
        del self.frames[:-1]
        self._widget.update()

# @intent:responsibility 直近に確定したフレームを黒背景に白の線/点で描画します。
class VectorDisplay(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setMinimumSize(512, 512)
        self.setFocusPolicy(Qt.StrongFocus)
        self.renderer = WidgetRenderer(self)

    def _current_frame(self) -> List[tuple]:
        frames = self.renderer.frames
        return frames[-1] if frames else []

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(COLOR_BG))
        painter.setRenderHint(QPainter.Antialiasing)
        for primitive in self._current_frame():
            color = QColor(255, 255, 255, intensity_to_alpha(primitive[-1]))
            painter.setPen(QPen(color, 1))
            points = [QPointF(*p) for p in physical_points(self.renderer, primitive)]
            if len(points) == 2:
                painter.drawLine(*points)
            else:
                painter.drawPoint(points[0])
        painter.end()
