# src/retro_arcade/ui/main_window.py
"""
メインウィンドウの実装。
ベクターディスプレイを表示し、QTimer で実時間に合わせてエミュレーションを進めます。
"""
import sys
import time
from typing import Optional

from PySide6.QtWidgets import QMainWindow, QApplication
from PySide6.QtCore import Qt, QTimer, Slot
from PySide6.QtGui import QCloseEvent, QKeyEvent

from retro_arcade.core.errors import EmulatorFault
from retro_arcade.config.builder import Machine
from .vector_display import VectorDisplay

# @intent:constant CPUクロック (Hz)
CPU_CLOCK_HZ = 1_500_000

# @intent:constant Qtのキーコード -> 設定ファイルで使うキー名
QT_KEY_NAMES = {
    Qt.Key_S: "S",
    Qt.Key_Space: "Space",
    Qt.Key_Left: "Left",
    Qt.Key_Right: "Right",
    Qt.Key_Up: "Up",
    Qt.Key_Down: "Down",
    Qt.Key_Shift: "Shift",
    Qt.Key_Control: "Control",
    Qt.Key_Return: "Return",
}

# @intent:responsibility エミュレーション画面と実時間ペーシングループを保持します。
class MainWindow(QMainWindow):
    def __init__(self, display: VectorDisplay, machine: Optional[Machine] = None, parent=None):
        super(MainWindow, self).__init__(parent)
        self.setWindowTitle("Asteroids Emu")
        self.resize(800, 800)
        self.display = display
        self.setCentralWidget(self.display)
        self.machine: Optional[Machine] = None
        self.exit_code = 0

        self._timer = QTimer(self)
        self._timer.timeout.connect(self._run_batch)
        if machine is not None:
            self.attach_machine(machine)

    # @intent:responsibility 構築済みのマシンを接続し、ペーシングタイマーを設定します。
    def attach_machine(self, machine: Machine):
        self.machine = machine
        timing = machine.config.timing
        self._batch_seconds = timing.ticks_per_sleep * timing.clock_interval / CPU_CLOCK_HZ
        self._timer.setInterval(max(1, int(self._batch_seconds * 1000)))

    def start(self):
        if self.machine is not None:
            self._timer.start()

    # @intent:responsibility ticks_per_sleep 回分のクロックtickを実行し、超過時は Overrun を出力します。
    @Slot()
    def _run_batch(self):
        machine = self.machine
        started = time.perf_counter()
        try:
            for _ in range(machine.config.timing.ticks_per_sleep):
                machine.scheduler.run_tick()
                events = machine.sound.poll(machine.bus)
                if events and machine.config.debug:
                    print("Sound: " + ", ".join(e.value for e in events))
        except EmulatorFault as e:
            self._timer.stop()
            print(f"Error: {e}", file=sys.stderr)
            self.exit_code = 1
            QApplication.instance().exit(1)
            return
        elapsed = time.perf_counter() - started
        if elapsed > self._batch_seconds:
            print(f"Overrun {elapsed - self._batch_seconds:.6f}s")

    def _key_name(self, event: QKeyEvent) -> Optional[str]:
        return QT_KEY_NAMES.get(event.key())

    def keyPressEvent(self, event: QKeyEvent):
        if event.key() == Qt.Key_Escape:
            self.close()
            return
        if event.isAutoRepeat():
            return
        name = self._key_name(event)
        if name is None or self.machine is None or not self.machine.key_map.handle_key(name, True, self.machine.bus):
            super().keyPressEvent(event)

    def keyReleaseEvent(self, event: QKeyEvent):
        if event.isAutoRepeat():
            return
        name = self._key_name(event)
        if name is None or self.machine is None or not self.machine.key_map.handle_key(name, False, self.machine.bus):
            super().keyReleaseEvent(event)

    def closeEvent(self, event: QCloseEvent):
        self._timer.stop()
        event.accept()
