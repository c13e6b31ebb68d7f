# retro_arcade/machine/scheduler.py
"""
スケジューラモジュール。

CPUを1命令ずつ進め、周期的なNMIの注入、3kHzクロックラッチの更新、
フレーム開始ラッチを検出した際のDVGへの制御の受け渡しを行う責務を負います。
CPUとDVGは同一スレッド上で逐次的に呼び出され、同時に動作することはありません。
"""
from typing import Optional

from retro_arcade.core.snapshot import Snapshot
from retro_arcade.transport.bus import MemoryBus
from retro_arcade.arch.mos6502.cpu import Mos6502Cpu
from retro_arcade.arch.dvg.processor import VectorProcessor

# @intent:constant 1.5MHz動作時のNMI間隔 (約250Hz) とクロックラッチ間隔 (3kHz)
DEFAULT_NMI_INTERVAL = 6000
DEFAULT_CLOCK_INTERVAL = 500

# @intent:responsibility CPUとDVGの実行順序、および周期信号のタイミングを管理します。
class Scheduler:
    """
    CPUのサイクルカウンタを基準に、NMIとクロックラッチの次回発火サイクルを保持します。
    """
    # @intent:pre-condition cpu と dvg は同じ bus を共有していること。
    def __init__(
        self,
        cpu: Mos6502Cpu,
        dvg: VectorProcessor,
        bus: MemoryBus,
        nmi_interval: int = DEFAULT_NMI_INTERVAL,
        clock_interval: int = DEFAULT_CLOCK_INTERVAL,
        tracer=None,
    ):
        if nmi_interval <= 0 or clock_interval <= 0:
            raise ValueError("Scheduler intervals must be positive.")
        self._cpu = cpu
        self._dvg = dvg
        self._bus = bus
        self._nmi_interval = nmi_interval
        self._clock_interval = clock_interval
        self._tracer = tracer
        self._next_nmi = nmi_interval
        self._next_clock = clock_interval
        self.frames_rendered = 0

    @property
    def cycle_count(self) -> int:
        return self._cpu.cycle_count

    @property
    def next_nmi(self) -> int:
        return self._next_nmi

    # @intent:responsibility 次のクロックラッチ境界となるサイクル数を返します。
    def next_tick(self) -> int:
        return ((self._cpu.cycle_count // self._clock_interval) + 1) * self._clock_interval

    # @intent:responsibility CPUを1命令進め、周期信号とフレーム受け渡しを処理します。
    # @intent:post-condition フレーム開始ラッチが立っていた場合、このステップ内でDVGが1フレーム描画済み。
    def step(self) -> Snapshot:
        if self._tracer is not None:
            self._tracer.trace_state(self._cpu)
        snapshot = self._cpu.step()
        if self._tracer is not None:
            self._tracer.trace_operation(snapshot)

        if self._cpu.cycle_count >= self._next_nmi:
            self._cpu.initiate_nmi()
            self._next_nmi += self._nmi_interval

        if self._cpu.cycle_count >= self._next_clock:
            self._bus.io.clock = (self._cpu.cycle_count // self._clock_interval) & 0xFF
            self._next_clock = self.next_tick()

        if self._bus.frame_requested:
            # DVG実行中はCPUのサイクルカウンタは進まない
            self._dvg.render()
            self.frames_rendered += 1

        return snapshot

    # @intent:responsibility サイクルカウンタが target に達するまで実行します。
    # @intent:note 最後の命令が target を超えることがあり、超過分は次回に持ち越されます。
    def run_until(self, target: int) -> None:
        while self._cpu.cycle_count < target:
            self.step()

    # @intent:responsibility 次のクロックラッチ境界まで実行します (外側のペーシングループの1tick)。
    def run_tick(self) -> None:
        self.run_until(self.next_tick())
