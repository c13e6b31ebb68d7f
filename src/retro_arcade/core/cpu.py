# retro_arcade/core/cpu.py
"""
Core Layer (抽象CPU)

このモジュールは、CPUの基本的な状態管理と命令サイクルの駆動に関する抽象化を提供します。
具体的な命令の振る舞いはInstruction Layerに移譲されます。
"""
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Any, Dict

from retro_arcade.transport.bus import MemoryBus
from retro_arcade.core.snapshot import Snapshot, Operation, Metadata
from retro_arcade.core.state import CpuState

# @intent:responsibility 抽象CPUの基本機能とインターフェースを定義します。
class AbstractCpu(ABC):
    """
    全てのCPUエミュレーションの基底となる抽象クラス。
    Busとのインターフェース、サイクルカウンタ、命令サイクルの抽象化を提供します。
    """
    # @intent:pre-condition `bus`は有効なMemoryBusオブジェクトである必要があります。
    def __init__(self, bus: MemoryBus):
        self._bus = bus
        self._state: CpuState = self._create_initial_state()
        # @intent:rationale サイクルカウンタは単調増加。resetでも巻き戻さない。
        self._cycle_count: int = 0

    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        """
        CPUの初期状態を生成して返します。
        """
        pass

    # @intent:responsibility CPUをリセットし、初期状態に戻します。
    def reset(self) -> None:
        self._state = self._create_initial_state()

    def get_state(self) -> CpuState:
        return self._state

    # @intent:responsibility 累計サイクル数を返します。
    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    # @intent:responsibility 現在のPCから次の命令（オペコード）をフェッチします。
    @abstractmethod
    def _fetch(self) -> int:
        pass

    # @intent:responsibility オペコードを解析し、オペランドを含むデコード済み命令を返します。
    @abstractmethod
    def _decode(self, opcode: int) -> Any:
        pass

    # @intent:responsibility デコードされた命令を実行し、消費サイクル数を返します。
    @abstractmethod
    def _execute(self, instruction: Any) -> int:
        pass

    # @intent:responsibility デコード済み命令をトレース用のOperationに変換します。
    @abstractmethod
    def _describe(self, instruction: Any, cycles: int) -> Operation:
        pass

    # @intent:responsibility CPUを1命令進め、その結果のスナップショットを返します。
    # @intent:rationale Template Methodパターン (フェッチ→デコード→実行→サイクル加算→Snapshot生成)。
    def step(self) -> Snapshot:
        opcode = self._fetch()
        instruction = self._decode(opcode)
        cycles = self._execute(instruction)
        self._cycle_count += cycles
        return Snapshot(
            state=replace(self._state),
            operation=self._describe(instruction, cycles),
            metadata=Metadata(cycle_count=self._cycle_count),
        )

    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        """
        現在のレジスタ値を辞書形式で返す。
        """
        pass

    @abstractmethod
    def get_flag_state(self) -> Dict[str, bool]:
        """
        現在のフラグ（ステータスレジスタ）の各ビットの状態を辞書形式で返す。
        """
        pass
