# retro_arcade/core/snapshot.py
"""
実行状態の不変スナップショット

1命令の実行結果（実行後のレジスタ、実行した命令、累計サイクル数）を記録します。
トレース出力とテストでの状態検証に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import List

from retro_arcade.core.state import CpuState

# @intent:responsibility 実行された命令の詳細を記録します。
@dataclass(frozen=True)
class Operation:
    """
    実行された命令の詳細（アドレス、HEX、ニーモニック、オペランド）を記録するデータクラス。
    """
    address: int
    opcode_hex: str  # 例: "A9"
    mnemonic: str  # 例: "LDA"
    operands: List[str] = field(default_factory=list)  # 例: ["#$42"]
    operand_bytes: List[int] = field(default_factory=list)
    cycle_count: int = 0  # この命令で消費したサイクル数

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True)
class Metadata:
    cycle_count: int  # 累計サイクル数

# @intent:responsibility ある一時点におけるCPUの状態を不変に記録します。
@dataclass(frozen=True)
class Snapshot:
    state: CpuState
    operation: Operation
    metadata: Metadata
