# src/retro_arcade/arch/dvg/state.py
"""
DVG (Digital Vector Generator) の状態定義。
"""
from dataclasses import dataclass, field
from typing import List

# @intent:constant DVGのハードウェアコールスタックの段数
STACK_DEPTH = 4

# @intent:responsibility DVGのレジスタ状態を保持する。フレーム毎に reset() で初期化される。
@dataclass
class DvgState:
    """
    pc: ベクターRAM内のワードインデックス
    x, y: 符号付きカーソル位置 (論理座標 0-1023)
    sf: 符号付きグローバルスケールファクタ
    stack / sp: 4段のコールスタックとその深さ (0-4)
    """
    pc: int = 0
    x: int = 0
    y: int = 0
    sf: int = 0
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    sp: int = 0

    # @intent:responsibility フレーム開始時の状態へ戻す。PCは1から始まる。
    def reset(self) -> None:
        self.pc = 1
        self.x = 0
        self.y = 0
        self.sf = 0
        self.stack = [0] * STACK_DEPTH
        self.sp = 0
