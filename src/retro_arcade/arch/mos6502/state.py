# src/retro_arcade/arch/mos6502/state.py
"""
MOS 6502 CPUの状態定義。
"""
from dataclasses import dataclass
from retro_arcade.core.state import CpuState

# @intent:constant ステータスレジスタ(P)内の各フラグビットの位置。
C_FLAG = 0x01  # Carry
Z_FLAG = 0x02  # Zero
I_FLAG = 0x04  # Interrupt Disable
D_FLAG = 0x08  # Decimal Mode
B_FLAG = 0x10  # Break Command
V_FLAG = 0x40  # Overflow
N_FLAG = 0x80  # Negative

# @intent:responsibility MOS 6502 CPUの状態（レジスタ、フラグ）を保持する。
@dataclass
class Mos6502CpuState(CpuState):
    """
    MOS 6502 CPUのレジスタ状態。
    spは8bit（物理アドレスは $0100 + sp）、pcは16bit。
    """
    a: int = 0
    x: int = 0
    y: int = 0
    p: int = I_FLAG

    # @intent:responsibility 指定マスクのフラグをセット/クリアする。
    def set_flag(self, mask: int, value: bool) -> None:
        if value:
            self.p |= mask
        else:
            self.p &= ~mask & 0xFF

    # @intent:responsibility 結果バイトからN, Zフラグを更新する。
    def update_nz(self, value: int) -> None:
        self.set_flag(Z_FLAG, (value & 0xFF) == 0)
        self.set_flag(N_FLAG, (value & 0x80) != 0)

    @property
    def flag_c(self) -> bool: return bool(self.p & C_FLAG)
    @property
    def flag_z(self) -> bool: return bool(self.p & Z_FLAG)
    @property
    def flag_i(self) -> bool: return bool(self.p & I_FLAG)
    @property
    def flag_d(self) -> bool: return bool(self.p & D_FLAG)
    @property
    def flag_b(self) -> bool: return bool(self.p & B_FLAG)
    @property
    def flag_v(self) -> bool: return bool(self.p & V_FLAG)
    @property
    def flag_n(self) -> bool: return bool(self.p & N_FLAG)

    # @intent:responsibility 一部のレジスタを差し替えた新しいStateを返す（元のStateは変更しない）。
    def replace(self, **changes) -> 'Mos6502CpuState':
        from dataclasses import replace
        return replace(self, **changes)
