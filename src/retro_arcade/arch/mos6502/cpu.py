# src/retro_arcade/arch/mos6502/cpu.py
"""
MOS 6502 CPUエミュレーションの中心モジュール。
"""
from typing import Dict, List, Tuple

from retro_arcade.core.snapshot import Operation
from retro_arcade.core.cpu import AbstractCpu
from retro_arcade.transport.bus import MemoryBus
from retro_arcade.arch.mos6502.state import Mos6502CpuState
from retro_arcade.arch.mos6502.instructions.base import DecodedInstruction
from retro_arcade.arch.mos6502.instructions.control import RESET_VECTOR, nmi
from retro_arcade.arch.mos6502.instructions.maps import decode_opcode, execute_instruction

# @intent:constant リセットシーケンスと割り込みエントリのサイクル数
RESET_CYCLES = 6
NMI_CYCLES = 7

# @intent:responsibility MOS 6502 CPUの具体的なエミュレーションロジックを提供する。
class Mos6502Cpu(AbstractCpu):
    """
    MOS 6502 CPUをエミュレートするクラス。
    1回の step() で1命令を実行し、PCとサイクルカウンタを進める。
    """
    def __init__(self, bus: MemoryBus):
        super().__init__(bus)

    # @intent:responsibility MOS 6502の電源投入直後の状態を生成する。
    def _create_initial_state(self) -> Mos6502CpuState:
        return Mos6502CpuState(sp=0xFD)

    # @intent:responsibility リセット処理。PCはリセットベクタ($FFFC/$FFFD)から読み込む。
    # @intent:note サイクルカウンタは巻き戻さず、リセットシーケンス分を加算する。
    def reset(self) -> None:
        super().reset()
        self._state.pc = self._bus.read_word(RESET_VECTOR)
        self._cycle_count += RESET_CYCLES

    # @intent:responsibility 周期的ハードウェア割り込み (NMI) を受け付ける。
    def initiate_nmi(self) -> None:
        nmi(self._state, self._bus)
        self._cycle_count += NMI_CYCLES

    # @intent:responsibility 命令フェッチ。オペコードを読み、PCはデコード時に命令長分進める。
    def _fetch(self) -> int:
        return self._bus.read(self._state.pc)

    # @intent:responsibility 命令デコード。オペランドもここでフェッチし、PCを次の命令へ進める。
    def _decode(self, opcode: int) -> DecodedInstruction:
        instruction = decode_opcode(opcode, self._bus, self._state.pc)
        self._state.pc = (self._state.pc + instruction.length) & 0xFFFF
        return instruction

    # @intent:responsibility 命令実行。消費サイクル数を返す。
    def _execute(self, instruction: DecodedInstruction) -> int:
        return execute_instruction(instruction, self._state, self._bus)

    # @intent:responsibility トレース/Snapshot用の命令記述を作る。
    def _describe(self, instruction: DecodedInstruction, cycles: int) -> Operation:
        operand = instruction.operand_string()
        return Operation(
            address=instruction.address,
            opcode_hex=f"{instruction.opcode:02X}",
            mnemonic=instruction.instruction.value,
            operands=[operand] if operand else [],
            operand_bytes=instruction.operand_bytes,
            cycle_count=cycles,
        )

    # @intent:responsibility レジスタマップ（トレース表示用）を返す。
    def get_register_map(self) -> Dict[str, int]:
        state = self._state
        return {
            "A": state.a,
            "X": state.x,
            "Y": state.y,
            "PC": state.pc,
            "S": state.sp,
            "P": state.p,
        }

    # @intent:responsibility フラグ状態を返す。
    def get_flag_state(self) -> Dict[str, bool]:
        state = self._state
        return {
            "N": state.flag_n,
            "V": state.flag_v,
            "B": state.flag_b,
            "D": state.flag_d,
            "I": state.flag_i,
            "Z": state.flag_z,
            "C": state.flag_c,
        }

    # @intent:responsibility 指定範囲の逆アセンブル結果を返す。
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        from retro_arcade.arch.mos6502 import disassembler
        return disassembler.disassemble(self._bus, start_addr, length)
