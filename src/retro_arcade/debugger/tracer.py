# retro_arcade/debugger/tracer.py
"""
トレーサーモジュール。

--debug 指定時に、CPUのレジスタ状態と実行した命令、DVGの命令を
コンソールへ逐次出力する責務を負います。
"""
from typing import Callable

from retro_arcade.core.cpu import AbstractCpu
from retro_arcade.core.snapshot import Snapshot
from retro_arcade.arch.dvg.instructions import TWO_WORD_OPCODES

# @intent:responsibility CPU/DVGの実行をテキストで記録します。
class Tracer:
    """
    出力先は既定で print。テストでは任意の関数を渡して行を収集できます。
    """
    def __init__(self, output: Callable[[str], None] = print):
        self._output = output

    # @intent:responsibility 命令実行前のレジスタ状態を1行で出力します。
    def trace_state(self, cpu: AbstractCpu) -> None:
        regs = cpu.get_register_map()
        self._output(
            f"A: {regs['A']:02X} X: {regs['X']:02X} Y: {regs['Y']:02X} "
            f"S: {regs['S']:02X} PC: {regs['PC']:04X} P: {regs['P']:08b} "
            f"cycle: {cpu.cycle_count}"
        )

    # @intent:responsibility 実行した命令とそのサイクル数を出力します。
    def trace_operation(self, snapshot: Snapshot) -> None:
        op = snapshot.operation
        text = " ".join([op.mnemonic] + op.operands)
        self._output(f"{op.address:04X} {text} ({op.cycle_count} cycles)")

    # @intent:responsibility DVGの状態と命令ワードを出力します。
    def trace_dvg(self, state, instr) -> None:
        self._output(f"---DVG X: {state.x}, Y: {state.y}, SF: {state.sf}, SP: {state.sp}, PC: {state.pc}")
        if instr.opcode in TWO_WORD_OPCODES:
            self._output(f"---DVG {instr.address:04X} {instr.word1:016b} {instr.word2:016b} {instr.opcode.value}")
        else:
            self._output(f"---DVG {instr.address:04X} {instr.word1:016b} {instr.opcode.value}")
        self._output("---DVG")
