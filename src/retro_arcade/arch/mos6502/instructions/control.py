# src/retro_arcade/arch/mos6502/instructions/control.py
"""
MOS 6502 制御系命令 (Branch, Jump, Stack, Interrupt, Flags, NOP)。
"""
from typing import Dict, Tuple

from retro_arcade.transport.bus import MemoryBus
from retro_arcade.arch.mos6502.state import (
    Mos6502CpuState, C_FLAG, Z_FLAG, I_FLAG, D_FLAG, B_FLAG, V_FLAG, N_FLAG,
)
from retro_arcade.arch.mos6502.instructions.base import (
    DecodedInstruction, Instruction, realise_operand, signed_byte,
)

STACK_BASE = 0x0100
NMI_VECTOR = 0xFFFA
RESET_VECTOR = 0xFFFC
IRQ_BRK_VECTOR = 0xFFFE

# --- Stack ---
# @intent:responsibility スタック操作。SPは8bitでラップし、オーバーフローは検出しない。

def push_byte(state: Mos6502CpuState, bus: MemoryBus, value: int) -> None:
    bus.write(STACK_BASE + state.sp, value & 0xFF)
    state.sp = (state.sp - 1) & 0xFF

def pop_byte(state: Mos6502CpuState, bus: MemoryBus) -> int:
    state.sp = (state.sp + 1) & 0xFF
    return bus.read(STACK_BASE + state.sp)

# @intent:note 上位バイトを先にプッシュする（メモリ上はリトルエンディアンで並ぶ）。
def push_word(state: Mos6502CpuState, bus: MemoryBus, value: int) -> None:
    push_byte(state, bus, value >> 8)
    push_byte(state, bus, value & 0xFF)

def pop_word(state: Mos6502CpuState, bus: MemoryBus) -> int:
    lo = pop_byte(state, bus)
    hi = pop_byte(state, bus)
    return (hi << 8) | lo

# --- Interrupts ---

# @intent:responsibility 割り込みエントリ共通処理: PC→Pの順にプッシュし、Iをセットしてベクタへ飛ぶ。
def enter_interrupt(state: Mos6502CpuState, bus: MemoryBus, vector: int, return_addr: int, pushed_status: int) -> None:
    push_word(state, bus, return_addr)
    push_byte(state, bus, pushed_status)
    state.set_flag(I_FLAG, True)
    state.pc = bus.read_word(vector)

# @intent:responsibility 周期的ハードウェア割り込み (NMI)。
def nmi(state: Mos6502CpuState, bus: MemoryBus) -> None:
    enter_interrupt(state, bus, NMI_VECTOR, state.pc, state.p)

# @intent:note BRKは2バイト命令として扱い、パディングバイトの次を戻りアドレスとする。
#              レジスタ側のBフラグを立ててからPを積む。
def brk(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.set_flag(B_FLAG, True)
    enter_interrupt(state, bus, IRQ_BRK_VECTOR, (state.pc + 1) & 0xFFFF, state.p)

def rti(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.p = pop_byte(state, bus)
    state.pc = pop_word(state, bus)

# --- Branch Instructions ---

# @intent:constant 分岐命令 -> (判定フラグ, 分岐する時のフラグ値)
BRANCH_CONDITIONS: Dict[Instruction, Tuple[int, bool]] = {
    Instruction.BPL: (N_FLAG, False),
    Instruction.BMI: (N_FLAG, True),
    Instruction.BVC: (V_FLAG, False),
    Instruction.BVS: (V_FLAG, True),
    Instruction.BCC: (C_FLAG, False),
    Instruction.BCS: (C_FLAG, True),
    Instruction.BNE: (Z_FLAG, False),
    Instruction.BEQ: (Z_FLAG, True),
}

# @intent:responsibility 現在のフラグで分岐が成立するかを判定する。
def branch_taken(instr: DecodedInstruction, state: Mos6502CpuState) -> bool:
    mask, expected = BRANCH_CONDITIONS[instr.instruction]
    return bool(state.p & mask) == expected

# @intent:note 実行時点でPCは分岐命令の次を指している。成立時のみ変位を加える。
def branch(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    if branch_taken(instr, state):
        state.pc = (state.pc + signed_byte(instr.operand or 0)) & 0xFFFF

# --- Jump Instructions ---

def jmp(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.pc = realise_operand(instr, state, bus)

# @intent:note JSRは「JSR命令の最後のバイトのアドレス」をプッシュする。
def jsr(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    push_word(state, bus, (state.pc - 1) & 0xFFFF)
    state.pc = realise_operand(instr, state, bus)

def rts(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.pc = (pop_word(state, bus) + 1) & 0xFFFF

# --- Stack Operations (PHA, PHP, PLA, PLP) ---

def pha(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    push_byte(state, bus, state.a)

# @intent:note PHP/PLP はPをビット単位でそのまま保存/復元する。
def php(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    push_byte(state, bus, state.p)

def pla(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.a = pop_byte(state, bus)
    state.update_nz(state.a)

def plp(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.p = pop_byte(state, bus)

# --- Flag Operations (CLC, SEC, etc) ---

def clc(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.set_flag(C_FLAG, False)

def sec(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.set_flag(C_FLAG, True)

def cli(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.set_flag(I_FLAG, False)

def sei(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.set_flag(I_FLAG, True)

def clv(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.set_flag(V_FLAG, False)

def cld(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.set_flag(D_FLAG, False)

def sed(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.set_flag(D_FLAG, True)

def nop(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    pass
