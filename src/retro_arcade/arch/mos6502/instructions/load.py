# src/retro_arcade/arch/mos6502/instructions/load.py
"""
MOS 6502 転送系命令 (Load/Store/Transfer)。
"""
from retro_arcade.transport.bus import MemoryBus
from retro_arcade.arch.mos6502.state import Mos6502CpuState
from retro_arcade.arch.mos6502.instructions.base import DecodedInstruction, realise_operand, store_to_operand

# --- Load ---
# @intent:responsibility メモリからレジスタへロードし、N, Zフラグを更新。
def lda(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.a = realise_operand(instr, state, bus)
    state.update_nz(state.a)

def ldx(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.x = realise_operand(instr, state, bus)
    state.update_nz(state.x)

def ldy(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.y = realise_operand(instr, state, bus)
    state.update_nz(state.y)

# --- Store ---
# @intent:responsibility レジスタの内容をメモリへストア。フラグ変化なし。
def sta(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    store_to_operand(state.a, instr, state, bus)

def stx(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    store_to_operand(state.x, instr, state, bus)

def sty(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    store_to_operand(state.y, instr, state, bus)

# --- Register Transfers (TAX, TAY, TXA, TYA, TSX, TXS) ---

def tax(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.x = state.a
    state.update_nz(state.x)

def tay(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.y = state.a
    state.update_nz(state.y)

def txa(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.a = state.x
    state.update_nz(state.a)

def tya(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.a = state.y
    state.update_nz(state.a)

def tsx(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.x = state.sp
    state.update_nz(state.x)

# @intent:note TXSはN, Zフラグを更新しない。
def txs(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.sp = state.x
