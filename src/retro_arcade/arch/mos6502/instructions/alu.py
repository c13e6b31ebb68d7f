# src/retro_arcade/arch/mos6502/instructions/alu.py
"""
MOS 6502 算術論理演算命令 (ALU)。
BCDサポートを含む。
"""
from retro_arcade.transport.bus import MemoryBus
from retro_arcade.arch.mos6502.state import Mos6502CpuState, C_FLAG, Z_FLAG, V_FLAG, N_FLAG
from retro_arcade.arch.mos6502.instructions.base import DecodedInstruction, realise_operand, store_to_operand

# @intent:responsibility アキュムレータの符号側を跨いだかどうかでVフラグを決定する。
# @intent:note 加算/減算の前のAが <128 側から結果 >127 側へ（またはその逆へ）移った場合にセットする。
def _crossed_sign(before: int, result: int) -> bool:
    return (before < 0x80 and result > 0x7F) or (before > 0x7F and result < 0x80)

# --- Logical Operations (AND, ORA, EOR, BIT) ---

def and_(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.a &= realise_operand(instr, state, bus)
    state.update_nz(state.a)

def ora(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.a |= realise_operand(instr, state, bus)
    state.update_nz(state.a)

def eor(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.a ^= realise_operand(instr, state, bus)
    state.update_nz(state.a)

# @intent:note BIT命令はメモリの値のビット6, 7をそれぞれV, Nフラグにコピーし、A & Mの結果でZフラグを設定する。
def bit(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    val = realise_operand(instr, state, bus)
    state.set_flag(Z_FLAG, (state.a & val) == 0)
    state.set_flag(V_FLAG, (val & 0x40) != 0)
    state.set_flag(N_FLAG, (val & 0x80) != 0)

# --- Arithmetic Operations (ADC, SBC) ---

# @intent:responsibility BCD加算。下位ニブルの桁上がりを上位ニブルへ伝播する。
def _adc_bcd(state: Mos6502CpuState, val: int) -> int:
    lo = (state.a & 0x0F) + (val & 0x0F) + (1 if state.flag_c else 0)
    carry = 1 if lo > 9 else 0
    hi = (state.a >> 4) + (val >> 4) + carry
    state.set_flag(C_FLAG, hi > 9)
    return ((hi % 10) << 4) | (lo % 10)

def _adc_binary(state: Mos6502CpuState, val: int) -> int:
    res_wide = state.a + val + (1 if state.flag_c else 0)
    state.set_flag(C_FLAG, res_wide > 0xFF)
    return res_wide & 0xFF

def adc(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    val = realise_operand(instr, state, bus)
    res = _adc_bcd(state, val) if state.flag_d else _adc_binary(state, val)
    # N, Z, V は10進モードでもバイナリと同じ規則で更新する
    state.update_nz(res)
    state.set_flag(V_FLAG, _crossed_sign(state.a, res))
    state.a = res

# @intent:responsibility BCD減算。ニブル単位で借りを伝播する。
# @intent:note この経路を通るプログラムは知られておらず、挙動は未検証のまま保持している。
def _sbc_bcd(state: Mos6502CpuState, val: int) -> int:
    hi_a, hi_o = state.a >> 4, val >> 4
    lo_a, lo_o = state.a & 0x0F, val & 0x0F
    borrow1 = 0 if state.flag_c else 1
    borrow2 = 0 if lo_a >= lo_o + borrow1 else 1
    borrow3 = 0 if hi_a >= hi_o + borrow2 else 1
    lo = lo_a + borrow2 * 10 - lo_o - borrow1
    hi = hi_a + borrow3 * 10 - hi_o - borrow2
    state.set_flag(C_FLAG, borrow3 == 0)
    return ((hi % 10) << 4) | (lo % 10)

def _sbc_binary(state: Mos6502CpuState, val: int) -> int:
    sub_total = val + (0 if state.flag_c else 1)
    state.set_flag(C_FLAG, sub_total <= state.a)
    return (state.a + 0x100 - sub_total) & 0xFF

def sbc(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    val = realise_operand(instr, state, bus)
    res = _sbc_bcd(state, val) if state.flag_d else _sbc_binary(state, val)
    state.update_nz(res)
    state.set_flag(V_FLAG, _crossed_sign(state.a, res))
    state.a = res

# --- Compare Operations (CMP, CPX, CPY) ---
# @intent:note 結果を格納しない減算。C は Reg >= Val (借りなし) でセット。

def _compare(state: Mos6502CpuState, reg_val: int, mem_val: int) -> None:
    state.set_flag(C_FLAG, reg_val >= mem_val)
    state.set_flag(Z_FLAG, reg_val == mem_val)
    state.set_flag(N_FLAG, ((reg_val - mem_val) & 0x80) != 0)

def cmp(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    _compare(state, state.a, realise_operand(instr, state, bus))

def cpx(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    _compare(state, state.x, realise_operand(instr, state, bus))

def cpy(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    _compare(state, state.y, realise_operand(instr, state, bus))

# --- Shift / Rotate Operations (ASL, LSR, ROL, ROR) ---
# @intent:note Accumulatorモードではstore_to_operandがAへ書き戻す。

def asl(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    val = realise_operand(instr, state, bus)
    state.set_flag(C_FLAG, (val & 0x80) != 0)
    res = (val << 1) & 0xFF
    state.update_nz(res)
    store_to_operand(res, instr, state, bus)

def lsr(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    val = realise_operand(instr, state, bus)
    state.set_flag(C_FLAG, (val & 0x01) != 0)
    res = val >> 1
    state.update_nz(res)
    store_to_operand(res, instr, state, bus)

def rol(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    val = realise_operand(instr, state, bus)
    res = ((val << 1) | (1 if state.flag_c else 0)) & 0xFF
    state.set_flag(C_FLAG, (val & 0x80) != 0)
    state.update_nz(res)
    store_to_operand(res, instr, state, bus)

def ror(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    val = realise_operand(instr, state, bus)
    res = (val >> 1) | (0x80 if state.flag_c else 0)
    state.set_flag(C_FLAG, (val & 0x01) != 0)
    state.update_nz(res)
    store_to_operand(res, instr, state, bus)

# --- Increment / Decrement (INC, DEC, INX, DEX, INY, DEY) ---

def inc(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    res = (realise_operand(instr, state, bus) + 1) & 0xFF
    state.update_nz(res)
    store_to_operand(res, instr, state, bus)

def dec(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    res = (realise_operand(instr, state, bus) - 1) & 0xFF
    state.update_nz(res)
    store_to_operand(res, instr, state, bus)

def inx(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.x = (state.x + 1) & 0xFF
    state.update_nz(state.x)

def dex(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.x = (state.x - 1) & 0xFF
    state.update_nz(state.x)

def iny(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.y = (state.y + 1) & 0xFF
    state.update_nz(state.y)

def dey(state: Mos6502CpuState, bus: MemoryBus, instr: DecodedInstruction) -> None:
    state.y = (state.y - 1) & 0xFF
    state.update_nz(state.y)
