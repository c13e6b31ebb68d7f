# src/retro_arcade/arch/dvg/instructions.py
"""
DVG 命令セット (VCTR, LABS, HALT, JSRL, RTSL, JMPL, SVEC)。

命令ワードの上位4bitがオペコード。VCTR と LABS のみ2ワード命令。
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict

from retro_arcade.core.errors import StackFault
from retro_arcade.transport.bus import MemoryBus
from retro_arcade.display.renderer import Renderer
from retro_arcade.arch.dvg.state import DvgState, STACK_DEPTH

class DvgOpcode(Enum):
    VCTR = "VCTR"  # 0x0 - 0x9
    LABS = "LABS"  # 0xA 絶対座標を使う唯一の命令
    HALT = "HALT"  # 0xB
    JSRL = "JSRL"  # 0xC
    RTSL = "RTSL"  # 0xD
    JMPL = "JMPL"  # 0xE
    SVEC = "SVEC"  # 0xF

OPCODE_BY_NIBBLE: Dict[int, DvgOpcode] = {
    0xA: DvgOpcode.LABS,
    0xB: DvgOpcode.HALT,
    0xC: DvgOpcode.JSRL,
    0xD: DvgOpcode.RTSL,
    0xE: DvgOpcode.JMPL,
    0xF: DvgOpcode.SVEC,
}

# @intent:constant 2ワード目を持つ命令
TWO_WORD_OPCODES = frozenset({DvgOpcode.VCTR, DvgOpcode.LABS})

# @intent:responsibility 1回のフェッチで得られるDVG命令。
@dataclass(frozen=True)
class DvgInstruction:
    address: int
    opcode: DvgOpcode
    word1: int
    word2: int = 0

    # @intent:responsibility VCTRの上位4bit (スケール計算に使う)
    @property
    def nibble(self) -> int:
        return (self.word1 & 0xF000) >> 12

# @intent:responsibility 命令ワードの上位4bitからオペコードを得る。0x0-0x9は全てVCTR。
def decode_word(word: int) -> DvgOpcode:
    return OPCODE_BY_NIBBLE.get((word & 0xF000) >> 12, DvgOpcode.VCTR)

# @intent:responsibility 負のシフト量は左シフトとして扱う。
def vector_shift(value: int, amount: int) -> int:
    if amount >= 0:
        return value >> amount
    return (value << -amount) & 0xFFFF

# @intent:responsibility 16bit符号付きレジスタの幅に収める。
def to_i16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value

# @intent:responsibility カーソルを新しい位置へ移し、輝度が0でなければプリミティブを描画する。
# @intent:note 始点と終点が一致する場合は点として描く。
def draw_line(state: DvgState, renderer: Renderer, x: int, y: int, z: int) -> None:
    if z != 0:
        if x == state.x and y == state.y:
            renderer.draw_point(x, y, z)
        else:
            renderer.draw_segment(state.x, state.y, x, y, z)
    state.x = x
    state.y = y

def _apply_delta(origin: int, magnitude: int, negative: bool) -> int:
    delta = to_i16(magnitude)
    return to_i16(origin + (-delta if negative else delta))

# --- Vector instructions ---

def vctr(state: DvgState, bus: MemoryBus, renderer: Renderer, instr: DvgInstruction) -> None:
    w1, w2 = instr.word1, instr.word2
    ys = (w1 & 0x400) != 0
    delta_y = w1 & 0x3FF
    z = (w2 & 0xF000) >> 12
    xs = (w2 & 0x400) != 0
    delta_x = w2 & 0x3FF
    shift_bits = 9 - instr.nibble + state.sf
    x = _apply_delta(state.x, vector_shift(delta_x, shift_bits), xs)
    y = _apply_delta(state.y, vector_shift(delta_y, shift_bits), ys)
    draw_line(state, renderer, x, y, z)

# @intent:note スケールの4bit値は bit3 が立っていれば 16-値、そうでなければ -値。
def labs(state: DvgState, bus: MemoryBus, renderer: Renderer, instr: DvgInstruction) -> None:
    w1, w2 = instr.word1, instr.word2
    ys = (w1 & 0x400) != 0
    y = w1 & 0x3FF
    xs = (w2 & 0x400) != 0
    x = w2 & 0x3FF
    sf = (w2 & 0xF000) >> 12
    state.sf = -sf if sf & 0x8 == 0 else 16 - sf
    state.y = -((y ^ 0x3FF) + 1) if ys else y
    state.x = -((x ^ 0x3FF) + 1) if xs else x

# @intent:responsibility ローカルスケール付きの1ワード短ベクター。
def svec(state: DvgState, bus: MemoryBus, renderer: Renderer, instr: DvgInstruction) -> None:
    w1 = instr.word1
    sf = ((w1 & 0x800) >> 11) + ((w1 & 0x8) >> 2)
    ys = (w1 & 0x400) != 0
    delta_y = w1 & 0x300
    xs = (w1 & 0x4) != 0
    delta_x = (w1 & 0x3) << 8
    z = (w1 & 0xF0) >> 4
    shift_bits = 7 - sf + state.sf
    x = _apply_delta(state.x, vector_shift(delta_x, shift_bits), xs)
    y = _apply_delta(state.y, vector_shift(delta_y, shift_bits), ys)
    draw_line(state, renderer, x, y, z)

# --- Control instructions ---

# @intent:responsibility フレーム処理中ラッチを下ろし、このフレームの解釈を終える。
def halt(state: DvgState, bus: MemoryBus, renderer: Renderer, instr: DvgInstruction) -> None:
    bus.io.halt = 0

def jsrl(state: DvgState, bus: MemoryBus, renderer: Renderer, instr: DvgInstruction) -> None:
    if state.sp >= STACK_DEPTH:
        raise StackFault(instr.address, "overflow")
    state.stack[state.sp] = state.pc
    state.sp += 1
    state.pc = instr.word1 & 0xFFF

def rtsl(state: DvgState, bus: MemoryBus, renderer: Renderer, instr: DvgInstruction) -> None:
    if state.sp == 0:
        raise StackFault(instr.address, "underflow")
    state.sp -= 1
    state.pc = state.stack[state.sp]

def jmpl(state: DvgState, bus: MemoryBus, renderer: Renderer, instr: DvgInstruction) -> None:
    state.pc = instr.word1 & 0xFFF

DvgExecFunc = Callable[[DvgState, MemoryBus, Renderer, DvgInstruction], None]

EXECUTE_MAP: Dict[DvgOpcode, DvgExecFunc] = {
    DvgOpcode.VCTR: vctr,
    DvgOpcode.LABS: labs,
    DvgOpcode.HALT: halt,
    DvgOpcode.JSRL: jsrl,
    DvgOpcode.RTSL: rtsl,
    DvgOpcode.JMPL: jmpl,
    DvgOpcode.SVEC: svec,
}
