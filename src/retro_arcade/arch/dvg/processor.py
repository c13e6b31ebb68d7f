# src/retro_arcade/arch/dvg/processor.py
"""
DVG (ベクターコプロセッサ) のインタプリタ。

ベクターRAM上のディスプレイリストを1フレーム分解釈し、描画プリミティブを Renderer に渡す。
DVGが動作している間、CPUは停止している (スケジューラが逐次的に呼び出す)。
"""
from typing import Optional

from retro_arcade.transport.bus import MemoryBus, VECTOR_RAM_START, LATCH_ACTIVE
from retro_arcade.display.renderer import Renderer
from retro_arcade.arch.dvg.state import DvgState
from retro_arcade.arch.dvg.instructions import (
    DvgInstruction, EXECUTE_MAP, TWO_WORD_OPCODES, decode_word,
)

# @intent:responsibility DVGのフェッチ/デコード/実行ループを提供する。
class VectorProcessor:
    def __init__(self, bus: MemoryBus, renderer: Renderer, tracer=None):
        self._bus = bus
        self._renderer = renderer
        self._tracer = tracer
        self._state = DvgState()

    @property
    def state(self) -> DvgState:
        return self._state

    @property
    def renderer(self) -> Renderer:
        return self._renderer

    def reset(self) -> None:
        self._state.reset()

    # @intent:responsibility PCの指すワードを読み、PCを1ワード進める。
    # @intent:note ワードアドレス = pc * 2 + ベクターRAM先頭、リトルエンディアン。
    def _fetch_word(self) -> int:
        addr = (self._state.pc * 2 + VECTOR_RAM_START) & 0xFFFF
        self._state.pc += 1
        return self._bus.read_word(addr)

    # @intent:responsibility 1命令を実行し、実行した命令を返す。
    def step(self) -> DvgInstruction:
        address = self._state.pc
        word1 = self._fetch_word()
        opcode = decode_word(word1)
        word2 = self._fetch_word() if opcode in TWO_WORD_OPCODES else 0
        instr = DvgInstruction(address, opcode, word1, word2)
        if self._tracer is not None:
            self._tracer.trace_dvg(self._state, instr)
        EXECUTE_MAP[opcode](self._state, self._bus, self._renderer, instr)
        return instr

    # @intent:responsibility 1フレームを描画する。HALTで処理中ラッチが下りるまで実行する。
    # @intent:pre-condition スケジューラが begin-frame ラッチを検出していること。
    # @intent:post-condition begin-frame ラッチと処理中ラッチはともに0。
    def render(self, renderer: Optional[Renderer] = None) -> None:
        if renderer is not None:
            self._renderer = renderer
        io = self._bus.io
        io.halt = LATCH_ACTIVE
        io.go_dvg = 0
        self.reset()
        self._renderer.begin_frame()
        while io.halt != 0:
            self.step()
        self._renderer.present_frame()
