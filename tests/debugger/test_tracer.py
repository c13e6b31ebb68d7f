# tests/debugger/test_tracer.py
"""
retro_arcade.debugger.tracer の単体テスト。
"""
from retro_arcade.transport.bus import MemoryBus
from retro_arcade.display.renderer import RecordingRenderer
from retro_arcade.arch.mos6502.cpu import Mos6502Cpu
from retro_arcade.arch.dvg.processor import VectorProcessor
from retro_arcade.debugger.tracer import Tracer

# @intent:test_case 実行前のレジスタ行と、実行した命令行の書式を検証します。
def test_trace_cpu():
    lines = []
    tracer = Tracer(lines.append)
    bus = MemoryBus()
    bus.write(0x0200, 0xA9)
    bus.write(0x0201, 0x42)
    cpu = Mos6502Cpu(bus)
    cpu._state = cpu._state.replace(pc=0x0200)

    tracer.trace_state(cpu)
    tracer.trace_operation(cpu.step())

    assert lines == [
        "A: 00 X: 00 Y: 00 S: FD PC: 0200 P: 00000100 cycle: 0",
        "0200 LDA #$42 (2 cycles)",
    ]

def test_trace_implied_operation():
    lines = []
    bus = MemoryBus()
    bus.write(0x0000, 0xEA)
    cpu = Mos6502Cpu(bus)
    Tracer(lines.append).trace_operation(cpu.step())
    assert lines == ["0000 NOP (2 cycles)"]

# @intent:test_case DVGの各命令が ---DVG 行として出力されることを検証します。
def test_trace_dvg():
    lines = []
    bus = MemoryBus()
    bus.write(0x4002, 0x00)
    bus.write(0x4003, 0xB0)
    dvg = VectorProcessor(bus, RecordingRenderer(), tracer=Tracer(lines.append))

    dvg.render()

    assert lines == [
        "---DVG X: 0, Y: 0, SF: 0, SP: 0, PC: 2",
        "---DVG 0001 1011000000000000 HALT",
        "---DVG",
    ]
