# tests/arch/mos6502/test_cycles.py
"""
命令毎のサイクル数（ページ跨ぎ、分岐ペナルティを含む）の検証。
"""
import pytest

from retro_arcade.transport.bus import MemoryBus
from retro_arcade.arch.mos6502.cpu import Mos6502Cpu
from retro_arcade.arch.mos6502.state import Z_FLAG

# @intent:test_suite サイクルテーブルの検証。

def run_one(program, pc=0x0200, **regs):
    bus = MemoryBus()
    for i, b in enumerate(program):
        bus.write(pc + i, b)
    cpu = Mos6502Cpu(bus)
    cpu._state = cpu._state.replace(pc=pc, **regs)
    snapshot = cpu.step()
    return cpu, snapshot.operation.cycle_count

# @intent:test_case 絶対インデックスのページ跨ぎで+1されることを検証します。
def test_lda_absolute_x_page_cross():
    _, cycles = run_one([0xBD, 0xFF, 0x00], x=1)
    assert cycles == 5

def test_lda_absolute_x_same_page():
    _, cycles = run_one([0xBD, 0x10, 0x00], x=1)
    assert cycles == 4

# @intent:test_case (ind),Y はポインタの指すアドレス + Y のページ跨ぎで判定することを検証します。
def test_lda_indirect_indexed_page_cross():
    _, cycles = run_one([0xB1, 0x40], y=0x01)
    assert cycles == 5  # ポインタ $0000 + 1 はページ内

    bus = MemoryBus()
    bus.write(0x0040, 0xFF)
    bus.write(0x0041, 0x00)
    bus.write(0x0200, 0xB1)
    bus.write(0x0201, 0x40)
    cpu = Mos6502Cpu(bus)
    cpu._state = cpu._state.replace(pc=0x0200, y=0x01)
    assert cpu.step().operation.cycle_count == 6

@pytest.mark.parametrize("program, expected", [
    ([0xA9, 0x00], 2),        # LDA #
    ([0xA5, 0x10], 3),        # LDA zp
    ([0xB5, 0x10], 4),        # LDA zp,X
    ([0xB6, 0x10], 4),        # LDX zp,Y
    ([0xAD, 0x00, 0x03], 4),  # LDA abs
    ([0xA1, 0x10], 6),        # LDA (zp,X)
    ([0x85, 0x10], 3),        # STA zp
    ([0x96, 0x10], 4),        # STX zp,Y
    ([0x8D, 0x00, 0x03], 4),  # STA abs
    ([0x9D, 0x00, 0x03], 5),  # STA abs,X
    ([0x99, 0x00, 0x03], 5),  # STA abs,Y
    ([0x81, 0x10], 6),        # STA (zp,X)
    ([0x91, 0x10], 6),        # STA (zp),Y
    ([0x0A], 2),              # ASL A
    ([0x06, 0x10], 5),        # ASL zp
    ([0x16, 0x10], 6),        # ASL zp,X
    ([0x0E, 0x00, 0x03], 6),  # ASL abs
    ([0xFE, 0x00, 0x03], 7),  # INC abs,X
    ([0x48], 3),              # PHA
    ([0x08], 3),              # PHP
    ([0x68], 4),              # PLA
    ([0x28], 4),              # PLP
    ([0x20, 0x00, 0x03], 6),  # JSR
    ([0x60], 6),              # RTS
    ([0x40], 6),              # RTI
    ([0x4C, 0x00, 0x03], 3),  # JMP abs
    ([0x6C, 0x00, 0x03], 5),  # JMP (ind)
    ([0x00], 7),              # BRK
    ([0xEA], 2),              # NOP
    ([0xAA], 2),              # TAX
    ([0x24, 0x10], 3),        # BIT zp
    ([0xE0, 0x10], 2),        # CPX #
])
def test_cycle_table(program, expected):
    _, cycles = run_one(program)
    assert cycles == expected

# @intent:test_case 分岐: 不成立2、成立3、成立かつページ跨ぎ4を検証します。
def test_branch_not_taken_cycles():
    cpu, cycles = run_one([0xF0, 0x05], p=0)
    assert cycles == 2
    assert cpu.get_state().pc == 0x0202

def test_branch_taken_same_page_cycles():
    cpu, cycles = run_one([0xF0, 0x05], p=Z_FLAG)
    assert cycles == 3
    assert cpu.get_state().pc == 0x0207

def test_branch_taken_page_cross_cycles():
    cpu, cycles = run_one([0xF0, 0xF0], p=Z_FLAG)
    assert cycles == 4
    assert cpu.get_state().pc == 0x01F2

def test_branch_forward_page_cross_cycles():
    cpu, cycles = run_one([0xF0, 0x20], pc=0x02F0, p=Z_FLAG)
    assert cycles == 4
    assert cpu.get_state().pc == 0x0312
