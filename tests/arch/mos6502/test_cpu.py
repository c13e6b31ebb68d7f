# tests/arch/mos6502/test_cpu.py
import pytest
from retro_arcade.transport.bus import MemoryBus
from retro_arcade.core.errors import DecodeFault
from retro_arcade.arch.mos6502.cpu import Mos6502Cpu

def load_program(bus, addr, data):
    for i, b in enumerate(data):
        bus.write(addr + i, b)

# ベクタ ($FFxx) はミラーによりプログラムROMの末尾に位置する
def set_vector(bus, vector, target):
    offset = (vector & 0x7FFF) - 0x6800
    bus.program_rom.load_data(offset, target & 0xFF)
    bus.program_rom.load_data(offset + 1, target >> 8)

@pytest.fixture
def cpu():
    bus = MemoryBus()
    cpu = Mos6502Cpu(bus)
    return cpu

def test_lda_immediate(cpu):
    # LDA #$55 (0xA9 0x55)
    load_program(cpu._bus, 0x0200, [0xA9, 0x55])
    cpu._state = cpu._state.replace(pc=0x0200)

    snapshot = cpu.step()

    state = cpu.get_state()
    assert state.a == 0x55
    assert not state.flag_z
    assert not state.flag_n
    assert state.pc == 0x0202
    assert snapshot.operation.mnemonic == "LDA"
    assert snapshot.operation.operands == ["#$55"]
    assert snapshot.operation.cycle_count == 2

def test_ldx_zeropage(cpu):
    # LDX $10 (0xA6 0x10), Memory[$10] = $80
    load_program(cpu._bus, 0x0200, [0xA6, 0x10])
    cpu._bus.write(0x0010, 0x80)
    cpu._state = cpu._state.replace(pc=0x0200)

    cpu.step()

    state = cpu.get_state()
    assert state.x == 0x80
    assert not state.flag_z
    assert state.flag_n
    assert state.pc == 0x0202

def test_adc_binary(cpu):
    # CLC, LDA #$10, ADC #$20
    load_program(cpu._bus, 0x0200, [0x18, 0xA9, 0x10, 0x69, 0x20])
    cpu._state = cpu._state.replace(pc=0x0200)

    cpu.step()
    cpu.step()
    cpu.step()

    state = cpu.get_state()
    assert state.a == 0x30
    assert not state.flag_c
    assert not state.flag_z

def test_adc_signed_overflow(cpu):
    # ADC #$50 with A = $50, carry clear
    load_program(cpu._bus, 0x0200, [0x69, 0x50])
    cpu._state = cpu._state.replace(pc=0x0200, a=0x50, p=0x00)

    cpu.step()

    state = cpu.get_state()
    assert state.a == 0xA0
    assert state.flag_v
    assert not state.flag_c
    assert state.flag_n
    assert not state.flag_z

def test_adc_bcd(cpu):
    # SED, CLC, LDA #$09, ADC #$01 -> 10 (BCD)
    load_program(cpu._bus, 0x0200, [0xF8, 0x18, 0xA9, 0x09, 0x69, 0x01])
    cpu._state = cpu._state.replace(pc=0x0200)

    for _ in range(4):
        cpu.step()

    state = cpu.get_state()
    assert state.flag_d
    assert state.a == 0x10
    assert not state.flag_c

def test_branch_taken(cpu):
    # SEC, BCS +2
    load_program(cpu._bus, 0x0200, [0x38, 0xB0, 0x02])
    cpu._state = cpu._state.replace(pc=0x0200)

    cpu.step()
    cpu.step()

    assert cpu.get_state().pc == 0x0205

def test_branch_not_taken(cpu):
    # CLC, BCS +2
    load_program(cpu._bus, 0x0200, [0x18, 0xB0, 0x02])
    cpu._state = cpu._state.replace(pc=0x0200)

    cpu.step()
    cpu.step()

    assert cpu.get_state().pc == 0x0203

def test_reset_loads_vector(cpu):
    set_vector(cpu._bus, 0xFFFC, 0x6A00)
    cpu._state = cpu._state.replace(a=0x12, x=0x34, y=0x56, p=0xFF, sp=0x10)

    cpu.reset()

    state = cpu.get_state()
    assert state.pc == 0x6A00
    assert (state.a, state.x, state.y) == (0, 0, 0)
    assert state.p == 0x04
    assert state.sp == 0xFD
    assert cpu.cycle_count == 6

def test_nmi_entry(cpu):
    set_vector(cpu._bus, 0xFFFA, 0x0300)
    cpu._state = cpu._state.replace(pc=0x1234, p=0x81)

    cpu.initiate_nmi()

    state = cpu.get_state()
    assert state.pc == 0x0300
    assert state.flag_i
    assert state.sp == 0xFA
    assert cpu._bus.read(0x01FD) == 0x12
    assert cpu._bus.read(0x01FC) == 0x34
    assert cpu._bus.read(0x01FB) == 0x81
    assert cpu.cycle_count == 7

def test_nmi_then_rti_resumes(cpu):
    set_vector(cpu._bus, 0xFFFA, 0x0300)
    cpu._bus.write(0x0300, 0x40)  # RTI
    cpu._state = cpu._state.replace(pc=0x0210, p=0x03)

    cpu.initiate_nmi()
    cpu.step()

    state = cpu.get_state()
    assert state.pc == 0x0210
    assert state.p == 0x03
    assert state.sp == 0xFD

def test_invalid_opcode_raises(cpu):
    load_program(cpu._bus, 0x0200, [0xFF])
    cpu._state = cpu._state.replace(pc=0x0200)

    with pytest.raises(DecodeFault) as excinfo:
        cpu.step()
    assert excinfo.value.address == 0x0200
    assert excinfo.value.opcode == 0xFF
    assert "Invalid op code FF encountered at address 0200" in str(excinfo.value)

def test_register_and_flag_maps(cpu):
    cpu._state = cpu._state.replace(a=1, x=2, y=3, pc=0x0400, p=0x83)
    regs = cpu.get_register_map()
    flags = cpu.get_flag_state()
    assert regs == {"A": 1, "X": 2, "Y": 3, "PC": 0x0400, "S": 0xFD, "P": 0x83}
    assert flags["N"] and flags["Z"] and flags["C"]
    assert not flags["V"] and not flags["I"]

def test_end_to_end_from_reset(cpu):
    # LDA #$42 ; STA $10 ; BRK
    set_vector(cpu._bus, 0xFFFC, 0x0200)
    set_vector(cpu._bus, 0xFFFE, 0x0300)
    load_program(cpu._bus, 0x0200, [0xA9, 0x42, 0x85, 0x10, 0x00])

    cpu.reset()
    start = cpu.cycle_count

    cpu.step()
    cpu.step()
    assert cpu._bus.read(0x0010) == 0x42
    assert cpu.cycle_count - start == 2 + 3

    cpu.step()
    assert cpu.cycle_count - start == 2 + 3 + 7
    assert cpu.get_state().pc == 0x0300

def test_absolute_x_crosses_page_without_wrapping(cpu):
    # LDA $02F0,X (X=$20) は $0310 を読む ($0210 ではない)
    load_program(cpu._bus, 0x0080, [0xBD, 0xF0, 0x02])
    cpu._bus.write(0x0210, 0x11)
    cpu._bus.write(0x0310, 0x77)
    cpu._state = cpu._state.replace(pc=0x0080, x=0x20)

    cpu.step()

    assert cpu.get_state().a == 0x77

def test_absolute_y_store_crosses_page_without_wrapping(cpu):
    # STA $02FF,Y (Y=1) は $0300 へ書く
    load_program(cpu._bus, 0x0080, [0x99, 0xFF, 0x02])
    cpu._bus.write(0x0200, 0x11)
    cpu._state = cpu._state.replace(pc=0x0080, a=0x5A, y=0x01)

    cpu.step()

    assert cpu._bus.read(0x0300) == 0x5A
    assert cpu._bus.read(0x0200) == 0x11

def test_zero_page_y_wraps_within_page_zero(cpu):
    # LDX $FF,Y (Y=2) は $0001 を読む
    load_program(cpu._bus, 0x0080, [0xB6, 0xFF])
    cpu._bus.write(0x0001, 0x42)
    cpu._bus.write(0x0101, 0x99)
    cpu._state = cpu._state.replace(pc=0x0080, y=0x02)

    cpu.step()

    assert cpu.get_state().x == 0x42
