# tests/arch/mos6502/test_decode.py
"""
オペコードのビット構成に基づくデコードの検証。
"""
import pytest

from retro_arcade.core.errors import DecodeFault
from retro_arcade.transport.bus import MemoryBus
from retro_arcade.arch.mos6502.instructions.base import Instruction as I, AddressingMode as M
from retro_arcade.arch.mos6502.instructions.maps import classify_opcode, decode_opcode

# @intent:test_suite 正規の命令マトリクスの網羅と、不正な組み合わせの検出を検証します。

def _legal_opcodes():
    legal = []
    for opcode in range(256):
        try:
            classify_opcode(opcode)
        except DecodeFault:
            continue
        legal.append(opcode)
    return legal

# @intent:test_case ドキュメント化された151命令がちょうどデコードできることを検証します。
def test_legal_opcode_count():
    assert len(_legal_opcodes()) == 151

# @intent:test_case INVALID はデコード結果として現れないことを検証します。
def test_invalid_never_decoded():
    for opcode in _legal_opcodes():
        instruction, _ = classify_opcode(opcode)
        assert instruction is not I.INVALID

@pytest.mark.parametrize("opcode, instruction, mode", [
    (0xA9, I.LDA, M.IMMEDIATE),
    (0xA5, I.LDA, M.ZEROPAGE),
    (0xB5, I.LDA, M.ZEROPAGE_X),
    (0xAD, I.LDA, M.ABSOLUTE),
    (0xBD, I.LDA, M.ABSOLUTE_X),
    (0xB9, I.LDA, M.ABSOLUTE_Y),
    (0xA1, I.LDA, M.INDEXED_INDIRECT),
    (0xB1, I.LDA, M.INDIRECT_INDEXED),
    (0x81, I.STA, M.INDEXED_INDIRECT),
    (0xE9, I.SBC, M.IMMEDIATE),
    (0x0A, I.ASL, M.ACCUMULATOR),
    (0x7E, I.ROR, M.ABSOLUTE_X),
    (0xA2, I.LDX, M.IMMEDIATE),
    (0xB6, I.LDX, M.ZEROPAGE_Y),
    (0xBE, I.LDX, M.ABSOLUTE_Y),
    (0x96, I.STX, M.ZEROPAGE_Y),
    (0xD6, I.DEC, M.ZEROPAGE_X),
    (0xFE, I.INC, M.ABSOLUTE_X),
    (0x24, I.BIT, M.ZEROPAGE),
    (0x2C, I.BIT, M.ABSOLUTE),
    (0x4C, I.JMP, M.ABSOLUTE_LOCATION),
    (0x6C, I.JMP, M.INDIRECT),
    (0x94, I.STY, M.ZEROPAGE_X),
    (0xBC, I.LDY, M.ABSOLUTE_X),
    (0xC0, I.CPY, M.IMMEDIATE),
    (0xEC, I.CPX, M.ABSOLUTE),
    (0x20, I.JSR, M.ABSOLUTE_LOCATION),
    (0x00, I.BRK, M.IMPLIED),
    (0x9A, I.TXS, M.IMPLIED),
    (0xEA, I.NOP, M.IMPLIED),
    (0x10, I.BPL, M.IMMEDIATE),
    (0x30, I.BMI, M.IMMEDIATE),
    (0x50, I.BVC, M.IMMEDIATE),
    (0x70, I.BVS, M.IMMEDIATE),
    (0x90, I.BCC, M.IMMEDIATE),
    (0xB0, I.BCS, M.IMMEDIATE),
    (0xD0, I.BNE, M.IMMEDIATE),
    (0xF0, I.BEQ, M.IMMEDIATE),
])
def test_legal_decode(opcode, instruction, mode):
    assert classify_opcode(opcode) == (instruction, mode)

# @intent:test_case 不正な命令×モードの組み合わせ、未定義グループが DecodeFault になることを検証します。
@pytest.mark.parametrize("opcode", [
    0x89,  # STA immediate
    0x02,  # ASL immediate
    0x82,  # STX immediate
    0xC2,  # DEC immediate
    0xE2,  # INC immediate
    0x9E,  # STX absolute,X
    0x12,  # group B mode 100
    0x1A,  # group B mode 110
    0x80,  # STY immediate
    0x04,  # group C instruction 000
    0x0C,  # group C instruction 000, absolute
    0x44,  # JMP zero page
    0x64,  # JMP zero page
    0x34,  # BIT zeropage,X
    0xD4,  # CPY zeropage,X
    0x3C,  # BIT absolute,X
    0x9C,  # STY absolute,X
    0x7C,  # JMP absolute,X
    0x1C,  # group C mode 111 instruction 000
    0x14,  # group C mode 101 instruction 000
    0x5A,  # group B mode 110
    0x03, 0x77, 0xFF,  # low bits 11
])
def test_illegal_decode(opcode):
    with pytest.raises(DecodeFault):
        classify_opcode(opcode)

# @intent:test_case デコード時にオペランドがリトルエンディアンでフェッチされることを検証します。
def test_decode_fetches_operand():
    bus = MemoryBus()
    for i, b in enumerate([0xBD, 0x34, 0x12]):
        bus.write(0x0200 + i, b)
    instr = decode_opcode(0xBD, bus, 0x0200)
    assert instr.operand == 0x1234
    assert instr.length == 3
    assert instr.operand_bytes == [0x34, 0x12]
    assert instr.operand_string() == "$1234,X"

# @intent:test_case DecodeFault が命令の先頭アドレスを保持することを検証します。
def test_decode_fault_address():
    bus = MemoryBus()
    with pytest.raises(DecodeFault) as excinfo:
        decode_opcode(0x89, bus, 0x0234)
    assert excinfo.value.address == 0x0234
