# src/retro_arcade/arch/mos6502/instructions/base.py
"""
MOS 6502 命令/アドレッシングモードの型定義と、オペランド解決ロジック。
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from retro_arcade.transport.bus import MemoryBus
from retro_arcade.arch.mos6502.state import Mos6502CpuState

# @intent:responsibility ドキュメント化された56命令と、デコード時のみ現れる INVALID。
class Instruction(Enum):
    ADC = "ADC"
    AND = "AND"
    ASL = "ASL"
    BCC = "BCC"
    BCS = "BCS"
    BEQ = "BEQ"
    BIT = "BIT"
    BMI = "BMI"
    BNE = "BNE"
    BPL = "BPL"
    BRK = "BRK"
    BVC = "BVC"
    BVS = "BVS"
    CLC = "CLC"
    CLD = "CLD"
    CLI = "CLI"
    CLV = "CLV"
    CMP = "CMP"
    CPX = "CPX"
    CPY = "CPY"
    DEC = "DEC"
    DEX = "DEX"
    DEY = "DEY"
    EOR = "EOR"
    INC = "INC"
    INX = "INX"
    INY = "INY"
    JMP = "JMP"
    JSR = "JSR"
    LDA = "LDA"
    LDX = "LDX"
    LDY = "LDY"
    LSR = "LSR"
    NOP = "NOP"
    ORA = "ORA"
    PHA = "PHA"
    PHP = "PHP"
    PLA = "PLA"
    PLP = "PLP"
    ROL = "ROL"
    ROR = "ROR"
    RTI = "RTI"
    RTS = "RTS"
    SBC = "SBC"
    SEC = "SEC"
    SED = "SED"
    SEI = "SEI"
    STA = "STA"
    STX = "STX"
    STY = "STY"
    TAX = "TAX"
    TAY = "TAY"
    TSX = "TSX"
    TXA = "TXA"
    TXS = "TXS"
    TYA = "TYA"
    # @intent:rationale デコード中の一時的な信号としてのみ使用し、実行対象にはならない。
    INVALID = "???"

# @intent:responsibility オペランドの位置を決める規則。
# @intent:note 分岐命令は IMMEDIATE のフェッチ経路を使い、符号付き変位として再解釈する。
class AddressingMode(Enum):
    IMMEDIATE = "IMMEDIATE"
    ZEROPAGE = "ZEROPAGE"
    ZEROPAGE_X = "ZEROPAGE_X"
    ZEROPAGE_Y = "ZEROPAGE_Y"
    ABSOLUTE = "ABSOLUTE"
    ABSOLUTE_X = "ABSOLUTE_X"
    ABSOLUTE_Y = "ABSOLUTE_Y"
    ACCUMULATOR = "ACCUMULATOR"
    INDEXED_INDIRECT = "INDEXED_INDIRECT"  # ($xx,X)
    INDIRECT_INDEXED = "INDIRECT_INDEXED"  # ($xx),Y
    INDIRECT = "INDIRECT"                  # JMP ($xxxx)
    ABSOLUTE_LOCATION = "ABSOLUTE_LOCATION"  # JMP/JSR $xxxx
    IMPLIED = "IMPLIED"

# @intent:constant 1バイトのオペランドを持つモード
BYTE_OPERAND_MODES = frozenset({
    AddressingMode.IMMEDIATE,
    AddressingMode.ZEROPAGE,
    AddressingMode.ZEROPAGE_X,
    AddressingMode.ZEROPAGE_Y,
    AddressingMode.INDEXED_INDIRECT,
    AddressingMode.INDIRECT_INDEXED,
})

# @intent:constant 2バイト(ワード)のオペランドを持つモード
WORD_OPERAND_MODES = frozenset({
    AddressingMode.ABSOLUTE,
    AddressingMode.ABSOLUTE_X,
    AddressingMode.ABSOLUTE_Y,
    AddressingMode.INDIRECT,
    AddressingMode.ABSOLUTE_LOCATION,
})

# @intent:responsibility 1回のフェッチで生成される一時的なデコード結果。
@dataclass(frozen=True)
class DecodedInstruction:
    """
    address: 命令の先頭アドレス
    opcode: オペコードバイト
    instruction: ニーモニック
    mode: アドレッシングモード
    operand: フェッチしたままの生のオペランド (解決前)
    """
    address: int
    opcode: int
    instruction: Instruction
    mode: AddressingMode
    operand: Optional[int] = None

    @property
    def length(self) -> int:
        if self.mode in BYTE_OPERAND_MODES:
            return 2
        if self.mode in WORD_OPERAND_MODES:
            return 3
        return 1

    @property
    def operand_bytes(self) -> List[int]:
        if self.operand is None:
            return []
        if self.mode in WORD_OPERAND_MODES:
            return [self.operand & 0xFF, self.operand >> 8]
        return [self.operand]

    # @intent:responsibility 逆アセンブリ用のオペランド文字列表現。
    def operand_string(self) -> str:
        op = self.operand or 0
        mode = self.mode
        if mode is AddressingMode.IMMEDIATE:
            return f"#${op:02X}"
        if mode is AddressingMode.ZEROPAGE:
            return f"${op:02X}"
        if mode is AddressingMode.ZEROPAGE_X:
            return f"${op:02X},X"
        if mode is AddressingMode.ZEROPAGE_Y:
            return f"${op:02X},Y"
        if mode in (AddressingMode.ABSOLUTE, AddressingMode.ABSOLUTE_LOCATION):
            return f"${op:04X}"
        if mode is AddressingMode.ABSOLUTE_X:
            return f"${op:04X},X"
        if mode is AddressingMode.ABSOLUTE_Y:
            return f"${op:04X},Y"
        if mode is AddressingMode.ACCUMULATOR:
            return "A"
        if mode is AddressingMode.INDEXED_INDIRECT:
            return f"(${op:02X},X)"
        if mode is AddressingMode.INDIRECT_INDEXED:
            return f"(${op:02X}),Y"
        if mode is AddressingMode.INDIRECT:
            return f"(${op:04X})"
        return ""

# @intent:responsibility ページ境界交差判定。
def is_page_crossed(addr1: int, addr2: int) -> bool:
    return (addr1 & 0xFF00) != (addr2 & 0xFF00)

# @intent:responsibility 8bit値を符号付き変位として解釈する。
def signed_byte(value: int) -> int:
    return value - 0x100 if value & 0x80 else value

# @intent:responsibility メモリ上のオペランドの実効アドレスを計算する。
# @intent:note ゼロページインデックスはゼロページ内でラップし、絶対インデックスはラップしない。
def effective_address(instr: DecodedInstruction, state: Mos6502CpuState, bus: MemoryBus) -> int:
    op = instr.operand or 0
    mode = instr.mode
    if mode in (AddressingMode.ZEROPAGE, AddressingMode.ABSOLUTE):
        return op
    if mode is AddressingMode.ZEROPAGE_X:
        return (op + state.x) & 0xFF
    if mode is AddressingMode.ZEROPAGE_Y:
        return (op + state.y) & 0xFF
    if mode is AddressingMode.ABSOLUTE_X:
        return (op + state.x) & 0xFFFF
    if mode is AddressingMode.ABSOLUTE_Y:
        return (op + state.y) & 0xFFFF
    if mode is AddressingMode.INDEXED_INDIRECT:
        return bus.read_word((op + state.x) & 0xFF)
    if mode is AddressingMode.INDIRECT_INDEXED:
        return (bus.read_word(op) + state.y) & 0xFFFF
    raise ValueError(f"Addressing mode {mode.value} has no effective address.")

# @intent:responsibility アドレッシングモードに従ってオペランドの実効値を得る。
# @intent:note ジャンプ系 (ABSOLUTE_LOCATION / INDIRECT) は飛び先アドレスそのものを返す。
def realise_operand(instr: DecodedInstruction, state: Mos6502CpuState, bus: MemoryBus) -> int:
    mode = instr.mode
    if mode is AddressingMode.IMMEDIATE or mode is AddressingMode.ABSOLUTE_LOCATION:
        return instr.operand or 0
    if mode is AddressingMode.ACCUMULATOR:
        return state.a
    if mode is AddressingMode.INDIRECT:
        return bus.read_word(instr.operand or 0)
    if mode is AddressingMode.IMPLIED:
        return 0
    return bus.read(effective_address(instr, state, bus))

# @intent:responsibility 結果をオペランドの位置（アキュムレータまたはメモリ）へ書き戻す。
def store_to_operand(value: int, instr: DecodedInstruction, state: Mos6502CpuState, bus: MemoryBus) -> None:
    if instr.mode is AddressingMode.ACCUMULATOR:
        state.a = value & 0xFF
        return
    bus.write(effective_address(instr, state, bus), value & 0xFF)
