# src/retro_arcade/arch/mos6502/instructions/maps.py
"""
MOS 6502 命令マップとデコード/サイクル計算ロジック。

オペコードは 256 エントリの平坦なテーブルではなく、実機のビット構成
(aaabbbcc: aaa=命令, bbb=アドレッシングモード, cc=グループ) に沿ってデコードする。
不正な命令×モードの組み合わせは、同じビットグループを見て検出する。
"""
from typing import Callable, Dict, Optional, Tuple

from retro_arcade.transport.bus import MemoryBus
from retro_arcade.core.errors import DecodeFault
from retro_arcade.arch.mos6502.state import Mos6502CpuState
from retro_arcade.arch.mos6502.instructions import load, alu, control
from retro_arcade.arch.mos6502.instructions.base import (
    AddressingMode as M,
    BYTE_OPERAND_MODES,
    DecodedInstruction,
    Instruction as I,
    WORD_OPERAND_MODES,
    is_page_crossed,
    signed_byte,
)

ExecFunc = Callable[[Mos6502CpuState, MemoryBus, DecodedInstruction], None]

# --- Decode tables ---

# @intent:constant オペランドを持たない(またはJSRのように形が固定された)命令の1対1対応表。
FIXED_OPCODES: Dict[int, Tuple[I, M]] = {
    0x00: (I.BRK, M.IMPLIED),
    0x20: (I.JSR, M.ABSOLUTE_LOCATION),
    0x40: (I.RTI, M.IMPLIED),
    0x60: (I.RTS, M.IMPLIED),
    0x08: (I.PHP, M.IMPLIED),
    0x28: (I.PLP, M.IMPLIED),
    0x48: (I.PHA, M.IMPLIED),
    0x68: (I.PLA, M.IMPLIED),
    0x88: (I.DEY, M.IMPLIED),
    0xA8: (I.TAY, M.IMPLIED),
    0xC8: (I.INY, M.IMPLIED),
    0xE8: (I.INX, M.IMPLIED),
    0x18: (I.CLC, M.IMPLIED),
    0x38: (I.SEC, M.IMPLIED),
    0x58: (I.CLI, M.IMPLIED),
    0x78: (I.SEI, M.IMPLIED),
    0x98: (I.TYA, M.IMPLIED),
    0xB8: (I.CLV, M.IMPLIED),
    0xD8: (I.CLD, M.IMPLIED),
    0xF8: (I.SED, M.IMPLIED),
    0x8A: (I.TXA, M.IMPLIED),
    0x9A: (I.TXS, M.IMPLIED),
    0xAA: (I.TAX, M.IMPLIED),
    0xBA: (I.TSX, M.IMPLIED),
    0xCA: (I.DEX, M.IMPLIED),
    0xEA: (I.NOP, M.IMPLIED),
}

# @intent:constant xxx10000: 上位3bitが分岐条件を選ぶ
BRANCHES = (I.BPL, I.BMI, I.BVC, I.BVS, I.BCC, I.BCS, I.BNE, I.BEQ)

# --- Group A (cc = 01) ---
GROUP_A_INSTRUCTIONS = (I.ORA, I.AND, I.EOR, I.ADC, I.STA, I.LDA, I.CMP, I.SBC)
GROUP_A_MODES = (
    M.INDEXED_INDIRECT, M.ZEROPAGE, M.IMMEDIATE, M.ABSOLUTE,
    M.INDIRECT_INDEXED, M.ZEROPAGE_X, M.ABSOLUTE_Y, M.ABSOLUTE_X,
)

# --- Group B (cc = 10) ---
GROUP_B_INSTRUCTIONS = (I.ASL, I.ROL, I.LSR, I.ROR, I.STX, I.LDX, I.DEC, I.INC)
GROUP_B_MODES = (
    M.IMMEDIATE, M.ZEROPAGE, M.ACCUMULATOR, M.ABSOLUTE,
    None, M.ZEROPAGE_X, None, M.ABSOLUTE_X,
)

# --- Group C (cc = 00) ---
GROUP_C_INSTRUCTIONS = (I.INVALID, I.BIT, I.JMP, I.JMP, I.STY, I.LDY, I.CPY, I.CPX)
GROUP_C_MODES = (
    M.IMMEDIATE, M.ZEROPAGE, None, M.ABSOLUTE,
    None, M.ZEROPAGE_X, None, M.ABSOLUTE_X,
)

# @intent:responsibility グループBのモードを命令に合わせて補正する (LDX/STX は X ではなく Y でインデックス)。
def _group_b_mode(instruction: I, bbb: int) -> Optional[M]:
    mode = GROUP_B_MODES[bbb]
    if mode is M.ZEROPAGE_X and instruction in (I.LDX, I.STX):
        return M.ZEROPAGE_Y
    if mode is M.ABSOLUTE_X and instruction is I.LDX:
        return M.ABSOLUTE_Y
    return mode

# @intent:responsibility グループBで許されない命令×モードの組み合わせを判定する。
def _group_b_illegal(instruction: I, mode: Optional[M]) -> bool:
    if mode is None:
        return True
    if mode is M.IMMEDIATE:
        return instruction is not I.LDX
    if mode is M.ACCUMULATOR:
        return instruction in (I.STX, I.LDX, I.DEC, I.INC)
    if mode is M.ABSOLUTE_X:
        return instruction is I.STX
    return False

# @intent:responsibility グループCのモード。aaa=010 の絶対モードは JMP abs、011 は JMP (ind)。
def _group_c_mode(aaa: int, bbb: int) -> Optional[M]:
    mode = GROUP_C_MODES[bbb]
    if mode is M.ABSOLUTE:
        if aaa == 0b011:
            return M.INDIRECT
        if aaa == 0b010:
            return M.ABSOLUTE_LOCATION
    return mode

# @intent:responsibility グループCで許されない命令×モードの組み合わせを判定する。
def _group_c_illegal(instruction: I, mode: Optional[M]) -> bool:
    if instruction is I.INVALID or mode is None:
        return True
    if mode is M.IMMEDIATE:
        return instruction not in (I.LDY, I.CPY, I.CPX)
    if mode is M.ZEROPAGE:
        return instruction is I.JMP
    if mode is M.ZEROPAGE_X:
        return instruction not in (I.STY, I.LDY)
    if mode is M.ABSOLUTE_X:
        return instruction is not I.LDY
    return False

# @intent:responsibility オペコードを (命令, モード) に分解する。不正な場合は DecodeFault。
def classify_opcode(opcode: int, address: int = 0) -> Tuple[I, M]:
    fixed = FIXED_OPCODES.get(opcode)
    if fixed is not None:
        return fixed

    aaa = (opcode & 0b11100000) >> 5
    bbb = (opcode & 0b00011100) >> 2
    cc = opcode & 0b11

    if opcode & 0b11111 == 0b10000:
        return BRANCHES[aaa], M.IMMEDIATE

    if cc == 0b01:
        instruction = GROUP_A_INSTRUCTIONS[aaa]
        mode = GROUP_A_MODES[bbb]
        # the one bad combination here is STA in immediate mode
        if instruction is I.STA and mode is M.IMMEDIATE:
            raise DecodeFault(address, opcode)
        return instruction, mode

    if cc == 0b10:
        instruction = GROUP_B_INSTRUCTIONS[aaa]
        mode = _group_b_mode(instruction, bbb)
        if _group_b_illegal(instruction, mode):
            raise DecodeFault(address, opcode)
        return instruction, mode

    if cc == 0b00:
        instruction = GROUP_C_INSTRUCTIONS[aaa]
        mode = _group_c_mode(aaa, bbb)
        if _group_c_illegal(instruction, mode):
            raise DecodeFault(address, opcode)
        return instruction, mode

    # cc == 11 は未ドキュメント命令。実機同様ハングとして扱う。
    raise DecodeFault(address, opcode)

# @intent:responsibility pcのオペコードをデコードし、生のオペランドをフェッチする。
def decode_opcode(opcode: int, bus: MemoryBus, pc: int) -> DecodedInstruction:
    instruction, mode = classify_opcode(opcode, pc)
    operand = None
    if mode in BYTE_OPERAND_MODES:
        operand = bus.read((pc + 1) & 0xFFFF)
    elif mode in WORD_OPERAND_MODES:
        operand = bus.read_word((pc + 1) & 0xFFFF)
    return DecodedInstruction(pc, opcode, instruction, mode, operand)

# --- Cycle tables ---

# @intent:constant オペランドを読み出すだけの命令
READ_INSTRUCTIONS = frozenset({
    I.ADC, I.AND, I.BIT, I.CMP, I.CPX, I.CPY, I.EOR, I.LDA, I.LDX, I.LDY, I.ORA, I.SBC,
})
READ_CYCLES: Dict[M, int] = {
    M.IMMEDIATE: 2, M.ZEROPAGE: 3, M.ZEROPAGE_X: 4, M.ZEROPAGE_Y: 4, M.ABSOLUTE: 4,
    M.ABSOLUTE_X: 4, M.ABSOLUTE_Y: 4, M.INDEXED_INDIRECT: 6, M.INDIRECT_INDEXED: 5,
}

# @intent:constant 読み出し-変更-書き込み命令
RMW_INSTRUCTIONS = frozenset({I.ASL, I.DEC, I.INC, I.LSR, I.ROL, I.ROR})
RMW_CYCLES: Dict[M, int] = {
    M.ACCUMULATOR: 2, M.ZEROPAGE: 5, M.ZEROPAGE_X: 6, M.ABSOLUTE: 6, M.ABSOLUTE_X: 7,
}

STORE_INSTRUCTIONS = frozenset({I.STA, I.STX, I.STY})
STORE_CYCLES: Dict[M, int] = {
    M.ZEROPAGE: 3, M.ZEROPAGE_X: 4, M.ZEROPAGE_Y: 4, M.ABSOLUTE: 4,
    M.ABSOLUTE_X: 5, M.ABSOLUTE_Y: 5, M.INDEXED_INDIRECT: 6, M.INDIRECT_INDEXED: 6,
}

FIXED_CYCLES: Dict[I, int] = {
    I.BRK: 7,
    I.JSR: 6, I.RTI: 6, I.RTS: 6,
    I.PHA: 3, I.PHP: 3,
    I.PLA: 4, I.PLP: 4,
}
for _implied in (I.CLC, I.CLD, I.CLI, I.CLV, I.DEX, I.DEY, I.INX, I.INY, I.NOP,
                 I.SEC, I.SED, I.SEI, I.TAX, I.TAY, I.TSX, I.TXS, I.TXA, I.TYA):
    FIXED_CYCLES[_implied] = 2

JMP_CYCLES: Dict[M, int] = {M.ABSOLUTE_LOCATION: 3, M.INDIRECT: 5}

BRANCH_INSTRUCTIONS = frozenset(BRANCHES)

# @intent:responsibility 読み出し命令のインデックス付きアドレスがページを跨いだ時の+1サイクル。
def _page_cross_penalty(instr: DecodedInstruction, state: Mos6502CpuState, bus: MemoryBus) -> int:
    op = instr.operand or 0
    if instr.mode is M.ABSOLUTE_X:
        return 1 if is_page_crossed(op, op + state.x) else 0
    if instr.mode is M.ABSOLUTE_Y:
        return 1 if is_page_crossed(op, op + state.y) else 0
    if instr.mode is M.INDIRECT_INDEXED:
        base_addr = bus.read_word(op)
        return 1 if is_page_crossed(base_addr, base_addr + state.y) else 0
    return 0

# @intent:responsibility 命令のサイクル数を求める。
# @intent:pre-condition taken は分岐命令の成立/不成立 (分岐以外では無視)。
def instruction_cycles(instr: DecodedInstruction, state: Mos6502CpuState, bus: MemoryBus, taken: bool = False) -> int:
    instruction = instr.instruction
    if instruction in READ_INSTRUCTIONS:
        return READ_CYCLES[instr.mode] + _page_cross_penalty(instr, state, bus)
    if instruction in RMW_INSTRUCTIONS:
        return RMW_CYCLES[instr.mode]
    if instruction in STORE_INSTRUCTIONS:
        return STORE_CYCLES[instr.mode]
    if instruction in BRANCH_INSTRUCTIONS:
        if not taken:
            return 2
        next_pc = (instr.address + 2) & 0xFFFF
        target = (next_pc + signed_byte(instr.operand or 0)) & 0xFFFF
        return 4 if is_page_crossed(next_pc, target) else 3
    if instruction is I.JMP:
        return JMP_CYCLES[instr.mode]
    return FIXED_CYCLES[instruction]

# --- Execution ---

EXECUTE_MAP: Dict[I, ExecFunc] = {
    I.LDA: load.lda, I.LDX: load.ldx, I.LDY: load.ldy,
    I.STA: load.sta, I.STX: load.stx, I.STY: load.sty,
    I.TAX: load.tax, I.TAY: load.tay, I.TXA: load.txa, I.TYA: load.tya,
    I.TSX: load.tsx, I.TXS: load.txs,

    I.ORA: alu.ora, I.AND: alu.and_, I.EOR: alu.eor, I.BIT: alu.bit,
    I.ADC: alu.adc, I.SBC: alu.sbc,
    I.CMP: alu.cmp, I.CPX: alu.cpx, I.CPY: alu.cpy,
    I.ASL: alu.asl, I.LSR: alu.lsr, I.ROL: alu.rol, I.ROR: alu.ror,
    I.INC: alu.inc, I.DEC: alu.dec,
    I.INX: alu.inx, I.DEX: alu.dex, I.INY: alu.iny, I.DEY: alu.dey,

    I.JMP: control.jmp, I.JSR: control.jsr, I.RTS: control.rts,
    I.BRK: control.brk, I.RTI: control.rti,
    I.PHA: control.pha, I.PHP: control.php, I.PLA: control.pla, I.PLP: control.plp,
    I.CLC: control.clc, I.SEC: control.sec, I.CLI: control.cli, I.SEI: control.sei,
    I.CLV: control.clv, I.CLD: control.cld, I.SED: control.sed,
    I.NOP: control.nop,
}
for _branch in BRANCHES:
    EXECUTE_MAP[_branch] = control.branch

# @intent:responsibility デコード済み命令を実行し、消費サイクル数を返す。
# @intent:pre-condition state.pc は既に命令の次を指していること。
def execute_instruction(instr: DecodedInstruction, state: Mos6502CpuState, bus: MemoryBus) -> int:
    executor = EXECUTE_MAP.get(instr.instruction)
    if executor is None:
        # INVALID はデコード時点で DecodeFault になるため、ここに来るのは不整合のみ
        raise DecodeFault(instr.address, instr.opcode)
    taken = instr.instruction in BRANCH_INSTRUCTIONS and control.branch_taken(instr, state)
    # ページ跨ぎ判定は実行前のインデックスレジスタで行う
    cycles = instruction_cycles(instr, state, bus, taken)
    executor(state, bus, instr)
    return cycles
