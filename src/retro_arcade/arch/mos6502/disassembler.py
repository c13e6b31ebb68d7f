# src/retro_arcade/arch/mos6502/disassembler.py
"""
MOS 6502 逆アセンブラ。
"""
from typing import List, Tuple

from retro_arcade.core.errors import DecodeFault
from retro_arcade.transport.bus import MemoryBus
from retro_arcade.arch.mos6502.instructions.maps import decode_opcode

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルする。
def disassemble(bus: MemoryBus, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    メモリを解析し、(アドレス, HEX, ニーモニック) のリストを返す。
    デコードできないバイトは `DB $xx` として1バイトずつ進める。
    """
    results = []
    current_addr = start_addr
    end_addr = start_addr + length

    while current_addr < end_addr:
        addr = current_addr & 0xFFFF
        opcode = bus.read(addr)
        try:
            instr = decode_opcode(opcode, bus, addr)
        except DecodeFault:
            results.append((addr, f"{opcode:02X}", f"DB ${opcode:02X}"))
            current_addr += 1
            continue

        hex_str = " ".join(f"{b:02X}" for b in [opcode] + instr.operand_bytes)
        mnemonic_full = f"{instr.instruction.value} {instr.operand_string()}".strip()

        results.append((addr, hex_str, mnemonic_full))
        current_addr += instr.length

    return results
