# retro_arcade/loader/rom.py
"""
プログラムイメージのローダー。

イメージは ベクターROM (2048バイト) の直後に プログラムROM (6144バイト) が続く単一ファイル。
"""
import os
from typing import Tuple

from retro_arcade.core.errors import AssetLoadFault
from retro_arcade.transport.bus import MemoryBus, VECTOR_ROM_SIZE, PROGRAM_ROM_SIZE

# @intent:constant イメージ全体の必要サイズ
IMAGE_SIZE = VECTOR_ROM_SIZE + PROGRAM_ROM_SIZE

# @intent:responsibility イメージのバイト列をベクターROMとプログラムROMに分割します。
def split_program_image(data: bytes, path: str = "<memory>") -> Tuple[bytes, bytes]:
    if len(data) != IMAGE_SIZE:
        raise AssetLoadFault(path, f"expected {IMAGE_SIZE} bytes, got {len(data)}")
    return data[:VECTOR_ROM_SIZE], data[VECTOR_ROM_SIZE:]

# @intent:responsibility ファイルからイメージを読み込み、バスのROM領域に配置します。
# @intent:pre-condition 解釈開始前に呼び出すこと。失敗時は AssetLoadFault。
def load_program_image(path: str, bus: MemoryBus) -> None:
    if not os.path.isfile(path):
        raise AssetLoadFault(path, "file not found")
    try:
        with open(path, 'rb') as f:
            data = f.read()
    except OSError as e:
        raise AssetLoadFault(path, str(e)) from e
    vector_rom, program_rom = split_program_image(data, path)
    bus.load_roms(vector_rom, program_rom)
