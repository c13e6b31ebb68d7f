# tests/loader/test_rom_loader.py
"""
retro_arcade.loader.rom の単体テスト。
"""
import pytest

from retro_arcade.core.errors import AssetLoadFault
from retro_arcade.transport.bus import MemoryBus
from retro_arcade.loader.rom import load_program_image, split_program_image, IMAGE_SIZE

# @intent:test_suite プログラムイメージの分割と配置を検証します。

def test_image_size():
    assert IMAGE_SIZE == 8192

# @intent:test_case ベクターROM、プログラムROMの順に配置されることを検証します。
def test_load_program_image(tmp_path):
    image = bytearray(IMAGE_SIZE)
    image[0] = 0x11
    image[2047] = 0x12
    image[2048] = 0x22
    image[-1] = 0x33
    path = tmp_path / "game.rom"
    path.write_bytes(bytes(image))
    bus = MemoryBus()

    load_program_image(str(path), bus)

    assert bus.read(0x5000) == 0x11
    assert bus.read(0x57FF) == 0x12
    assert bus.read(0x6800) == 0x22
    assert bus.read(0x7FFF) == 0x33

def test_short_image(tmp_path):
    path = tmp_path / "short.rom"
    path.write_bytes(bytes(100))
    with pytest.raises(AssetLoadFault) as excinfo:
        load_program_image(str(path), MemoryBus())
    assert "expected 8192 bytes, got 100" in str(excinfo.value)

def test_missing_image(tmp_path):
    with pytest.raises(AssetLoadFault, match="file not found"):
        load_program_image(str(tmp_path / "nothing.rom"), MemoryBus())

def test_split_rejects_oversized():
    with pytest.raises(AssetLoadFault):
        split_program_image(bytes(IMAGE_SIZE + 1))

def test_split():
    vector_rom, program_rom = split_program_image(bytes(range(256)) * 32)
    assert len(vector_rom) == 2048
    assert len(program_rom) == 6144
    assert program_rom[0] == 0
