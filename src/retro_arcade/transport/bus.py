# retro_arcade/transport/bus.py
"""
Transport Layer (共通バス)

このモジュールは、アーケード基板の16bitアドレス空間を抽象化し、
読み書きアクセスを RAM / ROM / メモリマップドI/O に委譲する責務を負います。

アドレスデコードは不完全であり、全てのアドレスは下位15bitにマスクされてから
ディスパッチされます（0x8000以降は0x0000以降のミラー）。
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Tuple

# @intent:constant アドレスデコードで有効なビット。上位1bitは無視されミラーを生む。
ADDRESS_MASK = 0x7FFF

# @intent:constant 固定メモリ領域 (マスク後アドレス)
WORK_RAM_START, WORK_RAM_END = 0x0000, 0x03FF
VECTOR_RAM_START, VECTOR_RAM_END = 0x4000, 0x4FFF
VECTOR_ROM_START, VECTOR_ROM_END = 0x5000, 0x57FF
PROGRAM_ROM_START, PROGRAM_ROM_END = 0x6800, 0x7FFF

VECTOR_ROM_SIZE = VECTOR_ROM_END - VECTOR_ROM_START + 1    # 2048
PROGRAM_ROM_SIZE = PROGRAM_ROM_END - PROGRAM_ROM_START + 1  # 6144

# @intent:constant スイッチ/ラッチの論理値
LATCH_ACTIVE = 0xFF
LATCH_INACTIVE = 0x00

# @intent:responsibility バスの抽象デバイスインターフェースを定義します。
class Device(ABC):
    """
    バスに接続されるデバイスの抽象基底クラス。
    アドレスはデバイス内でのオフセットとして扱われます。
    """
    @abstractmethod
    def read(self, address: int) -> int:
        pass

    @abstractmethod
    def write(self, address: int, data: int) -> None:
        pass

# @intent:responsibility 固定サイズの読み書き可能メモリを提供します。
class RAM(Device):
    """
    固定サイズのRAMデバイス。実行中にリサイズされることはありません。
    """
    # @intent:pre-condition sizeは正の整数である必要があります。
    def __init__(self, size: int):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("RAM size must be a positive integer.")
        self._memory = bytearray(size)
        self._size = size

    def read(self, address: int) -> int:
        return self._memory[address]

    def write(self, address: int, data: int) -> None:
        self._memory[address] = data & 0xFF

# @intent:responsibility 読み込み専用メモリ(ROM)の機能を提供します。
class ROM(RAM):
    """
    読み込み専用メモリデバイス。
    バス経由の書き込みは実機同様に無視されます。内容の初期化には load_data / load_bytes を使用します。
    """
    def write(self, address: int, data: int) -> None:
        # Intentional: ROM writes are ignored as per hardware behavior.
        pass

    # @intent:responsibility ROMの内容を初期化するためのバックドアメソッドです。
    def load_data(self, address: int, data: int) -> None:
        super().write(address, data)

    # @intent:responsibility ROMイメージ全体を先頭から書き込みます。
    def load_bytes(self, data: bytes) -> None:
        if len(data) > self._size:
            raise ValueError(f"Image of {len(data)} bytes does not fit in ROM of size {self._size}.")
        self._memory[:len(data)] = data

# @intent:responsibility 名前付きのI/Oラッチ群（スイッチ、サウンド信号、DVG制御）を保持します。
@dataclass
class MappedIo:
    """
    メモリマップドI/Oラッチ。各ラッチは1バイトで、0x00=非アクティブ、0xFF=アクティブ。
    サウンド系ラッチはプログラムが書き込み、外部のオーディオ側がポーリングします（消費はしない）。
    """
    clock: int = 0          # 0x2001 3kHzクロック
    halt: int = 0           # 0x2002 DVG動作中フラグ
    sw_hyperspace: int = 0  # 0x2003
    sw_fire: int = 0        # 0x2004
    sw_start: int = 0       # 0x2403
    sw_thrust: int = 0      # 0x2405
    sw_rotate_right: int = 0  # 0x2406
    sw_rotate_left: int = 0   # 0x2407
    go_dvg: int = 0         # 0x3000 フレーム開始
    snd_explosion: int = 0  # 0x3600
    snd_thump: int = 0      # 0x3A00
    snd_saucer: int = 0     # 0x3C00
    snd_saucer_fire: int = 0    # 0x3C01
    snd_saucer_select: int = 0  # 0x3C02
    snd_thrust: int = 0     # 0x3C03
    snd_fire: int = 0       # 0x3C04
    snd_bonus: int = 0      # 0x3C05

# @intent:constant 読み出し側I/Oアドレスマップ (マスク後アドレス -> ラッチ名)
IO_READ_MAP: Dict[int, str] = {
    0x2001: "clock",
    0x2002: "halt",
    0x2003: "sw_hyperspace",
    0x2004: "sw_fire",
    0x2403: "sw_start",
    0x2405: "sw_thrust",
    0x2406: "sw_rotate_right",
    0x2407: "sw_rotate_left",
}

# @intent:constant 書き込み側I/Oアドレスマップ
IO_WRITE_MAP: Dict[int, str] = {
    0x2001: "clock",
    0x3000: "go_dvg",
    0x3600: "snd_explosion",
    0x3A00: "snd_thump",
    0x3C00: "snd_saucer",
    0x3C01: "snd_saucer_fire",
    0x3C02: "snd_saucer_select",
    0x3C03: "snd_thrust",
    0x3C04: "snd_fire",
    0x3C05: "snd_bonus",
}

# @intent:constant 入力側から操作できるスイッチ名 -> ラッチ名
SWITCH_NAMES: Dict[str, str] = {
    "hyperspace": "sw_hyperspace",
    "fire": "sw_fire",
    "start": "sw_start",
    "thrust": "sw_thrust",
    "rotate_right": "sw_rotate_right",
    "rotate_left": "sw_rotate_left",
}

# @intent:responsibility アドレス空間を管理し、RAM/ROM/I/Oへのアクセスをディスパッチする共通バス。
# @intent:rationale read/write は16bit全域で定義された全関数であり、例外を送出しません。
class MemoryBus:
    """
    ワークRAM、ベクターRAM、ベクターROM、プログラムROM、および I/O ラッチを保持するバス。
    未マップ領域の読み出しは0、書き込みは無視されます。
    """
    def __init__(self):
        self.work_ram = RAM(WORK_RAM_END - WORK_RAM_START + 1)
        self.vector_ram = RAM(VECTOR_RAM_END - VECTOR_RAM_START + 1)
        self.vector_rom = ROM(VECTOR_ROM_SIZE)
        self.program_rom = ROM(PROGRAM_ROM_SIZE)
        self.io = MappedIo()
        # メモリマップ: (start_address, end_address, device) のタプルリスト
        self._memory_map: List[Tuple[int, int, Device]] = [
            (WORK_RAM_START, WORK_RAM_END, self.work_ram),
            (VECTOR_RAM_START, VECTOR_RAM_END, self.vector_ram),
            (VECTOR_ROM_START, VECTOR_ROM_END, self.vector_rom),
            (PROGRAM_ROM_START, PROGRAM_ROM_END, self.program_rom),
        ]

    # @intent:responsibility マスク後のアドレスに対応するデバイスとオフセットを検索します。
    def _find_device(self, address: int):
        for start, end, device in self._memory_map:
            if start <= address <= end:
                return device, address - start
        return None, 0

    def read(self, address: int) -> int:
        address &= ADDRESS_MASK
        device, offset = self._find_device(address)
        if device is not None:
            return device.read(offset)
        name = IO_READ_MAP.get(address)
        if name is None:
            return 0
        return getattr(self.io, name)

    def write(self, address: int, data: int) -> None:
        address &= ADDRESS_MASK
        device, offset = self._find_device(address)
        if device is not None:
            device.write(offset, data)
            return
        name = IO_WRITE_MAP.get(address)
        if name is not None:
            setattr(self.io, name, data & 0xFF)

    # @intent:responsibility リトルエンディアンの16bitワードを読み出します。
    def read_word(self, address: int) -> int:
        return self.read(address) | (self.read((address + 1) & 0xFFFF) << 8)

    # @intent:responsibility 入力側のスイッチ状態を設定します。
    # @intent:pre-condition nameは SWITCH_NAMES のいずれかである必要があります。
    def set_switch(self, name: str, active: bool) -> None:
        latch = SWITCH_NAMES.get(name)
        if latch is None:
            raise KeyError(f"Unknown switch '{name}'.")
        setattr(self.io, latch, LATCH_ACTIVE if active else LATCH_INACTIVE)

    # @intent:responsibility スケジューラが参照する「フレーム開始」フラグ。
    @property
    def frame_requested(self) -> bool:
        return self.io.go_dvg != 0

    # @intent:responsibility ROMイメージをベクターROMとプログラムROMへ配置します。
    def load_roms(self, vector_rom: bytes, program_rom: bytes) -> None:
        self.vector_rom.load_bytes(vector_rom)
        self.program_rom.load_bytes(program_rom)
