from dataclasses import dataclass, field
from typing import Dict

from retro_arcade.io.input import DEFAULT_KEY_MAP

DEFAULT_ROM_PATH = "assets/asteroids.rom"

@dataclass
class TimingConfig:
    nmi_interval: int = 6000    # NMI間隔 (CPUサイクル)
    clock_interval: int = 500   # クロックラッチ1tickのサイクル数 (3kHz)
    ticks_per_sleep: int = 20   # 1回のスリープまでにまとめて実行するtick数

@dataclass
class MachineConfig:
    rom_path: str = DEFAULT_ROM_PATH
    timing: TimingConfig = field(default_factory=TimingConfig)
    key_map: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_KEY_MAP))
    debug: bool = False
