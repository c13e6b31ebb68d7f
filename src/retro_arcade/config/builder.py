from dataclasses import dataclass
from typing import Optional

from retro_arcade.transport.bus import MemoryBus
from retro_arcade.arch.mos6502.cpu import Mos6502Cpu
from retro_arcade.arch.dvg.processor import VectorProcessor
from retro_arcade.display.renderer import Renderer
from retro_arcade.machine.scheduler import Scheduler
from retro_arcade.loader.rom import load_program_image
from retro_arcade.io.input import KeyMap
from retro_arcade.io.sound import SoundMonitor
from retro_arcade.debugger.tracer import Tracer
from .models import MachineConfig

# @intent:responsibility 1台分の基板を構成する部品の集合。
@dataclass
class Machine:
    bus: MemoryBus
    cpu: Mos6502Cpu
    dvg: VectorProcessor
    scheduler: Scheduler
    key_map: KeyMap
    sound: SoundMonitor
    config: MachineConfig

# @intent:responsibility 設定（Config）に基づいて Bus、CPU、DVG、スケジューラを生成・接続します。
class MachineBuilder:
    # @intent:pre-condition load_rom=True の場合、config.rom_path が有効なイメージを指していること。
    def build(self, config: MachineConfig, renderer: Renderer, load_rom: bool = True,
              tracer: Optional[Tracer] = None) -> Machine:
        bus = MemoryBus()
        if load_rom:
            load_program_image(config.rom_path, bus)

        if tracer is None and config.debug:
            tracer = Tracer()

        cpu = Mos6502Cpu(bus)
        dvg = VectorProcessor(bus, renderer, tracer=tracer)
        scheduler = Scheduler(
            cpu, dvg, bus,
            nmi_interval=config.timing.nmi_interval,
            clock_interval=config.timing.clock_interval,
            tracer=tracer,
        )

        # リセットはROM配置後に行う（リセットベクタがROM上にあるため）
        cpu.reset()

        return Machine(
            bus=bus,
            cpu=cpu,
            dvg=dvg,
            scheduler=scheduler,
            key_map=KeyMap(config.key_map),
            sound=SoundMonitor(),
            config=config,
        )
