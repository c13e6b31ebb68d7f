# retro_arcade/io/sound.py
"""
サウンド信号のデコード。

プログラムが書き込むサウンド系ラッチを外側のループからポーリングし、
値の変化 (立ち上がり/立ち下がり) から効果音イベントを生成します。
ラッチは消費されず、再生は行いません。
"""
from enum import Enum
from typing import Dict, List

from retro_arcade.transport.bus import MemoryBus

# @intent:constant 大型UFOを選択する saucer-select の値
LARGE_SAUCER_SELECT = 160
# @intent:constant ボーナス音を再度鳴らせるようになるまでのポーリング回数
BONUS_REARM_POLLS = 10000
# @intent:constant thump がこの値を超えて立ち上がった時に鳴る。16なら低音
THUMP_THRESHOLD = 4
THUMP_LOW_VALUE = 16

class SoundEvent(Enum):
    FIRE = "fire"
    EXPLOSION = "explosion"
    LARGE_SAUCER_START = "large_saucer_start"
    SMALL_SAUCER_START = "small_saucer_start"
    SAUCER_STOP = "saucer_stop"
    SAUCER_FIRE = "saucer_fire"
    EXTRA_LIFE = "extra_life"
    THUMP_LOW = "thump_low"
    THUMP_HIGH = "thump_high"
    THRUST_START = "thrust_start"
    THRUST_STOP = "thrust_stop"

# @intent:responsibility サウンドラッチの前回値を保持し、変化をイベントに変換します。
class SoundMonitor:
    def __init__(self):
        self._last: Dict[str, int] = {
            "fire": 0, "explosion": 0, "saucer": 0, "saucer_fire": 0, "thump": 0, "thrust": 0,
        }
        self._bonus_countdown = 0

    # @intent:responsibility 立ち上がり (前回値より大きい) を検出し、前回値を更新します。
    def _rising(self, key: str, signal: int) -> bool:
        rose = self._last[key] < signal
        self._last[key] = signal
        return rose

    # @intent:responsibility 現在のラッチ値を読み、発生したイベントのリストを返します。
    def poll(self, bus: MemoryBus) -> List[SoundEvent]:
        io = bus.io
        events: List[SoundEvent] = []

        if self._rising("fire", io.snd_fire):
            events.append(SoundEvent.FIRE)

        if self._rising("explosion", io.snd_explosion & 0x3F):
            events.append(SoundEvent.EXPLOSION)

        previous = self._last["saucer"]
        if previous < io.snd_saucer:
            if io.snd_saucer_select == LARGE_SAUCER_SELECT:
                events.append(SoundEvent.LARGE_SAUCER_START)
            else:
                events.append(SoundEvent.SMALL_SAUCER_START)
        elif previous > io.snd_saucer:
            events.append(SoundEvent.SAUCER_STOP)
        self._last["saucer"] = io.snd_saucer

        if self._rising("saucer_fire", io.snd_saucer_fire):
            events.append(SoundEvent.SAUCER_FIRE)

        if io.snd_bonus > 0 and self._bonus_countdown == 0:
            events.append(SoundEvent.EXTRA_LIFE)
            self._bonus_countdown = BONUS_REARM_POLLS
        if self._bonus_countdown > 0:
            self._bonus_countdown -= 1

        if io.snd_thump > THUMP_THRESHOLD and self._last["thump"] <= THUMP_THRESHOLD:
            if io.snd_thump == THUMP_LOW_VALUE:
                events.append(SoundEvent.THUMP_LOW)
            else:
                events.append(SoundEvent.THUMP_HIGH)
        self._last["thump"] = io.snd_thump

        previous = self._last["thrust"]
        if previous < io.snd_thrust:
            events.append(SoundEvent.THRUST_START)
        elif previous > io.snd_thrust:
            events.append(SoundEvent.THRUST_STOP)
        self._last["thrust"] = io.snd_thrust

        return events
