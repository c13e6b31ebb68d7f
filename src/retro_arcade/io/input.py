# retro_arcade/io/input.py
"""
キー入力からスイッチラッチへのマッピング。
"""
from typing import Dict, Optional

from retro_arcade.transport.bus import MemoryBus, SWITCH_NAMES

# @intent:constant 既定のキー割り当て (キー名 -> スイッチ名)
DEFAULT_KEY_MAP: Dict[str, str] = {
    "S": "start",
    "Space": "fire",
    "Left": "rotate_left",
    "Right": "rotate_right",
    "Up": "thrust",
    "Shift": "hyperspace",
}

# @intent:responsibility キー名をスイッチ名に対応付け、バスのスイッチラッチを更新します。
class KeyMap:
    # @intent:pre-condition mapping の値は全て既知のスイッチ名であること。
    def __init__(self, mapping: Optional[Dict[str, str]] = None):
        self._mapping = dict(DEFAULT_KEY_MAP if mapping is None else mapping)
        for key, switch in self._mapping.items():
            if switch not in SWITCH_NAMES:
                raise ValueError(f"Unknown switch '{switch}' for key '{key}'.")

    def switch_for(self, key_name: str) -> Optional[str]:
        return self._mapping.get(key_name)

    # @intent:responsibility キーの押下/解放をスイッチに反映します。割り当てのないキーは無視し False を返します。
    def handle_key(self, key_name: str, pressed: bool, bus: MemoryBus) -> bool:
        switch = self._mapping.get(key_name)
        if switch is None:
            return False
        bus.set_switch(switch, pressed)
        return True
