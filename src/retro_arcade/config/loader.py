import os
import yaml
from typing import Dict, Any, Optional

from .models import MachineConfig, TimingConfig, DEFAULT_ROM_PATH

CONFIG_ENV_VAR = "RETRO_ARCADE_CONFIG"
DEFAULT_CONFIG_FILE = "retro_arcade.yaml"

class ConfigLoader:
    def load_from_file(self, path: str) -> MachineConfig:
        with open(path, 'r') as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
        return self._parse_config(data or {})

    # @intent:responsibility 環境変数 → カレントディレクトリの既定ファイル → 組み込み既定値 の順で設定を解決します。
    def load_default(self, cwd: Optional[str] = None) -> MachineConfig:
        path = os.environ.get(CONFIG_ENV_VAR)
        if path:
            return self.load_from_file(path)
        candidate = os.path.join(cwd or os.getcwd(), DEFAULT_CONFIG_FILE)
        if os.path.isfile(candidate):
            return self.load_from_file(candidate)
        return MachineConfig()

    def _parse_config(self, data: Dict[str, Any]) -> MachineConfig:
        if not isinstance(data, dict):
            raise ValueError(f"Config root must be a mapping, got {type(data).__name__}")

        timing = TimingConfig(
            nmi_interval=self._parse_positive(data.get("nmi_interval", 6000), "nmi_interval"),
            clock_interval=self._parse_positive(data.get("clock_interval", 500), "clock_interval"),
            ticks_per_sleep=self._parse_positive(data.get("ticks_per_sleep", 20), "ticks_per_sleep"),
        )

        config = MachineConfig(
            rom_path=str(data.get("rom_path", DEFAULT_ROM_PATH)),
            timing=timing,
        )

        key_map = data.get("key_map")
        if key_map is not None:
            if not isinstance(key_map, dict):
                raise ValueError("key_map must be a mapping of key name to switch name")
            config.key_map = {str(k): str(v) for k, v in key_map.items()}

        return config

    def _parse_positive(self, value: Any, name: str) -> int:
        parsed = self._parse_int(value)
        if parsed <= 0:
            raise ValueError(f"{name} must be positive: {value}")
        return parsed

    # @intent:note YAMLの真偽値はintのサブクラスなので明示的に弾く。文字列は基数接頭辞 (0x, 0X など) を受け付ける。
    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            return int(value.strip(), 0)
        raise ValueError(f"Invalid integer format: {value}")
