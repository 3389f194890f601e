import yaml
from typing import Any, Dict

from .models import SystemConfig, MemoryConfig, TimingConfig, DisplayConfig, KeypadConfig

class ConfigLoader:
    def load_from_file(self, path: str) -> SystemConfig:
        with open(path, 'r') as f:
            return self.load_from_string(f.read())

    def load_from_string(self, text: str) -> SystemConfig:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(f"Malformed YAML configuration: {e}") from e
        return self._parse_config(data or {})

    def _parse_config(self, data: Dict[str, Any]) -> SystemConfig:
        if not isinstance(data, dict):
            raise ValueError(f"Config root must be a mapping, got {type(data).__name__}")

        memory_data = self._section(data, "memory")
        memory = MemoryConfig(
            wrap_addresses=bool(memory_data.get("wrap_addresses", True))
        )

        timing_data = self._section(data, "timing")
        cycles = self._parse_int(timing_data.get("cycles_per_second", 700))
        if cycles < 0:
            raise ValueError(f"cycles_per_second must not be negative: {cycles}")
        timing = TimingConfig(cycles_per_second=cycles)

        display_data = self._section(data, "display")
        scale = self._parse_int(display_data.get("scale", 10))
        if scale <= 0:
            raise ValueError(f"Display scale must be positive: {scale}")
        display = DisplayConfig(
            scale=scale,
            foreground=display_data.get("foreground", DisplayConfig.foreground),
            background=display_data.get("background", DisplayConfig.background),
        )

        keypad = KeypadConfig()
        keypad_data = self._section(data, "keypad")
        if "mapping" in keypad_data:
            # YAMLでは 1: 0x1 のように数字キーが整数として読まれるため、キー名は文字列化する
            keypad.mapping = {
                str(name): self._parse_key_index(index)
                for name, index in self._section(keypad_data, "mapping").items()
            }
        if "quit_keys" in keypad_data:
            quit_keys = keypad_data["quit_keys"]
            if not isinstance(quit_keys, list):
                raise ValueError(f"keypad.quit_keys must be a list, got {type(quit_keys).__name__}")
            keypad.quit_keys = [str(name) for name in quit_keys]

        stack_depth = self._parse_int(data.get("stack_depth", 16))
        if stack_depth <= 0:
            raise ValueError(f"stack_depth must be positive: {stack_depth}")
        seed = data.get("rng_seed")
        return SystemConfig(
            memory=memory,
            timing=timing,
            display=display,
            keypad=keypad,
            stack_depth=stack_depth,
            rng_seed=None if seed is None else self._parse_int(seed),
        )

    # 値を持たないセクション（"memory:" のみ）は空として扱う
    def _section(self, data: Dict[str, Any], name: str) -> Dict[str, Any]:
        section = data.get(name)
        if section is None:
            return {}
        if not isinstance(section, dict):
            raise ValueError(f"Config section '{name}' must be a mapping, got {type(section).__name__}")
        return section

    def _parse_key_index(self, value: Any) -> int:
        index = self._parse_int(value)
        if not 0 <= index <= 0xF:
            raise ValueError(f"Keypad index out of range 0x0-0xF: {value}")
        return index

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            if value.lower().startswith("0x"):
                return int(value, 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")
