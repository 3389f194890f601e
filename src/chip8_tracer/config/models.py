from dataclasses import dataclass, field
from typing import List, Optional

from chip8_tracer.common.types import KeyMapping
from chip8_tracer.peripherals.keypad import DEFAULT_KEY_MAPPING, DEFAULT_QUIT_KEYS
from chip8_tracer.arch.chip8.state import DEFAULT_STACK_DEPTH

@dataclass
class MemoryConfig:
    wrap_addresses: bool = True  # Falseの場合、範囲外アクセスはAddressError

@dataclass
class TimingConfig:
    cycles_per_second: int = 700  # 0 は無制限

@dataclass
class DisplayConfig:
    scale: int = 10
    foreground: str = "#33FF66"
    background: str = "#101010"

@dataclass
class KeypadConfig:
    mapping: KeyMapping = field(default_factory=lambda: dict(DEFAULT_KEY_MAPPING))
    quit_keys: List[str] = field(default_factory=lambda: list(DEFAULT_QUIT_KEYS))

@dataclass
class SystemConfig:
    memory: MemoryConfig = field(default_factory=MemoryConfig)
    timing: TimingConfig = field(default_factory=TimingConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    keypad: KeypadConfig = field(default_factory=KeypadConfig)
    stack_depth: int = DEFAULT_STACK_DEPTH
    rng_seed: Optional[int] = None
