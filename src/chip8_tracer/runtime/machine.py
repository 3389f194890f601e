# chip8_tracer/runtime/machine.py
"""
仮想マシン全体を束ねるモジュール。

CPU・アドレス空間・フレームバッファ・キーパッド・タイマは VM インスタンスごとに一度だけ生成され、
インスタンスが終了するまで破棄されません。
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union
import logging

from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.config.models import SystemConfig
from chip8_tracer.loader.loader import RomLoader
from chip8_tracer.peripherals.framebuffer import Framebuffer
from chip8_tracer.peripherals.keypad import Keypad
from chip8_tracer.peripherals.timers import TimerPair
from chip8_tracer.transport.address_space import AddressSpace

logger = logging.getLogger(__name__)

# @intent:responsibility 1台のVMを構成する全ての部品と、ロード済みROMイメージを保持します。
@dataclass
class Machine:
    cpu: Chip8Cpu
    bus: AddressSpace
    framebuffer: Framebuffer
    keypad: Keypad
    timers: TimerPair
    config: SystemConfig = field(default_factory=SystemConfig)
    rom_image: Optional[bytes] = None

    def load_rom(self, file_path: Union[str, Path]) -> int:
        size = self.load_bytes(RomLoader().read_rom(file_path))
        logger.info("Loaded %d bytes from %s", size, file_path)
        return size

    def load_bytes(self, data: bytes) -> int:
        size = RomLoader().load_bytes(data, self.bus)
        self.rom_image = bytes(data)
        return size

    # @intent:responsibility 電源投入直後の状態に戻し、ロード済みのROMを再配置します。
    def reset(self) -> None:
        self.bus.clear_ram()
        self.framebuffer.clear()
        self.keypad.release_all()
        self.timers.reset()
        self.cpu.reset()
        if self.rom_image is not None:
            RomLoader().load_bytes(self.rom_image, self.bus)
