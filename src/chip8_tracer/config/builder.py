import random

from chip8_tracer.transport.address_space import AddressSpace, RAM, ROM
from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.arch.chip8.font import FONT_BASE, FONT_END, install_font
from chip8_tracer.peripherals.framebuffer import Framebuffer
from chip8_tracer.peripherals.keypad import Keypad
from chip8_tracer.peripherals.timers import TimerPair
from chip8_tracer.runtime.machine import Machine
from .models import SystemConfig

# @intent:responsibility システム構成（Config）に基づいて、アドレス空間・周辺機器・CPUを生成・接続します。
class SystemBuilder:
    def build_system(self, config: SystemConfig) -> Machine:
        bus = self.build_address_space(config)

        framebuffer = Framebuffer()
        keypad = Keypad()
        timers = TimerPair()
        rng = random.Random(config.rng_seed)

        cpu = Chip8Cpu(
            bus,
            framebuffer,
            keypad,
            timers,
            rng=rng,
            stack_depth=config.stack_depth,
        )
        return Machine(
            cpu=cpu,
            bus=bus,
            framebuffer=framebuffer,
            keypad=keypad,
            timers=timers,
            config=config,
        )

    # @intent:responsibility フォントROM(0x000-0x04F)とRAM(0x050-0xFFF)からなるアドレス空間を構築します。
    def build_address_space(self, config: SystemConfig) -> AddressSpace:
        bus = AddressSpace(wrap_addresses=config.memory.wrap_addresses)
        bus.register_device(FONT_BASE, FONT_END, ROM(FONT_END - FONT_BASE + 1))
        bus.register_device(FONT_END + 1, bus.SIZE - 1, RAM(bus.SIZE - FONT_END - 1))
        install_font(bus)
        return bus
