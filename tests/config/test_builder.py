# tests/config/test_builder.py
"""
chip8_tracer.config.builderモジュールの単体テスト。
"""
from chip8_tracer.config.builder import SystemBuilder
from chip8_tracer.config.models import SystemConfig, MemoryConfig
from chip8_tracer.arch.chip8.font import FONT_DATA
from chip8_tracer.runtime.machine import Machine

# @intent:test_suite 設定からVMが正しく組み立てられることを検証します。

class TestSystemBuilder:
    def test_build_default_system(self):
        machine = SystemBuilder().build_system(SystemConfig())
        assert isinstance(machine, Machine)
        assert machine.cpu.get_state().pc == 0x200
        assert machine.cpu.get_state().stack.depth == 16
        assert machine.cpu.devices.framebuffer is machine.framebuffer
        assert machine.cpu.devices.keypad is machine.keypad
        assert machine.cpu.devices.timers is machine.timers

    # @intent:test_case_font フォントがROM領域に常駐し、プログラムから上書きできないことを検証します。
    def test_font_is_read_only(self):
        machine = SystemBuilder().build_system(SystemConfig())
        bus = machine.bus
        assert bytes(bus.peek(a) for a in range(len(FONT_DATA))) == FONT_DATA
        bus.write(0x000, 0x00)
        assert bus.peek(0x000) == FONT_DATA[0]
        bus.write(0x050, 0x12)
        assert bus.peek(0x050) == 0x12

    def test_wrap_policy_is_applied(self):
        config = SystemConfig(memory=MemoryConfig(wrap_addresses=False))
        machine = SystemBuilder().build_system(config)
        assert machine.bus.wrap_addresses is False

    def test_stack_depth_is_applied(self):
        machine = SystemBuilder().build_system(SystemConfig(stack_depth=4))
        assert machine.cpu.get_state().stack.depth == 4

    def test_seed_makes_rng_reproducible(self):
        a = SystemBuilder().build_system(SystemConfig(rng_seed=5))
        b = SystemBuilder().build_system(SystemConfig(rng_seed=5))
        assert a.cpu.devices.rng.random() == b.cpu.devices.rng.random()
