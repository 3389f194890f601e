import unittest

from chip8_tracer.common.errors import ExecutionCancelled
from chip8_tracer.config.builder import SystemBuilder
from chip8_tracer.config.models import SystemConfig

class TestChip8PeripheralInstructions(unittest.TestCase):
    def setUp(self):
        self.machine = SystemBuilder().build_system(SystemConfig())
        self.cpu = self.machine.cpu
        self.bus = self.machine.bus
        self.framebuffer = self.machine.framebuffer
        self.keypad = self.machine.keypad
        self.state = self.cpu.get_state()

    def _execute(self, opcode):
        self.bus.write(0x200, opcode >> 8)
        self.bus.write(0x201, opcode & 0xFF)
        self.state.pc = 0x200
        return self.cpu.step()

    def test_cls(self):
        self.framebuffer.draw_sprite(b"\xff", 0, 0)
        self._execute(0x00E0)
        self.assertEqual(self.framebuffer.snapshot(), bytes(256))

    def test_drw_font_glyph(self):
        self.state.i = 0x000 # "0"
        self.state.v[1] = 8
        self.state.v[2] = 4
        self._execute(0xD125)
        self.assertEqual(self.state.vf, 0)
        self.assertTrue(self.framebuffer.is_lit(8, 4))
        self.assertTrue(self.framebuffer.is_lit(11, 4))
        self.assertFalse(self.framebuffer.is_lit(9, 5))
        self.assertTrue(self.framebuffer.is_lit(11, 8))

    def test_drw_collision_sets_vf(self):
        self.state.i = 0x000
        self._execute(0xD015)
        self._execute(0xD015)
        self.assertEqual(self.state.vf, 1)
        self.assertEqual(self.framebuffer.snapshot(), bytes(256))

    def test_drw_zero_rows(self):
        self.state.vf = 1
        self._execute(0xD010)
        self.assertEqual(self.state.vf, 0)
        self.assertEqual(self.framebuffer.snapshot(), bytes(256))

    def test_skp(self):
        self.state.v[3] = 0xE
        self.keypad.set_key(0xE, True)
        self._execute(0xE39E)
        self.assertEqual(self.state.pc, 0x204)
        self.keypad.set_key(0xE, False)
        self._execute(0xE39E)
        self.assertEqual(self.state.pc, 0x202)

    def test_sknp(self):
        self.state.v[3] = 0x1
        self._execute(0xE3A1)
        self.assertEqual(self.state.pc, 0x204)
        self.keypad.set_key(0x1, True)
        self._execute(0xE3A1)
        self.assertEqual(self.state.pc, 0x202)

    def test_skp_uses_low_nibble(self):
        self.state.v[3] = 0x25
        self.keypad.set_key(0x5, True)
        self._execute(0xE39E)
        self.assertEqual(self.state.pc, 0x204)

    def test_ld_vx_k(self):
        self.keypad.attach(lambda: self.keypad.set_key(0x9, True))
        self._execute(0xF40A)
        self.assertEqual(self.state.v[4], 0x9)
        self.assertEqual(self.state.pc, 0x202)

    def test_ld_vx_k_cancel_rewinds_pc(self):
        self.keypad.attach(lambda: None, lambda: True)
        with self.assertRaises(ExecutionCancelled):
            self._execute(0xF40A)
        self.assertEqual(self.state.pc, 0x200)
        self.assertEqual(self.state.v[4], 0)
