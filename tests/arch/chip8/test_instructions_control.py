import unittest

from chip8_tracer.common.errors import StackOverflowError, StackUnderflowError
from chip8_tracer.config.builder import SystemBuilder
from chip8_tracer.config.models import SystemConfig

class TestChip8ControlInstructions(unittest.TestCase):
    def setUp(self):
        self.machine = SystemBuilder().build_system(SystemConfig(stack_depth=2))
        self.cpu = self.machine.cpu
        self.bus = self.machine.bus
        self.state = self.cpu.get_state()

    def _execute(self, opcode, at=0x200):
        self.bus.write(at, opcode >> 8)
        self.bus.write(at + 1, opcode & 0xFF)
        self.state.pc = at
        return self.cpu.step()

    def test_jp(self):
        self._execute(0x1ABC)
        self.assertEqual(self.state.pc, 0xABC)

    def test_jp_to_self_loops(self):
        self._execute(0x1200)
        self.assertEqual(self.state.pc, 0x200)

    def test_call_and_ret(self):
        self._execute(0x2300)
        self.assertEqual(self.state.pc, 0x300)
        self.assertEqual(self.state.stack.frames(), (0x202,))
        self._execute(0x00EE, at=0x300)
        self.assertEqual(self.state.pc, 0x202)
        self.assertEqual(self.state.sp, 0)

    def test_ret_on_empty_stack(self):
        with self.assertRaises(StackUnderflowError) as ctx:
            self._execute(0x00EE, at=0x240)
        self.assertEqual(ctx.exception.pc, 0x240)

    def test_call_overflow(self):
        self._execute(0x2400)
        self._execute(0x2400, at=0x400)
        with self.assertRaises(StackOverflowError):
            self._execute(0x2400, at=0x400)

    def test_se_imm(self):
        self.state.v[1] = 0x33
        self._execute(0x3133)
        self.assertEqual(self.state.pc, 0x204)
        self._execute(0x3134)
        self.assertEqual(self.state.pc, 0x202)

    def test_sne_imm(self):
        self.state.v[1] = 0x33
        self._execute(0x4134)
        self.assertEqual(self.state.pc, 0x204)
        self._execute(0x4133)
        self.assertEqual(self.state.pc, 0x202)

    def test_se_reg_and_sne_reg(self):
        self.state.v[1] = 5
        self.state.v[2] = 5
        self._execute(0x5120)
        self.assertEqual(self.state.pc, 0x204)
        self._execute(0x9120)
        self.assertEqual(self.state.pc, 0x202)
        self.state.v[2] = 6
        self._execute(0x9120)
        self.assertEqual(self.state.pc, 0x204)

    def test_jp_v0(self):
        self.state.v[0] = 0x10
        self._execute(0xB300)
        self.assertEqual(self.state.pc, 0x310)

    def test_sys_is_ignored(self):
        self._execute(0x0123)
        self.assertEqual(self.state.pc, 0x202)
