# chip8_tracer/arch/chip8/cpu.py
"""
CHIP-8 インタプリタの中心モジュール。
"""
from typing import Dict, List, Optional, Tuple
import logging
import random

from chip8_tracer.core.snapshot import Operation
from chip8_tracer.core.cpu import AbstractCpu
from chip8_tracer.common.types import RegisterLayoutInfo, RegisterInfo
from chip8_tracer.transport.address_space import AddressSpace
from chip8_tracer.peripherals.framebuffer import Framebuffer
from chip8_tracer.peripherals.keypad import Keypad
from chip8_tracer.peripherals.timers import TimerPair
from chip8_tracer.arch.chip8.state import Chip8CpuState, CallStack, DEFAULT_STACK_DEPTH, REGISTER_COUNT
from chip8_tracer.arch.chip8.instructions import decode_opcode, execute_instruction
from chip8_tracer.arch.chip8.instructions.base import Devices, read_word
from chip8_tracer.arch.chip8 import disassembler

logger = logging.getLogger(__name__)

# @intent:responsibility CHIP-8の具体的な実行ロジック（フェッチ、デコード、実行）を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 インタプリタ。

    アドレス空間、フレームバッファ、キーパッド、タイマを排他的に所有し、
    step() ごとに1命令を実行します。
    """
    def __init__(
        self,
        bus: AddressSpace,
        framebuffer: Framebuffer,
        keypad: Keypad,
        timers: TimerPair,
        rng: Optional[random.Random] = None,
        stack_depth: int = DEFAULT_STACK_DEPTH,
    ):
        self._stack_depth = stack_depth
        self._devices = Devices(
            framebuffer=framebuffer,
            keypad=keypad,
            timers=timers,
            rng=rng if rng is not None else random.Random(),
        )
        super().__init__(bus)

    @property
    def devices(self) -> Devices:
        return self._devices

    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState(stack=CallStack(self._stack_depth))

    def _copy_state(self) -> Chip8CpuState:
        return self._state.copy()

    # @intent:responsibility PCから2バイトの命令語をビッグエンディアンでフェッチします。
    def _fetch(self) -> int:
        return read_word(self._bus, self._state.pc)

    def _decode(self, opcode: int) -> Operation:
        return decode_opcode(opcode)

    def _execute(self, operation: Operation) -> None:
        execute_instruction(operation, self._state, self._bus, self._devices)

    # @intent:responsibility UI表示用に、現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{index:X}": s.v[index] for index in range(REGISTER_COUNT)}
        registers.update({
            "I": s.i,
            "PC": s.pc,
            "SP": s.sp,
            "DT": self._devices.timers.get_delay(),
            "ST": self._devices.timers.get_sound(),
        })
        return registers

    # @intent:responsibility UIのレジスタ表示レイアウト（グループ化）を定義します。
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [RegisterInfo(f"V{index:X}", 8) for index in range(REGISTER_COUNT)]),
            RegisterLayoutInfo("Index/Pointers", [
                RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("SP", 8)
            ]),
            RegisterLayoutInfo("Timers", [
                RegisterInfo("DT", 8), RegisterInfo("ST", 8)
            ]),
        ]

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._bus, start_addr, length)
