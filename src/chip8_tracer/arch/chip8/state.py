# chip8_tracer/arch/chip8/state.py
"""
CHIP-8 固有の状態定義。
"""
from dataclasses import dataclass, field
from typing import List, Tuple

from chip8_tracer.core.state import CpuState
from chip8_tracer.common.errors import StackOverflowError, StackUnderflowError

PROGRAM_START = 0x200
REGISTER_COUNT = 16
FLAG_REGISTER = 0xF
DEFAULT_STACK_DEPTH = 16

# @intent:responsibility サブルーチンの戻りアドレスを保持する固定深さのスタックです。
# @intent:rationale 汎用リストを継承せず、push/pop/peekのみを公開します。
#                  空でのpopと満杯でのpushは、不正なプログラムを示すため致命的な例外とします。
class CallStack:
    def __init__(self, depth: int = DEFAULT_STACK_DEPTH):
        if depth <= 0:
            raise ValueError("Call stack depth must be positive.")
        self._depth = depth
        self._frames: List[int] = []

    @property
    def depth(self) -> int:
        return self._depth

    def push(self, address: int, pc: int = 0) -> None:
        if len(self._frames) >= self._depth:
            raise StackOverflowError(pc, self._depth)
        self._frames.append(address & 0xFFFF)

    def pop(self, pc: int = 0) -> int:
        if not self._frames:
            raise StackUnderflowError(pc)
        return self._frames.pop()

    def peek(self) -> int:
        if not self._frames:
            raise IndexError("peek on empty call stack")
        return self._frames[-1]

    def clear(self) -> None:
        self._frames.clear()

    # 最下段から順に並んだ戻りアドレス
    def frames(self) -> Tuple[int, ...]:
        return tuple(self._frames)

    def copy(self) -> "CallStack":
        clone = CallStack(self._depth)
        clone._frames = list(self._frames)
        return clone

    def __len__(self) -> int:
        return len(self._frames)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CallStack):
            return NotImplemented
        return self._depth == other._depth and self._frames == other._frames

    def __repr__(self) -> str:
        return f"CallStack({[f'{a:#05x}' for a in self._frames]}, depth={self._depth})"

# @intent:responsibility CHIP-8の全てのレジスタ（V0-VF, I, PC）とコールスタックを保持します。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 CPUのレジスタ状態を保持するデータクラス。
    VF（v[15]）はキャリー/ボロー/シフトアウト/衝突の通知に使われます。
    """
    pc: int = PROGRAM_START
    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    i: int = 0x000 # Index Register
    stack: CallStack = field(default_factory=CallStack)

    @property
    def sp(self) -> int:
        return len(self.stack)

    @property
    def vf(self) -> int:
        return self.v[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[FLAG_REGISTER] = value & 0xFF

    # @intent:responsibility Snapshot用の独立したコピーを生成します。
    def copy(self) -> "Chip8CpuState":
        return Chip8CpuState(pc=self.pc, v=list(self.v), i=self.i, stack=self.stack.copy())
