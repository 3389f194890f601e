# chip8_tracer/runtime/runner.py
"""
駆動ループモジュール。

入力の取り込み → 1命令の実行 → 経過時間に応じたタイマ減算 → 実行速度の調整、
を繰り返します。時計と待機関数は注入可能であり、テストでは模擬時計を用います。
ユーザーが指定した条件（ブレークポイント）で実行を一時停止する機能も提供します。
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional
import logging
import time

from chip8_tracer.common.errors import ExecutionCancelled
from chip8_tracer.core.snapshot import Snapshot
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.peripherals.timers import TickAccumulator
from chip8_tracer.runtime.machine import Machine

logger = logging.getLogger(__name__)
trace_logger = logging.getLogger("chip8_tracer.trace")

FRAME_HZ = 60
UNPACED_INSTRUCTIONS_PER_FRAME = 1000
# これ以上遅れた場合は追いつこうとせず、基準時刻を取り直す
MAX_PACING_LAG = 0.25
KEY_WAIT_POLL_INTERVAL = 0.001

# @intent:responsibility ブレークポイントの条件タイプを定義します。
class BreakpointConditionType(Enum):
    PC_MATCH = "PC_MATCH"               # プログラムカウンタが特定のアドレスに一致
    MEMORY_READ = "MEMORY_READ"         # 特定のアドレスが読み込まれた
    MEMORY_WRITE = "MEMORY_WRITE"       # 特定のアドレスに書き込まれた
    REGISTER_VALUE = "REGISTER_VALUE"   # 特定のレジスタが特定の値になった
    REGISTER_CHANGE = "REGISTER_CHANGE" # 特定のレジスタの値が変化した

# @intent:responsibility ブレークポイントをトリガーする条件を定義します。
@dataclass(frozen=True)
class BreakpointCondition:
    condition_type: BreakpointConditionType
    value: Optional[int] = None           # PC_MATCH, REGISTER_VALUEで使用
    address: Optional[int] = None         # MEMORY_READ, MEMORY_WRITEで使用
    register_name: Optional[str] = None   # REGISTER_VALUE, REGISTER_CHANGEで使用 (例: "V3", "I", "PC")
    enabled: bool = True

# @intent:responsibility レジスタ名から値を取り出します。未知の名前は None です。
def register_value(state: Chip8CpuState, name: str) -> Optional[int]:
    name = name.upper()
    if len(name) == 2 and name[0] == "V":
        try:
            return state.v[int(name[1], 16)]
        except ValueError:
            return None
    if name == "I":
        return state.i
    if name == "PC":
        return state.pc
    if name == "SP":
        return state.sp
    return None

# @intent:responsibility VMの駆動ループ、タイマの実時間駆動、ブレークポイントによる一時停止を担います。
class Runner:
    """
    1台の Machine を駆動するループ。

    run() はヘッドレス実行用のブロッキングループで、cycles_per_second に合わせて待機します。
    run_frame() はGUIのタイマコールバックから1フレーム分だけ実行するために使います。
    """
    def __init__(
        self,
        machine: Machine,
        cycles_per_second: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        input_source: Optional[Callable[[], None]] = None,
        event_pump: Optional[Callable[[], None]] = None,
    ):
        self.machine = machine
        self.cycles_per_second = (
            machine.config.timing.cycles_per_second if cycles_per_second is None else cycles_per_second
        )
        self._clock = clock
        self._sleep = sleep
        self._input_source = input_source
        self._event_pump = event_pump
        self._accumulator = TickAccumulator(FRAME_HZ)
        self._last_time = clock()
        self._breakpoints: List[BreakpointCondition] = []
        self.paused = False
        self._last_snapshot: Optional[Snapshot] = None
        machine.keypad.attach(self._pump_events, lambda: self.paused or not self.machine.cpu.running)

    @property
    def running(self) -> bool:
        return self.machine.cpu.running

    # @intent:responsibility 終了を要求します。キー入力待ち中であれば待機が中断されます。
    def stop(self) -> None:
        self.machine.cpu.stop()

    def set_input_source(self, input_source: Optional[Callable[[], None]]) -> None:
        self._input_source = input_source

    # @intent:responsibility キー入力待ちの間だけ呼び出すイベントポンプを設定します（GUIのイベントループなど）。
    def set_event_pump(self, event_pump: Optional[Callable[[], None]]) -> None:
        self._event_pump = event_pump

    # --- ブレークポイント管理 ---
    def add_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition not in self._breakpoints:
            self._breakpoints.append(condition)

    def remove_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition in self._breakpoints:
            self._breakpoints.remove(condition)

    def get_breakpoints(self) -> List[BreakpointCondition]:
        return list(self._breakpoints)

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    def pause(self) -> None:
        self.paused = True

    # @intent:responsibility 一時停止から再開します。停止中の経過時間はタイマに反映しません。
    def resume(self) -> None:
        self.paused = False
        self.resync_clock()

    def resync_clock(self) -> None:
        self._last_time = self._clock()
        self._accumulator.reset()

    # @intent:responsibility 前回呼び出しからの経過時間に応じて、タイマを60Hzで減算します。
    def service_timers(self) -> int:
        now = self._clock()
        elapsed = max(0.0, now - self._last_time)
        self._last_time = now
        ticks = self._accumulator.advance(elapsed)
        for _ in range(ticks):
            self.machine.timers.tick_60hz()
        return ticks

    # @intent:responsibility キー入力待ちの間に呼ばれ、入力を取り込みつつタイマを進めます。
    def _pump_events(self) -> None:
        if self._event_pump is not None:
            self._event_pump()
        elif self._input_source is not None:
            self._input_source()
        self.service_timers()
        self._sleep(KEY_WAIT_POLL_INTERVAL)

    # @intent:responsibility 1命令を実行し、その結果のSnapshotを返します。
    # @intent:post-condition 一時停止中のステップ実行では、停止していた時間をタイマに反映しません。
    def step(self) -> Snapshot:
        if self.paused:
            self.resync_clock()
        if self._input_source is not None:
            self._input_source()

        cpu = self.machine.cpu
        previous_state = cpu.get_state().copy() if self._needs_previous_state() else None
        snapshot = cpu.step()
        self._last_snapshot = snapshot
        self.service_timers()

        if trace_logger.isEnabledFor(logging.DEBUG):
            trace_logger.debug("%6d %s", snapshot.metadata.cycle_count, snapshot.metadata.symbol_info)

        if self._check_breakpoints(snapshot, previous_state):
            self.paused = True
            logger.info("Breakpoint hit at PC: %#05x", snapshot.state.pc)
        return snapshot

    def _needs_previous_state(self) -> bool:
        return any(
            bp.enabled and bp.condition_type == BreakpointConditionType.REGISTER_CHANGE
            for bp in self._breakpoints
        )

    def _check_breakpoints(self, snapshot: Snapshot, previous_state: Optional[Chip8CpuState]) -> bool:
        state = snapshot.state
        for bp in self._breakpoints:
            if not bp.enabled:
                continue
            if bp.condition_type == BreakpointConditionType.PC_MATCH:
                if state.pc == bp.value:
                    return True
            elif bp.condition_type == BreakpointConditionType.MEMORY_READ:
                if snapshot.read_from(bp.address):
                    return True
            elif bp.condition_type == BreakpointConditionType.MEMORY_WRITE:
                if snapshot.wrote_to(bp.address):
                    return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_VALUE:
                if bp.register_name and register_value(state, bp.register_name) == bp.value:
                    return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_CHANGE:
                if bp.register_name and previous_state is not None:
                    before = register_value(previous_state, bp.register_name)
                    if before != register_value(state, bp.register_name):
                        return True
        return False

    # @intent:responsibility 終了要求・ブレークポイント・命令数上限のいずれかまで実行を続けます。
    # @intent:post-condition 実行した命令数を返します。致命的な例外はログに記録した上で送出されます。
    def run(self, max_steps: Optional[int] = None) -> int:
        self.paused = False
        self.resync_clock()
        period = 1.0 / self.cycles_per_second if self.cycles_per_second else 0.0
        deadline = self._clock()
        executed = 0

        while self.running and not self.paused:
            if max_steps is not None and executed >= max_steps:
                break
            if not self._step_guarded():
                break
            executed += 1

            if period:
                deadline += period
                delay = deadline - self._clock()
                if delay > 0:
                    self._sleep(delay)
                elif delay < -MAX_PACING_LAG:
                    deadline = self._clock()
        return executed

    # @intent:responsibility 1フレーム（1/60秒）分の命令を実行します。GUIのタイマから呼ばれます。
    def run_frame(self) -> int:
        limit = (
            max(1, self.cycles_per_second // FRAME_HZ)
            if self.cycles_per_second else UNPACED_INSTRUCTIONS_PER_FRAME
        )
        executed = 0
        while executed < limit and self.running and not self.paused:
            if not self._step_guarded():
                break
            executed += 1
        return executed

    def _step_guarded(self) -> bool:
        try:
            self.step()
        except ExecutionCancelled:
            logger.info("Execution cancelled at PC: %#05x", self.machine.cpu.get_state().pc)
            return False
        except Exception as e:
            logger.error("Execution halted at PC %#05x: %s", self.machine.cpu.get_state().pc, e)
            raise
        return True
