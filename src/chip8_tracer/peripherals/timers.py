# chip8_tracer/peripherals/timers.py
"""
ディレイタイマとサウンドタイマ

2つの8bitカウンタは、命令の実行速度とは無関係に、実時間の60Hzで0に向かって減算されます。
減算は駆動ループが測定した経過時間に基づいて tick_60hz() を呼び出すことでのみ行われ、
このモジュール自身は時計を参照しません。
"""
TIMER_HZ = 60

# @intent:responsibility ディレイ/サウンドの2つのカウンタを保持します。
class TimerPair:
    def __init__(self):
        self._delay = 0
        self._sound = 0

    def set_delay(self, value: int) -> None:
        self._delay = value & 0xFF

    def get_delay(self) -> int:
        return self._delay

    def set_sound(self, value: int) -> None:
        self._sound = value & 0xFF

    def get_sound(self) -> int:
        return self._sound

    # @intent:responsibility 両カウンタを、0でなければ1だけ減算します。
    # @intent:pre-condition 呼び出しは経過時間1/60秒につき最大1回です（TickAccumulatorが保証）。
    def tick_60hz(self) -> None:
        if self._delay > 0:
            self._delay -= 1
        if self._sound > 0:
            self._sound -= 1

    # 音の生成は行わない。表示層のインジケータ用。
    @property
    def sound_active(self) -> bool:
        return self._sound > 0

    def reset(self) -> None:
        self._delay = 0
        self._sound = 0

# @intent:responsibility 測定された経過時間を、未消化の1/60秒周期の数に変換します。
class TickAccumulator:
    """
    経過時間を蓄積し、整数個の周期が溜まるたびにその数を返します。
    端数は次回に持ち越されるため、長時間の平均は正確に hz 回/秒になります。
    """
    def __init__(self, hz: int = TIMER_HZ):
        if hz <= 0:
            raise ValueError("Timer frequency must be positive.")
        self._period = 1.0 / hz
        self._pending = 0.0

    def advance(self, elapsed: float) -> int:
        if elapsed < 0:
            raise ValueError(f"Elapsed time must not be negative: {elapsed}")
        self._pending += elapsed
        ticks = int(self._pending / self._period)
        self._pending -= ticks * self._period
        return ticks

    def reset(self) -> None:
        self._pending = 0.0
