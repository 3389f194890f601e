# tests/peripherals/test_timers.py
"""
chip8_tracer.peripherals.timersモジュールの単体テスト。
"""
import pytest

from chip8_tracer.peripherals.timers import TimerPair, TickAccumulator

class TestTimerPair:
    # @intent:test_case_tick 0でないカウンタだけが1ずつ減算され、0で止まります。
    def test_tick_decrements_to_zero(self):
        timers = TimerPair()
        timers.set_delay(2)
        timers.set_sound(1)
        timers.tick_60hz()
        assert timers.get_delay() == 1
        assert timers.get_sound() == 0
        timers.tick_60hz()
        timers.tick_60hz()
        assert timers.get_delay() == 0
        assert timers.get_sound() == 0

    def test_values_are_masked_to_8_bits(self):
        timers = TimerPair()
        timers.set_delay(0x1FF)
        assert timers.get_delay() == 0xFF

    def test_sound_active(self):
        timers = TimerPair()
        assert not timers.sound_active
        timers.set_sound(3)
        assert timers.sound_active
        timers.reset()
        assert not timers.sound_active
        assert timers.get_delay() == 0

class TestTickAccumulator:
    # @intent:test_case_accumulate 端数は持ち越され、1/60秒ごとに1ティックになります。
    def test_remainder_carries_over(self):
        acc = TickAccumulator(60)
        assert acc.advance(0.01) == 0
        assert acc.advance(0.01) == 1
        assert acc.advance(0.5) == 30

    def test_many_small_steps_average_to_60hz(self):
        acc = TickAccumulator(60)
        total = sum(acc.advance(0.001) for _ in range(10000))
        assert 599 <= total <= 600

    def test_negative_elapsed_rejected(self):
        with pytest.raises(ValueError):
            TickAccumulator().advance(-0.1)

    def test_invalid_frequency(self):
        with pytest.raises(ValueError):
            TickAccumulator(0)

    def test_reset_discards_remainder(self):
        acc = TickAccumulator(60)
        acc.advance(0.015)
        acc.reset()
        assert acc.advance(0.015) == 0
