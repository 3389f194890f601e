# tests/peripherals/test_keypad.py
"""
chip8_tracer.peripherals.keypadモジュールの単体テスト。
"""
import pytest

from chip8_tracer.common.errors import ExecutionCancelled
from chip8_tracer.peripherals.keypad import Keypad, KeyMap

# @intent:test_suite キー状態の管理、エッジトリガのキー入力待ち、キーマップを検証します。

class TestKeypad:
    def test_set_and_query(self):
        keypad = Keypad()
        keypad.set_key(0xA, True)
        assert keypad.is_pressed(0xA)
        assert keypad.state().count(True) == 1
        keypad.release_all()
        assert not keypad.is_pressed(0xA)

    def test_index_out_of_range(self):
        keypad = Keypad()
        with pytest.raises(IndexError):
            keypad.set_key(16, True)
        with pytest.raises(IndexError):
            keypad.is_pressed(-1)

    def test_wait_without_pump(self):
        with pytest.raises(RuntimeError):
            Keypad().wait_for_any_key()

    # @intent:test_case_wait イベントポンプで押されたキーの番号が返されます。
    def test_wait_returns_pressed_key(self):
        keypad = Keypad()
        events = iter([None, None, 0x7])

        def pump():
            key = next(events)
            if key is not None:
                keypad.set_key(key, True)

        keypad.attach(pump)
        assert keypad.wait_for_any_key() == 0x7

    # @intent:test_case_edge 待機開始前から押されているキーは、離して押し直すまで無視されます。
    def test_wait_requires_new_press(self):
        keypad = Keypad()
        keypad.set_key(0x3, True)
        script = iter([
            lambda: None,
            lambda: keypad.set_key(0x3, False),
            lambda: keypad.set_key(0x3, True),
        ])
        keypad.attach(lambda: next(script)())
        assert keypad.wait_for_any_key() == 0x3

    # @intent:test_case_tie 同じサンプルで複数押された場合は最小の番号が選ばれます。
    def test_lowest_index_wins(self):
        keypad = Keypad()

        def pump():
            keypad.set_key(0xB, True)
            keypad.set_key(0x2, True)

        keypad.attach(pump)
        assert keypad.wait_for_any_key() == 0x2

    # @intent:test_case_cancel キャンセル判定が真になると ExecutionCancelled で待機を抜けます。
    def test_wait_cancelled(self):
        keypad = Keypad()
        calls = []
        keypad.attach(lambda: calls.append(1), lambda: len(calls) >= 3)
        with pytest.raises(ExecutionCancelled):
            keypad.wait_for_any_key()
        assert len(calls) == 3

class TestKeyMap:
    def test_default_layout(self):
        key_map = KeyMap()
        assert key_map.lookup("1") == 0x1
        assert key_map.lookup("4") == 0xC
        assert key_map.lookup("x") == 0x0
        assert key_map.lookup("V") == 0xF

    # @intent:test_case_unmapped 未登録のキーはキー状態を変更しません。
    def test_unmapped_key_is_ignored(self):
        keypad = Keypad()
        key_map = KeyMap()
        assert key_map.apply(keypad, "P", True) is False
        assert keypad.state() == [False] * 16

    def test_apply_press_and_release(self):
        keypad = Keypad()
        key_map = KeyMap()
        assert key_map.apply(keypad, "w", True)
        assert keypad.is_pressed(0x5)
        key_map.apply(keypad, "W", False)
        assert not keypad.is_pressed(0x5)

    def test_custom_mapping_and_quit_keys(self):
        key_map = KeyMap({"up": 0x2}, quit_keys=["q"])
        assert key_map.lookup("UP") == 0x2
        assert key_map.lookup("1") is None
        assert key_map.is_quit_key("Q")
        assert not key_map.is_quit_key("ESC")

    def test_invalid_index(self):
        with pytest.raises(ValueError):
            KeyMap({"A": 16})
