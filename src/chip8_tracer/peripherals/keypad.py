# chip8_tracer/peripherals/keypad.py
"""
16キーの入力パッド

キー状態は外部の入力層（UIのキーイベント）によって更新され、インタプリタからは
押下判定と、ブロッキングのキー入力待ちの2つの方法で参照されます。
キー入力待ちはコア全体で唯一の中断点であり、サンプリングの合間に外部のイベントポンプへ
制御を譲り、毎回キャンセル要求を確認します。
"""
from typing import Callable, Dict, Iterable, List, Optional
import logging

from chip8_tracer.common.errors import ExecutionCancelled
from chip8_tracer.common.types import KeyMapping

logger = logging.getLogger(__name__)

KEY_COUNT = 16

# 1 2 3 C / 4 5 6 D / 7 8 9 E / A 0 B F
DEFAULT_KEY_MAPPING: KeyMapping = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}

DEFAULT_QUIT_KEYS = ("ESC",)

# @intent:responsibility 16個のキー押下フラグと、エッジトリガのキー入力待ちを提供します。
class Keypad:
    def __init__(self):
        self._keys: List[bool] = [False] * KEY_COUNT
        self._event_pump: Optional[Callable[[], None]] = None
        self._is_cancelled: Callable[[], bool] = lambda: False

    @staticmethod
    def _check_index(index: int) -> None:
        if not 0 <= index < KEY_COUNT:
            raise IndexError(f"Key index {index} out of range 0-{KEY_COUNT - 1}.")

    def set_key(self, index: int, pressed: bool) -> None:
        self._check_index(index)
        self._keys[index] = bool(pressed)

    def is_pressed(self, index: int) -> bool:
        self._check_index(index)
        return self._keys[index]

    def state(self) -> List[bool]:
        return list(self._keys)

    def release_all(self) -> None:
        self._keys = [False] * KEY_COUNT

    # @intent:responsibility キー入力待ちの間に呼び出すイベントポンプと、キャンセル判定を設定します。
    def attach(self, event_pump: Optional[Callable[[], None]], is_cancelled: Optional[Callable[[], bool]] = None) -> None:
        self._event_pump = event_pump
        self._is_cancelled = is_cancelled or (lambda: False)

    # @intent:responsibility いずれかのキーが新たに押されるまでブロックし、そのキー番号を返します。
    # @intent:post-condition キャンセルされた場合は ExecutionCancelled を送出します。
    def wait_for_any_key(self) -> int:
        """
        待機開始時点で既に押されているキーは対象外です。一度離してから押し直す必要があります。
        同じサンプルで複数のキーが押された場合は、最も小さい番号を返します。
        """
        if self._event_pump is None:
            raise RuntimeError("Cannot wait for a key press without an attached event pump.")

        logger.debug("Waiting for key press")
        previous = list(self._keys)
        while True:
            if self._is_cancelled():
                raise ExecutionCancelled("Key wait cancelled by quit request.")
            self._event_pump()
            current = list(self._keys)
            for index in range(KEY_COUNT):
                if current[index] and not previous[index]:
                    logger.debug("Key %X pressed", index)
                    return index
            previous = current

# @intent:responsibility 物理キー名をキーパッド番号へ変換します。
class KeyMap:
    """
    物理キー名（大文字小文字を区別しない）からキーパッド番号への対応表。
    未登録のキーは None を返し、キー状態を一切変更しません。
    """
    def __init__(self, mapping: Optional[Dict[str, int]] = None, quit_keys: Iterable[str] = DEFAULT_QUIT_KEYS):
        source = DEFAULT_KEY_MAPPING if mapping is None else mapping
        self._mapping: Dict[str, int] = {}
        for name, index in source.items():
            if not 0 <= index < KEY_COUNT:
                raise ValueError(f"Key '{name}' maps to invalid keypad index {index}.")
            self._mapping[name.upper()] = index
        self._quit_keys = {name.upper() for name in quit_keys}

    def lookup(self, key_name: str) -> Optional[int]:
        return self._mapping.get(key_name.upper())

    def is_quit_key(self, key_name: str) -> bool:
        return key_name.upper() in self._quit_keys

    # @intent:responsibility キーイベントをキーパッドに適用し、状態が変化したかを返します。
    def apply(self, keypad: Keypad, key_name: str, pressed: bool) -> bool:
        index = self.lookup(key_name)
        if index is None:
            return False
        keypad.set_key(index, pressed)
        return True
