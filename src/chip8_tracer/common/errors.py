# chip8_tracer/common/errors.py
"""
例外定義モジュール。

インタプリタの実行を継続できない致命的な状態と、
外部からの中断要求を表す例外を定義します。
"""

# @intent:responsibility 本パッケージ固有の全ての例外の基底クラスです。
class Chip8Error(Exception):
    pass

# @intent:responsibility ROMファイルの読み込みに失敗したことを表します。プロセスにとって致命的です。
class RomLoadError(Chip8Error):
    pass

# @intent:responsibility 対応するCALLのないRETを検出したことを表します。
# @intent:rationale 空のスタックからのポップは不正なプログラムを意味するため、黙って続行せず診断可能な例外とします。
class StackUnderflowError(Chip8Error):
    def __init__(self, pc: int):
        super().__init__(f"Return with empty call stack at PC {pc:#05x}.")
        self.pc = pc

# @intent:responsibility 固定深さのコールスタックが溢れたことを表します。
class StackOverflowError(Chip8Error):
    def __init__(self, pc: int, depth: int):
        super().__init__(f"Call stack overflow (depth {depth}) at PC {pc:#05x}.")
        self.pc = pc
        self.depth = depth

# @intent:responsibility ラップアラウンド無効時にアドレス空間外へアクセスしたことを表します。
class AddressError(Chip8Error, IndexError):
    pass

# @intent:responsibility キー入力待ちなどのブロッキング処理が終了要求によって中断されたことを表します。
class ExecutionCancelled(Chip8Error):
    pass
