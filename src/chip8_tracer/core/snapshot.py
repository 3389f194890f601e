# chip8_tracer/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1命令実行後のCPUとアドレス空間アクセスの記録を保持する
不変のデータ構造を定義します。UIへの情報提供と、トレース出力に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from chip8_tracer.core.state import CpuState
from chip8_tracer.transport.address_space import BusAccessType, BusAccess

# @intent:responsibility デコードされた命令の詳細を記録します。
@dataclass(frozen=True) # 不変データ構造
class Operation:
    """
    デコードされた命令の詳細（命令語、パターン、ニーモニック、オペランド）を記録するデータクラス。
    """
    opcode: int # 例: 0x8124
    pattern: str # 例: "8XY4"、未定義の命令は "????"
    mnemonic: str # 例: "ADD"
    operands: Tuple[str, ...] = () # 例: ("V1", "V2")
    cycle_count: int = 1
    length: int = 2 # 命令のバイト長（常に2）

    @property
    def opcode_hex(self) -> str:
        return f"{self.opcode:04X}"

    # @intent:responsibility トレースや逆アセンブル表示用の文字列を生成します。
    def to_assembly(self) -> str:
        if self.operands:
            return f"{self.mnemonic} {', '.join(self.operands)}"
        return self.mnemonic

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True)
class Metadata:
    cycle_count: int # 累計実行命令数
    symbol_info: Optional[str] = None # 例: "0x200: LD V0, #$05"

# @intent:responsibility ある一時点におけるCPUとアドレス空間アクセスの状態を不変に記録します。
@dataclass(frozen=True)
class Snapshot:
    """
    1命令の実行直後の状態を記録した不変のデータ構造。
    state は実行後の状態のコピーであり、以降の実行で変化しません。
    """
    state: CpuState
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)

    # @intent:responsibility この命令で指定アドレスへの書き込みが発生したかを返します。
    def wrote_to(self, address: int) -> bool:
        return any(a.access_type == BusAccessType.WRITE and a.address == address for a in self.bus_activity)

    def read_from(self, address: int) -> bool:
        return any(a.access_type == BusAccessType.READ and a.address == address for a in self.bus_activity)
