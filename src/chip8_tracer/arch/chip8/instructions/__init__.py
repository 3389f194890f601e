# chip8_tracer/arch/chip8/instructions/__init__.py
"""
CHIP-8命令セット実装パッケージ。
"""
from functools import lru_cache
import logging

from chip8_tracer.transport.address_space import AddressSpace
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import Devices
from .maps import DECODE_TABLE, EXECUTE_MAP

logger = logging.getLogger(__name__)

UNKNOWN_PATTERN = "????"

# 上位ニブルごとに候補を絞り込む
_DECODE_INDEX = {}
for _entry in DECODE_TABLE:
    _DECODE_INDEX.setdefault(_entry[1] >> 12, []).append(_entry)

# @intent:responsibility 16bit命令語をデコードし、Operationを返します。
# @intent:rationale Operationは命令語のみで決まる不変値のため、結果をキャッシュします。
@lru_cache(maxsize=4096)
def decode_opcode(opcode: int) -> Operation:
    """
    どのパターンにも一致しない命令語は UNKNOWN として返され、実行時は何もしません。
    """
    opcode &= 0xFFFF
    for mask, value, pattern, mnemonic, templates in _DECODE_INDEX.get(opcode >> 12, ()):
        if opcode & mask == value:
            fields = {
                "x": (opcode >> 8) & 0xF,
                "y": (opcode >> 4) & 0xF,
                "n": opcode & 0xF,
                "kk": opcode & 0xFF,
                "nnn": opcode & 0xFFF,
            }
            operands = tuple(template.format(**fields) for template in templates)
            return Operation(opcode=opcode, pattern=pattern, mnemonic=mnemonic, operands=operands)
    return Operation(opcode=opcode, pattern=UNKNOWN_PATTERN, mnemonic="UNKNOWN", operands=(f"${opcode:04X}",))

# @intent:responsibility デコードされた命令を実行し、CPUの状態を変更します。
def execute_instruction(operation: Operation, state: Chip8CpuState, bus: AddressSpace, devices: Devices) -> None:
    executor = EXECUTE_MAP.get(operation.pattern)
    if executor:
        executor(state, bus, devices, operation)
    else:
        logger.debug("Unknown opcode %04X treated as no-op", operation.opcode)
