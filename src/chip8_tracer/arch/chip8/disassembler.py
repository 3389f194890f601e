# chip8_tracer/arch/chip8/disassembler.py
"""
CHIP-8 Disassembler

メモリ上のバイナリデータを解析し、CHIP-8のアセンブリ言語（ニーモニック）に変換します。
Instruction Layerのデコードロジックを再利用し、peekで読み込むためバスアクセスログを汚しません。
"""
from typing import List, Tuple

from chip8_tracer.transport.address_space import AddressSpace
from chip8_tracer.arch.chip8.instructions import decode_opcode

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(bus: AddressSpace, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    指定された範囲のメモリを2バイト単位で逆アセンブルします。

    Returns:
        List of (address, hex_bytes, mnemonic) tuples.
    """
    result = []
    current_addr = start_addr
    end_addr = start_addr + length

    while current_addr < end_addr:
        # ラップアラウンド無効時は空間の終端で打ち切る
        if not bus.wrap_addresses and current_addr + 1 >= bus.SIZE:
            break

        high = bus.peek(current_addr)
        low = bus.peek(current_addr + 1)
        operation = decode_opcode((high << 8) | low)

        result.append((bus.resolve(current_addr), f"{high:02X} {low:02X}", operation.to_assembly()))
        current_addr += operation.length

    return result
