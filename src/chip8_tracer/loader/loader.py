# chip8_tracer/loader/loader.py
"""
ROMローダーモジュール。

ROMはヘッダもチェックサムも持たない生のバイト列であり、先頭から順に
アドレス 0x200 以降へ書き込まれます。ファイル終端がロードの終端です。
"""
from pathlib import Path
from typing import Union
import logging

from chip8_tracer.common.errors import RomLoadError
from chip8_tracer.transport.address_space import AddressSpace
from chip8_tracer.arch.chip8.state import PROGRAM_START

logger = logging.getLogger(__name__)

class RomLoader:
    """
    生のROMイメージをアドレス空間へロードするローダー。
    """
    # @intent:responsibility ROMファイルを読み込みます。読めない場合は RomLoadError です。
    def read_rom(self, file_path: Union[str, Path]) -> bytes:
        try:
            return Path(file_path).read_bytes()
        except OSError as e:
            raise RomLoadError(f"Cannot read ROM '{file_path}': {e}") from e

    def load_rom(self, file_path: Union[str, Path], bus: AddressSpace, start: int = PROGRAM_START) -> int:
        size = self.load_bytes(self.read_rom(file_path), bus, start)
        logger.info("Loaded %d bytes from %s at %#05x", size, file_path, start)
        return size

    # @intent:responsibility メモリ上のバイト列をロードし、書き込んだバイト数を返します。
    # @intent:pre-condition データはstartからアドレス空間の終端までに収まる必要があります。
    def load_bytes(self, data: bytes, bus: AddressSpace, start: int = PROGRAM_START) -> int:
        capacity = bus.SIZE - start
        if len(data) > capacity:
            raise RomLoadError(
                f"ROM image of {len(data)} bytes does not fit in {capacity} bytes starting at {start:#05x}."
            )
        for offset, byte_data in enumerate(data):
            bus.write(start + offset, byte_data)
        # ロード時の書き込みは命令実行のアクセスではない
        bus.get_and_clear_activity_log()
        return len(data)
