# chip8_tracer/transport/address_space.py
"""
Transport Layer (アドレス空間)

このモジュールは、4KBのフラットなメモリアドレス空間を抽象化し、
読み書きアクセスを適切なデバイス（RAM/フォントROM）に委譲する責務を負います。
全てのアドレスは容量(4096)を法として解決されるため、どの操作も空間の外へ逃げることはありません。
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple
import logging

from chip8_tracer.common.errors import AddressError

logger = logging.getLogger(__name__)

ADDRESS_SPACE_SIZE = 0x1000

# @intent:responsibility バスアクセスを記録するためのタイプを定義します。
class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:responsibility 個々のバスアクセス操作を記録します。
@dataclass(frozen=True) # 不変データ構造
class BusAccess:
    """
    アドレス空間上で行われた単一のアクセス（読み込みまたは書き込み）を記録するデータクラス。
    """
    address: int
    data: int # 8bit value
    access_type: BusAccessType

# @intent:responsibility アドレス空間に接続されるデバイスの抽象インターフェースを定義します。
class Device(ABC):
    """
    アドレス空間に接続されるデバイスの抽象基底クラス。
    アドレスはデバイス内でのオフセットとして扱われます。
    """
    @abstractmethod
    def read(self, address: int) -> int:
        pass

    @abstractmethod
    def write(self, address: int, data: int) -> None:
        pass

# @intent:responsibility 基本的なRAMデバイスの機能を提供します。
class RAM(Device):
    """
    ゼロ初期化される読み書き可能なメモリデバイス。
    """
    # @intent:pre-condition sizeは正の整数である必要があります。
    def __init__(self, size: int):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("RAM size must be a positive integer.")
        self._memory = bytearray(size)
        self._size = size

    def read(self, address: int) -> int:
        if not 0 <= address < self._size:
            raise IndexError(f"Address {address} out of bounds for RAM of size {self._size}.")
        return self._memory[address]

    def write(self, address: int, data: int) -> None:
        if not 0 <= address < self._size:
            raise IndexError(f"Address {address} out of bounds for RAM of size {self._size}.")
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        self._memory[address] = data

    # @intent:responsibility メモリ内容を全てゼロに戻します。
    def clear(self) -> None:
        self._memory[:] = bytes(self._size)

    def get_size(self) -> int:
        return self._size

# @intent:responsibility 読み込み専用メモリ(ROM)の機能を提供します。組み込みフォント領域に使用します。
class ROM(RAM):
    """
    読み込み専用メモリデバイス。
    通常の書き込みは無視されます。初期化用の load_data メソッド経由でのみ書き込み可能です。
    """
    # @intent:rationale フォント領域は不変であるため、プログラムからの書き込みは例外ではなく無視します。
    def write(self, address: int, data: int) -> None:
        if not 0 <= address < self._size:
            raise IndexError(f"Address {address} out of bounds for ROM of size {self._size}.")
        logger.debug("Ignored write of %#04x to read-only offset %#05x", data, address)

    # @intent:responsibility ROMの内容を初期化するためのバックドアメソッドです。
    def load_data(self, address: int, data: int) -> None:
        super().write(address, data)

    # ROMの内容はリセットで消去されない
    def clear(self) -> None:
        pass

# @intent:responsibility 4KBのアドレス空間を管理し、デバイスへのアクセスをディスパッチします。
# @intent:rationale 全てのアクセスを記録し、Snapshotに含めることで実行の観測可能性を高めます。
class AddressSpace:
    """
    4096バイトのアドレス空間。登録されたデバイスへ読み書きを委譲します。

    wrap_addresses が True の場合、全てのアドレスは 4096 を法として解決されます。
    False の場合、範囲外のアドレスは AddressError になります。
    """
    SIZE = ADDRESS_SPACE_SIZE

    def __init__(self, wrap_addresses: bool = True):
        self.wrap_addresses = wrap_addresses
        # メモリマップ: (start_address, end_address, device) のタプルリスト
        self._memory_map: List[Tuple[int, int, Device]] = []
        self._bus_activity_log: List[BusAccess] = []

    def _log_access(self, address: int, data: int, access_type: BusAccessType) -> None:
        self._bus_activity_log.append(BusAccess(address=address, data=data, access_type=access_type))

    # @intent:responsibility 記録されたバスアクティビティログを取得し、クリアします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        log = self._bus_activity_log
        self._bus_activity_log = []
        return log

    # @intent:responsibility 指定されたアドレス範囲にデバイスを登録します。
    # @intent:pre-condition 範囲はアドレス空間内であり、RAM/ROMのサイズは範囲と一致する必要があります。
    def register_device(self, start_address: int, end_address: int, device: Device) -> None:
        """
        指定されたアドレス範囲にデバイスを登録します。
        アドレス範囲の重複チェックは行いません。呼び出し元が責任を持ちます。
        """
        if not (0 <= start_address <= end_address < self.SIZE):
            raise ValueError(
                f"Invalid address range {start_address:#05x}-{end_address:#05x} for a {self.SIZE}-byte space."
            )
        if not isinstance(device, Device):
            raise TypeError("Device must be an instance of a class derived from Device.")

        if isinstance(device, RAM):
            expected_size = end_address - start_address + 1
            if device.get_size() != expected_size:
                raise ValueError(
                    f"Registered {type(device).__name__} device size ({device.get_size()} bytes) does not match "
                    f"the specified address range size ({expected_size} bytes)."
                )

        self._memory_map.append((start_address, end_address, device))

    # @intent:responsibility アドレスをラップアラウンドポリシーに従って正規化します。
    def resolve(self, address: int) -> int:
        if self.wrap_addresses:
            return address % self.SIZE
        if not 0 <= address < self.SIZE:
            raise AddressError(f"Address {address:#06x} outside the {self.SIZE}-byte address space.")
        return address

    def _find_device(self, address: int) -> Tuple[Device, int]:
        for start, end, device in self._memory_map:
            if start <= address <= end:
                return device, address - start
        raise AddressError(f"Address {address:#05x} not mapped to any device.")

    # @intent:responsibility 指定されたアドレスから8bitのデータを読み出し、アクセスを記録します。
    def read(self, address: int) -> int:
        address = self.resolve(address)
        device, offset = self._find_device(address)
        data = device.read(offset)
        self._log_access(address, data, BusAccessType.READ)
        return data

    # @intent:responsibility ログを記録せずに指定されたアドレスからデータを読み出します。
    def peek(self, address: int) -> int:
        """
        UIや逆アセンブラなどのインスペクタ用。バスアクティビティを汚しません。
        """
        address = self.resolve(address)
        device, offset = self._find_device(address)
        return device.read(offset)

    # @intent:responsibility 指定されたアドレスに8bitのデータを書き込み、アクセスを記録します。
    def write(self, address: int, data: int) -> None:
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        address = self.resolve(address)
        device, offset = self._find_device(address)
        device.write(offset, data)
        self._log_access(address, data, BusAccessType.WRITE)

    read_byte = read
    write_byte = write

    # @intent:responsibility ROMを含む任意の領域へ、ログを残さずにデータを書き込みます。
    # @intent:rationale フォントの初期配置にのみ使用します。実行中の書き込みは write を通ります。
    def load(self, address: int, data: int) -> None:
        address = self.resolve(address)
        device, offset = self._find_device(address)
        if isinstance(device, ROM):
            device.load_data(offset, data)
        else:
            device.write(offset, data)

    # @intent:responsibility 全ての書き込み可能なデバイスをゼロクリアします（ROMは保持）。
    def clear_ram(self) -> None:
        for _, _, device in self._memory_map:
            if isinstance(device, RAM):
                device.clear()
        self._bus_activity_log = []
