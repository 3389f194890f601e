# chip8_tracer/arch/chip8/instructions/base.py
"""
CHIP-8命令実装用の共通ユーティリティ。
命令語からのフィールド（ニブル）抽出と、実行時に参照する周辺機器の束を定義します。
"""
from dataclasses import dataclass, field
import random

from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.address_space import AddressSpace
from chip8_tracer.peripherals.framebuffer import Framebuffer
from chip8_tracer.peripherals.keypad import Keypad
from chip8_tracer.peripherals.timers import TimerPair

# @intent:data_structure 命令の実行に必要な、CPU外部の周辺機器をまとめます。
@dataclass
class Devices:
    framebuffer: Framebuffer
    keypad: Keypad
    timers: TimerPair
    rng: random.Random = field(default_factory=random.Random)

# 命令語 0xAXYN / 0xAXKK / 0xANNN のフィールド
def x_of(op: Operation) -> int:
    return (op.opcode >> 8) & 0xF

def y_of(op: Operation) -> int:
    return (op.opcode >> 4) & 0xF

def n_of(op: Operation) -> int:
    return op.opcode & 0xF

def kk_of(op: Operation) -> int:
    return op.opcode & 0xFF

def nnn_of(op: Operation) -> int:
    return op.opcode & 0xFFF

# @intent:utility_function アドレス空間から16ビット命令語をビッグエンディアン形式で読み込みます。
def read_word(bus: AddressSpace, addr: int) -> int:
    return (bus.read(addr) << 8) | bus.read(addr + 1)
