# chip8_tracer/arch/chip8/font.py
"""
組み込みフォント（16進数字 0-F、各5バイト）。
アドレス 0x000-0x04F に常駐します。
"""
from chip8_tracer.transport.address_space import AddressSpace

FONT_BASE = 0x000
GLYPH_HEIGHT = 5

FONT_DATA = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])

FONT_END = FONT_BASE + len(FONT_DATA) - 1  # 0x04F

# @intent:responsibility 数字 digit のグリフの先頭アドレスを返します。
def glyph_address(digit: int) -> int:
    return FONT_BASE + (digit & 0xF) * GLYPH_HEIGHT

# @intent:responsibility フォントデータをアドレス空間（ROM領域を含む）に配置します。
def install_font(bus: AddressSpace) -> None:
    for offset, data in enumerate(FONT_DATA):
        bus.load(FONT_BASE + offset, data)
