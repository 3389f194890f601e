# chip8_tracer/peripherals/framebuffer.py
"""
モノクロフレームバッファ

64x32ピクセルの画面を、1行あたり8バイトのパックされたビットグリッドとして保持します。
スプライトはXORで合成され、点灯していたピクセルが消灯した場合に衝突として報告されます。
"""
from typing import List

WIDTH = 64
HEIGHT = 32
BYTES_PER_ROW = WIDTH // 8
MAX_SPRITE_HEIGHT = 15

# @intent:responsibility パックされたビットグリッドとしての画面状態と、XORスプライト合成を提供します。
class Framebuffer:
    """
    64x32のモノクロフレームバッファ。

    各行は8バイトで、バイト内の最上位ビットが左端のピクセルです。
    この並びは QImage.Format_Mono とそのまま互換です。
    """
    width = WIDTH
    height = HEIGHT

    def __init__(self):
        self._pixels = bytearray(BYTES_PER_ROW * HEIGHT)
        self._dirty = True

    # @intent:responsibility 全ピクセルを消灯します。
    def clear(self) -> None:
        self._pixels[:] = bytes(len(self._pixels))
        self._dirty = True

    # @intent:responsibility スプライトを (x, y) にXOR合成し、衝突の有無を返します。
    # @intent:pre-condition spriteは最大15バイトです。x, yは0-255の任意の値で、画面端で折り返します。
    def draw_sprite(self, sprite: bytes, x: int, y: int) -> bool:
        """
        スプライトの各行 i の各ビットを、列 (x + bit) mod 64、行 (y + i) mod 32 にXORします。
        点灯しているピクセルが消灯に変わった場合、衝突(True)を返します。
        """
        if len(sprite) > MAX_SPRITE_HEIGHT:
            raise ValueError(f"Sprite height {len(sprite)} exceeds {MAX_SPRITE_HEIGHT} rows.")

        collision = False
        for row_offset, row_bits in enumerate(sprite):
            row = (y + row_offset) % HEIGHT
            for bit in range(8):
                if not row_bits & (0x80 >> bit):
                    continue
                col = (x + bit) % WIDTH
                index = row * BYTES_PER_ROW + col // 8
                mask = 0x80 >> (col % 8)
                if self._pixels[index] & mask:
                    collision = True
                self._pixels[index] ^= mask
        self._dirty = True
        return collision

    # @intent:responsibility 描画用に現在のビットグリッドの読み取り専用コピーを返します。
    def snapshot(self) -> bytes:
        return bytes(self._pixels)

    def is_lit(self, x: int, y: int) -> bool:
        if not (0 <= x < WIDTH and 0 <= y < HEIGHT):
            raise IndexError(f"Pixel ({x}, {y}) outside {WIDTH}x{HEIGHT} framebuffer.")
        return bool(self._pixels[y * BYTES_PER_ROW + x // 8] & (0x80 >> (x % 8)))

    # @intent:responsibility 各行を64ビット整数として返します（最上位ビットが左端）。
    def rows(self) -> List[int]:
        return [
            int.from_bytes(self._pixels[r * BYTES_PER_ROW:(r + 1) * BYTES_PER_ROW], "big")
            for r in range(HEIGHT)
        ]

    # @intent:responsibility ヘッドレス実行の結果表示用に、画面をテキストに変換します。
    def to_text(self, lit: str = "#", unlit: str = ".") -> str:
        return "\n".join(
            "".join(lit if bits & (1 << (WIDTH - 1 - c)) else unlit for c in range(WIDTH))
            for bits in self.rows()
        )

    @property
    def dirty(self) -> bool:
        return self._dirty

    # @intent:responsibility 再描画が必要かどうかを返し、フラグを下ろします。
    # @intent:rationale 表示層は描画命令・クリア命令の後にのみ転送すればよいため。
    def consume_dirty(self) -> bool:
        dirty = self._dirty
        self._dirty = False
        return dirty
