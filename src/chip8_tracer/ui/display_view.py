# chip8_tracer/ui/display_view.py
"""
フレームバッファ表示ウィジェット。

パックされたビットグリッドを QImage.Format_Mono としてそのまま取り込み、
整数倍に拡大して描画します。キーイベントはキーマップを通してキーパッドへ反映されます。
"""
from typing import Callable, Optional

from PySide6.QtWidgets import QWidget
from PySide6.QtCore import Qt, QSize
from PySide6.QtGui import QColor, QImage, QKeyEvent, QKeySequence, QPainter, QPaintEvent

from chip8_tracer.peripherals.framebuffer import Framebuffer, WIDTH, HEIGHT, BYTES_PER_ROW
from chip8_tracer.peripherals.keypad import Keypad, KeyMap

# @intent:responsibility Qtのキーイベントを、キーマップが扱うキー名（例: "Q", "ESC"）に変換します。
def key_name(event: QKeyEvent) -> str:
    return QKeySequence(event.key()).toString().upper()

# @intent:responsibility 64x32のモノクロ画面を拡大表示し、キー入力をキーパッドへ渡します。
class DisplayView(QWidget):
    def __init__(
        self,
        framebuffer: Framebuffer,
        keypad: Keypad,
        key_map: KeyMap,
        scale: int = 10,
        foreground: str = "#33FF66",
        background: str = "#101010",
        on_quit: Optional[Callable[[], None]] = None,
        parent=None,
    ):
        super().__init__(parent)
        self._framebuffer = framebuffer
        self._keypad = keypad
        self._key_map = key_map
        self._scale = scale
        self._on_quit = on_quit
        self._foreground = QColor(foreground)
        self._background = QColor(background)
        self._image = self._build_image(framebuffer.snapshot())

        self.setFocusPolicy(Qt.StrongFocus)
        self.setMinimumSize(WIDTH * scale, HEIGHT * scale)

    def sizeHint(self) -> QSize:
        return QSize(WIDTH * self._scale, HEIGHT * self._scale)

    def _build_image(self, pixels: bytes) -> QImage:
        image = QImage(pixels, WIDTH, HEIGHT, BYTES_PER_ROW, QImage.Format_Mono)
        image.setColorTable([self._background.rgb(), self._foreground.rgb()])
        # 元のバッファに依存しないよう切り離す
        return image.copy()

    # @intent:responsibility フレームバッファが変化していれば画像を作り直し、再描画を要求します。
    def refresh(self, force: bool = False) -> bool:
        if not (self._framebuffer.consume_dirty() or force):
            return False
        self._image = self._build_image(self._framebuffer.snapshot())
        self.update()
        return True

    def current_image(self) -> QImage:
        return self._image

    def paintEvent(self, event: QPaintEvent) -> None:
        painter = QPainter(self)
        painter.fillRect(self.rect(), self._background)
        target = self.rect()
        scale = max(1, min(target.width() // WIDTH, target.height() // HEIGHT))
        scaled = self._image.scaled(WIDTH * scale, HEIGHT * scale, Qt.IgnoreAspectRatio, Qt.FastTransformation)
        painter.drawImage((target.width() - scaled.width()) // 2, (target.height() - scaled.height()) // 2, scaled)
        painter.end()

    # @intent:responsibility キー名と押下状態を処理します。終了キーなら終了を要求します。
    def handle_key(self, name: str, pressed: bool) -> bool:
        if pressed and self._key_map.is_quit_key(name):
            if self._on_quit is not None:
                self._on_quit()
            return True
        return self._key_map.apply(self._keypad, name, pressed)

    def keyPressEvent(self, event: QKeyEvent) -> None:
        if event.isAutoRepeat() or not self.handle_key(key_name(event), True):
            super().keyPressEvent(event)

    def keyReleaseEvent(self, event: QKeyEvent) -> None:
        if event.isAutoRepeat() or not self.handle_key(key_name(event), False):
            super().keyReleaseEvent(event)
