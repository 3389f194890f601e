# chip8_tracer/ui/main_window.py
"""
メインウィンドウの実装。
画面表示とレジスタインスペクタを保持し、60Hzのタイマで駆動ループを1フレームずつ進めます。
"""
import logging

from PySide6.QtWidgets import QMainWindow, QApplication, QDockWidget, QToolBar, QLabel, QFileDialog, QMessageBox
from PySide6.QtGui import QAction, QCloseEvent
from PySide6.QtCore import Qt, QTimer, Slot

from chip8_tracer.common.errors import Chip8Error, ExecutionCancelled
from chip8_tracer.peripherals.keypad import KeyMap
from chip8_tracer.runtime.machine import Machine
from chip8_tracer.runtime.runner import Runner, FRAME_HZ
from .display_view import DisplayView
from .register_view import RegisterView

logger = logging.getLogger(__name__)

# @intent:responsibility アプリケーションのメインウィンドウを定義し、UIの主要なコンポーネントを組み立てます。
class MainWindow(QMainWindow):
    def __init__(self, machine: Machine, runner: Runner, parent=None):
        super().__init__(parent)
        self.setWindowTitle("CHIP-8 Tracer")
        self._machine = machine
        self._runner = runner
        self._in_frame = False

        # キー入力待ちの間はQtのイベントを処理し続け、キー押下と終了要求を観測できるようにする
        self._runner.set_event_pump(QApplication.processEvents)

        display_config = machine.config.display
        keypad_config = machine.config.keypad
        self.display_view = DisplayView(
            machine.framebuffer,
            machine.keypad,
            KeyMap(keypad_config.mapping, keypad_config.quit_keys),
            scale=display_config.scale,
            foreground=display_config.foreground,
            background=display_config.background,
            on_quit=self.close,
        )
        self.setCentralWidget(self.display_view)

        self._create_status_inspector()
        self._create_toolbar()
        self._create_menus()

        self.sound_label = QLabel("")
        self.statusBar().addPermanentWidget(self.sound_label)

        self._frame_timer = QTimer(self)
        self._frame_timer.setInterval(1000 // FRAME_HZ)
        self._frame_timer.timeout.connect(self._on_frame)

        self._update_ui_state(False)

    def _create_menus(self):
        file_menu = self.menuBar().addMenu("File")

        self.load_rom_action = QAction("Load ROM...", self)
        self.load_rom_action.setShortcut("Ctrl+O")
        self.load_rom_action.triggered.connect(self._load_rom_file)
        file_menu.addAction(self.load_rom_action)

        self.reset_action = QAction("Reset", self)
        self.reset_action.triggered.connect(self._reset_machine)
        file_menu.addAction(self.reset_action)

        quit_action = QAction("Quit", self)
        quit_action.setShortcut("Ctrl+Q")
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

    # @intent:responsibility 実行制御用のツールバーを作成します。
    def _create_toolbar(self):
        toolbar = QToolBar("Main Toolbar")
        self.addToolBar(toolbar)

        self.run_action = QAction("Run", self)
        self.run_action.triggered.connect(self.start)
        toolbar.addAction(self.run_action)

        self.pause_action = QAction("Pause", self)
        self.pause_action.triggered.connect(self.pause)
        toolbar.addAction(self.pause_action)

        self.step_action = QAction("Step", self)
        self.step_action.triggered.connect(self._step_once)
        toolbar.addAction(self.step_action)

    def _create_status_inspector(self):
        status_dock = QDockWidget("Registers", self)
        status_dock.setAllowedAreas(Qt.RightDockWidgetArea | Qt.LeftDockWidgetArea)
        self.register_view = RegisterView()
        self.register_view.set_cpu(self._machine.cpu)
        status_dock.setWidget(self.register_view)
        self.addDockWidget(Qt.RightDockWidgetArea, status_dock)

    def _update_ui_state(self, is_running: bool):
        self.load_rom_action.setEnabled(not is_running)
        self.run_action.setEnabled(not is_running)
        self.step_action.setEnabled(not is_running)
        self.pause_action.setEnabled(is_running)

    @Slot()
    def start(self):
        self._runner.resume()
        self._frame_timer.start()
        self._update_ui_state(True)
        self.statusBar().showMessage("Running")
        self.display_view.setFocus()

    @Slot()
    def pause(self):
        self._runner.pause()
        self._frame_timer.stop()
        self._update_ui_state(False)
        self._refresh_views()
        self.statusBar().showMessage(f"Paused at {self._machine.cpu.get_state().pc:#05x}")

    # @intent:responsibility タイマから呼ばれ、1フレーム分の命令を実行して画面を更新します。
    # @intent:rationale キー入力待ち中のイベント処理から再入されないよう、実行中フラグで保護します。
    @Slot()
    def _on_frame(self):
        if self._in_frame:
            return
        self._in_frame = True
        try:
            self._runner.run_frame()
        except Chip8Error as e:
            self._halt(e)
            return
        finally:
            self._in_frame = False

        self.display_view.refresh()
        self.sound_label.setText("SOUND" if self._machine.timers.sound_active else "")
        if self._runner.paused:
            snapshot = self._runner.get_last_snapshot()
            self.pause()
            if snapshot is not None:
                self.statusBar().showMessage(f"Breakpoint: {snapshot.metadata.symbol_info}")
        elif not self._runner.running:
            self.close()

    @Slot()
    def _step_once(self):
        if self._in_frame:
            return
        self._in_frame = True
        try:
            snapshot = self._runner.step()
        except ExecutionCancelled:
            return
        except Chip8Error as e:
            self._halt(e)
            return
        finally:
            self._in_frame = False
        self._refresh_views()
        self.statusBar().showMessage(snapshot.metadata.symbol_info)

    def _refresh_views(self):
        self.display_view.refresh(force=True)
        self.register_view.update_registers()

    def _halt(self, error: Exception):
        self._frame_timer.stop()
        self._update_ui_state(False)
        self.run_action.setEnabled(False)
        self.step_action.setEnabled(False)
        self._refresh_views()
        QMessageBox.critical(self, "Execution halted", str(error))

    @Slot()
    def _reset_machine(self):
        self.pause()
        self._machine.reset()
        self._update_ui_state(False)
        self._refresh_views()
        self.statusBar().showMessage("Reset")

    @Slot()
    def _load_rom_file(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open ROM", "", "CHIP-8 ROMs (*.ch8 *.c8);;All Files (*)")
        if not file_name:
            return
        try:
            self._machine.rom_image = None
            self._machine.reset()
            self._machine.load_rom(file_name)
        except Chip8Error as e:
            QMessageBox.critical(self, "Error", f"Failed to load ROM: {e}")
            return
        self._refresh_views()
        self.statusBar().showMessage(f"Loaded {file_name}")

    # @intent:responsibility ウィンドウが閉じられる際に駆動ループへ終了を要求します。
    def closeEvent(self, event: QCloseEvent):
        self._frame_timer.stop()
        self._runner.stop()
        event.accept()
