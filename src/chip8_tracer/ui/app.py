# chip8_tracer/ui/app.py
"""
アプリケーションのエントリポイント。
コマンドライン引数を解析し、GUI（PySide6）またはヘッドレスで VM を起動します。
"""
from typing import List, Optional
import argparse
import logging
import sys
import time

from chip8_tracer.common.errors import Chip8Error, RomLoadError
from chip8_tracer.config.loader import ConfigLoader
from chip8_tracer.config.builder import SystemBuilder
from chip8_tracer.config.models import SystemConfig
from chip8_tracer.arch.chip8.state import PROGRAM_START
from chip8_tracer.runtime.machine import Machine
from chip8_tracer.runtime.runner import Runner, BreakpointCondition, BreakpointConditionType

logger = logging.getLogger(__name__)

def _int_auto(value: str) -> int:
    return int(value, 0)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chip8-tracer", description="CHIP-8 interpreter and tracer")
    parser.add_argument("rom", help="Path to a raw CHIP-8 ROM image")
    parser.add_argument("--config", help="YAML system configuration")
    parser.add_argument("--scale", type=int, help="Integer pixel magnification")
    parser.add_argument("--cps", type=int, help="Instructions per second (0 = unpaced)")
    parser.add_argument("--seed", type=int, help="Seed for the RND instruction")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--trace", action="store_true", help="Log every executed instruction")
    parser.add_argument("--break", dest="breakpoints", type=_int_auto, action="append", default=[],
                        metavar="ADDR", help="Pause when PC reaches ADDR (repeatable)")
    parser.add_argument("--disassemble", action="store_true", help="Print the ROM disassembly and exit")
    parser.add_argument("--headless", action="store_true", help="Run without a window and print the screen")
    parser.add_argument("--steps", type=int, help="Instruction limit for --headless")
    parser.add_argument("--timeout", type=float, help="Wall-clock limit in seconds for --headless")
    return parser

# @intent:responsibility 設定ファイルとコマンドライン引数の上書きを合成します。
def load_config(args: argparse.Namespace) -> SystemConfig:
    config = ConfigLoader().load_from_file(args.config) if args.config else SystemConfig()
    if args.scale is not None:
        if args.scale <= 0:
            raise ValueError(f"Display scale must be positive: {args.scale}")
        config.display.scale = args.scale
    if args.cps is not None:
        if args.cps < 0:
            raise ValueError(f"cycles_per_second must not be negative: {args.cps}")
        config.timing.cycles_per_second = args.cps
    if args.seed is not None:
        config.rng_seed = args.seed
    return config

def _add_breakpoints(runner: Runner, addresses: List[int]) -> None:
    for address in addresses:
        runner.add_breakpoint(BreakpointCondition(BreakpointConditionType.PC_MATCH, value=address))

def print_disassembly(machine: Machine) -> None:
    length = len(machine.rom_image or b"")
    for address, hex_bytes, mnemonic in machine.cpu.disassemble(PROGRAM_START, length):
        print(f"{address:03X}  {hex_bytes}  {mnemonic}")

# @intent:responsibility ウィンドウを持たずに実行し、最終的な画面をテキストで出力します。
def run_headless(machine: Machine, args: argparse.Namespace) -> int:
    runner = Runner(machine)
    _add_breakpoints(runner, args.breakpoints)
    if args.timeout is not None:
        deadline = time.monotonic() + args.timeout

        def check_deadline() -> None:
            if time.monotonic() >= deadline:
                runner.stop()

        runner.set_input_source(check_deadline)

    try:
        executed = runner.run(max_steps=args.steps)
    except KeyboardInterrupt:
        runner.stop()
        executed = machine.cpu.cycle_count
    print(machine.framebuffer.to_text())
    state = machine.cpu.get_state()
    print(f"executed={executed} pc={state.pc:#05x} i={state.i:#05x} "
          f"v=[{' '.join(f'{value:02X}' for value in state.v)}]")
    return 0

def run_gui(machine: Machine, args: argparse.Namespace) -> int:
    # PySide6 はGUI実行時にのみ必要
    from PySide6.QtWidgets import QApplication
    from .main_window import MainWindow

    app = QApplication.instance() or QApplication(sys.argv[:1])
    runner = Runner(machine)
    _add_breakpoints(runner, args.breakpoints)
    main_win = MainWindow(machine, runner)
    main_win.show()
    main_win.start()
    return app.exec()

# @intent:responsibility アプリケーションのメイン関数。終了コードを返します。
def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if args.trace:
        logging.getLogger("chip8_tracer.trace").setLevel(logging.DEBUG)

    try:
        config = load_config(args)
    except (OSError, ValueError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    machine = SystemBuilder().build_system(config)
    try:
        machine.load_rom(args.rom)
    except RomLoadError as e:
        print(f"Failed to load ROM: {e}", file=sys.stderr)
        return 1

    if args.disassemble:
        print_disassembly(machine)
        return 0

    try:
        if args.headless:
            return run_headless(machine, args)
        return run_gui(machine, args)
    except Chip8Error as e:
        print(f"Execution halted: {e}", file=sys.stderr)
        return 1

if __name__ == '__main__':
    sys.exit(main())
