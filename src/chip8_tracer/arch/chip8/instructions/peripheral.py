# chip8_tracer/arch/chip8/instructions/peripheral.py
"""
画面とキーパッドを扱う命令の実装。
"""
from chip8_tracer.common.errors import ExecutionCancelled
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.address_space import AddressSpace
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import Devices, x_of, y_of, n_of

# --- CLS (00E0) ---
def execute_cls(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    devices.framebuffer.clear()

# --- DRW Vx, Vy, nibble (DXYN) ---
# @intent:responsibility Iから読んだNバイトのスプライトを (Vx, Vy) に描画し、衝突をVFに書き込みます。
def execute_drw(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    sprite = bytes(bus.read(state.i + row) for row in range(n_of(op)))
    collision = devices.framebuffer.draw_sprite(sprite, state.v[x_of(op)], state.v[y_of(op)])
    state.vf = 1 if collision else 0

# --- SKP Vx (EX9E) ---
def execute_skp(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    if devices.keypad.is_pressed(state.v[x_of(op)] & 0xF):
        state.pc = (state.pc + 2) & 0xFFFF

# --- SKNP Vx (EXA1) ---
def execute_sknp(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    if not devices.keypad.is_pressed(state.v[x_of(op)] & 0xF):
        state.pc = (state.pc + 2) & 0xFFFF

# --- LD Vx, K (FX0A) ---
# @intent:responsibility キーが押されるまでブロックし、その番号をVxに格納します。
# @intent:post-condition 中断された場合はPCをこの命令に戻してから例外を再送出し、再開時に待機をやり直せるようにします。
def execute_ld_vx_k(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    try:
        key = devices.keypad.wait_for_any_key()
    except ExecutionCancelled:
        state.pc = (state.pc - 2) & 0xFFFF
        raise
    state.v[x_of(op)] = key
