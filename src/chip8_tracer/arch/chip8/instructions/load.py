# chip8_tracer/arch/chip8/instructions/load.py
"""
インデックスレジスタ、メモリ転送、タイマ関連命令の実装。
メモリアクセスは全てアドレス空間を経由し、I からのオフセットはアドレス空間側で折り返されます。
"""
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.address_space import AddressSpace
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.arch.chip8.font import glyph_address
from .base import Devices, x_of, nnn_of

# --- LD I, addr (ANNN) ---
def execute_ld_i(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    state.i = nnn_of(op)

# --- ADD I, Vx (FX1E) ---
# @intent:responsibility IにVxを加算します（16bitラップ、VFは変更しません）。
def execute_add_i(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    state.i = (state.i + state.v[x_of(op)]) & 0xFFFF

# --- LD F, Vx (FX29) ---
# @intent:responsibility Vxの下位4bitが示す数字のフォントグリフをIに設定します。
def execute_ld_f(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    state.i = glyph_address(state.v[x_of(op)])

# --- LD B, Vx (FX33) ---
# @intent:responsibility Vxを10進3桁に分解し、I, I+1, I+2 に百の位から格納します。
def execute_ld_b(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    value = state.v[x_of(op)]
    bus.write(state.i, value // 100)
    bus.write(state.i + 1, (value // 10) % 10)
    bus.write(state.i + 2, value % 10)

# --- LD [I], Vx (FX55) ---
# @intent:responsibility V0からVxまで（Vxを含む）をIから始まるメモリへ書き込みます。Iは変化しません。
def execute_store_registers(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    for index in range(x_of(op) + 1):
        bus.write(state.i + index, state.v[index])

# --- LD Vx, [I] (FX65) ---
def execute_load_registers(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    for index in range(x_of(op) + 1):
        state.v[index] = bus.read(state.i + index)

# --- LD Vx, DT (FX07) ---
def execute_ld_vx_dt(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    state.v[x_of(op)] = devices.timers.get_delay()

# --- LD DT, Vx (FX15) ---
def execute_ld_dt_vx(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    devices.timers.set_delay(state.v[x_of(op)])

# --- LD ST, Vx (FX18) ---
def execute_ld_st_vx(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    devices.timers.set_sound(state.v[x_of(op)])
