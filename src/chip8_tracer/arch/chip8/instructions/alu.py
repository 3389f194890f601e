# chip8_tracer/arch/chip8/instructions/alu.py
"""
算術・論理命令の実装。

全ての結果は8bitでラップします。VFを更新する命令は、結果を格納した後にVFを書き込むため、
Vx が VF の場合はフラグの値が残ります。
"""
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.address_space import AddressSpace
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import Devices, x_of, y_of, kk_of

# --- LD Vx, byte (6XKK) ---
def execute_ld_imm(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    state.v[x_of(op)] = kk_of(op)

# --- ADD Vx, byte (7XKK) ---
# @intent:responsibility 即値を加算します。キャリーはVFに反映しません。
def execute_add_imm(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    x = x_of(op)
    state.v[x] = (state.v[x] + kk_of(op)) & 0xFF

# --- LD Vx, Vy (8XY0) ---
def execute_ld_reg(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    state.v[x_of(op)] = state.v[y_of(op)]

# --- OR / AND / XOR (8XY1-8XY3) ---
def execute_or(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    state.v[x_of(op)] |= state.v[y_of(op)]

def execute_and(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    state.v[x_of(op)] &= state.v[y_of(op)]

def execute_xor(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    state.v[x_of(op)] ^= state.v[y_of(op)]

# --- ADD Vx, Vy (8XY4) ---
# @intent:responsibility 加算し、255を超えた場合にVF=1とします。
def execute_add_reg(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    x = x_of(op)
    total = state.v[x] + state.v[y_of(op)]
    state.v[x] = total & 0xFF
    state.vf = 1 if total > 0xFF else 0

# --- SUB Vx, Vy (8XY5) ---
# @intent:responsibility Vx - Vy を計算し、Vx > Vy（ボローなし）の場合にVF=1とします。
def execute_sub(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    x = x_of(op)
    minuend, subtrahend = state.v[x], state.v[y_of(op)]
    state.v[x] = (minuend - subtrahend) & 0xFF
    state.vf = 1 if minuend > subtrahend else 0

# --- SHR Vx (8XY6) ---
# @intent:responsibility Vxを右シフトし、押し出されたビット0をVFに格納します。
def execute_shr(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    x = x_of(op)
    value = state.v[x]
    state.v[x] = value >> 1
    state.vf = value & 0x01

# --- SUBN Vx, Vy (8XY7) ---
# @intent:responsibility Vy - Vx をVxに格納し、Vy > Vx の場合にVF=1とします。
def execute_subn(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    x = x_of(op)
    minuend, subtrahend = state.v[y_of(op)], state.v[x]
    state.v[x] = (minuend - subtrahend) & 0xFF
    state.vf = 1 if minuend > subtrahend else 0

# --- SHL Vx (8XYE) ---
# @intent:responsibility Vxを左シフトし、押し出されたビット7をVFに格納します。
def execute_shl(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    x = x_of(op)
    value = state.v[x]
    state.v[x] = (value << 1) & 0xFF
    state.vf = (value >> 7) & 0x01

# --- RND Vx, byte (CXKK) ---
def execute_rnd(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    state.v[x_of(op)] = devices.rng.randrange(256) & kk_of(op)
