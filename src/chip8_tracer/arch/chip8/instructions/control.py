# chip8_tracer/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ）の実装。

実行時点でPCは既に次の命令を指しているため、ジャンプ系は分岐先を直接代入し、
スキップ系はさらに2を加算します。
"""
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.address_space import AddressSpace
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import Devices, x_of, y_of, kk_of, nnn_of

def _skip(state: Chip8CpuState) -> None:
    state.pc = (state.pc + 2) & 0xFFFF

# --- SYS (0NNN) ---
# @intent:responsibility 機械語ルーチン呼び出し。このインタプリタでは何もしません。
def execute_sys(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    pass

# --- RET (00EE) ---
# @intent:responsibility スタックから戻りアドレスをポップしてPCに設定します。
def execute_ret(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    state.pc = state.stack.pop(pc=(state.pc - 2) & 0xFFFF)

# --- JP addr (1NNN) ---
def execute_jp(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    state.pc = nnn_of(op)

# --- CALL addr (2NNN) ---
# @intent:responsibility 次の命令のアドレスをプッシュしてからサブルーチンへジャンプします。
def execute_call(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    state.stack.push(state.pc, pc=(state.pc - 2) & 0xFFFF)
    state.pc = nnn_of(op)

# --- SE Vx, byte (3XKK) ---
def execute_se_imm(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    if state.v[x_of(op)] == kk_of(op):
        _skip(state)

# --- SNE Vx, byte (4XKK) ---
def execute_sne_imm(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    if state.v[x_of(op)] != kk_of(op):
        _skip(state)

# --- SE Vx, Vy (5XY0) ---
def execute_se_reg(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    if state.v[x_of(op)] == state.v[y_of(op)]:
        _skip(state)

# --- SNE Vx, Vy (9XY0) ---
def execute_sne_reg(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    if state.v[x_of(op)] != state.v[y_of(op)]:
        _skip(state)

# --- JP V0, addr (BNNN) ---
def execute_jp_v0(state: Chip8CpuState, bus: AddressSpace, devices: Devices, op: Operation) -> None:
    state.pc = (nnn_of(op) + state.v[0]) & 0xFFFF
