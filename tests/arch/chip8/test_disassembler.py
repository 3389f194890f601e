# tests/arch/chip8/test_disassembler.py
"""
chip8_tracer.arch.chip8.disassemblerモジュールの単体テスト。
"""
from chip8_tracer.arch.chip8.disassembler import disassemble
from chip8_tracer.transport.address_space import AddressSpace, RAM

def _space(wrap=True):
    space = AddressSpace(wrap_addresses=wrap)
    space.register_device(0x000, 0xFFF, RAM(0x1000))
    return space

def test_disassemble_program():
    space = _space()
    for offset, byte in enumerate([0x60, 0x05, 0xD0, 0x15, 0x12, 0x00]):
        space.write(0x200 + offset, byte)
    space.get_and_clear_activity_log()

    lines = disassemble(space, 0x200, 6)

    assert lines == [
        (0x200, "60 05", "LD V0, #$05"),
        (0x202, "D0 15", "DRW V0, V1, 5"),
        (0x204, "12 00", "JP $200"),
    ]
    # 逆アセンブルはバスアクセスログを汚さない
    assert space.get_and_clear_activity_log() == []

def test_disassemble_unknown_word():
    space = _space()
    space.write(0x300, 0xFF)
    space.write(0x301, 0xFF)
    assert disassemble(space, 0x300, 2) == [(0x300, "FF FF", "UNKNOWN $FFFF")]

def test_disassemble_wraps_at_end():
    space = _space()
    lines = disassemble(space, 0xFFE, 4)
    assert [addr for addr, _, _ in lines] == [0xFFE, 0x000]

def test_disassemble_stops_at_end_without_wrap():
    space = _space(wrap=False)
    lines = disassemble(space, 0xFFC, 8)
    assert [addr for addr, _, _ in lines] == [0xFFC, 0xFFE]
