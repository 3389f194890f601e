# tests/conftest.py
"""
テスト共通のフィクスチャ。
"""
import pytest

from chip8_tracer.config.builder import SystemBuilder
from chip8_tracer.config.models import SystemConfig
from chip8_tracer.runtime.machine import Machine

# @intent:test_fixture フォントROMとRAMが配置済みの、シード固定のVMを生成します。
@pytest.fixture
def machine() -> Machine:
    config = SystemConfig(rng_seed=1234)
    return SystemBuilder().build_system(config)

# @intent:test_fixture 命令列をプログラム領域にロードするヘルパーを返します。
@pytest.fixture
def load_program(machine):
    def _load(*words: int) -> None:
        data = b"".join(word.to_bytes(2, "big") for word in words)
        machine.load_bytes(data)
    return _load
