# tests/config/test_config_loader.py
"""
chip8_tracer.config.loaderモジュールの単体テスト。
"""
import pytest

from chip8_tracer.config.loader import ConfigLoader
from chip8_tracer.config.models import SystemConfig

# @intent:test_suite YAML設定ファイルの読み込みと検証を確認します。

class TestConfigLoader:
    def test_empty_document_gives_defaults(self):
        config = ConfigLoader().load_from_string("")
        assert config == SystemConfig()
        assert config.timing.cycles_per_second == 700
        assert config.display.scale == 10
        assert config.keypad.mapping["Q"] == 0x4

    # @intent:test_case_file ファイルから全てのセクションが読み込まれることを検証します。
    def test_load_from_file(self, tmp_path):
        path = tmp_path / "system.yaml"
        path.write_text(
            "memory:\n"
            "  wrap_addresses: false\n"
            "timing:\n"
            "  cycles_per_second: 0\n"
            "display:\n"
            "  scale: 6\n"
            "  foreground: '#FFFFFF'\n"
            "keypad:\n"
            "  mapping:\n"
            "    1: 0x1\n"
            "    Up: '0x5'\n"
            "  quit_keys: [Escape, F10]\n"
            "stack_depth: 32\n"
            "rng_seed: 99\n"
        )
        config = ConfigLoader().load_from_file(str(path))

        assert config.memory.wrap_addresses is False
        assert config.timing.cycles_per_second == 0
        assert config.display.scale == 6
        assert config.display.foreground == "#FFFFFF"
        assert config.display.background == "#101010"
        assert config.keypad.mapping == {"1": 0x1, "Up": 0x5}
        assert config.keypad.quit_keys == ["Escape", "F10"]
        assert config.stack_depth == 32
        assert config.rng_seed == 99

    def test_root_must_be_mapping(self):
        with pytest.raises(ValueError, match="mapping"):
            ConfigLoader().load_from_string("- 1\n- 2\n")

    def test_negative_cycles_rejected(self):
        with pytest.raises(ValueError):
            ConfigLoader().load_from_string("timing:\n  cycles_per_second: -5\n")

    def test_zero_scale_rejected(self):
        with pytest.raises(ValueError):
            ConfigLoader().load_from_string("display:\n  scale: 0\n")

    def test_boolean_is_not_an_integer(self):
        with pytest.raises(ValueError, match="Invalid integer format"):
            ConfigLoader().load_from_string("stack_depth: true\n")

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            ConfigLoader().load_from_file(str(tmp_path / "missing.yaml"))

    # @intent:test_case_empty_section 値を持たないセクションは既定値として扱われます。
    def test_bare_sections_use_defaults(self):
        config = ConfigLoader().load_from_string("memory:\ntiming:\ndisplay:\nkeypad:\n")
        assert config == SystemConfig()

    @pytest.mark.parametrize("text", [
        "memory: 5\n",
        "timing: [1, 2]\n",
        "display: big\n",
        "keypad:\n  mapping: [Q, W]\n",
        "keypad:\n  quit_keys: Escape\n",
    ])
    def test_malformed_sections_rejected(self, text):
        with pytest.raises(ValueError):
            ConfigLoader().load_from_string(text)

    def test_keypad_index_out_of_range(self):
        with pytest.raises(ValueError, match="out of range"):
            ConfigLoader().load_from_string("keypad:\n  mapping:\n    Q: 16\n")

    def test_non_positive_stack_depth(self):
        with pytest.raises(ValueError):
            ConfigLoader().load_from_string("stack_depth: 0\n")

    def test_malformed_yaml(self):
        with pytest.raises(ValueError, match="Malformed YAML"):
            ConfigLoader().load_from_string("timing: [1, 2\n")
