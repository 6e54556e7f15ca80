"""Tests for YAML config loading and env overrides."""

from voicewire.utils.config import env_override, load_config, section


def test_missing_file_is_empty(tmp_path):
    assert load_config(str(tmp_path / "missing.yaml")) == {}


def test_loads_yaml(tmp_path):
    p = tmp_path / "c.yaml"
    p.write_text("service:\n  endpoint: http://x\n  timeout: 10\n", encoding="utf-8")
    cfg = load_config(str(p))
    assert section(cfg, "service") == {"endpoint": "http://x", "timeout": 10}
    assert section(cfg, "audio") == {}


def test_env_override_casts_to_existing_type():
    cfg = {"service": {"endpoint": "http://x", "timeout": 10, "verify": True}}
    env = {
        "VOICEWIRE_SERVICE_ENDPOINT": "http://y",
        "VOICEWIRE_SERVICE_TIMEOUT": "30",
        "VOICEWIRE_SERVICE_VERIFY": "no",
    }
    env_override(cfg, env)
    assert cfg["service"] == {"endpoint": "http://y", "timeout": 30, "verify": False}


def test_env_override_ignores_unknown_keys():
    cfg = {"service": {"user": "a"}}
    env_override(cfg, {"VOICEWIRE_SERVICE_KEY": "k"})
    assert cfg == {"service": {"user": "a"}}
