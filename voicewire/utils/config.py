from __future__ import annotations
import os, yaml

DEFAULT_CONFIG_PATH = os.environ.get("VOICEWIRE_CONFIG", "configs/default.yaml")
ENV_PREFIX = "VOICEWIRE_"

def load_yaml(path: str) -> dict:
    if not os.path.exists(path):
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}

def _cast(old, val: str):
    # naive type casting against the value already in the file
    if isinstance(old, bool):
        return val.lower() in ("1", "true", "yes", "y")
    if isinstance(old, int):
        return int(val)
    if isinstance(old, float):
        return float(val)
    return val

def env_override(cfg: dict, environ=None) -> dict:
    """
    Override nested keys from env vars, e.g. service.endpoint <- VOICEWIRE_SERVICE_ENDPOINT.
    Only keys present in the file are considered.
    """
    environ = os.environ if environ is None else environ
    def walk(prefix, d):
        for k, v in d.items():
            key = f"{prefix}_{k}".upper() if prefix else k.upper()
            if isinstance(v, dict):
                walk(key, v)
            elif ENV_PREFIX + key in environ:
                d[k] = _cast(v, environ[ENV_PREFIX + key])
    walk("", cfg)
    return cfg

def load_config(path: str = DEFAULT_CONFIG_PATH) -> dict:
    cfg = load_yaml(path)
    return env_override(cfg)

def section(cfg: dict, name: str) -> dict:
    return cfg.get(name) or {}
