# spansync/config.py

from __future__ import annotations

import yaml
from dataclasses import dataclass
from typing import Any, Dict


NORMALIZATION_FORMS = ("NFC", "NFD", "NFKC", "NFKD")


@dataclass(frozen=True)
class EngineSettings:
    normalization_form: str = "NFC"
    context_window_chars: int = 20
    edit_window_chars: int = 24
    max_compare_chars: int = 80
    signature_length: int = 16

    def __post_init__(self):
        if self.normalization_form not in NORMALIZATION_FORMS:
            raise ValueError(f"Unknown normalization form {self.normalization_form!r}")
        for name in ("context_window_chars", "edit_window_chars", "max_compare_chars"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")
        if self.signature_length <= 0:
            raise ValueError("signature_length must be > 0")


DEFAULT_SETTINGS = EngineSettings()


def _section(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = cfg.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Config section {name!r} must be a mapping")
    return section


def settings_from_dict(cfg: Dict[str, Any] | None) -> EngineSettings:
    if cfg is None:
        cfg = {}
    if not isinstance(cfg, dict):
        raise ValueError(f"Engine config must be a mapping, got {type(cfg).__name__}")
    norm_cfg = _section(cfg, "normalization")
    ctx_cfg = _section(cfg, "context")
    snap_cfg = _section(cfg, "snapshot")

    return EngineSettings(
        normalization_form=str(norm_cfg.get("form", DEFAULT_SETTINGS.normalization_form)).upper(),
        context_window_chars=int(ctx_cfg.get("window_chars", DEFAULT_SETTINGS.context_window_chars)),
        edit_window_chars=int(ctx_cfg.get("edit_window_chars", DEFAULT_SETTINGS.edit_window_chars)),
        max_compare_chars=int(ctx_cfg.get("max_compare_chars", DEFAULT_SETTINGS.max_compare_chars)),
        signature_length=int(snap_cfg.get("signature_length", DEFAULT_SETTINGS.signature_length)),
    )


def load_settings(path: str) -> EngineSettings:
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)

    return settings_from_dict(cfg)
