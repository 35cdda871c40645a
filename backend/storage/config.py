"""Global app configuration (LLM connection, world prompt, prompt overrides)."""

import json
import os
from pathlib import Path
from typing import Any

from textventure.prompts import INITIAL_GAME_PROMPT

from .core import data_dir


def _connection_defaults() -> dict[str, Any]:
    return {
        "provider_url": os.getenv("LLM_PROVIDER_URL", ""),
        "api_key": os.getenv("LLM_API_KEY", ""),
        "provider_format": os.getenv("LLM_PROVIDER_FORMAT", "koboldcpp"),
        "model": os.getenv("LLM_MODEL", ""),
        "timeout": 120,
    }


def _config_path() -> Path:
    return data_dir() / "config.json"


def get_config() -> dict[str, Any]:
    """Read config, returning defaults merged with stored values."""
    config: dict[str, Any] = {
        "llm_connection": _connection_defaults(),
        "world_prompt": INITIAL_GAME_PROMPT,
        "prompts": {"scene": "", "narrator": ""},
    }
    path = _config_path()
    if path.is_file():
        stored = json.loads(path.read_text())
        if isinstance(stored.get("llm_connection"), dict):
            config["llm_connection"].update(stored["llm_connection"])
        if stored.get("world_prompt"):
            config["world_prompt"] = stored["world_prompt"]
        if isinstance(stored.get("prompts"), dict):
            for name, source in stored["prompts"].items():
                if name in config["prompts"]:
                    config["prompts"][name] = source
    return config


def update_config(fields: dict[str, Any]) -> dict[str, Any]:
    """Merge fields into config and persist. Returns full config."""
    config = get_config()
    if isinstance(fields.get("llm_connection"), dict):
        config["llm_connection"].update(fields["llm_connection"])
    if "world_prompt" in fields:
        config["world_prompt"] = fields["world_prompt"] or INITIAL_GAME_PROMPT
    if isinstance(fields.get("prompts"), dict):
        for name, source in fields["prompts"].items():
            if name in config["prompts"]:
                config["prompts"][name] = source
    _config_path().write_text(json.dumps(config, indent=2))
    return config
