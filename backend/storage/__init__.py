"""File-based JSON storage.

Data layout:
  data/
    config.json             App settings (LLM connection, world prompt, prompt overrides)
    textventure-runs.json   Archive of finished runs (one JSON array, append-only)

Config: get_config() returns defaults merged with stored values; the
defaults for the LLM connection come from LLM_* environment variables.
update_config() applies partial updates — llm_connection and prompts are
merged key-by-key, scalars overwritten.

In-progress games are not stored here; they live in memory in
backend.sessions.SessionStore.
"""

# Re-export all public symbols so `from backend import storage` keeps working.

from .core import (  # noqa: F401
    data_dir,
    init_storage,
)

from .config import (  # noqa: F401
    get_config,
    update_config,
)

from .runs import (  # noqa: F401
    get_archive,
)
