"""Location of the run archive inside the data directory."""

from textventure.storage import RUNS_FILE, JsonRunArchive

from .core import data_dir


def get_archive() -> JsonRunArchive:
    """Archive adapter bound to the current data directory."""
    return JsonRunArchive(data_dir() / RUNS_FILE)
