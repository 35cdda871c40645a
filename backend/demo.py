"""Seed the run archive with a couple of finished adventures."""

import uuid
from datetime import datetime, timedelta, timezone

from backend import storage
from textventure.models import CharacterStats, RunRecord


def _demo_runs() -> list[RunRecord]:
    start = datetime.now(timezone.utc) - timedelta(days=1)
    return [
        RunRecord(
            id=uuid.uuid4().hex,
            start_time=start.isoformat(),
            end_time=(start + timedelta(minutes=7)).isoformat(),
            narratives=[
                "Torchlight flickers across the dungeon mouth. Something skitters in the dark.",
                "You charge the shadow. A cave troll rises, and its club finds your ribs.",
            ],
            status="loss",
            turns=9,
            final_feedback="The troll's final blow proves too much. Darkness takes you.",
            final_inventory=["rusty key"],
            final_skills=[],
            final_character_stats=CharacterStats(health=0, strength=11, agility=9, intelligence=10),
        ),
        RunRecord(
            id=uuid.uuid4().hex,
            start_time=(start + timedelta(hours=2)).isoformat(),
            end_time=(start + timedelta(hours=2, minutes=24)).isoformat(),
            narratives=[
                "The dungeon breathes cold air at you as you step inside.",
                "The Sunstone Amulet flares and the Lich King crumbles to ash.",
            ],
            status="win",
            turns=18,
            final_feedback="With the Sunstone Amulet and your hard-won lockpicking, you vanquish the Lich King!",
            final_inventory=["sunstone amulet", "healing potion"],
            final_skills=["lockpicking", "arcane lore"],
            final_character_stats=CharacterStats(health=42, strength=14, agility=12, intelligence=16),
        ),
    ]


def create_demo_runs() -> int:
    """Append the demo runs to the archive. Returns how many were written."""
    archive = storage.get_archive()
    return sum(1 for run in _demo_runs() if archive.append(run))
