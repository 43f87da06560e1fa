"""
Seed data script for the Classroom Bot.
Creates the groups referenced by the roster so registration can resolve them.
"""
import logging

from config import configure_logging
from config.roster import Roster, get_roster
from database import get_db_context, init_db, Group

logger = logging.getLogger(__name__)


def seed_groups(roster: Roster = None) -> list[int]:
    """
    Create one group per group ID referenced by the roster.
    Existing groups are left untouched.

    Returns:
        IDs of the groups that were created
    """
    roster = roster or get_roster()
    created = []

    with get_db_context() as db:
        for group_id in sorted(roster.group_ids()):
            if db.query(Group).filter(Group.id == group_id).first():
                continue
            db.add(Group(id=group_id, group_name=f"Group {group_id}"))
            created.append(group_id)

    logger.info("Seeded %d groups: %s", len(created), created)
    return created


if __name__ == "__main__":
    configure_logging()
    logger.info("Initializing database...")
    init_db()
    logger.info("Seeding database...")
    seed_groups()
