from datetime import datetime, timezone
from typing import Any, Dict, Optional

from django.core.management.base import BaseCommand

from tasktracker.constants.permissions import TeamRole
from tasktracker.repositories.team_repository import TeamRepository


def owner_fixup(team: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Return the ``$set`` document that gives a legacy team exactly one owner, or None
    when the team already has one and carries a version.
    """
    members = [dict(member) for member in team.get("members", [])]
    creator_id = str(team["createdBy"])
    changes: Dict[str, Any] = {}

    if not any(member.get("role") == TeamRole.OWNER.value for member in members):
        creator = next((m for m in members if str(m.get("userId")) == creator_id), None)
        if creator is not None:
            creator["role"] = TeamRole.OWNER.value
        else:
            members.insert(
                0,
                {
                    "userId": creator_id,
                    "role": TeamRole.OWNER.value,
                    "joinedAt": team.get("createdAt") or datetime.now(timezone.utc),
                    "invitedBy": None,
                },
            )
        changes["members"] = members

    if "version" not in team:
        changes["version"] = 1
    return changes or None


class Command(BaseCommand):
    help = "Give every team an explicit owner (the creator) and a version counter."

    def handle(self, *args, **options):
        collection = TeamRepository.get_collection()
        updated = 0
        for team in collection.find({}):
            changes = owner_fixup(team)
            if changes is None:
                continue
            collection.update_one({"_id": team["_id"]}, {"$set": changes})
            updated += 1
            self.stdout.write(f"Updated team {team['_id']}")
        self.stdout.write(self.style.SUCCESS(f"Owner migration complete. Updated {updated} team(s)."))
