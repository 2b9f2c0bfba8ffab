from unittest import TestCase
from unittest.mock import MagicMock, patch

from bson import ObjectId

from tasktracker.exceptions.common_exceptions import ConcurrencyConflictException
from tasktracker.repositories.team_repository import TeamRepository, to_document_value
from tasktracker.tests.fixtures.team import OWNER_ID, make_invitation, make_team


class TeamRepositoryTests(TestCase):
    def setUp(self):
        self.team = make_team()
        self.mock_collection = MagicMock()
        patcher = patch.object(TeamRepository, "get_collection", return_value=self.mock_collection)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_get_by_id_with_malformed_id_skips_query(self):
        self.assertIsNone(TeamRepository.get_by_id("not-an-id"))
        self.mock_collection.find_one.assert_not_called()

    def test_get_by_id_reads_active_teams_only(self):
        self.mock_collection.find_one.return_value = self.team.model_dump(by_alias=True)

        team = TeamRepository.get_by_id(str(self.team.id))

        self.assertEqual(team.id, self.team.id)
        self.mock_collection.find_one.assert_called_once_with({"_id": self.team.id, "isActive": True})

    def test_create_starts_at_version_one(self):
        self.mock_collection.insert_one.return_value = MagicMock(inserted_id=ObjectId())
        team = make_team(_id=None, version=9)

        created = TeamRepository.create(team)

        inserted = self.mock_collection.insert_one.call_args[0][0]
        self.assertEqual(inserted["version"], 1)
        self.assertNotIn("_id", inserted)
        self.assertEqual(inserted["members"][0]["role"], "owner")
        self.assertEqual(created.id, self.mock_collection.insert_one.return_value.inserted_id)

    def test_compare_and_set_filters_on_version(self):
        updated = self.team.model_dump(by_alias=True)
        updated["version"] = self.team.version + 1
        self.mock_collection.find_one_and_update.return_value = updated

        result = TeamRepository.compare_and_set(self.team, {"name": "Renamed"})

        query, update = self.mock_collection.find_one_and_update.call_args[0]
        self.assertEqual(query, {"_id": self.team.id, "isActive": True, "version": self.team.version})
        self.assertEqual(update["$inc"], {"version": 1})
        self.assertEqual(update["$set"]["name"], "Renamed")
        self.assertIn("updatedAt", update["$set"])
        self.assertEqual(result.version, self.team.version + 1)

    def test_compare_and_set_raises_on_stale_version(self):
        self.mock_collection.find_one_and_update.return_value = None

        with self.assertRaises(ConcurrencyConflictException) as ctx:
            TeamRepository.compare_and_set(self.team, {"name": "Renamed"})

        self.assertEqual(ctx.exception.reason, "version-conflict")

    def test_name_lookup_is_case_insensitive_and_escaped(self):
        self.mock_collection.count_documents.return_value = 1

        exists = TeamRepository.exists_with_name_for_member(OWNER_ID, "a.b", exclude_team_id=str(self.team.id))

        query = self.mock_collection.count_documents.call_args[0][0]
        self.assertTrue(exists)
        self.assertEqual(query["name"], {"$regex": "^a\\.b$", "$options": "i"})
        self.assertEqual(query["_id"], {"$ne": self.team.id})

    def test_pending_invitation_lookup_matches_id_or_email(self):
        self.mock_collection.find.return_value = []

        TeamRepository.list_with_pending_invitations_for(OWNER_ID, "Me@Example.com")

        query = self.mock_collection.find.call_args[0][0]
        self.assertEqual(
            query["invitations"]["$elemMatch"],
            {"status": "pending", "$or": [{"inviteeUserId": OWNER_ID}, {"inviteeEmail": "me@example.com"}]},
        )

    def test_to_document_value_dumps_nested_models(self):
        invitation = make_invitation()

        dumped = to_document_value([invitation])

        self.assertIsInstance(dumped[0]["id"], ObjectId)
        self.assertNotIn("respondedAt", dumped[0])
        self.assertEqual(dumped[0]["status"], "pending")
