from bson import ObjectId
from django.test import TransactionTestCase, override_settings
from pymongo import MongoClient
from rest_framework.test import APIClient

from tasktracker.tests.fixtures.user import make_user_document
from tasktracker.tests.testcontainers.shared_mongo import get_shared_mongo_container
from tasktracker.utils.jwt_utils import generate_access_token
from tasktracker_project.db.config import DatabaseManager


class BaseMongoTestCase(TransactionTestCase):
    @classmethod
    def setUpClass(cls):
        super().setUpClass()
        cls.mongo_container = get_shared_mongo_container()
        cls.mongo_url = cls.mongo_container.get_connection_url()
        cls.mongo_client = MongoClient(cls.mongo_url, tz_aware=True)
        cls.db = cls.mongo_client.get_database("testdb")

        cls.override = override_settings(MONGODB_URI=cls.mongo_url, DB_NAME="testdb")
        cls.override.enable()
        DatabaseManager.reset()
        DatabaseManager().get_database()

    def setUp(self):
        for collection in self.db.list_collection_names():
            self.db[collection].delete_many({})

    @classmethod
    def tearDownClass(cls):
        cls.mongo_client.close()
        DatabaseManager.reset()
        cls.override.disable()
        super().tearDownClass()


class AuthenticatedMongoTestCase(BaseMongoTestCase):
    """Seeds three users and signs requests as whichever of them the test picks."""

    def setUp(self):
        super().setUp()
        self.client = APIClient()
        self.owner_id = self._create_user("Olivia Owner", "owner@example.com")
        self.admin_id = self._create_user("Adam Admin", "admin@example.com")
        self.collaborator_id = self._create_user("Cara Collaborator", "collab@example.com")
        self.login_as(self.owner_id)

    def _create_user(self, name: str, email: str) -> str:
        user_id = ObjectId()
        self.db.users.insert_one(make_user_document(name, email, user_id))
        return str(user_id)

    def login_as(self, user_id: str) -> None:
        token = generate_access_token({"user_id": user_id})
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

    def create_team(self, name: str = "Platform") -> str:
        response = self.client.post("/api/teams", {"name": name}, format="json")
        assert response.status_code == 201, response.data
        return response.data["data"]["id"]

    def add_member(self, team_id: str, user_id: str, email: str, role: str = "collaborator") -> None:
        """Invite and accept as ``user_id``, optionally promote, then sign back in as the owner."""
        self.login_as(self.owner_id)
        invitation = self.client.post(f"/api/teams/{team_id}/invite", {"email": email}, format="json")
        assert invitation.status_code == 201, invitation.data

        self.login_as(user_id)
        accepted = self.client.post(f"/api/teams/invitations/{invitation.data['data']['id']}/accept")
        assert accepted.status_code == 200, accepted.data

        self.login_as(self.owner_id)
        if role != "collaborator":
            promoted = self.client.put(f"/api/teams/{team_id}/members/{user_id}/role", {"role": role}, format="json")
            assert promoted.status_code == 200, promoted.data
