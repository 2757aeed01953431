import os
import tempfile
import unittest
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, select

from portfolio.db import (
    ContactRow,
    DuplicateUserError,
    InMemoryDbClient,
    SqliteDbClient,
)

FAKE_HASH = "pbkdf2-sha256$not-a-real-hash"

SEEDED_TITLES = [
    "FitNow App",
    "Las Cañas - Web",
    "Las Cañas - Bot",
    "Inmuebles Comerciales SRL",
]


class DbClientContract:
    """
    Behaviour shared by every store. Subclasses provide `make_client` and
    `count_contacts`.
    """

    def make_client(self):
        raise NotImplementedError

    def count_contacts(self) -> int:
        raise NotImplementedError

    def setUp(self):
        self.db = self.make_client()
        self.assertTrue(self.db.seed("admin", FAKE_HASH))

    def tearDown(self):
        self.db.close()

    def test_seed_populates_profile_projects_and_admin(self):
        profile = self.db.get_profile()
        self.assertIsNotNone(profile)
        self.assertEqual(profile.id, 1)
        self.assertEqual(profile.name, "Manuel Cosovschi")
        self.assertEqual(profile.status, "DISPONIBLE")

        projects = self.db.get_projects()
        self.assertEqual([p.title for p in projects], SEEDED_TITLES)
        self.assertEqual([p.order_index for p in projects], [0, 1, 2, 3])
        self.assertEqual(
            projects[0].stack, ["SwiftUI", "NodeJS", "MySQL", "Python", "Jupyter"]
        )
        self.assertEqual(projects[1].links, {"web": "https://github.com/manuel-cosovschi"})

        admin = self.db.get_user("admin")
        self.assertIsNotNone(admin)
        self.assertEqual(admin.password, FAKE_HASH)

    def test_seed_is_idempotent(self):
        self.assertFalse(self.db.seed("admin", FAKE_HASH))
        self.assertFalse(self.db.seed("someone-else", FAKE_HASH))
        self.assertEqual(len(self.db.get_projects()), 4)
        self.assertIsNone(self.db.get_user("someone-else"))

    def test_update_profile_merges_partial_fields(self):
        before = self.db.get_profile()
        self.db.update_profile({"status": "OCUPADO", "title": "Ingeniero"})
        after = self.db.get_profile()
        self.assertEqual(after.status, "OCUPADO")
        self.assertEqual(after.title, "Ingeniero")
        self.assertEqual(after.name, before.name)
        self.assertEqual(after.pitch, before.pitch)
        self.assertEqual(after.email, before.email)

        # Applying the same update again changes nothing further.
        self.db.update_profile({"status": "OCUPADO", "title": "Ingeniero"})
        self.assertEqual(self.db.get_profile(), after)

    def test_update_profile_ignores_unknown_keys_and_id(self):
        before = self.db.get_profile()
        self.db.update_profile({"id": 7, "favourite_colour": "green"})
        self.assertEqual(self.db.get_profile(), before)

    def test_projects_sorted_by_order_index_regardless_of_insertion(self):
        self.db.create_project({"title": "Late", "order_index": 10})
        self.db.create_project({"title": "Early", "order_index": -1})
        self.db.create_project({"title": "Tie", "order_index": 1})

        projects = self.db.get_projects()
        indices = [p.order_index for p in projects]
        self.assertEqual(indices, sorted(indices))
        self.assertEqual(projects[0].title, "Early")
        self.assertEqual(projects[-1].title, "Late")
        # Ties keep insertion order.
        tied = [p.title for p in projects if p.order_index == 1]
        self.assertEqual(tied, ["Las Cañas - Web", "Tie"])

    def test_create_project_assigns_id_and_blanks_missing_fields(self):
        created = self.db.create_project({"title": "Solo"})
        self.assertEqual(created.id, 5)
        self.assertEqual(created.title, "Solo")
        self.assertIsNone(created.summary)
        self.assertEqual(created.stack, [])
        self.assertEqual(created.highlights, [])
        self.assertEqual(created.links, {})
        self.assertEqual(created.order_index, 0)

        stored = [p for p in self.db.get_projects() if p.id == created.id]
        self.assertEqual(stored, [created])

    def test_create_project_keeps_structured_fields(self):
        created = self.db.create_project(
            {
                "title": "API",
                "stack": ["FastAPI", "SQLite"],
                "highlights": ["Fast"],
                "challenges": ["None"],
                "links": {"github": "https://example.test/repo", "web": "#"},
                "order_index": 4,
            }
        )
        stored = [p for p in self.db.get_projects() if p.id == created.id][0]
        self.assertEqual(stored.stack, ["FastAPI", "SQLite"])
        self.assertEqual(stored.highlights, ["Fast"])
        self.assertEqual(stored.challenges, ["None"])
        self.assertEqual(
            stored.links, {"github": "https://example.test/repo", "web": "#"}
        )

    def test_create_user_rejects_duplicates(self):
        self.db.create_user("editor", FAKE_HASH)
        self.assertEqual(self.db.get_user("editor").username, "editor")
        with self.assertRaises(DuplicateUserError):
            self.db.create_user("editor", "other-hash")
        with self.assertRaises(DuplicateUserError):
            self.db.create_user("admin", "other-hash")
        self.assertEqual(self.db.get_user("editor").password, FAKE_HASH)

    def test_get_user_unknown(self):
        self.assertIsNone(self.db.get_user("nobody"))

    def test_event_stats_group_by_type_and_utc_day(self):
        day_one = datetime(2026, 3, 1, 23, 30, tzinfo=timezone.utc)
        day_two = datetime(2026, 3, 2, 0, 15, tzinfo=timezone.utc)
        # 01:00 at UTC+3 is still 1 March in UTC.
        plus_three = datetime(2026, 3, 2, 1, 0, tzinfo=timezone(timedelta(hours=3)))

        self.db.log_event("view_page", "home", {}, timestamp=day_one)
        self.db.log_event("view_page", "home", {"ref": "x"}, timestamp=plus_three)
        self.db.log_event("view_page", "projects", {}, timestamp=day_two)
        self.db.log_event("click", "home", {"target": "cv"}, timestamp=day_two)

        stats = [s.as_dict() for s in self.db.get_event_stats()]
        self.assertEqual(
            stats,
            [
                {"event_type": "click", "day": "2026-03-02", "count": 1},
                {"event_type": "view_page", "day": "2026-03-02", "count": 1},
                {"event_type": "view_page", "day": "2026-03-01", "count": 2},
            ],
        )

    def test_event_stats_empty(self):
        self.assertEqual(self.db.get_event_stats(), [])

    def test_log_event_defaults_to_now(self):
        self.db.log_event("view_page", "home", None)
        stats = self.db.get_event_stats()
        self.assertEqual(len(stats), 1)
        self.assertEqual(stats[0].day, datetime.now(timezone.utc).date().isoformat())

    def test_save_contact_appends(self):
        self.db.save_contact("Ana", "ana@example.com", "Hola, me interesa tu perfil")
        self.db.save_contact("Ana", "ana@example.com", "Hola, me interesa tu perfil")
        self.assertEqual(self.count_contacts(), 2)

    def test_is_ready(self):
        self.assertTrue(self.db.is_ready())


class InMemoryDbClientTests(DbClientContract, unittest.TestCase):
    def make_client(self):
        return InMemoryDbClient()

    def count_contacts(self) -> int:
        return len(self.db.contacts)

    def test_reset_clears_everything(self):
        self.db.log_event("view_page", "home", {})
        self.db.reset()
        self.assertIsNone(self.db.get_profile())
        self.assertEqual(self.db.get_projects(), [])
        self.assertEqual(self.db.get_event_stats(), [])
        self.assertTrue(self.db.seed("admin", FAKE_HASH))

    def test_update_profile_without_profile_is_noop(self):
        db = InMemoryDbClient()
        db.update_profile({"name": "Nobody"})
        self.assertIsNone(db.get_profile())


class SqliteDbClientTests(DbClientContract, unittest.TestCase):
    """
    Uses an in-memory SQLite URL for speed; file persistence is covered
    separately below.
    """

    def make_client(self):
        return SqliteDbClient("sqlite+pysqlite:///:memory:")

    def count_contacts(self) -> int:
        with self.db.Session() as session:
            return session.scalar(select(func.count()).select_from(ContactRow))


class SqliteFilePersistenceTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self._tmp.name, "impact.db")

    def tearDown(self):
        self._tmp.cleanup()

    def test_reopening_populated_store_does_not_reseed(self):
        db = SqliteDbClient(self.path)
        self.assertTrue(db.seed("admin", FAKE_HASH))
        db.update_profile({"status": "OCUPADO"})
        db.create_project({"title": "Extra", "order_index": 9})
        db.log_event("view_page", "home", {"a": [1, 2]})
        db.close()

        reopened = SqliteDbClient(self.path)
        try:
            self.assertFalse(reopened.seed("admin", FAKE_HASH))
            projects = reopened.get_projects()
            self.assertEqual(len(projects), 5)
            self.assertEqual(projects[-1].title, "Extra")
            self.assertEqual(reopened.get_profile().status, "OCUPADO")
            self.assertEqual(reopened.get_event_stats()[0].count, 1)
        finally:
            reopened.close()

    def test_missing_path_rejected(self):
        with self.assertRaises(ValueError):
            SqliteDbClient("")


if __name__ == "__main__":
    unittest.main()
