import unittest
from datetime import datetime, timezone
from unittest.mock import patch

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from rumbleparty.distribution import DistributionMode, InvalidInputError
from rumbleparty.models import (
    Base,
    NumberAssignment,
    Party,
    PartyParticipant,
    PartyStatus,
    RumbleEntry,
    RumbleEvent,
    User,
)
from rumbleparty.models.utils import generate_invite_code


class DBTestCase(unittest.TestCase):
    """Shared fixture; holds no tests of its own."""

    def setUp(self):
        # In-memory SQLite for isolation
        self.engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(
            bind=self.engine, future=True, expire_on_commit=False
        )

    def tearDown(self):
        self.engine.dispose()

    def _party(self, session, invite_code="ABC234", **kwargs) -> Party:
        host = User(email=f"host-{invite_code}@example.com")
        event = RumbleEvent(name="Royal Rumble", year=2025)
        party = Party(name="Party", invite_code=invite_code, host=host, event=event, **kwargs)
        session.add(party)
        session.flush()
        return party


class ModelTests(DBTestCase):
    def test_user_get_by_email_is_case_insensitive(self):
        with self.Session() as session:
            session.add(User(email="Fan@Example.com", name="Fan"))
            session.commit()

            found = User.get_by_email(session, " FAN@example.com ")
            self.assertIsNotNone(found)
            assert found is not None
            self.assertEqual(found.name, "Fan")
            self.assertIsNone(User.get_by_email(session, "other@example.com"))

    def test_party_defaults(self):
        with self.Session() as session:
            party = self._party(session, invite_code="abc234")
            self.assertEqual(party.invite_code, "ABC234")
            self.assertIs(party.party_status, PartyStatus.LOBBY)
            self.assertIs(party.mode, DistributionMode.EXCLUDE)
            self.assertIsNone(party.entry_fee)
            self.assertIsNotNone(party.created_at)

    def test_party_rejects_unknown_mode(self):
        with self.assertRaises(InvalidInputError):
            Party(name="Bad", invite_code="ZZZZZZ", distribution_mode="RANDOM")

    def test_get_by_invite_code(self):
        with self.Session() as session:
            party = self._party(session, invite_code="QWE234")
            session.commit()
            self.assertIs(Party.get_by_invite_code(session, "qwe234"), party)
            self.assertIsNone(Party.get_by_invite_code(session, "XXXXXX"))

    def test_unassigned_numbers_reflect_assignments(self):
        with self.Session() as session:
            party = self._party(session)
            guest = PartyParticipant(user=User(email="guest@example.com"))
            party.participants.append(guest)
            for number in (1, 2, 30):
                party.assignments.append(
                    NumberAssignment(entry_number=number, participant=guest)
                )
            session.flush()

            self.assertEqual(party.assigned_numbers(), {1, 2, 30})
            self.assertEqual(party.unassigned_numbers(), list(range(3, 30)))
            self.assertIs(party.participant_for_user(guest.user_id), guest)

    def test_participant_unique_per_party(self):
        with self.Session() as session:
            party = self._party(session)
            user = User(email="twice@example.com")
            session.add(user)
            session.flush()
            session.add_all(
                [
                    PartyParticipant(party_id=party.id, user_id=user.id),
                    PartyParticipant(party_id=party.id, user_id=user.id),
                ]
            )
            with self.assertRaises(IntegrityError):
                session.flush()

    def test_assignment_entry_number_range_is_enforced(self):
        with self.Session() as session:
            party = self._party(session)
            participant = PartyParticipant(user=User(email="range@example.com"))
            party.participants.append(participant)
            party.assignments.append(
                NumberAssignment(entry_number=31, participant=participant)
            )
            with self.assertRaises(IntegrityError):
                session.flush()

    def test_rumble_entry_state(self):
        with self.Session() as session:
            party = self._party(session)
            entry = RumbleEntry(entry_number=30)
            party.entries.append(entry)
            session.flush()

            self.assertIs(party.entry(30), entry)
            self.assertIsNone(party.entry(29))
            self.assertFalse(entry.has_entered)
            self.assertFalse(entry.is_active)

            entry.entered_at = datetime.now(timezone.utc)
            self.assertTrue(entry.is_active)
            entry.eliminated_at = datetime.now(timezone.utc)
            self.assertTrue(entry.is_eliminated)
            self.assertFalse(entry.is_active)

    def test_duplicate_entry_number_rejected(self):
        with self.Session() as session:
            party = self._party(session)
            party.entries.append(RumbleEntry(entry_number=5))
            party.entries.append(RumbleEntry(entry_number=5))
            with self.assertRaises(IntegrityError):
                session.flush()


class InviteCodeTests(DBTestCase):
    def test_generate_without_session(self):
        code = generate_invite_code(length=8)
        self.assertEqual(len(code), 8)
        self.assertNotIn("0", code)
        self.assertNotIn("O", code)
        self.assertNotIn("1", code)
        self.assertNotIn("I", code)

    def test_generate_skips_existing_codes(self):
        with self.Session() as session:
            self._party(session, invite_code="AAAAAA")
            with patch(
                "rumbleparty.models.utils.secrets.choice",
                side_effect=list("AAAAAA") + list("BBBBBB"),
            ):
                self.assertEqual(generate_invite_code(session), "BBBBBB")

    def test_generate_skips_pending_codes(self):
        with self.Session() as session:
            session.add(Party(name="Pending", invite_code="CCCCCC"))
            with patch(
                "rumbleparty.models.utils.secrets.choice",
                side_effect=list("CCCCCC") + list("DDDDDD"),
            ):
                self.assertEqual(generate_invite_code(session), "DDDDDD")

    def test_generate_gives_up_after_max_attempts(self):
        with self.Session() as session:
            self._party(session, invite_code="EEEEEE")
            with patch("rumbleparty.models.utils.secrets.choice", return_value="E"):
                with self.assertRaises(RuntimeError):
                    generate_invite_code(session, max_attempts=3)


if __name__ == "__main__":
    unittest.main()
