from django.db import DatabaseError, IntegrityError, OperationalError
from django.test import SimpleTestCase

from pawsitive.errors import Conflict, Internal, InvalidInput, NotFound, Transient
from pawsitive.schemas import RecordId, RequestModel, canonical_choice
from pawsitive.transactions import store_errors


class Probe(RequestModel):
    thing_id: RecordId


class RequestModelTests(SimpleTestCase):
    def test_accepts_plain_integer_id(self):
        self.assertEqual(Probe.from_payload({"thing_id": 3}).thing_id, 3)

    def test_rejects_other_shapes(self):
        for payload in ({"thing_id": "3"}, {"thing_id": True}, {"thing_id": 0}, {"thing": {"id": 3}},
                        {"thing_id": 3, "extra": 1}, [3], None):
            with self.subTest(payload=payload):
                with self.assertRaises(InvalidInput):
                    Probe.from_payload(payload)

    def test_error_names_the_field(self):
        with self.assertRaises(InvalidInput) as ctx:
            Probe.from_payload({})
        self.assertIn("thing_id", ctx.exception.message)

    def test_canonical_choice(self):
        self.assertEqual(canonical_choice("approved", ["Pending", "Approved"]), "Approved")
        self.assertIsNone(canonical_choice(None, ["Pending"]))
        with self.assertRaises(ValueError):
            canonical_choice("maybe", ["Pending"])


class StoreErrorTests(SimpleTestCase):
    def test_translation(self):
        cases = [
            (IntegrityError("dup"), Conflict, 409),
            (OperationalError("database is locked"), Transient, 503),
            (DatabaseError("boom"), Internal, 500),
        ]
        for raised, expected, status in cases:
            with self.subTest(raised=raised):
                with self.assertRaises(expected) as ctx:
                    with store_errors():
                        raise raised
                self.assertEqual(ctx.exception.status, status)

    def test_workflow_errors_pass_through(self):
        with self.assertRaises(NotFound):
            with store_errors():
                raise NotFound("Pet not found")

    def test_as_dict(self):
        self.assertEqual(NotFound("Pet not found").as_dict(), {"error": "not_found", "detail": "Pet not found"})
        self.assertEqual(Transient().as_dict(), {"error": "transient", "detail": "transient"})
