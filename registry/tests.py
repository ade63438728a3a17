import json
from io import StringIO

from django.core.management import call_command
from django.db import IntegrityError
from django.test import TestCase
from django.urls import reverse

from pawsitive.errors import Conflict, InvalidInput, NotFound
from registry.models import Pet, Role, User
from registry.services import (
    REQUIRED_ROLES,
    create_role,
    find_pet,
    find_role,
    get_pet,
    get_user,
    seed_required_roles,
)


class MigrateSeedingTests(TestCase):
    def test_required_roles_exist_after_migrate(self):
        for name in REQUIRED_ROLES:
            self.assertTrue(Role.objects.filter(name__iexact=name).exists(), name)
        self.assertEqual(seed_required_roles(), [])


class RoleSeedingTests(TestCase):
    def setUp(self):
        # start from an empty table; migrate has already seeded it
        Role.objects.all().delete()

    def test_seed_creates_required_roles(self):
        created = seed_required_roles()
        self.assertEqual(created, list(REQUIRED_ROLES))
        self.assertEqual(sorted(Role.objects.values_list("name", flat=True)), ["Admin", "Donor"])

    def test_second_run_creates_nothing(self):
        seed_required_roles()
        self.assertEqual(seed_required_roles(), [])
        self.assertEqual(Role.objects.count(), 2)

    def test_existing_role_in_other_case_is_not_duplicated(self):
        Role.objects.create(name="donor")
        self.assertEqual(seed_required_roles(), ["Admin"])
        self.assertEqual(Role.objects.filter(name__iexact="Donor").count(), 1)

    def test_lookup_is_case_insensitive(self):
        seed_required_roles()
        donor = find_role("Donor")
        self.assertIsNotNone(donor)
        self.assertEqual(find_role("donor"), donor)
        self.assertEqual(find_role("DONOR"), donor)
        self.assertIsNone(find_role("Adoptor"))

    def test_command_reports_and_is_idempotent(self):
        out = StringIO()
        call_command("seed_roles", stdout=out)
        self.assertIn("Created role: Donor", out.getvalue())
        self.assertIn("created=2", out.getvalue())

        out = StringIO()
        call_command("seed_roles", stdout=out)
        self.assertIn("Role already exists: Admin", out.getvalue())
        self.assertIn("created=0", out.getvalue())
        self.assertEqual(Role.objects.count(), 2)

    def test_command_dry_run_writes_nothing(self):
        out = StringIO()
        call_command("seed_roles", dry_run=True, stdout=out)
        self.assertIn("[DRY] Would create role: Donor", out.getvalue())
        self.assertEqual(Role.objects.count(), 0)


class RoleCreationTests(TestCase):
    def setUp(self):
        Role.objects.all().delete()

    def test_duplicate_name_in_any_case_conflicts(self):
        create_role("Donor")
        with self.assertRaises(Conflict):
            create_role("DONOR")
        self.assertEqual(Role.objects.count(), 1)

    def test_blank_name_is_invalid(self):
        with self.assertRaises(InvalidInput):
            create_role("   ")

    def test_database_enforces_case_insensitive_uniqueness(self):
        Role.objects.create(name="Admin")
        with self.assertRaises(IntegrityError):
            Role.objects.create(name="admin")


class LookupTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create(name="Ana Reyes", email="ana@example.com")
        cls.pet = Pet.objects.create(name="Biscuit", species="Dog", added_by=cls.user)

    def test_get_user_and_pet(self):
        self.assertEqual(get_user(self.user.pk), self.user)
        self.assertEqual(get_pet(self.pet.pk), self.pet)

    def test_missing_rows_raise_not_found(self):
        with self.assertRaisesMessage(NotFound, "User not found"):
            get_user(9999)
        with self.assertRaisesMessage(NotFound, "Pet not found"):
            get_pet(9999)

    def test_find_pet_tolerates_missing(self):
        self.assertEqual(find_pet(self.pet.pk), self.pet)
        self.assertIsNone(find_pet(9999))
        self.assertIsNone(find_pet(None))

    def test_new_pet_defaults_to_available(self):
        self.assertEqual(self.pet.status, Pet.Status.AVAILABLE)

    def test_email_is_unique(self):
        with self.assertRaises(IntegrityError):
            User.objects.create(name="Other", email="ana@example.com")


class RoleApiTests(TestCase):
    def post_json(self, payload):
        return self.client.post(reverse("registry:roles"), data=json.dumps(payload), content_type="application/json")

    def test_list_roles(self):
        r = self.client.get(reverse("registry:roles"))
        self.assertEqual(r.status_code, 200)
        names = sorted(role["name"] for role in r.json())
        self.assertEqual(names, ["Admin", "Donor"])

    def test_create_role(self):
        r = self.post_json({"name": " Volunteer "})
        self.assertEqual(r.status_code, 201)
        data = r.json()
        self.assertEqual(data["name"], "Volunteer")
        self.assertTrue(Role.objects.filter(pk=data["id"], name="Volunteer").exists())

    def test_duplicate_in_other_case_is_409(self):
        r = self.post_json({"name": "ADMIN"})
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.json()["error"], "conflict")
        self.assertEqual(Role.objects.filter(name__iexact="admin").count(), 1)

    def test_bad_bodies_are_400(self):
        for payload in ({}, {"name": ""}, {"name": "   "}, {"name": "Vet", "extra": 1}):
            r = self.post_json(payload)
            self.assertEqual(r.status_code, 400, payload)
            self.assertEqual(r.json()["error"], "invalid_input")

        r = self.client.post(reverse("registry:roles"), data="{not json", content_type="application/json")
        self.assertEqual(r.status_code, 400)
