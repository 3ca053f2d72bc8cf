"""Tests for box and hailraiser validation."""

import unittest

from hailraisers.errors import ValidationError
from hailraisers.validation import validate_group, validate_member


class TestValidateGroup(unittest.TestCase):
    def test_valid_box(self):
        box = validate_group(
            {
                "name": "  Iron Yard CrossFit ",
                "address": "12 Forge Street",
                "countryCode": "US",
                "lat": 30.27,
                "lng": -97.74,
                "contactEmail": "",
            }
        )
        self.assertEqual(box.name, "Iron Yard CrossFit")
        self.assertIsNone(box.contact_email)
        self.assertEqual(box.to_firestore()["countryCode"], "US")

    def test_snake_case_keys_are_accepted(self):
        box = validate_group({"name": "Forge Athletics", "country_code": "CA"})
        self.assertEqual(box.country_code, "CA")

    def test_name_length(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_group({"name": "ab"})
        self.assertTrue(ctx.exception.messages[0].startswith("name:"))

        with self.assertRaises(ValidationError):
            validate_group({"name": "x" * 51})

    def test_name_characters(self):
        with self.assertRaises(ValidationError):
            validate_group({"name": "Iron <Yard>"})

    def test_coordinates_must_be_paired(self):
        with self.assertRaises(ValidationError):
            validate_group({"name": "Forge Athletics", "lat": 10.0})

    def test_coordinates_in_range(self):
        with self.assertRaises(ValidationError):
            validate_group({"name": "Forge Athletics", "lat": 91, "lng": 0})

    def test_invalid_contact_email(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_group({"name": "Forge Athletics", "contactEmail": "nope"})
        self.assertTrue(ctx.exception.messages[0].startswith("contactEmail:"))

    def test_unknown_field(self):
        with self.assertRaises(ValidationError):
            validate_group({"name": "Forge Athletics", "owner": "someone"})


class TestValidateMember(unittest.TestCase):
    def _raw(self, **overrides):
        raw = {
            "firstName": "Dana",
            "lastName": "Reyes",
            "country": "USA",
            "email": "dana@example.com",
            "submittedBy": "Webform",
        }
        raw.update(overrides)
        return raw

    def test_valid_member_without_box(self):
        member = validate_member(self._raw())
        self.assertIsNone(member.box_id)
        self.assertFalse(member.approved)

    def test_blank_box_id_is_absent(self):
        self.assertIsNone(validate_member(self._raw(boxId="  ")).box_id)

    def test_required_names(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_member(self._raw(firstName="", lastName=""))
        fields = [message.split(":")[0] for message in ctx.exception.messages]
        self.assertEqual(fields, ["firstName", "lastName"])

    def test_unknown_channel(self):
        with self.assertRaises(ValidationError):
            validate_member(self._raw(submittedBy="Kiosk"))

    def test_invalid_email(self):
        with self.assertRaises(ValidationError):
            validate_member(self._raw(email="dana@"))


if __name__ == "__main__":
    unittest.main()
