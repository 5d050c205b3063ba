"""
Tests for phone, email and image payload validators.
"""
import base64
from io import BytesIO
from unittest.mock import patch

from django.test import SimpleTestCase
from PIL import Image

from common.exceptions import ValidationError
from common.validators import decode_image_payload, normalize_email, validate_international_phone_number


class PhoneValidatorTestCase(SimpleTestCase):

    def test_valid_numbers_are_cleaned(self):
        self.assertEqual(validate_international_phone_number('+15551234567'), '+15551234567')
        self.assertEqual(validate_international_phone_number('+44 7700 900123'), '+447700900123')
        self.assertEqual(validate_international_phone_number('+1 (555) 123-4567'), '+15551234567')

    def test_missing_plus_is_added(self):
        self.assertEqual(validate_international_phone_number('15551234567'), '+15551234567')
        self.assertEqual(validate_international_phone_number('1 555 123 4567'), '+15551234567')
        self.assertEqual(
            validate_international_phone_number('15551234567'),
            validate_international_phone_number('+15551234567')
        )

    def test_invalid_numbers(self):
        invalid_phones = [
            '123',  # Too short
            '+0123456789',  # Leading zero country code
            'notaphone',
            '+1555123456789012',  # Too long
            '+١٥٥٥١٢٣٤٥٦٧',  # Non-ASCII digits
            '',
        ]

        for phone in invalid_phones:
            with self.subTest(phone=phone):
                with self.assertRaises(ValidationError):
                    validate_international_phone_number(phone)


class EmailValidatorTestCase(SimpleTestCase):

    def test_normalize(self):
        self.assertEqual(normalize_email('  Ada@Example.COM '), 'ada@example.com')

    def test_invalid(self):
        for value in ['', None, 'ada', 'ada@', '@example.com']:
            with self.subTest(value=value):
                with self.assertRaises(ValidationError):
                    normalize_email(value)


class ImagePayloadTestCase(SimpleTestCase):

    def _encoded(self, fmt='PNG'):
        buf = BytesIO()
        Image.new('RGB', (20, 20), 'blue').save(buf, fmt)
        return base64.b64encode(buf.getvalue()).decode()

    def test_data_uri_and_plain_base64(self):
        encoded = self._encoded()

        self.assertEqual(decode_image_payload(f'data:image/png;base64,{encoded}'), base64.b64decode(encoded))
        self.assertEqual(decode_image_payload(encoded), base64.b64decode(encoded))

    def test_disallowed_format(self):
        with self.assertRaises(ValidationError):
            decode_image_payload(self._encoded(fmt='BMP'))

    def test_oversized_payload(self):
        with patch('common.validators.MAX_IMAGE_BYTES', 10):
            with self.assertRaises(ValidationError) as ctx:
                decode_image_payload(self._encoded())

        self.assertEqual(ctx.exception.extra['field'], 'imageData')

    def test_empty_payload(self):
        with self.assertRaises(ValidationError):
            decode_image_payload('data:image/png;base64,')

    def test_decompression_bomb_is_rejected(self):
        # Any real bomb trips Pillow's limit; lowering it keeps the fixture small
        with patch('PIL.Image.MAX_IMAGE_PIXELS', 100):
            with self.assertRaises(ValidationError) as ctx:
                decode_image_payload(self._encoded())

        self.assertEqual(ctx.exception.extra['field'], 'imageData')
        self.assertEqual(ctx.exception.message, 'Image dimensions are too large')

    def test_dimensions_over_cap_are_rejected(self):
        with patch('common.validators.MAX_IMAGE_PIXELS', 399):
            with self.assertRaises(ValidationError) as ctx:
                decode_image_payload(self._encoded())

        self.assertIn('20x20', ctx.exception.message)

    def test_dimensions_at_cap_are_accepted(self):
        with patch('common.validators.MAX_IMAGE_PIXELS', 400):
            self.assertTrue(decode_image_payload(self._encoded()))
