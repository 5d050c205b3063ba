"""
Tests for provider capabilities and encryption.
"""
from unittest.mock import MagicMock, patch

from cryptography.fernet import Fernet
from django.core import mail
from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase, override_settings
from twilio.base.exceptions import TwilioRestException

from common.services.email import DjangoEmailSender, EmailDeliveryError
from common.services.encryption import EncryptionService
from common.services.images import StorageImageStore
from common.services.providers import get_email_sender, get_image_store, get_sms_sender
from common.services.sms import LoggingSmsSender, SmsDeliveryError, TwilioSmsSender


class EncryptionServiceTestCase(SimpleTestCase):

    def test_round_trip(self):
        service = EncryptionService()
        token = service.encrypt('A1234567')

        self.assertNotEqual(token, 'A1234567')
        self.assertEqual(service.decrypt(token), 'A1234567')

    def test_empty_values(self):
        service = EncryptionService()

        self.assertEqual(service.encrypt(''), '')
        self.assertEqual(service.decrypt(''), '')

    def test_token_from_other_key(self):
        other = EncryptionService(key=Fernet.generate_key())
        token = other.encrypt('A1234567')

        with self.assertLogs('common.services.encryption', level='ERROR'):
            self.assertEqual(EncryptionService().decrypt(token), '')

    @override_settings(ENCRYPTION_KEY='')
    def test_missing_key(self):
        with self.assertRaises(ImproperlyConfigured):
            EncryptionService()


class TwilioSmsSenderTestCase(SimpleTestCase):

    def _sender(self):
        return TwilioSmsSender(account_sid='AC' + '0' * 32, auth_token='token', from_number='+15550000000', timeout=5)

    @override_settings(TWILIO_ACCOUNT_SID='', TWILIO_AUTH_TOKEN='', TWILIO_PHONE_NUMBER='')
    def test_unconfigured(self):
        with self.assertRaises(ValueError):
            TwilioSmsSender()

    def test_send(self):
        sender = self._sender()
        sender.client = MagicMock()

        sender.send('+15551234567', 'hello')

        sender.client.messages.create.assert_called_once_with(body='hello', from_='+15550000000', to='+15551234567')

    def test_provider_error_is_mapped(self):
        sender = self._sender()
        sender.client = MagicMock()
        sender.client.messages.create.side_effect = TwilioRestException(400, 'https://api.twilio.com', msg='Invalid number')

        with self.assertRaises(SmsDeliveryError):
            sender.send('+15551234567', 'hello')

    def test_network_error_is_mapped(self):
        sender = self._sender()
        sender.client = MagicMock()
        sender.client.messages.create.side_effect = ConnectionError('timed out')

        with self.assertRaises(SmsDeliveryError):
            sender.send('+15551234567', 'hello')


class DjangoEmailSenderTestCase(SimpleTestCase):

    def test_send(self):
        DjangoEmailSender(from_email='noreply@kudora.com').send('a@example.com', 'Hi', 'Body', html_body='<p>Body</p>')

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].from_email, 'noreply@kudora.com')
        self.assertEqual(mail.outbox[0].alternatives[0][1], 'text/html')

    def test_smtp_failure_is_mapped(self):
        with patch('common.services.email.EmailMultiAlternatives.send', side_effect=OSError('refused')):
            with self.assertRaises(EmailDeliveryError):
                DjangoEmailSender().send('a@example.com', 'Hi', 'Body')


class ProvidersTestCase(SimpleTestCase):

    def test_defaults(self):
        self.assertIsInstance(get_sms_sender(), LoggingSmsSender)
        self.assertIsInstance(get_email_sender(), DjangoEmailSender)
        self.assertIsInstance(get_image_store(), StorageImageStore)

    @override_settings(SMS_BACKEND='apps.buyers.tests.base.FakeSmsSender')
    def test_backend_is_configurable(self):
        self.assertEqual(type(get_sms_sender()).__name__, 'FakeSmsSender')
