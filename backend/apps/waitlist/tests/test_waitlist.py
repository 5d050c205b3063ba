"""
Tests for the waitlist.
"""
from django.core import mail
from django.urls import reverse

from apps.buyers.tests.base import APIEndpointTestMixin, BaseBuyerTestCase, FailingEmailSender
from apps.waitlist.models import WaitlistEntry
from apps.waitlist.services import DuplicateWaitlistEmail, WaitlistService
from common.exceptions import DeliveryFailed, MissingFields
from common.services.email import DjangoEmailSender


class WaitlistServiceTestCase(BaseBuyerTestCase):
    """Test cases for WaitlistService."""

    def test_join(self):
        service = WaitlistService(DjangoEmailSender(), require_confirmation=False, admin_emails=[])

        entry = service.join(' Ada ', 'Ada@Example.com')

        self.assertEqual(entry.name, 'Ada')
        self.assertEqual(entry.email, 'ada@example.com')
        self.assertIsNotNone(entry.joined_at)

    def test_duplicate_email(self):
        service = WaitlistService(DjangoEmailSender(), require_confirmation=False, admin_emails=[])
        service.join('Ada', 'ada@example.com')

        with self.assertRaises(DuplicateWaitlistEmail) as ctx:
            service.join('Someone Else', 'ADA@example.com')

        self.assertEqual(ctx.exception.as_dict()['code'], 'DUPLICATE_EMAIL')
        self.assertEqual(ctx.exception.as_dict()['field'], 'email')
        self.assertEqual(WaitlistEntry.objects.count(), 1)

    def test_missing_fields(self):
        service = WaitlistService(DjangoEmailSender(), require_confirmation=False, admin_emails=[])

        with self.assertRaises(MissingFields) as ctx:
            service.join('', None)

        self.assertEqual(ctx.exception.fields, ['name', 'email'])

    def test_confirmation_sent_when_required(self):
        service = WaitlistService(DjangoEmailSender(), require_confirmation=True, admin_emails=[])

        service.join('Ada', 'ada@example.com')

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['ada@example.com'])

    def test_failed_confirmation_rolls_back_entry(self):
        service = WaitlistService(FailingEmailSender(), require_confirmation=True, admin_emails=['ops@kudora.com'])

        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            with self.assertRaises(DeliveryFailed):
                service.join('Ada', 'ada@example.com')

        self.assertEqual(WaitlistEntry.objects.count(), 0)
        self.assertEqual(callbacks, [])

    def test_admins_notified_after_commit(self):
        service = WaitlistService(DjangoEmailSender(), require_confirmation=False, admin_emails=['ops@kudora.com'])

        with self.captureOnCommitCallbacks(execute=True):
            service.join('Ada', 'ada@example.com')

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['ops@kudora.com'])
        self.assertIn('ada@example.com', mail.outbox[0].body)

    def test_failed_admin_notification_keeps_entry(self):
        service = WaitlistService(FailingEmailSender(), require_confirmation=False, admin_emails=['ops@kudora.com'])

        with self.captureOnCommitCallbacks(execute=True):
            service.join('Ada', 'ada@example.com')

        self.assertTrue(WaitlistEntry.objects.filter(email='ada@example.com').exists())


class WaitlistEndpointTestCase(BaseBuyerTestCase, APIEndpointTestMixin):
    """Test cases for the waitlist endpoint."""

    def setUp(self):
        super().setUp()
        self.url = reverse('waitlist:waitlist')

    def test_join(self):
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(self.url, {'name': 'Ada', 'email': 'ada@example.com'}, format='json')

        self.assert_response_success(response, 201)
        self.assertEqual(response.data['data']['email'], 'ada@example.com')
        # WAITLIST_ADMIN_EMAILS in test settings
        self.assertEqual(mail.outbox[0].to, ['ops@kudora.com'])

    def test_join_duplicate(self):
        self.client.post(self.url, {'name': 'Ada', 'email': 'ada@example.com'}, format='json')

        response = self.client.post(self.url, {'name': 'Ada', 'email': 'ada@example.com'}, format='json')

        self.assert_response_error(response, 409, code='DUPLICATE_EMAIL')
        self.assertEqual(response.data['field'], 'email')

    def test_join_missing_name(self):
        response = self.client.post(self.url, {'email': 'ada@example.com'}, format='json')

        self.assert_response_error(response, 400, code='missing_fields')
        self.assertEqual(response.data['missing_fields'], ['name'])

    def test_join_invalid_email(self):
        response = self.client.post(self.url, {'name': 'Ada', 'email': 'nope'}, format='json')

        self.assert_response_error(response, 400, code='validation_error')

    def test_list_newest_first(self):
        first = WaitlistEntry.objects.create(name='First', email='first@example.com')
        second = WaitlistEntry.objects.create(name='Second', email='second@example.com')
        self.authenticate()

        response = self.client.get(self.url)

        self.assert_response_success(response)
        self.assertEqual(response.data['count'], 2)
        self.assertEqual([e['id'] for e in response.data['data']], [second.id, first.id])

    def test_list_requires_reviewer(self):
        self.assert_requires_reviewer(self.url)
