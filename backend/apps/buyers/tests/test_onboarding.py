"""
Tests for buyer sign-up and identity availability checks.
"""
from unittest.mock import Mock

from django.contrib.auth.hashers import check_password
from django.urls import reverse
from django.utils import timezone

from apps.buyers.models import Buyer
from apps.buyers.services.onboarding import BuyerOnboarding
from apps.buyers.services.registry import IdentityRegistry
from apps.buyers.tests.base import APIEndpointTestMixin, BaseBuyerTestCase
from apps.verification.models import VerifiedPhone
from common.exceptions import (
    CaptchaRequired,
    ConflictError,
    ConsentRequired,
    MissingFields,
    ValidationError,
)


class BuyerOnboardingServiceTestCase(BaseBuyerTestCase):
    """Test cases for BuyerOnboarding.signup."""

    def setUp(self):
        super().setUp()
        self.onboarding = BuyerOnboarding(require_captcha=False)

    def test_minimal_signup_is_incomplete(self):
        buyer = self.onboarding.signup(self.signup_payload())

        self.assertEqual(buyer.status, Buyer.Status.INCOMPLETE)
        self.assertEqual(buyer.email, 'ada@example.com')
        self.assertFalse(buyer.is_phone_verified)
        self.assertFalse(buyer.marketing_accepted)
        self.assertIsNone(buyer.id_front_url)

    def test_signup_with_all_documents_is_pending(self):
        buyer = self.onboarding.signup(self.signup_payload(
            id_front_url='https://cdn.example.com/f.jpg',
            id_back_url='https://cdn.example.com/b.jpg',
            selfie_url='https://cdn.example.com/s.jpg',
        ))

        self.assertEqual(buyer.status, Buyer.Status.PENDING)

    def test_signup_with_some_documents_is_incomplete(self):
        buyer = self.onboarding.signup(self.signup_payload(
            id_front_url='https://cdn.example.com/f.jpg',
            selfie_url='https://cdn.example.com/s.jpg',
        ))

        self.assertEqual(buyer.status, Buyer.Status.INCOMPLETE)

    def test_password_is_hashed(self):
        buyer = self.onboarding.signup(self.signup_payload())

        self.assertNotEqual(buyer.password_hash, 'S3cure-pass!')
        self.assertTrue(check_password('S3cure-pass!', buyer.password_hash))

    def test_email_is_normalized(self):
        buyer = self.onboarding.signup(self.signup_payload(email='  Ada@Example.COM '))

        self.assertEqual(buyer.email, 'ada@example.com')

    def test_id_number_is_encrypted_at_rest(self):
        buyer = self.onboarding.signup(self.signup_payload(id_type='passport', id_number='X1234567'))
        buyer.refresh_from_db()

        self.assertNotIn('X1234567', buyer.id_number_encrypted)
        self.assertEqual(buyer.id_number, 'X1234567')
        self.assertEqual(buyer.id_type, 'passport')

    def test_declined_consent_rejected(self):
        with self.assertRaises(ConsentRequired):
            self.onboarding.signup(self.signup_payload(privacy_accepted=False))

        self.assertEqual(Buyer.objects.count(), 0)

    def test_declined_consent_wins_over_missing_fields(self):
        payload = self.signup_payload(accepted_terms=False)
        del payload['city']

        with self.assertRaises(ConsentRequired):
            self.onboarding.signup(payload)

    def test_missing_fields_are_listed(self):
        payload = self.signup_payload(last_name='  ')
        del payload['city']

        with self.assertRaises(MissingFields) as ctx:
            self.onboarding.signup(payload)

        self.assertEqual(ctx.exception.fields, ['last_name', 'city'])

    def test_missing_consent_is_a_missing_field(self):
        payload = self.signup_payload()
        del payload['privacy_accepted']

        with self.assertRaises(MissingFields) as ctx:
            self.onboarding.signup(payload)

        self.assertEqual(ctx.exception.fields, ['privacy_accepted'])

    def test_captcha_required_when_enabled(self):
        onboarding = BuyerOnboarding(require_captcha=True)

        with self.assertRaises(MissingFields):
            onboarding.signup(self.signup_payload())

        with self.assertRaises(CaptchaRequired):
            onboarding.signup(self.signup_payload(is_captcha_verified=False))

        buyer = onboarding.signup(self.signup_payload(is_captcha_verified=True))
        self.assertTrue(buyer.is_captcha_verified)

    def test_invalid_phone_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            self.onboarding.signup(self.signup_payload(phone='12ab'))

        self.assertEqual(ctx.exception.extra['field'], 'phone')

    def test_non_boolean_consent_rejected(self):
        with self.assertRaises(ValidationError):
            self.onboarding.signup(self.signup_payload(accepted_terms='maybe'))

    def test_duplicate_email_conflict(self):
        self.onboarding.signup(self.signup_payload())

        with self.assertRaises(ConflictError) as ctx:
            self.onboarding.signup(self.signup_payload(email='ADA@example.com', phone='+15559876543'))

        self.assertEqual(ctx.exception.field, 'email')

    def test_duplicate_phone_conflict(self):
        self.onboarding.signup(self.signup_payload())

        with self.assertRaises(ConflictError) as ctx:
            self.onboarding.signup(self.signup_payload(email='other@example.com'))

        self.assertEqual(ctx.exception.field, 'phone')

    def test_duplicate_phone_without_plus_conflicts(self):
        self.onboarding.signup(self.signup_payload(phone='+15551234567'))

        with self.assertRaises(ConflictError) as ctx:
            self.onboarding.signup(self.signup_payload(email='other@example.com', phone='15551234567'))

        self.assertEqual(ctx.exception.field, 'phone')
        self.assertEqual(Buyer.objects.count(), 1)

    def test_phone_is_stored_in_e164_form(self):
        buyer = self.onboarding.signup(self.signup_payload(phone='1 555 123 4567'))

        self.assertEqual(buyer.phone, '+15551234567')

    def test_email_reported_when_both_collide(self):
        self.onboarding.signup(self.signup_payload())

        with self.assertRaises(ConflictError) as ctx:
            self.onboarding.signup(self.signup_payload())

        self.assertEqual(ctx.exception.field, 'email')

    def test_unique_constraint_is_authoritative(self):
        """A signup that passes the pre-check but loses the insert race still conflicts."""
        self.create_buyer(email='ada@example.com', phone='+15550002222')
        registry = Mock(spec=IdentityRegistry)
        registry.find_conflict.side_effect = [None, 'email']

        with self.assertRaises(ConflictError) as ctx:
            BuyerOnboarding(registry=registry, require_captcha=False).signup(self.signup_payload())

        self.assertEqual(ctx.exception.field, 'email')
        self.assertEqual(Buyer.objects.count(), 1)

    def test_phone_verified_before_signup_is_carried_over(self):
        VerifiedPhone.objects.create(phone='+15551234567', verified_at=timezone.now())

        buyer = self.onboarding.signup(self.signup_payload(is_phone_verified=False))

        self.assertTrue(buyer.is_phone_verified)

    def test_client_cannot_claim_verified_phone(self):
        buyer = self.onboarding.signup(self.signup_payload(is_phone_verified=True))

        self.assertFalse(buyer.is_phone_verified)


class IdentityRegistryTestCase(BaseBuyerTestCase):
    """Test cases for uniqueness lookups."""

    def test_availability(self):
        self.create_buyer(email='taken@example.com', phone='+15550003333')
        registry = IdentityRegistry()

        self.assertFalse(registry.is_email_available('taken@example.com'))
        self.assertFalse(registry.is_email_available('TAKEN@example.com'))
        self.assertTrue(registry.is_email_available('free@example.com'))
        self.assertFalse(registry.is_phone_available('+15550003333'))
        self.assertTrue(registry.is_phone_available('+15550004444'))

    def test_find_conflict(self):
        self.create_buyer(email='taken@example.com', phone='+15550003333')

        self.assertIsNone(IdentityRegistry.find_conflict('free@example.com', '+15550004444'))
        self.assertEqual(IdentityRegistry.find_conflict('free@example.com', '+15550003333'), 'phone')
        self.assertEqual(IdentityRegistry.find_conflict('taken@example.com', '+15550003333'), 'email')


class SignupEndpointTestCase(BaseBuyerTestCase, APIEndpointTestMixin):
    """Test cases for sign-up and availability endpoints."""

    def setUp(self):
        super().setUp()
        self.signup_url = reverse('buyers:signup')
        self.check_email_url = reverse('buyers:check_email')
        self.check_phone_url = reverse('buyers:check_phone')

    # ==================== Sign-up Tests ====================

    def test_signup_success(self):
        response = self.client.post(self.signup_url, self.signup_payload(), format='json')

        self.assert_response_success(response, 201)
        buyer = response.data['buyer']
        self.assertEqual(buyer['email'], 'ada@example.com')
        self.assertEqual(buyer['name'], 'Ada Lovelace')
        self.assertEqual(buyer['status'], 'incomplete')
        self.assertNotIn('password_hash', buyer)
        self.assertNotIn('password', buyer)

    def test_signup_missing_fields(self):
        response = self.client.post(self.signup_url, {'email': 'a@x.com'}, format='json')

        self.assert_response_error(response, 400, code='missing_fields')
        self.assertIn('first_name', response.data['missing_fields'])
        self.assertNotIn('email', response.data['missing_fields'])

    def test_signup_consent_declined(self):
        response = self.client.post(self.signup_url, self.signup_payload(accepted_terms=False), format='json')

        self.assert_response_error(response, 400, code='consent_required')

    def test_signup_duplicate(self):
        self.client.post(self.signup_url, self.signup_payload(), format='json')

        response = self.client.post(self.signup_url, self.signup_payload(email='new@example.com'), format='json')

        self.assert_response_error(response, 409, code='conflict')
        self.assertEqual(response.data['field'], 'phone')
        self.assertEqual(response.data['error'], 'Phone already in use')

    # ==================== Availability Tests ====================

    def test_check_email_available(self):
        response = self.client.post(self.check_email_url, {'email': 'free@example.com'}, format='json')

        self.assert_response_success(response)
        self.assertTrue(response.data['available'])

    def test_check_email_taken(self):
        self.create_buyer(email='taken@example.com')

        response = self.client.post(self.check_email_url, {'email': 'Taken@Example.com'}, format='json')

        self.assert_response_error(response, 409, code='conflict')
        self.assertEqual(response.data['error'], 'Email already exists')

    def test_check_email_missing(self):
        response = self.client.post(self.check_email_url, {}, format='json')

        self.assert_response_error(response, 400, code='validation_error')
        self.assertIn('email', response.data['errors'])

    def test_check_email_malformed(self):
        response = self.client.post(self.check_email_url, {'email': 'not-an-email'}, format='json')

        self.assert_response_error(response, 400, code='validation_error')
        self.assertEqual(response.data['field'], 'email')

    def test_check_phone_available(self):
        response = self.client.post(self.check_phone_url, {'phone': '+1 (555) 000-9999'}, format='json')

        self.assert_response_success(response)

    def test_check_phone_taken(self):
        self.create_buyer(phone='+15550001111')

        response = self.client.post(self.check_phone_url, {'phone': '+1 555 000 1111'}, format='json')

        self.assert_response_error(response, 409, code='conflict')
        self.assertEqual(response.data['field'], 'phone')

    def test_check_phone_taken_without_plus(self):
        self.create_buyer(phone='+15550001111')

        response = self.client.post(self.check_phone_url, {'phone': '15550001111'}, format='json')

        self.assert_response_error(response, 409, code='conflict')


class BuyerProfileEndpointTestCase(BaseBuyerTestCase, APIEndpointTestMixin):
    """Test cases for the reviewer profile endpoint."""

    def test_profile_for_reviewer(self):
        buyer = self.create_buyer()
        buyer.set_id_number('AB987654')
        buyer.save()
        self.authenticate()

        response = self.client.get(reverse('buyers:profile', args=[buyer.id]))

        self.assert_response_success(response)
        self.assertEqual(response.data['buyer']['email'], 'buyer@example.com')
        self.assertEqual(response.data['buyer']['id_number_masked'], '****7654')
        self.assertNotIn('password_hash', response.data['buyer'])

    def test_profile_not_found(self):
        self.authenticate()

        response = self.client.get(reverse('buyers:profile', args=[9999]))

        self.assert_response_error(response, 404, code='not_found')

    def test_profile_requires_reviewer(self):
        buyer = self.create_buyer()

        self.assert_requires_reviewer(reverse('buyers:profile', args=[buyer.id]))
