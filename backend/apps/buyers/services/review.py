"""
Admin review workflow: reviewer decisions on buyer verification status.
Handles ALL status changes made after sign-up.

Decisions overwrite status and admin_notes; no review history is kept.
"""
import logging

from django.db import transaction
from django.utils import timezone

from apps.buyers.models import Buyer
from apps.verification.models import PhoneVerificationChallenge
from apps.verification.services import PhoneVerificationService
from common.exceptions import InvalidStatus, NotFound
from common.services.email import EmailDeliveryError

logger = logging.getLogger(__name__)
security_logger = logging.getLogger('security')

Status = Buyer.Status


class AdminReviewWorkflow:
    """
    Reviewer-driven buyer status changes.
    Any status may move to any reviewable status, so a reviewer can revise an
    earlier decision. Nothing returns to INCOMPLETE.
    """

    REVIEWABLE_STATUSES = (Status.PENDING, Status.APPROVED, Status.REJECTED)

    DEFAULT_NOTES = {
        Status.APPROVED: "Approved by admin",
        Status.REJECTED: "Rejected by admin",
    }

    def __init__(self, email_sender=None):
        self.email_sender = email_sender

    def approve(self, buyer_id, notes=None, reviewer=None) -> Buyer:
        return self._transition(buyer_id, Status.APPROVED, notes or self.DEFAULT_NOTES[Status.APPROVED], reviewer)

    def reject(self, buyer_id, notes=None, reviewer=None) -> Buyer:
        return self._transition(buyer_id, Status.REJECTED, notes or self.DEFAULT_NOTES[Status.REJECTED], reviewer)

    def update_verification_status(self, buyer_id, status, notes=None, reviewer=None) -> Buyer:
        """
        Set a buyer's status directly.

        Raises:
            InvalidStatus: status is not pending, approved or rejected
            NotFound: unknown buyer
        """
        if status not in self.REVIEWABLE_STATUSES:
            raise InvalidStatus(
                f"Status must be one of: {', '.join(self.REVIEWABLE_STATUSES)}",
                field="status"
            )
        return self._transition(buyer_id, Status(status), notes or "", reviewer)

    def list_all(self, with_verification_summary=True):
        """
        All buyers, newest first. With the summary, each buyer carries a
        `verification_summary` dict: phone_status and documents_uploaded.
        """
        buyers = list(Buyer.objects.all())
        if not with_verification_summary:
            return buyers

        now = timezone.now()
        challenges = {
            challenge.phone: challenge
            for challenge in PhoneVerificationChallenge.objects.filter(phone__in=[b.phone for b in buyers])
        }
        for buyer in buyers:
            phone_status = PhoneVerificationService.phone_status(
                buyer.is_phone_verified, challenges.get(buyer.phone), now
            )
            buyer.verification_summary = {
                'phone_status': phone_status.value,
                'documents_uploaded': buyer.documents_uploaded,
            }
        return buyers

    def _transition(self, buyer_id, to_status, notes, reviewer):
        with transaction.atomic():
            try:
                # Lock the row so concurrent decisions apply one after the other
                buyer = Buyer.objects.select_for_update().get(id=buyer_id)
            except Buyer.DoesNotExist:
                raise NotFound("Buyer not found")

            old_status = buyer.status
            buyer.status = to_status
            buyer.admin_notes = notes
            buyer.save(update_fields=['status', 'admin_notes', 'updated_at'])

            reviewer_str = getattr(reviewer, 'username', None) or 'system'
            security_logger.warning(
                f"[ADMIN ACTION] {reviewer_str} changed buyer {buyer.id} status {old_status} → {to_status}"
            )

            if self.email_sender and to_status in self.DEFAULT_NOTES:
                transaction.on_commit(lambda: self._notify_decision(buyer))

        return buyer

    def _notify_decision(self, buyer):
        """Best-effort email to the buyer; failures are logged, never raised."""
        if buyer.status == Status.APPROVED:
            subject = "🎉 Your Kudora buyer account has been approved!"
            body = (
                f"Hi {buyer.first_name},\n\n"
                "Your identity verification is complete and your buyer account is now active."
            )
        else:
            subject = "Action Required: Kudora verification update"
            body = (
                f"Hi {buyer.first_name},\n\n"
                "We could not approve your buyer account.\n\n"
                f"Reviewer notes: {buyer.admin_notes}"
            )

        try:
            self.email_sender.send(buyer.email, subject, body)
        except EmailDeliveryError as e:
            logger.error(f"Failed to send decision email to buyer {buyer.id}: {e}")
