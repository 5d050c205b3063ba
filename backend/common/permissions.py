"""
Reusable permission classes for the onboarding API.
"""
from rest_framework.permissions import BasePermission


class IsReviewer(BasePermission):
    """
    Permission for staff reviewers who approve or reject buyers.
    """

    message = "Reviewer access required"

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False

        return request.user.is_active and request.user.is_staff


class IsReviewerOrCreateOnly(IsReviewer):
    """
    Anyone may POST; every other method requires a reviewer.
    """

    def has_permission(self, request, view):
        if request.method == 'POST':
            return True

        return super().has_permission(request, view)
