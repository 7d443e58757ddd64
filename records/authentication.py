"""
Authentication classes for the records API.

``TokenAuthentication`` keeps a stable import path for the DRF
configuration; ``UsernameOrEmailBackend`` lets staff log in with either
their username or the email they registered with.
"""
from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend
from django.db.models import Q
from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    """Token authentication using the ``Token`` keyword."""

    keyword = 'Token'


class UsernameOrEmailBackend(ModelBackend):
    """Resolve the login identifier against username first, then email."""

    def authenticate(self, request, username=None, password=None, **kwargs):
        if username is None or password is None:
            return None
        User = get_user_model()
        user = (
            User.objects.filter(Q(username__iexact=username) | Q(email__iexact=username))
            .order_by('id')
            .first()
        )
        if user is None:
            # Run the hasher once to keep timing comparable with a real user
            User().set_password(password)
            return None
        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None
