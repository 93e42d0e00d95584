"""
Authentication models.

This module defines:
- User: Custom user model with email-based authentication (slim, auth-focused)
- Profile: Public profile data shown to other users (OneToOne with User)

Related files:
    - managers.py: Custom user manager for email-based creation
    - signals.py: Auto-create profile on user creation

The chat app only reads from these models: a conversation summary shows
the counterpart's Profile (see chat.summaries.normalize_profile).
"""

import re

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models.functions import Lower

from core.models import BaseModel
from authentication.managers import UserManager


def validate_username_format(value):
    """Validate username format: 3-30 chars, alphanumeric + _ + -."""
    if not re.match(r"^[a-zA-Z0-9_-]{3,30}$", value):
        raise ValidationError(
            "Username must be 3-30 characters and contain only "
            "letters, numbers, underscores, and hyphens."
        )


class User(AbstractBaseUser, PermissionsMixin):
    """
    Account that logs in with an email address.

    Everything other users see (handle, name, avatar) is on Profile; the
    chat app only ever needs the id from here.
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="Login identifier",
    )
    is_active = models.BooleanField(
        default=True,
        help_text="Inactive users are refused by the API and the chat socket.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Grants access to the admin site.",
    )
    date_joined = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.email

    def get_full_name(self):
        """Profile display name, then username, then email."""
        try:
            profile = self.profile
        except Profile.DoesNotExist:
            return self.email
        return profile.display_name or profile.username or self.email

class Profile(BaseModel):
    """
    Public profile data.

    Fields:
        user: OneToOne link to User (also serves as primary key)
        username: Unique handle (3-30 chars, alphanumeric + _ + -)
        display_name: Free-form name; empty means "use the username"
        avatar: Avatar URL or storage path
        cover_image: Cover image URL or storage path
        bio, occupation, location, website: Free-form profile details

    Note:
        Profile is automatically created via signals when a User is created.
    """

    DETAIL_FIELDS = (
        "avatar",
        "cover_image",
        "bio",
        "occupation",
        "location",
        "website",
    )

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
        primary_key=True,
        help_text="User this profile belongs to",
    )

    username = models.CharField(
        max_length=30,
        blank=True,
        db_index=True,
        validators=[validate_username_format],
        help_text="Unique username (3-30 chars, alphanumeric + _ + -)",
    )
    display_name = models.CharField(
        max_length=150,
        blank=True,
        help_text="Name shown to other users (falls back to username)",
    )

    avatar = models.CharField(
        max_length=500,
        blank=True,
        help_text="Avatar URL or storage path",
    )
    cover_image = models.CharField(
        max_length=500,
        blank=True,
        help_text="Cover image URL or storage path",
    )
    bio = models.TextField(blank=True)
    occupation = models.CharField(max_length=150, blank=True)
    location = models.CharField(max_length=150, blank=True)
    website = models.CharField(max_length=300, blank=True)

    class Meta:
        db_table = "authentication_profile"
        verbose_name = "profile"
        verbose_name_plural = "profiles"
        constraints = [
            models.UniqueConstraint(
                Lower("username"),
                name="unique_username_case_insensitive",
                condition=models.Q(username__gt=""),
            ),
        ]

    def __str__(self):
        return self.username or str(self.user)

    def get_details(self) -> dict:
        """Return the detail fields as a plain dict (empty values become None)."""
        return {name: getattr(self, name) or None for name in self.DETAIL_FIELDS}

    def save(self, *args, **kwargs):
        """Normalize username before saving."""
        if self.username:
            self.username = self.username.lower()
        super().save(*args, **kwargs)
