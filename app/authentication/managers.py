"""
User manager for email-identified accounts.
"""

from django.contrib.auth.models import BaseUserManager


class UserManager(BaseUserManager):
    """
    Usage:
        User.objects.create_user(email="ada@example.com", password="pw")
        User.objects.create_superuser(email="root@example.com", password="pw")
    """

    def create_user(self, email, password=None, **extra_fields):
        """
        Create a user. Without a password the account cannot log in with one.

        Raises:
            ValueError: If email is empty
        """
        if not email:
            raise ValueError("An email address is required")

        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        user = self.model(email=self.normalize_email(email), **extra_fields)

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        for flag in ("is_staff", "is_superuser"):
            if extra_fields.get(flag) is not True:
                raise ValueError(f"Superuser must have {flag}=True.")

        return self.create_user(email, password, **extra_fields)
