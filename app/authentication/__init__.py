"""
Authentication application.

Key components:
    - User model: Custom email-based user authentication
    - Profile model: Public profile shown in conversation summaries

Usage:
    from authentication.models import User, Profile
"""
