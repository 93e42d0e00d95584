"""
Connections app: follow relationships between users.

A connection exists between two users when either one follows the other.
Direct messaging is gated on it (see ConnectionService.can_message).
"""
