"""
Auth Module

Administrator sign-in and the session gate used before any backend call.
"""

from .provider import (
    AuthProvider,
    Session,
    StaticAuthProvider,
    User,
    require_authenticated,
)
from .supabase import SupabaseAuthProvider

__all__ = [
    "AuthProvider",
    "Session",
    "StaticAuthProvider",
    "SupabaseAuthProvider",
    "User",
    "require_authenticated",
]
