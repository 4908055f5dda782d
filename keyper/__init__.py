"""
Keyper authentication broker.

Keyper lets third-party platforms authenticate their own end users without
running an identity service themselves. A platform registers once and is
issued an API key and a platform ID. With the API key, the platform can
register its users and sign them in; a successful sign-in yields a short-lived
session token that the platform may later verify to recover the user's public
profile.

Platform, user and token records are kept in a document store (Firestore in
production). Each sign-in is recorded twice: in the user's activity log and,
as a user snapshot, in the platform's activity log.
"""

from typing import Any, Dict

from fastapi import Request

from .services.store import DocumentStore


def get_store(request: Request) -> DocumentStore:
    """Dependency for fastapi routes."""
    store: DocumentStore = request.app.extra['STORE']
    return store


def get_config(request: Request) -> Dict[str, Any]:
    """Application settings, as populated by the app factory."""
    return request.app.extra
