"""Verification of session tokens by client platforms."""

import logging

from fastapi import status

from .. import util
from ..domain import CLIENTS, TOKENS, Expired, NotFound, SessionToken, \
    TokenState, Valid
from ..exceptions import AuthenticationError, NotFoundError, ValidationError
from ..services.store import DocumentStore
from . import ResponseData, envelope

logger = logging.getLogger(__name__)


async def load_token_state(store: DocumentStore, token: str,
                           now: int) -> TokenState:
    """Classify ``token`` as valid, expired or unknown as of ``now``."""
    doc = await store.get(TOKENS, token)
    if doc is None:
        return NotFound(token)
    profile = SessionToken.model_validate(doc)
    if profile.is_expired(now):
        return Expired(token, profile.expiry_timestamp)
    return Valid(profile)


async def check_token(store: DocumentStore, token: str,
                      apikey: str) -> ResponseData:
    """
    Get the profile of the user signed in with ``token``.

    Expired tokens are rejected, although they are not removed from the
    store.

    Raises
    ------
    :class:`.ValidationError`
        If the token or the API key is blank.
    :class:`.AuthenticationError`
        If the API key is unknown, or the token has expired.
    :class:`.NotFoundError`
        If there is no such token.

    """
    if not token or not token.strip() or not apikey or not apikey.strip():
        raise ValidationError('Token and API key are required',
                              'MISSING_PARAMETER')
    if await store.get(CLIENTS, apikey) is None:
        raise AuthenticationError('Invalid API key', 'INVALID_API_KEY')

    state = await load_token_state(store, token, util.now())
    if isinstance(state, NotFound):
        raise NotFoundError('Token not found', 'TOKEN_NOT_FOUND')
    if isinstance(state, Expired):
        logger.debug('Token expired at %i', state.expiry_timestamp)
        raise AuthenticationError('Token has expired', 'TOKEN_EXPIRED')
    return envelope('Token is valid', state.profile.to_doc()), \
        status.HTTP_200_OK, {}
