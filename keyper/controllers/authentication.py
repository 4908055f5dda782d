"""
Sign-in of end users on behalf of a client platform.

A successful sign-in issues a short-lived session token, which the platform
can later check with :func:`keyper.controllers.tokens.check_token`. The
sign-in is recorded in the activity log of both the user and the platform.
The token, and both log entries, are written in a single atomic commit.
"""

import logging
import uuid
from typing import Any, Dict, Optional, Tuple

from fastapi import status
from starlette.concurrency import run_in_threadpool

from .. import identifiers, passwords, util
from ..domain import CLIENTS, TOKENS, USERS, Client, ClientActivity, \
    SessionToken, User, UserActivity
from ..exceptions import AuthenticationError, NotFoundError, \
    ResourceExhaustedError, ValidationError
from ..services.store import DocumentStore, Write
from ..validation import EMAIL, classify_username
from . import ResponseData, envelope

logger = logging.getLogger(__name__)

TOKENS_KEYSPACE = identifiers.Keyspace(TOKENS)


async def sign_in(store: DocumentStore, config: Dict[str, Any],
                  username: str, password: str, apikey: str,
                  request_id: Optional[str] = None) -> ResponseData:
    """
    Authenticate a user and issue a session token.

    Parameters
    ----------
    store : :class:`.DocumentStore`
    config : dict
        Application settings.
    username : str
        The user's email address or phone number.
    password : str
        As hashed by the platform.
    apikey : str
        API key of the platform the user is signing in to.
    request_id : str
        Identifies the request in both activity logs. Generated if not given.

    Returns
    -------
    dict
        Response envelope, with the token and its expiry.
    int
        HTTP status.
    dict
        Headers.

    Raises
    ------
    :class:`.AuthenticationError`
        If the API key is unknown, or the password does not match.
    :class:`.ValidationError`
        If the username is neither an email address nor a phone number.
    :class:`.NotFoundError`
        If there is no such user.
    :class:`.ResourceExhaustedError`
        If no free session token could be drawn. Nothing is written.

    """
    request_id = request_id or uuid.uuid4().hex

    client_doc = await store.get(CLIENTS, apikey)
    if client_doc is None:
        logger.warning('Sign-in with unknown API key (request %s)',
                       request_id)
        raise AuthenticationError('Invalid API key', 'INVALID_API_KEY',
                                  status.HTTP_403_FORBIDDEN)
    client = Client.model_validate(client_doc)

    kind = classify_username(username, config['PHONE_PATTERN'])
    if kind is None:
        raise ValidationError('Username must be an email address or a phone'
                              ' number', 'INVALID_USERNAME_FORMAT')

    user_key, user = await _find_user(store, kind, username)
    if user is None:
        raise NotFoundError('User not found', 'USER_NOT_FOUND')

    valid = await run_in_threadpool(passwords.check_password, password,
                                    user.hashed_password)
    if not valid:
        logger.warning('Invalid credentials for user %s (request %s)',
                       user_key, request_id)
        raise AuthenticationError('Invalid credentials',
                                  'INVALID_CREDENTIALS')

    token = await identifiers.issue(store, TOKENS_KEYSPACE,
                                    config['TOKEN_LENGTH'],
                                    attempts=config['ISSUE_ATTEMPTS'])
    if isinstance(token, identifiers.Exhausted):
        raise ResourceExhaustedError('Could not issue a session token',
                                     'TOKEN_ISSUANCE_FAILED')

    timestamp = util.now()
    expires = timestamp + int(config['TOKEN_TTL_SECONDS']) * 1000
    user_fields: Dict[str, Any] = {}
    if passwords.needs_rehash(user.hashed_password):
        logger.debug('Updating password hash parameters for %s', user_key)
        user_fields['hashedPassword'] = await run_in_threadpool(
            passwords.hash_password, password
        )

    user_entry = UserActivity(action='signin',
                              platform_name=client.platform_name,
                              platform_id=client.platform_id,
                              apikey=apikey, timestamp=timestamp,
                              request_id=request_id)
    client_entry = ClientActivity(email=user.email, name=user.name,
                                  phone=user.phone, image_url=user.image_url,
                                  timestamp=timestamp, request_id=request_id)
    session = SessionToken(expiry_timestamp=expires, **user.profile())
    await store.commit([
        Write(USERS, user_key, data=user_fields,
              appends={'activityLog': user_entry.to_doc()}),
        Write(CLIENTS, apikey,
              appends={'userActivityLog': client_entry.to_doc()}),
        Write(TOKENS, token.value, data=session.to_doc(), replace=True),
    ])
    logger.info('User %s signed in to platform %s (request %s)', user_key,
                client.platform_id, request_id)
    data = {'token': token.value, 'expiryTimestamp': expires}
    return envelope('Sign in successful', data), status.HTTP_200_OK, \
        {'X-Request-ID': request_id}


async def _find_user(store: DocumentStore, kind: str,
                     username: str) -> Tuple[str, Optional[User]]:
    """Look up a user by email address or by phone number (the key)."""
    if kind == EMAIL:
        matches = await store.query(USERS, 'email', username, limit=1)
        if not matches:
            return username, None
        key, doc = matches[0]
        return key, User.model_validate(doc)
    doc = await store.get(USERS, username)
    if doc is None:
        return username, None
    return username, User.model_validate(doc)
