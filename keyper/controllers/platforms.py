"""
Controllers for client platforms.

A platform registers once, with the contact details of its owner, and is
issued an API key. The API key is the key of the client record, and is what
the platform presents in every subsequent request on behalf of its users.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote, unquote

from fastapi import status
from starlette.concurrency import run_in_threadpool

from .. import identifiers, passwords
from ..domain import CLIENTS, Client
from ..exceptions import ConflictError, NotFoundError, \
    ResourceExhaustedError, ValidationError
from ..services.store import DocumentStore
from ..validation import validate_contact
from . import ResponseData, envelope

logger = logging.getLogger(__name__)

API_KEYS = identifiers.Keyspace(CLIENTS)
PLATFORM_IDS = identifiers.Keyspace(CLIENTS, 'platformId')


async def register(store: DocumentStore, config: Dict[str, Any], name: str,
                   email: str, phone: str, platform_name: str,
                   hashed_password: str,
                   image_url: Optional[str] = None) -> ResponseData:
    """
    Register a new client platform.

    Parameters
    ----------
    store : :class:`.DocumentStore`
    config : dict
        Application settings.
    name : str
        Name of the platform owner.
    email : str
    phone : str
    platform_name : str
    hashed_password : str
        The owner's password, as hashed by the platform.
    image_url : str

    Returns
    -------
    dict
        Response envelope; ``data`` is the new client, with its API key.
    int
        HTTP status.
    dict
        Headers.

    Raises
    ------
    :class:`.ValidationError`
        If the email address or phone number is malformed.
    :class:`.ConflictError`
        If the email address or phone number is already registered.
    :class:`.ResourceExhaustedError`
        If no free API key or platform ID could be drawn.

    """
    validate_contact(email, phone, config['PHONE_PATTERN'])
    logger.debug('Registration request for platform %s', platform_name)

    if await store.query(CLIENTS, 'email', email, limit=1):
        raise ConflictError(
            'The Provided Email is already registered with the Platform,'
            ' please Login to your Current Account.',
            'DUPLICATE_EMAIL', status.HTTP_400_BAD_REQUEST
        )
    if await store.query(CLIENTS, 'phone', phone, limit=1):
        raise ConflictError(
            'The Provided Phone Number is already registered with the'
            ' Platform, please Login to your Current Account.',
            'DUPLICATE_PHONE', status.HTTP_400_BAD_REQUEST
        )

    attempts = config['ISSUE_ATTEMPTS']
    apikey = await identifiers.issue(store, API_KEYS,
                                     config['API_KEY_LENGTH'],
                                     attempts=attempts)
    if isinstance(apikey, identifiers.Exhausted):
        raise ResourceExhaustedError('Could not issue an API key')
    platform_id = await identifiers.issue(store, PLATFORM_IDS,
                                          config['PLATFORM_ID_LENGTH'],
                                          attempts=attempts)
    if isinstance(platform_id, identifiers.Exhausted):
        raise ResourceExhaustedError('Could not issue a platform ID')

    client = Client(
        email=email,
        phone=phone,
        hashed_password=await run_in_threadpool(passwords.hash_password,
                                                hashed_password),
        name=name,
        platform_name=platform_name,
        platform_id=platform_id.value,
        image_url=image_url,
    )
    await store.set(CLIENTS, apikey.value, client.to_doc())
    logger.info('Registered platform %s (%s)', platform_name,
                platform_id.value)
    return envelope('Client registered successfully',
                    client.public(apikey.value)), status.HTTP_200_OK, {}


async def get_platform(store: DocumentStore, apikey: str) -> ResponseData:
    """Get the client platform registered under ``apikey``."""
    doc = await store.get(CLIENTS, apikey)
    if doc is None:
        raise NotFoundError('No platform is registered with this API key',
                            'CLIENT_NOT_FOUND')
    client = Client.model_validate(doc)
    return envelope(data=client.public(apikey)), status.HTTP_200_OK, {}


def redirect_target(config: Dict[str, Any], target: str,
                    apikey: str) -> ResponseData:
    """
    Redirect to the hosted sign-in page for ``target``.

    ``target`` arrives url-encoded; it is decoded, then encoded again as a
    single path segment of the redirect location.
    """
    target = unquote(target or '')
    if not target:
        raise ValidationError('Missing target URL', 'MISSING_PARAMETER')
    if not apikey:
        raise ValidationError('Missing API key', 'MISSING_PARAMETER')
    logger.debug('Redirecting to %s for platform %s', target, apikey)
    location = '%s/target/%s/apikey/%s' % (
        config['REDIRECT_BASE_URL'].rstrip('/'), quote(target, safe=''),
        apikey
    )
    return {}, status.HTTP_307_TEMPORARY_REDIRECT, {'Location': location}
