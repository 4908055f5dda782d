"""Controllers for end-user registration."""

import logging
from typing import Any, Dict, Optional

from fastapi import status
from starlette.concurrency import run_in_threadpool

from .. import passwords, util
from ..domain import USERS, User, UserActivity
from ..exceptions import ConflictError
from ..services.store import DocumentExists, DocumentStore
from ..validation import validate_contact
from . import ResponseData, envelope

logger = logging.getLogger(__name__)


async def register(store: DocumentStore, config: Dict[str, Any], name: str,
                   email: str, phone: str, hashed_password: str,
                   image_url: Optional[str] = None) -> ResponseData:
    """
    Register a new end user, keyed by phone number.

    Raises
    ------
    :class:`.ValidationError`
        If the email address or phone number is malformed.
    :class:`.ConflictError`
        If a user with the same email address or phone number exists. The
        existing user is left as it is.

    """
    validate_contact(email, phone, config['PHONE_PATTERN'])

    if await store.get(USERS, phone) is not None:
        raise ConflictError('A user with this phone number is already'
                            ' registered', 'DUPLICATE_PHONE')
    if await store.query(USERS, 'email', email, limit=1):
        raise ConflictError('A user with this email is already registered',
                            'DUPLICATE_EMAIL')

    created = util.now()
    user = User(
        name=name,
        email=email,
        phone=phone,
        hashed_password=await run_in_threadpool(passwords.hash_password,
                                                hashed_password),
        created_at=created,
        image_url=image_url,
        activity_log=[UserActivity(action='registered', timestamp=created)],
    )
    try:
        await store.create(USERS, phone, user.to_doc())
    except DocumentExists as e:
        raise ConflictError('A user with this phone number is already'
                            ' registered', 'DUPLICATE_PHONE') from e
    logger.info('Registered user %s', phone)
    return envelope('User registered successfully', user.public()), \
        status.HTTP_201_CREATED, {}
