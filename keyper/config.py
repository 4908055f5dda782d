"""Application configuration."""

import os

VERSION = '0.1.0'

NAMESPACE = os.environ.get('NAMESPACE')
"""Namespace in which this service is deployed; to qualify collection names."""

LOGLEVEL = int(os.environ.get('LOGLEVEL', 20))

STORE_BACKEND = os.environ.get('STORE_BACKEND', 'firestore')
"""Either ``firestore`` or ``memory``.

The in-process backend is useful for testing and local development only; it
keeps nothing across restarts."""

FIRESTORE_PROJECT = os.environ.get('FIRESTORE_PROJECT')
FIRESTORE_DATABASE = os.environ.get('FIRESTORE_DATABASE')

COLLECTION_PREFIX = os.environ.get('COLLECTION_PREFIX', '')
"""Prepended to every collection name, so that several deployments can share
one database."""

STORE_TIMEOUT = float(os.environ.get('STORE_TIMEOUT', '5.0'))
"""Seconds to wait for any single call to the document store."""

STORE_READ_ATTEMPTS = int(os.environ.get('STORE_READ_ATTEMPTS', '2'))
"""Reads are attempted this many times before giving up. Writes are only ever
attempted once."""

STORE_RETRY_DELAY = float(os.environ.get('STORE_RETRY_DELAY', '0.1'))

API_KEY_LENGTH = int(os.environ.get('API_KEY_LENGTH', '9'))
PLATFORM_ID_LENGTH = int(os.environ.get('PLATFORM_ID_LENGTH', '6'))
TOKEN_LENGTH = int(os.environ.get('TOKEN_LENGTH', '6'))

ISSUE_ATTEMPTS = int(os.environ.get('ISSUE_ATTEMPTS', '10'))
"""Maximum number of candidates drawn when issuing a unique identifier."""

TOKEN_TTL_SECONDS = int(os.environ.get('TOKEN_TTL_SECONDS', '600'))

PHONE_PATTERN = os.environ.get('PHONE_PATTERN', r'^[6-9]\d{9}$')
"""Accepted phone numbers. The default is the Indian mobile numbering plan."""

ARGON2_TIME_COST = int(os.environ.get('ARGON2_TIME_COST', '3'))
ARGON2_MEMORY_COST = int(os.environ.get('ARGON2_MEMORY_COST', '65536'))
ARGON2_PARALLELISM = int(os.environ.get('ARGON2_PARALLELISM', '4'))

REDIRECT_BASE_URL = os.environ.get('REDIRECT_BASE_URL',
                                   'https://authkeyper.vercel.app')

CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
