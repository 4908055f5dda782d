"""
Core domain classes for the Keyper service.

Records are stored as documents with camelCase field names; the models below
use snake_case attributes with camelCase aliases. Use :meth:`Record.to_doc`
to get the stored form.
"""

from typing import Any, Dict, List, NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

CLIENTS = 'clients'
USERS = 'users'
TOKENS = 'tokens'


class Record(BaseModel):
    """Base for stored documents."""

    model_config = ConfigDict(populate_by_name=True)

    def to_doc(self) -> Dict[str, Any]:
        """The document as it is written to the store."""
        return self.model_dump(by_alias=True)


class UserActivity(Record):
    """An entry in a user's activity log."""

    action: str
    """``registered`` or ``signin``."""

    timestamp: int
    """Epoch milliseconds."""

    platform_name: Optional[str] = Field(None, alias='platformName')
    platform_id: Optional[str] = Field(None, alias='platformId')
    apikey: Optional[str] = None
    request_id: Optional[str] = Field(None, alias='requestId')

    def to_doc(self) -> Dict[str, Any]:
        """Omit the platform fields of a registration entry."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ClientActivity(Record):
    """A snapshot of a user, logged by the platform the user signed in to."""

    email: str
    name: str
    phone: str
    timestamp: int
    image_url: Optional[str] = Field(None, alias='imageUrl')
    request_id: Optional[str] = Field(None, alias='requestId')


class Client(Record):
    """A registered platform. Keyed by its API key."""

    email: str
    phone: str
    hashed_password: str = Field(alias='hashedPassword')
    name: str
    platform_name: str = Field(alias='platformName')
    platform_id: str = Field(alias='platformId')
    image_url: Optional[str] = Field(None, alias='imageUrl')
    user_activity_log: List[ClientActivity] = Field(default_factory=list,
                                                    alias='userActivityLog')

    def public(self, apikey: str) -> Dict[str, Any]:
        """Everything but the password hash, plus the API key."""
        data = self.model_dump(by_alias=True, exclude={'hashed_password'})
        data['apikey'] = apikey
        return data


class User(Record):
    """An end user. Keyed by phone number."""

    name: str
    email: str
    phone: str
    hashed_password: str = Field(alias='hashedPassword')
    created_at: int = Field(alias='createdAt')
    image_url: Optional[str] = Field(None, alias='imageUrl')
    activity_log: List[UserActivity] = Field(default_factory=list,
                                             alias='activityLog')

    def to_doc(self) -> Dict[str, Any]:
        data = self.model_dump(by_alias=True, exclude={'activity_log'})
        data['activityLog'] = [entry.to_doc() for entry in self.activity_log]
        return data

    def public(self) -> Dict[str, Any]:
        """Everything but the password hash."""
        data = self.to_doc()
        del data['hashedPassword']
        return data

    def profile(self) -> Dict[str, Any]:
        """The fields copied into a session token."""
        return self.model_dump(by_alias=True,
                               include={'name', 'email', 'phone',
                                        'image_url'})


class SessionToken(Record):
    """Public profile of a signed-in user, keyed by the session token."""

    name: str
    email: str
    phone: str
    image_url: Optional[str] = Field(None, alias='imageUrl')
    expiry_timestamp: int = Field(alias='expiryTimestamp')

    def is_expired(self, now: int) -> bool:
        return now > self.expiry_timestamp


class Valid(NamedTuple):
    """The token exists and has not expired."""

    profile: SessionToken


class Expired(NamedTuple):
    """The token exists but its lifetime has elapsed."""

    token: str
    expiry_timestamp: int


class NotFound(NamedTuple):
    """No such token."""

    token: str


TokenState = Union[Valid, Expired, NotFound]


class Envelope(BaseModel):
    """The body of every JSON response."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    error_code: Optional[str] = Field(None, alias='errorCode')

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
