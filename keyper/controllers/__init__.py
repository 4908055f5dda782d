"""
Request controllers for the Keyper service.

Controllers take plain parameters, the document store and the application
settings, and return ``(body, status, headers)``. Failures are raised as
:class:`.KeyperError` and rendered by the application.
"""

from typing import Any, Dict, Optional, Tuple

from ..domain import Envelope

ResponseData = Tuple[dict, int, dict]


def envelope(message: Optional[str] = None,
             data: Optional[Dict[str, Any]] = None) -> dict:
    """A successful response body."""
    return Envelope(success=True, message=message, data=data).to_dict()
