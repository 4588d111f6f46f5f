"""Authentication helpers for the Confluence REST API.

Credentials are read from environment variables (optionally populated from a
.env file by python-dotenv) and turned into a single pre-computed Basic
authorization header that every request carries.
"""

import base64
import binascii
import os
from typing import NamedTuple

from dotenv import load_dotenv

from .errors import AuthHeaderError


class Credentials(NamedTuple):
    """Confluence API credentials.

    Any field may be an empty string when the corresponding variable is not
    set; validation happens on the assembled settings, not here.
    """
    url: str
    user: str
    api_token: str


class Authenticator:
    """Loads Confluence credentials from environment variables.

    Credentials are loaded from a .env file using python-dotenv and are never
    cached or logged.

    Recognised environment variables:
        CONFLUENCE_URL: Confluence base URL (e.g., https://yourinstance.atlassian.net/wiki)
        CONFLUENCE_USER: Confluence user email address
        CONFLUENCE_API_TOKEN: Confluence API token

    Example:
        >>> auth = Authenticator()
        >>> creds = auth.get_credentials()
    """

    def __init__(self):
        """Initialize the authenticator by loading environment variables from .env file."""
        load_dotenv()

    def get_credentials(self) -> Credentials:
        """Get Confluence credentials from environment variables.

        Returns:
            Credentials with whitespace-trimmed values ('' when unset)
        """
        return Credentials(
            url=(os.getenv('CONFLUENCE_URL') or '').strip(),
            user=(os.getenv('CONFLUENCE_USER') or '').strip(),
            api_token=(os.getenv('CONFLUENCE_API_TOKEN') or '').strip(),
        )


def build_auth_header(email: str, api_token: str) -> str:
    """Build the Basic authorization header for a credential pair.

    Args:
        email: Atlassian account email
        api_token: Atlassian API token

    Returns:
        Header value of the form ``Basic <base64(email:token)>``

    Raises:
        AuthHeaderError: If the credential pair cannot be encoded
    """
    raw = f"{email}:{api_token}"
    try:
        encoded = base64.b64encode(raw.encode('utf-8')).decode('ascii')
    except (UnicodeEncodeError, binascii.Error) as e:
        raise AuthHeaderError(str(e)) from e
    return f"Basic {encoded}"
