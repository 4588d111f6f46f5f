"""API wrapper for the Confluence REST content API.

This module wraps the atlassian-python-api Confluence client and turns every
response into either decoded JSON or one of our typed exceptions. Responses
are requested in advanced mode so the status code and body of a failure are
always available to the caller; nothing is retried here except the single
XSRF-token fallback of attachment uploads.
"""

import logging
import re
from typing import Any, Dict, Optional
from urllib.parse import quote

from atlassian import Confluence
from requests import Response, Session
from requests.exceptions import ConnectionError, Timeout

from obsidian_confluence.models.settings import SyncSettings

from .auth import build_auth_header
from .errors import (
    APIUnreachableError,
    AttachmentUploadError,
    ConfluenceAPIError,
    InvalidPageIdError,
    PageNotFoundError,
)
from .multipart import build_multipart_body

logger = logging.getLogger(__name__)

# X-Atlassian-Token values: the first is what Confluence documents, the
# second is accepted by deployments that reject the first.
PRIMARY_XSRF_TOKEN = 'nocheck'
FALLBACK_XSRF_TOKEN = 'no-check'
XSRF_FAILURE_PHRASE = 'XSRF check failed'


def normalize_base_url(url: str) -> str:
    """Strip the trailing slash and add /wiki for Atlassian Cloud sites."""
    url = url.strip().rstrip('/')
    if ('atlassian.net' in url or 'jira.com' in url) and '/wiki' not in url:
        url = f"{url}/wiki"
    return url


class APIWrapper:
    """Typed wrapper around the Confluence content REST API.

    This class:
    1. Pre-computes the Basic authorization header at construction
    2. Lazily creates the atlassian-python-api client on first request
    3. Raises ConfluenceAPIError (status + body) for any non-2xx response
    4. Uploads attachments as hand-built multipart bodies

    Example:
        >>> api = APIWrapper(settings)
        >>> page = api.get_page_by_id("123456")
    """

    def __init__(self, settings: SyncSettings):
        """Initialize the API wrapper.

        Args:
            settings: Sync settings holding base URL and credentials

        Raises:
            AuthHeaderError: If the credential pair cannot be encoded
        """
        self.base_url = normalize_base_url(settings.base_url)
        self._auth_header = build_auth_header(settings.auth_email, settings.api_token)
        self._client: Optional[Confluence] = None
        self._session: Optional[Session] = None

    def _get_client(self) -> Confluence:
        """Get or create the Confluence API client.

        The client shares one requests session that carries the
        pre-computed authorization header on every call.
        """
        if self._client is None:
            session = Session()
            session.headers.update({
                'Authorization': self._auth_header,
                'Accept': 'application/json',
            })
            self._session = session
            self._client = Confluence(url=self.base_url, session=session)
        return self._client

    def _validate_page_id(self, page_id: str) -> str:
        """Return the stripped page id, rejecting anything non-numeric.

        Raises:
            InvalidPageIdError: If page_id is empty or not numeric
        """
        page_id_str = str(page_id or '').strip()
        if not re.match(r'^\d+$', page_id_str):
            raise InvalidPageIdError(str(page_id))
        return page_id_str

    def _sanitize_credentials(self, text: str) -> str:
        """Mask credentials in text before it is logged.

        Example:
            >>> api._sanitize_credentials("Authorization: Basic dXNlcjpwYXNz")
            'Authorization: ***REDACTED***'
        """
        if not text:
            return text

        sanitized = re.sub(
            r'Authorization:\s*[^\n\r]+',
            'Authorization: ***REDACTED***',
            text,
            flags=re.IGNORECASE
        )
        sanitized = re.sub(
            r'(Basic|Bearer)\s+[A-Za-z0-9+/=._-]{8,}',
            r'\1 ***REDACTED***',
            sanitized,
            flags=re.IGNORECASE
        )
        sanitized = re.sub(
            r'(api_?token|token)["\']?\s*[:=]\s*["\']?([^"\'\s&]+)',
            r'\1=***REDACTED***',
            sanitized,
            flags=re.IGNORECASE
        )
        sanitized = re.sub(
            r'\b[\w.-]+@([\w.-]+\.[a-z]{2,})\b',
            r'***@\1',
            sanitized,
            flags=re.IGNORECASE
        )
        return sanitized

    def _raise_for_response(self, response: Response, operation: str) -> None:
        """Raise ConfluenceAPIError unless the response is 2xx."""
        if 200 <= response.status_code < 300:
            return
        body = response.text or ''
        logger.error(
            f"API operation failed: {operation} -> {response.status_code} "
            f"{self._sanitize_credentials(body)[:500]}"
        )
        raise ConfluenceAPIError(response.status_code, body)

    def _request(
        self,
        method: str,
        path: str,
        operation: str,
        params: Optional[Dict[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None
    ) -> Response:
        """Send a JSON request to ``rest/api/<path>`` and return the raw response.

        Raises:
            APIUnreachableError: On connection failures and timeouts
        """
        client = self._get_client()
        logger.debug(f"{method} rest/api/{path} params={params}")
        try:
            return client.request(
                method=method,
                path=f"rest/api/{path}",
                params=params,
                json=payload,
                advanced_mode=True,
            )
        except (Timeout, ConnectionError) as e:
            logger.error(f"API operation failed: {operation} - {self._sanitize_credentials(str(e))}")
            raise APIUnreachableError(endpoint=self.base_url) from e

    def _json(
        self,
        method: str,
        path: str,
        operation: str,
        params: Optional[Dict[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        response = self._request(method, path, operation, params=params, payload=payload)
        self._raise_for_response(response, operation)
        if not response.content:
            return {}
        return response.json()

    # Pages ------------------------------------------------------------------

    def find_page_by_title(self, space_key: str, title: str) -> Optional[Dict[str, Any]]:
        """Search a space for a page with the given title.

        Only the first result is returned; several pages sharing a title is
        not treated as an error.

        Returns:
            Page data, or None when no page matches
        """
        data = self._json(
            'GET',
            'content',
            f"find_page_by_title({space_key}, {title})",
            params={'title': title, 'spaceKey': space_key, 'expand': 'version'},
        )
        results = data.get('results') or []
        return results[0] if results else None

    def get_page_by_id(self, page_id: str) -> Dict[str, Any]:
        """Fetch a page with its version.

        Raises:
            InvalidPageIdError: If page_id is not numeric
            PageNotFoundError: If the page does not exist or is inaccessible
            ConfluenceAPIError: On any other non-2xx response
        """
        page_id = self._validate_page_id(page_id)
        operation = f"get_page_by_id({page_id})"
        response = self._request(
            'GET', f"content/{page_id}", operation, params={'expand': 'version'}
        )
        if response.status_code == 404:
            raise PageNotFoundError(page_id, response.status_code, response.text or '')
        self._raise_for_response(response, operation)
        return response.json()

    def create_page(
        self,
        space_key: str,
        title: str,
        body: str,
        parent_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """Create a page in storage format.

        Args:
            space_key: Space the page is created in
            title: Page title
            body: Page body in storage format (XHTML)
            parent_id: Optional ancestor page id

        Returns:
            Created page data
        """
        payload: Dict[str, Any] = {
            'type': 'page',
            'title': title,
            'space': {'key': space_key},
            'body': {
                'storage': {
                    'value': body,
                    'representation': 'storage',
                }
            },
        }
        if parent_id:
            payload['ancestors'] = [{'id': self._validate_page_id(parent_id)}]

        return self._json('POST', 'content', f"create_page({space_key}, {title})", payload=payload)

    def update_page(
        self,
        page_id: str,
        title: str,
        body: str,
        version: int
    ) -> Dict[str, Any]:
        """Replace a page's title and body.

        Args:
            page_id: The Confluence page ID
            title: The page title
            body: The page content in storage format (XHTML)
            version: The current version number; version + 1 is submitted

        Returns:
            Updated page data

        Raises:
            ConfluenceAPIError: On any non-2xx response, including 409
                                when ``version`` is stale
        """
        page_id = self._validate_page_id(page_id)
        payload = {
            'id': page_id,
            'type': 'page',
            'title': title,
            'version': {'number': version + 1},
            'body': {
                'storage': {
                    'value': body,
                    'representation': 'storage',
                }
            },
        }
        return self._json('PUT', f"content/{page_id}", f"update_page({page_id})", payload=payload)

    def get_page_url(self, page_id: str) -> str:
        """Browser URL of a page."""
        return f"{self.base_url}/pages/viewpage.action?pageId={quote(str(page_id), safe='')}"

    # Attachments ------------------------------------------------------------

    def find_attachment_by_filename(self, page_id: str, filename: str) -> Optional[Dict[str, Any]]:
        """Look up an attachment of a page by filename.

        Returns:
            Attachment data, or None when the page has no such attachment
        """
        page_id = self._validate_page_id(page_id)
        data = self._json(
            'GET',
            f"content/{page_id}/child/attachment",
            f"find_attachment_by_filename({page_id}, {filename})",
            params={'filename': filename, 'expand': 'version'},
        )
        results = data.get('results') or []
        return results[0] if results else None

    def _post_attachment(self, url: str, body: bytes, content_type: str, token: str) -> Response:
        """POST a multipart body with the given X-Atlassian-Token value."""
        self._get_client()  # builds the shared session on first use
        headers = {
            'Authorization': self._auth_header,
            'Accept': 'application/json',
            'Content-Type': content_type,
            'X-Atlassian-Token': token,
            'X-Requested-With': 'XMLHttpRequest',
            'Origin': self.base_url,
            'Referer': f"{self.base_url}/",
        }
        try:
            return self._session.post(url, data=body, headers=headers)
        except (Timeout, ConnectionError) as e:
            raise APIUnreachableError(endpoint=self.base_url) from e

    def upload_attachment(self, page_id: str, filename: str, data: bytes) -> None:
        """Upload a file as an attachment of a page.

        If the page already has an attachment with this filename, a new
        version of it is uploaded; otherwise a new attachment is created.

        The first attempt sends ``X-Atlassian-Token: nocheck``. A 403 whose
        body reports a failed XSRF check is retried exactly once with
        ``no-check``. No other failure is retried.

        Raises:
            AttachmentUploadError: If the upload (or its single retry) fails
        """
        page_id = self._validate_page_id(page_id)
        existing = self.find_attachment_by_filename(page_id, filename)
        if existing:
            path = f"content/{page_id}/child/attachment/{existing['id']}/data"
        else:
            path = f"content/{page_id}/child/attachment"
        url = f"{self.base_url}/rest/api/{path}"

        body, content_type = build_multipart_body(filename, data)
        logger.debug(f"Uploading {filename} ({len(data)} bytes) to page {page_id}")

        response = self._post_attachment(url, body, content_type, PRIMARY_XSRF_TOKEN)

        if response.status_code == 403 and XSRF_FAILURE_PHRASE in (response.text or ''):
            logger.info(f"XSRF check rejected upload of {filename}, retrying with alternate token")
            response = self._post_attachment(url, body, content_type, FALLBACK_XSRF_TOKEN)

        if not 200 <= response.status_code < 300:
            body_text = response.text or ''
            logger.error(
                f"Attachment upload failed: {filename} -> {response.status_code} "
                f"{self._sanitize_credentials(body_text)[:500]}"
            )
            raise AttachmentUploadError(filename, response.status_code, body_text)
