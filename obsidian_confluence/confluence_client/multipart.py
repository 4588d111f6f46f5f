"""Hand-built multipart/form-data bodies for attachment uploads.

Confluence's attachment endpoint expects a single ``file`` part. The body is
framed by hand so the binary payload is sent verbatim, byte for byte.
"""

import time
from typing import Optional, Tuple

# Lower-cased extension -> MIME type. Anything else is sent as octet-stream.
MIME_TYPES = {
    '.png': 'image/png',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.gif': 'image/gif',
    '.svg': 'image/svg+xml',
    '.webp': 'image/webp',
    '.bmp': 'image/bmp',
    '.tif': 'image/tiff',
    '.tiff': 'image/tiff',
}

DEFAULT_MIME_TYPE = 'application/octet-stream'

BOUNDARY_PREFIX = '----obsidian-confluence-'


def get_mime_type(filename: str) -> str:
    """Sniff the content type of a file from its extension."""
    lower = filename.lower()
    for extension, mime_type in MIME_TYPES.items():
        if lower.endswith(extension):
            return mime_type
    return DEFAULT_MIME_TYPE


def make_boundary() -> str:
    """Return a boundary derived from the current time in hex milliseconds."""
    return f"{BOUNDARY_PREFIX}{int(time.time() * 1000):x}"


def build_multipart_body(
    filename: str,
    data: bytes,
    boundary: Optional[str] = None
) -> Tuple[bytes, str]:
    """Frame a file as a multipart/form-data body.

    Args:
        filename: Attachment filename; double quotes are replaced by single
                  quotes so the Content-Disposition header stays well formed
        data: Raw file content
        boundary: Optional boundary (generated when omitted)

    Returns:
        Tuple of (body bytes, Content-Type header value)
    """
    boundary = boundary or make_boundary()
    safe_filename = filename.replace('"', "'")
    header = (
        f"--{boundary}\r\n"
        f'Content-Disposition: form-data; name="file"; filename="{safe_filename}"\r\n'
        f"Content-Type: {get_mime_type(filename)}\r\n"
        f"\r\n"
    )
    footer = f"\r\n--{boundary}--\r\n"

    body = header.encode('utf-8') + bytes(data) + footer.encode('utf-8')
    return body, f"multipart/form-data; boundary={boundary}"
