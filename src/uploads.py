"""
Team logo uploads.

Logos arrive either as base64 data URLs (``data:image/png;base64,...``) inside
the tournament creation payload, or as multipart file uploads. Either way the
image is written under ``<uploads>/<tournament id>/`` and the caller gets back
the URL path to store on the team record.
"""
import base64
import binascii
import hashlib
import logging
import os
import re
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

ALLOWED_LOGO_EXTENSIONS = {'.png', '.jpg', '.jpeg', '.gif', '.svg', '.webp'}
MAX_UPLOAD_SIZE = 10 * 1024 * 1024  # 10 MB
UPLOADS_URL_PREFIX = '/uploads'

_DATA_URL = re.compile(r'^data:image/([\w.+-]+);base64,(.+)$', re.DOTALL)
_MIME_EXTENSIONS = {'svg+xml': '.svg', 'jpeg': '.jpg'}


def decode_data_url(data_string):
    """
    Decode a base64 image data URL.

    Returns ``(bytes, extension)`` or None when the string is not a usable
    image of an allowed type.
    """
    if not data_string or not isinstance(data_string, str):
        return None
    match = _DATA_URL.match(data_string.strip())
    if not match:
        return None
    subtype = match.group(1).lower()
    ext = _MIME_EXTENSIONS.get(subtype, '.' + subtype)
    if ext not in ALLOWED_LOGO_EXTENSIONS:
        return None
    try:
        data = base64.b64decode(match.group(2), validate=True)
    except (binascii.Error, ValueError):
        return None
    if not data or len(data) > MAX_UPLOAD_SIZE:
        return None
    return data, ext


def logo_extension(filename):
    """Extension of an uploaded file if it is an allowed logo type, else None."""
    ext = os.path.splitext(filename or '')[1].lower()
    return ext if ext in ALLOWED_LOGO_EXTENSIONS else None


def _logo_basename(team):
    # Team names are case-sensitive, so the digest keeps "FC A" and "fc a" apart
    slug = secure_filename(team).lower() or 'team'
    digest = hashlib.sha1(team.encode('utf-8')).hexdigest()[:8]
    return f'{slug}-{digest}'


def save_logo(uploads_dir, tournament_id, team, data, ext):
    """Write a logo for ``team`` and return its URL path."""
    tournament_uploads = os.path.join(uploads_dir, tournament_id)
    os.makedirs(tournament_uploads, exist_ok=True)
    filename = f'{_logo_basename(team)}{ext}'
    # Replace any earlier logo of this team saved with a different extension
    for old_ext in ALLOWED_LOGO_EXTENSIONS:
        old_path = os.path.join(tournament_uploads, _logo_basename(team) + old_ext)
        if old_ext != ext and os.path.exists(old_path):
            os.remove(old_path)
    with open(os.path.join(tournament_uploads, filename), 'wb') as f:
        f.write(data)
    logger.debug(f'Saved logo for {team!r} in {tournament_id}: {filename}')
    return f'{UPLOADS_URL_PREFIX}/{tournament_id}/{filename}'
