"""
Resolves which media a product shows for a colour selection, and assembles
media at write time.
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence
from urllib.parse import urlparse

from .records import MEDIA_IMAGE, MEDIA_TYPES, MEDIA_VIDEO, MediaRecord

logger = logging.getLogger(__name__)

ALL_COLORS = ''

VIDEO_EXTENSIONS = ('.mp4', '.mov', '.avi', '.webm')
# Older uploads were stored under a video path rather than by extension.
VIDEO_PATH_MARKERS = ('video/upload',)

DEFAULT_PLACEHOLDER_HOSTS = ('picsum.photos',)

DEFAULT_SWATCH = '#6b7280'
SWATCHES = {
    'red': '#dc2626',
    'blue': '#2563eb',
    'green': '#16a34a',
    'yellow': '#eab308',
    'purple': '#9333ea',
    'pink': '#ec4899',
    'black': '#000000',
    'white': '#ffffff',
    'gray': '#6b7280',
    'brown': '#92400e',
    'orange': '#ea580c',
    'navy': '#1e40af',
    'maroon': '#7f1d1d',
    'gold': '#d4af37',
    'silver': '#9ca3af',
}


def resolve_display_media(media: Sequence[MediaRecord], selected_color: str = ALL_COLORS) -> List[MediaRecord]:
    """
    Return the gallery to show for ``selected_color``.

    - "" (All Colors): every item, in original order
    - a colour with tagged items: only those items
    - a colour without tagged items: the general (untagged) items

    The input sequence is never modified.
    """
    if not selected_color:
        return list(media)

    tagged = [item for item in media if item.color == selected_color]
    if tagged:
        return tagged
    return [item for item in media if not item.color]


def image_for_color(media: Sequence[MediaRecord], color: str = ALL_COLORS) -> str:
    """URL of the image that represents a product in the given colour."""
    if color:
        for item in media:
            if item.color == color and item.type == MEDIA_IMAGE:
                return item.url
    for item in resolve_display_media(media, color):
        if item.type == MEDIA_IMAGE:
            return item.url
    return ''


def infer_media_type(url: str) -> str:
    """
    Guess image/video from a URL.

    Only used when media is created or back-filled; stored media always
    carries an explicit type.
    """
    lowered = (url or '').lower()
    if any(ext in lowered for ext in VIDEO_EXTENSIONS):
        return MEDIA_VIDEO
    if any(marker in lowered for marker in VIDEO_PATH_MARKERS):
        return MEDIA_VIDEO
    return MEDIA_IMAGE


def is_placeholder(url: str, hosts: Iterable[str] = DEFAULT_PLACEHOLDER_HOSTS) -> bool:
    host = urlparse(url).netloc.lower()
    return any(host == h or host.endswith('.' + h) for h in hosts)


def swatch_for(color: str) -> str:
    """Hex swatch for a colour name or ``#rrggbb`` token."""
    token = (color or '').strip()
    if len(token) == 7 and token.startswith('#'):
        try:
            int(token[1:], 16)
        except ValueError:
            return DEFAULT_SWATCH
        return token.lower()
    return SWATCHES.get(token.lower(), DEFAULT_SWATCH)


def build_swatches(colors: Iterable[str], existing: Optional[Mapping[str, str]] = None) -> dict:
    existing = existing or {}
    return {color: existing.get(color) or swatch_for(color) for color in colors}


def color_tag(value) -> Optional[str]:
    """A media colour tag as text; blanks and non-text values mean general media."""
    if not isinstance(value, str):
        return None
    return value.strip() or None


def attach_upload_colors(uploaded: Sequence[Mapping[str, Any]], queued_colors: Sequence[Optional[str]]) -> List[MediaRecord]:
    """
    Pair upload results with the colour that was active when each file was
    queued. Each result's ``index`` is its position in the submitted files;
    results without one are paired by position.
    """
    records = []
    for position, item in enumerate(uploaded):
        index = item.get('index', position)
        url = str(item.get('url') or '').strip()
        if not url:
            continue
        media_type = item.get('type')
        if media_type not in MEDIA_TYPES:
            media_type = infer_media_type(url)
        color = queued_colors[index] if index < len(queued_colors) else None
        records.append(MediaRecord(url=url, type=media_type, color=color_tag(color)))
    return records


def build_media(
    url_entries: Sequence[Mapping[str, Any]] = (),
    uploaded: Sequence[Mapping[str, Any]] = (),
    queued_colors: Sequence[Optional[str]] = (),
    placeholder_hosts: Iterable[str] = DEFAULT_PLACEHOLDER_HOSTS,
) -> List[MediaRecord]:
    """URL media first, then uploaded files, each with its colour tag."""
    placeholder_hosts = tuple(placeholder_hosts)
    media = []
    for entry in url_entries:
        url = str(entry.get('url') or '').strip()
        if not url:
            continue
        if is_placeholder(url, placeholder_hosts):
            logger.info("Skipping placeholder media URL %s", url)
            continue
        media_type = entry.get('type')
        if media_type not in MEDIA_TYPES:
            media_type = infer_media_type(url)
        media.append(MediaRecord(url=url, type=media_type, color=color_tag(entry.get('color'))))

    media.extend(attach_upload_colors(uploaded, queued_colors))
    return media


def coerce_legacy_media(item) -> MediaRecord:
    """Accept a bare URL string or a mapping from older product payloads."""
    if isinstance(item, str):
        url = item.strip()
        return MediaRecord(url=url, type=infer_media_type(url))
    url = str(item.get('url') or '').strip()
    media_type = item.get('type')
    if media_type not in MEDIA_TYPES:
        media_type = infer_media_type(url)
    return MediaRecord(url=url, type=media_type, color=color_tag(item.get('color')))
