# app/photos.py
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional

from .fields import read_attr


class PhotoResolver:
    """Joins listings to photo groups by group id and flattens their URLs."""

    def __init__(self, photos: Iterable[Any]):
        self._groups: Dict[Any, List[Any]] = defaultdict(list)
        for photo in photos:
            self._groups[read_attr(photo, "id")].append(photo)

    def resolve(self, group_id: Optional[Any]) -> List[str]:
        if group_id is None or group_id == "":
            return []
        urls: List[str] = []
        for photo in self._groups.get(group_id, ()):
            urls.extend(str(url) for url in read_attr(photo, "photo_urls") or [])
        return urls


def resolve_photos(group_id: Optional[Any], photos: Iterable[Any]) -> List[str]:
    return PhotoResolver(photos).resolve(group_id)
