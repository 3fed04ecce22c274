"""Selection of newly pushed images."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..config.settings import DEFAULT_COLD_START_COUNT, is_zero_time


ImageDetail = Dict[str, Any]


def _pushed_at(image: ImageDetail) -> Optional[datetime]:
    """imagePushedAt as an aware datetime; naive values are taken as UTC."""
    pushed_at = image.get('imagePushedAt')
    if pushed_at is None:
        return None
    if isinstance(pushed_at, str):
        pushed_at = datetime.fromisoformat(pushed_at.replace('Z', '+00:00'))
    if pushed_at.tzinfo is None:
        pushed_at = pushed_at.replace(tzinfo=timezone.utc)
    return pushed_at


def get_last_pushed_images(images: List[ImageDetail],
                           count: int = DEFAULT_COLD_START_COUNT) -> List[ImageDetail]:
    """Return the `count` most recently pushed images, newest first.

    Equal push times are ordered by digest; images without a push time go last.
    """
    by_digest = sorted(images, key=lambda image: image.get('imageDigest', ''))
    with_time = [image for image in by_digest if _pushed_at(image) is not None]
    without_time = [image for image in by_digest if _pushed_at(image) is None]

    # sorted() is stable with reverse=True, so digest order survives ties
    newest_first = sorted(with_time, key=_pushed_at, reverse=True) + without_time
    return newest_first[:count]


def filter_images_pushed_after(images: List[ImageDetail],
                               last_fetched_time: datetime) -> List[ImageDetail]:
    """Return images pushed strictly after last_fetched_time, in their original order."""
    filtered = []
    for image in images:
        pushed_at = _pushed_at(image)
        if pushed_at is not None and pushed_at > last_fetched_time:
            filtered.append(image)
    return filtered


def select_new_images(images: List[ImageDetail], last_fetched_time: datetime,
                      cold_start_count: int = DEFAULT_COLD_START_COUNT) -> List[ImageDetail]:
    if is_zero_time(last_fetched_time):
        return get_last_pushed_images(images, cold_start_count)
    return filter_images_pushed_after(images, last_fetched_time)
