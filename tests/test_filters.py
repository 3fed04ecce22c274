"""
tests/test_filters.py - cold-start and warm-start image selection
"""

from datetime import datetime, timedelta, timezone

from conftest import BASE_TIME, make_image
from ecrpoll.config.settings import ZERO_TIME
from ecrpoll.filters.images import (
    filter_images_pushed_after,
    get_last_pushed_images,
    select_new_images,
)


def digests(images):
    return [image["imageDigest"] for image in images]


class TestGetLastPushedImages:
    """Cold start: most recent images first"""

    def test_more_than_five_returns_five_newest(self, seven_images):
        result = get_last_pushed_images(seven_images)

        assert len(result) == 5
        assert digests(result) == digests([seven_images[i] for i in (6, 5, 4, 3, 2)])

    def test_five_or_fewer_returns_all_sorted(self):
        images = [make_image(2), make_image(0), make_image(1)]
        result = get_last_pushed_images(images)
        assert digests(result) == digests([images[0], images[2], images[1]])

    def test_exactly_five(self):
        images = [make_image(i) for i in range(5)]
        assert len(get_last_pushed_images(images)) == 5

    def test_empty(self):
        assert get_last_pushed_images([]) == []

    def test_custom_count(self, seven_images):
        result = get_last_pushed_images(seven_images, count=2)
        assert digests(result) == digests([seven_images[6], seven_images[5]])

    def test_ties_broken_by_digest(self):
        same_time = BASE_TIME + timedelta(days=1)
        images = [
            make_image(1, pushed_at=same_time, digest="sha256:cc"),
            make_image(2, pushed_at=same_time, digest="sha256:aa"),
            make_image(3, pushed_at=same_time, digest="sha256:bb"),
            make_image(0),
        ]
        result = get_last_pushed_images(images)
        assert digests(result) == ["sha256:aa", "sha256:bb", "sha256:cc", images[3]["imageDigest"]]

    def test_images_without_push_time_go_last(self):
        images = [make_image(0, pushed_at=False), make_image(1)]
        result = get_last_pushed_images(images)
        assert digests(result) == digests([images[1], images[0]])

    def test_input_not_mutated(self, seven_images):
        before = list(seven_images)
        get_last_pushed_images(seven_images)
        assert seven_images == before


class TestFilterImagesPushedAfter:
    """Warm start: strictly newer than the last fetch"""

    def test_strictly_after_in_original_order(self):
        images = [make_image(5), make_image(1), make_image(3), make_image(2)]
        cutoff = BASE_TIME + timedelta(hours=2)

        result = filter_images_pushed_after(images, cutoff)

        assert digests(result) == digests([images[0], images[2]])

    def test_equal_timestamp_excluded(self):
        images = [make_image(2)]
        assert filter_images_pushed_after(images, BASE_TIME + timedelta(hours=2)) == []

    def test_compares_across_offsets(self):
        ist = timezone(timedelta(hours=5, minutes=30))
        images = [make_image(0, pushed_at=datetime(2023, 3, 1, 12, 0, 1, tzinfo=timezone.utc))]
        cutoff = datetime(2023, 3, 1, 17, 30, 0, tzinfo=ist)
        assert len(filter_images_pushed_after(images, cutoff)) == 1

    def test_naive_push_time_treated_as_utc(self):
        images = [make_image(0, pushed_at=datetime(2023, 3, 1, 12, 0, 0))]
        assert filter_images_pushed_after(images, BASE_TIME - timedelta(seconds=1)) == images

    def test_missing_push_time_excluded(self):
        images = [make_image(0, pushed_at=False)]
        assert filter_images_pushed_after(images, BASE_TIME) == []

    def test_iso_string_push_time(self):
        images = [make_image(0, pushed_at="2023-03-02T00:00:00Z")]
        assert filter_images_pushed_after(images, BASE_TIME) == images


class TestSelectNewImages:

    def test_zero_time_uses_cold_start(self, seven_images):
        result = select_new_images(seven_images, ZERO_TIME)
        assert len(result) == 5
        assert result[0] is seven_images[6]

    def test_known_time_uses_warm_start(self, seven_images):
        result = select_new_images(seven_images, BASE_TIME + timedelta(hours=4))
        assert digests(result) == digests(seven_images[5:])

    def test_cold_start_count_passed_through(self, seven_images):
        assert len(select_new_images(seven_images, ZERO_TIME, cold_start_count=7)) == 7
