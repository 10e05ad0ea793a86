from unittest import mock  # noqa


class FakeTimeMixin:
    """Pins ``center.utils.get_now_or_fake_time`` to :attr:`faked_now`."""

    faked_now = None

    def setUp(self):  # noqa
        super().setUp()
        fake_get_now_or_fake_time = mock.patch(
            "center.utils.get_now_or_fake_time")
        self.mock_get_now_or_fake_time = fake_get_now_or_fake_time.start()
        self.mock_get_now_or_fake_time.return_value = self.faked_now
        self.addCleanup(fake_get_now_or_fake_time.stop)

    def set_now(self, now_datetime):
        self.mock_get_now_or_fake_time.return_value = now_datetime
