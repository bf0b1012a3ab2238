"""Tests for subscription handles."""

from unittest.mock import MagicMock

from gutterwatch.core.disposable import CompositeSubscription, Subscription


class TestSubscription:
    def test_dispose_runs_release_once(self) -> None:
        release = MagicMock()
        sub = Subscription(release)

        sub.dispose()
        sub.dispose()

        release.assert_called_once_with()
        assert sub.disposed

    def test_without_release(self) -> None:
        sub = Subscription()
        sub.dispose()
        assert sub.disposed

    def test_context_manager_disposes_on_error(self) -> None:
        release = MagicMock()
        try:
            with Subscription(release):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        release.assert_called_once()


class TestCompositeSubscription:
    def test_children_released_in_reverse_order(self) -> None:
        order: list[str] = []
        composite = CompositeSubscription(Subscription(lambda: order.append("first")))
        composite.add(Subscription(lambda: order.append("second")))

        composite.dispose()

        assert order == ["second", "first"]
        assert len(composite) == 0

    def test_add_after_dispose_releases_immediately(self) -> None:
        composite = CompositeSubscription()
        composite.dispose()
        release = MagicMock()

        composite.add(Subscription(release))

        release.assert_called_once()
        assert len(composite) == 0

    def test_len_counts_children(self) -> None:
        composite = CompositeSubscription(Subscription(), Subscription())
        assert len(composite) == 2
