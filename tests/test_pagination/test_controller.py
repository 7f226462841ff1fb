"""Tests for the result pagination controller."""

import asyncio

import pytest

from src.exceptions import FetchError
from src.filters.editor import FilterEditor
from src.filters.filter_state import ListingFilterState
from src.pagination.controller import ResultPaginationController, ViewState
from src.pagination.notifications import RecordingNotifier
from src.pagination.page import Page

ALL = ListingFilterState()
CAFES = ListingFilterState(search="cafe")


class FakeFetcher:
    """
    In-memory fetcher.

    The cursor is the string offset of the next record. Each filter search
    term gets its own result set so tests can tell pages apart.
    """

    def __init__(self, totals=None, fail_calls=()):
        self.totals = totals if totals is not None else {None: 14, "cafe": 3}
        self.fail_calls = set(fail_calls)
        self.gate = None
        self.calls = []

    async def fetch_page(self, filter_state, page_size, cursor):
        self.calls.append((filter_state, page_size, cursor))
        call_number = len(self.calls)
        if self.gate is not None:
            await self.gate.wait()
        if call_number in self.fail_calls:
            raise FetchError("backend unavailable")

        tag = filter_state.search or "all"
        total = self.totals.get(filter_state.search, 0)
        start = int(cursor) if cursor else 0
        end = min(start + page_size, total)
        records = [{"id": f"{tag}-{i:02d}"} for i in range(start, end)]
        return Page(records, str(end) if end < total else None)


async def settle():
    for _ in range(50):
        await asyncio.sleep(0)


def ids(controller):
    return [r["id"] for r in controller.records]


class TestLoading:
    """Tests for the first page and load more."""

    def test_first_page_then_last_page(self):
        async def scenario():
            controller = ResultPaginationController(FakeFetcher(), page_size=10)
            await controller.commit(ALL)
            first = (len(controller.records), controller.has_more, controller.cursor)
            await controller.load_more()
            return controller, first

        controller, first = asyncio.run(scenario())

        assert first == (10, True, "10")
        assert len(controller.records) == 14
        assert ids(controller) == [f"all-{i:02d}" for i in range(14)]
        assert controller.has_more is False
        assert controller.state is ViewState.IDLE

    def test_load_more_at_end_does_nothing(self):
        async def scenario():
            fetcher = FakeFetcher()
            controller = ResultPaginationController(fetcher, page_size=10)
            await controller.commit(ALL)
            await controller.load_more()
            await controller.load_more()
            return fetcher

        assert len(asyncio.run(scenario()).calls) == 2

    def test_commit_replaces_records(self):
        async def scenario():
            controller = ResultPaginationController(FakeFetcher(), page_size=10)
            await controller.commit(ALL)
            await controller.load_more()
            await controller.commit(CAFES)
            return controller

        controller = asyncio.run(scenario())
        assert ids(controller) == ["cafe-00", "cafe-01", "cafe-02"]
        assert controller.filter_state == CAFES
        assert controller.has_more is False

    def test_short_page_ends_even_with_cursor(self):
        class ShortFetcher:
            async def fetch_page(self, filter_state, page_size, cursor):
                return Page([{"id": "only"}], "more")

        async def scenario():
            controller = ResultPaginationController(ShortFetcher(), page_size=10)
            await controller.commit(ALL)
            return controller

        controller = asyncio.run(scenario())
        assert controller.has_more is False
        assert controller.cursor == "more"

    def test_load_more_before_first_commit_fetches_first_page(self):
        async def scenario():
            fetcher = FakeFetcher()
            controller = ResultPaginationController(fetcher, page_size=5)
            await controller.load_more()
            return controller, fetcher

        controller, fetcher = asyncio.run(scenario())
        assert fetcher.calls[0][2] is None
        assert len(controller.records) == 5

    def test_refresh_reloads_first_page(self):
        async def scenario():
            fetcher = FakeFetcher()
            controller = ResultPaginationController(fetcher, page_size=10)
            await controller.commit(CAFES)
            await controller.refresh()
            return controller, fetcher

        controller, fetcher = asyncio.run(scenario())
        assert [call[2] for call in fetcher.calls] == [None, None]
        assert len(controller.records) == 3

    def test_empty_result(self):
        async def scenario():
            controller = ResultPaginationController(FakeFetcher(totals={}), page_size=10)
            before = controller.is_empty
            await controller.commit(ALL)
            return controller, before

        controller, before = asyncio.run(scenario())
        assert before is False
        assert controller.is_empty
        assert controller.has_more is False

    def test_page_size_must_be_positive(self):
        with pytest.raises(ValueError):
            ResultPaginationController(FakeFetcher(), page_size=0)


class TestConcurrency:
    """Only one fetch is outstanding and stale results are discarded."""

    def test_commit_during_fetch_discards_stale_page(self):
        async def scenario():
            fetcher = FakeFetcher()
            fetcher.gate = asyncio.Event()
            controller = ResultPaginationController(fetcher, page_size=10)

            first = asyncio.create_task(controller.commit(ALL))
            await settle()
            second = asyncio.create_task(controller.commit(CAFES))
            await settle()
            calls_while_blocked = len(fetcher.calls)
            state_while_blocked = controller.state

            fetcher.gate.set()
            await asyncio.gather(first, second)
            return controller, fetcher, calls_while_blocked, state_while_blocked

        controller, fetcher, blocked_calls, blocked_state = asyncio.run(scenario())

        assert blocked_calls == 1
        assert blocked_state is ViewState.LOADING
        assert [call[0] for call in fetcher.calls] == [ALL, CAFES]
        assert ids(controller) == ["cafe-00", "cafe-01", "cafe-02"]
        assert controller.state is ViewState.IDLE

    def test_rapid_commits_fetch_latest_only(self):
        async def scenario():
            fetcher = FakeFetcher(totals={None: 14, "a": 1, "b": 2, "c": 3})
            fetcher.gate = asyncio.Event()
            controller = ResultPaginationController(fetcher, page_size=10)

            tasks = [asyncio.create_task(controller.commit(ALL))]
            await settle()
            for term in ("a", "b", "c"):
                tasks.append(asyncio.create_task(controller.commit(ListingFilterState(search=term))))
                await settle()

            fetcher.gate.set()
            await asyncio.gather(*tasks)
            return controller, fetcher

        controller, fetcher = asyncio.run(scenario())
        assert [call[0].search for call in fetcher.calls] == [None, "c"]
        assert ids(controller) == ["c-00", "c-01", "c-02"]

    def test_load_more_ignored_while_loading(self):
        async def scenario():
            fetcher = FakeFetcher()
            fetcher.gate = asyncio.Event()
            controller = ResultPaginationController(fetcher, page_size=10)

            task = asyncio.create_task(controller.commit(ALL))
            await settle()
            await controller.load_more()
            calls = len(fetcher.calls)

            fetcher.gate.set()
            await task
            return controller, calls

        controller, calls = asyncio.run(scenario())
        assert calls == 1
        assert len(controller.records) == 10

    def test_commit_during_load_more_discards_appended_page(self):
        async def scenario():
            fetcher = FakeFetcher()
            controller = ResultPaginationController(fetcher, page_size=10)
            await controller.commit(ALL)

            fetcher.gate = asyncio.Event()
            more = asyncio.create_task(controller.load_more())
            await settle()
            loading_more = controller.state
            reset = asyncio.create_task(controller.commit(CAFES))
            await settle()

            fetcher.gate.set()
            await asyncio.gather(more, reset)
            return controller, loading_more

        controller, loading_more = asyncio.run(scenario())
        assert loading_more is ViewState.LOADING_MORE
        assert ids(controller) == ["cafe-00", "cafe-01", "cafe-02"]

    def test_close_discards_inflight_result(self):
        async def scenario():
            fetcher = FakeFetcher()
            fetcher.gate = asyncio.Event()
            controller = ResultPaginationController(fetcher, page_size=10)

            task = asyncio.create_task(controller.commit(ALL))
            await settle()
            controller.close()
            fetcher.gate.set()
            await task

            await controller.commit(CAFES)
            await controller.load_more()
            return controller, fetcher

        controller, fetcher = asyncio.run(scenario())
        assert controller.is_closed
        assert controller.records == []
        assert len(fetcher.calls) == 1


class TestErrors:
    """Tests for the ERROR state and retry."""

    def test_first_page_failure_then_retry(self):
        async def scenario():
            notifier = RecordingNotifier()
            controller = ResultPaginationController(
                FakeFetcher(fail_calls={1}), page_size=10, notifier=notifier,
            )
            await controller.commit(ALL)
            failed = (controller.state, controller.records, type(controller.last_error))
            await controller.retry()
            return controller, notifier, failed

        controller, notifier, failed = asyncio.run(scenario())

        assert failed == (ViewState.ERROR, [], FetchError)
        assert notifier.errors == ["Failed to load listings"]
        assert controller.state is ViewState.IDLE
        assert len(controller.records) == 10
        assert controller.last_error is None

    def test_load_more_failure_keeps_records_then_retry_appends(self):
        async def scenario():
            notifier = RecordingNotifier()
            fetcher = FakeFetcher(fail_calls={2})
            controller = ResultPaginationController(fetcher, page_size=10, notifier=notifier)
            await controller.commit(ALL)
            await controller.load_more()
            failed = (controller.state, len(controller.records), controller.cursor)
            await controller.retry()
            return controller, notifier, fetcher, failed

        controller, notifier, fetcher, failed = asyncio.run(scenario())

        assert failed == (ViewState.ERROR, 10, "10")
        assert notifier.errors == ["Failed to load more listings"]
        assert fetcher.calls[2][2] == "10"
        assert len(controller.records) == 14
        assert controller.has_more is False

    def test_load_more_ignored_in_error(self):
        async def scenario():
            fetcher = FakeFetcher(fail_calls={1})
            controller = ResultPaginationController(fetcher, page_size=10, notifier=RecordingNotifier())
            await controller.commit(ALL)
            await controller.load_more()
            return fetcher

        assert len(asyncio.run(scenario()).calls) == 1

    def test_commit_recovers_from_error(self):
        async def scenario():
            controller = ResultPaginationController(
                FakeFetcher(fail_calls={1}), page_size=10, notifier=RecordingNotifier(),
            )
            await controller.commit(ALL)
            await controller.commit(CAFES)
            return controller

        controller = asyncio.run(scenario())
        assert controller.state is ViewState.IDLE
        assert len(controller.records) == 3

    def test_retry_ignored_when_idle(self):
        async def scenario():
            fetcher = FakeFetcher()
            controller = ResultPaginationController(fetcher, page_size=10)
            await controller.commit(ALL)
            await controller.retry()
            return fetcher

        assert len(asyncio.run(scenario()).calls) == 1


class TestEditorIntegration:
    def test_apply_schedules_commit(self):
        async def scenario():
            fetcher = FakeFetcher()
            controller = ResultPaginationController(fetcher, page_size=10)
            editor = FilterEditor(on_commit=controller.schedule_commit)
            editor.toggle("status", "pending")
            editor.apply()
            editor.set_search("cafe")
            await settle()
            return controller, fetcher

        controller, fetcher = asyncio.run(scenario())
        assert controller.filter_state.search == "cafe"
        assert ids(controller) == ["cafe-00", "cafe-01", "cafe-02"]

    def test_apply_with_coroutine_callback(self):
        async def scenario():
            fetcher = FakeFetcher()
            controller = ResultPaginationController(fetcher, page_size=10)
            editor = FilterEditor(on_commit=controller.commit)
            editor.toggle("status", "pending")
            editor.apply()
            await settle()
            return controller, fetcher

        controller, fetcher = asyncio.run(scenario())
        assert len(fetcher.calls) == 1
        assert [m.value for m in controller.filter_state.status] == ["pending"]
        assert controller.state is ViewState.IDLE
        assert len(controller.records) == 10

    def test_coroutine_callback_needs_running_loop(self):
        controller = ResultPaginationController(FakeFetcher(), page_size=10)
        editor = FilterEditor(on_commit=controller.commit)
        editor.toggle("status", "pending")
        with pytest.raises(RuntimeError):
            editor.apply()
