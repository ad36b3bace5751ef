"""Conversation store: history bookkeeping, per-session locking, history cap."""

import asyncio

from app.services.conversation_store import ConversationStore
from app.services.prompts import seed_history


def _turns(n):
    turns = []
    for i in range(n):
        turns.append({"role": "user", "content": f"q{i}"})
        turns.append({"role": "model", "content": f"a{i}"})
    return turns


class TestHistory:

    def test_unknown_session_is_empty(self, store):
        assert store.get("nobody") == []
        assert not store.exists("nobody")

    def test_get_returns_copy(self, store):
        store.put("s1", seed_history())
        history = store.get("s1")
        history.append({"role": "user", "content": "not committed"})
        assert len(store.get("s1")) == 2

    def test_delete_removes_history_and_plan(self, store):
        store.put("s1", seed_history())
        store.put_plan("s1", {"days": []})
        store.delete("s1")
        assert store.get("s1") == []
        assert store.get_plan("s1") is None

    def test_delete_twice_is_same_as_once(self, store):
        store.put("s1", seed_history())
        store.delete("s1")
        store.delete("s1")
        assert not store.exists("s1")
        assert len(store) == 0

    def test_unbounded_by_default(self, store):
        store.put("s1", seed_history() + _turns(50))
        assert len(store.get("s1")) == 102


class TestHistoryLimit:

    def test_keeps_seed_and_latest_pairs(self):
        store = ConversationStore(max_history=4)
        store.put("s1", seed_history() + _turns(5))

        history = store.get("s1")
        assert history[:2] == seed_history()
        assert [h["content"] for h in history[2:]] == ["q3", "a3", "q4", "a4"]

    def test_odd_limit_rounds_down_to_pairs(self):
        store = ConversationStore(max_history=5)
        store.put("s1", seed_history() + _turns(5))
        history = store.get("s1")
        assert len(history) == 6
        assert history[2]["role"] == "user"

    def test_under_limit_untouched(self):
        store = ConversationStore(max_history=10)
        store.put("s1", seed_history() + _turns(2))
        assert len(store.get("s1")) == 6


class TestSessionLock:

    def test_same_session_is_serialized(self, store):
        order = []

        async def worker(name):
            async with store.session("s1"):
                order.append(f"{name}-in")
                await asyncio.sleep(0.01)
                order.append(f"{name}-out")

        async def main():
            await asyncio.gather(worker("a"), worker("b"))

        asyncio.run(main())
        assert order == ["a-in", "a-out", "b-in", "b-out"]

    def test_different_sessions_overlap(self, store):
        order = []

        async def worker(session_id):
            async with store.session(session_id):
                order.append(f"{session_id}-in")
                await asyncio.sleep(0.01)
                order.append(f"{session_id}-out")

        async def main():
            await asyncio.gather(worker("s1"), worker("s2"))

        asyncio.run(main())
        assert order[:2] == ["s1-in", "s2-in"]


class TestLockCleanup:

    def test_unknown_session_leaves_no_lock(self, store):
        async def main():
            async with store.session("ghost"):
                store.delete("ghost")

        asyncio.run(main())
        assert store.active_locks() == 0

    def test_lock_kept_while_session_exists(self, store):
        async def main():
            async with store.session("s1"):
                store.put("s1", seed_history())

        asyncio.run(main())
        assert store.active_locks() == 1

        async def clear():
            async with store.session("s1"):
                store.delete("s1")

        asyncio.run(clear())
        assert store.active_locks() == 0

    def test_waiting_request_keeps_lock(self, store):
        order = []

        async def clearer():
            async with store.session("s1"):
                order.append("clear")
                store.delete("s1")
                await asyncio.sleep(0.01)

        async def writer():
            async with store.session("s1"):
                order.append("write")
                store.put("s1", seed_history())

        async def main():
            await asyncio.gather(clearer(), writer())

        asyncio.run(main())
        assert order == ["clear", "write"]
        assert store.active_locks() == 1
