"""Tests for BufferRegistry."""

import asyncio

import pytest

from relay.conversation import BufferRegistry


class ExpiryRecorder:
    """Records expiry callbacks; optionally consumes the buffer like a dispatch."""

    def __init__(self, consume: bool = False):
        self.calls: list[tuple[str, int]] = []
        self.snapshots = []
        self.registry: BufferRegistry | None = None
        self._consume = consume

    async def __call__(self, conversation_id: str, generation: int) -> None:
        self.calls.append((conversation_id, generation))
        if self._consume:
            self.snapshots.append(self.registry.snapshot_and_clear(conversation_id, generation))


@pytest.fixture
async def registry():
    """Registry whose timers never fire during a test."""
    reg = BufferRegistry(window_seconds=60, on_expire=ExpiryRecorder())
    yield reg
    await reg.close()


class TestBufferRegistryAppend:
    """Tests for BufferRegistry.append()."""

    async def test_append_creates_buffer(self, registry):
        """Test that the first message creates a buffer."""
        generation = registry.append("chat1", "Hello")

        assert "chat1" in registry
        assert len(registry) == 1
        assert registry.pending("chat1") == ["Hello"]
        assert registry.generation_of("chat1") == generation

    async def test_append_keeps_arrival_order(self, registry):
        """Test that segments are kept in arrival order."""
        registry.append("chat1", "First")
        registry.append("chat1", "Second")
        registry.append("chat1", "Third")

        assert registry.pending("chat1") == ["First", "Second", "Third"]

    async def test_append_increments_generation(self, registry):
        """Test that every append arms a newer generation."""
        g1 = registry.append("chat1", "a")
        g2 = registry.append("chat1", "b")

        assert g2 > g1
        assert registry.generation_of("chat1") == g2

    async def test_append_cancels_previous_timer(self, registry):
        """Test that re-arming cancels the previous timer task."""
        registry.append("chat1", "a")
        first_timer = registry._buffers["chat1"].timer_handle

        registry.append("chat1", "b")
        second_timer = registry._buffers["chat1"].timer_handle

        await asyncio.sleep(0)
        assert first_timer.cancelled()
        assert not second_timer.done()

    async def test_single_live_timer_per_conversation(self, registry):
        """Test that only the newest timer of a conversation is alive."""
        for i in range(5):
            registry.append("chat1", f"m{i}")
        await asyncio.sleep(0)

        live = [t for t in registry._tasks if not t.done()]
        assert len(live) == 1
        assert live[0] is registry._buffers["chat1"].timer_handle

    async def test_reply_address_defaults_to_conversation_id(self, registry):
        """Test reply address fallback and update by later messages."""
        registry.append("chat1", "a")
        assert registry._buffers["chat1"].reply_address == "chat1"

        registry.append("chat1", "b", reply_address="5511999@c.us")
        assert registry._buffers["chat1"].reply_address == "5511999@c.us"

    async def test_negative_window_rejected(self):
        """Test that a negative window is refused."""
        with pytest.raises(ValueError):
            BufferRegistry(window_seconds=-1, on_expire=ExpiryRecorder())


class TestBufferRegistrySnapshot:
    """Tests for BufferRegistry.snapshot_and_clear()."""

    async def test_snapshot_joins_and_removes(self, registry):
        """Test that a matching generation consumes the buffer."""
        registry.append("chat1", "Hi", reply_address="addr1")
        generation = registry.append("chat1", "Are you there?")

        snapshot = registry.snapshot_and_clear("chat1", generation)

        assert snapshot is not None
        assert snapshot.text == "Hi\nAre you there?"
        assert snapshot.segment_count == 2
        assert snapshot.reply_address == "addr1"
        assert snapshot.generation == generation
        assert "chat1" not in registry

    async def test_stale_snapshot_is_noop(self, registry):
        """Test that a superseded generation neither reads nor clears."""
        g1 = registry.append("chat1", "a")
        g2 = registry.append("chat1", "b")

        assert registry.snapshot_and_clear("chat1", g1) is None
        assert registry.pending("chat1") == ["a", "b"]
        assert registry.generation_of("chat1") == g2

    async def test_snapshot_missing_buffer(self, registry):
        """Test that an unknown conversation yields None."""
        assert registry.snapshot_and_clear("nobody", 1) is None

    async def test_generations_not_reused_after_clear(self, registry):
        """Test that a recreated buffer never matches an old generation."""
        g1 = registry.append("chat1", "a")
        registry.snapshot_and_clear("chat1", g1)

        g2 = registry.append("chat1", "b")

        assert g2 != g1
        assert registry.snapshot_and_clear("chat1", g1) is None
        assert registry.pending("chat1") == ["b"]

    async def test_interleaved_appends_and_timer_fires(self, registry):
        """Test rapid appends racing simulated timer expiries."""
        generations = []
        consumed = []
        for round_no in range(3):
            for i in range(4):
                generations.append(registry.append("chat1", f"r{round_no}m{i}"))
                # Every earlier timer firing now must be a no-op
                for stale in generations[:-1]:
                    assert registry.snapshot_and_clear("chat1", stale) is None
            snapshot = registry.snapshot_and_clear("chat1", generations[-1])
            consumed.append(snapshot.text)

        assert consumed == [
            "r0m0\nr0m1\nr0m2\nr0m3",
            "r1m0\nr1m1\nr1m2\nr1m3",
            "r2m0\nr2m1\nr2m2\nr2m3",
        ]
        for stale in generations:
            assert registry.snapshot_and_clear("chat1", stale) is None
        assert len(registry) == 0

    async def test_conversations_are_independent(self, registry):
        """Test that clearing one conversation leaves the other intact."""
        g1 = registry.append("chat1", "one")
        registry.append("chat2", "two")

        snapshot = registry.snapshot_and_clear("chat1", g1)

        assert snapshot.text == "one"
        assert registry.pending("chat2") == ["two"]


class TestBufferRegistryTimers:
    """Tests for debounce expiry."""

    async def test_rapid_messages_fire_once(self):
        """Test that messages within the window cause a single expiry."""
        recorder = ExpiryRecorder(consume=True)
        registry = BufferRegistry(window_seconds=0.05, on_expire=recorder)
        recorder.registry = registry

        registry.append("chat1", "a")
        await asyncio.sleep(0.01)
        registry.append("chat1", "b")
        await asyncio.sleep(0.01)
        last = registry.append("chat1", "c")

        await registry.wait_idle()

        assert recorder.calls == [("chat1", last)]
        assert recorder.snapshots[0].text == "a\nb\nc"
        assert len(registry) == 0

    async def test_separate_windows_fire_separately(self):
        """Test that a quiet period splits messages into two dispatches."""
        recorder = ExpiryRecorder(consume=True)
        registry = BufferRegistry(window_seconds=0.03, on_expire=recorder)
        recorder.registry = registry

        registry.append("chat1", "first")
        await registry.wait_idle()
        registry.append("chat1", "second")
        await registry.wait_idle()

        assert [s.text for s in recorder.snapshots] == ["first", "second"]

    async def test_discard_revokes_timer(self):
        """Test that discard drops the buffer without expiry."""
        recorder = ExpiryRecorder()
        registry = BufferRegistry(window_seconds=0.02, on_expire=recorder)

        registry.append("chat1", "a")
        assert registry.discard("chat1") is True
        await registry.wait_idle()

        assert recorder.calls == []
        assert "chat1" not in registry
        assert registry.discard("chat1") is False

    async def test_close_cancels_everything(self):
        """Test that close cancels timers and drops buffers."""
        recorder = ExpiryRecorder()
        registry = BufferRegistry(window_seconds=60, on_expire=recorder)
        registry.append("chat1", "a")
        registry.append("chat2", "b")

        await registry.close()

        assert len(registry) == 0
        assert not registry._tasks
        assert recorder.calls == []
