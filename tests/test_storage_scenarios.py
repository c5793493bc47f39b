"""End-to-end behaviour of a store through its public facade."""

import pytest

from hypodex.operators import HypothesisStorage


class TestLifecycleScenario:
    @pytest.mark.asyncio
    async def test_save_index_delete(self, storage, make_hypothesis):
        first = make_hypothesis("H-TEST-001")
        second = make_hypothesis("H-TEST-002")
        await storage.save_hypothesis(first)
        await storage.save_hypothesis(second)

        loaded = await storage.load_session_hypotheses("TEST")
        assert [h.id for h in loaded] == ["H-TEST-001", "H-TEST-002"]

        index = await storage.rebuild_index()
        assert len(index.entries) == 2

        assert await storage.delete_hypothesis("H-TEST-001") is True
        assert await storage.get_hypothesis_by_id("H-TEST-001") is None
        assert [h.id for h in await storage.load_session_hypotheses("TEST")] == ["H-TEST-002"]

    @pytest.mark.asyncio
    async def test_nonexistent_session_creates_nothing(self, storage, tmp_path):
        assert await storage.load_session_hypotheses("NONEXISTENT") == []
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_session_round_trip(self, storage, make_hypothesis):
        hypotheses = [make_hypothesis(f"H-S1-{i:03d}") for i in (5, 2, 9)]
        await storage.save_session_hypotheses("S1", hypotheses)
        assert await storage.load_session_hypotheses("S1") == hypotheses


class TestAutoRebuildScenario:
    @pytest.mark.asyncio
    async def test_index_written_after_single_save(self, tmp_path, make_hypothesis):
        storage = HypothesisStorage(tmp_path, auto_rebuild_index=True)
        await storage.save_hypothesis(make_hypothesis("H-TEST-001"))
        assert (tmp_path / ".research" / "hypothesis-index.json").is_file()

    @pytest.mark.asyncio
    async def test_no_index_without_auto_rebuild(self, tmp_path, make_hypothesis):
        storage = HypothesisStorage(tmp_path, auto_rebuild_index=False)
        await storage.save_hypothesis(make_hypothesis("H-TEST-001"))
        assert not (tmp_path / ".research" / "hypothesis-index.json").exists()


class TestIndexCountInvariant:
    @pytest.mark.asyncio
    async def test_entries_match_total_across_sessions(self, storage, make_hypothesis):
        sizes = {"A": 3, "B": 0, "C": 5}
        for session, size in sizes.items():
            await storage.save_session_hypotheses(
                session, [make_hypothesis(f"H-{session}-{i:03d}") for i in range(1, size + 1)]
            )
        index = await storage.rebuild_index()
        assert len(index.entries) == sum(sizes.values())
        assert index.session_ids == ["A", "C"]


class TestConstruction:
    def test_defaults(self, tmp_path):
        storage = HypothesisStorage(tmp_path)
        assert storage.base_dir == tmp_path
        assert storage.auto_rebuild_index is True
        assert storage.builder.on_corrupt_session == "fail"
        assert storage.mutations.locks.enabled is True
        assert "auto_rebuild_index=True" in repr(storage)

    def test_independent_instances(self, tmp_path):
        one = HypothesisStorage(tmp_path / "one")
        two = HypothesisStorage(tmp_path / "two")
        assert one.layout.index_path != two.layout.index_path
