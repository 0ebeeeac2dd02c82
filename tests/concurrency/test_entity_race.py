"""
Concurrent transition requests against one entity.

N threads are released together by a Barrier, each requesting
``submit-for-review`` on the same draft article.  Exactly one may commit;
every other request must come back as a conflict (unserialized mode) or as
structurally illegal after re-validation (serialized mode).  Nobody
overwrites the winner.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from lifecycle_kernel.domain.guards import Guard
from lifecycle_kernel.domain.results import RejectKind
from lifecycle_kernel.services.lifecycle_engine import LifecycleEngine
from lifecycle_modules.publishing import MODERATION, SUBMIT_FOR_REVIEW, Article

pytestmark = pytest.mark.slow

THREADS = 16


class SlowGuard(Guard):
    """Widens the window between snapshot and commit."""

    def evaluate(self, context):
        time.sleep(0.005)
        return True


def _race(engine: LifecycleEngine, article: Article):
    barrier = threading.Barrier(THREADS)

    def attempt(_):
        barrier.wait()
        return engine.request_transition(
            article, SUBMIT_FOR_REVIEW, {"body": article.body}
        )

    with ThreadPoolExecutor(max_workers=THREADS) as pool:
        return list(pool.map(attempt, range(THREADS)))


@pytest.fixture
def slow_registry(registry):
    registry.register_guard("article", SUBMIT_FOR_REVIEW, SlowGuard())
    return registry


class TestSameEntityRace:

    @pytest.mark.parametrize("serialize", [False, True])
    def test_exactly_one_commit(self, slow_registry, serialize):
        engine = LifecycleEngine(slow_registry, serialize_evaluation=serialize)
        article = engine.bind(Article("Race", body="content"))

        results = _race(engine, article)

        committed = [r for r in results if r.success]
        assert len(committed) == 1
        assert article.current_state == MODERATION
        assert article.version == 1
        for r in results:
            if not r.success:
                assert r.reject_kind in (
                    RejectKind.CONCURRENCY_CONFLICT,
                    RejectKind.STRUCTURALLY_ILLEGAL,
                )
                assert r.observed_state == MODERATION or r.from_state == MODERATION

    def test_serialized_losers_are_revalidated(self, slow_registry):
        engine = LifecycleEngine(slow_registry, serialize_evaluation=True)
        article = engine.bind(Article("Race", body="content"))

        results = _race(engine, article)

        losers = [r for r in results if not r.success]
        assert len(losers) == THREADS - 1
        assert all(r.is_structurally_illegal for r in losers)
        assert all(r.from_state == MODERATION for r in losers)

    def test_unserialized_losers_see_winner_state(self, slow_registry):
        engine = LifecycleEngine(slow_registry)
        article = engine.bind(Article("Race", body="content"))

        results = _race(engine, article)

        conflicts = [r for r in results if r.is_conflict]
        assert all(r.observed_state == MODERATION for r in conflicts)


class TestIndependentEntities:

    def test_different_entities_do_not_interfere(self, engine):
        articles = [engine.bind(Article(f"a{i}", body="text")) for i in range(THREADS)]
        barrier = threading.Barrier(THREADS)

        def attempt(article):
            barrier.wait()
            return article.submit_for_review()

        with ThreadPoolExecutor(max_workers=THREADS) as pool:
            results = list(pool.map(attempt, articles))

        assert all(r.success for r in results)
        assert all(a.current_state == MODERATION for a in articles)
