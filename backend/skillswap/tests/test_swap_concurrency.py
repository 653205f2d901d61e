"""
Concurrent transitions and ratings against a file-backed database.

Each worker thread uses its own session, as concurrent requests would.
"""
import threading
from decimal import Decimal
import pytest
from sqlalchemy.dialects import mysql
from sqlalchemy.orm import sessionmaker
from skillswap.core.exceptions import NotFoundOrUnauthorized
from skillswap.db.session import create_db_engine, init_db
from skillswap.models import OfferedSkill, Skill, Swap, SwapStatus, User
from skillswap.services import swap_service

# These accounts never log in
NO_LOGIN = "!"


@pytest.fixture
def file_sessions(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'race.db'}", connect_args={"timeout": 30})
    init_db(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


def _seed(Session, swaps):
    """
    Create Bob (provider of Cooking) and one requester per entry in ``swaps``;
    each entry is the status of that requester's swap with Bob.
    Returns (bob_id, [(requester_id, swap_id), ...]).
    """
    db = Session()
    try:
        javascript = Skill(name="JavaScript")
        cooking = Skill(name="Cooking")
        bob = User(name="Bob", email="bob@example.com", hashed_password=NO_LOGIN)
        db.add_all([javascript, cooking, bob])
        db.flush()
        db.add(OfferedSkill(user_id=bob.id, skill_id=cooking.id))

        pairs = []
        for i, status in enumerate(swaps):
            requester = User(name=f"Requester {i}", email=f"req{i}@example.com", hashed_password=NO_LOGIN)
            db.add(requester)
            db.flush()
            db.add(OfferedSkill(user_id=requester.id, skill_id=javascript.id))
            swap = Swap(
                requester_id=requester.id,
                provider_id=bob.id,
                status=status,
                offered_skills=[javascript],
                requested_skills=[cooking],
            )
            db.add(swap)
            db.flush()
            pairs.append((requester.id, swap.id))
        db.commit()
        return bob.id, pairs
    finally:
        db.close()


def _run_concurrently(workers):
    barrier = threading.Barrier(len(workers))
    results = [None] * len(workers)

    def run(index, work):
        barrier.wait()
        try:
            results[index] = work()
        except Exception as exc:
            results[index] = exc

    threads = [threading.Thread(target=run, args=(i, w)) for i, w in enumerate(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)
    return results


def test_concurrent_accepts_have_one_winner(file_sessions):
    bob_id, [(_, swap_id)] = _seed(file_sessions, [SwapStatus.PENDING])

    def accept():
        db = file_sessions()
        try:
            provider = db.get(User, bob_id)
            swap_service.accept_swap(db, swap_id, provider)
            return "accepted"
        finally:
            db.close()

    results = _run_concurrently([accept, accept])

    assert results.count("accepted") == 1
    assert sum(isinstance(r, NotFoundOrUnauthorized) for r in results) == 1

    db = file_sessions()
    try:
        assert db.get(Swap, swap_id).status == SwapStatus.ACCEPTED
    finally:
        db.close()


def test_accept_and_cancel_race(file_sessions):
    bob_id, [(requester_id, swap_id)] = _seed(file_sessions, [SwapStatus.PENDING])

    def transition(user_id, action):
        def work():
            db = file_sessions()
            try:
                action(db, swap_id, db.get(User, user_id))
                return "ok"
            finally:
                db.close()
        return work

    results = _run_concurrently([
        transition(bob_id, swap_service.accept_swap),
        transition(requester_id, swap_service.cancel_swap),
    ])

    assert results.count("ok") == 1
    db = file_sessions()
    try:
        final = db.get(Swap, swap_id).status
    finally:
        db.close()
    expected = SwapStatus.ACCEPTED if results[0] == "ok" else SwapStatus.CANCELLED
    assert final == expected


def test_concurrent_ratings_keep_aggregate_consistent(file_sessions):
    scores = [5, 2, 4, 4]
    bob_id, pairs = _seed(file_sessions, [SwapStatus.COMPLETED] * len(scores))

    def rate(rater_id, swap_id, score):
        def work():
            db = file_sessions()
            try:
                swap_service.rate_swap(db, swap_id, db.get(User, rater_id), score)
                return "rated"
            finally:
                db.close()
        return work

    results = _run_concurrently([
        rate(rater_id, swap_id, score) for (rater_id, swap_id), score in zip(pairs, scores)
    ])
    assert results == ["rated"] * len(scores)

    db = file_sessions()
    try:
        provider = db.get(User, bob_id)
        assert provider.total_ratings == len(scores)
        assert provider.rating == Decimal("3.75")
    finally:
        db.close()


def test_parties_rating_each_other_at_once(file_sessions):
    bob_id, [(alice_id, swap_id)] = _seed(file_sessions, [SwapStatus.COMPLETED])

    def rate(rater_id, score):
        def work():
            db = file_sessions()
            try:
                swap_service.rate_swap(db, swap_id, db.get(User, rater_id), score)
                return "rated"
            finally:
                db.close()
        return work

    results = _run_concurrently([rate(alice_id, 5), rate(bob_id, 3)])
    assert results == ["rated", "rated"]

    db = file_sessions()
    try:
        bob = db.get(User, bob_id)
        alice = db.get(User, alice_id)
        assert (bob.total_ratings, bob.rating) == (1, Decimal("5.00"))
        assert (alice.total_ratings, alice.rating) == (1, Decimal("3.00"))
    finally:
        db.close()


def _mysql_sql(query):
    return str(query.statement.compile(dialect=mysql.dialect(), compile_kwargs={"literal_binds": True}))


def test_rating_locks_both_parties_in_id_order(file_sessions):
    db = file_sessions()
    try:
        query = swap_service._party_lock_query(db, (7, 3))
        sql = _mysql_sql(query)
        assert "FOR UPDATE" in sql
        assert "ORDER BY users.id" in sql
        assert "users.id IN (3, 7)" in sql
    finally:
        db.close()


def test_swap_ownership_check_locks_offered_links(file_sessions):
    db = file_sessions()
    try:
        sql = _mysql_sql(swap_service._offered_links_query(db, 1, [2, 3]))
        assert "FROM user_skills" in sql
        assert "FOR UPDATE" in sql
    finally:
        db.close()
