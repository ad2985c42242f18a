import pytest

from ghworld.query.spatial import BoundingBox, SpatialTemporalQueryEngine, filter_commits
from tests.conftest import DAY, NOW, make_commit, make_commit_data

MINUTE = 60 * 1000
DATELINE_BOX = BoundingBox(min_lat=-90, max_lat=90, min_lng=170, max_lng=-170)


@pytest.fixture
def engine(commit_repo, location_repo):
    return SpatialTemporalQueryEngine(commit_repo, location_repo, live_window_minutes=5,
                                      result_limit=5000, scan_limit=20000)


@pytest.mark.parametrize("lng,expected", [(175, True), (-175, True), (180, True), (0, False), (169.9, False)])
def test_dateline_box(lng, expected):
    assert DATELINE_BOX.contains(10, lng) is expected


def test_regular_box_bounds():
    box = BoundingBox(min_lat=30, max_lat=60, min_lng=-10, max_lng=30)
    assert box.contains(51.5, -0.12)
    assert not box.contains(25, 0)
    assert not box.contains(51.5, 31)
    assert box.contains(30, -10)


def test_from_dict():
    box = BoundingBox.from_dict({"minLat": 1, "maxLat": 2, "minLng": 3, "maxLng": 4})
    assert box == BoundingBox(1.0, 2.0, 3.0, 4.0)
    assert BoundingBox.from_dict(None) is None


def test_from_dict_malformed():
    with pytest.raises(ValueError):
        BoundingBox.from_dict({"minLat": 1, "maxLat": 2, "minLng": 3})
    with pytest.raises(ValueError):
        BoundingBox.from_dict({"minLat": "x", "maxLat": 2, "minLng": 3, "maxLng": 4})


def test_filter_unlocated_only_without_box():
    commits = [make_commit("a"), make_commit("b", coordinates=[10, 175])]

    assert [c.id for c in filter_commits(commits, None, 10)] == ["a", "b"]
    assert [c.id for c in filter_commits(commits, DATELINE_BOX, 10)] == ["b"]


def test_filter_short_circuits_at_limit():
    commits = [make_commit(str(i), coordinates=[0, 0]) for i in range(10)]
    assert len(filter_commits(commits, None, 3)) == 3


def test_live_window(engine, commit_repo):
    commit_repo.insert_if_absent(make_commit_data("edge", timestamp=NOW - 5 * MINUTE))
    commit_repo.insert_if_absent(make_commit_data("recent", timestamp=NOW - 4 * MINUTE))
    commit_repo.insert_if_absent(make_commit_data("old", timestamp=NOW - 10 * MINUTE))

    assert [c.id for c in engine.live_commits(now=NOW)] == ["recent"]


def test_unlocated_in_boxless_live_query_only(engine, commit_repo):
    commit_repo.insert_if_absent(make_commit_data("pulse", timestamp=NOW - MINUTE))
    commit_repo.insert_if_absent(make_commit_data("pin", timestamp=NOW - MINUTE, coordinates=[51.5, -0.12]))

    assert {c.id for c in engine.live_commits(now=NOW)} == {"pulse", "pin"}
    box = BoundingBox(min_lat=-90, max_lat=90, min_lng=-180, max_lng=180)
    assert [c.id for c in engine.live_commits(box=box, now=NOW)] == ["pin"]


def test_windowed_query_half_open(engine, commit_repo):
    commit_repo.insert_if_absent(make_commit_data("start", timestamp=NOW))
    commit_repo.insert_if_absent(make_commit_data("end", timestamp=NOW + MINUTE))

    assert [c.id for c in engine.windowed_commits(NOW, NOW + MINUTE)] == ["start"]
    assert engine.windowed_commits(NOW, NOW) == []


def test_result_limit_caps_windowed_query(commit_repo, location_repo):
    engine = SpatialTemporalQueryEngine(commit_repo, location_repo, result_limit=2, scan_limit=10)
    for i in range(5):
        commit_repo.insert_if_absent(make_commit_data(f"c{i}", timestamp=NOW + i))

    assert [c.id for c in engine.windowed_commits(NOW, NOW + 10)] == ["c4", "c3"]


def test_count_is_upper_bound_of_spatial_results(engine, commit_repo):
    commit_repo.insert_if_absent(make_commit_data("a", timestamp=NOW, coordinates=[10, 175]))
    commit_repo.insert_if_absent(make_commit_data("b", timestamp=NOW + 1, coordinates=[10, 0]))
    commit_repo.insert_if_absent(make_commit_data("c", timestamp=NOW + 2))

    start, end = NOW, NOW + MINUTE
    count = engine.count(start, end)
    assert count == 3
    for box in (None, DATELINE_BOX, BoundingBox(-1, 1, -1, 1)):
        assert count >= len(engine.windowed_commits(start, end, box))


def test_oldest_timestamp_defaults_to_a_day_ago(engine, commit_repo):
    assert engine.oldest_timestamp(now=NOW) == NOW - DAY
    commit_repo.insert_if_absent(make_commit_data("a", timestamp=NOW - 5))
    assert engine.oldest_timestamp(now=NOW) == NOW - 5


def test_authors_in_region(engine, location_repo):
    location_repo.upsert("kiwi", "Auckland", [-36.85, 174.76])
    location_repo.upsert("fiji", "Suva", [-18.14, -178.44])
    location_repo.upsert("londoner", "London", [51.5, -0.12])

    box = BoundingBox(min_lat=-50, max_lat=0, min_lng=170, max_lng=-170)
    assert engine.authors_in_region(box) == ["kiwi", "fiji"]
    assert engine.authors_in_region(box, limit=1) == ["kiwi"]
