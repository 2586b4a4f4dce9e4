from ensenando.achievements.definitions import ACHIEVEMENTS, get_definition
from ensenando.achievements.engine import evaluate
from ensenando.achievements.metrics import AchievementMetrics


def test_definition_ids_are_stable_and_unique():
    ids = [d.id for d in ACHIEVEMENTS]
    assert ids == list(range(1, 19))
    assert get_definition(1).title == "Primer Paso"
    assert get_definition(18).title == "Dominio Total"
    assert get_definition(99) is None


def test_nothing_unlocks_for_empty_metrics():
    assert evaluate(AchievementMetrics(), set()) == []


def test_first_completion_unlocks_first_step():
    newly = [d.id for d in evaluate(AchievementMetrics(completed=1, total_items=10), set())]
    assert 1 in newly
    assert newly.count(1) == 1


def test_already_unlocked_are_not_returned_again():
    metrics = AchievementMetrics(completed=1, streak_days=1)
    first = {d.id for d in evaluate(metrics, set())}
    assert evaluate(metrics, first) == []


def test_completion_tiers_follow_table_order():
    metrics = AchievementMetrics(completion_percentage=100)
    assert [d.id for d in evaluate(metrics, set())] == [6, 16, 17, 18]


def test_self_improvement_needs_a_previous_week():
    assert evaluate(AchievementMetrics(average_last_7=50.0, average_previous_7=0.0), set()) == []
    ids = [d.id for d in evaluate(AchievementMetrics(average_last_7=50.0, average_previous_7=40.0), set())]
    assert ids == [9]


def test_streak_and_social_rules():
    metrics = AchievementMetrics(
        streak_days=30,
        returned_after_week=True,
        relationships_total=1,
        relationships_accepted=1,
        report_recent=True,
    )
    assert [d.id for d in evaluate(metrics, set())] == [3, 10, 11, 12, 13, 14, 15]


def test_perfectionist_requires_exactly_one_hundred():
    assert evaluate(AchievementMetrics(max_percentage=99), set()) == []
    assert [d.id for d in evaluate(AchievementMetrics(max_percentage=100), set())] == [8]
