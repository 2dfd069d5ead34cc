import pytest

from blockfall.game import ScoringRules, calculate_level, calculate_score, get_drop_speed


class TestCalculateScore:
    @pytest.mark.parametrize("level", [1, 2, 7, 20])
    def test_no_lines_scores_nothing(self, level):
        assert calculate_score(0, level) == 0

    def test_base_points(self):
        assert calculate_score(1, 1) == 100
        assert calculate_score(2, 1) == 300
        assert calculate_score(3, 1) == 500
        assert calculate_score(4, 1) == 800

    @pytest.mark.parametrize("lines", [1, 2, 3, 4])
    @pytest.mark.parametrize("level", [2, 3, 5, 10])
    def test_scales_linearly_with_level(self, lines, level):
        assert calculate_score(lines, level) == calculate_score(lines, 1) * level

    def test_known_values(self):
        assert calculate_score(1, 5) == 500
        assert calculate_score(2, 3) == 900
        assert calculate_score(4, 5) == 4000
        assert calculate_score(4, 10) == 8000


class TestCalculateLevel:
    def test_starts_at_one(self):
        assert calculate_level(0) == 1
        assert calculate_level(5) == 1
        assert calculate_level(9) == 1

    def test_every_ten_lines(self):
        assert calculate_level(10) == 2
        assert calculate_level(19) == 2
        assert calculate_level(20) == 3
        assert calculate_level(100) == 11

    def test_matches_formula(self):
        for n in range(0, 250, 7):
            assert calculate_level(n) == 1 + n // 10


class TestDropSpeed:
    def test_level_one(self):
        assert get_drop_speed(1) == 1000

    def test_decreases_per_level(self):
        assert get_drop_speed(2) == 900
        assert get_drop_speed(3) == 800
        assert get_drop_speed(5) == 600

    @pytest.mark.parametrize("level", [10, 11, 20, 100])
    def test_floor(self, level):
        assert get_drop_speed(level) == 100


class TestScoringRules:
    def test_custom_table(self):
        rules = ScoringRules(line_clear_scores=(40, 100, 300, 1200), lines_per_level=5)
        assert rules.score_for_lines(4, 2) == 2400
        assert rules.level_for_lines(5) == 2

    def test_custom_speed_curve(self):
        rules = ScoringRules(base_drop_ms=800, drop_step_ms=50, min_drop_ms=200)
        assert rules.drop_interval(1) == 800
        assert rules.drop_interval(3) == 700
        assert rules.drop_interval(50) == 200

    def test_negative_lines_score_nothing(self):
        assert ScoringRules().score_for_lines(-1, 3) == 0
