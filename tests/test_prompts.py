"""Prompt composition: seed pair and week continuation prompt."""

from app.services.prompts import (
    DAY_NAMES,
    GREETING_REQUEST,
    MEALPLAN_END,
    MEALPLAN_START,
    NUTRITION_SYSTEM_PROMPT,
    SEED_ACKNOWLEDGMENT,
    build_week_prompt,
    seed_history,
    week_range,
)
from tests.helpers import SAMPLE_PROFILE


class TestSeedHistory:

    def test_seed_pair(self):
        seed = seed_history()
        assert [h["role"] for h in seed] == ["user", "model"]
        assert seed[0]["content"] == "System Instructions:\n\n" + NUTRITION_SYSTEM_PROMPT
        assert seed[1]["content"] == SEED_ACKNOWLEDGMENT

    def test_fresh_list_each_time(self):
        first = seed_history()
        first.append({"role": "user", "content": "hi"})
        assert len(seed_history()) == 2

    def test_system_prompt_names_markers(self):
        assert MEALPLAN_START in NUTRITION_SYSTEM_PROMPT
        assert MEALPLAN_END in NUTRITION_SYSTEM_PROMPT

    def test_greeting_request(self):
        assert "greeting" in GREETING_REQUEST


class TestWeekRange:

    def test_after_first_week(self):
        assert week_range(1) == (2, 8, 14)

    def test_after_third_week(self):
        assert week_range(3) == (4, 22, 28)


class TestBuildWeekPrompt:

    def test_week_one_requests_days_8_to_14(self):
        prompt = build_week_prompt(SAMPLE_PROFILE, 1)
        assert "Generate Week 2 (Days 8-14)" in prompt
        assert '"day": 8' in prompt
        assert "(8 to 14)" in prompt

    def test_day_names_cycle_monday_to_sunday(self):
        prompt = build_week_prompt(SAMPLE_PROFILE, 1)
        expected = ", ".join(f"Day {8 + i} = {name}" for i, name in enumerate(DAY_NAMES))
        assert expected in prompt
        assert DAY_NAMES[0] == "Monday" and DAY_NAMES[-1] == "Sunday"

    def test_profile_targets_included(self):
        prompt = build_week_prompt(SAMPLE_PROFILE, 1)
        assert "Target Calories: 1770 kcal/day" in prompt
        assert "Protein: 130g | Carbs: 180g | Fat: 59g | Fiber: 30g" in prompt
        assert "Goal: weight_loss" in prompt
        assert "Health considerations: LDL is borderline high" in prompt

    def test_no_warnings_line_when_empty(self):
        profile = dict(SAMPLE_PROFILE, warnings=[])
        assert "Health considerations" not in build_week_prompt(profile, 1)

    def test_preferences(self):
        prompt = build_week_prompt(SAMPLE_PROFILE, 2, preferences="vegetarian, Thai food")
        assert "Preferences: vegetarian, Thai food" in prompt
        assert "Generate Week 3 (Days 15-21)" in prompt

    def test_asks_for_variety_and_markers(self):
        prompt = build_week_prompt(SAMPLE_PROFILE, 1)
        assert "DIFFERENT meals from previous weeks" in prompt
        assert prompt.count(MEALPLAN_START) == 1
        assert prompt.count(MEALPLAN_END) == 1

    def test_does_not_replay_history(self):
        prompt = build_week_prompt(SAMPLE_PROFILE, 1)
        assert NUTRITION_SYSTEM_PROMPT not in prompt
