"""Shared fakes and sample payloads for the test suite."""

import asyncio
import json

from langchain_core.messages import AIMessage

from app.services.prompts import MEALPLAN_END, MEALPLAN_START


class ScriptedChatModel:
    """Stands in for the chat model: replays canned replies and records every call."""

    def __init__(self, responses, delay=0.0):
        self.responses = list(responses)
        self.calls = []
        self.delay = delay

    async def ainvoke(self, messages):
        self.calls.append(list(messages))
        if self.delay:
            await asyncio.sleep(self.delay)
        reply = self.responses.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return AIMessage(content=reply)


SAMPLE_PROFILE = {
    "bmr": 1650,
    "tdee": 2270,
    "targetCalories": 1770,
    "protein": 130,
    "carbs": 180,
    "fat": 59,
    "fiber": 30,
    "goal": "weight_loss",
    "warnings": ["LDL is borderline high"],
}


def make_day(day, day_name="Monday"):
    meal = {
        "name": "Greek yogurt bowl",
        "calories": 350,
        "protein": 25,
        "carbs": 40,
        "fat": 9,
        "fiber": 6,
        "prepTime": "5 mins",
        "ingredients": ["1 cup Greek yogurt", "1/2 cup berries"],
        "instructions": "Combine and serve.",
    }
    return {
        "day": day,
        "dayName": day_name,
        "meals": {k: dict(meal) for k in ("breakfast", "snack1", "lunch", "snack2", "dinner")},
        "dailyTotals": {"calories": 1750, "protein": 125, "carbs": 200, "fat": 45, "fiber": 30},
    }


SAMPLE_PLAN = {
    "profile": SAMPLE_PROFILE,
    "days": [make_day(1)],
    "recommendations": ["Drink water before meals"],
    "shoppingList": ["Greek yogurt", "Berries"],
}


def wrap_plan(payload, before="Here is your plan!", after="Your plan is ready to view."):
    return f"{before}\n\n{MEALPLAN_START}\n{json.dumps(payload)}\n{MEALPLAN_END}\n\n{after}"
