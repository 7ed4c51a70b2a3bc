import asyncio
import json

import pytest


def college_entry(i: int = 1, **overrides):
    entry = {
        "name": f"College {i}",
        "address": f"{i} College Road, Mumbai, Maharashtra",
        "contactDetails": {
            "phone": f"+91-22-0000-{i:04d}",
            "email": f"info{i}@college.edu.in",
            "website": f"https://college{i}.edu.in",
        },
        "coursesAvailable": ["B.Tech CSE", "MBA"],
        "fees": [{"course": "B.Tech CSE", "amount": "200000"}, {"course": "MBA", "amount": "350000"}],
        "type": "Both",
    }
    entry.update(overrides)
    return entry


def colleges_json(count: int = 12) -> str:
    return json.dumps([college_entry(i) for i in range(1, count + 1)])


class FakeGenerator:
    """Stands in for the Gemini call. Replies are consumed in order; the last one repeats."""

    def __init__(self, *replies, delay: float = 0.0):
        self.replies = list(replies)
        self.delay = delay
        self.prompts = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        reply = self.replies[min(len(self.prompts), len(self.replies)) - 1]
        if self.delay:
            await asyncio.sleep(self.delay)
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()
