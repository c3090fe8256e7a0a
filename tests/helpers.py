"""
Test doubles and factories shared by the unit and integration suites.
"""

import asyncio
import json

from database.db_manager import DatabaseManager
from resume.models import GenerationRequest

RESUME_TEXT = (
    "Jane Doe\n"
    "Software Engineer\n"
    "Built data pipelines in Python and SQL for five years.\n"
    "Led a team of three engineers."
)

JOB_DESCRIPTION = "Senior Python engineer to build data pipelines on AWS with SQL."


def tailoring_response(resume: str = "# Jane Doe\nSenior Python Engineer", **insights) -> str:
    """JSON body a well-behaved model would return"""
    return json.dumps({
        "tailoredResume": resume,
        "matchedKeywords": insights.get("matched", ["Python", "SQL"]),
        "missingSkills": insights.get("missing", ["AWS"]),
        "suggestedImprovements": insights.get("suggestions", ["Quantify pipeline throughput"]),
    })


class ScriptedRewriteService:
    """
    Rewrite service that replays a script of answers

    Each entry is returned as-is, or raised if it is an exception. The
    last entry repeats once the script is exhausted.
    """

    def __init__(self, *answers, delay: float = 0.0):
        self.answers = list(answers) or [tailoring_response()]
        self.delay = delay
        self.calls = 0
        self.prompts = []

    async def generate_structured(self, system_prompt, prompt, schema):
        self.calls += 1
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)

        answer = self.answers[min(self.calls, len(self.answers)) - 1]
        if isinstance(answer, BaseException):
            raise answer
        return answer


def request_body(**overrides) -> dict:
    body = {
        "jobDescription": JOB_DESCRIPTION,
        "resume": RESUME_TEXT,
        "tone": "professional",
        "seniority": "senior",
        "format": "modern",
        "includeCoverLetter": False,
    }
    body.update(overrides)
    return body


def make_request(**overrides) -> GenerationRequest:
    return GenerationRequest.model_validate(request_body(**overrides))


def set_resume_count(db: DatabaseManager, user_id: str, count: int):
    with db.get_connection() as conn:
        conn.execute("UPDATE users SET resume_count = ? WHERE user_id = ?", (count, user_id))


PASSWORD = "Secret123"


def register(client, email: str = "jane@example.com", name: str = "Jane", password: str = PASSWORD):
    return client.post("/api/auth/register", json={"email": email, "password": password, "name": name})
