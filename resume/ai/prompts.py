# resume/ai/prompts.py
from typing import Any, Dict

from resume.models import GenerationRequest, ResumeFormat, Seniority, Tone

TONE_GUIDANCE: Dict[Tone, str] = {
    Tone.PROFESSIONAL: "Adopt a polished, executive tone that feels confident yet approachable.",
    Tone.FRIENDLY: "Use a warm, collaborative voice while staying professional and clear.",
    Tone.BOLD: "Lean into an energetic, results-driven tone that spotlights ambitious achievements.",
}

SENIORITY_GUIDANCE: Dict[Seniority, str] = {
    Seniority.ENTRY_LEVEL: (
        "Emphasize transferable skills, coursework, internships, and early wins "
        "suited for an entry-level candidate."
    ),
    Seniority.MID_LEVEL: (
        "Balance strategic contributions with hands-on execution that a mid-level "
        "professional is expected to demonstrate."
    ),
    Seniority.SENIOR: (
        "Highlight leadership, vision, cross-functional impact, and decision-making "
        "expected from senior talent."
    ),
}

FORMAT_GUIDANCE: Dict[ResumeFormat, str] = {
    ResumeFormat.TRADITIONAL: "Use a traditional chronological structure with clearly separated roles and bullet points.",
    ResumeFormat.MODERN: "Use a modern, accomplishment-led layout that foregrounds impact statements and key wins.",
    ResumeFormat.COMPACT: "Keep sections concise and skimmable so the resume comfortably fits on a single page.",
}

SYSTEM_PROMPT = """You are an expert resume writer. Always respond with valid JSON that matches the provided schema.
The tailored resume must be concise, achievement-focused, and formatted in Markdown so it can be pasted directly into an ATS."""

RESPONSE_SCHEMA_NAME = "resume_tailoring"

RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "required": ["tailoredResume", "matchedKeywords", "missingSkills", "suggestedImprovements"],
    "properties": {
        "tailoredResume": {
            "type": "string",
            "description": "The fully rewritten resume in Markdown with sections for Summary, Experience, Skills, and Education.",
        },
        "matchedKeywords": {
            "type": "array",
            "description": "Keywords from the job description that are now clearly reflected in the resume.",
            "items": {"type": "string"},
        },
        "missingSkills": {
            "type": "array",
            "description": "Important skills or keywords from the job description that are still missing.",
            "items": {"type": "string"},
        },
        "suggestedImprovements": {
            "type": "array",
            "description": "Actionable suggestions the candidate can follow to further improve alignment with the job description.",
            "items": {"type": "string"},
        },
    },
}

COVER_LETTER_ON = (
    '- After the resume, add a new section titled "## Cover Letter" with 2-3 short paragraphs '
    "that extend the same tone and connect the candidate to the role."
)
COVER_LETTER_OFF = "- Do not include a cover letter or mention one unless explicitly asked."


def build_prompt(request: GenerationRequest) -> str:
    """Render the user prompt for a tailoring request"""
    cover_letter = COVER_LETTER_ON if request.include_cover_letter else COVER_LETTER_OFF

    return f"""Job description:
{request.job_description}

Candidate resume:
{request.resume}

Personalization targets:
- {TONE_GUIDANCE[request.tone]}
- {SENIORITY_GUIDANCE[request.seniority]}
- {FORMAT_GUIDANCE[request.format]}

Rewrite requirements:
- Mirror the most important keywords, tools, and priorities from the job description.
- Use Markdown with clear section headings: Summary, Experience, Skills, Education.
- Keep bullet points concise, achievement-focused, and supported by metrics when possible.
- Maintain ATS-friendly formatting with consistent spacing and capitalization.
{cover_letter}
- Ensure the final document reads cohesively and feels written by one person.

Also identify which keywords from the job description are reflected in the rewrite, which skills are still missing, and provide practical suggestions the candidate can act on to further tailor the resume."""
