"""Prompt templates shared by all providers.

The offline provider classifies these same prompts by keyword, so the
wording of the instruction lines matters: meeting prompts must mention
"analyze"/"extract" together with "meeting note", and the multi-name
prompt must mention both "names" and "array".
"""

MEETING_SYSTEM_PROMPT = (
    "You are a meeting note analyzer. Extract structured data from meeting "
    "notes. Return valid JSON only."
)

MEETING_EXTRACTION_PROMPT = """Analyze this meeting note and extract the following information.

Return a JSON object with:
- "names": an array of every person mentioned (not "I" or "me")
- "summary": a brief 1-2 sentence summary of the meeting
- "topics": an array of 3-8 topic keywords/phrases discussed

Meeting note:
{text}"""

PROFILE_SYSTEM_PROMPT = (
    "You are a CRM assistant. Return only markdown, no code blocks. "
    "Write a clean, structured profile with sections for Background, "
    "Key Interests, and Notes. Be concise."
)

PROFILE_PROMPT = """Generate a markdown profile for this contact:
{details}

Meeting history:
{meetings}"""

JSON_ONLY_INSTRUCTION = (
    "Respond ONLY with valid JSON. No markdown fences, no explanation."
)


def with_json_instruction(system_prompt: str | None) -> str:
    """Append the JSON-only instruction to a system prompt."""
    return f"{system_prompt or ''}\n{JSON_ONLY_INSTRUCTION}".strip()
