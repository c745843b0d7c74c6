"""
Profile Extractor - derive personal profile fields from CV text.

One inference call per CV upload, no retry. The model's answer is
untrusted: it may be wrapped in a markdown code fence, be invalid JSON,
or be missing entirely. Every such case yields None so that the upload
itself is never affected.
"""

import json
import re
from typing import Optional

from pydantic import ValidationError

from career_assistant.core.logging import get_logger
from career_assistant.schemas.schemas import ExtractedProfile, NOT_SPECIFIED
from career_assistant.services.llm_client import LLMClient

logger = get_logger(__name__)

SYSTEM_PROMPT = "You are an expert at extracting personal information from CVs. Always return valid JSON only."

USER_PROMPT_TEMPLATE = """
Extract personal information from this CV/Resume content and return it in JSON format with these exact fields:
- name: Full name of the person
- email: Email address if found
- phone: Phone number if found
- position: Current or desired job title/position
- skills: Comma-separated list of key skills and technologies
- experience: Brief summary of key work experience and achievements
- languages: If languages are found, return as array: [{{"language": "English", "proficiency": "Native"}}, {{"language": "Spanish", "proficiency": "Fluent"}}]. If no languages found, return null.

IMPORTANT: For languages field:
- Only include languages that are clearly mentioned in the CV
- If proficiency level is not specified, use "{not_specified}"
- If no languages are mentioned at all, return null
- Never use "undefined" values

If any information is not found, use null for that field.
Only return valid JSON, no additional text or explanations.

CV Content:
{cv_content}
"""

TEMPERATURE = 0.1
MAX_TOKENS = 500

_FENCE_START = re.compile(r"^```[\w-]*\s*")
_FENCE_END = re.compile(r"\s*```$")


def build_user_prompt(cv_text: str) -> str:
    return USER_PROMPT_TEMPLATE.format(not_specified=NOT_SPECIFIED, cv_content=cv_text)


def clean_llm_response(text: str) -> str:
    """
    Strip whitespace and a surrounding markdown code fence.

    Handles ```json ... ```, bare ``` ... ``` and any mix of trailing
    whitespace or newlines around the fences.
    """
    text = text.strip()
    if text.startswith("```"):
        text = _FENCE_START.sub("", text)
        text = _FENCE_END.sub("", text)
    return text.strip()


def parse_llm_json(text: Optional[str]) -> Optional[dict]:
    """Parse a JSON object out of a model response, or None."""
    if not text or not text.strip():
        return None
    try:
        data = json.loads(clean_llm_response(text))
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None
    return data


async def extract_profile(llm: LLMClient, cv_text: str) -> Optional[ExtractedProfile]:
    """
    Ask the model for the seven profile fields of a CV.

    Returns None when the call fails, returns nothing, or returns
    something that is not a JSON object of profile fields. Never raises.
    """
    try:
        response = await llm.complete(
            SYSTEM_PROMPT,
            build_user_prompt(cv_text),
            temperature=TEMPERATURE,
            max_tokens=MAX_TOKENS
        )
    except Exception as e:
        logger.warning("Profile extraction call failed: %s", e)
        return None

    if not response:
        logger.warning("Profile extraction returned no content")
        return None

    payload = parse_llm_json(response)
    if payload is None:
        logger.warning("Failed to parse profile extraction response as JSON: %r", response[:200])
        return None

    try:
        return ExtractedProfile.model_validate(payload)
    except ValidationError as e:
        logger.warning("Extracted profile validation failed: %s", e)
        return None
