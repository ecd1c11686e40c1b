import json
import logging
import re
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

import config
from llm_manager import ask_llm, llm_manager
from models import BlendCandidate, ChatResponse, GeneratedName, NamePreferences
from name_helpers import blend_parent_names, calculate_numerology, check_sibling_compatibility, get_astrology_sign

logger = logging.getLogger(__name__)


class NameParseError(ValueError):
    """The model reply could not be read as the requested JSON array of names."""


# --- PROMPTS ---
NAME_GENERATION_PROMPT = """Generate {count} meaningful baby names with detailed explanations of how they connect to the parent names or preferences:

Father's name: {father_name}
Mother's name: {mother_name}
Gender: {gender}
Religion: {religion}
Culture/Language: {culture}
Search Type: {search_type}
{optional_lines}
For each name, provide detailed explanation of:
1. How it relates to the parent names (if applicable)
2. Cultural significance
3. Meaning derivation
4. Why it fits the preferences

Please provide each name in this exact JSON format:
{{
  "name": "Name",
  "meaning": "Detailed meaning description",
  "origin": "Cultural origin",
  "gender": "boy/girl/unisex",
  "pronunciation": "phonetic pronunciation",
  "popularity": number between 1-100,
  "derivation": "How this name relates to or derives from the parent names and preferences",
  "parentConnection": "Specific connection to father/mother names if any"
}}

Return an array of {count} such name objects. Focus on meaningful connections and beautiful derivations."""

CHAT_PROMPT = """User preferences: Gender: {gender}, Religion: {religion}, Culture: {culture}, Father: {father_name}, Mother: {mother_name}

User question: {message}

Please provide a helpful response about baby names. If the user is asking for specific name suggestions, provide 3-5 names with brief explanations. Keep the response conversational and helpful."""

CHAT_WELCOME_MESSAGE = (
    "Hello! I'm your AI name assistant for AstroName AI. I can help you explore name ideas, "
    "explain meanings, suggest alternatives, or discuss cultural significance. "
    "What would you like to know about baby names?"
)
CHAT_WELCOME_SUGGESTIONS = [
    "Give me modern girl names that start with 'A'",
    "Suggest names that blend our parent names",
    "Names that match with my daughter Anika",
    "What are some unique unisex names?",
]
CHAT_FOLLOW_UP_SUGGESTIONS = [
    "Tell me more about the origin of these names",
    "Suggest similar names with different meanings",
    "What are some unique variations?",
    "How do these names sound with our last name?",
]
CHAT_APOLOGY = "I'm sorry, I'm having trouble connecting right now. Please try asking your question again in a moment."
CHAT_FAILURE_SUGGESTIONS = [
    "Give me traditional names for boys",
    "Suggest modern names for girls",
    "What are some unisex name options?",
]

# Curated names served whenever Gemini is unreachable or its reply is unusable
FALLBACK_NAMES = [
    {"name": "Arjun", "meaning": "Bright, shining, white", "origin": "Sanskrit", "gender": "boy", "pronunciation": "AR-jun", "popularity": 85},
    {"name": "Aaradhya", "meaning": "Worshipped, blessed", "origin": "Sanskrit", "gender": "girl", "pronunciation": "aa-RAADH-ya", "popularity": 78},
    {"name": "Advait", "meaning": "Unique, without a second", "origin": "Sanskrit", "gender": "boy", "pronunciation": "ad-VAIT", "popularity": 72},
    {"name": "Ananya", "meaning": "Unique, incomparable", "origin": "Sanskrit", "gender": "girl", "pronunciation": "a-NAN-ya", "popularity": 80},
    {"name": "Vivaan", "meaning": "Full of life", "origin": "Sanskrit", "gender": "boy", "pronunciation": "vi-VAAN", "popularity": 88},
    {"name": "Saisha", "meaning": "Meaningful life", "origin": "Sanskrit", "gender": "girl", "pronunciation": "SAI-sha", "popularity": 65},
]

CODE_FENCE_JSON = re.compile(r'```json\n?')
CODE_FENCE = re.compile(r'```\n?')

NAME_LIST_ADAPTER = TypeAdapter(List[GeneratedName])


def build_generation_prompt(preferences: NamePreferences) -> str:
    optional_fields = [
        ("Start with letter", preferences.start_letter),
        ("End with letter", preferences.end_letter),
        ("Must include letters", preferences.must_include),
        ("Preferred meaning", preferences.meaning_preference),
        ("Sibling names for compatibility", preferences.sibling_names),
    ]
    optional_lines = "".join(f"{label}: {value}\n" for label, value in optional_fields if value)

    return NAME_GENERATION_PROMPT.format(
        count=config.REQUESTED_NAME_COUNT,
        father_name=preferences.father_name,
        mother_name=preferences.mother_name,
        gender=preferences.gender,
        religion=preferences.religion or 'any',
        culture=preferences.culture or 'any',
        search_type=preferences.search_type or 'traditional',
        optional_lines=optional_lines,
    )


def build_chat_prompt(message: str, preferences: NamePreferences) -> str:
    return CHAT_PROMPT.format(
        gender=preferences.gender,
        religion=preferences.religion,
        culture=preferences.culture,
        father_name=preferences.father_name,
        mother_name=preferences.mother_name,
        message=message,
    )


def parse_generated_names(text: str) -> List[GeneratedName]:
    """Strips markdown code fences and validates the reply as a JSON array of names."""
    cleaned = CODE_FENCE.sub('', CODE_FENCE_JSON.sub('', text)).strip()
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise NameParseError(f"Reply is not valid JSON: {e}") from e

    if not isinstance(payload, list):
        raise NameParseError(f"Expected a JSON array of names, got {type(payload).__name__}.")

    try:
        return NAME_LIST_ADAPTER.validate_python(payload)
    except ValidationError as e:
        raise NameParseError(f"Reply does not match the name schema: {e}") from e


def decorate_name(name: GeneratedName, preferences: NamePreferences) -> GeneratedName:
    """Attaches numerology and astrology when a birth date is known, sibling match when siblings are."""
    updates = {"numerology": None, "astrology": None, "sibling_match": None}
    if preferences.birth_date:
        updates["numerology"] = calculate_numerology(name.name)
        updates["astrology"] = get_astrology_sign(preferences.birth_date)
    if preferences.sibling_names:
        updates["sibling_match"] = check_sibling_compatibility(name.name, preferences.sibling_names)
    return name.model_copy(update=updates)


def blended_name_record(candidate: BlendCandidate, preferences: NamePreferences) -> GeneratedName:
    record = GeneratedName(
        name=candidate.name[:1].upper() + candidate.name[1:],
        meaning="Creative blend of parent names",
        origin="Parent blend",
        gender=preferences.gender,
        pronunciation=candidate.name.lower(),
        popularity=30,
        derivation=candidate.explanation,
        parent_connection=f"Direct combination of {preferences.father_name} and {preferences.mother_name}",
    )
    return decorate_name(record, preferences)


def _fallback_table(preferences: NamePreferences) -> List[GeneratedName]:
    gender = preferences.gender
    return [
        GeneratedName(**entry)
        for entry in FALLBACK_NAMES
        if not gender or gender == "unisex" or entry["gender"] == gender
    ]


def get_fallback_names(preferences: NamePreferences) -> List[GeneratedName]:
    """The curated fallback list, filtered by gender and decorated."""
    return [decorate_name(name, preferences) for name in _fallback_table(preferences)][:config.MAX_RESULTS]


async def generate_names(preferences: NamePreferences, llm=None) -> List[GeneratedName]:
    """
    Asks Gemini for name suggestions and decorates them with numerology,
    astrology and sibling compatibility. Parent-name blends are put first and
    the result is capped at 15 names.

    Never raises: an unreachable service or a malformed reply yields the
    fallback list. An unparsable reply substitutes the fallback list but still
    keeps the blended names.
    """
    try:
        if llm is None:
            llm = llm_manager.creative_llm

        logger.info("Generating baby names with Gemini.")
        generated_text = await ask_llm(llm, build_generation_prompt(preferences))

        try:
            names = parse_generated_names(generated_text)
        except NameParseError as e:
            logger.warning(f"JSON parse failed, using fallback names: {e}")
            names = _fallback_table(preferences)

        processed_names = [decorate_name(name, preferences) for name in names]

        blended = blend_parent_names(
            preferences.father_name,
            preferences.mother_name,
            preferences.name_rules,
            preferences.search_type,
        )
        blended_names = [blended_name_record(candidate, preferences) for candidate in blended[:config.MAX_BLENDED_NAMES]]

        result = (blended_names + processed_names)[:config.MAX_RESULTS]
        logger.info(f"Generated {len(result)} names ({len(blended_names)} parent blends).")
        return result
    except Exception as e:
        logger.error(f"Error generating names, serving fallback list: {e}", exc_info=True)
        return get_fallback_names(preferences)


async def chat_with_ai(message: str, preferences: Optional[NamePreferences] = None, llm=None) -> ChatResponse:
    """Answers a free-text question about baby names; an apology on any failure."""
    preferences = preferences or NamePreferences()
    try:
        if llm is None:
            llm = llm_manager.llm

        content = await ask_llm(llm, build_chat_prompt(message, preferences))
        return ChatResponse(content=content, suggestions=CHAT_FOLLOW_UP_SUGGESTIONS[:config.MAX_CHAT_SUGGESTIONS])
    except Exception as e:
        logger.error(f"Error in AI chat: {e}", exc_info=True)
        return ChatResponse(content=CHAT_APOLOGY, suggestions=CHAT_FAILURE_SUGGESTIONS[:config.MAX_CHAT_SUGGESTIONS])
