import logging
import re
from datetime import date, datetime
from enum import Enum
from typing import Iterable, List, Optional, Set, Union

from models import BlendCandidate

logger = logging.getLogger(__name__)

MIN_BLEND_LENGTH = 3
MAX_BLEND_LENGTH = 8

VOWEL_PATTERN = re.compile(r'[aeiou]', re.IGNORECASE)
CONSONANT_PATTERN = re.compile(r'[bcdfghjklmnpqrstvwxyz]', re.IGNORECASE)

# (sign, first month, first day, last month, last day), inclusive on both ends
ZODIAC_RANGES = [
    ("Aries", 3, 21, 4, 19),
    ("Taurus", 4, 20, 5, 20),
    ("Gemini", 5, 21, 6, 20),
    ("Cancer", 6, 21, 7, 22),
    ("Leo", 7, 23, 8, 22),
    ("Virgo", 8, 23, 9, 22),
    ("Libra", 9, 23, 10, 22),
    ("Scorpio", 10, 23, 11, 21),
    ("Sagittarius", 11, 22, 12, 21),
    ("Capricorn", 12, 22, 1, 19),
    ("Aquarius", 1, 20, 2, 18),
    ("Pisces", 2, 19, 3, 20),
]


class BlendStrategy(str, Enum):
    FIRST_LETTERS = "first-letters"
    SYLLABLE_BLEND = "syllable-blend"
    VOWEL_CONSONANT = "vowel-consonant"


# Checkbox labels from older clients that mean the same thing as a search type
LEGACY_RULE_ALIASES = {
    "First letter from father + last letter from mother": BlendStrategy.FIRST_LETTERS,
    "Combination of parent names": BlendStrategy.SYLLABLE_BLEND,
}


def reduce_to_single_digit(number: int) -> int:
    """Repeated digit sum. 0 stays 0."""
    while number > 9:
        number = sum(int(digit) for digit in str(number))
    return number


def calculate_numerology(name: str) -> int:
    """
    Pythagorean-style name number: a=1 ... z=26, summed and reduced to one digit.
    Anything outside ASCII a-z (after lowercasing) counts as 0, so a name with
    no letters returns 0.
    """
    total = sum(ord(char) - 96 for char in (name or "").lower() if 'a' <= char <= 'z')
    return reduce_to_single_digit(total)


def _parse_birth_date(birth_date: Union[str, date, None]) -> Optional[date]:
    if not birth_date:
        return None
    if isinstance(birth_date, datetime):
        return birth_date.date()
    if isinstance(birth_date, date):
        return birth_date
    try:
        return datetime.strptime(str(birth_date).strip()[:10], '%Y-%m-%d').date()
    except ValueError:
        logger.warning(f"Ignoring invalid birth date '{birth_date}' for astrology sign.")
        return None


def get_astrology_sign(birth_date: Union[str, date, None]) -> str:
    """Western tropical zodiac sign for a birth date; '' when missing or invalid."""
    parsed = _parse_birth_date(birth_date)
    if parsed is None:
        return ""

    month, day = parsed.month, parsed.day
    for sign, start_month, start_day, end_month, end_day in ZODIAC_RANGES:
        if (month == start_month and day >= start_day) or (month == end_month and day <= end_day):
            return sign
    return ""


def check_sibling_compatibility(name: str, sibling_names: Optional[str]) -> bool:
    """
    Heuristic "family sound" match: same first letter as a sibling, or a length
    within 2 characters of a sibling's name.
    """
    if not sibling_names:
        return False

    siblings = [sibling.strip().lower() for sibling in sibling_names.split(',')]
    siblings = [sibling for sibling in siblings if sibling]
    if not siblings:
        return False

    name_lower = (name or "").lower()
    name_start = name_lower[:1]
    if name_start and any(sibling[0] == name_start for sibling in siblings):
        return True
    return any(abs(len(sibling) - len(name_lower)) <= 2 for sibling in siblings)


def select_blend_strategies(rules: Iterable[str], search_type: Optional[str]) -> Set[BlendStrategy]:
    """Resolves the search type and any legacy rule labels into one set of strategies."""
    selected = set()
    try:
        selected.add(BlendStrategy(search_type))
    except ValueError:
        pass  # search types such as "traditional" do not blend
    for rule in rules or []:
        if rule in LEGACY_RULE_ALIASES:
            selected.add(LEGACY_RULE_ALIASES[rule])
    return selected


def _first_letters(father_name: str, mother_name: str) -> List[BlendCandidate]:
    first, last = father_name[0], mother_name[-1]
    return [BlendCandidate(
        name=first + last,
        explanation=f"Combines first letter '{first}' from father's name '{father_name}' with last letter '{last}' from mother's name '{mother_name}'",
    )]


def _syllable_blend(father_name: str, mother_name: str) -> List[BlendCandidate]:
    father_mid = len(father_name) // 2
    mother_mid = len(mother_name) // 2
    father_head, father_tail = father_name[:father_mid], father_name[father_mid:]
    mother_head, mother_tail = mother_name[:mother_mid], mother_name[mother_mid:]

    return [
        BlendCandidate(
            name=father_head + mother_tail,
            explanation=f"Syllable fusion: '{father_head}' (first half of {father_name}) + '{mother_tail}' (second half of {mother_name})",
        ),
        BlendCandidate(
            name=mother_head + father_tail,
            explanation=f"Syllable fusion: '{mother_head}' (first half of {mother_name}) + '{father_tail}' (second half of {father_name})",
        ),
    ]


def _vowel_consonant(father_name: str, mother_name: str) -> List[BlendCandidate]:
    father_vowels = VOWEL_PATTERN.findall(father_name)
    mother_consonants = CONSONANT_PATTERN.findall(mother_name)
    if not father_vowels or not mother_consonants:
        return []

    name = (
        mother_consonants[0]
        + father_vowels[0]
        + (mother_consonants[1] if len(mother_consonants) > 1 else '')
        + (father_vowels[1] if len(father_vowels) > 1 else '')
    )
    return [BlendCandidate(
        name=name,
        explanation=f"Vowel-consonant pattern: Uses vowels from '{father_name}' ({', '.join(father_vowels)}) and consonants from '{mother_name}' ({', '.join(mother_consonants)})",
    )]


STRATEGY_BUILDERS = [
    (BlendStrategy.FIRST_LETTERS, _first_letters),
    (BlendStrategy.SYLLABLE_BLEND, _syllable_blend),
    (BlendStrategy.VOWEL_CONSONANT, _vowel_consonant),
]


def blend_parent_names(father_name: str, mother_name: str, rules: Iterable[str], search_type: Optional[str]) -> List[BlendCandidate]:
    """
    Builds name candidates from the parent names for every active strategy, in
    strategy order, keeping only names of 3 to 8 characters.
    """
    if not father_name or not mother_name:
        return []

    strategies = select_blend_strategies(rules, search_type)
    blended = []
    for strategy, builder in STRATEGY_BUILDERS:
        if strategy in strategies:
            blended.extend(builder(father_name, mother_name))

    return [item for item in blended if MIN_BLEND_LENGTH <= len(item.name) <= MAX_BLEND_LENGTH]
