from dataclasses import dataclass
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ALLOWED_GENDERS = {"", "boy", "girl", "unisex"}


# --- Pydantic Schemas ---
class NamePreferences(BaseModel):
    """Parental and cultural preferences for one generation or chat call."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    father_name: str = Field(default="", alias="fatherName")
    mother_name: str = Field(default="", alias="motherName")
    gender: str = Field(default="", description="boy, girl or unisex.")
    religion: str = ""
    culture: str = ""
    start_letter: str = Field(default="", alias="startLetter")
    end_letter: str = Field(default="", alias="endLetter")
    must_include: str = Field(default="", alias="mustInclude")
    meaning_preference: str = Field(default="", alias="meaningPreference")
    sibling_names: str = Field(default="", alias="siblingNames", description="Comma-separated sibling names.")
    birth_date: str = Field(default="", alias="birthDate", description="ISO date, YYYY-MM-DD.")
    birth_time: str = Field(default="", alias="birthTime")
    name_rules: List[str] = Field(default_factory=list, alias="nameRules")
    search_type: str = Field(default="", alias="searchType")

    @field_validator(
        "father_name", "mother_name", "religion", "culture", "start_letter", "end_letter",
        "must_include", "meaning_preference", "sibling_names", "birth_date", "birth_time",
        "search_type", mode="before",
    )
    @classmethod
    def _none_to_empty(cls, value):
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("gender", mode="before")
    @classmethod
    def _normalise_gender(cls, value):
        gender = str(value or "").strip().lower()
        if gender not in ALLOWED_GENDERS:
            raise ValueError(f"gender must be one of boy, girl or unisex, got '{value}'")
        return gender

    @field_validator("name_rules", mode="before")
    @classmethod
    def _none_to_list(cls, value):
        return value or []

    def missing_required_fields(self) -> List[str]:
        """Names of the fields name generation cannot run without."""
        required = {"fatherName": self.father_name, "motherName": self.mother_name, "gender": self.gender}
        return [field for field, value in required.items() if not value]


class GeneratedName(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1, description="The suggested baby name.")
    meaning: str = Field(default="", description="Detailed meaning description.")
    origin: str = Field(default="", description="Cultural origin.")
    gender: str = Field(default="", description="boy/girl/unisex.")
    pronunciation: str = Field(default="", description="Phonetic pronunciation.")
    popularity: int = Field(default=0, ge=0, le=100)
    numerology: Optional[int] = None
    astrology: Optional[str] = None
    sibling_match: Optional[bool] = Field(default=None, alias="siblingMatch")
    derivation: Optional[str] = Field(default=None, description="How the name derives from the parent names and preferences.")
    parent_connection: Optional[str] = Field(default=None, alias="parentConnection", description="Specific connection to father/mother names.")

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("meaning", "origin", "gender", "pronunciation", mode="before")
    @classmethod
    def _text_or_empty(cls, value):
        return "" if value is None else str(value)

    @field_validator("popularity", mode="before")
    @classmethod
    def _clamp_popularity(cls, value):
        if value is None or value == "":
            return 0
        if not isinstance(value, (int, float, str)):
            return value  # left for pydantic to reject as a ValidationError
        try:
            return max(0, min(100, int(float(value))))
        except (TypeError, OverflowError) as e:
            raise ValueError(f"popularity must be a finite number, got {value!r}") from e

    def to_api(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class ChatResponse(BaseModel):
    content: str
    suggestions: List[str] = Field(default_factory=list, max_length=3)


@dataclass(frozen=True)
class BlendCandidate:
    name: str
    explanation: str
