import math
from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

from .normalizer import to_matching_key


def _unique_strings(values) -> List[str]:
    if values is None:
        return []
    seen = set()
    result = []
    for v in values:
        if not isinstance(v, str) or not v.strip():
            continue
        v = v.strip()
        if v in seen:
            continue
        seen.add(v)
        result.append(v)
    return result


class Property(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str


class UsageSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    form: Optional[str] = None
    dose: Optional[str] = None
    frequency: Optional[str] = None


class Source(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    url: Optional[str] = None


class RemedySources(BaseModel):
    model_config = ConfigDict(frozen=True)

    scientific: List[Source] = []
    traditional: List[Source] = []


class RemedyRecord(BaseModel):
    """A catalog entry. Keys in the catalog JSON are camelCase."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    name: str
    type: Optional[str] = None
    description: str = ""
    symptoms: List[str]
    bad_for_symptoms: List[str] = Field(default_factory=list, alias="badForSymptoms")
    allergens: List[str] = []
    properties: List[Property] = []
    contraindications: List[str] = []
    tips: List[str] = []
    uses: List[UsageSpec] = []
    pregnancy_safe: Optional[bool] = Field(None, alias="pregnancySafe")
    children_age: Optional[int] = Field(None, ge=0, alias="childrenAge")
    verified_by_professional: bool = Field(False, alias="verifiedByProfessional")
    sources: RemedySources = RemedySources()

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str):
        v = v.strip()
        if not v:
            raise ValueError("remedy name must not be empty")
        return v

    @field_validator("symptoms", "bad_for_symptoms", "allergens", mode="before")
    @classmethod
    def validate_string_set(cls, v):
        return _unique_strings(v)

    @property
    def symptom_keys(self) -> FrozenSet[str]:
        return frozenset(to_matching_key(s) for s in self.symptoms)

    @property
    def bad_for_keys(self) -> FrozenSet[str]:
        return frozenset(to_matching_key(s) for s in self.bad_for_symptoms)

    @property
    def allergen_keys(self) -> FrozenSet[str]:
        return frozenset(to_matching_key(a) for a in self.allergens)


class MatchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    remedy: RemedyRecord
    match_count: int = Field(..., ge=1)
    matched_symptoms: List[str]
    is_recommended: bool = False
    is_filtered: bool = False


class SearchHistoryEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: StrictStr = Field(..., min_length=1)
    symptoms: List[str] = Field(..., min_length=1)
    allergens: List[str] = []
    timestamp: int
    result_count: int = Field(0, ge=0, alias="resultCount")
    filtered_count: int = Field(0, ge=0, alias="filteredCount")

    @field_validator("timestamp", mode="before")
    @classmethod
    def validate_timestamp(cls, v):
        # any JSON number, stored back as whole milliseconds
        if isinstance(v, bool) or not isinstance(v, (int, float)) or not math.isfinite(v):
            raise ValueError("timestamp must be a number")
        return int(v)

    @field_validator("result_count", "filtered_count", mode="before")
    @classmethod
    def validate_count(cls, v):
        # counts are informational, a missing or broken one reads as 0
        if isinstance(v, bool) or not isinstance(v, (int, float)) or not math.isfinite(v) or v < 0:
            return 0
        return int(v)

    @field_validator("allergens", mode="before")
    @classmethod
    def validate_allergens(cls, v):
        return _unique_strings(v) if isinstance(v, list) else []

    def to_storage(self) -> dict:
        return self.model_dump(by_alias=True)


class PregnancyFilter(BaseModel):
    model_config = ConfigDict(frozen=True)

    safe: bool = False
    unknown: bool = False
    unsafe: bool = False


class VerifiedFilter(BaseModel):
    model_config = ConfigDict(frozen=True)

    verified: bool = False
    traditional: bool = False


class AgeLimitFilter(BaseModel):
    model_config = ConfigDict(frozen=True)

    all_ages: bool = False
    with_limit: bool = False
    suitable_for_age: Optional[int] = Field(None, ge=0)


class AppliedFilterSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    pregnancy: PregnancyFilter = PregnancyFilter()
    verified: VerifiedFilter = VerifiedFilter()
    age_limit: AgeLimitFilter = AgeLimitFilter()

    @property
    def is_active(self) -> bool:
        return any((
            self.pregnancy.safe, self.pregnancy.unknown, self.pregnancy.unsafe,
            self.verified.verified, self.verified.traditional,
            self.age_limit.all_ages, self.age_limit.with_limit,
            self.age_limit.suitable_for_age is not None,
        ))


class TriageOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    is_red_flag: bool = False


class TriageQuestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    question: str
    options: List[TriageOption]

    def option(self, option_id: str) -> Optional[TriageOption]:
        for opt in self.options:
            if opt.id == option_id:
                return opt
        return None


class TriageSession(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    validated: bool = False
    timestamp: int
    answers: Dict[str, str] = {}
    has_red_flags: bool = Field(False, alias="hasRedFlags")


class RedFlagsResult(BaseModel):
    triggered: List[str] = []
    emergency: bool = False


class EmergencyContact(BaseModel):
    name: str
    phone: str
    description: Optional[str] = None
