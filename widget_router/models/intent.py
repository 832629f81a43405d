# Role: Contract of the external intent classifier. One ClassifiedIntent arrives per user turn; the router only
# reads it. Parsing is tolerant: unknown tags, empty entities and unknown widget suggestions are treated as absence.

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from widget_router.models.widget import WidgetKind


class IntentType(str, Enum):
    # Destination
    SEARCH_DESTINATION = "search_destination"
    PROVIDE_DESTINATION = "provide_destination"
    PROVIDE_DEPARTURE_CITY = "provide_departure_city"

    # Dates
    PROVIDE_DATES = "provide_dates"
    PROVIDE_DURATION = "provide_duration"
    FLEXIBLE_DATES = "flexible_dates"

    # Travelers
    PROVIDE_TRAVELERS = "provide_travelers"
    SPECIFY_COMPOSITION = "specify_composition"

    # Preferences
    EXPRESS_PREFERENCE = "express_preference"
    EXPRESS_CONSTRAINT = "express_constraint"

    # Inspiration
    ASK_INSPIRATION = "ask_inspiration"
    ASK_RECOMMENDATIONS = "ask_recommendations"

    # Comparison / selection
    COMPARE_OPTIONS = "compare_options"
    CONFIRM_SELECTION = "confirm_selection"
    MODIFY_SELECTION = "modify_selection"

    # Actions
    TRIGGER_SEARCH = "trigger_search"
    DELEGATE_CHOICE = "delegate_choice"
    CANCEL_OR_RESTART = "cancel_or_restart"

    # General
    ASK_QUESTION = "ask_question"
    GREETING = "greeting"
    THANK_YOU = "thank_you"
    OTHER = "other"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ExtractedEntities(_CamelModel):
    # Location
    destination_city: Optional[str] = None
    destination_country: Optional[str] = None
    destination_country_code: Optional[str] = None
    departure_city: Optional[str] = None
    departure_country: Optional[str] = None
    departure_country_code: Optional[str] = None

    # Dates
    exact_departure_date: Optional[str] = None
    exact_return_date: Optional[str] = None
    preferred_month: Optional[str] = None
    preferred_season: Optional[str] = None
    trip_duration: Optional[str] = None

    # Travelers
    adults: Optional[int] = None
    children: Optional[int] = None
    infants: Optional[int] = None
    travel_style: Optional[str] = None

    # Preferences
    budget_level: Optional[str] = None
    interests: List[str] = Field(default_factory=list)
    constraints: List[str] = Field(default_factory=list)
    dietary_restrictions: List[str] = Field(default_factory=list)
    accessibility_required: Optional[bool] = None
    pet_friendly: Optional[bool] = None
    family_friendly: Optional[bool] = None

    @model_validator(mode="before")
    @classmethod
    def _drop_empty_values(cls, data: Any) -> Any:
        # Key line: the classifier often sends "" / [] / null for "not mentioned".
        if not isinstance(data, dict):
            return {}
        return {
            k: v
            for k, v in data.items()
            if v is not None and v != "" and not (isinstance(v, list) and len(v) == 0)
        }

    @field_validator("*", mode="wrap")
    @classmethod
    def _invalid_value_is_absent(cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo) -> Any:
        # Key line: one malformed entity ("interests": "plage", "adults": "two") must not void the whole intent.
        try:
            return handler(value)
        except ValidationError:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)

    def to_memory_updates(self) -> Dict[str, Any]:
        # Role: map entity names onto TripMemory.apply_updates() keys.
        return {
            "destination_city": self.destination_city,
            "destination_country": self.destination_country,
            "destination_country_code": self.destination_country_code,
            "departure_city": self.departure_city,
            "departure_date": self.exact_departure_date,
            "return_date": self.exact_return_date,
            "adults": self.adults,
            "children": self.children,
            "infants": self.infants,
        }


class WidgetSuggestion(_CamelModel):
    kind: WidgetKind = Field(alias="type")
    reason: Optional[str] = None
    data: Optional[Dict[str, Any]] = None

    @field_validator("reason", "data", mode="wrap")
    @classmethod
    def _invalid_optional_is_none(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(value)
        except ValidationError:
            return None


class ClassifiedIntent(_CamelModel):
    primary_intent: IntentType
    secondary_intent: Optional[IntentType] = None
    confidence: float = 0.0
    entities: ExtractedEntities = Field(default_factory=ExtractedEntities)
    widget_to_show: Optional[WidgetSuggestion] = None
    next_expected_intent: Optional[IntentType] = None
    requires_clarification: bool = False
    clarification_question: Optional[str] = None

    @field_validator("primary_intent", mode="before")
    @classmethod
    def _unknown_primary_is_other(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip() in {i.value for i in IntentType}:
            return value.strip()
        if isinstance(value, IntentType):
            return value
        return IntentType.OTHER

    @field_validator("secondary_intent", "next_expected_intent", mode="before")
    @classmethod
    def _unknown_optional_intent_is_none(cls, value: Any) -> Any:
        if isinstance(value, IntentType):
            return value
        if isinstance(value, str) and value.strip() in {i.value for i in IntentType}:
            return value.strip()
        return None

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, value: Any) -> float:
        try:
            c = float(value)
        except (TypeError, ValueError):
            return 0.0
        return min(max(c, 0.0), 100.0)

    @field_validator("entities", mode="before")
    @classmethod
    def _entities_default(cls, value: Any) -> Any:
        return value if isinstance(value, (dict, ExtractedEntities)) else {}

    @field_validator("widget_to_show", mode="before")
    @classmethod
    def _drop_unknown_widget(cls, value: Any) -> Any:
        # Key line: a suggestion for a widget kind we cannot render is treated as "no suggestion".
        if isinstance(value, WidgetSuggestion):
            return value
        if not isinstance(value, dict):
            return None
        kind = WidgetKind.parse(value.get("type", value.get("kind")))
        if kind is None:
            return None
        fields = {k: v for k, v in value.items() if k != "kind"}
        try:
            return WidgetSuggestion.model_validate({**fields, "type": kind})
        except ValidationError:
            return None

    @field_validator("requires_clarification", mode="before")
    @classmethod
    def _non_bool_is_false(cls, value: Any) -> bool:
        return value if isinstance(value, bool) else False

    @field_validator("clarification_question", mode="before")
    @classmethod
    def _blank_question_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None

    @classmethod
    def from_payload(cls, payload: Any) -> Optional["ClassifiedIntent"]:
        # Role: never raise on classifier output; missing required fields -> None.
        if not isinstance(payload, dict) or not payload.get("primaryIntent", payload.get("primary_intent")):
            return None
        try:
            return cls.model_validate(payload)
        except ValidationError:
            return None
