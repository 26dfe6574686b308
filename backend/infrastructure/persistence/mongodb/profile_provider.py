"""MongoDB implementation of IProfileProvider."""

from datetime import date, datetime
from typing import Any, Dict, Optional, Type, TypeVar

from domain.plan.calculation.target_calculator import TargetCalculator
from domain.plan.core.ports.profile_provider import IProfileProvider
from domain.plan.core.value_objects.activity_level import ActivityLevel
from domain.plan.core.value_objects.goal import Goal
from domain.plan.core.value_objects.sex import Sex
from domain.plan.core.value_objects.user_biometrics import UserBiometrics

from .base import MongoBaseRepository

TEnum = TypeVar("TEnum", ActivityLevel, Goal, Sex)


class MongoProfileProvider(MongoBaseRepository[UserBiometrics], IProfileProvider):
    """Reads biometrics from the profile component's ``user_settings`` collection.

    Read-only: the profile component owns these documents, so this
    adapter has no entity-to-document mapping.

    Settings store a date of birth rather than an age; age is derived
    with TargetCalculator.age_on at read time. Unknown enum values and
    missing fields come back as None so validation can report them.
    """

    @property
    def collection_name(self) -> str:
        return "user_settings"

    def from_document(self, doc: Dict[str, Any]) -> UserBiometrics:
        today = date.today()
        date_of_birth = _as_date(doc.get("date_of_birth"))
        return UserBiometrics(
            weight=_as_float(doc.get("current_weight")),
            height=_as_float(doc.get("height")),
            age=TargetCalculator.age_on(date_of_birth, today) if date_of_birth else None,
            sex=_as_enum(Sex, doc.get("gender")),
            goal=_as_enum(Goal, doc.get("primary_goal")),
            activity_level=_as_enum(ActivityLevel, doc.get("activity_level")),
            target_weight=_as_float(doc.get("target_weight")),
            target_date=_as_date(doc.get("target_date")),
        )

    async def get_biometrics(self, user_id: str) -> Optional[UserBiometrics]:
        doc = await self._find_one({"user_id": user_id})
        return self.from_document(doc) if doc else None


def _as_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_date(value: Any) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _as_enum(enum_type: Type[TEnum], value: Any) -> Optional[TEnum]:
    if value is None:
        return None
    try:
        return enum_type(value)
    except ValueError:
        return None
