"""
Academic justification text for circuits.
"""
from typing import Sequence

from archcircuit.domain.models import AcademicYear, City, LearningGoal


YEAR_ORDINALS = {
    AcademicYear.FIRST: "first",
    AcademicYear.SECOND: "second",
    AcademicYear.THIRD: "third",
}

MAX_GOALS_MENTIONED = 3


def compose_justification(
    cities: Sequence[City],
    learning_goals: Sequence[LearningGoal],
    academic_year: AcademicYear,
) -> str:
    """Short rationale covering year, matched goals, regional spread and heritage balance."""
    covered = {focus for city in cities for focus in city.learning_focus}
    matched = [goal.value for goal in dict.fromkeys(learning_goals) if goal in covered][:MAX_GOALS_MENTIONED]

    focus_text = ", ".join(matched) if matched else "a broad survey of built form"
    parts = [
        f"This circuit is designed for {YEAR_ORDINALS[academic_year]} year architecture students, "
        f"focusing on {focus_text}."
    ]

    regions = list(dict.fromkeys(city.region for city in cities))
    if len(regions) == 1:
        parts.append(
            f"The circuit is concentrated in the {regions[0].value} region, ensuring travel efficiency "
            "and allowing deeper engagement with regional architectural typologies."
        )
    else:
        parts.append(
            f"The circuit spans {len(regions)} regions, providing exposure to diverse architectural "
            "responses to climate, culture, and context."
        )

    heritage_count = sum(1 for c in cities if c.heritage_contemporary_index <= 2)
    contemporary_count = sum(1 for c in cities if c.heritage_contemporary_index >= 4)

    if heritage_count > contemporary_count:
        parts.append(
            "The emphasis on heritage architecture aligns with understanding fundamental principles "
            "and historical precedents."
        )
    elif contemporary_count > heritage_count:
        parts.append(
            "The focus on contemporary architecture enables students to understand current practice, "
            "building technologies, and regulatory frameworks."
        )
    else:
        parts.append(
            "The balance between heritage and contemporary architecture provides a comprehensive "
            "understanding of architectural evolution."
        )

    return " ".join(parts)
