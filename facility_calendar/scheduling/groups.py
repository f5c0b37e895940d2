"""Facility grouping: synthesis from facility names and partition checks."""

import logging
import re
from typing import Optional, Sequence

from facility_calendar.scheduling.models import FacilityGroup

logger = logging.getLogger(__name__)

DEFAULT_ON_CALL_SUFFIX = r" - OnCall$"

# Golden-angle-like hue step so neighbouring groups rarely look alike.
_HUE_STEP = 137.5


def group_color(index: int) -> str:
    hue = (index * _HUE_STEP) % 360
    return f"hsl({hue:g}, 70%, 95%)"


def base_facility_name(facility: str, suffix_pattern: str = DEFAULT_ON_CALL_SUFFIX) -> str:
    return re.sub(suffix_pattern, "", facility)


def synthesize_groups(
    facilities: Sequence[str],
    suffix_pattern: str = DEFAULT_ON_CALL_SUFFIX,
) -> list[FacilityGroup]:
    """Group facilities that share a base name once the on-call suffix is stripped.

    Groups come out in the order their first facility appears.
    """
    grouped: dict[str, list[str]] = {}
    for facility in facilities:
        members = grouped.setdefault(base_facility_name(facility, suffix_pattern), [])
        if facility not in members:
            members.append(facility)

    return [
        FacilityGroup(
            id=f"group-{index}",
            name=base_name,
            facilities=members,
            color=group_color(index),
        )
        for index, (base_name, members) in enumerate(grouped.items())
    ]


def partition_problems(
    facilities: Sequence[str],
    groups: Sequence[FacilityGroup],
) -> list[str]:
    """Describe how *groups* fail to partition *facilities*; empty when they do."""
    problems: list[str] = []
    known = set(facilities)
    owner: dict[str, str] = {}

    for group in groups:
        for facility in group.facilities:
            if facility in owner:
                problems.append(
                    f"Facility '{facility}' is in both '{owner[facility]}' and '{group.id}'"
                )
            else:
                owner[facility] = group.id
            if facility not in known:
                problems.append(f"Group '{group.id}' lists unknown facility '{facility}'")

    for facility in facilities:
        if facility not in owner:
            problems.append(f"Facility '{facility}' is not in any group")

    return problems


def resolve_groups(
    facilities: Sequence[str],
    groups: Optional[Sequence[FacilityGroup]] = None,
    suffix_pattern: str = DEFAULT_ON_CALL_SUFFIX,
) -> list[FacilityGroup]:
    """Use the caller's groups when given, otherwise synthesize them."""
    if not groups:
        return synthesize_groups(facilities, suffix_pattern)

    for problem in partition_problems(facilities, groups):
        logger.warning(f"Facility groups: {problem}")
    return list(groups)


def find_group(groups: Sequence[FacilityGroup], group_id: str) -> Optional[FacilityGroup]:
    return next((g for g in groups if g.id == group_id), None)


def ordered_facilities(groups: Sequence[FacilityGroup]) -> list[str]:
    """Facility names in display order, group by group."""
    return [facility for group in groups for facility in group.facilities]
