"""Facility-group reordering by drag and drop.

``Idle -> Dragging(group) -> Idle``. While a group is dragged the hovered
group and the side of its header under the pointer are tracked; a drop
moves the dragged group before or after the target.
"""

import logging
from typing import Optional, Sequence

from facility_calendar.interaction.state import (
    IDLE,
    DragMode,
    DropPosition,
    GroupDrag,
    InteractionState,
    drop_position,
)
from facility_calendar.scheduling.models import FacilityGroup

logger = logging.getLogger(__name__)


def start_group_drag(state: InteractionState, group_id: str) -> InteractionState:
    """Begin dragging a group; refused while an appointment is being dragged."""
    if not state.is_idle:
        logger.debug(f"Ignoring drag of group {group_id}: {state.mode.value} drag in progress")
        return state
    return InteractionState(mode=DragMode.GROUP, group=GroupDrag(group_id=group_id))


def hover_group(
    state: InteractionState,
    group_id: str,
    pointer_y: float,
    header_height: float,
) -> InteractionState:
    """Record the hovered group and whether the pointer is in its top or bottom half."""
    if not state.dragging_group or state.group is None:
        return state
    return state.model_copy(
        update={
            "group": state.group.model_copy(
                update={
                    "hover_group_id": group_id,
                    "position": drop_position(pointer_y, header_height),
                }
            )
        }
    )


def leave_group(state: InteractionState, group_id: str) -> InteractionState:
    if state.group is None or state.group.hover_group_id != group_id:
        return state
    return state.model_copy(
        update={"group": state.group.model_copy(update={"hover_group_id": None, "position": None})}
    )


def reorder_groups(
    groups: Sequence[FacilityGroup],
    dragged_id: str,
    target_id: str,
    position: Optional[DropPosition],
) -> Optional[list[FacilityGroup]]:
    """Move *dragged_id* directly above or below *target_id*.

    Returns ``None`` when nothing moves: the group is dropped on itself or
    either id is unknown. Any position other than ``above`` inserts below.
    """
    if dragged_id == target_id:
        return None

    reordered = list(groups)
    dragged_index = next((i for i, g in enumerate(reordered) if g.id == dragged_id), -1)
    target_index = next((i for i, g in enumerate(reordered) if g.id == target_id), -1)
    if dragged_index == -1 or target_index == -1:
        return None

    dragged = reordered.pop(dragged_index)
    target_index = next(i for i, g in enumerate(reordered) if g.id == target_id)
    insert_at = target_index if position == DropPosition.ABOVE else target_index + 1
    reordered.insert(insert_at, dragged)
    return reordered


def drop_on_group(
    state: InteractionState,
    groups: Sequence[FacilityGroup],
    target_id: str,
    pointer_y: Optional[float] = None,
    header_height: Optional[float] = None,
) -> tuple[InteractionState, Optional[list[FacilityGroup]]]:
    """Drop the dragged group on *target_id* and return the full new order.

    The insertion side comes from the pointer when given, otherwise from the
    last hover. Drops during an appointment drag are ignored.
    """
    if state.dragging_appointment:
        return state, None
    if not state.dragging_group or state.group is None:
        return IDLE, None

    if pointer_y is not None and header_height is not None:
        position = drop_position(pointer_y, header_height)
    elif state.group.hover_group_id == target_id:
        position = state.group.position
    else:
        position = None

    reordered = reorder_groups(groups, state.group.group_id, target_id, position)
    if reordered is not None:
        logger.info(
            f"Group {state.group.group_id} moved "
            f"{(position or DropPosition.BELOW).value} {target_id}: "
            f"{[g.id for g in reordered]}"
        )
    return IDLE, reordered


def end_group_drag(state: InteractionState) -> InteractionState:
    """Group dropped outside any group, or the drag was abandoned."""
    if state.dragging_group:
        logger.debug(f"Drag of group {state.dragged_group_id} cancelled")
    return IDLE
