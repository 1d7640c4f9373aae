# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Diff Engine - Minimal create/delete/recolor plan between sheet and calendar
"""
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from config import SyncConfig
from models import CalendarEvent, DesiredEvent
from sync.keys import EventKey


@dataclass
class SyncDiff:
    to_create: List[DesiredEvent] = field(default_factory=list)
    to_delete: List[CalendarEvent] = field(default_factory=list)
    to_recolor: List[CalendarEvent] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.to_create or self.to_delete or self.to_recolor)

    def summary(self) -> Dict[str, int]:
        return {
            'to_create': len(self.to_create),
            'to_delete': len(self.to_delete),
            'to_recolor': len(self.to_recolor)
        }


def compute_diff(desired: Dict[EventKey, DesiredEvent],
                 managed: Dict[EventKey, List[CalendarEvent]],
                 config: SyncConfig,
                 color_of: Optional[Callable[[CalendarEvent], str]] = None) -> SyncDiff:
    """
    Compare desired events against managed calendar events

    Args:
        desired: desired events by key
        managed: managed calendar events by key (several per key when duplicated)
        config: run configuration (busy title and color)
        color_of: reads an event's color, usually the provider's getter;
            defaults to the fetched color_id

    Returns:
        SyncDiff with keys missing from the calendar, events missing from the
        sheet, and matched busy events whose color drifted
    """
    diff = SyncDiff()

    for key, event in desired.items():
        if key not in managed:
            diff.to_create.append(event)

    for key, events in managed.items():
        if key not in desired:
            diff.to_delete.extend(events)
            continue
        for event in events:
            if event.title != config.busy_event_title:
                continue
            color = color_of(event) if color_of else event.color_id
            if color != config.busy_event_color:
                diff.to_recolor.append(event)

    return diff
