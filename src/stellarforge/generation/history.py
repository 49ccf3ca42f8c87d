from __future__ import annotations

import logging
import random
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Sequence

from stellarforge.generation.factions import (
    RELATIONSHIP_ALLIED,
    RELATIONSHIP_FRIENDLY,
    RELATIONSHIP_HOSTILE,
    RELATIONSHIP_NEUTRAL,
    RELATIONSHIP_UNFRIENDLY,
    RELATIONSHIP_WAR,
    ProceduralFaction,
)
from stellarforge.generation.rng import int_range, make_rng, require_seed
from stellarforge.generation.tables import WeightedTable

LOGGER = logging.getLogger(__name__)

EVENT_WAR = "war"
EVENT_PEACE_TREATY = "peace_treaty"
EVENT_ALLIANCE = "alliance"
EVENT_ALLIANCE_DISSOLVED = "alliance_dissolved"
EVENT_FIRST_CONTACT = "first_contact"
EVENT_TRADE_AGREEMENT = "trade_agreement"
EVENT_BORDER_DISPUTE = "border_dispute"
EVENT_TECHNOLOGY_EXCHANGE = "technology_exchange"
EVENT_INCIDENT = "incident"
EVENT_CULTURAL_EXCHANGE = "cultural_exchange"
EVENT_TYPES = (
    EVENT_WAR,
    EVENT_PEACE_TREATY,
    EVENT_ALLIANCE,
    EVENT_ALLIANCE_DISSOLVED,
    EVENT_FIRST_CONTACT,
    EVENT_TRADE_AGREEMENT,
    EVENT_BORDER_DISPUTE,
    EVENT_TECHNOLOGY_EXCHANGE,
    EVENT_INCIDENT,
    EVENT_CULTURAL_EXCHANGE,
)

EVENT_RELATIONSHIP_DELTAS = {
    EVENT_WAR: -3,
    EVENT_PEACE_TREATY: 2,
    EVENT_ALLIANCE: 3,
    EVENT_ALLIANCE_DISSOLVED: -2,
    EVENT_FIRST_CONTACT: 1,
    EVENT_TRADE_AGREEMENT: 1,
    EVENT_BORDER_DISPUTE: -1,
    EVENT_TECHNOLOGY_EXCHANGE: 1,
    EVENT_INCIDENT: -1,
    EVENT_CULTURAL_EXCHANGE: 1,
}

EVENT_DESCRIPTIONS = {
    EVENT_WAR: "{a} declares war on {b}",
    EVENT_PEACE_TREATY: "{a} and {b} sign peace treaty",
    EVENT_ALLIANCE: "{a} and {b} form alliance",
    EVENT_ALLIANCE_DISSOLVED: "Alliance between {a} and {b} dissolved",
    EVENT_FIRST_CONTACT: "First contact between {a} and {b}",
    EVENT_TRADE_AGREEMENT: "{a} and {b} sign trade agreement",
    EVENT_BORDER_DISPUTE: "Border dispute between {a} and {b}",
    EVENT_TECHNOLOGY_EXCHANGE: "{a} and {b} exchange technology",
    EVENT_INCIDENT: "Diplomatic incident between {a} and {b}",
    EVENT_CULTURAL_EXCHANGE: "{a} and {b} initiate cultural exchange",
}

# weights out of 10 per relationship
EVENT_TABLES: dict[str, WeightedTable[str]] = {
    RELATIONSHIP_ALLIED: WeightedTable.of(
        (1, EVENT_ALLIANCE_DISSOLVED),
        (1, EVENT_INCIDENT),
        (4, EVENT_TRADE_AGREEMENT),
        (3, EVENT_TECHNOLOGY_EXCHANGE),
        (1, EVENT_CULTURAL_EXCHANGE),
    ),
    RELATIONSHIP_FRIENDLY: WeightedTable.of(
        (3, EVENT_ALLIANCE),
        (4, EVENT_TRADE_AGREEMENT),
        (2, EVENT_TECHNOLOGY_EXCHANGE),
        (1, EVENT_CULTURAL_EXCHANGE),
    ),
    RELATIONSHIP_NEUTRAL: WeightedTable.of(
        (1, EVENT_BORDER_DISPUTE),
        (1, EVENT_INCIDENT),
        (3, EVENT_TRADE_AGREEMENT),
        (3, EVENT_CULTURAL_EXCHANGE),
        (2, EVENT_TECHNOLOGY_EXCHANGE),
    ),
    RELATIONSHIP_UNFRIENDLY: WeightedTable.of(
        (4, EVENT_BORDER_DISPUTE),
        (3, EVENT_INCIDENT),
        (2, EVENT_WAR),
        (1, EVENT_TRADE_AGREEMENT),
    ),
    RELATIONSHIP_HOSTILE: WeightedTable.of(
        (6, EVENT_WAR),
        (3, EVENT_BORDER_DISPUTE),
        (1, EVENT_INCIDENT),
    ),
    RELATIONSHIP_WAR: WeightedTable.of(
        (3, EVENT_PEACE_TREATY),
        (7, EVENT_WAR),
    ),
}

EVENTS_PER_YEAR_RANGE = (0, 4)
DEFAULT_HISTORY_YEARS = 200
TIMELINE_HEADER = "=== GALACTIC HISTORY TIMELINE ==="
TIMELINE_FOOTER = "=== PRESENT DAY ==="


@dataclass(frozen=True)
class RelationshipChange:
    faction_a: str
    faction_b: str
    delta: int

    def to_dict(self) -> dict[str, Any]:
        return {"faction_a": self.faction_a, "faction_b": self.faction_b, "delta": self.delta}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RelationshipChange":
        return cls(faction_a=str(data["faction_a"]), faction_b=str(data["faction_b"]), delta=int(data["delta"]))


@dataclass(frozen=True)
class HistoricalEvent:
    year: int
    event_type: str
    factions: tuple[str, ...]
    description: str
    relationship_changes: tuple[RelationshipChange, ...] = ()

    def __post_init__(self) -> None:
        if self.event_type not in EVENT_TYPES:
            raise ValueError(f"invalid event_type: {self.event_type}")
        if not 1 <= len(self.factions) <= 2:
            raise ValueError("historical event must involve one or two factions")

    def involves(self, faction_id: str) -> bool:
        return faction_id in self.factions

    def to_dict(self) -> dict[str, Any]:
        return {
            "year": self.year,
            "event_type": self.event_type,
            "factions": list(self.factions),
            "description": self.description,
            "relationship_changes": [change.to_dict() for change in self.relationship_changes],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HistoricalEvent":
        return cls(
            year=int(data["year"]),
            event_type=str(data["event_type"]),
            factions=tuple(str(faction_id) for faction_id in data["factions"]),
            description=str(data["description"]),
            relationship_changes=tuple(
                RelationshipChange.from_dict(row) for row in data.get("relationship_changes", [])
            ),
        )


def _pair_event(year: int, event_type: str, a: ProceduralFaction, b: ProceduralFaction) -> HistoricalEvent:
    return HistoricalEvent(
        year=year,
        event_type=event_type,
        factions=(a.faction_id, b.faction_id),
        description=EVENT_DESCRIPTIONS[event_type].format(a=a.name, b=b.name),
        relationship_changes=(
            RelationshipChange(a.faction_id, b.faction_id, EVENT_RELATIONSHIP_DELTAS[event_type]),
        ),
    )


class HistoryGenerator:
    """Simulates faction history against a fixed relationship snapshot.

    Event deltas are recorded on each event but never fed back into later
    sampling: every draw reads the relationships as they were generated.
    """

    def __init__(self, seed: int) -> None:
        self.seed = require_seed(seed)
        self._rng: random.Random = make_rng(seed)

    def generate_history(self, factions: Sequence[ProceduralFaction], years: int) -> list[HistoricalEvent]:
        if isinstance(years, bool) or not isinstance(years, int) or years < 0:
            raise ValueError("years must be an integer >= 0")

        events = self._generate_first_contacts(factions, years)
        for year in range(-years, 0):
            for _ in range(int_range(self._rng, *EVENTS_PER_YEAR_RANGE)):
                event = self._generate_random_event(factions, year)
                if event is not None:
                    events.append(event)

        events.sort(key=lambda event: event.year)
        LOGGER.debug("generated history seed=%d years=%d events=%d", self.seed, years, len(events))
        return events

    def _generate_first_contacts(self, factions: Sequence[ProceduralFaction], years: int) -> list[HistoricalEvent]:
        # first contacts fall in the older half of the window
        window = max(years, 2)
        events: list[HistoricalEvent] = []
        for i, a in enumerate(factions):
            for b in factions[i + 1 :]:
                year = -int_range(self._rng, window // 2, window)
                events.append(_pair_event(year, EVENT_FIRST_CONTACT, a, b))
        return events

    def _generate_random_event(self, factions: Sequence[ProceduralFaction], year: int) -> HistoricalEvent | None:
        if len(factions) < 2:
            return None

        first_index = int_range(self._rng, 0, len(factions))
        second_index = int_range(self._rng, 0, len(factions))
        while second_index == first_index:
            second_index = int_range(self._rng, 0, len(factions))

        first = factions[first_index]
        second = factions[second_index]
        relationship = first.relationships.get(second.faction_id, RELATIONSHIP_NEUTRAL)
        event_type = EVENT_TABLES[relationship].choose(self._rng)
        return _pair_event(year, event_type, first, second)


def events_for_faction(events: Sequence[HistoricalEvent], faction_id: str) -> list[HistoricalEvent]:
    return [event for event in events if event.involves(faction_id)]


def decade_of(year: int) -> int:
    return (year // 10) * 10


def generate_timeline_summary(events: Sequence[HistoricalEvent], factions: Sequence[ProceduralFaction]) -> str:
    decades: dict[int, list[HistoricalEvent]] = defaultdict(list)
    for event in events:
        decades[decade_of(event.year)].append(event)

    lines = [TIMELINE_HEADER, ""]
    for decade in sorted(decades):
        lines.append("")
        lines.append(f"--- Year {decade} to {decade + 9} ---")
        for event in decades[decade]:
            lines.append(f"  Year {event.year}: {event.description}")
    lines.append("")
    lines.append(TIMELINE_FOOTER)
    lines.append(f"Active Factions: {len(factions)}")
    return "\n".join(lines) + "\n"
