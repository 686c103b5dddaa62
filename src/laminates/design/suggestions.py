"""
Revalidation of stacking sequences proposed by an external suggestion service.

The service is opaque: it receives the current plies and free-text
requirements and returns candidate stacks as plain data. Nothing it returns is
trusted. Candidates are parsed into ``Ply`` objects here and then analysed with
the same core functions as any user-entered stack.
"""

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from laminates.clt.data_utils import EngineeringProperties, MaterialRegistry, Ply
from laminates.clt.laminate import compute_equivalent_properties
from laminates.errors import ConfigurationError

logger = logging.getLogger(__name__)

MAX_ABS_ANGLE = 90.0


class SuggestionService(Protocol):
    def suggest(
        self, plies: Sequence[Ply], requirements: str, available_materials: Sequence[str]
    ) -> Sequence[Mapping[str, Any]]:
        """Return candidates as mappings with "name", "plies" and "rationale" keys."""
        ...


@dataclass(frozen=True)
class ValidatedSuggestion:
    name: str
    rationale: str
    plies: tuple[Ply, ...]
    properties: EngineeringProperties


@dataclass(frozen=True)
class RejectedSuggestion:
    name: str
    reason: str


def _parse_angle(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"angle must be a number, got {value!r}")
    angle = float(value)
    if not math.isfinite(angle) or abs(angle) > MAX_ABS_ANGLE:
        raise ConfigurationError(f"angle {value!r} outside [-90, 90]")
    return angle


def parse_candidate_plies(candidate: Any, materials: MaterialRegistry) -> tuple[Ply, ...]:
    """Turn an untrusted ply list into Ply objects.

    Raises:
        ConfigurationError: if an entry is malformed, names an unknown
            material, or has a non-finite or out-of-range angle.
    """
    if isinstance(candidate, (str, bytes)) or not isinstance(candidate, Sequence):
        raise ConfigurationError("plies must be a list")
    if not candidate:
        raise ConfigurationError("plies must not be empty")

    plies = []
    for index, entry in enumerate(candidate):
        if not isinstance(entry, Mapping):
            raise ConfigurationError(f"ply {index} must be a mapping")
        material = entry.get("material")
        if not isinstance(material, str) or material not in materials:
            raise ConfigurationError(f"ply {index} references unknown material {material!r}")
        try:
            angle = _parse_angle(entry.get("angle"))
        except ConfigurationError as exc:
            raise ConfigurationError(f"ply {index}: {exc}") from exc
        plies.append(Ply(material=material, angle=angle))
    return tuple(plies)


def revalidate_suggestions(
    suggestions: Sequence[Mapping[str, Any]], materials: MaterialRegistry
) -> tuple[list[ValidatedSuggestion], list[RejectedSuggestion]]:
    """Split service output into analysed candidates and rejected ones."""
    accepted = []
    rejected = []
    for number, suggestion in enumerate(suggestions, start=1):
        name = str(suggestion.get("name") or f"Suggestion {number}")
        try:
            plies = parse_candidate_plies(suggestion.get("plies"), materials)
        except ConfigurationError as exc:
            logger.warning("Rejected suggestion '%s': %s", name, exc)
            rejected.append(RejectedSuggestion(name=name, reason=str(exc)))
            continue
        accepted.append(
            ValidatedSuggestion(
                name=name,
                rationale=str(suggestion.get("rationale", "")),
                plies=plies,
                properties=compute_equivalent_properties(plies, materials),
            )
        )
    return accepted, rejected


def request_suggestions(
    service: SuggestionService,
    plies: Sequence[Ply],
    requirements: str,
    materials: MaterialRegistry,
) -> tuple[list[ValidatedSuggestion], list[RejectedSuggestion]]:
    """Ask ``service`` for candidates and revalidate them against ``materials``."""
    raw = service.suggest(plies, requirements, list(materials))
    return revalidate_suggestions(raw, materials)
