"""Conversion of OSV affected ranges into comparator expressions."""

from typing import Any, Iterable, List, Mapping, Optional

# Both mean "since the first release".
BEGINNING_OF_TIME = frozenset({"0", "0.0.0"})


def is_beginning_of_time(version: str) -> bool:
    """Check whether an ``introduced`` version carries no lower bound.

    Args:
        version: Version string from an ``introduced`` event

    Returns:
        True for the sentinel ``"0"`` and its ``"0.0.0"`` spelling
    """
    return version in BEGINNING_OF_TIME


def extract_affected_versions(ranges: Optional[Iterable[Any]]) -> List[str]:
    """Build the vulnerable version comparators for one affected package.

    Every ``introduced`` event yields ``">= <version>"`` (skipped for the
    beginning-of-time sentinel) and every ``fixed`` event yields
    ``"< <version>"``. Ranges and their events are visited in input order
    and the result is neither merged nor deduplicated, so consumers get the
    raw comparator list.

    Args:
        ranges: The ``ranges`` list of an OSV ``affected`` entry

    Returns:
        List of comparator strings
    """
    comparators: List[str] = []

    for version_range in ranges or []:
        if not isinstance(version_range, Mapping):
            continue

        for event in version_range.get("events") or []:
            if not isinstance(event, Mapping):
                continue

            introduced = event.get("introduced")
            if introduced and not is_beginning_of_time(str(introduced)):
                comparators.append(f">= {introduced}")

            fixed = event.get("fixed")
            if fixed:
                comparators.append(f"< {fixed}")

    return comparators
