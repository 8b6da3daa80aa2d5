"""Metra line codes and their display colours."""

from __future__ import annotations

from enum import StrEnum


class MetraLine(StrEnum):
    """Route identifiers used by the feed, plus the ``All`` wildcard."""

    ALL = "All"
    ME = "ME"
    RI = "RI"
    SWS = "SWS"
    HC = "HC"
    BNSF = "BNSF"
    UPW = "UP-W"
    MDW = "MD-W"
    UPNW = "UP-NW"
    NCS = "NCS"
    MDN = "MD-N"
    UPN = "UP-N"

    @classmethod
    def routes(cls) -> tuple[MetraLine, ...]:
        """All concrete lines, wildcard excluded."""
        return tuple(line for line in cls if line is not cls.ALL)

    @classmethod
    def parse(cls, value: str | None) -> MetraLine | None:
        """Case-insensitive lookup; ``None`` for unknown codes."""
        if not value:
            return None
        wanted = value.strip().upper()
        for line in cls:
            if line.value.upper() == wanted:
                return line
        return None


# Display colours per line, as drawn on the system map.
LINE_COLORS: dict[MetraLine, str] = {
    MetraLine.ME: "#EB3A1E",
    MetraLine.RI: "#E1261C",
    MetraLine.SWS: "#0069AA",
    MetraLine.HC: "#8A1538",
    MetraLine.BNSF: "#46A147",
    MetraLine.UPW: "#F4A6BC",
    MetraLine.MDW: "#F1AA21",
    MetraLine.UPNW: "#FFE600",
    MetraLine.NCS: "#9785C2",
    MetraLine.MDN: "#EE6F1F",
    MetraLine.UPN: "#0D5A34",
}

DEFAULT_LINE_COLOR = "#808080"


def line_color(line: MetraLine | str | None) -> str:
    """Hex colour for a line code; neutral grey for the wildcard or unknown codes."""
    resolved = line if isinstance(line, MetraLine) else MetraLine.parse(line)
    if resolved is None:
        return DEFAULT_LINE_COLOR
    return LINE_COLORS.get(resolved, DEFAULT_LINE_COLOR)


def matches_line(route_id: str | None, line: MetraLine) -> bool:
    """Line filter predicate: route id equality, or pass-through for ``All``."""
    if line is MetraLine.ALL:
        return True
    return route_id == line.value
