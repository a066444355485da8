# parking_registry/client/views.py
"""
Presentation helpers: client-side filtering and plain-text rendering of the
API's JSON records. No business rules here; records are dicts as sent by the API.
"""

from datetime import datetime, timezone
from typing import Optional

STATUS_FILTERS = ("all", "inside", "outside")


def parse_time(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    # Compare everything as naive UTC, which is what the API sends
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def filter_records(records: list[dict], text: str = "", status: str = "all") -> list[dict]:
    """Case-insensitive substring match on plate/owner/kind plus an Inside/Outside filter."""
    status = (status or "all").lower()
    if status not in STATUS_FILTERS:
        raise ValueError(f"status must be one of {STATUS_FILTERS}")
    needle = (text or "").strip().lower()

    result = []
    for r in records:
        if status != "all" and r.get("status", "").lower() != status:
            continue
        if needle and not any(needle in str(r.get(k, "")).lower() for k in ("plate", "owner", "kind")):
            continue
        result.append(r)
    return result


def status_counts(records: list[dict]) -> dict:
    inside = sum(1 for r in records if r.get("status") == "Inside")
    return {"all": len(records), "inside": inside, "outside": len(records) - inside}


def oldest_inside(records: list[dict], limit: int = 5) -> list[dict]:
    inside = [r for r in records if r.get("status") == "Inside"]
    return sorted(inside, key=lambda r: parse_time(r["entryTime"]))[:limit]


def format_elapsed(entry_time: str, now: Optional[datetime] = None) -> str:
    """'3h 25m' or '25m' since entry."""
    now = now or datetime.now(timezone.utc).replace(tzinfo=None)
    minutes_total = max(0, int((now - parse_time(entry_time)).total_seconds() // 60))
    hours, minutes = divmod(minutes_total, 60)
    return f"{hours}h {minutes}m" if hours else f"{minutes}m"


def format_time(value: Optional[str]) -> str:
    parsed = parse_time(value)
    return parsed.strftime("%Y-%m-%d %H:%M") if parsed else "—"


def render_records(records: list[dict]) -> str:
    if not records:
        return "No vehicles to show."
    header = f"{'ID':>5}  {'PLATE':<7} {'KIND':<11} {'OWNER':<24} {'ENTRY':<16}  {'EXIT':<16}  STATUS"
    lines = [header, "-" * len(header)]
    for r in records:
        lines.append(
            f"{r['id']:>5}  {r['plate']:<7} {r['kind']:<11} {r['owner'][:24]:<24} "
            f"{format_time(r.get('entryTime')):<16}  {format_time(r.get('exitTime')):<16}  {r['status']}"
        )
    return "\n".join(lines)


def render_statistics(stats: dict, now: Optional[datetime] = None) -> str:
    lines = [
        f"Total records:     {stats['totalVehicles']}",
        f"Inside / Outside:  {stats['vehiclesInside']} / {stats['vehiclesOutside']}",
        f"Capacity:          {stats['capacity']} "
        f"({stats['availableSpaces']} free, {stats['occupancyPercent']}% occupied)",
        "By kind:",
    ]
    for kind, count in sorted(stats.get("byKind", {}).items()):
        lines.append(f"  {kind:<12} {count}")
    oldest = stats.get("oldestInside") or []
    if oldest:
        lines.append("Longest parked:")
        for r in oldest:
            lines.append(f"  {r['plate']:<7} {r['owner'][:24]:<24} {format_elapsed(r['entryTime'], now)}")
    return "\n".join(lines)


def render_history(history: dict) -> str:
    lines = [
        f"Plate {history['plate']}: {history['totalVisits']} visits, "
        f"{history['completedVisits']} completed, "
        f"average stay {history['averageDurationHours']}h",
        render_records(history.get("history", [])),
    ]
    return "\n".join(lines)
