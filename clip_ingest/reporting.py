from typing import Dict, List, Sequence

from .models import DuplicateStatus, ResolvedClip


def render_clip_listing(clips: Sequence[ResolvedClip], statuses: Dict[str, DuplicateStatus]) -> str:
    """
    Builds the table shown before selection.
    Numbers are 1-based positions in `clips`, which is what parse_selection expects.
    """
    rule = "=" * 55
    lines = [rule, "  Found Clips", rule]

    numbered = list(enumerate(clips, start=1))
    multi = [(n, c) for n, c in numbered if c.is_multi_segment]
    single = [(n, c) for n, c in numbered if not c.is_multi_segment]

    for title, group in (("Multi-segment clips:", multi), ("Single file clips:", single)):
        if not group:
            continue
        lines.append("")
        lines.append(title)
        for number, clip in group:
            lines.extend(_render_clip(number, clip, statuses.get(clip.clip_id)))

    lines.append("")
    return "\n".join(lines)


def _render_clip(number: int, clip: ResolvedClip, status) -> List[str]:
    if status is not None and status.is_duplicate:
        where = ", ".join(sorted(b.value for b in status.locations))
        tag = f"[DUPLICATE in: {where}]"
    else:
        tag = "[NEW]"

    out = [f"  {number}. Clip {clip.clip_id} ({clip.format.value}) {tag}"]
    for segment in clip.segments:
        out.append(f"      -> {segment.original_file_name}")
    if clip.canonical_file_name:
        out.append(f"      Will be saved as: {clip.canonical_file_name}")
    return out


def parse_selection(text: str, total: int) -> List[int]:
    """
    Turns user input into 0-based clip indices.

    "" or "all" selects everything; "1,3,5" selects those clips.
    Out-of-range and non-numeric tokens are dropped silently.
    """
    trimmed = text.strip().lower()
    if not trimmed or trimmed == "all":
        return list(range(total))

    indices = []
    for part in trimmed.split(","):
        try:
            n = int(part.strip())
        except ValueError:
            continue
        if 0 < n <= total:
            indices.append(n - 1)
    return indices
