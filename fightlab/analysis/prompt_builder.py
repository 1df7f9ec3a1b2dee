"""
Prompt builder: render a request configuration into the instruction text sent with the frames.
Pure and deterministic: no clock reads, no randomness, no I/O.
"""
import re
import textwrap
from typing import Any, List, Mapping, Optional

from . import prompts as P
from .rounds import RoundCounts, resolve_round_counts

ROLE_FIGHTER = "fighter"
ROLE_COACH = "coach"
ROLE_STUDY = "study"

# Checked in this order; first match wins.
ROLE_PHRASES = (
    (ROLE_FIGHTER, ("preparing to fight", "fight this opponent", "fighter", "competitor")),
    (ROLE_COACH, ("coach", "trainer", "corner", "student")),
    (ROLE_STUDY, ("study", "analysis", "general", "scout", "fan")),
)

SHORTS_RE = re.compile(r"(\w+)\s*shorts", re.IGNORECASE)


def classify_role(role: Any) -> str:
    """Map the free-text userRole to fighter / coach / study by case-insensitive substring match. Empty or unrecognised roles count as fighter."""
    text = role.strip().lower() if isinstance(role, str) else ""
    if not text:
        return ROLE_FIGHTER
    for canonical, phrases in ROLE_PHRASES:
        if any(p in text for p in phrases):
            return canonical
    return ROLE_FIGHTER


def is_both_mode(config: Mapping[str, Any]) -> bool:
    return str(config.get("analysisType") or "single").strip().lower() == "both"


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def build_appearance(appearance: Any, description: Any = None) -> str:
    """Join the structured appearance attributes in a fixed order; fall back to the legacy free-text description."""
    legacy = _text(description)
    if not isinstance(appearance, Mapping) or not appearance:
        return legacy

    parts: List[str] = []
    if _text(appearance.get("shortsColor")):
        parts.append(f"{_text(appearance['shortsColor'])} shorts")
    if _text(appearance.get("skinTone")):
        parts.append(f"{_text(appearance['skinTone'])} skin tone")
    if _text(appearance.get("bodyBuild")):
        parts.append(f"{_text(appearance['bodyBuild'])} build")
    if _text(appearance.get("relativeHeight")):
        parts.append(_text(appearance["relativeHeight"]))
    features = appearance.get("distinguishingFeatures")
    if isinstance(features, list):
        named = [_text(f) for f in features if _text(f)]
        if named:
            parts.append(", ".join(named))
    if _text(appearance.get("customDescription")):
        parts.append(_text(appearance["customDescription"]))

    return ", ".join(parts) if parts else legacy


def shorts_color(appearance: Any, description: Any = None) -> str:
    if isinstance(appearance, Mapping) and _text(appearance.get("shortsColor")):
        return _text(appearance["shortsColor"])
    m = SHORTS_RE.search(_text(description))
    return m.group(1) if m else ""


def _fill(template: str, **values: Any) -> str:
    out = template
    for key, val in values.items():
        out = out.replace(f"<<{key}>>", str(val))
    return out


def _identifiers(config: Mapping[str, Any], n: int, single: bool) -> str:
    appearance = config.get(f"fighter{n}Appearance")
    description = config.get(f"fighter{n}Description")
    shorts = shorts_color(appearance, description)
    looks = build_appearance(appearance, description)
    background = _text(config.get(f"fighter{n}DeclaredBackground"))

    lines = []
    if shorts:
        suffix = "USE THIS TO IDENTIFY THE FIGHTER" if single else "PRIMARY IDENTIFIER"
        lines.append(f"SHORTS COLOR: {shorts.upper()} - {suffix}")
    if looks:
        lines.append(f"{'PHYSICAL DESCRIPTION' if single else 'APPEARANCE'}: {looks}")
    if background:
        lines.append(f"DECLARED BACKGROUND: {background} (user-provided - verify against observed behavior)")
    if not lines:
        lines.append("No visual description provided - identify the fighter by corner position.")
    return "\n".join(lines)


def _json_object(sections: List[str]) -> str:
    body = ",\n\n".join(textwrap.indent(s, "  ") for s in sections)
    return "{\n" + body + "\n}"


def _observed_sections(name: str, background: str, counts: RoundCounts) -> List[str]:
    sections = [
        P.SECTION_IDENTIFICATION,
        P.SECTION_EXECUTIVE,
        P.SECTION_STYLE,
        P.SECTION_STRIKE,
        P.SECTION_GRAPPLING,
        P.SECTION_DEFENSE,
        P.SECTION_CARDIO,
        P.SECTION_FIGHT_IQ,
        P.SECTION_STRENGTHS,
        P.SECTION_MISTAKES,
        P.SECTION_ROUND_METRICS,
    ]
    return [_fill(s, FIGHTER=name, BACKGROUND=background, VIDEO_ROUNDS=counts.video_rounds) for s in sections]


def _coaching_sections(counts: RoundCounts) -> List[str]:
    sections = [P.SECTION_GAME_PLAN, P.SECTION_ADJUSTMENTS, P.SECTION_TRAINING, P.SECTION_INSIGHTS]
    return [_fill(s, USER_ROUNDS=counts.user_rounds) for s in sections]


def _duration_note(counts: RoundCounts) -> str:
    if not counts.can_determine:
        return "video duration unknown - treat the footage as a single round"
    return f"the footage can contain at most {counts.max_rounds} round(s)"


def build_prompt(config: Optional[Mapping[str, Any]], frame_count: Optional[int] = None) -> str:
    """Render the full instruction prompt for one analysis request.

    The single-fighter and both-fighters bodies are mutually exclusive; the role decides whether the
    coaching sections (game plan, adjustments, training, insights) are requested or excluded.
    Identical config and frame_count always give a byte-identical string.
    """
    config = config or {}
    role = classify_role(config.get("userRole"))
    counts = resolve_round_counts(config)
    both = is_both_mode(config)

    name1 = _text(config.get("fighter1Name")) or ("Fighter 1" if both else "the fighter")
    name2 = _text(config.get("fighter2Name")) or "Fighter 2"
    background1 = _text(config.get("fighter1DeclaredBackground")) or "Not specified"
    background2 = _text(config.get("fighter2DeclaredBackground")) or "Not specified"

    if both:
        target = _fill(
            P.TARGET_BOTH,
            FIGHTER1=name1,
            CORNER1=_text(config.get("fighter1Corner")) or "Unknown",
            IDENTIFIERS1=_identifiers(config, 1, single=False),
            FIGHTER2=name2,
            CORNER2=_text(config.get("fighter2Corner")) or "Unknown",
            IDENTIFIERS2=_identifiers(config, 2, single=False),
        )
        sections = [
            '"fighter1Analysis": ' + _json_object(_observed_sections(name1, background1, counts)),
            '"fighter2Analysis": ' + _json_object(_observed_sections(name2, background2, counts)),
            _fill(P.SECTION_MATCHUP, FIGHTER1=name1, FIGHTER2=name2),
        ]
    else:
        target = _fill(
            P.TARGET_SINGLE,
            FIGHTER=name1,
            CORNER=_text(config.get("fighter1Corner")) or "Unknown",
            IDENTIFIERS=_identifiers(config, 1, single=True),
        )
        sections = _observed_sections(name1, background1, counts) + [P.SECTION_COUNTER]

    if role != ROLE_STUDY:
        sections += _coaching_sections(counts)

    video = _fill(
        P.VIDEO_CONTEXT,
        VIDEO_ROUNDS=counts.video_rounds,
        SESSION_TYPE=_text(config.get("sessionType")) or "competition",
        DURATION_NOTE=_duration_note(counts),
        FRAME_COUNT=frame_count if frame_count is not None else "as attached",
        USER_ROUNDS=counts.user_rounds,
        ROLE_CONTEXT=P.ROLE_CONTEXT[role],
    )

    requirements = [_fill(P.REQUIREMENTS_OBSERVED, VIDEO_ROUNDS=counts.video_rounds)]
    if role != ROLE_STUDY:
        requirements.append(_fill(P.REQUIREMENTS_COACHING, USER_ROUNDS=counts.user_rounds))
    if both:
        requirements.append(f'- Use the names "{name1}" and "{name2}" throughout; never swap their statistics')
    else:
        requirements.append(f'- Use the fighter\'s actual name "{name1}" throughout the report')

    blocks = [
        P.PREAMBLE,
        P.RULE,
        target,
        P.RULE,
        video,
        P.ROLE_GUIDANCE[role],
        P.RULE,
        "CRITICAL: JSON OUTPUT FORMAT\n"
        "You MUST respond with ONLY valid JSON matching this EXACT structure.\n"
        "Use camelCase for all field names. All scores are 0-100 unless noted.",
        _json_object(sections),
        P.RULE,
        "REQUIREMENTS\n" + "\n".join(requirements),
        P.CLOSING,
    ]
    return "\n\n".join(blocks)
