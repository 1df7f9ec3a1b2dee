"""
Report normalizer: repair whatever JSON the model returned into the fixed report shape the iOS app decodes.

Never raises on model content. Missing sections get conservative defaults, scalars are coerced,
lists stay lists, per-round arrays are sized to the round counts, and values that are already
valid are left untouched so a complete report passes through unchanged.
"""
import copy
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

from fightlab.utils.timefmt import to_iso
from .prompt_builder import ROLE_COACH, ROLE_FIGHTER, ROLE_STUDY, classify_role, is_both_mode
from .rounds import RoundCounts, resolve_round_counts, resolve_user_rounds

logger = logging.getLogger(__name__)

SWIFT_REFERENCE_OFFSET = 978307200  # seconds between 1970-01-01 and 2001-01-01
VALID_ROLES = (
    "I'm preparing to fight this opponent",
    "Coach analyzing for student",
    "General study / Analysis",
)
ROLE_TO_PHRASE = dict(zip((ROLE_FIGHTER, ROLE_COACH, ROLE_STUDY), VALID_ROLES))

OPTIONAL_CONFIG_FIELDS = (
    "sessionTitle",
    "sessionType",
    "sessionSubtitle",
    "fighter1Name",
    "fighter1Corner",
    "fighter1Description",
    "fighter2Name",
    "fighter2Corner",
    "fighter2Description",
    "videoURL",
    "videoDuration",
    "videoRounds",
    "videoFileSize",
)

FIGHTER_SECTIONS = (
    "fighterIdentification",
    "executiveSummary",
    "fightingStyleBreakdown",
    "strikeAnalysis",
    "grapplingAnalysis",
    "defenseAnalysis",
    "cardioAnalysis",
    "fightIQ",
    "strengthsWeaknesses",
    "mistakePatterns",
    "roundByRoundMetrics",
)

COACHING_SECTIONS = ("gamePlan", "midFightAdjustments", "trainingRecommendations", "keyInsights")

AVOID_REASON_FILLER = "This habit was flagged as risky against this opponent."
AVOID_ALTERNATIVE_FILLER = "Stay disciplined and stick to the game plan."


@dataclass(frozen=True)
class _Ctx:
    name: str
    background: str
    counts: RoundCounts


# -------------------------
# Scalar coercion
# -------------------------

def _num(val: Any, default):
    if isinstance(val, bool):
        return default
    if isinstance(val, int):
        return val
    if isinstance(val, float):
        return default if math.isnan(val) or math.isinf(val) else val
    if isinstance(val, str):
        s = val.strip().rstrip("%").strip()
        try:
            return int(s)
        except ValueError:
            pass
        try:
            f = float(s)
        except ValueError:
            return default
        return default if math.isnan(f) or math.isinf(f) else f
    return default


def _str(val: Any, default: str) -> str:
    if isinstance(val, str):
        return val
    if isinstance(val, (int, float)) and not isinstance(val, bool):
        return str(val)
    return default


def _opt_str(val: Any) -> Optional[str]:
    if val is None:
        return None
    return _str(val, None)


def _bool(val: Any, default: bool) -> bool:
    return val if isinstance(val, bool) else default


def _str_list(val: Any, default: Optional[List[str]] = None) -> List[str]:
    if not isinstance(val, list):
        return list(default or [])
    out = []
    for item in val:
        s = _str(item, None)
        if s is not None:
            out.append(s)
    return out


def _obj(val: Any) -> Dict[str, Any]:
    return val if isinstance(val, dict) else {}


def _sized_rounds(
    raw: Any,
    count: int,
    fix: Callable[[Dict[str, Any], int], Dict[str, Any]],
    placeholder: Callable[[int], Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """Return exactly `count` round entries numbered 1..count: usable entries are repaired, gaps are synthesized, extras dropped."""
    items = raw if isinstance(raw, list) else []
    out = []
    for i in range(1, count + 1):
        entry = items[i - 1] if i <= len(items) else None
        out.append(fix(entry, i) if isinstance(entry, dict) else placeholder(i))
    return out


def _numbers(raw: Any, defaults: Mapping[str, Any]) -> Dict[str, Any]:
    out = dict(_obj(raw))
    for key, default in defaults.items():
        out[key] = _num(out.get(key), default)
    return out


# -------------------------
# Per-fighter sections
# -------------------------

def _fighter_identification(raw: Any, ctx: _Ctx) -> Dict[str, Any]:
    out = dict(_obj(raw))
    out["confirmedName"] = _str(out.get("confirmedName"), ctx.name)
    out["visualIdentifiers"] = _str(out.get("visualIdentifiers"), "Fighter identified based on provided description")
    out["confidenceLevel"] = _str(out.get("confidenceLevel"), "Medium")
    out["observedStyle"] = _str(out.get("observedStyle"), "Mixed")
    out["declaredBackground"] = _str(out.get("declaredBackground"), ctx.background)
    out["styleMismatch"] = _bool(out.get("styleMismatch"), False)
    return out


def _executive_summary(raw: Any, ctx: _Ctx) -> Dict[str, Any]:
    out = dict(_obj(raw))
    out["overallScore"] = _num(out.get("overallScore"), 70)
    out["summary"] = _str(out.get("summary"), "Analysis completed.")
    out["keyFindings"] = _str_list(out.get("keyFindings"), ["Analysis data available"])
    out["recommendedApproach"] = _str(out.get("recommendedApproach"), "Review the detailed analysis sections.")
    return out


def _fighting_style(raw: Any, ctx: _Ctx) -> Dict[str, Any]:
    out = dict(_obj(raw))
    out["primaryStyle"] = _str(out.get("primaryStyle"), "Mixed Martial Artist")
    out["stance"] = _str(out.get("stance"), "Orthodox")
    out["secondarySkills"] = _str_list(out.get("secondarySkills"))
    out["baseMartialArts"] = _str_list(out.get("baseMartialArts"), ["MMA"])
    out["styleDescription"] = _str(out.get("styleDescription"), "Fighter shows mixed martial arts abilities.")
    out["secondaryAttributes"] = _str_list(out.get("secondaryAttributes"), ["Balanced Skillset"])
    out["comparableFighters"] = _str_list(out.get("comparableFighters"))
    out["tacticalTendencies"] = _str_list(out.get("tacticalTendencies"))
    return out


STRIKE_BREAKDOWN = {"jabs": 0, "crosses": 0, "hooks": 0, "uppercuts": 0, "kicks": 0, "knees": 0, "elbows": 0}


def _strike_analysis(raw: Any, ctx: _Ctx) -> Dict[str, Any]:
    out = _numbers(raw, {"accuracy": 50, "volume": 0, "powerScore": 50, "techniqueScore": 50})
    out["breakdown"] = _numbers(out.get("breakdown"), STRIKE_BREAKDOWN)
    out["patterns"] = _str_list(out.get("patterns"))
    out["recommendations"] = _str_list(out.get("recommendations"))
    return out


def _grappling_analysis(raw: Any, ctx: _Ctx) -> Dict[str, Any]:
    out = _numbers(raw, {"takedownAccuracy": 50, "takedownDefense": 50, "controlTime": 0, "submissionAttempts": 0})
    out["techniques"] = _str_list(out.get("techniques"))
    out["recommendations"] = _str_list(out.get("recommendations"))
    return out


def _defense_analysis(raw: Any, ctx: _Ctx) -> Dict[str, Any]:
    out = _numbers(raw, {"headMovement": 50, "footwork": 50, "blockingRate": 50, "counterStrikeRate": 50})
    out["vulnerabilities"] = _str_list(out.get("vulnerabilities"))
    out["improvements"] = _str_list(out.get("improvements"))
    return out


def _cardio_round(i: int) -> Dict[str, Any]:
    return {"roundNumber": i, "outputLevel": 80, "staminaScore": 80, "notes": f"Round {i} performance"}


def _fix_cardio_round(entry: Dict[str, Any], i: int) -> Dict[str, Any]:
    out = _numbers(entry, {"outputLevel": 80, "staminaScore": 80})
    out["roundNumber"] = i
    out["notes"] = _str(out.get("notes"), f"Round {i} performance")
    return out


def _cardio_analysis(raw: Any, ctx: _Ctx) -> Dict[str, Any]:
    out = _numbers(raw, {"overallStamina": 70})
    out["roundByRound"] = _sized_rounds(out.get("roundByRound"), ctx.counts.video_rounds, _fix_cardio_round, _cardio_round)
    out["fatigueIndicators"] = _str_list(out.get("fatigueIndicators"))
    out["recommendations"] = _str_list(out.get("recommendations"))
    return out


def _fight_iq(raw: Any, ctx: _Ctx) -> Dict[str, Any]:
    out = _numbers(raw, {"overallScore": 70, "decisionMaking": 70, "adaptability": 70, "strategyExecution": 70})
    out["keyObservations"] = _str_list(out.get("keyObservations"))
    out["improvements"] = _str_list(out.get("improvements"))
    return out


def _strength(item: Any) -> Dict[str, Any]:
    s = {"title": item} if isinstance(item, str) else dict(_obj(item))
    s["title"] = _str(s.get("title"), "Strength")
    s["description"] = _str(s.get("description"), "")
    s["score"] = _num(s.get("score"), 70)
    s["statistics"] = _opt_str(s.get("statistics"))
    return s


def _weakness(item: Any) -> Dict[str, Any]:
    w = {"title": item} if isinstance(item, str) else dict(_obj(item))
    w["title"] = _str(w.get("title"), "Weakness")
    w["description"] = _str(w.get("description"), "")
    w["severity"] = _num(w.get("severity"), 50)
    w["exploitablePattern"] = _str(w.get("exploitablePattern"), "")
    w["frequency"] = _opt_str(w.get("frequency"))
    w["exploitationStrategy"] = _str(w.get("exploitationStrategy"), "")
    return w


def _strengths_weaknesses(raw: Any, ctx: _Ctx) -> Dict[str, Any]:
    if not isinstance(raw, dict):
        return {
            "strengths": [_strength({"title": "To be analyzed", "description": "Complete analysis for details"})],
            "weaknesses": [
                _weakness({
                    "title": "To be analyzed",
                    "description": "Complete analysis for details",
                    "exploitationStrategy": "See detailed analysis",
                })
            ],
            "opportunitiesToExploit": [],
        }
    out = dict(raw)
    strengths = out.get("strengths") if isinstance(out.get("strengths"), list) else []
    weaknesses = out.get("weaknesses") if isinstance(out.get("weaknesses"), list) else []
    out["strengths"] = [_strength(s) for s in strengths if isinstance(s, (dict, str))]
    out["weaknesses"] = [_weakness(w) for w in weaknesses if isinstance(w, (dict, str))]
    out["opportunitiesToExploit"] = _str_list(out.get("opportunitiesToExploit"))
    return out


def _mistake_patterns(raw: Any, ctx: _Ctx) -> Dict[str, Any]:
    out = dict(_obj(raw))
    patterns = []
    for item in out.get("patterns") if isinstance(out.get("patterns"), list) else []:
        if isinstance(item, str):
            item = {"pattern": item}
        if not isinstance(item, dict):
            continue
        p = dict(item)
        p["pattern"] = _str(p.get("pattern"), "")
        p["frequency"] = _num(p.get("frequency"), 1)
        p["severity"] = _str(p.get("severity"), "medium")
        patterns.append(p)
    out["patterns"] = patterns
    return out


ROUND_STRIKING = {
    "strikesLanded": 10, "strikesAttempted": 20, "accuracy": 50, "significantStrikes": 5,
    "powerStrikes": 3, "headStrikes": 4, "bodyStrikes": 3, "legStrikes": 3, "knockdowns": 0,
}
ROUND_GRAPPLING = {
    "takedownsLanded": 0, "takedownsAttempted": 1, "takedownAccuracy": 0, "takedownsDefended": 0,
    "takedownDefenseRate": 50, "controlTimeSeconds": 0, "submissionAttempts": 0, "reversals": 0,
}
ROUND_DEFENSE = {
    "strikesAbsorbed": 10, "strikesAvoided": 50, "headMovementSuccess": 50, "takedownsDefended": 0, "escapes": 0,
}


def _metrics_round(i: int) -> Dict[str, Any]:
    return {
        "roundNumber": i,
        "outputLevel": 75,
        "notes": f"Round {i}",
        "striking": dict(ROUND_STRIKING),
        "grappling": dict(ROUND_GRAPPLING),
        "defense": dict(ROUND_DEFENSE),
    }


def _fix_metrics_round(entry: Dict[str, Any], i: int) -> Dict[str, Any]:
    out = _numbers(entry, {"outputLevel": 75})
    out["roundNumber"] = i
    out["notes"] = _opt_str(out.get("notes"))
    out["striking"] = _numbers(out.get("striking"), ROUND_STRIKING)
    out["grappling"] = _numbers(out.get("grappling"), ROUND_GRAPPLING)
    out["defense"] = _numbers(out.get("defense"), ROUND_DEFENSE)
    return out


def _round_metrics(raw: Any, ctx: _Ctx) -> Dict[str, Any]:
    out = dict(_obj(raw))
    out["rounds"] = _sized_rounds(out.get("rounds"), ctx.counts.video_rounds, _fix_metrics_round, _metrics_round)
    return out


FIGHTER_SECTION_FIXERS = {
    "fighterIdentification": _fighter_identification,
    "executiveSummary": _executive_summary,
    "fightingStyleBreakdown": _fighting_style,
    "strikeAnalysis": _strike_analysis,
    "grapplingAnalysis": _grappling_analysis,
    "defenseAnalysis": _defense_analysis,
    "cardioAnalysis": _cardio_analysis,
    "fightIQ": _fight_iq,
    "strengthsWeaknesses": _strengths_weaknesses,
    "mistakePatterns": _mistake_patterns,
    "roundByRoundMetrics": _round_metrics,
}


def _fighter_sections(raw: Any, ctx: _Ctx) -> Dict[str, Any]:
    out = dict(_obj(raw))
    for key in FIGHTER_SECTIONS:
        out[key] = FIGHTER_SECTION_FIXERS[key](out.get(key), ctx)
    return out


# -------------------------
# Strategy and coaching sections
# -------------------------

COUNTER_DEFAULTS = {
    "bestCounter": ("Balanced approach", "Adapt based on opponent"),
    "secondBestCounter": ("Pressure fighting", "Test their cardio"),
    "thirdBestCounter": ("Counter striking", "Exploit openings"),
}


def _counter_strategy(raw: Any) -> Dict[str, Any]:
    out = dict(_obj(raw))
    for key, (style, reason) in COUNTER_DEFAULTS.items():
        c = dict(_obj(out.get(key)))
        c["style"] = _str(c.get("style"), style)
        c["reason"] = _str(c.get("reason"), reason)
        out[key] = c
    out["techniquesToEmphasize"] = _str_list(out.get("techniquesToEmphasize"))
    return out


PLAN_DEFAULTS = {
    "planA": ("Primary Plan", "Execute strategy", ["Stay focused"], ["Landing strikes"], "If not working, switch"),
    "planB": ("Backup Plan", "Adjust approach", ["Change rhythm"], ["Creating openings"], "If needed"),
    "planC": ("Emergency Plan", "Survive and recover", ["Clinch and control"], ["Regaining composure"], None),
}


def _plan(raw: Any, key: str) -> Dict[str, Any]:
    name, goal, tactics, indicators, trigger = PLAN_DEFAULTS[key]
    if not isinstance(raw, dict):
        return {"name": name, "goal": goal, "tactics": list(tactics), "successIndicators": list(indicators), "switchTrigger": trigger}
    out = dict(raw)
    out["name"] = _str(out.get("name"), name)
    out["goal"] = _str(out.get("goal"), goal)
    out["tactics"] = _str_list(out.get("tactics"), tactics)
    out["successIndicators"] = _str_list(out.get("successIndicators"), indicators)
    out["switchTrigger"] = _opt_str(out.get("switchTrigger"))
    return out


def _plan_round(i: int) -> Dict[str, Any]:
    return {
        "roundNumber": i,
        "objective": f"Round {i} objective",
        "tactics": ["Stay focused", "Execute game plan"],
        "keyFocus": "Maintain composure",
    }


def _fix_plan_round(entry: Dict[str, Any], i: int) -> Dict[str, Any]:
    out = dict(entry)
    out["roundNumber"] = i
    out["objective"] = _str(out.get("objective"), f"Round {i} objective")
    out["tactics"] = _str_list(out.get("tactics"), ["Stay focused", "Execute game plan"])
    out["keyFocus"] = _str(out.get("keyFocus"), "Maintain composure")
    return out


def _round_game_plan(i: int) -> Dict[str, Any]:
    return _fix_round_game_plan({}, i)


def _fix_round_game_plan(entry: Dict[str, Any], i: int) -> Dict[str, Any]:
    out = dict(entry)
    out["roundNumber"] = i
    out["title"] = _str(out.get("title"), f"Round {i} Strategy")
    for key in PLAN_DEFAULTS:
        out[key] = _plan(out.get(key), key)
    return out


def _thing_to_avoid(item: Any) -> Optional[Dict[str, Any]]:
    # Older reports sent bare strings; upgrade them to {avoid, reason, alternative}.
    if isinstance(item, str):
        return {"avoid": item, "reason": AVOID_REASON_FILLER, "alternative": AVOID_ALTERNATIVE_FILLER}
    if not isinstance(item, dict):
        return None
    out = dict(item)
    out["avoid"] = _str(out.get("avoid"), "")
    out["reason"] = _str(out.get("reason"), AVOID_REASON_FILLER)
    out["alternative"] = _str(out.get("alternative"), AVOID_ALTERNATIVE_FILLER)
    return out


def _game_plan(raw: Any, counts: RoundCounts) -> Dict[str, Any]:
    out = dict(_obj(raw))
    out["overallStrategy"] = _str(out.get("overallStrategy"), "Implement a balanced game plan.")
    out["roundByRound"] = _sized_rounds(out.get("roundByRound"), counts.user_rounds, _fix_plan_round, _plan_round)
    out["roundGamePlans"] = _sized_rounds(out.get("roundGamePlans"), counts.user_rounds, _fix_round_game_plan, _round_game_plan)
    out["keyTactics"] = _str_list(out.get("keyTactics"))
    avoid = out.get("thingsToAvoid") if isinstance(out.get("thingsToAvoid"), list) else []
    out["thingsToAvoid"] = [t for t in (_thing_to_avoid(i) for i in avoid) if t is not None]
    return out


def _mid_fight_adjustments(raw: Any) -> Dict[str, Any]:
    out = dict(_obj(raw))
    items = out.get("adjustments") if isinstance(out.get("adjustments"), list) else []
    out["adjustments"] = [
        {
            **a,
            "ifCondition": _str(a.get("ifCondition"), "If opponent adjusts"),
            "thenAction": _str(a.get("thenAction"), "Then counter-adjust"),
        }
        for a in items
        if isinstance(a, dict)
    ]
    return out


def _training_recommendations(raw: Any) -> Dict[str, Any]:
    out = dict(_obj(raw))
    for key in ("priorityDrills", "sparringFocus", "conditioning"):
        out[key] = _str_list(out.get(key))
    return out


def _key_insights(raw: Any) -> Dict[str, Any]:
    out = dict(_obj(raw))
    for key in ("criticalObservations", "winConditions", "riskFactors"):
        out[key] = _str_list(out.get(key))
    out["finalRecommendation"] = _str(out.get("finalRecommendation"), "Focus on your strengths and stay disciplined.")
    out["confidenceLevel"] = _str(out.get("confidenceLevel"), "Medium")
    return out


def _apply_coaching(out: Dict[str, Any], role: str, counts: RoundCounts) -> None:
    if role == ROLE_STUDY:
        for key in COACHING_SECTIONS:
            out[key] = None
        return
    out["gamePlan"] = _game_plan(out.get("gamePlan"), counts)
    out["midFightAdjustments"] = _mid_fight_adjustments(out.get("midFightAdjustments"))
    out["trainingRecommendations"] = _training_recommendations(out.get("trainingRecommendations"))
    out["keyInsights"] = _key_insights(out.get("keyInsights"))


# -------------------------
# Both-fighters mode
# -------------------------

GUIDANCE_FILLER = "Study the observed tendencies and drill the counters to them."


def _matchup(raw: Any) -> Dict[str, Any]:
    out = dict(_obj(raw))
    legacy = out.pop("predictedWinner", None)
    out["styleClash"] = _str(out.get("styleClash"), "Both fighters showed contrasting approaches.")
    for key in ("keyBattles", "fighter1Advantages", "fighter2Advantages"):
        out[key] = _str_list(out.get(key))

    guidance = dict(_obj(out.get("preparationGuidance")))
    if "keyFactors" not in guidance and isinstance(legacy, dict):
        factors = _str_list(legacy.get("keyFactors"))
        reasoning = _str(legacy.get("reasoning"), "")
        if reasoning:
            factors.append(reasoning)
        guidance["keyFactors"] = factors
    guidance["forFighter1"] = _str(guidance.get("forFighter1"), GUIDANCE_FILLER)
    guidance["forFighter2"] = _str(guidance.get("forFighter2"), GUIDANCE_FILLER)
    guidance["keyFactors"] = _str_list(guidance.get("keyFactors"))
    out["preparationGuidance"] = guidance
    return out


def _adopt_top_level_sections(out: Dict[str, Any]) -> None:
    """The model sometimes emits per-fighter sections at the top level instead of under fighterNAnalysis; move them into the first empty slot."""
    stray = {k: out[k] for k in FIGHTER_SECTIONS if k in out}
    if not stray:
        return
    for slot in ("fighter1Analysis", "fighter2Analysis"):
        if not _obj(out.get(slot)):
            out[slot] = stray
            for k in stray:
                out.pop(k)
            logger.info("adopted_top_level_sections", extra={"slot": slot, "sections": sorted(stray)})
            return


def _text(config: Mapping[str, Any], key: str) -> str:
    val = config.get(key)
    return val.strip() if isinstance(val, str) and val.strip() else ""


# -------------------------
# Public API
# -------------------------

def normalize_report(data: Any, config: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Return a structurally complete copy of the model's analysis for this config. Does not mutate `data`."""
    config = config or {}
    out = copy.deepcopy(data) if isinstance(data, dict) else {}
    role = classify_role(config.get("userRole"))
    counts = resolve_round_counts(config)

    if is_both_mode(config):
        _adopt_top_level_sections(out)
        for n in (1, 2):
            ctx = _Ctx(
                name=_text(config, f"fighter{n}Name") or f"Fighter {n}",
                background=_text(config, f"fighter{n}DeclaredBackground") or "Not specified",
                counts=counts,
            )
            out[f"fighter{n}Analysis"] = _fighter_sections(out.get(f"fighter{n}Analysis"), ctx)
        out["matchupAnalysis"] = _matchup(out.get("matchupAnalysis"))
        if "counterStrategy" in out:
            out["counterStrategy"] = _counter_strategy(out["counterStrategy"])
    else:
        ctx = _Ctx(
            name=_text(config, "fighter1Name") or "Unknown Fighter",
            background=_text(config, "fighter1DeclaredBackground") or "Not specified",
            counts=counts,
        )
        out.update(_fighter_sections(out, ctx))
        out["counterStrategy"] = _counter_strategy(out.get("counterStrategy"))

    _apply_coaching(out, role, counts)
    logger.debug("report_normalized", extra={"role": role, "user_rounds": counts.user_rounds, "video_rounds": counts.video_rounds})
    return out


def normalize_config(config: Optional[Mapping[str, Any]], now: Optional[datetime] = None) -> Dict[str, Any]:
    """Return a new config with canonical ISO dates, typed round count, a valid userRole and explicit nulls for optional fields. The caller's dict is not modified."""
    now = now or datetime.now(timezone.utc)
    normalized = dict(config or {})

    created = normalized.get("createdAt")
    if isinstance(created, (int, float)) and not isinstance(created, bool):
        # iOS JSONEncoder's default Date encoding: seconds since 2001-01-01.
        try:
            normalized["createdAt"] = to_iso(datetime.fromtimestamp(created + SWIFT_REFERENCE_OFFSET, tz=timezone.utc))
        except (OverflowError, OSError, ValueError):
            normalized["createdAt"] = to_iso(now)
    elif not created:
        normalized["createdAt"] = to_iso(now)

    normalized["id"] = normalized.get("id") or f"config-{int(now.timestamp() * 1000)}"
    normalized["analysisType"] = normalized.get("analysisType") or "single"

    # same value that sized the game-plan arrays
    normalized["userFightRounds"] = resolve_user_rounds(normalized)

    if normalized.get("userRole") not in VALID_ROLES:
        normalized["userRole"] = ROLE_TO_PHRASE[classify_role(normalized.get("userRole"))]

    for key in OPTIONAL_CONFIG_FIELDS:
        if not normalized.get(key):
            normalized[key] = None
    return normalized
