"""Unit tests for round derivation, role classification, appearance text and prompt rendering."""
import pytest

from fightlab.analysis.prompt_builder import (
    ROLE_COACH,
    ROLE_FIGHTER,
    ROLE_STUDY,
    build_appearance,
    build_prompt,
    classify_role,
    shorts_color,
)
from fightlab.analysis.rounds import (
    MAX_VIDEO_ROUNDS,
    clamp_rounds,
    derive_max_rounds,
    resolve_round_counts,
    resolve_user_rounds,
)


@pytest.mark.parametrize(
    "duration, expected",
    [
        (None, (1, False)),
        (0, (1, False)),
        (-30, (1, False)),
        ("not a number", (1, False)),
        (60, (1, True)),
        (240, (1, True)),
        (241, (2, True)),
        (420, (2, True)),
        (1800, (8, True)),
        ("900", (4, True)),
    ],
)
def test_derive_max_rounds(duration, expected):
    assert derive_max_rounds(duration) == expected


def test_clamp_rounds_to_what_footage_can_hold():
    max_rounds, _ = derive_max_rounds(300)
    assert max_rounds == 2
    assert clamp_rounds(12, max_rounds) == 2
    assert clamp_rounds(1, max_rounds) == 1
    # missing claim falls back to 3, then clamps
    assert clamp_rounds(None, 5) == 3
    assert clamp_rounds(None, 1) == 1
    assert clamp_rounds("0", 5) == 3


def test_resolve_user_rounds():
    assert resolve_user_rounds({}) == 3
    assert resolve_user_rounds({"userFightRounds": 5}) == 5
    assert resolve_user_rounds({"userFightRounds": "5"}) == 5
    assert resolve_user_rounds({"userFightRounds": 25}) == 12
    assert resolve_user_rounds({"userFightRounds": -1}) == 3


def test_video_rounds_never_exceed_cap():
    assert derive_max_rounds(1e9) == (MAX_VIDEO_ROUNDS, True)
    assert derive_max_rounds(10 ** 400) == (1, False)
    assert clamp_rounds(2_000_000, 10 ** 9) == MAX_VIDEO_ROUNDS
    assert clamp_rounds("1e400", 5) == 3
    counts = resolve_round_counts({"videoDuration": 1e9, "videoRounds": 2_000_000})
    assert counts.video_rounds == MAX_VIDEO_ROUNDS
    assert counts.max_rounds == MAX_VIDEO_ROUNDS


def test_user_rounds_independent_of_video_length():
    counts = resolve_round_counts({"userFightRounds": 5, "videoDuration": 200, "videoRounds": 3})
    assert counts.user_rounds == 5
    assert counts.video_rounds == 1
    assert counts.max_rounds == 1
    assert counts.can_determine is True


@pytest.mark.parametrize(
    "role, expected",
    [
        ("I'm preparing to fight this opponent", ROLE_FIGHTER),
        ("Coach analyzing for student", ROLE_COACH),
        ("General study / Analysis", ROLE_STUDY),
        ("COACH", ROLE_COACH),
        ("just a fan doing some scouting", ROLE_STUDY),
        ("fighter and coach", ROLE_FIGHTER),
        ("coach doing analysis", ROLE_COACH),
        ("", ROLE_FIGHTER),
        (None, ROLE_FIGHTER),
        ("something else", ROLE_FIGHTER),
    ],
)
def test_classify_role(role, expected):
    assert classify_role(role) == expected


def test_build_appearance_fixed_order():
    appearance = {
        "customDescription": "shaved head",
        "distinguishingFeatures": ["sleeve tattoo", "", "beard"],
        "relativeHeight": "taller fighter",
        "bodyBuild": "stocky",
        "skinTone": "light",
        "shortsColor": "red",
    }
    assert build_appearance(appearance) == (
        "red shorts, light skin tone, stocky build, taller fighter, sleeve tattoo, beard, shaved head"
    )


def test_build_appearance_falls_back_to_description():
    assert build_appearance(None, "blue shorts, southpaw") == "blue shorts, southpaw"
    assert build_appearance({}, "legacy text") == "legacy text"
    assert build_appearance({"shortsColor": "  "}, "legacy text") == "legacy text"
    assert build_appearance(None, None) == ""


def test_shorts_color():
    assert shorts_color({"shortsColor": "black"}, "white shorts") == "black"
    assert shorts_color(None, "wearing Blue shorts and gloves") == "Blue"
    assert shorts_color(None, "no description") == ""


def test_prompt_is_deterministic(single_config):
    assert build_prompt(single_config, frame_count=20) == build_prompt(dict(single_config), frame_count=20)


def test_prompt_single_fighter(single_config):
    prompt = build_prompt(single_config, frame_count=12)
    assert "NAME: Alex Rivera" in prompt
    assert "SHORTS COLOR: RED - USE THIS TO IDENTIFY THE FIGHTER" in prompt
    assert "PHYSICAL DESCRIPTION: red shorts, stocky build" in prompt
    assert "FRAMES PROVIDED: 12" in prompt
    assert '"counterStrategy": {' in prompt
    assert '"gamePlan": {' in prompt
    assert '"fighter1Analysis"' not in prompt
    assert '"matchupAnalysis"' not in prompt


def test_prompt_round_counts():
    cfg = {"userFightRounds": 5, "videoDuration": 480, "videoRounds": 5}
    prompt = build_prompt(cfg)
    assert "Create EXACTLY 2 entries in roundByRoundMetrics.rounds" in prompt
    assert "Create EXACTLY 5 roundByRound entries and 5 roundGamePlans entries" in prompt
    assert "at most 2 round(s)" in prompt


def test_prompt_unknown_duration_note():
    assert "video duration unknown" in build_prompt({})


def test_prompt_study_role_excludes_coaching(single_config):
    cfg = dict(single_config, userRole="General study / Analysis")
    prompt = build_prompt(cfg)
    for key in ("gamePlan", "midFightAdjustments", "trainingRecommendations", "keyInsights"):
        assert f'"{key}": {{' not in prompt
    assert "roundGamePlans" not in prompt
    assert '"fighterIdentification": {' in prompt
    assert "NEUTRAL study" in prompt


def test_prompt_coach_role_has_coaching(single_config):
    prompt = build_prompt(dict(single_config, userRole="Coach analyzing for student"))
    assert '"gamePlan": {' in prompt
    assert "Coach analyzing for their student/fighter" in prompt


def test_prompt_both_mode():
    cfg = {
        "analysisType": "both",
        "fighter1Name": "Alex",
        "fighter1Corner": "Red",
        "fighter1Description": "red shorts",
        "fighter2Name": "Sam",
        "fighter2Corner": "Blue",
        "fighter2Appearance": {"shortsColor": "blue"},
    }
    prompt = build_prompt(cfg)
    assert "FIGHTER A: Alex (Red Corner)" in prompt
    assert "FIGHTER B: Sam (Blue Corner)" in prompt
    assert "SHORTS COLOR: BLUE - PRIMARY IDENTIFIER" in prompt
    assert '"fighter1Analysis": {' in prompt
    assert '"fighter2Analysis": {' in prompt
    assert '"matchupAnalysis": {' in prompt
    assert '"counterStrategy"' not in prompt
    assert "TARGET FIGHTER IDENTIFICATION" not in prompt
