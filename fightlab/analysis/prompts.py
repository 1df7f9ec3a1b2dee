RULE = "═══════════════════════════════════════════════════════════"

PREAMBLE = """You are an expert MMA fight analyst. Analyze the provided fight video frames and generate a comprehensive tactical analysis.
Base your ENTIRE analysis ONLY on what you observe in these video frames.
- Do NOT use any prior knowledge about a fighter's name or reputation
- Do NOT assume anything based on who the fighter is
- ONLY analyze what you can actually SEE"""

TARGET_SINGLE = """TARGET FIGHTER IDENTIFICATION (CRITICAL)
NAME: <<FIGHTER>>
CORNER: <<CORNER>> Corner
<<IDENTIFIERS>>
You MUST identify "<<FIGHTER>>" using the visual markers above before analyzing anything.
The OTHER fighter in the video is the OPPONENT - do NOT credit their skills to <<FIGHTER>>.

WHAT TO ANALYZE (TARGET FIGHTER'S ACTIONS):
- Strikes that <<FIGHTER>> THROWS
- Takedowns that <<FIGHTER>> INITIATES
- Ground control when <<FIGHTER>> IS ON TOP
- Submissions that <<FIGHTER>> ATTEMPTS
- Movement, footwork and defense of <<FIGHTER>>

WHAT NOT TO ANALYZE AS THE TARGET'S SKILLS:
- Takedowns AGAINST <<FIGHTER>> = OPPONENT's skill
- Ground control when <<FIGHTER>> IS ON BOTTOM = OPPONENT's skill
- Strikes that HIT <<FIGHTER>> = OPPONENT's skill"""

TARGET_BOTH = """ANALYZING: Both Fighters

FIGHTER A: <<FIGHTER1>> (<<CORNER1>> Corner)
<<IDENTIFIERS1>>

FIGHTER B: <<FIGHTER2>> (<<CORNER2>> Corner)
<<IDENTIFIERS2>>

Identify both fighters using the visual markers above. Never mix up whose actions you are scoring:
the fighter SHOOTING a takedown is the wrestler, the fighter BEING taken down shows weak takedown defense."""

VIDEO_CONTEXT = """VIDEO: <<VIDEO_ROUNDS>> round(s) of <<SESSION_TYPE>> (<<DURATION_NOTE>>)
FRAMES PROVIDED: <<FRAME_COUNT>>
USER'S UPCOMING FIGHT: <<USER_ROUNDS>> rounds
USER CONTEXT: <<ROLE_CONTEXT>>"""

ROLE_CONTEXT = {
    "fighter": "Fighter preparing to face this opponent",
    "coach": "Coach analyzing for their student/fighter",
    "study": "General study and analysis purposes",
}

ROLE_GUIDANCE = {
    "fighter": "Write the coaching sections in second person, addressed to the fighter who will face this opponent.",
    "coach": "Write the coaching sections for a coach preparing a student to face this fighter.",
    "study": (
        "This is a NEUTRAL study. Do NOT include gamePlan, midFightAdjustments, trainingRecommendations or keyInsights. "
        "Omit those keys entirely. Describe what happened; do not prescribe how to beat anyone."
    ),
}

SECTION_IDENTIFICATION = """"fighterIdentification": {
  "confirmedName": "<string: the fighter name you are analyzing - should match '<<FIGHTER>>'>",
  "visualIdentifiers": "<string: how you identified them - e.g. 'Fighter wearing yellow shorts in blue corner'>",
  "confidenceLevel": "<string: 'High', 'Medium', or 'Low'>",
  "observedStyle": "<string: style OBSERVED in the video - e.g. 'Striking-Heavy', 'Wrestling-Heavy', 'Mixed'>",
  "declaredBackground": "<<BACKGROUND>>",
  "styleMismatch": <boolean: true if observedStyle differs significantly from declaredBackground>
}"""

SECTION_EXECUTIVE = """"executiveSummary": {
  "overallScore": <number 0-100: THREAT LEVEL. 90+ elite, 80-89 very skilled, 70-79 skilled, 60-69 average, below 60 developing>,
  "summary": "<string: 2-3 sentence overview of what you OBSERVED>",
  "keyFindings": ["<string: specific observation from video>", "<string>", "<string>"],
  "recommendedApproach": "<string: overall approach based on observed weaknesses>"
}"""

SECTION_STYLE = """"fightingStyleBreakdown": {
  "primaryStyle": "<string: based on what the fighter DOES - e.g. 'Wrestler', 'Pressure Boxer', 'Grappler'>",
  "stance": "<string: 'Orthodox' or 'Southpaw'>",
  "secondarySkills": ["<string>"],
  "baseMartialArts": ["<string: martial arts DEMONSTRATED - e.g. 'Wrestling', 'Boxing', 'BJJ'>"],
  "styleDescription": "<string: what they did most in the video>",
  "secondaryAttributes": ["<string: e.g. 'Elite Cardio', 'Knockout Power'>"],
  "comparableFighters": ["<string: famous fighter with a SIMILAR observed style>"],
  "tacticalTendencies": ["<string: tactical pattern OBSERVED>"]
}"""

SECTION_STRIKE = """"strikeAnalysis": {
  "accuracy": <number 0-100>,
  "volume": <integer: total strikes>,
  "powerScore": <number 0-100>,
  "techniqueScore": <number 0-100>,
  "breakdown": {"jabs": <integer>, "crosses": <integer>, "hooks": <integer>, "uppercuts": <integer>, "kicks": <integer>, "knees": <integer>, "elbows": <integer>},
  "patterns": ["<string: observed striking pattern>"],
  "recommendations": ["<string>"]
}"""

SECTION_GRAPPLING = """"grapplingAnalysis": {
  "takedownAccuracy": <number 0-100>,
  "takedownDefense": <number 0-100>,
  "controlTime": <number: seconds>,
  "submissionAttempts": <integer>,
  "techniques": ["<string>"],
  "recommendations": ["<string>"]
}"""

SECTION_DEFENSE = """"defenseAnalysis": {
  "headMovement": <number 0-100>,
  "footwork": <number 0-100>,
  "blockingRate": <number 0-100>,
  "counterStrikeRate": <number 0-100>,
  "vulnerabilities": ["<string>"],
  "improvements": ["<string>"]
}"""

SECTION_CARDIO = """"cardioAnalysis": {
  "roundByRound": [{"roundNumber": <integer 1 to <<VIDEO_ROUNDS>>>, "outputLevel": <number 0-100>, "staminaScore": <number 0-100>, "notes": "<string>"}],
  "overallStamina": <number 0-100>,
  "fatigueIndicators": ["<string>"],
  "recommendations": ["<string>"]
}"""

SECTION_FIGHT_IQ = """"fightIQ": {
  "overallScore": <number 0-100>,
  "decisionMaking": <number 0-100>,
  "adaptability": <number 0-100>,
  "strategyExecution": <number 0-100>,
  "keyObservations": ["<string>"],
  "improvements": ["<string>"]
}"""

SECTION_STRENGTHS = """"strengthsWeaknesses": {
  "strengths": [{"title": "<string>", "description": "<string>", "score": <number 0-100>, "statistics": "<string or null>"}],
  "weaknesses": [{"title": "<string>", "description": "<string>", "severity": <number 0-100>, "exploitablePattern": "<string>", "frequency": "<string or null>", "exploitationStrategy": "<string>"}],
  "opportunitiesToExploit": ["<string>"]
}"""

SECTION_MISTAKES = """"mistakePatterns": {
  "patterns": [{"pattern": "<string: repeated mistake>", "frequency": <integer: times observed>, "severity": "<string: 'high', 'medium', or 'low'>"}]
}"""

SECTION_ROUND_METRICS = """"roundByRoundMetrics": {
  "rounds": [
    {
      "roundNumber": <integer 1 to <<VIDEO_ROUNDS>>>,
      "outputLevel": <number 0-100>,
      "notes": "<string or null>",
      "striking": {"strikesLanded": <integer>, "strikesAttempted": <integer>, "accuracy": <number 0-100>, "significantStrikes": <integer>, "powerStrikes": <integer>, "headStrikes": <integer>, "bodyStrikes": <integer>, "legStrikes": <integer>, "knockdowns": <integer>},
      "grappling": {"takedownsLanded": <integer>, "takedownsAttempted": <integer>, "takedownAccuracy": <number 0-100>, "takedownsDefended": <integer>, "takedownDefenseRate": <number 0-100>, "controlTimeSeconds": <integer>, "submissionAttempts": <integer>, "reversals": <integer>},
      "defense": {"strikesAbsorbed": <integer>, "strikesAvoided": <number 0-100>, "headMovementSuccess": <number 0-100>, "takedownsDefended": <integer>, "escapes": <integer>}
    }
  ]
}"""

SECTION_COUNTER = """"counterStrategy": {
  "bestCounter": {"style": "<string: style to use against this fighter>", "reason": "<string>"},
  "secondBestCounter": {"style": "<string>", "reason": "<string>"},
  "thirdBestCounter": {"style": "<string>", "reason": "<string>"},
  "techniquesToEmphasize": ["<string>"]
}"""

SECTION_GAME_PLAN = """"gamePlan": {
  "overallStrategy": "<string>",
  "roundByRound": [{"roundNumber": <integer 1 to <<USER_ROUNDS>>>, "objective": "<string>", "tactics": ["<string>"], "keyFocus": "<string>"}],
  "roundGamePlans": [
    {
      "roundNumber": <integer 1 to <<USER_ROUNDS>>>,
      "title": "<string>",
      "planA": {"name": "<string>", "goal": "<string>", "tactics": ["<string>"], "successIndicators": ["<string>"], "switchTrigger": "<string or null>"},
      "planB": {"name": "<string>", "goal": "<string>", "tactics": ["<string>"], "successIndicators": ["<string>"], "switchTrigger": "<string or null>"},
      "planC": {"name": "<string>", "goal": "<string>", "tactics": ["<string>"], "successIndicators": ["<string>"], "switchTrigger": null}
    }
  ],
  "keyTactics": ["<string>"],
  "thingsToAvoid": [{"avoid": "<string: what NOT to do>", "reason": "<string: why>", "alternative": "<string: what to do instead>"}]
}"""

SECTION_ADJUSTMENTS = """"midFightAdjustments": {
  "adjustments": [{"ifCondition": "<string: if this happens...>", "thenAction": "<string: then do this...>"}]
}"""

SECTION_TRAINING = """"trainingRecommendations": {
  "priorityDrills": ["<string>"],
  "sparringFocus": ["<string>"],
  "conditioning": ["<string>"]
}"""

SECTION_INSIGHTS = """"keyInsights": {
  "criticalObservations": ["<string>"],
  "winConditions": ["<string>"],
  "riskFactors": ["<string>"],
  "finalRecommendation": "<string>",
  "confidenceLevel": "<string: 'High', 'Medium', or 'Low'>"
}"""

SECTION_MATCHUP = """"matchupAnalysis": {
  "styleClash": "<string: how the two observed styles interact>",
  "keyBattles": ["<string: area where the fight was decided, e.g. 'Clinch against the fence'>"],
  "fighter1Advantages": ["<string>"],
  "fighter2Advantages": ["<string>"],
  "preparationGuidance": {
    "forFighter1": "<string: how <<FIGHTER1>> should prepare for this matchup>",
    "forFighter2": "<string: how <<FIGHTER2>> should prepare for this matchup>",
    "keyFactors": ["<string>"]
  }
}"""

REQUIREMENTS_OBSERVED = """- ROUND METRICS: Create EXACTLY <<VIDEO_ROUNDS>> entries in roundByRoundMetrics.rounds (rounds 1-<<VIDEO_ROUNDS>> from the video)
- CARDIO: Create EXACTLY <<VIDEO_ROUNDS>> roundByRound entries in cardioAnalysis
- Do NOT invent rounds the footage could not contain
- STRENGTHS: Provide 3-5 strengths with scores - ONLY what you OBSERVED
- WEAKNESSES: Provide 3-5 weaknesses with exploitation strategies - ONLY what you OBSERVED
- MISTAKES: Provide 3-5 mistake patterns you actually SAW
- All number scores should be realistic (vary them based on actual observation)"""

REQUIREMENTS_COACHING = """- GAME PLANS: Create EXACTLY <<USER_ROUNDS>> roundByRound entries and <<USER_ROUNDS>> roundGamePlans entries (rounds 1-<<USER_ROUNDS>>)
- ADJUSTMENTS: Provide 5-6 if/then adjustments
- Be specific and actionable in all recommendations"""

CLOSING = "RESPOND WITH ONLY THE JSON OBJECT. NO MARKDOWN, NO EXPLANATION, JUST PURE JSON."
