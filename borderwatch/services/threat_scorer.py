"""
Threat scoring service for BorderWatch.

This module turns a location and the currently active alerts into a
discrete threat level with the factors that produced it, and provides the
keyword analysis of free-text reports.
"""

from collections import Counter
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from borderwatch.core.logging import logger
from borderwatch.models.alert import AlertSeverity
from borderwatch.models.threat import ThreatLevel
from borderwatch.schemas.assessment import TextAnalysis, ThreatAssessment
from borderwatch.utils.geo import Coordinate, LOC_REFERENCE_POINTS, format_distance, nearest

NO_LOCATION_CONFIDENCE = 0.5
NO_LOCATION_FACTOR = "Location unavailable: assessment based on regional alerts only"

# (upper bound km, baseline level, confidence, risk factor template, recommendations)
# Ordered nearest first; confidence never decreases as distance shrinks.
PROXIMITY_BANDS: Tuple[Tuple[float, ThreatLevel, float, Optional[str], Tuple[str, ...]], ...] = (
    (2.0, ThreatLevel.HIGH, 0.85,
     "Immediate proximity to the Line of Control ({name}, {distance})",
     ("Identify the nearest bunker or safe zone", "Keep emergency contacts at hand")),
    (10.0, ThreatLevel.MEDIUM, 0.75,
     "Close to the Line of Control ({name}, {distance})",
     ("Stay alert to local announcements",)),
    (25.0, ThreatLevel.LOW, 0.65,
     "Inside the border belt ({name}, {distance})",
     ()),
    (100.0, ThreatLevel.LOW, 0.6,
     "Within border district range ({name}, {distance})",
     ()),
    (float("inf"), ThreatLevel.LOW, 0.55, None, ()),
)

DEFAULT_RECOMMENDATIONS = (
    "Continue normal activities with standard precautions",
    "Stay updated with local news",
)

# Outlook for the coming hours, keyed by the final level
PATTERN_CONFIDENCE = {
    ThreatLevel.CRITICAL: 0.8,
    ThreatLevel.HIGH: 0.7,
    ThreatLevel.MEDIUM: 0.6,
    ThreatLevel.LOW: 0.5,
}

NEXT_HOURS_PREDICTION = {
    ThreatLevel.CRITICAL: "Continued high alert status expected. Monitor official communications closely.",
    ThreatLevel.HIGH: "Security situation may evolve. Stay alert for updates.",
    ThreatLevel.MEDIUM: "Situation appears stable but monitoring continues.",
    ThreatLevel.LOW: "Normal security conditions expected to continue.",
}

MISSING_DATA_PATTERN_CONFIDENCE = 0.4
MISSING_DATA_PREDICTION = "Forecast based on partial data. Monitor official sources."

# Keyword tables for free-text analysis, checked in order
THREAT_KEYWORDS = {
    ThreatLevel.CRITICAL: ["explosion", "attack", "bombing", "terrorist", "missile", "artillery", "gunfire", "shooting"],
    ThreatLevel.HIGH: ["infiltration", "breach", "armed", "weapon", "violation", "hostile", "threat", "danger"],
    ThreatLevel.MEDIUM: ["suspicious", "unusual", "movement", "activity", "patrol", "security", "alert"],
}

CATEGORY_KEYWORDS = {
    "drone": ["drone", "uav", "unmanned", "aerial", "flying", "aircraft"],
    "ground": ["vehicle", "personnel", "foot", "patrol", "movement", "crossing"],
    "cyber": ["network", "system", "computer", "digital", "electronic", "communication"],
    "air": ["aircraft", "helicopter", "plane", "aviation", "airspace"],
    "infiltration": ["border", "crossing", "breach", "entry", "infiltration"],
    "shelling": ["artillery", "mortar", "shell", "bombardment", "explosion"],
}

TEXT_LEVEL_CONFIDENCE = {
    ThreatLevel.CRITICAL: 0.9,
    ThreatLevel.HIGH: 0.8,
    ThreatLevel.MEDIUM: 0.7,
    ThreatLevel.LOW: 0.6,
}

TEXT_LEVEL_GUIDANCE = {
    ThreatLevel.CRITICAL: (
        ["Immediate evacuation of area", "Contact emergency services", "Activate security protocols"],
        ["High risk to civilian safety", "Potential for escalation"],
        ["Critical security incident reported", "Immediate response required"],
    ),
    ThreatLevel.HIGH: (
        ["Increase security patrols", "Monitor situation closely", "Prepare contingency plans"],
        ["Elevated security risk", "Potential threat to operations"],
        ["Significant security concern identified", "Enhanced monitoring recommended"],
    ),
    ThreatLevel.MEDIUM: (
        ["Maintain heightened awareness", "Continue routine patrols", "Document observations"],
        ["Moderate security risk", "Requires monitoring"],
        ["Security situation noted", "Standard protocols apply"],
    ),
    ThreatLevel.LOW: (
        ["Continue normal operations", "Maintain standard security measures"],
        ["Low security risk"],
        ["Routine security report", "No immediate concerns"],
    ),
}


def _severity_of(record) -> Optional[AlertSeverity]:
    try:
        return AlertSeverity(getattr(record, "severity", None))
    except ValueError:
        return None


def count_by_severity(records: Iterable) -> Counter:
    """Count records per severity tier, skipping unknown tiers."""
    counts = Counter()
    for record in records:
        severity = _severity_of(record)
        if severity is not None:
            counts[severity] += 1
    return counts


def _append_unique(target: List[str], items: Iterable[str]) -> None:
    for item in items:
        if item not in target:
            target.append(item)


def assess_threat(
    origin: Optional[Coordinate],
    active_records: Sequence,
    reference_points: Sequence = LOC_REFERENCE_POINTS,
) -> ThreatAssessment:
    """
    Score a location against the active alerts.

    Args:
        origin: Where the user is, or None when unknown.
        active_records: Alert-like records with a severity, already
            filtered to active and unexpired.
        reference_points: Border anchors for the proximity baseline.

    Returns:
        The assessment. Escalation by alerts only ever raises the
        proximity baseline.
    """
    risk_factors: List[str] = []
    recommendations: List[str] = []
    nearest_name = None
    nearest_distance = None

    # Baseline from proximity
    closest = nearest(origin, reference_points) if origin is not None else None
    if closest is None:
        level = ThreatLevel.LOW
        confidence = NO_LOCATION_CONFIDENCE
        risk_factors.append(NO_LOCATION_FACTOR)
    else:
        d = closest.distance_km
        nearest_name = getattr(closest.candidate, "name", None)
        nearest_distance = round(d, 3)
        for limit, band_level, band_confidence, factor, band_recs in PROXIMITY_BANDS:
            if d < limit:
                level = band_level
                confidence = band_confidence
                if factor:
                    risk_factors.append(factor.format(name=nearest_name or "reference point", distance=format_distance(d)))
                _append_unique(recommendations, band_recs)
                break

    # Escalation from active alerts
    counts = count_by_severity(active_records)
    emergency_count = counts[AlertSeverity.EMERGENCY]
    alert_count = counts[AlertSeverity.ALERT]
    warning_count = counts[AlertSeverity.WARNING]

    escalated = None
    escalation_confidence = 0.0
    if emergency_count > 0:
        escalated, escalation_confidence = ThreatLevel.CRITICAL, 0.9
    elif alert_count > 1:
        escalated, escalation_confidence = ThreatLevel.HIGH, 0.8
    elif alert_count > 0 or warning_count > 2:
        escalated, escalation_confidence = ThreatLevel.MEDIUM, 0.7

    if escalated is not None:
        if escalated.rank > level.rank:
            level = escalated
        confidence = max(confidence, escalation_confidence)

    if emergency_count > 0:
        risk_factors.append("Active security incidents reported")
        _append_unique(recommendations, ["Avoid travel to border areas", "Stay informed through official channels"])
    if alert_count > 0:
        risk_factors.append("Heightened security activity")
        _append_unique(recommendations, ["Follow local authority guidelines"])
    if warning_count > 0:
        risk_factors.append("Multiple warning-level incidents")
        _append_unique(recommendations, ["Maintain situational awareness"])

    if not recommendations:
        recommendations.extend(DEFAULT_RECOMMENDATIONS)

    assessment = ThreatAssessment(
        threat_level=level,
        confidence=min(1.0, max(0.0, confidence)),
        risk_factors=risk_factors,
        recommendations=recommendations,
        computed_at=datetime.utcnow(),
        nearest_reference=nearest_name,
        distance_km=nearest_distance,
        pattern_confidence=PATTERN_CONFIDENCE[level],
        next_hours_prediction=NEXT_HOURS_PREDICTION[level],
    )
    logger.debug(
        f"Assessed threat {assessment.threat_level.value} ({assessment.confidence:.2f}) "
        f"from {emergency_count} emergency, {alert_count} alert, {warning_count} warning records"
    )
    return assessment


def apply_missing_data(
    assessment: ThreatAssessment,
    risk_factors: Sequence[str],
    max_confidence: Optional[float] = None,
) -> ThreatAssessment:
    """
    Mark an assessment as made without some of its inputs.

    The level is kept, since it rests on the data that was available; the
    risk factors are added and confidence is capped at max_confidence.

    Returns:
        A new assessment, or the same one when nothing was missing.
    """
    if not risk_factors and max_confidence is None:
        return assessment

    factors = list(assessment.risk_factors)
    _append_unique(factors, risk_factors)
    updates = {"risk_factors": factors}
    if max_confidence is not None:
        updates["confidence"] = min(assessment.confidence, max_confidence)
        updates["pattern_confidence"] = min(assessment.pattern_confidence, MISSING_DATA_PATTERN_CONFIDENCE)
        updates["next_hours_prediction"] = MISSING_DATA_PREDICTION
    return assessment.model_copy(update=updates)

def analyze_text(description: str) -> TextAnalysis:
    """
    Keyword analysis of a threat description.

    Args:
        description: Free text from a report or threat.

    Returns:
        Text analysis with threat level, category and guidance.
    """
    text = (description or "").lower()

    level = ThreatLevel.LOW
    for candidate, keywords in THREAT_KEYWORDS.items():
        if any(keyword in text for keyword in keywords):
            level = candidate
            break

    category = "unknown"
    for name, keywords in CATEGORY_KEYWORDS.items():
        if any(keyword in text for keyword in keywords):
            category = name
            break

    recommendations, risk_factors, key_points = TEXT_LEVEL_GUIDANCE[level]

    return TextAnalysis(
        threat_level=level,
        confidence=TEXT_LEVEL_CONFIDENCE[level],
        category=category,
        recommendations=list(recommendations),
        key_points=list(key_points),
        risk_factors=list(risk_factors),
        immediate_action="EVACUATE AREA IMMEDIATELY" if level == ThreatLevel.CRITICAL else None,
        source="keyword",
    )
