"""Engine data model.

Defines immutable Pydantic models for parsed features, call contexts,
scenario snapshots, and step results. Parsed models are produced by an
external parser and consumed by the execution engine.
"""

from .calls import TOP_LEVEL, CallContext
from .features import (
    OUTLINE_KEYWORD,
    SCENARIO_KEYWORD,
    Feature,
    FeatureSection,
    Scenario,
    ScenarioOutline,
    Step,
    Tag,
)
from .results import FeatureResult, ScenarioInfo, ScenarioResult, StepResult, StepStatus

__all__ = (
    'OUTLINE_KEYWORD',
    'SCENARIO_KEYWORD',
    'TOP_LEVEL',
    'CallContext',
    'Feature',
    'FeatureResult',
    'FeatureSection',
    'Scenario',
    'ScenarioInfo',
    'ScenarioOutline',
    'ScenarioResult',
    'Step',
    'StepResult',
    'StepStatus',
    'Tag',
)
