"""Core execution engine.

It provides:
- the step registry and step plugin loading;
- the step dispatcher;
- scenario backends and the script environment;
- the call orchestrator for called and top-level units.
"""

from .backend import ScenarioBackend
from .dispatcher import run_step
from .env import ScriptEnv
from .orchestrator import Runner, call_feature, call_scenario, run_feature, run_scenario
from .registry import MatchResult, MatchStatus, StepMatch, StepRegistry

__all__ = (
    'MatchResult',
    'MatchStatus',
    'Runner',
    'ScenarioBackend',
    'ScriptEnv',
    'StepMatch',
    'StepRegistry',
    'call_feature',
    'call_scenario',
    'run_feature',
    'run_scenario',
    'run_step',
)
