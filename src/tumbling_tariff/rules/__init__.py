"""
Tumbling tariff rules: pass legality (repeats, endings, direction) and per-track bonuses.
Pure functions; used by pipeline.py, the CLI and the web app.
"""
from .bonus import BonusResult, compute_bonuses
from .legality import PassLegality, RoutineLegality, RuleHit, validate

__all__ = ["BonusResult", "compute_bonuses", "PassLegality", "RoutineLegality", "RuleHit", "validate"]
