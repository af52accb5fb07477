from .pipeline import TariffSheet, evaluate_tariff
from .routine import RoutineMeta, Slot
from .rules import compute_bonuses, validate

__all__ = ["TariffSheet", "evaluate_tariff", "RoutineMeta", "Slot", "compute_bonuses", "validate"]
