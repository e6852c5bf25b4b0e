"""Persona layer — minting synthetic investors and running their evaluations."""

from synthpanel.personas.evaluator import PersonaEvaluator
from synthpanel.personas.generator import PersonaGenerator

__all__ = [
    "PersonaEvaluator",
    "PersonaGenerator",
]
