"""
production_model — model produkcyjny: wnioskowanie w przód, krok po kroku.

Publiczne API:
  register(*names)                 → FactRegistry
  perform(*conclusions).when(...)  → Rule
  production_model(inputs, rules)  → Solver
  Solver.step() / iterate() / run_to_completion()
  load_model(path)                 → Model
  Fact, Rule, WorkingMemory, Step, Outcome, Snapshot, SolverState
"""

from .engine  import Outcome, Snapshot, Solver, SolverState, Step, StepResult, production_model
from .errors  import (
    ErrorCode,
    FactSealedError,
    FactTypeError,
    ModelFormatError,
    ProductionError,
    ReentrantStepError,
    UnknownFactError,
)
from .facts   import EntityKind, Fact, FactRegistry, register
from .loader  import Model, load_model, load_model_dict
from .memory  import WorkingMemory
from .rules   import Rule, perform

__all__ = [
    # engine
    "Outcome",
    "Snapshot",
    "Solver",
    "SolverState",
    "Step",
    "StepResult",
    "production_model",
    # errors
    "ErrorCode",
    "FactSealedError",
    "FactTypeError",
    "ModelFormatError",
    "ProductionError",
    "ReentrantStepError",
    "UnknownFactError",
    # facts
    "EntityKind",
    "Fact",
    "FactRegistry",
    "register",
    # loader
    "Model",
    "load_model",
    "load_model_dict",
    # memory
    "WorkingMemory",
    # rules
    "Rule",
    "perform",
]
