from maestro.compiler.composer import Composition, compose
from maestro.compiler.elements import GeneratorResult, IdAllocator
from maestro.compiler.engine import CompileResult, compile_plan, failure_result, generate_actions
from maestro.compiler.features import FeatureSet, extract_features, resolve_position
from maestro.compiler.palette import resolve_palette
from maestro.compiler.planner import Plan, build_plan
from maestro.compiler.quality import evaluate_action_sequence, score_composition
from maestro.compiler.validator import ValidationResult, validate_actions

__all__ = [
    "CompileResult",
    "Composition",
    "FeatureSet",
    "GeneratorResult",
    "IdAllocator",
    "Plan",
    "ValidationResult",
    "build_plan",
    "compile_plan",
    "compose",
    "evaluate_action_sequence",
    "extract_features",
    "failure_result",
    "generate_actions",
    "resolve_palette",
    "resolve_position",
    "score_composition",
    "validate_actions",
]
