"""
Pattern catalog.

PATTERN_CATALOG lists every built-in pattern class in declaration order,
which is the final tie-break when the orchestrator orders patterns.
"""

from .actionability_enhancer import ActionabilityEnhancer
from .ambiguity_detector import AmbiguityDetector
from .base import BasePattern, FunctionPattern, PatternInfo, PatternSettings
from .completeness_validator import CompletenessValidator
from .conciseness_filter import ConcisenessFilter
from .dependency_identifier import DependencyIdentifier
from .domain_context_enricher import DomainContextEnricher
from .edge_case_identifier import EdgeCaseIdentifier
from .objective_clarifier import ObjectiveClarifier
from .output_format_enforcer import OutputFormatEnforcer
from .prd_structure_enforcer import PRDStructureEnforcer
from .prerequisite_identifier import PrerequisiteIdentifier
from .scope_definer import ScopeDefiner
from .step_decomposer import StepDecomposer
from .structure_organizer import StructureOrganizer
from .success_criteria_enforcer import SuccessCriteriaEnforcer
from .success_metrics_enforcer import SuccessMetricsEnforcer
from .technical_context_enricher import TechnicalContextEnricher
from .validation_checklist_creator import ValidationChecklistCreator

PATTERN_CATALOG = (
    ConcisenessFilter,
    ObjectiveClarifier,
    PRDStructureEnforcer,
    StructureOrganizer,
    OutputFormatEnforcer,
    SuccessCriteriaEnforcer,
    ActionabilityEnhancer,
    SuccessMetricsEnforcer,
    CompletenessValidator,
    AmbiguityDetector,
    PrerequisiteIdentifier,
    DomainContextEnricher,
    TechnicalContextEnricher,
    StepDecomposer,
    ScopeDefiner,
    DependencyIdentifier,
    EdgeCaseIdentifier,
    ValidationChecklistCreator,
)

__all__ = [
    'PATTERN_CATALOG',
    'BasePattern',
    'FunctionPattern',
    'PatternInfo',
    'PatternSettings',
    'ActionabilityEnhancer',
    'AmbiguityDetector',
    'CompletenessValidator',
    'ConcisenessFilter',
    'DependencyIdentifier',
    'DomainContextEnricher',
    'EdgeCaseIdentifier',
    'ObjectiveClarifier',
    'OutputFormatEnforcer',
    'PRDStructureEnforcer',
    'PrerequisiteIdentifier',
    'ScopeDefiner',
    'StepDecomposer',
    'StructureOrganizer',
    'SuccessCriteriaEnforcer',
    'SuccessMetricsEnforcer',
    'TechnicalContextEnricher',
    'ValidationChecklistCreator',
]
