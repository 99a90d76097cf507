"""
Quality Assessor - Score a prompt across six quality dimensions.

Every dimension starts at 100 and loses points for each heuristic check
that fails. The failed checks are also the source of the remaining-issue
text, so the explanation always matches the number.

Dimensions:
- clarity: explicit objective, tech stack and output (code tasks), success
  criteria, no vague language or dangling references
- efficiency: no pleasantries, filler or redundant phrasing; good signal ratio
- structure: context, requirements and expected output present; headers bonus
- completeness: intent-specific required elements
- actionability: concrete verbs, examples, success criteria, few open questions
- specificity: numbers, file/identifier references, tech stack, no generic objects
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .confidence import clamp
from .types import IntentAnalysis, PromptIntent, QualityDimension, QualityMetrics

logger = logging.getLogger(__name__)

QUALITY_WEIGHTS_VERSION = "2"

# Rows must each sum to 1.0.
QUALITY_WEIGHTS: Dict[str, Dict[QualityDimension, float]] = {
    "code-generation": {
        QualityDimension.CLARITY: 0.20,
        QualityDimension.EFFICIENCY: 0.10,
        QualityDimension.STRUCTURE: 0.10,
        QualityDimension.COMPLETENESS: 0.25,
        QualityDimension.ACTIONABILITY: 0.20,
        QualityDimension.SPECIFICITY: 0.15,
    },
    "planning": {
        QualityDimension.CLARITY: 0.20,
        QualityDimension.EFFICIENCY: 0.10,
        QualityDimension.STRUCTURE: 0.25,
        QualityDimension.COMPLETENESS: 0.25,
        QualityDimension.ACTIONABILITY: 0.05,
        QualityDimension.SPECIFICITY: 0.15,
    },
    "debugging": {
        QualityDimension.CLARITY: 0.15,
        QualityDimension.EFFICIENCY: 0.05,
        QualityDimension.STRUCTURE: 0.10,
        QualityDimension.COMPLETENESS: 0.25,
        QualityDimension.ACTIONABILITY: 0.30,
        QualityDimension.SPECIFICITY: 0.15,
    },
    "default": {
        QualityDimension.CLARITY: 0.20,
        QualityDimension.EFFICIENCY: 0.10,
        QualityDimension.STRUCTURE: 0.15,
        QualityDimension.COMPLETENESS: 0.20,
        QualityDimension.ACTIONABILITY: 0.20,
        QualityDimension.SPECIFICITY: 0.15,
    },
}

_WEIGHT_ROWS = {
    PromptIntent.CODE_GENERATION: "code-generation",
    PromptIntent.PLANNING: "planning",
    PromptIntent.PRD_GENERATION: "planning",
    PromptIntent.DEBUGGING: "debugging",
}

STRENGTH_THRESHOLD = 85

STRENGTHS = {
    QualityDimension.CLARITY: "Clear objective and goals",
    QualityDimension.EFFICIENCY: "Concise and focused",
    QualityDimension.STRUCTURE: "Well-structured with logical flow",
    QualityDimension.COMPLETENESS: "Comprehensive with all necessary details",
    QualityDimension.ACTIONABILITY: "Immediately actionable",
    QualityDimension.SPECIFICITY: "Concrete and specific",
}

EMPTY_PROMPT_ISSUES = [
    "Empty prompt",
    "No objective provided",
    "No requirements or context provided",
]

VAGUE_TERMS = ("something", "somehow", "maybe", "kind of", "sort of", "stuff", "things")
PLEASANTRIES = ("please", "thank you", "thanks", "could you", "would you")
FLUFF_WORDS = ("very", "really", "just", "basically", "simply", "actually", "literally")
REDUNDANT_PHRASES = (
    "in order to", "at this point in time", "due to the fact that",
    "for the purpose of", "in the event that",
)
AMBIGUOUS_TERMS = ("etc", "and so on", "or something", "whatever", "anything")
GENERIC_OBJECTS = ("the code", "my code", "this thing", "stuff", "something", "things", "everything")
DANGLING_REFERENCES = ("it", "this", "that", "they", "these", "those")
IMPERATIVE_VERBS = (
    "create", "build", "implement", "write", "add", "fix", "debug", "refactor",
    "optimize", "explain", "document", "design", "plan", "migrate", "test",
    "review", "generate", "update", "remove", "convert", "analyze", "describe",
    "develop", "make", "improve", "list", "define",
)
TECH_TERMS = (
    "python", "javascript", "typescript", "java", "rust", "go", "php", "ruby",
    "react", "vue", "angular", "django", "flask", "fastapi", "express", "spring",
    "node", "postgres", "mysql", "mongodb", "redis", "sqlite", "kotlin", "swift",
)
STOP_WORDS = frozenset((
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "as", "is", "was", "are", "were", "been",
    "be", "have", "has", "had", "do", "does", "did", "will", "would", "could",
    "should", "may", "might", "can", "this", "that", "these", "those",
))
FILE_PATTERNS = (
    r"\w+\.(py|js|ts|tsx|jsx|java|cpp|c|h|go|rs|rb|php|md|json|yaml|yml|toml|sql)\b",
    r"\b(src|tests?|lib|app)/[\w/]+",
    r"\w+/\w+/[\w/]*",
    r"`[^`]+`",
    r"\b\w+\(\)",
)


@dataclass(frozen=True)
class Check:
    """Outcome of one heuristic. `penalty` applies only when the check failed."""

    passed: bool
    penalty: float
    issue: str


def _check(passed: bool, penalty: float, issue: str) -> Check:
    return Check(passed=passed, penalty=penalty, issue=issue)


def _matches(pattern: str, text: str) -> bool:
    return re.search(pattern, text, re.IGNORECASE | re.MULTILINE) is not None


def _contains_any(lower_text: str, terms) -> List[str]:
    return [t for t in terms if re.search(rf"\b{re.escape(t)}\b", lower_text)]


class QualityAssessor:
    """
    Deterministic, side-effect-free prompt quality scorer.

    Weights come from QUALITY_WEIGHTS and are not adjustable per call.
    """

    def score(self, prompt: str, intent: Optional[IntentAnalysis] = None) -> QualityMetrics:
        """Score a single prompt."""
        return self.assess(prompt, prompt, intent)

    def assess(
        self, original: str, enhanced: str, intent: Optional[IntentAnalysis] = None
    ) -> QualityMetrics:
        """
        Score `enhanced`, listing what changed relative to `original`.

        Args:
            original: Prompt before enrichment
            enhanced: Prompt after enrichment (may equal original)
            intent: Intent analysis; generic checks are used when omitted

        Returns:
            QualityMetrics with every score clamped to [0, 100]
        """
        if not enhanced or not enhanced.strip():
            return QualityMetrics(
                clarity=0, efficiency=0, structure=0, completeness=0,
                actionability=0, specificity=0, overall=0,
                strengths=[], improvements=[], remaining_issues=list(EMPTY_PROMPT_ISSUES),
            )

        primary = intent.primary_intent if intent else None
        checks = self.run_checks(enhanced, primary)

        scores: Dict[QualityDimension, float] = {}
        remaining: List[str] = []
        for dimension, (dimension_checks, bonus) in checks.items():
            penalty = sum(c.penalty for c in dimension_checks if not c.passed)
            scores[dimension] = clamp(100 - penalty + bonus)
            remaining.extend(c.issue for c in dimension_checks if not c.passed)

        overall = self.calculate_overall(scores, primary)
        strengths = [STRENGTHS[d] for d, s in scores.items() if s >= STRENGTH_THRESHOLD]

        return QualityMetrics(
            clarity=scores[QualityDimension.CLARITY],
            efficiency=scores[QualityDimension.EFFICIENCY],
            structure=scores[QualityDimension.STRUCTURE],
            completeness=scores[QualityDimension.COMPLETENESS],
            actionability=scores[QualityDimension.ACTIONABILITY],
            specificity=scores[QualityDimension.SPECIFICITY],
            overall=overall,
            strengths=strengths,
            improvements=self.identify_improvements(original, enhanced),
            remaining_issues=remaining,
        )

    def run_checks(
        self, prompt: str, intent: Optional[PromptIntent]
    ) -> Dict[QualityDimension, Tuple[List[Check], float]]:
        """Evaluate every heuristic; returns (checks, bonus) per dimension."""
        lower = prompt.lower()
        return {
            QualityDimension.CLARITY: (self._clarity_checks(prompt, lower, intent), 0),
            QualityDimension.EFFICIENCY: (self._efficiency_checks(prompt, lower), 0),
            QualityDimension.STRUCTURE: (
                self._structure_checks(lower, intent),
                10 if _matches(r"^#+\s+", prompt) else 0,
            ),
            QualityDimension.COMPLETENESS: (self._completeness_checks(prompt, lower, intent), 0),
            QualityDimension.ACTIONABILITY: (self._actionability_checks(prompt, lower, intent), 0),
            QualityDimension.SPECIFICITY: (self._specificity_checks(prompt, lower), 0),
        }

    def calculate_overall(
        self, scores: Dict[QualityDimension, float], intent: Optional[PromptIntent]
    ) -> float:
        row = QUALITY_WEIGHTS[_WEIGHT_ROWS.get(intent, "default")]
        overall = sum(scores[dimension] * weight for dimension, weight in row.items())
        return round(clamp(overall), 1)

    def _clarity_checks(self, prompt: str, lower: str, intent: Optional[PromptIntent]) -> List[Check]:
        checks = [_check(self.has_objective(prompt), 20, "No explicit objective or goal statement")]

        if intent == PromptIntent.CODE_GENERATION:
            checks.append(_check(self.has_tech_stack(lower), 15, "No language or framework specified"))
            checks.append(_check(
                _matches(r"output|return|result|format|structure|response", prompt),
                15,
                "Expected output is not described",
            ))

        checks.append(_check(self.has_success_criteria(prompt), 10, "No success criteria"))

        vague = [t for t in VAGUE_TERMS if t in lower]
        checks.append(_check(
            not vague, 5 * len(vague), f"Vague language: {', '.join(vague)}"
        ))

        first_word = re.sub(r"[^a-z]", "", lower.split()[0]) if lower.split() else ""
        checks.append(_check(
            first_word not in DANGLING_REFERENCES,
            10,
            f"Starts with an unresolved reference ('{first_word}')",
        ))
        return checks

    def _efficiency_checks(self, prompt: str, lower: str) -> List[Check]:
        pleasantries = [p for p in PLEASANTRIES if p in lower]
        fluff = _contains_any(lower, FLUFF_WORDS)
        redundant = [p for p in REDUNDANT_PHRASES if p in lower]

        words = prompt.split()
        signal_words = [w for w in lower.split() if w not in STOP_WORDS and len(w) > 2]
        ratio = len(signal_words) / len(words) if words else 0

        return [
            _check(not pleasantries, 5 * len(pleasantries), f"Pleasantries add noise: {', '.join(pleasantries)}"),
            _check(not fluff, 3 * len(fluff), f"Filler words: {', '.join(fluff)}"),
            _check(not redundant, 5 * len(redundant), f"Redundant phrasing: {', '.join(redundant)}"),
            _check(ratio >= 0.6, 30, "Low signal-to-noise ratio"),
            _check(ratio < 0.6 or ratio >= 0.75, 15, "Moderate signal-to-noise ratio"),
        ]

    def _structure_checks(self, lower: str, intent: Optional[PromptIntent]) -> List[Check]:
        has_context = any(k in lower for k in ("context", "background", "currently"))
        has_requirements = any(k in lower for k in ("requirement", "need", "should", "must"))
        has_output = any(k in lower for k in ("output", "result", "deliverable", "expected"))

        checks = []
        if intent != PromptIntent.REFINEMENT:
            checks.append(_check(has_context, 20, "No context or background section"))
        checks.append(_check(has_requirements, 25, "No explicit requirements"))
        checks.append(_check(has_output, 15, "No expected output section"))
        return checks

    def _completeness_checks(self, prompt: str, lower: str, intent: Optional[PromptIntent]) -> List[Check]:
        if intent == PromptIntent.CODE_GENERATION:
            return [
                _check(self.has_tech_stack(lower), 20, "Missing technology stack"),
                _check(_matches(r"input|output|parameter|argument|return", prompt), 20,
                       "Inputs and outputs are not described"),
                _check(_matches(r"edge case|empty|null|zero|negative|invalid|error", prompt), 10,
                       "Edge cases are not mentioned"),
                _check(self.has_constraints(prompt), 10, "No constraints specified"),
            ]
        if intent in (PromptIntent.PLANNING, PromptIntent.PRD_GENERATION):
            return [
                _check(_matches(r"problem|issue|challenge|currently|pain point", prompt), 25,
                       "No problem statement"),
                _check(_matches(r"goal|objective|aim|purpose|achieve|accomplish", prompt), 25,
                       "No goal defined"),
                _check(self.has_constraints(prompt), 15, "No constraints specified"),
            ]
        if intent == PromptIntent.DEBUGGING:
            return [
                _check("error" in lower, 20, "Error message is not included"),
                _check(_matches(r"expected|should|supposed to|intended", prompt), 15,
                       "Expected behavior is not described"),
                _check(_matches(r"actual|currently|instead|but|however|getting", prompt), 15,
                       "Actual behavior is not described"),
            ]
        return [
            _check(self.has_constraints(prompt), 15, "No constraints specified"),
            _check(self.has_success_criteria(prompt), 15, "No way to verify the result"),
        ]

    def _actionability_checks(self, prompt: str, lower: str, intent: Optional[PromptIntent]) -> List[Check]:
        ambiguous = _contains_any(lower, AMBIGUOUS_TERMS)
        question_count = prompt.count("?")
        first_word = re.sub(r"[^a-z]", "", lower.split()[0]) if lower.split() else ""

        checks = [
            _check(not ambiguous, 10 * len(ambiguous), f"Ambiguous terms: {', '.join(ambiguous)}"),
            _check(
                first_word in IMPERATIVE_VERBS or self.has_objective(prompt),
                10,
                "Does not open with a concrete action",
            ),
        ]
        if intent == PromptIntent.CODE_GENERATION:
            checks.append(_check(self.has_examples(prompt), 15, "No concrete examples"))
        checks.append(_check(self.has_success_criteria(prompt), 20, "No clear success criteria"))
        checks.append(_check(
            question_count <= 3, 5 * question_count, f"Too many open questions ({question_count})"
        ))
        return checks

    def _specificity_checks(self, prompt: str, lower: str) -> List[Check]:
        generic = [g for g in GENERIC_OBJECTS if re.search(rf"\b{re.escape(g)}\b", lower)]
        return [
            _check(re.search(r"\d", prompt) is not None, 20, "No concrete numbers, sizes or limits"),
            _check(self.mentions_files(prompt), 15, "No specific files, paths or identifiers"),
            _check(self.has_tech_stack(lower), 20, "No technology named"),
            _check(not generic, min(30, 10 * len(generic)), f"Generic references: {', '.join(generic)}"),
        ]

    def identify_improvements(self, original: str, enhanced: str) -> List[str]:
        """Describe what enrichment added, in the order it appears."""
        if original == enhanced:
            return []

        improvements = []
        if len(enhanced) > len(original) * 1.2:
            improvements.append("Added missing context and specifications")

        original_headings = set(self._headings(original))
        for heading in self._headings(enhanced):
            if heading not in original_headings:
                improvements.append(f"Added section: {heading}")

        if len(enhanced) < len(original):
            improvements.append("Removed unnecessary wording")
        return improvements

    @staticmethod
    def _headings(text: str) -> List[str]:
        headings = re.findall(r"^#+\s+(.+?)\s*$", text, re.MULTILINE)
        headings += re.findall(r"^\*\*([^*]+?):?\*\*", text, re.MULTILINE)
        return headings

    # Shared detectors

    @staticmethod
    def has_objective(prompt: str) -> bool:
        return _matches(r"objective|goal|purpose|need to|want to|^#+\s*objective", prompt)

    @staticmethod
    def has_tech_stack(lower: str) -> bool:
        return bool(_contains_any(lower, TECH_TERMS))

    @staticmethod
    def has_success_criteria(prompt: str) -> bool:
        return _matches(r"success|criteria|metric|measure|test|verify|validate", prompt)

    @staticmethod
    def has_constraints(prompt: str) -> bool:
        return _matches(r"constraint|limit|must not|cannot|within|maximum|minimum", prompt)

    @staticmethod
    def has_examples(prompt: str) -> bool:
        return _matches(r"example|for instance|such as|e\.g\.|```", prompt)

    @staticmethod
    def mentions_files(prompt: str) -> bool:
        return any(re.search(p, prompt, re.IGNORECASE) for p in FILE_PATTERNS)


def assess_quality(prompt: str, intent: Optional[IntentAnalysis] = None) -> QualityMetrics:
    """
    Quick quality assessment for a prompt.

    Args:
        prompt: Prompt to score
        intent: Optional intent analysis

    Returns:
        QualityMetrics
    """
    return QualityAssessor().score(prompt, intent)
