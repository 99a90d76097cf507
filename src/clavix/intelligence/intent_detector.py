"""
Intent Detector - Classify a prompt into a primary task category.

Each intent owns a battery of detectors:
- Strong phrases: +20 votes each
- Medium keywords: +10 votes each
- Weak keywords: +5 votes each (whole words only)
- Context bonuses (code snippets, questions, technical or performance terms)

A hit preceded by a negation ("don't", "without", ...) counts half.
The intent with the most votes wins; ties go to the intent declared first
in PromptIntent.
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, Tuple

from .confidence import apply_competition_penalty, ratio_confidence
from .types import IntentAnalysis, IntentCharacteristics, OptimizationMode, PromptIntent

logger = logging.getLogger(__name__)

STRONG_WEIGHT = 20
MEDIUM_WEIGHT = 10
WEAK_WEIGHT = 5
NEGATION_WINDOW = 20


@dataclass(frozen=True)
class KeywordBattery:
    strong: Tuple[str, ...] = ()
    medium: Tuple[str, ...] = ()
    weak: Tuple[str, ...] = ()


class IntentDetector:
    """
    Weighted keyword classifier for prompt intent.

    Stateless: a single instance can be shared across any number of calls.
    """

    BATTERIES: Dict[PromptIntent, KeywordBattery] = {
        PromptIntent.CODE_GENERATION: KeywordBattery(
            strong=(
                "create function", "build component", "implement feature", "add endpoint",
                "write class", "develop api", "generate code", "build a", "create a new",
            ),
            medium=(
                "function", "class", "component", "api", "endpoint", "database",
                "implement", "build", "create", "write", "code", "develop", "page",
            ),
            weak=(
                "react", "vue", "angular", "python", "javascript", "typescript",
                "java", "rust", "go", "php", "ruby", "swift", "kotlin", "system", "feature",
            ),
        ),
        PromptIntent.PLANNING: KeywordBattery(
            strong=(
                "how should i", "what's the best way", "what is the best way", "pros and cons",
                "architecture for", "design pattern", "system design", "should i use",
                "help me choose", "design the database", "plan the", "roadmap for",
            ),
            medium=(
                "plan", "design", "architect", "strategy", "approach", "structure",
                "organize", "layout", "workflow", "milestone",
            ),
        ),
        PromptIntent.REFINEMENT: KeywordBattery(
            strong=(
                "make it faster", "speed up", "reduce time", "optimize performance",
                "clean up code", "refactor this", "improve efficiency", "make this component",
                "make it more", "enhance the", "update the styling", "more reusable", "more modern",
            ),
            medium=(
                "improve", "optimize", "refactor", "enhance", "better", "faster",
                "cleaner", "simplify", "reduce", "increase",
            ),
        ),
        PromptIntent.DEBUGGING: KeywordBattery(
            strong=(
                "fix error", "debug issue", "doesn't work", "throws error", "not working",
                "returns null", "undefined error", "stack trace", "error message",
                "causing this bug", "how do i fix", "fix this error", "resolve the",
                "memory leak", "not rendering", "why is my",
            ),
            medium=(
                "fix", "debug", "error", "bug", "issue", "problem", "failing",
                "broken", "crash", "exception", "incorrect", "wrong",
            ),
        ),
        PromptIntent.DOCUMENTATION: KeywordBattery(
            strong=(
                "explain how", "walk me through", "how does this work", "show me how",
                "document this", "describe how", "what does this do", "write documentation",
                "create documentation", "add documentation", "api documentation", "add comments",
            ),
            medium=(
                "explain", "document", "describe", "clarify", "comment",
                "documentation", "guide", "tutorial", "readme",
            ),
        ),
        PromptIntent.PRD_GENERATION: KeywordBattery(
            strong=(
                "product requirements", "requirements document", "write a prd", "create a prd",
                "user stories for", "product spec",
            ),
            medium=("prd", "stakeholder", "stakeholders", "persona", "kpi", "launch"),
        ),
        PromptIntent.TESTING: KeywordBattery(
            strong=(
                "write tests", "unit test", "unit tests", "integration test", "test coverage",
                "test suite", "e2e test", "test cases for",
            ),
            medium=("test", "tests", "testing", "coverage", "assert", "mock", "pytest", "jest"),
        ),
        PromptIntent.MIGRATION: KeywordBattery(
            strong=("migrate from", "migrate to", "upgrade from", "port to", "move from"),
            medium=("migrate", "migration", "upgrade", "legacy", "deprecated", "convert"),
        ),
        PromptIntent.SECURITY_REVIEW: KeywordBattery(
            strong=(
                "security review", "security audit", "penetration test", "owasp",
                "sql injection", "xss", "vulnerability scan",
            ),
            medium=("security", "vulnerability", "vulnerabilities", "exploit", "injection", "csrf"),
        ),
        PromptIntent.LEARNING: KeywordBattery(
            strong=("teach me", "help me understand", "what is a", "explain the concept", "eli5"),
            medium=("learn", "learning", "concept", "beginner", "understand"),
        ),
    }

    NEGATION_WORDS = ("don't", "dont", "not", "avoid", "without", "never", "no")

    TECHNICAL_TERMS = (
        "api", "database", "sql", "rest", "graphql", "jwt", "authentication",
        "middleware", "framework", "library", "npm", "docker", "aws", "frontend",
        "backend", "microservice", "microservices", "kubernetes", "oauth",
    )

    PERFORMANCE_TERMS = (
        "performance", "speed", "fast", "slow", "optimize", "latency",
        "throughput", "memory", "cpu", "load time", "response time",
    )

    QUESTION_WORDS = ("how", "what", "why", "when", "where", "which", "should")
    HEDGE_PHRASES = ("help me", "i need", "not sure", "maybe", "somehow", "might", "perhaps")

    CODE_PATTERNS = (
        r"function\s+\w+\s*\(",
        r"class\s+\w+",
        r"const\s+\w+\s*=",
        r"let\s+\w+\s*=",
        r"var\s+\w+\s*=",
        r"def\s+\w+\s*\(",
        r"import\s+\w+",
        r"<\w+>",
        r"\w+\.\w+\(",
    )

    def analyze(self, prompt: str) -> IntentAnalysis:
        """
        Classify a prompt.

        Args:
            prompt: Raw prompt text (may be empty)

        Returns:
            IntentAnalysis; never raises
        """
        if not prompt or not prompt.strip():
            return IntentAnalysis(
                primary_intent=PromptIntent.CODE_GENERATION,
                confidence=0,
                characteristics=IntentCharacteristics(),
                suggested_mode=OptimizationMode.DEEP,
            )

        lower_prompt = prompt.lower()
        scores = {
            intent: self._score_intent(lower_prompt, prompt, intent)
            for intent in PromptIntent
        }

        primary_intent = self._select_primary_intent(scores)
        confidence = self._calculate_confidence(scores, primary_intent)

        characteristics = IntentCharacteristics(
            has_code_context=self.has_code_context(prompt),
            has_technical_terms=self.has_technical_terms(lower_prompt),
            is_open_ended=self.is_open_ended(prompt),
            needs_structure=self.needs_structure(prompt, primary_intent),
        )

        logger.debug(
            "Intent scores: %s -> %s (%d%%)",
            {i.value: s for i, s in scores.items() if s},
            primary_intent.value,
            confidence,
        )

        return IntentAnalysis(
            primary_intent=primary_intent,
            confidence=confidence,
            characteristics=characteristics,
            suggested_mode=self._suggest_mode(
                primary_intent, characteristics, len(prompt), confidence
            ),
        )

    def classify(self, prompt: str) -> IntentAnalysis:
        """Alias of analyze()."""
        return self.analyze(prompt)

    def _score_intent(self, lower_prompt: str, prompt: str, intent: PromptIntent) -> int:
        battery = self.BATTERIES[intent]
        score = 0

        for phrase in battery.strong:
            index = lower_prompt.find(phrase)
            if index != -1:
                score += self._apply_negation(lower_prompt, index, STRONG_WEIGHT)

        for keyword in battery.medium:
            match = re.search(rf"\b{re.escape(keyword)}", lower_prompt)
            if match:
                score += self._apply_negation(lower_prompt, match.start(), MEDIUM_WEIGHT)

        for keyword in battery.weak:
            if re.search(rf"\b{re.escape(keyword)}\b", lower_prompt):
                score += WEAK_WEIGHT

        return score + self._context_bonus(lower_prompt, prompt, intent)

    def _apply_negation(self, lower_prompt: str, index: int, base: int) -> int:
        before = lower_prompt[max(0, index - NEGATION_WINDOW):index]
        for negation in self.NEGATION_WORDS:
            if re.search(rf"\b{re.escape(negation)}\b", before):
                return int(round(base * 0.5))
        return base

    def _context_bonus(self, lower_prompt: str, prompt: str, intent: PromptIntent) -> int:
        bonus = 0
        if intent in (PromptIntent.DEBUGGING, PromptIntent.REFINEMENT) and self.has_code_context(prompt):
            bonus += 15
        if intent in (PromptIntent.PLANNING, PromptIntent.DOCUMENTATION, PromptIntent.LEARNING) and "?" in prompt:
            bonus += 10
        if intent == PromptIntent.CODE_GENERATION and self.has_technical_terms(lower_prompt):
            bonus += 5
        if intent == PromptIntent.REFINEMENT and self._has_performance_terms(lower_prompt):
            bonus += 10
        return bonus

    def _select_primary_intent(self, scores: Dict[PromptIntent, int]) -> PromptIntent:
        # max() keeps the first maximal element, and dicts iterate in
        # PromptIntent declaration order.
        return max(scores, key=lambda intent: scores[intent])

    def _calculate_confidence(self, scores: Dict[PromptIntent, int], primary: PromptIntent) -> int:
        primary_score = scores[primary]
        total = sum(scores.values())
        if total == 0:
            return 50

        confidence = ratio_confidence(primary_score, total)
        runner_up = max(score for intent, score in scores.items() if intent != primary)
        return apply_competition_penalty(confidence, primary_score, runner_up)

    def has_code_context(self, prompt: str) -> bool:
        if "`" in prompt:
            return True
        return any(re.search(pattern, prompt) for pattern in self.CODE_PATTERNS)

    def has_technical_terms(self, lower_prompt: str) -> bool:
        return any(re.search(rf"\b{re.escape(term)}\b", lower_prompt) for term in self.TECHNICAL_TERMS)

    def _has_performance_terms(self, lower_prompt: str) -> bool:
        return any(term in lower_prompt for term in self.PERFORMANCE_TERMS)

    def is_open_ended(self, prompt: str) -> bool:
        lower_prompt = prompt.strip().lower()
        starts_with_question = any(
            re.match(rf"{word}\b", lower_prompt) for word in self.QUESTION_WORDS
        )
        has_hedge = any(re.search(rf"\b{re.escape(p)}\b", lower_prompt) for p in self.HEDGE_PHRASES)
        return starts_with_question or "?" in prompt or has_hedge

    def needs_structure(self, prompt: str, intent: PromptIntent) -> bool:
        if intent in (PromptIntent.PLANNING, PromptIntent.PRD_GENERATION):
            return True

        has_objective = re.search(r"objective|goal|purpose|need to|want to", prompt, re.I) is not None
        has_requirements = re.search(r"requirement|must|should|need|expect", prompt, re.I) is not None
        has_constraints = re.search(r"constraint|limit|within|must not|cannot", prompt, re.I) is not None

        return sum([has_objective, has_requirements, has_constraints]) < 2

    def _suggest_mode(
        self,
        intent: PromptIntent,
        characteristics: IntentCharacteristics,
        prompt_length: int,
        confidence: int,
    ) -> OptimizationMode:
        if confidence < 60:
            return OptimizationMode.DEEP
        if intent in (PromptIntent.PLANNING, PromptIntent.PRD_GENERATION):
            return OptimizationMode.DEEP
        if characteristics.is_open_ended and not characteristics.has_code_context:
            return OptimizationMode.DEEP
        if prompt_length < 50 and characteristics.needs_structure:
            return OptimizationMode.DEEP
        return OptimizationMode.FAST


def detect_intent(prompt: str) -> IntentAnalysis:
    """
    Quick intent detection for a prompt.

    Args:
        prompt: Prompt to analyze

    Returns:
        IntentAnalysis
    """
    return IntentDetector().analyze(prompt)
