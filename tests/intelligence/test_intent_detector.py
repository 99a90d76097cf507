"""
Unit tests for IntentDetector.
"""

import pytest

from clavix.intelligence import IntentDetector, OptimizationMode, PromptIntent, detect_intent


class TestIntentDetector:
    """Test suite for IntentDetector class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.detector = IntentDetector()

    @pytest.mark.parametrize("prompt", ["", "   ", "\n\t"])
    def test_empty_prompt(self, prompt):
        """Empty input defaults to code-generation with zero confidence and a deep suggestion."""
        result = self.detector.analyze(prompt)
        assert result.primary_intent == PromptIntent.CODE_GENERATION
        assert result.confidence == 0
        assert result.suggested_mode == OptimizationMode.DEEP
        assert not result.characteristics.has_code_context
        assert not result.characteristics.has_technical_terms
        assert not result.characteristics.is_open_ended
        assert not result.characteristics.needs_structure

    def test_no_signal_defaults_to_code_generation(self):
        result = self.detector.analyze("hello there")
        assert result.primary_intent == PromptIntent.CODE_GENERATION
        assert result.confidence == 50

    def test_code_generation(self):
        result = self.detector.analyze("Create a login page")
        assert result.primary_intent == PromptIntent.CODE_GENERATION
        assert result.confidence == 100

    def test_debugging(self):
        result = self.detector.analyze("Fix the error when saving drafts")
        assert result.primary_intent == PromptIntent.DEBUGGING

    def test_planning_question(self):
        result = self.detector.analyze("How should I design the architecture for a chat app?")
        assert result.primary_intent == PromptIntent.PLANNING
        assert result.characteristics.is_open_ended
        assert result.characteristics.needs_structure
        assert result.suggested_mode == OptimizationMode.DEEP

    def test_testing(self):
        result = self.detector.analyze("Write unit tests for the parser")
        assert result.primary_intent == PromptIntent.TESTING

    def test_migration(self):
        result = self.detector.analyze("Migrate from Python 2 to Python 3")
        assert result.primary_intent == PromptIntent.MIGRATION

    def test_security_review(self):
        result = self.detector.analyze("Do a security audit for sql injection in the login form")
        assert result.primary_intent == PromptIntent.SECURITY_REVIEW

    def test_prd_generation(self):
        result = self.detector.analyze("Write a PRD with product requirements for the billing revamp")
        assert result.primary_intent == PromptIntent.PRD_GENERATION

    def test_tie_goes_to_earlier_declared_intent(self):
        """documentation and learning both score 10; documentation is declared first."""
        result = self.detector.analyze("explain and learn")
        assert result.primary_intent == PromptIntent.DOCUMENTATION
        assert result.confidence == 60

    def test_negation_halves_a_hit(self):
        prompt = "please don't test this"
        index = prompt.find("test")
        assert self.detector._apply_negation(prompt, index, 10) == 5
        assert self.detector._apply_negation("please test this", 7, 10) == 10

    def test_confidence_is_bounded(self):
        for prompt in ("Create a login page", "fix bug", "explain and learn", "???"):
            assert 0 <= self.detector.analyze(prompt).confidence <= 100

    def test_code_context(self):
        assert self.detector.has_code_context("Why does `parse()` fail?")
        assert self.detector.has_code_context("def load(path): pass")
        assert not self.detector.has_code_context("Make the page load faster")

    def test_technical_terms_are_whole_words(self):
        assert self.detector.has_technical_terms("call the rest api")
        assert not self.detector.has_technical_terms("take a restful break")

    def test_open_ended(self):
        assert self.detector.is_open_ended("What is the best cache here")
        assert self.detector.is_open_ended("Maybe add retries")
        assert not self.detector.is_open_ended("Add retries to the HTTP client")

    def test_needs_structure(self):
        assert self.detector.needs_structure("Add retries", PromptIntent.CODE_GENERATION)
        assert self.detector.needs_structure("Anything", PromptIntent.PLANNING)
        assert not self.detector.needs_structure(
            "The goal is a client that must retry within 5 seconds", PromptIntent.CODE_GENERATION
        )

    def test_deterministic(self):
        prompt = "Refactor this component to make it faster"
        assert self.detector.analyze(prompt) == self.detector.analyze(prompt)

    def test_classify_alias(self):
        prompt = "Write documentation for the API"
        assert self.detector.classify(prompt) == self.detector.analyze(prompt)

    def test_to_dict(self):
        data = self.detector.analyze("Create a login page").to_dict()
        assert data["primaryIntent"] == "code-generation"
        assert data["confidence"] == 100
        assert data["confidenceCategory"] == "very-high"
        assert set(data["characteristics"]) == {
            "hasCodeContext", "hasTechnicalTerms", "isOpenEnded", "needsStructure"
        }


def test_detect_intent_helper():
    """Test convenience function."""
    assert detect_intent("Write unit tests for the parser").primary_intent == PromptIntent.TESTING
