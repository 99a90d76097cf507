"""
Domain Context Enricher - append best practices for the technical domains a prompt touches.
"""

import re
from typing import List, Tuple

from pydantic import Field

from ..types import ImpactLevel, PatternContext, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern, PatternInfo, PatternSettings, bullet_list

DOMAIN_HEADING = re.compile(r"^#+\s*domain best practices", re.I | re.M)

# Checked in order; the first `max_domains` matches are used.
DOMAINS: Tuple[Tuple[str, "re.Pattern[str]", Tuple[str, ...]], ...] = (
    (
        "authentication",
        re.compile(
            r"\b(auth|login|logout|session|token|jwt|oauth|password|credential|sign.?in|sign.?up|register)\b", re.I
        ),
        (
            "Never store plain-text passwords - use bcrypt/argon2",
            "Implement rate limiting on auth endpoints",
            "Use secure, httpOnly cookies for session tokens",
            "Implement proper CORS configuration",
            "Add CSRF protection for state-changing operations",
            "Log authentication events for security auditing",
        ),
    ),
    (
        "api",
        re.compile(r"\b(api|rest|graphql|endpoint|route|controller|middleware)\b", re.I),
        (
            "Use consistent response formats (JSON:API or HAL)",
            "Implement proper HTTP status codes",
            "Version your API (URL path or header)",
            "Add request validation/sanitization",
            "Document API with OpenAPI/Swagger",
            "Implement proper error responses with codes",
        ),
    ),
    (
        "database",
        re.compile(r"\b(database|db|query|schema|model|orm|prisma|sequelize|migration|table|index)\b", re.I),
        (
            "Use parameterized queries to prevent SQL injection",
            "Create indexes for frequently queried columns",
            "Implement proper connection pooling",
            "Use transactions for multi-step operations",
            "Design for data integrity with constraints",
            "Plan for database migrations and versioning",
        ),
    ),
    (
        "frontend",
        re.compile(r"\b(component|ui|ux|form|button|input|modal|layout|style|css|react|vue|angular|svelte)\b", re.I),
        (
            "Follow WCAG accessibility guidelines",
            "Implement responsive design",
            "Use semantic HTML elements",
            "Handle loading and error states",
            "Optimize for performance (lazy loading, code splitting)",
            "Support keyboard navigation",
        ),
    ),
    (
        "testing",
        re.compile(r"\b(test|spec|mock|stub|fixture|assertion|coverage|e2e|unit|integration)\b", re.I),
        (
            "Follow AAA pattern (Arrange, Act, Assert)",
            "Keep tests isolated and independent",
            "Use meaningful test descriptions",
            "Mock external dependencies appropriately",
            "Aim for high coverage of critical paths",
            "Write both unit and integration tests",
        ),
    ),
    (
        "performance",
        re.compile(r"\b(performance|optimize|fast|slow|latency|cache|memory|cpu|benchmark|profile)\b", re.I),
        (
            "Measure before optimizing (profile first)",
            "Implement caching at appropriate levels",
            "Use pagination for large datasets",
            "Optimize database queries (EXPLAIN, indexes)",
            "Consider lazy loading for heavy resources",
            "Set appropriate timeouts and circuit breakers",
        ),
    ),
    (
        "security",
        re.compile(r"\b(security|secure|vulnerability|xss|csrf|injection|sanitize|encrypt|decrypt|audit)\b", re.I),
        (
            "Validate and sanitize all user input",
            "Use prepared statements for database queries",
            "Implement Content Security Policy (CSP)",
            "Keep dependencies updated and audited",
            "Use HTTPS for all communications",
            "Follow principle of least privilege",
        ),
    ),
    (
        "async",
        re.compile(r"\b(async|await|promise|callback|event|queue|worker|background|concurrent)\b", re.I),
        (
            "Handle task failures and rejections explicitly",
            "Prefer async/await over raw callbacks",
            "Implement proper error propagation",
            "Consider race conditions in concurrent code",
            "Bound queues and worker pools",
            "Implement proper cleanup for long-running operations",
        ),
    ),
    (
        "deployment",
        re.compile(r"\b(deploy|ci|cd|pipeline|docker|kubernetes|container|cloud|aws|azure|gcp)\b", re.I),
        (
            "Use environment variables for configuration",
            "Implement health checks and readiness checks",
            "Set up proper logging and monitoring",
            "Use immutable deployments",
            "Plan for rollback scenarios",
            "Implement proper secrets management",
        ),
    ),
)


class DomainContextSettings(PatternSettings):
    max_domains: int = Field(default=2, ge=1, le=4)
    practices_per_domain: int = Field(default=3, ge=1, le=6)


class DomainContextEnricher(BasePattern):
    info = PatternInfo(
        id="domain-context-enricher",
        name="Domain Context Enricher",
        description="Adds domain-specific best practices and context",
        applicable_intents=frozenset({
            PromptIntent.CODE_GENERATION,
            PromptIntent.PLANNING,
            PromptIntent.REFINEMENT,
            PromptIntent.DEBUGGING,
            PromptIntent.TESTING,
            PromptIntent.SECURITY_REVIEW,
            PromptIntent.MIGRATION,
        }),
        priority=5,
    )
    settings_model = DomainContextSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if DOMAIN_HEADING.search(prompt):
            return self.skip(prompt, QualityDimension.COMPLETENESS, "Domain best practices already added")

        domains = self.detect_domains(context.original_prompt)
        if not domains:
            return self.skip(prompt, QualityDimension.COMPLETENESS, "No specific domain detected")

        names = ", ".join(name for name, _ in domains)
        practices = [practice for _, domain_practices in domains for practice in domain_practices]
        section = (
            f"## Domain Best Practices ({names})\n\n"
            f"Consider these best practices:\n{bullet_list(practices)}\n\n"
            "**Note**: These are general best practices - adapt to your specific context."
        )
        return self.enhance(
            f"{prompt.rstrip()}\n\n{section}",
            QualityDimension.COMPLETENESS,
            f"Added {len(practices)} best practices for {names}",
            ImpactLevel.MEDIUM,
        )

    def detect_domains(self, prompt: str) -> List[Tuple[str, Tuple[str, ...]]]:
        """Returns up to `max_domains` (name, practices) pairs, practices already trimmed."""
        found = [
            (name, practices[: self.settings.practices_per_domain])
            for name, regex, practices in DOMAINS
            if regex.search(prompt)
        ]
        return found[: self.settings.max_domains]
