"""
Prerequisite Identifier - list what must be in place before the task can start.
"""

import re
from typing import Dict, List, Tuple

from pydantic import Field

from ..types import ImpactLevel, PatternContext, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern, PatternInfo, PatternSettings, bullet_list, has_section

PREREQUISITES_HEADING = re.compile(r"^#+\s*prerequisites", re.I | re.M)

PREREQUISITE_INDICATORS = (
    "prerequisite", "requirements:", "depends on", "dependency", "requires",
    "before starting", "first ensure", "make sure", "assuming", "given that",
    "setup:", "installation:", "configuration:",
)

PER_TECHNOLOGY = 2

# Checked in order.
TECHNOLOGIES: Tuple[Tuple[str, "re.Pattern[str]", Tuple[str, ...]], ...] = (
    (
        "react",
        re.compile(r"\b(react|jsx|tsx|component|hook|useState|useEffect)\b", re.I),
        (
            "Node.js >= 16.x installed",
            "npm or yarn package manager",
            "React project initialized (create-react-app, Vite, or Next.js)",
            "TypeScript configured (if using TS)",
        ),
    ),
    (
        "node",
        re.compile(r"\b(node|express|koa|fastify|npm|yarn|pnpm)\b", re.I),
        ("Node.js >= 16.x installed", "npm/yarn/pnpm package manager", "package.json initialized"),
    ),
    (
        "typescript",
        re.compile(r"\b(typescript|ts|tsx|type|interface)\b", re.I),
        ("TypeScript installed", "tsconfig.json configured", "Build tooling setup (tsc, esbuild, swc)"),
    ),
    (
        "database",
        re.compile(r"\b(database|db|sql|postgres|mysql|mongo|redis|prisma|sequelize)\b", re.I),
        (
            "Database server running",
            "Database connection credentials",
            "Database client/ORM installed",
            "Schema/migrations up to date",
        ),
    ),
    (
        "api",
        re.compile(r"\b(api|rest|graphql|endpoint|fetch|axios|http)\b", re.I),
        (
            "API endpoint accessible",
            "Authentication tokens/keys available",
            "API documentation available",
            "Rate limits understood",
        ),
    ),
    (
        "testing",
        re.compile(r"\b(test|jest|vitest|mocha|cypress|playwright|pytest)\b", re.I),
        (
            "Test framework installed",
            "Test configuration files present",
            "Test database/mocks available",
        ),
    ),
    (
        "docker",
        re.compile(r"\b(docker|container|kubernetes|k8s|compose)\b", re.I),
        (
            "Docker installed and running",
            "Docker Compose (if using)",
            "Container registry access (if pulling images)",
        ),
    ),
    (
        "aws",
        re.compile(r"\b(aws|s3|lambda|ec2|dynamodb|cloudformation)\b", re.I),
        ("AWS CLI installed and configured", "IAM credentials with appropriate permissions", "AWS SDK installed"),
    ),
    (
        "git",
        re.compile(r"\b(git|commit|branch|merge|pull request|pr)\b", re.I),
        (
            "Git installed",
            "Repository cloned",
            "Correct branch checked out",
            "No uncommitted changes (or staged appropriately)",
        ),
    ),
)

INTENT_PREREQUISITES: Dict[PromptIntent, Tuple[str, ...]] = {
    PromptIntent.CODE_GENERATION: (
        "Development environment set up",
        "Required dependencies installed",
        "Coding standards/style guide available",
    ),
    PromptIntent.MIGRATION: (
        "Backup of existing data/code",
        "Migration plan documented",
        "Rollback strategy defined",
        "Downtime window scheduled (if applicable)",
    ),
    PromptIntent.TESTING: (
        "Code to be tested is implemented",
        "Test data/fixtures available",
        "CI/CD pipeline configured (for automated tests)",
    ),
    PromptIntent.DEBUGGING: (
        "Bug is reproducible",
        "Relevant logs available",
        "Debug tools configured",
        "Access to failing environment",
    ),
    PromptIntent.PLANNING: (
        "Requirements documented",
        "Stakeholder input collected",
        "Timeline/constraints known",
    ),
}


class PrerequisiteSettings(PatternSettings):
    max_prerequisites: int = Field(default=8, ge=1, le=15)
    max_technologies: int = Field(default=3, ge=1, le=5)


class PrerequisiteIdentifier(BasePattern):
    info = PatternInfo(
        id="prerequisite-identifier",
        name="Prerequisite Identifier",
        description="Identifies and documents prerequisites and dependencies for task execution",
        applicable_intents=frozenset(INTENT_PREREQUISITES),
        mode="deep",
        priority=6,
    )
    settings_model = PrerequisiteSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        original = context.original_prompt
        if PREREQUISITES_HEADING.search(prompt) or has_section(original, PREREQUISITE_INDICATORS):
            return self.skip(prompt, QualityDimension.COMPLETENESS, "Prerequisites already specified")

        intent = context.intent.primary_intent
        technologies = self.detect_technologies(original)
        prerequisites = self.collect(intent, technologies)
        if not prerequisites:
            return self.skip(prompt, QualityDimension.COMPLETENESS, "No specific prerequisites detected")

        section = (
            "## Prerequisites\n\n"
            f"Before starting this task, ensure:\n{bullet_list(prerequisites, checkbox=True)}\n\n"
            "**Note**: Check prerequisites to avoid blockers during implementation."
        )
        return self.enhance(
            f"{prompt.rstrip()}\n\n{section}",
            QualityDimension.COMPLETENESS,
            f"Added {len(prerequisites)} prerequisites for {', '.join(technologies) or intent.value}",
            ImpactLevel.MEDIUM,
        )

    @staticmethod
    def detect_technologies(prompt: str) -> List[str]:
        return [name for name, regex, _ in TECHNOLOGIES if regex.search(prompt)]

    def collect(self, intent: PromptIntent, technologies: List[str]) -> List[str]:
        items = list(INTENT_PREREQUISITES.get(intent, ()))
        by_name = {name: prerequisites for name, _, prerequisites in TECHNOLOGIES}
        for technology in technologies[: self.settings.max_technologies]:
            items.extend(by_name[technology][:PER_TECHNOLOGY])
        return list(dict.fromkeys(items))[: self.settings.max_prerequisites]
