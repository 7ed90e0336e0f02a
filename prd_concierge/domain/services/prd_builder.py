"""
PRD assembly and validation.

Assembly is a pure function of the session snapshot: no model calls and no
randomness, so rebuilding the same snapshot yields the same document apart
from ``metadata.generated_at``.
"""

import json
import logging
import re
from datetime import datetime, UTC
from pathlib import Path
from typing import Any, Dict, List, Optional

from jsonschema import Draft7Validator

from prd_concierge.domain.schemas.prd import (
    Constraints,
    Environment,
    FeatureFlags,
    FeatureSpecification,
    PRDDocument,
    PRDMetadata,
    ProjectInfo,
    TechStack,
    ValidationResult,
)
from prd_concierge.domain.schemas.session import AccumulatedContext, ProjectType, Session, TurnRole

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = Path(__file__).resolve().parents[2] / "seed" / "schemas" / "prd_schema.json"

DEFAULT_PROJECT_NAME = "MyProject"
DEFAULT_DESCRIPTION = "A modern web application project"
DOCUMENT_VERSION = "1.0.0"
MAX_KEY_FEATURES = 8
MIN_KEY_FEATURES = 3
MAX_DESCRIPTION_LENGTH = 200

_NAME_CHARS = "A-Za-z0-9\u4e00-\u9fff"
_QUOTES = r"\s\"'《「“"

# Tried in group order against each user turn, earliest turn first.
NAME_PATTERNS: List[List[re.Pattern]] = [
    [
        re.compile(rf"(?:项目|网站|系统|平台|应用)[{_QUOTES}]*([{_NAME_CHARS}]+)"),
        re.compile(
            rf"\b(?:project|site|website|system|platform|app)\s+(?:named|called)\s+[\"'“]?([A-Za-z0-9][\w\-]*)",
            re.IGNORECASE,
        ),
    ],
    [
        re.compile(rf"(?:叫做|命名为|名为)[{_QUOTES}]*([{_NAME_CHARS}]+)"),
        re.compile(r"\b(?:called|named)\s+[\"'“]?([A-Za-z0-9][\w\-]*)", re.IGNORECASE),
    ],
    [
        # Leading identifier such as "TaskFlow: ..." or "shop-app is ...".
        re.compile(r"^([A-Za-z][A-Za-z0-9_\-]*[A-Z0-9_\-][A-Za-z0-9_\-]*)"),
    ],
]

AUDIENCE_BY_TYPE: Dict[ProjectType, str] = {
    ProjectType.BLOG: "Content readers and subscribers",
    ProjectType.ECOMMERCE: "Online shoppers",
    ProjectType.SAAS: "Business users and teams",
    ProjectType.PORTFOLIO: "Potential clients and employers",
    ProjectType.LANDING_PAGE: "Target customers",
    ProjectType.GENERIC: "End users",
}

FEATURE_PHRASES: Dict[str, str] = {
    "auth": "User registration and login",
    "payment": "Online payments",
    "admin": "Admin back office",
    "search": "Search",
    "upload": "File uploads",
    "realtime": "Real-time communication",
    "analytics": "Data analytics",
    "email": "Email notifications",
}

# project type -> (default feature phrase, marker that means it is already covered)
TYPE_DEFAULT_FEATURES: Dict[ProjectType, tuple] = {
    ProjectType.ECOMMERCE: ("Product showcase and shopping cart", "cart"),
    ProjectType.BLOG: ("Article publishing and management", "article"),
    ProjectType.SAAS: ("User dashboard", "dashboard"),
}

FILLER_FEATURES = (
    "Responsive user interface",
    "Data management",
    "User-friendly interactions",
)

FRAMEWORKS = ("Next.js", "React", "Vue.js", "Angular", "Nuxt.js", "Svelte")
DATABASES = ("PostgreSQL", "MySQL", "MongoDB", "SQLite")
UI_LIBRARIES = ("Tailwind CSS", "Bootstrap", "Material UI", "Chakra UI")

DEFAULT_FRAMEWORK_BY_TYPE: Dict[ProjectType, str] = {
    ProjectType.ECOMMERCE: "Next.js",
    ProjectType.SAAS: "Next.js",
    ProjectType.PORTFOLIO: "Next.js",
    ProjectType.BLOG: "Astro",
}

AUTH_IMPLIED = (ProjectType.SAAS, ProjectType.ECOMMERCE)
ADMIN_IMPLIED = (ProjectType.ECOMMERCE, ProjectType.SAAS, ProjectType.BLOG)

FEATURE_SECRETS: Dict[str, str] = {
    "auth": "AUTH_SECRET",
    "payment": "STRIPE_SECRET_KEY",
    "email": "RESEND_API_KEY",
}

CURATED_SPECIFICATIONS: Dict[str, FeatureSpecification] = {
    "auth": FeatureSpecification(
        name="User authentication",
        description="User registration, login and password reset",
        requirements=[
            "Email or username login",
            "Password strength validation",
            "Email verification",
            "Persistent login sessions",
            "Secure password reset flow",
        ],
        dependencies=["Database", "Email service"],
        implementation_notes=[
            "Use NextAuth.js or a similar authentication library",
            "Manage sessions with JWT or server-side sessions",
            "Store passwords hashed, never in plain text",
            "Add CSRF protection",
        ],
    ),
    "payment": FeatureSpecification(
        name="Payment processing",
        description="Online payments with support for several payment methods",
        requirements=[
            "Credit card payments",
            "Payment status tracking",
            "Refund handling",
            "Payment history",
            "Secure checkout flow",
        ],
        dependencies=["Payment gateway API", "Database", "Email notifications"],
        implementation_notes=[
            "Integrate Stripe or another payment provider",
            "Handle provider webhooks",
            "Follow PCI DSS guidance",
            "Retry failed payments",
        ],
    ),
}


# ---------------------------------------------------------------------------
# Pure section builders
# ---------------------------------------------------------------------------

def _user_inputs(session: Session) -> List[str]:
    return [t.content for t in session.turns if t.role == TurnRole.USER]


def _project_type(context: AccumulatedContext) -> ProjectType:
    return context.project_type or ProjectType.GENERIC


def extract_project_name(session: Session) -> Optional[str]:
    """Best-effort project name from user turns, or None."""
    for text in _user_inputs(session):
        for group in NAME_PATTERNS:
            for pattern in group:
                match = pattern.search(text)
                if match and len(match.group(1)) > 1:
                    return match.group(1).strip()
    return None


def extract_description(session: Session) -> str:
    inputs = _user_inputs(session)
    if not inputs:
        return DEFAULT_DESCRIPTION

    for text in inputs:
        if len(text) > 20:
            if len(text) > MAX_DESCRIPTION_LENGTH:
                return text[:MAX_DESCRIPTION_LENGTH] + "..."
            return text

    return inputs[0]


def infer_target_audience(project_type: ProjectType) -> str:
    return AUDIENCE_BY_TYPE.get(project_type, AUDIENCE_BY_TYPE[ProjectType.GENERIC])


def build_key_features(context: AccumulatedContext) -> List[str]:
    """Phrases for detected features, a type default, then filler up to three."""
    features = [FEATURE_PHRASES[tag] for tag in context.detected_features if tag in FEATURE_PHRASES]

    default = TYPE_DEFAULT_FEATURES.get(_project_type(context))
    if default:
        phrase, marker = default
        if not any(marker in f.lower() for f in features):
            features.append(phrase)

    for filler in FILLER_FEATURES:
        if len(features) >= MIN_KEY_FEATURES:
            break
        if filler not in features:
            features.append(filler)

    return features[:MAX_KEY_FEATURES]


def infer_scale(context: AccumulatedContext) -> str:
    team_size = context.constraints.get("team_size")
    if isinstance(team_size, int) and team_size >= 5:
        return "large"
    if context.project_type == ProjectType.SAAS or len(context.detected_features) > 5:
        return "medium"
    return "small"


def _first_preference(context: AccumulatedContext, allowed: tuple) -> Optional[str]:
    for tech in context.tech_preferences:
        if tech in allowed:
            return tech
    return None


def select_framework(context: AccumulatedContext) -> str:
    return (
        _first_preference(context, FRAMEWORKS)
        or DEFAULT_FRAMEWORK_BY_TYPE.get(_project_type(context), "React")
    )


def select_database(context: AccumulatedContext) -> Optional[str]:
    preferred = _first_preference(context, DATABASES)
    if preferred:
        return preferred
    if context.project_type in (ProjectType.ECOMMERCE, ProjectType.SAAS):
        return "PostgreSQL"
    if "auth" in context.detected_features or "payment" in context.detected_features:
        return "PostgreSQL"
    return None


def select_ui_library(context: AccumulatedContext) -> str:
    return _first_preference(context, UI_LIBRARIES) or "Tailwind CSS"


def select_deployment_platform(context: AccumulatedContext) -> str:
    if context.constraints.get("budget") == "low":
        return "Vercel"
    if context.project_type in (ProjectType.SAAS, ProjectType.ECOMMERCE):
        return "AWS"
    return "Vercel"


def select_additional_tools(context: AccumulatedContext) -> List[str]:
    features = context.detected_features
    tools: List[str] = []

    if "auth" in features:
        tools.append("NextAuth.js")
    if "payment" in features:
        tools.append("Stripe")
    if "email" in features:
        tools.append("Resend")
    if "TypeScript" in context.tech_preferences:
        tools.append("TypeScript")
    if "Prisma" in context.tech_preferences:
        tools.append("Prisma ORM")
    if "TypeScript" not in tools:
        tools.append("TypeScript")

    return tools


def build_feature_flags(context: AccumulatedContext) -> FeatureFlags:
    detected = set(context.detected_features)
    return FeatureFlags(
        auth="auth" in detected or context.project_type in AUTH_IMPLIED,
        payment="payment" in detected,
        admin="admin" in detected or context.project_type in ADMIN_IMPLIED,
        search="search" in detected,
        upload="upload" in detected,
        realtime="realtime" in detected,
        analytics="analytics" in detected,
        email="email" in detected,
    )


def generic_specification(feature: str) -> FeatureSpecification:
    """Fallback bundle for a feature with no curated entry."""
    phrase = FEATURE_PHRASES.get(feature, feature.replace("_", " ").capitalize())
    return FeatureSpecification(
        name=phrase,
        description=f"{phrase} for the core user journeys",
        requirements=[
            f"{phrase} works on desktop and mobile",
            "Input validation and clear error states",
            "Covered by automated tests",
        ],
        dependencies=["Frontend framework"],
        implementation_notes=[
            "Prefer a well-maintained library over a custom implementation",
            "Keep the feature behind a clear module boundary",
        ],
    )


def basic_specification(project_type: ProjectType) -> FeatureSpecification:
    return FeatureSpecification(
        name="Core feature module",
        description=f"Core functionality for a {project_type.value} project",
        requirements=[
            "Responsive user interface",
            "Basic data management",
            "User-friendly interactions",
        ],
        dependencies=["Frontend framework", "UI component library"],
        implementation_notes=[
            "Follow current web development practice",
            "Ensure cross-browser compatibility",
            "Optimise page load performance",
        ],
    )


def build_specifications(context: AccumulatedContext) -> List[FeatureSpecification]:
    # Curated bundles are shared, so each document gets its own copy.
    specs = [
        CURATED_SPECIFICATIONS[feature].model_copy(deep=True)
        if feature in CURATED_SPECIFICATIONS
        else generic_specification(feature)
        for feature in context.detected_features
    ]
    if not specs:
        specs.append(basic_specification(_project_type(context)))
    return specs


def build_constraints(context: AccumulatedContext) -> Constraints:
    values = context.constraints
    team_size = values.get("team_size")
    return Constraints(
        budget=values.get("budget"),
        timeline=values.get("timeline"),
        team_size=team_size if isinstance(team_size, int) else None,
        complexity_preference=values.get("complexity_preference"),
    )


def build_environment(context: AccumulatedContext, database: Optional[str]) -> Environment:
    variables = {"NODE_ENV": "production", "APP_URL": "http://localhost:3000"}
    if database:
        variables["DATABASE_URL"] = f"<{database} connection string>"

    secrets = ["APP_SECRET"]
    for feature, secret in FEATURE_SECRETS.items():
        if feature in context.detected_features:
            secrets.append(secret)

    return Environment(variables=variables, secrets=secrets)


def build_next_steps(context: AccumulatedContext) -> List[str]:
    steps = ["Set up the project scaffold"]
    if "auth" in context.detected_features:
        steps.append("Implement user authentication")
    if "payment" in context.detected_features:
        steps.append("Integrate payments")
    steps.extend([
        "Implement the core feature modules",
        "Build the user interface",
        "Write tests",
        "Deploy to production",
    ])
    return steps


def clamp_confidence(session_score: int) -> int:
    return min(95, max(60, session_score + 10))


# ---------------------------------------------------------------------------
# PRDBuilder
# ---------------------------------------------------------------------------

class PRDBuilder:
    """Builds and validates PRD documents from session snapshots."""

    def __init__(self, schema_path: Optional[Path] = None):
        self._schema_path = schema_path or DEFAULT_SCHEMA_PATH
        self._validator = self._load_validator(self._schema_path)

    @staticmethod
    def _load_validator(path: Path) -> Draft7Validator:
        with open(path, encoding="utf-8") as f:
            schema = json.load(f)
        Draft7Validator.check_schema(schema)
        return Draft7Validator(schema)

    def build(self, session: Session, now: Optional[datetime] = None) -> PRDDocument:
        context = session.context
        project_type = _project_type(context)
        database = select_database(context)
        generated_at = (now or datetime.now(UTC)).isoformat()

        document = PRDDocument(
            metadata=PRDMetadata(
                name=extract_project_name(session) or DEFAULT_PROJECT_NAME,
                version=DOCUMENT_VERSION,
                generated_at=generated_at,
                confidence_score=clamp_confidence(session.score),
                session_id=session.id,
            ),
            project=ProjectInfo(
                type=project_type,
                description=extract_description(session),
                target_audience=(
                    context.user_preferences.get("target_audience")
                    or infer_target_audience(project_type)
                ),
                key_features=build_key_features(context),
                business_model=context.user_preferences.get("business_model"),
                scale_expectations=infer_scale(context),
            ),
            tech_stack=TechStack(
                framework=select_framework(context),
                database=database,
                ui_library=select_ui_library(context),
                deployment_platform=select_deployment_platform(context),
                additional_tools=select_additional_tools(context),
            ),
            features=build_feature_flags(context),
            specifications=build_specifications(context),
            constraints=build_constraints(context),
            environment=build_environment(context, database),
            next_steps=build_next_steps(context),
        )

        logger.info(
            f"Assembled PRD '{document.metadata.name}' for session {session.id}",
            extra={"session_id": session.id, "confidence": document.metadata.confidence_score},
        )
        return document

    def schema_errors(self, document: PRDDocument) -> List[str]:
        payload: Dict[str, Any] = document.model_dump(mode="json")
        errors = []
        for error in sorted(self._validator.iter_errors(payload), key=lambda e: [str(p) for p in e.path]):
            location = "/".join(str(p) for p in error.path) or "<root>"
            errors.append(f"schema: {location}: {error.message}")
        return errors

    def validate(self, document: PRDDocument) -> ValidationResult:
        """Hard errors block the document; warnings are advisory. Never mutates."""
        errors: List[str] = []
        warnings: List[str] = []

        if not document.metadata.name:
            errors.append("Missing project name")
        if not document.project.type:
            errors.append("Missing project type")
        if not document.project.description or len(document.project.description) < 10:
            errors.append("Project description missing or too short")
        if not document.project.key_features:
            errors.append("Missing key features")
        if not document.tech_stack.framework:
            errors.append("Missing framework")
        if not document.next_steps:
            errors.append("Missing next steps")

        errors.extend(self.schema_errors(document))

        if document.metadata.confidence_score < 70:
            warnings.append("Low confidence; further clarification is recommended")
        if len(document.project.key_features) < MIN_KEY_FEATURES:
            warnings.append("Few key features; consider adding more")
        if not document.specifications:
            warnings.append("No detailed feature specifications")

        return ValidationResult(valid=not errors, errors=errors, warnings=warnings)
