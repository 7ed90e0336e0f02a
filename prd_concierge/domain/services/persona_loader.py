"""
Persona loading from markdown templates.

File grammar (``<type>-persona.md``)::

    # Persona Name
    ## Description
    Free text lines, joined into the description.
    ## Opening Questions
    - one item per bullet

A ``##`` heading picks the field that following bullets append to, using
SECTION_MARKERS (first matching marker wins). Any field left empty takes
the built-in default for the type; unreadable files yield the whole
built-in persona.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from prd_concierge.domain.schemas.persona import Persona
from prd_concierge.domain.schemas.session import ProjectType

logger = logging.getLogger(__name__)

DEFAULT_PERSONAS_DIR = Path(__file__).resolve().parents[2] / "seed" / "personas"

DESCRIPTION = "description"

# field -> heading markers, matched case-insensitively as substrings
SECTION_MARKERS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    (DESCRIPTION, ("description", "expertise", "about", "描述", "专长")),
    ("clarification_templates", ("clarification", "澄清")),
    ("opening_questions", ("opening", "questions", "开场", "问题")),
    ("completion_criteria", ("completion", "criteria", "完成", "标准")),
    ("core_topics", ("core topics", "topics", "核心", "主题")),
    ("recommended_tech_stack", ("tech", "stack", "技术", "栈")),
    ("common_features", ("features", "功能")),
    ("best_practices", ("practice", "实践")),
    ("pitfalls_to_avoid", ("pitfall", "avoid", "避免", "陷阱")),
)

LIST_FIELDS = tuple(name for name, _ in SECTION_MARKERS if name != DESCRIPTION)

PERSONA_NAMES: Dict[ProjectType, str] = {
    ProjectType.SAAS: "SaaS Product Advisor",
    ProjectType.ECOMMERCE: "E-commerce Platform Expert",
    ProjectType.BLOG: "Blog Platform Advisor",
    ProjectType.PORTFOLIO: "Portfolio Site Expert",
    ProjectType.LANDING_PAGE: "Marketing Page Expert",
    ProjectType.GENERIC: "Project Advisor",
}

DESCRIPTIONS: Dict[ProjectType, str] = {
    ProjectType.SAAS: (
        "I advise on SaaS products: multi-tenant architecture, subscription billing and "
        "permission models, aiming for a solution that scales."
    ),
    ProjectType.ECOMMERCE: (
        "I focus on online retail: payment gateway integration, inventory and order "
        "management, and a complete storefront."
    ),
    ProjectType.BLOG: (
        "I help build content platforms: content management, SEO and reader engagement."
    ),
    ProjectType.PORTFOLIO: (
        "I design portfolio sites that load fast, look sharp and turn visitors into contacts."
    ),
    ProjectType.LANDING_PAGE: (
        "I build marketing pages tuned for conversion, with A/B testing and campaign tracking."
    ),
    ProjectType.GENERIC: (
        "I help clarify your requirements and recommend a technical approach that fits them."
    ),
}

OPENING_QUESTIONS: Dict[ProjectType, List[str]] = {
    ProjectType.SAAS: [
        "What core problem does your SaaS product solve?",
        "Are your users individuals or companies?",
        "Which subscription model are you planning?",
    ],
    ProjectType.ECOMMERCE: [
        "What kind of products do you plan to sell?",
        "Which payment methods should be supported?",
        "Do you need inventory management?",
    ],
    ProjectType.BLOG: [
        "What will the blog mainly be about?",
        "Will several authors collaborate on it?",
        "What kind of comments and interaction do you want?",
    ],
    ProjectType.PORTFOLIO: [
        "What kind of work will the portfolio show?",
        "What visual style are you after?",
        "How should visitors get in touch?",
    ],
    ProjectType.LANDING_PAGE: [
        "What product or service does the page promote?",
        "What is the main conversion goal?",
        "What characterises the target audience?",
    ],
}

GENERIC_OPENING_QUESTIONS = [
    "Please describe your project idea in more detail",
    "Who are the main users of this project?",
    "Which core features do you want?",
]

CORE_TOPICS: Dict[ProjectType, List[str]] = {
    ProjectType.SAAS: ["Subscription model", "User permissions", "Multi-tenancy", "Billing", "User dashboard"],
    ProjectType.ECOMMERCE: ["Product management", "Shopping cart", "Checkout", "Order management", "Inventory"],
    ProjectType.BLOG: ["Content management", "Article editor", "Comments", "Categories and tags", "SEO"],
    ProjectType.PORTFOLIO: ["Work showcase", "Contact form", "Responsive design", "Load performance", "Visual effects"],
    ProjectType.LANDING_PAGE: ["Conversion", "Form design", "Behaviour tracking", "A/B testing", "Marketing integrations"],
}

GENERIC_CORE_TOPICS = ["Feature requirements", "Technology choices", "User experience", "Performance"]

TECH_STACKS: Dict[ProjectType, List[str]] = {
    ProjectType.SAAS: ["Next.js", "TypeScript", "PostgreSQL", "Prisma", "Stripe", "NextAuth.js"],
    ProjectType.ECOMMERCE: ["Next.js", "TypeScript", "PostgreSQL", "Stripe", "Tailwind CSS"],
    ProjectType.BLOG: ["Astro", "Markdown", "TypeScript", "Tailwind CSS"],
    ProjectType.PORTFOLIO: ["Next.js", "TypeScript", "Tailwind CSS", "Framer Motion"],
    ProjectType.LANDING_PAGE: ["Next.js", "TypeScript", "Tailwind CSS", "Analytics"],
}

GENERIC_TECH_STACK = ["React", "TypeScript", "Tailwind CSS", "Next.js"]

COMMON_FEATURES: Dict[ProjectType, List[str]] = {
    ProjectType.SAAS: ["Authentication", "Subscription management", "User dashboard", "Team collaboration", "Analytics"],
    ProjectType.ECOMMERCE: ["Product catalogue", "Shopping cart", "Payment processing", "Order management", "User accounts"],
    ProjectType.BLOG: ["Article publishing", "Categories", "Comments", "Search", "RSS feed"],
    ProjectType.PORTFOLIO: ["Work showcase", "Project details", "Contact form", "Responsive design", "Performance tuning"],
    ProjectType.LANDING_PAGE: ["Product introduction", "Feature highlights", "Testimonials", "Behaviour tracking", "Conversion tuning"],
}

GENERIC_FEATURES = ["User interface", "Data management", "Core functionality"]

CLARIFICATION_TEMPLATES = [
    "How would you like the {} feature to work?",
    "Do you have special requirements around {}?",
    "Which approach do you prefer for {}?",
    "How important is {}: core or optional?",
]

COMPLETION_CRITERIA = [
    "Project type and goals are clear",
    "Core feature requirements are clear",
    "Technology stack is chosen",
    "Constraints are understood",
    "Target users are defined",
]

BEST_PRACTICES = [
    "SEO-friendly URL structure",
    "Responsive design for mobile",
    "Fast page loads",
    "Security and data protection",
    "Accessibility",
    "Maintainable, tested code",
]

PITFALLS = [
    "Over-engineering",
    "Ignoring performance",
    "Technology choices that raise development cost",
    "Too few tests",
    "Neglecting security",
    "No room to scale",
]


def default_persona(project_type: ProjectType) -> Persona:
    """Built-in persona for a project type."""
    return Persona(
        id=f"persona_{project_type.value}",
        name=PERSONA_NAMES.get(project_type, PERSONA_NAMES[ProjectType.GENERIC]),
        project_type=project_type,
        description=DESCRIPTIONS.get(project_type, DESCRIPTIONS[ProjectType.GENERIC]),
        opening_questions=list(OPENING_QUESTIONS.get(project_type, GENERIC_OPENING_QUESTIONS)),
        core_topics=list(CORE_TOPICS.get(project_type, GENERIC_CORE_TOPICS)),
        clarification_templates=list(CLARIFICATION_TEMPLATES),
        completion_criteria=list(COMPLETION_CRITERIA),
        recommended_tech_stack=list(TECH_STACKS.get(project_type, GENERIC_TECH_STACK)),
        common_features=list(COMMON_FEATURES.get(project_type, GENERIC_FEATURES)),
        best_practices=list(BEST_PRACTICES),
        pitfalls_to_avoid=list(PITFALLS),
    )


def section_field(heading: str) -> Optional[str]:
    """Persona field a ``##`` heading writes to, or None if unrecognised."""
    lowered = heading.lower()
    for field_name, markers in SECTION_MARKERS:
        if any(marker in lowered for marker in markers):
            return field_name
    return None


def parse_persona(content: str, project_type: ProjectType) -> Persona:
    """Parse persona markdown, filling empty fields from the built-in default."""
    fallback = default_persona(project_type)

    name: Optional[str] = None
    description_lines: List[str] = []
    lists: Dict[str, List[str]] = {name_: [] for name_ in LIST_FIELDS}
    current: Optional[str] = None

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        if line.startswith("## "):
            current = section_field(line[3:])
            continue

        if line.startswith("# "):
            if name is None:
                name = line[2:].strip()
            continue

        if line.startswith("#"):
            continue

        if current == DESCRIPTION:
            description_lines.append(line)
            continue

        if current in lists and line[:2] in ("- ", "* "):
            item = line[2:].strip()
            if item:
                lists[current].append(item)

    return Persona(
        id=fallback.id,
        name=name or fallback.name,
        project_type=project_type,
        description="\n".join(description_lines) or fallback.description,
        **{
            field_name: items or getattr(fallback, field_name)
            for field_name, items in lists.items()
        },
    )


class PersonaLoader:
    """Loads and caches personas per project type."""

    def __init__(self, personas_dir: Optional[Path] = None):
        self._dir = Path(personas_dir) if personas_dir else DEFAULT_PERSONAS_DIR
        self._cache: Dict[ProjectType, Persona] = {}

    def path_for(self, project_type: ProjectType) -> Path:
        return self._dir / f"{project_type.value}-persona.md"

    def load(self, project_type: ProjectType) -> Persona:
        """Persona for ``project_type``; never raises for missing or broken files."""
        if project_type in self._cache:
            return self._cache[project_type]

        path = self.path_for(project_type)
        if not path.exists():
            logger.info(f"No persona file for {project_type.value}, using built-in default")
            persona = default_persona(project_type)
        else:
            try:
                persona = parse_persona(path.read_text(encoding="utf-8"), project_type)
                logger.info(f"Loaded persona '{persona.name}' from {path.name}")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Failed to read persona file {path}: {e}")
                persona = default_persona(project_type)

        self._cache[project_type] = persona
        return persona

    def load_all(self) -> Dict[ProjectType, Persona]:
        return {project_type: self.load(project_type) for project_type in ProjectType}

    def select(self, project_type: Optional[ProjectType]) -> Persona:
        """Persona for the session's type, falling back to the generic persona."""
        return self.load(project_type or ProjectType.GENERIC)

    def clear_cache(self) -> None:
        self._cache.clear()
