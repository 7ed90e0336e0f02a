"""
Pure keyword-table extraction of structured hints from free text.

These functions contain NO I/O, NO model calls, NO logging. Matching is a
case-insensitive substring test against fixed tables, so Chinese and English
phrasing are both recognised.

Precedence: when several phrases in one table target the same field, the
first match in table order wins, and a merge never replaces a field the
context already holds.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from prd_concierge.domain.schemas.session import AccumulatedContext, Complexity


# ---------------------------------------------------------------------------
# Keyword tables
# ---------------------------------------------------------------------------

# keyword -> canonical technology label
TECH_KEYWORDS: Tuple[Tuple[str, str], ...] = (
    ("react", "React"),
    ("vue", "Vue.js"),
    ("angular", "Angular"),
    ("next.js", "Next.js"),
    ("nextjs", "Next.js"),
    ("nuxt", "Nuxt.js"),
    ("gatsby", "Gatsby"),
    ("astro", "Astro"),
    ("svelte", "Svelte"),
    ("typescript", "TypeScript"),
    ("javascript", "JavaScript"),
    ("tailwind", "Tailwind CSS"),
    ("bootstrap", "Bootstrap"),
    ("material ui", "Material UI"),
    ("material-ui", "Material UI"),
    ("mui", "Material UI"),
    ("chakra", "Chakra UI"),
    ("postgres", "PostgreSQL"),
    ("mysql", "MySQL"),
    ("mongodb", "MongoDB"),
    ("sqlite", "SQLite"),
    ("prisma", "Prisma"),
    ("supabase", "Supabase"),
    ("firebase", "Firebase"),
)

# phrase -> (constraint field, value)
CONSTRAINT_PHRASES: Tuple[Tuple[str, str, Union[str, int]], ...] = (
    ("预算有限", "budget", "low"),
    ("成本", "budget", "low"),
    ("low budget", "budget", "low"),
    ("limited budget", "budget", "low"),
    ("tight budget", "budget", "low"),
    ("急需", "timeline", "urgent"),
    ("赶时间", "timeline", "urgent"),
    ("urgent", "timeline", "urgent"),
    ("asap", "timeline", "urgent"),
    ("tight deadline", "timeline", "urgent"),
    ("一个人", "team_size", 1),
    ("独立开发", "team_size", 1),
    ("solo", "team_size", 1),
    ("on my own", "team_size", 1),
    ("by myself", "team_size", 1),
    ("简单", "complexity_preference", "simple"),
    ("入门", "complexity_preference", "simple"),
    ("simple", "complexity_preference", "simple"),
    ("beginner", "complexity_preference", "simple"),
)

# phrase -> target_audience value
AUDIENCE_KEYWORDS: Tuple[Tuple[str, str], ...] = (
    ("企业", "enterprise"),
    ("小公司", "small_business"),
    ("创业", "startup"),
    ("学生", "students"),
    ("开发者", "developers"),
    ("设计师", "designers"),
    ("个人用户", "individual"),
    ("enterprise", "enterprise"),
    ("small business", "small_business"),
    ("startup", "startup"),
    ("students", "students"),
    ("developers", "developers"),
    ("designers", "designers"),
    ("individuals", "individual"),
)

# phrase -> (preference key, value)
PREFERENCE_PHRASES: Tuple[Tuple[str, str, str], ...] = (
    ("按月", "billing_model", "monthly_subscription"),
    ("monthly", "billing_model", "monthly_subscription"),
    ("年付", "billing_model", "annual_subscription"),
    ("annual", "billing_model", "annual_subscription"),
    ("按人头", "billing_model", "per_seat"),
    ("per seat", "billing_model", "per_seat"),
    ("免费增值", "billing_model", "freemium"),
    ("freemium", "billing_model", "freemium"),
    ("服装", "product_type", "apparel"),
    ("clothing", "product_type", "apparel"),
    ("电子产品", "product_type", "electronics"),
    ("electronics", "product_type", "electronics"),
    ("数字产品", "product_type", "digital_goods"),
    ("digital products", "product_type", "digital_goods"),
    ("手工", "product_type", "handmade"),
    ("handmade", "product_type", "handmade"),
    ("广告", "business_model", "advertising"),
    ("advertising", "business_model", "advertising"),
    ("佣金", "business_model", "commission"),
    ("commission", "business_model", "commission"),
)

# feature tag -> trigger phrases
FEATURE_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("auth", ("登录", "注册", "用户", "认证", "权限",
              "login", "log in", "sign up", "signup", "register", "authentication", "permission")),
    ("payment", ("支付", "付费", "购买", "订阅", "收费",
                 "payment", "checkout", "purchase", "subscription", "billing")),
    ("admin", ("管理", "后台", "控制台", "管理员",
               "admin", "dashboard", "back office", "console")),
    ("search", ("搜索", "查找", "检索", "search")),
    ("upload", ("上传", "文件", "图片", "附件", "upload", "attachment", "image")),
    ("realtime", ("实时", "聊天", "消息", "通知", "real-time", "realtime", "chat", "notification")),
    ("analytics", ("统计", "分析", "数据", "报表", "analytics", "statistics", "report", "metrics")),
    ("email", ("邮件", "邮箱", "通知", "email", "e-mail", "newsletter", "notification")),
)

FEATURE_TAGS: Tuple[str, ...] = tuple(tag for tag, _ in FEATURE_KEYWORDS)

COMPLEXITY_KEYWORDS: Dict[Complexity, Tuple[str, ...]] = {
    Complexity.SIMPLE: ("简单", "基础", "入门", "快速", "simple", "basic", "beginner", "quick"),
    Complexity.COMPLEX: ("复杂", "企业级", "大型", "高级", "多租户", "微服务",
                         "complex", "enterprise-grade", "large-scale", "advanced",
                         "multi-tenant", "microservice"),
}


@dataclass
class ExtractedContext:
    """Everything the keyword tables found in one piece of text."""
    tech_preferences: List[str] = field(default_factory=list)
    constraints: Dict[str, Union[str, int]] = field(default_factory=dict)
    target_audience: Optional[str] = None
    preferences: Dict[str, str] = field(default_factory=dict)
    features: List[str] = field(default_factory=list)
    complexity: Complexity = Complexity.MEDIUM


# ---------------------------------------------------------------------------
# Individual extractors
# ---------------------------------------------------------------------------

def detect_tech_preferences(text: str) -> List[str]:
    """Canonical technology labels mentioned in ``text``, in table order."""
    lowered = text.lower()
    found: List[str] = []
    for keyword, label in TECH_KEYWORDS:
        if keyword in lowered and label not in found:
            found.append(label)
    return found


def detect_constraints(text: str) -> Dict[str, Union[str, int]]:
    lowered = text.lower()
    found: Dict[str, Union[str, int]] = {}
    for phrase, key, value in CONSTRAINT_PHRASES:
        if phrase in lowered and key not in found:
            found[key] = value
    return found


def detect_audience(text: str) -> Optional[str]:
    lowered = text.lower()
    for phrase, audience in AUDIENCE_KEYWORDS:
        if phrase in lowered:
            return audience
    return None


def detect_preferences(text: str) -> Dict[str, str]:
    lowered = text.lower()
    found: Dict[str, str] = {}
    for phrase, key, value in PREFERENCE_PHRASES:
        if phrase in lowered and key not in found:
            found[key] = value
    return found


def detect_features(text: str) -> List[str]:
    """Feature tags triggered by ``text``, in feature-table order."""
    lowered = text.lower()
    return [
        tag for tag, phrases in FEATURE_KEYWORDS
        if any(phrase in lowered for phrase in phrases)
    ]


def estimate_complexity(text: str) -> Complexity:
    """Complex indicators beat simple ones; no indicator means medium."""
    lowered = text.lower()
    if any(word in lowered for word in COMPLEXITY_KEYWORDS[Complexity.COMPLEX]):
        return Complexity.COMPLEX
    if any(word in lowered for word in COMPLEXITY_KEYWORDS[Complexity.SIMPLE]):
        return Complexity.SIMPLE
    return Complexity.MEDIUM


# ---------------------------------------------------------------------------
# extract / merge
# ---------------------------------------------------------------------------

def extract(text: str) -> ExtractedContext:
    """Run every table over ``text``."""
    return ExtractedContext(
        tech_preferences=detect_tech_preferences(text),
        constraints=detect_constraints(text),
        target_audience=detect_audience(text),
        preferences=detect_preferences(text),
        features=detect_features(text),
        complexity=estimate_complexity(text),
    )


def merge_into(context: AccumulatedContext, extracted: ExtractedContext) -> bool:
    """
    Fold an extraction into an accumulated context.

    Sequences are appended without duplicates; key/value fields are only
    filled when absent. Returns True if anything was added.
    """
    changed = False

    for label in extracted.tech_preferences:
        changed = context.add_tech_preference(label) or changed

    for tag in extracted.features:
        changed = context.add_feature(tag) or changed

    for key, value in extracted.constraints.items():
        if key not in context.constraints:
            context.constraints[key] = value
            changed = True

    if extracted.target_audience and "target_audience" not in context.user_preferences:
        context.user_preferences["target_audience"] = extracted.target_audience
        changed = True

    for key, value in extracted.preferences.items():
        if key not in context.user_preferences:
            context.user_preferences[key] = value
            changed = True

    return changed
