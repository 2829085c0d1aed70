from __future__ import annotations

import re
from dataclasses import dataclass, field

STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
    "is", "are", "was", "were", "be", "been", "have", "has", "had", "do", "does", "did",
    "will", "would", "could", "should", "may", "might", "can",
    "this", "that", "these", "those",
    "i", "you", "he", "she", "it", "we", "they", "me", "him", "her", "us", "them",
})


@dataclass(frozen=True)
class Rule:
    label: str
    keywords: tuple
    sentence: str = ""

    def matches(self, text_lower: str) -> bool:
        return any(kw in text_lower for kw in self.keywords)


# Evaluation order is the priority: when several families co-occur the first one wins.
BUSINESS_TYPE_RULES = (
    Rule("financial", ("financial", "bank", "investment", "loan"),
         "This appears to be a financial services company."),
    Rule("healthcare", ("health", "medical", "clinic", "hospital"),
         "This appears to be a healthcare provider."),
    Rule("technology", ("tech", "software", "digital", "app"),
         "This appears to be a technology company."),
    Rule("consulting", ("consulting", "advisory", "strategy"),
         "This appears to be a consulting firm."),
    Rule("retail", ("retail", "shop", "store", "ecommerce"),
         "This appears to be a retail business."),
)

GENERIC_BUSINESS = Rule("generic", (), "This appears to be a business providing various services.")

# Independent checks; every match contributes its label.
SERVICE_RULES = (
    Rule("consulting", ("consulting", "advisory")),
    Rule("software development", ("development", "software")),
    Rule("marketing", ("marketing", "advertising")),
    Rule("design", ("design", "creative")),
    Rule("customer support", ("support", "customer service")),
    Rule("training", ("training", "education")),
    Rule("sales", ("sales", "business development")),
)

GENERIC_SERVICES = "They provide various business services to their clients"

SERVICE_SNIPPET_PATTERNS = (
    re.compile(r"services?[:\s]+([^.]+)", re.IGNORECASE),
    re.compile(r"offer[:\s]+([^.]+)", re.IGNORECASE),
    re.compile(r"provide[:\s]+([^.]+)", re.IGNORECASE),
    re.compile(r"specializ\w*[:\s]+([^.]+)", re.IGNORECASE),
)

_LABEL_PREFIX = re.compile(r"^[^:]+:\s*")
_NON_WORD = re.compile(r"\W")


@dataclass(frozen=True)
class Knowledge:
    instruction: str
    knowledge_base: str
    business_type: str
    keywords: list = field(default_factory=list)


def extract_keywords(content: str, limit: int = 10) -> list[str]:
    counts: dict[str, int] = {}
    for word in (content or "").lower().split():
        word = _NON_WORD.sub("", word)
        if len(word) > 3 and word not in STOP_WORDS:
            counts[word] = counts.get(word, 0) + 1

    # sorted() is stable, so equal counts keep first-occurrence order
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    return [word for word, _ in ranked[:limit]]


def classify_business(content: str) -> Rule:
    text = (content or "").lower()
    for rule in BUSINESS_TYPE_RULES:
        if rule.matches(text):
            return rule
    return GENERIC_BUSINESS


def detect_services(content: str) -> list[str]:
    text = (content or "").lower()
    return [rule.label for rule in SERVICE_RULES if rule.matches(text)]


def services_sentence(content: str) -> str:
    services = detect_services(content)
    if services:
        return f"They offer services including: {', '.join(services)}"
    return GENERIC_SERVICES


def build_instruction(title: str, content: str) -> str:
    business = classify_business(content)
    return (
        f"You are an AI assistant for {title}. {business.sentence} {services_sentence(content)}. "
        f"Provide helpful information about {title}'s services, answer customer questions, "
        f"and assist with inquiries related to their business. "
        f"Always be professional, accurate, and helpful."
    )


def extract_service_snippets(content: str, limit: int = 5) -> list[str]:
    snippets: list[str] = []
    for pattern in SERVICE_SNIPPET_PATTERNS:
        for m in pattern.finditer(content or ""):
            snippet = _LABEL_PREFIX.sub("", m.group(0)).strip()
            if snippet:
                snippets.append(snippet)
    return snippets[:limit]


def build_knowledge_base(title: str, description: str, content: str) -> str:
    content = content or ""
    snippets = extract_service_snippets(content)
    if snippets:
        services_section = "\n".join(f"- {s}" for s in snippets)
    else:
        services_section = "Various business services and solutions."

    sections = [
        f"# {title}",
        f"## Company Overview\n{description}",
        f"## About Us\n{content[:2000]}",
        f"## Services and Offerings\n{services_section}",
        "## Contact Information\n"
        f"For more information about {title}, please visit their website or contact them directly.",
        "## Key Information\n"
        f"- Company Name: {title}\n"
        f"- Description: {description}\n"
        f"- Content Summary: {content[:500]}...",
        f"This knowledge base contains information extracted from {title}'s website "
        f"and is used to provide accurate assistance to customers and visitors.",
    ]
    return "\n\n".join(sections).strip()


def synthesize(title: str, description: str, content: str) -> Knowledge:
    """
    Rule-based, deterministic (no AI, no I/O).
    Same inputs always produce the same instruction and knowledge base.
    """
    return Knowledge(
        instruction=build_instruction(title, content),
        knowledge_base=build_knowledge_base(title, description, content),
        business_type=classify_business(content).label,
        keywords=extract_keywords(content),
    )
