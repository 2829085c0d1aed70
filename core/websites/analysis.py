import logging
from dataclasses import asdict, dataclass, field

from core.knowledge.synthesis import synthesize
from core.websites.domains import candidate_url, display_name, domain_of
from core.websites.extractors import UNTITLED, extract_page, fetch_html

logger = logging.getLogger(__name__)


@dataclass
class WebsiteAnalysis:
    domain: str
    title: str
    description: str
    content: str
    instruction: str
    knowledge_base: str
    business_type: str = "generic"
    keywords: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "WebsiteAnalysis":
        return cls(**data)

    def website_info(self) -> dict:
        return {"domain": self.domain, "title": self.title, "description": self.description}


def analyze_website_from_email(email: str, fetch=None) -> WebsiteAnalysis:
    """
    email -> domain -> https://www.<domain> -> fetched page -> extracted text -> synthesized knowledge.
    Fetch failures propagate as FetchError; nothing is retried.
    """
    domain = domain_of(email)
    url = candidate_url(domain)

    html = (fetch or fetch_html)(url)
    page = extract_page(html)

    title = page.title
    if not title or title.lower() == UNTITLED.lower():
        title = display_name(domain)

    knowledge = synthesize(title, page.description, page.content)

    analysis = WebsiteAnalysis(
        domain=domain,
        title=title,
        description=page.description,
        content=page.content,
        instruction=knowledge.instruction,
        knowledge_base=knowledge.knowledge_base,
        business_type=knowledge.business_type,
        keywords=list(knowledge.keywords),
    )
    logger.info(
        "Website analysis completed for %s: domain=%s title=%r type=%s content_length=%d keywords=%s",
        email, domain, title, analysis.business_type, len(analysis.content), ",".join(analysis.keywords),
    )
    logger.debug("Instruction for %s: %s", email, analysis.instruction)
    return analysis
