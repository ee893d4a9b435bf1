"""
Top-level product assembly.
"""
import re
from typing import Any, Callable, List, Mapping, Union

from ekatra.config import config
from ekatra.models.product import CanonicalProduct
from ekatra.models.results import ReshapeResult
from ekatra.normalizers.fields import is_present, to_text
from ekatra.normalizers.identifiers import generate_id

DEFAULT_TITLE = "Untitled Product"

KEYWORDS_AS_STRING = "string"
KEYWORDS_AS_LIST = "list"


def slugify(text: str) -> str:
    """URL-safe handle: lowercase, [a-z0-9] words joined by single hyphens."""
    slug = re.sub(r'[^a-z0-9\s-]', '', (text or "").lower())
    slug = re.sub(r'[\s-]+', '-', slug)
    return slug.strip('-')


def keyword_terms(value: Any) -> List[str]:
    """Flatten a keywords value into its individual terms."""
    if isinstance(value, str):
        return [term.strip() for term in value.split(",") if term.strip()]
    if not isinstance(value, (list, tuple)):
        return []

    terms = []
    for item in value:
        if isinstance(item, Mapping):
            item = item.get("name")
        if isinstance(item, (str, int, float)) and not isinstance(item, bool) and is_present(item):
            terms.append(str(item).strip())
    return terms


def _as_list(value: Any) -> List:
    if isinstance(value, list):
        return value
    if isinstance(value, Mapping):
        return [dict(value)]
    return []


class ProductAssembler:
    """
    Builds a CanonicalProduct from resolved fields and reshaped variants.

    ``keyword_style`` selects the searchKeywords contract of the calling
    entry point: a comma-joined string (flexible) or a list (smart, legacy).
    """

    def __init__(self, keyword_style: str = KEYWORDS_AS_STRING, default_currency: str = None,
                 id_factory: Callable[[], str] = generate_id):
        if keyword_style not in (KEYWORDS_AS_STRING, KEYWORDS_AS_LIST):
            raise ValueError(f"Unknown keyword style: {keyword_style}")
        self.keyword_style = keyword_style
        self.default_currency = default_currency or config.DEFAULT_CURRENCY
        self.id_factory = id_factory

    def assemble(self, fields: Mapping[str, Any], reshaped: ReshapeResult) -> CanonicalProduct:
        title = to_text(fields.get("title"), DEFAULT_TITLE)

        return CanonicalProduct(
            product_id=to_text(fields.get("product_id")) or self.id_factory(),
            title=title,
            description=to_text(fields.get("description")),
            currency=to_text(fields.get("currency")).upper() or self.default_currency,
            existing_product_url=to_text(fields.get("url")),
            search_keywords=self.keywords(fields.get("keywords")),
            handle=slugify(to_text(fields.get("handle"))) or slugify(title),
            country_code=to_text(fields.get("country_code")) or None,
            offers=_as_list(fields.get("offers")),
            specifications=_as_list(fields.get("specifications")),
            variants=list(reshaped.variants),
            sizes=list(reshaped.sizes)
        )

    def keywords(self, value: Any) -> Union[str, List[str]]:
        if self.keyword_style == KEYWORDS_AS_LIST:
            return keyword_terms(value)

        if isinstance(value, str):
            return value.strip()
        if isinstance(value, (list, tuple)):
            return ",".join(keyword_terms(value))
        return ""
