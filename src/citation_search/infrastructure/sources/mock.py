"""
Mock Provider - deterministic stand-in citations.

Used for demos (crawler disabled) and as the last degradation step when a
live source fails. Citations are synthesized from the first keyword. With a
``seed`` every call draws from a fresh generator derived from the seed, the
source and the keywords, so the same keywords always give the same citations
and the two sources never mirror each other. An explicit ``rng`` is used as
given.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass

from citation_search.infrastructure.sources.base import CitationProvider, ProviderKind, SourceKind
from citation_search.models.citation import Citation, current_year

logger = logging.getLogger(__name__)

MOCK_RESULT_COUNT = 5
MAX_MOCK_CITATIONS = 300
YEAR_SPAN = 6


@dataclass(frozen=True)
class MockCatalog:
    """Templates for one language of synthesized citations."""
    titles: tuple[str, ...]
    author_groups: tuple[tuple[str, ...], ...]
    venues: tuple[str, ...]
    abstract: str
    default_keyword: str
    url: str


CHINESE_CATALOG = MockCatalog(
    titles=(
        "基于{kw}的智能系统研究与应用",
        "{kw}技术综述与发展趋势分析",
        "{kw}在大数据环境下的应用研究",
        "面向{kw}的深度学习方法研究",
        "{kw}关键技术及其应用前景",
    ),
    author_groups=(
        ("张伟", "李明", "王芳"),
        ("刘洋", "陈静", "赵辉"),
        ("王磊", "张华", "李娜"),
        ("陈建", "刘强", "王丽"),
        ("李军", "张敏", "王勇"),
    ),
    venues=("计算机学报", "软件学报", "自动化学报", "中国科学：信息科学", "电子学报"),
    abstract=(
        "本文针对{kw}进行了深入研究。提出了一种新颖的方法来解决该领域的关键问题。"
        "通过大量实验验证，该方法在多个数据集上取得了优异的性能表现，"
        "相比现有方法具有显著优势。研究结果对{kw}的理论和应用具有重要意义。"
    ),
    default_keyword="研究",
    url="https://www.cnki.net/",
)

ENGLISH_CATALOG = MockCatalog(
    titles=(
        "An Intelligent System Based on {kw}: Research and Applications",
        "A Survey of {kw}: Techniques and Trends",
        "{kw} in Big Data Environments",
        "Deep Learning Methods for {kw}",
        "Key Technologies and Prospects of {kw}",
    ),
    author_groups=(
        ("J. Smith", "A. Brown", "L. Chen"),
        ("M. Garcia", "K. Tanaka", "R. Patel"),
        ("S. Müller", "D. Rossi", "H. Kim"),
        ("E. Johnson", "W. Zhang", "P. Novak"),
        ("C. Martin", "Y. Sato", "F. Ahmed"),
    ),
    venues=(
        "Nature Machine Intelligence",
        "IEEE Transactions on Knowledge and Data Engineering",
        "Journal of Machine Learning Research",
        "ACM Computing Surveys",
        "Artificial Intelligence",
    ),
    abstract=(
        "This paper studies {kw} in depth and proposes a novel method for its key problems. "
        "Extensive experiments on several datasets show strong performance and clear "
        "advantages over existing approaches, with implications for both the theory and "
        "practice of {kw}."
    ),
    default_keyword="this field",
    url="https://scholar.google.com/",
)

CATALOGS = {
    SourceKind.CNKI: CHINESE_CATALOG,
    SourceKind.GOOGLE_SCHOLAR: ENGLISH_CATALOG,
}


class MockProvider(CitationProvider):
    """
    Synthesizes plausible citations for a source.

    Usage:
        provider = MockProvider(SourceKind.CNKI, seed=42)
        citations = await provider.fetch(["机器学习"])
    """

    kind = ProviderKind.MOCK

    def __init__(
        self,
        source: SourceKind,
        *,
        seed: int | None = None,
        rng: random.Random | None = None,
        count: int = MOCK_RESULT_COUNT,
    ) -> None:
        super().__init__(source)
        self._seed = seed
        self._rng = rng or random.Random()
        self._count = count
        self._catalog = CATALOGS[source]

    async def fetch(
        self,
        keywords: Sequence[str],
        *,
        endpoint: str | None = None,
    ) -> list[Citation]:
        citations = self.generate(keywords)
        logger.info(f"{self.name}: synthesized {len(citations)} citations")
        return citations

    def generate(self, keywords: Sequence[str]) -> list[Citation]:
        catalog = self._catalog
        keyword = keywords[0] if keywords else catalog.default_keyword
        this_year = current_year()
        rng = self._generator_for(keywords)

        return [
            Citation(
                title=catalog.titles[index % len(catalog.titles)].format(kw=keyword),
                authors=list(rng.choice(catalog.author_groups)),
                year=this_year - rng.randrange(YEAR_SPAN),
                source=rng.choice(catalog.venues),
                abstract=catalog.abstract.format(kw=keyword),
                citation_count=rng.randrange(MAX_MOCK_CITATIONS),
                data_source=self.source.value,
                url=catalog.url,
            )
            for index in range(self._count)
        ]

    def _generator_for(self, keywords: Sequence[str]) -> random.Random:
        if self._seed is None:
            return self._rng
        return random.Random(f"{self._seed}:{self.source.value}:{'|'.join(keywords)}")
