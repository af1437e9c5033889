"""
Demo AI Provider.

Produces plausible-looking but fabricated ML results for demos and UI
development (AI_PROVIDER=demo). Results are random but seeded from the
filename, so the same file always gets the same answer. Never used as a
fallback for production enrichment.
"""
import hashlib
import random
from typing import Optional

from .base import AIProvider, ClassificationResult, SummaryResult
from ...domain import taxonomy
from ...domain.entities import empty_entities

_DEMO_KEYWORDS = [
    "metro", "station", "track", "rolling stock", "signalling", "inspection",
    "depot", "passenger", "tender", "monsoon", "traction", "platform",
]


class DemoProvider(AIProvider):
    """Seeded random results; no network access."""
    name = "demo"

    @staticmethod
    def _rng(filename: str) -> random.Random:
        seed = int(hashlib.md5(filename.encode("utf-8")).hexdigest()[:8], 16)
        return random.Random(seed)

    async def classify(self, text: str, filename: str, file_type: str,
                       department: Optional[str] = None) -> ClassificationResult:
        rng = self._rng(filename)
        entities = empty_entities()
        entities["project_codes"] = [f"KM-{rng.randint(2019, 2025)}-{rng.randint(1, 999):03d}"]
        entities["amounts"] = [f"₹{rng.randint(10_000, 5_000_000):,}"]
        if department:
            entities["departments"] = [department]

        return ClassificationResult(
            document_type=rng.choice(taxonomy.DOCUMENT_TYPES),
            confidence=round(rng.uniform(0.7, 1.0), 2),
            keywords=rng.sample(_DEMO_KEYWORDS, 4),
            entities=entities,
            processing_time=round(rng.uniform(0.2, 2.5), 3),
            language="english",
            source=self.name,
        )

    async def summarize(self, text: str, filename: str, document_type: Optional[str],
                        max_summary_length: int = 500) -> SummaryResult:
        rng = self._rng(filename)
        summary = (
            f"[DEMO] {document_type or 'Document'} {filename} covering "
            f"{', '.join(rng.sample(_DEMO_KEYWORDS, 3))}."
        )
        return SummaryResult(
            summary=summary[:max_summary_length],
            keywords=rng.sample(_DEMO_KEYWORDS, 5),
            confidence=round(rng.uniform(0.7, 0.95), 2),
            processing_time=round(rng.uniform(0.2, 2.5), 3),
            source=self.name,
        )
