"""Property listing generator for demos and tests."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Iterator

from rwa_ledger.generators.base import BaseGenerator


@dataclass
class PropertyDraft:
    """Arguments for ``create_property``, before an asset id exists."""

    address: str
    price: int
    area: int
    legal_id: str
    document_hash: str
    token_uri: str

    def as_kwargs(self) -> dict[str, Any]:
        return asdict(self)


class PropertyGenerator(BaseGenerator):
    """Generate realistic property drafts with Faker."""

    # Price per square metre, smallest currency unit (cents)
    PRICE_PER_SQM = (150_000, 900_000)
    AREA_SQM = (35, 400)

    def generate(self) -> PropertyDraft:
        """Generate a property draft.

        Returns
        -------
        PropertyDraft
            Generated draft with a street address, price consistent with
            its area, a land-registry style legal id and content hashes.
        """
        area = self.random.randint(*self.AREA_SQM)
        price_per_sqm = self.random.randint(*self.PRICE_PER_SQM)
        # Round to whole currency units
        price = (area * price_per_sqm) // 100 * 100
        document_hash = self.fake.sha256()

        return PropertyDraft(
            address=self.fake.address().replace("\n", ", "),
            price=price,
            area=area,
            legal_id=f"{self.fake.state_abbr()}-{self.random.randint(10000, 99999)}."
            f"{self.random.randint(1, 999):03d}",
            document_hash=document_hash,
            token_uri=f"ipfs://{self.fake.sha1()}/metadata.json",
        )

    def generate_many(self, count: int) -> Iterator[PropertyDraft]:
        for _ in range(count):
            yield self.generate()
