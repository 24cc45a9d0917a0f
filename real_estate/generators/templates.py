"""Template-based lot generator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from real_estate import factory
from real_estate.exceptions import ValidationError
from real_estate.generators.base import BaseGenerator
from real_estate.models.enums import Feature, LotStatus
from real_estate.models.lot import LotView


@dataclass(frozen=True)
class LotTemplate:
    """Size and price ranges plus the features a template lot comes with."""

    min_size: float
    max_size: float
    min_price: float
    max_price: float
    features: tuple[Feature, ...] = ()


class LotTemplateGenerator(BaseGenerator):
    """Generate lots from named size/price templates."""

    TEMPLATES: dict[str, LotTemplate] = {
        # Standard lots by size category
        "small": LotTemplate(200, 250, 100000, 150000),
        "medium": LotTemplate(250, 350, 150000, 225000),
        "large": LotTemplate(350, 500, 225000, 300000),
        "premium": LotTemplate(500, 750, 300000, 500000),
        # Packages
        "starter": LotTemplate(200, 250, 100000, 150000, (Feature.FENCING,)),
        "family": LotTemplate(300, 400, 200000, 275000, (Feature.FENCING, Feature.LANDSCAPING)),
        "luxury": LotTemplate(
            400, 600, 275000, 450000, (Feature.FENCING, Feature.LANDSCAPING, Feature.POOL)
        ),
    }

    STATUSES = list(LotStatus)
    STATUS_WEIGHTS = [0.70, 0.15, 0.15]

    @classmethod
    def template_names(cls) -> list[str]:
        return sorted(cls.TEMPLATES)

    def create(self, template_name: str, block: int, lot_number: int) -> LotView:
        """Create one lot with size and price drawn from the template ranges.

        Size is rounded to one decimal place, price to the nearest thousand.

        Raises
        ------
        ValidationError
            If the template name is unknown.
        """
        template = self.TEMPLATES.get(template_name.strip().lower())
        if template is None:
            raise ValidationError(f"Unknown lot template: {template_name}")

        size = self.draw_rounded(template.min_size, template.max_size, 0.1)
        price = self.draw_rounded(template.min_price, template.max_price, 1000)

        view: LotView = factory.create_basic_lot(block, lot_number, size, price)
        for feature in template.features:
            view = factory.add_feature(view, feature)
        return view

    def generate_batch(
        self, template_name: str, slots: Iterable[tuple[int, int]]
    ) -> Iterator[LotView]:
        """Generate one templated lot per ``(block, lot_number)`` slot.

        Yields
        ------
        LotView
            Generated lots.
        """
        for block, lot_number in slots:
            yield self.create(template_name, block, lot_number)

    def generate_inventory(self, slots: Iterable[tuple[int, int]]) -> Iterator[LotView]:
        """Generate a mixed inventory: random template and status per slot."""
        names = self.template_names()
        for block, lot_number in slots:
            view = self.create(self.fake.random_element(names), block, lot_number)
            status = self.choose_weighted(self.STATUSES, self.STATUS_WEIGHTS)
            yield factory.change_status(view, status)
