"""
Record Generator.

Faker-backed source of synthetic ResourceItems. Every call to
`generate()` yields a fresh, finite, lazily produced sequence; content
differs between calls unless a seed is supplied.

Exports:
    RecordGenerator: Synthetic domain record source
"""

from datetime import timezone
from typing import Iterator, List, Optional

from faker import Faker

from config.defaults import SeedingDefaults
from core.models import (
    ResourceItem,
    ResourceHyperlink,
    ResourceSensitivity,
)
from core.models.records import TITLE_MAX_LENGTH, DESCRIPTION_MAX_LENGTH
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "RecordGenerator")


def _truncate(value: str, limit: int) -> str:
    return value[:limit]


class RecordGenerator:
    """
    Produces valid ResourceItems with random content.

    Args:
        locale: Faker locale
        seed: Optional seed for reproducible content
        min_references: Lower bound of hyperlinks per record
        max_references: Upper bound of hyperlinks per record
        max_tags: Upper bound of tags per record

    Raises:
        ValueError: On inconsistent bounds
    """

    def __init__(
        self,
        locale: str = SeedingDefaults.FAKER_LOCALE,
        seed: Optional[int] = None,
        min_references: int = SeedingDefaults.MIN_REFERENCES,
        max_references: int = SeedingDefaults.MAX_REFERENCES,
        max_tags: int = 5,
    ):
        if min_references < 0:
            raise ValueError(f"min_references must be >= 0, got {min_references}")
        if max_references < min_references:
            raise ValueError(
                f"max_references ({max_references}) must be >= min_references ({min_references})"
            )
        if max_tags < 0:
            raise ValueError(f"max_tags must be >= 0, got {max_tags}")

        self.min_references = min_references
        self.max_references = max_references
        self.max_tags = max_tags
        self.fake = Faker(locale)
        if seed is not None:
            self.fake.seed_instance(seed)

    def generate(self, count: int) -> Iterator[ResourceItem]:
        """
        Yield `count` new records.

        Raises:
            ValueError: If count < 1 (raised on call, not on first iteration)
        """
        if count < 1:
            raise ValueError(f"count must be >= 1, got {count}")
        logger.debug(f"Generating {count} records")
        return self._iter_records(count)

    def _iter_records(self, count: int) -> Iterator[ResourceItem]:
        for _ in range(count):
            yield self._record()

    def _record(self) -> ResourceItem:
        fake = self.fake
        title = _truncate(fake.sentence(nb_words=6).rstrip("."), TITLE_MAX_LENGTH)
        description = _truncate(fake.paragraph(nb_sentences=4), DESCRIPTION_MAX_LENGTH)

        return ResourceItem(
            title=title or "Untitled",
            description=description,
            tags=fake.words(nb=fake.random_int(0, self.max_tags), unique=True),
            sensitivity=fake.random_element(list(ResourceSensitivity)),
            references=self._references(),
            published_by=fake.user_name(),
            published_on=fake.date_time_between(start_date="-1y", end_date="+1y", tzinfo=timezone.utc),
        )

    def _references(self) -> List[ResourceHyperlink]:
        fake = self.fake
        count = fake.random_int(self.min_references, self.max_references)
        return [
            ResourceHyperlink(
                url=fake.url(),
                title=_truncate(fake.catch_phrase(), TITLE_MAX_LENGTH),
                description=fake.sentence(),
                is_external=fake.boolean(chance_of_getting_true=80),
                is_trusted=fake.boolean(chance_of_getting_true=30),
            )
            for _ in range(count)
        ]
