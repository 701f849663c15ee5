"""Category selection with per-category capacities."""

import random
import time

import structlog

from src.config.schemas.pipeline import SelectionConfig
from src.data_model import ContentType
from src.ranker.metrics import RankerMetrics
from src.ranker.models import DroppedEntry, ScoredItem, SelectionResult
from src.ranker.placeholders import placeholder_for


logger = structlog.get_logger()

CATEGORY_ORDER: tuple[ContentType, ...] = (
    ContentType.BLOG,
    ContentType.AUDIO,
    ContentType.VIDEO,
)


class CategorySelector:
    """Partitions ranked items into bounded content categories.

    Items are visited once, highest score first. An item lands in its own
    category while that category has room; otherwise it is dropped. A
    lower-ranked item can never displace one that is already placed.
    """

    def __init__(
        self,
        config: SelectionConfig,
        rng: random.Random,
        run_id: str = "",
    ) -> None:
        """Initialize the selector.

        Args:
            config: Category capacities.
            rng: Seeded generator for placeholder durations.
            run_id: Run identifier for logging.
        """
        self._config = config
        self._rng = rng
        self._log = logger.bind(
            component="ranker",
            subcomponent="selector",
            run_id=run_id,
        )

    def select(self, ranked: list[ScoredItem]) -> SelectionResult:
        """Fill categories from ranked items.

        Args:
            ranked: Scored items; re-sorted stably by score descending.

        Returns:
            SelectionResult with categories, drops and placeholder info.
        """
        start = time.perf_counter()
        metrics = RankerMetrics.get_instance()

        ordered = sorted(ranked, key=lambda s: s.score, reverse=True)
        result = SelectionResult(
            categories={content_type: [] for content_type in CATEGORY_ORDER}
        )

        for scored in ordered:
            content_type = scored.content_type
            bucket = result.categories.setdefault(content_type, [])
            if len(bucket) < self._config.capacity_for(content_type):
                bucket.append(scored)
                continue

            result.dropped.append(
                DroppedEntry(
                    title=scored.item.title,
                    source_id=scored.item.source_id,
                    score=scored.score,
                    reason=f"category_full:{content_type.value}",
                )
            )
            metrics.record_drop(scored.item.source_id)

        for content_type in CATEGORY_ORDER:
            if not result.categories[content_type]:
                result.categories[content_type] = [
                    placeholder_for(content_type, self._rng)
                ]
                result.placeholder_categories.append(content_type)

        duration_ms = (time.perf_counter() - start) * 1000
        metrics.record_items_in(len(ranked))
        metrics.record_items_out(result.selected_count)
        metrics.record_placeholders(len(result.placeholder_categories))
        metrics.record_selection_duration(duration_ms)

        self._log.info(
            "selection_complete",
            items_in=len(ranked),
            items_selected=result.selected_count,
            dropped=len(result.dropped),
            blog=len(result.items_for(ContentType.BLOG)),
            audio=len(result.items_for(ContentType.AUDIO)),
            video=len(result.items_for(ContentType.VIDEO)),
            placeholders=[c.value for c in result.placeholder_categories],
            duration_ms=round(duration_ms, 2),
        )

        return result
