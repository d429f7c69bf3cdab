"""
Multi-strategy variant extraction.

A product page is tried against each strategy in a fixed order:

    TRY_TABLE -> TRY_LABEL_VALUE -> TRY_PROSE -> TRY_NUMBERED_FALLBACK -> DONE

The first strategy that yields at least one meaningful variant wins; its
variants are deduplicated and returned. Strategy output is never merged.
"""
from __future__ import annotations

from typing import Dict, List, Optional

from ..logger import get_logger
from ..models import (
    ExtractionConfig,
    ExtractionResult,
    ExtractionState,
    TaxConvention,
    Variant,
)
from .strategies import (
    Document,
    Strategy,
    extract_from_label_values,
    extract_from_numbered_lines,
    extract_from_prose,
    extract_from_tables,
)
from .variant_merge import dedupe

logger = get_logger(__name__)


STRATEGY_ORDER: List[ExtractionState] = [
    ExtractionState.TRY_TABLE,
    ExtractionState.TRY_LABEL_VALUE,
    ExtractionState.TRY_PROSE,
    ExtractionState.TRY_NUMBERED_FALLBACK,
    ExtractionState.DONE,
]

STRATEGIES: Dict[ExtractionState, Strategy] = {
    ExtractionState.TRY_TABLE: extract_from_tables,
    ExtractionState.TRY_LABEL_VALUE: extract_from_label_values,
    ExtractionState.TRY_PROSE: extract_from_prose,
    ExtractionState.TRY_NUMBERED_FALLBACK: extract_from_numbered_lines,
}


def next_state(state: ExtractionState, yielded: bool) -> ExtractionState:
    """
    Transition function of the extraction state machine.

    Args:
        state: Current state
        yielded: Whether the current state's strategy produced variants

    Returns:
        DONE when the strategy yielded, otherwise the next state in order
    """
    if state is ExtractionState.DONE or yielded:
        return ExtractionState.DONE
    return STRATEGY_ORDER[STRATEGY_ORDER.index(state) + 1]


class VariantExtractor:
    """
    Extracts product variants from one vendor page.

    The extractor holds no per-document state; one instance may be reused
    for any number of documents.
    """

    def __init__(
        self,
        config: Optional[ExtractionConfig] = None,
        strategies: Optional[Dict[ExtractionState, Strategy]] = None,
    ):
        """
        Initialize the extractor.

        Args:
            config: Extraction configuration (defaults to ExtractionConfig.default())
            strategies: Strategy per state, for replacing individual strategies
        """
        self.config = config or ExtractionConfig.default()
        self.strategies = dict(STRATEGIES)
        if strategies:
            self.strategies.update(strategies)

    def extract(self, raw: Optional[str], tax_convention: Optional[TaxConvention] = None) -> ExtractionResult:
        """
        Run the strategies over a document until one yields.

        Args:
            raw: Decoded page markup or text
            tax_convention: Overrides the configured convention for this call

        Returns:
            ExtractionResult; never raises for malformed input
        """
        result = ExtractionResult()
        if not raw or not raw.strip():
            return result

        config = self.config
        if tax_convention is not None:
            config = config.with_convention(tax_convention)

        try:
            document = Document.parse(raw)
        except Exception as e:
            logger.warning("EXTRACT Could not parse document: %s", e)
            result.errors.append(f"parse: {e}")
            return result

        state = STRATEGY_ORDER[0]
        while state is not ExtractionState.DONE:
            result.attempted.append(state)
            variants = self._run(state, document, config, result)
            yielded = bool(variants)

            if yielded:
                result.strategy = state
                result.variants = dedupe(variants)
                logger.debug(
                    "EXTRACT %s yielded %d variants (%d unique)",
                    state.value, len(variants), len(result.variants),
                )

            state = next_state(state, yielded)

        if result.strategy is None:
            logger.debug("EXTRACT No variants found")

        return result

    def _run(
        self,
        state: ExtractionState,
        document: Document,
        config: ExtractionConfig,
        result: ExtractionResult,
    ) -> List[Variant]:
        """Run one strategy; failures count as zero yield."""
        strategy = self.strategies.get(state)
        if strategy is None:
            return []

        logger.debug("EXTRACT Trying %s", state.value)
        try:
            variants = strategy(document, config)
        except Exception as e:
            logger.warning("EXTRACT %s failed: %s", state.value, e)
            result.errors.append(f"{state.value}: {e}")
            return []

        return [v for v in variants if v.is_meaningful()]


def extract_variants(
    raw: Optional[str],
    tax_convention: Optional[TaxConvention] = None,
    config: Optional[ExtractionConfig] = None,
) -> List[Variant]:
    """
    Extract the deduplicated variants of one product page.

    Args:
        raw: Decoded page markup or text
        tax_convention: Convention for prices without a tax marker
        config: Extraction configuration

    Returns:
        Variants in document order; empty when nothing was found

    Examples:
        >>> extract_variants("●SE75／195mm／約75g")
        [Variant(weight=75.0, length=195, price=None, color_name=None, model_label='SE75')]
    """
    return VariantExtractor(config).extract(raw, tax_convention=tax_convention).variants
