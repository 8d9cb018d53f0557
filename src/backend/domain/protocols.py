"""Domain service interfaces (ports).

These protocols define the contracts that infrastructure implementations
must satisfy.  The application layer depends on these abstractions,
not on concrete classes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from domain.models import Datasets

# ---------------------------------------------------------------------------
# Datasets
# ---------------------------------------------------------------------------


@runtime_checkable
class IDatasetLoader(Protocol):
    """Interface for loading the report, sentiment and interaction datasets.

    Implementations: DatasetLoader (local files or HTTP).
    """

    async def load(
        self,
        analysis_source: str | Path,
        sentiment_source: str | Path,
        interactions_source: str | Path,
    ) -> Datasets: ...


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


@runtime_checkable
class IGenerationClient(Protocol):
    """Interface for text generation.

    ``generate`` must not raise on backend failure; it returns a fallback
    message instead.

    Implementations: OllamaGenerationClient.
    """

    model: str

    async def generate(self, prompt: str) -> str: ...

    async def aclose(self) -> None: ...
