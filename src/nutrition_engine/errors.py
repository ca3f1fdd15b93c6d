"""Error types raised by the nutrition engine."""

from nutrition_engine.domain.nutrition import NutritionSource


class NutritionEngineError(Exception):
    """Base class for nutrition engine failures."""


class ProviderError(NutritionEngineError):
    """A single provider attempt failed (network, HTTP status or payload)."""

    def __init__(
        self, source: NutritionSource, message: str, status_code: int | None = None
    ) -> None:
        super().__init__(f"{source.value}: {message}")
        self.source = source
        self.status_code = status_code


class ProviderTimeoutError(ProviderError):
    """A provider attempt exceeded its time budget."""

    def __init__(self, source: NutritionSource, timeout_seconds: float) -> None:
        super().__init__(source, f"timed out after {timeout_seconds}s")
        self.timeout_seconds = timeout_seconds


class NoResultsError(NutritionEngineError):
    """A provider answered but returned no usable food."""

    def __init__(self, source: NutritionSource, term: str) -> None:
        super().__init__(f"{source.value}: no results for {term!r}")
        self.source = source
        self.term = term


class NutritionNotFoundError(NutritionEngineError):
    """Every provider answered and none knew the food."""

    def __init__(self, term: str) -> None:
        super().__init__(f"No nutrition data found for {term!r}")
        self.term = term


class AllSourcesFailedError(NutritionEngineError):
    """Every provider failed and no cached fallback exists."""

    source = NutritionSource.FALLBACK

    def __init__(self, term: str, errors: list[Exception]) -> None:
        details = "; ".join(str(error) for error in errors) or "no sources attempted"
        super().__init__(f"All nutrition sources failed for {term!r}: {details}")
        self.term = term
        self.errors = errors


class ProfileValidationError(NutritionEngineError, ValueError):
    """A user profile cannot be used for requirement calculations."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("Invalid profile: " + "; ".join(errors))
        self.errors = errors
