"""Engine components wiring fetch -> fallback -> dedup -> result."""

from .dedup import DeduplicationFilter
from .errors import FailureCategory, FailureKind, FetchFailure, classify, failure_category
from .fallback import FactGenerator, FallbackProvider, LocalFactGenerator
from .fetcher import FactService, HttpFactService
from .messages import MessageCatalog, ResultMapper
from .models import SERVER_ERROR, Error, Fact, Result, ServerError, Success
from .stage import EMPTY_FACT, FetchStage

__all__ = [
    "DeduplicationFilter",
    "EMPTY_FACT",
    "Error",
    "Fact",
    "FactGenerator",
    "FactService",
    "FailureCategory",
    "FailureKind",
    "FallbackProvider",
    "FetchFailure",
    "FetchStage",
    "HttpFactService",
    "LocalFactGenerator",
    "MessageCatalog",
    "Result",
    "ResultMapper",
    "SERVER_ERROR",
    "ServerError",
    "Success",
    "classify",
    "failure_category",
]
