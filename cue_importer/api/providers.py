"""Providers for the services behind the API, overridable as FastAPI dependencies."""

import logging
from functools import cache

from cue_importer.agents.cue_classifier_agent import CueClassifierAgent
from cue_importer.api.import_registry import ImportRegistry
from cue_importer.mongodb.config import is_mongodb_configured
from cue_importer.mongodb.pattern_store import MongoPatternStore
from cue_importer.mongodb.repositories import LearnedTrackRepository
from cue_importer.pattern_engine import PatternEngine
from cue_importer.pipeline import ImportConfig, get_import_config

logger = logging.getLogger(__name__)


@cache
def import_config() -> ImportConfig:
    """Provide the import configuration read from the environment."""
    return get_import_config()


@cache
def import_registry() -> ImportRegistry:
    """Provide the process-wide import registry."""
    return ImportRegistry()


@cache
def pattern_store() -> MongoPatternStore | None:
    """Provide the MongoDB pattern store, or None without a connection string."""
    if not is_mongodb_configured():
        logger.warning("MONGODB_CONNECTION_STRING not set; pattern learning disabled")
        return None
    return MongoPatternStore.create()


@cache
def pattern_engine() -> PatternEngine | None:
    """Provide a cached PatternEngine so its pattern cache is shared."""
    store = pattern_store()
    if store is None:
        return None
    return PatternEngine(store, thresholds=import_config().patterns)


@cache
def track_database() -> LearnedTrackRepository | None:
    """Provide the learned track repository, or None without a connection string."""
    if not is_mongodb_configured():
        return None
    return LearnedTrackRepository.create()


@cache
def remote_classifier() -> CueClassifierAgent:
    """Provide the LLM classifier agent."""
    return CueClassifierAgent(import_config().remote_model)
