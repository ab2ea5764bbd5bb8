"""Composition Root — wires settings and adapters into a SkillTestOrchestrator.

Invariants:
    - The only place that reads Settings and picks concrete adapters
    - Caller-supplied ports always win over settings-derived defaults
    - Without a catalog path or skill_lookup, the engine starts with an empty catalog
"""

import logging

from skillcheck.config import Settings, get_settings
from skillcheck.core.aggregate_modifiers import AttributeModifierTable
from skillcheck.core.port_protocols import CharacterAttributes, EventSink, SkillLookup
from skillcheck.core.random_source import RandomSource, SystemRandomSource
from skillcheck.infrastructure.event_sinks import LoggingEventSink
from skillcheck.infrastructure.observability import setup_logging
from skillcheck.infrastructure.skill_catalog import InMemorySkillCatalog, load_skill_catalog
from skillcheck.services.skill_test_orchestrator import SkillTestOrchestrator

logger = logging.getLogger(__name__)


def build_orchestrator(
    settings: Settings | None = None,
    *,
    skill_lookup: SkillLookup | None = None,
    event_sink: EventSink | None = None,
    random_source: RandomSource | None = None,
    character_attributes: CharacterAttributes | None = None,
    attribute_table: AttributeModifierTable | None = None,
    configure_logging: bool = True,
) -> SkillTestOrchestrator:
    """Build an orchestrator from settings, overriding any port the caller supplies."""
    settings = settings or get_settings()
    if configure_logging:
        setup_logging(settings.log_level, settings.log_format)

    if skill_lookup is None:
        if settings.skill_catalog_path:
            skill_lookup = load_skill_catalog(settings.skill_catalog_path)
        else:
            skill_lookup = InMemorySkillCatalog()
    if event_sink is None:
        event_sink = LoggingEventSink(settings.event_logger_name)
    if random_source is None:
        random_source = SystemRandomSource(settings.random_seed)

    logger.info(
        "Skill test engine ready (seeded=%s, emit_skill_loaded=%s)",
        settings.random_seed is not None, settings.emit_skill_loaded,
    )
    return SkillTestOrchestrator(
        skill_lookup,
        event_sink,
        random_source,
        character_attributes=character_attributes,
        attribute_table=attribute_table,
        emit_skill_loaded=settings.emit_skill_loaded,
    )
