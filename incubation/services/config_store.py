"""Read-through cache for program configuration and rubric templates."""
from typing import Optional

from incubation.config import get_settings
from incubation.core.exceptions import EntityNotFound
from incubation.models import ProgramConfig, ProgramStage, RubricTemplate
from incubation.services.database import DatabaseService
from incubation.services.redis_cache import CacheKeys, RedisCache


class ConfigStore:
    """Programs and templates are immutable within an evaluation cycle."""

    def __init__(self, db: DatabaseService, cache: RedisCache):
        self.db = db
        self.cache = cache
        self.settings = get_settings()

    def get_program(self, program_key: ProgramStage) -> ProgramConfig:
        key = CacheKeys.program(ProgramStage(program_key).value)
        cached = self.cache.get(key, ProgramConfig)
        if cached is not None:
            return cached
        program = self.db.get_program(program_key)
        self.cache.set(key, program, self.settings.cache_ttl_program)
        return program

    def save_program(self, program: ProgramConfig) -> ProgramConfig:
        self.db.save_program(program)
        self.cache.delete(CacheKeys.program(program.key.value))
        return program

    def get_template(self, template_id: str) -> RubricTemplate:
        key = CacheKeys.template(template_id)
        cached = self.cache.get(key, RubricTemplate)
        if cached is not None:
            return cached
        template = self.db.get_template(template_id)
        self.cache.set(key, template, self.settings.cache_ttl_template)
        return template

    def find_template(self, template_id: str) -> Optional[RubricTemplate]:
        """Like ``get_template`` but returns None for an unknown id."""
        try:
            return self.get_template(template_id)
        except EntityNotFound:
            return None

    def save_template(self, template: RubricTemplate) -> RubricTemplate:
        """Store a template; weight errors are rejected before it is saved."""
        template.check_weights(self.settings.rubric_weight_tolerance)
        self.db.save_template(template)
        self.cache.delete(CacheKeys.template(template.id))
        return template
