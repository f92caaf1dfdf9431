import logging
import os
from typing import Any, Mapping, Optional

import yaml

from linkcrawl.domain.crawl_config import OPTION_ALIASES, CrawlConfig

logger = logging.getLogger(__name__)

HOOK_OPTIONS = frozenset({"pre_request", "evaluate_page", "on_success"})


class CrawlConfigParser:
    """Parse a YAML dict into a CrawlConfig.

    Responsibility: schema/validation for YAML crawl files. Hooks are code,
    not data, so they are never read from a file; pass them as `hooks`.
    """

    def parse(self, data: Mapping[str, Any], hooks: Optional[Mapping[str, Any]] = None, **overrides) -> CrawlConfig:
        options = {}
        for key, value in dict(data or {}).items():
            name = OPTION_ALIASES.get(key, key)
            if name in HOOK_OPTIONS:
                raise ValueError(f"Hook {key!r} cannot be set from a config file")
            options[name] = value
        options.update({k: v for k, v in overrides.items() if v is not None})
        options.update(hooks or {})
        return CrawlConfig.from_options(options)


class CrawlConfigFileStore:
    """Filesystem/YAML IO for crawl config files."""

    def load_yaml_dict(self, config_path: str) -> Optional[dict]:
        """Return parsed YAML dict for `config_path`, or None if missing/invalid."""
        if not os.path.isfile(config_path):
            logger.warning("Config file %s not found", config_path)
            return None
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except Exception:
            logger.exception("Could not read config file %s", config_path)
            return None
        return data if isinstance(data, dict) else None
