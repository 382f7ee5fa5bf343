"""Configuration and entry point for an exploration run."""

import logging
from dataclasses import dataclass
from typing import Optional

from .expansion import ExpansionDriver
from .metrics import ExpansionMetrics
from .rulesets import RulesetCatalog
from .store import GraphStore

logger = logging.getLogger(__name__)


@dataclass
class ExplorerConfig:
    """Configuration for an exploration run."""
    db_path: str = "multiverse.db"
    max_nodes: Optional[int] = None


def run_exploration(config: ExplorerConfig, catalog: Optional[RulesetCatalog] = None) -> ExpansionMetrics:
    """Open the store, seed it if empty, and expand it.

    A store that already holds boards is resumed as-is: boards left
    unexpanded by an interrupted run are expanded again.

    Args:
        config: Run configuration
        catalog: Ruleset catalog (built here if not given)

    Returns:
        Metrics for the run
    """
    catalog = catalog or RulesetCatalog()

    with GraphStore(config.db_path, catalog) as store:
        driver = ExpansionDriver(store, catalog)

        if store.total_boards() == 0:
            root_id = driver.seed()
            logger.info("Seeded empty store with root board %s", root_id.hex())
        else:
            logger.info(
                "Resuming store with %d boards (%d unexpanded)", store.total_boards(), store.unexpanded_count()
            )

        driver.expand_all_nodes(limit=config.max_nodes)
        return driver.metrics
