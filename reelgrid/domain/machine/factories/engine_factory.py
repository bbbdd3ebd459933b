# reelgrid/domain/machine/factories/engine_factory.py
import logging
import os
from typing import Dict, Any, Optional

from ..entities.engine_config import EngineConfig
from ..entities.payout_engine import PayoutEngine


PACKAGE_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))
ENGINE_CONFIG_DIR = os.path.join(PACKAGE_ROOT, "application", "config", "engines")
ENGINE_SCHEMA_PATH = os.path.join(PACKAGE_ROOT, "application", "config", "schemas", "engine_schema.json")


class EngineFactory:
    """
    Factory for creating PayoutEngine instances.
    """
    def __init__(self, rng_provider=None):
        """
        Args:
            rng_provider: Optional RNG provider for creating RNG strategies
        """
        self.logger = logging.getLogger("domain.machine.factory")
        self.rng_provider = rng_provider

    def create_engine(self, config: Dict[str, Any], engine_id: Optional[str] = None,
                      rng_strategy_name: str = "mersenne",
                      rng_seed: Optional[int] = None) -> PayoutEngine:
        """
        Create a payout engine from a configuration dictionary.

        Args:
            config: Engine configuration dictionary
            engine_id: Optional explicit id, overrides ``engine_id`` in config
            rng_strategy_name: Name of RNG strategy to use
            rng_seed: Seed for the RNG, falls back to ``rng_seed`` in config

        Returns:
            Initialized PayoutEngine

        Raises:
            EngineConfigError: If the configuration is invalid
        """
        engine_config = EngineConfig.from_dict(config)
        engine_id = engine_id or engine_config.engine_id
        self.logger.info(f"Creating payout engine: {engine_id}")

        rng_strategy = None
        if self.rng_provider:
            if rng_seed is None:
                rng_seed = config.get("rng_seed", None)
            rng_strategy = self.rng_provider.get_rng(rng_strategy_name, rng_seed)
            self.logger.debug(f"Using RNG strategy: {rng_strategy_name}, seed: {rng_seed}")
        else:
            self.logger.warning("No RNG provider available, engine will need RNG set later")

        return PayoutEngine(engine_id, engine_config, rng_strategy)

    def create_engine_from_file(self, config_loader, file_path: str,
                                engine_id: Optional[str] = None,
                                rng_strategy_name: str = "mersenne",
                                rng_seed: Optional[int] = None) -> PayoutEngine:
        """
        Create an engine from a YAML file, validated against the engine schema.
        Without an explicit id or ``engine_id`` key the file name is used.
        """
        self.logger.info(f"Creating engine from file: {file_path}")

        config = config_loader.load_file(file_path, schema_path=ENGINE_SCHEMA_PATH)

        if engine_id is None and "engine_id" not in config:
            engine_id = os.path.splitext(os.path.basename(file_path))[0]

        return self.create_engine(config, engine_id, rng_strategy_name, rng_seed)

    @staticmethod
    def preset_path(name: str) -> str:
        """Path of a shipped engine preset such as ``three_reel`` or ``grid_12x8``."""
        return os.path.join(ENGINE_CONFIG_DIR, f"{name}.yaml")
