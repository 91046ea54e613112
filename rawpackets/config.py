#!/usr/bin/env python3
"""
Codec Configuration
Optional YAML file controlling logging of the packet builders
"""

import os
import logging
from dataclasses import dataclass, asdict, fields
from typing import Dict, Optional, Union

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV = 'RAWPACKETS_CONFIG'


@dataclass
class CodecConfig:
    """Runtime settings for the codec"""
    log_level: Union[str, int] = 'INFO'
    log_format: str = '%(asctime)s - %(levelname)s - %(message)s'
    hexdump: bool = False  # log built headers as hex at DEBUG

    @classmethod
    def from_dict(cls, data: Dict) -> 'CodecConfig':
        """Build config from a mapping, ignoring unknown keys"""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(sorted(unknown))}")
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> Dict:
        return asdict(self)


_active = CodecConfig()


def get_config() -> CodecConfig:
    """Currently active configuration"""
    return _active


class ConfigLoader:
    """Load configuration - YAML file if present, defaults otherwise"""

    def __init__(self, config_file: Optional[str] = None):
        self.config_file = config_file or os.environ.get(CONFIG_ENV)
        self.config = None

    def load(self) -> CodecConfig:
        if not self.config_file:
            self.config = CodecConfig()
            return self.config

        try:
            with open(self.config_file, 'r') as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                logger.warning(f"Config {self.config_file} is not a mapping, using defaults")
                self.config = CodecConfig()
            else:
                self.config = CodecConfig.from_dict(data)
                logger.info(f"Loaded configuration from {self.config_file}")
        except FileNotFoundError:
            logger.info(f"No config found at {self.config_file}, using defaults")
            self.config = CodecConfig()
        except yaml.YAMLError as e:
            logger.error(f"Error loading config {self.config_file}: {e}, using defaults")
            self.config = CodecConfig()

        return self.config

    def save(self, output_file: str):
        """Write the loaded config back out as YAML"""
        with open(output_file, 'w') as f:
            yaml.dump((self.config or CodecConfig()).to_dict(), f, default_flow_style=False)
        logger.info(f"Saved configuration to {output_file}")


def setup_logging(config: Optional[CodecConfig] = None) -> CodecConfig:
    """Install config as the active one and apply its logging settings"""
    global _active

    if config is None:
        config = ConfigLoader().load()

    _active = config
    level = config.log_level
    if not isinstance(level, int):
        level = getattr(logging, str(level).upper(), logging.INFO)

    logging.basicConfig(level=level, format=config.log_format)
    return config
