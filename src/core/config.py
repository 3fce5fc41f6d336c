"""
Configuration management for Migrant Health Buddy
"""

import os
from pathlib import Path
from typing import Dict, Any

from dotenv import load_dotenv


# Base paths
BASE_DIR = Path(__file__).parent.parent.parent

load_dotenv(BASE_DIR / ".env")

DATA_DIR = Path(os.getenv('HEALTH_BUDDY_DATA_DIR', BASE_DIR / "data"))


class Config:
    """Main configuration class for Migrant Health Buddy"""

    def __init__(self):
        # Risk scoring weights and tier thresholds
        self.scoring_config = {
            'symptom_weight': 10,
            'travel_history_weight': 15,
            'crowded_places_weight': 10,
            'sick_contact_weight': 20,
            'chronic_disease_weight': 15,
            'abnormal_blood_bonus': 25,
            'high_threshold': 50,    # score > 50 is high
            'medium_threshold': 25,  # 25 < score <= 50 is medium
        }

        # Blood panel cut-offs
        self.blood_panel_config = {
            'hemoglobin_min': 12.0,  # g/dL
            'glucose_max': 100,      # mg/dL
            'cholesterol_max': 200,  # mg/dL
        }

        # Narrative generation
        self.narrative_config = {
            'include_health_indices': True,
        }

        # Local key-value cache
        self.storage_config = {
            'data_dir': DATA_DIR,
            'filename': 'health_buddy_store.json',
        }

        # HTTP API
        self.api_config = {
            'cors_origins': os.getenv(
                'HEALTH_BUDDY_CORS_ORIGINS',
                'http://localhost:5173,http://localhost:8080,http://localhost:3000'
            ).split(','),
        }

        # Logging
        self.logging_config = {
            'level': os.getenv('LOG_LEVEL', 'INFO'),
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        }

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get configuration for a specific section"""
        config_map = {
            'scoring': self.scoring_config,
            'blood_panel': self.blood_panel_config,
            'narrative': self.narrative_config,
            'storage': self.storage_config,
            'api': self.api_config,
            'logging': self.logging_config,
        }
        return config_map.get(section.lower(), {})

    def get_engine_config(self) -> Dict[str, Any]:
        """Flattened settings consumed by RiskAssessmentEngine"""
        merged: Dict[str, Any] = {}
        merged.update(self.scoring_config)
        merged.update(self.blood_panel_config)
        merged.update(self.narrative_config)
        return merged

    @property
    def store_path(self) -> Path:
        return Path(self.storage_config['data_dir']) / self.storage_config['filename']

    def update_config(self, section: str, updates: Dict[str, Any]) -> None:
        """Update a configuration section"""
        if hasattr(self, f'{section}_config'):
            config = getattr(self, f'{section}_config')
            config.update(updates)
        else:
            raise ValueError(f"Unknown configuration section: {section}")


# Global configuration instance
config = Config()
