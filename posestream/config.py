"""
Configuration for the pose-stream adapter.

Options are accepted either with the PoseNet camelCase names
(``imageScaleFactor``, ``minConfidence`` ...) or their snake_case field names.
Unknown keys are ignored and missing keys fall back to ``DEFAULTS``.
"""
import logging
import os
from typing import Any, Dict, Literal, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

DetectionType = Literal["single", "multiple"]

SINGLE = "single"
MULTIPLE = "multiple"

VALID_OUTPUT_STRIDES = (8, 16, 32)
VALID_MULTIPLIERS = (0.5, 0.75, 1.0, 1.01)


class PoseNetOptions(BaseModel):
    """Immutable option set shared by the model loader and the estimation loop."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    image_scale_factor: float = Field(0.3, gt=0.0, le=1.0)
    output_stride: int = 16
    flip_horizontal: bool = False
    min_confidence: float = Field(0.5, ge=0.0, le=1.0)
    max_pose_detections: int = Field(5, ge=1)
    score_threshold: float = Field(0.5, ge=0.0, le=1.0)
    nms_radius: float = Field(20.0, gt=0.0)
    detection_type: DetectionType = MULTIPLE
    multiplier: float = 0.75

    @field_validator("output_stride")
    @classmethod
    def _check_output_stride(cls, value: int) -> int:
        if value not in VALID_OUTPUT_STRIDES:
            raise ValueError(f"output_stride must be one of {VALID_OUTPUT_STRIDES}, got {value}")
        return value

    @field_validator("multiplier")
    @classmethod
    def _check_multiplier(cls, value: float) -> float:
        if value not in VALID_MULTIPLIERS:
            raise ValueError(f"multiplier must be one of {VALID_MULTIPLIERS}, got {value}")
        return value

    @classmethod
    def from_mapping(cls, options: Union["PoseNetOptions", Mapping[str, Any], None] = None) -> "PoseNetOptions":
        """Build options from a caller mapping, dropping ``None`` values so they take defaults."""
        if options is None:
            return DEFAULTS
        if isinstance(options, PoseNetOptions):
            return options
        return cls.model_validate(_normalize_keys(options))

    @classmethod
    def from_yaml(cls, config_path: str, section: Optional[str] = "posenet") -> "PoseNetOptions":
        """Load options from a YAML file, reading ``section`` when the file has one."""
        if not os.path.exists(config_path):
            logger.error(f"Configuration file '{config_path}' not found!")
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f) or {}
        except Exception as e:
            logger.error(f"Failed to load config from {config_path}: {e}")
            raise

        if not isinstance(config, dict):
            raise ValueError(f"Configuration file {config_path} must contain a mapping")
        if section and isinstance(config.get(section), dict):
            config = config[section]
        logger.info(f"Successfully loaded configuration from: {config_path}")
        return cls.from_mapping(config)

    def merged(self, **overrides: Any) -> "PoseNetOptions":
        """Return a new option set with ``overrides`` applied field by field."""
        values = self.model_dump()
        values.update(_normalize_keys(overrides))
        return type(self).model_validate(values)


def _normalize_keys(options: Mapping[str, Any]) -> Dict[str, Any]:
    aliases = {field.alias: name for name, field in PoseNetOptions.model_fields.items()}
    normalized = {}
    for key, value in options.items():
        if value is None:
            continue
        normalized[aliases.get(key, key)] = value
    return normalized


DEFAULTS = PoseNetOptions()
