"""Tests for config section models."""

import pytest
from pydantic import ValidationError

from jumpnet.config.models import JumpNetConfig, RelatedConfig, StorageConfig, TrackingConfig


class TestDefaults:
    def test_root_defaults(self) -> None:
        cfg = JumpNetConfig()
        assert cfg.workspace.name is None
        assert cfg.storage.directory == ".jumpnet"
        assert cfg.storage.save_delay_ms == 10_000
        assert cfg.related.max_items == 10

    def test_sections_frozen(self) -> None:
        with pytest.raises(ValidationError):
            StorageConfig().save_delay_ms = 1  # type: ignore[misc]


class TestValidation:
    def test_negative_delay(self) -> None:
        with pytest.raises(ValidationError):
            StorageConfig(save_delay_ms=-1)

    def test_zero_delay_allowed(self) -> None:
        assert StorageConfig(save_delay_ms=0).save_delay_ms == 0

    def test_timeout_can_be_disabled(self) -> None:
        assert StorageConfig(save_timeout_s=None).save_timeout_s is None

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            StorageConfig(save_timeout_s=0)

    def test_increment_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            TrackingConfig(weight_increment=0)

    def test_increment_must_be_finite(self) -> None:
        with pytest.raises(ValidationError):
            TrackingConfig(weight_increment=float("inf"))

    def test_max_items_at_least_one(self) -> None:
        with pytest.raises(ValidationError):
            RelatedConfig(max_items=0)

    def test_model_validate_nested(self) -> None:
        cfg = JumpNetConfig.model_validate({"related": {"max_items": 3}})
        assert cfg.related.max_items == 3
        assert cfg.tracking.weight_increment == 1.0
