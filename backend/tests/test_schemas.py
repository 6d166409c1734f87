"""
GeoFeatures Backend — Schema and Configuration Tests
======================================================

What:  Tests for FeatureIn strictness, Feature.from_document and Settings validators.
"""

import pydantic
import pytest
from bson import ObjectId

from app.config import Settings
from app.main import format_validation_errors
from app.schemas.feature import Feature, FeatureIn


class TestFeatureIn:

    def test_defaults_are_zero_values(self):
        assert FeatureIn().to_document() == {"name": "", "lat": 0.0, "lng": 0.0, "category": ""}

    def test_integer_coordinates_accepted(self):
        feature = FeatureIn.model_validate({"lat": 10, "lng": -3})
        assert feature.lat == 10.0

    @pytest.mark.parametrize(
        "body",
        [
            {"lat": "1.5"},
            {"lng": True},
            {"name": 42},
            {"category": ["food"]},
        ],
    )
    def test_wrong_types_rejected(self, body):
        with pytest.raises(pydantic.ValidationError):
            FeatureIn.model_validate(body)


class TestFeatureFromDocument:

    def test_object_id_becomes_hex_string(self):
        oid = ObjectId()
        feature = Feature.from_document(
            {"_id": oid, "name": "Cafe", "lat": 1.5, "lng": 2.5, "category": "food"}
        )
        assert feature.id == str(oid)
        assert feature.model_dump() == {
            "id": str(oid), "name": "Cafe", "lat": 1.5, "lng": 2.5, "category": "food",
        }

    def test_unknown_document_keys_dropped(self):
        feature = Feature.from_document({"_id": ObjectId(), "name": "x", "legacy": 1})
        assert "legacy" not in feature.model_dump()


class TestFormatValidationErrors:

    def test_body_prefix_removed(self):
        errors = [{"loc": ("body", "lat"), "msg": "Input should be a valid number"}]
        assert format_validation_errors(errors) == "lat: Input should be a valid number"

    def test_multiple_errors_joined(self):
        errors = [
            {"loc": ("body", "lat"), "msg": "bad"},
            {"loc": ("body", "name"), "msg": "worse"},
        ]
        assert format_validation_errors(errors) == "lat: bad; name: worse"

    def test_empty_errors(self):
        assert format_validation_errors([]) == "Invalid request body"


class TestSettings:

    def test_cors_origins_list(self):
        settings = Settings(cors_origins="http://a.test, http://b.test")
        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_default_allows_all_origins(self):
        assert Settings().cors_origins_list == ["*"]

    def test_log_level_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            Settings(log_level="loud")
