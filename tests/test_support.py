"""Tests for the support matrix and engine catalog."""

import pytest

from mailcompat.core.engines import ENGINES, EngineFamily, family_prefix, get_engine
from mailcompat.rules.support import (
    STRUCTURAL_FEATURES,
    SupportLevel,
    SupportMatrix,
    default_matrix,
    get_support,
    is_structural,
)


class TestCatalog:
    def test_twelve_unique_engines(self):
        ids = [engine.id for engine in ENGINES]
        assert len(ids) == 12
        assert len(set(ids)) == 12

    def test_get_engine(self):
        engine = get_engine("outlook-windows")
        assert engine.rendering_engine == "Microsoft Word"
        assert engine.supports_dark_mode is False
        assert get_engine("lotus-notes") is None

    @pytest.mark.parametrize("engine_id, prefix", [
        ("gmail-web", "gmail"),
        ("gmail-android", "gmail"),
        ("gmail-ios", "gmail"),
        ("outlook-windows", "outlook"),
        ("outlook-web", None),
        ("apple-mail-macos", "apple"),
        ("apple-mail-ios", "apple"),
        ("yahoo-mail", "yahoo"),
        ("samsung-mail", "samsung"),
        ("thunderbird", None),
        ("hey-mail", None),
        ("superhuman", None),
        ("not-an-engine", None),
    ])
    def test_family_prefix(self, engine_id, prefix):
        assert family_prefix(engine_id) == prefix

    def test_every_family_has_an_engine(self):
        assert {engine.family for engine in ENGINES} == set(EngineFamily)


class TestMatrix:
    def test_bundled_table_loads(self):
        matrix = default_matrix()
        assert len(matrix) > 50
        assert "display:grid" in matrix
        assert default_matrix() is matrix

    def test_known_levels(self):
        assert get_support("<style>", "outlook-windows") != SupportLevel.UNKNOWN
        assert get_support("display:flex", "outlook-windows") == SupportLevel.UNSUPPORTED
        assert get_support("display:flex", "gmail-android") == SupportLevel.PARTIAL
        assert get_support("display:flex", "gmail-web") == SupportLevel.SUPPORTED

    def test_every_level_in_table_is_valid(self):
        matrix = default_matrix()
        for feature in matrix.features():
            for engine in ENGINES:
                assert isinstance(matrix.level(feature, engine.id), SupportLevel)

    def test_missing_data_is_unknown(self):
        matrix = SupportMatrix({"gap": {"gmail-web": "unsupported"}})
        assert matrix.level("gap", "thunderbird") == SupportLevel.UNKNOWN
        assert matrix.level("nonexistent", "gmail-web") == SupportLevel.UNKNOWN

    def test_compound_key_is_not_decomposed(self):
        matrix = SupportMatrix({"display": {"gmail-web": "unsupported"}})
        assert matrix.level("display:grid", "gmail-web") == SupportLevel.UNKNOWN

    def test_invalid_level_rejected(self):
        with pytest.raises(ValueError):
            SupportMatrix({"gap": {"gmail-web": "sometimes"}})

    def test_from_toml(self):
        matrix = SupportMatrix.from_toml('[features."gap"]\nhey-mail = "partial"\n')
        assert matrix.level("gap", "hey-mail") == SupportLevel.PARTIAL


def test_structural_set():
    assert is_structural("display:flex")
    assert is_structural("<svg>")
    assert not is_structural("color")
    assert not is_structural("display")
    assert len(STRUCTURAL_FEATURES) == 17
