"""Tests for the response normalizer (pure, no I/O)."""

from __future__ import annotations

import pytest

from hrdesk.pagination.normalizer import normalize

ROWS = [{"id": 1}, {"id": 2}]


# ── precedence ────────────────────────────────────────────────────────────


class TestPrecedence:
    @pytest.mark.parametrize(
        "raw, shape",
        [
            ({"items": ROWS, "total": 2, "page": 1, "limit": 25, "totalPages": 1}, "items"),
            ({"data": ROWS, "total": 2, "page": 1, "limit": 25, "totalPages": 1}, "data"),
            ({"results": ROWS, "total": 2}, "results"),
            (ROWS, "array"),
            ({"assets": ROWS, "total": 2}, "assets"),
            ({"whatever": ROWS}, "fallback:whatever"),
        ],
    )
    def test_each_shape_yields_items(self, raw, shape):
        resp = normalize(raw, entity_keys=("assets",))
        assert resp.items == ROWS
        assert resp.shape == shape

    def test_no_array_yields_default(self):
        resp = normalize({"unexpectedKey": "not an array"}, requested_limit=25)
        assert resp.items == []
        assert resp.meta.total == 0
        assert resp.meta.page == 1
        assert resp.meta.limit == 25
        assert resp.meta.total_pages == 1

    def test_items_beats_extra_array(self):
        raw = {"departments": [{"id": "d"}], "items": ROWS, "total": 2}
        assert normalize(raw).items == ROWS

    def test_data_beats_entity_key(self):
        raw = {"assets": [{"id": "x"}], "data": ROWS}
        assert normalize(raw, entity_keys=("assets",)).items == ROWS

    def test_entity_key_beats_generic_fallback(self):
        raw = {"errors": [], "assetRequests": ROWS}
        resp = normalize(raw, entity_keys=("assetRequests",))
        assert resp.items == ROWS

    @pytest.mark.parametrize("raw", [None, 42, "text", True, {"items": "nope"}])
    def test_garbage_never_raises(self, raw):
        resp = normalize(raw)
        assert resp.items == []
        assert resp.meta.total_pages == 1


# ── metadata ──────────────────────────────────────────────────────────────


class TestMeta:
    def test_items_meta_and_counts(self):
        raw = {
            "items": ROWS,
            "total": 40,
            "page": 2,
            "limit": 2,
            "totalPages": 20,
            "counts": {"total": 40, "pending": 10, "approved": "30"},
        }
        meta = normalize(raw).meta
        assert (meta.total, meta.page, meta.limit, meta.total_pages) == (40, 2, 2, 20)
        assert meta.counts == {"total": 40, "pending": 10, "approved": 30}
        assert meta.server_reported_totals is False  # decided later by the estimator

    def test_bare_array_is_full_snapshot(self):
        meta = normalize(ROWS).meta
        assert (meta.total, meta.page, meta.limit, meta.total_pages) == (2, 1, 2, 1)
        assert meta.server_reported_totals is True

    def test_snake_case_and_nested_pagination(self):
        raw = {"data": ROWS, "pagination": {"total_pages": 3, "total": 6, "page_size": 2}}
        meta = normalize(raw).meta
        assert meta.total == 6
        assert meta.total_pages == 3
        assert meta.limit == 2

    def test_fallback_shape_leaves_meta_unknown(self):
        meta = normalize({"rows": ROWS}).meta
        assert meta.total is None
        assert meta.total_pages is None

    def test_bad_meta_values_ignored(self):
        raw = {"items": ROWS, "total": "many", "page": -1, "totalPages": True, "counts": [1]}
        meta = normalize(raw).meta
        assert meta.total is None
        assert meta.page is None
        assert meta.total_pages is None
        assert meta.counts is None
