# tests/unit/logging/test_unit_context.py — v1
"""Tests for logging/context.py — contextual logging variables."""

from __future__ import annotations

import asyncio

import pytest

from mediaref.logging.context import clear_context, get_context, set_scan_context


class TestLogContext:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_initial_state(self):
        ctx = get_context()
        assert ctx.scan_id is None
        assert ctx.trigger is None
        assert ctx.as_dict() == {}

    def test_set_scan_context(self):
        set_scan_context("s1", "forced")
        ctx = get_context()
        assert ctx.scan_id == "s1"
        assert ctx.trigger == "forced"

    def test_clear(self):
        set_scan_context("s1", "forced")
        clear_context()
        assert get_context().as_dict() == {}

    @pytest.mark.asyncio
    async def test_task_context_is_isolated(self):
        async def scan():
            set_scan_context("inner", "background")
            return get_context().scan_id

        assert await asyncio.create_task(scan()) == "inner"
        assert get_context().scan_id is None
