"""Tests for the bounded selection set."""

from __future__ import annotations

import pytest

from designirl.engine.selection import SelectionSet
from tests.conftest import RECORDS


def test_toggle_adds_in_click_order():
    sel = SelectionSet(max_size=5)
    sel.toggle(RECORDS[2])
    sel.toggle(RECORDS[0])
    assert sel.ids() == ["pin-3", "pin-1"]


def test_toggle_twice_restores_previous_state():
    sel = SelectionSet(max_size=5)
    sel.toggle(RECORDS[0])
    before = sel.ids()
    assert sel.toggle(RECORDS[1]) is True
    assert sel.toggle(RECORDS[1]) is True
    assert sel.ids() == before


def test_new_item_ignored_at_bound():
    sel = SelectionSet(max_size=5)
    for r in RECORDS[:5]:
        sel.toggle(r)
    assert sel.is_full
    assert sel.toggle(RECORDS[5]) is False
    assert sel.ids() == [r.id for r in RECORDS[:5]]


def test_removal_allowed_at_bound():
    sel = SelectionSet(max_size=2)
    sel.toggle(RECORDS[0])
    sel.toggle(RECORDS[1])
    sel.toggle(RECORDS[0])
    assert sel.ids() == ["pin-2"]


def test_radio_replaces_selection():
    sel = SelectionSet(max_size=5, radio=True)
    sel.toggle(RECORDS[0])
    sel.toggle(RECORDS[1])
    assert sel.ids() == ["pin-2"]
    assert sel.bound == 1


def test_radio_reclick_is_noop():
    sel = SelectionSet(radio=True)
    sel.toggle(RECORDS[0])
    assert sel.toggle(RECORDS[0]) is False
    assert sel.ids() == ["pin-1"]


def test_membership_by_id():
    sel = SelectionSet()
    sel.toggle(RECORDS[0])
    assert "pin-1" in sel
    assert "pin-2" not in sel
    assert len(sel) == 1


def test_invalid_bound():
    with pytest.raises(ValueError):
        SelectionSet(max_size=0)
