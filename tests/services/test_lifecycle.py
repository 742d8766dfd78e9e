# tests/services/test_lifecycle.py

import pytest

from app.core.exceptions import ApiError
from app.core.lifecycle import TRANSITIONS, can_transition, ensure_transition


@pytest.mark.parametrize("entity, current, target", [
    ("order", "pending", "processing"),
    ("order", "processing", "refunded"),
    ("order", "completed", "refunded"),
    ("task", "in_progress", "available"),
    ("execution", "completed", "approved"),
    ("dispute", "resolved", "closed"),
    ("transaction", "pending", "failed"),
])
def test_allowed_transitions(entity, current, target):
    assert can_transition(entity, current, target)


@pytest.mark.parametrize("entity, current, target", [
    ("order", "pending", "completed"),
    ("order", "cancelled", "pending"),
    ("execution", "approved", "rejected"),
    ("dispute", "closed", "open"),
    ("transaction", "completed", "failed"),
])
def test_forbidden_transitions(entity, current, target):
    assert not can_transition(entity, current, target)


def test_transitions_target_known_states():
    for entity, table in TRANSITIONS.items():
        for state, targets in table.items():
            for target in targets:
                assert target in table, f"{entity}: {state} -> {target} leads to an unknown state"


def test_ensure_transition_raises_bad_request():
    with pytest.raises(ApiError) as exc_info:
        ensure_transition("order", "refunded", "processing")

    assert exc_info.value.status_code == 400
    assert "refunded" in exc_info.value.detail
