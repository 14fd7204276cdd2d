from itertools import product

import pytest

from src.core.exceptions import IllegalTransitionError, MissingCancellationReasonError
from src.modules.scheduling.lifecycle import (
    CancellationInfo,
    allowed_targets,
    check_transition,
    is_reactivation,
    is_transition_allowed,
)
from src.shared.enums import AppointmentStatus as S
from src.shared.enums import CancellationReason

LEGAL = {
    (S.SCHEDULED, S.CONFIRMED),
    (S.SCHEDULED, S.COMPLETED),
    (S.SCHEDULED, S.CANCELLED),
    (S.SCHEDULED, S.NO_SHOW),
    (S.CONFIRMED, S.COMPLETED),
    (S.CONFIRMED, S.CANCELLED),
    (S.CONFIRMED, S.NO_SHOW),
    (S.CANCELLED, S.SCHEDULED),
    (S.NO_SHOW, S.SCHEDULED),
    (S.NO_SHOW, S.COMPLETED),
}

VALID_CANCELLATION = CancellationInfo(reason=CancellationReason.PATIENT_REQUEST)


@pytest.mark.parametrize("current,target", sorted(LEGAL))
def test_listed_transitions_are_accepted(current, target):
    assert is_transition_allowed(current, target)
    check_transition(current, target, VALID_CANCELLATION)


@pytest.mark.parametrize(
    "current,target",
    sorted(pair for pair in product(S, S) if pair not in LEGAL),
)
def test_every_unlisted_pair_is_rejected(current, target):
    assert not is_transition_allowed(current, target)
    with pytest.raises(IllegalTransitionError) as exc:
        check_transition(current, target, VALID_CANCELLATION)
    assert exc.value.status_code == 409
    assert exc.value.code == "illegal_transition"


def test_completed_is_terminal():
    assert allowed_targets(S.COMPLETED) == frozenset()


def test_cancellation_without_reason_is_rejected():
    with pytest.raises(MissingCancellationReasonError):
        check_transition(S.SCHEDULED, S.CANCELLED)
    with pytest.raises(MissingCancellationReasonError):
        check_transition(S.CONFIRMED, S.CANCELLED, CancellationInfo(reason=None))


@pytest.mark.parametrize("details", [None, "", "    ", "abcd", "  ab  "])
def test_other_reason_needs_five_characters_of_details(details):
    info = CancellationInfo(reason=CancellationReason.OTHER, details=details)
    with pytest.raises(MissingCancellationReasonError):
        check_transition(S.SCHEDULED, S.CANCELLED, info)


@pytest.mark.parametrize("details", ["abcde", "Patient moved to another city"])
def test_other_reason_with_enough_details_is_accepted(details):
    check_transition(S.SCHEDULED, S.CANCELLED, CancellationInfo(reason=CancellationReason.OTHER, details=details))


def test_illegal_transition_wins_over_missing_reason():
    with pytest.raises(IllegalTransitionError):
        check_transition(S.COMPLETED, S.CANCELLED)


def test_reactivation_is_detected_only_back_to_scheduled():
    assert is_reactivation(S.CANCELLED, S.SCHEDULED)
    assert is_reactivation(S.NO_SHOW, S.SCHEDULED)
    assert not is_reactivation(S.NO_SHOW, S.COMPLETED)
    assert not is_reactivation(S.SCHEDULED, S.CONFIRMED)
