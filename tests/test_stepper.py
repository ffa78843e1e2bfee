import pytest

from leasedesk.forms.stepper import FormStepper
from leasedesk.forms.steps import STEPS


def test_defaults_to_first_of_all_steps():
    stepper = FormStepper()
    assert stepper.current_step == 1
    assert stepper.total_steps == len(STEPS) == 5


def test_next_and_prev_stay_in_bounds():
    stepper = FormStepper(total_steps=5)
    for _ in range(10):
        stepper.next_step()
    assert stepper.current_step == 5
    assert stepper.is_last_step
    for _ in range(10):
        stepper.prev_step()
    assert stepper.current_step == 1


def test_go_to_step_clamps():
    stepper = FormStepper(total_steps=5)
    assert stepper.go_to_step(0) == 1
    assert stepper.go_to_step(99) == 5
    assert stepper.go_to_step(3) == 3


def test_completion_is_positional():
    stepper = FormStepper(total_steps=5)
    stepper.go_to_step(3)
    assert [stepper.is_step_complete(i) for i in range(1, 6)] == [True, True, False, False, False]


def test_reset_and_initial_clamp():
    stepper = FormStepper(total_steps=5, current_step=9)
    assert stepper.current_step == 5
    stepper.reset()
    assert stepper.current_step == 1


def test_needs_at_least_one_step():
    with pytest.raises(ValueError):
        FormStepper(total_steps=0)
