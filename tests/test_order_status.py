import pytest

from canteen.core.constants import OrderStatus as S
from canteen.core.errors import ValidationError
from canteen.services.order_status import check_transition


@pytest.mark.parametrize("current,target", [
    (S.placed, S.preparing),
    (S.placed, S.ready),
    (S.placed, S.completed),
    (S.preparing, S.ready),
    (S.ready, S.completed),
    (S.placed, S.cancelled),
    (S.preparing, S.cancelled),
    (S.ready, S.cancelled),
])
def test_allowed(current, target):
    check_transition(current, target)


@pytest.mark.parametrize("current,target", [
    (S.preparing, S.placed),
    (S.ready, S.preparing),
    (S.placed, S.placed),
])
def test_backward_or_same_rejected(current, target):
    with pytest.raises(ValidationError):
        check_transition(current, target)


@pytest.mark.parametrize("current", [S.completed, S.cancelled])
@pytest.mark.parametrize("target", list(S))
def test_terminal_states_are_frozen(current, target):
    with pytest.raises(ValidationError) as exc:
        check_transition(current, target)
    assert exc.value.message == "Cannot modify completed or cancelled orders"
