import pytest

from threadarcs.options import ThreadArcsOptions, get_default_options, set_default_options
from threadarcs.validate import ValidationError


def test_derived_defaults():
    options = ThreadArcsOptions().resolved()

    assert options.padding == 20.0
    assert options.axis_pos == 100.0
    assert options.size == 200.0
    assert options.lambda_ == 0.5
    assert options.radius == 5.0
    assert options.orientation == 'horizontal'
    assert options.disable_tooltip is False


def test_derived_values_follow_overrides():
    options = ThreadArcsOptions.from_mapping({'space': 60, 'maxArcHeight': 50})

    assert options.padding == 30
    assert options.axis_pos == 50
    assert options.size == 100


def test_camel_case_and_snake_case_keys():
    options = ThreadArcsOptions.from_mapping(
        {'lambda': 1.0, 'axisPos': 80, 'disable_tooltip': True, 'orientation': 'vertical'}
    )

    assert options.lambda_ == 1.0
    assert options.axis_pos == 80
    assert options.disable_tooltip is True
    assert options.is_vertical


def test_explicit_padding_is_kept():
    assert ThreadArcsOptions(padding=0).resolved().padding == 0


@pytest.mark.parametrize(
    'values, message_part',
    [
        ({'spacing': 10}, "unknown option 'spacing'"),
        ({'orientation': 'diagonal'}, "'orientation'"),
        ({'space': 0}, "'space' must be positive"),
        ({'radius': 'big'}, "'radius' must be a number"),
        ({'disableTooltip': 'yes'}, "'disable_tooltip' must be boolean"),
        ({'restore_delay': -1}, "'restore_delay' must not be negative"),
        ({'precision': 1.5}, "'precision'"),
    ],
)
def test_invalid_options_rejected(values, message_part):
    with pytest.raises(ValidationError) as exc:
        ThreadArcsOptions.from_mapping(values)

    assert message_part in str(exc.value)


def test_default_options_can_be_replaced():
    previous = get_default_options()
    try:
        set_default_options(ThreadArcsOptions(space=10))
        assert ThreadArcsOptions.from_mapping({}).space == 10
        assert ThreadArcsOptions.from_mapping({}).padding == 5
    finally:
        set_default_options(previous)

    assert ThreadArcsOptions.from_mapping({}).space == 40


def test_default_options_are_copied():
    options = get_default_options()
    options.space = 1

    assert get_default_options().space == 40
