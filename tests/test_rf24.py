import pytest

from milighthub.rf24 import (
    RF24Channel,
    RF24PowerLevel,
    all_channels,
    channel_from_name,
    channel_name,
    default_channel,
    default_power_level,
    power_level_from_name,
    power_level_name,
    power_level_rf24_value,
)


@pytest.mark.parametrize("channel", list(RF24Channel))
def test_channel_round_trip(channel):
    assert channel_from_name(channel_name(channel)) is channel


def test_channel_names():
    assert channel_name(RF24Channel.RF24_LOW) == "LOW"
    assert channel_name(RF24Channel.RF24_MID) == "MID"
    assert channel_name(RF24Channel.RF24_HIGH) == "HIGH"


def test_unknown_channel_name_gives_default():
    assert channel_from_name("low") is default_channel()
    assert default_channel() is RF24Channel.RF24_HIGH


def test_out_of_range_channel_value_gives_default_name():
    assert channel_name(9) == channel_name(default_channel())


def test_all_channels_in_order():
    assert all_channels() == [RF24Channel.RF24_LOW, RF24Channel.RF24_MID, RF24Channel.RF24_HIGH]


@pytest.mark.parametrize("level", list(RF24PowerLevel))
def test_power_level_round_trip(level):
    assert power_level_from_name(power_level_name(level)) is level


def test_power_level_names_and_default():
    assert power_level_name(RF24PowerLevel.RF24_MIN) == "MIN"
    assert power_level_from_name("bogus") is default_power_level()
    assert default_power_level() is RF24PowerLevel.RF24_MAX


def test_power_level_rf24_value_ordering():
    values = [power_level_rf24_value(level) for level in RF24PowerLevel]
    assert values == sorted(values)
    assert power_level_rf24_value(RF24PowerLevel.RF24_MIN) == 0