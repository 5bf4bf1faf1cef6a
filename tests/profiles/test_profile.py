import pytest

from solar_prayer.core.model import AsrMethod, HighLatitudeRule
from solar_prayer.profiles.methods import UnknownMethodError
from solar_prayer.profiles.profile import Adjustments, CalculationProfile


def test_defaults():
    p = CalculationProfile()
    assert (p.fajr_angle, p.isha_angle, p.isha_interval) == (18.0, 17.0, None)
    assert p.asr_method is AsrMethod.STANDARD
    assert p.asr_factor == 1
    assert p.high_latitude_rule is HighLatitudeRule.NONE
    assert p.adjustments == Adjustments()
    assert p.dst_minutes == 0


def test_from_method_with_overrides():
    p = CalculationProfile.from_method("Karachi", asr_method="hanafi")
    assert p.method_name == "Karachi"
    assert p.asr_method is AsrMethod.HANAFI
    assert p.asr_factor == 2
    assert p.isha_angle == 18.0


def test_from_method_interval():
    p = CalculationProfile.from_method("UmmAlQura")
    assert p.isha_is_interval
    assert p.isha_angle is None


def test_from_unknown_method():
    with pytest.raises(UnknownMethodError):
        CalculationProfile.from_method("nope")


def test_set_calculation_method_keeps_other_choices():
    p = CalculationProfile(asr_method=AsrMethod.HANAFI)
    p.set_adjustments(dhuhr=2)
    p.set_calculation_method("UmmAlQura")
    assert p.isha_interval == 90
    assert p.isha_angle is None
    assert p.asr_method is AsrMethod.HANAFI
    assert p.adjustments.dhuhr == 2
    p.set_calculation_method("mwl")
    assert (p.isha_angle, p.isha_interval) == (17.0, None)


def test_isha_setters_are_exclusive():
    p = CalculationProfile()
    p.set_isha_interval(75)
    assert (p.isha_angle, p.isha_interval) == (None, 75)
    assert p.method_name == "custom"
    p.set_isha_angle(16.5)
    assert (p.isha_angle, p.isha_interval) == (16.5, None)


@pytest.mark.parametrize("angle", [0.0, -3.0, 90.0])
def test_bad_angles(angle):
    p = CalculationProfile()
    with pytest.raises(ValueError):
        p.set_fajr_angle(angle)
    with pytest.raises(ValueError):
        p.set_isha_angle(angle)


def test_constructor_rejects_both_isha_settings():
    with pytest.raises(ValueError):
        CalculationProfile(isha_angle=17.0, isha_interval=90)
    with pytest.raises(ValueError):
        CalculationProfile(isha_angle=None, isha_interval=None)


def test_negative_interval_rejected():
    with pytest.raises(ValueError):
        CalculationProfile().set_isha_interval(-1)


def test_dst():
    p = CalculationProfile()
    p.set_dst(True)
    assert p.dst_minutes == 60
    p.set_dst(False)
    assert p.dst_minutes == 0
    p.set_dst_minutes(30)
    assert p.dst_minutes == 30


def test_string_rules_are_parsed():
    p = CalculationProfile(asr_method="hanafi", high_latitude_rule="one_seventh")
    assert p.asr_method is AsrMethod.HANAFI
    assert p.high_latitude_rule is HighLatitudeRule.ONE_SEVENTH
    p.set_high_latitude_rule("angle-based")
    assert p.high_latitude_rule is HighLatitudeRule.ANGLE_BASED
    p.set_asr_method(1)
    assert p.asr_method is AsrMethod.STANDARD


def test_copy_is_independent():
    p = CalculationProfile()
    q = p.copy()
    q.set_dst(True)
    assert p.dst_minutes == 0


def test_adjustments_mapping():
    adj = Adjustments.from_mapping({"fajr": 2, "isha": -3})
    assert adj.as_dict() == {
        "fajr": 2,
        "sunrise": 0,
        "dhuhr": 0,
        "asr": 0,
        "maghrib": 0,
        "isha": -3,
    }
    with pytest.raises(ValueError):
        Adjustments.from_mapping({"zuhr": 1})


def test_from_method_override_switches_isha_to_interval():
    p = CalculationProfile.from_method("MWL", isha_interval=90)
    assert (p.isha_angle, p.isha_interval) == (None, 90)
    assert p.fajr_angle == 18.0


def test_from_method_override_switches_isha_to_angle():
    p = CalculationProfile.from_method("UmmAlQura", isha_angle=17.0)
    assert (p.isha_angle, p.isha_interval) == (17.0, None)
    assert p.fajr_angle == 18.5


def test_from_method_rejects_both_isha_overrides():
    with pytest.raises(ValueError):
        CalculationProfile.from_method("MWL", isha_angle=17.0, isha_interval=90)
