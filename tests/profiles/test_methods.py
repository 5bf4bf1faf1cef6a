import pytest

from solar_prayer.profiles.methods import (
    DEFAULT_METHOD,
    NAMED_METHODS,
    MethodDefinition,
    UnknownMethodError,
    get_method,
    method_names,
)


@pytest.mark.parametrize(
    "name, fajr, isha, interval",
    [
        ("MWL", 18.0, 17.0, None),
        ("ISNA", 15.0, 15.0, None),
        ("Egyptian", 19.5, 17.5, None),
        ("Karachi", 18.0, 18.0, None),
        ("UmmAlQura", 18.5, None, 90),
        ("Gulf", 19.5, None, 90),
        ("Tehran", 17.7, 14.0, None),
    ],
)
def test_well_known_methods(name, fajr, isha, interval):
    d = NAMED_METHODS[name]
    assert d.fajr_angle == fajr
    assert d.isha_angle == isha
    assert d.isha_interval == interval


def test_every_method_has_exactly_one_isha_setting():
    for d in NAMED_METHODS.values():
        assert (d.isha_angle is None) != (d.isha_interval is None), d.name
        assert 0.0 < d.fajr_angle < 90.0


def test_default_method_exists():
    assert DEFAULT_METHOD in NAMED_METHODS
    assert method_names()[0] == DEFAULT_METHOD


def test_lookup_is_case_insensitive():
    assert get_method("  ummalqura ") is NAMED_METHODS["UmmAlQura"]
    assert get_method("mwl").name == "MWL"


def test_unknown_method_lists_valid_names():
    with pytest.raises(UnknownMethodError) as exc:
        get_method("Atlantis")
    msg = str(exc.value)
    assert "Atlantis" in msg
    assert "MWL" in msg
    # Still a KeyError for callers that catch the broad type.
    assert isinstance(exc.value, KeyError)


def test_registry_is_read_only():
    with pytest.raises(TypeError):
        NAMED_METHODS["Mine"] = NAMED_METHODS["MWL"]  # type: ignore[index]


def test_definition_requires_one_isha_setting():
    with pytest.raises(ValueError):
        MethodDefinition("X", "both", 18.0, isha_angle=17.0, isha_interval=90)
    with pytest.raises(ValueError):
        MethodDefinition("X", "neither", 18.0)
