import pytest

from peptide_store.services.calculator import DosageUnit, calculate_dosage


def test_reference_dose():
    """5 mg vial in 2 ml, 250 mcg dose."""
    result = calculate_dosage(5, 2, 250)
    assert result.units == 10.0
    assert result.ml_needed == 0.1
    assert result.concentration_mg_per_ml == 2.5
    assert result.concentration_mcg_per_unit == 25.0


def test_dose_in_mg():
    result = calculate_dosage(10, 1, 2.5, DosageUnit.MG)
    assert result.units == 25.0
    assert result.ml_needed == 0.25
    assert result.concentration_mg_per_ml == 10.0
    assert result.concentration_mcg_per_unit == 100.0


def test_unit_accepts_plain_string():
    assert calculate_dosage(5, 2, 0.25, "mg") == calculate_dosage(5, 2, 250, "mcg")


def test_rounding():
    result = calculate_dosage(3, 3, 333)
    assert result.units == 33.3
    assert result.ml_needed == 0.333
    assert result.concentration_mg_per_ml == 1.0


@pytest.mark.parametrize(
    "vial_mg, water_ml, dose",
    [(0, 2, 250), (5, 0, 250), (5, 2, 0), (-5, 2, 250)],
)
def test_non_positive_inputs(vial_mg, water_ml, dose):
    assert calculate_dosage(vial_mg, water_ml, dose) is None
