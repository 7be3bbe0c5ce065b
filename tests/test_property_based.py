"""
Property-based tests using Hypothesis.

Invariants of the guarded consumption calculations that must hold for any
charge history.
"""

import math

from hypothesis import given, strategies as st

from calculations import annotate_series, round2, safe_divide

mileages = st.floats(min_value=0, max_value=500000, allow_nan=False, allow_infinity=False)
amounts = st.floats(min_value=0, max_value=200, allow_nan=False, allow_infinity=False)


def _series(readings):
    """Series rows in date order with the previous reading attached."""
    rows = []
    prev = None
    for mileage, kwh, cost in readings:
        rows.append({"mileage": mileage, "kwh": kwh, "cost": cost, "prev_mileage": prev})
        prev = mileage
    return rows


charge_histories = st.lists(st.tuples(mileages, amounts, amounts), max_size=30)


class TestConsumptionProperties:

    @given(charge_histories)
    def test_at_most_n_minus_one_samples(self, readings):
        """
        Property: the first charge never yields a sample.
        """
        result = annotate_series(_series(readings))
        samples = [r for r in result if r["distance"] is not None]

        assert len(samples) <= max(len(readings) - 1, 0)
        if result:
            assert result[0]["distance"] is None
            assert result[0]["consumption"] is None

    @given(charge_histories)
    def test_non_increasing_pairs_excluded(self, readings):
        """
        Property: a pair whose mileage did not increase carries no sample.
        """
        result = annotate_series(_series(readings))

        for row in result:
            if row["prev_mileage"] is not None and row["mileage"] <= row["prev_mileage"]:
                assert row["distance"] is None
                assert row["consumption"] is None

    @given(charge_histories)
    def test_outputs_always_finite(self, readings):
        """
        Property: no infinities or NaN ever reach the output.
        """
        for row in annotate_series(_series(readings)):
            for key in ("distance", "consumption", "cost_per_kwh"):
                value = row[key]
                assert value is None or math.isfinite(value)


class TestNumberProperties:

    @given(st.floats(min_value=-1e9, max_value=1e9, allow_nan=False, allow_infinity=False))
    def test_round2_stays_close(self, value):
        """
        Property: rounding moves a value by at most half a cent.
        """
        assert abs(round2(value) - value) <= 0.005 + 1e-6

    @given(
        st.floats(allow_nan=False, allow_infinity=False, min_value=-1e6, max_value=1e6),
        st.floats(allow_nan=False, allow_infinity=False, max_value=0),
    )
    def test_safe_divide_rejects_non_positive(self, numerator, denominator):
        assert safe_divide(numerator, denominator) is None
