import numpy as np
import pandas as pd
import pytest

from gerry_evasion.data.vote_vector import (
    load_start_csv,
    preset_start,
    resolve_start,
    uniform_start,
    validate_vote_vector,
)


def test_uniform_start():
    v = uniform_start(18)
    assert v.shape == (18,)
    assert np.all(v == 0.5)


def test_pa_2012_preset():
    v = preset_start("pa_2012")
    assert v.shape == (18,)
    assert v[0] == pytest.approx(0.849)
    assert v[-1] == pytest.approx(0.36)
    with pytest.raises(KeyError):
        preset_start("tx_2020")


@pytest.mark.parametrize(
    "values",
    [
        [0.5] * 17,
        [[0.5] * 18],
        [0.5] * 17 + [1.2],
        [0.5] * 17 + [float("nan")],
    ],
)
def test_validate_rejects(values):
    with pytest.raises(ValueError):
        validate_vote_vector(values, 18)


def test_validate_allows_out_of_band_shares():
    v = validate_vote_vector(preset_start("pa_2012"), 18)
    assert v.max() > 0.85


def test_load_csv_share_column(tmp_path):
    path = tmp_path / "districts.csv"
    pd.DataFrame({"district": [1, 2, 3], "dem_share": [0.4, 0.55, 0.6]}).to_csv(path, index=False)
    np.testing.assert_allclose(load_start_csv(path), [0.4, 0.55, 0.6])


def test_load_csv_from_votes_and_percent(tmp_path):
    votes = tmp_path / "votes.csv"
    pd.DataFrame({"dem_votes": [40, 300], "rep_votes": [60, 100]}).to_csv(votes, index=False)
    np.testing.assert_allclose(load_start_csv(votes), [0.4, 0.75])

    pct = tmp_path / "pct.csv"
    pd.DataFrame({"D_PCT": [42.8, 60.3]}).to_csv(pct, index=False)
    np.testing.assert_allclose(load_start_csv(pct, column="D_PCT"), [0.428, 0.603])


def test_load_csv_errors(tmp_path):
    path = tmp_path / "bad.csv"
    pd.DataFrame({"dem_share": [0.4, None]}).to_csv(path, index=False)
    with pytest.raises(ValueError):
        load_start_csv(path)
    with pytest.raises(KeyError):
        load_start_csv(path, column="missing")
    with pytest.raises(FileNotFoundError):
        load_start_csv(tmp_path / "nope.csv")


def test_resolve_start(tmp_path):
    np.testing.assert_array_equal(resolve_start(None, 4), np.full(4, 0.5))
    np.testing.assert_array_equal(resolve_start("uniform", 4), np.full(4, 0.5))
    assert resolve_start("pa_2012", 18).shape == (18,)

    path = tmp_path / "d.csv"
    pd.DataFrame({"dem_share": [0.3, 0.7]}).to_csv(path, index=False)
    np.testing.assert_allclose(resolve_start(str(path), 2), [0.3, 0.7])
    with pytest.raises(ValueError):
        resolve_start(str(path), 3)
