"""Tests for the coefficient dataset and its loader."""

import numpy as np
import pytest
import scipy.io

from liar.config import DATASET_ENV_VAR, default_dataset_path
from liar.dataset import CoefficientDataset, load_dataset
from liar.errors import DatasetUnavailable

from conftest import (
    SAMPLE_POLYGONS,
    UNIFORM_COEFFICIENTS,
    make_model_error_table,
    make_sites,
    make_uniform_coefficients,
)


@pytest.fixture
def mat_file(tmp_path):
    """Write a small dataset in the distributed .mat layout."""
    sites = make_sites()
    contents = {
        'Coords': sites,
        'Cs': make_uniform_coefficients(len(sites)),
        'AAIndsCs': (sites[:, 0] >= 280),
        'EMLRrec': make_model_error_table(),
    }
    contents.update(SAMPLE_POLYGONS)
    path = tmp_path / "LIAR_files_v2.mat"
    scipy.io.savemat(path, contents)
    return path


class TestCoefficientDataset:
    """Test suite for CoefficientDataset."""

    def test_arrays_read_only(self, uniform_dataset):
        """Test dataset arrays cannot be modified."""
        with pytest.raises(ValueError):
            uniform_dataset.coefficients[0, 0, 0] = 1.0
        with pytest.raises(ValueError):
            uniform_dataset.site_coordinates[0, 0] = 1.0

    def test_corner_values(self, uniform_dataset):
        """Test corner values are per-channel means ignoring NaN."""
        np.testing.assert_allclose(uniform_dataset.corner_values, UNIFORM_COEFFICIENTS)

    def test_corner_values_mean_of_means(self):
        """Test corner values average over sites first, then equations."""
        sites = make_sites()[:4]
        coefficients = np.full((4, 6, 16), np.nan)
        coefficients[:, 0, :] = 1.0
        coefficients[:, 0, 0] = [1.0, 2.0, 3.0, np.nan]   # mean 2 for equation 1
        dataset = CoefficientDataset(sites, coefficients, make_model_error_table())
        expected = (2.0 + 15 * 1.0) / 16
        assert dataset.corner_values[0] == pytest.approx(expected)
        assert np.isnan(dataset.corner_values[1])

    def test_bad_coefficient_shape(self):
        """Test coefficients must match the site count."""
        sites = make_sites()
        with pytest.raises(DatasetUnavailable):
            CoefficientDataset(sites, np.zeros((len(sites) - 1, 6, 16)), make_model_error_table())

    def test_bad_model_error_shape(self):
        """Test the model error table needs one column per equation plus salinity."""
        sites = make_sites()
        with pytest.raises(DatasetUnavailable):
            CoefficientDataset(sites, make_uniform_coefficients(len(sites)), np.zeros((5, 16)))

    def test_bad_flags(self):
        """Test region flags must match the site count."""
        sites = make_sites()
        with pytest.raises(DatasetUnavailable):
            CoefficientDataset(
                sites, make_uniform_coefficients(len(sites)), make_model_error_table(),
                atlantic_arctic=np.ones(3, dtype=bool),
            )


class TestLoadDataset:
    """Test suite for load_dataset."""

    def test_load(self, mat_file):
        """Test loading a dataset file."""
        dataset = load_dataset(mat_file)
        sites = make_sites()
        assert dataset.num_sites == len(sites)
        np.testing.assert_allclose(dataset.site_coordinates, sites)
        assert dataset.coefficients.shape == (len(sites), 6, 16)
        assert dataset.model_error.shape == (16, 17)
        assert set(dataset.region_polygons) == set(SAMPLE_POLYGONS)
        np.testing.assert_array_equal(dataset.atlantic_arctic, sites[:, 0] >= 280)

    def test_missing_file(self, tmp_path):
        """Test a missing file raises DatasetUnavailable."""
        path = tmp_path / "missing.mat"
        with pytest.raises(DatasetUnavailable) as exc_info:
            load_dataset(path)
        assert exc_info.value.path == path

    def test_unreadable_file(self, tmp_path):
        """Test a file that is not a .mat file raises DatasetUnavailable."""
        path = tmp_path / "broken.mat"
        path.write_bytes(b"not a mat file")
        with pytest.raises(DatasetUnavailable):
            load_dataset(path)

    def test_missing_variables(self, tmp_path):
        """Test a .mat file without coefficients raises DatasetUnavailable."""
        path = tmp_path / "partial.mat"
        scipy.io.savemat(path, {'Coords': make_sites()})
        with pytest.raises(DatasetUnavailable):
            load_dataset(path)

    def test_environment_override(self, mat_file, monkeypatch):
        """Test the environment variable selects the default dataset."""
        monkeypatch.setenv(DATASET_ENV_VAR, str(mat_file))
        assert default_dataset_path() == mat_file
        assert load_dataset().num_sites == len(make_sites())
