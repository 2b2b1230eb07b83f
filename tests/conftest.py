import jax.numpy as jnp
import pytest

from satpredict.config import set_dtype


@pytest.fixture(autouse=True)
def _ensure_float64():
    """Set float64 precision before every test.

    Tests that switch to float32 (e.g. in test_config.py) leave the
    module-wide dtype changed; this fixture restores the default so SGP4
    comparisons always run in double precision.
    """
    set_dtype(jnp.float64)
