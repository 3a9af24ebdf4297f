import pytest

import geoscaling as gs


def pytest_configure(config):
    config.addinivalue_line("markers", "tier_a: reference values that must never change")
    for level in (1, 2, 3):
        config.addinivalue_line("markers", f"level_{level}: test level {level}")


# ==============================================================================
# rcParams are process-wide; every test starts from the defaults
# ==============================================================================


@pytest.fixture(scope="function", autouse=True)
def default_rcparams():
    gs.reset_rcparams()
    yield
    gs.reset_rcparams()


@pytest.fixture
def geo():
    """GEO scales with the viscosity and length used throughout the reference values."""
    return gs.geo_scales(viscosity=1e19 * gs.units.Pas, length=1000 * gs.units.km)


@pytest.fixture
def si():
    return gs.si_scales()


@pytest.fixture
def ureg():
    return gs.units.ureg
