"""
Pytest configuration for unit tests.

Provides fixtures that apply to all unit tests.
"""

import pytest


@pytest.fixture(autouse=True, scope="function")
def reset_config_singletons():
    """
    Reset cached configuration singletons around every test.

    Tests that patch NONMEM_TEXT_* environment variables must not leak the
    resulting settings into later tests.
    """
    import nonmem_text.config as config

    config._settings = None
    config._section_rules = None
    yield
    config._settings = None
    config._section_rules = None


@pytest.fixture
def listing_text():
    """Minimal listing with estimates, standard errors and diagnostics."""
    return "\n".join([
        " #METH: First Order Conditional Estimation",
        "0MINIMIZATION SUCCESSFUL",
        " ETABAR:        -2.3000E-03  1.5000E-02",
        " SE:             1.0000E-02  2.0000E-02",
        " N:                      40          40",
        "",
        " ETASHRINKSD(%)  1.0000E+01  2.5000E+01",
        " ETASHRINKVR(%)  1.9000E+01  4.3750E+01",
        " #OBJV:************      1234.567      ************",
        " FINAL PARAMETER ESTIMATE",
        " THETA - VECTOR OF FIXED EFFECTS PARAMETERS",
        "         TH 1      TH 2      TH 3",
        "         2.75E+00  7.63E+01  1.52E+00",
        " OMEGA - COV MATRIX FOR RANDOM EFFECTS - ETAS",
        " ETA1",
        "+        1.00E-01",
        " ETA2",
        "+        0.00E+00  2.00E-01",
        " SIGMA - COV MATRIX FOR RANDOM EFFECTS - EPSILONS",
        " EPS1",
        "+        3.00E-02",
        " STANDARD ERROR OF ESTIMATE",
        " THETA - VECTOR OF FIXED EFFECTS PARAMETERS",
        "         TH 1      TH 2      TH 3",
        "         1.10E-01  3.20E+00  9.00E-02",
        "",
        " OMEGA - COV MATRIX FOR RANDOM EFFECTS - ETAS",
        "+        2.00E-02",
        "+       .........  4.00E-02",
        " SIGMA - COV MATRIX FOR RANDOM EFFECTS - EPSILONS",
        "+        5.00E-03",
        " COVARIANCE MATRIX OF ESTIMATE",
        " EIGENVALUES OF COR MATRIX OF ESTIMATE",
        "",
        "             1         2         3",
        "",
        "         2.00E-01  6.00E-01  1.20E+00",
        "",
        " Elapsed estimation  time in seconds:     2.50",
        "",
    ])


@pytest.fixture
def ext_text():
    """Segmented .ext text with one estimation step."""
    return "\n".join([
        "TABLE NO.     1: First Order Conditional Estimation: Goal Function=MINIMUM VALUE OF OBJECTIVE FUNCTION",
        " ITERATION    THETA1       THETA2       OBJ",
        "            0  1.00000E+00  5.00000E+01    1234.5",
        "            5  2.00000E+00  6.00000E+01    1200.1",
        "           10  2.75000E+00  7.63000E+01    1190.8",
        "  -1000000000  2.75000E+00  7.63000E+01    1190.8",
        "  -1000000001  1.20000E-01  3.20000E+00    0.0",
        "",
    ])
