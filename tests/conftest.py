import os

# Run the CUDA backend on numba's simulator unless a caller chose otherwise.
os.environ.setdefault("NUMBA_ENABLE_CUDASIM", "1")

import pytest

from mandeljulia.viewport import DEFAULT_DOMAIN


@pytest.fixture
def default_domain():
    return DEFAULT_DOMAIN
