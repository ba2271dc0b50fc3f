import pytest

from plugin_matrix.models import Project
from plugin_matrix.parameters import ParameterSource


@pytest.fixture
def project():
    return Project()


@pytest.fixture
def make_params():
    """Builds a ParameterSource from a dict, e.g. make_params({"vcs.name": "repo"})."""
    def _make(values=None):
        return ParameterSource(values or {})
    return _make
