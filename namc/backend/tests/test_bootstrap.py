import pytest

from permit_intel.adapters.permits.shovels import ShovelsPermitSource
from permit_intel.adapters.permits.stub_json import StubJsonPermitSource
from permit_intel.domain.errors import ConfigurationError
from permit_intel.service_layer.bootstrap import build_permit_service, build_permit_source


def test_shovels_is_the_default(settings):
    assert isinstance(build_permit_source(settings), ShovelsPermitSource)


def test_stub_json_allowed_in_test(settings):
    s = settings.model_copy(update={"PERMIT_SOURCE": "stub_json"})
    assert isinstance(build_permit_source(s), StubJsonPermitSource)


def test_stub_json_refused_in_prod(settings):
    s = settings.model_copy(update={"PERMIT_SOURCE": "stub_json", "ENV": "prod"})
    with pytest.raises(ConfigurationError):
        build_permit_source(s)


def test_unknown_source(settings):
    s = settings.model_copy(update={"PERMIT_SOURCE": "accela"})
    with pytest.raises(ConfigurationError):
        build_permit_source(s)


def test_missing_llm_key_fails_at_construction(settings):
    s = settings.model_copy(update={"ANTHROPIC_API_KEY": None})
    with pytest.raises(ConfigurationError):
        build_permit_service(s)
