import pytest

from conftest import FakeProvider, declared
from playerclaim.core.errors import ServiceUnavailableError
from playerclaim.infrastructure.verification.adapter import VerificationMode, VerificationProviderAdapter


def test_answers_pass_through_in_both_modes() -> None:
    for mode in VerificationMode:
        assert VerificationProviderAdapter(FakeProvider(True), mode=mode).check(declared()) is True
        assert VerificationProviderAdapter(FakeProvider(False), mode=mode).check(declared()) is False


def test_strict_outage_raises_service_unavailable() -> None:
    adapter = VerificationProviderAdapter(FakeProvider(None), mode="strict")
    with pytest.raises(ServiceUnavailableError):
        adapter.check(declared())


def test_permissive_outage_counts_as_verified() -> None:
    adapter = VerificationProviderAdapter(FakeProvider(None), mode=VerificationMode.PERMISSIVE)
    assert adapter.check(declared()) is True


def test_unknown_mode_is_rejected() -> None:
    with pytest.raises(ValueError):
        VerificationProviderAdapter(FakeProvider(True), mode="lenient")
