from unittest.mock import patch

from coreason_amplifier.integrations.vault import VaultIntegrator


def test_bare_key_preferred() -> None:
    with patch.dict("os.environ", {"LLM_API_KEY": "bare", "COREASON_AMPLIFIER_LLM_API_KEY": "prefixed"}, clear=True):
        assert VaultIntegrator().get_secret("LLM_API_KEY") == "bare"


def test_prefixed_key_fallback() -> None:
    with patch.dict("os.environ", {"COREASON_AMPLIFIER_JUDGE0_API_KEY": "prefixed"}, clear=True):
        assert VaultIntegrator().get_secret("JUDGE0_API_KEY") == "prefixed"


def test_missing_and_empty_keys() -> None:
    with patch.dict("os.environ", {"LLM_API_KEY": ""}, clear=True):
        integrator = VaultIntegrator()
        assert integrator.get_secret("LLM_API_KEY") is None
        assert integrator.get_secret("ANY") is None
