import httpx

from coreason_amplifier.backend import JudgeClient, ReviewBackend
from coreason_amplifier.backends.chat_completions import ChatCompletionsBackend
from coreason_amplifier.config import AmplifierConfig
from coreason_amplifier.factory import AmplifierFactory
from coreason_amplifier.judges.judge0 import Judge0Client


def test_factory_returns_chat_completions_backend(clean_env: None) -> None:
    config = AmplifierConfig(llm_model="m", llm_api_key="k", max_tokens=512)
    backend = AmplifierFactory.get_backend(config, httpx.AsyncClient())
    assert isinstance(backend, ChatCompletionsBackend)
    assert isinstance(backend, ReviewBackend)
    assert backend.model == "m"
    assert backend.api_key == "k"
    assert backend.max_tokens == 512


def test_factory_returns_judge0_client(clean_env: None) -> None:
    config = AmplifierConfig(judge_api_url="http://judge:2358/", judge_api_key=None)
    judge = AmplifierFactory.get_judge(config, httpx.AsyncClient())
    assert isinstance(judge, Judge0Client)
    assert isinstance(judge, JudgeClient)
    assert judge.api_url == "http://judge:2358"


def test_factory_poller_policy(clean_env: None) -> None:
    config = AmplifierConfig(
        poll_interval=2.0, poll_backoff_factor=1.5, poll_max_attempts=60, enable_audit_logging=False
    )
    judge = AmplifierFactory.get_judge(config, httpx.AsyncClient())
    poller = AmplifierFactory.get_poller(config, judge)
    assert poller.judge is judge
    assert poller.interval == 2.0
    assert poller.backoff_factor == 1.5
    assert poller.max_attempts == 60
    assert poller.veritas.enabled is False
