import httpx

from coreason_amplifier.backend import JudgeClient, ReviewBackend
from coreason_amplifier.backends.chat_completions import ChatCompletionsBackend
from coreason_amplifier.config import AmplifierConfig
from coreason_amplifier.integrations.veritas import VeritasIntegrator
from coreason_amplifier.judges.judge0 import Judge0Client
from coreason_amplifier.poller import ExecutionPoller


class AmplifierFactory:
    """
    Factory to create backends, judges and pollers from configuration.
    """

    @staticmethod
    def get_backend(config: AmplifierConfig, client: httpx.AsyncClient) -> ReviewBackend:
        """
        Returns the configured review backend.
        """
        return ChatCompletionsBackend(
            client=client,
            api_url=config.llm_api_url,
            model=config.llm_model,
            api_key=config.llm_api_key,
            system_prompt=config.system_prompt,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout=config.request_timeout,
        )

    @staticmethod
    def get_judge(config: AmplifierConfig, client: httpx.AsyncClient) -> JudgeClient:
        """
        Returns the configured execution judge client.
        """
        return Judge0Client(
            client=client,
            api_url=config.judge_api_url,
            api_key=config.judge_api_key,
            api_host=config.judge_api_host,
            timeout=config.request_timeout,
        )

    @staticmethod
    def get_poller(config: AmplifierConfig, judge: JudgeClient) -> ExecutionPoller:
        """
        Returns an ExecutionPoller using the configured polling policy.
        """
        return ExecutionPoller(
            judge=judge,
            initial_delay=config.poll_initial_delay,
            interval=config.poll_interval,
            backoff_factor=config.poll_backoff_factor,
            max_interval=config.poll_max_interval,
            max_attempts=config.poll_max_attempts,
            veritas=VeritasIntegrator(enabled=config.enable_audit_logging),
        )
