import httpx
from loguru import logger
from pydantic import ValidationError

from coreason_amplifier.backend import JudgeClient
from coreason_amplifier.models import JudgeReport


class Judge0Client(JudgeClient):
    """Judge0 implementation of the JudgeClient.

    Talks to a Judge0 CE instance, either self-hosted or through RapidAPI.
    Submissions and results are exchanged as plain text (``base64_encoded=false``).
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_url: str,
        api_key: str | None = None,
        api_host: str | None = None,
        timeout: float = 30.0,
    ):
        """Initializes the Judge0Client.

        Args:
            client: Shared httpx.AsyncClient used for all requests.
            api_url: Base URL of the Judge0 service (without ``/submissions``).
            api_key: RapidAPI key. Omitted for self-hosted instances.
            api_host: RapidAPI host header value.
            timeout: Per-request timeout in seconds.
        """
        self.client = client
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.api_host = api_host
        self.timeout = timeout

    @property
    def headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["x-rapidapi-key"] = self.api_key
            if self.api_host:
                headers["x-rapidapi-host"] = self.api_host
        return headers

    async def submit(self, source_code: str, language_id: int) -> str:
        response = await self.client.post(
            f"{self.api_url}/submissions",
            params={"base64_encoded": "false"},
            json={"source_code": source_code, "language_id": language_id, "stdin": ""},
            headers=self.headers,
            timeout=self.timeout,
        )
        if not response.is_success:
            raise RuntimeError(f"Judge rejected submission: {response.status_code}")

        token = response.json().get("token")
        if not token:
            raise RuntimeError("Judge response did not include a submission token")

        logger.debug(f"Judge0 submission accepted: {token}")
        return str(token)

    async def fetch(self, token: str) -> JudgeReport:
        response = await self.client.get(
            f"{self.api_url}/submissions/{token}",
            params={"base64_encoded": "false"},
            headers=self.headers,
            timeout=self.timeout,
        )
        if not response.is_success:
            raise RuntimeError(f"Judge status request failed: {response.status_code}")

        try:
            return JudgeReport.model_validate(response.json())
        except ValidationError as e:
            raise RuntimeError(f"Unexpected judge response: {e}") from e
