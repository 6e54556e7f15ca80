from __future__ import annotations
import base64, logging, os
from typing import Iterable, Optional

import numpy as np
import requests

from ..audio.pipeline import read_wav_file

logger = logging.getLogger("voicewire")

DEFAULT_ENDPOINT = "http://www.sshost.club:8080"
DEFAULT_TIMEOUT = 120


class ServiceError(Exception):
    """The voice service answered, but not with what we expected."""


class TokenInvalidError(ServiceError):
    """401 from the service; call update_token() and retry."""


class SVDClient:
    """
    Client for the remote voice encode/decode service.

    Every call except update_token() needs a bearer token; a 401 surfaces as
    TokenInvalidError so the caller can refresh and retry.
    """

    def __init__(self, user: str, key: str, endpoint: str = DEFAULT_ENDPOINT, timeout: float = DEFAULT_TIMEOUT):
        self.user = user
        self.key = key
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout
        self.token: Optional[str] = None

    @property
    def auth_url(self) -> str:
        return f"{self.endpoint}/authentication"

    @property
    def decode_url(self) -> str:
        return f"{self.endpoint}/decoder"

    @property
    def encode_url(self) -> str:
        return f"{self.endpoint}/encoder"

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"}

    def update_token(self) -> str:
        r = requests.get(
            self.auth_url,
            params={"username": self.user, "key": self.key},
            timeout=self.timeout,
        )
        r.raise_for_status()
        body = r.json()
        if not isinstance(body, dict):
            raise ServiceError("authentication response is not a JSON object")
        token = body.get("token")
        if not isinstance(token, str) or not token:
            raise ServiceError("failed to read token from authentication response")
        self.token = token
        logger.info("voice service token refreshed for %s", self.user)
        return token

    def _post(self, url: str, payload: dict) -> requests.Response:
        r = requests.post(url, json=payload, headers=self._headers(), timeout=self.timeout)
        if r.status_code == 401:
            raise TokenInvalidError(f"token rejected by {url}")
        r.raise_for_status()
        return r

    def decode(self, voice_data: Iterable[bytes]) -> bytes:
        """Voice packets -> WAV bytes."""
        source = [base64.b64encode(bytes(p)).decode("ascii") for p in voice_data]
        logger.info("decoding %d voice packets", len(source))
        return self._post(self.decode_url, {"source": source}).content

    def encode(self, steam_id: int, wav_data: np.ndarray) -> list[bytes]:
        """24 kHz mono float samples -> voice packets."""
        samples = np.asarray(wav_data, dtype=np.float32)
        payload = {"WavData": samples.tolist(), "SteamID": int(steam_id)}
        logger.info("encoding %d samples (%.2fs) for %d", samples.size, samples.size / 24000, int(steam_id))
        data = self._post(self.encode_url, payload).json()
        if not isinstance(data, list):
            raise ServiceError("failed to deserialize encode response")
        return [base64.b64decode(p) for p in data]

    def encode_file(self, steam_id: int, wav_path: str) -> list[bytes]:
        return self.encode(steam_id, read_wav_file(os.path.join(os.getcwd(), wav_path)))


class SVDClientFactory:
    def __init__(self, user: str, key: str, endpoint: str = DEFAULT_ENDPOINT, timeout: float = DEFAULT_TIMEOUT):
        self.user = user
        self.key = key
        self.endpoint = endpoint
        self.timeout = timeout

    @classmethod
    def from_config(cls, cfg: dict) -> "SVDClientFactory":
        svc = cfg.get("service") or {}
        return cls(
            user=svc.get("user", ""),
            key=svc.get("key", ""),
            endpoint=svc.get("endpoint") or DEFAULT_ENDPOINT,
            timeout=float(svc.get("timeout", DEFAULT_TIMEOUT)),
        )

    def create_client(self) -> SVDClient:
        client = SVDClient(self.user, self.key, self.endpoint, self.timeout)
        client.update_token()
        return client
