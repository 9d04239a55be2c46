# llm service using ollama for text generation
import requests
import json
import logging
from typing import Iterator, Optional

logger = logging.getLogger(__name__)


# service for interacting with the ollama llm api
class OllamaLLMService:
    """LLM service using a local Ollama server"""

    # initialize service with connection settings, no network traffic yet
    def __init__(self, base_url: str = "http://localhost:11434", model: str = "llama3",
                 temperature: float = 0.7, timeout: Optional[float] = 120.0):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self.session = requests.Session()

    # verify ollama server is running and model is available
    def check_availability(self) -> bool:
        """Check if Ollama is running and the model is pulled"""
        try:
            response = self.session.get(f"{self.base_url}/api/tags", timeout=5)
            if response.status_code != 200:
                logger.warning(f"Ollama responded with status {response.status_code}")
                return False

            models = response.json().get("models", [])
            model_names = [model["name"] for model in models]

            if not any(self.model in name for name in model_names):
                logger.warning(f"Model {self.model} not found. Available models: {model_names}")
                logger.info(f"To install it, run: ollama pull {self.model}")
                return False

            logger.info(f"✓ Ollama is running with model: {self.model}")
            return True

        except requests.exceptions.RequestException as e:
            logger.warning(f"Cannot connect to Ollama at {self.base_url}: {str(e)}")
            return False

    # build the request payload shared by both generation modes
    def _payload(self, prompt: str, stream: bool) -> dict:
        return {
            "model": self.model,
            "prompt": prompt,
            "stream": stream,
            "options": {
                "temperature": self.temperature,
                "top_p": 0.9,
                "top_k": 40
            }
        }

    # generate the full response text in one call
    def generate_text(self, prompt: str) -> str:
        """Generate text using Ollama"""
        response = self.session.post(
            f"{self.base_url}/api/generate",
            json=self._payload(prompt, stream=False),
            timeout=self.timeout
        )

        if response.status_code != 200:
            raise RuntimeError(f"Ollama API error: {response.status_code} - {response.text}")

        result = response.json()
        return result.get("response", "")

    # yield response fragments as ollama produces them
    def stream_text(self, prompt: str) -> Iterator[str]:
        """Stream generated text fragments from Ollama"""
        with self.session.post(
            f"{self.base_url}/api/generate",
            json=self._payload(prompt, stream=True),
            timeout=self.timeout,
            stream=True
        ) as response:
            if response.status_code != 200:
                raise RuntimeError(f"Ollama API error: {response.status_code} - {response.text}")

            # ollama streams newline delimited json objects
            for line in response.iter_lines():
                if not line:
                    continue
                message = json.loads(line)
                if message.get("error"):
                    raise RuntimeError(f"Ollama stream error: {message['error']}")
                fragment = message.get("response", "")
                if fragment:
                    yield fragment
                if message.get("done"):
                    break
