import vertexai
from vertexai.generative_models import GenerativeModel
import json
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential

from wanderlust.models.trip_models import DestinationInfo
from wanderlust.prompts.destination_prompts import get_destination_system_prompt, get_destination_user_prompt
from wanderlust.services import insights_cache
from wanderlust.utils.errors import DestinationLookupError


class DestinationLookup:
    """Anything that can turn a search query into a DestinationInfo.

    Implementations raise DestinationLookupError for every kind of failure.
    """

    async def lookup(self, query: str) -> DestinationInfo:
        raise NotImplementedError


class VertexDestinationService(DestinationLookup):
    def __init__(self, project_id: str, location: str = "us-central1", model_name: str = "gemini-2.5-flash",
                 *, model: Any = None, temperature: float = 0.4, max_attempts: int = 3,
                 cache_ttl_seconds: Optional[int] = None):
        self.logger = logging.getLogger(__name__)
        self.temperature = temperature
        self.max_attempts = max(1, max_attempts)
        self.cache_ttl_seconds = cache_ttl_seconds

        if model is not None:
            self.model = model
            return

        # Initialize Vertex AI
        try:
            vertexai.init(project=project_id, location=location)
            self.model = GenerativeModel(model_name)
            self.logger.info(f"Vertex AI initialized successfully for project {project_id}")
        except Exception as e:
            self.logger.error(f"Failed to initialize Vertex AI: {str(e)}")
            raise

    async def lookup(self, query: str) -> DestinationInfo:
        query = (query or "").strip()
        if not query:
            raise DestinationLookupError(query, "empty query")

        cached = insights_cache.get_cached(query)
        if cached is not None:
            return cached

        self.logger.info("[destination] lookup", extra={"query": query})
        try:
            response = await self._generate(query)
        except Exception as e:
            self.logger.exception("[destination] model call failed")
            raise DestinationLookupError(query, f"model call failed: {e}") from e

        response_text = self._extract_response_text(response)
        if not response_text:
            self.logger.error("[destination] Empty or unsupported response from Gemini model")
            raise DestinationLookupError(query, "empty response")

        data = self._parse_json(response_text)
        if data is None:
            raise DestinationLookupError(query, "malformed response")
        if data.get("error"):
            self.logger.info("[destination] no match", extra={"query": query, "error": data.get("error")})
            raise DestinationLookupError(query, "no matching destination")

        try:
            info = DestinationInfo.model_validate(data)
        except ValidationError as e:
            self.logger.error("[destination] response failed validation", extra={"error": str(e)})
            raise DestinationLookupError(query, "malformed response") from e

        insights_cache.set_cached(query, info, ttl_seconds=self.cache_ttl_seconds)
        self.logger.info(f"[destination] resolved '{query}' to {info.name}, {info.country}")
        return info

    async def _generate(self, query: str) -> Any:
        prompts = [get_destination_system_prompt(), get_destination_user_prompt(query)]
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=1, min=2, max=10),
            reraise=True,
        ):
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    self.logger.warning(f"[destination] retrying model call (attempt {attempt.retry_state.attempt_number})")
                return await self.model.generate_content_async(
                    prompts,
                    generation_config={
                        "temperature": self.temperature,
                        "response_mime_type": "application/json",
                        "candidate_count": 1,
                    }
                )

    def _extract_response_text(self, response: Any) -> Optional[str]:
        """Extract text from a Vertex AI response, handling candidates and multi-part content."""
        try:
            text_attr = getattr(response, "text", None)
            if isinstance(text_attr, str) and text_attr.strip():
                return text_attr.strip()
        except ValueError:
            # .text raises when the candidate has no text part
            pass

        parts_text: list[str] = []
        for cand in getattr(response, "candidates", None) or []:
            content = getattr(cand, "content", None)
            for part in getattr(content, "parts", None) or []:
                t = getattr(part, "text", None)
                if t:
                    parts_text.append(t)
        combined = "\n".join(parts_text).strip()
        return combined or None

    def _parse_json(self, response_text: str) -> Optional[Dict[str, Any]]:
        """Parse the model's JSON object, tolerating code fences and stray prose around it."""
        candidates = [response_text]
        start = response_text.find('{')
        end = response_text.rfind('}')
        if start != -1 and end > start:
            candidates.append(response_text[start:end + 1])

        for text in candidates:
            try:
                parsed = json.loads(text)
            except json.JSONDecodeError:
                continue
            if isinstance(parsed, dict):
                return parsed
        self.logger.error("[destination] JSON parse failed", extra={"preview": response_text[:200]})
        return None
