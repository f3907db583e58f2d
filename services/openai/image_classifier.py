"""Description: Satellite disaster classification using OpenAI's Responses API."""

import logging
import time
from typing import Any, Dict, List, Union

from openai import AsyncOpenAI

from models.analysis_result import AnalysisResult
from services.errors import AnalysisError
from services.openai.image_prompts import build_system_prompt, build_user_prompt
from services.openai.image_schema import FUNCTION_DEFINITION, FUNCTION_NAME
from services.openai.media_inputs import DEFAULT_MIME_TYPE, build_inputs, to_image_data_url
from services.openai.response_parser import build_analysis_result, extract_usage, parse_function_call

LOGGER = logging.getLogger(__name__)


class SatelliteImageClassifier:
    """Class for classifying satellite images as wildfire, tsunami, or normal."""

    def __init__(self, client: AsyncOpenAI, model: str = "gpt-5") -> None:
        """Initialize the classifier with an OpenAI async client."""
        if client is None:
            raise ValueError("OpenAI client must be provided.")
        self.client = client
        self.model = model
        self.system_prompt = build_system_prompt()
        self.user_prompt = build_user_prompt()

    async def analyze(self, image: Union[bytes, str], mime_type: str = DEFAULT_MIME_TYPE) -> AnalysisResult:
        """Classify one image.

        Args:
            image: Data URL, bare base64 string, or raw image bytes.
            mime_type: MIME type used when `image` carries none of its own.

        Raises:
            AnalysisError: On any transport, parsing, or schema failure.
        """
        start_time = time.time()
        try:
            image_url = to_image_data_url(image, mime_type)
        except ValueError as exc:
            LOGGER.error("Image payload rejected before classification: %s", exc)
            raise AnalysisError() from exc

        inputs = build_inputs(self.system_prompt, self.user_prompt, image_url=image_url)
        response = await self._create_response(inputs)
        result = self._parse_response(response)

        usage = extract_usage(response)
        LOGGER.info(
            "Classified image as %s (confidence %.3f) in %.2fs, tokens in=%s out=%s",
            result.category.value,
            result.confidence,
            time.time() - start_time,
            usage["input_tokens"],
            usage["output_tokens"],
        )
        return result

    async def _create_response(self, inputs: List[Dict[str, Any]]) -> Any:
        """Send the multimodal request to the OpenAI Responses API."""
        try:
            return await self.client.responses.create(
                model=self.model,
                input=inputs,
                tools=[FUNCTION_DEFINITION],
                tool_choice={"type": "function", "name": FUNCTION_NAME},
            )
        except Exception as exc:  # pylint: disable=broad-exception-caught
            LOGGER.error("Error during OpenAI Responses API call: %s", exc)
            raise AnalysisError() from exc

    def _parse_response(self, response: Any) -> AnalysisResult:
        """Parse and validate the classification output from the model."""
        try:
            args = parse_function_call(response, tool_name=FUNCTION_NAME)
            return build_analysis_result(args)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            LOGGER.error("Error parsing OpenAI response: %s", exc)
            LOGGER.debug("Full response object: %r", response)
            raise AnalysisError() from exc

# end of SatelliteImageClassifier
