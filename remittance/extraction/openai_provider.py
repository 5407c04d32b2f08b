"""OpenAI-based extraction provider for payment receipt field extraction.

Sends the scanned receipt itself (image or PDF) to a vision-capable model and
asks for the receipt fields through function calling, so the response arrives
as JSON arguments validated against RawExtraction.

Transport retries use tenacity with exponential backoff and jitter. The
number of attempts comes from settings and defaults to a single attempt: a
failed document is reported and skipped, not retried.
"""

import base64
import json
import logging
import os
from typing import Any

from openai import (
    APIConnectionError,
    APITimeoutError,
    InternalServerError,
    OpenAI,
    RateLimitError,
)
from pydantic import ValidationError
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from remittance.extraction.base import ExtractionProvider, ExtractionResult
from remittance.extraction.schema import (
    RECEIPT_FUNCTION_NAME,
    RECEIPT_FUNCTION_SCHEMA,
    RawExtraction,
)
from remittance.shared.config import Settings

logger = logging.getLogger(__name__)

# Errors worth another attempt when extraction_max_attempts > 1
TRANSIENT_ERRORS = (APIConnectionError, APITimeoutError, RateLimitError, InternalServerError)

SYSTEM_PROMPT = """You are an expert accountant. Extract ONLY the following fields from this receipt file.
- companyName: The name of the company that made the payment.
- paymentDate: The date the payment was made (e.g., "21/01/2025"). Use ISO format YYYY-MM-DD.
- paymentPeriod: The month/year the payment covers (e.g., "Jan-25"). If not explicitly stated, \
infer it as the month PRIOR to the paymentDate. For a payment in "January 2024", the period is "Dec-23".
- receiptNumber: The unique receipt or transaction number. Do NOT use the "AssessRef" or \
"Assessment Reference". Prioritize the "Transaction" number.
- taxType: The specific type of tax paid. Look closely at "Agency - Rev Code", "Service \
Description", or "Payment Details". Examples: "Development Levy", "WHT ON DIRECTOR'S FEES", \
"PAYE", "Business Premises". Do NOT use generic terms like "Lagos Revenue Payment" or \
"Revenue Receipt" if a specific tax name (like "Development Levy") is visible.
- amount: The FINAL TOTAL amount paid. If the receipt has multiple amount fields (like \
'Amount', 'Charges', 'VAT', 'Total'), you MUST select the 'Total', 'Total Paid', or \
'Total Amount'. For example, if 'Amount' is 900 and 'Total' is 950, return 950.
Return ONLY a single valid JSON object. Do not add markdown or any other text."""

USER_PROMPT = "Extract receipt data as JSON."


class OpenAIExtractionProvider(ExtractionProvider):
    """OpenAI-based extraction provider using a vision model.

    Requires OPENAI_API_KEY environment variable.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize OpenAI extraction provider.

        Args:
            settings: Application settings
        """
        super().__init__(settings)
        self._client: OpenAI | None = None

    @property
    def provider_name(self) -> str:
        """Get provider name for logging/metrics.

        Returns:
            Provider identifier 'openai'
        """
        return "openai"

    def is_available(self) -> bool:
        """Check if OpenAI API key is configured.

        Returns:
            True if OPENAI_API_KEY environment variable is set
        """
        return bool(os.getenv("OPENAI_API_KEY"))

    def extract_receipt_fields(self, content: bytes, media_type: str) -> ExtractionResult:
        """Extract structured receipt data from an image or PDF using OpenAI.

        Args:
            content: Raw document bytes
            media_type: MIME type of the document

        Returns:
            ExtractionResult with raw receipt fields or a tagged failure, provider='openai'
        """
        if not self.is_available():
            return ExtractionResult.service_failure(
                "OPENAI_API_KEY environment variable not set", self.provider_name
            )

        if not content:
            return ExtractionResult.service_failure("Empty document provided", self.provider_name)

        try:
            api_key = os.getenv("OPENAI_API_KEY")
            if self._client is None or self._client.api_key != api_key:
                # Retries are owned by tenacity below, not the SDK
                self._client = OpenAI(
                    api_key=api_key,
                    timeout=self.settings.extraction_timeout_seconds,
                    max_retries=0,
                )

            messages = self._build_messages(content, media_type)
            response = self._call_openai_with_retry(messages)
        except Exception as e:
            logger.warning(f"OpenAI extraction call failed: {e}")
            return ExtractionResult.service_failure(
                f"Extraction failed: {str(e)}", self.provider_name
            )

        try:
            message = response.choices[0].message
            if message.function_call is None:
                return ExtractionResult.schema_failure(
                    "No function call in API response", self.provider_name
                )

            receipt_dict = json.loads(message.function_call.arguments)
            if not isinstance(receipt_dict, dict):
                return ExtractionResult.schema_failure(
                    "Function call arguments are not a JSON object", self.provider_name
                )

            return ExtractionResult.ok(RawExtraction.model_validate(receipt_dict), self.provider_name)

        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            return ExtractionResult.schema_failure(
                f"Unusable extraction response: {str(e)}", self.provider_name
            )

    def _call_openai_with_retry(self, messages: list[dict[str, Any]]) -> Any:
        """Call OpenAI API, retrying transient errors up to the configured attempts.

        Args:
            messages: Chat messages carrying the prompt and the document

        Returns:
            OpenAI API response

        Raises:
            Exception: After all retry attempts are exhausted
        """
        if self._client is None:
            raise RuntimeError("OpenAI client not initialized")

        retrying = Retrying(
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            wait=wait_exponential_jitter(initial=1, max=60),
            stop=stop_after_attempt(self.settings.extraction_max_attempts),
            reraise=True,
        )
        return retrying(
            self._client.chat.completions.create,
            model=self.settings.openai_model,
            messages=messages,
            functions=[RECEIPT_FUNCTION_SCHEMA],
            function_call={"name": RECEIPT_FUNCTION_NAME},
            temperature=0,  # Deterministic output
        )

    def _build_messages(self, content: bytes, media_type: str) -> list[dict[str, Any]]:
        """Build chat messages with the document attached inline.

        Images travel as base64 data URLs, PDFs as base64 file parts.

        Args:
            content: Raw document bytes
            media_type: MIME type of the document

        Returns:
            Messages list for the chat completions call
        """
        data_url = f"data:{media_type};base64,{base64.b64encode(content).decode('ascii')}"
        if media_type == "application/pdf":
            document_part: dict[str, Any] = {
                "type": "file",
                "file": {"filename": "receipt.pdf", "file_data": data_url},
            }
        else:
            document_part = {"type": "image_url", "image_url": {"url": data_url}}

        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": [{"type": "text", "text": USER_PROMPT}, document_part],
            },
        ]
