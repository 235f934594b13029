import asyncio
import logging
import time
from typing import Dict, Optional
from openai import AsyncOpenAI, OpenAIError
from app.core.config import settings
from app.core.errors import AIServiceError

logger = logging.getLogger(__name__)

MOCK_RESPONSES = {
    "regulatory": """Based on my analysis of the regulatory framework, here are the key points:

1. The requirements you're asking about are primarily covered in Article 17 of GDPR.
2. Organizations must implement appropriate measures to ensure data security.
3. There is a 72-hour breach notification requirement.
4. Organizations must maintain records of processing activities.

This is particularly relevant for financial institutions, which must balance these requirements with other regulatory obligations.""",
    "contract": """I've reviewed the contract and identified several compliance issues:

1. Section 4.2: The data retention policy is too vague and doesn't specify clear timelines.
2. Section 7.1: The third-party sharing clause doesn't adequately detail the categories of recipients.
3. Section 12: The breach notification timeline exceeds regulatory requirements (7 days vs. 72 hours).

I recommend updating these sections to align with GDPR Article 5(1)(e) and CCPA Section 1798.100.""",
    "summary": """This document outlines a comprehensive data protection policy.

Key points:
1. Data collection must have a lawful basis
2. Data retention periods are specified for different categories
3. Access controls follow least privilege principles
4. Regular audits are required quarterly
5. Breach notification procedures include 72-hour timeline

The policy addresses core compliance requirements for both GDPR and CCPA.""",
    "comparison": """The documents have several similarities:
- Both require encryption for sensitive data
- Both mandate breach notification
- Both require data subject access procedures

Key differences:
- Document 1 requires notification within 72 hours while Document 2 allows 30 days
- Document 1 includes right to erasure while Document 2 does not

Overall, Document 1 is more aligned with GDPR, while Document 2 follows a CCPA-like approach.""",
    "policy": """# Data Protection Policy

## Purpose
This policy establishes guidelines for handling personal data in compliance with relevant regulations.

## Requirements
1. All data collection must have a documented lawful basis
2. Personal data must be retained only as long as necessary
3. All personal data must be encrypted at rest and in transit""",
    "control": """Control: Data Access Management

Type: Preventive
Category: Data Protection

This control ensures proper authorization for data access by implementing role-based access control, periodic access reviews and audit logging.""",
    "alignment": """Compliance Gap Analysis:

Overall Compliance Score: 78%

Gap Areas:
- Breach notification timeline (60% compliance)
- International data transfers (45% compliance)""",
}


def select_mock_response(query: str) -> str:
    """Pick the canned answer whose topic best matches the query."""
    text = query.lower()
    if "contract" in text:
        key = "contract"
    elif "summarize" in text or "summary" in text:
        key = "summary"
    elif "compare" in text or "comparison" in text:
        key = "comparison"
    elif "policy" in text and "draft" in text:
        key = "policy"
    elif "control" in text:
        key = "control"
    elif "gap" in text or "alignment" in text:
        key = "alignment"
    else:
        key = "regulatory"
    return MOCK_RESPONSES[key]


class AIService:
    def __init__(self):
        self.mock_mode = settings.AI_MOCK_MODE or not settings.OPENAI_API_KEY
        self.client = None
        if self.mock_mode:
            logger.info("AI service running in mock mode")
        else:
            self.client = AsyncOpenAI(api_key=settings.OPENAI_API_KEY)

    async def complete(
        self,
        messages: list[Dict[str, str]],
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        system_prompt: Optional[str] = None,
    ) -> Dict:
        if self.mock_mode:
            return await self._mock_complete(messages)

        chat_messages = list(messages)
        if system_prompt:
            chat_messages.insert(0, {"role": "system", "content": system_prompt})

        try:
            completion = await self.client.chat.completions.create(
                model=settings.OPENAI_MODEL,
                messages=chat_messages,
                max_tokens=max_tokens or settings.AI_MAX_TOKENS,
                temperature=settings.AI_TEMPERATURE if temperature is None else temperature,
            )
        except OpenAIError as e:
            logger.error(f"Error calling AI service: {str(e)}")
            raise AIServiceError(f"Failed to get AI response: {str(e)}") from e

        usage = completion.usage
        return {
            "response": completion.choices[0].message.content or "",
            "usage": {
                "input_tokens": usage.prompt_tokens if usage else 0,
                "output_tokens": usage.completion_tokens if usage else 0,
            },
            "model": completion.model,
            "id": completion.id,
        }

    async def _mock_complete(self, messages: list[Dict[str, str]]) -> Dict:
        user_messages = [m["content"] for m in messages if m.get("role") == "user"]
        query = user_messages[-1] if user_messages else ""
        if settings.MOCK_AI_LATENCY_SECONDS > 0:
            await asyncio.sleep(settings.MOCK_AI_LATENCY_SECONDS)
        return {
            "response": select_mock_response(query),
            "usage": {"input_tokens": 250, "output_tokens": 350},
            "model": "mock-model",
            "id": f"mock-{int(time.time() * 1000)}",
        }


_ai_service: Optional[AIService] = None


def get_ai_service() -> AIService:
    global _ai_service
    if _ai_service is None:
        _ai_service = AIService()
    return _ai_service
