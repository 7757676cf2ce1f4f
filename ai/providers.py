"""
AI provider integration — OpenAI (default) or Anthropic, chosen by the
LOCALSEO API_PROVIDER option.

Produces the intro, meta title and meta description for one LocalPage.
"""
import json
import logging
import os
import re

from localseo.conf import get_option

logger = logging.getLogger(__name__)

OPENAI_MODEL = os.getenv('OPENAI_MODEL', 'gpt-4o-mini')
ANTHROPIC_MODEL = os.getenv('ANTHROPIC_MODEL', 'claude-sonnet-4-20250514')
TEMPERATURE = 0.7
MAX_TOKENS = 500
REQUEST_TIMEOUT = 30

SYSTEM_MESSAGE = (
    'You are an SEO content generator. Always respond with valid JSON containing: '
    'intro (50 words), meta_title (60 chars), meta_description (155 chars).'
)

PROVIDER_ENV_KEYS = {
    'openai': 'OPENAI_API_KEY',
    'anthropic': 'ANTHROPIC_API_KEY',
}


class AIProviderError(Exception):
    """Missing configuration or a failed/unusable provider response."""


def _clean_json(text: str) -> dict:
    """Strip markdown fences and parse JSON."""
    cleaned = re.sub(r'```(?:json)?\s*', '', text).strip()
    cleaned = cleaned.rstrip('`').strip()
    return json.loads(cleaned)


def build_prompt(page, template: str = None) -> str:
    """Fill {service}, {city} and {zip} in the configured prompt template."""
    template = template or get_option('SYSTEM_PROMPT')
    return (
        template
        .replace('{service}', page.service_keyword or '')
        .replace('{city}', page.city or '')
        .replace('{zip}', page.zip or '')
    )


def _build_user_message(prompt: str, service: str, city: str) -> str:
    return (
        f"{prompt}\n\nGenerate content for: {service} in {city}"
        '\n\nRespond with JSON: {"intro": "...", "meta_title": "...", "meta_description": "..."}'
    )


def parse_content(text: str, service: str, city: str) -> dict:
    """
    Map a provider reply onto LocalPage fields. Non-JSON replies become the
    intro, with a "<service> in <city>" title and a truncated description.
    """
    try:
        parsed = _clean_json(text)
    except (json.JSONDecodeError, TypeError):
        parsed = None

    if isinstance(parsed, dict) and parsed.get('intro'):
        return {
            'ai_intro': str(parsed['intro']).strip(),
            'meta_title': str(parsed.get('meta_title') or '').strip(),
            'meta_description': str(parsed.get('meta_description') or '').strip(),
        }

    content = (text or '').strip()
    return {
        'ai_intro': content,
        'meta_title': f"{service} in {city}",
        'meta_description': content[:155],
    }


def get_api_key(provider: str) -> str:
    return get_option('API_KEY') or os.getenv(PROVIDER_ENV_KEYS.get(provider, ''), '')


def call_provider(provider: str, api_key: str, user_message: str) -> str:
    """Send one request and return the raw reply text."""
    if provider == 'openai':
        return _call_openai(api_key, user_message)
    if provider == 'anthropic':
        return _call_claude(api_key, user_message)
    raise AIProviderError(f"Invalid API provider: {provider}")


def generate_content(page) -> dict:
    """
    Generate AI copy for *page*.
    Returns {'ai_intro', 'meta_title', 'meta_description'}; raises AIProviderError.
    """
    provider = get_option('API_PROVIDER')
    if provider not in PROVIDER_ENV_KEYS:
        raise AIProviderError(f"Invalid API provider: {provider}")

    api_key = get_api_key(provider)
    if not api_key:
        raise AIProviderError('API key not configured')

    user_message = _build_user_message(build_prompt(page), page.service_keyword, page.city)
    try:
        text = call_provider(provider, api_key, user_message)
    except AIProviderError:
        raise
    except Exception as e:
        logger.error(f"{provider} call failed for LocalPage {page.pk}: {e}")
        raise AIProviderError(f"{provider} request failed: {e}") from e

    return parse_content(text, page.service_keyword, page.city)


def _call_claude(api_key: str, user_message: str) -> str:
    import anthropic
    client = anthropic.Anthropic(api_key=api_key, timeout=REQUEST_TIMEOUT)
    message = client.messages.create(
        model=ANTHROPIC_MODEL,
        max_tokens=MAX_TOKENS,
        temperature=TEMPERATURE,
        system=SYSTEM_MESSAGE,
        messages=[{"role": "user", "content": user_message}],
    )
    return "".join(
        block.text for block in message.content if block.type == "text"
    )


def _call_openai(api_key: str, user_message: str) -> str:
    import openai
    client = openai.OpenAI(api_key=api_key, timeout=REQUEST_TIMEOUT)
    response = client.chat.completions.create(
        model=OPENAI_MODEL,
        temperature=TEMPERATURE,
        max_tokens=MAX_TOKENS,
        response_format={"type": "json_object"},
        messages=[
            {"role": "system", "content": SYSTEM_MESSAGE},
            {"role": "user", "content": user_message},
        ],
    )
    return response.choices[0].message.content or ''
