"""
Tests for AI content generation. Provider SDK calls are stubbed.
"""
import json

import pytest
from django.contrib.auth import get_user_model
from django.core.management import CommandError, call_command
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from ai import providers
from ai.generation import generate_for_page, generate_missing
from ai.providers import AIProviderError, build_prompt, parse_content
from localseo.models import LocalPage

User = get_user_model()

GOOD_REPLY = json.dumps({
    'intro': 'Trusted drain experts in Dianalund.',
    'meta_title': 'Kloakmester Dianalund',
    'meta_description': 'Fast local drain service in Dianalund.',
})


@pytest.fixture
def ai_configured(settings):
    settings.LOCALSEO = {**settings.LOCALSEO, 'API_PROVIDER': 'openai', 'API_KEY': 'test-key'}


@pytest.fixture
def stub_provider(monkeypatch):
    calls = []

    def _stub(reply=GOOD_REPLY, error=None):
        def fake_call(provider, api_key, user_message):
            calls.append({'provider': provider, 'api_key': api_key, 'message': user_message})
            if error is not None:
                raise error
            return reply
        monkeypatch.setattr(providers, 'call_provider', fake_call)
        return calls
    return _stub


@pytest.fixture
def create_page():
    def _create_page(service='Kloakmester', city='Dianalund', **fields):
        return LocalPage.objects.create_page(service_keyword=service, city=city, **fields)
    return _create_page


@pytest.fixture
def staff_client(db):
    user = User.objects.create_user(
        email='admin@example.com', username='admin@example.com',
        password='testpass123', is_staff=True,
    )
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {str(refresh.access_token)}')
    return client


class TestParseContent:

    def test_json_reply(self):
        content = parse_content(GOOD_REPLY, 'Kloakmester', 'Dianalund')
        assert content['ai_intro'] == 'Trusted drain experts in Dianalund.'
        assert content['meta_title'] == 'Kloakmester Dianalund'

    def test_fenced_json_reply(self):
        content = parse_content(f"```json\n{GOOD_REPLY}\n```", 'Kloakmester', 'Dianalund')
        assert content['meta_description'] == 'Fast local drain service in Dianalund.'

    def test_plain_text_reply(self):
        text = 'We clear blocked drains. ' * 10
        content = parse_content(text, 'Kloakmester', 'Dianalund')
        assert content['ai_intro'] == text.strip()
        assert content['meta_title'] == 'Kloakmester in Dianalund'
        assert content['meta_description'] == text.strip()[:155]


@pytest.mark.django_db
class TestProviders:

    def test_build_prompt_fills_placeholders(self, create_page):
        page = create_page(zip='4293')
        prompt = build_prompt(page, 'Write about {service} in {city} ({zip}).')
        assert prompt == 'Write about Kloakmester in Dianalund (4293).'

    def test_missing_api_key(self, settings, monkeypatch, create_page):
        monkeypatch.delenv('OPENAI_API_KEY', raising=False)
        settings.LOCALSEO = {**settings.LOCALSEO, 'API_PROVIDER': 'openai', 'API_KEY': ''}
        with pytest.raises(AIProviderError):
            providers.generate_content(create_page())

    def test_unknown_provider(self, settings, create_page):
        settings.LOCALSEO = {**settings.LOCALSEO, 'API_PROVIDER': 'gemini', 'API_KEY': 'k'}
        with pytest.raises(AIProviderError):
            providers.generate_content(create_page())

    def test_sdk_failure_becomes_provider_error(self, ai_configured, stub_provider, create_page):
        stub_provider(error=RuntimeError('rate limited'))
        with pytest.raises(AIProviderError, match='rate limited'):
            providers.generate_content(create_page())

    def test_prompt_sent_to_provider(self, ai_configured, stub_provider, create_page):
        calls = stub_provider()
        providers.generate_content(create_page())
        assert calls[0]['api_key'] == 'test-key'
        assert 'Kloakmester in Dianalund' in calls[0]['message']


@pytest.mark.django_db
class TestGeneration:

    def test_generate_for_page_stores_content(self, ai_configured, stub_provider, create_page):
        stub_provider()
        page = generate_for_page(create_page())
        page.refresh_from_db()
        assert page.ai_intro == 'Trusted drain experts in Dianalund.'
        assert page.meta_title == 'Kloakmester Dianalund'

    def test_generate_missing_continues_past_failures(self, ai_configured, monkeypatch, create_page):
        failing = create_page(city='Slagelse')
        create_page()
        create_page(city='Sorø', ai_intro='x', meta_title='y', meta_description='z')

        def fake_call(provider, api_key, user_message):
            if 'Slagelse' in user_message:
                raise RuntimeError('boom')
            return GOOD_REPLY
        monkeypatch.setattr(providers, 'call_provider', fake_call)

        results = generate_missing(delay=0)
        assert results['success'] == 1
        assert results['failed'] == 1
        assert results['errors'][0]['id'] == failing.pk
        assert LocalPage.objects.missing_ai_content().count() == 1

    def test_management_command(self, ai_configured, stub_provider, create_page):
        stub_provider()
        page = create_page()
        call_command('generate_ai_content', '--id', str(page.pk))
        page.refresh_from_db()
        assert page.meta_description == 'Fast local drain service in Dianalund.'

    def test_management_command_dry_run(self, ai_configured, stub_provider, create_page):
        calls = stub_provider()
        create_page()
        call_command('generate_ai_content', '--dry-run')
        assert calls == []

    def test_management_command_unknown_id(self):
        with pytest.raises(CommandError):
            call_command('generate_ai_content', '--id', '999')


@pytest.mark.django_db
class TestGenerationAPI:

    def test_generate_ai(self, staff_client, ai_configured, stub_provider, create_page):
        stub_provider()
        page = create_page()
        response = staff_client.post(f'/api/v1/local-pages/{page.pk}/generate-ai/')
        assert response.status_code == 200
        assert response.data['ai_intro'] == 'Trusted drain experts in Dianalund.'

    def test_generate_ai_provider_failure(self, staff_client, ai_configured, stub_provider, create_page):
        stub_provider(error=RuntimeError('upstream down'))
        page = create_page()
        response = staff_client.post(f'/api/v1/local-pages/{page.pk}/generate-ai/')
        assert response.status_code == 502
        assert response.data['error']['code'] == 'AI_PROVIDER_ERROR'

    def test_generate_ai_bulk(self, staff_client, settings, stub_provider, create_page):
        settings.LOCALSEO = {**settings.LOCALSEO, 'API_KEY': 'test-key', 'AI_BULK_DELAY': 0}
        stub_provider()
        create_page()
        create_page(city='Slagelse')
        response = staff_client.post('/api/v1/local-pages/generate-ai-bulk/')
        assert response.status_code == 200
        assert response.data == {'success': 2, 'failed': 0, 'errors': []}
