"""
Tests for LocalSEO: slugs, row store, routing, redirects, rendering, CSV and
the admin API.
"""
import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.template import Context, Template
from django.test import RequestFactory
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from localseo import redirects, routing
from localseo.admin import LocalPageAdminForm
from localseo.bindings import binding_value
from localseo.context import PageContext
from localseo.csv_io import UTF8_BOM, CSVImportError, export_pages, import_pages
from localseo.exceptions import ConstraintViolation, SlugCollisionExhausted
from localseo.models import SLUG_MAX_ATTEMPTS, SLUG_MAX_LENGTH, LocalPage, RedirectRule
from localseo.schema import build_schema, schema_json
from localseo.seo_tags import build_head_tags, document_title
from localseo.slugs import normalize

User = get_user_model()


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def localseo_options(settings):
    def _set(**options):
        settings.LOCALSEO = {**settings.LOCALSEO, **options}
    return _set


@pytest.fixture
def create_page():
    def _create_page(service='Kloakmester', city='Dianalund', **fields):
        return LocalPage.objects.create_page(service_keyword=service, city=city, **fields)
    return _create_page


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def create_user():
    def _create_user(email="admin@example.com", password="testpass123", is_staff=True):
        return User.objects.create_user(
            email=email,
            username=email,
            password=password,
            is_staff=is_staff,
        )
    return _create_user


@pytest.fixture
def staff_client(api_client, create_user):
    user = create_user()
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {str(refresh.access_token)}')
    return api_client


@pytest.fixture
def page_context():
    def _page_context(page, path='/'):
        request = RequestFactory().get(path)
        return PageContext.from_request(request, page)
    return _page_context


# ─────────────────────────────────────────────────────────────
# Slugs
# ─────────────────────────────────────────────────────────────

class TestNormalize:

    @pytest.mark.parametrize('text, expected', [
        ('Kloakmester', 'kloakmester'),
        ('Kloakmester Service', 'kloakmester-service'),
        ('  St. Heddinge  ', 'st-heddinge'),
        ('Roof -- repair', 'roof-repair'),
        ('Tab\tand\nnewline', 'tab-and-newline'),
        ('Næstved', 'nstved'),
        ('Søborg', 'sborg'),
        ('---', ''),
        ('', ''),
        (None, ''),
    ])
    def test_normalize(self, text, expected):
        assert normalize(text) == expected

    @pytest.mark.parametrize('text', ['Kloakmester Service', ' -a--b- ', 'Århus C', 'x  y  z'])
    def test_normalize_is_idempotent(self, text):
        assert normalize(normalize(text)) == normalize(text)


# ─────────────────────────────────────────────────────────────
# Row store
# ─────────────────────────────────────────────────────────────

@pytest.mark.django_db
class TestRowStore:

    def test_create_derives_slug(self, create_page):
        page = create_page()
        assert page.slug == 'kloakmester-dianalund'

    def test_duplicate_pair_gets_suffixed_slug(self, create_page):
        first = create_page()
        second = create_page()
        assert first.slug == 'kloakmester-dianalund'
        assert second.slug == 'kloakmester-dianalund-1'

    def test_explicit_slug_is_normalized(self, create_page):
        page = create_page(slug='My Custom Slug')
        assert page.slug == 'my-custom-slug'

    def test_explicit_slug_clash_raises(self, create_page):
        create_page(slug='taken')
        with pytest.raises(ConstraintViolation):
            create_page(service='Other', slug='taken')

    def test_derived_slug_fits_column_for_longest_names(self, create_page):
        first = create_page(service='a' * 100, city='b' * 100)
        second = create_page(service='a' * 100, city='b' * 100)

        assert len(first.slug) <= SLUG_MAX_LENGTH
        assert len(second.slug) <= SLUG_MAX_LENGTH
        assert second.slug == f'{first.slug}-1'
        assert not first.slug.endswith('-')

    def test_last_suffix_fits_column(self):
        slug = LocalPage.objects.unique_slug_for('a' * 99, 'b' * 99)
        assert len(f'{slug}-{SLUG_MAX_ATTEMPTS - 1}') <= SLUG_MAX_LENGTH

    def test_slug_exhaustion(self):
        base = 'kloakmester-dianalund'
        LocalPage.objects.bulk_create([
            LocalPage(service_keyword='Kloakmester', city='Dianalund',
                      slug=base if i == 0 else f'{base}-{i}')
            for i in range(SLUG_MAX_ATTEMPTS)
        ])
        with pytest.raises(SlugCollisionExhausted):
            LocalPage.objects.unique_slug_for('Kloakmester', 'Dianalund')

    def test_slug_not_derived_without_service(self):
        page = LocalPage.objects.create_page(city='Dianalund', service_keyword='')
        assert page.slug is None

    def test_get_by_slug(self, create_page):
        page = create_page()
        assert LocalPage.objects.get_by_slug('kloakmester-dianalund') == page
        assert LocalPage.objects.get_by_slug('missing') is None
        assert LocalPage.objects.get_by_slug('') is None

    def test_lookup_by_slugified_segments(self, create_page):
        page = create_page(service='Kloakmester Service')
        found = LocalPage.objects.get_by_service_city_slugs('kloakmester-service', 'dianalund')
        assert found == page

    def test_lookup_returns_lowest_id(self, create_page):
        first = create_page()
        create_page()
        assert LocalPage.objects.get_by_service_city_slugs('kloakmester', 'dianalund') == first

    def test_lookup_misses_names_outside_prefilter(self, create_page):
        # The SQL pre-filter only lowercases and replaces spaces
        create_page(city='St. Heddinge')
        assert LocalPage.objects.get_by_service_city_slugs('kloakmester', 'st-heddinge') is None

    def test_update_patches_given_fields(self, create_page):
        page = create_page(meta_title='Old')
        updated = LocalPage.objects.update_page(page.pk, meta_title='New')
        assert updated.meta_title == 'New'
        assert updated.city == 'Dianalund'

    def test_update_normalizes_slug(self, create_page):
        page = create_page()
        updated = LocalPage.objects.update_page(page.pk, slug='New Slug')
        assert updated.slug == 'new-slug'

    def test_update_unknown_id(self):
        with pytest.raises(LocalPage.DoesNotExist):
            LocalPage.objects.update_page(999, meta_title='x')

    def test_update_slug_clash_raises(self, create_page):
        create_page()
        other = create_page(city='Slagelse')
        with pytest.raises(ConstraintViolation):
            LocalPage.objects.update_page(other.pk, slug='kloakmester-dianalund')
        other.refresh_from_db()
        assert other.slug == 'kloakmester-slagelse'

    def test_update_rejects_unknown_field(self, create_page):
        page = create_page()
        with pytest.raises(ValueError):
            LocalPage.objects.update_page(page.pk, hits=3)

    def test_delete(self, create_page):
        page = create_page()
        assert LocalPage.objects.delete_page(page.pk) is True
        assert LocalPage.objects.delete_page(page.pk) is False

    def test_get_all_newest_first(self, create_page):
        first = create_page()
        second = create_page(city='Slagelse')
        assert list(LocalPage.objects.get_all()) == [second, first]

    def test_missing_ai_content(self, create_page):
        complete = create_page(ai_intro='Intro', meta_title='Title', meta_description='Desc')
        partial = create_page(city='Slagelse', ai_intro='Intro')
        missing = list(LocalPage.objects.missing_ai_content())
        assert partial in missing
        assert complete not in missing


# ─────────────────────────────────────────────────────────────
# Routing
# ─────────────────────────────────────────────────────────────

@pytest.mark.django_db
class TestRouting:

    def test_canonical_path(self, create_page):
        page = create_page(service='Kloakmester Service')
        assert routing.canonical_path(page) == '/service/kloakmester-service/dianalund/'
        assert page.get_absolute_url() == '/service/kloakmester-service/dianalund/'

    def test_canonical_path_degenerate_row(self):
        page = LocalPage(service_keyword='', city='Dianalund')
        assert routing.canonical_path(page) == '/'

    def test_match_route(self):
        assert routing.match_route('/service/a/b/').kind == routing.MATCH_SERVICE_CITY
        assert routing.match_route('/service/a/b').city == 'b'
        assert routing.match_route('/localseo/x/').slug == 'x'
        assert routing.match_route('/service/a/') is None
        assert routing.match_route('/about/') is None

    def test_resolve_passes_through_other_paths(self):
        assert routing.resolve('/contact/') is None

    def test_resolve_serve(self, create_page):
        page = create_page()
        resolution = routing.resolve('/service/kloakmester/dianalund/')
        assert resolution.outcome == routing.SERVE
        assert resolution.page == page

    def test_resolve_legacy_redirect(self, create_page):
        create_page()
        resolution = routing.resolve('/localseo/kloakmester-dianalund/')
        assert resolution.outcome == routing.REDIRECT
        assert resolution.status_code == 301
        assert resolution.location == '/service/kloakmester/dianalund/'

    def test_primary_url_renders(self, client, create_page):
        create_page(ai_intro='Fast help with drains.', meta_title='Kloakmester i Dianalund')
        response = client.get('/service/kloakmester/dianalund/')
        assert response.status_code == 200
        content = response.content.decode()
        assert '<title>Kloakmester i Dianalund</title>' in content
        assert 'Fast help with drains.' in content
        assert 'rel="canonical" href="http://testserver/service/kloakmester/dianalund/"' in content

    def test_primary_url_without_trailing_slash(self, client, create_page):
        create_page()
        assert client.get('/service/kloakmester/dianalund').status_code == 200

    def test_legacy_url_redirects_to_canonical(self, client, create_page):
        create_page()
        response = client.get('/localseo/kloakmester-dianalund/')
        assert response.status_code == 301
        assert response['Location'] == '/service/kloakmester/dianalund/'

    def test_unknown_pair_is_not_cached_404(self, client):
        response = client.get('/service/unknown-x/unknown-y/')
        assert response.status_code == 404
        assert 'no-cache' in response['Cache-Control']

    def test_unknown_legacy_slug_is_404(self, client):
        assert client.get('/localseo/nothing-here/').status_code == 404


# ─────────────────────────────────────────────────────────────
# Redirect table
# ─────────────────────────────────────────────────────────────

@pytest.mark.django_db
class TestRedirects:

    def test_rule_matches_with_and_without_trailing_slash(self, client):
        rule = redirects.create_rule('/old-page', 'https://x/new', 301)

        first = client.get('/old-page')
        second = client.get('/old-page/')

        assert first.status_code == 301
        assert first['Location'] == 'https://x/new'
        assert second.status_code == 301
        rule.refresh_from_db()
        assert rule.hits == 2

    def test_temporary_redirect(self, client):
        redirects.create_rule('/promo/', 'https://x/sale', 302)
        response = client.get('/promo/')
        assert response.status_code == 302

    def test_redirect_wins_over_landing_page(self, client, create_page):
        create_page()
        redirects.create_rule('/service/kloakmester/dianalund/', 'https://x/moved')
        response = client.get('/service/kloakmester/dianalund/')
        assert response.status_code == 301
        assert response['Location'] == 'https://x/moved'

    def test_delete_invalidates_cache(self, client):
        rule = redirects.create_rule('/old-page', 'https://x/new')
        assert client.get('/old-page').status_code == 301

        assert redirects.delete_rule(rule.id) is True
        assert redirects.lookup('/old-page') is None
        assert client.get('/old-page').status_code == 404

    def test_orm_save_invalidates_cache(self):
        assert redirects.lookup('/legacy') is None
        RedirectRule.objects.create(source_path='/legacy', target_url='https://x/')
        assert redirects.lookup('/legacy') is not None

    @pytest.mark.parametrize('given, expected', [
        (301, 301), (302, 302), ('302', 302), (307, 301), ('abc', 301), (None, 301),
    ])
    def test_normalize_redirect_type(self, given, expected):
        assert redirects.normalize_redirect_type(given) == expected

    def test_invalid_type_stored_as_permanent(self):
        rule = redirects.create_rule('/a', 'https://x/', 'bogus')
        assert rule.redirect_type == 301

    def test_both_fields_required(self):
        with pytest.raises(ValueError):
            redirects.create_rule('', 'https://x/')
        with pytest.raises(ValueError):
            redirects.create_rule('/a', '  ')

    def test_duplicate_source_raises(self):
        redirects.create_rule('/a', 'https://x/')
        with pytest.raises(ConstraintViolation):
            redirects.create_rule('/a', 'https://y/')

    def test_first_rule_by_id_wins(self):
        first = redirects.create_rule('/dup', 'https://x/1')
        redirects.create_rule('/dup/', 'https://x/2')
        assert redirects.lookup('/dup').id == first.id

    def test_api_paths_are_not_redirected(self, client):
        redirects.create_rule('/api/v1/health/', 'https://x/')
        response = client.get('/api/v1/health/')
        assert response.status_code == 200


# ─────────────────────────────────────────────────────────────
# Rendering: head tags, JSON-LD, bindings
# ─────────────────────────────────────────────────────────────

@pytest.mark.django_db
class TestRendering:

    def test_document_title_fallback(self, create_page):
        page = create_page()
        assert document_title(page) == 'Kloakmester in Dianalund'

    def test_head_tags(self, create_page, page_context, localseo_options):
        localseo_options(OG_IMAGE='https://cdn.example.com/og.jpg', ROBOTS='noindex, follow')
        page = create_page(meta_description='Drain help in Dianalund.')
        head = build_head_tags(page_context(page))

        assert head['canonical'] == 'http://testserver/service/kloakmester/dianalund/'
        assert head['robots'] == 'noindex, follow'
        tags = {tag['key']: tag['content'] for tag in head['meta']}
        assert tags['og:description'] == 'Drain help in Dianalund.'
        assert tags['og:site_name'] == 'testserver'
        assert tags['twitter:card'] == 'summary_large_image'

    def test_head_tags_without_image(self, create_page, page_context):
        head = build_head_tags(page_context(create_page()))
        tags = {tag['key']: tag['content'] for tag in head['meta']}
        assert tags['twitter:card'] == 'summary'
        assert 'og:image' not in tags

    def test_schema(self, create_page, page_context, localseo_options):
        localseo_options(BUSINESS_NAME='Acme Drains', BUSINESS_PHONE='+45 12 34 56 78')
        page = create_page(zip='4293')
        schema = build_schema(page_context(page))

        assert schema['@type'] == 'LocalBusiness'
        assert schema['address']['postalCode'] == '4293'
        assert schema['telephone'] == '+45 12 34 56 78'
        assert schema['areaServed'] == {'@type': 'City', 'name': 'Dianalund'}
        crumbs = schema['breadcrumb']['itemListElement']
        assert [c['position'] for c in crumbs] == [1, 2]
        assert crumbs[1]['item'] == 'http://testserver/service/kloakmester/dianalund/'

    def test_schema_disabled(self, create_page, page_context, localseo_options):
        localseo_options(SCHEMA_ENABLED=False)
        ctx = page_context(create_page())
        assert build_schema(ctx) is None
        assert schema_json(ctx) == ''

    def test_schema_json_escapes_script_breakout(self, create_page, page_context):
        page = create_page(meta_description='</script><b>&')
        payload = schema_json(page_context(page))
        assert '</script>' not in payload
        assert '\\u003C/script\\u003E' in payload

    def test_bindings(self, create_page, localseo_options):
        localseo_options(BUSINESS_PHONE='+45 12 34 56 78')
        page = create_page(ai_intro='Hello', nearby_cities='Sorø, Slagelse')

        assert binding_value(page, 'service') == 'Kloakmester'
        assert binding_value(page, 'intro_text') == 'Hello'
        assert binding_value(page, 'nearby_cities') == 'Sorø, Slagelse'
        assert binding_value(page, 'phone_url') == 'tel:+4512345678'
        assert binding_value(page, 'cta_label') == 'Call your local expert in Dianalund – +45 12 34 56 78'
        assert binding_value(page, 'no_such_key') == ''

    def test_cta_label_without_phone(self, create_page):
        page = create_page()
        assert binding_value(page, 'cta_label') == 'Contact us today'
        assert binding_value(page, 'phone_url') == ''

    def test_binding_template_tag(self, create_page, page_context):
        ctx = page_context(create_page())
        rendered = Template('{% load localseo_tags %}{% binding "city" %}|{% binding "zzz" %}').render(
            Context({'localseo': ctx})
        )
        assert rendered == 'Dianalund|'

    def test_binding_template_tag_outside_localseo_page(self):
        rendered = Template('{% load localseo_tags %}[{% binding "city" %}]').render(Context({}))
        assert rendered == '[]'

    def test_sitemap_lists_routable_rows(self, client, create_page):
        create_page()
        LocalPage.objects.create_page(service_keyword='', city='Nowhere')
        response = client.get('/sitemap.xml')
        assert response.status_code == 200
        content = response.content.decode()
        assert 'http://testserver/service/kloakmester/dianalund/' in content
        assert 'nowhere' not in content.lower()

    def test_sitemap_skips_rows_without_canonical_url(self, client, create_page):
        create_page()
        create_page(city='øø')
        content = client.get('/sitemap.xml').content.decode()
        assert content.count('<loc>') == 1
        assert '<loc>http://testserver/</loc>' not in content

    def test_schema_skips_rows_without_canonical_url(self, create_page, page_context):
        page = create_page(city='øø')
        assert build_schema(page_context(page)) is None


# ─────────────────────────────────────────────────────────────
# CSV
# ─────────────────────────────────────────────────────────────

@pytest.mark.django_db
class TestCSV:

    def test_import(self):
        csv_content = (
            UTF8_BOM + 'City,Service_Keyword,ZIP,nearby_cities\n'
            'Dianalund,Kloakmester,4293,"Sorø,\nSlagelse"\n'
            ',Kloakmester,4200\n'
            'Slagelse,Kloakmester\n'
        )
        result = import_pages(csv_content)
        assert result == {'imported': 2, 'skipped': 1}

        page = LocalPage.objects.get(city='Dianalund')
        assert page.zip == '4293'
        assert page.nearby_cities == 'Sorø,\nSlagelse'
        assert page.slug == 'kloakmester-dianalund'
        assert LocalPage.objects.get(city='Slagelse').zip == ''

    def test_import_empty(self):
        with pytest.raises(CSVImportError) as exc:
            import_pages('  ')
        assert exc.value.code == 'EMPTY_CSV'

    def test_import_missing_columns(self):
        with pytest.raises(CSVImportError) as exc:
            import_pages('city,zip\nDianalund,4293\n')
        assert exc.value.code == 'MISSING_COLUMNS'

    def test_import_skips_rows_failing_validation(self):
        csv_content = (
            'city,service_keyword\n'
            + 'c' * 150 + ',Kloakmester\n'
            'Dianalund,Kloakmester\n'
        )
        result = import_pages(csv_content)
        assert result == {'imported': 1, 'skipped': 1}
        assert list(LocalPage.objects.values_list('city', flat=True)) == ['Dianalund']

    def test_export_escapes_formulas(self, create_page):
        create_page(meta_title='=HYPERLINK("x")', meta_description='+45 call')
        content = export_pages(LocalPage.objects.order_by('id'))

        assert content.startswith(UTF8_BOM)
        lines = content[len(UTF8_BOM):].splitlines()
        assert lines[0] == 'city,zip,service_keyword,meta_title,meta_description,nearby_cities,local_landmarks'
        assert "'=HYPERLINK" in lines[1]
        assert "'+45 call" in lines[1]


# ─────────────────────────────────────────────────────────────
# Admin API
# ─────────────────────────────────────────────────────────────

@pytest.mark.django_db
class TestLocalPageAPI:

    def test_requires_authentication(self, api_client):
        response = api_client.get('/api/v1/local-pages/')
        assert response.status_code == 401

    def test_requires_staff(self, api_client, create_user):
        user = create_user(email='editor@example.com', is_staff=False)
        refresh = RefreshToken.for_user(user)
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {str(refresh.access_token)}')
        response = api_client.get('/api/v1/local-pages/')
        assert response.status_code == 403

    def test_list(self, staff_client, create_page):
        create_page()
        create_page(city='Slagelse')
        response = staff_client.get('/api/v1/local-pages/')
        assert response.status_code == 200
        assert response.data['count'] == 2
        assert response.data['results'][0]['city'] == 'Slagelse'

    def test_create(self, staff_client):
        response = staff_client.post('/api/v1/local-pages/', {
            'city': 'Dianalund',
            'service_keyword': 'Kloakmester',
            'zip': '4293',
        })
        assert response.status_code == 201
        assert response.data['slug'] == 'kloakmester-dianalund'
        assert response.data['canonical_url'] == 'http://testserver/service/kloakmester/dianalund/'

    def test_create_requires_city_and_service(self, staff_client):
        response = staff_client.post('/api/v1/local-pages/', {'city': 'Dianalund'})
        assert response.status_code == 400

    def test_create_slug_clash_is_conflict(self, staff_client, create_page):
        create_page(slug='taken')
        response = staff_client.post('/api/v1/local-pages/', {
            'city': 'Slagelse', 'service_keyword': 'Kloakmester', 'slug': 'taken',
        })
        assert response.status_code == 409
        assert response.data['error']['code'] == 'CONFLICT'

    def test_create_slug_exhausted(self, staff_client):
        base = 'kloakmester-dianalund'
        LocalPage.objects.bulk_create([
            LocalPage(service_keyword='Kloakmester', city='Dianalund',
                      slug=base if i == 0 else f'{base}-{i}')
            for i in range(SLUG_MAX_ATTEMPTS)
        ])
        response = staff_client.post('/api/v1/local-pages/', {
            'city': 'Dianalund', 'service_keyword': 'Kloakmester',
        })
        assert response.status_code == 400
        assert response.data['error']['code'] == 'SLUG_EXHAUSTED'

    def test_put_is_partial(self, staff_client, create_page):
        page = create_page()
        response = staff_client.put(f'/api/v1/local-pages/{page.pk}/', {'meta_title': 'New title'})
        assert response.status_code == 200
        page.refresh_from_db()
        assert page.meta_title == 'New title'
        assert page.city == 'Dianalund'

    def test_patch_unknown_id(self, staff_client):
        response = staff_client.patch('/api/v1/local-pages/999/', {'meta_title': 'x'})
        assert response.status_code == 404
        assert response.data['error']['code'] == 'NOT_FOUND'

    def test_retrieve_unknown_id(self, staff_client):
        response = staff_client.get('/api/v1/local-pages/999/')
        assert response.status_code == 404
        assert response.data['error']['status'] == 404

    def test_patch_slug_clash_is_conflict(self, staff_client, create_page):
        create_page()
        other = create_page(city='Slagelse')
        response = staff_client.patch(f'/api/v1/local-pages/{other.pk}/', {'slug': 'kloakmester-dianalund'})
        assert response.status_code == 409
        assert response.data['error']['code'] == 'CONFLICT'

    def test_create_with_longest_names(self, staff_client):
        payload = {'city': 'b' * 100, 'service_keyword': 'a' * 100}
        first = staff_client.post('/api/v1/local-pages/', payload)
        second = staff_client.post('/api/v1/local-pages/', payload)
        assert first.status_code == 201
        assert second.status_code == 201
        assert len(second.data['slug']) <= SLUG_MAX_LENGTH

    def test_delete(self, staff_client, create_page):
        page = create_page()
        response = staff_client.delete(f'/api/v1/local-pages/{page.pk}/')
        assert response.status_code == 204
        assert not LocalPage.objects.filter(pk=page.pk).exists()

    def test_import_csv(self, staff_client):
        response = staff_client.post('/api/v1/local-pages/import-csv/', {
            'csv': 'city,service_keyword\nDianalund,Kloakmester\n',
        })
        assert response.status_code == 200
        assert response.data == {'imported': 1, 'skipped': 0}

    def test_import_csv_missing_columns(self, staff_client):
        response = staff_client.post('/api/v1/local-pages/import-csv/', {'csv': 'zip\n4293\n'})
        assert response.status_code == 400
        assert response.data['error']['code'] == 'MISSING_COLUMNS'

    def test_export_csv(self, staff_client, create_page):
        create_page()
        response = staff_client.get('/api/v1/local-pages/export-csv/')
        assert response.status_code == 200
        assert response['Content-Type'].startswith('text/csv')
        assert 'localseo-data.csv' in response['Content-Disposition']
        assert response.content.decode('utf-8').startswith(UTF8_BOM)


@pytest.mark.django_db
class TestRedirectAPI:

    def test_create_and_list(self, staff_client):
        response = staff_client.post('/api/v1/redirects/', {
            'source_path': '/old-page',
            'target_url': 'https://x/new',
            'redirect_type': 302,
        })
        assert response.status_code == 201
        assert response.data['data']['redirect_type'] == 302

        response = staff_client.get('/api/v1/redirects/')
        assert response.status_code == 200
        assert response.data['meta']['total'] == 1
        assert response.data['data'][0]['source_path'] == '/old-page'

    def test_create_requires_both_fields(self, staff_client):
        response = staff_client.post('/api/v1/redirects/', {'source_path': '/old-page'})
        assert response.status_code == 400
        assert response.data['error']['code'] == 'VALIDATION_ERROR'

    def test_create_duplicate_is_conflict(self, staff_client):
        redirects.create_rule('/old-page', 'https://x/new')
        response = staff_client.post('/api/v1/redirects/', {
            'source_path': '/old-page', 'target_url': 'https://x/other',
        })
        assert response.status_code == 409

    def test_delete(self, staff_client):
        rule = redirects.create_rule('/old-page', 'https://x/new')
        response = staff_client.delete(f'/api/v1/redirects/{rule.id}/')
        assert response.status_code == 204
        response = staff_client.delete(f'/api/v1/redirects/{rule.id}/')
        assert response.status_code == 404

    def test_requires_staff(self, api_client, create_user):
        user = create_user(email='editor@example.com', is_staff=False)
        refresh = RefreshToken.for_user(user)
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {str(refresh.access_token)}')
        assert api_client.get('/api/v1/redirects/').status_code == 403


# ─────────────────────────────────────────────────────────────
# Django admin
# ─────────────────────────────────────────────────────────────

def admin_form_data(**overrides):
    data = {
        'city': 'Slagelse', 'zip': '', 'service_keyword': 'Kloakmester', 'slug': '',
        'ai_intro': '', 'meta_title': '', 'meta_description': '',
        'nearby_cities': '', 'local_landmarks': '',
    }
    data.update(overrides)
    return data


@pytest.mark.django_db
class TestLocalPageAdminForm:

    def test_slug_clash_after_normalizing_is_form_error(self, create_page):
        create_page(slug='taken-slug')
        form = LocalPageAdminForm(data=admin_form_data(slug='Taken Slug'))
        assert not form.is_valid()
        assert 'slug' in form.errors
        assert LocalPage.objects.count() == 1

    def test_explicit_slug_is_normalized(self):
        form = LocalPageAdminForm(data=admin_form_data(slug='My Slug'))
        assert form.is_valid(), form.errors
        assert form.save().slug == 'my-slug'

    def test_slug_derived_on_add(self, create_page):
        create_page(city='Slagelse')
        form = LocalPageAdminForm(data=admin_form_data())
        assert form.is_valid(), form.errors
        assert form.save().slug == 'kloakmester-slagelse-1'

    def test_slug_exhaustion_is_form_error(self):
        base = 'kloakmester-slagelse'
        LocalPage.objects.bulk_create([
            LocalPage(service_keyword='Kloakmester', city='Slagelse',
                      slug=base if i == 0 else f'{base}-{i}')
            for i in range(SLUG_MAX_ATTEMPTS)
        ])
        form = LocalPageAdminForm(data=admin_form_data())
        assert not form.is_valid()
        assert 'slug' in form.errors

    def test_cleared_slug_stays_empty_on_edit(self, create_page):
        page = create_page()
        form = LocalPageAdminForm(data=admin_form_data(city='Dianalund'), instance=page)
        assert form.is_valid(), form.errors
        assert form.save().slug is None
