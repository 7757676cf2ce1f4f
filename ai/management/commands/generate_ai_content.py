"""
Management command to generate AI copy for LocalSEO rows.
Usage: python manage.py generate_ai_content [--id N] [--dry-run]
"""
from django.core.management.base import BaseCommand, CommandError

from ai.generation import generate_for_page, generate_missing
from ai.providers import AIProviderError
from localseo.models import LocalPage


class Command(BaseCommand):
    help = 'Generate AI intro/meta copy for rows that are missing it (or one row with --id)'

    def add_arguments(self, parser):
        parser.add_argument('--id', type=int, help='Generate for this LocalPage only')
        parser.add_argument('--dry-run', action='store_true', help='List the rows that would be generated')
        parser.add_argument('--delay', type=float, default=None, help='Seconds to wait between provider calls')

    def handle(self, *args, **options):
        if options['id']:
            page = LocalPage.objects.get_by_id(options['id'])
            if page is None:
                raise CommandError(f"LocalPage {options['id']} does not exist")
            if options['dry_run']:
                self.stdout.write(f"Would generate: {page.pk} {page}")
                return
            try:
                generate_for_page(page)
            except AIProviderError as e:
                raise CommandError(str(e))
            self.stdout.write(self.style.SUCCESS(f"Generated content for {page}"))
            return

        if options['dry_run']:
            pages = LocalPage.objects.missing_ai_content().order_by('id')
            for page in pages:
                self.stdout.write(f"Would generate: {page.pk} {page}")
            self.stdout.write(f"{pages.count()} row(s) missing AI content")
            return

        results = generate_missing(delay=options['delay'])
        for error in results['errors']:
            self.stderr.write(f"  #{error['id']}: {error['message']}")
        self.stdout.write(self.style.SUCCESS(
            f"Done: {results['success']} generated, {results['failed']} failed"
        ))
