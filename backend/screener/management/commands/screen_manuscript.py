from __future__ import annotations

import json
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from screener.models import FinalResult
from screener.reporting import render_verdict_markdown, render_verdict_text
from screener.services import build_screen_response, screen_manuscript
from screener.text_sources import TextExtractionError, read_manuscript_path


class Command(BaseCommand):
    help = 'Screen one or more manuscripts (.txt, .docx, .pdf) for NHANES usage and reporting issues.'

    def add_arguments(self, parser):
        parser.add_argument('paths', nargs='+', help='Manuscript files to screen.')
        parser.add_argument(
            '--format',
            choices=['text', 'markdown', 'json'],
            default='text',
            help='Output format.',
        )
        parser.add_argument('--include-evidence', action='store_true', help='Include check evidence in JSON output.')
        parser.add_argument(
            '--fail-on-fail',
            action='store_true',
            help='Exit with an error when any manuscript fails or cannot be screened.',
        )

    def handle(self, *args, **options):
        output_format = options['format']
        failures = []

        for raw_path in options['paths']:
            path = Path(raw_path)
            try:
                text = read_manuscript_path(path)
            except TextExtractionError as error:
                self.stderr.write(self.style.ERROR(f'{path}: {error.message}'))
                failures.append(str(path))
                continue

            verdict = screen_manuscript(text, title=path.name)
            if verdict.final_result in (FinalResult.FAIL, FinalResult.ERROR):
                failures.append(str(path))

            if output_format == 'json':
                payload = build_screen_response(verdict, include_evidence=options['include_evidence'])
                self.stdout.write(json.dumps(payload, ensure_ascii=False, indent=2))
            elif output_format == 'markdown':
                self.stdout.write(render_verdict_markdown(verdict))
            else:
                self.stdout.write(render_verdict_text(verdict))

        if failures and options['fail_on_fail']:
            raise CommandError(f"{len(failures)} manuscript(s) did not pass: {', '.join(failures)}")
