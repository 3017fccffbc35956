from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from campus.errors import TransientBackendError
from uploads.storage import configure_cors

DEFAULT_METHODS = ['GET', 'HEAD', 'PUT', 'POST', 'DELETE']
DEFAULT_HEADERS = ['Content-Type', 'Authorization']


class Command(BaseCommand):
    help = "Set the cross-origin rules on the upload bucket so browsers can PUT to presigned URLs."

    def add_arguments(self, parser):
        parser.add_argument('--origin', action='append', dest='origins', default=[],
                            help="Allowed origin, repeatable. Defaults to FRONTEND_URL.")
        parser.add_argument('--method', action='append', dest='methods', default=[],
                            help="Allowed HTTP method, repeatable.")
        parser.add_argument('--header', action='append', dest='headers', default=[],
                            help="Allowed request header, repeatable.")
        parser.add_argument('--max-age', type=int, default=3600, dest='max_age')

    def handle(self, *args, **options):
        origins = options['origins'] or list(settings.FRONTEND_URL)
        methods = options['methods'] or DEFAULT_METHODS
        headers = options['headers'] or DEFAULT_HEADERS
        try:
            rules = configure_cors(origins, methods, headers, options['max_age'])
        except TransientBackendError as e:
            raise CommandError(e.message)
        rule = rules['CORSRules'][0]
        self.stdout.write(self.style.SUCCESS(
            f"CORS configuration updated for {settings.AWS_S3_BUCKET}: "
            f"origins={rule['AllowedOrigins']} methods={rule['AllowedMethods']}"
        ))
