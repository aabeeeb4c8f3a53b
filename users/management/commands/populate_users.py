"""
Management command to populate the database from the random-user service.

Same operation as ``GET /populate``, without the rate limits.
"""

from django.core.management.base import BaseCommand, CommandError

from server.errors import UpstreamFailure
from users import services
from users.models import User


class Command(BaseCommand):
    help = 'Fetches users from the random-user service and stores them'

    def add_arguments(self, parser):
        parser.add_argument(
            '--count',
            type=int,
            default=None,
            help='Number of users to fetch (default: USERS["POPULATE_COUNT"])',
        )
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Delete every existing user before populating',
        )

    def handle(self, *args, **options):
        count = options['count']
        if count is not None and count < 1:
            raise CommandError('--count must be a positive integer')

        if options['clear']:
            self.stdout.write('Clearing existing users...')
            deleted = User.objects.all().delete()
            self.stdout.write(self.style.SUCCESS(f'Deleted {deleted[0]} users'))

        try:
            users = services.populate_users(count=count)
        except UpstreamFailure as e:
            raise CommandError(f'{e.message}: {e.detail}')

        self.stdout.write(self.style.SUCCESS(f'✓ Successfully created {len(users)} users'))
        for user in users:
            self.stdout.write(f'  - #{user.id} {user.first_name} {user.last_name} ({user.email})')
