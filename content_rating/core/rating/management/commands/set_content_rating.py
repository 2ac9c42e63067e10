"""
Set or clear the content rating of a unit from the command line.
"""
from django.core.management.base import BaseCommand, CommandError

from ... import api


class Command(BaseCommand):
    """
    Runs the same classify-then-store path as a rating directive on a page.
    """
    help = "Set the content rating of a content unit. Omit the rating to clear it."

    def add_arguments(self, parser):
        parser.add_argument("unit_id", type=int)
        parser.add_argument("rating", nargs="?", default="")

    def handle(self, *args, **options):
        unit_id = options["unit_id"]
        rating = options["rating"]
        if unit_id <= 0:
            raise CommandError(f"Invalid unit id: {unit_id}")
        if rating and api.classify(rating) is None:
            raise CommandError(f"'{rating}' is not a known content rating")

        code = api.emit_directive(rating, unit_id)
        if code:
            self.stdout.write(f"Unit {unit_id} rated {code}")
        else:
            self.stdout.write(f"Unit {unit_id} is unrated")
