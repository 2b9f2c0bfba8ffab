from django.core.management.base import BaseCommand

from tasktracker_project.db.indexes import ensure_indexes


class Command(BaseCommand):
    help = "Create the MongoDB indexes used by the team and task queries."

    def handle(self, *args, **options):
        ensured = ensure_indexes()
        for collection_name, index_name in ensured:
            self.stdout.write(f"{collection_name}.{index_name}")
        self.stdout.write(self.style.SUCCESS(f"Ensured {len(ensured)} indexes."))
