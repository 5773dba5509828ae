import json
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from api.network_api.analysis import format_exponent
from api.network_api.errors import RetrievalFailure
from core.network_platform import GraphEngine


class Command(BaseCommand):
    help = "Parse a GML file and print its summary statistics and degree distribution."

    def add_arguments(self, parser):
        parser.add_argument("path", help="Path to a .gml file")
        parser.add_argument("--json", action="store_true", help="Print the full analysis as JSON")

    def handle(self, *args, **options):
        path = Path(options["path"])
        engine = GraphEngine()
        datasource_name = engine.registry.datasource_for_extension(path.suffix)
        if datasource_name is None:
            raise CommandError(f"No datasource reads '{path.suffix}' files.")

        try:
            context = engine.load(datasource_name, str(path), source_name=path.name)
        except RetrievalFailure as exc:
            raise CommandError(str(exc)) from exc

        if options["json"]:
            self.stdout.write(json.dumps(context.to_dict(), indent=2))
            return

        self.stdout.write(f"{'=' * 60}")
        self.stdout.write(f"  {path.name}")
        self.stdout.write(f"{'=' * 60}")
        for index, (label, value) in enumerate(context.metrics.rows(), start=1):
            self.stdout.write(f"  {index}. {label:<16} {value}")
        for name, reason in context.metrics.undefined.items():
            self.stdout.write(self.style.WARNING(f"  {name}: {reason}"))

        if context.annotation.implicit_ids:
            self.stdout.write(self.style.WARNING(
                f"  Undeclared ids referenced by edges: {', '.join(context.annotation.implicit_ids)}"
            ))

        distribution = context.distribution
        self.stdout.write(f"\n  Power law: {format_exponent(distribution.exponent)}")
        for name, reason in distribution.undefined.items():
            self.stdout.write(self.style.WARNING(f"  {name}: {reason}"))

        self.stdout.write("\n  Degree histogram:")
        for b in distribution.histogram:
            self.stdout.write(f"    [{b.lower:g}, {b.upper:g}) {b.count}")
