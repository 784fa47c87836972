# matching/management/commands/reconcile_matches.py

from django.core.management.base import BaseCommand

from matching.swipes import repair_one_sided_matches


class Command(BaseCommand):
    help = 'Repara matches que solo quedaron escritos en uno de los dos perfiles'

    def add_arguments(self, parser):
        parser.add_argument('--profile', type=int, default=None, help='Limita la revisión a un perfil')

    def handle(self, *args, **options):
        repaired = repair_one_sided_matches(options['profile'])
        if repaired:
            self.stdout.write(self.style.WARNING(f'{repaired} match(es) reparados.'))
        else:
            self.stdout.write(self.style.SUCCESS('Todos los matches son simétricos.'))
