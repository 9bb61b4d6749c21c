"""First-run data: an admin account and two sample institutions."""

import logging

from backend.auth.passwords import hash_password
from backend.core import config
from backend.models.institution import Address, Institution, WorkingHours
from backend.models.user import User, UserRole
from backend.repositories.institutions import InstitutionRepository
from backend.repositories.users import UserRepository
from backend.storage.file_system import FileSystemStore

logger = logging.getLogger(__name__)


def _week(open_time: str, close_time: str, saturday: tuple[str, str] | None) -> list[WorkingHours]:
    hours = [WorkingHours(day_of_week=0, is_open=False)]
    hours += [
        WorkingHours(day_of_week=day, is_open=True, open_time=open_time, close_time=close_time)
        for day in range(1, 6)
    ]
    if saturday:
        hours.append(WorkingHours(day_of_week=6, is_open=True, open_time=saturday[0], close_time=saturday[1]))
    else:
        hours.append(WorkingHours(day_of_week=6, is_open=False))
    return hours


def build_sample_institutions() -> list[Institution]:
    return [
        Institution(
            name='Casa de Apoio São Francisco',
            email='contato@casasaofrancisco.org',
            phone='(11) 3456-7890',
            cnpj='12.345.678/0001-90',
            description=(
                'Instituição dedicada ao apoio de famílias em situação de vulnerabilidade social, '
                'oferecendo assistência alimentar, educacional e de saúde.'
            ),
            address=Address(
                street='Rua das Flores',
                number='123',
                neighborhood='Centro',
                city='São Paulo',
                state='SP',
                zip_code='01234-567',
                latitude=-23.5505,
                longitude=-46.6333,
            ),
            working_hours=_week('08:00', '17:00', saturday=('08:00', '12:00')),
            accepted_categories=['Roupas', 'Alimentos', 'Brinquedos'],
            rating=4.5,
            total_ratings=23,
            verified=True,
        ),
        Institution(
            name='ONG Esperança',
            email='contato@ongesperanca.org',
            phone='(11) 2345-6789',
            cnpj='23.456.789/0001-01',
            description=(
                'Organização não governamental focada na educação e desenvolvimento de crianças '
                'e adolescentes em comunidades carentes.'
            ),
            address=Address(
                street='Avenida da Esperança',
                number='456',
                neighborhood='Vila Nova',
                city='São Paulo',
                state='SP',
                zip_code='02345-678',
                latitude=-23.5489,
                longitude=-46.6388,
            ),
            working_hours=_week('09:00', '18:00', saturday=None),
            accepted_categories=['Livros e Material Escolar', 'Brinquedos', 'Roupas'],
            rating=4.8,
            total_ratings=15,
            verified=True,
        ),
    ]


def initialize_sample_data(store: FileSystemStore) -> None:
    users = UserRepository(store)
    if not users.get_all():
        users.save(User(
            name='Administrador',
            email=config.ADMIN_EMAIL,
            password=hash_password(config.ADMIN_PASSWORD),
            phone='(11) 99999-9999',
            type=UserRole.ADMIN,
        ))
        logger.info('Created admin user %s', config.ADMIN_EMAIL)

    institutions = InstitutionRepository(store)
    if not institutions.get_all():
        for institution in build_sample_institutions():
            institutions.save(institution)
        logger.info('Created sample institutions')
