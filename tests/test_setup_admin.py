from sqlalchemy import select

from app.core.database import Database
from app.models.admin import Administrator
from app.scripts import setup_admin
from tests.conftest import make_settings


def test_setup_creates_super_admin_once(tmp_path):
    url = f"sqlite:///{tmp_path / 'setup.db'}"
    settings = make_settings(DATABASE_URL=url)

    assert setup_admin.main(settings) == 0
    assert setup_admin.main(settings) == 0

    database = Database(url).open()
    try:
        with database.session() as session:
            admins = session.execute(select(Administrator)).scalars().all()
    finally:
        database.close()

    assert len(admins) == 1
    assert admins[0].username == "superadmin"
    assert admins[0].role == "super_admin"
    assert admins[0].check_password("admin123456")


def test_setup_fails_on_invalid_seed_data(tmp_path):
    settings = make_settings(DATABASE_URL=f"sqlite:///{tmp_path / 'setup.db'}", SEED_ADMIN_EMAIL="not-an-email")

    assert setup_admin.main(settings) == 1
