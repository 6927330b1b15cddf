import pytest
from flask_jwt_extended import create_access_token

from pagecms import create_app
from pagecms.catalog import DEFAULT_SECTION_TYPES
from pagecms.extensions import db
from pagecms.application.sections.registry import seed_default_types
from pagecms.application.sections.store import save_section


@pytest.fixture()
def app():
    """Testing app on in-memory SQLite with the default catalog seeded.

    The app context stays pushed for the whole test, so application
    functions can be called directly alongside the test client.
    """
    app = create_app("testing")

    with app.app_context():
        db.create_all()
        seed_default_types(DEFAULT_SECTION_TYPES)
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


def _auth_headers(identity, role):
    token = create_access_token(identity=identity, additional_claims={"role": role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def admin_headers(app):
    return _auth_headers("admin-1", "admin")


@pytest.fixture()
def editor_headers(app):
    return _auth_headers("editor-1", "editor")


@pytest.fixture()
def make_section(app):
    """Factory for persisted sections on the `home` page unless told otherwise."""

    def _make(section_type="faq", **fields):
        data = {"page_type": "home", "section_type": section_type, "content": {}}
        data.update(fields)
        return save_section(data)

    return _make
