"""Shared fixtures for the Sponsor Job Scanner tests."""

import pytest

from sponsor_scanner.config.models import AdvancedConfig, AppConfig, FilesConfig, SearchConfig
from sponsor_scanner.logging.context import clear_log_context
from sponsor_scanner.matching.models import ReferenceCompanySet
from sponsor_scanner.persistence import Database, JobStore
from tests.helpers import FIXED_NOW


@pytest.fixture(autouse=True)
def clean_log_context():
    """Never leak logging context between tests."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def database(tmp_path):
    """Connected database backed by a temp file."""
    db = Database(f"sqlite:///{tmp_path / 'test.db'}").connect()
    yield db
    db.close()


@pytest.fixture
def store(database):
    """JobStore with a fixed clock."""
    return JobStore(database, clock=lambda: FIXED_NOW)


@pytest.fixture
def reference_set():
    return ReferenceCompanySet(["google llc", "acme corp", "initech"])


@pytest.fixture
def app_config(tmp_path):
    """Configuration with files under tmp_path and no page delay."""
    return AppConfig(
        search=SearchConfig(query="Data Engineer", language="en"),
        files=FilesConfig(
            reference_csv=str(tmp_path / "h1b_companies.csv"),
            results_csv=str(tmp_path / "h1b_job_results.csv"),
        ),
        scan_interval="1h",
        advanced=AdvancedConfig(page_delay_seconds=0),
    )


@pytest.fixture
def reference_csv(tmp_path):
    """Reference CSV in DOL disclosure shape."""
    path = tmp_path / "h1b_companies.csv"
    path.write_text(
        "EMPLOYER_NAME,CASE_STATUS\n"
        "Google LLC,Certified\n"
        "\"Acme Corp\",Certified\n"
        "Initech,Certified\n"
        ",Withdrawn\n",
        encoding="utf-8",
    )
    return path
