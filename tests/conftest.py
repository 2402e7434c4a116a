from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_sources():
    """The reference submission: (TransactionHistory.java, PortfolioManager.java)."""
    return (
        (FIXTURES / "TransactionHistory.java").read_text(encoding="utf-8"),
        (FIXTURES / "PortfolioManager.java").read_text(encoding="utf-8"),
    )
