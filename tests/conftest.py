import json
from pathlib import Path
from typing import Any, Dict, List

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_board_fixtures() -> List[Dict[str, Any]]:
    with open(FIXTURES_DIR / "solver_boards.json") as fh:
        return json.load(fh)


BOARD_FIXTURES = load_board_fixtures()


@pytest.fixture(params=BOARD_FIXTURES, ids=[f["name"] for f in BOARD_FIXTURES])
def board_fixture(request) -> Dict[str, Any]:
    """One named board with its budget and precomputed solver output."""
    return request.param
