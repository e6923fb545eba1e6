from unittest.mock import AsyncMock, MagicMock

import pytest

from cryptodash.domain.enums import PriceSource
from cryptodash.domain.models import CurrentPrice


def _response(status_code: int = 200, json_data=None, json_error: Exception | None = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture()
def make_response():
    return _response


@pytest.fixture()
def mock_http():
    http = MagicMock()
    http.get = AsyncMock(return_value=_response(200, {}))
    return http


@pytest.fixture()
def live_quote() -> CurrentPrice:
    return CurrentPrice(price=67890, change24h=1.5, source=PriceSource.COINCAP)
