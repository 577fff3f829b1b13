from unittest import mock

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from loyaltea.main import create_app

from conftest import make_settings


def test_startup_failure_closes_mongo_client():
    mongo_client = mock.MagicMock()
    mongo_client.admin.command.side_effect = ServerSelectionTimeoutError("no servers")

    with mock.patch("loyaltea.main.create_client", return_value=mongo_client):
        app = create_app(settings=make_settings())
        with pytest.raises(ServerSelectionTimeoutError):
            with TestClient(app):
                pass

    mongo_client.close.assert_called_once()


def test_shutdown_closes_mongo_client(database):
    mongo_client = mock.MagicMock()
    mongo_client.__getitem__.return_value = database

    with mock.patch("loyaltea.main.create_client", return_value=mongo_client):
        app = create_app(settings=make_settings())
        with TestClient(app) as client:
            assert client.get("/ping").status_code == 200
            mongo_client.close.assert_not_called()

    mongo_client.close.assert_called_once()
