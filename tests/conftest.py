"""Pytest configuration and fixtures for helper tests.

This module provides shared fixtures: API Gateway events, a clean
environment for configuration tests and a mocked boto3 client.
"""

from __future__ import annotations

import sys
from pathlib import Path
from uuid import uuid4

import pytest

# Add backend source to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / 'backend' / 'src'))


# --- API Event Fixtures ---


@pytest.fixture
def api_gateway_event() -> dict:
    """Base API Gateway event structure."""
    return {
        'httpMethod': 'GET',
        'path': '/v1/organizations',
        'pathParameters': None,
        'queryStringParameters': {},
        'multiValueQueryStringParameters': {},
        'headers': {},
        'requestContext': {
            'requestId': str(uuid4()),
        },
        'body': None,
        'isBase64Encoded': False,
    }


@pytest.fixture
def post_event(api_gateway_event) -> dict:
    """API Gateway event for a JSON POST request."""
    event = api_gateway_event.copy()
    event['httpMethod'] = 'POST'
    event['headers'] = {'Content-Type': 'application/json'}
    return event


# --- Environment Fixtures ---


_DATABASE_ENV = (
    'DATABASE_URL',
    'DATABASE_SECRET_ARN',
    'DATABASE_TYPE',
    'DATABASE_HOST',
    'DATABASE_PORT',
    'DATABASE_NAME',
    'DATABASE_USERNAME',
    'DATABASE_PASSWORD',
    'DATABASE_SSLMODE',
)


@pytest.fixture
def clean_database_env(monkeypatch):
    """Remove database settings from the environment and secret cache."""
    from apihelpers.db.connection import clear_secret_cache

    for name in _DATABASE_ENV:
        monkeypatch.delenv(name, raising=False)
    clear_secret_cache()
    yield monkeypatch
    clear_secret_cache()


# --- Mock Fixtures ---


@pytest.fixture
def mock_boto3_client(mocker):
    """Mock boto3 client for AWS service calls."""
    mock = mocker.patch('apihelpers.db.connection.boto3.client')
    return mock
