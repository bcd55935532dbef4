"""Pytest configuration and shared fixtures."""

import json
import logging
import sys

import pytest

# Disable logging during tests to reduce noise
logging.disable(logging.CRITICAL)


@pytest.fixture
def enable_logging():
    """Lift the module-wide logging.disable for one test."""
    logging.disable(logging.NOTSET)
    yield
    logging.disable(logging.CRITICAL)


ENV_VARS_TO_CLEAN = [
    "TELEPORT_TSH_BINARY",
    "TELEPORT_COMMAND_TIMEOUT",
    "MCP_TELEPORT_DRY_RUN",
    "MCP_TELEPORT_DEBUG",
    "MCP_TELEPORT_NON_DESTRUCTIVE",
    "MCP_TELEPORT_TRANSPORT",
    "MCP_TELEPORT_HTTP_ADDR",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    """Clean environment variables and isolate config discovery for each test."""
    for var in ENV_VARS_TO_CLEAN:
        monkeypatch.delenv(var, raising=False)

    # keep .env files and config files of the developer out of the tests
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    yield


@pytest.fixture
def python_binary():
    """The running interpreter, used as a stand-in for tsh."""
    return sys.executable


@pytest.fixture
def sample_nodes_json():
    """tsh ls --format json output with two nodes."""
    return json.dumps(
        [
            {
                "kind": "node",
                "metadata": {
                    "name": "4f1a9c3e-0001",
                    "labels": {"env": "prod", "team": "platform"},
                },
                "spec": {
                    "hostname": "web-01",
                    "addr": "10.0.0.5:3022",
                    "cmd_labels": {
                        "uptime": {"command": ["uptime", "-p"], "period": "1m0s", "result": "up 3 days"}
                    },
                },
            },
            {
                "kind": "node",
                "metadata": {"name": "4f1a9c3e-0002"},
                "spec": {"hostname": "db-01", "addr": ""},
            },
        ]
    )


@pytest.fixture
def sample_kube_clusters_json():
    """tsh kube ls --format json output with two clusters, one selected."""
    return json.dumps(
        [
            {
                "kube_cluster_name": "production",
                "labels": {"env": "prod", "region": "eu-west-1"},
                "selected": True,
            },
            {
                "kube_cluster_name": "lab",
                "labels": {"env": "lab"},
                "selected": False,
            },
        ]
    )


# Pytest configuration
def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")
