"""Shared fixtures for the coord_tool test suite."""

import pytest

from coord_tool.tool import Tool


@pytest.fixture()
def national_grid_tool():
    return Tool.national_grid()


@pytest.fixture()
def irish_tool():
    return Tool.irish_national_grid()
