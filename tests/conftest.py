"""Pytest configuration and fixtures."""

import copy
import json

import nbformat
import pytest

from nbscrub.models import Notebook


MESSY_NOTEBOOK = {
    "cells": [
        {
            "cell_type": "markdown",
            "id": "intro",
            "metadata": {"collapsed": True, "tags": ["keep_output"]},
            "source": ["# First Principles Analysis\n", "\n", "This explores the fundamentals."],
        },
        {
            "cell_type": "code",
            "execution_count": 1,
            "id": "imports",
            "metadata": {
                "ExecuteTime": {"end_time": "2024-01-01T00:00:01", "start_time": "2024-01-01T00:00:00"},
                "scrolled": True,
                "tags": ["keep_output"],
            },
            "outputs": [
                {
                    "data": {"text/plain": ["42"]},
                    "execution_count": 1,
                    "metadata": {},
                    "output_type": "execute_result",
                }
            ],
            "source": "import numpy as np\n40 + 2",
        },
        {
            "cell_type": "code",
            "execution_count": 2,
            "id": "setup",
            "metadata": {"init_cell": True},
            "outputs": [{"name": "stdout", "output_type": "stream", "text": ["ready\n"]}],
            "source": ["print('ready')"],
        },
        {
            "cell_type": "code",
            "execution_count": None,
            "id": "blank",
            "metadata": {},
            "outputs": [],
            "source": ["   ", "\t"],
        },
        {
            "cell_type": "raw",
            "id": "scratch",
            "metadata": {"tags": ["remove"]},
            "source": "scratch notes",
        },
        {
            "cell_type": "code",
            "execution_count": 7,
            "id": "plot",
            "metadata": {"application/vnd.databricks.v1+cell": {"title": ""}, "hidden": True},
            "outputs": [
                {
                    "data": {"image/png": "iVBORw0KGgo="},
                    "metadata": {},
                    "output_type": "display_data",
                }
            ],
            "source": "plt.plot([1, 2, 3])",
        },
        {
            "cell_type": "code",
            "execution_count": 8,
            "metadata": [],
            "outputs": [{"name": "stdout", "output_type": "stream", "text": "odd\n"}],
            "source": "print('odd')",
        },
    ],
    "metadata": {
        "application/vnd.databricks.v1+notebook": {"notebookName": "demo"},
        "kernelspec": {"display_name": "Python 3", "language": "python", "name": "python3"},
        "language_info": {"name": "python", "version": "3.11.4"},
        "widgets": {"application/vnd.jupyter.widget-state+json": {"state": {}}},
    },
    "nbformat": 4,
    "nbformat_minor": 5,
}


@pytest.fixture
def messy_notebook_data():
    """Notebook dict exercising every stripping rule."""
    return copy.deepcopy(MESSY_NOTEBOOK)


@pytest.fixture
def messy_notebook(messy_notebook_data):
    """Parsed version of messy_notebook_data."""
    return Notebook.model_validate(messy_notebook_data)


@pytest.fixture
def sample_nbformat_notebook():
    """A small notebook built with nbformat, with outputs and counts."""
    nb = nbformat.v4.new_notebook()
    nb.metadata["kernelspec"] = {"display_name": "Python 3", "language": "python", "name": "python3"}
    nb.cells.append(nbformat.v4.new_markdown_cell("# Linear Regression"))

    code_cell = nbformat.v4.new_code_cell("x = list(range(10))\nx", execution_count=1)
    code_cell.outputs = [
        nbformat.v4.new_output(
            "execute_result",
            data={"text/plain": "[0, 1, 2, 3, 4, 5, 6, 7, 8, 9]"},
            execution_count=1,
        )
    ]
    code_cell.metadata["scrolled"] = True
    nb.cells.append(code_cell)

    nb.cells.append(nbformat.v4.new_code_cell("print('hello')", execution_count=2))
    return nb


@pytest.fixture
def to_notebook():
    """Convert an nbformat NotebookNode into the nbscrub model."""

    def convert(nb_node) -> Notebook:
        return Notebook.model_validate(json.loads(nbformat.writes(nb_node)))

    return convert
