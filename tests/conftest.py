"""Pytest fixtures shared across all test modules."""

import copy

import pytest


def _code_cell(source, outputs=None, execution_count=None, metadata=None, **extra):
    cell = {
        "cell_type": "code",
        "execution_count": execution_count,
        "metadata": metadata if metadata is not None else {},
        "outputs": outputs if outputs is not None else [],
        "source": source,
    }
    cell.update(extra)
    return cell


def _markdown_cell(source, metadata=None):
    return {
        "cell_type": "markdown",
        "metadata": metadata if metadata is not None else {},
        "source": source,
    }


def _execute_result(text, execution_count=1):
    return {
        "data": {"text/plain": [text]},
        "execution_count": execution_count,
        "metadata": {},
        "output_type": "execute_result",
    }


@pytest.fixture
def clean_notebook():
    """A notebook as Jupyter writes it before any cell has run."""
    return {
        "cells": [
            _markdown_cell(["# Welcome to my notebook"]),
            _code_cell(["1 + 1"]),
            _code_cell(["x = 2\n", "x + 1"]),
            _markdown_cell(["## A section"]),
            _code_cell([]),
            _code_cell(["x += 3\n", "x"]),
        ],
        "metadata": {
            "kernelspec": {
                "display_name": "Python 3",
                "language": "python",
                "name": "python3",
            },
        },
        "nbformat": 4,
        "nbformat_minor": 5,
    }


@pytest.fixture
def executed_notebook(clean_notebook):
    """The same notebook after running every code cell."""
    nb = copy.deepcopy(clean_notebook)
    cells = nb["cells"]
    cells[1].update(execution_count=1, outputs=[_execute_result("2", 1)])
    cells[2].update(execution_count=2, outputs=[_execute_result("3", 2)])
    cells[4].update(execution_count=3)
    cells[5].update(execution_count=4, outputs=[_execute_result("5", 4)])
    for cell in cells:
        if cell["cell_type"] == "code":
            cell["metadata"]["ExecuteTime"] = {"end_time": "2024-01-01T00:00:00.000Z"}
    nb["metadata"]["signature"] = "sha256:deadbeef"
    nb["metadata"]["widgets"] = {"application/vnd.jupyter.widget-state+json": {"state": {}}}
    return nb
