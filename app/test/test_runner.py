"""
Command line of the run script
"""

import importlib.util
from pathlib import Path

import pytest

RUN_SCRIPT = Path(__file__).resolve().parents[2] / 'app.py'


@pytest.fixture(scope='module')
def run_script():
    # app.py shares its name with the package, so load it from its path
    spec = importlib.util.spec_from_file_location('inventory_run', RUN_SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_seed_defaults_off(run_script):
    args = run_script.parse_arguments([])
    assert args.seed is False
    assert args.build_only is False


@pytest.mark.parametrize('argv, expected', [
    (['--seed'], True),
    (['--no-seed'], False),
    (['--seed', '--no-seed'], False),
])
def test_seed_flags(run_script, argv, expected):
    assert run_script.parse_arguments(argv).seed is expected


def test_build_only_with_seed(run_script):
    args = run_script.parse_arguments(['--build-only', '--seed'])
    assert args.build_only and args.seed
